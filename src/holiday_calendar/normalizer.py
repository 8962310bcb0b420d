"""
Canonicalization of raw holiday-like records.

Adapters hand over either ``Holiday`` instances or plain mappings (decoded JSON, parsed
calendar events). Everything that leaves this module is a list of ``Holiday`` with unique
``(date, name)`` keys, in first-seen order.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional, Set, Tuple, Union

from .models import Holiday, HolidayType

logger = logging.getLogger(__name__)

RawRecord = Union[Holiday, Mapping[str, Any]]


def canonicalize(record: RawRecord,
                 holiday_type: Optional[HolidayType] = None,
                 name_field: str = "name") -> Holiday:
    """
    Turn one raw record into a canonical ``Holiday``.

    Parameters
    ----------
    record: Holiday or Mapping
        Either an existing holiday or a mapping with a ``date`` key and a name under ``name_field``.
    holiday_type: HolidayType, optional
        Forces the type of the result. If None, the record's own ``type`` is kept
        (defaulting to "regular" for mappings without one).
    name_field: str, default "name"
        Key holding the display label in mapping records (the remote service uses "localName").

    Returns
    -------
    Holiday
        The canonical record. Raises ValueError if the record cannot be canonicalized.
    """
    if isinstance(record, Holiday):
        if holiday_type is None or record.type == holiday_type:
            return record
        return Holiday(date=record.date, name=record.name, type=holiday_type)

    if not isinstance(record, Mapping):
        raise ValueError(f"Unsupported holiday record: {type(record).__name__}")

    date = record.get("date")
    name = record.get(name_field)
    if not isinstance(date, str) or not isinstance(name, str):
        raise ValueError(f"Record needs string 'date' and {name_field!r} fields: {dict(record)!r}")

    return Holiday(date=date, name=name, type=holiday_type or record.get("type", "regular"))


def dedupe(holidays: Iterable[Holiday]) -> List[Holiday]:
    """Drop later duplicates of the same ``(date, name)`` pair; first occurrence wins."""
    seen: Set[Tuple[str, str]] = set()
    out: List[Holiday] = []
    for h in holidays:
        if h.key in seen:
            continue
        seen.add(h.key)
        out.append(h)
    return out


def normalize_holidays(records: Iterable[RawRecord],
                       holiday_type: Optional[HolidayType] = None,
                       name_field: str = "name") -> List[Holiday]:
    """
    Canonicalize then deduplicate a batch of records.

    Records that cannot be canonicalized (missing date, blank name, malformed date, unknown type)
    are skipped and logged. Normalizing an already normalized list returns an equal list.
    """
    canonical: List[Holiday] = []
    for record in records:
        try:
            canonical.append(canonicalize(record, holiday_type=holiday_type, name_field=name_field))
        except ValueError as e:
            logger.warning("Skipping holiday record: %s", e)
    return dedupe(canonical)


def merge_holidays(*sets: Iterable[Holiday]) -> List[Holiday]:
    """Concatenate several canonical sets, keeping the first occurrence of every ``(date, name)``."""
    merged: List[Holiday] = []
    for holidays in sets:
        merged.extend(holidays)
    return dedupe(merged)
