import re
import numpy as np
import datetime as dt
from typing import Union

DateLike = Union[dt.date, dt.datetime, str, np.datetime64]

_ISO_DATE = re.compile(r"(\d{4})-(\d{2})-(\d{2})")


def _parse_iso_date(s: str) -> dt.date:
    """
    Strict parsing of canonical holiday dates.

    Rules:
        1. Only the exact ``YYYY-MM-DD`` shape is accepted (surrounding whitespace is ignored).
        2. No time component, no timezone suffix, no other separator.
        3. The three components must form a real calendar date.

    Parameters
    ----------
    s: str
        The date string to parse.

    Returns
    -------
    dt.date
        The parsed date.
    """
    if not isinstance(s, str):
        raise ValueError(f"Expected an ISO date string, got {type(s).__name__}.")

    m = _ISO_DATE.fullmatch(s.strip())
    if m is None:
        raise ValueError(f"Invalid date string: {s!r}. Expected exactly 'YYYY-MM-DD'.")

    y, mo, d = (int(p) for p in m.groups())
    try:
        return dt.date(y, mo, d)
    except ValueError as e:
        raise ValueError(f"Invalid calendar date parsed from {s!r}: (y={y}, m={mo}, d={d}).") from e


def _format_iso(d: dt.date) -> str:
    """Render a date as the canonical ``YYYY-MM-DD`` key."""
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def _to_date(x: DateLike) -> dt.date:
    """
    Convert the supported date-like inputs to a plain ``datetime.date``.

    Supported input types :
        - datetime.date and datetime.datetime (time part ignored)
        - np.datetime64 (truncated to day precision)
        - str in canonical ``YYYY-MM-DD`` form
    """
    if isinstance(x, dt.datetime):
        return x.date()
    if isinstance(x, dt.date):
        return x
    if isinstance(x, np.datetime64):
        return _d64_to_pydate(x)
    if isinstance(x, str):
        return _parse_iso_date(x)
    raise ValueError(f"Unsupported date type: {type(x)}")


def _to_internal_date(x: DateLike) -> np.datetime64:
    """Convert a date-like input to the internal np.datetime64[D] format."""
    return np.datetime64(_to_date(x), "D")


def _d64_to_pydate(d64: np.datetime64) -> dt.date:
    """
    Small helper to convert np.datetime64[D] to datetime.date.

    Parameters
    ----------
    d64: np.datetime64
        The input date in np.datetime64[D] format.

    Returns
    -------
    dt.date
        The corresponding datetime.date.
    """
    s = np.datetime_as_string(d64.astype("datetime64[D]"), unit="D")
    return dt.date.fromisoformat(s)


def _is_weekend(d: dt.date) -> bool:
    return d.weekday() >= 5
