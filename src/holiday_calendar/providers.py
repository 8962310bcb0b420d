import logging
import datetime as dt
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional, Tuple, Union

import httpx
from icalendar import Calendar as ICalendar

from .errors import DataUnavailableError, FetchFailedError, ImportFailedError, MissingDependencyError
from .mapping import BLOCKED_COUNTRIES, DEFAULT_TIMEOUT, NAGER_BASE_URL, UNTITLED_EVENT, resolve_country_code
from .models import Country, Holiday
from .normalizer import normalize_holidays
from .utils import _format_iso, _is_weekend, _parse_iso_date

logger = logging.getLogger(__name__)


def _drop_weekend_records(records: Iterable[Any], name_field: str) -> List[Mapping[str, Any]]:
    """
    Keep the records that carry a string date and name and fall on a weekday.

    The weekday is computed from the calendar date itself, whatever weekend flag the source may send.
    """
    kept = []
    for record in records:
        if not isinstance(record, Mapping):
            continue
        date, name = record.get("date"), record.get(name_field)
        if not isinstance(date, str) or not isinstance(name, str):
            continue
        try:
            day = _parse_iso_date(date)
        except ValueError as e:
            logger.warning("Skipping holiday record with bad date: %s", e)
            continue
        if _is_weekend(day):
            continue
        kept.append(record)
    return kept


class HolidaySource(ABC):
    """
    Abstract base class for the producers of canonical holidays.

    Every variant returns a fresh list that replaces the displayed set as a whole.
    """
    name: str

    @abstractmethod
    async def fetch(self, country_code: str, year: int) -> List[Holiday]:
        """
        Retrieve the canonical holidays for ``country_code`` and ``year``.

        Parameters
        ----------
        country_code: str
            ISO country code (or alias) of the active selection. Sources that are not
            country based ignore it.
        year: int
            Year of the calendar anchor.
        """
        ...


# =========================
# Remote public holidays (Nager.Date)
# =========================
@dataclass(frozen=True)
class RemoteHolidaySource(HolidaySource):
    """
    Public holidays from the Nager.Date REST API.

    Policy:
      - blocked countries fail fast with DataUnavailableError, no request is issued
      - weekend-dated records are discarded
      - duplicates on (date, trimmed name) are dropped, first occurrence wins
      - every record is canonicalized as a "regular" holiday

    A shared ``client`` can be injected (connection reuse, tests with httpx.MockTransport);
    otherwise a short-lived AsyncClient is opened per request.
    """
    base_url: str = NAGER_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    client: Optional[httpx.AsyncClient] = field(default=None, repr=False, compare=False)
    blocked: Mapping[str, str] = field(default_factory=lambda: dict(BLOCKED_COUNTRIES))
    name: str = "remote:nager"

    def __post_init__(self):
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        object.__setattr__(self, "blocked", {resolve_country_code(k): v for k, v in self.blocked.items()})

    async def fetch(self, country_code: str, year: int) -> List[Holiday]:
        code = resolve_country_code(country_code)
        if code in self.blocked:
            raise DataUnavailableError(code, f"Holiday data for {self.blocked[code]} is not available from Nager API.",
                                       country_name=self.blocked[code])

        payload = await self._get_json(f"{self.base_url}/PublicHolidays/{int(year)}/{code}")
        if not isinstance(payload, list):
            raise FetchFailedError(f"Unexpected payload for {code}/{year}: expected a list, got {type(payload).__name__}")

        kept = _drop_weekend_records(payload, name_field="localName")
        holidays = normalize_holidays(kept, holiday_type="regular", name_field="localName")
        logger.debug("Fetched %d holidays for %s/%s (%d raw records)", len(holidays), code, year, len(payload))
        return holidays

    async def available_countries(self) -> List[Country]:
        """Countries supported by the service, sorted by display name."""
        payload = await self._get_json(f"{self.base_url}/AvailableCountries")
        if not isinstance(payload, list):
            raise FetchFailedError(f"Unexpected country list payload: {type(payload).__name__}")

        countries = [
            Country(country_code=c["countryCode"], name=c["name"])
            for c in payload
            if isinstance(c, Mapping) and isinstance(c.get("countryCode"), str) and isinstance(c.get("name"), str)
        ]
        return sorted(countries, key=lambda c: c.name.casefold())

    async def _get_json(self, url: str) -> Any:
        logger.debug("GET %s", url)
        try:
            if self.client is not None:
                response = await self.client.get(url, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(url)
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            # ValueError covers undecodable JSON bodies
            raise FetchFailedError(f"Failed to fetch {url}: {e}") from e


# =========================
# Static holidays (organization work days, fixtures)
# =========================
@dataclass(frozen=True)
class StaticHolidaySource(HolidaySource):
    """
    A fixed, already known holiday set, returned as is for any country and year.

    Example:
        work = StaticHolidaySource([Holiday("2025-06-10", "Company Retreat", "work")])
    """
    holidays: Tuple[Holiday, ...] = ()
    name: str = "static"

    def __post_init__(self):
        object.__setattr__(self, "holidays", tuple(normalize_holidays(self.holidays)))

    async def fetch(self, country_code: str, year: int) -> List[Holiday]:
        return list(self.holidays)


# =========================
# Imported iCalendar file
# =========================
def _event_date(component) -> Optional[dt.date]:
    """
    Start date of a VEVENT, None when it has no DTSTART.

    Raises ImportFailedError when DTSTART is present but unreadable, whether icalendar recorded it in
    ``component.errors`` or kept it as a broken property that fails on access.
    """
    uid = component.get("UID", "<no uid>")
    for key, message in getattr(component, "errors", None) or ():
        if str(key).upper() == "DTSTART":
            raise ImportFailedError(f"Invalid DTSTART in event {uid}: {message}")
    try:
        value = getattr(component.get("DTSTART"), "dt", None)
    except Exception as e:
        raise ImportFailedError(f"Invalid DTSTART in event {uid}: {e}") from e
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    return None


def parse_ics(content: Union[str, bytes], placeholder: str = UNTITLED_EVENT) -> List[Holiday]:
    """
    Parse an iCalendar document into canonical holidays.

    One holiday per top-level VEVENT: the date is the DTSTART date (time part dropped), the name
    is the SUMMARY or ``placeholder`` when absent. Recurrence rules are not expanded.

    Raises ImportFailedError when the document cannot be parsed, is not a VCALENDAR, or holds an
    event whose DTSTART is not a valid date.
    """
    try:
        cal = ICalendar.from_ical(content)
    except Exception as e:
        raise ImportFailedError(f"Unparseable calendar data: {e}") from e

    if getattr(cal, "name", None) != "VCALENDAR":
        raise ImportFailedError(f"Expected a VCALENDAR document, got {getattr(cal, 'name', None)!r}")

    records = []
    for component in cal.subcomponents:
        if component.name != "VEVENT":
            continue
        day = _event_date(component)
        if day is None:
            logger.warning("Skipping event without a usable DTSTART: %s", component.get("UID", "<no uid>"))
            continue
        summary = component.get("SUMMARY")
        name = str(summary).strip() if summary is not None else ""
        records.append({"date": _format_iso(day), "name": name or placeholder})

    return normalize_holidays(records, holiday_type="regular")


@dataclass(frozen=True)
class FileImportSource(StaticHolidaySource):
    """Holidays imported from a user selected iCalendar file."""
    name: str = "file"

    @classmethod
    def from_ics(cls, content: Union[str, bytes], name: str = "file",
                 placeholder: str = UNTITLED_EVENT) -> "FileImportSource":
        return cls(holidays=tuple(parse_ics(content, placeholder=placeholder)), name=name)


# =========================
# Offline country holidays (workalendar)
# =========================
@dataclass(frozen=True)
class CountryHolidaySource(HolidaySource):
    """
    Public holidays computed locally with the workalendar registry.

    Same policy as the remote source (weekends dropped, deduped, "regular"). Useful offline or when
    the remote service is down. Requires the optional ``country`` extra.
    """
    name: str = "country:workalendar"

    def __post_init__(self):
        try:
            import workalendar  # noqa: F401
        except Exception as e:
            raise MissingDependencyError(
                "workalendar is required for CountryHolidaySource. "
                "Install extra: pip install holiday-calendar[country]"
            ) from e

    async def fetch(self, country_code: str, year: int) -> List[Holiday]:
        from workalendar.registry import registry

        code = resolve_country_code(country_code)
        cal_cls = registry.get(code)
        if cal_cls is None:
            raise DataUnavailableError(code, f"Unknown/unsupported country ISO code in workalendar: {code!r}")

        from workalendar.exceptions import CalendarError as WorkalendarError

        try:
            computed = cal_cls().holidays(int(year))
        except WorkalendarError as e:
            raise DataUnavailableError(code, f"workalendar has no holidays for {code!r} in {year}: {e}") from e

        records = [{"date": _format_iso(d), "name": str(label)} for d, label in computed]
        return normalize_holidays(_drop_weekend_records(records, name_field="name"), holiday_type="regular")
