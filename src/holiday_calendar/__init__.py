"""
holiday_calendar

Rolling three-month calendar annotated with holidays coming from:
  - the Nager.Date public-holiday REST API (per country and year) via httpx
  - user supplied iCalendar (.ics) files via icalendar
  - static organization work holidays
  - countries computed offline via workalendar (optional extra)

Notes:
  - Every source yields canonical Holiday records (ISO date, trimmed name, "regular"/"work" type),
    deduplicated on (date, name).
  - Weekend-dated public holidays are dropped: they do not affect work scheduling.
  - Week rows are classified with a fixed precedence: >= 2 regular holiday days (dark override),
    > 1 work day (filled), 1 work day (outline), 1 regular day (light outline).
"""

from .errors import (
    CalendarError,
    DataUnavailableError,
    FetchFailedError,
    HolidaySourceError,
    ImportFailedError,
    MissingDependencyError,
)
from .models import Country, DayCell, Holiday, HolidayType, MonthView, WeekRow
from .normalizer import canonicalize, dedupe, merge_holidays, normalize_holidays
from .grid import MONDAY, SUNDAY, add_months, month_grid, to_weeks, visible_months
from .providers import (
    CountryHolidaySource,
    FileImportSource,
    HolidaySource,
    RemoteHolidaySource,
    StaticHolidaySource,
    parse_ics,
)
from .classifier import build_month, classify_week, count_holiday_days, index_holidays, visible_cells
from .calendar import HolidayCalendar

__all__ = [
    "CalendarError",
    "Country",
    "CountryHolidaySource",
    "DataUnavailableError",
    "DayCell",
    "FetchFailedError",
    "FileImportSource",
    "Holiday",
    "HolidayCalendar",
    "HolidaySource",
    "HolidaySourceError",
    "HolidayType",
    "ImportFailedError",
    "MONDAY",
    "MissingDependencyError",
    "MonthView",
    "RemoteHolidaySource",
    "SUNDAY",
    "StaticHolidaySource",
    "WeekRow",
    "add_months",
    "build_month",
    "canonicalize",
    "classify_week",
    "count_holiday_days",
    "dedupe",
    "index_holidays",
    "merge_holidays",
    "month_grid",
    "normalize_holidays",
    "parse_ics",
    "to_weeks",
    "visible_cells",
    "visible_months",
]
