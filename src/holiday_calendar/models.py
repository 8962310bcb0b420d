from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Literal, Optional, Tuple

from .utils import _parse_iso_date, _format_iso

HolidayType = Literal["regular", "work"]
HOLIDAY_TYPES = ("regular", "work")

WeekStyle = Optional[Literal["override", "work_filled", "work_outline", "regular_outline"]]
DayBackground = Optional[Literal["today", "work", "regular"]]
TextStyle = Literal["inverted", "normal", "muted"]
Badge = Optional[HolidayType]


@dataclass(frozen=True)
class Holiday:
    """
    Canonical holiday record.

    ``date`` is always the exact ``YYYY-MM-DD`` string, ``name`` is trimmed and never empty,
    ``type`` is either "regular" (public/national holiday) or "work" (organization holiday).
    """
    date: str
    name: str
    type: HolidayType = "regular"

    def __post_init__(self):
        if isinstance(self.date, dt.date):
            object.__setattr__(self, "date", _format_iso(self.date))
        else:
            # Round-trip through the parser so that "2025-6-1"-like inputs are rejected
            object.__setattr__(self, "date", _format_iso(_parse_iso_date(self.date)))

        name = self.name.strip() if isinstance(self.name, str) else ""
        if not name:
            raise ValueError(f"Holiday name must be a non-empty string, got {self.name!r}")
        object.__setattr__(self, "name", name)

        if self.type not in HOLIDAY_TYPES:
            raise ValueError(f"Invalid holiday type: {self.type!r}. Must be one of {HOLIDAY_TYPES}")

    @property
    def day(self) -> dt.date:
        return _parse_iso_date(self.date)

    @property
    def key(self) -> Tuple[str, str]:
        return self.date, self.name


@dataclass(frozen=True)
class Country:
    country_code: str
    name: str


@dataclass(frozen=True)
class DayCell:
    date: dt.date
    is_current_month: bool
    is_today: bool
    holidays: Tuple[Holiday, ...] = ()
    in_override_week: bool = False

    @property
    def has_work_holiday(self) -> bool:
        return any(h.type == "work" for h in self.holidays)

    @property
    def has_regular_holiday(self) -> bool:
        return any(h.type == "regular" for h in self.holidays)

    @property
    def badge(self) -> Badge:
        """Exactly one badge per day: work wins over regular."""
        if self.has_work_holiday:
            return "work"
        if self.has_regular_holiday:
            return "regular"
        return None

    @property
    def background(self) -> DayBackground:
        if self.in_override_week:
            return None
        if self.is_today:
            return "today"
        if self.has_work_holiday:
            return "work"
        if self.has_regular_holiday:
            return "regular"
        return None

    @property
    def text_style(self) -> TextStyle:
        if self.in_override_week:
            return "inverted"
        return "normal" if self.is_current_month else "muted"

    @property
    def title(self) -> str:
        return ", ".join(h.name for h in self.holidays)


@dataclass(frozen=True)
class WeekRow:
    days: Tuple[DayCell, ...]
    work_holiday_day_count: int
    regular_holiday_day_count: int

    def __post_init__(self):
        if len(self.days) != 7:
            raise ValueError(f"A week holds exactly 7 days, got {len(self.days)}")

    @property
    def override_dark(self) -> bool:
        return self.regular_holiday_day_count >= 2

    @property
    def style(self) -> WeekStyle:
        # First match wins
        if self.override_dark:
            return "override"
        if self.work_holiday_day_count > 1:
            return "work_filled"
        if self.work_holiday_day_count == 1:
            return "work_outline"
        if self.regular_holiday_day_count == 1:
            return "regular_outline"
        return None


@dataclass(frozen=True)
class MonthView:
    year: int
    month: int
    weeks: Tuple[WeekRow, ...]

    @property
    def days(self) -> Tuple[DayCell, ...]:
        return tuple(cell for week in self.weeks for cell in week.days)
