import datetime as dt
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .grid import SUNDAY, month_grid, to_weeks
from .models import DayCell, Holiday, HolidayType, MonthView, WeekRow
from .utils import DateLike, _format_iso, _to_date

HolidayIndex = Mapping[str, Tuple[Holiday, ...]]


def index_holidays(holidays: Iterable[Holiday]) -> Dict[str, Tuple[Holiday, ...]]:
    """Group canonical holidays by their ISO date, keeping the source order within a day."""
    index: Dict[str, List[Holiday]] = {}
    for h in holidays:
        index.setdefault(h.date, []).append(h)
    return {k: tuple(v) for k, v in index.items()}


def _as_index(holidays: Union[HolidayIndex, Iterable[Holiday]]) -> HolidayIndex:
    if isinstance(holidays, Mapping):
        return holidays
    return index_holidays(holidays)


def count_holiday_days(week: Sequence[dt.date], holidays: Union[HolidayIndex, Iterable[Holiday]],
                       holiday_type: HolidayType, year: int, month: int) -> int:
    """
    Number of distinct days of ``week`` carrying at least one holiday of ``holiday_type``.

    Only days of the rendered (``year``, ``month``) count, so that a week shown at the edge of two
    adjacent monthly grids is never counted twice.
    """
    index = _as_index(holidays)
    days = set()
    for d in week:
        if (d.year, d.month) != (year, month):
            continue
        if any(h.type == holiday_type for h in index.get(_format_iso(d), ())):
            days.add(d)
    return len(days)


def classify_week(week: Sequence[dt.date], holidays: Union[HolidayIndex, Iterable[Holiday]],
                  year: int, month: int, today: Optional[DateLike] = None) -> WeekRow:
    """
    Build the render-ready row of one grid week.

    Parameters
    ----------
    week: Sequence[dt.date]
        The 7 consecutive grid days of the week.
    holidays: HolidayIndex or Iterable[Holiday]
        The current canonical holiday set, or its index as returned by ``index_holidays``.
    year, month: int
        The month being rendered. Days of other months are muted and carry no holidays.
    today: DateLike, optional
        The reference "today"; no day is flagged if None.

    Returns
    -------
    WeekRow
        Counts, week style and the 7 classified day cells.
    """
    index = _as_index(holidays)
    today_d = _to_date(today) if today is not None else None

    work_count = count_holiday_days(week, index, "work", year, month)
    regular_count = count_holiday_days(week, index, "regular", year, month)
    override = regular_count >= 2

    cells = []
    for d in week:
        current = (d.year, d.month) == (year, month)
        cells.append(DayCell(
            date=d,
            is_current_month=current,
            is_today=d == today_d,
            holidays=index.get(_format_iso(d), ()) if current else (),
            in_override_week=override,
        ))

    return WeekRow(days=tuple(cells), work_holiday_day_count=work_count, regular_holiday_day_count=regular_count)


def build_month(anchor: DateLike, holidays: Union[HolidayIndex, Iterable[Holiday]],
                today: Optional[DateLike] = None, *, week_start: int = SUNDAY,
                fixed_weeks: bool = True) -> MonthView:
    """Classify every week of the grid of ``anchor``'s month."""
    anchor_d = _to_date(anchor)
    index = _as_index(holidays)
    weeks = to_weeks(month_grid(anchor_d, week_start=week_start, fixed_weeks=fixed_weeks))
    rows = tuple(classify_week(week, index, anchor_d.year, anchor_d.month, today) for week in weeks)
    return MonthView(year=anchor_d.year, month=anchor_d.month, weeks=rows)


def visible_cells(week: WeekRow, show_only_holidays: bool = False) -> List[Optional[DayCell]]:
    """
    Apply the "show only holidays" display filter to a week.

    Hidden days become None so the grid keeps its 7 columns. The week counts are untouched.
    """
    if not show_only_holidays:
        return list(week.days)
    return [cell if cell.holidays else None for cell in week.days]
