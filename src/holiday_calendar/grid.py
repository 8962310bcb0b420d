import numpy as np
import datetime as dt
from typing import List, Sequence, TypeVar

from .utils import DateLike, _to_internal_date, _d64_to_pydate

T = TypeVar("T")

# Python weekday convention (Monday=0, Sunday=6)
MONDAY = 0
SUNDAY = 6

GRID_WEEKS = 6
DAYS_PER_WEEK = 7


def _weekday(d64: np.datetime64) -> int:
    """Weekday of a datetime64[D] (Monday=0). 1970-01-01 was a Thursday."""
    days_int = int(d64.astype("datetime64[D]").astype("int64"))
    return (days_int + 3) % 7


def _month_start(d64: np.datetime64) -> np.datetime64:
    return d64.astype("datetime64[M]").astype("datetime64[D]")


def _month_end(d64: np.datetime64) -> np.datetime64:
    return (d64.astype("datetime64[M]") + 1).astype("datetime64[D]") - 1


def month_grid(anchor: DateLike, week_start: int = SUNDAY, fixed_weeks: bool = True) -> List[dt.date]:
    """
    Build the display grid of the month containing ``anchor``.

    The grid starts on the ``week_start`` day on or before the first day of the month.
    It always holds complete weeks, so its length is a multiple of 7.

    Parameters
    ----------
    anchor: DateLike
        Any date of the month to display.
    week_start: int, default SUNDAY
        First column of the grid, in Python weekday convention (Monday=0 ... Sunday=6).
    fixed_weeks: bool, default True
        If True, always return six weeks (42 days) so that every month has the same shape.
        If False, stop at the last ``week_start - 1`` day on or after the last day of the month.

    Returns
    -------
    List[dt.date]
        The consecutive grid days, in chronological order.
    """
    if not 0 <= week_start <= 6:
        raise ValueError(f"week_start must be in [0, 6], got {week_start!r}")

    first = _month_start(_to_internal_date(anchor))
    offset = (_weekday(first) - week_start) % DAYS_PER_WEEK
    start = first - np.timedelta64(offset, "D")

    if fixed_weeks:
        n_days = GRID_WEEKS * DAYS_PER_WEEK
    else:
        span = int((_month_end(first) - start) / np.timedelta64(1, "D")) + 1
        n_days = -(-span // DAYS_PER_WEEK) * DAYS_PER_WEEK

    days = start + np.arange(n_days, dtype="int64").astype("timedelta64[D]")
    return [_d64_to_pydate(d64) for d64 in days]


def to_weeks(days: Sequence[T]) -> List[List[T]]:
    """Split ``days`` into consecutive groups of 7, keeping the original order."""
    if len(days) % DAYS_PER_WEEK != 0:
        raise ValueError(f"Grid length must be a multiple of 7, got {len(days)}")
    return [list(days[i:i + DAYS_PER_WEEK]) for i in range(0, len(days), DAYS_PER_WEEK)]


def add_months(anchor: DateLike, n: int) -> dt.date:
    """First day of the month ``n`` months away from ``anchor``'s month."""
    m64 = _to_internal_date(anchor).astype("datetime64[M]") + np.timedelta64(n, "M")
    return _d64_to_pydate(m64.astype("datetime64[D]"))


def visible_months(anchor: DateLike) -> List[dt.date]:
    """The rolling window shown on screen: previous, current and next month (first days)."""
    return [add_months(anchor, n) for n in (-1, 0, 1)]
