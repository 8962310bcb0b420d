# Week and day classification.
#
# Reference weeks (Sunday-first grids):
#   - June 2025 starts on a Sunday: week 2 is June 8 (Sun) .. June 14 (Sat)
#   - June 29 .. July 5 2025 sits at the edge of both the June and the July grids

from __future__ import annotations

from datetime import date, timedelta

import pytest

from holiday_calendar import (
    Holiday,
    build_month,
    classify_week,
    count_holiday_days,
    index_holidays,
    visible_cells,
)


def week_of(sunday: date):
    return [sunday + timedelta(days=i) for i in range(7)]


JUNE_WEEK_2 = week_of(date(2025, 6, 8))
EDGE_WEEK = week_of(date(2025, 6, 29))


@pytest.fixture
def june_example():
    return [
        Holiday("2025-06-10", "Company Retreat", "work"),
        Holiday("2025-06-10", "National Day", "regular"),
        Holiday("2025-07-04", "Independence Day", "regular"),
    ]


# ============================================================
# 1) Worked example
# ============================================================
def test_june_2025_example(june_example) -> None:
    view = build_month(date(2025, 6, 1), june_example, today=date(2025, 6, 20))
    week = next(w for w in view.weeks if date(2025, 6, 10) in [c.date for c in w.days])

    assert week.work_holiday_day_count == 1
    assert week.regular_holiday_day_count == 1
    assert week.override_dark is False
    # Work outline precedes the regular outline
    assert week.style == "work_outline"

    june_10 = next(c for c in week.days if c.date == date(2025, 6, 10))
    assert june_10.badge == "work"
    assert june_10.background == "work"
    assert june_10.title == "Company Retreat, National Day"


def test_adjacent_month_holiday_not_counted(june_example) -> None:
    view = build_month(date(2025, 6, 1), june_example)
    edge = view.weeks[4]
    assert edge.days[0].date == date(2025, 6, 29)

    july_4 = edge.days[5]
    assert july_4.date == date(2025, 7, 4)
    assert july_4.is_current_month is False
    assert july_4.holidays == ()
    assert july_4.badge is None
    assert july_4.text_style == "muted"
    assert edge.regular_holiday_day_count == 0
    assert edge.style is None


# ============================================================
# 2) Week precedence
# ============================================================
def test_override_dominates_work_highlight() -> None:
    holidays = [
        Holiday("2025-06-09", "Regular A"),
        Holiday("2025-06-10", "Regular B"),
        Holiday("2025-06-11", "Work A", "work"),
        Holiday("2025-06-12", "Work B", "work"),
        Holiday("2025-06-13", "Work C", "work"),
    ]
    week = classify_week(JUNE_WEEK_2, holidays, 2025, 6, today=date(2025, 6, 11))

    assert week.regular_holiday_day_count == 2
    assert week.work_holiday_day_count == 3
    assert week.override_dark is True
    assert week.style == "override"

    # Per-day colouring suppressed, badges kept
    assert all(c.background is None for c in week.days)
    assert all(c.text_style == "inverted" for c in week.days)
    assert [c.badge for c in week.days] == [None, "regular", "regular", "work", "work", "work", None]
    assert week.days[3].is_today is True


@pytest.mark.parametrize(
    "holidays, expected",
    [
        ([], None),
        ([Holiday("2025-06-09", "R")], "regular_outline"),
        ([Holiday("2025-06-09", "W", "work")], "work_outline"),
        ([Holiday("2025-06-09", "W1", "work"), Holiday("2025-06-10", "W2", "work")], "work_filled"),
        ([Holiday("2025-06-09", "R1"), Holiday("2025-06-10", "R2")], "override"),
        ([Holiday("2025-06-09", "W1", "work"), Holiday("2025-06-10", "W2", "work"),
          Holiday("2025-06-11", "R")], "work_filled"),
    ],
    ids=["none", "one-regular", "one-work", "two-work", "two-regular", "two-work-one-regular"],
)
def test_week_style_precedence(holidays, expected) -> None:
    assert classify_week(JUNE_WEEK_2, holidays, 2025, 6).style == expected


def test_counts_are_distinct_days() -> None:
    holidays = [
        Holiday("2025-06-09", "Regular A"),
        Holiday("2025-06-09", "Regular B"),
        Holiday("2025-06-09", "Regular C"),
    ]
    week = classify_week(JUNE_WEEK_2, holidays, 2025, 6)
    assert week.regular_holiday_day_count == 1
    assert week.style == "regular_outline"


# ============================================================
# 3) Month boundaries
# ============================================================
def test_edge_week_counted_once_per_own_month() -> None:
    holidays = index_holidays([
        Holiday("2025-06-30", "End of June"),
        Holiday("2025-07-04", "Independence Day"),
    ])

    in_june = count_holiday_days(EDGE_WEEK, holidays, "regular", 2025, 6)
    in_july = count_holiday_days(EDGE_WEEK, holidays, "regular", 2025, 7)
    assert (in_june, in_july) == (1, 1)

    # Neither month sees two regular days, so no override on either side
    assert classify_week(EDGE_WEEK, holidays, 2025, 6).style == "regular_outline"
    assert classify_week(EDGE_WEEK, holidays, 2025, 7).style == "regular_outline"


def test_same_week_in_adjacent_month_views() -> None:
    holidays = [Holiday("2025-07-04", "Independence Day")]
    june = build_month(date(2025, 6, 1), holidays)
    july = build_month(date(2025, 7, 1), holidays)

    june_total = sum(w.regular_holiday_day_count for w in june.weeks)
    july_total = sum(w.regular_holiday_day_count for w in july.weeks)
    assert (june_total, july_total) == (0, 1)


# ============================================================
# 4) Day decisions
# ============================================================
def test_today_takes_precedence_over_holiday_colour() -> None:
    holidays = [Holiday("2025-06-09", "W", "work")]
    week = classify_week(JUNE_WEEK_2, holidays, 2025, 6, today=date(2025, 6, 9))
    monday = week.days[1]

    assert monday.is_today
    assert monday.background == "today"
    assert monday.badge == "work"


def test_regular_only_day_background() -> None:
    week = classify_week(JUNE_WEEK_2, [Holiday("2025-06-12", "R")], 2025, 6)
    assert week.days[4].background == "regular"
    assert week.days[0].background is None
    assert week.days[0].text_style == "normal"


# ============================================================
# 5) Display filter
# ============================================================
def test_only_holidays_filter_is_display_only() -> None:
    holidays = [Holiday("2025-06-09", "R1"), Holiday("2025-06-10", "R2")]
    week = classify_week(JUNE_WEEK_2, holidays, 2025, 6)

    cells = visible_cells(week, show_only_holidays=True)
    assert len(cells) == 7
    assert [c is not None for c in cells] == [False, True, True, False, False, False, False]
    assert week.regular_holiday_day_count == 2
    assert week.style == "override"

    assert visible_cells(week) == list(week.days)


def test_monday_first_month_view() -> None:
    from holiday_calendar import MONDAY

    view = build_month(date(2025, 6, 1), [], week_start=MONDAY, fixed_weeks=False)
    assert view.weeks[0].days[0].date == date(2025, 5, 26)
    assert view.weeks[-1].days[-1].date == date(2025, 7, 6)
    assert len(view.days) == len(view.weeks) * 7
