"""
CLI to display the rolling three-month holiday calendar in a terminal.

Inspired by the trading_calendars/tcal month layout, with holiday badges and week highlights.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import date
from typing import List, Optional, Tuple

import click

from .calendar import HolidayCalendar
from .classifier import visible_cells
from .errors import CalendarError, FetchFailedError
from .grid import MONDAY, SUNDAY
from .mapping import DEFAULT_COUNTRY, LEGEND
from .models import DayCell, Holiday, MonthView, WeekRow
from .providers import CountryHolidaySource, RemoteHolidaySource
from .utils import _parse_iso_date


MONTHS = [
    'January', 'February', 'March', 'April', 'May', 'June',
    'July', 'August', 'September', 'October', 'November', 'December'
]

WEEKDAYS = ['Mo', 'Tu', 'We', 'Th', 'Fr', 'Sa', 'Su']

MONTH_WIDTH = 30

WEEK_MARKERS = {
    "override": "#",
    "work_filled": "=",
    "work_outline": "-",
    "regular_outline": ".",
    None: " ",
}

BADGE_MARKERS = {"work": "*", "regular": "+", None: " "}

BACKGROUNDS = {"today": "blue", "work": "green", "regular": "yellow"}


def render_day(cell: Optional[DayCell]) -> str:
    """
    Render one 4-character day column: today marker, day number, badge marker.

    Args:
        cell: Classified day, or None when hidden by the display filter

    Returns:
        The (possibly styled) day column
    """
    if cell is None:
        return ' ' * 4

    text = f"{'>' if cell.is_today else ' '}{cell.date.day:2}{BADGE_MARKERS[cell.badge]}"

    if cell.text_style == "inverted":
        return click.style(text, fg='white', bg='black', bold=True)
    if cell.background is not None:
        return click.style(text, fg='black', bg=BACKGROUNDS[cell.background])
    if cell.text_style == "muted":
        return click.style(text, dim=True)
    return text


def render_week(week: WeekRow, show_only_holidays: bool = False) -> str:
    marker = WEEK_MARKERS[week.style]
    return f"{marker} " + ''.join(render_day(c) for c in visible_cells(week, show_only_holidays))


def render_month(view: MonthView, show_only_holidays: bool = False, week_start: int = SUNDAY) -> str:
    """
    Render a single month view.

    Args:
        view: Classified month
        show_only_holidays: Hide the days carrying no holiday
        week_start: First column, in Python weekday convention

    Returns:
        String representation of the month
    """
    lines = []

    title = f'{MONTHS[view.month - 1]} {view.year}'
    lines.append(f'{title:^{MONTH_WIDTH}}'.rstrip())

    headers = [WEEKDAYS[(week_start + i) % 7] for i in range(7)]
    lines.append(('  ' + ''.join(f' {wd} ' for wd in headers)).rstrip())

    for week in view.weeks:
        lines.append(render_week(week, show_only_holidays))

    return '\n'.join(lines)


def concat_months(month_strings: List[str], width: int = MONTH_WIDTH) -> str:
    """
    Concatenate multiple month strings horizontally.

    Args:
        month_strings: List of month string representations
        width: Width of each month column

    Returns:
        Horizontally concatenated months
    """
    as_lines = [s.splitlines() for s in month_strings]
    max_lines = max(len(lines) for lines in as_lines)

    for lines in as_lines:
        missing_lines = max_lines - len(lines)
        if missing_lines:
            lines.extend([' ' * width] * missing_lines)

    rows = []
    for row_parts in zip(*as_lines):
        row_parts = list(row_parts)
        for n, row_part in enumerate(row_parts):
            # Styled parts carry ANSI codes that take no room on screen
            missing_space = width - len(click.unstyle(row_part))
            if missing_space > 0:
                row_parts[n] = row_part + ' ' * missing_space
        rows.append('   '.join(row_parts))

    return '\n'.join(row.rstrip() for row in rows)


def render_legend() -> str:
    entries = [
        f"[ {BADGE_MARKERS['work']}] {LEGEND['work']}",
        f"[ {BADGE_MARKERS['regular']}] {LEGEND['regular']}",
        f"[> ] {LEGEND['today']}",
        f"{WEEK_MARKERS['work_outline']} {LEGEND['work_outline']}",
        f"{WEEK_MARKERS['work_filled']} {LEGEND['work_filled']}",
        f"{WEEK_MARKERS['regular_outline']} {LEGEND['regular_outline']}",
        f"{WEEK_MARKERS['override']} {LEGEND['override']}",
    ]
    return '\n'.join(['   '.join(entries[:3]), '   '.join(entries[3:5]), '   '.join(entries[5:])])


def render_calendar(calendar: HolidayCalendar, today: Optional[date] = None) -> str:
    """Render the three visible months side by side, followed by the legend."""
    months = calendar.months(today=today)
    month_strings = [render_month(m, calendar.show_only_holidays, calendar.week_start) for m in months]
    return concat_months(month_strings) + '\n\n' + render_legend()


def _parse_work_holidays(ctx, param, values: Tuple[str, ...]) -> List[Holiday]:
    holidays = []
    for value in values:
        day, sep, name = value.partition('=')
        try:
            if not sep:
                raise ValueError("expected DATE=NAME")
            holidays.append(Holiday(date=_parse_iso_date(day), name=name, type="work"))
        except ValueError as e:
            raise click.BadParameter(f"{value!r}: {e}", ctx=ctx, param=param)
    return holidays


def _parse_today(ctx, param, value: Optional[str]) -> date:
    if value is None:
        return date.today()
    try:
        return _parse_iso_date(value)
    except ValueError as e:
        raise click.BadParameter(str(e), ctx=ctx, param=param)


def _list_countries() -> None:
    try:
        countries = asyncio.run(RemoteHolidaySource().available_countries())
    except FetchFailedError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    for c in countries:
        click.echo(f'{c.country_code:<4}{c.name}')


@click.command()
@click.argument('year', type=click.IntRange(2, 9998), required=False)
@click.argument('month', type=click.IntRange(1, 12), required=False)
@click.option('-c', '--country', default=DEFAULT_COUNTRY, show_default=True,
              help='Country ISO code or name (e.g., FR, US, "united kingdom")')
@click.option('--ics', 'ics_file', type=click.File('rb'),
              help='Import holidays from an iCalendar (.ics) file instead of the remote service')
@click.option('-w', '--work-holiday', multiple=True, callback=_parse_work_holidays,
              help='Add an organization work holiday (format: YYYY-MM-DD=Name)')
@click.option('--only-holidays', is_flag=True, help='Only show the days carrying a holiday')
@click.option('--today', callback=_parse_today, help='Reference date for the today marker (format: YYYY-MM-DD)')
@click.option('--monday-first', is_flag=True, help='Start weeks on Monday instead of Sunday')
@click.option('--offline', is_flag=True, help='Compute public holidays locally with workalendar')
@click.option('--list-countries', is_flag=True, help='List the countries supported by the remote service and exit')
@click.option('-v', '--verbose', is_flag=True, help='Log source requests and decisions to stderr')
def main(year: Optional[int], month: Optional[int], country: str, ics_file, work_holiday: List[Holiday],
         only_holidays: bool, today: date, monday_first: bool, offline: bool, list_countries: bool,
         verbose: bool):
    """
    Display the previous, current and next month with their holidays.

    Days are marked with * (work holiday), + (regular holiday) and > (today).
    The first column flags the week: # (>= 2 regular holidays), = (> 1 work holiday),
    - (1 work holiday), . (1 regular holiday).

    Examples:

        # Public holidays of the current window for France
        holical -c FR

        # June 2025 in the United States, with a company work holiday
        holical -c US -w "2025-06-10=Company Retreat" 2025 6

        # Holidays from a calendar file, Monday-first weeks
        holical --ics holidays.ics --monday-first 2025 12
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(levelname)s %(name)s: %(message)s')

    if list_countries:
        _list_countries()
        return

    anchor = date(year if year is not None else today.year, month if month is not None else today.month, 1)

    try:
        source = CountryHolidaySource() if offline else RemoteHolidaySource()
    except CalendarError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    calendar = HolidayCalendar(
        source,
        country_code=country,
        anchor=anchor,
        work_holidays=work_holiday,
        week_start=MONDAY if monday_first else SUNDAY,
    )

    if ics_file is not None:
        calendar.import_ics(ics_file.read())
    else:
        asyncio.run(calendar.refresh())

    if only_holidays:
        calendar.show_only_holidays = True

    click.echo(render_calendar(calendar, today=today))

    if calendar.error_message:
        click.echo(calendar.error_message, err=True)


if __name__ == '__main__':
    main()
