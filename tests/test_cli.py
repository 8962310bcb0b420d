from __future__ import annotations

from datetime import date

import click
import pytest
from click.testing import CliRunner

from holiday_calendar import Holiday, StaticHolidaySource, build_month
from holiday_calendar import cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def static_remote(monkeypatch):
    """Replace the remote service with a fixed set of public holidays."""
    source = StaticHolidaySource([
        Holiday("2025-06-09", "Holiday A"),
        Holiday("2025-06-10", "Holiday B"),
        Holiday("2025-07-04", "Independence Day"),
    ])
    monkeypatch.setattr(cli, "RemoteHolidaySource", lambda: source)
    return source


def _week_line(output: str, needle: str) -> str:
    return next(line for line in output.splitlines() if needle in line)


# -------------------------
# Rendering helpers
# -------------------------
def test_render_month_markers() -> None:
    holidays = [Holiday("2025-06-09", "A"), Holiday("2025-06-10", "B"), Holiday("2025-06-18", "W", "work")]
    view = build_month(date(2025, 6, 1), holidays, today=date(2025, 6, 20))
    lines = click.unstyle(cli.render_month(view)).splitlines()

    assert lines[0].strip() == "June 2025"
    assert lines[1] == "   Su  Mo  Tu  We  Th  Fr  Sa"
    assert lines[3].startswith("# ")
    assert "  9+ 10+" in lines[3]
    assert lines[4].startswith("- ")
    assert " 18*" in lines[4]
    assert ">20 " in lines[4]
    assert len(lines) == 2 + 6


def test_render_month_only_holidays() -> None:
    view = build_month(date(2025, 6, 1), [Holiday("2025-06-10", "B")])
    line = click.unstyle(cli.render_month(view, show_only_holidays=True)).splitlines()[3]
    assert line == ". " + " " * 8 + " 10+" + " " * 16


def test_concat_months_pads_styled_parts() -> None:
    styled = click.style("ab", fg="green")
    out = cli.concat_months([styled, "cd"], width=4)
    assert click.unstyle(out) == "ab     cd"


# -------------------------
# Command
# -------------------------
def test_cli_remote_window(runner: CliRunner, static_remote) -> None:
    result = runner.invoke(cli.main, ["-c", "US", "--today", "2025-06-20",
                                      "-w", "2025-06-18=Company Retreat", "2025", "6"])

    assert result.exit_code == 0, result.output
    header = result.output.splitlines()[0]
    assert "May 2025" in header and "June 2025" in header and "July 2025" in header

    override_week = _week_line(result.output, "  9+ 10+")
    assert "# " in override_week
    assert " 18*" in result.output
    assert "Work Holiday" in result.output


def test_cli_blocked_country_message(runner: CliRunner) -> None:
    result = runner.invoke(cli.main, ["-c", "IN", "--today", "2025-06-20", "2025", "6"])

    assert result.exit_code == 0
    assert "not available" in result.output
    assert "June 2025" in result.output


def test_cli_ics_import(runner: CliRunner, tmp_path) -> None:
    ics = tmp_path / "holidays.ics"
    ics.write_text("\r\n".join([
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "PRODID:-//holiday-calendar//tests//EN",
        "BEGIN:VEVENT",
        "UID:1",
        "DTSTART;VALUE=DATE:20251225",
        "SUMMARY:Christmas Day",
        "END:VEVENT",
        "END:VCALENDAR",
        "",
    ]))

    result = runner.invoke(cli.main, ["--ics", str(ics), "--today", "2025-12-01", "--monday-first", "2025", "12"])

    assert result.exit_code == 0, result.output
    assert " Mo  Tu  We  Th  Fr  Sa  Su" in result.output
    assert " 25+" in result.output


def test_cli_bad_ics_reports_error(runner: CliRunner, tmp_path) -> None:
    bad = tmp_path / "bad.ics"
    bad.write_text("not a calendar")

    result = runner.invoke(cli.main, ["--ics", str(bad), "--today", "2025-12-01", "2025", "12"])

    assert result.exit_code == 0
    assert "Could not import calendar file" in result.output


@pytest.mark.parametrize(
    "args",
    [
        ["-w", "2025-06-18"],
        ["-w", "18/06/2025=Retreat"],
        ["--today", "tomorrow"],
        ["2025", "13"],
        ["0", "5"],
        ["1", "1"],
        ["9999", "12"],
    ],
)
def test_cli_bad_arguments(runner: CliRunner, args) -> None:
    result = runner.invoke(cli.main, args)
    assert result.exit_code == 2
