import logging
from typing import Iterable, List, Optional, Tuple, Union

from .classifier import build_month, index_holidays
from .errors import DataUnavailableError, HolidaySourceError, ImportFailedError
from .grid import SUNDAY, add_months, visible_months
from .mapping import DEFAULT_COUNTRY, MSG_DATA_UNAVAILABLE, MSG_FETCH_FAILED, MSG_IMPORT_FAILED, resolve_country_code
from .models import Holiday, MonthView
from .normalizer import merge_holidays, normalize_holidays
from .providers import FileImportSource, HolidaySource, RemoteHolidaySource
from .utils import DateLike, _to_date

logger = logging.getLogger(__name__)


class HolidayCalendar:
    """
    State of the rolling three-month holiday calendar.

    It is the composition boundary of the package :
        - A HolidaySource (remote service, imported file, static set, offline country calendar)
        - The active country and the visible month anchor
        - The current canonical holiday set, swapped as a whole on every successful load
        - The user-facing error message and the "show only holidays" display filter

    Loads follow "latest request wins": a fetch that completes after a newer refresh or import
    has started is discarded and never touches the state.

    Usage:
        cal = HolidayCalendar(country_code="FR", anchor=date(2025, 6, 1))
        await cal.refresh()
        for month in cal.months(today=date.today()):
            ...
    """

    def __init__(self,
                 source: Optional[HolidaySource] = None,
                 *,
                 country_code: str = DEFAULT_COUNTRY,
                 anchor: DateLike,
                 work_holidays: Iterable[Holiday] = (),
                 week_start: int = SUNDAY,
                 fixed_weeks: bool = True):
        """
        Parameters
        ----------
        source: HolidaySource, optional
            Where holidays come from. Defaults to the remote public-holiday service.
        country_code: str, default "US"
            ISO code or alias of the active country.
        anchor: DateLike
            Any date of the month shown in the middle of the window.
        work_holidays: Iterable[Holiday]
            Organization work holidays, merged (as type "work") into every successful load.
        week_start: int, default SUNDAY
            First grid column, in Python weekday convention.
        fixed_weeks: bool, default True
            Whether every month grid has six weeks.
        """
        self.source: HolidaySource = source if source is not None else RemoteHolidaySource()
        self.country_code = resolve_country_code(country_code)
        self.anchor = add_months(anchor, 0)
        self.work_holidays: Tuple[Holiday, ...] = tuple(normalize_holidays(work_holidays, holiday_type="work"))
        self.week_start = week_start
        self.fixed_weeks = fixed_weeks

        self.holidays: Tuple[Holiday, ...] = ()
        self.error_message: Optional[str] = None
        self.show_only_holidays = False
        self._generation = 0

    # ---------------------------------------
    # |              Loading                |
    # ---------------------------------------

    async def refresh(self) -> bool:
        """
        Reload the holiday set from the active source for the active country and anchor year.

        Returns True if the state was updated with fresh holidays, False on failure or when the
        result was superseded by a newer request.
        """
        self._generation += 1
        generation = self._generation
        country, year = self.country_code, self.anchor.year
        self.error_message = None

        try:
            fetched = await self.source.fetch(country, year)
        except DataUnavailableError as e:
            if self._is_stale(generation):
                return False
            logger.warning("No holiday data for %s: %s", country, e)
            self.holidays = ()
            self.error_message = MSG_DATA_UNAVAILABLE.format(country=e.country_name)
            return False
        except HolidaySourceError as e:
            if self._is_stale(generation):
                return False
            logger.error("Holiday fetch failed for %s/%s: %s", country, year, e)
            self.holidays = ()
            self.error_message = MSG_FETCH_FAILED
            return False

        if self._is_stale(generation):
            return False
        self.holidays = tuple(merge_holidays(fetched, self.work_holidays))
        logger.debug("Loaded %d holidays from %s for %s/%s", len(self.holidays), self.source.name, country, year)
        return True

    def import_ics(self, content: Union[str, bytes]) -> bool:
        """
        Replace the holiday set with the events of an iCalendar document.

        On success the imported file becomes the active source and the "show only holidays" filter
        is reset to off. On failure the current holidays are left untouched and ``error_message``
        tells the user why. Returns whether the import succeeded.
        """
        try:
            source = FileImportSource.from_ics(content)
        except ImportFailedError as e:
            logger.warning("Calendar import failed: %s", e)
            self.error_message = MSG_IMPORT_FAILED.format(reason=e)
            return False

        # Supersedes any fetch still in flight
        self._generation += 1
        self.source = source
        self.error_message = None
        self.show_only_holidays = False
        self.holidays = tuple(merge_holidays(source.holidays, self.work_holidays))
        logger.info("Imported %d holidays from calendar file", len(source.holidays))
        return True

    def _is_stale(self, generation: int) -> bool:
        if generation != self._generation:
            logger.debug("Discarding stale holiday result (request %d, latest %d)", generation, self._generation)
            return True
        return False

    # ---------------------------------------
    # |             Navigation              |
    # ---------------------------------------

    async def set_anchor(self, anchor: DateLike) -> bool:
        self.anchor = add_months(anchor, 0)
        return await self.refresh()

    async def next_month(self) -> bool:
        return await self.set_anchor(add_months(self.anchor, 1))

    async def prev_month(self) -> bool:
        return await self.set_anchor(add_months(self.anchor, -1))

    async def set_country(self, country_code: str) -> bool:
        self.country_code = resolve_country_code(country_code)
        return await self.refresh()

    def set_source(self, source: HolidaySource) -> None:
        self.source = source

    def toggle_only_holidays(self) -> bool:
        self.show_only_holidays = not self.show_only_holidays
        return self.show_only_holidays

    # ---------------------------------------
    # |              Rendering              |
    # ---------------------------------------

    def months(self, today: Optional[DateLike] = None) -> List[MonthView]:
        """Classified views of the previous, current and next month around the anchor."""
        index = index_holidays(self.holidays)
        return [
            build_month(m, index, today, week_start=self.week_start, fixed_weeks=self.fixed_weeks)
            for m in visible_months(self.anchor)
        ]

    def holidays_on(self, day: DateLike) -> List[Holiday]:
        key = _to_date(day)
        return [h for h in self.holidays if h.day == key]
