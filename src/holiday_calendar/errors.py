class CalendarError(Exception):
    pass


class MissingDependencyError(CalendarError):
    pass


class HolidaySourceError(CalendarError):
    pass


class DataUnavailableError(HolidaySourceError):
    """The selected source is known to have no reliable data (e.g. a blocked country)."""

    def __init__(self, country_code: str, message: str = "", country_name: str = ""):
        self.country_code = country_code
        self.country_name = country_name or country_code
        super().__init__(message or f"No reliable holiday data for country {self.country_name!r}")


class FetchFailedError(HolidaySourceError):
    """Network, HTTP status or payload decoding failure on a remote fetch."""


class ImportFailedError(HolidaySourceError):
    """The imported calendar document could not be parsed."""
