from typing import Dict

NAGER_BASE_URL = "https://date.nager.at/api/v3"
DEFAULT_TIMEOUT = 10.0
DEFAULT_COUNTRY = "US"

# Countries the remote service has no reliable data for: fail fast, no request issued
BLOCKED_COUNTRIES: Dict[str, str] = {
    "IN": "India",
}

COUNTRY_ALIASES: Dict[str, str] = {
    "USA": "US",
    "UNITED_STATES": "US",
    "UK": "GB",
    "UNITED_KINGDOM": "GB",
    "FRANCE": "FR",
    "GERMANY": "DE",
    "CANADA": "CA",
    "SWITZERLAND": "CH",
    "ITALY": "IT",
    "SPAIN": "ES",
    "NETHERLANDS": "NL",
    "BELGIUM": "BE",
    "JAPAN": "JP",
    "INDIA": "IN",
}

UNTITLED_EVENT = "Untitled Event"

BADGES = {
    "work": "🏢",
    "regular": "🎉",
}

MSG_DATA_UNAVAILABLE = "Holiday data for {country} is not available from the remote source."
MSG_FETCH_FAILED = "Failed to load holiday data."
MSG_IMPORT_FAILED = "Could not import calendar file: {reason}"

LEGEND = {
    "work": "Work Holiday",
    "regular": "Regular Holiday",
    "today": "Today",
    "work_outline": "1 Work Holiday This Week",
    "work_filled": "> 1 Work Holiday This Week",
    "regular_outline": "1 Regular Holiday This Week",
    "override": ">= 2 Regular Holidays This Week",
}


def _norm_key(s: str) -> str:
    return "_".join(s.strip().upper().split())


def resolve_country_code(code: str) -> str:
    """
    Normalize a user supplied country code or name to the ISO code used by the sources.

    Parameters
    ----------
    code: str
        ISO code ("fr", " US ") or one of the aliases in COUNTRY_ALIASES ("france", "united kingdom").
    """
    key = _norm_key(code)
    return COUNTRY_ALIASES.get(key, key)
