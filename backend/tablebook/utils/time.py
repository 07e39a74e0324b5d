import re
from datetime import date, datetime, time
from zoneinfo import ZoneInfo

_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
_TIME_RE = re.compile(r"(\d{2}):(\d{2})(?::(\d{2}))?", re.ASCII)


def restaurant_zone(name: str | None) -> ZoneInfo | None:
    """Resolve an IANA zone name. Empty means the server's local zone."""
    if not name:
        return None
    return ZoneInfo(name)


def local_today(tz: ZoneInfo | None = None) -> date:
    if tz is None:
        return datetime.now().astimezone().date()
    return datetime.now(tz).date()


def parse_local_date(value: str) -> date | None:
    """Parse a `YYYY-MM-DD` calendar date, returning None when malformed."""
    if not isinstance(value, str) or not _DATE_RE.fullmatch(value.strip()):
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def parse_local_time(value: str) -> time | None:
    """Parse a 24-hour `HH:MM` (or `HH:MM:SS`) time of day."""
    match = _TIME_RE.fullmatch(value.strip()) if isinstance(value, str) else None
    if match is None:
        return None
    hours, minutes, seconds = match.groups()
    try:
        return time(int(hours), int(minutes), int(seconds or 0))
    except ValueError:
        return None
