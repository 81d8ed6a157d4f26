"""Datetime utility functions."""
import re
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, List, Optional, Set


def normalize_iso_datetime(dt_str: str) -> str:
    """Normalize various ISO datetime formats to consistent format with Z suffix."""
    if not dt_str:
        return dt_str
    dt_str = dt_str.replace(" ", "T")
    dt_str = re.sub(r'(\.\d{1,6})?\+00:?00$', 'Z', dt_str)
    if dt_str and dt_str[-1].lower() == 'z':
        return dt_str[:-1] + 'Z'
    return dt_str


def parse_datetime(dt_str: str) -> datetime:
    """Parse ISO datetime string to an aware UTC datetime."""
    if dt_str.endswith("Z"):
        dt_str = dt_str[:-1] + "+00:00"
    dt = datetime.fromisoformat(dt_str)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def from_timestamp(seconds: float) -> str:
    """Unix seconds to the normalized ISO form."""
    return normalize_iso_datetime(datetime.fromtimestamp(seconds, tz=timezone.utc).isoformat())


def within_next_hours(dt_str: str, now: datetime, hours: int) -> bool:
    """True when dt_str falls in [now, now + hours]."""
    try:
        start = parse_datetime(dt_str)
    except ValueError:
        return False
    return now <= start <= now + timedelta(hours=hours)


def match_date(entry_date: str, start_time: Optional[str]) -> Optional[date]:
    """Calendar date of a pick, preferring the authoritative start time."""
    if start_time:
        try:
            return parse_datetime(start_time).date()
        except ValueError:
            pass
    try:
        return date.fromisoformat(entry_date)
    except (TypeError, ValueError):
        return None


def date_window(day: date, tolerance_days: int) -> List[date]:
    """Dates within +/- tolerance_days of day, oldest first."""
    return [day + timedelta(days=offset) for offset in range(-tolerance_days, tolerance_days + 1)]


def collect_dates(days: Iterable[Optional[date]], tolerance_days: int) -> List[str]:
    """Distinct ISO dates covering every window, sorted."""
    dates: Set[date] = set()
    for day in days:
        if day is not None:
            dates.update(date_window(day, tolerance_days))
    return [d.isoformat() for d in sorted(dates)]
