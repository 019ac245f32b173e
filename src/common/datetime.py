"""Datetime utilities."""

from datetime import datetime
from zoneinfo import ZoneInfo

from dateutil.parser import parse as parse_date

KST = ZoneInfo("Asia/Seoul")


def now_kst() -> datetime:
    """Current time in Asia/Seoul."""
    return datetime.now(KST)


def parse_datetime(value) -> datetime | None:
    """Parse a datetime from a string or return as-is if already a datetime.

    Naive values are interpreted as Asia/Seoul wall time. Empty values give None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            dt = parse_date(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=KST)
    return dt


def as_kst(value: datetime) -> datetime:
    """Convert to Asia/Seoul; naive values are taken as Seoul wall time."""
    if value.tzinfo is None:
        return value.replace(tzinfo=KST)
    return value.astimezone(KST)


def format_kst(value: datetime | None, fmt: str) -> str:
    """Format a datetime as Asia/Seoul wall time, or "" for None."""
    if value is None:
        return ""
    return as_kst(value).strftime(fmt)
