from datetime import date, datetime
from typing import Optional, Union

import pytz

DEFAULT_TZ = pytz.timezone("UTC")


def get_timezone(name: Optional[str] = None):
    if not name:
        return DEFAULT_TZ
    return pytz.timezone(name)


def now_local(tz_name: Optional[str] = None) -> datetime:
    return datetime.now(get_timezone(tz_name))


def today_local(tz_name: Optional[str] = None) -> date:
    return now_local(tz_name).date()


def parse_iso_date(value: Union[str, date, None]) -> Optional[date]:
    """Parse a YYYY-MM-DD string (a trailing time part is ignored).

    Returns None for anything that is not a valid calendar date.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    value = value.strip()
    if 'T' in value:
        value = value.split('T')[0]

    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None

def format_time_ago(timestamp: datetime, now: Optional[datetime] = None) -> str:
    """Short relative age: 'Just now', '5m ago', '3h ago', '2d ago' or a date"""
    if now is None:
        now = datetime.now(timestamp.tzinfo) if timestamp.tzinfo else datetime.now()

    seconds = (now - timestamp).total_seconds()
    minutes = int(seconds // 60)
    hours = int(seconds // 3600)
    days = int(seconds // 86400)

    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes}m ago"
    if hours < 24:
        return f"{hours}h ago"
    if days < 7:
        return f"{days}d ago"
    return timestamp.strftime("%m/%d/%Y")
