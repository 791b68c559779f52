"""
DailyFlow - Utilities
Logging setup and timezone-aware date helpers
"""

from .datetime_utils import (
    get_timezone,
    now_local,
    today_local,
    parse_iso_date,
    format_time_ago
)
from .logger import configure_logging

__all__ = [
    'get_timezone',
    'now_local',
    'today_local',
    'parse_iso_date',
    'format_time_ago',
    'configure_logging'
]
