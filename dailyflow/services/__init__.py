"""
DailyFlow - Services
Mutations, persistence, notifications and reports built on the core engine
"""

from .data_service import DataService, get_data_service, initialize_data_service, close_data_service
from .habit_service import HabitService, get_habit_service
from .planner_service import PlannerService, get_planner_service
from .notifications import (
    ReminderService,
    add_notification,
    badge_text,
    check_daily_reminder,
    check_missed_days,
    clear_notifications,
    mark_all_read,
    mark_read,
    unread_count
)
from .report import generate_report

__all__ = [
    'DataService',
    'get_data_service',
    'initialize_data_service',
    'close_data_service',
    'HabitService',
    'get_habit_service',
    'PlannerService',
    'get_planner_service',
    'ReminderService',
    'add_notification',
    'badge_text',
    'check_daily_reminder',
    'check_missed_days',
    'clear_notifications',
    'mark_all_read',
    'mark_read',
    'unread_count',
    'generate_report'
]
