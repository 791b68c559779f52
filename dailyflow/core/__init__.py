"""
Core module for DailyFlow - data models, the streak and statistics engine, insights and exceptions.
"""

from .exceptions import (
    DailyFlowError,
    ConfigurationError,
    ValidationError,
    EntityNotFoundError,
    FutureDateError,
    StorageError
)

from .models import (
    AppData,
    DayRecord,
    DayTask,
    DayStatus,
    Habit,
    HabitCategory,
    HabitFrequency,
    Goal,
    GoalCategory,
    GoalPriority,
    GoalStatus,
    Project,
    ProjectCategory,
    ProjectStatus,
    Notification,
    NotificationAction,
    NotificationType,
    Settings
)

from .streaks import StreakResult, calculate_streak, calendar_streak, recalculate_habit
from .statistics import StatisticsSnapshot, calculate_statistics, completion_window, percent
from .insights import Insight, generate_insights

__all__ = [
    # Exceptions
    'DailyFlowError',
    'ConfigurationError',
    'ValidationError',
    'EntityNotFoundError',
    'FutureDateError',
    'StorageError',
    # Models
    'AppData',
    'DayRecord',
    'DayTask',
    'DayStatus',
    'Habit',
    'HabitCategory',
    'HabitFrequency',
    'Goal',
    'GoalCategory',
    'GoalPriority',
    'GoalStatus',
    'Project',
    'ProjectCategory',
    'ProjectStatus',
    'Notification',
    'NotificationAction',
    'NotificationType',
    'Settings',
    # Engine
    'StreakResult',
    'calculate_streak',
    'calendar_streak',
    'recalculate_habit',
    'StatisticsSnapshot',
    'calculate_statistics',
    'completion_window',
    'percent',
    'Insight',
    'generate_insights'
]
