"""
Notification service
"""

import logging
from datetime import date, datetime, timedelta
from typing import Callable, Dict, List, Optional, Union

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from dailyflow.core.exceptions import StorageError
from dailyflow.core.models import (
    AppData,
    DayStatus,
    Notification,
    NotificationAction,
    NotificationType,
    utc_now
)
from dailyflow.utils.datetime_utils import now_local

logger = logging.getLogger(__name__)

MISSED_DAY_TITLE = "Missed Day Detected"
DAILY_REMINDER_TITLE = "Daily Reminder ⏰"
BADGE_LIMIT = 9

ActionSpec = Union[NotificationAction, Dict[str, str], None]


# ===== NOTIFICATION LIST =====

def add_notification(
    data: AppData,
    title: str,
    message: str,
    type: NotificationType = NotificationType.INFO,
    action: ActionSpec = None,
    now: Optional[datetime] = None
) -> Notification:
    """Create a notification and put it at the front of the list"""
    if isinstance(action, dict):
        action = NotificationAction(**action)

    notification = Notification(
        title=title,
        message=message,
        type=type,
        action=action,
        timestamp=now or utc_now()
    )
    data.notifications.insert(0, notification)

    if notification.type in (NotificationType.WARNING, NotificationType.ERROR):
        logger.warning("🔔 %s: %s", title, message)
    else:
        logger.info("🔔 %s", title)

    return notification

def unread_count(data: AppData) -> int:
    return sum(1 for n in data.notifications if not n.read)

def badge_text(data: AppData) -> str:
    """Unread counter as shown on the bell icon; empty when nothing is unread"""
    count = unread_count(data)
    if count == 0:
        return ""
    return f"{BADGE_LIMIT}+" if count > BADGE_LIMIT else str(count)

def mark_read(data: AppData, notification_id: str) -> Notification:
    notification = data.get_notification(notification_id)
    notification.read = True
    return notification

def mark_all_read(data: AppData) -> int:
    changed = 0
    for notification in data.notifications:
        if not notification.read:
            notification.read = True
            changed += 1
    return changed

def clear_notifications(data: AppData) -> int:
    count = len(data.notifications)
    data.notifications.clear()
    logger.info("🧹 Cleared %d notification(s) for %s", count, data.username)
    return count


# ===== CHECKS =====

def check_missed_days(data: AppData, today: date) -> Optional[Notification]:
    """
    Warn once when yesterday was planned but no hours were logged.

    The notification message carries yesterday's ISO date, which is what
    keeps a second check on the same day from issuing it again.
    """
    yesterday = today - timedelta(days=1)
    record = data.get_day(yesterday)

    if record is None or record.status != DayStatus.PLANNED or record.actual_hours > 0:
        return None

    marker = yesterday.isoformat()
    if any(n.title == MISSED_DAY_TITLE and marker in n.message for n in data.notifications):
        return None

    return add_notification(
        data,
        MISSED_DAY_TITLE,
        f"You didn't log any hours for {marker}. Log it now to keep your history accurate.",
        NotificationType.WARNING,
        {"modal": "day"}
    )

def check_daily_reminder(data: AppData, now: datetime) -> Optional[Notification]:
    """
    Remind the user to log today once the configured reminder time has passed.

    now must already be in the user's timezone. Nothing is issued when
    notifications are disabled, today is already completed, or today's
    reminder was sent.
    """
    settings = data.settings
    if not settings.notifications or not settings.daily_reminder:
        return None

    hours, minutes = (int(part) for part in settings.daily_reminder.split(":"))
    if (now.hour, now.minute) < (hours, minutes):
        return None

    today = now.date()
    record = data.get_day(today)
    if record is not None and record.status == DayStatus.COMPLETED:
        return None

    marker = today.isoformat()
    if any(n.title == DAILY_REMINDER_TITLE and marker in n.message for n in data.notifications):
        return None

    return add_notification(
        data,
        DAILY_REMINDER_TITLE,
        f"Time to log your hours for {marker}! Open the day log to record them.",
        NotificationType.INFO,
        {"modal": "day"}
    )


# ===== SCHEDULER =====

class ReminderService:
    """Periodic daily-reminder and missed-day checks across all stored users"""

    def __init__(self, data_service, tz_name: str = "UTC", interval_minutes: int = 1,
                 clock: Optional[Callable[[], datetime]] = None):
        self.data_service = data_service
        self.tz_name = tz_name
        self.interval_minutes = interval_minutes
        self.clock = clock or (lambda: now_local(self.tz_name))
        self.scheduler: Optional[AsyncIOScheduler] = None

    def start(self) -> None:
        """Must be called with a running event loop"""
        if self.scheduler is not None:
            return

        self.scheduler = AsyncIOScheduler(timezone=self.tz_name)

        self.scheduler.add_job(
            self.run_reminders,
            'interval',
            minutes=self.interval_minutes,
            id='daily_reminders',
            replace_existing=True
        )

        # Missed-day sweep shortly after midnight
        self.scheduler.add_job(
            self.run_missed_day_checks,
            CronTrigger(hour=0, minute=5, timezone=self.tz_name),
            id='missed_days',
            replace_existing=True
        )

        self.scheduler.start()
        logger.info("📅 Reminder service started (every %d min, %s)", self.interval_minutes, self.tz_name)

    def shutdown(self) -> None:
        if self.scheduler is not None:
            self.scheduler.shutdown(wait=False)
            self.scheduler = None
            logger.info("📅 Reminder service stopped")

    def run_reminders(self) -> List[str]:
        """Issue due reminders; returns the usernames that got one"""
        now = self.clock()
        return self._for_each_user(lambda data: check_daily_reminder(data, now))

    def run_missed_day_checks(self) -> List[str]:
        today = self.clock().date()
        return self._for_each_user(lambda data: check_missed_days(data, today))

    def _for_each_user(self, check: Callable[[AppData], Optional[Notification]]) -> List[str]:
        notified = []

        for username in self.data_service.list_users():
            try:
                with self.data_service.user_lock(username):
                    data = self.data_service.load(username)
                    if check(data) is not None:
                        self.data_service.save(data)
                        notified.append(username)
            except StorageError as e:
                logger.error("❌ Reminder check failed for %s: %s", username, e)

        return notified
