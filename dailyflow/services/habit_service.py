"""
Habit service
Adding, editing and deleting habits and toggling their completions
"""

import logging
from datetime import date
from typing import Any, Dict, Optional

from dailyflow.core.exceptions import FutureDateError, ValidationError
from dailyflow.core.models import AppData, Habit, NotificationType
from dailyflow.core.streaks import StreakResult, recalculate_habit
from dailyflow.services.notifications import add_notification

logger = logging.getLogger(__name__)

# Streak lengths that get their own notification when reached today
STREAK_MILESTONES = {
    7: ("7-Day Streak! 🔥", "Amazing! You've maintained \"{name}\" for 7 days in a row!"),
    30: ("30-Day Streak! 🎯", "Incredible! \"{name}\" is now a solid habit after 30 days!"),
}

EDITABLE_FIELDS = ("name", "description", "category", "frequency", "reminder")


class HabitService:
    """Habit mutations over an AppData container.

    Every change to a completion set goes through recalculate_habit, so the
    cached streak always equals a from-scratch computation.
    """

    def add_habit(self, data: AppData, fields: Dict[str, Any], today: date) -> Habit:
        habit = Habit.from_dict(fields)
        recalculate_habit(habit, today)
        data.habits.append(habit)

        add_notification(
            data,
            "New Habit Added",
            f"\"{habit.name}\" has been added to your habits. Start building your streak!",
            NotificationType.INFO,
            {"page": "habits"}
        )
        logger.info("✅ Habit %s created for %s", habit.id, data.username)
        return habit

    def update_habit(self, data: AppData, habit_id: str, fields: Dict[str, Any]) -> Habit:
        habit = data.get_habit(habit_id)

        unknown = set(fields) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Cannot update habit field(s): {', '.join(sorted(unknown))}")

        merged = {**habit.to_dict(), **fields}
        updated = Habit.from_dict(merged)

        for field_name in fields:
            setattr(habit, field_name, getattr(updated, field_name))
        habit.touch()

        logger.info("✏️ Habit %s updated", habit.id)
        return habit

    def delete_habit(self, data: AppData, habit_id: str) -> Habit:
        habit = data.get_habit(habit_id)
        data.habits.remove(habit)

        add_notification(
            data,
            "Habit Deleted",
            f"\"{habit.name}\" has been removed from your habits.",
            NotificationType.INFO
        )
        logger.info("🗑️ Habit %s deleted for %s", habit.id, data.username)
        return habit

    def toggle_completion(self, data: AppData, habit_id: str, day: date, today: date) -> StreakResult:
        """
        Flip the completion of a habit on day (today or any past date).

        Future dates raise FutureDateError. Only toggles of today produce
        notifications; editing history is silent.
        """
        if day > today:
            raise FutureDateError(f"Cannot toggle {day.isoformat()}: it is after {today.isoformat()}")

        habit = data.get_habit(habit_id)
        key = day.isoformat()
        was_completed = habit.is_completed_on(key)

        if was_completed:
            habit.completed_dates = [d for d in habit.completed_dates if d != key]
        else:
            habit.completed_dates = habit.completed_dates + [key]

        result = recalculate_habit(habit, today)
        habit.touch()

        logger.info(
            "🔄 Habit %s %s on %s (streak %d, best %d)",
            habit.id, "unmarked" if was_completed else "marked", key, result.current, result.best
        )

        if day == today:
            self._notify_today(data, habit, completed=not was_completed, streak=result.current)

        return result

    def toggle_today(self, data: AppData, habit_id: str, today: date) -> StreakResult:
        return self.toggle_completion(data, habit_id, today, today)

    def _notify_today(self, data: AppData, habit: Habit, completed: bool, streak: int) -> None:
        if not completed:
            add_notification(
                data,
                "Habit Marked Incomplete",
                f"\"{habit.name}\" marked as incomplete for today.",
                NotificationType.INFO
            )
            return

        milestone = STREAK_MILESTONES.get(streak)
        if milestone:
            title, message = milestone
            add_notification(
                data, title, message.format(name=habit.name), NotificationType.SUCCESS, {"page": "habits"}
            )
            return

        add_notification(
            data,
            "Habit Completed!",
            f"Great job! You've completed \"{habit.name}\" today. Streak: {streak} days.",
            NotificationType.SUCCESS
        )


# Global instance
_habit_service: Optional[HabitService] = None

def get_habit_service() -> HabitService:
    global _habit_service
    if _habit_service is None:
        _habit_service = HabitService()
    return _habit_service
