"""
Planner service
Day log, goals and projects
"""

import logging
from datetime import date
from typing import Any, Dict, Optional

from dailyflow.core.exceptions import EntityNotFoundError, ValidationError
from dailyflow.core.models import (
    AppData,
    DayRecord,
    DayStatus,
    Goal,
    GoalStatus,
    NotificationType,
    Project,
    ProjectStatus
)
from dailyflow.services.notifications import add_notification

logger = logging.getLogger(__name__)

# Progress a project falls back to when it is reopened
REOPENED_PROGRESS = 90


class PlannerService:
    """Mutations of the day log, goals and projects in an AppData container"""

    # ===== DAY LOG =====

    def save_day(self, data: AppData, day: date, fields: Dict[str, Any]) -> DayRecord:
        """Create or replace the record for day, keeping its creation time"""
        key = day.isoformat()
        existing = data.calendar.get(key)

        payload = dict(fields)
        if existing is not None:
            payload.setdefault("createdAt", existing.created_at)

        record = DayRecord.from_dict(payload)
        record.touch()
        data.calendar[key] = record

        if record.status == DayStatus.COMPLETED and record.actual_hours > 0:
            add_notification(
                data,
                "Day Completed!",
                f"Great job! You studied {record.actual_hours:g} hours on {key}.",
                NotificationType.SUCCESS
            )

        logger.info("📅 Day %s saved for %s (%s, %gh)", key, data.username, record.status.value, record.actual_hours)
        return record

    def delete_day(self, data: AppData, day: date) -> DayRecord:
        key = day.isoformat()
        record = data.calendar.pop(key, None)
        if record is None:
            raise EntityNotFoundError("Day", key)

        logger.info("🗑️ Day %s deleted for %s", key, data.username)
        return record

    def set_task_completed(self, data: AppData, day: date, index: int, completed: bool) -> DayRecord:
        record = data.get_day(day)
        if record is None or not 0 <= index < len(record.tasks):
            raise EntityNotFoundError("Task", f"{day.isoformat()}#{index}")

        record.tasks[index].completed = completed
        record.touch()
        return record

    # ===== GOALS =====

    def add_goal(self, data: AppData, fields: Dict[str, Any]) -> Goal:
        goal = Goal.from_dict({**fields, "status": GoalStatus.ACTIVE.value})
        data.goals.append(goal)

        add_notification(
            data,
            "New Goal Created! 🎯",
            f"\"{goal.title}\" has been added to your goals.",
            NotificationType.SUCCESS,
            {"page": "goals"}
        )
        logger.info("✅ Goal %s created for %s", goal.id, data.username)
        return goal

    def toggle_goal_status(self, data: AppData, goal_id: str) -> Goal:
        goal = data.get_goal(goal_id)
        goal.status = GoalStatus.ACTIVE if goal.is_completed else GoalStatus.COMPLETED
        goal.touch()

        if goal.is_completed:
            add_notification(
                data,
                "Goal Completed! 🎉",
                f"Congratulations! You've completed \"{goal.title}\".",
                NotificationType.SUCCESS,
                {"page": "goals"}
            )

        logger.info("🎯 Goal %s is now %s", goal.id, goal.status.value)
        return goal

    def delete_goal(self, data: AppData, goal_id: str) -> Goal:
        goal = data.get_goal(goal_id)
        data.goals.remove(goal)

        add_notification(
            data,
            "Goal Deleted",
            f"\"{goal.title}\" has been removed from your goals.",
            NotificationType.INFO
        )
        return goal

    # ===== PROJECTS =====

    def add_project(self, data: AppData, fields: Dict[str, Any]) -> Project:
        project = Project.from_dict(fields)
        if project.progress == 100:
            project.status = ProjectStatus.COMPLETED
        data.projects.append(project)

        add_notification(
            data,
            "New Project Added",
            f"\"{project.name}\" has been added to your projects.",
            NotificationType.INFO,
            {"page": "projects"}
        )
        logger.info("✅ Project %s created for %s", project.id, data.username)
        return project

    def update_project_progress(self, data: AppData, project_id: str, progress: Any) -> Project:
        """Set progress (0-100); reaching 100 completes the project"""
        try:
            value = int(progress)
        except (TypeError, ValueError):
            raise ValidationError(f"Progress must be a whole number, got {progress!r}")
        if not 0 <= value <= 100:
            raise ValidationError(f"Progress must be between 0 and 100, got {value}")

        project = data.get_project(project_id)
        project.progress = value
        project.touch()

        if value == 100 and not project.is_completed:
            project.status = ProjectStatus.COMPLETED
            self._notify_project_completed(data, project)

        return project

    def toggle_project_status(self, data: AppData, project_id: str) -> Project:
        project = data.get_project(project_id)

        if project.is_completed:
            project.status = ProjectStatus.INPROGRESS
            if project.progress == 100:
                project.progress = REOPENED_PROGRESS
        else:
            project.status = ProjectStatus.COMPLETED
            project.progress = 100
            self._notify_project_completed(data, project)

        project.touch()
        logger.info("🏗️ Project %s is now %s", project.id, project.status.value)
        return project

    def delete_project(self, data: AppData, project_id: str) -> Project:
        project = data.get_project(project_id)
        data.projects.remove(project)

        add_notification(
            data,
            "Project Deleted",
            f"\"{project.name}\" has been removed from your projects.",
            NotificationType.INFO
        )
        return project

    def _notify_project_completed(self, data: AppData, project: Project) -> None:
        add_notification(
            data,
            "Project Completed! 🎉",
            f"Congratulations! You've completed \"{project.name}\".",
            NotificationType.SUCCESS,
            {"page": "projects"}
        )


# Global instance
_planner_service: Optional[PlannerService] = None

def get_planner_service() -> PlannerService:
    global _planner_service
    if _planner_service is None:
        _planner_service = PlannerService()
    return _planner_service
