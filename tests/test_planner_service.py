"""
Tests for day log, goal and project mutations (dailyflow/services/planner_service.py).
"""

from datetime import date

import pytest

from dailyflow.core.exceptions import EntityNotFoundError, ValidationError
from dailyflow.core.models import DayStatus, GoalStatus, ProjectStatus
from dailyflow.services.planner_service import PlannerService

TODAY = date(2026, 10, 17)


@pytest.fixture
def planner():
    return PlannerService()


class TestDayLog:

    def test_completed_day_with_hours_notifies(self, planner, empty_data):
        record = planner.save_day(empty_data, TODAY, {
            "plannedHours": 6, "actualHours": 5, "status": "completed",
            "tasks": [{"text": "Lecture"}]
        })

        assert record.status == DayStatus.COMPLETED
        assert empty_data.get_day(TODAY) is record
        assert empty_data.notifications[0].title == "Day Completed!"
        assert "5 hours" in empty_data.notifications[0].message

    def test_completed_day_without_hours_is_silent(self, planner, empty_data):
        planner.save_day(empty_data, TODAY, {"actualHours": 0, "status": "completed"})
        assert empty_data.notifications == []

    def test_resave_keeps_creation_time(self, planner, empty_data):
        first = planner.save_day(empty_data, TODAY, {"actualHours": 1})
        second = planner.save_day(empty_data, TODAY, {"actualHours": 2})

        assert second.created_at == first.created_at
        assert empty_data.get_day(TODAY).actual_hours == 2

    def test_negative_hours_clamped(self, planner, empty_data):
        record = planner.save_day(empty_data, TODAY, {"plannedHours": -1, "actualHours": -3})
        assert record.planned_hours == 0
        assert record.actual_hours == 0

    def test_unknown_status_rejected(self, planner, empty_data):
        with pytest.raises(ValidationError):
            planner.save_day(empty_data, TODAY, {"status": "skipped"})
        assert empty_data.calendar == {}

    def test_delete_day(self, planner, sample_data):
        planner.delete_day(sample_data, TODAY)
        assert sample_data.get_day(TODAY) is None

        with pytest.raises(EntityNotFoundError):
            planner.delete_day(sample_data, TODAY)

    def test_set_task_completed(self, planner, sample_data):
        record = planner.set_task_completed(sample_data, TODAY, 1, True)
        assert record.completed_tasks == 2

        with pytest.raises(EntityNotFoundError):
            planner.set_task_completed(sample_data, TODAY, 5, True)


class TestGoals:

    def test_add_goal(self, planner, empty_data):
        goal = planner.add_goal(empty_data, {
            "title": "Learn Rust", "category": "study", "priority": "high",
            "targetDate": "2026-12-31", "status": "completed"
        })

        assert goal.status == GoalStatus.ACTIVE
        assert goal.target_date == date(2026, 12, 31)
        assert empty_data.notifications[0].title == "New Goal Created! 🎯"

    def test_toggle_goal_status(self, planner, sample_data):
        goal = planner.toggle_goal_status(sample_data, "12")

        assert goal.is_completed
        assert sample_data.notifications[0].title == "Goal Completed! 🎉"
        assert sample_data.notifications[0].action.page == "goals"

        goal = planner.toggle_goal_status(sample_data, "12")
        assert goal.status == GoalStatus.ACTIVE
        assert len(sample_data.notifications) == 1

    def test_delete_goal(self, planner, sample_data):
        planner.delete_goal(sample_data, "13")

        assert [goal.id for goal in sample_data.goals] == ["11", "12"]
        assert sample_data.notifications[0].title == "Goal Deleted"

    def test_unknown_goal(self, planner, sample_data):
        with pytest.raises(EntityNotFoundError):
            planner.toggle_goal_status(sample_data, "999")


class TestProjects:

    def test_add_project(self, planner, empty_data):
        project = planner.add_project(empty_data, {
            "name": "CLI tool", "category": "Coding", "tech": "python, click ,", "progress": 20
        })

        assert project.tech == ["python", "click"]
        assert project.status == ProjectStatus.PLANNED
        assert empty_data.notifications[0].title == "New Project Added"

    def test_progress_to_hundred_completes(self, planner, sample_data):
        project = planner.update_project_progress(sample_data, "21", 100)

        assert project.is_completed
        assert sample_data.notifications[0].title == "Project Completed! 🎉"

    def test_progress_update_keeps_status(self, planner, sample_data):
        project = planner.update_project_progress(sample_data, "21", "55")

        assert project.progress == 55
        assert project.status == ProjectStatus.INPROGRESS
        assert sample_data.notifications == []

    @pytest.mark.parametrize("value", [101, -1, "abc", None])
    def test_invalid_progress(self, planner, sample_data, value):
        with pytest.raises(ValidationError):
            planner.update_project_progress(sample_data, "21", value)
        assert sample_data.get_project("21").progress == 40

    def test_toggle_project_status(self, planner, sample_data):
        project = planner.toggle_project_status(sample_data, "21")
        assert project.is_completed
        assert project.progress == 100

        project = planner.toggle_project_status(sample_data, "21")
        assert project.status == ProjectStatus.INPROGRESS
        assert project.progress == 90

    def test_reopen_keeps_partial_progress(self, planner, sample_data):
        project = sample_data.get_project("22")
        project.progress = 75

        planner.toggle_project_status(sample_data, "22")
        assert project.progress == 75

    def test_delete_project(self, planner, sample_data):
        planner.delete_project(sample_data, "22")

        assert [project.id for project in sample_data.projects] == ["21"]
        assert sample_data.notifications[0].title == "Project Deleted"
