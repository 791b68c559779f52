"""
Tests for completion windows and cross-entity aggregation (dailyflow/core/statistics.py).
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from dailyflow.core.models import AppData, DayRecord, Goal, Habit, Project
from dailyflow.core.statistics import (
    badge_counts,
    calculate_statistics,
    calculate_trend,
    category_breakdown,
    completion_window,
    goal_stats,
    goal_time_progress,
    habit_overview,
    last_n_days,
    percent,
    project_stats,
    round_half_up,
    upcoming_deadlines,
    weekly_completion_rate
)

TODAY = date(2026, 10, 17)


def d(n: int) -> str:
    return (TODAY - timedelta(days=n)).isoformat()


class TestPercent:

    @pytest.mark.parametrize("part,total,expected", [
        (1, 8, 13),      # 12.5 rounds up
        (5, 200, 3),     # 2.5 rounds up, not to even
        (1, 3, 33),
        (2, 3, 67),
        (10, 30, 33),
    ])
    def test_half_up(self, part, total, expected):
        assert percent(part, total) == expected

    def test_zero_total(self):
        assert percent(0, 0) == 0
        assert percent(5, 0) == 0

    def test_clamped(self):
        assert percent(12, 10) == 100
        assert percent(-1, 10) == 0

    def test_round_half_up_digits(self):
        assert round_half_up(2.25, 1) == 2.3
        assert round_half_up(0.5) == 1


class TestCompletionWindow:

    def test_three_of_seven(self):
        habit = Habit(name="Read", completed_dates=[d(6), d(5), d(4)])
        assert weekly_completion_rate(habit, TODAY) == 43

    @pytest.mark.parametrize("k,expected", [
        (0, 0), (1, 14), (2, 29), (3, 43), (4, 57), (5, 71), (6, 86), (7, 100)
    ])
    def test_k_of_seven(self, k, expected):
        habit = Habit(name="Read", completed_dates=[d(n) for n in range(k)])
        assert weekly_completion_rate(habit, TODAY) == expected

    def test_window_layout(self):
        habit = Habit(name="Read", completed_dates=[d(0), d(6), d(7)])
        window = completion_window(habit, TODAY)

        assert len(window) == 7
        assert window[0].date == d(6)
        assert window[0].completed is True
        assert window[-1].date == d(0)
        assert window[-1].is_today is True
        assert window[-1].day_number == 17
        assert window[-1].day_name == "Sat"
        assert window[-1].full_date == "Saturday, Oct 17"
        assert sum(day.completed for day in window) == 2

    def test_custom_window_length(self):
        habit = Habit(name="Read", completed_dates=[d(0), d(1)])
        assert len(completion_window(habit, TODAY, days=14)) == 14
        assert weekly_completion_rate(habit, TODAY, days=4) == 50

    def test_future_completions_not_counted(self):
        habit = Habit(name="Read", completed_dates=[(TODAY + timedelta(days=1)).isoformat()])
        assert weekly_completion_rate(habit, TODAY) == 0

    def test_habit_overview(self):
        habit = Habit(id="h1", name="Read", category="learning", completed_dates=[d(1), d(0)])
        overview = habit_overview(habit, TODAY)

        assert overview["habit_id"] == "h1"
        assert overview["current_streak"] == 2
        assert overview["rate"] == 29
        assert len(overview["window"]) == 7


class TestAggregates:

    def test_day_completion_rate_ten_of_thirty(self):
        calendar = {
            d(n): {"status": "completed" if n < 10 else "planned"} for n in range(30)
        }
        data = AppData.from_dict({"username": "alice", "calendar": calendar})
        assert calculate_statistics(data, TODAY).completion_rate == 33

    def test_no_goals(self):
        stats = goal_stats([], TODAY)
        assert stats.total == 0
        assert stats.rate == 0

    def test_goal_overdue(self):
        goals = [
            Goal(title="Late", target_date=TODAY - timedelta(days=1)),
            Goal(title="Done late", target_date=TODAY - timedelta(days=1), status="completed"),
            Goal(title="Due today", target_date=TODAY),
        ]
        stats = goal_stats(goals, TODAY)
        assert stats.overdue == 1
        assert stats.active == 2
        assert stats.rate == 33

    def test_project_stats(self, sample_data):
        stats = project_stats(sample_data)
        assert stats.total == 2
        assert stats.completed == 1
        assert stats.in_progress == 1
        assert stats.average_progress == 70
        assert stats.rate == 50

    def test_empty_data_is_all_zero(self, empty_data):
        stats = calculate_statistics(empty_data, TODAY)

        assert stats.total_days == 0
        assert stats.completion_rate == 0
        assert stats.avg_daily_hours == 0
        assert stats.habit_completion_rate == 0
        assert stats.goals.rate == 0
        assert stats.projects.average_progress == 0
        assert stats.streak.current == 0
        assert stats.category_breakdown == {}

    def test_snapshot(self, sample_data):
        stats = calculate_statistics(sample_data, TODAY)

        assert stats.reference_date == TODAY
        assert stats.total_days == 5
        assert stats.completed_days == 3
        assert stats.completion_rate == 60
        assert stats.total_hours == 9
        assert stats.avg_daily_hours == 3.0
        assert stats.monthly_hours == 9
        assert stats.today.completed_tasks == 1
        assert stats.today.percent == 50
        assert stats.streak.current == 3
        assert stats.streak.best == 3
        assert stats.goals.rate == 33
        assert stats.goals.overdue == 1
        assert stats.habits.total == 3
        assert stats.habits.active == 2
        assert stats.habits.completed_today == 1
        assert stats.habits.today_completion == 33
        assert stats.habits.best_current_streak == 7
        assert stats.habit_completion_rate == 67

    def test_monthly_hours_only_current_month(self):
        data = AppData.from_dict({"username": "alice", "calendar": {
            "2026-10-01": {"actualHours": 2},
            "2026-09-30": {"actualHours": 5},
        }})
        stats = calculate_statistics(data, TODAY)
        assert stats.monthly_hours == 2
        assert stats.total_hours == 7

    def test_category_breakdown_weighting(self, sample_data):
        breakdown = category_breakdown(sample_data, TODAY)

        assert list(breakdown) == ["career", "health", "learning", "mindfulness", "study"]
        assert breakdown["study"].total == 2
        assert breakdown["study"].completed == 1
        assert breakdown["learning"].total == 1
        assert breakdown["learning"].completed == pytest.approx(9 / 7, abs=0.01)

    def test_fourteen_completions_weigh_two(self):
        habit = Habit(name="Walk", category="health", completed_dates=[d(n) for n in range(14)])
        data = AppData(username="alice", habits=[habit])
        assert category_breakdown(data, TODAY)["health"].completed == 2.0


class TestTrend:

    def test_up_from_zero(self):
        trend = calculate_trend([0.0] * 7 + [2.0] * 7)
        assert trend.direction == "up"
        assert trend.percentage == 100.0

    def test_down(self):
        trend = calculate_trend([2.0] * 7 + [1.0] * 7)
        assert trend.direction == "down"
        assert trend.percentage == -50.0
        assert trend.absolute == -1.0

    def test_stable_within_threshold(self):
        trend = calculate_trend([2.0] * 7 + [2.06] * 7)
        assert trend.direction == "stable"

    def test_too_short(self):
        assert calculate_trend([3.0]).direction == "stable"

    def test_last_n_days_fills_gaps(self, sample_data):
        days = last_n_days(sample_data.calendar, 7, TODAY)

        assert [day.hours for day in days] == [0, 0, 0, 0, 2, 4, 3]
        assert days[-1].completed is True
        assert days[-1].label == "Oct 17"


class TestDeadlinesAndBadges:

    def test_upcoming_deadlines(self, sample_data):
        deadlines = upcoming_deadlines(sample_data, TODAY)

        assert [(item.kind, item.title) for item in deadlines] == [
            ("goal", "Update CV"),
            ("project", "Portfolio"),
            ("goal", "Pass exam"),
        ]
        assert deadlines[0].days_until == -3
        assert deadlines[0].urgency == "urgent"
        assert deadlines[1].urgency == "urgent"
        assert deadlines[2].urgency == "warning"
        assert deadlines[0].description == "No description"

    def test_deadline_limit(self, sample_data):
        assert len(upcoming_deadlines(sample_data, TODAY, limit=1)) == 1

    def test_completed_items_have_no_deadline(self):
        data = AppData(username="alice", projects=[
            Project(name="Done", status="completed", deadline=TODAY)
        ])
        assert upcoming_deadlines(data, TODAY) == []

    def test_badge_counts(self, sample_data):
        badges = badge_counts(sample_data, TODAY)

        assert badges.incomplete_tasks_today == 1
        assert badges.missed_days == 1
        assert badges.active_goals == 2
        assert badges.active_projects == 1
        assert badges.habits_to_complete == 2

    def test_badge_counts_timestamped_completion(self):
        data = AppData.from_dict({"username": "alice", "habits": [
            {"name": "Read", "completedDates": ["2026-10-17T08:00:00.000Z"]}
        ]})
        assert badge_counts(data, TODAY).habits_to_complete == 0

    def test_goal_time_progress(self, sample_data):
        goal = sample_data.get_goal("12")
        now = datetime(2026, 10, 17, tzinfo=timezone.utc)
        assert goal_time_progress(goal, now) == 80

    def test_goal_time_progress_without_target(self):
        assert goal_time_progress(Goal(title="Someday")) == 0

    def test_goal_time_progress_past_target(self, sample_data):
        goal = sample_data.get_goal("13")
        assert goal_time_progress(goal, datetime(2026, 10, 17, tzinfo=timezone.utc)) == 100
