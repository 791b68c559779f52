"""
Tests for rule-based insight generation (dailyflow/core/insights.py).
"""

from datetime import date, timedelta

import pytest

from dailyflow.core.insights import (
    GENERIC_TIPS,
    ConsistencyRule,
    GoalAchievementRule,
    HabitActivityRule,
    HoursRule,
    InsightType,
    StreakRule,
    generate_insights,
    rotating_tips
)
from dailyflow.core.statistics import GoalStats, HabitStats, StatisticsSnapshot, calculate_statistics
from dailyflow.core.streaks import StreakResult

TODAY = date(2026, 10, 17)


def snapshot(**overrides) -> StatisticsSnapshot:
    return StatisticsSnapshot(reference_date=TODAY, **overrides)


class TestRules:

    @pytest.mark.parametrize("rate,title,kind", [
        (100, "Outstanding Consistency!", InsightType.SUCCESS),
        (80, "Outstanding Consistency!", InsightType.SUCCESS),
        (79, "Good Progress", InsightType.INFO),
        (60, "Good Progress", InsightType.INFO),
        (59, "Consistency Needed", InsightType.WARNING),
        (0, "Consistency Needed", InsightType.WARNING),
    ])
    def test_consistency_thresholds(self, rate, title, kind):
        insight = ConsistencyRule().evaluate(snapshot(completion_rate=rate))
        assert insight.title == title
        assert insight.type == kind

    def test_goal_rule(self):
        rule = GoalAchievementRule()

        assert rule.evaluate(snapshot()).title == "No Goals Set"
        assert rule.evaluate(snapshot(goals=GoalStats(total=4, completed=3, rate=75))).title == "Goal Crusher!"
        assert rule.evaluate(snapshot(goals=GoalStats(total=4, completed=2, rate=50))) is None

    def test_streak_rule(self):
        rule = StreakRule()

        assert rule.evaluate(snapshot(streak=StreakResult(current=6, best=9))) is None
        insight = rule.evaluate(snapshot(streak=StreakResult(current=7, best=7)))
        assert insight.title == "7-Day Streak!"
        assert insight.action.target == "page:calendar"

    def test_hours_rule(self):
        rule = HoursRule()

        assert rule.evaluate(snapshot(total_hours=100)) is None
        assert rule.evaluate(snapshot(total_hours=100.5)).message.startswith("You've logged 100.5")

    def test_habit_activity_rule(self):
        rule = HabitActivityRule()

        assert rule.evaluate(snapshot(habits=HabitStats(total=4, active=0))) is None
        assert rule.evaluate(snapshot(habits=HabitStats(total=4, active=3), habit_completion_rate=75)) is None

        insight = rule.evaluate(snapshot(habits=HabitStats(total=4, active=1), habit_completion_rate=25))
        assert insight.type == InsightType.WARNING
        assert "25%" in insight.message


class TestGenerateInsights:

    def test_padded_to_minimum(self):
        insights = generate_insights(snapshot(completion_rate=85))

        assert len(insights) == 4
        assert insights[0].title == "Outstanding Consistency!"
        assert insights[1].title == "No Goals Set"
        assert all(tip.type == InsightType.INFO for tip in insights[2:])
        assert {tip.title for tip in insights[2:]} <= {tip.title for tip in GENERIC_TIPS}

    def test_all_rules_fire_in_order(self):
        stats = snapshot(
            completion_rate=90,
            goals=GoalStats(total=4, completed=3, rate=75),
            streak=StreakResult(current=10, best=10),
            total_hours=150,
            habits=HabitStats(total=4, active=1),
            habit_completion_rate=25
        )
        insights = generate_insights(stats)

        assert [insight.title for insight in insights] == [
            "Outstanding Consistency!",
            "Goal Crusher!",
            "10-Day Streak!",
            "Learning Champion",
            "Habit Consistency",
        ]

    def test_capped_at_maximum(self):
        stats = snapshot(
            completion_rate=90,
            goals=GoalStats(total=4, completed=3, rate=75),
            streak=StreakResult(current=10, best=10),
            total_hours=150
        )
        assert len(generate_insights(stats, min_count=2, max_count=3)) == 3

    def test_bounds_hold_for_real_data(self, sample_data):
        insights = generate_insights(calculate_statistics(sample_data, TODAY))
        assert 4 <= len(insights) <= 6

    def test_tips_rotate_by_day(self):
        first = rotating_tips(2, TODAY)
        second = rotating_tips(2, TODAY + timedelta(days=1))

        assert len(first) == 2
        assert first[1].title == second[0].title
        assert rotating_tips(2, TODAY) == first

    def test_no_tips_requested(self):
        assert rotating_tips(0, TODAY) == []
