#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DailyFlow - Insight Engine
Rule-based summary cards derived from a statistics snapshot

Rules are evaluated in order; each may emit at most one insight. When fewer
than the minimum fired, the list is padded from a pool of generic tips whose
starting point rotates with the reference date.
"""

import logging
from abc import ABC, abstractmethod
from datetime import date
from enum import Enum
from typing import List, Optional, Sequence

from pydantic import BaseModel

from dailyflow.core.statistics import StatisticsSnapshot

logger = logging.getLogger(__name__)

DEFAULT_MIN_INSIGHTS = 4
DEFAULT_MAX_INSIGHTS = 6

# ===== MODELS =====

class InsightType(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"

class InsightAction(BaseModel):
    """Suggested follow-up; target is an opaque UI reference like 'page:calendar'"""
    label: str
    target: str

class Insight(BaseModel):
    type: InsightType
    icon: str
    title: str
    message: str
    action: Optional[InsightAction] = None

# ===== RULES =====

class InsightRule(ABC):
    """One threshold rule over the statistics snapshot"""

    name: str = "rule"

    @abstractmethod
    def evaluate(self, stats: StatisticsSnapshot) -> Optional[Insight]:
        """Return an insight when the rule fires"""
        pass

class ConsistencyRule(InsightRule):
    name = "consistency"

    def __init__(self, excellent: int = 80, good: int = 60):
        self.excellent = excellent
        self.good = good

    def evaluate(self, stats: StatisticsSnapshot) -> Optional[Insight]:
        rate = stats.completion_rate

        if rate >= self.excellent:
            return Insight(
                type=InsightType.SUCCESS,
                icon="trophy",
                title="Outstanding Consistency!",
                message=f"You've maintained a {rate}% completion rate. Keep up the great work!",
                action=InsightAction(label="Share Achievement", target="command:share-achievement")
            )

        if rate >= self.good:
            return Insight(
                type=InsightType.INFO,
                icon="chart-line",
                title="Good Progress",
                message=f"Your {rate}% completion rate is solid. Aim for {self.excellent}% next month!",
                action=InsightAction(label="Set Reminder", target="command:set-daily-reminder")
            )

        return Insight(
            type=InsightType.WARNING,
            icon="exclamation-triangle",
            title="Consistency Needed",
            message=f"Your completion rate is {rate}%. Try to log your progress daily.",
            action=InsightAction(label="Add Daily Habit", target="modal:add-habit")
        )

class GoalAchievementRule(InsightRule):
    name = "goals"

    def __init__(self, threshold: int = 70):
        self.threshold = threshold

    def evaluate(self, stats: StatisticsSnapshot) -> Optional[Insight]:
        if stats.goals.total > 0 and stats.goals.rate >= self.threshold:
            return Insight(
                type=InsightType.SUCCESS,
                icon="bullseye",
                title="Goal Crusher!",
                message=f"You've completed {stats.goals.rate}% of your goals. That's impressive!",
                action=InsightAction(label="Set New Goals", target="modal:add-goal")
            )

        if stats.goals.total == 0:
            return Insight(
                type=InsightType.INFO,
                icon="plus-circle",
                title="No Goals Set",
                message="Start by setting some goals to track your progress.",
                action=InsightAction(label="Add First Goal", target="modal:add-goal")
            )

        return None

class StreakRule(InsightRule):
    name = "streak"

    def __init__(self, min_days: int = 7):
        self.min_days = min_days

    def evaluate(self, stats: StatisticsSnapshot) -> Optional[Insight]:
        current = stats.streak.current
        if current < self.min_days:
            return None

        return Insight(
            type=InsightType.SUCCESS,
            icon="fire",
            title=f"{current}-Day Streak!",
            message=f"You're on a {current}-day streak. Don't break the chain!",
            action=InsightAction(label="View Calendar", target="page:calendar")
        )

class HoursRule(InsightRule):
    name = "hours"

    def __init__(self, threshold: float = 100):
        self.threshold = threshold

    def evaluate(self, stats: StatisticsSnapshot) -> Optional[Insight]:
        if stats.total_hours <= self.threshold:
            return None

        hours = f"{stats.total_hours:g}"
        return Insight(
            type=InsightType.SUCCESS,
            icon="graduation-cap",
            title="Learning Champion",
            message=f"You've logged {hours} study hours. That's dedication!",
            action=InsightAction(label="Analyze Patterns", target="page:stats")
        )

class HabitActivityRule(InsightRule):
    name = "habits"

    def __init__(self, threshold: int = 50):
        self.threshold = threshold

    def evaluate(self, stats: StatisticsSnapshot) -> Optional[Insight]:
        if stats.habits.active == 0 or stats.habit_completion_rate >= self.threshold:
            return None

        return Insight(
            type=InsightType.WARNING,
            icon="check-circle",
            title="Habit Consistency",
            message=(
                f"Only {stats.habit_completion_rate}% of your habits were done this week. "
                "Focus on consistency."
            ),
            action=InsightAction(label="Review Habits", target="page:habits")
        )

DEFAULT_RULES: Sequence[InsightRule] = (
    ConsistencyRule(),
    GoalAchievementRule(),
    StreakRule(),
    HoursRule(),
    HabitActivityRule()
)

GENERIC_TIPS: Sequence[Insight] = (
    Insight(
        type=InsightType.INFO,
        icon="clock",
        title="Optimal Study Time",
        message="Studies show 25-minute focused sessions with 5-minute breaks are most effective."
    ),
    Insight(
        type=InsightType.INFO,
        icon="moon",
        title="Rest is Productive",
        message="Quality sleep improves learning retention by up to 40%. Aim for 7-8 hours."
    ),
    Insight(
        type=InsightType.INFO,
        icon="list-check",
        title="Plan Tomorrow Tonight",
        message="Writing down tomorrow's three key tasks before bed makes the morning start faster."
    ),
    Insight(
        type=InsightType.INFO,
        icon="seedling",
        title="Start Small",
        message="A habit you can finish in two minutes is easier to keep than an ambitious one you skip."
    ),
    Insight(
        type=InsightType.INFO,
        icon="calendar-week",
        title="Weekly Review",
        message="Ten minutes each week reviewing goals and projects keeps priorities honest."
    )
)

# ===== ENGINE =====

def rotating_tips(count: int, today: date, tips: Sequence[Insight] = GENERIC_TIPS) -> List[Insight]:
    """count tips starting at an offset that moves one step per day"""
    if count <= 0 or not tips:
        return []

    start = today.toordinal() % len(tips)
    ordered = list(tips[start:]) + list(tips[:start])
    return [tip.model_copy() for tip in ordered[:count]]

def generate_insights(
    stats: StatisticsSnapshot,
    rules: Sequence[InsightRule] = DEFAULT_RULES,
    min_count: int = DEFAULT_MIN_INSIGHTS,
    max_count: int = DEFAULT_MAX_INSIGHTS,
    today: Optional[date] = None
) -> List[Insight]:
    """Evaluate rules in order, pad with tips up to min_count, cap at max_count"""
    insights = []

    for rule in rules:
        insight = rule.evaluate(stats)
        if insight is not None:
            logger.debug("Insight rule %s fired: %s", rule.name, insight.title)
            insights.append(insight)

    if len(insights) < min_count:
        insights.extend(rotating_tips(min_count - len(insights), today or stats.reference_date))

    return insights[:max_count]
