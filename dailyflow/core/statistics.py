#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DailyFlow - Statistics Engine
Completion windows, rates and dashboard aggregates

Every function here is pure: it takes the AppData container (or parts of it)
plus a reference date and returns plain records. Missing data degrades to
zeros, never to an exception.
"""

import math
import logging
from collections import defaultdict
from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Optional, Any

from pydantic import BaseModel, Field

from dailyflow.core.models import AppData, DayRecord, DayStatus, Goal, Habit, ProjectStatus
from dailyflow.core.streaks import StreakResult, calendar_streak, habit_streak, parse_completion_dates

logger = logging.getLogger(__name__)

# Habit completions are folded into the category breakdown as weekly equivalents
HABIT_WEEK_DIVISOR = 7
TREND_THRESHOLD_PERCENT = 5

# ===== RESULT MODELS =====

class WindowDay(BaseModel):
    date: str
    day_number: int
    day_name: str
    full_date: str
    completed: bool
    is_today: bool

class CalendarDay(BaseModel):
    date: str
    label: str
    day_name: str
    hours: float
    completed: bool

class TodayProgress(BaseModel):
    completed_tasks: int = 0
    total_tasks: int = 0
    percent: int = 0

class GoalStats(BaseModel):
    total: int = 0
    completed: int = 0
    active: int = 0
    overdue: int = 0
    rate: int = 0

class ProjectStats(BaseModel):
    total: int = 0
    completed: int = 0
    in_progress: int = 0
    average_progress: int = 0
    rate: int = 0

class HabitStats(BaseModel):
    total: int = 0
    active: int = 0
    completed_today: int = 0
    today_completion: int = 0
    completions: int = 0
    total_streak: int = 0
    best_current_streak: int = 0
    avg_streak: int = 0

class CategoryStats(BaseModel):
    total: int = 0
    # Weighted: goals count 1, habits completions/7
    completed: float = 0.0

class Trend(BaseModel):
    direction: str = "stable"
    percentage: float = 0.0
    absolute: float = 0.0
    recent_avg: float = 0.0
    previous_avg: float = 0.0

class StatisticsSnapshot(BaseModel):
    reference_date: date
    total_days: int = 0
    completed_days: int = 0
    completion_rate: int = 0
    total_hours: float = 0.0
    avg_daily_hours: float = 0.0
    monthly_hours: float = 0.0
    today: TodayProgress = Field(default_factory=TodayProgress)
    goals: GoalStats = Field(default_factory=GoalStats)
    projects: ProjectStats = Field(default_factory=ProjectStats)
    habits: HabitStats = Field(default_factory=HabitStats)
    habit_completion_rate: int = 0
    streak: StreakResult = Field(default_factory=StreakResult)
    category_breakdown: Dict[str, CategoryStats] = Field(default_factory=dict)
    hours_trend: Trend = Field(default_factory=Trend)
    days_trend: Trend = Field(default_factory=Trend)

class Deadline(BaseModel):
    kind: str
    id: str
    title: str
    description: str
    due_date: date
    days_until: int
    urgency: Optional[str] = None

class BadgeCounts(BaseModel):
    incomplete_tasks_today: int = 0
    missed_days: int = 0
    active_goals: int = 0
    active_projects: int = 0
    habits_to_complete: int = 0

# ===== RATES =====

def round_half_up(value: float, digits: int = 0) -> float:
    """round() that sends .5 away from zero instead of to the even neighbour"""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor

def percent(part: float, total: float) -> int:
    """
    Integer percentage of part in total.

    0 when total is not positive; clamped to 0-100; .5 rounds up.
    """
    if not total or total <= 0:
        return 0
    value = 100.0 * part / total
    value = min(100.0, max(0.0, value))
    return int(round_half_up(value))

# ===== WINDOWS =====

def completion_window(habit: Habit, today: date, days: int = 7) -> List[WindowDay]:
    """Trailing window of days ending today, oldest first"""
    completed = parse_completion_dates(habit.completed_dates, today)
    window = []

    for offset in range(days - 1, -1, -1):
        day = today - timedelta(days=offset)
        window.append(WindowDay(
            date=day.isoformat(),
            day_number=day.day,
            day_name=day.strftime("%a"),
            full_date=f"{day.strftime('%A, %b')} {day.day}",
            completed=day in completed,
            is_today=offset == 0
        ))

    return window

def window_completion_rate(window: List[WindowDay]) -> int:
    return percent(sum(1 for day in window if day.completed), len(window))

def weekly_completion_rate(habit: Habit, today: date, days: int = 7) -> int:
    return window_completion_rate(completion_window(habit, today, days))

def last_n_days(calendar: Dict[str, DayRecord], n: int, today: date, offset: int = 0) -> List[CalendarDay]:
    """Per-day hours and completion for n days ending offset days before today"""
    days = []

    for back in range(n + offset - 1, offset - 1, -1):
        day = today - timedelta(days=back)
        record = calendar.get(day.isoformat())
        days.append(CalendarDay(
            date=day.isoformat(),
            label=f"{day.strftime('%b')} {day.day}",
            day_name=day.strftime("%a"),
            hours=record.actual_hours if record else 0.0,
            completed=bool(record and record.status == DayStatus.COMPLETED)
        ))

    return days

# ===== TRENDS =====

def calculate_trend(values: List[float]) -> Trend:
    """Compare the last 7 values with the 7 before them (or the two halves)"""
    if len(values) < 2:
        return Trend()

    if len(values) >= 14:
        recent_avg = sum(values[-7:]) / 7
        previous_avg = sum(values[-14:-7]) / 7
    else:
        half = len(values) // 2
        recent_avg = sum(values[half:]) / max(len(values) - half, 1)
        previous_avg = sum(values[:half]) / max(half, 1)

    if previous_avg == 0:
        if recent_avg > 0:
            return Trend(direction="up", percentage=100.0, absolute=round(recent_avg, 2),
                         recent_avg=round(recent_avg, 2))
        return Trend()

    percentage_change = ((recent_avg - previous_avg) / previous_avg) * 100
    absolute_change = recent_avg - previous_avg

    if percentage_change > TREND_THRESHOLD_PERCENT:
        direction = "up"
    elif percentage_change < -TREND_THRESHOLD_PERCENT:
        direction = "down"
    else:
        direction = "stable"

    return Trend(
        direction=direction,
        percentage=round(percentage_change, 2),
        absolute=round(absolute_change, 2),
        recent_avg=round(recent_avg, 2),
        previous_avg=round(previous_avg, 2)
    )

# ===== PER-ENTITY AGGREGATES =====

def today_progress(data: AppData, today: date) -> TodayProgress:
    record = data.get_day(today)
    if record is None:
        return TodayProgress()

    total = len(record.tasks)
    completed = record.completed_tasks
    return TodayProgress(completed_tasks=completed, total_tasks=total, percent=percent(completed, total))

def goal_stats(goals: List[Goal], today: date) -> GoalStats:
    total = len(goals)
    completed = sum(1 for g in goals if g.is_completed)
    overdue = sum(
        1 for g in goals
        if g.target_date is not None and g.target_date < today and not g.is_completed
    )

    return GoalStats(
        total=total,
        completed=completed,
        active=total - completed,
        overdue=overdue,
        rate=percent(completed, total)
    )

def project_stats(data: AppData) -> ProjectStats:
    projects = data.projects
    total = len(projects)
    completed = sum(1 for p in projects if p.is_completed)
    in_progress = sum(1 for p in projects if p.status == ProjectStatus.INPROGRESS)
    progress_sum = sum(min(100, max(0, p.progress)) for p in projects)

    return ProjectStats(
        total=total,
        completed=completed,
        in_progress=in_progress,
        average_progress=int(round_half_up(progress_sum / total)) if total else 0,
        rate=percent(completed, total)
    )

def habit_stats(habits: List[Habit], today: date, window_days: int = 7) -> HabitStats:
    total = len(habits)
    if total == 0:
        return HabitStats()

    window_start = today - timedelta(days=window_days - 1)
    streaks = []
    active = 0
    completed_today = 0
    completions = 0

    for habit in habits:
        dates = parse_completion_dates(habit.completed_dates, today)
        completions += len(dates)
        if today in dates:
            completed_today += 1
        if any(window_start <= d <= today for d in dates):
            active += 1
        streaks.append(habit_streak(habit, today).current)

    return HabitStats(
        total=total,
        active=active,
        completed_today=completed_today,
        today_completion=percent(completed_today, total),
        completions=completions,
        total_streak=sum(streaks),
        best_current_streak=max(streaks),
        avg_streak=int(round_half_up(sum(streaks) / total))
    )

def category_breakdown(data: AppData, today: date) -> Dict[str, CategoryStats]:
    """
    Goals and habits grouped by category.

    A completed goal adds 1 to its category. A habit adds completions / 7,
    a rough weekly equivalent that is not a count or a duration.
    """
    breakdown = defaultdict(CategoryStats)

    for goal in data.goals:
        entry = breakdown[goal.category.value]
        entry.total += 1
        if goal.is_completed:
            entry.completed += 1

    for habit in data.habits:
        entry = breakdown[habit.category.value]
        entry.total += 1
        completions = len(parse_completion_dates(habit.completed_dates, today))
        entry.completed += completions / HABIT_WEEK_DIVISOR

    for entry in breakdown.values():
        entry.completed = round(entry.completed, 2)

    return dict(sorted(breakdown.items()))

def goal_time_progress(goal: Goal, now: Optional[datetime] = None) -> int:
    """Elapsed share of the time between creation and target date"""
    if goal.target_date is None:
        return 0

    now = now or datetime.now(timezone.utc)
    created = goal.created_at
    target = datetime.combine(goal.target_date, datetime.min.time(), tzinfo=timezone.utc)

    if now >= target:
        return 100
    if now <= created:
        return 0

    total = (target - created).total_seconds()
    if total <= 0:
        return 100

    return percent((now - created).total_seconds(), total)

def upcoming_deadlines(data: AppData, today: date, limit: int = 5) -> List[Deadline]:
    """Open goals and projects with a due date, soonest first"""
    deadlines = []

    for goal in data.goals:
        if goal.target_date and not goal.is_completed:
            deadlines.append(_deadline("goal", goal.id, goal.title, goal.description, goal.target_date, today))

    for project in data.projects:
        if project.deadline and not project.is_completed:
            deadlines.append(_deadline("project", project.id, project.name, project.description,
                                       project.deadline, today))

    deadlines.sort(key=lambda d: d.due_date)
    return deadlines[:limit]

def _deadline(kind: str, item_id: str, title: str, description: str, due: date, today: date) -> Deadline:
    days_until = (due - today).days

    urgency = None
    if days_until <= 1:
        urgency = "urgent"
    elif days_until <= 3:
        urgency = "warning"

    return Deadline(
        kind=kind,
        id=item_id,
        title=title,
        description=description or "No description",
        due_date=due,
        days_until=days_until,
        urgency=urgency
    )

def badge_counts(data: AppData, today: date) -> BadgeCounts:
    record = data.get_day(today)

    return BadgeCounts(
        incomplete_tasks_today=(len(record.tasks) - record.completed_tasks) if record else 0,
        missed_days=sum(1 for r in data.calendar.values() if r.status == DayStatus.MISSED),
        active_goals=sum(1 for g in data.goals if not g.is_completed),
        active_projects=sum(1 for p in data.projects if p.status == ProjectStatus.INPROGRESS),
        habits_to_complete=sum(1 for h in data.habits if not h.is_completed_on(today))
    )

# ===== SNAPSHOT =====

def calculate_statistics(data: AppData, today: date, window_days: int = 7) -> StatisticsSnapshot:
    """Full dashboard statistics for one user as of today"""
    records = data.calendar
    total_days = len(records)
    completed_days = sum(1 for r in records.values() if r.status == DayStatus.COMPLETED)

    total_hours = sum(max(0.0, r.actual_hours) for r in records.values())
    monthly_hours = sum(
        max(0.0, r.actual_hours) for key, r in records.items()
        if key.startswith(f"{today.year:04d}-{today.month:02d}-")
    )

    habits = habit_stats(data.habits, today, window_days)

    fortnight = last_n_days(records, 14, today)
    hours_trend = calculate_trend([d.hours for d in fortnight])
    days_trend = calculate_trend([1.0 if d.completed else 0.0 for d in fortnight])

    snapshot = StatisticsSnapshot(
        reference_date=today,
        total_days=total_days,
        completed_days=completed_days,
        completion_rate=percent(completed_days, total_days),
        total_hours=round(total_hours, 2),
        avg_daily_hours=round_half_up(total_hours / completed_days, 1) if completed_days else 0.0,
        monthly_hours=round(monthly_hours, 2),
        today=today_progress(data, today),
        goals=goal_stats(data.goals, today),
        projects=project_stats(data),
        habits=habits,
        habit_completion_rate=percent(habits.active, habits.total),
        streak=calendar_streak(records, today),
        category_breakdown=category_breakdown(data, today),
        hours_trend=hours_trend,
        days_trend=days_trend
    )

    logger.debug(
        "Statistics for %s: %d days, %d%% complete, %.1fh",
        data.username, total_days, snapshot.completion_rate, snapshot.total_hours
    )
    return snapshot

def habit_overview(habit: Habit, today: date, window_days: int = 7) -> Dict[str, Any]:
    """Streak plus trailing window for one habit"""
    window = completion_window(habit, today, window_days)
    streak = habit_streak(habit, today)

    return {
        "habit_id": habit.id,
        "name": habit.name,
        "category": habit.category.value,
        "current_streak": streak.current,
        "best_streak": streak.best,
        "window": [day.model_dump(mode="json") for day in window],
        "rate": window_completion_rate(window)
    }
