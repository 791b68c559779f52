"""
Statistics routes: snapshot, streaks, insights, deadlines, goals and badges
"""
from datetime import date
from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from dailyflow.config import FlowConfig
from dailyflow.core.insights import Insight, generate_insights
from dailyflow.core.models import AppData
from dailyflow.core.statistics import (
    BadgeCounts,
    Deadline,
    StatisticsSnapshot,
    badge_counts,
    calculate_statistics,
    goal_time_progress,
    upcoming_deadlines
)
from dailyflow.core.streaks import calendar_streak, habit_streak, streak_runs
from dailyflow.utils.datetime_utils import now_local
from ..dependencies import get_flow_config, get_today, get_user_data

router = APIRouter(prefix="/api/users/{username}", tags=["statistics"])


@router.get("/stats", response_model=StatisticsSnapshot)
async def get_statistics(
    data: AppData = Depends(get_user_data),
    today: date = Depends(get_today),
    config: FlowConfig = Depends(get_flow_config)
):
    """Full statistics snapshot for the dashboard"""
    return calculate_statistics(data, today, config.stats.week_window_days)


@router.get("/streaks", response_model=Dict[str, Any])
async def get_streaks(
    data: AppData = Depends(get_user_data),
    today: date = Depends(get_today)
):
    """
    Calendar streak plus current and best streak of every habit,
    with each habit's runs of consecutive completions
    """
    habits = []
    for habit in data.habits:
        streak = habit_streak(habit, today)
        habits.append({
            "habit_id": habit.id,
            "name": habit.name,
            "current": streak.current,
            "best": streak.best,
            "runs": [
                {"start": run["start"].isoformat(), "end": run["end"].isoformat(), "length": run["length"]}
                for run in streak_runs(habit.completed_dates, today)
            ]
        })

    return {
        "reference_date": today.isoformat(),
        "calendar": calendar_streak(data.calendar, today).model_dump(),
        "habits": habits
    }


@router.get("/insights", response_model=List[Insight])
async def get_insights(
    data: AppData = Depends(get_user_data),
    today: date = Depends(get_today),
    config: FlowConfig = Depends(get_flow_config)
):
    stats = calculate_statistics(data, today, config.stats.week_window_days)
    return generate_insights(
        stats,
        min_count=config.stats.min_insights,
        max_count=config.stats.max_insights,
        today=today
    )


@router.get("/deadlines", response_model=List[Deadline])
async def get_deadlines(
    data: AppData = Depends(get_user_data),
    today: date = Depends(get_today),
    config: FlowConfig = Depends(get_flow_config)
):
    """Open goals and projects by due date"""
    return upcoming_deadlines(data, today, config.stats.deadlines_limit)


@router.get("/goals", response_model=List[Dict[str, Any]])
async def get_goals(
    data: AppData = Depends(get_user_data),
    today: date = Depends(get_today),
    config: FlowConfig = Depends(get_flow_config)
):
    """Goals with the elapsed share of their time to target"""
    now = now_local(config.timezone)
    goals = []

    for goal in data.goals:
        item = goal.to_dict()
        item["timeProgress"] = 100 if goal.is_completed else goal_time_progress(goal, now)
        item["overdue"] = bool(goal.target_date and goal.target_date < today and not goal.is_completed)
        goals.append(item)

    return goals


@router.get("/badges", response_model=BadgeCounts)
async def get_badges(
    data: AppData = Depends(get_user_data),
    today: date = Depends(get_today)
):
    """Counters for the navigation badges"""
    return badge_counts(data, today)
