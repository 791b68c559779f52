"""
Habit routes: trailing completion window and completion toggling
"""
from datetime import date
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field

from dailyflow.config import FlowConfig
from dailyflow.core.models import AppData
from dailyflow.core.statistics import habit_overview
from dailyflow.services.data_service import DataService, get_data_service
from dailyflow.services.habit_service import get_habit_service
from ..dependencies import get_existing_user, get_flow_config, get_today, get_user_data

router = APIRouter(prefix="/api/users/{username}/habits", tags=["habits"])


class ToggleRequest(BaseModel):
    """Date to toggle; today when omitted"""
    model_config = ConfigDict(populate_by_name=True)

    day: Optional[date] = Field(None, alias="date")


@router.get("/{habit_id}/week", response_model=Dict[str, Any])
async def get_habit_week(
    habit_id: str,
    days: Optional[int] = Query(None, ge=1, le=366),
    data: AppData = Depends(get_user_data),
    today: date = Depends(get_today),
    config: FlowConfig = Depends(get_flow_config)
):
    """Trailing completion window of one habit with its streaks and rate"""
    habit = data.get_habit(habit_id)
    return habit_overview(habit, today, days or config.stats.week_window_days)


@router.post("/{habit_id}/toggle", response_model=Dict[str, Any])
def toggle_habit(
    habit_id: str,
    request: Optional[ToggleRequest] = None,
    username: str = Depends(get_existing_user),
    today: date = Depends(get_today),
    data_service: DataService = Depends(get_data_service)
):
    """Flip a habit's completion for today or a past date"""
    day = request.day if request and request.day else today

    with data_service.transaction(username) as data:
        result = get_habit_service().toggle_completion(data, habit_id, day, today)
        completed = data.get_habit(habit_id).is_completed_on(day)

    return {
        "habit_id": habit_id,
        "date": day.isoformat(),
        "completed": completed,
        "current_streak": result.current,
        "best_streak": result.best
    }
