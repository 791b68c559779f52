#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DailyFlow - Core Data Models
Validated entities and the per-user state container

Persisted JSON uses camelCase keys (plannedHours, completedDates, ...),
attributes are snake_case. Enums are closed: unknown values are rejected
when a record crosses into the model.
"""

import re
import uuid
import logging
from datetime import datetime, date, time, timezone
from enum import Enum
from typing import Dict, List, Optional, Any, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError as PydanticValidationError,
    field_validator,
    model_validator
)
from pydantic.alias_generators import to_camel

from dailyflow.core.exceptions import ValidationError, EntityNotFoundError
from dailyflow.utils.datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)

USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.-]{0,63}$")
REMINDER_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")

# ===== ENUMS =====

class DayStatus(str, Enum):
    PLANNED = "planned"
    INPROGRESS = "inprogress"
    COMPLETED = "completed"
    MISSED = "missed"

class HabitCategory(str, Enum):
    HEALTH = "health"
    LEARNING = "learning"
    PRODUCTIVITY = "productivity"
    MINDFULNESS = "mindfulness"
    SOCIAL = "social"
    GENERAL = "general"

class HabitFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    WEEKDAYS = "weekdays"
    CUSTOM = "custom"

class GoalPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

class GoalStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"

class GoalCategory(str, Enum):
    STUDY = "study"
    CAREER = "career"
    HEALTH = "health"
    PERSONAL = "personal"
    FINANCIAL = "financial"
    OTHER = "other"

class ProjectStatus(str, Enum):
    PLANNED = "planned"
    INPROGRESS = "inprogress"
    COMPLETED = "completed"

class ProjectCategory(str, Enum):
    CODING = "coding"
    DESIGN = "design"
    WRITING = "writing"
    RESEARCH = "research"
    OTHER = "other"

class NotificationType(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"

class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"

# ===== VALIDATION HELPERS =====

def utc_now() -> datetime:
    return datetime.now(timezone.utc)

def new_id() -> str:
    return uuid.uuid4().hex

def coerce_timestamp(value: Any) -> Any:
    """Accept date-only strings and naive datetimes, treating both as UTC"""
    if value is None or value == "":
        return utc_now()
    if isinstance(value, str) and len(value.strip()) == 10:
        parsed = parse_iso_date(value)
        if parsed is not None:
            return datetime.combine(parsed, time.min, tzinfo=timezone.utc)
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
        except ValueError:
            return value
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value

def coerce_optional_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    parsed = parse_iso_date(value)
    if parsed is None:
        raise ValueError(f"invalid date: {value!r}")
    return parsed

def validate_text(text: Any, field_name: str, max_length: int = 200) -> str:
    if not isinstance(text, str):
        raise ValueError(f"{field_name} must be a string")
    text = text.strip()
    if not text:
        raise ValueError(f"{field_name} must not be empty")
    if len(text) > max_length:
        raise ValueError(f"{field_name} must be at most {max_length} characters")
    return text

def clamp_number(value: Any, minimum: float, maximum: Optional[float] = None) -> Any:
    if value is None or value == "":
        return minimum
    try:
        number = float(value)
    except (TypeError, ValueError):
        return value
    number = max(minimum, number)
    if maximum is not None:
        number = min(maximum, number)
    return number

# ===== BASE =====

class FlowModel(BaseModel):
    """Base model: camelCase on the wire, snake_case in Python"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
        extra="ignore"
    )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError(f"Invalid {cls.__name__}: {e}") from e

class TimestampedModel(FlowModel):
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _timestamps(cls, v):
        return coerce_timestamp(v)

    def touch(self) -> None:
        self.updated_at = utc_now()

# ===== CALENDAR =====

class DayTask(FlowModel):
    """One task on a day's log"""
    text: str
    completed: bool = False
    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("text", mode="before")
    @classmethod
    def _text(cls, v):
        return validate_text(v, "text", max_length=500)

    @field_validator("created_at", mode="before")
    @classmethod
    def _created(cls, v):
        return coerce_timestamp(v)

class DayRecord(TimestampedModel):
    """Tracked state for one calendar date"""
    planned_hours: float = 8
    actual_hours: float = 0
    tasks: List[DayTask] = Field(default_factory=list)
    notes: str = ""
    status: DayStatus = DayStatus.PLANNED

    @field_validator("planned_hours", "actual_hours", mode="before")
    @classmethod
    def _hours(cls, v):
        return clamp_number(v, 0)

    @field_validator("notes", mode="before")
    @classmethod
    def _notes(cls, v):
        return "" if v is None else v

    @property
    def completed_tasks(self) -> int:
        return sum(1 for task in self.tasks if task.completed)

# ===== HABITS =====

class Habit(TimestampedModel):
    """A recurring habit and the dates it was completed on.

    completed_dates holds YYYY-MM-DD strings, one per calendar date, sorted.
    Datetimes and unpadded dates are normalised on the way in; an entry that
    is not a date at all survives loading as-is and is skipped by the streak
    engine instead of failing the whole record.

    current_streak is a display cache, recomputed by
    dailyflow.core.streaks.recalculate_habit on every mutation.
    """
    id: str = Field(default_factory=new_id)
    name: str
    description: str = ""
    category: HabitCategory = HabitCategory.GENERAL
    frequency: HabitFrequency = HabitFrequency.DAILY
    reminder: Optional[str] = None
    completed_dates: List[str] = Field(default_factory=list)
    current_streak: int = Field(0, alias="streak")

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, v):
        return str(v)

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v):
        return validate_text(v, "name")

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, v):
        return "" if v is None else v

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v):
        return HabitCategory.GENERAL if v in (None, "") else v

    @field_validator("reminder", mode="before")
    @classmethod
    def _reminder(cls, v):
        if v in (None, ""):
            return None
        if not isinstance(v, str) or not REMINDER_PATTERN.match(v):
            raise ValueError("reminder must be HH:MM")
        return v

    @field_validator("completed_dates", mode="before")
    @classmethod
    def _completed_dates(cls, v):
        if v is None:
            return []
        values = set()
        for item in v:
            if item is None:
                continue
            parsed = parse_iso_date(item if isinstance(item, date) else str(item))
            if parsed is not None:
                values.add(parsed.isoformat())
            else:
                values.add(str(item).strip())
        return sorted(values)

    @field_validator("current_streak", mode="before")
    @classmethod
    def _streak(cls, v):
        return int(clamp_number(v, 0))

    def is_completed_on(self, day: Union[date, str]) -> bool:
        parsed = parse_iso_date(day)
        key = parsed.isoformat() if parsed is not None else day
        return key in self.completed_dates

# ===== GOALS & PROJECTS =====

class Goal(TimestampedModel):
    id: str = Field(default_factory=new_id)
    title: str
    description: str = ""
    target_date: Optional[date] = None
    priority: GoalPriority = GoalPriority.MEDIUM
    category: GoalCategory = GoalCategory.PERSONAL
    status: GoalStatus = GoalStatus.ACTIVE

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, v):
        return str(v)

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, v):
        return validate_text(v, "title")

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, v):
        return "" if v is None else v

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v):
        return GoalCategory.PERSONAL if v in (None, "") else v

    @field_validator("target_date", mode="before")
    @classmethod
    def _target_date(cls, v):
        return coerce_optional_date(v)

    @property
    def is_completed(self) -> bool:
        return self.status == GoalStatus.COMPLETED

class Project(TimestampedModel):
    id: str = Field(default_factory=new_id)
    name: str
    description: str = ""
    category: ProjectCategory = ProjectCategory.OTHER
    tech: List[str] = Field(default_factory=list)
    start_date: Optional[date] = None
    deadline: Optional[date] = None
    progress: int = 0
    status: ProjectStatus = ProjectStatus.PLANNED

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, v):
        return str(v)

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, v):
        return validate_text(v, "name")

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, v):
        return "" if v is None else v

    @field_validator("category", mode="before")
    @classmethod
    def _category(cls, v):
        if v in (None, ""):
            return ProjectCategory.OTHER
        return v.lower() if isinstance(v, str) else v

    @field_validator("tech", mode="before")
    @classmethod
    def _tech(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        return [tag.strip() for tag in v if isinstance(tag, str) and tag.strip()]

    @field_validator("start_date", "deadline", mode="before")
    @classmethod
    def _dates(cls, v):
        return coerce_optional_date(v)

    @field_validator("progress", mode="before")
    @classmethod
    def _progress(cls, v):
        clamped = clamp_number(v, 0, 100)
        return int(round(clamped)) if isinstance(clamped, float) else clamped

    @property
    def is_completed(self) -> bool:
        return self.status == ProjectStatus.COMPLETED

# ===== NOTIFICATIONS =====

class NotificationAction(FlowModel):
    """Opaque UI reference: either a page or a modal to open"""
    page: Optional[str] = None
    modal: Optional[str] = None

    @model_validator(mode="after")
    def _exactly_one(self):
        if (self.page is None) == (self.modal is None):
            raise ValueError("notification action needs exactly one of page or modal")
        return self

class Notification(FlowModel):
    id: str = Field(default_factory=new_id)
    title: str
    message: str
    type: NotificationType = NotificationType.INFO
    action: Optional[NotificationAction] = None
    read: bool = False
    timestamp: datetime = Field(default_factory=utc_now)

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, v):
        return str(v)

    @field_validator("timestamp", mode="before")
    @classmethod
    def _timestamp(cls, v):
        return coerce_timestamp(v)

# ===== STATE CONTAINER =====

class Settings(FlowModel):
    theme: Theme = Theme.LIGHT
    notifications: bool = True
    daily_reminder: str = "09:00"

    @field_validator("daily_reminder", mode="before")
    @classmethod
    def _reminder(cls, v):
        if v in (None, ""):
            return "09:00"
        if not isinstance(v, str) or not REMINDER_PATTERN.match(v):
            raise ValueError("dailyReminder must be HH:MM")
        return v

class AppData(FlowModel):
    """Everything one user tracks; passed explicitly to services and the engine"""
    username: str
    calendar: Dict[str, DayRecord] = Field(default_factory=dict)
    habits: List[Habit] = Field(default_factory=list)
    goals: List[Goal] = Field(default_factory=list)
    projects: List[Project] = Field(default_factory=list)
    settings: Settings = Field(default_factory=Settings)
    notifications: List[Notification] = Field(default_factory=list)

    @field_validator("username", mode="before")
    @classmethod
    def _username(cls, v):
        if not isinstance(v, str) or not USERNAME_PATTERN.match(v):
            raise ValueError("username may only contain letters, digits, '_', '.' and '-'")
        return v

    @field_validator("calendar", mode="before")
    @classmethod
    def _calendar(cls, v):
        if v is None:
            return {}
        calendar = {}
        for key, record in v.items():
            parsed = parse_iso_date(key)
            if parsed is None:
                logger.warning("Dropping calendar entry with malformed date %r", key)
                continue
            calendar[parsed.isoformat()] = record
        return calendar

    @field_validator("notifications", mode="after")
    @classmethod
    def _newest_first(cls, v):
        return sorted(v, key=lambda n: n.timestamp, reverse=True)

    def get_habit(self, habit_id: str) -> Habit:
        for habit in self.habits:
            if habit.id == str(habit_id):
                return habit
        raise EntityNotFoundError("Habit", habit_id)

    def get_goal(self, goal_id: str) -> Goal:
        for goal in self.goals:
            if goal.id == str(goal_id):
                return goal
        raise EntityNotFoundError("Goal", goal_id)

    def get_project(self, project_id: str) -> Project:
        for project in self.projects:
            if project.id == str(project_id):
                return project
        raise EntityNotFoundError("Project", project_id)

    def get_notification(self, notification_id: str) -> Notification:
        for notification in self.notifications:
            if notification.id == str(notification_id):
                return notification
        raise EntityNotFoundError("Notification", notification_id)

    def get_day(self, day: Union[date, str]) -> Optional[DayRecord]:
        key = day.isoformat() if isinstance(day, date) else day
        return self.calendar.get(key)
