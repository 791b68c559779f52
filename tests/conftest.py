"""
Shared pytest fixtures.

All tests run against a fixed reference date and a temporary data
directory; environment variables read by the configuration are cleared so
a developer's shell cannot leak into the results.
"""

from datetime import date, timedelta

import pytest

from dailyflow.config import reset_config
from dailyflow.core.models import AppData
from dailyflow.services.data_service import close_data_service, initialize_data_service

TODAY = date(2026, 10, 17)

CONFIG_ENV_VARS = (
    "ENVIRONMENT", "LOG_LEVEL", "LOG_TO_FILE", "LOG_DIR", "LOG_FORMAT",
    "DATA_DIR", "BACKUP_DIR", "EXPORT_DIR",
    "HOST", "PORT", "DEBUG_MODE", "CORS_ORIGINS", "TIMEZONE",
    "WEEK_WINDOW_DAYS", "MIN_INSIGHTS", "MAX_INSIGHTS", "DEADLINES_LIMIT",
    "REMINDERS_ENABLED", "REMINDER_CHECK_MINUTES",
)


def days_ago(n: int) -> str:
    return (TODAY - timedelta(days=n)).isoformat()


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for key in CONFIG_ENV_VARS:
        monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()
    close_data_service()


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def ago():
    return days_ago


@pytest.fixture
def empty_data():
    return AppData(username="alice")


@pytest.fixture
def sample_raw():
    """User blob in the dashboard's export format (camelCase keys, numeric ids)"""
    return {
        "calendar": {
            days_ago(0): {
                "plannedHours": 4, "actualHours": 3, "status": "completed",
                "tasks": [
                    {"text": "Chapter 3", "completed": True},
                    {"text": "Exercises", "completed": False}
                ]
            },
            days_ago(1): {"plannedHours": 4, "actualHours": 4, "status": "completed"},
            days_ago(2): {"plannedHours": 4, "actualHours": 2, "status": "completed"},
            days_ago(4): {"plannedHours": 4, "actualHours": 0, "status": "planned"},
            days_ago(5): {"plannedHours": 4, "actualHours": 0, "status": "missed"},
        },
        "habits": [
            {
                "id": 1697500000001, "name": "Read", "category": "learning", "frequency": "daily",
                "streak": 3,
                "completedDates": [days_ago(n) for n in (11, 10, 6, 5, 4, 3, 2, 1, 0)]
            },
            {
                "id": 1697500000002, "name": "Run", "category": "health", "frequency": "weekdays",
                "completedDates": [days_ago(2)]
            },
            {
                "id": 1697500000003, "name": "Meditate", "category": "mindfulness",
                "completedDates": [days_ago(20)]
            },
        ],
        "goals": [
            {"id": 11, "title": "Finish course", "category": "study", "priority": "high", "status": "completed"},
            {"id": 12, "title": "Pass exam", "category": "study", "priority": "high",
             "targetDate": (TODAY + timedelta(days=2)).isoformat(), "createdAt": days_ago(8)},
            {"id": 13, "title": "Update CV", "category": "career", "targetDate": days_ago(3)},
        ],
        "projects": [
            {"id": 21, "name": "Portfolio", "category": "coding", "status": "inprogress", "progress": 40,
             "tech": "python, fastapi", "deadline": (TODAY + timedelta(days=1)).isoformat()},
            {"id": 22, "name": "Blog", "category": "writing", "status": "completed", "progress": 100},
        ],
        "settings": {"theme": "dark", "notifications": True, "dailyReminder": "09:00"},
        "notifications": [],
    }


@pytest.fixture
def sample_data(sample_raw):
    return AppData.from_dict({**sample_raw, "username": "alice"})


@pytest.fixture
def data_service(tmp_path):
    return initialize_data_service(tmp_path / "data", tmp_path / "backups", tmp_path / "exports")
