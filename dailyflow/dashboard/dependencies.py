"""
DailyFlow - Dashboard Dependencies
Providers injected into the API routes
"""

import logging
from datetime import date

from fastapi import Depends

from dailyflow.config import FlowConfig, get_config
from dailyflow.core.exceptions import EntityNotFoundError
from dailyflow.core.models import AppData
from dailyflow.services.data_service import DataService, get_data_service
from dailyflow.utils.datetime_utils import today_local

logger = logging.getLogger(__name__)


def get_flow_config() -> FlowConfig:
    return get_config()


def get_today(config: FlowConfig = Depends(get_flow_config)) -> date:
    """Today in the configured timezone"""
    return today_local(config.timezone)


def get_existing_user(username: str, data_service: DataService = Depends(get_data_service)) -> str:
    """Username of a stored user; unknown users are a 404"""
    if not data_service.user_exists(username):
        raise EntityNotFoundError("User", username)
    return username


def get_user_data(
    username: str = Depends(get_existing_user),
    data_service: DataService = Depends(get_data_service)
) -> AppData:
    """Read-only snapshot of a user's state; mutating routes use data_service.transaction()"""
    return data_service.load(username)
