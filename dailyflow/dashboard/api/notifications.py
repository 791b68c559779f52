"""
Notification centre routes
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends

from dailyflow.config import FlowConfig
from dailyflow.core.models import AppData
from dailyflow.services.data_service import DataService, get_data_service
from dailyflow.services.notifications import (
    badge_text,
    clear_notifications,
    mark_all_read,
    mark_read,
    unread_count
)
from dailyflow.utils.datetime_utils import format_time_ago, now_local
from ..dependencies import get_existing_user, get_flow_config, get_user_data

router = APIRouter(prefix="/api/users/{username}/notifications", tags=["notifications"])


@router.get("", response_model=Dict[str, Any])
async def list_notifications(
    data: AppData = Depends(get_user_data),
    config: FlowConfig = Depends(get_flow_config)
):
    """Newest first, with the unread counter and a relative age for each"""
    now = now_local(config.timezone)
    items = []
    for notification in data.notifications:
        item = notification.to_dict()
        item["timeAgo"] = format_time_ago(notification.timestamp, now)
        items.append(item)

    return {
        "unread": unread_count(data),
        "badge": badge_text(data),
        "notifications": items
    }


@router.post("/read-all", response_model=Dict[str, Any])
def read_all_notifications(
    username: str = Depends(get_existing_user),
    data_service: DataService = Depends(get_data_service)
):
    with data_service.transaction(username) as data:
        changed = mark_all_read(data)
    return {"marked": changed, "unread": 0}


@router.post("/{notification_id}/read", response_model=Dict[str, Any])
def read_notification(
    notification_id: str,
    username: str = Depends(get_existing_user),
    data_service: DataService = Depends(get_data_service)
):
    with data_service.transaction(username) as data:
        notification = mark_read(data, notification_id)
        unread = unread_count(data)
    return {"id": notification.id, "read": True, "unread": unread}


@router.delete("", response_model=Dict[str, Any])
def delete_notifications(
    username: str = Depends(get_existing_user),
    data_service: DataService = Depends(get_data_service)
):
    with data_service.transaction(username) as data:
        cleared = clear_notifications(data)
    return {"cleared": cleared}
