# app/services/activity_services.py
import logging
from typing import Any, Dict, Optional

from fastapi import BackgroundTasks, Request

from app.models.activity_models import ActivityAction, ActivityRecord
from app.services.database.base_store import PromptLibraryStore

logger = logging.getLogger(__name__)


def client_address(request: Optional[Request]) -> Optional[str]:
    if request is None:
        return None
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


async def log_activity(
    store: PromptLibraryStore,
    action: ActivityAction | str,
    user_id: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> Optional[ActivityRecord]:
    """Write one activity row. Failures are logged and never reach the caller."""
    activity = ActivityRecord(
        action=action.value if isinstance(action, ActivityAction) else action,
        user_id=user_id,
        details=details or {},
        ip_address=ip_address,
        user_agent=user_agent,
    )
    try:
        return await store.create_activity(activity)
    except Exception as e:
        logger.error(f"Failed to log activity {activity.action}: {e}")
        return None


def schedule_activity(
    background_tasks: BackgroundTasks,
    store: PromptLibraryStore,
    request: Optional[Request],
    action: ActivityAction,
    user_id: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
):
    """Queue an activity write to run after the response has been sent."""
    background_tasks.add_task(
        log_activity,
        store,
        action,
        user_id=user_id,
        details=details,
        ip_address=client_address(request),
        user_agent=request.headers.get("user-agent") if request is not None else None,
    )
