# app/models/activity_models.py
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import Field

from app.models.common import CamelModel, new_id, utc_now


class ActivityAction(str, Enum):
    PROMPT_VIEWED = "prompt_viewed"
    PROMPT_TESTED = "prompt_tested"
    PROMPT_CREATED = "prompt_created"
    PROMPT_EDITED = "prompt_edited"
    PROMPT_DELETED = "prompt_deleted"
    REVIEW_ADDED = "review_added"
    COMMENT_ADDED = "comment_added"
    USER_SIGNUP = "user_signup"
    USER_SIGNIN = "user_signin"


class ActivityRecord(CamelModel):
    id: str = Field(default_factory=new_id)
    action: str
    user_id: Optional[str] = None
    details: Dict[str, Any] = {}
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
