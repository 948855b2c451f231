# app/models/comment_models.py
from datetime import datetime
from typing import List, Optional

from pydantic import Field

from app.models.common import CamelModel, NonEmptyStr, new_id, utc_now


class CommentRecord(CamelModel):
    id: str = Field(default_factory=new_id)
    prompt_id: str
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    content: str
    parent_id: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class CommentNode(CommentRecord):
    replies: List["CommentNode"] = []


class CommentCreate(CamelModel):
    content: NonEmptyStr
    parent_id: Optional[str] = None


class CommentUpdate(CamelModel):
    content: NonEmptyStr
