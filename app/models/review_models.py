# app/models/review_models.py
from datetime import datetime
from typing import Any, List, Optional

from pydantic import Field, field_validator

from app.models.common import CamelModel, new_id, utc_now


class ReviewRecord(CamelModel):
    id: str = Field(default_factory=new_id)
    prompt_id: str
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    # None on follow-ups that carry no score of their own
    rating: Optional[int] = None
    comment: str = ""
    tool_used: Optional[str] = None
    prompt_edits: Optional[str] = None
    what_worked: Optional[str] = None
    what_didnt_work: Optional[str] = None
    improvement_suggestions: Optional[str] = None
    test_run_graphics_link: Optional[str] = None
    screenshots: List[str] = []
    media_files: List[Any] = []
    parent_review_id: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("comment", mode="before")
    @classmethod
    def _blank_comment(cls, value):
        return "" if value is None else value

    @field_validator("screenshots", "media_files", mode="before")
    @classmethod
    def _empty_lists(cls, value):
        return [] if value is None else value


class ReviewNode(ReviewRecord):
    replies: List["ReviewNode"] = []


class ReviewCreate(CamelModel):
    rating: Optional[int] = None
    comment: str = ""
    tool_used: Optional[str] = None
    prompt_edits: Optional[str] = None
    what_worked: Optional[str] = None
    what_didnt_work: Optional[str] = None
    improvement_suggestions: Optional[str] = None
    test_run_graphics_link: Optional[str] = None
    screenshots: List[str] = []
    media_files: List[Any] = []
    parent_review_id: Optional[str] = None


class ReviewUpdate(CamelModel):
    rating: Optional[int] = None
    comment: Optional[str] = None
    tool_used: Optional[str] = None
    prompt_edits: Optional[str] = None
    what_worked: Optional[str] = None
    what_didnt_work: Optional[str] = None
    improvement_suggestions: Optional[str] = None
    test_run_graphics_link: Optional[str] = None
    screenshots: Optional[List[str]] = None
    media_files: Optional[List[Any]] = None
