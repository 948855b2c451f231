# app/models/prompt_models.py
from datetime import datetime
from enum import Enum
from typing import Dict, List, Literal, Optional

from pydantic import ConfigDict, Field, field_validator

from app.models.common import CamelModel, NonEmptyStr, new_id, utc_now
from app.models.review_models import ReviewNode

DEFAULT_CATEGORY = "Uncategorized"
DEFAULT_ESTIMATED_TIME = "5-10 minutes"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


PromptSort = Literal["newest", "rating", "usage"]


def _lower_difficulty(value):
    if isinstance(value, str):
        return value.strip().lower()
    return value


class PromptRecord(CamelModel):
    model_config = ConfigDict(use_enum_values=True)

    id: str = Field(default_factory=new_id)
    title: str
    description: str = ""
    prompt: str
    category: str = DEFAULT_CATEGORY
    category_id: Optional[str] = None
    tags: List[str] = []
    difficulty: Difficulty = Difficulty.MEDIUM.value
    estimated_time: str = DEFAULT_ESTIMATED_TIME
    usage_count: int = 0
    rating: float = 0.0
    review_count: int = 0
    last_used: Optional[datetime] = None
    user_id: Optional[str] = None
    placeholders: List[str] = []
    apps: List[str] = []
    urls: List[str] = []
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("description", mode="before")
    @classmethod
    def _blank_description(cls, value):
        return "" if value is None else value

    @field_validator("category", mode="before")
    @classmethod
    def _default_category(cls, value):
        return value or DEFAULT_CATEGORY

    @field_validator("estimated_time", mode="before")
    @classmethod
    def _default_estimated_time(cls, value):
        return value or DEFAULT_ESTIMATED_TIME

    @field_validator("tags", "placeholders", "apps", "urls", mode="before")
    @classmethod
    def _empty_lists(cls, value):
        return [] if value is None else value

    @field_validator("usage_count", "review_count", mode="before")
    @classmethod
    def _zero_counts(cls, value):
        return 0 if value is None else value

    @field_validator("rating", mode="before")
    @classmethod
    def _zero_rating(cls, value):
        return 0.0 if value is None else value

    @field_validator("difficulty", mode="before")
    @classmethod
    def _normalize_difficulty(cls, value):
        return _lower_difficulty(value) or Difficulty.MEDIUM


class PromptListItem(PromptRecord):
    summary: str = ""


class PromptDetail(PromptListItem):
    reviews: List[ReviewNode] = []


class PromptCreate(CamelModel):
    model_config = ConfigDict(use_enum_values=True)

    title: NonEmptyStr
    prompt: NonEmptyStr
    description: str = ""
    category: Optional[str] = None
    category_id: Optional[str] = None
    tags: List[str] = []
    difficulty: Difficulty = Difficulty.MEDIUM.value
    estimated_time: Optional[str] = None
    placeholders: Optional[List[str]] = None
    apps: List[str] = []
    urls: List[str] = []

    @field_validator("difficulty", mode="before")
    @classmethod
    def _normalize_difficulty(cls, value):
        return _lower_difficulty(value) or Difficulty.MEDIUM


class PromptUpdate(CamelModel):
    model_config = ConfigDict(use_enum_values=True)

    title: Optional[NonEmptyStr] = None
    prompt: Optional[NonEmptyStr] = None
    description: Optional[str] = None
    category: Optional[str] = None
    category_id: Optional[str] = None
    tags: Optional[List[str]] = None
    difficulty: Optional[Difficulty] = None
    estimated_time: Optional[str] = None
    placeholders: Optional[List[str]] = None
    apps: Optional[List[str]] = None
    urls: Optional[List[str]] = None

    @field_validator("difficulty", mode="before")
    @classmethod
    def _normalize_difficulty(cls, value):
        return _lower_difficulty(value)


class PromptFilter(CamelModel):
    category: Optional[str] = None
    user_id: Optional[str] = None
    search: Optional[str] = None
    tags: List[str] = []
    min_rating: Optional[float] = None
    sort: PromptSort = "newest"
    limit: Optional[int] = Field(default=50, ge=1, le=500)
    offset: int = Field(default=0, ge=0)


class PromptRenderRequest(CamelModel):
    values: Dict[str, str] = {}


class PromptUsageRecord(CamelModel):
    id: str = Field(default_factory=new_id)
    prompt_id: str
    user_id: Optional[str] = None
    used_at: datetime = Field(default_factory=utc_now)
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


class FavoriteRecord(CamelModel):
    id: str = Field(default_factory=new_id)
    user_id: str
    prompt_id: str
    created_at: datetime = Field(default_factory=utc_now)


class TagCount(CamelModel):
    tag: str
    count: int
