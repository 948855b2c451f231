# app/models/category_models.py
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from app.models.common import CamelModel, NonEmptyStr, new_id, utc_now


class CategoryRecord(CamelModel):
    id: str = Field(default_factory=new_id)
    name: str
    description: str = ""
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("description", mode="before")
    @classmethod
    def _blank_description(cls, value):
        return "" if value is None else value


class CategoryWithCount(CategoryRecord):
    prompt_count: int = 0


class CategoryCreate(CamelModel):
    name: NonEmptyStr
    description: str = ""


class CategoryUpdate(CamelModel):
    name: Optional[NonEmptyStr] = None
    description: Optional[str] = None
