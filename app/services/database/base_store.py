# app/services/database/base_store.py
"""
Storage interface shared by the SQL, JSON-file and Supabase backends.

Stores persist and return the pydantic records from ``app.models``; they do
not enforce ownership or compute derived fields. Updates take a dict of
already-validated field values and return the updated record, or None when
the id is unknown.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from app.models.activity_models import ActivityRecord
from app.models.auth_models import UserRecord
from app.models.category_models import CategoryRecord
from app.models.comment_models import CommentRecord
from app.models.prompt_models import FavoriteRecord, PromptFilter, PromptRecord, PromptUsageRecord
from app.models.review_models import ReviewRecord


def matches_search(prompt: PromptRecord, search: str) -> bool:
    term = search.lower()
    return any(term in (value or "").lower() for value in (prompt.title, prompt.description, prompt.prompt))


def matches_tags(prompt: PromptRecord, tags: Iterable[str]) -> bool:
    wanted = set(tags)
    return not wanted or bool(wanted.intersection(prompt.tags))


def matches_filter(prompt: PromptRecord, prompt_filter: PromptFilter) -> bool:
    if prompt_filter.category and prompt.category != prompt_filter.category:
        return False
    if prompt_filter.user_id and prompt.user_id != prompt_filter.user_id:
        return False
    if prompt_filter.search and not matches_search(prompt, prompt_filter.search):
        return False
    if prompt_filter.min_rating is not None and prompt.rating < prompt_filter.min_rating:
        return False
    return matches_tags(prompt, prompt_filter.tags)


def sort_prompts(prompts: List[PromptRecord], sort: str = "newest") -> List[PromptRecord]:
    if sort == "rating":
        key = lambda p: (p.rating, p.usage_count, p.created_at)
    elif sort == "usage":
        key = lambda p: (p.usage_count, p.rating, p.created_at)
    else:
        key = lambda p: p.created_at
    return sorted(prompts, key=key, reverse=True)


def paginate(items: List[Any], limit: Optional[int], offset: int = 0) -> List[Any]:
    if limit is None:
        return items[offset:]
    return items[offset:offset + limit]


class PromptLibraryStore(ABC):
    backend_name = "base"

    async def connect(self) -> None:
        pass

    async def close(self) -> None:
        pass

    # users
    @abstractmethod
    async def get_user(self, user_id: str) -> Optional[UserRecord]: ...

    @abstractmethod
    async def get_user_by_email(self, email: str) -> Optional[UserRecord]: ...

    @abstractmethod
    async def create_user(self, user: UserRecord) -> UserRecord: ...

    @abstractmethod
    async def update_user(self, user_id: str, changes: Dict[str, Any]) -> Optional[UserRecord]: ...

    @abstractmethod
    async def count_users(self) -> int: ...

    # categories
    @abstractmethod
    async def list_categories(self) -> List[CategoryRecord]: ...

    @abstractmethod
    async def get_category(self, category_id: str) -> Optional[CategoryRecord]: ...

    @abstractmethod
    async def get_category_by_name(self, name: str) -> Optional[CategoryRecord]: ...

    @abstractmethod
    async def create_category(self, category: CategoryRecord) -> CategoryRecord: ...

    @abstractmethod
    async def update_category(self, category_id: str, changes: Dict[str, Any]) -> Optional[CategoryRecord]: ...

    @abstractmethod
    async def delete_category(self, category_id: str) -> bool: ...

    # prompts
    @abstractmethod
    async def list_prompts(self, prompt_filter: Optional[PromptFilter] = None) -> List[PromptRecord]: ...

    @abstractmethod
    async def get_prompt(self, prompt_id: str) -> Optional[PromptRecord]: ...

    @abstractmethod
    async def create_prompt(self, prompt: PromptRecord) -> PromptRecord: ...

    @abstractmethod
    async def update_prompt(self, prompt_id: str, changes: Dict[str, Any]) -> Optional[PromptRecord]: ...

    @abstractmethod
    async def delete_prompt(self, prompt_id: str) -> bool:
        """Removes the prompt together with its reviews, comments, favorites and usage rows."""

    @abstractmethod
    async def record_prompt_usage(self, usage: PromptUsageRecord) -> Optional[PromptRecord]:
        """Bumps usage_count and last_used, appends the usage row."""

    # reviews
    @abstractmethod
    async def list_reviews(self, prompt_id: Optional[str] = None, user_id: Optional[str] = None) -> List[ReviewRecord]: ...

    @abstractmethod
    async def get_review(self, review_id: str) -> Optional[ReviewRecord]: ...

    @abstractmethod
    async def create_review(self, review: ReviewRecord) -> ReviewRecord: ...

    @abstractmethod
    async def update_review(self, review_id: str, changes: Dict[str, Any]) -> Optional[ReviewRecord]: ...

    @abstractmethod
    async def delete_reviews(self, review_ids: List[str]) -> int: ...

    # comments
    @abstractmethod
    async def list_comments(self, prompt_id: str) -> List[CommentRecord]: ...

    @abstractmethod
    async def get_comment(self, comment_id: str) -> Optional[CommentRecord]: ...

    @abstractmethod
    async def create_comment(self, comment: CommentRecord) -> CommentRecord: ...

    @abstractmethod
    async def update_comment(self, comment_id: str, changes: Dict[str, Any]) -> Optional[CommentRecord]: ...

    @abstractmethod
    async def delete_comments(self, comment_ids: List[str]) -> int: ...

    # favorites
    @abstractmethod
    async def list_favorite_prompt_ids(self, user_id: str) -> List[str]: ...

    @abstractmethod
    async def add_favorite(self, favorite: FavoriteRecord) -> FavoriteRecord: ...

    @abstractmethod
    async def remove_favorite(self, user_id: str, prompt_id: str) -> bool: ...

    # activity log
    @abstractmethod
    async def create_activity(self, activity: ActivityRecord) -> ActivityRecord: ...

    @abstractmethod
    async def list_activities(
        self,
        user_id: Optional[str] = None,
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[ActivityRecord]:
        """Newest first."""
