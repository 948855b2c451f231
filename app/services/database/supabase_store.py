# app/services/database/supabase_store.py
import logging
import re
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi.encoders import jsonable_encoder
from supabase import AsyncClient, PostgrestAPIError, acreate_client

from app.core.exceptions import ConflictError, StorageError
from app.models.activity_models import ActivityRecord
from app.models.auth_models import UserRecord
from app.models.category_models import CategoryRecord
from app.models.comment_models import CommentRecord
from app.models.prompt_models import FavoriteRecord, PromptFilter, PromptRecord, PromptUsageRecord
from app.models.review_models import ReviewRecord
from app.services.database.base_store import PromptLibraryStore, matches_tags, paginate

logger = logging.getLogger(__name__)

# Postgres unique_violation
UNIQUE_VIOLATION = "23505"

PROMPT_ORDERING = {
    "newest": [("created_at", True)],
    "rating": [("rating", True), ("usage_count", True), ("created_at", True)],
    "usage": [("usage_count", True), ("rating", True), ("created_at", True)],
}


def _payload(record) -> Dict[str, Any]:
    return jsonable_encoder(record.model_dump())


def _search_term(search: str) -> str:
    # Characters with meaning in a PostgREST or-filter
    term = re.sub(r"[,()*%]", " ", search).strip()
    # Underscore and backslash are LIKE metacharacters
    return re.sub(r"([\\_])", r"\\\1", term)


class SupabaseStore(PromptLibraryStore):
    """Same tables as the SQL backend, reached through PostgREST."""

    backend_name = "supabase"

    def __init__(self, url: Optional[str], key: Optional[str], client: Optional[AsyncClient] = None):
        self.url = url
        self.key = key
        self.client = client

    async def connect(self) -> None:
        if self.client is None:
            if not self.url or not self.key:
                raise StorageError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set for the supabase backend")
            self.client = await acreate_client(self.url, self.key)
        async with self._request():
            await self._table("categories").select("id").limit(1).execute()
        logger.info("Connected to Supabase.")

    def _table(self, name: str):
        if self.client is None:
            raise StorageError("Supabase store used before connect()")
        return self.client.table(name)

    @asynccontextmanager
    async def _request(self):
        try:
            yield
        except PostgrestAPIError as e:
            if getattr(e, "code", None) == UNIQUE_VIOLATION:
                raise ConflictError("Record already exists") from e
            logger.error(f"Supabase error: {e}")
            raise StorageError(str(e)) from e

    async def _select(self, table: str, record_cls, **filters) -> list:
        async with self._request():
            query = self._table(table).select("*")
            for column, value in filters.items():
                query = query.eq(column, value)
            response = await query.execute()
        return [record_cls.model_validate(row) for row in response.data or []]

    async def _first(self, table: str, record_cls, **filters):
        rows = await self._select(table, record_cls, **filters)
        return rows[0] if rows else None

    async def _insert(self, table: str, record):
        async with self._request():
            response = await self._table(table).insert(_payload(record)).execute()
        return type(record).model_validate(response.data[0]) if response.data else record

    async def _update(self, table: str, record_cls, record_id: str, changes: Dict[str, Any]):
        payload = jsonable_encoder({k: v for k, v in changes.items() if k != "id"})
        async with self._request():
            response = await self._table(table).update(payload).eq("id", record_id).execute()
        return record_cls.model_validate(response.data[0]) if response.data else None

    async def _delete_in(self, table: str, column: str, values: List[str]) -> int:
        if not values:
            return 0
        async with self._request():
            response = await self._table(table).delete().in_(column, values).execute()
        return len(response.data or [])

    # users
    async def get_user(self, user_id: str) -> Optional[UserRecord]:
        return await self._first("users", UserRecord, id=user_id)

    async def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        # Emails are stored lower-cased
        return await self._first("users", UserRecord, email=email.lower())

    async def create_user(self, user: UserRecord) -> UserRecord:
        return await self._insert("users", user)

    async def update_user(self, user_id: str, changes: Dict[str, Any]) -> Optional[UserRecord]:
        return await self._update("users", UserRecord, user_id, changes)

    async def count_users(self) -> int:
        async with self._request():
            response = await self._table("users").select("id", count="exact").execute()
        return response.count or 0

    # categories
    async def list_categories(self) -> List[CategoryRecord]:
        async with self._request():
            response = await self._table("categories").select("*").order("name").execute()
        return [CategoryRecord.model_validate(row) for row in response.data or []]

    async def get_category(self, category_id: str) -> Optional[CategoryRecord]:
        return await self._first("categories", CategoryRecord, id=category_id)

    async def get_category_by_name(self, name: str) -> Optional[CategoryRecord]:
        return await self._first("categories", CategoryRecord, name=name)

    async def create_category(self, category: CategoryRecord) -> CategoryRecord:
        return await self._insert("categories", category)

    async def update_category(self, category_id: str, changes: Dict[str, Any]) -> Optional[CategoryRecord]:
        return await self._update("categories", CategoryRecord, category_id, changes)

    async def delete_category(self, category_id: str) -> bool:
        return await self._delete_in("categories", "id", [category_id]) > 0

    # prompts
    async def list_prompts(self, prompt_filter: Optional[PromptFilter] = None) -> List[PromptRecord]:
        prompt_filter = prompt_filter or PromptFilter(limit=None)
        query = self._table("prompts").select("*")
        if prompt_filter.category:
            query = query.eq("category", prompt_filter.category)
        if prompt_filter.user_id:
            query = query.eq("user_id", prompt_filter.user_id)
        if prompt_filter.search:
            term = _search_term(prompt_filter.search)
            if term:
                query = query.or_(
                    f"title.ilike.%{term}%,description.ilike.%{term}%,prompt.ilike.%{term}%"
                )
        if prompt_filter.min_rating is not None:
            query = query.gte("rating", prompt_filter.min_rating)
        for column, descending in PROMPT_ORDERING.get(prompt_filter.sort, PROMPT_ORDERING["newest"]):
            query = query.order(column, desc=descending)
        if not prompt_filter.tags and prompt_filter.limit is not None:
            query = query.range(prompt_filter.offset, prompt_filter.offset + prompt_filter.limit - 1)

        async with self._request():
            response = await query.execute()
        prompts = [PromptRecord.model_validate(row) for row in response.data or []]

        if prompt_filter.tags:
            prompts = [p for p in prompts if matches_tags(p, prompt_filter.tags)]
            prompts = paginate(prompts, prompt_filter.limit, prompt_filter.offset)
        elif prompt_filter.limit is None and prompt_filter.offset:
            prompts = prompts[prompt_filter.offset:]
        return prompts

    async def get_prompt(self, prompt_id: str) -> Optional[PromptRecord]:
        return await self._first("prompts", PromptRecord, id=prompt_id)

    async def create_prompt(self, prompt: PromptRecord) -> PromptRecord:
        return await self._insert("prompts", prompt)

    async def update_prompt(self, prompt_id: str, changes: Dict[str, Any]) -> Optional[PromptRecord]:
        return await self._update("prompts", PromptRecord, prompt_id, changes)

    async def delete_prompt(self, prompt_id: str) -> bool:
        for table in ("reviews", "comments", "favorites", "prompt_usage"):
            await self._delete_in(table, "prompt_id", [prompt_id])
        return await self._delete_in("prompts", "id", [prompt_id]) > 0

    async def record_prompt_usage(self, usage: PromptUsageRecord) -> Optional[PromptRecord]:
        # PostgREST has no atomic increment; concurrent uses may collapse into one
        prompt = await self.get_prompt(usage.prompt_id)
        if prompt is None:
            return None
        updated = await self._update(
            "prompts",
            PromptRecord,
            prompt.id,
            {"usage_count": prompt.usage_count + 1, "last_used": usage.used_at},
        )
        await self._insert("prompt_usage", usage)
        return updated

    # reviews
    async def list_reviews(self, prompt_id: Optional[str] = None, user_id: Optional[str] = None) -> List[ReviewRecord]:
        query = self._table("reviews").select("*")
        if prompt_id:
            query = query.eq("prompt_id", prompt_id)
        if user_id:
            query = query.eq("user_id", user_id)
        async with self._request():
            response = await query.order("created_at").execute()
        return [ReviewRecord.model_validate(row) for row in response.data or []]

    async def get_review(self, review_id: str) -> Optional[ReviewRecord]:
        return await self._first("reviews", ReviewRecord, id=review_id)

    async def create_review(self, review: ReviewRecord) -> ReviewRecord:
        return await self._insert("reviews", review)

    async def update_review(self, review_id: str, changes: Dict[str, Any]) -> Optional[ReviewRecord]:
        return await self._update("reviews", ReviewRecord, review_id, changes)

    async def delete_reviews(self, review_ids: List[str]) -> int:
        return await self._delete_in("reviews", "id", review_ids)

    # comments
    async def list_comments(self, prompt_id: str) -> List[CommentRecord]:
        async with self._request():
            response = await (
                self._table("comments").select("*").eq("prompt_id", prompt_id).order("created_at").execute()
            )
        return [CommentRecord.model_validate(row) for row in response.data or []]

    async def get_comment(self, comment_id: str) -> Optional[CommentRecord]:
        return await self._first("comments", CommentRecord, id=comment_id)

    async def create_comment(self, comment: CommentRecord) -> CommentRecord:
        return await self._insert("comments", comment)

    async def update_comment(self, comment_id: str, changes: Dict[str, Any]) -> Optional[CommentRecord]:
        return await self._update("comments", CommentRecord, comment_id, changes)

    async def delete_comments(self, comment_ids: List[str]) -> int:
        return await self._delete_in("comments", "id", comment_ids)

    # favorites
    async def list_favorite_prompt_ids(self, user_id: str) -> List[str]:
        async with self._request():
            response = await (
                self._table("favorites")
                .select("prompt_id")
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .execute()
            )
        return [row["prompt_id"] for row in response.data or []]

    async def add_favorite(self, favorite: FavoriteRecord) -> FavoriteRecord:
        existing = await self._first(
            "favorites", FavoriteRecord, user_id=favorite.user_id, prompt_id=favorite.prompt_id
        )
        if existing:
            return existing
        return await self._insert("favorites", favorite)

    async def remove_favorite(self, user_id: str, prompt_id: str) -> bool:
        async with self._request():
            response = await (
                self._table("favorites").delete().eq("user_id", user_id).eq("prompt_id", prompt_id).execute()
            )
        return bool(response.data)

    # activity log
    async def create_activity(self, activity: ActivityRecord) -> ActivityRecord:
        return await self._insert("user_activities", activity)

    async def list_activities(
        self,
        user_id: Optional[str] = None,
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[ActivityRecord]:
        query = self._table("user_activities").select("*")
        if user_id:
            query = query.eq("user_id", user_id)
        if since is not None:
            query = query.gte("created_at", since.isoformat())
        query = query.order("created_at", desc=True)
        if limit is not None:
            query = query.limit(limit)
        async with self._request():
            response = await query.execute()
        return [ActivityRecord.model_validate(row) for row in response.data or []]
