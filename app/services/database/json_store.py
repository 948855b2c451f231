# app/services/database/json_store.py
"""
Flat-file backend: one JSON array per collection under ``data_dir``.

Every mutation rewrites the whole file. Read-modify-write cycles are
serialized by an in-process lock and files are swapped in atomically, so a
single server process never loses an update. Separate processes writing the
same directory are not coordinated.
"""
import asyncio
import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Type

from pydantic import BaseModel, ValidationError

from app.core.exceptions import ConflictError, StorageError
from app.models.activity_models import ActivityRecord
from app.models.auth_models import UserRecord
from app.models.category_models import CategoryRecord
from app.models.comment_models import CommentRecord
from app.models.prompt_models import FavoriteRecord, PromptFilter, PromptRecord, PromptUsageRecord
from app.models.review_models import ReviewRecord
from app.services.database.base_store import PromptLibraryStore, matches_filter, paginate, sort_prompts

logger = logging.getLogger(__name__)

COLLECTIONS: Dict[str, Type[BaseModel]] = {
    "users": UserRecord,
    "categories": CategoryRecord,
    "prompts": PromptRecord,
    "reviews": ReviewRecord,
    "comments": CommentRecord,
    "favorites": FavoriteRecord,
    "prompt_usage": PromptUsageRecord,
    "activities": ActivityRecord,
}


class JsonFileStore(PromptLibraryStore):
    backend_name = "json"

    def __init__(self, data_dir: str):
        self.data_dir = Path(data_dir)
        self._lock = asyncio.Lock()

    async def connect(self) -> None:
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            for name in COLLECTIONS:
                path = self._path(name)
                if not path.exists():
                    self._write_file(name, [])
        except OSError as e:
            raise StorageError(f"Data directory {self.data_dir} is not usable: {e}") from e
        logger.info(f"Using JSON data directory {self.data_dir.resolve()}")

    def _path(self, name: str) -> Path:
        return self.data_dir / f"{name}.json"

    def _read_file(self, name: str) -> List[dict]:
        path = self._path(name)
        if not path.exists():
            return []
        try:
            with open(path, "r", encoding="utf-8") as file:
                documents = json.load(file)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Could not read {path}: {e}") from e
        if not isinstance(documents, list):
            raise StorageError(f"{path} does not contain a JSON array")
        return documents

    def _write_file(self, name: str, documents: List[dict]) -> None:
        path = self._path(name)
        temp_path = path.with_name(path.name + ".tmp")
        try:
            with open(temp_path, "w", encoding="utf-8") as file:
                json.dump(documents, file, indent=2, ensure_ascii=False)
            os.replace(temp_path, path)
        except OSError as e:
            raise StorageError(f"Could not write {path}: {e}") from e

    async def _load(self, name: str) -> list:
        model = COLLECTIONS[name]
        documents = await asyncio.to_thread(self._read_file, name)
        try:
            return [model.model_validate(document) for document in documents]
        except ValidationError as e:
            raise StorageError(f"Malformed record in {name}.json: {e}") from e

    async def _save(self, name: str, records: list) -> None:
        documents = [record.to_document() for record in records]
        await asyncio.to_thread(self._write_file, name, documents)

    async def _find(self, name: str, predicate: Callable[[Any], bool]):
        for record in await self._load(name):
            if predicate(record):
                return record
        return None

    async def _insert(self, name: str, record, unique: Optional[Callable[[Any], bool]] = None):
        async with self._lock:
            records = await self._load(name)
            if any(existing.id == record.id for existing in records):
                raise ConflictError("Record already exists")
            if unique is not None and any(unique(existing) for existing in records):
                raise ConflictError("Record already exists")
            records.append(record)
            await self._save(name, records)
        return record

    async def _update(self, name: str, record_id: str, changes: Dict[str, Any]):
        model = COLLECTIONS[name]
        async with self._lock:
            records = await self._load(name)
            for index, record in enumerate(records):
                if record.id == record_id:
                    values = {**record.model_dump(), **{k: v for k, v in changes.items() if k != "id"}}
                    records[index] = model.model_validate(values)
                    await self._save(name, records)
                    return records[index]
        return None

    async def _delete_where(self, name: str, predicate: Callable[[Any], bool]) -> int:
        async with self._lock:
            records = await self._load(name)
            kept = [record for record in records if not predicate(record)]
            removed = len(records) - len(kept)
            if removed:
                await self._save(name, kept)
            return removed

    # users
    async def get_user(self, user_id: str) -> Optional[UserRecord]:
        return await self._find("users", lambda u: u.id == user_id)

    async def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        email = email.lower()
        return await self._find("users", lambda u: u.email.lower() == email)

    async def create_user(self, user: UserRecord) -> UserRecord:
        email = user.email.lower()
        return await self._insert("users", user, unique=lambda u: u.email.lower() == email)

    async def update_user(self, user_id: str, changes: Dict[str, Any]) -> Optional[UserRecord]:
        return await self._update("users", user_id, changes)

    async def count_users(self) -> int:
        return len(await self._load("users"))

    # categories
    async def list_categories(self) -> List[CategoryRecord]:
        return sorted(await self._load("categories"), key=lambda c: c.name)

    async def get_category(self, category_id: str) -> Optional[CategoryRecord]:
        return await self._find("categories", lambda c: c.id == category_id)

    async def get_category_by_name(self, name: str) -> Optional[CategoryRecord]:
        return await self._find("categories", lambda c: c.name == name)

    async def create_category(self, category: CategoryRecord) -> CategoryRecord:
        return await self._insert("categories", category, unique=lambda c: c.name == category.name)

    async def update_category(self, category_id: str, changes: Dict[str, Any]) -> Optional[CategoryRecord]:
        return await self._update("categories", category_id, changes)

    async def delete_category(self, category_id: str) -> bool:
        return await self._delete_where("categories", lambda c: c.id == category_id) > 0

    # prompts
    async def list_prompts(self, prompt_filter: Optional[PromptFilter] = None) -> List[PromptRecord]:
        prompt_filter = prompt_filter or PromptFilter(limit=None)
        prompts = [p for p in await self._load("prompts") if matches_filter(p, prompt_filter)]
        prompts = sort_prompts(prompts, prompt_filter.sort)
        return paginate(prompts, prompt_filter.limit, prompt_filter.offset)

    async def get_prompt(self, prompt_id: str) -> Optional[PromptRecord]:
        return await self._find("prompts", lambda p: p.id == prompt_id)

    async def create_prompt(self, prompt: PromptRecord) -> PromptRecord:
        return await self._insert("prompts", prompt)

    async def update_prompt(self, prompt_id: str, changes: Dict[str, Any]) -> Optional[PromptRecord]:
        return await self._update("prompts", prompt_id, changes)

    async def delete_prompt(self, prompt_id: str) -> bool:
        for name in ("reviews", "comments", "favorites", "prompt_usage"):
            await self._delete_where(name, lambda record: record.prompt_id == prompt_id)
        return await self._delete_where("prompts", lambda p: p.id == prompt_id) > 0

    async def record_prompt_usage(self, usage: PromptUsageRecord) -> Optional[PromptRecord]:
        async with self._lock:
            prompts = await self._load("prompts")
            for index, prompt in enumerate(prompts):
                if prompt.id == usage.prompt_id:
                    prompts[index] = prompt.model_copy(
                        update={"usage_count": prompt.usage_count + 1, "last_used": usage.used_at}
                    )
                    await self._save("prompts", prompts)
                    usages = await self._load("prompt_usage")
                    usages.append(usage)
                    await self._save("prompt_usage", usages)
                    return prompts[index]
        return None

    # reviews
    async def list_reviews(self, prompt_id: Optional[str] = None, user_id: Optional[str] = None) -> List[ReviewRecord]:
        reviews = [
            r for r in await self._load("reviews")
            if (prompt_id is None or r.prompt_id == prompt_id) and (user_id is None or r.user_id == user_id)
        ]
        return sorted(reviews, key=lambda r: r.created_at)

    async def get_review(self, review_id: str) -> Optional[ReviewRecord]:
        return await self._find("reviews", lambda r: r.id == review_id)

    async def create_review(self, review: ReviewRecord) -> ReviewRecord:
        return await self._insert("reviews", review)

    async def update_review(self, review_id: str, changes: Dict[str, Any]) -> Optional[ReviewRecord]:
        return await self._update("reviews", review_id, changes)

    async def delete_reviews(self, review_ids: List[str]) -> int:
        ids = set(review_ids)
        return await self._delete_where("reviews", lambda r: r.id in ids)

    # comments
    async def list_comments(self, prompt_id: str) -> List[CommentRecord]:
        comments = [c for c in await self._load("comments") if c.prompt_id == prompt_id]
        return sorted(comments, key=lambda c: c.created_at)

    async def get_comment(self, comment_id: str) -> Optional[CommentRecord]:
        return await self._find("comments", lambda c: c.id == comment_id)

    async def create_comment(self, comment: CommentRecord) -> CommentRecord:
        return await self._insert("comments", comment)

    async def update_comment(self, comment_id: str, changes: Dict[str, Any]) -> Optional[CommentRecord]:
        return await self._update("comments", comment_id, changes)

    async def delete_comments(self, comment_ids: List[str]) -> int:
        ids = set(comment_ids)
        return await self._delete_where("comments", lambda c: c.id in ids)

    # favorites
    async def list_favorite_prompt_ids(self, user_id: str) -> List[str]:
        favorites = [f for f in await self._load("favorites") if f.user_id == user_id]
        return [f.prompt_id for f in sorted(favorites, key=lambda f: f.created_at, reverse=True)]

    async def add_favorite(self, favorite: FavoriteRecord) -> FavoriteRecord:
        async with self._lock:
            favorites = await self._load("favorites")
            for existing in favorites:
                if existing.user_id == favorite.user_id and existing.prompt_id == favorite.prompt_id:
                    return existing
            favorites.append(favorite)
            await self._save("favorites", favorites)
        return favorite

    async def remove_favorite(self, user_id: str, prompt_id: str) -> bool:
        removed = await self._delete_where(
            "favorites", lambda f: f.user_id == user_id and f.prompt_id == prompt_id
        )
        return removed > 0

    # activity log
    async def create_activity(self, activity: ActivityRecord) -> ActivityRecord:
        return await self._insert("activities", activity)

    async def list_activities(
        self,
        user_id: Optional[str] = None,
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[ActivityRecord]:
        activities = [
            a for a in await self._load("activities")
            if (user_id is None or a.user_id == user_id) and (since is None or a.created_at >= since)
        ]
        activities.sort(key=lambda a: a.created_at, reverse=True)
        return paginate(activities, limit)
