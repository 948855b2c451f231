# app/services/database/sql_store.py
import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, or_, select, text, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, StorageError
from app.data.database import create_engine_for_url, create_session_factory, create_tables
from app.models.activity_models import ActivityRecord
from app.models.auth_models import UserRecord
from app.models.category_models import CategoryRecord
from app.models.comment_models import CommentRecord
from app.models.database_models.category import Category
from app.models.database_models.comment import Comment
from app.models.database_models.favorite import Favorite
from app.models.database_models.prompt import Prompt
from app.models.database_models.prompt_usage import PromptUsage
from app.models.database_models.review import Review
from app.models.database_models.user import User
from app.models.database_models.user_activity import UserActivity
from app.models.prompt_models import FavoriteRecord, PromptFilter, PromptRecord, PromptUsageRecord
from app.models.review_models import ReviewRecord
from app.services.database.base_store import PromptLibraryStore, matches_tags, paginate

logger = logging.getLogger(__name__)

PROMPT_ORDERING = {
    "newest": [Prompt.created_at.desc()],
    "rating": [Prompt.rating.desc(), Prompt.usage_count.desc(), Prompt.created_at.desc()],
    "usage": [Prompt.usage_count.desc(), Prompt.rating.desc(), Prompt.created_at.desc()],
}


def _columns(model) -> set:
    return {column.key for column in model.__table__.columns}


def _row_values(model, record) -> Dict[str, Any]:
    columns = _columns(model)
    return {key: value for key, value in record.model_dump().items() if key in columns}


class SqlAlchemyStore(PromptLibraryStore):
    backend_name = "sql"

    def __init__(self, database_url: str, auto_create: bool = True, echo: bool = False):
        self.database_url = database_url
        self.auto_create = auto_create
        self.echo = echo
        self.engine = None
        self.session_factory = None

    async def connect(self) -> None:
        self.engine = create_engine_for_url(self.database_url, echo=self.echo)
        self.session_factory = create_session_factory(self.engine)
        try:
            if self.auto_create:
                await create_tables(self.engine)
            else:
                async with self.engine.connect() as conn:
                    await conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            raise StorageError(f"Could not connect to the database: {e}") from e
        logger.info(f"Connected to {self.engine.dialect.name} database.")

    async def close(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()
            self.engine = None

    @asynccontextmanager
    async def _session(self):
        if self.session_factory is None:
            raise StorageError("Database store used before connect()")
        async with self.session_factory() as db:
            try:
                yield db
            except IntegrityError as e:
                await db.rollback()
                logger.warning(f"Integrity error: {e.orig}")
                raise ConflictError("Record already exists") from e
            except SQLAlchemyError as e:
                await db.rollback()
                logger.error(f"Database error: {e}")
                raise StorageError(str(e)) from e

    async def _get(self, model, record_cls, record_id: str):
        async with self._session() as db:
            row = await db.get(model, record_id)
            return record_cls.model_validate(row) if row else None

    async def _insert(self, model, record):
        async with self._session() as db:
            row = model(**_row_values(model, record))
            db.add(row)
            await db.commit()
            await db.refresh(row)
            return type(record).model_validate(row)

    async def _update(self, model, record_cls, record_id: str, changes: Dict[str, Any]):
        columns = _columns(model)
        async with self._session() as db:
            row = await db.get(model, record_id)
            if row is None:
                return None
            for key, value in changes.items():
                if key in columns and key != "id":
                    setattr(row, key, value)
            await db.commit()
            await db.refresh(row)
            return record_cls.model_validate(row)

    async def _delete_ids(self, model, ids: List[str]) -> int:
        if not ids:
            return 0
        async with self._session() as db:
            result = await db.execute(delete(model).where(model.id.in_(ids)))
            await db.commit()
            return result.rowcount or 0

    async def _all(self, db: AsyncSession, query, record_cls) -> list:
        result = await db.execute(query)
        return [record_cls.model_validate(row) for row in result.scalars().all()]

    # users
    async def get_user(self, user_id: str) -> Optional[UserRecord]:
        return await self._get(User, UserRecord, user_id)

    async def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        async with self._session() as db:
            result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
            user = result.scalars().first()
            return UserRecord.model_validate(user) if user else None

    async def create_user(self, user: UserRecord) -> UserRecord:
        return await self._insert(User, user)

    async def update_user(self, user_id: str, changes: Dict[str, Any]) -> Optional[UserRecord]:
        return await self._update(User, UserRecord, user_id, changes)

    async def count_users(self) -> int:
        async with self._session() as db:
            result = await db.execute(select(func.count()).select_from(User))
            return result.scalar() or 0

    # categories
    async def list_categories(self) -> List[CategoryRecord]:
        async with self._session() as db:
            return await self._all(db, select(Category).order_by(Category.name), CategoryRecord)

    async def get_category(self, category_id: str) -> Optional[CategoryRecord]:
        return await self._get(Category, CategoryRecord, category_id)

    async def get_category_by_name(self, name: str) -> Optional[CategoryRecord]:
        async with self._session() as db:
            result = await db.execute(select(Category).where(Category.name == name))
            category = result.scalars().first()
            return CategoryRecord.model_validate(category) if category else None

    async def create_category(self, category: CategoryRecord) -> CategoryRecord:
        return await self._insert(Category, category)

    async def update_category(self, category_id: str, changes: Dict[str, Any]) -> Optional[CategoryRecord]:
        return await self._update(Category, CategoryRecord, category_id, changes)

    async def delete_category(self, category_id: str) -> bool:
        return await self._delete_ids(Category, [category_id]) > 0

    # prompts
    async def list_prompts(self, prompt_filter: Optional[PromptFilter] = None) -> List[PromptRecord]:
        prompt_filter = prompt_filter or PromptFilter(limit=None)
        query = select(Prompt)
        if prompt_filter.category:
            query = query.where(Prompt.category == prompt_filter.category)
        if prompt_filter.user_id:
            query = query.where(Prompt.user_id == prompt_filter.user_id)
        if prompt_filter.search:
            term = prompt_filter.search
            query = query.where(
                or_(
                    Prompt.title.icontains(term, autoescape=True),
                    Prompt.description.icontains(term, autoescape=True),
                    Prompt.prompt.icontains(term, autoescape=True),
                )
            )
        if prompt_filter.min_rating is not None:
            query = query.where(Prompt.rating >= prompt_filter.min_rating)
        query = query.order_by(*PROMPT_ORDERING.get(prompt_filter.sort, PROMPT_ORDERING["newest"]))

        # Tags live in a JSON column, so that filter runs after the fetch
        if not prompt_filter.tags:
            if prompt_filter.limit is not None:
                query = query.limit(prompt_filter.limit)
            if prompt_filter.offset:
                query = query.offset(prompt_filter.offset)

        async with self._session() as db:
            prompts = await self._all(db, query, PromptRecord)

        if prompt_filter.tags:
            prompts = [p for p in prompts if matches_tags(p, prompt_filter.tags)]
            prompts = paginate(prompts, prompt_filter.limit, prompt_filter.offset)
        return prompts

    async def get_prompt(self, prompt_id: str) -> Optional[PromptRecord]:
        return await self._get(Prompt, PromptRecord, prompt_id)

    async def create_prompt(self, prompt: PromptRecord) -> PromptRecord:
        return await self._insert(Prompt, prompt)

    async def update_prompt(self, prompt_id: str, changes: Dict[str, Any]) -> Optional[PromptRecord]:
        return await self._update(Prompt, PromptRecord, prompt_id, changes)

    async def delete_prompt(self, prompt_id: str) -> bool:
        async with self._session() as db:
            for model in (Review, Comment, Favorite, PromptUsage):
                await db.execute(delete(model).where(model.prompt_id == prompt_id))
            result = await db.execute(delete(Prompt).where(Prompt.id == prompt_id))
            await db.commit()
            return (result.rowcount or 0) > 0

    async def record_prompt_usage(self, usage: PromptUsageRecord) -> Optional[PromptRecord]:
        async with self._session() as db:
            result = await db.execute(
                update(Prompt)
                .where(Prompt.id == usage.prompt_id)
                .values(usage_count=Prompt.usage_count + 1, last_used=usage.used_at)
            )
            if not result.rowcount:
                await db.rollback()
                return None
            db.add(PromptUsage(**_row_values(PromptUsage, usage)))
            await db.commit()
            row = await db.get(Prompt, usage.prompt_id, populate_existing=True)
            return PromptRecord.model_validate(row) if row else None

    # reviews
    async def list_reviews(self, prompt_id: Optional[str] = None, user_id: Optional[str] = None) -> List[ReviewRecord]:
        query = select(Review)
        if prompt_id:
            query = query.where(Review.prompt_id == prompt_id)
        if user_id:
            query = query.where(Review.user_id == user_id)
        async with self._session() as db:
            return await self._all(db, query.order_by(Review.created_at), ReviewRecord)

    async def get_review(self, review_id: str) -> Optional[ReviewRecord]:
        return await self._get(Review, ReviewRecord, review_id)

    async def create_review(self, review: ReviewRecord) -> ReviewRecord:
        return await self._insert(Review, review)

    async def update_review(self, review_id: str, changes: Dict[str, Any]) -> Optional[ReviewRecord]:
        return await self._update(Review, ReviewRecord, review_id, changes)

    async def delete_reviews(self, review_ids: List[str]) -> int:
        return await self._delete_ids(Review, review_ids)

    # comments
    async def list_comments(self, prompt_id: str) -> List[CommentRecord]:
        query = select(Comment).where(Comment.prompt_id == prompt_id).order_by(Comment.created_at)
        async with self._session() as db:
            return await self._all(db, query, CommentRecord)

    async def get_comment(self, comment_id: str) -> Optional[CommentRecord]:
        return await self._get(Comment, CommentRecord, comment_id)

    async def create_comment(self, comment: CommentRecord) -> CommentRecord:
        return await self._insert(Comment, comment)

    async def update_comment(self, comment_id: str, changes: Dict[str, Any]) -> Optional[CommentRecord]:
        return await self._update(Comment, CommentRecord, comment_id, changes)

    async def delete_comments(self, comment_ids: List[str]) -> int:
        return await self._delete_ids(Comment, comment_ids)

    # favorites
    async def list_favorite_prompt_ids(self, user_id: str) -> List[str]:
        async with self._session() as db:
            result = await db.execute(
                select(Favorite.prompt_id).where(Favorite.user_id == user_id).order_by(Favorite.created_at.desc())
            )
            return list(result.scalars().all())

    async def add_favorite(self, favorite: FavoriteRecord) -> FavoriteRecord:
        async with self._session() as db:
            result = await db.execute(
                select(Favorite).where(Favorite.user_id == favorite.user_id, Favorite.prompt_id == favorite.prompt_id)
            )
            existing = result.scalars().first()
            if existing:
                return FavoriteRecord.model_validate(existing)
        return await self._insert(Favorite, favorite)

    async def remove_favorite(self, user_id: str, prompt_id: str) -> bool:
        async with self._session() as db:
            result = await db.execute(
                delete(Favorite).where(Favorite.user_id == user_id, Favorite.prompt_id == prompt_id)
            )
            await db.commit()
            return (result.rowcount or 0) > 0

    # activity log
    async def create_activity(self, activity: ActivityRecord) -> ActivityRecord:
        return await self._insert(UserActivity, activity)

    async def list_activities(
        self,
        user_id: Optional[str] = None,
        since: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> List[ActivityRecord]:
        query = select(UserActivity)
        if user_id:
            query = query.where(UserActivity.user_id == user_id)
        if since is not None:
            query = query.where(UserActivity.created_at >= since)
        query = query.order_by(UserActivity.created_at.desc())
        if limit is not None:
            query = query.limit(limit)
        async with self._session() as db:
            return await self._all(db, query, ActivityRecord)
