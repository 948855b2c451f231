import asyncio
import json
from datetime import timedelta

import pytest

from app.core.exceptions import ConflictError, StorageError
from app.models.activity_models import ActivityRecord
from app.models.auth_models import UserRecord
from app.models.category_models import CategoryRecord
from app.models.comment_models import CommentRecord
from app.models.common import utc_now
from app.models.prompt_models import FavoriteRecord, PromptFilter, PromptRecord, PromptUsageRecord
from app.models.review_models import ReviewRecord
from app.services.database.json_store import JsonFileStore

pytestmark = pytest.mark.anyio


def make_prompt(title, **overrides):
    return PromptRecord(title=title, prompt=f"Body of {title}", **overrides)


class TestUsers:
    async def test_lookup_by_email_ignores_case(self, store):
        user = await store.create_user(UserRecord(email="ana@acme-corp.com", name="Ana"))
        found = await store.get_user_by_email("ANA@acme-corp.com")
        assert found.id == user.id
        assert await store.count_users() == 1

    async def test_duplicate_email(self, store):
        await store.create_user(UserRecord(email="ana@acme-corp.com", name="Ana"))
        with pytest.raises(ConflictError):
            await store.create_user(UserRecord(email="ana@acme-corp.com", name="Other"))

    async def test_update_user(self, store):
        user = await store.create_user(UserRecord(email="ana@acme-corp.com", name="Ana"))
        updated = await store.update_user(user.id, {"verified": True})
        assert updated.verified is True
        assert await store.update_user("missing", {"verified": True}) is None


class TestPrompts:
    async def test_filter_sort_and_paginate(self, store):
        old = await store.create_prompt(make_prompt("Old", tags=["a"], created_at=utc_now() - timedelta(days=1)))
        new = await store.create_prompt(make_prompt("New", tags=["b"], category="Writing", rating=4.5))

        assert [p.id for p in await store.list_prompts()] == [new.id, old.id]
        assert [p.id for p in await store.list_prompts(PromptFilter(category="Writing"))] == [new.id]
        assert [p.id for p in await store.list_prompts(PromptFilter(tags=["a"]))] == [old.id]
        assert [p.id for p in await store.list_prompts(PromptFilter(search="body of old"))] == [old.id]
        assert [p.id for p in await store.list_prompts(PromptFilter(min_rating=4))] == [new.id]
        assert [p.id for p in await store.list_prompts(PromptFilter(limit=1, offset=1))] == [old.id]

    async def test_search_treats_wildcards_literally(self, store):
        await store.create_prompt(make_prompt("Plain"))
        assert await store.list_prompts(PromptFilter(search="%")) == []
        await store.create_prompt(make_prompt("axb"))
        assert await store.list_prompts(PromptFilter(search="a_b")) == []

    async def test_record_usage(self, store):
        prompt = await store.create_prompt(make_prompt("Used"))
        updated = await store.record_prompt_usage(PromptUsageRecord(prompt_id=prompt.id))
        assert updated.usage_count == 1
        assert updated.last_used is not None
        assert await store.record_prompt_usage(PromptUsageRecord(prompt_id="missing")) is None

    async def test_delete_cascades(self, store):
        prompt = await store.create_prompt(make_prompt("Doomed"))
        await store.create_review(ReviewRecord(prompt_id=prompt.id, rating=3))
        await store.create_comment(CommentRecord(prompt_id=prompt.id, content="Hi"))
        await store.add_favorite(FavoriteRecord(user_id="u1", prompt_id=prompt.id))

        assert await store.delete_prompt(prompt.id) is True
        assert await store.get_prompt(prompt.id) is None
        assert await store.list_reviews(prompt_id=prompt.id) == []
        assert await store.list_comments(prompt.id) == []
        assert await store.list_favorite_prompt_ids("u1") == []


class TestCategories:
    async def test_sorted_by_name(self, store):
        await store.create_category(CategoryRecord(name="Zeta"))
        await store.create_category(CategoryRecord(name="Alpha"))
        assert [c.name for c in await store.list_categories()] == ["Alpha", "Zeta"]

    async def test_duplicate_name(self, store):
        await store.create_category(CategoryRecord(name="Alpha"))
        with pytest.raises(ConflictError):
            await store.create_category(CategoryRecord(name="Alpha"))


class TestFavorites:
    async def test_add_is_idempotent(self, store):
        prompt = await store.create_prompt(make_prompt("Liked"))
        first = await store.add_favorite(FavoriteRecord(user_id="u1", prompt_id=prompt.id))
        second = await store.add_favorite(FavoriteRecord(user_id="u1", prompt_id=prompt.id))
        assert first.id == second.id
        assert await store.list_favorite_prompt_ids("u1") == [prompt.id]
        assert await store.remove_favorite("u1", prompt.id) is True
        assert await store.remove_favorite("u1", prompt.id) is False


class TestActivities:
    async def test_newest_first_with_since_and_limit(self, store):
        now = utc_now()
        await store.create_activity(ActivityRecord(action="user_signup", user_id="u1", created_at=now - timedelta(days=2)))
        await store.create_activity(ActivityRecord(action="prompt_viewed", user_id="u1", created_at=now - timedelta(hours=1)))
        await store.create_activity(ActivityRecord(action="prompt_viewed", user_id="u2", created_at=now))

        recent = await store.list_activities(since=now - timedelta(days=1))
        assert [a.user_id for a in recent] == ["u2", "u1"]
        assert [a.action for a in await store.list_activities(user_id="u1", limit=1)] == ["prompt_viewed"]


class TestJsonFileStore:
    async def test_documents_are_camel_case(self, tmp_path):
        store = JsonFileStore(str(tmp_path))
        await store.connect()
        await store.create_prompt(make_prompt("Stored", usage_count=2))
        documents = json.loads((tmp_path / "prompts.json").read_text(encoding="utf-8"))
        assert documents[0]["usageCount"] == 2
        assert "usage_count" not in documents[0]

    async def test_concurrent_usage_not_lost(self, tmp_path):
        store = JsonFileStore(str(tmp_path))
        await store.connect()
        prompt = await store.create_prompt(make_prompt("Busy"))
        await asyncio.gather(*[store.record_prompt_usage(PromptUsageRecord(prompt_id=prompt.id)) for _ in range(10)])
        assert (await store.get_prompt(prompt.id)).usage_count == 10

    async def test_malformed_file(self, tmp_path):
        store = JsonFileStore(str(tmp_path))
        await store.connect()
        (tmp_path / "prompts.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(StorageError):
            await store.list_prompts()

    async def test_object_instead_of_array(self, tmp_path):
        store = JsonFileStore(str(tmp_path))
        await store.connect()
        (tmp_path / "users.json").write_text('{"id": "1"}', encoding="utf-8")
        with pytest.raises(StorageError):
            await store.count_users()
