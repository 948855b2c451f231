# app/services/prompt_services.py
import logging
from collections import Counter
from typing import Dict, List, Optional

from app.core.exceptions import NotFoundError, PermissionDeniedError
from app.models.auth_models import UserRecord
from app.models.common import utc_now
from app.models.placeholder_models import RenderedPrompt
from app.models.prompt_models import (
    FavoriteRecord,
    PromptCreate,
    PromptDetail,
    PromptFilter,
    PromptListItem,
    PromptRecord,
    PromptUpdate,
    PromptUsageRecord,
    TagCount,
)
from app.services.category_services import resolve_category
from app.services.database.base_store import PromptLibraryStore
from app.services.prompt_text_services import (
    extract_placeholders,
    fill_placeholders,
    generate_summary,
    unfilled_placeholders,
)
from app.services.review_services import list_review_threads

logger = logging.getLogger(__name__)


def clean_list(values: Optional[List[str]]) -> List[str]:
    """Strip entries, drop blanks and repeats, keep first-seen order."""
    cleaned = []
    for value in values or []:
        value = str(value).strip()
        if value and value not in cleaned:
            cleaned.append(value)
    return cleaned


def can_modify(prompt: PromptRecord, user: UserRecord) -> bool:
    # Imported prompts have no author and stay editable by any signed-in user
    return prompt.user_id is None or prompt.user_id == user.id


def to_list_item(prompt: PromptRecord) -> PromptListItem:
    return PromptListItem(**prompt.model_dump(), summary=generate_summary(prompt.prompt, prompt.title))


async def get_prompt_or_404(store: PromptLibraryStore, prompt_id: str) -> PromptRecord:
    prompt = await store.get_prompt(prompt_id)
    if prompt is None:
        raise NotFoundError("Prompt not found")
    return prompt


async def list_prompts(store: PromptLibraryStore, prompt_filter: PromptFilter) -> List[PromptListItem]:
    return [to_list_item(prompt) for prompt in await store.list_prompts(prompt_filter)]


async def get_prompt_detail(store: PromptLibraryStore, prompt_id: str) -> PromptDetail:
    prompt = await get_prompt_or_404(store, prompt_id)
    reviews = await list_review_threads(store, prompt_id)
    return PromptDetail(**to_list_item(prompt).model_dump(), reviews=reviews)


async def create_prompt(store: PromptLibraryStore, user: Optional[UserRecord], data: PromptCreate) -> PromptRecord:
    category, category_id = await resolve_category(store, data.category, data.category_id)
    placeholders = data.placeholders if data.placeholders is not None else extract_placeholders(data.prompt)

    prompt = PromptRecord(
        title=data.title,
        description=data.description,
        prompt=data.prompt,
        category=category,
        category_id=category_id,
        tags=clean_list(data.tags),
        difficulty=data.difficulty,
        estimated_time=data.estimated_time,
        user_id=user.id if user else None,
        placeholders=clean_list(placeholders),
        apps=clean_list(data.apps),
        urls=clean_list(data.urls),
    )
    prompt = await store.create_prompt(prompt)
    logger.info(f"Prompt {prompt.id} created")
    return prompt


async def update_prompt(
    store: PromptLibraryStore, prompt_id: str, user: UserRecord, data: PromptUpdate
) -> PromptRecord:
    prompt = await get_prompt_or_404(store, prompt_id)
    if not can_modify(prompt, user):
        raise PermissionDeniedError("You can only edit your own prompts")

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if "category" in changes or "category_id" in changes:
        changes["category"], changes["category_id"] = await resolve_category(
            store, changes.get("category"), changes.get("category_id")
        )
    for key in ("tags", "apps", "urls", "placeholders"):
        if key in changes:
            changes[key] = clean_list(changes[key])
    if "prompt" in changes and "placeholders" not in changes:
        changes["placeholders"] = extract_placeholders(changes["prompt"])
    changes["updated_at"] = utc_now()

    return await store.update_prompt(prompt_id, changes)


async def delete_prompt(store: PromptLibraryStore, prompt_id: str, user: UserRecord) -> PromptRecord:
    prompt = await get_prompt_or_404(store, prompt_id)
    if not can_modify(prompt, user):
        raise PermissionDeniedError("You can only delete your own prompts")
    await store.delete_prompt(prompt_id)
    logger.info(f"Prompt {prompt_id} deleted")
    return prompt


async def use_prompt(
    store: PromptLibraryStore,
    prompt_id: str,
    user: Optional[UserRecord] = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> PromptRecord:
    usage = PromptUsageRecord(
        prompt_id=prompt_id,
        user_id=user.id if user else None,
        ip_address=ip_address,
        user_agent=user_agent,
    )
    prompt = await store.record_prompt_usage(usage)
    if prompt is None:
        raise NotFoundError("Prompt not found")
    return prompt


async def render_prompt(store: PromptLibraryStore, prompt_id: str, values: Dict[str, str]) -> RenderedPrompt:
    prompt = await get_prompt_or_404(store, prompt_id)
    return RenderedPrompt(
        prompt_id=prompt.id,
        text=fill_placeholders(prompt.prompt, values),
        missing=unfilled_placeholders(prompt.prompt, values),
    )


async def add_favorite(store: PromptLibraryStore, prompt_id: str, user: UserRecord) -> FavoriteRecord:
    await get_prompt_or_404(store, prompt_id)
    return await store.add_favorite(FavoriteRecord(user_id=user.id, prompt_id=prompt_id))


async def remove_favorite(store: PromptLibraryStore, prompt_id: str, user: UserRecord) -> None:
    if not await store.remove_favorite(user.id, prompt_id):
        raise NotFoundError("Favorite not found")


async def list_favorites(store: PromptLibraryStore, user: UserRecord) -> List[PromptListItem]:
    favorites = []
    for prompt_id in await store.list_favorite_prompt_ids(user.id):
        prompt = await store.get_prompt(prompt_id)
        if prompt is not None:
            favorites.append(to_list_item(prompt))
    return favorites


async def list_tags(store: PromptLibraryStore) -> List[TagCount]:
    counts = Counter(tag for prompt in await store.list_prompts() for tag in prompt.tags)
    return [TagCount(tag=tag, count=count) for tag, count in sorted(counts.items(), key=lambda item: (-item[1], item[0]))]
