# app/services/category_services.py
import logging
from collections import Counter
from typing import List, Optional, Tuple

from app.core.exceptions import ConflictError, NotFoundError, ValidationFailedError
from app.models.category_models import CategoryCreate, CategoryRecord, CategoryUpdate, CategoryWithCount
from app.models.common import utc_now
from app.models.prompt_models import DEFAULT_CATEGORY
from app.services.database.base_store import PromptLibraryStore

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    ("Strategy & Vision", "Prompts for strategic planning and visionary thinking"),
    ("Analysis & Research", "Prompts for data analysis and research tasks"),
    ("Content Creation", "Prompts for writing and content generation"),
    ("Problem Solving", "Prompts for systematic problem solving"),
    ("Communication", "Prompts for effective communication and messaging"),
    ("Learning & Education", "Prompts for learning and educational content"),
    ("Creative & Design", "Prompts for creative and design work"),
    ("Technical & Development", "Prompts for technical and development tasks"),
]


async def seed_default_categories(store: PromptLibraryStore) -> int:
    if await store.list_categories():
        return 0
    for name, description in DEFAULT_CATEGORIES:
        await store.create_category(CategoryRecord(name=name, description=description))
    logger.info(f"Seeded {len(DEFAULT_CATEGORIES)} default categories.")
    return len(DEFAULT_CATEGORIES)


async def list_categories(store: PromptLibraryStore) -> List[CategoryWithCount]:
    categories = await store.list_categories()
    prompts = await store.list_prompts()
    counts = Counter(prompt.category for prompt in prompts)
    return [
        CategoryWithCount(**category.model_dump(), prompt_count=counts.get(category.name, 0))
        for category in categories
    ]


async def get_category_or_404(store: PromptLibraryStore, category_id: str) -> CategoryRecord:
    category = await store.get_category(category_id)
    if category is None:
        raise NotFoundError("Category not found")
    return category


async def resolve_category(
    store: PromptLibraryStore, name: Optional[str], category_id: Optional[str]
) -> Tuple[str, Optional[str]]:
    """(category name, category id) for a prompt; unknown names are kept as free text."""
    if category_id:
        category = await store.get_category(category_id)
        if category is None:
            raise ValidationFailedError("Unknown category id")
        return category.name, category.id
    name = (name or "").strip()
    if not name:
        return DEFAULT_CATEGORY, None
    category = await store.get_category_by_name(name)
    return name, category.id if category else None


async def create_category(store: PromptLibraryStore, data: CategoryCreate) -> CategoryWithCount:
    if await store.get_category_by_name(data.name):
        raise ConflictError("Category already exists")
    category = await store.create_category(CategoryRecord(name=data.name, description=data.description))
    return CategoryWithCount(**category.model_dump(), prompt_count=0)


async def update_category(store: PromptLibraryStore, category_id: str, data: CategoryUpdate) -> CategoryWithCount:
    category = await get_category_or_404(store, category_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)

    new_name = changes.get("name")
    if new_name and new_name != category.name:
        existing = await store.get_category_by_name(new_name)
        if existing and existing.id != category.id:
            raise ConflictError("Category already exists")

    changes["updated_at"] = utc_now()
    updated = await store.update_category(category_id, changes)

    prompts = [
        prompt for prompt in await store.list_prompts()
        if prompt.category_id == category.id or prompt.category == category.name
    ]
    if new_name and new_name != category.name:
        # Prompts carry the category name, keep them attached
        for prompt in prompts:
            await store.update_prompt(prompt.id, {"category": new_name, "category_id": category.id})
    return CategoryWithCount(**updated.model_dump(), prompt_count=len(prompts))


async def delete_category(store: PromptLibraryStore, category_id: str) -> None:
    category = await get_category_or_404(store, category_id)
    in_use = any(
        prompt.category_id == category.id or prompt.category == category.name
        for prompt in await store.list_prompts()
    )
    if in_use:
        raise ValidationFailedError("Cannot delete category that contains prompts")
    await store.delete_category(category_id)
