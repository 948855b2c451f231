# app/api/routes/search_routes.py
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.core.dependencies import get_store
from app.models.prompt_models import PromptFilter
from app.services.database.base_store import PromptLibraryStore
from app.services.prompt_services import list_prompts

router = APIRouter(tags=["Search"])


@router.get("")
async def search(
    q: Optional[str] = None,
    category: Optional[str] = None,
    min_rating: Optional[float] = Query(default=None, alias="minRating", ge=0, le=5),
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    store: PromptLibraryStore = Depends(get_store),
):
    """Best-rated, then most-used, matches first."""
    prompt_filter = PromptFilter(
        search=q or None,
        category=None if category in (None, "", "all") else category,
        min_rating=min_rating,
        sort="rating",
        limit=limit,
        offset=offset,
    )
    return {"data": await list_prompts(store, prompt_filter)}
