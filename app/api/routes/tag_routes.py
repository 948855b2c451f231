# app/api/routes/tag_routes.py
from fastapi import APIRouter, Depends

from app.core.dependencies import get_store
from app.services.database.base_store import PromptLibraryStore
from app.services.prompt_services import list_tags
from app.services.tagging_services import taxonomy

router = APIRouter(tags=["Tags"])


@router.get("")
async def tags(store: PromptLibraryStore = Depends(get_store)):
    return {"data": await list_tags(store)}


@router.get("/taxonomy")
async def tag_taxonomy():
    return {"data": taxonomy()}
