# app/api/routes/category_routes.py
from fastapi import APIRouter, Depends, Response, status

from app.core.dependencies import get_store
from app.models.auth_models import UserRecord
from app.models.category_models import CategoryCreate, CategoryUpdate
from app.services import category_services
from app.services.auth_services import get_current_user
from app.services.database.base_store import PromptLibraryStore

router = APIRouter(tags=["Categories"])


@router.get("")
async def list_categories(store: PromptLibraryStore = Depends(get_store)):
    return {"data": await category_services.list_categories(store)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_category(
    data: CategoryCreate,
    user: UserRecord = Depends(get_current_user),
    store: PromptLibraryStore = Depends(get_store),
):
    return {"data": await category_services.create_category(store, data)}


@router.put("/{category_id}")
async def update_category(
    category_id: str,
    data: CategoryUpdate,
    user: UserRecord = Depends(get_current_user),
    store: PromptLibraryStore = Depends(get_store),
):
    return {"data": await category_services.update_category(store, category_id, data)}


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: str,
    user: UserRecord = Depends(get_current_user),
    store: PromptLibraryStore = Depends(get_store),
):
    await category_services.delete_category(store, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
