# app/api/routes/review_routes.py
from fastapi import APIRouter, Depends, Response, status

from app.core.dependencies import get_store
from app.models.auth_models import UserRecord
from app.models.review_models import ReviewUpdate
from app.services import review_services
from app.services.auth_services import get_current_user
from app.services.database.base_store import PromptLibraryStore

router = APIRouter(tags=["Reviews"])


@router.put("/{review_id}")
async def update_review(
    review_id: str,
    data: ReviewUpdate,
    user: UserRecord = Depends(get_current_user),
    store: PromptLibraryStore = Depends(get_store),
):
    return {"data": await review_services.update_review(store, review_id, user, data)}


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_review(
    review_id: str,
    user: UserRecord = Depends(get_current_user),
    store: PromptLibraryStore = Depends(get_store),
):
    """Deletes the review and every follow-up under it."""
    await review_services.delete_review(store, review_id, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
