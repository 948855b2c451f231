# app/api/routes/comment_routes.py
from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response, status

from app.core.dependencies import get_store
from app.models.activity_models import ActivityAction
from app.models.auth_models import UserRecord
from app.models.comment_models import CommentCreate, CommentUpdate
from app.services import comment_services
from app.services.activity_services import schedule_activity
from app.services.auth_services import get_current_user
from app.services.database.base_store import PromptLibraryStore

router = APIRouter(tags=["Comments"])


@router.get("/prompts/{prompt_id}/comments")
async def list_comments(prompt_id: str, store: PromptLibraryStore = Depends(get_store)):
    return {"data": await comment_services.list_comment_threads(store, prompt_id)}


@router.post("/prompts/{prompt_id}/comments", status_code=status.HTTP_201_CREATED)
async def create_comment(
    prompt_id: str,
    request: Request,
    data: CommentCreate,
    background_tasks: BackgroundTasks,
    user: UserRecord = Depends(get_current_user),
    store: PromptLibraryStore = Depends(get_store),
):
    comment = await comment_services.create_comment(store, prompt_id, user, data)
    schedule_activity(
        background_tasks, store, request, ActivityAction.COMMENT_ADDED, user.id,
        {"promptId": prompt_id, "commentId": comment.id},
    )
    return {"data": comment}


@router.put("/comments/{comment_id}")
async def update_comment(
    comment_id: str,
    data: CommentUpdate,
    user: UserRecord = Depends(get_current_user),
    store: PromptLibraryStore = Depends(get_store),
):
    return {"data": await comment_services.update_comment(store, comment_id, user, data)}


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    comment_id: str,
    user: UserRecord = Depends(get_current_user),
    store: PromptLibraryStore = Depends(get_store),
):
    await comment_services.delete_comment(store, comment_id, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
