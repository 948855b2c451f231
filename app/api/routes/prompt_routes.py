# app/api/routes/prompt_routes.py
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request, Response, status

from app.core.dependencies import get_store
from app.models.activity_models import ActivityAction
from app.models.auth_models import UserRecord
from app.models.prompt_models import PromptCreate, PromptFilter, PromptRenderRequest, PromptSort, PromptUpdate
from app.models.review_models import ReviewCreate
from app.services import prompt_services, review_services
from app.services.activity_services import client_address, schedule_activity
from app.services.auth_services import get_current_user, get_optional_user
from app.services.database.base_store import PromptLibraryStore

router = APIRouter(tags=["Prompts"])


def split_tags(tags: Optional[str]):
    return [tag.strip() for tag in (tags or "").split(",") if tag.strip()]


@router.get("")
async def list_prompts(
    category: Optional[str] = None,
    search: Optional[str] = None,
    tags: Optional[str] = Query(default=None, description="Comma-separated; matches prompts with any of them"),
    min_rating: Optional[float] = Query(default=None, alias="minRating", ge=0, le=5),
    user_id: Optional[str] = Query(default=None, alias="userId"),
    sort: PromptSort = "newest",
    limit: int = Query(default=50, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    store: PromptLibraryStore = Depends(get_store),
):
    prompt_filter = PromptFilter(
        category=None if category in (None, "", "all") else category,
        search=search or None,
        tags=split_tags(tags),
        min_rating=min_rating,
        user_id=user_id,
        sort=sort,
        limit=limit,
        offset=offset,
    )
    return {"data": await prompt_services.list_prompts(store, prompt_filter)}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_prompt(
    request: Request,
    data: PromptCreate,
    background_tasks: BackgroundTasks,
    user: UserRecord = Depends(get_current_user),
    store: PromptLibraryStore = Depends(get_store),
):
    prompt = await prompt_services.create_prompt(store, user, data)
    schedule_activity(background_tasks, store, request, ActivityAction.PROMPT_CREATED, user.id, {"promptId": prompt.id})
    return {"data": prompt}


@router.get("/{prompt_id}")
async def get_prompt(
    prompt_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    user: Optional[UserRecord] = Depends(get_optional_user),
    store: PromptLibraryStore = Depends(get_store),
):
    prompt = await prompt_services.get_prompt_detail(store, prompt_id)
    schedule_activity(
        background_tasks, store, request, ActivityAction.PROMPT_VIEWED, user.id if user else None, {"promptId": prompt_id}
    )
    return {"data": prompt}


@router.put("/{prompt_id}")
async def update_prompt(
    prompt_id: str,
    request: Request,
    data: PromptUpdate,
    background_tasks: BackgroundTasks,
    user: UserRecord = Depends(get_current_user),
    store: PromptLibraryStore = Depends(get_store),
):
    prompt = await prompt_services.update_prompt(store, prompt_id, user, data)
    schedule_activity(background_tasks, store, request, ActivityAction.PROMPT_EDITED, user.id, {"promptId": prompt_id})
    return {"data": prompt}


@router.delete("/{prompt_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_prompt(
    prompt_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    user: UserRecord = Depends(get_current_user),
    store: PromptLibraryStore = Depends(get_store),
):
    prompt = await prompt_services.delete_prompt(store, prompt_id, user)
    schedule_activity(
        background_tasks, store, request, ActivityAction.PROMPT_DELETED, user.id,
        {"promptId": prompt_id, "title": prompt.title},
    )
    return Response(status_code=status.HTTP_204_NO_CONTENT, background=background_tasks)


@router.post("/{prompt_id}/use")
async def use_prompt(
    prompt_id: str,
    request: Request,
    background_tasks: BackgroundTasks,
    user: Optional[UserRecord] = Depends(get_optional_user),
    store: PromptLibraryStore = Depends(get_store),
):
    """Count one use of the prompt."""
    prompt = await prompt_services.use_prompt(
        store,
        prompt_id,
        user,
        ip_address=client_address(request),
        user_agent=request.headers.get("user-agent"),
    )
    schedule_activity(
        background_tasks, store, request, ActivityAction.PROMPT_TESTED, user.id if user else None, {"promptId": prompt_id}
    )
    return {"message": "Usage tracked", "data": prompt}


@router.post("/{prompt_id}/render")
async def render_prompt(
    prompt_id: str,
    data: PromptRenderRequest,
    store: PromptLibraryStore = Depends(get_store),
):
    return {"data": await prompt_services.render_prompt(store, prompt_id, data.values)}


@router.post("/{prompt_id}/favorite", status_code=status.HTTP_201_CREATED)
async def add_favorite(
    prompt_id: str,
    user: UserRecord = Depends(get_current_user),
    store: PromptLibraryStore = Depends(get_store),
):
    return {"data": await prompt_services.add_favorite(store, prompt_id, user)}


@router.delete("/{prompt_id}/favorite", status_code=status.HTTP_204_NO_CONTENT)
async def remove_favorite(
    prompt_id: str,
    user: UserRecord = Depends(get_current_user),
    store: PromptLibraryStore = Depends(get_store),
):
    await prompt_services.remove_favorite(store, prompt_id, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{prompt_id}/reviews")
async def list_reviews(prompt_id: str, store: PromptLibraryStore = Depends(get_store)):
    await prompt_services.get_prompt_or_404(store, prompt_id)
    return {"data": await review_services.list_review_threads(store, prompt_id)}


@router.post("/{prompt_id}/review", status_code=status.HTTP_201_CREATED)
@router.post("/{prompt_id}/reviews", status_code=status.HTTP_201_CREATED)
async def add_review(
    prompt_id: str,
    request: Request,
    data: ReviewCreate,
    background_tasks: BackgroundTasks,
    user: UserRecord = Depends(get_current_user),
    store: PromptLibraryStore = Depends(get_store),
):
    review, prompt = await review_services.create_review(store, prompt_id, user, data)
    schedule_activity(
        background_tasks, store, request, ActivityAction.REVIEW_ADDED, user.id,
        {"promptId": prompt_id, "reviewId": review.id},
    )
    return {"data": review, "prompt": prompt}
