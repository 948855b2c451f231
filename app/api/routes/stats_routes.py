# app/api/routes/stats_routes.py
from fastapi import APIRouter, Depends

from app.core.dependencies import get_store
from app.models.auth_models import UserRecord
from app.models.stats_models import Timeframe
from app.services import stats_services
from app.services.auth_services import get_current_user
from app.services.database.base_store import PromptLibraryStore

router = APIRouter(tags=["Stats"])


@router.get("")
async def overview(store: PromptLibraryStore = Depends(get_store)):
    return {"data": await stats_services.get_overview(store)}


@router.get("/activity")
async def activity(timeframe: Timeframe = "24h", store: PromptLibraryStore = Depends(get_store)):
    return {"data": await stats_services.get_activity_stats(store, timeframe)}


@router.get("/user")
async def user_stats(
    user: UserRecord = Depends(get_current_user),
    store: PromptLibraryStore = Depends(get_store),
):
    return {"data": await stats_services.get_user_stats(store, user)}
