# app/api/routes/root_routes.py
from fastapi import APIRouter, Depends

from app.core.config import Settings
from app.core.dependencies import get_settings, get_store
from app.models.common import utc_now
from app.services.database.base_store import PromptLibraryStore

router = APIRouter(tags=["Health"])


@router.get("/health")
@router.get("/api/health")
async def health(
    store: PromptLibraryStore = Depends(get_store),
    app_settings: Settings = Depends(get_settings),
):
    return {
        "status": "healthy",
        "timestamp": utc_now().isoformat(),
        "storage": store.backend_name,
        "environment": app_settings.ENVIRONMENT,
    }
