# app/core/startup.py
import logging

from fastapi import FastAPI

from app.core.config import DEFAULT_JWT_SECRET
from app.services.category_services import seed_default_categories
from app.services.database.store_factory import build_store

logger = logging.getLogger(__name__)


async def startup_event(app: FastAPI):
    """
    Open the configured store on application startup.
    """
    app_settings = app.state.settings
    if app_settings.JWT_SECRET == DEFAULT_JWT_SECRET:
        logger.warning("JWT_SECRET is the development default. Set it before deploying.")

    try:
        store = build_store(app_settings)
        await store.connect()
        app.state.store = store
        logger.info(f"Storage backend '{store.backend_name}' ready.")

        if app_settings.SEED_DEFAULT_CATEGORIES:
            await seed_default_categories(store)

    except Exception as e:
        logger.critical(f"Failed to startup: {e}")
        raise


async def shutdown_event(app: FastAPI):
    store = getattr(app.state, "store", None)
    if store is not None:
        await store.close()
        logger.info("Storage backend closed.")
