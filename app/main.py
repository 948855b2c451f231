# app/main.py
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.trustedhost import TrustedHostMiddleware

from app.api.routes import (
    auth_routes,
    category_routes,
    comment_routes,
    placeholder_routes,
    prompt_routes,
    review_routes,
    root_routes,
    search_routes,
    stats_routes,
    tag_routes,
)
from app.core.config import Settings, settings
from app.core.exceptions import register_exception_handlers
from app.core.security import configure_limiter, limiter
from app.core.startup import shutdown_event, startup_event


def configure_logging(app_settings: Settings):
    logging.basicConfig(
        level=getattr(logging, app_settings.LOG_LEVEL.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    app_settings = app_settings or settings
    configure_logging(app_settings)

    app = FastAPI(title=app_settings.APP_NAME, debug=app_settings.DEBUG)
    app.state.settings = app_settings
    app.state.limiter = limiter
    configure_limiter(app_settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(TrustedHostMiddleware, allowed_hosts=app_settings.allowed_hosts or ["*"])

    register_exception_handlers(app)

    app.include_router(root_routes.router)
    app.include_router(auth_routes.router, prefix="/api/auth")
    app.include_router(prompt_routes.router, prefix="/api/prompts")
    app.include_router(review_routes.router, prefix="/api/reviews")
    app.include_router(comment_routes.router, prefix="/api")
    app.include_router(category_routes.router, prefix="/api/categories")
    app.include_router(stats_routes.router, prefix="/api/stats")
    app.include_router(tag_routes.router, prefix="/api/tags")
    app.include_router(search_routes.router, prefix="/api/search")
    app.include_router(placeholder_routes.router, prefix="/api/placeholders")

    @app.on_event("startup")
    async def app_startup():
        await startup_event(app)

    @app.on_event("shutdown")
    async def app_shutdown():
        await shutdown_event(app)

    return app


app = create_app()
