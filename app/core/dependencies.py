# app/core/dependencies.py
from fastapi import Request

from app.core.config import Settings
from app.services.database.base_store import PromptLibraryStore


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> PromptLibraryStore:
    """Dependency to provide the store opened at startup."""
    return request.app.state.store
