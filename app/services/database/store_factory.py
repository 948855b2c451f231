# app/services/database/store_factory.py
from app.core.config import Settings
from app.services.database.base_store import PromptLibraryStore
from app.services.database.json_store import JsonFileStore
from app.services.database.sql_store import SqlAlchemyStore
from app.services.database.supabase_store import SupabaseStore


def build_store(app_settings: Settings) -> PromptLibraryStore:
    backend = app_settings.STORAGE_BACKEND.lower()
    if backend == "sql":
        return SqlAlchemyStore(
            app_settings.async_database_url,
            auto_create=app_settings.DB_AUTO_CREATE,
            echo=app_settings.DEBUG,
        )
    if backend == "json":
        return JsonFileStore(app_settings.DATA_DIR)
    if backend == "supabase":
        return SupabaseStore(app_settings.SUPABASE_URL, app_settings.SUPABASE_SERVICE_KEY)
    raise ValueError(f"Unknown STORAGE_BACKEND '{app_settings.STORAGE_BACKEND}' (expected sql, json or supabase)")
