# alembic/env.py

import asyncio
import os
import sys
from logging.config import fileConfig

from alembic import context
from dotenv import load_dotenv
from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

# --- Path Handling ---
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, PROJECT_ROOT)

# Loaded before the settings import so .env values are visible to it
load_dotenv(os.path.join(PROJECT_ROOT, ".env"))

# --- Model Imports ---
from app.data.database import Base
from app.models.database_models.category import Category
from app.models.database_models.comment import Comment
from app.models.database_models.favorite import Favorite
from app.models.database_models.prompt import Prompt
from app.models.database_models.prompt_usage import PromptUsage
from app.models.database_models.review import Review
from app.models.database_models.user import User
from app.models.database_models.user_activity import UserActivity

from app.core.config import settings

# --- Alembic Configuration ---
config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    context.configure(
        url=settings.async_database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=settings.async_database_url.startswith("sqlite"),
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection) -> None:
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        render_as_batch=connection.dialect.name == "sqlite",
    )
    with context.begin_transaction():
        context.run_migrations()


async def run_migrations_online() -> None:
    connectable = create_async_engine(settings.async_database_url, poolclass=pool.NullPool)
    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)
    await connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
