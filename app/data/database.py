# app/data/database.py
import logging

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker

logger = logging.getLogger(__name__)

Base = declarative_base()


def create_engine_for_url(async_database_url: str, echo: bool = False) -> AsyncEngine:
    engine = create_async_engine(async_database_url, echo=echo)
    if engine.dialect.name == "sqlite":
        @event.listens_for(engine.sync_engine, "connect")
        def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()
    return engine


def create_session_factory(engine: AsyncEngine):
    return sessionmaker(
        autocommit=False, autoflush=False, bind=engine, class_=AsyncSession, expire_on_commit=False
    )


async def create_tables(engine: AsyncEngine):
    # Table modules register themselves on Base.metadata when imported
    from app.models.database_models import (  # noqa: F401
        category,
        comment,
        favorite,
        prompt,
        prompt_usage,
        review,
        user,
        user_activity,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables are in place.")
