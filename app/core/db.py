# app/core/db.py

import ssl
from typing import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from app.core.config import (
    DATABASE_URL,
    DB_POOL_SIZE,
    DB_MAX_OVERFLOW,
    DB_POOL_TIMEOUT,
    DB_SSL_VERIFY,
    DB_ECHO_POOL,
    APP_ENV,
)

# =====================================================
# BASE
# =====================================================
Base = declarative_base()


# =====================================================
# ENGINE FACTORY
# =====================================================
def _postgres_options() -> dict:
    ssl_ctx = ssl.create_default_context()
    if not DB_SSL_VERIFY:
        ssl_ctx.check_hostname = False
        ssl_ctx.verify_mode = ssl.CERT_NONE

    return {
        "connect_args": {
            "ssl": ssl_ctx,
            # asyncpg behind a pooler cannot keep prepared statements
            "statement_cache_size": 0,
            "prepared_statement_cache_size": 0,
        },
        "pool_size": DB_POOL_SIZE,
        "max_overflow": DB_MAX_OVERFLOW,
        "pool_timeout": DB_POOL_TIMEOUT,
        "pool_pre_ping": True,
    }


def _enable_sqlite_foreign_keys(dbapi_connection, _):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str = DATABASE_URL, **overrides) -> AsyncEngine:
    """
    Create an async engine for `url`, picking driver options from its backend.

    Keyword overrides replace the derived options, e.g. a StaticPool for an
    in-memory SQLite database shared across sessions.
    """
    backend = make_url(url).get_backend_name()

    options = {"echo": False, "echo_pool": DB_ECHO_POOL}
    if backend == "postgresql":
        options.update(_postgres_options())
    elif backend == "sqlite":
        options["connect_args"] = {"check_same_thread": False}
    options.update(overrides)

    async_engine = create_async_engine(url, **options)

    # documents, invitations and activities rely on ON DELETE rules
    if backend == "sqlite":
        event.listen(async_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    return async_engine


def build_session_factory(bind: AsyncEngine) -> sessionmaker:
    return sessionmaker(
        bind=bind,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )


engine = build_engine()
AsyncSessionLocal = build_session_factory(engine)


# =====================================================
# DEPENDENCY
# =====================================================
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session


# =====================================================
# MODEL IMPORT
# =====================================================
import app.models  # noqa


# =====================================================
# DEV ONLY: AUTO CREATE TABLES
# =====================================================
async def init_models(bind: AsyncEngine = None):
    if APP_ENV != "development":
        raise RuntimeError("init_models() is forbidden outside development")

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
