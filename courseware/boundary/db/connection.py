"""
Database connection management.

One async engine per process, a session factory bound to it, and the
FastAPI dependency handing a session to each request.

Dependencies: sqlalchemy, courseware.configs
System role: Database connection lifecycle management
"""

from functools import lru_cache
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker

from courseware.configs import get_settings


@lru_cache
def get_async_engine() -> AsyncEngine:
    """
    Build the shared async engine from DatabaseSettings.

    PostgreSQL (asyncpg) gets a pre-pinged connection pool; a SQLite URL
    is accepted for local runs and uses SQLAlchemy's default pool.

    Returns:
        AsyncEngine: Process-wide engine
    """
    db_config = get_settings().database
    url = db_config.async_database_url

    if url.startswith("sqlite"):
        return create_async_engine(url, echo=db_config.echo_sql)

    return create_async_engine(
        url,
        echo=db_config.echo_sql,
        pool_size=db_config.pool_size,
        max_overflow=db_config.max_overflow,
        pool_timeout=db_config.pool_timeout,
        pool_pre_ping=True,
    )


def get_async_session_factory() -> async_sessionmaker:
    """
    Session factory used by requests and scripts.

    Objects stay readable after commit (``expire_on_commit=False``) because
    services serialize rows after committing. Flushes are explicit.

    Usage:
        async with get_async_session_factory()() as session:
            await course_crud.get(session, domain_id, course_id)
    """
    return async_sessionmaker(
        bind=get_async_engine(),
        autoflush=False,
        expire_on_commit=False,
    )


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency yielding one session per request.

    Services commit their own units of work; whatever is left open when
    the request ends is rolled back as the session closes.

    Yields:
        AsyncSession: Request-scoped session
    """
    async with get_async_session_factory()() as session:
        yield session
