# event_store/database.py
from __future__ import annotations

import os
from contextlib import asynccontextmanager
from typing import AsyncIterator, Mapping, Optional

from dotenv import load_dotenv
from fastapi import Request
from sqlalchemy.engine import URL
from sqlalchemy.engine.url import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

load_dotenv()


DEFAULT_DATABASE_URL = "postgresql+asyncpg://postgres@localhost:5432/events"


def _translate_sslmode(value: str) -> Optional[str]:
    """Translate libpq sslmode values to asyncpg-compatible flags."""

    normalized = value.strip().lower()
    if normalized in {"require", "verify-ca", "verify-full"}:
        return "true"
    if normalized == "disable":
        return "false"

    # "prefer" and "allow" have no asyncpg equivalent; leave the driver default.
    return None


def _normalize_database_url(raw_url: Optional[str], sslmode: Optional[str] = None) -> Optional[str]:
    """Ensure an async driver even if the URL omits it."""

    if not raw_url:
        return raw_url

    try:
        url = make_url(raw_url)
    except Exception:
        return raw_url

    driver = url.drivername.lower()
    if driver in {"postgresql", "postgres"} or (
        driver.startswith("postgresql+") and driver != "postgresql+asyncpg"
    ):
        url = url.set(drivername="postgresql+asyncpg")

    if url.drivername == "postgresql+asyncpg":
        query = dict(url.query)
        url_sslmode = query.pop("sslmode", None)
        if url_sslmode is None and "ssl" not in query:
            url_sslmode = sslmode
        if url_sslmode is not None:
            translated = _translate_sslmode(url_sslmode)
            if translated is not None:
                query["ssl"] = translated
        if query != dict(url.query):
            url = url.set(query=query)

    return url.render_as_string(hide_password=False)


def _pg_env_database_url(env: Mapping[str, str]) -> Optional[str]:
    """Construct a Postgres URL from libpq-style PG* env vars."""

    host = env.get("PGHOST")
    database = env.get("PGDATABASE")
    user = env.get("PGUSER")

    if not (host and database and user):
        return None

    port = env.get("PGPORT")
    password = env.get("PGPASSWORD") or None

    query: dict[str, str] = {}
    sslmode = env.get("PGSSLMODE")
    if sslmode:
        translated = _translate_sslmode(sslmode)
        if translated is not None:
            query["ssl"] = translated

    try:
        port_value = int(port) if port is not None else None
    except (TypeError, ValueError):
        port_value = None

    return URL.create(
        drivername="postgresql+asyncpg",
        username=user,
        password=password,
        host=host,
        port=port_value,
        database=database,
        query=query,
    ).render_as_string(hide_password=False)


def database_url_from_env(env: Mapping[str, str]) -> str:
    """Resolve the database URL from environment variables, falling back to the local default."""

    for key in ("DATABASE_URL", "POSTGRES_URL"):
        normalized = _normalize_database_url(env.get(key), env.get("PGSSLMODE"))
        if normalized:
            return normalized

    return _pg_env_database_url(env) or DEFAULT_DATABASE_URL


def mask_database_url(database_url: str) -> str:
    """Render a URL for logs with the password hidden."""

    try:
        return make_url(database_url).render_as_string(hide_password=True)
    except Exception:
        return "<unparseable database url>"


Base = declarative_base()


class Database:
    """Process-wide storage client: one async engine (and its pool) plus a session factory."""

    def __init__(self, database_url: str, *, echo: bool = False) -> None:
        self.url = database_url
        self.engine: AsyncEngine = create_async_engine(
            database_url,
            echo=echo,
            pool_pre_ping=True,
        )
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            autoflush=False,
            expire_on_commit=False,
        )

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Database":
        env = os.environ if env is None else env
        echo = env.get("SQLALCHEMY_ECHO", "0").lower() in {"1", "true", "yes"}
        return cls(database_url_from_env(env), echo=echo)

    async def connect(self) -> None:
        """Open a connection and make sure the events table exists."""

        # Register mapped classes with Base before create_all.
        import event_store.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        await self.engine.dispose()

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        async with self.session_factory() as session:
            yield session


async def get_db(request: Request) -> AsyncIterator[AsyncSession]:
    """FastAPI dependency that yields an AsyncSession from the app's storage client."""

    database: Database = request.app.state.database
    async with database.session() as session:
        yield session
