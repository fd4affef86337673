"""Backend selection: build the one UserRepo this process will use.

DATABASE_DRIVER is read once at startup; the resulting adapter is handed
to AuthService and never swapped.  This is the only place that knows
which backend is active.

A store that is down at startup does not stop the process.  The failure
is logged, the app keeps serving, and every storage call answers with
StoreUnavailableError until the store comes back.  Index and schema setup
live in the adapters and are retried on use and on every health ping, so
a store that recovers later still gets its unique email guard.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from functools import partial

from pymongo.errors import PyMongoError
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError

from authapi.core.config import Settings
from authapi.core.errors import StoreUnavailableError
from authapi.db import engine as db_engine
from authapi.db import mongo
from authapi.repos.mongo_user_repo import MongoUserRepo
from authapi.repos.pg_user_repo import PgUserRepo
from authapi.repos.user_repo import UserRepo

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActiveStore:
    driver: str
    repo: UserRepo
    ping: Callable[[], Awaitable[None]]


@asynccontextmanager
async def open_user_repo(settings: Settings) -> AsyncIterator[ActiveStore]:
    if settings.uses_document_store:
        async with _open_mongo(settings) as store:
            yield store
    else:
        async with _open_postgres(settings) as store:
            yield store


@asynccontextmanager
async def _open_mongo(settings: Settings) -> AsyncIterator[ActiveStore]:
    client = mongo.build_client(settings.mongodb_uri)
    repo = MongoUserRepo(client[settings.mongodb_database])

    async def _ping() -> None:
        await mongo.ping(client)
        await repo.ensure_indexes()

    try:
        await _ping()
        logger.info("Connected to MongoDB database=%s", settings.mongodb_database)
    except (PyMongoError, StoreUnavailableError) as exc:
        logger.warning(
            "MongoDB connection failed (%s); serving without a database",
            type(exc).__name__,
        )

    try:
        yield ActiveStore(driver="document", repo=repo, ping=_ping)
    finally:
        client.close()
        logger.info("MongoDB client closed")


@asynccontextmanager
async def _open_postgres(settings: Settings) -> AsyncIterator[ActiveStore]:
    engine = db_engine.build_engine(settings.database_url, echo=settings.is_dev)
    repo = PgUserRepo(
        db_engine.build_session_factory(engine),
        prepare=partial(db_engine.create_schema, engine) if settings.is_dev else None,
    )

    async def _ping() -> None:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        await repo.ensure_schema()

    try:
        await _ping()
        logger.info("Connected to PostgreSQL %s", engine.url.render_as_string())
    except (DBAPIError, OSError, StoreUnavailableError) as exc:
        logger.warning(
            "PostgreSQL connection failed (%s); serving without a database",
            type(exc).__name__,
        )

    try:
        yield ActiveStore(driver="relational", repo=repo, ping=_ping)
    finally:
        await engine.dispose()
        logger.info("Database engine disposed")
