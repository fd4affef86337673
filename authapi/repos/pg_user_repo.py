"""PostgreSQL implementation of UserRepo (relational backend)."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Awaitable, Callable

from sqlalchemy import select
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from authapi.core.errors import DuplicateEmailError, StoreUnavailableError
from authapi.db.tables import UserRow
from authapi.models.user import NewUser, User
from authapi.repos.setup_gate import SetupGate

logger = logging.getLogger(__name__)

# Driver, pool and socket failures.  IntegrityError subclasses DBAPIError,
# so it must be caught before this tuple.
_UNAVAILABLE = (DBAPIError, PoolTimeoutError, OSError)


class PgUserRepo:
    """Satisfies the UserRepo Protocol using PostgreSQL via async SQLAlchemy.

    Each call opens its own short-lived session from the shared factory,
    so one repo instance serves all concurrent requests.

    *prepare* (dev only: create missing tables) runs before the first
    query and is retried on later calls until it succeeds.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        prepare: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._schema = SetupGate(prepare) if prepare is not None else None

    async def ensure_schema(self) -> None:
        if self._schema is None:
            return
        try:
            await self._schema.ensure()
        except _UNAVAILABLE as exc:
            raise _unavailable("ensure_schema", exc) from exc

    async def find_by_id(self, user_id: str) -> User | None:
        try:
            key = uuid.UUID(user_id)
        except (ValueError, TypeError, AttributeError):
            # Not a UUID, so it cannot name a row in this table
            return None
        return await self._find_one(select(UserRow).where(UserRow.id == key), "find_by_id")

    async def find_by_email(self, email: str) -> User | None:
        return await self._find_one(
            select(UserRow).where(UserRow.email == email), "find_by_email"
        )

    async def create(self, data: NewUser) -> User:
        await self.ensure_schema()
        row = UserRow(
            email=data.email,
            password_hash=data.password_hash,
            first_name=data.first_name,
            last_name=data.last_name,
            is_active=True,
        )
        try:
            async with self._session_factory() as session:
                session.add(row)
                try:
                    await session.commit()
                except IntegrityError as exc:
                    await session.rollback()
                    logger.info("Unique constraint rejected email=%s", data.email)
                    raise DuplicateEmailError(f"email already exists: {data.email}") from exc
                # Pull server-side defaults (timestamps) back onto the row
                await session.refresh(row)
                return _row_to_user(row)
        except _UNAVAILABLE as exc:
            raise _unavailable("create", exc) from exc

    async def _find_one(self, stmt, op: str) -> User | None:
        await self.ensure_schema()
        try:
            async with self._session_factory() as session:
                row = (await session.execute(stmt)).scalar_one_or_none()
        except _UNAVAILABLE as exc:
            raise _unavailable(op, exc) from exc
        if row is None:
            return None
        return _row_to_user(row)


def _unavailable(op: str, exc: BaseException) -> StoreUnavailableError:
    logger.error("PostgreSQL %s failed: %s", op, type(exc).__name__)
    return StoreUnavailableError(f"postgres {op} failed")


def _row_to_user(row: UserRow) -> User:
    return User(
        id=str(row.id),
        email=row.email,
        password_hash=row.password_hash,
        first_name=row.first_name,
        last_name=row.last_name,
        is_active=row.is_active,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )
