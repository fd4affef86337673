"""MongoDB implementation of UserRepo (document backend)."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError, PyMongoError

from authapi.core.errors import DuplicateEmailError, StoreUnavailableError
from authapi.db import mongo
from authapi.models.user import NewUser, User
from authapi.repos.setup_gate import SetupGate

logger = logging.getLogger(__name__)


class MongoUserRepo:
    """Satisfies the UserRepo Protocol using MongoDB via motor.

    Documents use the store's native ObjectId key; the hex string is the
    user id everywhere outside this class.

    Nothing is inserted before the unique email index exists; index
    creation is retried on each write until it succeeds once.
    """

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._db = db
        self._collection = db[mongo.USERS_COLLECTION_NAME]
        self._indexes = SetupGate(self._create_indexes)

    @property
    def indexes_ready(self) -> bool:
        return self._indexes.done

    async def ensure_indexes(self) -> None:
        try:
            await self._indexes.ensure()
        except PyMongoError as exc:
            raise _unavailable("ensure_indexes", exc) from exc

    async def _create_indexes(self) -> None:
        await mongo.ensure_indexes(self._db)

    async def find_by_id(self, user_id: str) -> User | None:
        try:
            key = ObjectId(user_id)
        except (InvalidId, TypeError):
            return None
        return await self._find_one({"_id": key}, "find_by_id")

    async def find_by_email(self, email: str) -> User | None:
        return await self._find_one({"email": email}, "find_by_email")

    async def create(self, data: NewUser) -> User:
        await self.ensure_indexes()

        # BSON dates keep milliseconds; truncate so the returned User matches a re-read
        now = datetime.now(UTC)
        now = now.replace(microsecond=now.microsecond // 1000 * 1000)
        doc: dict[str, Any] = {
            "email": data.email,
            "passwordHash": data.password_hash,
            "firstName": data.first_name,
            "lastName": data.last_name,
            "isActive": True,
            "createdAt": now,
            "updatedAt": now,
        }
        try:
            result = await self._collection.insert_one(doc)
        except DuplicateKeyError as exc:
            logger.info("Unique index rejected email=%s", data.email)
            raise DuplicateEmailError(f"email already exists: {data.email}") from exc
        except PyMongoError as exc:
            raise _unavailable("create", exc) from exc

        doc["_id"] = result.inserted_id
        return _doc_to_user(doc)

    async def _find_one(self, query: dict[str, Any], op: str) -> User | None:
        try:
            doc = await self._collection.find_one(query)
        except PyMongoError as exc:
            raise _unavailable(op, exc) from exc
        if doc is None:
            return None
        return _doc_to_user(doc)


def _unavailable(op: str, exc: BaseException) -> StoreUnavailableError:
    logger.error("MongoDB %s failed: %s", op, type(exc).__name__)
    return StoreUnavailableError(f"mongodb {op} failed")


def _doc_to_user(doc: dict[str, Any]) -> User:
    return User(
        id=str(doc["_id"]),
        email=doc["email"],
        password_hash=doc["passwordHash"],
        first_name=doc["firstName"],
        last_name=doc["lastName"],
        is_active=doc.get("isActive", True),
        created_at=doc["createdAt"],
        updated_at=doc["updatedAt"],
    )
