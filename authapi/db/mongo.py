"""Motor client construction and index management for the document backend."""

from __future__ import annotations

import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING

logger = logging.getLogger(__name__)

USERS_COLLECTION_NAME = "users"


def build_client(uri: str) -> AsyncIOMotorClient:
    """Create a pooled client.  Motor connects lazily, so this never blocks."""
    return AsyncIOMotorClient(
        uri,
        serverSelectionTimeoutMS=5000,  # fail fast instead of the 30s default
        connectTimeoutMS=5000,
        socketTimeoutMS=30000,
        maxPoolSize=10,
        retryWrites=True,
        retryReads=True,
        tz_aware=True,
    )


async def ping(client: AsyncIOMotorClient) -> None:
    await client.admin.command("ping")


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create the users indexes.  The unique email index backs DuplicateEmailError."""
    users = db[USERS_COLLECTION_NAME]
    await users.create_index([("email", ASCENDING)], name="idx_users_email", unique=True)
    await users.create_index([("createdAt", DESCENDING)], name="idx_users_created_at")
    logger.info("MongoDB indexes ensured on %s", USERS_COLLECTION_NAME)
