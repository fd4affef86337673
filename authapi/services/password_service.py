"""Password hashing with Argon2id.

The encoded hash string carries algorithm, parameters and salt, so stored
hashes stay verifiable if the parameters below are raised later.  The
argon2-cffi defaults (time_cost=3, memory_cost=64 MiB, parallelism=4) cost
more than bcrypt at 12 rounds on current hardware.

Hashing is CPU-bound.  The async variants run it on a worker thread so a
login does not stall every other request on the event loop.
"""

from __future__ import annotations

import asyncio
import logging
from functools import lru_cache

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from authapi.core.errors import PasswordHashError

logger = logging.getLogger(__name__)

_ph = PasswordHasher()


def hash_password(plain_password: str) -> str:
    if not plain_password:
        raise ValueError("password must be non-empty")
    return _ph.hash(plain_password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Return True when *plain_password* matches *password_hash*.

    A mismatch returns False.  A hash the primitive cannot parse raises
    PasswordHashError: that is a data problem, not a wrong password.
    """
    if not plain_password:
        return False
    try:
        return _ph.verify(password_hash, plain_password)
    except VerifyMismatchError:
        return False
    except (InvalidHashError, VerificationError) as exc:
        logger.error("Stored password hash could not be verified: %s", type(exc).__name__)
        raise PasswordHashError("stored password hash is malformed") from exc


async def hash_password_async(plain_password: str) -> str:
    return await asyncio.to_thread(hash_password, plain_password)


async def verify_password_async(plain_password: str, password_hash: str) -> bool:
    return await asyncio.to_thread(verify_password, plain_password, password_hash)


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return _ph.hash("timing-equalizer")


def _burn_verify(plain_password: str) -> None:
    verify_password(plain_password or "-", _dummy_hash())


async def burn_verify_async(plain_password: str) -> None:
    """Spend one verification's worth of CPU against a throwaway hash.

    Called when the email is unknown so the response time matches a
    wrong-password attempt.  The dummy hash is built on the worker
    thread too, never on the event loop.
    """
    await asyncio.to_thread(_burn_verify, plain_password)
