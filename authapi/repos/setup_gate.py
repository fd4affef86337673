"""One-time store setup (indexes, schema) that retries until it succeeds.

A store that is down at startup still needs its unique email guard once
it comes back, so adapters run their setup through a gate on first use
instead of relying on the boot attempt alone.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable


class SetupGate:
    def __init__(self, setup: Callable[[], Awaitable[None]]) -> None:
        self._setup = setup
        self._done = False
        self._lock = asyncio.Lock()

    @property
    def done(self) -> bool:
        return self._done

    async def ensure(self) -> None:
        """Run the setup unless a previous call already completed it.

        A failed attempt propagates and leaves the gate open for the next call.
        """
        if self._done:
            return
        async with self._lock:
            if self._done:
                return
            await self._setup()
            self._done = True
