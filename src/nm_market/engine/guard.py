"""ReentrancyGuard — exclusive-execution lock for mutating marketplace calls.

Two layers:
  * an asyncio.Lock serializes mutating calls coming from independent
    requests (one mutation at a time, process-wide);
  * a ContextVar flag marks the call context that currently holds the lock.
    A nested call made from inside that context (e.g. a collaborator calling
    back into the marketplace mid-operation, or a task it spawns) sees the
    flag and is rejected instead of deadlocking on the lock.
"""
import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar

from src.nm_common.errors import ReentrancyRejectedError

logger = logging.getLogger(__name__)


class ReentrancyGuard:
    def __init__(self, name: str = "marketplace") -> None:
        self._lock = asyncio.Lock()
        self._in_flight: ContextVar[str | None] = ContextVar(f"{name}_in_flight", default=None)

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    @asynccontextmanager
    async def hold(self, operation: str) -> AsyncIterator[None]:
        active = self._in_flight.get()
        if active is not None:
            logger.warning("Rejected re-entrant %s during in-flight %s", operation, active)
            raise ReentrancyRejectedError(operation)
        async with self._lock:
            token = self._in_flight.set(operation)
            try:
                yield
            finally:
                self._in_flight.reset(token)
