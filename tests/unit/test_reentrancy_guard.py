"""Unit tests for ReentrancyGuard."""
import asyncio

import pytest

from src.nm_common.errors import ReentrancyRejectedError
from src.nm_market.engine.guard import ReentrancyGuard


class TestReentrancyGuard:
    async def test_holds_lock_inside(self) -> None:
        guard = ReentrancyGuard()
        async with guard.hold("list"):
            assert guard.locked
        assert not guard.locked

    async def test_nested_hold_rejected(self) -> None:
        guard = ReentrancyGuard()
        async with guard.hold("buy"):
            with pytest.raises(ReentrancyRejectedError) as exc_info:
                async with guard.hold("list"):
                    pass
        assert "list" in exc_info.value.message

    async def test_nested_hold_rejected_from_child_task(self) -> None:
        guard = ReentrancyGuard()

        async def nested() -> None:
            async with guard.hold("cancel"):
                pass

        async with guard.hold("buy"):
            with pytest.raises(ReentrancyRejectedError):
                await asyncio.create_task(nested())

    async def test_released_after_exception(self) -> None:
        guard = ReentrancyGuard()
        with pytest.raises(RuntimeError):
            async with guard.hold("buy"):
                raise RuntimeError("boom")
        async with guard.hold("buy"):
            assert guard.locked

    async def test_independent_callers_serialize(self) -> None:
        guard = ReentrancyGuard()
        trace: list[str] = []

        async def op(name: str) -> None:
            async with guard.hold(name):
                trace.append(f"{name}:in")
                await asyncio.sleep(0)
                trace.append(f"{name}:out")

        await asyncio.gather(op("a"), op("b"))
        assert trace == ["a:in", "a:out", "b:in", "b:out"]
