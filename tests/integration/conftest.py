"""Integration-test fixtures.

Require a PostgreSQL with `alembic upgrade head` applied. All integration
tests share a single event loop so that the module-level SQLAlchemy async
engine pool (created at import time) remains valid across the session.
"""

import os

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.main import app


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Skip unless NM_INTEGRATION=1; these need a migrated database."""
    if os.environ.get("NM_INTEGRATION") == "1":
        return
    skip = pytest.mark.skip(reason="set NM_INTEGRATION=1 with a migrated PostgreSQL")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client — keeps the engine pool alive."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
