"""Integration tests for auth endpoints (requires running PG)."""

import uuid

import pytest
from httpx import AsyncClient

pytestmark = [pytest.mark.integration, pytest.mark.asyncio(loop_scope="session")]


class TestAuthFlow:
    async def test_register_login_refresh(self, client: AsyncClient) -> None:
        name = f"auth_{uuid.uuid4().hex[:8]}"
        resp = await client.post("/api/v1/auth/register", json={
            "username": name, "email": f"{name}@example.com", "password": "TestPass1",
        })
        assert resp.status_code == 201

        resp = await client.post("/api/v1/auth/login", json={
            "username": name, "password": "TestPass1",
        })
        assert resp.status_code == 200
        refresh = resp.json()["data"]["refresh_token"]

        resp = await client.post("/api/v1/auth/refresh", json={"refresh_token": refresh})
        assert resp.status_code == 200
        assert resp.json()["data"]["access_token"]

    async def test_duplicate_username(self, client: AsyncClient) -> None:
        name = f"dup_{uuid.uuid4().hex[:8]}"
        body = {"username": name, "email": f"{name}@example.com", "password": "TestPass1"}
        await client.post("/api/v1/auth/register", json=body)
        resp = await client.post(
            "/api/v1/auth/register", json={**body, "email": f"x{name}@example.com"}
        )
        assert resp.status_code == 409
        assert resp.json()["code"] == 1001

    async def test_wrong_password(self, client: AsyncClient) -> None:
        resp = await client.post("/api/v1/auth/login", json={
            "username": "ghost_user_9999", "password": "TestPass1",
        })
        assert resp.status_code == 401
        assert resp.json()["code"] == 1003
