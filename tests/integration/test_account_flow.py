"""Integration tests for nm_account endpoints (requires running PG)."""

import pytest
from httpx import AsyncClient

from integration_helpers import register_and_login

pytestmark = [pytest.mark.integration, pytest.mark.asyncio(loop_scope="session")]


class TestAccountFlow:
    async def test_unauthenticated_returns_401(self, client: AsyncClient) -> None:
        resp = await client.get("/api/v1/account/balance")
        assert resp.status_code == 401

    async def test_deposit_withdraw_ledger(self, client: AsyncClient) -> None:
        headers, _ = await register_and_login(client)

        balance = (await client.get("/api/v1/account/balance", headers=headers)).json()["data"]
        assert balance["available_balance"] == 0

        await client.post("/api/v1/account/deposit", json={"amount": 3_000_000}, headers=headers)
        resp = await client.post(
            "/api/v1/account/withdraw", json={"amount": 1_000_000}, headers=headers
        )
        assert resp.json()["data"]["available_balance"] == 2_000_000

        resp = await client.post(
            "/api/v1/account/withdraw", json={"amount": 9_000_000}, headers=headers
        )
        assert resp.json()["code"] == 2001

        ledger = (await client.get("/api/v1/account/ledger", headers=headers)).json()["data"]
        assert [e["entry_type"] for e in ledger["items"]] == ["WITHDRAW", "DEPOSIT"]
