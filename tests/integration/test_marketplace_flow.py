"""End-to-end marketplace flow against PostgreSQL (requires migrations applied)."""

import uuid

import pytest
from httpx import AsyncClient

from integration_helpers import register_and_login

pytestmark = [pytest.mark.integration, pytest.mark.asyncio(loop_scope="session")]

UNIT = 1_000_000


async def _commission(client: AsyncClient) -> int:
    resp = await client.get("/api/v1/marketplace/commission")
    return resp.json()["data"]["commission"]


class TestMarketplaceFlow:
    async def test_list_buy_settles(self, client: AsyncClient) -> None:
        seller_h, seller_id = await register_and_login(client)
        buyer_h, buyer_id = await register_and_login(client)
        address = f"0x{uuid.uuid4().hex}"
        commission = await _commission(client)

        await client.post("/api/v1/account/deposit", json={"amount": 150 * UNIT}, headers=buyer_h)
        resp = await client.post(
            "/api/v1/assets", json={"asset_address": address, "asset_id": 7}, headers=seller_h
        )
        assert resp.status_code == 201

        resp = await client.post(
            "/api/v1/marketplace/orders",
            json={"asset_address": address, "asset_id": 7, "price": 100 * UNIT},
            headers=seller_h,
        )
        assert resp.status_code == 201
        order_id = resp.json()["data"]["order_id"]

        on_sale = (await client.get("/api/v1/marketplace/orders")).json()["data"]["items"]
        assert order_id in {o["order_id"] for o in on_sale}

        resp = await client.post(
            f"/api/v1/marketplace/orders/{order_id}/buy",
            json={"value": 110 * UNIT},
            headers=buyer_h,
        )
        assert resp.status_code == 200
        assert resp.json()["data"]["refund"] == 10 * UNIT

        seller_bal = (await client.get("/api/v1/account/balance", headers=seller_h)).json()
        buyer_bal = (await client.get("/api/v1/account/balance", headers=buyer_h)).json()
        assert seller_bal["data"]["available_balance"] == 100 * UNIT - commission
        assert buyer_bal["data"]["available_balance"] == 50 * UNIT

        asset = (await client.get(f"/api/v1/assets/{address}/7")).json()["data"]
        assert asset["owner_id"] == buyer_id

        again = await client.post(
            f"/api/v1/marketplace/orders/{order_id}/buy",
            json={"value": 110 * UNIT},
            headers=buyer_h,
        )
        assert again.json()["code"] == 4004

        purchases = (
            await client.get(f"/api/v1/marketplace/users/{buyer_id}/purchases")
        ).json()["data"]["items"]
        assert [p["order_id"] for p in purchases] == [order_id]
        listings = (
            await client.get(f"/api/v1/marketplace/users/{seller_id}/listings")
        ).json()["data"]["items"]
        assert listings[0]["status"] == "SOLD"

    async def test_failed_purchase_keeps_order_open(self, client: AsyncClient) -> None:
        seller_h, _ = await register_and_login(client)
        buyer_h, _ = await register_and_login(client)
        address = f"0x{uuid.uuid4().hex}"

        await client.post(
            "/api/v1/assets", json={"asset_address": address, "asset_id": 1}, headers=seller_h
        )
        resp = await client.post(
            "/api/v1/marketplace/orders",
            json={"asset_address": address, "asset_id": 1, "price": 5 * UNIT},
            headers=seller_h,
        )
        order_id = resp.json()["data"]["order_id"]

        resp = await client.post(
            f"/api/v1/marketplace/orders/{order_id}/buy",
            json={"value": 5 * UNIT},
            headers=buyer_h,
        )
        assert resp.json()["code"] == 4005

        record = (await client.get(f"/api/v1/marketplace/orders/{order_id}")).json()["data"]
        assert record["status"] == "OPEN"
        asset = (await client.get(f"/api/v1/assets/{address}/1")).json()["data"]
        assert asset["owner_id"] == "MARKETPLACE_ESCROW"

        resp = await client.post(
            f"/api/v1/marketplace/orders/{order_id}/cancel", headers=seller_h
        )
        assert resp.status_code == 200
