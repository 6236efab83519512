"""Unit tests for AssetApplicationService (mocked registry)."""
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.nm_asset.application.service import AssetApplicationService
from src.nm_asset.domain.models import Asset
from src.nm_common.errors import AssetNotFoundError, AssetTransferError


def _asset(owner: str = "alice", approved: str | None = None) -> Asset:
    return Asset(asset_address="0xabc", asset_id=7, owner_id=owner, approved_id=approved)


class TestAssetService:
    async def test_register_commits(self) -> None:
        registry = AsyncMock()
        registry.register.return_value = _asset()
        db = AsyncMock()

        result = await AssetApplicationService(registry=registry).register(db, "0xabc", 7, "alice")

        assert result.owner_id == "alice"
        db.commit.assert_awaited_once()

    async def test_get_missing(self) -> None:
        registry = AsyncMock()
        registry.get.return_value = None

        with pytest.raises(AssetNotFoundError):
            await AssetApplicationService(registry=registry).get(MagicMock(), "0xabc", 7)

    async def test_approve_returns_operator(self) -> None:
        registry = AsyncMock()
        registry.approve.return_value = _asset(approved="op")

        result = await AssetApplicationService(registry=registry).approve(
            AsyncMock(), "0xabc", 7, "alice", "op"
        )
        assert result.approved_id == "op"

    async def test_transfer_rejection_rolls_back(self) -> None:
        registry = AsyncMock()
        registry.transfer.side_effect = AssetTransferError("0xabc", 7, "nope")
        db = AsyncMock()

        with pytest.raises(AssetTransferError):
            await AssetApplicationService(registry=registry).transfer(
                db, "0xabc", 7, "bob", "carol", "bob"
            )
        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()
