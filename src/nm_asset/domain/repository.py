"""AssetRegistry Protocol — the custody interface the marketplace depends on.

transfer() must be all-or-nothing: it either moves custody and clears the
approval, or raises AssetTransferError leaving the row untouched.
"""
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.nm_asset.domain.models import Asset


class AssetRegistryProtocol(Protocol):
    async def get(
        self, db: AsyncSession, asset_address: str, asset_id: int
    ) -> Asset | None: ...

    async def register(
        self, db: AsyncSession, asset_address: str, asset_id: int, owner_id: str
    ) -> Asset: ...

    async def approve(
        self,
        db: AsyncSession,
        asset_address: str,
        asset_id: int,
        owner_id: str,
        operator_id: str | None,
    ) -> Asset: ...

    async def transfer(
        self,
        db: AsyncSession,
        asset_address: str,
        asset_id: int,
        from_owner: str,
        to_owner: str,
        operator: str,
    ) -> Asset: ...
