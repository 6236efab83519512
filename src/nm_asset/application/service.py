"""AssetApplicationService — custody registry use cases exposed over HTTP.

Mutations commit their own transaction; reads run without one.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.nm_asset.application.schemas import AssetResponse
from src.nm_asset.domain.repository import AssetRegistryProtocol
from src.nm_asset.infrastructure.persistence import AssetRegistry
from src.nm_common.errors import AssetNotFoundError

logger = logging.getLogger(__name__)


class AssetApplicationService:
    def __init__(self, registry: AssetRegistryProtocol | None = None) -> None:
        self._registry: AssetRegistryProtocol = registry or AssetRegistry()

    async def register(
        self, db: AsyncSession, asset_address: str, asset_id: int, owner_id: str
    ) -> AssetResponse:
        try:
            asset = await self._registry.register(db, asset_address, asset_id, owner_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("Asset %s#%s registered to %s", asset.asset_address, asset.asset_id, owner_id)
        return AssetResponse.from_asset(asset)

    async def get(self, db: AsyncSession, asset_address: str, asset_id: int) -> AssetResponse:
        asset = await self._registry.get(db, asset_address, asset_id)
        if asset is None:
            raise AssetNotFoundError(asset_address, asset_id)
        return AssetResponse.from_asset(asset)

    async def approve(
        self,
        db: AsyncSession,
        asset_address: str,
        asset_id: int,
        owner_id: str,
        operator_id: str | None,
    ) -> AssetResponse:
        try:
            asset = await self._registry.approve(db, asset_address, asset_id, owner_id, operator_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return AssetResponse.from_asset(asset)

    async def transfer(
        self,
        db: AsyncSession,
        asset_address: str,
        asset_id: int,
        from_owner: str,
        to_owner: str,
        operator: str,
    ) -> AssetResponse:
        try:
            asset = await self._registry.transfer(
                db, asset_address, asset_id, from_owner, to_owner, operator
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Asset %s#%s moved %s -> %s by %s",
            asset.asset_address, asset.asset_id, from_owner, to_owner, operator,
        )
        return AssetResponse.from_asset(asset)
