"""AssetRegistry — raw SQL custody registry.

Ownership changes are single conditional UPDATE ... RETURNING statements, so
a concurrent writer can never observe a half-applied transfer. A zero-row
result is diagnosed afterwards to produce a precise rejection reason.
"""
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.nm_asset.domain.models import Asset, normalize_address
from src.nm_common.errors import (
    AssetAlreadyRegisteredError,
    AssetNotFoundError,
    AssetTransferError,
)

_COLUMNS = "asset_address, asset_id, owner_id, approved_id, created_at, updated_at"

_GET_ASSET_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM assets
    WHERE asset_address = :asset_address AND asset_id = :asset_id
    FOR UPDATE
""")

_INSERT_ASSET_SQL = text(f"""
    INSERT INTO assets (asset_address, asset_id, owner_id)
    VALUES (:asset_address, :asset_id, :owner_id)
    ON CONFLICT (asset_address, asset_id) DO NOTHING
    RETURNING {_COLUMNS}
""")

_APPROVE_SQL = text(f"""
    UPDATE assets
    SET approved_id = :operator_id, updated_at = NOW()
    WHERE asset_address = :asset_address AND asset_id = :asset_id
      AND owner_id = :owner_id
    RETURNING {_COLUMNS}
""")

_TRANSFER_SQL = text(f"""
    UPDATE assets
    SET owner_id = :to_owner, approved_id = NULL, updated_at = NOW()
    WHERE asset_address = :asset_address AND asset_id = :asset_id
      AND owner_id = :from_owner
      AND (owner_id = :operator OR approved_id = :operator)
    RETURNING {_COLUMNS}
""")


def _row_to_asset(row: Any) -> Asset:
    return Asset(
        asset_address=row.asset_address,
        asset_id=int(row.asset_id),
        owner_id=row.owner_id,
        approved_id=row.approved_id,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class AssetRegistry:
    """Concrete implementation of AssetRegistryProtocol using raw SQL."""

    async def get(
        self, db: AsyncSession, asset_address: str, asset_id: int
    ) -> Asset | None:
        result = await db.execute(
            _GET_ASSET_SQL,
            {"asset_address": normalize_address(asset_address), "asset_id": asset_id},
        )
        row = result.fetchone()
        return _row_to_asset(row) if row else None

    async def register(
        self, db: AsyncSession, asset_address: str, asset_id: int, owner_id: str
    ) -> Asset:
        address = normalize_address(asset_address)
        result = await db.execute(
            _INSERT_ASSET_SQL,
            {"asset_address": address, "asset_id": asset_id, "owner_id": owner_id},
        )
        row = result.fetchone()
        if row is None:
            raise AssetAlreadyRegisteredError(address, asset_id)
        return _row_to_asset(row)

    async def approve(
        self,
        db: AsyncSession,
        asset_address: str,
        asset_id: int,
        owner_id: str,
        operator_id: str | None,
    ) -> Asset:
        address = normalize_address(asset_address)
        result = await db.execute(
            _APPROVE_SQL,
            {
                "asset_address": address,
                "asset_id": asset_id,
                "owner_id": owner_id,
                "operator_id": operator_id,
            },
        )
        row = result.fetchone()
        if row is None:
            if await self.get(db, address, asset_id) is None:
                raise AssetNotFoundError(address, asset_id)
            raise AssetTransferError(address, asset_id, f"{owner_id} is not the owner")
        return _row_to_asset(row)

    async def transfer(
        self,
        db: AsyncSession,
        asset_address: str,
        asset_id: int,
        from_owner: str,
        to_owner: str,
        operator: str,
    ) -> Asset:
        address = normalize_address(asset_address)
        result = await db.execute(
            _TRANSFER_SQL,
            {
                "asset_address": address,
                "asset_id": asset_id,
                "from_owner": from_owner,
                "to_owner": to_owner,
                "operator": operator,
            },
        )
        row = result.fetchone()
        if row is not None:
            return _row_to_asset(row)

        current = await self.get(db, address, asset_id)
        if current is None:
            raise AssetTransferError(address, asset_id, "asset is not registered")
        reason = current.transfer_rejection(from_owner, operator) or "concurrent ownership change"
        raise AssetTransferError(address, asset_id, reason)
