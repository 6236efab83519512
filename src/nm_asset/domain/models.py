"""Asset custody domain model — pure dataclass, no SQLAlchemy dependency."""
from dataclasses import dataclass
from datetime import datetime


def normalize_address(asset_address: str) -> str:
    """Asset addresses are case-insensitive; store and compare them lowercased."""
    return asset_address.strip().lower()


@dataclass
class Asset:
    asset_address: str
    asset_id: int
    owner_id: str
    approved_id: str | None = None  # single operator allowed to move the asset
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def transfer_rejection(self, from_owner: str, operator: str) -> str | None:
        """Reason a custody transfer must be refused, or None when it is authorized."""
        if self.owner_id != from_owner:
            return f"{from_owner} is not the owner"
        if operator != self.owner_id and operator != self.approved_id:
            return f"{operator} is neither owner nor approved operator"
        return None
