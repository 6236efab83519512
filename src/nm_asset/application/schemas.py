from pydantic import BaseModel, Field

from src.nm_asset.domain.models import Asset


class RegisterAssetRequest(BaseModel):
    asset_address: str = Field(..., min_length=1, max_length=128)
    asset_id: int = Field(..., ge=0)


class ApproveRequest(BaseModel):
    operator_id: str | None = Field(None, max_length=64, description="None revokes approval")


class TransferRequest(BaseModel):
    to_owner: str = Field(..., min_length=1, max_length=64)
    from_owner: str | None = Field(
        None, max_length=64, description="Defaults to the caller; set when acting as operator"
    )


class AssetResponse(BaseModel):
    asset_address: str
    asset_id: int
    owner_id: str
    approved_id: str | None

    @classmethod
    def from_asset(cls, asset: Asset) -> "AssetResponse":
        return cls(
            asset_address=asset.asset_address,
            asset_id=asset.asset_id,
            owner_id=asset.owner_id,
            approved_id=asset.approved_id,
        )
