"""nm_asset REST API — custody registry."""
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.nm_asset.application.schemas import ApproveRequest, RegisterAssetRequest, TransferRequest
from src.nm_asset.application.service import AssetApplicationService
from src.nm_common.database import get_db_session
from src.nm_common.response import ApiResponse, success_response
from src.nm_gateway.auth.dependencies import get_current_user
from src.nm_gateway.user.db_models import UserModel

router = APIRouter(prefix="/assets", tags=["assets"])

_service = AssetApplicationService()


@router.post("", status_code=201)
async def register_asset(
    body: RegisterAssetRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.register(db, body.asset_address, body.asset_id, str(current_user.id))
    return success_response(data.model_dump(), request)


@router.get("/{asset_address}/{asset_id}")
async def get_asset(
    asset_address: str,
    asset_id: int,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get(db, asset_address, asset_id)
    return success_response(data.model_dump(), request)


@router.post("/{asset_address}/{asset_id}/approve")
async def approve_operator(
    asset_address: str,
    asset_id: int,
    body: ApproveRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.approve(
        db, asset_address, asset_id, str(current_user.id), body.operator_id
    )
    return success_response(data.model_dump(), request)


@router.post("/{asset_address}/{asset_id}/transfer")
async def transfer_asset(
    asset_address: str,
    asset_id: int,
    body: TransferRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    caller = str(current_user.id)
    data = await _service.transfer(
        db, asset_address, asset_id, body.from_owner or caller, body.to_owner, caller
    )
    return success_response(data.model_dump(), request)
