# src/nm_market/api/router.py
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.nm_common.database import get_db_session
from src.nm_common.response import ApiResponse, success_response
from src.nm_gateway.auth.dependencies import get_current_user
from src.nm_gateway.user.db_models import UserModel
from src.nm_market.application import service as svc
from src.nm_market.application.schemas import BuyOrderRequest, ListOrderRequest

router = APIRouter(prefix="/marketplace", tags=["marketplace"])


@router.get("/commission")
async def get_commission(request: Request) -> ApiResponse:
    return success_response(svc.get_commission().model_dump(), request)


@router.get("/orders")
async def get_on_sale_orders(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await svc.get_on_sale_orders(db)
    return success_response(data.model_dump(), request)


@router.post("/orders", status_code=201)
async def list_order(
    body: ListOrderRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await svc.list_order(
        body.asset_address, body.asset_id, body.price, str(current_user.id), db
    )
    return success_response(data.model_dump(), request)


@router.get("/orders/{order_id}")
async def get_order(
    order_id: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await svc.get_order(order_id, db)
    return success_response(data.model_dump(), request)


@router.post("/orders/{order_id}/buy")
async def buy_order(
    order_id: str,
    body: BuyOrderRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await svc.buy_order(order_id, str(current_user.id), body.value, db)
    return success_response(data.model_dump(), request)


@router.post("/orders/{order_id}/cancel")
async def cancel_order(
    order_id: str,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await svc.cancel_order(order_id, str(current_user.id), db)
    return success_response(data.model_dump(), request)


@router.get("/users/{user_id}/purchases")
async def fetch_purchases(
    user_id: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await svc.fetch_purchases(user_id, db)
    return success_response(data.model_dump(), request)


@router.get("/users/{user_id}/listings")
async def fetch_listings(
    user_id: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await svc.fetch_listings(user_id, db)
    return success_response(data.model_dump(), request)


@router.get("/events")
async def list_events(
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    after_id: int = Query(0, ge=0, description="Return events with id > after_id"),
    limit: int = Query(100, ge=1, le=500),
) -> ApiResponse:
    data = await svc.list_events(after_id, limit, db)
    return success_response(data.model_dump(), request)
