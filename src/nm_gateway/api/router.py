"""Auth API router: register, login, refresh.

Registration opens the user's payment account in the same transaction, so a
freshly registered user can deposit and trade immediately.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.nm_common.database import get_db_session
from src.nm_common.response import ApiResponse, success_response
from src.nm_gateway.user.schemas import (
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RefreshResponse,
    RegisterRequest,
    RegisterResponse,
    UserInfo,
)
from src.nm_gateway.user.service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])
_service = UserService()


def _envelope(data: dict, request: Request, message: str) -> ApiResponse:
    resp = success_response(data, request)
    resp.message = message
    return resp


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=ApiResponse)
async def register(
    body: RegisterRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    async with db.begin():
        user = await _service.register(body.username, body.email, body.password, db)
    logger.info("Registered user %s (%s)", user.username, user.id)
    return _envelope(
        RegisterResponse.from_user(user).model_dump(), request, "User registered successfully"
    )


@router.post("/login", response_model=ApiResponse)
async def login(
    body: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    user, access_token, refresh_token = await _service.login(body.username, body.password, db)
    data = LoginResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        user=UserInfo.from_user(user),
    )
    return _envelope(data.model_dump(), request, "Login successful")


@router.post("/refresh", response_model=ApiResponse)
async def refresh_token(body: RefreshRequest, request: Request) -> ApiResponse:
    data = RefreshResponse(access_token=await _service.refresh(body.refresh_token))
    return _envelope(data.model_dump(), request, "Token refreshed")
