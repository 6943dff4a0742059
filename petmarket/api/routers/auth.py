"""Auth router — register, login, refresh, me."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from petmarket.api.deps import get_auth_service, get_current_user, get_session
from petmarket.api.schemas.auth import (
    AccessTokenResponse,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenPairResponse,
    UserResponse,
)
from petmarket.api.schemas.common import ApiResponse
from petmarket.models.user import User
from petmarket.services.auth_service import AuthService

router = APIRouter()


@router.post("/register", response_model=ApiResponse[UserResponse], status_code=201)
async def register(
    body: RegisterRequest,
    session: AsyncSession = Depends(get_session),
    auth: AuthService = Depends(get_auth_service),
) -> ApiResponse[UserResponse]:
    user = await auth.register(
        session,
        username=body.username,
        email=body.email,
        password=body.password,
        role=body.role,
    )
    return ApiResponse(message="Registration successful", data=UserResponse.model_validate(user))


@router.post("/login", response_model=ApiResponse[TokenPairResponse])
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(get_session),
    auth: AuthService = Depends(get_auth_service),
) -> ApiResponse[TokenPairResponse]:
    pair = await auth.login(session, body.email, body.password)
    return ApiResponse(
        message="Login successful",
        data=TokenPairResponse(
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
            token_type=pair.token_type,
        ),
    )


@router.post("/refresh", response_model=ApiResponse[AccessTokenResponse])
async def refresh(
    body: RefreshRequest,
    auth: AuthService = Depends(get_auth_service),
) -> ApiResponse[AccessTokenResponse]:
    token = auth.refresh(body.refresh_token)
    return ApiResponse(
        data=AccessTokenResponse(access_token=token.access_token, token_type=token.token_type)
    )


@router.get("/me", response_model=ApiResponse[UserResponse])
async def me(current_user: User = Depends(get_current_user)) -> ApiResponse[UserResponse]:
    return ApiResponse(data=UserResponse.model_validate(current_user))
