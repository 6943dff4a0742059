"""Businesses router. Reads are public; writes need a bearer token."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from petmarket.api.deps import get_business_service, get_current_user, get_session
from petmarket.api.schemas.business import (
    BusinessResponse,
    CreateBusinessRequest,
    UpdateBusinessRequest,
)
from petmarket.api.schemas.common import ApiResponse, PageMeta, PaginatedResponse
from petmarket.models.user import User
from petmarket.services.business_service import BusinessService

router = APIRouter()


@router.get("/", response_model=PaginatedResponse[BusinessResponse])
async def list_businesses(
    cursor: str | None = Query(None),
    page_size: int = Query(20, ge=1, le=100),
    category_id: uuid.UUID | None = Query(None),
    owner_id: uuid.UUID | None = Query(None),
    session: AsyncSession = Depends(get_session),
    svc: BusinessService = Depends(get_business_service),
) -> PaginatedResponse[BusinessResponse]:
    result = await svc.list(
        session,
        cursor=cursor,
        page_size=page_size,
        category_id=category_id,
        owner_id=owner_id,
    )
    return PaginatedResponse(
        data=[BusinessResponse.model_validate(b) for b in result["data"]],
        meta=PageMeta(
            next_cursor=result["next_cursor"],
            has_more=result["has_more"],
            total=result["total"],
        ),
    )


@router.get("/{business_id}", response_model=ApiResponse[BusinessResponse])
async def get_business(
    business_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    svc: BusinessService = Depends(get_business_service),
) -> ApiResponse[BusinessResponse]:
    business = await svc.get(session, business_id)
    return ApiResponse(
        message="Business has been retrieved",
        data=BusinessResponse.model_validate(business),
    )


@router.post("/", response_model=ApiResponse[BusinessResponse], status_code=201)
async def create_business(
    body: CreateBusinessRequest,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
    svc: BusinessService = Depends(get_business_service),
) -> ApiResponse[BusinessResponse]:
    business = await svc.create(
        session,
        user,
        name=body.name,
        category_id=body.category_id,
        image=body.image,
    )
    return ApiResponse(
        message="Business has been added",
        data=BusinessResponse.model_validate(business),
    )


@router.patch("/{business_id}", response_model=ApiResponse[BusinessResponse])
async def update_business(
    business_id: uuid.UUID,
    body: UpdateBusinessRequest,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
    svc: BusinessService = Depends(get_business_service),
) -> ApiResponse[BusinessResponse]:
    business = await svc.update(
        session,
        user,
        business_id,
        fields_set=body.model_fields_set,
        name=body.name,
        category_id=body.category_id,
        image=body.image,
    )
    return ApiResponse(
        message="Business has been updated",
        data=BusinessResponse.model_validate(business),
    )


@router.delete("/{business_id}", response_model=ApiResponse[BusinessResponse])
async def delete_business(
    business_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
    svc: BusinessService = Depends(get_business_service),
) -> ApiResponse[BusinessResponse]:
    business = await svc.delete(session, user, business_id)
    return ApiResponse(
        message="Business deleted successfully!",
        data=BusinessResponse.model_validate(business),
    )
