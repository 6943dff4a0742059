"""Business-categories router. Reads are public; writes are admin-only."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from petmarket.api.deps import get_business_category_service, get_current_user, get_session
from petmarket.api.schemas.category import (
    BusinessCategoryResponse,
    CreateBusinessCategoryRequest,
    UpdateBusinessCategoryRequest,
)
from petmarket.api.schemas.common import ApiResponse, PageMeta, PaginatedResponse
from petmarket.models.user import User
from petmarket.services.category_service import CategoryService

router = APIRouter()


@router.get("/", response_model=PaginatedResponse[BusinessCategoryResponse])
async def list_business_categories(
    cursor: str | None = Query(None),
    page_size: int = Query(20, ge=1, le=100),
    session: AsyncSession = Depends(get_session),
    svc: CategoryService = Depends(get_business_category_service),
) -> PaginatedResponse[BusinessCategoryResponse]:
    result = await svc.list(session, cursor=cursor, page_size=page_size)
    return PaginatedResponse(
        data=[BusinessCategoryResponse.model_validate(c) for c in result["data"]],
        meta=PageMeta(
            next_cursor=result["next_cursor"],
            has_more=result["has_more"],
            total=result["total"],
        ),
    )


@router.get("/{category_id}", response_model=ApiResponse[BusinessCategoryResponse])
async def get_business_category(
    category_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    svc: CategoryService = Depends(get_business_category_service),
) -> ApiResponse[BusinessCategoryResponse]:
    category = await svc.get(session, category_id)
    return ApiResponse(data=BusinessCategoryResponse.model_validate(category))


@router.post("/", response_model=ApiResponse[BusinessCategoryResponse], status_code=201)
async def create_business_category(
    body: CreateBusinessCategoryRequest,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
    svc: CategoryService = Depends(get_business_category_service),
) -> ApiResponse[BusinessCategoryResponse]:
    category = await svc.create(session, user, name=body.name, image=body.image)
    return ApiResponse(
        message="Business category created successfully!",
        data=BusinessCategoryResponse.model_validate(category),
    )


@router.patch("/{category_id}", response_model=ApiResponse[BusinessCategoryResponse])
async def update_business_category(
    category_id: uuid.UUID,
    body: UpdateBusinessCategoryRequest,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
    svc: CategoryService = Depends(get_business_category_service),
) -> ApiResponse[BusinessCategoryResponse]:
    category = await svc.update(
        session,
        user,
        category_id,
        fields_set=body.model_fields_set,
        name=body.name,
        image=body.image,
    )
    return ApiResponse(
        message="Business category updated successfully!",
        data=BusinessCategoryResponse.model_validate(category),
    )


@router.delete("/{category_id}", response_model=ApiResponse[BusinessCategoryResponse])
async def delete_business_category(
    category_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
    svc: CategoryService = Depends(get_business_category_service),
) -> ApiResponse[BusinessCategoryResponse]:
    category = await svc.delete(session, user, category_id)
    return ApiResponse(
        message="Business category deleted successfully!",
        data=BusinessCategoryResponse.model_validate(category),
    )
