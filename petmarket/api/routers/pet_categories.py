"""Pet-categories router. Reads are public; writes are admin-only."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from petmarket.api.deps import get_current_user, get_pet_category_service, get_session
from petmarket.api.schemas.category import CategoryRequest, CategoryResponse
from petmarket.api.schemas.common import ApiResponse, PageMeta, PaginatedResponse
from petmarket.models.user import User
from petmarket.services.category_service import CategoryService

router = APIRouter()


@router.get("/", response_model=PaginatedResponse[CategoryResponse])
async def list_pet_categories(
    cursor: str | None = Query(None),
    page_size: int = Query(20, ge=1, le=100),
    session: AsyncSession = Depends(get_session),
    svc: CategoryService = Depends(get_pet_category_service),
) -> PaginatedResponse[CategoryResponse]:
    result = await svc.list(session, cursor=cursor, page_size=page_size)
    return PaginatedResponse(
        data=[CategoryResponse.model_validate(c) for c in result["data"]],
        meta=PageMeta(
            next_cursor=result["next_cursor"],
            has_more=result["has_more"],
            total=result["total"],
        ),
    )


@router.get("/{category_id}", response_model=ApiResponse[CategoryResponse])
async def get_pet_category(
    category_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    svc: CategoryService = Depends(get_pet_category_service),
) -> ApiResponse[CategoryResponse]:
    category = await svc.get(session, category_id)
    return ApiResponse(data=CategoryResponse.model_validate(category))


@router.post("/", response_model=ApiResponse[CategoryResponse], status_code=201)
async def create_pet_category(
    body: CategoryRequest,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
    svc: CategoryService = Depends(get_pet_category_service),
) -> ApiResponse[CategoryResponse]:
    category = await svc.create(session, user, name=body.name)
    return ApiResponse(
        message="Pet category added successfully",
        data=CategoryResponse.model_validate(category),
    )


@router.put("/{category_id}", response_model=ApiResponse[CategoryResponse])
async def update_pet_category(
    category_id: uuid.UUID,
    body: CategoryRequest,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
    svc: CategoryService = Depends(get_pet_category_service),
) -> ApiResponse[CategoryResponse]:
    category = await svc.update(
        session, user, category_id, fields_set={"name"}, name=body.name
    )
    return ApiResponse(
        message="Pet category updated successfully",
        data=CategoryResponse.model_validate(category),
    )


@router.delete("/{category_id}", response_model=ApiResponse[CategoryResponse])
async def delete_pet_category(
    category_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
    svc: CategoryService = Depends(get_pet_category_service),
) -> ApiResponse[CategoryResponse]:
    category = await svc.delete(session, user, category_id)
    return ApiResponse(
        message="Pet category deleted successfully",
        data=CategoryResponse.model_validate(category),
    )
