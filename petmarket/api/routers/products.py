"""Products router. Reads are public; writes need a bearer token."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from petmarket.api.deps import get_current_user, get_product_service, get_session
from petmarket.api.schemas.common import ApiResponse, PageMeta, PaginatedResponse
from petmarket.api.schemas.product import (
    CreateProductRequest,
    ProductDetail,
    ProductResponse,
    UpdateProductRequest,
)
from petmarket.models.user import User
from petmarket.services.product_service import ProductService

router = APIRouter()


@router.get("/", response_model=PaginatedResponse[ProductResponse])
async def list_products(
    cursor: str | None = Query(None),
    page_size: int = Query(20, ge=1, le=100),
    owner_id: uuid.UUID | None = Query(None),
    session: AsyncSession = Depends(get_session),
    svc: ProductService = Depends(get_product_service),
) -> PaginatedResponse[ProductResponse]:
    result = await svc.list(session, cursor=cursor, page_size=page_size, owner_id=owner_id)
    return PaginatedResponse(
        data=[ProductResponse.model_validate(p) for p in result["data"]],
        meta=PageMeta(
            next_cursor=result["next_cursor"],
            has_more=result["has_more"],
            total=result["total"],
        ),
    )


@router.get("/{product_id}", response_model=ApiResponse[ProductDetail])
async def get_product(
    product_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    svc: ProductService = Depends(get_product_service),
) -> ApiResponse[ProductDetail]:
    result = await svc.get(session, product_id)
    product = result["product"]
    return ApiResponse(
        data=ProductDetail(
            **{k: getattr(product, k) for k in ProductResponse.model_fields},
            units_sold=result["units_sold"],
        )
    )


@router.post("/", response_model=ApiResponse[ProductResponse], status_code=201)
async def create_product(
    body: CreateProductRequest,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
    svc: ProductService = Depends(get_product_service),
) -> ApiResponse[ProductResponse]:
    product = await svc.create(
        session,
        user,
        name=body.name,
        price=body.price,
        stock=body.stock,
        image=body.image,
    )
    return ApiResponse(
        message="Product added successfully",
        data=ProductResponse.model_validate(product),
    )


@router.patch("/{product_id}", response_model=ApiResponse[ProductResponse])
async def update_product(
    product_id: uuid.UUID,
    body: UpdateProductRequest,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
    svc: ProductService = Depends(get_product_service),
) -> ApiResponse[ProductResponse]:
    product = await svc.update(
        session,
        user,
        product_id,
        fields_set=body.model_fields_set,
        name=body.name,
        price=body.price,
        stock=body.stock,
        image=body.image,
    )
    return ApiResponse(
        message="Product updated successfully",
        data=ProductResponse.model_validate(product),
    )


@router.delete("/{product_id}", response_model=ApiResponse[ProductResponse])
async def delete_product(
    product_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
    svc: ProductService = Depends(get_product_service),
) -> ApiResponse[ProductResponse]:
    product = await svc.delete(session, user, product_id)
    return ApiResponse(
        message="Product deleted successfully",
        data=ProductResponse.model_validate(product),
    )
