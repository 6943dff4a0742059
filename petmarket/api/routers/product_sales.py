"""Product-sales router — every write goes through the SaleRecorder."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from petmarket.api.deps import get_current_user, get_sale_recorder, get_session
from petmarket.api.schemas.common import ApiResponse, PageMeta, PaginatedResponse
from petmarket.api.schemas.product_sale import ProductSaleRequest, ProductSaleResponse
from petmarket.models.user import User
from petmarket.services.sale_service import SaleRecorder

router = APIRouter()


@router.get("/", response_model=PaginatedResponse[ProductSaleResponse])
async def list_product_sales(
    cursor: str | None = Query(None),
    page_size: int = Query(20, ge=1, le=100),
    product_id: uuid.UUID | None = Query(None),
    transaction_id: uuid.UUID | None = Query(None),
    session: AsyncSession = Depends(get_session),
    _user: User = Depends(get_current_user),
    svc: SaleRecorder = Depends(get_sale_recorder),
) -> PaginatedResponse[ProductSaleResponse]:
    result = await svc.list(
        session,
        cursor=cursor,
        page_size=page_size,
        product_id=product_id,
        transaction_id=transaction_id,
    )
    return PaginatedResponse(
        data=[ProductSaleResponse.model_validate(s) for s in result["data"]],
        meta=PageMeta(
            next_cursor=result["next_cursor"],
            has_more=result["has_more"],
            total=result["total"],
        ),
    )


@router.post("/create", response_model=ApiResponse[ProductSaleResponse], status_code=201)
async def create_product_sale(
    body: ProductSaleRequest,
    session: AsyncSession = Depends(get_session),
    _user: User = Depends(get_current_user),
    svc: SaleRecorder = Depends(get_sale_recorder),
) -> ApiResponse[ProductSaleResponse]:
    sale = await svc.create(
        session,
        product_id=body.product_id,
        quantity=body.quantity,
        price=body.price,
        transaction_id=body.transaction_id,
    )
    return ApiResponse(
        message="Product sale created successfully!",
        data=ProductSaleResponse.model_validate(sale),
    )


@router.get("/{sale_id}", response_model=ApiResponse[ProductSaleResponse])
async def get_product_sale(
    sale_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    _user: User = Depends(get_current_user),
    svc: SaleRecorder = Depends(get_sale_recorder),
) -> ApiResponse[ProductSaleResponse]:
    sale = await svc.get(session, sale_id)
    return ApiResponse(data=ProductSaleResponse.model_validate(sale))


@router.put("/{sale_id}", response_model=ApiResponse[ProductSaleResponse])
async def update_product_sale(
    sale_id: uuid.UUID,
    body: ProductSaleRequest,
    session: AsyncSession = Depends(get_session),
    _user: User = Depends(get_current_user),
    svc: SaleRecorder = Depends(get_sale_recorder),
) -> ApiResponse[ProductSaleResponse]:
    link = {}
    if "transaction_id" in body.model_fields_set:
        link["transaction_id"] = body.transaction_id
    sale = await svc.update(
        session,
        sale_id,
        product_id=body.product_id,
        quantity=body.quantity,
        price=body.price,
        **link,
    )
    return ApiResponse(
        message="Product sale updated successfully!",
        data=ProductSaleResponse.model_validate(sale),
    )


@router.delete("/{sale_id}", response_model=ApiResponse[ProductSaleResponse])
async def delete_product_sale(
    sale_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    _user: User = Depends(get_current_user),
    svc: SaleRecorder = Depends(get_sale_recorder),
) -> ApiResponse[ProductSaleResponse]:
    sale = await svc.delete(session, sale_id)
    return ApiResponse(
        message="Product sale deleted successfully, stock restored.",
        data=ProductSaleResponse.model_validate(sale),
    )
