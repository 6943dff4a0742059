"""Transactions router."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from petmarket.api.deps import get_current_user, get_session, get_transaction_service
from petmarket.api.schemas.common import (
    ApiResponse,
    MessageResponse,
    PageMeta,
    PaginatedResponse,
)
from petmarket.api.schemas.transaction import (
    CreateTransactionRequest,
    TransactionResponse,
    TransactionStatus,
    UpdateTransactionRequest,
)
from petmarket.models.user import User
from petmarket.services.transaction_service import TransactionService

router = APIRouter()


@router.get("/", response_model=PaginatedResponse[TransactionResponse])
async def list_transactions(
    cursor: str | None = Query(None),
    page_size: int = Query(20, ge=1, le=100),
    status: TransactionStatus | None = Query(None),
    mine: bool = Query(False, description="only transactions bought by the caller"),
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
    svc: TransactionService = Depends(get_transaction_service),
) -> PaginatedResponse[TransactionResponse]:
    result = await svc.list(
        session,
        cursor=cursor,
        page_size=page_size,
        status=status,
        buyer_id=user.id if mine else None,
    )
    return PaginatedResponse(
        data=[TransactionResponse.model_validate(t) for t in result["data"]],
        meta=PageMeta(
            next_cursor=result["next_cursor"],
            has_more=result["has_more"],
            total=result["total"],
        ),
    )


@router.post("/create", response_model=ApiResponse[TransactionResponse], status_code=201)
async def create_transaction(
    body: CreateTransactionRequest,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
    svc: TransactionService = Depends(get_transaction_service),
) -> ApiResponse[TransactionResponse]:
    tx = await svc.create(
        session,
        user,
        price=body.price,
        status=body.status,
        pet_id=body.pet_id,
        type=body.type,
    )
    return ApiResponse(
        message="Transaction created successfully!",
        data=TransactionResponse.model_validate(tx),
    )


@router.get("/{transaction_id}", response_model=ApiResponse[TransactionResponse])
async def get_transaction(
    transaction_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    _user: User = Depends(get_current_user),
    svc: TransactionService = Depends(get_transaction_service),
) -> ApiResponse[TransactionResponse]:
    tx = await svc.get(session, transaction_id)
    return ApiResponse(data=TransactionResponse.model_validate(tx))


@router.put("/{transaction_id}", response_model=ApiResponse[TransactionResponse])
async def update_transaction(
    transaction_id: uuid.UUID,
    body: UpdateTransactionRequest,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
    svc: TransactionService = Depends(get_transaction_service),
) -> ApiResponse[TransactionResponse]:
    tx = await svc.update(
        session,
        user,
        transaction_id,
        price=body.price,
        status=body.status,
    )
    return ApiResponse(
        message="Transaction updated successfully!",
        data=TransactionResponse.model_validate(tx),
    )


@router.delete("/{transaction_id}", response_model=MessageResponse)
async def delete_transaction(
    transaction_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
    svc: TransactionService = Depends(get_transaction_service),
) -> MessageResponse:
    await svc.delete(session, user, transaction_id)
    return MessageResponse(message="Transaction deleted successfully!")
