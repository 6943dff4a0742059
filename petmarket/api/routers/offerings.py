"""Grooming- and photography-service routers. Every route needs a bearer token.

Both tables share one shape, so :func:`build_router` makes one router per
service getter.
"""

from __future__ import annotations

import uuid
from collections.abc import Callable

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from petmarket.api.deps import get_current_user, get_session
from petmarket.api.schemas.common import ApiResponse, PageMeta, PaginatedResponse
from petmarket.api.schemas.offering import (
    CreateOfferingRequest,
    OfferingResponse,
    UpdateOfferingRequest,
)
from petmarket.models.user import User
from petmarket.services.offering_service import OfferingService


def build_router(get_service: Callable[[], OfferingService], label: str) -> APIRouter:
    """Router for one offerings table; *label* starts the success messages."""
    router = APIRouter()

    @router.get("/", response_model=PaginatedResponse[OfferingResponse])
    async def list_offerings(
        cursor: str | None = Query(None),
        page_size: int = Query(20, ge=1, le=100),
        owner_id: uuid.UUID | None = Query(None),
        session: AsyncSession = Depends(get_session),
        _user: User = Depends(get_current_user),
        svc: OfferingService = Depends(get_service),
    ) -> PaginatedResponse[OfferingResponse]:
        result = await svc.list(session, cursor=cursor, page_size=page_size, owner_id=owner_id)
        return PaginatedResponse(
            data=[OfferingResponse.model_validate(o) for o in result["data"]],
            meta=PageMeta(
                next_cursor=result["next_cursor"],
                has_more=result["has_more"],
                total=result["total"],
            ),
        )

    @router.get("/{offering_id}", response_model=ApiResponse[OfferingResponse])
    async def get_offering(
        offering_id: uuid.UUID,
        session: AsyncSession = Depends(get_session),
        _user: User = Depends(get_current_user),
        svc: OfferingService = Depends(get_service),
    ) -> ApiResponse[OfferingResponse]:
        offering = await svc.get(session, offering_id)
        return ApiResponse(data=OfferingResponse.model_validate(offering))

    @router.post("/create", response_model=ApiResponse[OfferingResponse], status_code=201)
    async def create_offering(
        body: CreateOfferingRequest,
        session: AsyncSession = Depends(get_session),
        user: User = Depends(get_current_user),
        svc: OfferingService = Depends(get_service),
    ) -> ApiResponse[OfferingResponse]:
        offering = await svc.create(session, user, name=body.name, price=body.price)
        return ApiResponse(
            message=f"{label} created successfully!",
            data=OfferingResponse.model_validate(offering),
        )

    @router.patch("/{offering_id}", response_model=ApiResponse[OfferingResponse])
    async def update_offering(
        offering_id: uuid.UUID,
        body: UpdateOfferingRequest,
        session: AsyncSession = Depends(get_session),
        user: User = Depends(get_current_user),
        svc: OfferingService = Depends(get_service),
    ) -> ApiResponse[OfferingResponse]:
        offering = await svc.update(
            session,
            user,
            offering_id,
            fields_set=body.model_fields_set,
            name=body.name,
            price=body.price,
        )
        return ApiResponse(
            message=f"{label} updated successfully!",
            data=OfferingResponse.model_validate(offering),
        )

    @router.delete("/{offering_id}", response_model=ApiResponse[OfferingResponse])
    async def delete_offering(
        offering_id: uuid.UUID,
        session: AsyncSession = Depends(get_session),
        user: User = Depends(get_current_user),
        svc: OfferingService = Depends(get_service),
    ) -> ApiResponse[OfferingResponse]:
        offering = await svc.delete(session, user, offering_id)
        return ApiResponse(
            message=f"{label} deleted successfully!",
            data=OfferingResponse.model_validate(offering),
        )

    return router
