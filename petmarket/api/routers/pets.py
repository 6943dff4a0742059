"""Pets router. Reads are public; writes need a bearer token."""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from petmarket.api.deps import get_current_user, get_pet_service, get_session
from petmarket.api.schemas.common import ApiResponse, PageMeta, PaginatedResponse
from petmarket.api.schemas.pet import CreatePetRequest, PetResponse, UpdatePetRequest
from petmarket.models.user import User
from petmarket.services.pet_service import PetService

router = APIRouter()


@router.get("/", response_model=PaginatedResponse[PetResponse])
async def list_pets(
    cursor: str | None = Query(None),
    page_size: int = Query(20, ge=1, le=100),
    available: bool | None = Query(None),
    owner_id: uuid.UUID | None = Query(None),
    category_id: uuid.UUID | None = Query(None),
    session: AsyncSession = Depends(get_session),
    svc: PetService = Depends(get_pet_service),
) -> PaginatedResponse[PetResponse]:
    result = await svc.list(
        session,
        cursor=cursor,
        page_size=page_size,
        available=available,
        owner_id=owner_id,
        category_id=category_id,
    )
    return PaginatedResponse(
        data=[PetResponse.model_validate(p) for p in result["data"]],
        meta=PageMeta(
            next_cursor=result["next_cursor"],
            has_more=result["has_more"],
            total=result["total"],
        ),
    )


@router.get("/{pet_id}", response_model=ApiResponse[PetResponse])
async def get_pet(
    pet_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    svc: PetService = Depends(get_pet_service),
) -> ApiResponse[PetResponse]:
    pet = await svc.get(session, pet_id)
    return ApiResponse(data=PetResponse.model_validate(pet))


@router.post("/", response_model=ApiResponse[PetResponse], status_code=201)
async def create_pet(
    body: CreatePetRequest,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
    svc: PetService = Depends(get_pet_service),
) -> ApiResponse[PetResponse]:
    pet = await svc.create(
        session,
        user,
        name=body.name,
        location=body.location,
        price=body.price,
        image=body.image,
        category_id=body.category_id,
    )
    return ApiResponse(message="Pet created successfully!", data=PetResponse.model_validate(pet))


@router.patch("/{pet_id}", response_model=ApiResponse[PetResponse])
async def update_pet(
    pet_id: uuid.UUID,
    body: UpdatePetRequest,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
    svc: PetService = Depends(get_pet_service),
) -> ApiResponse[PetResponse]:
    pet = await svc.update(
        session,
        user,
        pet_id,
        fields_set=body.model_fields_set,
        name=body.name,
        location=body.location,
        price=body.price,
        image=body.image,
        category_id=body.category_id,
    )
    return ApiResponse(message="Pet updated successfully!", data=PetResponse.model_validate(pet))


@router.delete("/{pet_id}", response_model=ApiResponse[PetResponse])
async def delete_pet(
    pet_id: uuid.UUID,
    session: AsyncSession = Depends(get_session),
    user: User = Depends(get_current_user),
    svc: PetService = Depends(get_pet_service),
) -> ApiResponse[PetResponse]:
    pet = await svc.delete(session, user, pet_id)
    return ApiResponse(message="Pet deleted successfully!", data=PetResponse.model_validate(pet))
