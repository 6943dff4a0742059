"""PetService — pet listings owned by sellers."""

from __future__ import annotations

import uuid
from decimal import Decimal

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from petmarket.dao.pet_category_dao import PetCategoryDAO
from petmarket.dao.pet_dao import PetDAO
from petmarket.dao.transaction_dao import TransactionDAO
from petmarket.models.pet import Pet
from petmarket.models.user import User
from petmarket.services import ConflictError, NotFoundError, ValidationError, require_owner

log = structlog.get_logger(__name__)

_NULLABLE_FIELDS = ("category_id", "image")


class PetService:
    """Stateless service for pet CRUD.

    ``available`` is not writable here; it is owned by the transaction flow.
    """

    def __init__(
        self,
        pet_dao: PetDAO,
        transaction_dao: TransactionDAO,
        category_dao: PetCategoryDAO,
    ) -> None:
        self._pet_dao = pet_dao
        self._tx_dao = transaction_dao
        self._category_dao = category_dao

    async def get(self, session: AsyncSession, pet_id: uuid.UUID) -> Pet:
        pet = await self._pet_dao.get_by_id(session, pet_id)
        if pet is None:
            raise NotFoundError("pet not found")
        return pet

    async def list(
        self,
        session: AsyncSession,
        cursor: str | None = None,
        page_size: int = 20,
        available: bool | None = None,
        owner_id: uuid.UUID | None = None,
        category_id: uuid.UUID | None = None,
    ) -> dict:
        filters = {"available": available, "owner_id": owner_id, "category_id": category_id}
        page = await self._pet_dao.list_paginated(session, cursor, page_size, **filters)
        total = await self._pet_dao.count(session, **filters)
        return {
            "data": page.data,
            "next_cursor": page.next_cursor,
            "has_more": page.has_more,
            "total": total,
        }

    async def create(
        self,
        session: AsyncSession,
        owner: User,
        *,
        name: str,
        location: str,
        price: Decimal,
        image: str | None = None,
        category_id: uuid.UUID | None = None,
    ) -> Pet:
        if price < 0:
            raise ValidationError("price must be a non-negative number")
        if category_id is not None:
            await self._ensure_category(session, category_id)
        pet = await self._pet_dao.create(
            session,
            name=name,
            location=location,
            price=price,
            image=image,
            category_id=category_id,
            owner_id=owner.id,
        )
        log.info("pet.created", pet_id=str(pet.id), owner_id=str(owner.id))
        return pet

    async def update(
        self,
        session: AsyncSession,
        user: User,
        pet_id: uuid.UUID,
        *,
        fields_set: set[str],
        **fields: object,
    ) -> Pet:
        pet = await self.get(session, pet_id)
        require_owner(user, pet.owner_id, "pet")

        updates = {k: v for k, v in fields.items() if k in fields_set}
        updates = {k: v for k, v in updates.items() if v is not None or k in _NULLABLE_FIELDS}
        if not updates:
            return pet

        price = updates.get("price")
        if price is not None and price < 0:
            raise ValidationError("price must be a non-negative number")
        category_id = updates.get("category_id")
        if category_id is not None and category_id != pet.category_id:
            await self._ensure_category(session, category_id)
        return await self._pet_dao.update(session, pet.id, **updates)

    async def delete(self, session: AsyncSession, user: User, pet_id: uuid.UUID) -> Pet:
        """Delete a pet that no open transaction is holding."""
        pet = await self.get(session, pet_id)
        require_owner(user, pet.owner_id, "pet")
        if await self._tx_dao.list_open_for_pet(session, pet.id):
            raise ConflictError("pet has open transactions")
        await self._pet_dao.delete(session, pet.id)
        log.info("pet.deleted", pet_id=str(pet.id))
        return pet

    async def _ensure_category(self, session: AsyncSession, category_id: uuid.UUID) -> None:
        if await self._category_dao.get_by_id(session, category_id) is None:
            raise NotFoundError("pet category not found")
