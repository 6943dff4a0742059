"""OfferingService — priced pet-care services (grooming, photography)."""

from __future__ import annotations

import uuid
from decimal import Decimal

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from petmarket.dao.base import BaseDAO
from petmarket.models.user import User
from petmarket.services import NotFoundError, ValidationError, require_owner

log = structlog.get_logger(__name__)


def _check_price(price: Decimal | None) -> None:
    if price is not None and price < 0:
        raise ValidationError("price must be a non-negative number")


class OfferingService:
    """Stateless CRUD over one offerings table (``name`` + ``price``).

    One instance per table; *label* names the rows in messages. The creating
    user owns the row, and writes are owner-or-admin.
    """

    def __init__(self, offering_dao: BaseDAO, label: str) -> None:
        self._dao = offering_dao
        self._label = label

    async def get(self, session: AsyncSession, offering_id: uuid.UUID):
        offering = await self._dao.get_by_id(session, offering_id)
        if offering is None:
            raise NotFoundError(f"{self._label} not found")
        return offering

    async def list(
        self,
        session: AsyncSession,
        cursor: str | None = None,
        page_size: int = 20,
        owner_id: uuid.UUID | None = None,
    ) -> dict:
        page = await self._dao.list_paginated(session, cursor, page_size, owner_id=owner_id)
        total = await self._dao.count(session, owner_id=owner_id)
        return {
            "data": page.data,
            "next_cursor": page.next_cursor,
            "has_more": page.has_more,
            "total": total,
        }

    async def create(self, session: AsyncSession, owner: User, *, name: str, price: Decimal):
        _check_price(price)
        offering = await self._dao.create(session, name=name, price=price, owner_id=owner.id)
        log.info("offering.created", kind=self._label, offering_id=str(offering.id))
        return offering

    async def update(
        self,
        session: AsyncSession,
        user: User,
        offering_id: uuid.UUID,
        *,
        fields_set: set[str],
        **fields: object,
    ):
        offering = await self.get(session, offering_id)
        require_owner(user, offering.owner_id, self._label)

        updates = {k: v for k, v in fields.items() if k in fields_set and v is not None}
        if not updates:
            return offering

        _check_price(updates.get("price"))
        return await self._dao.update(session, offering.id, **updates)

    async def delete(self, session: AsyncSession, user: User, offering_id: uuid.UUID):
        offering = await self.get(session, offering_id)
        require_owner(user, offering.owner_id, self._label)
        await self._dao.delete(session, offering.id)
        log.info("offering.deleted", kind=self._label, offering_id=str(offering.id))
        return offering
