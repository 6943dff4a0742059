"""BusinessService — businesses listed by sellers under a business category."""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from petmarket.dao.business_category_dao import BusinessCategoryDAO
from petmarket.dao.business_dao import BusinessDAO
from petmarket.models.business import Business
from petmarket.models.user import User
from petmarket.services import NotFoundError, require_owner

log = structlog.get_logger(__name__)

_NULLABLE_FIELDS = ("category_id", "image")


class BusinessService:
    """Stateless service for business CRUD. Writes are owner-or-admin."""

    def __init__(self, business_dao: BusinessDAO, category_dao: BusinessCategoryDAO) -> None:
        self._business_dao = business_dao
        self._category_dao = category_dao

    async def get(self, session: AsyncSession, business_id: uuid.UUID) -> Business:
        business = await self._business_dao.get_by_id(session, business_id)
        if business is None:
            raise NotFoundError("business not found")
        return business

    async def list(
        self,
        session: AsyncSession,
        cursor: str | None = None,
        page_size: int = 20,
        category_id: uuid.UUID | None = None,
        owner_id: uuid.UUID | None = None,
    ) -> dict:
        filters = {"category_id": category_id, "owner_id": owner_id}
        page = await self._business_dao.list_paginated(session, cursor, page_size, **filters)
        total = await self._business_dao.count(session, **filters)
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
        category_id: uuid.UUID | None = None,
        image: str | None = None,
    ) -> Business:
        if category_id is not None:
            await self._ensure_category(session, category_id)
        business = await self._business_dao.create(
            session,
            name=name,
            category_id=category_id,
            image=image,
            owner_id=owner.id,
        )
        log.info("business.created", business_id=str(business.id), owner_id=str(owner.id))
        return business

    async def update(
        self,
        session: AsyncSession,
        user: User,
        business_id: uuid.UUID,
        *,
        fields_set: set[str],
        **fields: object,
    ) -> Business:
        """Partially update a business; an explicit null category uncategorises it."""
        business = await self.get(session, business_id)
        require_owner(user, business.owner_id, "business")

        updates = {k: v for k, v in fields.items() if k in fields_set}
        updates = {k: v for k, v in updates.items() if v is not None or k in _NULLABLE_FIELDS}
        if not updates:
            return business

        category_id = updates.get("category_id")
        if category_id is not None and category_id != business.category_id:
            await self._ensure_category(session, category_id)
        return await self._business_dao.update(session, business.id, **updates)

    async def delete(self, session: AsyncSession, user: User, business_id: uuid.UUID) -> Business:
        business = await self.get(session, business_id)
        require_owner(user, business.owner_id, "business")
        await self._business_dao.delete(session, business.id)
        log.info("business.deleted", business_id=str(business.id))
        return business

    async def _ensure_category(self, session: AsyncSession, category_id: uuid.UUID) -> None:
        if await self._category_dao.get_by_id(session, category_id) is None:
            raise NotFoundError("business category not found")
