"""CategoryService — shared taxonomies (business categories, pet categories)."""

from __future__ import annotations

import uuid

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from petmarket.dao.base import BaseDAO
from petmarket.models.user import User
from petmarket.services import ConflictError, NotFoundError, require_admin

log = structlog.get_logger(__name__)

_NULLABLE_FIELDS = ("image",)


class CategoryService:
    """Stateless CRUD over one category table.

    One instance per table; *label* names the rows in error messages
    ("business category not found"). Names are unique per table. Reads are
    public, writes are admin-only.
    """

    def __init__(self, category_dao: BaseDAO, label: str) -> None:
        self._dao = category_dao
        self._label = label

    async def get(self, session: AsyncSession, category_id: uuid.UUID):
        category = await self._dao.get_by_id(session, category_id)
        if category is None:
            raise NotFoundError(f"{self._label} not found")
        return category

    async def list(
        self,
        session: AsyncSession,
        cursor: str | None = None,
        page_size: int = 20,
    ) -> dict:
        page = await self._dao.list_paginated(session, cursor, page_size)
        total = await self._dao.count(session)
        return {
            "data": page.data,
            "next_cursor": page.next_cursor,
            "has_more": page.has_more,
            "total": total,
        }

    async def create(self, session: AsyncSession, user: User, *, name: str, **fields: object):
        require_admin(user)
        await self._check_name_free(session, name)
        category = await self._dao.create(session, name=name, **fields)
        log.info("category.created", kind=self._label, category_id=str(category.id))
        return category

    async def update(
        self,
        session: AsyncSession,
        user: User,
        category_id: uuid.UUID,
        *,
        fields_set: set[str],
        **fields: object,
    ):
        require_admin(user)
        category = await self.get(session, category_id)

        updates = {k: v for k, v in fields.items() if k in fields_set}
        updates = {k: v for k, v in updates.items() if v is not None or k in _NULLABLE_FIELDS}
        if not updates:
            return category

        if "name" in updates and updates["name"] != category.name:
            await self._check_name_free(session, updates["name"])
        return await self._dao.update(session, category.id, **updates)

    async def delete(self, session: AsyncSession, user: User, category_id: uuid.UUID):
        """Delete a category; rows filed under it become uncategorised."""
        require_admin(user)
        category = await self.get(session, category_id)
        await self._dao.delete(session, category.id)
        log.info("category.deleted", kind=self._label, category_id=str(category.id))
        return category

    async def _check_name_free(self, session: AsyncSession, name: str) -> None:
        if await self._dao.get_by_field(session, name=name) is not None:
            raise ConflictError(f"{self._label} '{name}' already exists")
