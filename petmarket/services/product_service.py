"""ProductService — product catalogue management."""

from __future__ import annotations

import uuid
from decimal import Decimal

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from petmarket.dao.product_dao import ProductDAO
from petmarket.dao.product_sale_dao import ProductSaleDAO
from petmarket.models.product import Product
from petmarket.models.user import User
from petmarket.services import ConflictError, NotFoundError, ValidationError, require_owner

log = structlog.get_logger(__name__)

_NULLABLE_FIELDS = ("image",)


def _check_amounts(price: Decimal | None, stock: int | None) -> None:
    if price is not None and price < 0:
        raise ValidationError("price must be a non-negative number")
    if stock is not None and stock < 0:
        raise ValidationError("stock must be a non-negative integer")


class ProductService:
    """Stateless service for product CRUD.

    Stock is set directly only on create. A stock update is applied as a
    delta through :meth:`ProductDAO.adjust_stock`; sales go through
    :class:`~petmarket.services.sale_service.SaleRecorder`.
    """

    def __init__(self, product_dao: ProductDAO, product_sale_dao: ProductSaleDAO) -> None:
        self._product_dao = product_dao
        self._sale_dao = product_sale_dao

    async def get(self, session: AsyncSession, product_id: uuid.UUID) -> dict:
        """Return the product with its total units sold.

        Raises :class:`NotFoundError` if the product does not exist.
        """
        product = await self._ensure_product(session, product_id)
        units_sold = await self._sale_dao.quantity_sold(session, product.id)
        return {"product": product, "units_sold": units_sold}

    async def list(
        self,
        session: AsyncSession,
        cursor: str | None = None,
        page_size: int = 20,
        owner_id: uuid.UUID | None = None,
    ) -> dict:
        page = await self._product_dao.list_paginated(
            session, cursor, page_size, owner_id=owner_id
        )
        total = await self._product_dao.count(session, owner_id=owner_id)
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
        price: Decimal,
        stock: int = 0,
        image: str | None = None,
    ) -> Product:
        _check_amounts(price, stock)
        product = await self._product_dao.create(
            session,
            name=name,
            price=price,
            stock=stock,
            image=image,
            owner_id=owner.id,
        )
        log.info("product.created", product_id=str(product.id), stock=stock)
        return product

    async def update(
        self,
        session: AsyncSession,
        user: User,
        product_id: uuid.UUID,
        *,
        fields_set: set[str],
        **fields: object,
    ) -> Product:
        """Partially update a product.

        *fields_set* holds the field names the client actually sent, so an
        explicit ``null`` (clear the image) differs from an omitted field.
        """
        product = await self._ensure_product(session, product_id)
        require_owner(user, product.owner_id, "product")

        updates = {k: v for k, v in fields.items() if k in fields_set}
        updates = {k: v for k, v in updates.items() if v is not None or k in _NULLABLE_FIELDS}
        if not updates:
            return product

        _check_amounts(updates.get("price"), updates.get("stock"))
        # Taken before the row write below refreshes the product.
        delta = updates.pop("stock") - product.stock if "stock" in updates else 0
        updated = product
        if updates:
            updated = await self._product_dao.update(session, product.id, **updates)
        if delta:
            await self._restock(session, product.id, delta)
        return updated

    async def delete(self, session: AsyncSession, user: User, product_id: uuid.UUID) -> Product:
        """Delete a product; its sale records cascade with it."""
        product = await self._ensure_product(session, product_id)
        require_owner(user, product.owner_id, "product")
        await self._product_dao.delete(session, product.id)
        log.info("product.deleted", product_id=str(product.id))
        return product

    async def _restock(self, session: AsyncSession, product_id: uuid.UUID, delta: int) -> None:
        """Apply a stock update as *delta* from the value read.

        Sales recorded after the read stay subtracted, so a restock never
        overwrites them. Fails with :class:`ConflictError` when those sales
        leave too little stock for the requested reduction.
        """
        new_stock = await self._product_dao.adjust_stock(session, product_id, delta)
        if new_stock is None:
            log.warning("product.restock_conflict", product_id=str(product_id), delta=delta)
            raise ConflictError("stock changed while updating; retry with the current stock")
        log.info("product.restocked", product_id=str(product_id), delta=delta, stock=new_stock)

    async def _ensure_product(self, session: AsyncSession, product_id: uuid.UUID) -> Product:
        product = await self._product_dao.get_by_id(session, product_id)
        if product is None:
            raise NotFoundError("product not found")
        return product
