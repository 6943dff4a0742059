"""SaleRecorder — product sales that keep product stock consistent.

Every mutation is a short read-check-write sequence:

* create:  stock -= quantity
* update:  stock += old_quantity - new_quantity (or move between products)
* delete:  stock += quantity

The read gives the caller a precise error early; the write is a conditional
``UPDATE ... WHERE stock + delta >= 0`` (:meth:`ProductDAO.adjust_stock`), so
the database re-checks the guard at write time and two concurrent sales cannot
oversell. All calls share the request's session/transaction: an exception
anywhere rolls back the sale row together with the stock change. When the
guard rejects a change after the sale row was written, the row is reverted
explicitly before raising, so the sequence never leaves an orphan sale even
on a store without transactions.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from petmarket.dao.product_dao import ProductDAO
from petmarket.dao.product_sale_dao import ProductSaleDAO
from petmarket.dao.transaction_dao import TransactionDAO
from petmarket.models.product import Product
from petmarket.models.product_sale import ProductSale
from petmarket.services import InsufficientStockError, NotFoundError, ValidationError

log = structlog.get_logger(__name__)

# Marks an omitted transaction_id on update: the sale keeps its current link.
_KEEP = object()


def _check_line(quantity: int, price: Decimal) -> None:
    if quantity <= 0:
        raise ValidationError("quantity must be a positive integer")
    if price < 0:
        raise ValidationError("price must be a non-negative number")


class SaleRecorder:
    """Records product sales and reconciles product stock."""

    def __init__(
        self,
        product_dao: ProductDAO,
        product_sale_dao: ProductSaleDAO,
        transaction_dao: TransactionDAO,
    ) -> None:
        self._product_dao = product_dao
        self._sale_dao = product_sale_dao
        self._tx_dao = transaction_dao

    # ── reads ─────────────────────────────────────────────────────────────

    async def get(self, session: AsyncSession, sale_id: uuid.UUID) -> ProductSale:
        sale = await self._sale_dao.get_by_id(session, sale_id)
        if sale is None:
            raise NotFoundError("product sale not found")
        return sale

    async def list(
        self,
        session: AsyncSession,
        cursor: str | None = None,
        page_size: int = 20,
        product_id: uuid.UUID | None = None,
        transaction_id: uuid.UUID | None = None,
    ) -> dict:
        filters = {"product_id": product_id, "transaction_id": transaction_id}
        page = await self._sale_dao.list_paginated(session, cursor, page_size, **filters)
        total = await self._sale_dao.count(session, **filters)
        return {
            "data": page.data,
            "next_cursor": page.next_cursor,
            "has_more": page.has_more,
            "total": total,
        }

    # ── mutations ─────────────────────────────────────────────────────────

    async def create(
        self,
        session: AsyncSession,
        *,
        product_id: uuid.UUID,
        quantity: int,
        price: Decimal,
        transaction_id: uuid.UUID | None = None,
    ) -> ProductSale:
        """Record a sale and take *quantity* units out of stock.

        Raises :class:`NotFoundError` for an unknown product or transaction and
        :class:`InsufficientStockError` when the stock cannot cover the sale.
        """
        _check_line(quantity, price)
        product = await self._ensure_product(session, product_id)
        if quantity > product.stock:
            raise InsufficientStockError(product.stock, quantity)
        if transaction_id is not None:
            await self._ensure_transaction(session, transaction_id)

        sale = await self._sale_dao.create(
            session,
            product_id=product.id,
            transaction_id=transaction_id,
            quantity=quantity,
            price=price,
        )

        new_stock = await self._product_dao.adjust_stock(session, product.id, -quantity)
        if new_stock is None:
            # Stock was consumed between our read and the write.
            await self._sale_dao.delete(session, sale.id)
            log.warning("sale.create_lost_race", product_id=str(product.id), quantity=quantity)
            raise InsufficientStockError(None, quantity)

        log.info(
            "sale.created",
            sale_id=str(sale.id),
            product_id=str(product.id),
            quantity=quantity,
            stock=new_stock,
        )
        return sale

    async def update(
        self,
        session: AsyncSession,
        sale_id: uuid.UUID,
        *,
        product_id: uuid.UUID,
        quantity: int,
        price: Decimal,
        transaction_id: uuid.UUID | None | object = _KEEP,
    ) -> ProductSale:
        """Replace a sale line and reconcile stock.

        Omitting *transaction_id* keeps the current link; an explicit None
        unlinks the sale.

        Same product: ``stock + old_quantity - new_quantity`` must stay >= 0.
        Different product: the old product gets its units back and the new
        product must cover the full new quantity.
        """
        _check_line(quantity, price)
        sale = await self.get(session, sale_id)
        if transaction_id is _KEEP:
            transaction_id = sale.transaction_id
        product = await self._ensure_product(session, product_id)
        old_product_id, old_quantity = sale.product_id, sale.quantity
        old_values = {
            "product_id": sale.product_id,
            "transaction_id": sale.transaction_id,
            "quantity": sale.quantity,
            "price": sale.price,
        }

        same_product = product.id == old_product_id
        if same_product:
            delta = old_quantity - quantity
            if product.stock + delta < 0:
                raise InsufficientStockError(product.stock + old_quantity, quantity)
        else:
            delta = -quantity
            if quantity > product.stock:
                raise InsufficientStockError(product.stock, quantity)
        if transaction_id is not None and transaction_id != sale.transaction_id:
            await self._ensure_transaction(session, transaction_id)

        updated = await self._sale_dao.update(
            session,
            sale.id,
            product_id=product.id,
            transaction_id=transaction_id,
            quantity=quantity,
            price=price,
        )

        if delta != 0:
            new_stock = await self._product_dao.adjust_stock(session, product.id, delta)
            if new_stock is None:
                await self._sale_dao.update(session, sale.id, **old_values)
                log.warning("sale.update_lost_race", sale_id=str(sale.id), quantity=quantity)
                raise InsufficientStockError(None, quantity)
        if not same_product:
            await self._restore(session, old_product_id, old_quantity, sale.id)

        log.info(
            "sale.updated",
            sale_id=str(sale.id),
            product_id=str(product.id),
            old_quantity=old_quantity,
            quantity=quantity,
        )
        return updated

    async def delete(self, session: AsyncSession, sale_id: uuid.UUID) -> ProductSale:
        """Delete a sale and put its units back into stock."""
        sale = await self.get(session, sale_id)
        await self._sale_dao.delete(session, sale.id)
        await self._restore(session, sale.product_id, sale.quantity, sale.id)
        log.info("sale.deleted", sale_id=str(sale.id), quantity=sale.quantity)
        return sale

    # ── private helpers ───────────────────────────────────────────────────

    async def _restore(
        self,
        session: AsyncSession,
        product_id: uuid.UUID,
        quantity: int,
        sale_id: uuid.UUID,
    ) -> None:
        restored = await self._product_dao.adjust_stock(session, product_id, quantity)
        if restored is None:
            # Only possible when the product row itself is gone.
            log.warning(
                "stock.restore_skipped",
                product_id=str(product_id),
                sale_id=str(sale_id),
                quantity=quantity,
            )

    async def _ensure_product(self, session: AsyncSession, product_id: uuid.UUID) -> Product:
        product = await self._product_dao.get_by_id(session, product_id)
        if product is None:
            raise NotFoundError("product not found")
        return product

    async def _ensure_transaction(self, session: AsyncSession, transaction_id: uuid.UUID) -> None:
        if await self._tx_dao.get_by_id(session, transaction_id) is None:
            raise NotFoundError("transaction not found")
