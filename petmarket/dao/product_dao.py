"""ProductDAO — products table operations."""

import uuid

from sqlalchemy import func, update
from sqlalchemy.ext.asyncio import AsyncSession

from petmarket.dao.base import BaseDAO
from petmarket.models.product import Product


class ProductDAO(BaseDAO[Product]):
    model = Product

    async def adjust_stock(
        self,
        session: AsyncSession,
        product_id: uuid.UUID,
        delta: int,
    ) -> int | None:
        """Atomically add *delta* to the product's stock.

        Single conditional UPDATE: the row is only touched when
        ``stock + delta >= 0`` holds at write time, so a concurrent sale
        that consumed the stock after our read cannot drive it negative.

        Returns the new stock, or None if the product is missing or the
        guard rejected the change.
        """
        self._require_pk(product_id)
        stmt = (
            update(Product)
            .where(Product.id == product_id, Product.stock + delta >= 0)
            .values(stock=Product.stock + delta, updated_at=func.now())
            .returning(Product.stock)
            .execution_options(synchronize_session="fetch")
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()
