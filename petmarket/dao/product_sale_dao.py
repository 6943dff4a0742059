"""ProductSaleDAO — product_sales table operations."""

import uuid

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from petmarket.dao.base import BaseDAO
from petmarket.models.product_sale import ProductSale


class ProductSaleDAO(BaseDAO[ProductSale]):
    model = ProductSale

    async def quantity_sold(self, session: AsyncSession, product_id: uuid.UUID) -> int:
        """Sum of quantities over every recorded sale of a product."""
        stmt = select(func.coalesce(func.sum(ProductSale.quantity), 0)).where(
            ProductSale.product_id == product_id
        )
        result = await session.execute(stmt)
        return int(result.scalar_one())
