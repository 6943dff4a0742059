"""Tests for ProductDAO.adjust_stock and ProductSaleDAO.quantity_sold."""

import uuid
from decimal import Decimal

import pytest

from petmarket.dao.product_dao import ProductDAO
from petmarket.dao.product_sale_dao import ProductSaleDAO


@pytest.fixture
def dao():
    return ProductDAO()


@pytest.fixture
async def product(dao, session):
    return await dao.create(session, name="Dog Food", price=Decimal("12.50"), stock=10)


class TestAdjustStock:
    async def test_decrement(self, dao, session, product):
        assert await dao.adjust_stock(session, product.id, -4) == 6
        assert (await dao.get_by_id(session, product.id)).stock == 6

    async def test_increment(self, dao, session, product):
        assert await dao.adjust_stock(session, product.id, 5) == 15

    async def test_to_zero(self, dao, session, product):
        assert await dao.adjust_stock(session, product.id, -10) == 0

    async def test_guard_rejects_negative(self, dao, session, product):
        assert await dao.adjust_stock(session, product.id, -11) is None
        assert (await dao.get_by_id(session, product.id)).stock == 10

    async def test_two_sales_exceeding_stock(self, dao, session, product):
        """Both reads saw 10; only the first decrement of 6 can land."""
        assert await dao.adjust_stock(session, product.id, -6) == 4
        assert await dao.adjust_stock(session, product.id, -6) is None
        assert (await dao.get_by_id(session, product.id)).stock == 4

    async def test_missing_product(self, dao, session):
        assert await dao.adjust_stock(session, uuid.uuid4(), 1) is None


class TestQuantitySold:
    async def test_sums_sales(self, session, product):
        sale_dao = ProductSaleDAO()
        await sale_dao.create(session, product_id=product.id, quantity=3, price=Decimal("1"))
        await sale_dao.create(session, product_id=product.id, quantity=4, price=Decimal("1"))

        assert await sale_dao.quantity_sold(session, product.id) == 7

    async def test_no_sales(self, session, product):
        assert await ProductSaleDAO().quantity_sold(session, product.id) == 0

    async def test_sales_cascade_with_product(self, dao, session, product):
        sale_dao = ProductSaleDAO()
        await sale_dao.create(session, product_id=product.id, quantity=1, price=Decimal("1"))

        await dao.delete(session, product.id)

        assert await sale_dao.count(session, product_id=product.id) == 0
