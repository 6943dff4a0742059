"""Tests for ProductService."""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from fakes import FakeProductDAO, FakeProductSaleDAO, make_user
from petmarket.dao.base import Page
from petmarket.dao.product_dao import ProductDAO
from petmarket.dao.product_sale_dao import ProductSaleDAO
from petmarket.models.product import Product
from petmarket.services import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from petmarket.services.product_service import ProductService

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_product(**overrides) -> Product:
    defaults = {
        "id": uuid.uuid4(),
        "name": "Dog Food",
        "price": Decimal("12.50"),
        "stock": 10,
        "image": None,
        "owner_id": None,
        "created_at": datetime.now(timezone.utc),
        "updated_at": datetime.now(timezone.utc),
    }
    defaults.update(overrides)
    return Product(**defaults)


def _make_service() -> tuple[ProductService, ProductDAO, ProductSaleDAO]:
    product_dao = ProductDAO()
    sale_dao = ProductSaleDAO()
    return ProductService(product_dao, sale_dao), product_dao, sale_dao


# ---------------------------------------------------------------------------
# get / list
# ---------------------------------------------------------------------------


class TestGet:
    async def test_with_units_sold(self):
        product = _make_product()
        service, product_dao, sale_dao = _make_service()
        product_dao.get_by_id = AsyncMock(return_value=product)
        sale_dao.quantity_sold = AsyncMock(return_value=7)
        session = AsyncMock()

        result = await service.get(session, product.id)

        assert result == {"product": product, "units_sold": 7}
        sale_dao.quantity_sold.assert_awaited_once_with(session, product.id)

    async def test_not_found(self):
        service, product_dao, _ = _make_service()
        product_dao.get_by_id = AsyncMock(return_value=None)

        with pytest.raises(NotFoundError, match="product not found"):
            await service.get(AsyncMock(), uuid.uuid4())


class TestList:
    async def test_forwards_owner_filter(self):
        product = _make_product()
        owner_id = uuid.uuid4()
        service, product_dao, _ = _make_service()
        product_dao.list_paginated = AsyncMock(
            return_value=Page(data=[product], next_cursor="abc", has_more=True)
        )
        product_dao.count = AsyncMock(return_value=41)
        session = AsyncMock()

        result = await service.list(session, cursor=None, page_size=1, owner_id=owner_id)

        assert result["data"] == [product]
        assert result["next_cursor"] == "abc"
        assert result["has_more"] is True
        assert result["total"] == 41
        product_dao.list_paginated.assert_awaited_once_with(session, None, 1, owner_id=owner_id)
        product_dao.count.assert_awaited_once_with(session, owner_id=owner_id)


# ---------------------------------------------------------------------------
# create
# ---------------------------------------------------------------------------


class TestCreate:
    async def test_owner_recorded(self):
        seller = make_user("seller")
        product = _make_product(owner_id=seller.id)
        service, product_dao, _ = _make_service()
        product_dao.create = AsyncMock(return_value=product)

        result = await service.create(
            AsyncMock(), seller, name="Dog Food", price=Decimal("12.50"), stock=10
        )

        assert result is product
        kwargs = product_dao.create.call_args.kwargs
        assert kwargs["owner_id"] == seller.id
        assert kwargs["stock"] == 10
        assert kwargs["image"] is None

    @pytest.mark.parametrize(
        "price, stock, match",
        [(Decimal("-0.01"), 1, "price"), (Decimal("1"), -1, "stock")],
    )
    async def test_negative_amounts(self, price, stock, match):
        service, product_dao, _ = _make_service()
        product_dao.create = AsyncMock()

        with pytest.raises(ValidationError, match=match):
            await service.create(AsyncMock(), make_user("seller"), name="x", price=price, stock=stock)
        product_dao.create.assert_not_awaited()


# ---------------------------------------------------------------------------
# update
# ---------------------------------------------------------------------------


class TestUpdate:
    async def test_restock_applies_delta(self):
        seller = make_user("seller")
        product = _make_product(owner_id=seller.id, stock=10)
        service, product_dao, _ = _make_service()
        product_dao.get_by_id = AsyncMock(return_value=product)
        product_dao.update = AsyncMock()
        product_dao.adjust_stock = AsyncMock(return_value=25)
        session = AsyncMock()

        await service.update(
            session, seller, product.id, fields_set={"stock"}, stock=25, name=None
        )

        product_dao.adjust_stock.assert_awaited_once_with(session, product.id, 15)
        product_dao.update.assert_not_awaited()

    async def test_same_stock_is_noop(self):
        seller = make_user("seller")
        product = _make_product(owner_id=seller.id, stock=10)
        service, product_dao, _ = _make_service()
        product_dao.get_by_id = AsyncMock(return_value=product)
        product_dao.adjust_stock = AsyncMock()

        await service.update(AsyncMock(), seller, product.id, fields_set={"stock"}, stock=10)

        product_dao.adjust_stock.assert_not_awaited()

    async def test_restock_with_other_fields(self):
        seller = make_user("seller")
        product = _make_product(owner_id=seller.id, stock=10)
        service, product_dao, _ = _make_service()
        product_dao.get_by_id = AsyncMock(return_value=product)
        product_dao.update = AsyncMock(return_value=product)
        product_dao.adjust_stock = AsyncMock(return_value=4)

        await service.update(
            AsyncMock(),
            seller,
            product.id,
            fields_set={"name", "stock"},
            name="Cat Food",
            stock=4,
        )

        assert product_dao.update.call_args.kwargs == {"name": "Cat Food"}
        assert product_dao.adjust_stock.call_args.args[2] == -6

    async def test_restock_keeps_concurrent_sale(self, store, fake_session):
        seller = make_user("seller")
        product = store.add_product(stock=10, owner_id=seller.id)
        product_dao = FakeProductDAO(store)
        service = ProductService(product_dao, FakeProductSaleDAO(store))
        real_adjust = product_dao.adjust_stock

        async def _sale_lands_first(session, product_id, delta):
            store.products[product_id].stock = 7
            return await real_adjust(session, product_id, delta)

        product_dao.adjust_stock = _sale_lands_first

        await service.update(fake_session, seller, product.id, fields_set={"stock"}, stock=25)

        assert store.products[product.id].stock == 22

    async def test_reduction_below_concurrent_sales_conflicts(self, store, fake_session):
        seller = make_user("seller")
        product = store.add_product(stock=10, owner_id=seller.id)
        product_dao = FakeProductDAO(store)
        service = ProductService(product_dao, FakeProductSaleDAO(store))
        real_adjust = product_dao.adjust_stock

        async def _sale_lands_first(session, product_id, delta):
            store.products[product_id].stock = 5
            return await real_adjust(session, product_id, delta)

        product_dao.adjust_stock = _sale_lands_first

        with pytest.raises(ConflictError, match="stock changed"):
            await service.update(fake_session, seller, product.id, fields_set={"stock"}, stock=2)
        assert store.products[product.id].stock == 5

    async def test_explicit_null_clears_image(self):
        seller = make_user("seller")
        product = _make_product(owner_id=seller.id, image="products/a.png")
        service, product_dao, _ = _make_service()
        product_dao.get_by_id = AsyncMock(return_value=product)
        product_dao.update = AsyncMock(return_value=product)

        await service.update(
            AsyncMock(), seller, product.id, fields_set={"image"}, image=None, price=None
        )

        assert product_dao.update.call_args.kwargs == {"image": None}

    async def test_omitted_fields_untouched(self):
        seller = make_user("seller")
        product = _make_product(owner_id=seller.id)
        service, product_dao, _ = _make_service()
        product_dao.get_by_id = AsyncMock(return_value=product)
        product_dao.update = AsyncMock()

        result = await service.update(
            AsyncMock(), seller, product.id, fields_set=set(), name="ignored"
        )

        assert result is product
        product_dao.update.assert_not_awaited()

    async def test_not_owner(self):
        product = _make_product(owner_id=uuid.uuid4())
        service, product_dao, _ = _make_service()
        product_dao.get_by_id = AsyncMock(return_value=product)

        with pytest.raises(PermissionDeniedError):
            await service.update(
                AsyncMock(), make_user("seller"), product.id, fields_set={"stock"}, stock=1
            )

    async def test_admin_may_update(self):
        product = _make_product(owner_id=uuid.uuid4())
        service, product_dao, _ = _make_service()
        product_dao.get_by_id = AsyncMock(return_value=product)
        product_dao.update = AsyncMock(return_value=product)

        await service.update(
            AsyncMock(), make_user("admin"), product.id, fields_set={"name"}, name="Cat Food"
        )

        product_dao.update.assert_awaited_once()

    async def test_negative_stock(self):
        seller = make_user("seller")
        product = _make_product(owner_id=seller.id)
        service, product_dao, _ = _make_service()
        product_dao.get_by_id = AsyncMock(return_value=product)

        with pytest.raises(ValidationError, match="stock"):
            await service.update(AsyncMock(), seller, product.id, fields_set={"stock"}, stock=-3)


# ---------------------------------------------------------------------------
# delete
# ---------------------------------------------------------------------------


class TestDelete:
    async def test_owner_deletes(self):
        seller = make_user("seller")
        product = _make_product(owner_id=seller.id)
        service, product_dao, _ = _make_service()
        product_dao.get_by_id = AsyncMock(return_value=product)
        product_dao.delete = AsyncMock(return_value=True)
        session = AsyncMock()

        result = await service.delete(session, seller, product.id)

        assert result is product
        product_dao.delete.assert_awaited_once_with(session, product.id)

    async def test_ownerless_product_needs_admin(self):
        product = _make_product(owner_id=None)
        service, product_dao, _ = _make_service()
        product_dao.get_by_id = AsyncMock(return_value=product)
        product_dao.delete = AsyncMock()

        with pytest.raises(PermissionDeniedError):
            await service.delete(AsyncMock(), make_user("seller"), product.id)
        product_dao.delete.assert_not_awaited()
