"""Tests for OfferingService (grooming and photography services)."""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from fakes import make_user
from petmarket.dao.base import Page
from petmarket.dao.grooming_service_dao import GroomingServiceDAO
from petmarket.dao.photography_service_dao import PhotographyServiceDAO
from petmarket.models.grooming_service import GroomingService
from petmarket.services import NotFoundError, PermissionDeniedError, ValidationError
from petmarket.services.offering_service import OfferingService


def _make_offering(**overrides) -> GroomingService:
    defaults = {
        "id": uuid.uuid4(),
        "name": "Full groom",
        "price": Decimal("35.00"),
        "owner_id": uuid.uuid4(),
        "created_at": datetime.now(timezone.utc),
        "updated_at": datetime.now(timezone.utc),
    }
    defaults.update(overrides)
    return GroomingService(**defaults)


def _make_service() -> tuple[OfferingService, GroomingServiceDAO]:
    dao = GroomingServiceDAO()
    return OfferingService(dao, "grooming service"), dao


class TestReads:
    async def test_get_not_found_names_the_table(self):
        dao = PhotographyServiceDAO()
        dao.get_by_id = AsyncMock(return_value=None)
        service = OfferingService(dao, "photography service")

        with pytest.raises(NotFoundError, match="photography service not found"):
            await service.get(AsyncMock(), uuid.uuid4())

    async def test_list_by_owner(self):
        service, dao = _make_service()
        dao.list_paginated = AsyncMock(
            return_value=Page(data=[], next_cursor=None, has_more=False)
        )
        dao.count = AsyncMock(return_value=0)
        owner_id = uuid.uuid4()
        session = AsyncMock()

        result = await service.list(session, owner_id=owner_id)

        assert result["total"] == 0
        dao.count.assert_awaited_once_with(session, owner_id=owner_id)


class TestCreate:
    async def test_owner_is_caller(self):
        seller = make_user("seller")
        service, dao = _make_service()
        dao.create = AsyncMock(return_value=_make_offering(owner_id=seller.id))

        await service.create(AsyncMock(), seller, name="Full groom", price=Decimal("35"))

        assert dao.create.call_args.kwargs == {
            "name": "Full groom",
            "price": Decimal("35"),
            "owner_id": seller.id,
        }

    async def test_negative_price(self):
        service, dao = _make_service()
        dao.create = AsyncMock()

        with pytest.raises(ValidationError, match="price"):
            await service.create(AsyncMock(), make_user("seller"), name="x", price=Decimal("-1"))
        dao.create.assert_not_awaited()


class TestUpdate:
    async def test_reprice(self):
        seller = make_user("seller")
        offering = _make_offering(owner_id=seller.id)
        service, dao = _make_service()
        dao.get_by_id = AsyncMock(return_value=offering)
        dao.update = AsyncMock(return_value=offering)

        await service.update(
            AsyncMock(), seller, offering.id, fields_set={"price"}, price=Decimal("40"), name=None
        )

        assert dao.update.call_args.kwargs == {"price": Decimal("40")}

    async def test_null_name_ignored(self):
        seller = make_user("seller")
        offering = _make_offering(owner_id=seller.id)
        service, dao = _make_service()
        dao.get_by_id = AsyncMock(return_value=offering)
        dao.update = AsyncMock()

        result = await service.update(
            AsyncMock(), seller, offering.id, fields_set={"name"}, name=None
        )

        assert result is offering
        dao.update.assert_not_awaited()

    async def test_not_owner(self):
        offering = _make_offering()
        service, dao = _make_service()
        dao.get_by_id = AsyncMock(return_value=offering)

        with pytest.raises(PermissionDeniedError, match="not allowed to modify this grooming service"):
            await service.update(
                AsyncMock(), make_user("seller"), offering.id, fields_set={"name"}, name="x"
            )


class TestDelete:
    async def test_owner_deletes(self):
        seller = make_user("seller")
        offering = _make_offering(owner_id=seller.id)
        service, dao = _make_service()
        dao.get_by_id = AsyncMock(return_value=offering)
        dao.delete = AsyncMock(return_value=True)
        session = AsyncMock()

        assert await service.delete(session, seller, offering.id) is offering
        dao.delete.assert_awaited_once_with(session, offering.id)
