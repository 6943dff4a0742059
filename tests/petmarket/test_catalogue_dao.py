"""Tests for the category, business and offering tables."""

from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError

from petmarket.dao.business_category_dao import BusinessCategoryDAO
from petmarket.dao.business_dao import BusinessDAO
from petmarket.dao.grooming_service_dao import GroomingServiceDAO
from petmarket.dao.pet_category_dao import PetCategoryDAO
from petmarket.dao.pet_dao import PetDAO
from petmarket.dao.user_dao import UserDAO


@pytest.fixture
async def seller(session):
    return await UserDAO().create(
        session,
        username="seller",
        email="seller@example.com",
        password_hash="h",
        role="seller",
    )


class TestCategories:
    async def test_name_unique(self, session):
        dao = PetCategoryDAO()
        await dao.create(session, name="Dogs")

        with pytest.raises(IntegrityError):
            await dao.create(session, name="Dogs")

    async def test_lookup_by_name(self, session):
        dao = BusinessCategoryDAO()
        created = await dao.create(session, name="Vets", image="categories/vets.png")

        found = await dao.get_by_field(session, name="Vets")

        assert found.id == created.id
        assert found.image == "categories/vets.png"

    async def test_deleting_category_uncategorises_pets(self, session, seller):
        category = await PetCategoryDAO().create(session, name="Dogs")
        pet = await PetDAO().create(
            session,
            name="Rex",
            location="Porto",
            price=Decimal("200"),
            owner_id=seller.id,
            category_id=category.id,
        )

        await PetCategoryDAO().delete(session, category.id)
        await session.refresh(pet)

        assert pet.category_id is None

    async def test_deleting_category_uncategorises_businesses(self, session, seller):
        category = await BusinessCategoryDAO().create(session, name="Vets")
        business = await BusinessDAO().create(
            session, name="Happy Paws", category_id=category.id, owner_id=seller.id
        )

        await BusinessCategoryDAO().delete(session, category.id)
        await session.refresh(business)

        assert business.category_id is None


class TestBusinesses:
    async def test_filter_by_category(self, session, seller):
        category = await BusinessCategoryDAO().create(session, name="Groomers")
        dao = BusinessDAO()
        await dao.create(session, name="A", category_id=category.id, owner_id=seller.id)
        await dao.create(session, name="B", owner_id=seller.id)

        assert await dao.count(session, category_id=category.id) == 1
        assert await dao.count(session, owner_id=seller.id) == 2


class TestOfferings:
    async def test_negative_price_violates_check(self, session):
        with pytest.raises(IntegrityError):
            await GroomingServiceDAO().create(session, name="Bath", price=Decimal("-1"))

    async def test_owner_removal_keeps_offering(self, session, seller):
        dao = GroomingServiceDAO()
        offering = await dao.create(
            session, name="Bath", price=Decimal("20"), owner_id=seller.id
        )

        await UserDAO().delete(session, seller.id)
        await session.refresh(offering)

        assert offering.owner_id is None
