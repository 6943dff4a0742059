"""Dependency injection — session, auth, and service wiring.

Services receive their DAOs through the constructor and a session per call;
routers receive services through ``Depends`` so tests can swap any of them
via ``app.dependency_overrides``.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from petmarket.core.database import build_engine, build_session_factory
from petmarket.dao.business_category_dao import BusinessCategoryDAO
from petmarket.dao.business_dao import BusinessDAO
from petmarket.dao.grooming_service_dao import GroomingServiceDAO
from petmarket.dao.pet_category_dao import PetCategoryDAO
from petmarket.dao.pet_dao import PetDAO
from petmarket.dao.photography_service_dao import PhotographyServiceDAO
from petmarket.dao.product_dao import ProductDAO
from petmarket.dao.product_sale_dao import ProductSaleDAO
from petmarket.dao.transaction_dao import TransactionDAO
from petmarket.dao.user_dao import UserDAO
from petmarket.models.user import User
from petmarket.services import AuthenticationError
from petmarket.services.auth_service import AuthService
from petmarket.services.business_service import BusinessService
from petmarket.services.category_service import CategoryService
from petmarket.services.offering_service import OfferingService
from petmarket.services.pet_service import PetService
from petmarket.services.product_service import ProductService
from petmarket.services.sale_service import SaleRecorder
from petmarket.services.transaction_service import TransactionService

# ---------------------------------------------------------------------------
# DAOs (stateless, shared)
# ---------------------------------------------------------------------------
_user_dao = UserDAO()
_product_dao = ProductDAO()
_product_sale_dao = ProductSaleDAO()
_pet_dao = PetDAO()
_transaction_dao = TransactionDAO()
_pet_category_dao = PetCategoryDAO()
_business_category_dao = BusinessCategoryDAO()
_business_dao = BusinessDAO()
_grooming_dao = GroomingServiceDAO()
_photography_dao = PhotographyServiceDAO()

# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------
_auth_service = AuthService(_user_dao)
_product_service = ProductService(_product_dao, _product_sale_dao)
_pet_service = PetService(_pet_dao, _transaction_dao, _pet_category_dao)
_sale_recorder = SaleRecorder(_product_dao, _product_sale_dao, _transaction_dao)
_transaction_service = TransactionService(_transaction_dao, _pet_dao)
_pet_category_service = CategoryService(_pet_category_dao, "pet category")
_business_category_service = CategoryService(_business_category_dao, "business category")
_business_service = BusinessService(_business_dao, _business_category_dao)
_grooming_offerings = OfferingService(_grooming_dao, "grooming service")
_photography_offerings = OfferingService(_photography_dao, "photography service")

# ---------------------------------------------------------------------------
# Engine / session factory (initialised by app lifespan)
# ---------------------------------------------------------------------------
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def init_session_factory(database_url: str | None = None) -> async_sessionmaker[AsyncSession]:
    """Create the async engine and session factory. Called once at startup."""
    global _engine, _session_factory  # noqa: PLW0603
    _engine = build_engine(database_url)
    _session_factory = build_session_factory(_engine)
    return _session_factory


def get_engine() -> AsyncEngine:
    if _engine is None:
        raise RuntimeError("call init_session_factory() first")
    return _engine


async def dispose_engine() -> None:
    """Dispose the async engine, closing all pooled connections."""
    global _engine, _session_factory  # noqa: PLW0603
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None


def set_session_factory(factory: async_sessionmaker[AsyncSession]) -> None:
    """Override session factory (for testing)."""
    global _session_factory  # noqa: PLW0603
    _session_factory = factory


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a per-request session: one database transaction per request.

    Commits when the handler returns, rolls back when it raises, so a
    multi-step sale never commits half of its writes.
    """
    if _session_factory is None:
        raise RuntimeError("call init_session_factory() before handling requests")
    async with _session_factory() as session:
        async with session.begin():
            yield session


# ---------------------------------------------------------------------------
# Auth dependency
# ---------------------------------------------------------------------------

_bearer = HTTPBearer(auto_error=False)


async def get_current_user(
    session: AsyncSession = Depends(get_session),
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> User:
    """Extract and validate the Bearer token, return the authenticated User."""
    if credentials is None:
        raise AuthenticationError("missing authorization header")
    return await _auth_service.get_current_user(session, credentials.credentials)


# ---------------------------------------------------------------------------
# Service getters (for Depends())
# ---------------------------------------------------------------------------


def get_auth_service() -> AuthService:
    return _auth_service


def get_product_service() -> ProductService:
    return _product_service


def get_pet_service() -> PetService:
    return _pet_service


def get_sale_recorder() -> SaleRecorder:
    return _sale_recorder


def get_transaction_service() -> TransactionService:
    return _transaction_service


def get_pet_category_service() -> CategoryService:
    return _pet_category_service


def get_business_category_service() -> CategoryService:
    return _business_category_service


def get_business_service() -> BusinessService:
    return _business_service


def get_grooming_offerings() -> OfferingService:
    return _grooming_offerings


def get_photography_offerings() -> OfferingService:
    return _photography_offerings
