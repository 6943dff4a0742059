"""PetMarket REST API — FastAPI application factory."""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from petmarket.api.deps import (
    dispose_engine,
    get_auth_service,
    get_engine,
    get_grooming_offerings,
    get_photography_offerings,
    init_session_factory,
)
from petmarket.api.errors import register_error_handlers
from petmarket.api.middleware.request_id import RequestIDMiddleware
from petmarket.api.routers import (
    auth,
    business_categories,
    businesses,
    offerings,
    pet_categories,
    pets,
    product_sales,
    products,
    transactions,
)
from petmarket.core.database import create_schema
from petmarket.core.logging import setup_logging

log = structlog.get_logger(__name__)

API_PREFIX = "/api/v1"


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: init DB (optionally the schema), ensure admin. Shutdown: dispose engine."""
    factory = init_session_factory()
    if os.environ.get("PETMARKET_CREATE_SCHEMA") == "1":
        await create_schema(get_engine())
        log.info("database.schema_created")

    async with factory() as session:
        async with session.begin():
            await get_auth_service().ensure_admin_exists(session)

    log.info("app.started")
    yield
    await dispose_engine()


def include_routers(app: FastAPI) -> None:
    app.include_router(auth.router, prefix=f"{API_PREFIX}/auth", tags=["auth"])
    app.include_router(products.router, prefix=f"{API_PREFIX}/products", tags=["products"])
    app.include_router(pets.router, prefix=f"{API_PREFIX}/pets", tags=["pets"])
    app.include_router(
        product_sales.router, prefix=f"{API_PREFIX}/product-sales", tags=["product-sales"]
    )
    app.include_router(
        transactions.router, prefix=f"{API_PREFIX}/transactions", tags=["transactions"]
    )
    app.include_router(
        pet_categories.router, prefix=f"{API_PREFIX}/pet-categories", tags=["pet-categories"]
    )
    app.include_router(
        business_categories.router,
        prefix=f"{API_PREFIX}/business-categories",
        tags=["business-categories"],
    )
    app.include_router(businesses.router, prefix=f"{API_PREFIX}/businesses", tags=["businesses"])
    app.include_router(
        offerings.build_router(get_grooming_offerings, "Grooming service"),
        prefix=f"{API_PREFIX}/grooming-services",
        tags=["grooming-services"],
    )
    app.include_router(
        offerings.build_router(get_photography_offerings, "Photography service"),
        prefix=f"{API_PREFIX}/photography-services",
        tags=["photography-services"],
    )


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    setup_logging()

    app = FastAPI(
        title="PetMarket",
        docs_url=f"{API_PREFIX}/docs",
        openapi_url=f"{API_PREFIX}/openapi.json",
        lifespan=_lifespan,
    )

    register_error_handlers(app)

    cors_origins = os.environ.get("PETMARKET_CORS_ORIGINS", "http://localhost:3000")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in cors_origins.split(",")],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health", tags=["ops"])
    async def health() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    include_routers(app)
    return app
