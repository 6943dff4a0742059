"""Product request/response schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CreateProductRequest(BaseModel):
    name: str = Field(min_length=1)
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    stock: int = Field(0, ge=0)
    image: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _strip_whitespace(cls, v: str) -> str:
        return v.strip() if isinstance(v, str) else v


class UpdateProductRequest(BaseModel):
    name: str | None = Field(None, min_length=1)
    price: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    stock: int | None = Field(None, ge=0)
    image: str | None = None


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    price: Decimal
    stock: int
    image: str | None
    owner_id: uuid.UUID | None
    created_at: datetime
    updated_at: datetime


class ProductDetail(ProductResponse):
    units_sold: int
