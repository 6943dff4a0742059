"""Pet request/response schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class CreatePetRequest(BaseModel):
    name: str = Field(min_length=1)
    location: str = Field(min_length=1)
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    image: str | None = None
    category_id: uuid.UUID | None = None


class UpdatePetRequest(BaseModel):
    name: str | None = Field(None, min_length=1)
    location: str | None = Field(None, min_length=1)
    price: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    image: str | None = None
    category_id: uuid.UUID | None = None


class PetResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    location: str
    price: Decimal
    image: str | None
    category_id: uuid.UUID | None = None
    available: bool
    owner_id: uuid.UUID
    created_at: datetime
    updated_at: datetime
