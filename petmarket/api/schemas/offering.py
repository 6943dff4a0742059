"""Grooming / photography service schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class CreateOfferingRequest(BaseModel):
    name: str = Field(min_length=1)
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)


class UpdateOfferingRequest(BaseModel):
    name: str | None = Field(None, min_length=1)
    price: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)


class OfferingResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    price: Decimal
    owner_id: uuid.UUID | None
    created_at: datetime
    updated_at: datetime
