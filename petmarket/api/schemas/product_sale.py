"""Product-sale request/response schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class ProductSaleRequest(BaseModel):
    """Body of both create and update.

    On update an omitted ``transaction_id`` keeps the sale's current link;
    an explicit ``null`` unlinks it.
    """

    product_id: uuid.UUID
    quantity: int = Field(gt=0)
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    transaction_id: uuid.UUID | None = None


class ProductSaleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    product_id: uuid.UUID
    transaction_id: uuid.UUID | None
    quantity: int
    price: Decimal
    created_at: datetime
    updated_at: datetime
