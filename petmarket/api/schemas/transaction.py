"""Transaction request/response schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

TransactionStatus = Literal["pending", "done", "cancelled"]
TransactionType = Literal["pet", "product"]


class CreateTransactionRequest(BaseModel):
    pet_id: uuid.UUID | None = None
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    status: TransactionStatus = "pending"
    type: TransactionType = "pet"

    @model_validator(mode="after")
    def _pet_matches_type(self) -> CreateTransactionRequest:
        if self.type == "pet" and self.pet_id is None:
            raise ValueError("pet_id is required for pet transactions")
        if self.type == "product" and self.pet_id is not None:
            raise ValueError("product transactions cannot reference a pet")
        return self


class UpdateTransactionRequest(BaseModel):
    price: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    status: TransactionStatus | None = None


class TransactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    buyer_id: uuid.UUID
    seller_id: uuid.UUID | None
    pet_id: uuid.UUID | None
    price: Decimal
    status: str
    type: str
    transaction_date: datetime
    created_at: datetime
    updated_at: datetime
