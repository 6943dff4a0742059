"""Business request/response schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class CreateBusinessRequest(BaseModel):
    name: str = Field(min_length=1)
    category_id: uuid.UUID | None = None
    image: str | None = None


class UpdateBusinessRequest(BaseModel):
    name: str | None = Field(None, min_length=1)
    category_id: uuid.UUID | None = None
    image: str | None = None


class BusinessResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    category_id: uuid.UUID | None
    image: str | None
    owner_id: uuid.UUID
    created_at: datetime
    updated_at: datetime
