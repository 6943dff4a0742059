"""Business-category and pet-category schemas."""

from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CategoryRequest(BaseModel):
    """Pet-category body; also the base of the business-category bodies."""

    name: str = Field(min_length=1)

    @field_validator("name", mode="before")
    @classmethod
    def _strip_whitespace(cls, v: str) -> str:
        return v.strip() if isinstance(v, str) else v


class CreateBusinessCategoryRequest(CategoryRequest):
    image: str | None = None


class UpdateBusinessCategoryRequest(BaseModel):
    name: str | None = Field(None, min_length=1)
    image: str | None = None


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    created_at: datetime
    updated_at: datetime


class BusinessCategoryResponse(CategoryResponse):
    image: str | None
