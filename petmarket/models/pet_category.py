"""pet_categories table."""

import uuid

from sqlalchemy import Index, Text, desc, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from petmarket.core.database import Base, TimestampMixin


class PetCategory(TimestampMixin, Base):
    __tablename__ = "pet_categories"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, server_default=func.gen_random_uuid()
    )
    name: Mapped[str] = mapped_column(Text, nullable=False, unique=True)

    __table_args__ = (Index("idx_pet_categories_cursor", desc("created_at"), desc("id")),)
