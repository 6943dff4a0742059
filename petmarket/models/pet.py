"""pets table."""

import uuid
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, Numeric, Text, desc, func, text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from petmarket.core.database import Base, TimestampMixin


class Pet(TimestampMixin, Base):
    __tablename__ = "pets"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, server_default=func.gen_random_uuid()
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    location: Mapped[str] = mapped_column(Text, nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    image: Mapped[Optional[str]] = mapped_column(Text)
    category_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("pet_categories.id", ondelete="SET NULL"),
    )
    # False while a non-cancelled transaction holds the pet.
    available: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("true")
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint("price >= 0", name="price_non_negative"),
        Index("idx_pets_owner", "owner_id"),
        Index("idx_pets_category", "category_id"),
        Index("idx_pets_cursor", desc("created_at"), desc("id")),
    )
