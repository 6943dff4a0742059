"""transactions table."""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Numeric,
    desc,
    func,
    text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from petmarket.core.database import Base, TimestampMixin

TRANSACTION_STATUSES = ("pending", "done", "cancelled")
TRANSACTION_TYPES = ("pet", "product")

transaction_status_enum = Enum(*TRANSACTION_STATUSES, name="transaction_status")
transaction_type_enum = Enum(*TRANSACTION_TYPES, name="transaction_type")


class Transaction(TimestampMixin, Base):
    __tablename__ = "transactions"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, server_default=func.gen_random_uuid()
    )
    buyer_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    seller_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
    )
    pet_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("pets.id", ondelete="SET NULL"),
    )
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    status: Mapped[str] = mapped_column(
        transaction_status_enum, nullable=False, server_default=text("'pending'")
    )
    type: Mapped[str] = mapped_column(
        transaction_type_enum, nullable=False, server_default=text("'pet'")
    )
    transaction_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        CheckConstraint("price >= 0", name="price_non_negative"),
        Index("idx_transactions_pet", "pet_id"),
        Index("idx_transactions_buyer", "buyer_id"),
        Index("idx_transactions_cursor", desc("created_at"), desc("id")),
    )
