"""businesses table."""

import uuid
from typing import Optional

from sqlalchemy import ForeignKey, Index, Text, desc, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from petmarket.core.database import Base, TimestampMixin


class Business(TimestampMixin, Base):
    __tablename__ = "businesses"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, server_default=func.gen_random_uuid()
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    # Deleting a category leaves its businesses uncategorised.
    category_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("business_categories.id", ondelete="SET NULL"),
    )
    image: Mapped[Optional[str]] = mapped_column(Text)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    __table_args__ = (
        Index("idx_businesses_owner", "owner_id"),
        Index("idx_businesses_category", "category_id"),
        Index("idx_businesses_cursor", desc("created_at"), desc("id")),
    )
