"""TransactionDAO — transactions table operations."""

import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from petmarket.dao.base import BaseDAO
from petmarket.models.transaction import Transaction


class TransactionDAO(BaseDAO[Transaction]):
    model = Transaction

    async def list_open_for_pet(
        self, session: AsyncSession, pet_id: uuid.UUID
    ) -> list[Transaction]:
        """Transactions holding the pet (every status except cancelled)."""
        stmt = select(Transaction).where(
            Transaction.pet_id == pet_id,
            Transaction.status != "cancelled",
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())
