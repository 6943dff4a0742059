"""PetDAO — pets table operations."""

import uuid

from sqlalchemy import func, update
from sqlalchemy.ext.asyncio import AsyncSession

from petmarket.dao.base import BaseDAO
from petmarket.models.pet import Pet


class PetDAO(BaseDAO[Pet]):
    model = Pet

    async def claim(self, session: AsyncSession, pet_id: uuid.UUID) -> bool:
        """Flip ``available`` true -> false in one conditional UPDATE.

        Returns False when the pet is missing or already claimed by another
        transaction.
        """
        return await self._set_available(session, pet_id, available=False)

    async def release(self, session: AsyncSession, pet_id: uuid.UUID) -> bool:
        """Flip ``available`` false -> true. Returns False if nothing changed."""
        return await self._set_available(session, pet_id, available=True)

    async def _set_available(
        self, session: AsyncSession, pet_id: uuid.UUID, *, available: bool
    ) -> bool:
        self._require_pk(pet_id)
        stmt = (
            update(Pet)
            .where(Pet.id == pet_id, Pet.available.is_(not available))
            .values(available=available, updated_at=func.now())
            .returning(Pet.id)
            .execution_options(synchronize_session="fetch")
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None
