"""UserDAO — users table operations."""

from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from petmarket.dao.base import BaseDAO
from petmarket.models.user import User


class UserDAO(BaseDAO[User]):
    model = User

    async def get_by_email(self, session: AsyncSession, email: str) -> User | None:
        """Look up a user by email (login flow)."""
        return await self.get_by_field(session, email=email)

    async def get_by_username(self, session: AsyncSession, username: str) -> User | None:
        return await self.get_by_field(session, username=username)

    async def upsert(
        self,
        session: AsyncSession,
        *,
        username: str,
        email: str,
        password_hash: str,
        role: str = "admin",
    ) -> User | None:
        """Insert a user or do nothing if the username already exists.

        Used at startup to ensure the bootstrap admin account exists.
        Returns the inserted row, or the existing one on conflict.
        """
        stmt = (
            insert(User)
            .values(
                username=username,
                email=email,
                password_hash=password_hash,
                role=role,
            )
            .on_conflict_do_nothing(index_elements=["username"])
            .returning(User)
        )
        result = await session.execute(stmt)
        row = result.scalars().first()
        if row is None:
            return await self.get_by_username(session, username)
        return row
