"""TransactionService — purchase transactions and pet availability."""

from __future__ import annotations

import uuid
from decimal import Decimal

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from petmarket.dao.pet_dao import PetDAO
from petmarket.dao.transaction_dao import TransactionDAO
from petmarket.models.transaction import TRANSACTION_STATUSES, TRANSACTION_TYPES, Transaction
from petmarket.models.user import User
from petmarket.services import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)

log = structlog.get_logger(__name__)


def _check_price(price: Decimal | None) -> None:
    if price is not None and price < 0:
        raise ValidationError("price must be a non-negative number")


def _check_status(status: str | None) -> None:
    # Membership only: any status may follow any other (done -> pending included).
    if status is not None and status not in TRANSACTION_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(TRANSACTION_STATUSES)}")


class TransactionService:
    """Stateless service for transactions.

    A pet transaction that is not ``cancelled`` holds its pet, keeping the
    pet's ``available`` flag false. Cancelling releases the pet. Deleting a
    ``pending`` transaction releases it too; deleting a ``done`` one leaves
    the pet sold and unavailable with no transaction behind it. Claims go
    through :meth:`PetDAO.claim`, a conditional update, so two buyers
    racing for the same pet cannot both win.
    """

    def __init__(self, transaction_dao: TransactionDAO, pet_dao: PetDAO) -> None:
        self._tx_dao = transaction_dao
        self._pet_dao = pet_dao

    async def get(self, session: AsyncSession, transaction_id: uuid.UUID) -> Transaction:
        tx = await self._tx_dao.get_by_id(session, transaction_id)
        if tx is None:
            raise NotFoundError("transaction not found")
        return tx

    async def list(
        self,
        session: AsyncSession,
        cursor: str | None = None,
        page_size: int = 20,
        status: str | None = None,
        buyer_id: uuid.UUID | None = None,
    ) -> dict:
        _check_status(status)
        filters = {"status": status, "buyer_id": buyer_id}
        page = await self._tx_dao.list_paginated(session, cursor, page_size, **filters)
        total = await self._tx_dao.count(session, **filters)
        return {
            "data": page.data,
            "next_cursor": page.next_cursor,
            "has_more": page.has_more,
            "total": total,
        }

    async def create(
        self,
        session: AsyncSession,
        buyer: User,
        *,
        price: Decimal,
        status: str,
        pet_id: uuid.UUID | None = None,
        type: str = "pet",
    ) -> Transaction:
        """Open a transaction.

        For a pet transaction the pet is read (404 if absent), claimed
        (409 if another transaction holds it), and its owner becomes the
        seller. A transaction created as ``cancelled`` does not claim the pet.
        """
        _check_price(price)
        _check_status(status)
        if type not in TRANSACTION_TYPES:
            raise ValidationError(f"type must be one of: {', '.join(TRANSACTION_TYPES)}")

        seller_id = None
        if type == "pet":
            if pet_id is None:
                raise ValidationError("pet_id is required for pet transactions")
            pet = await self._pet_dao.get_by_id(session, pet_id)
            if pet is None:
                raise NotFoundError("pet not found")
            if pet.owner_id == buyer.id:
                raise ValidationError("cannot buy your own pet")
            if status != "cancelled":
                if not await self._pet_dao.claim(session, pet.id):
                    raise ConflictError("pet is not available")
                log.info("pet.claimed", pet_id=str(pet.id), buyer_id=str(buyer.id))
            seller_id = pet.owner_id
        elif pet_id is not None:
            raise ValidationError("product transactions cannot reference a pet")

        tx = await self._tx_dao.create(
            session,
            buyer_id=buyer.id,
            seller_id=seller_id,
            pet_id=pet_id,
            price=price,
            status=status,
            type=type,
        )
        log.info("transaction.created", transaction_id=str(tx.id), type=type, status=status)
        return tx

    async def update(
        self,
        session: AsyncSession,
        user: User,
        transaction_id: uuid.UUID,
        *,
        price: Decimal | None = None,
        status: str | None = None,
    ) -> Transaction:
        """Change price and/or status, keeping the pet's availability in step."""
        _check_price(price)
        _check_status(status)
        tx = await self.get(session, transaction_id)
        self._require_party(user, tx)

        updates: dict = {}
        if price is not None:
            updates["price"] = price
        if status is not None and status != tx.status:
            updates["status"] = status
            if tx.pet_id is not None:
                await self._sync_pet(session, tx, status)
        if not updates:
            return tx

        old_status = tx.status
        updated = await self._tx_dao.update(session, tx.id, **updates)
        if "status" in updates:
            log.info(
                "transaction.status_changed",
                transaction_id=str(tx.id),
                old=old_status,
                new=status,
            )
        return updated

    async def delete(self, session: AsyncSession, user: User, transaction_id: uuid.UUID) -> None:
        """Delete a transaction; a pending pet transaction releases its pet."""
        tx = await self.get(session, transaction_id)
        self._require_party(user, tx)
        await self._tx_dao.delete(session, tx.id)
        if tx.pet_id is not None and tx.status == "pending":
            await self._pet_dao.release(session, tx.pet_id)
            log.info("pet.released", pet_id=str(tx.pet_id), transaction_id=str(tx.id))
        log.info("transaction.deleted", transaction_id=str(tx.id))

    # ── private helpers ───────────────────────────────────────────────

    async def _sync_pet(self, session: AsyncSession, tx: Transaction, new_status: str) -> None:
        if new_status == "cancelled":
            await self._pet_dao.release(session, tx.pet_id)
            log.info("pet.released", pet_id=str(tx.pet_id), transaction_id=str(tx.id))
        elif tx.status == "cancelled":
            if not await self._pet_dao.claim(session, tx.pet_id):
                raise ConflictError("pet is not available")
            log.info("pet.claimed", pet_id=str(tx.pet_id), transaction_id=str(tx.id))

    @staticmethod
    def _require_party(user: User, tx: Transaction) -> None:
        if user.role == "admin" or user.id in (tx.buyer_id, tx.seller_id):
            return
        raise PermissionDeniedError("not a party to this transaction")
