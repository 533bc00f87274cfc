"""Repository for transfers between accounts."""

import logging
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from components.account.models import Account
from components.account.repository import AccountRepository
from components.core.database import unit_of_work
from components.core.exceptions import NotFound, ValidationFailed
from components.core.money import as_float, to_money
from components.currency.service import convert_currency, format_currency
from components.transfer.models import Transfer
from components.transfer import schemas

logger = logging.getLogger(__name__)

EXTERNAL_FEE_RATE = Decimal("0.01")

FromAccount = aliased(Account)
ToAccount = aliased(Account)


class TransferRepository:
    """
    Repository for transfers between accounts.

    A transfer debits the source by amount plus fee and credits the
    destination with the amount converted to its currency. The row and
    both balance adjustments are written in one unit of work.
    """

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session
        self.accounts = AccountRepository(session)

    def _decorated_query(self):
        return (
            select(
                Transfer,
                FromAccount.name,
                FromAccount.currency,
                ToAccount.name,
                ToAccount.currency,
            )
            .join(FromAccount, Transfer.from_account_id == FromAccount.id)
            .join(ToAccount, Transfer.to_account_id == ToAccount.id)
            .execution_options(populate_existing=True)
        )

    @staticmethod
    def to_schema(row) -> schemas.Transfer:
        transfer, from_name, from_currency, to_name, to_currency = row
        return schemas.Transfer(
            id=transfer.id,
            from_account_id=transfer.from_account_id,
            to_account_id=transfer.to_account_id,
            from_account_name=from_name,
            to_account_name=to_name,
            from_currency=from_currency,
            to_currency=to_currency,
            amount=as_float(transfer.amount),
            fee=as_float(transfer.fee),
            converted_amount=as_float(transfer.converted_amount),
            description=transfer.description,
            transfer_type=transfer.transfer_type,
            status=transfer.status,
            created_at=transfer.created_at,
            updated_at=transfer.updated_at,
            formatted_amount=format_currency(transfer.amount, from_currency),
            formatted_fee=format_currency(transfer.fee, from_currency),
            formatted_converted_amount=format_currency(transfer.converted_amount, to_currency),
        )

    async def get_all(
        self,
        account_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[schemas.Transfer]:
        """Get transfers, newest first, optionally touching one account."""
        query = self._decorated_query()
        if account_id:
            query = query.where(or_(
                Transfer.from_account_id == account_id,
                Transfer.to_account_id == account_id,
            ))
        if status:
            query = query.where(Transfer.status == status)
        result = await self.session.execute(query.order_by(Transfer.created_at.desc()))
        return [self.to_schema(row) for row in result.all()]

    async def get_by_id(self, transfer_id: str) -> Optional[schemas.Transfer]:
        """Get a decorated transfer by ID."""
        result = await self.session.execute(
            self._decorated_query().where(Transfer.id == transfer_id)
        )
        row = result.one_or_none()
        return self.to_schema(row) if row else None

    async def create(self, data: schemas.TransferCreate) -> schemas.Transfer:
        """Move funds between two accounts."""
        if not data.to_account_id:
            raise ValidationFailed("A destination account is required")
        if data.from_account_id == data.to_account_id:
            raise ValidationFailed("Source and destination accounts must be different")

        source = await self.accounts.get_by_id(data.from_account_id)
        if not source:
            raise ValidationFailed("The source account does not exist")
        if not source.is_active:
            raise ValidationFailed("The source account is inactive")
        destination = await self.accounts.get_by_id(data.to_account_id)
        if not destination:
            raise ValidationFailed("The destination account does not exist")
        if not destination.is_active:
            raise ValidationFailed("The destination account is inactive")

        amount = to_money(data.amount)
        fee = to_money(amount * EXTERNAL_FEE_RATE) if data.transfer_type == "external" else Decimal("0.00")
        debit = amount + fee
        if source.type != "credit" and source.balance < debit:
            raise ValidationFailed("Insufficient funds in the source account")
        converted = to_money(convert_currency(amount, source.currency, destination.currency))
        if converted <= 0:
            raise ValidationFailed(
                f"The amount is too small to credit any {destination.currency} to the destination account"
            )

        transfer = Transfer(
            from_account_id=source.id,
            to_account_id=destination.id,
            amount=amount,
            fee=fee,
            converted_amount=converted,
            description=data.description,
            transfer_type=data.transfer_type,
            status="completed",
        )
        async with unit_of_work(self.session):
            self.session.add(transfer)
            await self.session.flush()
            await self.accounts.apply_delta(source.id, -debit)
            await self.accounts.apply_delta(destination.id, converted)

        await self.session.refresh(source)
        await self.session.refresh(destination)
        logger.info(
            "Transfer %s: %s %s (fee %s) from %s to %s, credited %s %s",
            transfer.id, amount, source.currency, fee, source.id, destination.id,
            converted, destination.currency,
        )
        return await self.get_by_id(transfer.id)

    async def cancel(self, transfer_id: str) -> schemas.Transfer:
        """Reverse a completed transfer, restoring both balances."""
        result = await self.session.execute(
            select(Transfer).where(Transfer.id == transfer_id)
        )
        transfer = result.scalar_one_or_none()
        if not transfer:
            raise NotFound("Transfer not found")
        if transfer.status != "completed":
            raise ValidationFailed(f"Only completed transfers can be cancelled, this one is {transfer.status}")

        async with unit_of_work(self.session):
            await self.accounts.apply_delta(transfer.from_account_id, Decimal(transfer.amount) + Decimal(transfer.fee))
            await self.accounts.apply_delta(transfer.to_account_id, -Decimal(transfer.converted_amount))
            transfer.status = "cancelled"

        logger.info("Cancelled transfer %s", transfer_id)
        return await self.get_by_id(transfer_id)
