"""Repository for account operations."""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from components.account.models import Account
from components.account import schemas
from components.core.exceptions import ReferenceConflict, ValidationFailed
from components.core.money import as_float, to_money
from components.currency.service import format_currency, get_currency_info

logger = logging.getLogger(__name__)

MONTH_NAMES = ["Ene", "Feb", "Mar", "Abr", "May", "Jun", "Jul", "Ago", "Sep", "Oct", "Nov", "Dic"]
PERIOD_MONTHS = {"3m": 3, "6m": 6, "12m": 12}


def shift_month(value: date, months: int) -> date:
    """First day of the month `months` away from `value`."""
    index = value.year * 12 + value.month - 1 + months
    return date(index // 12, index % 12 + 1, 1)


class AccountRepository:
    """Repository for account operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    @staticmethod
    def to_schema(account: Account) -> schemas.Account:
        return schemas.Account(
            id=account.id,
            name=account.name,
            type=account.type,
            currency=account.currency,
            description=account.description,
            balance=as_float(account.balance),
            is_active=account.is_active,
            created_at=account.created_at,
            updated_at=account.updated_at,
            formatted_balance=format_currency(account.balance or 0, account.currency),
            currency_info=get_currency_info(account.currency),
        )

    async def get_by_id(self, account_id: str) -> Optional[Account]:
        """Get account by ID, reloading the balance from the store."""
        result = await self.session.execute(
            select(Account)
            .where(Account.id == account_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_active_by_name(self, name: str) -> Optional[Account]:
        """Get an active account by its exact name."""
        result = await self.session.execute(
            select(Account).where(Account.name == name, Account.is_active.is_(True))
        )
        return result.scalars().first()

    async def get_all(
        self,
        account_type: Optional[str] = None,
        currency: Optional[str] = None,
        include_inactive: bool = False,
    ) -> List[Account]:
        """Get all accounts with optional filtering."""
        query = select(Account)
        if account_type:
            query = query.where(Account.type == account_type)
        if currency:
            query = query.where(Account.currency == currency)
        if not include_inactive:
            query = query.where(Account.is_active.is_(True))
        result = await self.session.execute(query.order_by(Account.name))
        return list(result.scalars().all())

    async def create(self, data: schemas.AccountCreate) -> Account:
        """Create a new account with its opening balance."""
        if await self.get_active_by_name(data.name):
            raise ValidationFailed("An active account with this name already exists")
        if data.type == "credit" and data.balance > 0:
            raise ValidationFailed("Credit accounts cannot start with a positive balance")

        account = Account(
            name=data.name,
            type=data.type,
            currency=data.currency,
            balance=to_money(data.balance),
            description=data.description,
            is_active=True,
        )
        self.session.add(account)
        await self.session.commit()
        await self.session.refresh(account)
        logger.info("Created account %s (%s, %s)", account.id, account.type, account.currency)
        return account

    async def update(self, account_id: str, data: schemas.AccountUpdate) -> Optional[Account]:
        """Update account attributes other than the balance."""
        account = await self.get_by_id(account_id)
        if not account:
            return None

        changes = data.model_dump(exclude_unset=True)
        if changes.get("name") and changes["name"] != account.name:
            existing = await self.get_active_by_name(changes["name"])
            if existing and existing.id != account_id:
                raise ValidationFailed("An active account with this name already exists")
        if changes.get("currency") and changes["currency"] != account.currency:
            if await self.count_transactions(account_id):
                raise ValidationFailed("Cannot change the currency of an account with transactions")
        new_type = changes.get("type") or account.type
        if new_type == "credit" and account.type != "credit" and account.balance > 0:
            raise ValidationFailed("Credit accounts cannot hold a positive balance")

        for field, value in changes.items():
            if value is not None or field == "description":
                setattr(account, field, value)

        await self.session.commit()
        await self.session.refresh(account)
        return account

    async def delete(self, account_id: str) -> bool:
        """Delete an account that has no ledger history."""
        account = await self.get_by_id(account_id)
        if not account:
            return False
        if await self.count_transactions(account_id):
            raise ReferenceConflict("Cannot delete account with existing transactions")
        if await self.count_transfers(account_id):
            raise ReferenceConflict("Cannot delete account with existing transfers")

        await self.session.delete(account)
        await self.session.commit()
        logger.info("Deleted account %s", account_id)
        return True

    async def count_transactions(self, account_id: str) -> int:
        from components.transaction.models import Transaction

        result = await self.session.execute(
            select(func.count(Transaction.id)).where(Transaction.account_id == account_id)
        )
        return result.scalar_one()

    async def count_transfers(self, account_id: str) -> int:
        from components.transfer.models import Transfer

        result = await self.session.execute(
            select(func.count(Transfer.id)).where(
                (Transfer.from_account_id == account_id) | (Transfer.to_account_id == account_id)
            )
        )
        return result.scalar_one()

    async def apply_delta(self, account_id: str, delta: Decimal) -> None:
        """
        Add a signed delta to an account balance.

        Issued as a relative UPDATE so concurrent writers never overwrite
        each other's adjustments. Callers run it inside the same unit of
        work as the ledger row it compensates and refresh any loaded
        Account afterwards.
        """
        if not delta:
            return
        await self.session.execute(
            update(Account)
            .where(Account.id == account_id)
            .values(balance=Account.balance + delta)
            .execution_options(synchronize_session=False)
        )
        logger.debug("Balance of account %s adjusted by %s", account_id, delta)

    async def get_monthly_data(
        self,
        account_id: str,
        period: str = "6m",
        today: Optional[date] = None,
    ) -> List[schemas.MonthlyData]:
        """
        Income, expenses and net balance per month for one account.

        Months without activity are filled with zeros so the series is
        continuous from the start of the period to the current month.
        """
        from components.transaction.models import Transaction

        today = today or date.today()
        start = shift_month(today, 1 - PERIOD_MONTHS.get(period, 6))
        month_key = func.strftime("%Y-%m", Transaction.date)

        result = await self.session.execute(
            select(
                month_key.label("month"),
                func.coalesce(func.sum(case((Transaction.type == "income", Transaction.amount), else_=0)), 0),
                func.coalesce(func.sum(case((Transaction.type == "expense", -Transaction.amount), else_=0)), 0),
                func.count(Transaction.id),
            )
            .where(
                Transaction.account_id == account_id,
                Transaction.date >= start,
                Transaction.date <= today,
            )
            .group_by(month_key)
        )
        rows = {row[0]: row for row in result.all()}

        months = []
        current = start
        while current <= today:
            key = current.strftime("%Y-%m")
            label = f"{MONTH_NAMES[current.month - 1]} {current.year}"
            row = rows.get(key)
            income = float(row[1]) if row else 0.0
            expenses = float(row[2]) if row else 0.0
            months.append(schemas.MonthlyData(
                month=label,
                income=income,
                expenses=expenses,
                balance=income - expenses,
                transaction_count=row[3] if row else 0,
            ))
            current = shift_month(current, 1)
        return months
