"""Repository for transaction operations and the balances they move."""

import json
import logging
import re
from datetime import date
from decimal import Decimal
from typing import BinaryIO, Dict, List, Optional, Tuple

import pandas as pd
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from components.account.models import Account
from components.account.repository import AccountRepository
from components.category.models import Category
from components.category.repository import CategoryRepository
from components.core.database import unit_of_work
from components.core.exceptions import ValidationFailed
from components.core.money import as_float, to_money
from components.currency.service import format_currency
from components.transaction.models import Transaction
from components.transaction import schemas
from components.transaction.utils import signed_amount

logger = logging.getLogger(__name__)

INCOME_MARKERS = ("income", "ingreso", "+", "1")
EXPENSE_MARKERS = ("expense", "gasto", "-", "0")
IMPORT_COLUMNS = {"date", "amount", "description", "category", "account"}


class TransactionRepository:
    """
    Repository for transaction operations.

    Every write keeps the owning account's balance equal to its opening
    balance plus the signed amounts of its live transactions: the row
    change and the compensating balance update share one unit of work.
    """

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session
        self.accounts = AccountRepository(session)
        self.categories = CategoryRepository(session)

    def _decorated_query(self):
        return (
            select(
                Transaction,
                Account.name,
                Account.currency,
                Category.name,
                Category.color,
                Category.icon,
            )
            .join(Account, Transaction.account_id == Account.id)
            .join(Category, Transaction.category_id == Category.id)
            .execution_options(populate_existing=True)
        )

    @staticmethod
    def to_schema(row) -> schemas.Transaction:
        txn, account_name, account_currency, category_name, category_color, category_icon = row
        return schemas.Transaction(
            id=txn.id,
            account_id=txn.account_id,
            category_id=txn.category_id,
            amount=as_float(txn.amount),
            type=txn.type,
            date=txn.date,
            description=txn.description,
            tags=json.loads(txn.tags) if txn.tags else [],
            is_recurring=txn.is_recurring,
            recurring_frequency=txn.recurring_frequency,
            location=txn.location,
            receipt_url=txn.receipt_url,
            created_at=txn.created_at,
            updated_at=txn.updated_at,
            account_name=account_name,
            account_currency=account_currency,
            category_name=category_name,
            category_color=category_color,
            category_icon=category_icon,
            formatted_amount=format_currency(txn.amount, account_currency),
        )

    async def get_all(
        self,
        account_id: Optional[str] = None,
        category_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        currency: Optional[str] = None,
        transaction_type: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[schemas.Transaction]:
        """Get transactions, newest first, with optional filtering."""
        query = self._decorated_query()
        if account_id:
            query = query.where(Transaction.account_id == account_id)
        if category_id:
            query = query.where(Transaction.category_id == category_id)
        if start_date:
            query = query.where(Transaction.date >= start_date)
        if end_date:
            query = query.where(Transaction.date <= end_date)
        if currency:
            query = query.where(Account.currency == currency)
        if transaction_type:
            query = query.where(Transaction.type == transaction_type)

        query = query.order_by(Transaction.date.desc(), Transaction.created_at.desc())
        if limit:
            query = query.limit(limit)
        result = await self.session.execute(query)
        return [self.to_schema(row) for row in result.all()]

    async def get_by_id(self, transaction_id: str) -> Optional[schemas.Transaction]:
        """Get a decorated transaction by ID."""
        result = await self.session.execute(
            self._decorated_query().where(Transaction.id == transaction_id)
        )
        row = result.one_or_none()
        return self.to_schema(row) if row else None

    async def _get_model(self, transaction_id: str) -> Optional[Transaction]:
        result = await self.session.execute(
            select(Transaction).where(Transaction.id == transaction_id)
        )
        return result.scalar_one_or_none()

    async def _validate_references(
        self,
        account_id: str,
        category_id: str,
        transaction_type: str,
        require_active_account: bool = True,
        require_active_category: bool = True,
    ) -> Tuple[Account, Category]:
        """Check account and category before any mutation happens."""
        account = await self.accounts.get_by_id(account_id)
        if not account:
            raise ValidationFailed("The specified account does not exist")
        if require_active_account and not account.is_active:
            raise ValidationFailed("The specified account is inactive")

        category = await self.categories.get_by_id(category_id)
        if not category:
            raise ValidationFailed("The specified category does not exist")
        if require_active_category and not category.is_active:
            raise ValidationFailed("The specified category is inactive")
        if category.type != transaction_type:
            raise ValidationFailed(
                f'The selected category is of type "{category.type}" '
                f'but the transaction is of type "{transaction_type}"'
            )
        return account, category

    async def create(self, data: schemas.TransactionCreate) -> schemas.Transaction:
        """Create a transaction and apply its amount to the account balance."""
        await self._validate_references(data.account_id, data.category_id, data.type)

        amount = signed_amount(data.amount, data.type)
        txn = Transaction(
            account_id=data.account_id,
            category_id=data.category_id,
            amount=amount,
            type=data.type,
            date=data.date,
            description=data.description,
            tags=json.dumps(data.tags) if data.tags else None,
            is_recurring=data.is_recurring,
            recurring_frequency=data.recurring_frequency if data.is_recurring else None,
            location=data.location,
            receipt_url=data.receipt_url,
        )
        async with unit_of_work(self.session):
            self.session.add(txn)
            await self.session.flush()
            await self.accounts.apply_delta(data.account_id, amount)

        logger.info("Created transaction %s on account %s (%s)", txn.id, txn.account_id, amount)
        return await self.get_by_id(txn.id)

    async def update(
        self,
        transaction_id: str,
        data: schemas.TransactionUpdate,
    ) -> Optional[schemas.Transaction]:
        """
        Update a transaction, moving its balance contribution accordingly.

        The stored signed amount is reverted from the original account and
        the new signed amount applied to the (possibly different) target
        account, all in one unit of work.
        """
        txn = await self._get_model(transaction_id)
        if not txn:
            return None

        changes = data.model_dump(exclude_unset=True)
        account_id = changes.get("account_id") or txn.account_id
        category_id = changes.get("category_id") or txn.category_id
        transaction_type = changes.get("type") or txn.type
        magnitude = changes["amount"] if changes.get("amount") is not None else abs(txn.amount)

        await self._validate_references(
            account_id,
            category_id,
            transaction_type,
            require_active_account=account_id != txn.account_id,
            require_active_category=category_id != txn.category_id,
        )

        old_account_id, old_amount = txn.account_id, Decimal(txn.amount)
        new_amount = signed_amount(magnitude, transaction_type)

        async with unit_of_work(self.session):
            txn.account_id = account_id
            txn.category_id = category_id
            txn.type = transaction_type
            txn.amount = new_amount
            for field in ("date", "location", "receipt_url", "is_recurring"):
                if changes.get(field) is not None:
                    setattr(txn, field, changes[field])
            if "description" in changes:
                txn.description = changes["description"]
            if changes.get("tags") is not None:
                txn.tags = json.dumps(changes["tags"]) if changes["tags"] else None
            if "recurring_frequency" in changes:
                txn.recurring_frequency = changes["recurring_frequency"]
            if not txn.is_recurring:
                txn.recurring_frequency = None
            await self.session.flush()

            if old_account_id == account_id:
                await self.accounts.apply_delta(account_id, new_amount - old_amount)
            else:
                await self.accounts.apply_delta(old_account_id, -old_amount)
                await self.accounts.apply_delta(account_id, new_amount)

        logger.info(
            "Updated transaction %s: %s on %s -> %s on %s",
            transaction_id, old_amount, old_account_id, new_amount, account_id,
        )
        return await self.get_by_id(transaction_id)

    async def delete(self, transaction_id: str) -> bool:
        """Delete a transaction after reverting its balance contribution."""
        txn = await self._get_model(transaction_id)
        if not txn:
            return False

        async with unit_of_work(self.session):
            await self.accounts.apply_delta(txn.account_id, -Decimal(txn.amount))
            await self.session.delete(txn)

        logger.info("Deleted transaction %s, reverted %s on %s", transaction_id, txn.amount, txn.account_id)
        return True

    async def import_from_csv(self, file_content: BinaryIO) -> Tuple[bool, str, List[Dict], int]:
        """
        Import transactions from a CSV file.

        Expected columns: date, amount, description, category, account and
        optionally type and tags (";"-separated). Category and account are
        matched by name among active rows. Every row is validated first;
        nothing is written unless all rows are valid.

        Returns:
            Tuple containing:
            - Success status (bool)
            - Message (str)
            - List of errors if any (List[Dict])
            - Number of imported transactions (int)
        """
        try:
            frame = pd.read_csv(file_content, sep=None, engine="python", dtype=str, keep_default_na=False)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
            return False, f"Error processing file: {e}", [], 0

        frame.columns = [str(column).strip().lower() for column in frame.columns]
        missing = IMPORT_COLUMNS - set(frame.columns)
        if missing:
            return False, f"CSV file must contain columns: {', '.join(sorted(missing))}", [], 0

        accounts = {account.name: account for account in await self.accounts.get_all()}
        categories = {
            (category.name, category.type): category
            for category in await self.categories.get_all()
        }

        errors: List[Dict] = []
        pending: List[Transaction] = []
        for row_num, record in enumerate(frame.to_dict("records"), start=2):  # header is row 1
            row = {key: str(value).strip() for key, value in record.items()}

            type_value = row.get("type", "").lower()
            if not type_value or type_value in EXPENSE_MARKERS:
                transaction_type = "expense"
            elif type_value in INCOME_MARKERS:
                transaction_type = "income"
            else:
                errors.append({"row": row_num, "message": f"Unrecognized type: {row['type']}"})
                continue

            amount = pd.to_numeric(re.sub(r"[$,\s]", "", row["amount"]), errors="coerce")
            if pd.isna(amount) or to_money(float(amount)) <= 0:
                errors.append({"row": row_num, "message": f"Invalid amount: {row['amount']}"})
                continue

            parsed_date = pd.to_datetime(row["date"], errors="coerce")
            if pd.isna(parsed_date):
                errors.append({"row": row_num, "message": f"Invalid date: {row['date']}"})
                continue

            description = row["description"][:500]
            if len(description) < 3:
                errors.append({"row": row_num, "message": "Description must have at least 3 characters"})
                continue

            account = accounts.get(row["account"])
            if not account:
                errors.append({"row": row_num, "message": f"Account {row['account']} does not exist"})
                continue

            category = categories.get((row["category"], transaction_type))
            if not category:
                errors.append({
                    "row": row_num,
                    "message": f"No active {transaction_type} category named {row['category']}",
                })
                continue

            tags = [tag.strip() for tag in row.get("tags", "").split(";") if tag.strip()]
            pending.append(Transaction(
                account_id=account.id,
                category_id=category.id,
                amount=signed_amount(float(amount), transaction_type),
                type=transaction_type,
                date=parsed_date.date(),
                description=description,
                tags=json.dumps(tags) if tags else None,
                is_recurring=False,
            ))

        if errors:
            return False, "Validation errors occurred", errors, 0
        if not pending:
            return False, "CSV file contains no transactions", [], 0

        async with unit_of_work(self.session):
            for txn in pending:
                self.session.add(txn)
                await self.accounts.apply_delta(txn.account_id, txn.amount)
            await self.session.flush()

        logger.info("Imported %d transactions from CSV", len(pending))
        return True, f"Imported {len(pending)} transactions", [], len(pending)
