"""Repository for budget operations."""

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from components.account.models import Account
from components.budget.models import Budget
from components.budget import schemas
from components.budget.utils import budget_health
from components.category.models import Category
from components.core.exceptions import ValidationFailed
from components.core.money import as_float, to_money
from components.currency.service import format_currency
from components.transaction.models import Transaction

logger = logging.getLogger(__name__)

# Upper bound used for budgets without an end date
OPEN_END = date(9999, 12, 31)


class BudgetRepository:
    """Repository for budget operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def get_by_id(self, budget_id: str) -> Optional[Budget]:
        """Get budget by ID."""
        result = await self.session.execute(
            select(Budget).where(Budget.id == budget_id)
        )
        return result.scalar_one_or_none()

    async def get_spent(self, budget: Budget) -> Decimal:
        """Sum of expense magnitudes in the budget's category, currency and window."""
        query = (
            select(func.coalesce(func.sum(func.abs(Transaction.amount)), 0))
            .join(Account, Transaction.account_id == Account.id)
            .where(
                Transaction.category_id == budget.category_id,
                Transaction.type == "expense",
                Account.currency == budget.currency,
                Transaction.date >= budget.start_date,
            )
        )
        if budget.end_date:
            query = query.where(Transaction.date <= budget.end_date)
        result = await self.session.execute(query)
        return to_money(result.scalar_one())

    async def to_schema(self, budget: Budget) -> schemas.Budget:
        category = await self.session.get(Category, budget.category_id)
        health = budget_health(budget.amount, await self.get_spent(budget), budget.alert_threshold)
        return schemas.Budget(
            id=budget.id,
            category_id=budget.category_id,
            amount=as_float(budget.amount),
            period=budget.period,
            currency=budget.currency,
            start_date=budget.start_date,
            end_date=budget.end_date,
            alert_threshold=budget.alert_threshold,
            description=budget.description,
            is_active=budget.is_active,
            created_at=budget.created_at,
            updated_at=budget.updated_at,
            category_name=category.name if category else None,
            category_color=category.color if category else None,
            category_icon=category.icon if category else None,
            spent=as_float(health.spent),
            remaining=as_float(health.remaining),
            percentage=health.percentage,
            status=health.status,
            formatted_amount=format_currency(budget.amount, budget.currency),
            formatted_spent=format_currency(health.spent, budget.currency),
            formatted_remaining=format_currency(health.remaining, budget.currency),
        )

    async def get_all(
        self,
        currency: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[schemas.Budget]:
        """
        Get active budgets decorated with spending.

        The status filter applies to the derived status, so it runs after
        spending has been computed.
        """
        query = select(Budget).where(Budget.is_active.is_(True))
        if currency:
            query = query.where(Budget.currency == currency)
        result = await self.session.execute(query.order_by(Budget.start_date.desc()))

        budgets = [await self.to_schema(budget) for budget in result.scalars().all()]
        if status:
            budgets = [budget for budget in budgets if budget.status == status]
        return budgets

    async def _check_category(self, category_id: str) -> None:
        category = await self.session.get(Category, category_id)
        if not category:
            raise ValidationFailed("The specified category does not exist")
        if not category.is_active:
            raise ValidationFailed("The specified category is inactive")
        if category.type != "expense":
            raise ValidationFailed("Budgets can only be created for expense categories")

    async def find_overlapping(
        self,
        category_id: str,
        currency: str,
        start_date: date,
        end_date: Optional[date],
        exclude_id: Optional[str] = None,
    ) -> Optional[Budget]:
        """Find an active budget for the same category and currency whose window overlaps."""
        query = select(Budget).where(
            Budget.category_id == category_id,
            Budget.currency == currency,
            Budget.is_active.is_(True),
            Budget.start_date <= (end_date or OPEN_END),
            func.coalesce(Budget.end_date, OPEN_END) >= start_date,
        )
        if exclude_id:
            query = query.where(Budget.id != exclude_id)
        result = await self.session.execute(query)
        return result.scalars().first()

    async def create(self, data: schemas.BudgetCreate) -> Budget:
        """Create a new budget."""
        if data.end_date and data.end_date <= data.start_date:
            raise ValidationFailed("The end date must be after the start date")
        await self._check_category(data.category_id)
        if await self.find_overlapping(data.category_id, data.currency, data.start_date, data.end_date):
            raise ValidationFailed(
                "An active budget already exists for this category and currency in the given period"
            )

        budget = Budget(
            category_id=data.category_id,
            amount=to_money(data.amount),
            period=data.period,
            currency=data.currency,
            start_date=data.start_date,
            end_date=data.end_date,
            alert_threshold=data.alert_threshold,
            description=data.description,
            is_active=True,
        )
        self.session.add(budget)
        await self.session.commit()
        await self.session.refresh(budget)
        logger.info("Created budget %s for category %s", budget.id, budget.category_id)
        return budget

    async def update(self, budget_id: str, data: schemas.BudgetUpdate) -> Optional[Budget]:
        """Update budget by ID, re-checking the window against other budgets."""
        budget = await self.get_by_id(budget_id)
        if not budget:
            return None

        changes = data.model_dump(exclude_unset=True)
        category_id = changes.get("category_id") or budget.category_id
        currency = changes.get("currency") or budget.currency
        start_date = changes.get("start_date") or budget.start_date
        end_date = changes["end_date"] if "end_date" in changes else budget.end_date
        is_active = changes["is_active"] if changes.get("is_active") is not None else budget.is_active

        if end_date and end_date <= start_date:
            raise ValidationFailed("The end date must be after the start date")
        if category_id != budget.category_id:
            await self._check_category(category_id)
        if is_active and await self.find_overlapping(category_id, currency, start_date, end_date, budget_id):
            raise ValidationFailed(
                "An active budget already exists for this category and currency in the given period"
            )

        for field, value in changes.items():
            if field == "amount" and value is not None:
                budget.amount = to_money(value)
            elif value is not None or field in ("end_date", "description"):
                setattr(budget, field, value)

        await self.session.commit()
        await self.session.refresh(budget)
        return budget

    async def delete(self, budget_id: str) -> bool:
        """Delete budget by ID."""
        budget = await self.get_by_id(budget_id)
        if not budget:
            return False

        await self.session.delete(budget)
        await self.session.commit()
        return True
