"""Read-only aggregation for the dashboard."""

import logging
from datetime import date, timedelta
from typing import Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from components.account.models import Account
from components.account.repository import shift_month
from components.category.models import Category
from components.core import config
from components.currency.service import CURRENCIES, RateProvider, convert_currency
from components.dashboard import schemas
from components.transaction.models import Transaction
from components.transaction.repository import TransactionRepository

logger = logging.getLogger(__name__)

RECENT_TRANSACTIONS = 5


class DashboardRepository:
    """Aggregates balances and current-month activity per currency."""

    def __init__(self, session: AsyncSession, rate_provider: Optional[RateProvider] = None):
        """Initialize repository with database session."""
        self.session = session
        self.rate_provider = rate_provider

    async def _category_totals(self, transaction_type: str, start: date, end: date) -> List[schemas.CategoryTotal]:
        result = await self.session.execute(
            select(
                Category.id,
                Category.name,
                Category.color,
                Account.currency,
                func.sum(func.abs(Transaction.amount)),
                func.count(Transaction.id),
            )
            .join(Category, Transaction.category_id == Category.id)
            .join(Account, Transaction.account_id == Account.id)
            .where(
                Transaction.type == transaction_type,
                Transaction.date >= start,
                Transaction.date <= end,
            )
            .group_by(Category.id, Category.name, Category.color, Account.currency)
            .order_by(func.sum(func.abs(Transaction.amount)).desc())
        )
        return [
            schemas.CategoryTotal(
                category_id=category_id,
                category_name=name,
                category_color=color,
                currency=currency,
                total_amount=float(total),
                transaction_count=count,
            )
            for category_id, name, color, currency, total, count in result.all()
        ]

    async def get_dashboard(self, today: Optional[date] = None) -> schemas.Dashboard:
        """
        Build the dashboard summary for the current calendar month.

        Per-currency figures are reported as stored; the overview converts
        every bucket into the configured base currency.
        """
        today = today or date.today()
        start = today.replace(day=1)
        end = shift_month(today, 1) - timedelta(days=1)
        base_currency = config.get_settings().BASE_CURRENCY

        stats: Dict[str, schemas.CurrencyStats] = {code: schemas.CurrencyStats() for code in CURRENCIES}

        balances = await self.session.execute(
            select(Account.currency, func.coalesce(func.sum(Account.balance), 0), func.count(Account.id))
            .where(Account.is_active.is_(True))
            .group_by(Account.currency)
        )
        for currency, total, count in balances.all():
            if currency in stats:
                stats[currency].total_balance = float(total)
                stats[currency].account_count = count

        expenses = await self._category_totals("expense", start, end)
        income = await self._category_totals("income", start, end)
        for item in income:
            if item.currency in stats:
                stats[item.currency].total_income += item.total_amount
        for item in expenses:
            if item.currency in stats:
                stats[item.currency].total_expenses += item.total_amount
        for item in stats.values():
            item.balance = item.total_income - item.total_expenses

        daily = await self.session.execute(
            select(Transaction.date, Account.currency, func.sum(func.abs(Transaction.amount)))
            .join(Account, Transaction.account_id == Account.id)
            .where(Transaction.type == "expense", Transaction.date >= start, Transaction.date <= end)
            .group_by(Transaction.date, Account.currency)
            .order_by(Transaction.date)
        )
        daily_by_currency: Dict[str, List[schemas.DailyExpense]] = {}
        for day, currency, total in daily.all():
            daily_by_currency.setdefault(currency, []).append(schemas.DailyExpense(date=day, amount=float(total)))

        def consolidate(attribute: str) -> float:
            return sum(
                convert_currency(getattr(item, attribute), currency, base_currency, self.rate_provider)
                for currency, item in stats.items()
            )

        total_balance = consolidate("total_balance")
        monthly_income = consolidate("total_income")
        monthly_expenses = consolidate("total_expenses")

        recent = await TransactionRepository(self.session).get_all(limit=RECENT_TRANSACTIONS)

        return schemas.Dashboard(
            overview=schemas.Overview(
                currency=base_currency,
                total_balance=total_balance,
                monthly_income=monthly_income,
                monthly_expenses=monthly_expenses,
                net_income=monthly_income - monthly_expenses,
            ),
            recent_transactions=recent,
            stats_by_currency=stats,
            daily_expenses_by_currency=daily_by_currency,
            monthly_expenses_by_category=expenses,
            monthly_income_by_category=income,
            supported_currencies=list(CURRENCIES),
        )
