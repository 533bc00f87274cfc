"""Repository for scheduled payment operations."""

import logging
from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy import case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from components.account.models import Account
from components.account.repository import MONTH_NAMES, shift_month
from components.core.exceptions import ValidationFailed
from components.core.money import as_float, to_money
from components.currency.service import format_currency, get_currency_info
from components.payment.models import Payment
from components.payment import schemas
from components.payment.utils import days_until_due, is_overdue
from components.payment_category.models import PaymentCategory

logger = logging.getLogger(__name__)

UPCOMING_DAYS = 30


class PaymentRepository:
    """Repository for scheduled payment operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    @staticmethod
    def to_schema(payment: Payment, account_name: Optional[str] = None, today: Optional[date] = None) -> schemas.Payment:
        today = today or date.today()
        return schemas.Payment(
            id=payment.id,
            name=payment.name,
            amount=as_float(payment.amount),
            currency=payment.currency,
            due_date=payment.due_date,
            status=payment.status,
            category=payment.category,
            description=payment.description,
            is_recurring=payment.is_recurring,
            recurring_frequency=payment.recurring_frequency,
            account_id=payment.account_id,
            paid_date=payment.paid_date,
            created_at=payment.created_at,
            updated_at=payment.updated_at,
            account_name=account_name,
            formatted_amount=format_currency(payment.amount, payment.currency),
            currency_info=get_currency_info(payment.currency),
            days_until_due=days_until_due(payment.due_date, today),
            is_overdue=is_overdue(payment.due_date, payment.status, today),
        )

    async def get_by_id(self, payment_id: str) -> Optional[Payment]:
        """Get payment by ID."""
        result = await self.session.execute(
            select(Payment).where(Payment.id == payment_id)
        )
        return result.scalar_one_or_none()

    async def get_decorated(self, payment_id: str, today: Optional[date] = None) -> Optional[schemas.Payment]:
        """Get payment by ID with its linked account name."""
        result = await self.session.execute(
            select(Payment, Account.name)
            .outerjoin(Account, Payment.account_id == Account.id)
            .where(Payment.id == payment_id)
            .execution_options(populate_existing=True)
        )
        row = result.one_or_none()
        return self.to_schema(row[0], row[1], today) if row else None

    async def reconcile_overdue(self, today: Optional[date] = None) -> int:
        """
        Flip pending payments whose due date has passed to overdue.

        Idempotent: running it again for the same day changes nothing.
        Returns the number of payments escalated.
        """
        today = today or date.today()
        result = await self.session.execute(
            update(Payment)
            .where(Payment.status == "pending", Payment.due_date < today)
            .values(status="overdue")
            .execution_options(synchronize_session=False)
        )
        await self.session.commit()
        if result.rowcount:
            logger.info("Marked %d payments as overdue", result.rowcount)
        return result.rowcount

    async def get_all(
        self,
        status: Optional[str] = None,
        currency: Optional[str] = None,
        is_recurring: Optional[bool] = None,
        overdue: bool = False,
        today: Optional[date] = None,
    ) -> List[schemas.Payment]:
        """Get payments ordered by due date; callers reconcile overdue ones first."""
        today = today or date.today()
        query = (
            select(Payment, Account.name)
            .outerjoin(Account, Payment.account_id == Account.id)
            .execution_options(populate_existing=True)
        )
        if overdue:
            query = query.where(Payment.status == "overdue")
        elif status:
            query = query.where(Payment.status == status)
        if currency:
            query = query.where(Payment.currency == currency)
        if is_recurring is not None:
            query = query.where(Payment.is_recurring.is_(is_recurring))

        result = await self.session.execute(query.order_by(Payment.due_date))
        return [self.to_schema(payment, account_name, today) for payment, account_name in result.all()]

    async def _check_account(self, account_id: str, currency: str) -> None:
        account = await self.session.get(Account, account_id)
        if not account:
            raise ValidationFailed("The specified account does not exist")
        if not account.is_active:
            raise ValidationFailed("The specified account is inactive")
        if account.currency != currency:
            raise ValidationFailed(
                f"The selected account is in {account.currency} but the payment is in {currency}"
            )

    async def _check_category(self, name: str) -> None:
        result = await self.session.execute(
            select(func.count(PaymentCategory.id)).where(PaymentCategory.name == name)
        )
        if not result.scalar_one():
            raise ValidationFailed(f'Payment category "{name}" does not exist')

    async def create(self, data: schemas.PaymentCreate, today: Optional[date] = None) -> Payment:
        """Create a new scheduled payment."""
        await self._check_category(data.category)
        if data.account_id:
            await self._check_account(data.account_id, data.currency)

        payment = Payment(
            name=data.name,
            amount=to_money(data.amount),
            currency=data.currency,
            due_date=data.due_date,
            status=data.status,
            category=data.category,
            description=data.description,
            is_recurring=data.is_recurring,
            recurring_frequency=data.recurring_frequency if data.is_recurring else None,
            account_id=data.account_id,
            paid_date=(today or date.today()) if data.status == "paid" else None,
        )
        self.session.add(payment)
        await self.session.commit()
        await self.session.refresh(payment)
        logger.info("Created payment %s due %s", payment.id, payment.due_date)
        return payment

    async def update(
        self,
        payment_id: str,
        data: schemas.PaymentUpdate,
        today: Optional[date] = None,
    ) -> Optional[Payment]:
        """Update payment by ID; marking it paid records the paid date."""
        payment = await self.get_by_id(payment_id)
        if not payment:
            return None

        changes = data.model_dump(exclude_unset=True)
        if changes.get("category") and changes["category"] != payment.category:
            await self._check_category(changes["category"])
        account_id = changes["account_id"] if "account_id" in changes else payment.account_id
        currency = changes.get("currency") or payment.currency
        if account_id and (account_id != payment.account_id or currency != payment.currency):
            await self._check_account(account_id, currency)

        for field, value in changes.items():
            if field == "amount" and value is not None:
                payment.amount = to_money(value)
            elif value is not None or field in ("description", "account_id", "recurring_frequency", "paid_date"):
                setattr(payment, field, value)

        if payment.status == "paid" and not payment.paid_date:
            payment.paid_date = today or date.today()
        elif payment.status != "paid" and "paid_date" not in changes:
            payment.paid_date = None
        if not payment.is_recurring:
            payment.recurring_frequency = None

        await self.session.commit()
        await self.session.refresh(payment)
        return payment

    async def delete(self, payment_id: str) -> bool:
        """Delete payment by ID."""
        payment = await self.get_by_id(payment_id)
        if not payment:
            return False

        await self.session.delete(payment)
        await self.session.commit()
        return True

    async def get_analytics(
        self,
        months: int = 6,
        category: Optional[str] = None,
        today: Optional[date] = None,
    ) -> schemas.PaymentAnalytics:
        """
        Summarize payments due within the last `months` months.

        Returns totals by status, the share of paid payments settled on
        or before their due date, a per-category breakdown, a monthly
        trend with missing months filled with zeros, and pending payments
        due in the next 30 days.
        """
        today = today or date.today()
        start = shift_month(today, -(months - 1))
        end = shift_month(today, 1) - timedelta(days=1)

        conditions = [Payment.due_date >= start, Payment.due_date <= end]
        if category:
            conditions.append(Payment.category == category)

        def by_status(status: str):
            return func.coalesce(func.sum(case((Payment.status == status, Payment.amount), else_=0)), 0)

        totals = (await self.session.execute(
            select(
                func.count(Payment.id),
                func.coalesce(func.sum(Payment.amount), 0),
                by_status("paid"),
                by_status("pending"),
                by_status("overdue"),
                func.coalesce(func.avg(Payment.amount), 0),
            ).where(*conditions)
        )).one()
        total_count, total_amount, paid, pending, overdue, average = totals

        on_time = (await self.session.execute(
            select(
                func.count(Payment.id),
                func.coalesce(func.sum(case((Payment.paid_date <= Payment.due_date, 1), else_=0)), 0),
            ).where(*conditions, Payment.status == "paid", Payment.paid_date.is_not(None))
        )).one()
        on_time_percentage = on_time[1] / on_time[0] * 100 if on_time[0] else 0.0

        month_key = func.strftime("%Y-%m", Payment.due_date)
        trend_rows = (await self.session.execute(
            select(month_key, by_status("paid"), by_status("pending"), by_status("overdue"))
            .where(*conditions)
            .group_by(month_key)
        )).all()
        trend = {row[0]: row for row in trend_rows}
        monthly_trend = []
        current = start
        for _ in range(months):
            row = trend.get(current.strftime("%Y-%m"))
            monthly_trend.append(schemas.MonthlyPaymentTrend(
                month=f"{MONTH_NAMES[current.month - 1]} {current.year}",
                paid=float(row[1]) if row else 0.0,
                pending=float(row[2]) if row else 0.0,
                overdue=float(row[3]) if row else 0.0,
            ))
            current = shift_month(current, 1)

        category_rows = (await self.session.execute(
            select(Payment.category, func.sum(Payment.amount), func.count(Payment.id))
            .where(*conditions)
            .group_by(Payment.category)
            .order_by(func.sum(Payment.amount).desc())
        )).all()
        breakdown = [
            schemas.CategoryBreakdown(
                category=name,
                amount=float(amount),
                count=count,
                percentage=float(amount) / float(total_amount) * 100 if total_amount else 0.0,
            )
            for name, amount, count in category_rows
        ]

        upcoming_rows = (await self.session.execute(
            select(Payment)
            .where(
                Payment.status == "pending",
                Payment.due_date >= today,
                Payment.due_date <= today + timedelta(days=UPCOMING_DAYS),
            )
            .order_by(Payment.due_date)
            .limit(10)
        )).scalars().all()
        upcoming = [
            schemas.UpcomingPayment(
                id=payment.id,
                name=payment.name,
                amount=as_float(payment.amount),
                currency=payment.currency,
                due_date=payment.due_date,
                category=payment.category,
            )
            for payment in upcoming_rows
        ]

        insights = []
        if overdue:
            insights.append(schemas.PaymentInsight(
                type="warning",
                title="Overdue payments",
                description=f"{float(overdue):,.2f} in payments are overdue and need attention.",
            ))
        if on_time[0] and on_time_percentage >= 90:
            insights.append(schemas.PaymentInsight(
                type="success",
                title="Great track record",
                description=f"{on_time_percentage:.1f}% of payments were made on time.",
            ))
        elif on_time[0] and on_time_percentage < 70:
            insights.append(schemas.PaymentInsight(
                type="warning",
                title="Late payments",
                description=f"Only {on_time_percentage:.1f}% of payments were made on time.",
            ))
        if breakdown and breakdown[0].percentage > 50:
            insights.append(schemas.PaymentInsight(
                type="info",
                title="Dominant category",
                description=f"{breakdown[0].category} accounts for {breakdown[0].percentage:.1f}% of payments.",
            ))

        return schemas.PaymentAnalytics(
            total_payments=total_count,
            total_amount=float(total_amount),
            paid_amount=float(paid),
            pending_amount=float(pending),
            overdue_amount=float(overdue),
            on_time_percentage=on_time_percentage,
            average_payment_amount=float(average),
            monthly_trend=monthly_trend,
            category_breakdown=breakdown,
            upcoming_payments=upcoming,
            insights=insights,
        )
