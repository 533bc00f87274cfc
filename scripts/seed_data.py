"""Script to seed sample data into the database."""

import asyncio
import logging
from datetime import date, timedelta

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from components.account.models import Account
from components.account.repository import AccountRepository
from components.account.schemas import AccountCreate
from components.budget.repository import BudgetRepository
from components.budget.schemas import BudgetCreate
from components.category.repository import CategoryRepository
from components.category.schemas import CategoryCreate
from components.core import config
from components.core.database import DatabaseManager
from components.core.log_config import configure_logging
from components.goal.repository import GoalRepository
from components.goal.schemas import GoalCreate
from components.payment.repository import PaymentRepository
from components.payment.schemas import PaymentCreate
from components.transaction.repository import TransactionRepository
from components.transaction.schemas import TransactionCreate

logger = logging.getLogger(__name__)

ACCOUNTS = [
    AccountCreate(name="Cuenta Corriente", type="checking", currency="ARS", balance=250000),
    AccountCreate(name="Caja de Ahorro USD", type="savings", currency="USD", balance=1500),
    AccountCreate(name="Tarjeta de Crédito", type="credit", currency="ARS", balance=-45000),
    AccountCreate(name="Efectivo", type="cash", currency="ARS", balance=20000),
]

CATEGORIES = [
    CategoryCreate(name="Salario", type="income", color="#22c55e", icon="briefcase"),
    CategoryCreate(name="Freelance", type="income", color="#10b981", icon="laptop"),
    CategoryCreate(name="Alimentación", type="expense", color="#ef4444", icon="utensils"),
    CategoryCreate(name="Transporte", type="expense", color="#f97316", icon="car"),
    CategoryCreate(name="Servicios", type="expense", color="#eab308", icon="zap"),
    CategoryCreate(name="Entretenimiento", type="expense", color="#8b5cf6", icon="film"),
]


async def seed_sample_data(session: AsyncSession, today: date = None) -> bool:
    """
    Insert demo accounts, categories, transactions, budgets, goals and payments.

    Does nothing when accounts already exist. Transactions go through the
    repository so balances stay consistent with them.
    """
    today = today or date.today()
    existing = (await session.execute(select(func.count(Account.id)))).scalar_one()
    if existing:
        logger.info("Database already has %d accounts, skipping sample data", existing)
        return False

    account_repo = AccountRepository(session)
    accounts = {data.name: await account_repo.create(data) for data in ACCOUNTS}
    category_repo = CategoryRepository(session)
    categories = {data.name: await category_repo.create(data) for data in CATEGORIES}

    month_start = today.replace(day=1)
    transactions = [
        ("Cuenta Corriente", "Salario", 850000, "income", month_start, "Sueldo mensual"),
        ("Caja de Ahorro USD", "Freelance", 400, "income", today - timedelta(days=3), "Proyecto web"),
        ("Cuenta Corriente", "Alimentación", 65000, "expense", today - timedelta(days=2), "Supermercado"),
        ("Efectivo", "Transporte", 8000, "expense", today - timedelta(days=1), "Carga SUBE"),
        ("Tarjeta de Crédito", "Entretenimiento", 12000, "expense", today, "Cine y cena"),
        ("Cuenta Corriente", "Servicios", 35000, "expense", today, "Luz y gas"),
    ]
    transaction_repo = TransactionRepository(session)
    for account, category, amount, kind, day, description in transactions:
        await transaction_repo.create(TransactionCreate(
            account_id=accounts[account].id,
            category_id=categories[category].id,
            amount=amount,
            type=kind,
            date=min(day, today),
            description=description,
        ))

    budget_repo = BudgetRepository(session)
    for category, amount in (("Alimentación", 200000), ("Transporte", 40000), ("Entretenimiento", 30000)):
        await budget_repo.create(BudgetCreate(
            category_id=categories[category].id,
            amount=amount,
            currency="ARS",
            start_date=month_start,
        ))

    goal_repo = GoalRepository(session)
    await goal_repo.create(GoalCreate(
        title="Fondo de emergencia",
        target_amount=5000,
        current_amount=1500,
        target_date=today + timedelta(days=365),
        category="emergency_fund",
        priority="high",
        currency="USD",
    ), today=today)
    await goal_repo.create(GoalCreate(
        title="Vacaciones",
        target_amount=1200000,
        current_amount=300000,
        target_date=today + timedelta(days=180),
        category="purchase",
        currency="ARS",
    ), today=today)

    payment_repo = PaymentRepository(session)
    await payment_repo.create(PaymentCreate(
        name="Alquiler",
        amount=320000,
        currency="ARS",
        due_date=month_start + timedelta(days=9),
        category="rent",
        is_recurring=True,
        recurring_frequency="monthly",
        account_id=accounts["Cuenta Corriente"].id,
    ), today=today)
    await payment_repo.create(PaymentCreate(
        name="Streaming",
        amount=15,
        currency="USD",
        due_date=today + timedelta(days=5),
        category="subscription",
        is_recurring=True,
        recurring_frequency="monthly",
    ), today=today)

    logger.info("Sample data seeded")
    return True


async def main():
    settings = config.get_settings()
    configure_logging(settings.LOG_LEVEL)
    manager = DatabaseManager()
    await manager.create_all()
    async with manager.get_db() as session:
        await seed_sample_data(session)
    await manager.dispose()


if __name__ == "__main__":
    asyncio.run(main())
