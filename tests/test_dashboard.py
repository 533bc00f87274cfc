"""Tests for the dashboard summary."""

from datetime import timedelta

import pytest

from components.currency.service import StaticRateProvider
from components.dashboard.repository import DashboardRepository
from components.transaction.repository import TransactionRepository
from components.transaction.schemas import TransactionCreate


class TestDashboardRepository:
    """Test per-currency statistics and the consolidated overview."""

    async def test_overview_converts_into_base_currency(self, session, make_account, today):
        await make_account(name="Dollars", currency="USD", balance=1000)
        await make_account(name="Pesos", currency="ARS", balance=850000)

        dashboard = await DashboardRepository(session).get_dashboard(today)

        assert dashboard.overview.currency == "USD"
        assert dashboard.overview.total_balance == pytest.approx(2000)
        assert dashboard.stats_by_currency["ARS"].total_balance == 850000
        assert dashboard.stats_by_currency["ARS"].account_count == 1
        assert dashboard.stats_by_currency["EUR"].account_count == 0
        assert dashboard.supported_currencies == ["ARS", "USD", "EUR"]

    async def test_rate_provider_override(self, session, make_account, today):
        await make_account(name="Pesos", currency="ARS", balance=850000)

        provider = StaticRateProvider({"ARS": 1000})
        dashboard = await DashboardRepository(session, provider).get_dashboard(today)

        assert dashboard.overview.total_balance == pytest.approx(850)

    async def test_monthly_activity(self, session, make_account, make_category, today):
        account = await make_account(name="Dollars", currency="USD", balance=1000)
        salary = await make_category(name="Salary", type="income")
        food = await make_category(name="Food", type="expense")
        transactions = TransactionRepository(session)
        for category, amount, kind in ((salary, 500, "income"), (food, 120, "expense"), (food, 30, "expense")):
            await transactions.create(TransactionCreate(
                account_id=account.id, category_id=category.id, amount=amount, type=kind, date=today,
            ))
        # last month's expenses stay out of the monthly figures
        await transactions.create(TransactionCreate(
            account_id=account.id, category_id=food.id, amount=999, type="expense",
            date=today.replace(day=1) - timedelta(days=1),
        ))

        dashboard = await DashboardRepository(session).get_dashboard(today)

        usd = dashboard.stats_by_currency["USD"]
        assert usd.total_balance == 351
        assert usd.total_income == 500
        assert usd.total_expenses == 150
        assert usd.balance == 350
        assert dashboard.overview.net_income == pytest.approx(350)

        [expenses] = dashboard.monthly_expenses_by_category
        assert (expenses.category_name, expenses.total_amount, expenses.transaction_count) == ("Food", 150, 2)
        assert [day.amount for day in dashboard.daily_expenses_by_currency["USD"]] == [150]

        assert len(dashboard.recent_transactions) == 4
        assert dashboard.recent_transactions[-1].amount == -999

    async def test_recent_transactions_are_capped(self, session, make_account, make_category, today):
        account = await make_account(balance=100)
        category = await make_category()
        transactions = TransactionRepository(session)
        for day in range(7):
            await transactions.create(TransactionCreate(
                account_id=account.id, category_id=category.id, amount=1, type="expense",
                date=today - timedelta(days=day),
            ))

        dashboard = await DashboardRepository(session).get_dashboard(today)

        assert [txn.date for txn in dashboard.recent_transactions] == [today - timedelta(days=day) for day in range(5)]


class TestDashboardEndpoint:
    """Test the dashboard API."""

    async def test_empty_ledger(self, client):
        response = await client.get("/dashboard")
        assert response.status_code == 200
        body = response.json()
        assert body["overview"]["total_balance"] == 0
        assert body["recent_transactions"] == []
        assert set(body["stats_by_currency"]) == {"ARS", "USD", "EUR"}


class TestHealthCheck:
    """Test the health check endpoint."""

    async def test_healthy(self, client):
        response = await client.get("/health_check/")
        assert response.status_code == 200
        assert response.json() == {"service_name": "Finance Ledger", "status": "healthy"}
