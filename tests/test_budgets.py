"""Tests for budgets and their derived spending status."""

from datetime import timedelta

import pytest

from components.budget.repository import BudgetRepository
from components.budget.schemas import BudgetCreate, BudgetUpdate
from components.budget.utils import budget_health
from components.core.exceptions import ValidationFailed
from components.transaction.repository import TransactionRepository
from components.transaction.schemas import TransactionCreate

STATUS_RANK = {"good": 0, "warning": 1, "exceeded": 2}


class TestBudgetHealth:
    """Test the pure spending status computation."""

    @pytest.mark.parametrize("spent,status", [(79, "good"), (80, "warning"), (81, "warning"), (100, "exceeded")])
    def test_thresholds(self, spent, status):
        assert budget_health(100, spent, 0.8).status == status

    def test_remaining_and_percentage_are_clamped(self):
        health = budget_health(100, 150, 0.8)
        assert health.remaining == 0
        assert health.percentage == 100
        assert health.status == "exceeded"

    def test_partial_spending(self):
        health = budget_health(200, 50, 0.5)
        assert health.remaining == 150
        assert health.percentage == 25
        assert health.status == "good"

    def test_status_is_monotonic_in_spent(self):
        """Status never regresses as spending grows."""
        ranks = [STATUS_RANK[budget_health(100, cents / 100, 0.8).status] for cents in range(0, 15001, 25)]
        assert ranks == sorted(ranks)

    def test_status_is_stable_for_fixed_spent(self):
        assert len({budget_health(100, 81, 0.8).status for _ in range(5)}) == 1


class TestBudgetRepository:
    """Test budget persistence and spending aggregation."""

    async def test_status_follows_category_expenses(self, session, make_account, make_category, today):
        """Spending of 79, 81 and 100 against a budget of 100 yields good, warning, exceeded."""
        account = await make_account(balance=1000)
        category = await make_category()
        budgets = BudgetRepository(session)
        transactions = TransactionRepository(session)
        await budgets.create(BudgetCreate(
            category_id=category.id, amount=100, currency="USD",
            start_date=today - timedelta(days=10), alert_threshold=0.8,
        ))

        async def spend(amount):
            await transactions.create(TransactionCreate(
                account_id=account.id, category_id=category.id, amount=amount, type="expense", date=today,
            ))
            [budget] = await budgets.get_all()
            return budget

        assert (await spend(79)).status == "good"
        budget = await spend(2)
        assert budget.status == "warning"
        assert budget.spent == 81
        budget = await spend(19)
        assert budget.status == "exceeded"
        assert budget.remaining == 0
        assert budget.formatted_spent == "US$ 100,00"

    async def test_spending_is_scoped(self, session, make_account, make_category, today):
        """Other currencies and dates outside the window do not count."""
        usd = await make_account(name="USD", currency="USD", balance=1000)
        ars = await make_account(name="ARS", currency="ARS", balance=100000)
        category = await make_category()
        budgets = BudgetRepository(session)
        transactions = TransactionRepository(session)
        await budgets.create(BudgetCreate(
            category_id=category.id, amount=100, currency="USD",
            start_date=today, end_date=today + timedelta(days=30),
        ))

        for account, day in ((ars, today), (usd, today - timedelta(days=1)), (usd, today)):
            await transactions.create(TransactionCreate(
                account_id=account.id, category_id=category.id, amount=10, type="expense", date=day,
            ))

        [budget] = await budgets.get_all(currency="USD")
        assert budget.spent == 10
        assert await budgets.get_all(status="exceeded") == []

    async def test_overlapping_budget_rejected(self, session, make_category, today):
        category = await make_category()
        budgets = BudgetRepository(session)
        await budgets.create(BudgetCreate(category_id=category.id, amount=100, currency="USD", start_date=today))

        with pytest.raises(ValidationFailed, match="already exists"):
            await budgets.create(BudgetCreate(
                category_id=category.id, amount=50, currency="USD",
                start_date=today + timedelta(days=400), end_date=today + timedelta(days=430),
            ))
        await budgets.create(BudgetCreate(category_id=category.id, amount=50, currency="EUR", start_date=today))

    async def test_non_overlapping_windows_allowed(self, session, make_category, today):
        category = await make_category()
        budgets = BudgetRepository(session)
        await budgets.create(BudgetCreate(
            category_id=category.id, amount=100, currency="USD",
            start_date=today, end_date=today + timedelta(days=30),
        ))
        await budgets.create(BudgetCreate(
            category_id=category.id, amount=100, currency="USD", start_date=today + timedelta(days=31),
        ))
        assert len(await budgets.get_all()) == 2

    async def test_income_category_rejected(self, session, make_category, today):
        category = await make_category(name="Salary", type="income")
        with pytest.raises(ValidationFailed, match="expense categories"):
            await BudgetRepository(session).create(BudgetCreate(
                category_id=category.id, amount=100, currency="USD", start_date=today,
            ))

    async def test_end_before_start_rejected(self, session, make_category, today):
        category = await make_category()
        with pytest.raises(ValidationFailed, match="end date"):
            await BudgetRepository(session).create(BudgetCreate(
                category_id=category.id, amount=100, currency="USD",
                start_date=today, end_date=today,
            ))

    async def test_update_does_not_overlap_itself(self, session, make_category, today):
        category = await make_category()
        budgets = BudgetRepository(session)
        budget = await budgets.create(BudgetCreate(category_id=category.id, amount=100, currency="USD", start_date=today))

        updated = await budgets.update(budget.id, BudgetUpdate(amount=150, alert_threshold=0.5))
        assert float(updated.amount) == 150
        assert updated.alert_threshold == 0.5


class TestBudgetEndpoints:
    """Test the budgets API."""

    async def test_crud(self, client, today):
        category = (await client.post("/categories", json={"name": "Fuel", "type": "expense"})).json()
        response = await client.post("/budgets", json={
            "category_id": category["id"], "amount": 300, "currency": "ARS",
            "start_date": today.isoformat(),
        })
        assert response.status_code == 201
        budget = response.json()
        assert budget["status"] == "good"
        assert budget["alert_threshold"] == 0.8
        assert budget["category_name"] == "Fuel"

        response = await client.put(f"/budgets/{budget['id']}", json={"amount": 500})
        assert response.json()["amount"] == 500

        assert (await client.delete(f"/budgets/{budget['id']}")).status_code == 200
        assert (await client.delete(f"/budgets/{budget['id']}")).status_code == 404

    async def test_threshold_out_of_range(self, client, today):
        category = (await client.post("/categories", json={"name": "Fuel", "type": "expense"})).json()
        response = await client.post("/budgets", json={
            "category_id": category["id"], "amount": 300, "currency": "ARS",
            "start_date": today.isoformat(), "alert_threshold": 80,
        })
        assert response.status_code == 400

    async def test_sub_cent_amount_rejected(self, client, today):
        category = (await client.post("/categories", json={"name": "Fuel", "type": "expense"})).json()
        response = await client.post("/budgets", json={
            "category_id": category["id"], "amount": 0.004, "currency": "ARS",
            "start_date": today.isoformat(),
        })
        assert response.status_code == 400
        assert "amount" in response.json()["message"]
