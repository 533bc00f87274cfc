"""Tests for scheduled payments and overdue escalation."""

from datetime import date, timedelta

import pytest

from components.core.exceptions import ValidationFailed
from components.payment.repository import PaymentRepository
from components.payment.schemas import PaymentCreate, PaymentUpdate
from components.payment.utils import days_until_due, is_overdue


class TestDueDates:
    """Test the pure due-date helpers."""

    def test_days_until_due(self):
        assert days_until_due(date(2024, 3, 10), date(2024, 3, 1)) == 9
        assert days_until_due(date(2024, 3, 1), date(2024, 3, 1)) == 0
        assert days_until_due(date(2024, 2, 28), date(2024, 3, 1)) == -2

    def test_is_overdue(self):
        today = date(2024, 3, 1)
        assert is_overdue(date(2024, 2, 29), "pending", today)
        assert is_overdue(date(2024, 2, 29), "overdue", today)
        assert not is_overdue(date(2024, 2, 29), "paid", today)
        assert not is_overdue(date(2024, 3, 1), "pending", today)


class TestPaymentRepository:
    """Test payment persistence."""

    async def test_reconcile_is_idempotent(self, session, today):
        repo = PaymentRepository(session)
        await repo.create(PaymentCreate(
            name="Internet", amount=30, currency="USD", due_date=today - timedelta(days=1),
        ))
        await repo.create(PaymentCreate(
            name="Rent", amount=500, currency="USD", due_date=today + timedelta(days=1),
        ))

        assert await repo.reconcile_overdue(today) == 1
        assert await repo.reconcile_overdue(today) == 0
        statuses = {payment.name: payment.status for payment in await repo.get_all(today=today)}
        assert statuses == {"Internet": "overdue", "Rent": "pending"}

    async def test_paid_payments_are_not_escalated(self, session, today):
        repo = PaymentRepository(session)
        payment = await repo.create(PaymentCreate(
            name="Gym", amount=20, currency="EUR", due_date=today - timedelta(days=3), status="paid",
        ), today=today)
        assert payment.paid_date == today
        assert await repo.reconcile_overdue(today) == 0

    async def test_marking_paid_sets_paid_date(self, session, today):
        repo = PaymentRepository(session)
        payment = await repo.create(PaymentCreate(name="Phone", amount=15, currency="USD", due_date=today))
        updated = await repo.update(payment.id, PaymentUpdate(status="paid"), today=today)
        assert updated.paid_date == today

    async def test_linked_account_currency_must_match(self, session, make_account, today):
        account = await make_account(currency="ARS")
        repo = PaymentRepository(session)
        with pytest.raises(ValidationFailed, match="ARS"):
            await repo.create(PaymentCreate(
                name="Insurance", amount=80, currency="USD", due_date=today, account_id=account.id,
            ))

        payment = await repo.create(PaymentCreate(
            name="Insurance", amount=8000, currency="ARS", due_date=today, account_id=account.id,
        ))
        with pytest.raises(ValidationFailed):
            await repo.update(payment.id, PaymentUpdate(currency="EUR"))

    async def test_analytics(self, session):
        today = date(2024, 3, 10)
        repo = PaymentRepository(session)
        await repo.create(PaymentCreate(
            name="Power", amount=100, currency="USD", due_date=today, category="utilities", status="paid",
        ), today=today)
        await repo.create(PaymentCreate(
            name="Water", amount=50, currency="USD", due_date=today + timedelta(days=5), category="utilities",
        ))
        await repo.create(PaymentCreate(
            name="Loan", amount=50, currency="USD", due_date=today, category="loan", status="overdue",
        ))

        analytics = await repo.get_analytics(months=3, today=today)
        assert analytics.total_payments == 3
        assert analytics.paid_amount == 100
        assert analytics.overdue_amount == 50
        assert analytics.on_time_percentage == 100
        assert len(analytics.monthly_trend) == 3
        assert analytics.category_breakdown[0].category == "utilities"
        assert analytics.category_breakdown[0].percentage == 75
        assert [payment.name for payment in analytics.upcoming_payments] == ["Water"]


class TestPaymentEndpoints:
    """Test the payments API."""

    async def test_listing_marks_past_due_payments_overdue(self, client, today):
        """A pending payment due yesterday is reported overdue on the next read."""
        yesterday = today - timedelta(days=1)
        response = await client.post("/payments", json={
            "name": "Electricity", "amount": 45.5, "currency": "USD", "due_date": yesterday.isoformat(),
        })
        assert response.status_code == 201
        assert response.json()["status"] == "pending"

        for _ in range(3):
            [payment] = (await client.get("/payments")).json()
            assert payment["status"] == "overdue"
            assert payment["is_overdue"] is True
            assert payment["days_until_due"] == -1

        assert len((await client.get("/payments", params={"overdue": "true"})).json()) == 1
        assert (await client.get("/payments", params={"status": "pending"})).json() == []

    async def test_currency_mismatch_message(self, client, today):
        account = (await client.post("/accounts", json={
            "name": "Pesos", "type": "checking", "currency": "ARS",
        })).json()
        response = await client.post("/payments", json={
            "name": "Netflix", "amount": 10, "currency": "USD",
            "due_date": today.isoformat(), "account_id": account["id"],
        })
        assert response.status_code == 400
        assert "ARS" in response.json()["message"]

    async def test_update_and_delete(self, client, today):
        payment = (await client.post("/payments", json={
            "name": "Tax", "amount": 99, "currency": "EUR", "due_date": today.isoformat(), "category": "tax",
        })).json()
        response = await client.put(f"/payments/{payment['id']}", json={"status": "paid"})
        assert response.status_code == 200
        assert response.json()["paid_date"] == today.isoformat()

        assert (await client.delete(f"/payments/{payment['id']}")).status_code == 200
        assert (await client.put(f"/payments/{payment['id']}", json={"amount": 1})).status_code == 404

    async def test_analytics_endpoint(self, client):
        response = await client.get("/payments/analytics", params={"months": 6})
        assert response.status_code == 200
        assert len(response.json()["monthly_trend"]) == 6

    async def test_sub_cent_amount_rejected(self, client, today):
        response = await client.post("/payments", json={
            "name": "Fee", "amount": 0.004, "currency": "USD", "due_date": today.isoformat(),
        })
        assert response.status_code == 400
        assert (await client.get("/payments")).json() == []
