"""Tests for transactions and the account balances they move."""

import random
from decimal import Decimal

import pytest

from components.account.repository import AccountRepository
from components.core.exceptions import ValidationFailed
from components.core.money import to_money
from components.transaction.repository import TransactionRepository
from components.transaction.schemas import TransactionCreate, TransactionUpdate
from components.transaction.utils import signed_amount, type_for_amount


async def balance_of(session, account_id) -> Decimal:
    account = await AccountRepository(session).get_by_id(account_id)
    return Decimal(account.balance)


class TestSignConvention:
    """Test signed amount helpers."""

    def test_expense_is_negative(self):
        assert signed_amount(50, "expense") == Decimal("-50.00")

    def test_income_is_positive(self):
        assert signed_amount(12.345, "income") == Decimal("12.35")

    def test_type_for_amount(self):
        assert type_for_amount(Decimal("-1")) == "expense"
        assert type_for_amount(Decimal("1")) == "income"


class TestBalanceMutation:
    """Test that every transaction write moves the balance by its signed amount."""

    async def test_create_update_delete_scenario(self, session, make_account, make_category, today):
        """1000 -> expense 50 -> 950, edit to 30 -> 970, delete -> 1000."""
        account = await make_account(balance=1000)
        category = await make_category()
        repo = TransactionRepository(session)

        txn = await repo.create(TransactionCreate(
            account_id=account.id, category_id=category.id, amount=50, type="expense", date=today,
        ))
        assert txn.amount == -50
        assert await balance_of(session, account.id) == Decimal("950")

        await repo.update(txn.id, TransactionUpdate(amount=30))
        assert await balance_of(session, account.id) == Decimal("970")

        assert await repo.delete(txn.id)
        assert await balance_of(session, account.id) == Decimal("1000")

    async def test_update_to_identical_values_keeps_balance(self, session, make_account, make_category, today):
        account = await make_account(balance=500)
        category = await make_category(name="Salary", type="income")
        repo = TransactionRepository(session)
        txn = await repo.create(TransactionCreate(
            account_id=account.id, category_id=category.id, amount=120.5, type="income",
            date=today, description="Monthly pay",
        ))
        before = await balance_of(session, account.id)

        await repo.update(txn.id, TransactionUpdate(
            account_id=account.id, category_id=category.id, amount=120.5, type="income",
            date=today, description="Monthly pay",
        ))
        assert await balance_of(session, account.id) == before == Decimal("620.50")

    async def test_delete_reverses_create(self, session, make_account, make_category, today):
        account = await make_account(balance=75.25)
        category = await make_category()
        repo = TransactionRepository(session)

        txn = await repo.create(TransactionCreate(
            account_id=account.id, category_id=category.id, amount=99.99, type="expense", date=today,
        ))
        await repo.delete(txn.id)
        assert await balance_of(session, account.id) == Decimal("75.25")

    async def test_moving_to_another_account(self, session, make_account, make_category, today):
        first = await make_account(name="First", balance=100)
        second = await make_account(name="Second", balance=100)
        category = await make_category()
        repo = TransactionRepository(session)

        txn = await repo.create(TransactionCreate(
            account_id=first.id, category_id=category.id, amount=40, type="expense", date=today,
        ))
        updated = await repo.update(txn.id, TransactionUpdate(account_id=second.id))

        assert updated.account_name == "Second"
        assert await balance_of(session, first.id) == Decimal("100")
        assert await balance_of(session, second.id) == Decimal("60")

    async def test_switching_type_flips_sign(self, session, make_account, make_category, today):
        account = await make_account(balance=0)
        expense = await make_category(name="Refunds", type="expense")
        income = await make_category(name="Refunds", type="income")
        repo = TransactionRepository(session)

        txn = await repo.create(TransactionCreate(
            account_id=account.id, category_id=expense.id, amount=10, type="expense", date=today,
        ))
        updated = await repo.update(txn.id, TransactionUpdate(type="income", category_id=income.id))

        assert updated.amount == 10
        assert await balance_of(session, account.id) == Decimal("10")

    async def test_randomized_sequence_conserves_balance(self, session, make_account, make_category, today):
        """Balance always equals the opening balance plus the live signed amounts."""
        rng = random.Random(20240601)
        opening = Decimal("1000.00")
        account = await make_account(balance=float(opening))
        categories = {
            "expense": await make_category(name="Misc", type="expense"),
            "income": await make_category(name="Misc", type="income"),
        }
        repo = TransactionRepository(session)
        live = {}

        for _ in range(40):
            action = rng.choice(["create", "create", "update", "delete"])
            kind = rng.choice(["expense", "income"])
            amount = rng.randint(1, 50000) / 100

            if action == "create" or not live:
                txn = await repo.create(TransactionCreate(
                    account_id=account.id, category_id=categories[kind].id,
                    amount=amount, type=kind, date=today,
                ))
                live[txn.id] = signed_amount(amount, kind)
            elif action == "update":
                txn_id = rng.choice(sorted(live))
                await repo.update(txn_id, TransactionUpdate(
                    amount=amount, type=kind, category_id=categories[kind].id,
                ))
                live[txn_id] = signed_amount(amount, kind)
            else:
                txn_id = rng.choice(sorted(live))
                await repo.delete(txn_id)
                del live[txn_id]

            assert await balance_of(session, account.id) == opening + sum(live.values(), Decimal(0))

        stored = await repo.get_all(account_id=account.id)
        assert sum(to_money(txn.amount) for txn in stored) == sum(live.values(), Decimal(0))


class TestAtomicity:
    """Test that a failed balance adjustment leaves no partial write behind."""

    async def test_failed_create_leaves_nothing(self, session, make_account, make_category, today, fail_balance_update):
        account = await make_account(balance=100)
        category = await make_category()
        repo = TransactionRepository(session)
        fail_balance_update(1)

        with pytest.raises(RuntimeError):
            await repo.create(TransactionCreate(
                account_id=account.id, category_id=category.id, amount=25, type="expense", date=today,
            ))

        assert await repo.get_all() == []
        assert await balance_of(session, account.id) == Decimal("100")

    async def test_failed_move_keeps_both_accounts(
        self, session, make_account, make_category, today, fail_balance_update,
    ):
        first = await make_account(name="First", balance=100)
        second = await make_account(name="Second", balance=100)
        category = await make_category()
        repo = TransactionRepository(session)
        txn = await repo.create(TransactionCreate(
            account_id=first.id, category_id=category.id, amount=40, type="expense", date=today,
        ))
        calls = fail_balance_update(2)

        with pytest.raises(RuntimeError):
            await repo.update(txn.id, TransactionUpdate(account_id=second.id, amount=70))

        assert calls == [first.id, second.id]
        stored = await repo.get_by_id(txn.id)
        assert stored.account_id == first.id
        assert stored.amount == -40
        assert await balance_of(session, first.id) == Decimal("60")
        assert await balance_of(session, second.id) == Decimal("100")

    async def test_failed_delete_keeps_row(self, session, make_account, make_category, today, fail_balance_update):
        account = await make_account(balance=100)
        category = await make_category()
        repo = TransactionRepository(session)
        txn = await repo.create(TransactionCreate(
            account_id=account.id, category_id=category.id, amount=30, type="expense", date=today,
        ))
        fail_balance_update(1)

        with pytest.raises(RuntimeError):
            await repo.delete(txn.id)

        assert (await repo.get_by_id(txn.id)).amount == -30
        assert await balance_of(session, account.id) == Decimal("70")


class TestValidation:
    """Test that rejected writes leave no trace."""

    async def test_category_type_mismatch(self, session, make_account, make_category, today):
        account = await make_account(balance=100)
        income = await make_category(name="Salary", type="income")

        with pytest.raises(ValidationFailed):
            await TransactionRepository(session).create(TransactionCreate(
                account_id=account.id, category_id=income.id, amount=5, type="expense", date=today,
            ))
        assert await balance_of(session, account.id) == Decimal("100")
        assert await TransactionRepository(session).get_all() == []

    async def test_missing_account(self, session, make_category, today):
        category = await make_category()
        with pytest.raises(ValidationFailed, match="account does not exist"):
            await TransactionRepository(session).create(TransactionCreate(
                account_id="missing", category_id=category.id, amount=5, type="expense", date=today,
            ))

    async def test_inactive_category(self, session, make_account, make_category, today):
        from components.category.repository import CategoryRepository
        from components.category.schemas import CategoryUpdate

        account = await make_account()
        category = await make_category()
        await CategoryRepository(session).update(category.id, CategoryUpdate(is_active=False))

        with pytest.raises(ValidationFailed, match="inactive"):
            await TransactionRepository(session).create(TransactionCreate(
                account_id=account.id, category_id=category.id, amount=5, type="expense", date=today,
            ))

    async def test_update_revalidates_merged_values(self, session, make_account, make_category, today):
        account = await make_account(balance=100)
        category = await make_category()
        repo = TransactionRepository(session)
        txn = await repo.create(TransactionCreate(
            account_id=account.id, category_id=category.id, amount=20, type="expense", date=today,
        ))

        with pytest.raises(ValidationFailed):
            await repo.update(txn.id, TransactionUpdate(type="income"))
        assert await balance_of(session, account.id) == Decimal("80")

    async def test_update_missing_transaction(self, session):
        assert await TransactionRepository(session).update("missing", TransactionUpdate(amount=1)) is None
        assert await TransactionRepository(session).delete("missing") is False


class TestTransactionEndpoints:
    """Test the transactions API."""

    async def _setup(self, client):
        account = (await client.post("/accounts", json={
            "name": "Wallet", "type": "cash", "currency": "ARS", "balance": 10000,
        })).json()
        category = (await client.post("/categories", json={"name": "Food", "type": "expense"})).json()
        return account, category

    async def test_create_and_list(self, client, today):
        account, category = await self._setup(client)
        response = await client.post("/transactions", json={
            "account_id": account["id"], "category_id": category["id"], "amount": 1500,
            "type": "expense", "date": today.isoformat(), "description": "Lunch", "tags": ["work"],
        })
        assert response.status_code == 201
        body = response.json()
        assert body["amount"] == -1500
        assert body["formatted_amount"] == "-$ 1.500"
        assert body["tags"] == ["work"]

        listed = (await client.get("/transactions", params={"currency": "ARS", "type": "expense"})).json()
        assert [txn["id"] for txn in listed] == [body["id"]]
        assert (await client.get(f"/accounts/{account['id']}")).json()["balance"] == 8500

    async def test_mismatch_returns_message(self, client, today):
        account, category = await self._setup(client)
        response = await client.post("/transactions", json={
            "account_id": account["id"], "category_id": category["id"], "amount": 10,
            "type": "income", "date": today.isoformat(),
        })
        assert response.status_code == 400
        assert "expense" in response.json()["message"]

    async def test_non_positive_amount_rejected(self, client, today):
        account, category = await self._setup(client)
        response = await client.post("/transactions", json={
            "account_id": account["id"], "category_id": category["id"], "amount": 0,
            "type": "expense", "date": today.isoformat(),
        })
        assert response.status_code == 400
        assert "message" in response.json()

    async def test_unknown_transaction(self, client):
        response = await client.get("/transactions/missing")
        assert response.status_code == 404
        assert response.json() == {"message": "Transaction not found"}

    async def test_sub_cent_amount_rejected(self, client, today):
        account, category = await self._setup(client)
        payload = {
            "account_id": account["id"], "category_id": category["id"], "amount": 0.004,
            "type": "expense", "date": today.isoformat(),
        }
        response = await client.post("/transactions", json=payload)
        assert response.status_code == 400
        assert "amount" in response.json()["message"]

        created = (await client.post("/transactions", json={**payload, "amount": 10})).json()
        response = await client.put(f"/transactions/{created['id']}", json={"amount": 0.004})
        assert response.status_code == 400
        assert (await client.get(f"/accounts/{account['id']}")).json()["balance"] == 9990
