"""Shared fixtures: an in-memory database, a session on it and an API client."""

from datetime import date

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from components.account.repository import AccountRepository
from components.account.schemas import AccountCreate
from components.category.repository import CategoryRepository
from components.category.schemas import CategoryCreate
from components.core.database import DatabaseManager
from restapi.router import create_app


@pytest.fixture
async def db_manager():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    manager = DatabaseManager(engine)
    await manager.create_all()
    yield manager
    await manager.dispose()


@pytest.fixture
async def session(db_manager):
    async with db_manager.get_db() as session:
        yield session


@pytest.fixture
async def client(db_manager):
    app = create_app(db_manager)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def today():
    return date.today()


@pytest.fixture
def make_account(session):
    async def _make(name="Checking", type="checking", currency="USD", balance=0):
        return await AccountRepository(session).create(
            AccountCreate(name=name, type=type, currency=currency, balance=balance)
        )
    return _make


@pytest.fixture
def make_category(session):
    async def _make(name="Groceries", type="expense"):
        return await CategoryRepository(session).create(CategoryCreate(name=name, type=type))
    return _make


@pytest.fixture
def fail_balance_update(monkeypatch):
    """Make the n-th balance adjustment raise, after the earlier ones ran."""
    original = AccountRepository.apply_delta

    def _install(call_number):
        calls = []

        async def apply_delta(self, account_id, delta):
            calls.append(account_id)
            if len(calls) == call_number:
                raise RuntimeError("balance update failed")
            await original(self, account_id, delta)

        monkeypatch.setattr(AccountRepository, "apply_delta", apply_delta)
        return calls
    return _install
