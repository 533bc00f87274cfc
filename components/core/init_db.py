"""Database initialization and dependency injection."""

from typing import AsyncGenerator, Optional

import fastapi
from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.database import DatabaseManager
# Import all models to ensure they're registered
import components.account.models
import components.category.models
import components.transaction.models
import components.budget.models
import components.goal.models
import components.payment.models
import components.payment_category.models
import components.payment_settings.models
import components.transfer.models


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for getting database sessions."""
    db_manager: DatabaseManager = request.app.state.db_manager
    async with db_manager.get_db() as session:
        yield session


def init_db(app: fastapi.FastAPI, db_manager: Optional[DatabaseManager] = None) -> DatabaseManager:
    """Attach the database manager to the app; tests pass an in-memory one."""
    app.state.db_manager = db_manager or DatabaseManager()
    return app.state.db_manager
