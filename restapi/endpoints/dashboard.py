"""Dashboard endpoint for the API."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.dashboard import schemas
from components.dashboard.repository import DashboardRepository

router = APIRouter(
    prefix="/dashboard",
    tags=["dashboard"],
)


@router.get("", response_model=schemas.Dashboard)
async def get_dashboard(db: AsyncSession = Depends(get_db)):
    """
    Get the dashboard summary.

    Includes the five most recent transactions, balances and current
    month income and expenses per currency, daily expenses, totals by
    category, and an overview converted into the base currency.
    """
    return await DashboardRepository(db).get_dashboard()
