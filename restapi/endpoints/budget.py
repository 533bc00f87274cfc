"""Budget endpoints for the API."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from components.account.schemas import CurrencyCode
from components.budget import schemas
from components.budget.repository import BudgetRepository
from components.core import schemas as core_schemas
from components.core.init_db import get_db

router = APIRouter(
    prefix="/budgets",
    tags=["budgets"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=List[schemas.Budget])
async def get_budgets(
    currency: Optional[CurrencyCode] = Query(None),
    status: Optional[schemas.BudgetStatus] = Query(None, description="Filter by derived spending status"),
    db: AsyncSession = Depends(get_db),
):
    """
    Get active budgets with their current spending.

    Returns for each budget:
    - Amount spent in the category, currency and date window
    - Remaining amount (never below zero)
    - Percentage used (capped at 100)
    - Status: good, warning (past the alert threshold) or exceeded
    """
    return await BudgetRepository(db).get_all(currency, status)


@router.post("", response_model=schemas.Budget, status_code=201)
async def create_budget(data: schemas.BudgetCreate, db: AsyncSession = Depends(get_db)):
    """Create a budget for an expense category."""
    repo = BudgetRepository(db)
    budget = await repo.create(data)
    return await repo.to_schema(budget)


@router.put("/{budget_id}", response_model=schemas.Budget)
async def update_budget(budget_id: str, data: schemas.BudgetUpdate, db: AsyncSession = Depends(get_db)):
    """Update budget by ID."""
    repo = BudgetRepository(db)
    budget = await repo.update(budget_id, data)
    if not budget:
        raise HTTPException(status_code=404, detail="Budget not found")
    return await repo.to_schema(budget)


@router.delete("/{budget_id}", response_model=core_schemas.Message)
async def delete_budget(budget_id: str, db: AsyncSession = Depends(get_db)):
    """Delete budget by ID."""
    if not await BudgetRepository(db).delete(budget_id):
        raise HTTPException(status_code=404, detail="Budget not found")
    return core_schemas.Message(message="Budget deleted")
