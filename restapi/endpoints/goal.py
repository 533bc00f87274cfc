"""Goal endpoints for the API."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from components.account.schemas import CurrencyCode
from components.core import schemas as core_schemas
from components.core.init_db import get_db
from components.goal import schemas
from components.goal.repository import GoalRepository

router = APIRouter(
    prefix="/goals",
    tags=["goals"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=List[schemas.Goal])
async def get_goals(
    currency: Optional[CurrencyCode] = Query(None),
    status: Optional[schemas.GoalStatus] = Query(None),
    priority: Optional[schemas.GoalPriority] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Get goals with progress, days remaining and health status."""
    repo = GoalRepository(db)
    goals = await repo.get_all(currency, status, priority)
    return [repo.to_schema(goal) for goal in goals]


@router.post("", response_model=schemas.Goal, status_code=201)
async def create_goal(data: schemas.GoalCreate, db: AsyncSession = Depends(get_db)):
    """Create a goal with a target date in the future."""
    repo = GoalRepository(db)
    return repo.to_schema(await repo.create(data))


@router.put("/{goal_id}", response_model=schemas.Goal)
async def update_goal(goal_id: str, data: schemas.GoalUpdate, db: AsyncSession = Depends(get_db)):
    """Update goal by ID, including the amount saved so far."""
    repo = GoalRepository(db)
    goal = await repo.update(goal_id, data)
    if not goal:
        raise HTTPException(status_code=404, detail="Goal not found")
    return repo.to_schema(goal)


@router.delete("/{goal_id}", response_model=core_schemas.Message)
async def delete_goal(goal_id: str, db: AsyncSession = Depends(get_db)):
    """Delete goal by ID."""
    if not await GoalRepository(db).delete(goal_id):
        raise HTTPException(status_code=404, detail="Goal not found")
    return core_schemas.Message(message="Goal deleted")
