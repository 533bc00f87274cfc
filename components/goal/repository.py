"""Repository for goal operations."""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import case, select
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.exceptions import ValidationFailed
from components.core.money import as_float, to_money
from components.currency.service import format_currency
from components.goal.models import Goal
from components.goal import schemas
from components.goal.utils import goal_health

logger = logging.getLogger(__name__)

PRIORITY_ORDER = case(
    (Goal.priority == "high", 0),
    (Goal.priority == "medium", 1),
    else_=2,
)


class GoalRepository:
    """Repository for goal operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    @staticmethod
    def to_schema(goal: Goal, today: Optional[date] = None) -> schemas.Goal:
        health = goal_health(
            goal.target_amount,
            goal.current_amount,
            goal.target_date,
            goal.status,
            today or date.today(),
        )
        return schemas.Goal(
            id=goal.id,
            title=goal.title,
            description=goal.description,
            target_amount=as_float(goal.target_amount),
            current_amount=as_float(goal.current_amount),
            target_date=goal.target_date,
            category=goal.category,
            priority=goal.priority,
            status=goal.status,
            currency=goal.currency,
            created_at=goal.created_at,
            updated_at=goal.updated_at,
            progress=health.progress,
            remaining=as_float(health.remaining),
            days_remaining=health.days_remaining,
            health_status=health.status,
            formatted_target_amount=format_currency(goal.target_amount, goal.currency),
            formatted_current_amount=format_currency(goal.current_amount, goal.currency),
            formatted_remaining=format_currency(health.remaining, goal.currency),
        )

    async def get_by_id(self, goal_id: str) -> Optional[Goal]:
        """Get goal by ID."""
        result = await self.session.execute(
            select(Goal).where(Goal.id == goal_id)
        )
        return result.scalar_one_or_none()

    async def get_active_by_title(self, title: str) -> Optional[Goal]:
        """Get a goal that is not cancelled by its title."""
        result = await self.session.execute(
            select(Goal).where(Goal.title == title, Goal.status != "cancelled")
        )
        return result.scalars().first()

    async def get_all(
        self,
        currency: Optional[str] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> List[Goal]:
        """
        Get goals ordered by priority then target date.

        Cancelled goals are only listed when asked for by status.
        """
        query = select(Goal)
        if currency:
            query = query.where(Goal.currency == currency)
        if status:
            query = query.where(Goal.status == status)
        else:
            query = query.where(Goal.status != "cancelled")
        if priority:
            query = query.where(Goal.priority == priority)

        result = await self.session.execute(query.order_by(PRIORITY_ORDER, Goal.target_date))
        return list(result.scalars().all())

    async def create(self, data: schemas.GoalCreate, today: Optional[date] = None) -> Goal:
        """Create a new active goal."""
        today = today or date.today()
        if data.target_date <= today:
            raise ValidationFailed("The target date must be in the future")
        if await self.get_active_by_title(data.title):
            raise ValidationFailed("An active goal with this title already exists")

        goal = Goal(
            title=data.title,
            description=data.description,
            target_amount=to_money(data.target_amount),
            current_amount=to_money(data.current_amount),
            target_date=data.target_date,
            category=data.category,
            priority=data.priority,
            status="active",
            currency=data.currency,
        )
        self.session.add(goal)
        await self.session.commit()
        await self.session.refresh(goal)
        logger.info("Created goal %s (%s %s)", goal.id, goal.target_amount, goal.currency)
        return goal

    async def update(self, goal_id: str, data: schemas.GoalUpdate) -> Optional[Goal]:
        """Update goal by ID; progress is adjusted through current_amount."""
        goal = await self.get_by_id(goal_id)
        if not goal:
            return None

        changes = data.model_dump(exclude_unset=True)
        if changes.get("title") and changes["title"] != goal.title:
            existing = await self.get_active_by_title(changes["title"])
            if existing and existing.id != goal_id:
                raise ValidationFailed("An active goal with this title already exists")

        for field, value in changes.items():
            if field in ("target_amount", "current_amount") and value is not None:
                setattr(goal, field, to_money(value))
            elif value is not None or field == "description":
                setattr(goal, field, value)

        await self.session.commit()
        await self.session.refresh(goal)
        return goal

    async def delete(self, goal_id: str) -> bool:
        """Delete goal by ID."""
        goal = await self.get_by_id(goal_id)
        if not goal:
            return False

        await self.session.delete(goal)
        await self.session.commit()
        return True
