"""Repository for category operations."""

import logging
from datetime import date, timedelta
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from components.account.repository import shift_month
from components.category.models import Category
from components.category import schemas
from components.core.exceptions import ReferenceConflict, ValidationFailed
from components.transaction.models import Transaction

logger = logging.getLogger(__name__)


class CategoryRepository:
    """Repository for category operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    @staticmethod
    def to_schema(category: Category, stats: Optional[Dict[str, float]] = None) -> schemas.Category:
        stats = stats or {}
        return schemas.Category(
            id=category.id,
            name=category.name,
            type=category.type,
            color=category.color,
            icon=category.icon,
            description=category.description,
            is_active=category.is_active,
            created_at=category.created_at,
            monthly_transactions=int(stats.get("monthly_transactions", 0)),
            monthly_total=float(stats.get("monthly_total", 0)),
            total_transactions=int(stats.get("total_transactions", 0)),
            total_amount=float(stats.get("total_amount", 0)),
        )

    async def get_by_id(self, category_id: str) -> Optional[Category]:
        """Get category by ID."""
        result = await self.session.execute(
            select(Category).where(Category.id == category_id)
        )
        return result.scalar_one_or_none()

    async def get_active_by_name(self, name: str, category_type: str) -> Optional[Category]:
        """Get an active category by name within a type."""
        result = await self.session.execute(
            select(Category).where(
                Category.name == name,
                Category.type == category_type,
                Category.is_active.is_(True),
            )
        )
        return result.scalars().first()

    async def get_all(
        self,
        category_type: Optional[str] = None,
        include_inactive: bool = False,
    ) -> List[Category]:
        """Get categories with optional filtering."""
        query = select(Category)
        if category_type:
            query = query.where(Category.type == category_type)
        if not include_inactive:
            query = query.where(Category.is_active.is_(True))
        result = await self.session.execute(query.order_by(Category.name))
        return list(result.scalars().all())

    async def get_all_with_stats(
        self,
        category_type: Optional[str] = None,
        include_inactive: bool = False,
        today: Optional[date] = None,
    ) -> List[schemas.Category]:
        """Get categories decorated with monthly and all-time usage."""
        today = today or date.today()
        categories = await self.get_all(category_type, include_inactive)
        month_start = today.replace(day=1)
        month_end = shift_month(today, 1) - timedelta(days=1)

        totals = await self._usage()
        monthly = await self._usage(month_start, month_end)

        result = []
        for category in categories:
            total_count, total_sum = totals.get(category.id, (0, 0))
            month_count, month_sum = monthly.get(category.id, (0, 0))
            result.append(self.to_schema(category, {
                "monthly_transactions": month_count,
                "monthly_total": month_sum,
                "total_transactions": total_count,
                "total_amount": total_sum,
            }))
        return result

    async def _usage(
        self,
        since: Optional[date] = None,
        until: Optional[date] = None,
    ) -> Dict[str, Tuple[int, float]]:
        query = select(
            Transaction.category_id,
            func.count(Transaction.id),
            func.coalesce(func.sum(Transaction.amount), 0),
        ).group_by(Transaction.category_id)
        if since:
            query = query.where(Transaction.date >= since)
        if until:
            query = query.where(Transaction.date <= until)
        result = await self.session.execute(query)
        return {row[0]: (row[1], float(row[2])) for row in result.all()}

    async def create(self, data: schemas.CategoryCreate) -> Category:
        """Create a new category."""
        if await self.get_active_by_name(data.name, data.type):
            raise ValidationFailed(
                f'An active {data.type} category named "{data.name}" already exists'
            )

        category = Category(
            name=data.name,
            type=data.type,
            color=data.color,
            icon=data.icon,
            description=data.description,
            is_active=True,
        )
        self.session.add(category)
        await self.session.commit()
        await self.session.refresh(category)
        return category

    async def update(self, category_id: str, data: schemas.CategoryUpdate) -> Optional[Category]:
        """Update category by ID."""
        category = await self.get_by_id(category_id)
        if not category:
            return None

        changes = data.model_dump(exclude_unset=True)
        name = changes.get("name") or category.name
        category_type = changes.get("type") or category.type

        if (name, category_type) != (category.name, category.type):
            existing = await self.get_active_by_name(name, category_type)
            if existing and existing.id != category_id:
                raise ValidationFailed(
                    f'An active {category_type} category named "{name}" already exists'
                )
        if category_type != category.type and await self.count_transactions(category_id):
            # Transactions must keep the type of their category
            raise ValidationFailed("Cannot change the type of a category that has transactions")

        for field, value in changes.items():
            if value is not None or field in ("color", "icon", "description"):
                setattr(category, field, value)

        await self.session.commit()
        await self.session.refresh(category)
        return category

    async def delete(self, category_id: str) -> bool:
        """Delete category by ID unless transactions still reference it."""
        category = await self.get_by_id(category_id)
        if not category:
            return False
        if await self.count_transactions(category_id):
            raise ReferenceConflict("Cannot delete a category that has transactions")

        await self.session.delete(category)
        await self.session.commit()
        logger.info("Deleted category %s", category_id)
        return True

    async def count_transactions(self, category_id: str) -> int:
        result = await self.session.execute(
            select(func.count(Transaction.id)).where(Transaction.category_id == category_id)
        )
        return result.scalar_one()
