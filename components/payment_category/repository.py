"""Repository for payment category operations."""

import logging
from typing import List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.database import unit_of_work
from components.core.exceptions import ReferenceConflict, ValidationFailed
from components.payment.models import Payment
from components.payment_category.models import PaymentCategory, category_slug
from components.payment_category import schemas

logger = logging.getLogger(__name__)


class PaymentCategoryRepository:
    """Repository for payment category operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    @staticmethod
    def to_schema(category: PaymentCategory, count: int = 0) -> schemas.PaymentCategory:
        return schemas.PaymentCategory(
            id=category.id,
            name=category.name,
            color=category.color,
            count=count,
            created_at=category.created_at,
            updated_at=category.updated_at,
        )

    async def get_by_id(self, category_id: str) -> Optional[PaymentCategory]:
        """Get payment category by ID."""
        result = await self.session.execute(
            select(PaymentCategory).where(PaymentCategory.id == category_id)
        )
        return result.scalar_one_or_none()

    async def get_by_name(self, name: str) -> Optional[PaymentCategory]:
        """Get payment category by its exact name."""
        result = await self.session.execute(
            select(PaymentCategory).where(PaymentCategory.name == name)
        )
        return result.scalar_one_or_none()

    async def get_all(self) -> List[schemas.PaymentCategory]:
        """Get payment categories by name, each with the number of payments using it."""
        result = await self.session.execute(
            select(PaymentCategory, func.count(Payment.id))
            .outerjoin(Payment, Payment.category == PaymentCategory.name)
            .group_by(PaymentCategory.id)
            .order_by(PaymentCategory.name)
        )
        return [self.to_schema(category, count) for category, count in result.all()]

    async def count_payments(self, name: str) -> int:
        result = await self.session.execute(
            select(func.count(Payment.id)).where(Payment.category == name)
        )
        return result.scalar_one()

    async def _check_name(self, name: str, exclude_id: Optional[str] = None) -> None:
        existing = await self.get_by_name(name)
        if existing and existing.id != exclude_id:
            raise ValidationFailed("A payment category with this name already exists")

    async def create(self, data: schemas.PaymentCategoryCreate) -> PaymentCategory:
        """Create a payment category identified by the slug of its name."""
        category_id = category_slug(data.name)
        if not category_id:
            raise ValidationFailed("The category name must contain letters or digits")
        await self._check_name(data.name)
        if await self.get_by_id(category_id):
            raise ValidationFailed("A payment category with this name already exists")

        category = PaymentCategory(id=category_id, name=data.name, color=data.color)
        self.session.add(category)
        await self.session.commit()
        await self.session.refresh(category)
        logger.info("Created payment category %s", category.id)
        return category

    async def update(self, category_id: str, data: schemas.PaymentCategoryUpdate) -> Optional[PaymentCategory]:
        """Update a payment category; a new name is carried over to its payments."""
        category = await self.get_by_id(category_id)
        if not category:
            return None

        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        old_name = category.name
        new_name = changes.get("name", old_name)
        if new_name != old_name:
            await self._check_name(new_name, exclude_id=category_id)

        async with unit_of_work(self.session):
            if new_name != old_name:
                result = await self.session.execute(
                    update(Payment)
                    .where(Payment.category == old_name)
                    .values(category=new_name)
                )
                logger.info("Renamed payment category %s to %s on %d payments", old_name, new_name, result.rowcount)
            for field, value in changes.items():
                setattr(category, field, value)

        await self.session.refresh(category)
        return category

    async def delete(self, category_id: str) -> bool:
        """Delete a payment category that no payment uses."""
        category = await self.get_by_id(category_id)
        if not category:
            return False
        count = await self.count_payments(category.name)
        if count:
            raise ReferenceConflict(f"Cannot delete the category because {count} payments use it")

        await self.session.delete(category)
        await self.session.commit()
        logger.info("Deleted payment category %s", category_id)
        return True
