"""Category model for the database."""

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, String, Text, func
from sqlalchemy.orm import relationship

from components.core.database import Base
from components.account.models import new_id

CATEGORY_TYPES = ("income", "expense")


class Category(Base):
    """Income or expense category that every transaction belongs to."""
    __tablename__ = "categories"
    __table_args__ = (
        CheckConstraint("length(name) >= 2", name="ck_categories_name_length"),
        CheckConstraint("type IN ('income', 'expense')", name="ck_categories_type"),
        CheckConstraint(
            "color IS NULL OR (color LIKE '#%' AND length(color) = 7)",
            name="ck_categories_color",
        ),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False)
    type = Column(String(10), nullable=False)
    color = Column(String(7), nullable=True)
    icon = Column(String(50), nullable=True)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    # Relationships
    transactions = relationship("Transaction", back_populates="category", passive_deletes="all")
    budgets = relationship("Budget", back_populates="category", passive_deletes=True)
