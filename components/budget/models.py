"""Budget model for the database."""

from sqlalchemy import Boolean, CheckConstraint, Column, Date, DateTime, Float, ForeignKey, Numeric, String, Text, func
from sqlalchemy.orm import relationship

from components.core.database import Base
from components.account.models import new_id

BUDGET_PERIODS = ("weekly", "monthly", "quarterly", "yearly")
BUDGET_STATUSES = ("good", "warning", "exceeded")


class Budget(Base):
    """Spending ceiling for one expense category over a date window."""
    __tablename__ = "budgets"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_budgets_amount_positive"),
        CheckConstraint(
            "period IN ('weekly', 'monthly', 'quarterly', 'yearly')",
            name="ck_budgets_period",
        ),
        CheckConstraint("currency IN ('ARS', 'USD', 'EUR')", name="ck_budgets_currency"),
        CheckConstraint("alert_threshold BETWEEN 0 AND 1", name="ck_budgets_alert_threshold"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    category_id = Column(String(36), ForeignKey("categories.id", ondelete="CASCADE"), nullable=False, index=True)
    amount = Column(Numeric(14, 2), nullable=False)
    period = Column(String(10), nullable=False, default="monthly")
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)  # NULL means open-ended
    currency = Column(String(3), nullable=False, default="ARS")
    alert_threshold = Column(Float, nullable=False, default=0.8)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    category = relationship("Category", back_populates="budgets")
