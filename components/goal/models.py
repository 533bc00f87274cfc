"""Goal model for the database."""

from sqlalchemy import CheckConstraint, Column, Date, DateTime, Numeric, String, Text, func

from components.core.database import Base
from components.account.models import new_id

GOAL_PRIORITIES = ("low", "medium", "high")
GOAL_STATUSES = ("active", "completed", "paused", "cancelled")
GOAL_CATEGORIES = ("savings", "investment", "debt_payment", "purchase", "emergency_fund", "other")


class Goal(Base):
    """Savings target tracked by a manually adjusted current amount."""
    __tablename__ = "goals"
    __table_args__ = (
        CheckConstraint("length(title) >= 3", name="ck_goals_title_length"),
        CheckConstraint("target_amount > 0", name="ck_goals_target_positive"),
        CheckConstraint("current_amount >= 0", name="ck_goals_current_non_negative"),
        CheckConstraint("priority IN ('low', 'medium', 'high')", name="ck_goals_priority"),
        CheckConstraint(
            "status IN ('active', 'completed', 'paused', 'cancelled')",
            name="ck_goals_status",
        ),
        CheckConstraint("currency IN ('ARS', 'USD', 'EUR')", name="ck_goals_currency"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    target_amount = Column(Numeric(14, 2), nullable=False)
    current_amount = Column(Numeric(14, 2), nullable=False, default=0)
    target_date = Column(Date, nullable=False)
    category = Column(String(20), nullable=False, default="other")
    priority = Column(String(10), nullable=False, default="medium")
    status = Column(String(10), nullable=False, default="active")
    currency = Column(String(3), nullable=False, default="ARS")
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())
