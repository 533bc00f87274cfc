"""Payment model for the database."""

from sqlalchemy import Boolean, CheckConstraint, Column, Date, DateTime, ForeignKey, Numeric, String, Text, func
from sqlalchemy.orm import relationship

from components.core.database import Base
from components.account.models import new_id

PAYMENT_STATUSES = ("pending", "paid", "overdue", "cancelled")
PAYMENT_FREQUENCIES = ("daily", "weekly", "monthly", "quarterly", "yearly")


class Payment(Base):
    """Scheduled, possibly recurring, bill with a due date."""
    __tablename__ = "payments"
    __table_args__ = (
        CheckConstraint("length(name) >= 3", name="ck_payments_name_length"),
        CheckConstraint("amount > 0", name="ck_payments_amount_positive"),
        CheckConstraint(
            "status IN ('pending', 'paid', 'overdue', 'cancelled')",
            name="ck_payments_status",
        ),
        CheckConstraint(
            "recurring_frequency IS NULL OR "
            "recurring_frequency IN ('daily', 'weekly', 'monthly', 'quarterly', 'yearly')",
            name="ck_payments_frequency",
        ),
        CheckConstraint("currency IN ('ARS', 'USD', 'EUR')", name="ck_payments_currency"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(200), nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)
    due_date = Column(Date, nullable=False, index=True)
    status = Column(String(10), nullable=False, default="pending", index=True)
    category = Column(String(100), nullable=False, default="other", index=True)
    description = Column(Text, nullable=True)
    is_recurring = Column(Boolean, nullable=False, default=False)
    recurring_frequency = Column(String(10), nullable=True)
    account_id = Column(String(36), ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True)
    currency = Column(String(3), nullable=False, default="ARS")
    paid_date = Column(Date, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    account = relationship("Account")
