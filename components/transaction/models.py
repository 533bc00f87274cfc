"""Transaction model for the database."""

from sqlalchemy import Boolean, CheckConstraint, Column, Date, DateTime, ForeignKey, Numeric, String, Text, func
from sqlalchemy.orm import relationship

from components.core.database import Base
from components.account.models import new_id

TRANSACTION_TYPES = ("income", "expense")
TRANSACTION_FREQUENCIES = ("daily", "weekly", "monthly", "yearly")


class Transaction(Base):
    """Signed monetary movement against one account and one category."""
    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint("amount != 0", name="ck_transactions_amount_nonzero"),
        CheckConstraint(
            "description IS NULL OR length(description) >= 3",
            name="ck_transactions_description_length",
        ),
        CheckConstraint("type IN ('income', 'expense')", name="ck_transactions_type"),
        CheckConstraint(
            "(type = 'income' AND amount > 0) OR (type = 'expense' AND amount < 0)",
            name="ck_transactions_sign_matches_type",
        ),
        CheckConstraint(
            "recurring_frequency IS NULL OR recurring_frequency IN ('daily', 'weekly', 'monthly', 'yearly')",
            name="ck_transactions_frequency",
        ),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    account_id = Column(String(36), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(String(36), ForeignKey("categories.id", ondelete="RESTRICT"), nullable=False, index=True)
    amount = Column(Numeric(14, 2), nullable=False)  # negative for expenses
    description = Column(Text, nullable=True)
    date = Column(Date, nullable=False, index=True)
    type = Column(String(10), nullable=False)
    tags = Column(Text, nullable=True)  # JSON array
    is_recurring = Column(Boolean, nullable=False, default=False)
    recurring_frequency = Column(String(10), nullable=True)
    location = Column(String(200), nullable=True)
    receipt_url = Column(String(500), nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    account = relationship("Account", back_populates="transactions")
    category = relationship("Category", back_populates="transactions")
