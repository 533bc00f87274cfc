"""Account model for the database."""

import uuid

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Numeric, String, Text, func
from sqlalchemy.orm import relationship

from components.core.database import Base

ACCOUNT_TYPES = ("checking", "savings", "credit", "cash", "investment")


def new_id() -> str:
    return str(uuid.uuid4())


class Account(Base):
    """Balance-holding account in a single currency."""
    __tablename__ = "accounts"
    __table_args__ = (
        CheckConstraint("length(name) >= 2", name="ck_accounts_name_length"),
        CheckConstraint(
            "type IN ('checking', 'savings', 'credit', 'cash', 'investment')",
            name="ck_accounts_type",
        ),
        CheckConstraint("currency IN ('ARS', 'USD', 'EUR')", name="ck_accounts_currency"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(100), nullable=False)
    type = Column(String(20), nullable=False)
    # Mutated only through the ledger protocol (transactions and transfers)
    balance = Column(Numeric(14, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="ARS")
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    transactions = relationship(
        "Transaction",
        back_populates="account",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
