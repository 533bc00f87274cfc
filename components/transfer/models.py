"""Transfer model for the database."""

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Numeric, String, Text, func
from sqlalchemy.orm import relationship

from components.core.database import Base
from components.account.models import new_id

TRANSFER_TYPES = ("internal", "external")
TRANSFER_STATUSES = ("pending", "completed", "failed", "cancelled")


class Transfer(Base):
    """Movement of funds between two accounts, recorded as a ledger entry."""
    __tablename__ = "transfers"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transfers_amount_positive"),
        CheckConstraint("fee >= 0", name="ck_transfers_fee_non_negative"),
        CheckConstraint("from_account_id != to_account_id", name="ck_transfers_distinct_accounts"),
        CheckConstraint("transfer_type IN ('internal', 'external')", name="ck_transfers_type"),
        CheckConstraint(
            "status IN ('pending', 'completed', 'failed', 'cancelled')",
            name="ck_transfers_status",
        ),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    from_account_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    to_account_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    amount = Column(Numeric(14, 2), nullable=False)
    fee = Column(Numeric(14, 2), nullable=False, default=0)
    # Amount credited to the destination, in its own currency
    converted_amount = Column(Numeric(14, 2), nullable=False)
    description = Column(Text, nullable=True)
    transfer_type = Column(String(10), nullable=False, default="internal")
    status = Column(String(10), nullable=False, default="completed", index=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now(), index=True)
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    from_account = relationship("Account", foreign_keys=[from_account_id])
    to_account = relationship("Account", foreign_keys=[to_account_id])
