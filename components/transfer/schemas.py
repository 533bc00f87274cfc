"""Pydantic schemas for transfer data validation."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

TransferType = Literal["internal", "external"]
TransferStatus = Literal["pending", "completed", "failed", "cancelled"]


class TransferCreate(BaseModel):
    """Schema for transfer creation; `amount` is in the source account's currency."""
    from_account_id: str
    to_account_id: Optional[str] = None
    amount: float = Field(..., ge=0.01)
    transfer_type: TransferType = "internal"
    description: Optional[str] = Field(None, max_length=500)


class Transfer(BaseModel):
    """Schema for transfer response."""
    id: str
    from_account_id: str
    to_account_id: str
    from_account_name: Optional[str] = None
    to_account_name: Optional[str] = None
    from_currency: Optional[str] = None
    to_currency: Optional[str] = None
    amount: float
    fee: float
    converted_amount: float
    description: Optional[str] = None
    transfer_type: TransferType
    status: TransferStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    formatted_amount: str
    formatted_fee: str
    formatted_converted_amount: str
