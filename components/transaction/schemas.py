"""Pydantic schemas for transaction data validation."""

import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

TransactionType = Literal["income", "expense"]
TransactionFrequency = Literal["daily", "weekly", "monthly", "yearly"]


class TransactionBase(BaseModel):
    """Base transaction schema; `amount` is always the unsigned magnitude."""
    account_id: str
    category_id: str
    amount: float = Field(..., ge=0.01)
    type: TransactionType
    date: dt.date
    description: Optional[str] = Field(None, min_length=3, max_length=500)
    tags: List[str] = []
    is_recurring: bool = False
    recurring_frequency: Optional[TransactionFrequency] = None
    location: Optional[str] = Field(None, max_length=200)
    receipt_url: Optional[str] = Field(None, max_length=500)


class TransactionCreate(TransactionBase):
    """Schema for transaction creation."""
    pass


class TransactionUpdate(BaseModel):
    """Schema for transaction update; omitted fields keep their stored value."""
    account_id: Optional[str] = None
    category_id: Optional[str] = None
    amount: Optional[float] = Field(None, ge=0.01)
    type: Optional[TransactionType] = None
    date: Optional[dt.date] = None
    description: Optional[str] = Field(None, min_length=3, max_length=500)
    tags: Optional[List[str]] = None
    is_recurring: Optional[bool] = None
    recurring_frequency: Optional[TransactionFrequency] = None
    location: Optional[str] = Field(None, max_length=200)
    receipt_url: Optional[str] = Field(None, max_length=500)


class Transaction(BaseModel):
    """Schema for transaction response; `amount` carries the stored sign."""
    id: str
    account_id: str
    category_id: str
    amount: float
    type: TransactionType
    date: dt.date
    description: Optional[str] = None
    tags: List[str] = []
    is_recurring: bool = False
    recurring_frequency: Optional[str] = None
    location: Optional[str] = None
    receipt_url: Optional[str] = None
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None
    account_name: Optional[str] = None
    account_currency: Optional[str] = None
    category_name: Optional[str] = None
    category_color: Optional[str] = None
    category_icon: Optional[str] = None
    formatted_amount: str
