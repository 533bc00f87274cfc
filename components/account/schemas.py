"""Pydantic schemas for account data validation."""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from components.currency.service import CurrencyInfo

AccountType = Literal["checking", "savings", "credit", "cash", "investment"]
CurrencyCode = Literal["ARS", "USD", "EUR"]


class AccountBase(BaseModel):
    """Base account schema."""
    name: str = Field(..., min_length=2, max_length=100)
    type: AccountType
    currency: CurrencyCode
    description: Optional[str] = Field(None, max_length=500)


class AccountCreate(AccountBase):
    """Schema for account creation."""
    balance: float = 0


class AccountUpdate(BaseModel):
    """Schema for account update; the balance is owned by the ledger."""
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    type: Optional[AccountType] = None
    currency: Optional[CurrencyCode] = None
    description: Optional[str] = Field(None, max_length=500)
    is_active: Optional[bool] = None


class Account(AccountBase):
    """Schema for account response."""
    id: str
    balance: float
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    formatted_balance: str
    currency_info: Optional[CurrencyInfo] = None


class MonthlyData(BaseModel):
    """Schema for one month of account activity."""
    month: str
    income: float
    expenses: float
    balance: float
    transaction_count: int


class AccountMonthlyData(BaseModel):
    """Schema for account monthly activity response."""
    account_id: str
    period: str
    months: List[MonthlyData]
