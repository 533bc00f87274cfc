"""Pydantic schemas for budget data validation."""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from components.account.schemas import CurrencyCode

BudgetPeriod = Literal["weekly", "monthly", "quarterly", "yearly"]
BudgetStatus = Literal["good", "warning", "exceeded"]


class BudgetBase(BaseModel):
    """Base budget schema; `alert_threshold` is a fraction of the amount."""
    category_id: str
    amount: float = Field(..., ge=0.01)
    period: BudgetPeriod = "monthly"
    currency: CurrencyCode
    start_date: date
    end_date: Optional[date] = None
    alert_threshold: float = Field(0.8, ge=0, le=1)
    description: Optional[str] = Field(None, max_length=500)


class BudgetCreate(BudgetBase):
    """Schema for budget creation."""
    pass


class BudgetUpdate(BaseModel):
    """Schema for budget update."""
    category_id: Optional[str] = None
    amount: Optional[float] = Field(None, ge=0.01)
    period: Optional[BudgetPeriod] = None
    currency: Optional[CurrencyCode] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    alert_threshold: Optional[float] = Field(None, ge=0, le=1)
    description: Optional[str] = Field(None, max_length=500)
    is_active: Optional[bool] = None


class Budget(BudgetBase):
    """Schema for budget response decorated with current spending."""
    id: str
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    category_name: Optional[str] = None
    category_color: Optional[str] = None
    category_icon: Optional[str] = None
    spent: float
    remaining: float
    percentage: float
    status: BudgetStatus
    formatted_amount: str
    formatted_spent: str
    formatted_remaining: str
