"""Pydantic schemas for payment data validation."""

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from components.account.schemas import CurrencyCode
from components.currency.service import CurrencyInfo

PaymentStatus = Literal["pending", "paid", "overdue", "cancelled"]
PaymentFrequency = Literal["daily", "weekly", "monthly", "quarterly", "yearly"]


class PaymentBase(BaseModel):
    """Base payment schema."""
    name: str = Field(..., min_length=3, max_length=200)
    amount: float = Field(..., ge=0.01)
    currency: CurrencyCode
    due_date: date
    category: str = Field("other", min_length=2, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    is_recurring: bool = False
    recurring_frequency: Optional[PaymentFrequency] = None
    account_id: Optional[str] = None


class PaymentCreate(PaymentBase):
    """Schema for payment creation."""
    status: PaymentStatus = "pending"


class PaymentUpdate(BaseModel):
    """Schema for payment update."""
    name: Optional[str] = Field(None, min_length=3, max_length=200)
    amount: Optional[float] = Field(None, ge=0.01)
    currency: Optional[CurrencyCode] = None
    due_date: Optional[date] = None
    status: Optional[PaymentStatus] = None
    category: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    is_recurring: Optional[bool] = None
    recurring_frequency: Optional[PaymentFrequency] = None
    account_id: Optional[str] = None
    paid_date: Optional[date] = None


class Payment(PaymentBase):
    """Schema for payment response."""
    id: str
    status: PaymentStatus
    paid_date: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    account_name: Optional[str] = None
    formatted_amount: str
    currency_info: Optional[CurrencyInfo] = None
    days_until_due: int
    is_overdue: bool


class MonthlyPaymentTrend(BaseModel):
    month: str
    paid: float
    pending: float
    overdue: float


class CategoryBreakdown(BaseModel):
    category: str
    amount: float
    count: int
    percentage: float


class UpcomingPayment(BaseModel):
    id: str
    name: str
    amount: float
    currency: str
    due_date: date
    category: str


class PaymentInsight(BaseModel):
    type: Literal["warning", "success", "info"]
    title: str
    description: str


class PaymentAnalytics(BaseModel):
    """Schema for payment analytics response."""
    total_payments: int
    total_amount: float
    paid_amount: float
    pending_amount: float
    overdue_amount: float
    on_time_percentage: float
    average_payment_amount: float
    monthly_trend: List[MonthlyPaymentTrend]
    category_breakdown: List[CategoryBreakdown]
    upcoming_payments: List[UpcomingPayment]
    insights: List[PaymentInsight] = []
