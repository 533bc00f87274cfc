"""Pydantic schemas for the dashboard summary."""

import datetime as dt
from typing import Dict, List, Optional

from pydantic import BaseModel

from components.transaction.schemas import Transaction


class Overview(BaseModel):
    """Totals across all currencies, consolidated into the base currency."""
    currency: str
    total_balance: float
    monthly_income: float
    monthly_expenses: float
    net_income: float


class CurrencyStats(BaseModel):
    total_balance: float = 0
    account_count: int = 0
    total_income: float = 0
    total_expenses: float = 0
    balance: float = 0


class DailyExpense(BaseModel):
    date: dt.date
    amount: float


class CategoryTotal(BaseModel):
    category_id: str
    category_name: str
    category_color: Optional[str] = None
    currency: str
    total_amount: float
    transaction_count: int


class Dashboard(BaseModel):
    """Schema for dashboard response."""
    overview: Overview
    recent_transactions: List[Transaction]
    stats_by_currency: Dict[str, CurrencyStats]
    daily_expenses_by_currency: Dict[str, List[DailyExpense]]
    monthly_expenses_by_category: List[CategoryTotal]
    monthly_income_by_category: List[CategoryTotal]
    supported_currencies: List[str]
