"""Pydantic schemas for goal data validation."""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

from components.account.schemas import CurrencyCode

GoalPriority = Literal["low", "medium", "high"]
GoalStatus = Literal["active", "completed", "paused", "cancelled"]
GoalHealth = Literal["active", "completed", "paused", "cancelled", "on_track", "at_risk", "behind", "overdue"]
GoalCategory = Literal["savings", "investment", "debt_payment", "purchase", "emergency_fund", "other"]


class GoalBase(BaseModel):
    """Base goal schema."""
    title: str = Field(..., min_length=3, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    target_amount: float = Field(..., ge=0.01)
    target_date: date
    category: GoalCategory = "other"
    priority: GoalPriority = "medium"
    currency: CurrencyCode


class GoalCreate(GoalBase):
    """Schema for goal creation; goals start active with nothing saved."""
    current_amount: float = Field(0, ge=0)


class GoalUpdate(BaseModel):
    """Schema for goal update."""
    title: Optional[str] = Field(None, min_length=3, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    target_amount: Optional[float] = Field(None, ge=0.01)
    current_amount: Optional[float] = Field(None, ge=0)
    target_date: Optional[date] = None
    category: Optional[GoalCategory] = None
    priority: Optional[GoalPriority] = None
    status: Optional[GoalStatus] = None
    currency: Optional[CurrencyCode] = None


class Goal(GoalBase):
    """
    Schema for goal response.

    `status` is the stored lifecycle state; `health_status` is the
    projection derived from progress and time left.
    """
    id: str
    current_amount: float
    status: GoalStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    progress: float
    remaining: float
    days_remaining: int
    health_status: GoalHealth
    formatted_target_amount: str
    formatted_current_amount: str
    formatted_remaining: str
