"""Pydantic schemas for payment category data validation."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from components.category.schemas import HEX_COLOR


class PaymentCategoryBase(BaseModel):
    """Base payment category schema."""
    name: str = Field(..., min_length=2, max_length=100)
    color: str = Field(..., pattern=HEX_COLOR)


class PaymentCategoryCreate(PaymentCategoryBase):
    """Schema for payment category creation."""
    pass


class PaymentCategoryUpdate(BaseModel):
    """Schema for payment category update; renaming moves its payments along."""
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    color: Optional[str] = Field(None, pattern=HEX_COLOR)


class PaymentCategory(PaymentCategoryBase):
    """Schema for payment category response."""
    id: str
    count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
