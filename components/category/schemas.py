"""Pydantic schemas for category data validation."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

CategoryType = Literal["income", "expense"]
HEX_COLOR = r"^#[0-9A-Fa-f]{6}$"


class CategoryBase(BaseModel):
    """Base category schema."""
    name: str = Field(..., min_length=2, max_length=100)
    type: CategoryType
    color: Optional[str] = Field(None, pattern=HEX_COLOR)
    icon: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = Field(None, max_length=500)


class CategoryCreate(CategoryBase):
    """Schema for category creation."""
    pass


class CategoryUpdate(BaseModel):
    """Schema for category update."""
    name: Optional[str] = Field(None, min_length=2, max_length=100)
    type: Optional[CategoryType] = None
    color: Optional[str] = Field(None, pattern=HEX_COLOR)
    icon: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = Field(None, max_length=500)
    is_active: Optional[bool] = None


class Category(CategoryBase):
    """Schema for category response with usage statistics."""
    id: str
    is_active: bool
    created_at: Optional[datetime] = None
    monthly_transactions: int = 0
    monthly_total: float = 0
    total_transactions: int = 0
    total_amount: float = 0
