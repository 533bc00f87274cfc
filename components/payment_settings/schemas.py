"""Pydantic schemas for payment settings."""

from typing import Literal

from pydantic import BaseModel, Field

from components.account.schemas import CurrencyCode


class NotificationSettings(BaseModel):
    email: bool = True
    push: bool = True
    sms: bool = False
    reminder_days: int = Field(3, ge=0, le=30)
    overdue_alerts: bool = True
    weekly_digest: bool = True


class PreferenceSettings(BaseModel):
    default_category: str = Field("utilities", min_length=2, max_length=100)
    default_priority: Literal["low", "medium", "high"] = "medium"
    auto_mark_paid: bool = False
    currency: CurrencyCode = "USD"
    date_format: str = Field("dd/MM/yyyy", max_length=20)
    theme: Literal["light", "dark", "system"] = "system"


class AutomationSettings(BaseModel):
    auto_recurring: bool = True
    smart_reminders: bool = True
    predictive_analysis: bool = False
    budget_alerts: bool = True


class SecuritySettings(BaseModel):
    require_confirmation: bool = True
    session_timeout: int = Field(30, ge=1, le=1440)
    two_factor_auth: bool = False


class PaymentSettings(BaseModel):
    """Schema for payment settings; every section is required when saving."""
    notifications: NotificationSettings
    preferences: PreferenceSettings
    automation: AutomationSettings
    security: SecuritySettings


def default_settings() -> PaymentSettings:
    return PaymentSettings(
        notifications=NotificationSettings(),
        preferences=PreferenceSettings(),
        automation=AutomationSettings(),
        security=SecuritySettings(),
    )
