"""Payment settings endpoints for the API."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from components.core import schemas as core_schemas
from components.core.init_db import get_db
from components.payment_settings import schemas
from components.payment_settings.repository import PaymentSettingsRepository

router = APIRouter(
    prefix="/payments/settings",
    tags=["payments"],
)


@router.get("", response_model=schemas.PaymentSettings)
async def get_payment_settings(db: AsyncSession = Depends(get_db)):
    """Get the saved payment settings, or the defaults."""
    repo = PaymentSettingsRepository(db)
    return await repo.get()


@router.put("", response_model=core_schemas.Message)
async def save_payment_settings(data: schemas.PaymentSettings, db: AsyncSession = Depends(get_db)):
    repo = PaymentSettingsRepository(db)
    await repo.save(data)
    return core_schemas.Message(message="Payment settings saved")
