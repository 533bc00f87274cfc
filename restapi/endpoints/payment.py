"""Scheduled payment endpoints for the API."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from components.account.schemas import CurrencyCode
from components.core import schemas as core_schemas
from components.core.init_db import get_db
from components.payment import schemas
from components.payment.repository import PaymentRepository

router = APIRouter(
    prefix="/payments",
    tags=["payments"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=List[schemas.Payment])
async def get_payments(
    status: Optional[schemas.PaymentStatus] = Query(None),
    currency: Optional[CurrencyCode] = Query(None),
    is_recurring: Optional[bool] = Query(None),
    overdue: bool = Query(False, description="Only overdue payments"),
    db: AsyncSession = Depends(get_db),
):
    """
    Get payments ordered by due date.

    Pending payments whose due date has passed are marked overdue
    before the list is read.
    """
    repo = PaymentRepository(db)
    await repo.reconcile_overdue()
    return await repo.get_all(status, currency, is_recurring, overdue)


@router.get("/analytics", response_model=schemas.PaymentAnalytics)
async def get_payment_analytics(
    months: int = Query(6, ge=1, le=24, description="Number of months to analyze"),
    category: Optional[str] = Query(None, description="Payment category name"),
    db: AsyncSession = Depends(get_db),
):
    """
    Get payment analytics.

    Returns:
    - Totals by status and average payment amount
    - Percentage of paid payments settled on time
    - Monthly trend and per-category breakdown
    - Pending payments due in the next 30 days
    """
    repo = PaymentRepository(db)
    await repo.reconcile_overdue()
    return await repo.get_analytics(months, category)


@router.post("", response_model=schemas.Payment, status_code=201)
async def create_payment(data: schemas.PaymentCreate, db: AsyncSession = Depends(get_db)):
    """Create a payment; a linked account must use the payment's currency."""
    repo = PaymentRepository(db)
    payment = await repo.create(data)
    return await repo.get_decorated(payment.id)


@router.put("/{payment_id}", response_model=schemas.Payment)
async def update_payment(payment_id: str, data: schemas.PaymentUpdate, db: AsyncSession = Depends(get_db)):
    """Update payment by ID."""
    repo = PaymentRepository(db)
    payment = await repo.update(payment_id, data)
    if not payment:
        raise HTTPException(status_code=404, detail="Payment not found")
    return await repo.get_decorated(payment.id)


@router.delete("/{payment_id}", response_model=core_schemas.Message)
async def delete_payment(payment_id: str, db: AsyncSession = Depends(get_db)):
    """Delete payment by ID."""
    if not await PaymentRepository(db).delete(payment_id):
        raise HTTPException(status_code=404, detail="Payment not found")
    return core_schemas.Message(message="Payment deleted")
