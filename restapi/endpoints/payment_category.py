"""Payment category endpoints for the API."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from components.core import schemas as core_schemas
from components.core.init_db import get_db
from components.payment_category import schemas
from components.payment_category.repository import PaymentCategoryRepository

router = APIRouter(
    prefix="/payments/categories",
    tags=["payments"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=List[schemas.PaymentCategory])
async def get_payment_categories(db: AsyncSession = Depends(get_db)):
    """Get payment categories with the number of payments in each."""
    repo = PaymentCategoryRepository(db)
    return await repo.get_all()


@router.post("", response_model=schemas.PaymentCategory, status_code=201)
async def create_payment_category(data: schemas.PaymentCategoryCreate, db: AsyncSession = Depends(get_db)):
    repo = PaymentCategoryRepository(db)
    return repo.to_schema(await repo.create(data))


@router.put("/{category_id}", response_model=schemas.PaymentCategory)
async def update_payment_category(
    category_id: str, data: schemas.PaymentCategoryUpdate, db: AsyncSession = Depends(get_db)
):
    """Update payment category by ID."""
    repo = PaymentCategoryRepository(db)
    category = await repo.update(category_id, data)
    if not category:
        raise HTTPException(status_code=404, detail="Payment category not found")
    return repo.to_schema(category, await repo.count_payments(category.name))


@router.delete("/{category_id}", response_model=core_schemas.Message)
async def delete_payment_category(category_id: str, db: AsyncSession = Depends(get_db)):
    """Delete a payment category that no payment uses."""
    repo = PaymentCategoryRepository(db)
    if not await repo.delete(category_id):
        raise HTTPException(status_code=404, detail="Payment category not found")
    return core_schemas.Message(message="Payment category deleted")
