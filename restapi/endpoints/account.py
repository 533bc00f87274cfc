"""Account endpoints for the API."""

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from components.account import schemas
from components.account.repository import AccountRepository
from components.core import schemas as core_schemas
from components.core.init_db import get_db

router = APIRouter(
    prefix="/accounts",
    tags=["accounts"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=List[schemas.Account])
async def get_accounts(
    type: Optional[schemas.AccountType] = Query(None, description="Filter by account type"),
    currency: Optional[schemas.CurrencyCode] = Query(None, description="Filter by currency"),
    include_inactive: bool = Query(False, description="Include deactivated accounts"),
    db: AsyncSession = Depends(get_db),
):
    """Get accounts ordered by name."""
    repo = AccountRepository(db)
    accounts = await repo.get_all(type, currency, include_inactive)
    return [repo.to_schema(account) for account in accounts]


@router.get("/{account_id}", response_model=schemas.Account)
async def get_account(account_id: str, db: AsyncSession = Depends(get_db)):
    """Get account by ID."""
    repo = AccountRepository(db)
    account = await repo.get_by_id(account_id)
    if not account:
        raise HTTPException(status_code=404, detail="Account not found")
    return repo.to_schema(account)


@router.get("/{account_id}/monthly-data", response_model=schemas.AccountMonthlyData)
async def get_account_monthly_data(
    account_id: str,
    period: Literal["3m", "6m", "12m"] = Query("6m", description="How many months back to report"),
    db: AsyncSession = Depends(get_db),
):
    """
    Get income, expenses and net balance per month for an account.

    Months without transactions are reported with zeros.
    """
    repo = AccountRepository(db)
    if not await repo.get_by_id(account_id):
        raise HTTPException(status_code=404, detail="Account not found")
    months = await repo.get_monthly_data(account_id, period)
    return schemas.AccountMonthlyData(account_id=account_id, period=period, months=months)


@router.post("", response_model=schemas.Account, status_code=201)
async def create_account(data: schemas.AccountCreate, db: AsyncSession = Depends(get_db)):
    """
    Create a new account.

    Rejects a duplicate active name and a positive opening balance on
    credit accounts.
    """
    repo = AccountRepository(db)
    account = await repo.create(data)
    return repo.to_schema(account)


@router.put("/{account_id}", response_model=schemas.Account)
async def update_account(account_id: str, data: schemas.AccountUpdate, db: AsyncSession = Depends(get_db)):
    """Update account attributes; the balance only changes through transactions and transfers."""
    repo = AccountRepository(db)
    account = await repo.update(account_id, data)
    if not account:
        raise HTTPException(status_code=404, detail="Account not found")
    return repo.to_schema(account)


@router.delete("/{account_id}", response_model=core_schemas.Message)
async def delete_account(account_id: str, db: AsyncSession = Depends(get_db)):
    """Delete an account without transactions or transfers."""
    repo = AccountRepository(db)
    if not await repo.delete(account_id):
        raise HTTPException(status_code=404, detail="Account not found")
    return core_schemas.Message(message="Account deleted")
