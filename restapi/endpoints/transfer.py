"""Transfer endpoints for the API."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.init_db import get_db
from components.transfer import schemas
from components.transfer.repository import TransferRepository

router = APIRouter(
    prefix="/transfers",
    tags=["transfers"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=List[schemas.Transfer])
async def get_transfers(
    account_id: Optional[str] = Query(None, description="Transfers from or to this account"),
    status: Optional[schemas.TransferStatus] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Get transfers, newest first."""
    return await TransferRepository(db).get_all(account_id, status)


@router.get("/{transfer_id}", response_model=schemas.Transfer)
async def get_transfer(transfer_id: str, db: AsyncSession = Depends(get_db)):
    """Get transfer by ID."""
    transfer = await TransferRepository(db).get_by_id(transfer_id)
    if not transfer:
        raise HTTPException(status_code=404, detail="Transfer not found")
    return transfer


@router.post("", response_model=schemas.Transfer, status_code=201)
async def create_transfer(data: schemas.TransferCreate, db: AsyncSession = Depends(get_db)):
    """
    Move funds between two accounts.

    External transfers are charged a 1% fee on the source account.
    Between currencies, the destination is credited with the converted
    amount.
    """
    return await TransferRepository(db).create(data)


@router.post("/{transfer_id}/cancel", response_model=schemas.Transfer)
async def cancel_transfer(transfer_id: str, db: AsyncSession = Depends(get_db)):
    """Cancel a completed transfer and restore both balances."""
    return await TransferRepository(db).cancel(transfer_id)
