"""Transaction endpoints for the API."""

import io
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from components.account.schemas import CurrencyCode
from components.core import schemas as core_schemas
from components.core.init_db import get_db
from components.transaction import schemas
from components.transaction.repository import TransactionRepository

router = APIRouter(
    prefix="/transactions",
    tags=["transactions"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=List[schemas.Transaction])
async def get_transactions(
    account_id: Optional[str] = Query(None),
    category_id: Optional[str] = Query(None),
    start_date: Optional[date] = Query(None, description="Earliest transaction date, inclusive"),
    end_date: Optional[date] = Query(None, description="Latest transaction date, inclusive"),
    currency: Optional[CurrencyCode] = Query(None, description="Currency of the owning account"),
    type: Optional[schemas.TransactionType] = Query(None),
    db: AsyncSession = Depends(get_db),
):
    """Get transactions, newest first, with account and category details."""
    repo = TransactionRepository(db)
    return await repo.get_all(account_id, category_id, start_date, end_date, currency, type)


@router.get("/{transaction_id}", response_model=schemas.Transaction)
async def get_transaction(transaction_id: str, db: AsyncSession = Depends(get_db)):
    """Get transaction by ID."""
    transaction = await TransactionRepository(db).get_by_id(transaction_id)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return transaction


@router.post("", response_model=schemas.Transaction, status_code=201)
async def create_transaction(data: schemas.TransactionCreate, db: AsyncSession = Depends(get_db)):
    """
    Create a transaction.

    The amount is sent unsigned; expenses are stored negative and the
    account balance moves by the signed amount.
    """
    return await TransactionRepository(db).create(data)


@router.put("/{transaction_id}", response_model=schemas.Transaction)
async def update_transaction(
    transaction_id: str,
    data: schemas.TransactionUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update a transaction; omitted fields keep their stored values."""
    transaction = await TransactionRepository(db).update(transaction_id, data)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return transaction


@router.delete("/{transaction_id}", response_model=core_schemas.Message)
async def delete_transaction(transaction_id: str, db: AsyncSession = Depends(get_db)):
    """Delete a transaction and revert its effect on the account balance."""
    if not await TransactionRepository(db).delete(transaction_id):
        raise HTTPException(status_code=404, detail="Transaction not found")
    return core_schemas.Message(message="Transaction deleted")


@router.post("/import", response_model=core_schemas.ImportResponse)
async def import_transactions(
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
):
    """
    Import transactions from a CSV file.

    The CSV file must have the following columns:
    - date: transaction date (e.g. 2024-03-15)
    - amount: unsigned amount
    - description: at least 3 characters
    - category: name of an active category of the row's type
    - account: name of an active account

    Optional columns: type (income/expense, defaults to expense) and
    tags (separated by ";"). Nothing is imported if any row is invalid.
    """
    if not file.filename or not file.filename.lower().endswith(".csv"):
        return core_schemas.ImportResponse(
            success=False,
            message="Invalid file format. Only CSV files (.csv) are supported."
        )

    repo = TransactionRepository(db)
    file_content = await file.read()
    success, message, errors, imported = await repo.import_from_csv(io.BytesIO(file_content))

    if not success:
        error_objects = [core_schemas.RowError(**error) for error in errors]
        return core_schemas.ImportResponse(
            success=False,
            message=message,
            errors=error_objects
        )

    return core_schemas.ImportResponse(
        success=True,
        message=message,
        imported=imported
    )
