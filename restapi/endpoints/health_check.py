"""Health check endpoint for monitoring application status."""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from components.core import schemas
from components.core.init_db import get_db

router = APIRouter(
    prefix="/health_check",
    tags=["services"],
    responses={200: {"description": "Service is healthy"}},
)


@router.get("/", response_model=schemas.HealthCheck)
async def health_check(db: AsyncSession = Depends(get_db)) -> schemas.HealthCheck:
    """Check the health status of the service and its database."""
    await db.execute(text("SELECT 1"))
    return schemas.HealthCheck(
        service_name="Finance Ledger",
        status="healthy"
    )
