"""Category endpoints for the API."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from components.category import schemas
from components.category.repository import CategoryRepository
from components.core import schemas as core_schemas
from components.core.init_db import get_db

router = APIRouter(
    prefix="/categories",
    tags=["categories"],
    responses={404: {"description": "Not found"}},
)


@router.get("", response_model=List[schemas.Category])
async def get_categories(
    type: Optional[schemas.CategoryType] = Query(None, description="Filter by category type"),
    include_inactive: bool = Query(False, description="Include deactivated categories"),
    db: AsyncSession = Depends(get_db),
):
    """Get categories with their monthly and all-time usage."""
    repo = CategoryRepository(db)
    return await repo.get_all_with_stats(type, include_inactive)


@router.post("", response_model=schemas.Category, status_code=201)
async def create_category(data: schemas.CategoryCreate, db: AsyncSession = Depends(get_db)):
    """Create a new category; names are unique per type among active categories."""
    repo = CategoryRepository(db)
    return repo.to_schema(await repo.create(data))


@router.put("/{category_id}", response_model=schemas.Category)
async def update_category(category_id: str, data: schemas.CategoryUpdate, db: AsyncSession = Depends(get_db)):
    """Update category by ID."""
    repo = CategoryRepository(db)
    category = await repo.update(category_id, data)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return repo.to_schema(category)


@router.delete("/{category_id}", response_model=core_schemas.Message)
async def delete_category(category_id: str, db: AsyncSession = Depends(get_db)):
    """Delete a category that no transaction references."""
    repo = CategoryRepository(db)
    if not await repo.delete(category_id):
        raise HTTPException(status_code=404, detail="Category not found")
    return core_schemas.Message(message="Category deleted")
