"""Category endpoints."""

import uuid
from typing import Annotated, Any, Dict, List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import get_db
from app.dependencies import get_current_admin
from app.routers.errors import conflict, not_found
from app.schemas.category import (
    CategoryCreate,
    CategoryReorderRequest,
    CategoryResponse,
    CategorySearchParams,
    CategoryUpdate,
    CategoryWithCount,
)
from app.schemas.common import Page, SuccessResponse
from app.services.category_service import category_service

router = APIRouter(prefix="/categories", tags=["Categories"])
admin_router = APIRouter(
    prefix="/admin/categories",
    tags=["Admin"],
    dependencies=[Depends(get_current_admin)],
)


@router.get("", response_model=List[CategoryWithCount])
async def list_categories(db: AsyncSession = Depends(get_db)) -> List[Dict[str, Any]]:
    """All categories in display order, with course counts."""
    return await category_service.get_all_categories(db)


@router.get("/{slug}", response_model=CategoryWithCount)
async def get_category(slug: str, db: AsyncSession = Depends(get_db)) -> Dict[str, Any]:
    category = await category_service.get_category_by_slug(db, slug)
    if not category:
        raise not_found("Category")
    return category


@admin_router.get("", response_model=Page[CategoryWithCount])
async def search_categories(
    params: Annotated[CategorySearchParams, Query()],
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    return await category_service.search_categories(
        db, query=params.query, page=params.page, limit=params.limit
    )


@admin_router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    body: CategoryCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Create a category.

    Raises:
        HTTPException(409): If the slug is already taken.
    """
    try:
        return await category_service.create_category(db, body.model_dump())
    except ValueError as e:
        raise conflict(e)


@admin_router.post("/reorder", response_model=SuccessResponse)
async def reorder_categories(
    body: CategoryReorderRequest,
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    await category_service.reorder_categories(
        db, [item.model_dump() for item in body.items]
    )
    return {"success": True}


@admin_router.get("/{category_id}", response_model=CategoryWithCount)
async def get_category_by_id(
    category_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    category = await category_service.get_category_by_id(db, category_id)
    if not category:
        raise not_found("Category")
    return category


@admin_router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: uuid.UUID,
    body: CategoryUpdate,
    db: AsyncSession = Depends(get_db),
):
    try:
        category = await category_service.update_category(db, category_id, body.changes())
    except ValueError as e:
        raise conflict(e)
    if not category:
        raise not_found("Category")
    return category


@admin_router.delete("/{category_id}", response_model=SuccessResponse)
async def delete_category(
    category_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    """
    Delete a category.

    Raises:
        HTTPException(404): If the category does not exist.
        HTTPException(409): If courses still belong to it.
    """
    try:
        deleted = await category_service.delete_category(db, category_id)
    except ValueError as e:
        raise conflict(e)
    if not deleted:
        raise not_found("Category")
    return {"success": True}
