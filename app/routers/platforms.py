"""Platform endpoints."""

import uuid
from typing import Annotated, Any, Dict, List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import get_db
from app.dependencies import get_current_admin
from app.routers.errors import conflict, not_found
from app.schemas.common import Page, SuccessResponse
from app.schemas.platform import (
    PlatformCreate,
    PlatformPublic,
    PlatformResponse,
    PlatformSearchParams,
    PlatformSummary,
    PlatformUpdate,
    PlatformWithCount,
)
from app.services.platform_service import platform_service

router = APIRouter(prefix="/platforms", tags=["Platforms"])
admin_router = APIRouter(
    prefix="/admin/platforms",
    tags=["Admin"],
    dependencies=[Depends(get_current_admin)],
)


@router.get("", response_model=List[PlatformSummary])
async def list_platforms(db: AsyncSession = Depends(get_db)) -> List[Dict[str, Any]]:
    """Active platforms with their active course counts."""
    return await platform_service.get_all_platforms(db)


@router.get("/{slug}", response_model=PlatformPublic)
async def get_platform(slug: str, db: AsyncSession = Depends(get_db)):
    platform = await platform_service.get_platform_by_slug(db, slug)
    if not platform:
        raise not_found("Platform")
    return platform


@admin_router.get("", response_model=Page[PlatformWithCount])
async def search_platforms(
    params: Annotated[PlatformSearchParams, Query()],
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    return await platform_service.search_platforms(
        db,
        query=params.query,
        is_active=params.is_active,
        page=params.page,
        limit=params.limit,
    )


@admin_router.post("", response_model=PlatformResponse, status_code=status.HTTP_201_CREATED)
async def create_platform(
    body: PlatformCreate,
    db: AsyncSession = Depends(get_db),
):
    try:
        return await platform_service.create_platform(db, body.model_dump())
    except ValueError as e:
        raise conflict(e)


@admin_router.get("/{platform_id}", response_model=PlatformWithCount)
async def get_platform_by_id(
    platform_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    platform = await platform_service.get_platform_by_id(db, platform_id)
    if not platform:
        raise not_found("Platform")
    return platform


@admin_router.put("/{platform_id}", response_model=PlatformResponse)
async def update_platform(
    platform_id: uuid.UUID,
    body: PlatformUpdate,
    db: AsyncSession = Depends(get_db),
):
    try:
        platform = await platform_service.update_platform(db, platform_id, body.changes())
    except ValueError as e:
        raise conflict(e)
    if not platform:
        raise not_found("Platform")
    return platform


@admin_router.delete("/{platform_id}", response_model=SuccessResponse)
async def delete_platform(
    platform_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    """
    Delete a platform.

    Raises:
        HTTPException(404): If the platform does not exist.
        HTTPException(409): If courses still belong to it.
    """
    try:
        deleted = await platform_service.delete_platform(db, platform_id)
    except ValueError as e:
        raise conflict(e)
    if not deleted:
        raise not_found("Platform")
    return {"success": True}
