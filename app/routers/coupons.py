"""Coupon admin endpoints."""

import uuid
from typing import Annotated, Any, Dict

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import get_db
from app.dependencies import get_current_admin
from app.routers.errors import conflict, not_found
from app.schemas.common import Page, SuccessResponse
from app.schemas.coupon import (
    CouponCreate,
    CouponResponse,
    CouponSearchParams,
    CouponUpdate,
    CouponWithCourse,
    DeactivatedCount,
)
from app.services.coupon_service import coupon_service

admin_router = APIRouter(
    prefix="/admin/coupons",
    tags=["Admin"],
    dependencies=[Depends(get_current_admin)],
)


@admin_router.get("", response_model=Page[CouponWithCourse])
async def search_coupons(
    params: Annotated[CouponSearchParams, Query()],
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    return await coupon_service.search_coupons(db, **params.model_dump())


@admin_router.post("", response_model=CouponResponse, status_code=status.HTTP_201_CREATED)
async def create_coupon(
    body: CouponCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Create a coupon for a course.

    Raises:
        HTTPException(409): If the course does not exist.
    """
    try:
        return await coupon_service.create_coupon(db, body.model_dump())
    except ValueError as e:
        raise conflict(e)


@admin_router.post("/deactivate-expired", response_model=DeactivatedCount)
async def deactivate_expired_coupons(db: AsyncSession = Depends(get_db)) -> Dict[str, int]:
    """Turn off every active coupon whose expiry has passed."""
    count = await coupon_service.deactivate_expired_coupons(db)
    return {"deactivated": count}


@admin_router.get("/{coupon_id}", response_model=CouponWithCourse)
async def get_coupon(
    coupon_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    coupon = await coupon_service.get_coupon_by_id(db, coupon_id)
    if not coupon:
        raise not_found("Coupon")
    return coupon


@admin_router.put("/{coupon_id}", response_model=CouponResponse)
async def update_coupon(
    coupon_id: uuid.UUID,
    body: CouponUpdate,
    db: AsyncSession = Depends(get_db),
):
    try:
        coupon = await coupon_service.update_coupon(db, coupon_id, body.changes())
    except ValueError as e:
        raise conflict(e)
    if not coupon:
        raise not_found("Coupon")
    return coupon


@admin_router.delete("/{coupon_id}", response_model=SuccessResponse)
async def delete_coupon(
    coupon_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    if not await coupon_service.delete_coupon(db, coupon_id):
        raise not_found("Coupon")
    return {"success": True}
