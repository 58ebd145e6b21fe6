"""Admin dashboard, analytics and site settings endpoints."""

from typing import Annotated, Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import get_db
from app.dependencies import get_current_admin
from app.schemas.admin import ClickAnalytics, DashboardStats
from app.schemas.click import (
    ClickEventResponse,
    ClickEventsParams,
    ClickStats,
    ClickStatsParams,
    DailyClicks,
    TopClickedCourse,
)
from app.schemas.common import Page
from app.schemas.settings import SiteSettingsResponse, SiteSettingsUpdate
from app.services.admin_service import admin_service, range_to_days
from app.services.click_service import click_service
from app.services.settings_service import settings_service

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(get_current_admin)],
)


@router.get("/stats", response_model=DashboardStats)
async def get_dashboard_stats(db: AsyncSession = Depends(get_db)) -> Dict[str, Any]:
    """
    Dashboard counters.

    Returns:
        Course, platform, category, roadmap, coupon and click counts.
    """
    return await admin_service.get_dashboard_stats(db)


@router.get("/analytics", response_model=ClickAnalytics)
async def get_click_analytics(
    range_param: Optional[str] = Query(
        "7d", alias="range", description="1d, 7d or 30d; anything else is all time"
    ),
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    return await admin_service.get_click_analytics(db, days=range_to_days(range_param))


@router.get("/analytics/events", response_model=Page[ClickEventResponse])
async def list_click_events(
    params: Annotated[ClickEventsParams, Query()],
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    """Raw click events, newest first."""
    return await click_service.list_click_events(db, page=params.page, limit=params.limit)


@router.get("/analytics/clicks", response_model=ClickStats)
async def get_click_stats(
    params: Annotated[ClickStatsParams, Query()],
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    return await click_service.get_click_stats(db, **params.model_dump())


@router.get("/analytics/trend", response_model=List[DailyClicks])
async def get_daily_click_trend(
    days: int = Query(30, ge=1, le=365),
    db: AsyncSession = Depends(get_db),
) -> List[Dict[str, Any]]:
    return await click_service.get_daily_click_trend(db, days=days)


@router.get("/analytics/top-courses", response_model=List[TopClickedCourse])
async def get_top_clicked_courses(
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
) -> List[Dict[str, Any]]:
    return await click_service.get_top_clicked_courses(db, limit=limit)


@router.get("/settings", response_model=SiteSettingsResponse)
async def get_site_settings(db: AsyncSession = Depends(get_db)):
    return await settings_service.get_site_settings(db)


@router.put("/settings", response_model=SiteSettingsResponse)
async def update_site_settings(
    body: SiteSettingsUpdate,
    db: AsyncSession = Depends(get_db),
):
    return await settings_service.update_site_settings(db, body.changes())
