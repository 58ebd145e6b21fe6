"""
Admin service.

Dashboard counters and click analytics for the admin area.
All day, week and month boundaries are computed in UTC.
"""

import logging
from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.category import Category
from app.models.click import ClickEvent
from app.models.coupon import Coupon
from app.models.course import Course
from app.models.platform import Platform
from app.models.roadmap import Roadmap
from app.utils import utcnow

logger = logging.getLogger(__name__)

EXPIRING_SOON_WINDOW = timedelta(days=3)
TOP_N = 10


def period_starts(now: datetime) -> Dict[str, datetime]:
    """Start of the current day, week (Sunday) and month for `now`."""
    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    days_since_sunday = (start_of_day.weekday() + 1) % 7
    return {
        "day": start_of_day,
        "week": start_of_day - timedelta(days=days_since_sunday),
        "month": start_of_day.replace(day=1),
    }


class AdminService:
    """Dashboard statistics and analytics data."""

    async def _count(self, db: AsyncSession, column, *filters) -> int:
        return await db.scalar(select(func.count(column)).where(*filters)) or 0

    async def get_dashboard_stats(self, db: AsyncSession) -> Dict[str, Any]:
        """
        Entity counters for the admin dashboard.

        Returns:
            Dict matching DashboardStats: courses, platforms, categories,
            roadmaps, coupons and clicks.
        """
        now = utcnow()
        starts = period_starts(now)

        return {
            "courses": {
                "total": await self._count(db, Course.id),
                "active": await self._count(db, Course.id, Course.is_active.is_(True)),
                "featured": await self._count(db, Course.id, Course.is_featured.is_(True)),
            },
            "platforms": await self._count(db, Platform.id, Platform.is_active.is_(True)),
            "categories": await self._count(db, Category.id),
            "roadmaps": {
                "total": await self._count(db, Roadmap.id),
                "active": await self._count(db, Roadmap.id, Roadmap.is_active.is_(True)),
            },
            "coupons": {
                "total": await self._count(db, Coupon.id),
                "active": await self._count(db, Coupon.id, Coupon.active_clause(now)),
                "expiring_soon": await self._count(
                    db,
                    Coupon.id,
                    Coupon.is_active.is_(True),
                    Coupon.expires_at > now,
                    Coupon.expires_at < now + EXPIRING_SOON_WINDOW,
                ),
            },
            "clicks": {
                "total": await self._count(db, ClickEvent.id),
                "today": await self._count(
                    db, ClickEvent.id, ClickEvent.created_at >= starts["day"]
                ),
                "this_week": await self._count(
                    db, ClickEvent.id, ClickEvent.created_at >= starts["week"]
                ),
                "this_month": await self._count(
                    db, ClickEvent.id, ClickEvent.created_at >= starts["month"]
                ),
            },
        }

    async def get_click_analytics(
        self, db: AsyncSession, days: Optional[int] = 30
    ) -> Dict[str, Any]:
        """
        Click analytics over the last `days` days.

        Args:
            db: Database session.
            days: Look-back window; None means all time.

        Returns:
            Dict with daily_clicks (ascending by date), top_courses (top 10),
            source_breakdown and country_breakdown (top 10, unknown skipped).
        """
        stmt = (
            select(ClickEvent.created_at, ClickEvent.source, ClickEvent.country, Course.id, Course.title)
            .join(Course, Course.id == ClickEvent.course_id)
            .order_by(ClickEvent.created_at.desc())
        )
        if days is not None:
            stmt = stmt.where(ClickEvent.created_at >= utcnow() - timedelta(days=days))

        rows = (await db.execute(stmt)).all()

        daily = Counter(row.created_at.date().isoformat() for row in rows)
        sources = Counter(row.source for row in rows)
        countries = Counter(row.country for row in rows if row.country)
        course_clicks = Counter(row.id for row in rows)
        titles = {row.id: row.title for row in rows}

        return {
            "daily_clicks": [
                {"date": date, "count": count} for date, count in sorted(daily.items())
            ],
            "top_courses": [
                {"course_id": course_id, "title": titles[course_id], "clicks": count}
                for course_id, count in course_clicks.most_common(TOP_N)
            ],
            "source_breakdown": [
                {"source": source, "count": count} for source, count in sources.most_common()
            ],
            "country_breakdown": [
                {"country": country, "count": count}
                for country, count in countries.most_common(TOP_N)
            ],
        }


def range_to_days(range_param: Optional[str]) -> Optional[int]:
    """Map the analytics range query value to a day count (None = all time)."""
    return {"1d": 1, "7d": 7, "30d": 30}.get(range_param or "7d")


# Global service instance
admin_service = AdminService()
