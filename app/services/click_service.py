"""
Click service.

Records affiliate click events and aggregates them for analytics.
"""

import logging
import uuid
from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from app.models.click import ClickEvent
from app.models.course import Course
from app.utils import build_pagination, utcnow

logger = logging.getLogger(__name__)


class ClickService:
    """Analytics and tracking for affiliate click events."""

    async def record_click(self, db: AsyncSession, data: Dict[str, Any]) -> ClickEvent:
        """
        Record a click event.

        Args:
            db: Database session.
            data: ClickCreate fields.

        Returns:
            The stored ClickEvent.
        """
        click = ClickEvent(**data)
        db.add(click)
        await db.commit()
        await db.refresh(click)
        return click

    async def record_click_in_background(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        data: Dict[str, Any],
    ) -> None:
        """
        Record a click with a fresh session, logging instead of raising.

        Used after a redirect response has already been sent.
        """
        try:
            async with session_factory() as db:
                await self.record_click(db, data)
        except Exception as e:
            logger.error(f"Failed to record click for course {data.get('course_id')}: {e}")

    async def get_course_click_count(self, db: AsyncSession, course_id: uuid.UUID) -> int:
        count = await db.scalar(
            select(func.count(ClickEvent.id)).where(ClickEvent.course_id == course_id)
        )
        return count or 0

    async def get_click_stats(
        self,
        db: AsyncSession,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        course_id: Optional[uuid.UUID] = None,
        source: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Click totals with source and country breakdowns.

        Args:
            db: Database session.
            start_date: Inclusive lower bound on created_at.
            end_date: Inclusive upper bound on created_at.
            course_id: Restrict to one course.
            source: Restrict to WEB or TELEGRAM.

        Returns:
            Dict with 'total', 'by_source' and 'by_country' (top 10).
        """
        filters = []
        if start_date:
            filters.append(ClickEvent.created_at >= start_date)
        if end_date:
            filters.append(ClickEvent.created_at <= end_date)
        if course_id:
            filters.append(ClickEvent.course_id == course_id)
        if source:
            filters.append(ClickEvent.source == source)

        total = await db.scalar(select(func.count(ClickEvent.id)).where(*filters))

        by_source = await db.execute(
            select(ClickEvent.source, func.count(ClickEvent.id))
            .where(*filters)
            .group_by(ClickEvent.source)
        )

        country_count = func.count(ClickEvent.id).label("count")
        by_country = await db.execute(
            select(ClickEvent.country, country_count)
            .where(*filters)
            .group_by(ClickEvent.country)
            .order_by(country_count.desc())
            .limit(10)
        )

        return {
            "total": total or 0,
            "by_source": [
                {"source": row_source, "count": count}
                for row_source, count in by_source.all()
            ],
            "by_country": [
                {"country": country, "count": count}
                for country, count in by_country.all()
            ],
        }

    async def get_top_clicked_courses(
        self, db: AsyncSession, limit: int = 10
    ) -> List[Dict[str, Any]]:
        """Most clicked courses, most clicks first."""
        clicks = func.count(ClickEvent.id).label("clicks")
        result = await db.execute(
            select(ClickEvent.course_id, clicks)
            .group_by(ClickEvent.course_id)
            .order_by(clicks.desc())
            .limit(limit)
        )
        rows = result.all()
        if not rows:
            return []

        courses = await db.execute(
            select(Course).where(Course.id.in_([course_id for course_id, _ in rows]))
        )
        course_map = {course.id: course for course in courses.scalars().all()}

        top = []
        for course_id, count in rows:
            course = course_map.get(course_id)
            top.append(
                {
                    "course": {
                        "id": course.id,
                        "title": course.title,
                        "slug": course.slug,
                        "thumbnail_url": course.thumbnail_url,
                    }
                    if course
                    else None,
                    "clicks": count,
                }
            )
        return top

    async def get_daily_click_trend(
        self, db: AsyncSession, days: int = 30
    ) -> List[Dict[str, Any]]:
        """
        Clicks per UTC calendar day for the last `days` days.

        Every day from (today - days) through today is present,
        with zero for days without clicks.
        """
        now = utcnow()
        start_date = now - timedelta(days=days)

        result = await db.execute(
            select(ClickEvent.created_at).where(ClickEvent.created_at >= start_date)
        )
        by_date = Counter(created_at.date().isoformat() for created_at in result.scalars())

        trend = []
        current = start_date.date()
        today = now.date()
        while current <= today:
            key = current.isoformat()
            trend.append({"date": key, "clicks": by_date.get(key, 0)})
            current += timedelta(days=1)
        return trend

    async def list_click_events(
        self, db: AsyncSession, page: int = 1, limit: int = 20
    ) -> Dict[str, Any]:
        """Click events newest first, each with its course."""
        total = await db.scalar(select(func.count(ClickEvent.id)))
        result = await db.execute(
            select(ClickEvent)
            .options(selectinload(ClickEvent.course))
            .order_by(ClickEvent.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return {
            "data": list(result.scalars().all()),
            "pagination": build_pagination(page, limit, total or 0),
        }


# Global service instance
click_service = ClickService()
