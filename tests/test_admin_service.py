"""Tests for dashboard statistics and click analytics."""

from datetime import timedelta

import pytest

from app.services.admin_service import admin_service
from app.utils import utcnow
from tests.factories import (
    create_click,
    create_coupon,
    create_course,
    create_platform,
    create_roadmap,
)


class TestDashboardStats:
    @pytest.mark.asyncio
    async def test_empty_database(self, db):
        stats = await admin_service.get_dashboard_stats(db)

        assert stats["courses"] == {"total": 0, "active": 0, "featured": 0}
        assert stats["clicks"]["total"] == 0
        assert stats["coupons"]["expiring_soon"] == 0

    @pytest.mark.asyncio
    async def test_counts(self, db, catalog):
        platform, category, course = catalog["platform"], catalog["category"], catalog["course"]
        await create_platform(db, "edx", is_active=False)
        await create_course(db, platform, category, "featured-course", is_featured=True)
        await create_course(db, platform, category, "hidden-course", is_active=False)
        await create_roadmap(db, "path-one")
        await create_roadmap(db, "path-two", is_active=False)

        await create_coupon(db, course, code="SOON", expires_in=timedelta(days=1))
        await create_coupon(db, course, code="LATER", expires_in=timedelta(days=10))
        await create_coupon(db, course, code="FOREVER", expires_in=None)
        await create_coupon(db, course, code="OLD", expires_in=timedelta(days=-1))
        await create_coupon(db, course, code="OFF", expires_in=timedelta(days=1), is_active=False)

        await create_click(db, course)
        await create_click(db, course, created_at=utcnow() - timedelta(days=400))

        stats = await admin_service.get_dashboard_stats(db)

        assert stats["courses"] == {"total": 3, "active": 2, "featured": 1}
        assert stats["platforms"] == 1
        assert stats["categories"] == 1
        assert stats["roadmaps"] == {"total": 2, "active": 1}
        assert stats["coupons"] == {"total": 5, "active": 3, "expiring_soon": 1}
        assert stats["clicks"]["total"] == 2
        assert stats["clicks"]["today"] == 1
        assert stats["clicks"]["this_week"] == 1
        assert stats["clicks"]["this_month"] == 1


class TestClickAnalytics:
    @pytest.mark.asyncio
    async def test_window_and_breakdowns(self, db, catalog):
        course = catalog["course"]
        other = await create_course(db, catalog["platform"], catalog["category"], "other-course")
        await create_click(db, course, country="US")
        await create_click(db, course, country="US", source="TELEGRAM")
        await create_click(db, other)
        await create_click(db, other, country="FR", created_at=utcnow() - timedelta(days=20))

        week = await admin_service.get_click_analytics(db, days=7)
        everything = await admin_service.get_click_analytics(db, days=None)

        assert sum(day["count"] for day in week["daily_clicks"]) == 3
        assert week["top_courses"][0] == {
            "course_id": course.id,
            "title": course.title,
            "clicks": 2,
        }
        assert week["source_breakdown"][0] == {"source": "WEB", "count": 2}
        assert week["country_breakdown"] == [{"country": "US", "count": 2}]

        assert len(everything["daily_clicks"]) == 2
        assert everything["daily_clicks"][0]["date"] < everything["daily_clicks"][1]["date"]
        assert {"country": "FR", "count": 1} in everything["country_breakdown"]
