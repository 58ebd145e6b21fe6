"""Tests for the singleton site settings."""

import asyncio

import pytest

from app.models.site_settings import SETTINGS_ID
from app.services.settings_service import settings_service


class TestSiteSettings:
    @pytest.mark.asyncio
    async def test_defaults_created_on_first_read(self, db):
        settings = await settings_service.get_site_settings(db)

        assert settings.id == SETTINGS_ID
        assert settings.courses_verified == "500+"
        assert (await settings_service.get_site_settings(db)).id == settings.id

    @pytest.mark.asyncio
    async def test_concurrent_first_reads_share_one_row(self, session_factory):
        async def read():
            async with session_factory() as session:
                return await settings_service.get_site_settings(session)

        first, second = await asyncio.gather(read(), read())

        assert first.id == second.id == SETTINGS_ID
        assert first.uptime == second.uptime == "99.9%"

    @pytest.mark.asyncio
    async def test_update_upserts(self, db):
        settings = await settings_service.update_site_settings(
            db, {"courses_verified": "1,000+", "mission_subtitle": "Learn for less"}
        )

        assert settings.courses_verified == "1,000+"
        assert settings.uptime == "99.9%"

        mission = await settings_service.get_mission_content(db)
        assert mission["subtitle"] == "Learn for less"
        assert mission["description"] == ""

    @pytest.mark.asyncio
    async def test_page_views(self, db):
        about = await settings_service.get_about_page_stats(db)
        homepage = await settings_service.get_homepage_stats(db)

        assert set(about) == {
            "courses_verified",
            "student_savings",
            "uptime",
            "acceptance_rate",
            "hosting_cost",
            "price_monitoring",
        }
        assert set(homepage) == {"courses_verified", "student_savings", "uptime"}
