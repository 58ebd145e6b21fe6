"""Tests for the platform service."""

import uuid

import pytest

from app.services.base import ConflictError
from app.services.platform_service import platform_service
from tests.factories import create_category, create_course, create_platform


class TestPlatformQueries:
    @pytest.mark.asyncio
    async def test_search_filters_active(self, db):
        await create_platform(db, "udemy")
        await create_platform(db, "coursera", is_active=False)

        result = await platform_service.search_platforms(db, is_active=False)

        assert [p["slug"] for p in result["data"]] == ["coursera"]
        assert result["pagination"]["total"] == 1

    @pytest.mark.asyncio
    async def test_search_by_name(self, db):
        await create_platform(db, "udemy")
        await create_platform(db, "coursera")

        result = await platform_service.search_platforms(db, query="cours")

        assert [p["slug"] for p in result["data"]] == ["coursera"]

    @pytest.mark.asyncio
    async def test_all_platforms_counts_active_courses_only(self, db):
        udemy = await create_platform(db, "udemy")
        await create_platform(db, "edx", is_active=False)
        category = await create_category(db)
        await create_course(db, udemy, category, "active-course")
        await create_course(db, udemy, category, "hidden-course", is_active=False)

        platforms = await platform_service.get_all_platforms(db)

        assert [p["slug"] for p in platforms] == ["udemy"]
        assert platforms[0]["course_count"] == 1

    @pytest.mark.asyncio
    async def test_get_by_id_counts_all_courses(self, db):
        udemy = await create_platform(db, "udemy")
        category = await create_category(db)
        await create_course(db, udemy, category, "active-course")
        await create_course(db, udemy, category, "hidden-course", is_active=False)

        platform = await platform_service.get_platform_by_id(db, udemy.id)

        assert platform["course_count"] == 2

    @pytest.mark.asyncio
    async def test_get_by_slug_ignores_inactive(self, db):
        await create_platform(db, "edx", is_active=False)

        assert await platform_service.get_platform_by_slug(db, "edx") is None


class TestPlatformCrud:
    @pytest.mark.asyncio
    async def test_create_update_delete(self, db):
        platform = await platform_service.create_platform(
            db, {"name": "Udemy", "slug": "udemy", "base_url": "https://www.udemy.com"}
        )
        assert platform.is_active is True

        updated = await platform_service.update_platform(db, platform.id, {"is_active": False})
        assert updated.is_active is False

        assert await platform_service.delete_platform(db, platform.id) is True
        assert await platform_service.get_platform_by_id(db, platform.id) is None

    @pytest.mark.asyncio
    async def test_duplicate_slug_conflicts(self, db):
        await create_platform(db, "udemy")
        other = await create_platform(db, "coursera")

        with pytest.raises(ConflictError):
            await platform_service.update_platform(db, other.id, {"slug": "udemy"})

    @pytest.mark.asyncio
    async def test_slug_derived_from_name(self, db):
        await create_platform(db, "linkedin-learning")

        platform = await platform_service.create_platform(
            db,
            {"name": "LinkedIn Learning", "slug": None, "base_url": "https://linkedin.com"},
        )

        assert platform.slug == "linkedin-learning-1"

    @pytest.mark.asyncio
    async def test_missing_platform(self, db):
        assert await platform_service.update_platform(db, uuid.uuid4(), {"name": "X"}) is None
        assert await platform_service.delete_platform(db, uuid.uuid4()) is False

    @pytest.mark.asyncio
    async def test_delete_with_courses_conflicts(self, db, catalog):
        with pytest.raises(ConflictError):
            await platform_service.delete_platform(db, catalog["platform"].id)
