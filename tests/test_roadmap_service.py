"""Tests for roadmaps and their steps."""

import uuid

import pytest

from app.services.base import ConflictError, InvalidReferenceError
from app.services.roadmap_service import roadmap_service
from tests.factories import (
    create_category,
    create_coupon,
    create_course,
    create_roadmap,
    create_step,
)


class TestRoadmapSearch:
    @pytest.mark.asyncio
    async def test_filters_and_ordering(self, db, catalog):
        category = catalog["category"]
        other = await create_category(db, "data")
        await create_roadmap(db, "frontend", sort_order=2, category_id=category.id)
        await create_roadmap(
            db, "backend", sort_order=1, has_certificate=True, category_id=category.id
        )
        await create_roadmap(db, "ml", sort_order=0, is_active=False, category_id=other.id)

        everything = await roadmap_service.search_roadmaps(db)
        active = await roadmap_service.search_roadmaps(db, is_active=True)
        certified = await roadmap_service.search_roadmaps(db, has_certificate=True)
        in_category = await roadmap_service.search_roadmaps(db, category=other.slug)

        assert [r["slug"] for r in everything["data"]] == ["ml", "backend", "frontend"]
        assert [r["slug"] for r in active["data"]] == ["backend", "frontend"]
        assert [r["slug"] for r in certified["data"]] == ["backend"]
        assert [r["slug"] for r in in_category["data"]] == ["ml"]
        assert everything["data"][1]["category"]["slug"] == category.slug

    @pytest.mark.asyncio
    async def test_course_count_is_step_count(self, db, catalog):
        roadmap = await create_roadmap(db, course_count=99)
        await create_step(db, roadmap, catalog["course"])

        result = await roadmap_service.search_roadmaps(db, query="python")

        assert result["data"][0]["course_count"] == 1

    @pytest.mark.asyncio
    async def test_featured(self, db):
        await create_roadmap(db, "one", is_featured=True)
        await create_roadmap(db, "two", is_featured=True, is_active=False)
        await create_roadmap(db, "three")

        featured = await roadmap_service.get_featured_roadmaps(db)

        assert [r["slug"] for r in featured] == ["one"]


class TestRoadmapPage:
    @pytest.mark.asyncio
    async def test_steps_and_totals(self, db, catalog):
        first = catalog["course"]
        second = await create_course(
            db, catalog["platform"], catalog["category"], "django-course", original_price=60
        )
        await create_coupon(db, first, code="BEST", discount_value=80, final_price=20)
        await create_coupon(db, first, code="WORSE", discount_value=10, final_price=90)
        roadmap = await create_roadmap(db, course_count=2)
        await create_step(db, roadmap, second, order_index=1)
        await create_step(db, roadmap, first, order_index=0)

        page = await roadmap_service.get_roadmap_by_slug(db, roadmap.slug)

        assert [s["course"]["slug"] for s in page["steps"]] == [first.slug, "django-course"]
        assert page["steps"][0]["course"]["active_coupon"]["code"] == "BEST"
        assert page["steps"][1]["course"]["active_coupon"] is None
        assert page["steps"][0]["course"]["platform"]["slug"] == catalog["platform"].slug
        assert page["total_original_price"] == 160
        assert page["total_discounted_price"] == 80
        assert page["total_savings"] == 80

    @pytest.mark.asyncio
    async def test_inactive_roadmap_hidden(self, db):
        await create_roadmap(db, "hidden", is_active=False)

        assert await roadmap_service.get_roadmap_by_slug(db, "hidden") is None


class TestRoadmapCrud:
    @pytest.mark.asyncio
    async def test_create_update_delete(self, db, catalog):
        roadmap = await roadmap_service.create_roadmap(
            db,
            {
                "title": "Full Stack",
                "slug": "full-stack",
                "skill_tags": ["react", "node"],
                "category_id": catalog["category"].id,
            },
        )
        assert roadmap.course_count == 0
        assert roadmap.skill_tags == ["react", "node"]

        updated = await roadmap_service.update_roadmap(db, roadmap.id, {"is_featured": True})
        assert updated.is_featured is True

        assert await roadmap_service.delete_roadmap(db, roadmap.id) is True
        assert await roadmap_service.get_roadmap_by_id(db, roadmap.id) is None

    @pytest.mark.asyncio
    async def test_create_rejects_unknown_category(self, db):
        with pytest.raises(InvalidReferenceError):
            await roadmap_service.create_roadmap(
                db, {"title": "Path", "slug": "path", "category_id": uuid.uuid4()}
            )

    @pytest.mark.asyncio
    async def test_duplicate_slug(self, db):
        await create_roadmap(db, "path")

        with pytest.raises(ConflictError):
            await roadmap_service.create_roadmap(db, {"title": "Path", "slug": "path"})

    @pytest.mark.asyncio
    async def test_slug_derived_from_title(self, db):
        roadmap = await roadmap_service.create_roadmap(db, {"title": "Featured", "slug": None})
        assert roadmap.slug == "featured-1"

    @pytest.mark.asyncio
    async def test_missing_roadmap(self, db):
        assert await roadmap_service.update_roadmap(db, uuid.uuid4(), {"title": "X"}) is None
        assert await roadmap_service.delete_roadmap(db, uuid.uuid4()) is False


class TestRoadmapSteps:
    @pytest.mark.asyncio
    async def test_add_and_remove_keep_course_count(self, db, catalog):
        roadmap = await create_roadmap(db)

        step = await roadmap_service.add_roadmap_step(
            db,
            roadmap.id,
            {"title": "Learn Python", "order_index": 0, "course_id": catalog["course"].id},
        )
        detail = await roadmap_service.get_roadmap_by_id(db, roadmap.id)
        assert detail["course_count"] == 1
        assert detail["steps"][0]["course"]["platform_name"] == catalog["platform"].name

        assert await roadmap_service.remove_roadmap_step(db, roadmap.id, step.id) is True
        detail = await roadmap_service.get_roadmap_by_id(db, roadmap.id)
        assert detail["course_count"] == 0
        assert detail["steps"] == []

    @pytest.mark.asyncio
    async def test_add_step_validation(self, db, catalog):
        roadmap = await create_roadmap(db)
        step = {"title": "Step", "order_index": 0, "course_id": uuid.uuid4()}

        with pytest.raises(InvalidReferenceError):
            await roadmap_service.add_roadmap_step(db, roadmap.id, step)

        step["course_id"] = catalog["course"].id
        assert await roadmap_service.add_roadmap_step(db, uuid.uuid4(), step) is None

    @pytest.mark.asyncio
    async def test_remove_unknown_step(self, db, catalog):
        roadmap = await create_roadmap(db, "one")
        other = await create_roadmap(db, "two")
        step = await create_step(db, other, catalog["course"])

        assert await roadmap_service.remove_roadmap_step(db, roadmap.id, uuid.uuid4()) is False
        assert await roadmap_service.remove_roadmap_step(db, roadmap.id, step.id) is False

    @pytest.mark.asyncio
    async def test_reorder(self, db, catalog):
        second_course = await create_course(
            db, catalog["platform"], catalog["category"], "second-course"
        )
        roadmap = await create_roadmap(db)
        first = await create_step(db, roadmap, catalog["course"], order_index=0)
        second = await create_step(db, roadmap, second_course, order_index=1)

        reordered = await roadmap_service.reorder_roadmap_steps(
            db,
            roadmap.id,
            [{"id": first.id, "order_index": 1}, {"id": second.id, "order_index": 0}],
        )

        assert reordered is True
        detail = await roadmap_service.get_roadmap_by_id(db, roadmap.id)
        assert [s["id"] for s in detail["steps"]] == [second.id, first.id]
        assert await roadmap_service.reorder_roadmap_steps(db, uuid.uuid4(), []) is False
