"""Tests for course search, details and content management."""

import uuid
from datetime import timedelta

import pytest
import pytest_asyncio
from sqlalchemy import event, func, select

from app.models import ClickEvent, Coupon
from app.services.base import ConflictError, InvalidReferenceError
from app.services.course_service import course_service
from app.services.roadmap_service import roadmap_service
from tests.factories import (
    create_category,
    create_click,
    create_coupon,
    create_course,
    create_platform,
    create_roadmap,
    create_step,
)


@pytest_asyncio.fixture
async def shelf(db):
    """Three courses on two platforms and two categories."""
    udemy = await create_platform(db, "udemy")
    coursera = await create_platform(db, "coursera")
    web = await create_category(db, "web")
    data = await create_category(db, "data")

    react = await create_course(
        db, udemy, web, "react-guide",
        title="React - The Complete Guide", instructor_name="Max",
        rating=4.7, student_count=900, original_price=120, level="BEGINNER",
        is_featured=True,
    )
    pandas = await create_course(
        db, coursera, data, "pandas-basics",
        title="Pandas Basics", description="Dataframes for analysts",
        rating=4.2, student_count=5000, original_price=50, level="INTERMEDIATE",
    )
    sql = await create_course(
        db, udemy, data, "sql-bootcamp",
        title="SQL Bootcamp", rating=None, student_count=10, original_price=80,
    )
    await create_course(db, udemy, web, "retired-course", is_active=False)

    await create_coupon(db, react, code="REACT90", discount_value=90, final_price=12)
    await create_coupon(db, sql, code="SQL30", discount_value=30, final_price=56)
    return {"react": react, "pandas": pandas, "sql": sql}


def slugs(result):
    return [course["slug"] for course in result["data"]]


class TestSearchCourses:
    @pytest.mark.asyncio
    async def test_only_active_courses(self, db, shelf):
        result = await course_service.search_courses(db)

        assert sorted(slugs(result)) == ["pandas-basics", "react-guide", "sql-bootcamp"]
        assert result["pagination"]["total"] == 3

    @pytest.mark.asyncio
    async def test_text_query_matches_title_description_instructor(self, db, shelf):
        assert slugs(await course_service.search_courses(db, query="complete")) == ["react-guide"]
        assert slugs(await course_service.search_courses(db, query="dataframes")) == [
            "pandas-basics"
        ]
        assert slugs(await course_service.search_courses(db, query="max")) == ["react-guide"]

    @pytest.mark.asyncio
    async def test_platform_category_level_filters(self, db, shelf):
        udemy = await course_service.search_courses(db, platform="udemy", sort_by="price")
        data = await course_service.search_courses(db, category="data", sort_by="price")
        beginner = await course_service.search_courses(db, level="BEGINNER")

        assert slugs(udemy) == ["react-guide", "sql-bootcamp"]
        assert slugs(data) == ["sql-bootcamp", "pandas-basics"]
        assert slugs(beginner) == ["react-guide"]

    @pytest.mark.asyncio
    async def test_rating_and_featured_filters(self, db, shelf):
        rated = await course_service.search_courses(db, min_rating=4.5)
        featured = await course_service.search_courses(db, is_featured=True)

        assert slugs(rated) == ["react-guide"]
        assert slugs(featured) == ["react-guide"]

    @pytest.mark.asyncio
    async def test_price_filters_use_active_coupons(self, db, shelf):
        discounted = await course_service.search_courses(db, has_discount=True, sort_by="price")
        cheap = await course_service.search_courses(db, max_price=20)

        assert slugs(discounted) == ["react-guide", "sql-bootcamp"]
        assert slugs(cheap) == ["react-guide"]

    @pytest.mark.asyncio
    async def test_expired_coupon_does_not_count(self, db, shelf):
        await create_coupon(
            db, shelf["pandas"], code="OLD", final_price=1, expires_in=timedelta(days=-1)
        )

        assert "pandas-basics" not in slugs(await course_service.search_courses(db, max_price=5))

    @pytest.mark.asyncio
    async def test_sorting(self, db, shelf):
        by_rating = await course_service.search_courses(db, sort_by="rating")
        by_price = await course_service.search_courses(db, sort_by="price", sort_order="asc")
        by_popularity = await course_service.search_courses(db, sort_by="popular")
        by_discount = await course_service.search_courses(db, sort_by="discount")

        # Unrated courses sort last
        assert slugs(by_rating) == ["react-guide", "pandas-basics", "sql-bootcamp"]
        assert slugs(by_price) == ["pandas-basics", "sql-bootcamp", "react-guide"]
        assert slugs(by_popularity) == ["pandas-basics", "react-guide", "sql-bootcamp"]
        assert slugs(by_discount) == ["react-guide", "sql-bootcamp", "pandas-basics"]

    @pytest.mark.asyncio
    async def test_cards_embed_relations_and_best_coupon(self, db, shelf):
        result = await course_service.search_courses(db, query="react")
        card = result["data"][0]

        assert card["platform"]["slug"] == "udemy"
        assert card["category"]["slug"] == "web"
        assert card["active_coupon"]["code"] == "REACT90"

        pandas = (await course_service.search_courses(db, query="pandas"))["data"][0]
        assert pandas["active_coupon"] is None

    @pytest.mark.asyncio
    async def test_pagination(self, db, shelf):
        result = await course_service.search_courses(
            db, sort_by="price", sort_order="asc", page=2, limit=2
        )

        assert slugs(result) == ["react-guide"]
        assert result["pagination"]["total_pages"] == 2
        assert result["pagination"]["has_next"] is False

    @pytest.mark.asyncio
    async def test_featured_and_top_discount(self, db, shelf):
        featured = await course_service.get_featured_courses(db)
        discounts = await course_service.get_top_discount_courses(db)

        assert slugs(featured) == ["react-guide"]
        assert slugs(discounts) == ["react-guide", "sql-bootcamp"]


class TestCourseLookup:
    @pytest.mark.asyncio
    async def test_by_slug(self, db, shelf):
        course = await course_service.get_course_by_slug(db, "react-guide")

        assert course["id"] == shelf["react"].id
        assert await course_service.get_course_by_slug(db, "retired-course") is None
        assert await course_service.get_course_by_slug(db, "missing") is None

    @pytest.mark.asyncio
    async def test_redirect_data(self, db, shelf):
        data = await course_service.get_course_by_id(db, shelf["react"].id)

        assert data["direct_url"] == shelf["react"].direct_url
        assert data["affiliate_url"] is None
        assert data["coupon_code"] == "REACT90"
        assert (await course_service.get_course_by_id(db, shelf["pandas"].id))[
            "coupon_code"
        ] is None
        assert await course_service.get_course_by_id(db, uuid.uuid4()) is None


class TestCourseContent:
    @pytest.mark.asyncio
    async def test_learning_outcomes_replace(self, db, catalog):
        course = catalog["course"]
        await course_service.update_course_learning_outcomes(
            db, course.id, [{"text": "Old outcome", "sort_order": 0}]
        )

        outcomes = await course_service.update_course_learning_outcomes(
            db,
            course.id,
            [
                {"text": "Second", "sort_order": 2},
                {"text": "First", "sort_order": 1},
            ],
        )

        assert [o.text for o in outcomes] == ["First", "Second"]

    @pytest.mark.asyncio
    async def test_syllabus_replace(self, db, catalog):
        course = catalog["course"]
        await course_service.update_course_syllabus(
            db, course.id, [{"title": "Old", "items": [{"title": "Old lecture"}]}]
        )

        sections = await course_service.update_course_syllabus(
            db,
            course.id,
            [
                {
                    "title": "Advanced",
                    "sort_order": 2,
                    "items": [{"title": "Decorators", "sort_order": 0}],
                },
                {
                    "title": "Basics",
                    "duration": "1h",
                    "sort_order": 1,
                    "items": [
                        {"title": "Loops", "sort_order": 1},
                        {"title": "Variables", "sort_order": 0},
                    ],
                },
            ],
        )

        assert [s.title for s in sections] == ["Basics", "Advanced"]
        assert [i.title for i in sections[0].items] == ["Variables", "Loops"]

    @pytest.mark.asyncio
    async def test_full_details(self, db, catalog):
        course = catalog["course"]
        await course_service.update_course_learning_outcomes(
            db, course.id, [{"text": "Write Python", "sort_order": 0}]
        )
        await course_service.update_course_syllabus(
            db, course.id, [{"title": "Intro", "items": [{"title": "Welcome"}]}]
        )

        details = await course_service.get_course_with_full_details(db, course.slug)

        assert [o["text"] for o in details["learning_outcomes"]] == ["Write Python"]
        assert details["syllabus_sections"][0]["items"][0]["title"] == "Welcome"
        assert details["platform"]["slug"] == catalog["platform"].slug

    @pytest.mark.asyncio
    async def test_content_for_missing_course(self, db):
        assert await course_service.update_course_learning_outcomes(db, uuid.uuid4(), []) is None
        assert await course_service.update_course_syllabus(db, uuid.uuid4(), []) is None


class TestCourseCrud:
    @pytest.mark.asyncio
    async def test_create_validates_references(self, db, catalog):
        with pytest.raises(InvalidReferenceError):
            await course_service.create_course(
                db,
                {
                    "title": "Orphan",
                    "slug": "orphan",
                    "original_price": 10,
                    "direct_url": "https://example.com",
                    "platform_id": uuid.uuid4(),
                    "category_id": catalog["category"].id,
                },
            )

    @pytest.mark.asyncio
    async def test_create_duplicate_slug(self, db, catalog):
        with pytest.raises(ConflictError):
            await course_service.create_course(
                db,
                {
                    "title": "Copy",
                    "slug": catalog["course"].slug,
                    "original_price": 10,
                    "direct_url": "https://example.com",
                    "platform_id": catalog["platform"].id,
                    "category_id": catalog["category"].id,
                },
            )

    @pytest.mark.asyncio
    async def test_slug_derived_from_title(self, db, catalog):
        base = {
            "original_price": 10,
            "direct_url": "https://example.com",
            "platform_id": catalog["platform"].id,
            "category_id": catalog["category"].id,
        }

        copy = await course_service.create_course(
            db, {**base, "title": "Python Bootcamp", "slug": None}
        )
        featured = await course_service.create_course(
            db, {**base, "title": "Featured", "slug": None}
        )

        assert copy.slug == "python-bootcamp-1"
        assert featured.slug == "featured-1"

    @pytest.mark.asyncio
    async def test_update(self, db, catalog):
        course = await course_service.update_course(
            db, catalog["course"].id, {"is_featured": True, "rating": 4.9}
        )

        assert course.is_featured is True
        assert course.rating == 4.9
        assert await course_service.update_course(db, uuid.uuid4(), {"rating": 1}) is None

    @pytest.mark.asyncio
    async def test_admin_listing_includes_inactive(self, db, catalog):
        await create_course(
            db, catalog["platform"], catalog["category"], "hidden", is_active=False
        )

        everything = await course_service.list_courses(db)
        hidden = await course_service.list_courses(db, is_active=False)

        assert everything["pagination"]["total"] == 2
        assert [c.slug for c in hidden["data"]] == ["hidden"]

    @pytest.mark.asyncio
    async def test_delete_cascades_and_updates_roadmaps(self, db, catalog):
        course = catalog["course"]
        keeper = await create_course(db, catalog["platform"], catalog["category"], "keeper")
        await create_coupon(db, course)
        await create_click(db, course)
        roadmap = await create_roadmap(db, course_count=2)
        await create_step(db, roadmap, course, 0)
        await create_step(db, roadmap, keeper, 1)

        assert await course_service.delete_course(db, course.id) is True

        detail = await roadmap_service.get_roadmap_by_id(db, roadmap.id)
        assert detail["course_count"] == 1
        assert [s["course"]["slug"] for s in detail["steps"]] == ["keeper"]
        assert await course_service.get_course(db, course.id) is None
        assert await course_service.delete_course(db, course.id) is False

    @pytest.mark.asyncio
    async def test_delete_leaves_click_history_to_the_database(self, db, engine, catalog):
        course = catalog["course"]
        await create_coupon(db, course)
        db.add_all(ClickEvent(course_id=course.id, source="WEB") for _ in range(50))
        await db.commit()

        statements = []

        def capture(conn, cursor, statement, parameters, context, executemany):
            statements.append(statement)

        event.listen(engine.sync_engine, "before_cursor_execute", capture)
        try:
            assert await course_service.delete_course(db, course.id) is True
        finally:
            event.remove(engine.sync_engine, "before_cursor_execute", capture)

        assert not [s for s in statements if "FROM click_events" in s]
        assert not [s for s in statements if "FROM coupons" in s]
        assert await db.scalar(select(func.count(ClickEvent.id))) == 0
        assert await db.scalar(select(func.count(Coupon.id))) == 0
