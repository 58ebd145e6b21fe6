"""Tests for the coupon service."""

import uuid
from datetime import timedelta

import pytest

from app.services.base import InvalidReferenceError
from app.services.coupon_service import coupon_service
from tests.factories import create_coupon, create_course


class TestCouponSearch:
    @pytest.mark.asyncio
    async def test_search_by_code_or_course_title(self, db, catalog):
        other = await create_course(
            db, catalog["platform"], catalog["category"], "java-masterclass"
        )
        await create_coupon(db, catalog["course"], code="PYTHON10")
        await create_coupon(db, other, code="JAVA20")

        by_code = await coupon_service.search_coupons(db, query="python10")
        by_title = await coupon_service.search_coupons(db, query="masterclass")

        assert [c["code"] for c in by_code["data"]] == ["PYTHON10"]
        assert [c["code"] for c in by_title["data"]] == ["JAVA20"]
        assert by_title["data"][0]["course"]["slug"] == "java-masterclass"

    @pytest.mark.asyncio
    async def test_search_combines_query_and_filters(self, db, catalog):
        await create_coupon(db, catalog["course"], code="SPRING", is_active=False)
        await create_coupon(db, catalog["course"], code="SPRING2")

        result = await coupon_service.search_coupons(db, query="spring", is_active=True)

        assert [c["code"] for c in result["data"]] == ["SPRING2"]

    @pytest.mark.asyncio
    async def test_search_expired_filter(self, db, catalog):
        course = catalog["course"]
        await create_coupon(db, course, code="OLD", expires_in=timedelta(days=-1))
        await create_coupon(db, course, code="SOON", expires_in=timedelta(days=1))
        await create_coupon(db, course, code="FOREVER", expires_in=None)

        expired = await coupon_service.search_coupons(db, is_expired=True)
        current = await coupon_service.search_coupons(db, is_expired=False)

        assert [c["code"] for c in expired["data"]] == ["OLD"]
        assert sorted(c["code"] for c in current["data"]) == ["FOREVER", "SOON"]

    @pytest.mark.asyncio
    async def test_search_by_course(self, db, catalog):
        other = await create_course(db, catalog["platform"], catalog["category"], "go-basics")
        await create_coupon(db, catalog["course"], code="A")
        await create_coupon(db, other, code="B")

        result = await coupon_service.search_coupons(db, course_id=other.id)

        assert [c["code"] for c in result["data"]] == ["B"]


class TestActiveCoupons:
    @pytest.mark.asyncio
    async def test_active_coupons_sorted_by_discount(self, db, catalog):
        course = catalog["course"]
        await create_coupon(db, course, code="SMALL", discount_value=10)
        await create_coupon(db, course, code="BIG", discount_value=80)
        await create_coupon(db, course, code="OFF", discount_value=90, is_active=False)
        await create_coupon(
            db, course, code="GONE", discount_value=95, expires_in=timedelta(hours=-1)
        )

        coupons = await coupon_service.get_active_coupons_for_course(db, course.id)

        assert [c.code for c in coupons] == ["BIG", "SMALL"]

    @pytest.mark.asyncio
    async def test_best_coupons(self, db, catalog):
        course = catalog["course"]
        other = await create_course(db, catalog["platform"], catalog["category"], "no-coupon")
        await create_coupon(db, course, code="SMALL", discount_value=10)
        await create_coupon(db, course, code="BIG", discount_value=80)

        best = await coupon_service.get_best_coupons(db, [course.id, other.id])

        assert best[course.id].code == "BIG"
        assert other.id not in best
        assert await coupon_service.get_best_coupons(db, []) == {}


class TestCouponCrud:
    @pytest.mark.asyncio
    async def test_create_requires_course(self, db):
        with pytest.raises(InvalidReferenceError):
            await coupon_service.create_coupon(
                db,
                {"discount_value": 10, "final_price": 9.99, "course_id": uuid.uuid4()},
            )

    @pytest.mark.asyncio
    async def test_create_get_update_delete(self, db, catalog):
        coupon = await coupon_service.create_coupon(
            db,
            {
                "code": "LAUNCH",
                "discount_value": 90,
                "final_price": 9.99,
                "course_id": catalog["course"].id,
            },
        )
        assert coupon.discount_type == "PERCENTAGE"
        assert coupon.is_active is True

        fetched = await coupon_service.get_coupon_by_id(db, coupon.id)
        assert fetched["course"]["id"] == catalog["course"].id

        updated = await coupon_service.update_coupon(db, coupon.id, {"final_price": 12.99})
        assert updated.final_price == 12.99

        assert await coupon_service.delete_coupon(db, coupon.id) is True
        assert await coupon_service.get_coupon_by_id(db, coupon.id) is None
        assert await coupon_service.delete_coupon(db, coupon.id) is False

    @pytest.mark.asyncio
    async def test_deactivate_expired(self, db, catalog):
        course = catalog["course"]
        expired = await create_coupon(db, course, code="OLD", expires_in=timedelta(days=-2))
        current = await create_coupon(db, course, code="NEW")
        await create_coupon(db, course, code="OFF", expires_in=timedelta(days=-2), is_active=False)

        count = await coupon_service.deactivate_expired_coupons(db)

        assert count == 1
        await db.refresh(expired)
        await db.refresh(current)
        assert expired.is_active is False
        assert current.is_active is True
