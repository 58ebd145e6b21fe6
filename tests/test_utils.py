"""Tests for slug, hashing, pricing and pagination helpers."""

from datetime import datetime, timezone

from app.services.admin_service import period_starts, range_to_days
from app.utils import (
    build_pagination,
    calculate_discount_percentage,
    client_ip,
    generate_slug,
    generate_unique_slug,
    hash_ip,
    is_valid_slug,
)


class TestSlugs:
    def test_generate_slug_basic(self):
        assert generate_slug("Complete Python Bootcamp") == "complete-python-bootcamp"

    def test_generate_slug_strips_diacritics_and_symbols(self):
        assert generate_slug("  Café & Crème: Déjà Vu!  ") == "cafe-creme-deja-vu"

    def test_generate_slug_collapses_hyphens(self):
        assert generate_slug("React -- The  Complete   Guide") == "react-the-complete-guide"

    def test_is_valid_slug(self):
        assert is_valid_slug("python-101")
        assert not is_valid_slug("ab")
        assert not is_valid_slug("Upper-Case")
        assert not is_valid_slug("has space")
        assert not is_valid_slug("a" * 201)

    def test_generate_unique_slug(self):
        assert generate_unique_slug("python", []) == "python"
        assert generate_unique_slug("python", ["python"]) == "python-1"
        assert generate_unique_slug("python", ["python", "python-1", "python-2"]) == "python-3"


class TestHashing:
    def test_hash_ip_is_stable_and_salted(self):
        first = hash_ip("203.0.113.7", "salt-a")
        assert first == hash_ip("203.0.113.7", "salt-a")
        assert first != hash_ip("203.0.113.7", "salt-b")
        assert len(first) == 64

    def test_client_ip_prefers_forwarded_for(self):
        assert client_ip("203.0.113.7, 10.0.0.1", "127.0.0.1") == "203.0.113.7"
        assert client_ip(None, "127.0.0.1") == "127.0.0.1"
        assert client_ip("", None) == "unknown"


class TestPricing:
    def test_discount_percentage(self):
        assert calculate_discount_percentage(100, 25) == 75
        assert calculate_discount_percentage(84.99, 12.99) == 85
        assert calculate_discount_percentage(0, 0) == 0


class TestPagination:
    def test_middle_page(self):
        assert build_pagination(2, 10, 35) == {
            "page": 2,
            "limit": 10,
            "total": 35,
            "total_pages": 4,
            "has_next": True,
            "has_prev": True,
        }

    def test_empty_result(self):
        pagination = build_pagination(1, 20, 0)
        assert pagination["total_pages"] == 0
        assert pagination["has_next"] is False
        assert pagination["has_prev"] is False


class TestPeriods:
    def test_week_starts_on_sunday(self):
        # 2024-05-15 is a Wednesday
        now = datetime(2024, 5, 15, 13, 45, tzinfo=timezone.utc)
        starts = period_starts(now)
        assert starts["day"] == datetime(2024, 5, 15, tzinfo=timezone.utc)
        assert starts["week"] == datetime(2024, 5, 12, tzinfo=timezone.utc)
        assert starts["month"] == datetime(2024, 5, 1, tzinfo=timezone.utc)

    def test_sunday_is_its_own_week_start(self):
        now = datetime(2024, 5, 12, 8, 0, tzinfo=timezone.utc)
        assert period_starts(now)["week"] == datetime(2024, 5, 12, tzinfo=timezone.utc)

    def test_range_to_days(self):
        assert range_to_days("1d") == 1
        assert range_to_days("7d") == 7
        assert range_to_days("30d") == 30
        assert range_to_days(None) == 7
        assert range_to_days("all") is None
