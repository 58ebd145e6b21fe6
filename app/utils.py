"""
Shared helpers: slugs, IP hashing, pricing and time.
"""

import hashlib
import math
import re
import unicodedata
from datetime import datetime, timezone
from typing import Iterable, Optional

SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def generate_slug(title: str) -> str:
    """
    Generate a URL-safe slug from a title.

    Lowercases, strips diacritics, drops anything that is not a
    letter, digit, space or hyphen, then joins words with single hyphens.
    """
    slug = unicodedata.normalize("NFD", title.lower().strip())
    slug = "".join(ch for ch in slug if not unicodedata.combining(ch))
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def is_valid_slug(slug: str) -> bool:
    """Check slug format and length (3-200 characters)."""
    return bool(SLUG_PATTERN.match(slug)) and 3 <= len(slug) <= 200


def generate_unique_slug(base_slug: str, existing_slugs: Iterable[str]) -> str:
    """Append -1, -2, ... to base_slug until it is not in existing_slugs."""
    existing = set(existing_slugs)
    slug = base_slug
    counter = 1
    while slug in existing:
        slug = f"{base_slug}-{counter}"
        counter += 1
    return slug


def hash_ip(ip: str, salt: str) -> str:
    """Hash an IP address for privacy-preserving analytics."""
    return hashlib.sha256(f"{ip}{salt}".encode("utf-8")).hexdigest()[:64]


def calculate_discount_percentage(original_price: float, final_price: float) -> int:
    """Rounded discount percentage, 0 when the original price is not positive."""
    if original_price <= 0:
        return 0
    return int(math.floor((original_price - final_price) / original_price * 100 + 0.5))


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit else 0


def build_pagination(page: int, limit: int, total: int) -> dict:
    """Build the pagination block returned by every search endpoint."""
    pages = total_pages(total, limit)
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "total_pages": pages,
        "has_next": page < pages,
        "has_prev": page > 1,
    }


def client_ip(forwarded_for: Optional[str], fallback: Optional[str]) -> str:
    """First X-Forwarded-For entry, else the peer address, else 'unknown'."""
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    return fallback or "unknown"
