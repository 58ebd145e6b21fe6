"""
Helpers shared by the domain services.

Services return None when a row does not exist and raise one of the
errors below when a write breaks a business rule. Routers translate
both into HTTP responses.
"""

import logging
from typing import Any, Dict, Iterable

from sqlalchemy import inspect, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.utils import generate_slug, generate_unique_slug

logger = logging.getLogger(__name__)


class ConflictError(ValueError):
    """Write rejected because it clashes with existing data."""


class InvalidReferenceError(ValueError):
    """Write references a row that does not exist."""


def row_to_dict(obj: Any) -> Dict[str, Any]:
    """Column values of an ORM instance as a plain dict."""
    return {attr.key: getattr(obj, attr.key) for attr in inspect(obj).mapper.column_attrs}


def apply_changes(obj: Any, changes: Dict[str, Any]) -> None:
    for key, value in changes.items():
        setattr(obj, key, value)


async def commit_or_conflict(db: AsyncSession, message: str) -> None:
    """
    Commit the session, turning integrity violations into ConflictError.

    Args:
        db: Database session.
        message: Error message used when the commit is rejected.

    Raises:
        ConflictError: If a unique or foreign key constraint fails.
    """
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.warning(f"Integrity error: {message} ({e.orig})")
        raise ConflictError(message) from e


async def ensure_exists(db: AsyncSession, model: Any, ids: Iterable[Any], label: str) -> None:
    """Raise InvalidReferenceError unless every id has a row in model's table."""
    for row_id in ids:
        if row_id is not None and await db.get(model, row_id) is None:
            raise InvalidReferenceError(f"{label} not found")


async def derive_slug(
    db: AsyncSession, model: Any, source: str, reserved: Iterable[str] = ()
) -> str:
    """
    Build a slug from `source` that no row of `model` uses yet.

    Taken slugs get a numeric suffix (-1, -2, ...). Slugs in `reserved`
    count as taken.
    """
    max_length = model.__table__.c.slug.type.length
    base_slug = generate_slug(source)[: max_length - 10].strip("-")
    taken = await db.scalars(
        select(model.slug).where(model.slug.startswith(base_slug, autoescape=True))
    )
    return generate_unique_slug(base_slug, [*taken.all(), *reserved])
