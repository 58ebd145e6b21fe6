"""
Platform service.

CRUD and search for the learning platforms that host courses.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.course import Course
from app.models.platform import Platform
from app.services.base import (
    ConflictError,
    apply_changes,
    commit_or_conflict,
    derive_slug,
    row_to_dict,
)
from app.utils import build_pagination

logger = logging.getLogger(__name__)


def _course_count(active_only: bool = False):
    stmt = select(func.count(Course.id)).where(Course.platform_id == Platform.id)
    if active_only:
        stmt = stmt.where(Course.is_active.is_(True))
    return stmt.correlate(Platform).scalar_subquery().label("course_count")


def _with_count(platform: Platform, course_count: int) -> Dict[str, Any]:
    data = row_to_dict(platform)
    data["course_count"] = course_count
    return data


class PlatformService:
    """Business logic for platform management."""

    async def search_platforms(
        self,
        db: AsyncSession,
        query: Optional[str] = None,
        is_active: Optional[bool] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Dict[str, Any]:
        """
        Search platforms with pagination.

        Args:
            db: Database session.
            query: Case-insensitive text matched against name and slug.
            is_active: Restrict to active or inactive platforms.
            page: 1-based page number.
            limit: Page size.

        Returns:
            Dict with 'data' (platforms with course counts) and 'pagination'.
        """
        filters = []
        if query:
            filters.append(
                or_(
                    Platform.name.icontains(query, autoescape=True),
                    Platform.slug.icontains(query, autoescape=True),
                )
            )
        if is_active is not None:
            filters.append(Platform.is_active.is_(is_active))

        total = await db.scalar(
            select(func.count()).select_from(Platform).where(*filters)
        )
        result = await db.execute(
            select(Platform, _course_count())
            .where(*filters)
            .order_by(Platform.name.asc())
            .offset((page - 1) * limit)
            .limit(limit)
        )

        return {
            "data": [_with_count(platform, count) for platform, count in result.all()],
            "pagination": build_pagination(page, limit, total or 0),
        }

    async def get_all_platforms(self, db: AsyncSession) -> List[Dict[str, Any]]:
        """Active platforms for dropdowns, counting only active courses."""
        result = await db.execute(
            select(Platform, _course_count(active_only=True))
            .where(Platform.is_active.is_(True))
            .order_by(Platform.name.asc())
        )
        return [
            {
                "id": platform.id,
                "name": platform.name,
                "slug": platform.slug,
                "logo_url": platform.logo_url,
                "course_count": count,
            }
            for platform, count in result.all()
        ]

    async def get_platform_by_id(
        self, db: AsyncSession, platform_id: uuid.UUID
    ) -> Optional[Dict[str, Any]]:
        result = await db.execute(
            select(Platform, _course_count()).where(Platform.id == platform_id)
        )
        row = result.first()
        return _with_count(*row) if row else None

    async def get_platform_by_slug(
        self, db: AsyncSession, slug: str
    ) -> Optional[Platform]:
        """Active platform by slug, or None."""
        result = await db.execute(
            select(Platform).where(
                Platform.slug == slug,
                Platform.is_active.is_(True),
            )
        )
        return result.scalar_one_or_none()

    async def create_platform(self, db: AsyncSession, data: Dict[str, Any]) -> Platform:
        """
        Create a platform.

        Raises:
            ConflictError: If the slug is already taken.
        """
        if not data.get("slug"):
            data["slug"] = await derive_slug(db, Platform, data["name"])

        platform = Platform(**data)
        db.add(platform)
        await commit_or_conflict(db, f"Platform slug already exists: {data.get('slug')}")
        await db.refresh(platform)
        logger.info(f"Created platform: {platform.slug}")
        return platform

    async def update_platform(
        self, db: AsyncSession, platform_id: uuid.UUID, changes: Dict[str, Any]
    ) -> Optional[Platform]:
        platform = await db.get(Platform, platform_id)
        if platform is None:
            return None

        apply_changes(platform, changes)
        await commit_or_conflict(db, f"Platform slug already exists: {changes.get('slug')}")
        await db.refresh(platform)
        return platform

    async def delete_platform(self, db: AsyncSession, platform_id: uuid.UUID) -> bool:
        """
        Delete a platform.

        Returns:
            False if the platform does not exist.

        Raises:
            ConflictError: If courses are still hosted on the platform.
        """
        platform = await db.get(Platform, platform_id)
        if platform is None:
            return False

        course_count = await db.scalar(
            select(func.count(Course.id)).where(Course.platform_id == platform_id)
        )
        if course_count:
            raise ConflictError(
                f"Platform has {course_count} course(s); move or delete them first"
            )

        await db.delete(platform)
        await db.commit()
        logger.info(f"Deleted platform: {platform.slug}")
        return True


# Global service instance
platform_service = PlatformService()
