"""
Category service.

CRUD, search and ordering for course categories.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.category import Category
from app.models.course import Course
from app.services.base import (
    ConflictError,
    apply_changes,
    commit_or_conflict,
    derive_slug,
    row_to_dict,
)
from app.utils import build_pagination

logger = logging.getLogger(__name__)


def _course_count():
    return (
        select(func.count(Course.id))
        .where(Course.category_id == Category.id)
        .correlate(Category)
        .scalar_subquery()
        .label("course_count")
    )


def _with_count(category: Category, course_count: int) -> Dict[str, Any]:
    data = row_to_dict(category)
    data["course_count"] = course_count
    return data


class CategoryService:
    """Business logic for category management."""

    ORDERING = (Category.sort_order.asc(), Category.name.asc())

    async def search_categories(
        self,
        db: AsyncSession,
        query: Optional[str] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Dict[str, Any]:
        """
        Search categories with pagination.

        Args:
            db: Database session.
            query: Case-insensitive text matched against name and description.
            page: 1-based page number.
            limit: Page size.

        Returns:
            Dict with 'data' (categories with course counts) and 'pagination'.
        """
        filters = []
        if query:
            filters.append(
                or_(
                    Category.name.icontains(query, autoescape=True),
                    Category.description.icontains(query, autoescape=True),
                )
            )

        total = await db.scalar(
            select(func.count()).select_from(Category).where(*filters)
        )
        result = await db.execute(
            select(Category, _course_count())
            .where(*filters)
            .order_by(*self.ORDERING)
            .offset((page - 1) * limit)
            .limit(limit)
        )

        return {
            "data": [_with_count(category, count) for category, count in result.all()],
            "pagination": build_pagination(page, limit, total or 0),
        }

    async def get_all_categories(self, db: AsyncSession) -> List[Dict[str, Any]]:
        """All categories for dropdowns, with course counts."""
        result = await db.execute(
            select(Category, _course_count()).order_by(*self.ORDERING)
        )
        return [_with_count(category, count) for category, count in result.all()]

    async def get_category_by_id(
        self, db: AsyncSession, category_id: uuid.UUID
    ) -> Optional[Dict[str, Any]]:
        result = await db.execute(
            select(Category, _course_count()).where(Category.id == category_id)
        )
        row = result.first()
        return _with_count(*row) if row else None

    async def get_category_by_slug(
        self, db: AsyncSession, slug: str
    ) -> Optional[Dict[str, Any]]:
        result = await db.execute(
            select(Category, _course_count()).where(Category.slug == slug)
        )
        row = result.first()
        return _with_count(*row) if row else None

    async def create_category(self, db: AsyncSession, data: Dict[str, Any]) -> Category:
        """
        Create a category.

        Raises:
            ConflictError: If the slug is already taken.
        """
        if not data.get("slug"):
            data["slug"] = await derive_slug(db, Category, data["name"])

        category = Category(**data)
        db.add(category)
        await commit_or_conflict(db, f"Category slug already exists: {data.get('slug')}")
        await db.refresh(category)
        logger.info(f"Created category: {category.slug}")
        return category

    async def update_category(
        self, db: AsyncSession, category_id: uuid.UUID, changes: Dict[str, Any]
    ) -> Optional[Category]:
        """
        Apply a partial update.

        Returns:
            The updated category, or None if it does not exist.

        Raises:
            ConflictError: If the new slug is already taken.
        """
        category = await db.get(Category, category_id)
        if category is None:
            return None

        apply_changes(category, changes)
        await commit_or_conflict(db, f"Category slug already exists: {changes.get('slug')}")
        await db.refresh(category)
        return category

    async def delete_category(self, db: AsyncSession, category_id: uuid.UUID) -> bool:
        """
        Delete a category.

        Returns:
            False if the category does not exist.

        Raises:
            ConflictError: If courses still belong to the category.
        """
        category = await db.get(Category, category_id)
        if category is None:
            return False

        course_count = await db.scalar(
            select(func.count(Course.id)).where(Course.category_id == category_id)
        )
        if course_count:
            raise ConflictError(
                f"Category has {course_count} course(s); move or delete them first"
            )

        await db.delete(category)
        await db.commit()
        logger.info(f"Deleted category: {category.slug}")
        return True

    async def reorder_categories(
        self, db: AsyncSession, category_order: List[Dict[str, Any]]
    ) -> None:
        """
        Set sort_order for several categories in one transaction.

        Args:
            db: Database session.
            category_order: Items with 'id' and 'sort_order'.
        """
        for item in category_order:
            await db.execute(
                update(Category)
                .where(Category.id == item["id"])
                .values(sort_order=item["sort_order"])
            )
        await db.commit()
        logger.info(f"Reordered {len(category_order)} categories")


# Global service instance
category_service = CategoryService()
