"""
Roadmap service.

Curated learning paths made of ordered course steps.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.category import Category
from app.models.course import Course
from app.models.roadmap import RESERVED_ROADMAP_SLUGS, Roadmap, RoadmapStep
from app.services.base import (
    apply_changes,
    commit_or_conflict,
    derive_slug,
    ensure_exists,
    row_to_dict,
)
from app.services.coupon_service import coupon_service
from app.utils import build_pagination, calculate_discount_percentage

logger = logging.getLogger(__name__)


def _step_count():
    return (
        select(func.count(RoadmapStep.id))
        .where(RoadmapStep.roadmap_id == Roadmap.id)
        .correlate(Roadmap)
        .scalar_subquery()
        .label("step_count")
    )


def _summary(roadmap: Roadmap, step_count: int) -> Dict[str, Any]:
    category = roadmap.category
    return {
        "id": roadmap.id,
        "title": roadmap.title,
        "slug": roadmap.slug,
        "subtitle": roadmap.subtitle,
        "description": roadmap.description,
        "icon_name": roadmap.icon_name,
        "estimated_hours": roadmap.estimated_hours,
        "course_count": step_count,
        "level": roadmap.level,
        "skill_tags": roadmap.skill_tags or [],
        "has_job_guarantee": roadmap.has_job_guarantee,
        "has_certificate": roadmap.has_certificate,
        "has_free_resources": roadmap.has_free_resources,
        "is_short_path": roadmap.is_short_path,
        "category": (
            {"id": category.id, "name": category.name, "slug": category.slug}
            if category
            else None
        ),
        "is_active": roadmap.is_active,
        "is_featured": roadmap.is_featured,
    }


class RoadmapService:
    """Business logic for roadmaps and their steps."""

    async def search_roadmaps(
        self,
        db: AsyncSession,
        query: Optional[str] = None,
        is_active: Optional[bool] = None,
        is_featured: Optional[bool] = None,
        level: Optional[str] = None,
        category: Optional[str] = None,
        has_job_guarantee: Optional[bool] = None,
        has_certificate: Optional[bool] = None,
        has_free_resources: Optional[bool] = None,
        is_short_path: Optional[bool] = None,
        page: int = 1,
        limit: int = 10,
    ) -> Dict[str, Any]:
        """
        Search roadmaps with filtering and pagination.

        Args:
            db: Database session.
            query: Text matched against title, subtitle and description.
            category: Category slug.
            level: Roadmap level.
            page: 1-based page number.
            limit: Page size.

        Returns:
            Dict with 'data' (roadmap summaries) and 'pagination'.
        """
        filters = []
        if query:
            filters.append(
                or_(
                    Roadmap.title.icontains(query, autoescape=True),
                    Roadmap.subtitle.icontains(query, autoescape=True),
                    Roadmap.description.icontains(query, autoescape=True),
                )
            )
        if is_active is not None:
            filters.append(Roadmap.is_active.is_(is_active))
        if is_featured is not None:
            filters.append(Roadmap.is_featured.is_(is_featured))
        if level:
            filters.append(Roadmap.level == level)
        if category:
            filters.append(Roadmap.category.has(Category.slug == category))

        flags = {
            Roadmap.has_job_guarantee: has_job_guarantee,
            Roadmap.has_certificate: has_certificate,
            Roadmap.has_free_resources: has_free_resources,
            Roadmap.is_short_path: is_short_path,
        }
        for column, value in flags.items():
            if value is not None:
                filters.append(column.is_(value))

        total = await db.scalar(select(func.count(Roadmap.id)).where(*filters))
        result = await db.execute(
            select(Roadmap, _step_count())
            .options(selectinload(Roadmap.category))
            .where(*filters)
            .order_by(Roadmap.sort_order.asc(), Roadmap.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )

        return {
            "data": [_summary(roadmap, count) for roadmap, count in result.all()],
            "pagination": build_pagination(page, limit, total or 0),
        }

    async def get_featured_roadmaps(
        self, db: AsyncSession, limit: int = 4
    ) -> List[Dict[str, Any]]:
        result = await self.search_roadmaps(
            db, is_active=True, is_featured=True, page=1, limit=limit
        )
        return result["data"]

    async def get_roadmap_by_slug(
        self, db: AsyncSession, slug: str
    ) -> Optional[Dict[str, Any]]:
        """
        Public roadmap page.

        Steps are returned in order with their course, platform and best
        active coupon. Totals sum the original prices and the prices after
        the best coupon of each step.
        """
        result = await db.execute(
            select(Roadmap)
            .options(
                selectinload(Roadmap.steps)
                .selectinload(RoadmapStep.course)
                .selectinload(Course.platform)
            )
            .where(Roadmap.slug == slug, Roadmap.is_active.is_(True))
            .execution_options(populate_existing=True)
        )
        roadmap = result.scalar_one_or_none()
        if roadmap is None:
            return None

        coupons = await coupon_service.get_best_coupons(
            db, [step.course_id for step in roadmap.steps]
        )

        total_original = 0.0
        total_discounted = 0.0
        steps = []
        for step in roadmap.steps:
            course = step.course
            coupon = coupons.get(course.id)
            total_original += course.original_price
            total_discounted += coupon.final_price if coupon else course.original_price
            steps.append(
                {
                    "id": step.id,
                    "title": step.title,
                    "description": step.description,
                    "order_index": step.order_index,
                    "course": {
                        "id": course.id,
                        "title": course.title,
                        "slug": course.slug,
                        "thumbnail_url": course.thumbnail_url,
                        "original_price": course.original_price,
                        "instructor_name": course.instructor_name,
                        "rating": course.rating,
                        "duration": course.duration,
                        "platform": {
                            "name": course.platform.name,
                            "slug": course.platform.slug,
                        },
                        "active_coupon": (
                            {
                                "final_price": coupon.final_price,
                                "discount_value": coupon.discount_value,
                                "code": coupon.code,
                                "discount_percentage": calculate_discount_percentage(
                                    course.original_price, coupon.final_price
                                ),
                            }
                            if coupon
                            else None
                        ),
                    },
                }
            )

        return {
            "id": roadmap.id,
            "title": roadmap.title,
            "slug": roadmap.slug,
            "subtitle": roadmap.subtitle,
            "description": roadmap.description,
            "icon_name": roadmap.icon_name,
            "estimated_hours": roadmap.estimated_hours,
            "course_count": roadmap.course_count,
            "is_active": roadmap.is_active,
            "is_featured": roadmap.is_featured,
            "total_original_price": round(total_original, 2),
            "total_discounted_price": round(total_discounted, 2),
            "total_savings": round(total_original - total_discounted, 2),
            "steps": steps,
        }

    async def get_roadmap_by_id(
        self, db: AsyncSession, roadmap_id: uuid.UUID
    ) -> Optional[Dict[str, Any]]:
        """Admin view of a roadmap with its ordered steps."""
        result = await db.execute(
            select(Roadmap)
            .options(
                selectinload(Roadmap.steps)
                .selectinload(RoadmapStep.course)
                .selectinload(Course.platform)
            )
            .where(Roadmap.id == roadmap_id)
            .execution_options(populate_existing=True)
        )
        roadmap = result.scalar_one_or_none()
        if roadmap is None:
            return None

        data = row_to_dict(roadmap)
        data["steps"] = [
            {
                "id": step.id,
                "title": step.title,
                "description": step.description,
                "order_index": step.order_index,
                "course": {
                    "id": step.course.id,
                    "title": step.course.title,
                    "slug": step.course.slug,
                    "thumbnail_url": step.course.thumbnail_url,
                    "original_price": step.course.original_price,
                    "platform_name": step.course.platform.name,
                },
            }
            for step in roadmap.steps
        ]
        return data

    async def create_roadmap(self, db: AsyncSession, data: Dict[str, Any]) -> Roadmap:
        """
        Create a roadmap.

        Raises:
            InvalidReferenceError: If the category does not exist.
            ConflictError: If the slug is already taken.
        """
        await ensure_exists(db, Category, [data.get("category_id")], "Category")
        if not data.get("slug"):
            data["slug"] = await derive_slug(
                db, Roadmap, data["title"], reserved=RESERVED_ROADMAP_SLUGS
            )

        roadmap = Roadmap(**data)
        db.add(roadmap)
        await commit_or_conflict(db, f"Roadmap slug already exists: {data.get('slug')}")
        await db.refresh(roadmap)
        logger.info(f"Created roadmap: {roadmap.slug}")
        return roadmap

    async def update_roadmap(
        self, db: AsyncSession, roadmap_id: uuid.UUID, changes: Dict[str, Any]
    ) -> Optional[Roadmap]:
        roadmap = await db.get(Roadmap, roadmap_id)
        if roadmap is None:
            return None

        await ensure_exists(db, Category, [changes.get("category_id")], "Category")

        apply_changes(roadmap, changes)
        await commit_or_conflict(db, f"Roadmap slug already exists: {changes.get('slug')}")
        await db.refresh(roadmap)
        return roadmap

    async def delete_roadmap(self, db: AsyncSession, roadmap_id: uuid.UUID) -> bool:
        roadmap = await db.get(Roadmap, roadmap_id)
        if roadmap is None:
            return False

        await db.delete(roadmap)
        await db.commit()
        logger.info(f"Deleted roadmap: {roadmap.slug}")
        return True

    async def add_roadmap_step(
        self, db: AsyncSession, roadmap_id: uuid.UUID, data: Dict[str, Any]
    ) -> Optional[RoadmapStep]:
        """
        Append a course step and bump the roadmap's course_count.

        Returns:
            The new step, or None if the roadmap does not exist.

        Raises:
            InvalidReferenceError: If the course does not exist.
        """
        if await db.get(Roadmap, roadmap_id) is None:
            return None

        await ensure_exists(db, Course, [data["course_id"]], "Course")

        step = RoadmapStep(roadmap_id=roadmap_id, **data)
        db.add(step)
        await db.execute(
            update(Roadmap)
            .where(Roadmap.id == roadmap_id)
            .values(course_count=Roadmap.course_count + 1)
        )
        await db.commit()
        await db.refresh(step)
        return step

    async def remove_roadmap_step(
        self, db: AsyncSession, roadmap_id: uuid.UUID, step_id: uuid.UUID
    ) -> bool:
        """
        Remove a step and decrement the roadmap's course_count.

        Returns:
            False if the step does not exist in this roadmap.
        """
        step = await db.get(RoadmapStep, step_id)
        if step is None or step.roadmap_id != roadmap_id:
            return False

        await db.delete(step)
        await db.execute(
            update(Roadmap)
            .where(Roadmap.id == roadmap_id, Roadmap.course_count > 0)
            .values(course_count=Roadmap.course_count - 1)
        )
        await db.commit()
        return True

    async def reorder_roadmap_steps(
        self,
        db: AsyncSession,
        roadmap_id: uuid.UUID,
        step_order: List[Dict[str, Any]],
    ) -> bool:
        """
        Set order_index for several steps in one transaction.

        Steps that belong to another roadmap are left untouched.

        Returns:
            False if the roadmap does not exist.
        """
        if await db.get(Roadmap, roadmap_id) is None:
            return False

        for item in step_order:
            await db.execute(
                update(RoadmapStep)
                .where(RoadmapStep.id == item["id"], RoadmapStep.roadmap_id == roadmap_id)
                .values(order_index=item["order_index"])
            )
        await db.commit()
        logger.info(f"Reordered {len(step_order)} steps of roadmap {roadmap_id}")
        return True


# Global service instance
roadmap_service = RoadmapService()
