"""
Course service.

Course search and detail pages, admin CRUD and course content
(learning outcomes and syllabus) management.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, delete, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.category import Category
from app.models.coupon import Coupon
from app.models.course import (
    RESERVED_COURSE_SLUGS,
    Course,
    CourseLearningOutcome,
    CourseSyllabusItem,
    CourseSyllabusSection,
)
from app.models.platform import Platform
from app.models.roadmap import Roadmap, RoadmapStep
from app.services.base import (
    apply_changes,
    commit_or_conflict,
    derive_slug,
    ensure_exists,
)
from app.services.coupon_service import coupon_service
from app.utils import build_pagination, calculate_discount_percentage, utcnow

logger = logging.getLogger(__name__)


def _coupon_summary(
    coupon: Optional[Coupon], original_price: float
) -> Optional[Dict[str, Any]]:
    if coupon is None:
        return None
    return {
        "id": coupon.id,
        "code": coupon.code,
        "discount_type": coupon.discount_type,
        "discount_value": coupon.discount_value,
        "final_price": coupon.final_price,
        "expires_at": coupon.expires_at,
        "discount_percentage": calculate_discount_percentage(
            original_price, coupon.final_price
        ),
    }


def _course_card(course: Course, coupon: Optional[Coupon]) -> Dict[str, Any]:
    """Course with platform, category and best coupon."""
    return {
        "id": course.id,
        "title": course.title,
        "slug": course.slug,
        "description": course.description,
        "short_description": course.short_description,
        "instructor_name": course.instructor_name,
        "thumbnail_url": course.thumbnail_url,
        "original_price": course.original_price,
        "currency": course.currency,
        "level": course.level,
        "rating": course.rating,
        "review_count": course.review_count,
        "student_count": course.student_count,
        "duration": course.duration,
        "lecture_count": course.lecture_count,
        "direct_url": course.direct_url,
        "affiliate_url": course.affiliate_url,
        "is_active": course.is_active,
        "is_featured": course.is_featured,
        "last_verified_at": course.last_verified_at,
        "created_at": course.created_at,
        "platform": {
            "id": course.platform.id,
            "name": course.platform.name,
            "slug": course.platform.slug,
            "logo_url": course.platform.logo_url,
        },
        "category": {
            "id": course.category.id,
            "name": course.category.name,
            "slug": course.category.slug,
        },
        "active_coupon": _coupon_summary(coupon, course.original_price),
    }


class CourseService:
    """Business logic for course management and search."""

    async def search_courses(
        self,
        db: AsyncSession,
        query: Optional[str] = None,
        platform: Optional[str] = None,
        category: Optional[str] = None,
        level: Optional[str] = None,
        min_rating: Optional[float] = None,
        max_price: Optional[float] = None,
        has_discount: Optional[bool] = None,
        is_featured: Optional[bool] = None,
        page: int = 1,
        limit: int = 12,
        sort_by: str = "date",
        sort_order: str = "desc",
    ) -> Dict[str, Any]:
        """
        Search active courses with filtering, sorting, and pagination.

        Args:
            db: Database session.
            query: Text matched against title, description and instructor.
            platform: Platform slug.
            category: Category slug.
            level: Course level.
            min_rating: Minimum average rating.
            max_price: Require an active coupon with final price at most this.
            has_discount: Require an active coupon.
            is_featured: Filter on the featured flag.
            page: 1-based page number.
            limit: Page size.
            sort_by: rating, price, date, discount or popular.
            sort_order: asc or desc.

        Returns:
            Dict with 'data' (course cards) and 'pagination'.
        """
        now = utcnow()
        filters = [Course.is_active.is_(True)]

        if query:
            filters.append(
                or_(
                    Course.title.icontains(query, autoescape=True),
                    Course.description.icontains(query, autoescape=True),
                    Course.instructor_name.icontains(query, autoescape=True),
                )
            )
        if platform:
            filters.append(Course.platform.has(Platform.slug == platform))
        if category:
            filters.append(Course.category.has(Category.slug == category))
        if level:
            filters.append(Course.level == level)
        if min_rating is not None:
            filters.append(Course.rating >= min_rating)
        if is_featured is not None:
            filters.append(Course.is_featured.is_(is_featured))

        # Price filters consider active coupons only
        if max_price is not None or has_discount:
            coupon_filter = Coupon.active_clause(now)
            if max_price is not None:
                coupon_filter = and_(coupon_filter, Coupon.final_price <= max_price)
            filters.append(Course.coupons.any(coupon_filter))

        best_discount = (
            select(func.max(Coupon.discount_value))
            .where(Coupon.course_id == Course.id, Coupon.active_clause(now))
            .correlate(Course)
            .scalar_subquery()
        )
        sort_columns = {
            "rating": Course.rating,
            "price": Course.original_price,
            "popular": Course.student_count,
            "discount": best_discount,
            "date": Course.created_at,
        }
        sort_column = sort_columns.get(sort_by, Course.created_at)
        ordering = sort_column.asc() if sort_order == "asc" else sort_column.desc()

        total = await db.scalar(select(func.count(Course.id)).where(*filters))
        result = await db.execute(
            select(Course)
            .options(selectinload(Course.platform), selectinload(Course.category))
            .where(*filters)
            .order_by(ordering.nulls_last(), Course.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        courses = list(result.scalars().all())
        coupons = await coupon_service.get_best_coupons(db, [course.id for course in courses])

        return {
            "data": [_course_card(course, coupons.get(course.id)) for course in courses],
            "pagination": build_pagination(page, limit, total or 0),
        }

    async def get_course_by_slug(
        self, db: AsyncSession, slug: str
    ) -> Optional[Dict[str, Any]]:
        """Active course card by slug, or None."""
        result = await db.execute(
            select(Course)
            .options(selectinload(Course.platform), selectinload(Course.category))
            .where(Course.slug == slug, Course.is_active.is_(True))
        )
        course = result.scalar_one_or_none()
        if course is None:
            return None

        coupons = await coupon_service.get_best_coupons(db, [course.id])
        return _course_card(course, coupons.get(course.id))

    async def get_course_with_full_details(
        self, db: AsyncSession, slug: str
    ) -> Optional[Dict[str, Any]]:
        """
        Course detail page data.

        Adds the instructor bio, learning outcomes and syllabus sections
        (with their items), all in sort order.
        """
        result = await db.execute(
            select(Course)
            .options(
                selectinload(Course.platform),
                selectinload(Course.category),
                selectinload(Course.learning_outcomes),
                selectinload(Course.syllabus_sections).selectinload(CourseSyllabusSection.items),
            )
            .where(Course.slug == slug, Course.is_active.is_(True))
            .execution_options(populate_existing=True)
        )
        course = result.scalar_one_or_none()
        if course is None:
            return None

        coupons = await coupon_service.get_best_coupons(db, [course.id])
        details = _course_card(course, coupons.get(course.id))
        details["instructor_bio"] = course.instructor_bio
        details["learning_outcomes"] = [
            {"id": outcome.id, "text": outcome.text, "sort_order": outcome.sort_order}
            for outcome in course.learning_outcomes
        ]
        details["syllabus_sections"] = [
            {
                "id": section.id,
                "title": section.title,
                "duration": section.duration,
                "sort_order": section.sort_order,
                "items": [
                    {"id": item.id, "title": item.title, "sort_order": item.sort_order}
                    for item in section.items
                ],
            }
            for section in course.syllabus_sections
        ]
        return details

    async def get_course_by_id(
        self, db: AsyncSession, course_id: uuid.UUID
    ) -> Optional[Dict[str, Any]]:
        """
        Redirect data for a course.

        Returns:
            Dict with id, direct_url, affiliate_url and the best coupon
            code (None when there is no active coupon), or None.
        """
        course = await db.get(Course, course_id)
        if course is None:
            return None

        coupons = await coupon_service.get_best_coupons(db, [course.id])
        best = coupons.get(course.id)
        return {
            "id": course.id,
            "direct_url": course.direct_url,
            "affiliate_url": course.affiliate_url,
            "coupon_code": best.code if best else None,
        }

    async def get_course(self, db: AsyncSession, course_id: uuid.UUID) -> Optional[Course]:
        """Raw course row for admin screens."""
        return await db.get(Course, course_id)

    async def list_courses(
        self,
        db: AsyncSession,
        query: Optional[str] = None,
        platform_id: Optional[uuid.UUID] = None,
        category_id: Optional[uuid.UUID] = None,
        is_active: Optional[bool] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Dict[str, Any]:
        """Admin course listing, including inactive courses, newest first."""
        filters = []
        if query:
            filters.append(
                or_(
                    Course.title.icontains(query, autoescape=True),
                    Course.slug.icontains(query, autoescape=True),
                )
            )
        if platform_id:
            filters.append(Course.platform_id == platform_id)
        if category_id:
            filters.append(Course.category_id == category_id)
        if is_active is not None:
            filters.append(Course.is_active.is_(is_active))

        total = await db.scalar(select(func.count(Course.id)).where(*filters))
        result = await db.execute(
            select(Course)
            .where(*filters)
            .order_by(Course.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return {
            "data": list(result.scalars().all()),
            "pagination": build_pagination(page, limit, total or 0),
        }

    async def get_featured_courses(self, db: AsyncSession, limit: int = 8) -> Dict[str, Any]:
        return await self.search_courses(
            db, is_featured=True, page=1, limit=limit, sort_by="rating", sort_order="desc"
        )

    async def get_top_discount_courses(self, db: AsyncSession, limit: int = 8) -> Dict[str, Any]:
        return await self.search_courses(
            db, has_discount=True, page=1, limit=limit, sort_by="discount", sort_order="desc"
        )

    async def _check_references(self, db: AsyncSession, data: Dict[str, Any]) -> None:
        if "platform_id" in data:
            await ensure_exists(db, Platform, [data["platform_id"]], "Platform")
        if "category_id" in data:
            await ensure_exists(db, Category, [data["category_id"]], "Category")

    async def create_course(self, db: AsyncSession, data: Dict[str, Any]) -> Course:
        """
        Create a course.

        Raises:
            InvalidReferenceError: If the platform or category does not exist.
            ConflictError: If the slug is already taken.
        """
        await self._check_references(db, data)
        if not data.get("slug"):
            data["slug"] = await derive_slug(
                db, Course, data["title"], reserved=RESERVED_COURSE_SLUGS
            )

        course = Course(**data)
        db.add(course)
        await commit_or_conflict(db, f"Course slug already exists: {data.get('slug')}")
        await db.refresh(course)
        logger.info(f"Created course: {course.slug}")
        return course

    async def update_course(
        self, db: AsyncSession, course_id: uuid.UUID, changes: Dict[str, Any]
    ) -> Optional[Course]:
        course = await db.get(Course, course_id)
        if course is None:
            return None

        await self._check_references(db, changes)

        apply_changes(course, changes)
        await commit_or_conflict(db, f"Course slug already exists: {changes.get('slug')}")
        await db.refresh(course)
        return course

    async def delete_course(self, db: AsyncSession, course_id: uuid.UUID) -> bool:
        """
        Delete a course with its coupons, clicks, content and roadmap steps.

        Roadmaps that contained the course get their course_count reduced.
        """
        course = await db.get(Course, course_id)
        if course is None:
            return False

        step_counts = await db.execute(
            select(RoadmapStep.roadmap_id, func.count(RoadmapStep.id))
            .where(RoadmapStep.course_id == course_id)
            .group_by(RoadmapStep.roadmap_id)
        )
        for roadmap_id, count in step_counts.all():
            await db.execute(
                update(Roadmap)
                .where(Roadmap.id == roadmap_id)
                .values(course_count=Roadmap.course_count - count)
            )

        await db.delete(course)
        await db.commit()
        logger.info(f"Deleted course: {course.slug}")
        return True

    async def update_course_learning_outcomes(
        self,
        db: AsyncSession,
        course_id: uuid.UUID,
        outcomes: List[Dict[str, Any]],
    ) -> Optional[List[CourseLearningOutcome]]:
        """
        Replace all learning outcomes of a course.

        Returns:
            The new outcomes in sort order, or None if the course does not exist.
        """
        if await db.get(Course, course_id) is None:
            return None

        await db.execute(
            delete(CourseLearningOutcome).where(CourseLearningOutcome.course_id == course_id)
        )
        db.add_all(
            CourseLearningOutcome(
                course_id=course_id,
                text=outcome["text"],
                sort_order=outcome.get("sort_order", 0),
            )
            for outcome in outcomes
        )
        await db.commit()

        result = await db.execute(
            select(CourseLearningOutcome)
            .where(CourseLearningOutcome.course_id == course_id)
            .order_by(CourseLearningOutcome.sort_order.asc())
        )
        return list(result.scalars().all())

    async def update_course_syllabus(
        self,
        db: AsyncSession,
        course_id: uuid.UUID,
        sections: List[Dict[str, Any]],
    ) -> Optional[List[CourseSyllabusSection]]:
        """
        Replace the whole syllabus of a course.

        Returns:
            The new sections (items loaded) in sort order, or None if the
            course does not exist.
        """
        if await db.get(Course, course_id) is None:
            return None

        section_ids = select(CourseSyllabusSection.id).where(
            CourseSyllabusSection.course_id == course_id
        )
        await db.execute(
            delete(CourseSyllabusItem).where(CourseSyllabusItem.section_id.in_(section_ids))
        )
        await db.execute(
            delete(CourseSyllabusSection).where(CourseSyllabusSection.course_id == course_id)
        )

        for section in sections:
            db.add(
                CourseSyllabusSection(
                    course_id=course_id,
                    title=section["title"],
                    duration=section.get("duration"),
                    sort_order=section.get("sort_order", 0),
                    items=[
                        CourseSyllabusItem(
                            title=item["title"],
                            sort_order=item.get("sort_order", 0),
                        )
                        for item in section.get("items", [])
                    ],
                )
            )
        await db.commit()

        result = await db.execute(
            select(CourseSyllabusSection)
            .options(selectinload(CourseSyllabusSection.items))
            .where(CourseSyllabusSection.course_id == course_id)
            .order_by(CourseSyllabusSection.sort_order.asc())
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())


# Global service instance
course_service = CourseService()
