"""
Coupon service.

CRUD and search for course coupons, plus the expiry sweep.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from sqlalchemy import and_, func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import contains_eager

from app.models.coupon import Coupon
from app.models.course import Course
from app.services.base import (
    apply_changes,
    commit_or_conflict,
    ensure_exists,
    row_to_dict,
)
from app.utils import build_pagination, utcnow

logger = logging.getLogger(__name__)


def _with_course(coupon: Coupon) -> Dict[str, Any]:
    data = row_to_dict(coupon)
    data["course"] = {
        "id": coupon.course.id,
        "title": coupon.course.title,
        "slug": coupon.course.slug,
        "original_price": coupon.course.original_price,
    }
    return data


class CouponService:
    """Business logic for coupon management."""

    async def search_coupons(
        self,
        db: AsyncSession,
        query: Optional[str] = None,
        course_id: Optional[uuid.UUID] = None,
        is_active: Optional[bool] = None,
        is_expired: Optional[bool] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Dict[str, Any]:
        """
        Search coupons with pagination, newest first.

        Args:
            db: Database session.
            query: Case-insensitive text matched against the code and course title.
            course_id: Restrict to one course.
            is_active: Filter on the is_active flag.
            is_expired: True for coupons past their expiry, False for
                coupons without expiry or expiring in the future.
            page: 1-based page number.
            limit: Page size.

        Returns:
            Dict with 'data' (coupons with their course) and 'pagination'.
        """
        now = utcnow()
        filters = []
        if query:
            filters.append(
                or_(
                    Coupon.code.icontains(query, autoescape=True),
                    Course.title.icontains(query, autoescape=True),
                )
            )
        if course_id:
            filters.append(Coupon.course_id == course_id)
        if is_active is not None:
            filters.append(Coupon.is_active.is_(is_active))
        if is_expired is True:
            filters.append(Coupon.expires_at < now)
        elif is_expired is False:
            filters.append(or_(Coupon.expires_at.is_(None), Coupon.expires_at > now))

        total = await db.scalar(
            select(func.count(Coupon.id)).join(Coupon.course).where(*filters)
        )
        result = await db.execute(
            select(Coupon)
            .join(Coupon.course)
            .options(contains_eager(Coupon.course))
            .where(*filters)
            .order_by(Coupon.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )

        return {
            "data": [_with_course(coupon) for coupon in result.scalars().all()],
            "pagination": build_pagination(page, limit, total or 0),
        }

    async def get_coupon_by_id(
        self, db: AsyncSession, coupon_id: uuid.UUID
    ) -> Optional[Dict[str, Any]]:
        result = await db.execute(
            select(Coupon)
            .join(Coupon.course)
            .options(contains_eager(Coupon.course))
            .where(Coupon.id == coupon_id)
        )
        coupon = result.scalar_one_or_none()
        return _with_course(coupon) if coupon else None

    async def get_active_coupons_for_course(
        self, db: AsyncSession, course_id: uuid.UUID
    ) -> List[Coupon]:
        """Active, unexpired coupons of a course, biggest discount first."""
        result = await db.execute(
            select(Coupon)
            .where(Coupon.course_id == course_id, Coupon.active_clause())
            .order_by(Coupon.discount_value.desc())
        )
        return list(result.scalars().all())

    async def get_best_coupons(
        self, db: AsyncSession, course_ids: List[uuid.UUID]
    ) -> Dict[uuid.UUID, Coupon]:
        """
        Best active coupon per course.

        Returns:
            Mapping of course id to its active coupon with the highest
            discount value. Courses without one are absent.
        """
        if not course_ids:
            return {}

        result = await db.execute(
            select(Coupon)
            .where(Coupon.course_id.in_(course_ids), Coupon.active_clause())
            .order_by(Coupon.discount_value.desc(), Coupon.created_at.desc())
        )
        best: Dict[uuid.UUID, Coupon] = {}
        for coupon in result.scalars().all():
            best.setdefault(coupon.course_id, coupon)
        return best

    async def create_coupon(self, db: AsyncSession, data: Dict[str, Any]) -> Coupon:
        """
        Create a coupon.

        Raises:
            InvalidReferenceError: If the course does not exist.
        """
        await ensure_exists(db, Course, [data.get("course_id")], "Course")

        coupon = Coupon(**data)
        db.add(coupon)
        await commit_or_conflict(db, "Coupon could not be saved")
        await db.refresh(coupon)
        logger.info(f"Created coupon {coupon.code or coupon.id} for course {coupon.course_id}")
        return coupon

    async def update_coupon(
        self, db: AsyncSession, coupon_id: uuid.UUID, changes: Dict[str, Any]
    ) -> Optional[Coupon]:
        coupon = await db.get(Coupon, coupon_id)
        if coupon is None:
            return None

        if "course_id" in changes:
            await ensure_exists(db, Course, [changes["course_id"]], "Course")

        apply_changes(coupon, changes)
        await commit_or_conflict(db, "Coupon could not be saved")
        await db.refresh(coupon)
        return coupon

    async def delete_coupon(self, db: AsyncSession, coupon_id: uuid.UUID) -> bool:
        coupon = await db.get(Coupon, coupon_id)
        if coupon is None:
            return False

        await db.delete(coupon)
        await db.commit()
        logger.info(f"Deleted coupon {coupon_id}")
        return True

    async def deactivate_expired_coupons(self, db: AsyncSession) -> int:
        """
        Turn off active coupons whose expiry date has passed.

        Returns:
            Number of coupons deactivated.
        """
        result = await db.execute(
            update(Coupon)
            .where(
                and_(
                    Coupon.is_active.is_(True),
                    Coupon.expires_at < utcnow(),
                )
            )
            .values(is_active=False)
            .execution_options(synchronize_session=False)
        )
        await db.commit()

        count = result.rowcount or 0
        logger.info(f"Deactivated {count} expired coupon(s)")
        return count


# Global service instance
coupon_service = CouponService()
