"""Coupon SQLAlchemy model."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    Uuid,
    and_,
    func,
    or_,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.database import Base
from app.utils import utcnow

if TYPE_CHECKING:
    from app.models.course import Course


DISCOUNT_TYPES = ("PERCENTAGE", "FIXED")


class Coupon(Base):
    """
    Discount coupon for a course.

    A coupon counts as active while is_active is set and it has no
    expiry or expires in the future.

    Attributes:
        id: UUID primary key
        code: Coupon code, NULL for link-only discounts
        discount_type: PERCENTAGE or FIXED
        discount_value: Percentage or amount off
        final_price: Price after the discount
        expires_at: When the coupon expires, NULL for never
        is_active: Whether the coupon is active
        source: Where the coupon was found
        verified_at: When the coupon was last verified
        course_id: Course the coupon applies to
    """

    __tablename__ = "coupons"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    code: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )
    discount_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="PERCENTAGE",
    )
    discount_value: Mapped[float] = mapped_column(
        Numeric(10, 2, asdecimal=False),
        nullable=False,
    )
    final_price: Mapped[float] = mapped_column(
        Numeric(10, 2, asdecimal=False),
        nullable=False,
    )
    expires_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        index=True,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        index=True,
    )
    source: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )
    verified_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )
    course_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )

    # Relationships
    course: Mapped["Course"] = relationship(
        "Course",
        back_populates="coupons",
    )

    def __repr__(self) -> str:
        return f"<Coupon {self.code or '-'} ({self.discount_type} {self.discount_value})>"

    @classmethod
    def active_clause(cls, now: Optional[datetime] = None):
        """SQL condition matching active, unexpired coupons."""
        now = now or utcnow()
        return and_(
            cls.is_active.is_(True),
            or_(cls.expires_at.is_(None), cls.expires_at > now),
        )
