"""Course and course content SQLAlchemy models."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.database import Base
from app.utils import utcnow

if TYPE_CHECKING:
    from app.models.category import Category
    from app.models.click import ClickEvent
    from app.models.coupon import Coupon
    from app.models.platform import Platform
    from app.models.roadmap import RoadmapStep


COURSE_LEVELS = ("BEGINNER", "INTERMEDIATE", "ADVANCED", "ALL_LEVELS")

# Taken by fixed routes under /courses
RESERVED_COURSE_SLUGS = frozenset({"featured", "top-discounts"})


class Course(Base):
    """
    A course listed on an external learning platform.

    Attributes:
        id: UUID primary key
        title: Course title
        slug: Unique URL slug
        original_price: List price before any coupon
        currency: ISO 4217 currency code
        level: BEGINNER, INTERMEDIATE, ADVANCED or ALL_LEVELS
        rating: Average rating out of 5, if known
        direct_url: Course page on the platform
        affiliate_url: Affiliate link, preferred over direct_url for redirects
        is_active: Inactive courses are hidden from public search
        is_featured: Shown on the homepage
        last_verified_at: When the listing was last checked
        platform_id: Hosting platform
        category_id: Category the course belongs to
    """

    __tablename__ = "courses"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(
        String(200),
        unique=True,
        nullable=False,
        index=True,
    )
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    short_description: Mapped[Optional[str]] = mapped_column(String(320), nullable=True)
    instructor_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    instructor_bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    thumbnail_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    original_price: Mapped[float] = mapped_column(
        Numeric(10, 2, asdecimal=False),
        nullable=False,
    )
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")

    level: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="ALL_LEVELS",
        index=True,
    )
    rating: Mapped[Optional[float]] = mapped_column(
        Numeric(3, 2, asdecimal=False),
        nullable=True,
    )
    review_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    student_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    duration: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    lecture_count: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    direct_url: Mapped[str] = mapped_column(String, nullable=False)
    affiliate_url: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        index=True,
    )
    is_featured: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        index=True,
    )
    last_verified_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    platform_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("platforms.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    category_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("categories.id", ondelete="RESTRICT"),
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
    platform: Mapped["Platform"] = relationship(
        "Platform",
        back_populates="courses",
    )
    category: Mapped["Category"] = relationship(
        "Category",
        back_populates="courses",
    )
    coupons: Mapped[List["Coupon"]] = relationship(
        "Coupon",
        back_populates="course",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    click_events: Mapped[List["ClickEvent"]] = relationship(
        "ClickEvent",
        back_populates="course",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    learning_outcomes: Mapped[List["CourseLearningOutcome"]] = relationship(
        "CourseLearningOutcome",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="CourseLearningOutcome.sort_order",
    )
    syllabus_sections: Mapped[List["CourseSyllabusSection"]] = relationship(
        "CourseSyllabusSection",
        back_populates="course",
        cascade="all, delete-orphan",
        order_by="CourseSyllabusSection.sort_order",
    )
    roadmap_steps: Mapped[List["RoadmapStep"]] = relationship(
        "RoadmapStep",
        back_populates="course",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Course {self.slug}>"


class CourseLearningOutcome(Base):
    """A "what you'll learn" bullet of a course."""

    __tablename__ = "course_learning_outcomes"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    course_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    course: Mapped["Course"] = relationship(
        "Course",
        back_populates="learning_outcomes",
    )


class CourseSyllabusSection(Base):
    """A syllabus section grouping lecture items."""

    __tablename__ = "course_syllabus_sections"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    course_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String, nullable=False)
    duration: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    course: Mapped["Course"] = relationship(
        "Course",
        back_populates="syllabus_sections",
    )
    items: Mapped[List["CourseSyllabusItem"]] = relationship(
        "CourseSyllabusItem",
        back_populates="section",
        cascade="all, delete-orphan",
        order_by="CourseSyllabusItem.sort_order",
        lazy="selectin",
    )


class CourseSyllabusItem(Base):
    """A single lecture inside a syllabus section."""

    __tablename__ = "course_syllabus_items"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    section_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("course_syllabus_sections.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    section: Mapped["CourseSyllabusSection"] = relationship(
        "CourseSyllabusSection",
        back_populates="items",
    )
