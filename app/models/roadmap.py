"""Roadmap and RoadmapStep SQLAlchemy models."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
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
    from app.models.course import Course


# Taken by fixed routes under /roadmaps
RESERVED_ROADMAP_SLUGS = frozenset({"featured"})


class Roadmap(Base):
    """
    Curated learning path made of ordered course steps.

    Attributes:
        id: UUID primary key
        title: Roadmap title
        slug: Unique URL slug
        course_count: Number of steps, kept in sync when steps change
        level: Target level
        skill_tags: Free-form skill labels
        has_job_guarantee / has_certificate / has_free_resources /
        is_short_path: Listing filters
        sort_order: Position in listings, ascending
        category_id: Optional category
    """

    __tablename__ = "roadmaps"

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
    subtitle: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    icon_name: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    estimated_hours: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    course_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    level: Mapped[str] = mapped_column(String(20), nullable=False, default="ALL_LEVELS")
    skill_tags: Mapped[List[str]] = mapped_column(JSON, nullable=False, default=list)
    has_job_guarantee: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    has_certificate: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    has_free_resources: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_short_path: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        index=True,
    )
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    category_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
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
    category: Mapped[Optional["Category"]] = relationship(
        "Category",
        back_populates="roadmaps",
    )
    steps: Mapped[List["RoadmapStep"]] = relationship(
        "RoadmapStep",
        back_populates="roadmap",
        cascade="all, delete-orphan",
        order_by="RoadmapStep.order_index",
    )

    def __repr__(self) -> str:
        return f"<Roadmap {self.slug}>"


class RoadmapStep(Base):
    """One course in a roadmap, at position order_index."""

    __tablename__ = "roadmap_steps"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    roadmap_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("roadmaps.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    course_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(1000), nullable=True)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    roadmap: Mapped["Roadmap"] = relationship(
        "Roadmap",
        back_populates="steps",
    )
    course: Mapped["Course"] = relationship(
        "Course",
        back_populates="roadmap_steps",
    )

    def __repr__(self) -> str:
        return f"<RoadmapStep {self.order_index}: {self.title}>"
