"""Category SQLAlchemy model."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime, Integer, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.database import Base
from app.utils import utcnow

if TYPE_CHECKING:
    from app.models.course import Course
    from app.models.roadmap import Roadmap


class Category(Base):
    """
    Course category (Web Development, Data Science, ...).

    Attributes:
        id: UUID primary key
        name: Display name
        slug: Unique URL slug
        description: Optional description
        icon_name: Optional icon identifier used by the frontend
        sort_order: Position in listings, ascending
        created_at: When the category was created
        updated_at: When the category was last updated
    """

    __tablename__ = "categories"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )
    slug: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        index=True,
    )
    description: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
    )
    icon_name: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
    )
    sort_order: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
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
    courses: Mapped[List["Course"]] = relationship(
        "Course",
        back_populates="category",
    )
    roadmaps: Mapped[List["Roadmap"]] = relationship(
        "Roadmap",
        back_populates="category",
    )

    def __repr__(self) -> str:
        return f"<Category {self.slug}>"
