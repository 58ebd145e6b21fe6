"""Platform SQLAlchemy model."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, DateTime, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.database import Base
from app.utils import utcnow

if TYPE_CHECKING:
    from app.models.course import Course


class Platform(Base):
    """
    Learning platform that hosts courses (Udemy, Coursera, ...).

    Attributes:
        id: UUID primary key
        name: Display name
        slug: Unique URL slug
        logo_url: Optional logo image URL
        base_url: Platform home URL
        is_active: Inactive platforms are hidden from public listings
        created_at: When the platform was created
        updated_at: When the platform was last updated
    """

    __tablename__ = "platforms"

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
    logo_url: Mapped[Optional[str]] = mapped_column(
        String,
        nullable=True,
    )
    base_url: Mapped[str] = mapped_column(
        String,
        nullable=False,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
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
    courses: Mapped[List["Course"]] = relationship(
        "Course",
        back_populates="platform",
    )

    def __repr__(self) -> str:
        return f"<Platform {self.slug}>"
