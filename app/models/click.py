"""ClickEvent SQLAlchemy model."""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.database import Base
from app.utils import utcnow

if TYPE_CHECKING:
    from app.models.course import Course


CLICK_SOURCES = ("WEB", "TELEGRAM")


class ClickEvent(Base):
    """
    Outbound affiliate click on a course.

    Attributes:
        id: UUID primary key
        course_id: Course that was clicked
        source: WEB or TELEGRAM
        user_agent: Client user agent
        referer: Referring page
        ip_hash: Salted SHA-256 of the client IP
        country: ISO 3166 alpha-2 country code from the CDN
        created_at: When the click happened
    """

    __tablename__ = "click_events"

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
    source: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="WEB",
        index=True,
    )
    user_agent: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    referer: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    ip_hash: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    country: Mapped[Optional[str]] = mapped_column(String(2), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
        index=True,
    )

    # Relationships
    course: Mapped["Course"] = relationship(
        "Course",
        back_populates="click_events",
    )

    def __repr__(self) -> str:
        return f"<ClickEvent {self.course_id} ({self.source})>"
