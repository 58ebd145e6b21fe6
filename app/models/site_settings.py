"""SiteSettings SQLAlchemy model."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.database import Base
from app.utils import utcnow

SETTINGS_ID = "site-settings"


class SiteSettings(Base):
    """
    Global site settings. A single row keyed by SETTINGS_ID.

    Marketing figures are free-form strings ("1,200+", "99.9%").
    """

    __tablename__ = "site_settings"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=SETTINGS_ID)
    courses_verified: Mapped[str] = mapped_column(String, nullable=False, default="500+")
    student_savings: Mapped[str] = mapped_column(String, nullable=False, default="$50K+")
    uptime: Mapped[str] = mapped_column(String, nullable=False, default="99.9%")
    acceptance_rate: Mapped[str] = mapped_column(String, nullable=False, default="100%")
    hosting_cost: Mapped[str] = mapped_column(String, nullable=False, default="$0")
    price_monitoring: Mapped[str] = mapped_column(String, nullable=False, default="24/7")
    mission_title: Mapped[str] = mapped_column(
        String,
        nullable=False,
        default="Quality education should be accessible to everyone",
    )
    mission_subtitle: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    mission_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<SiteSettings {self.id}>"
