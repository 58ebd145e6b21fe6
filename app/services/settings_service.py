"""
Site settings service.

The marketing numbers and mission text shown on the public site live
in a single row that is created with defaults on first access.
"""

import logging
from typing import Any, Dict

from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.site_settings import SETTINGS_ID, SiteSettings
from app.services.base import apply_changes

logger = logging.getLogger(__name__)

INSERTS = {"postgresql": postgresql_insert, "sqlite": sqlite_insert}

STAT_FIELDS = (
    "courses_verified",
    "student_savings",
    "uptime",
    "acceptance_rate",
    "hosting_cost",
    "price_monitoring",
)


class SettingsService:
    """Read and update the singleton site settings row."""

    async def get_site_settings(self, db: AsyncSession) -> SiteSettings:
        """
        Return the settings row, inserting the defaults on first access.

        The insert skips the row when another request created it first.
        """
        settings = await db.get(SiteSettings, SETTINGS_ID)
        if settings is None:
            insert = INSERTS[db.get_bind().dialect.name]
            result = await db.execute(
                insert(SiteSettings.__table__)
                .values(id=SETTINGS_ID)
                .on_conflict_do_nothing(index_elements=["id"])
            )
            await db.commit()
            if result.rowcount:
                logger.info("Created default site settings")
            settings = await db.get(SiteSettings, SETTINGS_ID)
        return settings

    async def update_site_settings(
        self, db: AsyncSession, changes: Dict[str, Any]
    ) -> SiteSettings:
        """Apply a partial update, creating the row first if needed."""
        settings = await self.get_site_settings(db)
        apply_changes(settings, changes)
        await db.commit()
        await db.refresh(settings)
        logger.info(f"Updated site settings: {', '.join(sorted(changes))}")
        return settings

    async def get_about_page_stats(self, db: AsyncSession) -> Dict[str, str]:
        settings = await self.get_site_settings(db)
        return {field: getattr(settings, field) for field in STAT_FIELDS}

    async def get_mission_content(self, db: AsyncSession) -> Dict[str, str]:
        settings = await self.get_site_settings(db)
        return {
            "title": settings.mission_title,
            "subtitle": settings.mission_subtitle or "",
            "description": settings.mission_description or "",
        }

    async def get_homepage_stats(self, db: AsyncSession) -> Dict[str, str]:
        """Subset of the stats shown on the homepage banner."""
        settings = await self.get_site_settings(db)
        return {
            "courses_verified": settings.courses_verified,
            "student_savings": settings.student_savings,
            "uptime": settings.uptime,
        }


# Global service instance
settings_service = SettingsService()
