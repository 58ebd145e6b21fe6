"""Site settings schemas."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from app.schemas.common import PartialUpdate


class SiteSettingsUpdate(PartialUpdate):
    required_fields = frozenset(
        {
            "courses_verified",
            "student_savings",
            "uptime",
            "acceptance_rate",
            "hosting_cost",
            "price_monitoring",
            "mission_title",
        }
    )

    courses_verified: Optional[str] = None
    student_savings: Optional[str] = None
    uptime: Optional[str] = None
    acceptance_rate: Optional[str] = None
    hosting_cost: Optional[str] = None
    price_monitoring: Optional[str] = None
    mission_title: Optional[str] = None
    mission_subtitle: Optional[str] = None
    mission_description: Optional[str] = None


class SiteSettingsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    courses_verified: str
    student_savings: str
    uptime: str
    acceptance_rate: str
    hosting_cost: str
    price_monitoring: str
    mission_title: str
    mission_subtitle: Optional[str] = None
    mission_description: Optional[str] = None
    updated_at: datetime


class AboutPageStats(BaseModel):
    courses_verified: str
    student_savings: str
    uptime: str
    acceptance_rate: str
    hosting_cost: str
    price_monitoring: str


class MissionContent(BaseModel):
    title: str
    subtitle: str
    description: str


class HomepageStats(BaseModel):
    courses_verified: str
    student_savings: str
    uptime: str
