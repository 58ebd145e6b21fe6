"""SQLAlchemy models for the Search Course database."""

from app.models.category import Category
from app.models.click import ClickEvent
from app.models.coupon import Coupon
from app.models.course import (
    Course,
    CourseLearningOutcome,
    CourseSyllabusItem,
    CourseSyllabusSection,
)
from app.models.platform import Platform
from app.models.roadmap import Roadmap, RoadmapStep
from app.models.site_settings import SiteSettings

__all__ = [
    "Category",
    "ClickEvent",
    "Coupon",
    "Course",
    "CourseLearningOutcome",
    "CourseSyllabusItem",
    "CourseSyllabusSection",
    "Platform",
    "Roadmap",
    "RoadmapStep",
    "SiteSettings",
]
