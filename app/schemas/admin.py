"""Admin dashboard and analytics response schemas."""

import uuid
from typing import List

from pydantic import BaseModel

from app.schemas.click import CountryCount, SourceCount


class CourseCounts(BaseModel):
    total: int
    active: int
    featured: int


class RoadmapCounts(BaseModel):
    total: int
    active: int


class CouponCounts(BaseModel):
    total: int
    active: int
    expiring_soon: int


class ClickCounts(BaseModel):
    total: int
    today: int
    this_week: int
    this_month: int


class DashboardStats(BaseModel):
    courses: CourseCounts
    platforms: int
    categories: int
    roadmaps: RoadmapCounts
    coupons: CouponCounts
    clicks: ClickCounts


class DailyCount(BaseModel):
    date: str
    count: int


class TopCourse(BaseModel):
    course_id: uuid.UUID
    title: str
    clicks: int


class ClickAnalytics(BaseModel):
    daily_clicks: List[DailyCount]
    top_courses: List[TopCourse]
    source_breakdown: List[SourceCount]
    country_breakdown: List[CountryCount]
