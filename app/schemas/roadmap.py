"""Roadmap request and response schemas."""

import uuid
from datetime import datetime
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.roadmap import RESERVED_ROADMAP_SLUGS
from app.schemas.category import CategoryRef
from app.schemas.common import PartialUpdate, SlugFromField, checked_slug
from app.schemas.course import CourseLevel

MAX_ROADMAP_PAGE_SIZE = 20
RoadmapSlug = Annotated[str, checked_slug(RESERVED_ROADMAP_SLUGS)]


class RoadmapCreate(SlugFromField):
    slug_source = "title"

    title: str = Field(min_length=3, max_length=200)
    slug: Optional[RoadmapSlug] = None
    subtitle: Optional[str] = Field(default=None, max_length=300)
    description: Optional[str] = Field(default=None, max_length=5000)
    icon_name: Optional[str] = Field(default=None, max_length=50)
    estimated_hours: Optional[int] = Field(default=None, ge=0)
    is_active: bool = True
    is_featured: bool = False
    sort_order: int = 0
    level: CourseLevel = "ALL_LEVELS"
    has_job_guarantee: bool = False
    has_certificate: bool = False
    has_free_resources: bool = False
    is_short_path: bool = False
    skill_tags: List[str] = Field(default_factory=list)
    category_id: Optional[uuid.UUID] = None


class RoadmapUpdate(PartialUpdate):
    required_fields = frozenset(
        {
            "title",
            "slug",
            "is_active",
            "is_featured",
            "sort_order",
            "level",
            "has_job_guarantee",
            "has_certificate",
            "has_free_resources",
            "is_short_path",
            "skill_tags",
        }
    )

    title: Optional[str] = Field(default=None, min_length=3, max_length=200)
    slug: Optional[RoadmapSlug] = None
    subtitle: Optional[str] = Field(default=None, max_length=300)
    description: Optional[str] = Field(default=None, max_length=5000)
    icon_name: Optional[str] = Field(default=None, max_length=50)
    estimated_hours: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None
    sort_order: Optional[int] = None
    level: Optional[CourseLevel] = None
    has_job_guarantee: Optional[bool] = None
    has_certificate: Optional[bool] = None
    has_free_resources: Optional[bool] = None
    is_short_path: Optional[bool] = None
    skill_tags: Optional[List[str]] = None
    category_id: Optional[uuid.UUID] = None


class RoadmapSearchParams(BaseModel):
    query: Optional[str] = Field(default=None, max_length=100)
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None
    level: Optional[Literal["BEGINNER", "INTERMEDIATE", "ADVANCED"]] = None
    category: Optional[str] = None
    has_job_guarantee: Optional[bool] = None
    has_certificate: Optional[bool] = None
    has_free_resources: Optional[bool] = None
    is_short_path: Optional[bool] = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=MAX_ROADMAP_PAGE_SIZE)


class RoadmapStepCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=1000)
    order_index: int = Field(ge=0)
    course_id: uuid.UUID


class RoadmapStepOrder(BaseModel):
    id: uuid.UUID
    order_index: int = Field(ge=0)


class RoadmapStepReorderRequest(BaseModel):
    items: List[RoadmapStepOrder] = Field(min_length=1)


class RoadmapResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    slug: str
    subtitle: Optional[str] = None
    description: Optional[str] = None
    icon_name: Optional[str] = None
    estimated_hours: Optional[int] = None
    course_count: int
    level: str
    skill_tags: List[str] = Field(default_factory=list)
    has_job_guarantee: bool
    has_certificate: bool
    has_free_resources: bool
    is_short_path: bool
    is_active: bool
    is_featured: bool
    sort_order: int
    category_id: Optional[uuid.UUID] = None
    created_at: datetime
    updated_at: datetime


class RoadmapSummary(BaseModel):
    """Roadmap card in listings."""

    id: uuid.UUID
    title: str
    slug: str
    subtitle: Optional[str] = None
    description: Optional[str] = None
    icon_name: Optional[str] = None
    estimated_hours: Optional[int] = None
    course_count: int
    level: str
    skill_tags: List[str] = Field(default_factory=list)
    has_job_guarantee: bool
    has_certificate: bool
    has_free_resources: bool
    is_short_path: bool
    category: Optional[CategoryRef] = None
    is_active: bool
    is_featured: bool


class StepPlatform(BaseModel):
    name: str
    slug: str


class StepCoupon(BaseModel):
    final_price: float
    discount_value: float
    code: Optional[str] = None
    discount_percentage: int = 0


class StepCourse(BaseModel):
    id: uuid.UUID
    title: str
    slug: str
    thumbnail_url: Optional[str] = None
    original_price: float
    instructor_name: Optional[str] = None
    rating: Optional[float] = None
    duration: Optional[str] = None
    platform: StepPlatform
    active_coupon: Optional[StepCoupon] = None


class RoadmapStepWithCourse(BaseModel):
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    order_index: int
    course: StepCourse


class RoadmapWithSteps(BaseModel):
    """Public roadmap page with price totals."""

    id: uuid.UUID
    title: str
    slug: str
    subtitle: Optional[str] = None
    description: Optional[str] = None
    icon_name: Optional[str] = None
    estimated_hours: Optional[int] = None
    course_count: int
    is_active: bool
    is_featured: bool
    total_original_price: float
    total_discounted_price: float
    total_savings: float
    steps: List[RoadmapStepWithCourse]


class AdminStepCourse(BaseModel):
    id: uuid.UUID
    title: str
    slug: str
    thumbnail_url: Optional[str] = None
    original_price: float
    platform_name: str


class AdminRoadmapStep(BaseModel):
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    order_index: int
    course: AdminStepCourse


class RoadmapDetail(RoadmapResponse):
    steps: List[AdminRoadmapStep] = Field(default_factory=list)


class RoadmapStepResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    roadmap_id: uuid.UUID
    course_id: uuid.UUID
    title: str
    description: Optional[str] = None
    order_index: int
