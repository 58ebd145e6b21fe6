"""Course request and response schemas."""

import uuid
from datetime import datetime
from typing import Annotated, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.course import RESERVED_COURSE_SLUGS
from app.schemas.category import CategoryRef
from app.schemas.common import (
    MAX_PAGE_SIZE,
    PartialUpdate,
    SlugFromField,
    UrlStr,
    checked_slug,
)
from app.schemas.coupon import ActiveCoupon
from app.schemas.platform import PlatformRef

CourseLevel = Literal["BEGINNER", "INTERMEDIATE", "ADVANCED", "ALL_LEVELS"]
CourseSortBy = Literal["rating", "price", "date", "discount", "popular"]
SortOrder = Literal["asc", "desc"]
CourseSlug = Annotated[str, checked_slug(RESERVED_COURSE_SLUGS)]


class CourseSearchParams(BaseModel):
    query: Optional[str] = Field(default=None, max_length=200)
    platform: Optional[str] = Field(default=None, max_length=100)
    category: Optional[str] = Field(default=None, max_length=100)
    level: Optional[CourseLevel] = None
    min_rating: Optional[float] = Field(default=None, ge=0, le=5)
    max_price: Optional[float] = Field(default=None, ge=0)
    has_discount: Optional[bool] = None
    is_featured: Optional[bool] = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=12, ge=1, le=MAX_PAGE_SIZE)
    sort_by: CourseSortBy = "date"
    sort_order: SortOrder = "desc"


class AdminCourseSearchParams(BaseModel):
    query: Optional[str] = Field(default=None, max_length=200)
    platform_id: Optional[uuid.UUID] = None
    category_id: Optional[uuid.UUID] = None
    is_active: Optional[bool] = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=MAX_PAGE_SIZE)


class CourseCreate(SlugFromField):
    slug_source = "title"

    title: str = Field(min_length=3, max_length=200)
    slug: Optional[CourseSlug] = None
    description: Optional[str] = Field(default=None, max_length=10000)
    short_description: Optional[str] = Field(default=None, max_length=320)
    instructor_name: Optional[str] = Field(default=None, max_length=100)
    instructor_bio: Optional[str] = Field(default=None, max_length=5000)
    thumbnail_url: Optional[UrlStr] = None

    original_price: float = Field(ge=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)

    level: CourseLevel = "ALL_LEVELS"
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    review_count: int = Field(default=0, ge=0)
    student_count: int = Field(default=0, ge=0)
    duration: Optional[str] = Field(default=None, max_length=20)
    lecture_count: Optional[int] = Field(default=None, ge=0)

    direct_url: UrlStr
    affiliate_url: Optional[UrlStr] = None

    is_active: bool = True
    is_featured: bool = False

    platform_id: uuid.UUID
    category_id: uuid.UUID


class CourseUpdate(PartialUpdate):
    required_fields = frozenset(
        {
            "title",
            "slug",
            "original_price",
            "currency",
            "level",
            "review_count",
            "student_count",
            "direct_url",
            "is_active",
            "is_featured",
            "platform_id",
            "category_id",
        }
    )

    title: Optional[str] = Field(default=None, min_length=3, max_length=200)
    slug: Optional[CourseSlug] = None
    description: Optional[str] = Field(default=None, max_length=10000)
    short_description: Optional[str] = Field(default=None, max_length=320)
    instructor_name: Optional[str] = Field(default=None, max_length=100)
    instructor_bio: Optional[str] = Field(default=None, max_length=5000)
    thumbnail_url: Optional[UrlStr] = None
    original_price: Optional[float] = Field(default=None, ge=0)
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    level: Optional[CourseLevel] = None
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    review_count: Optional[int] = Field(default=None, ge=0)
    student_count: Optional[int] = Field(default=None, ge=0)
    duration: Optional[str] = Field(default=None, max_length=20)
    lecture_count: Optional[int] = Field(default=None, ge=0)
    direct_url: Optional[UrlStr] = None
    affiliate_url: Optional[UrlStr] = None
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None
    platform_id: Optional[uuid.UUID] = None
    category_id: Optional[uuid.UUID] = None


class CourseResponse(BaseModel):
    """Raw course row."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    slug: str
    description: Optional[str] = None
    short_description: Optional[str] = None
    instructor_name: Optional[str] = None
    instructor_bio: Optional[str] = None
    thumbnail_url: Optional[str] = None
    original_price: float
    currency: str
    level: str
    rating: Optional[float] = None
    review_count: int
    student_count: int
    duration: Optional[str] = None
    lecture_count: Optional[int] = None
    direct_url: str
    affiliate_url: Optional[str] = None
    is_active: bool
    is_featured: bool
    last_verified_at: datetime
    platform_id: uuid.UUID
    category_id: uuid.UUID
    created_at: datetime
    updated_at: datetime


class CourseWithDetails(BaseModel):
    """Course card: course fields plus platform, category and best coupon."""

    id: uuid.UUID
    title: str
    slug: str
    description: Optional[str] = None
    short_description: Optional[str] = None
    instructor_name: Optional[str] = None
    thumbnail_url: Optional[str] = None
    original_price: float
    currency: str
    level: str
    rating: Optional[float] = None
    review_count: int
    student_count: int
    duration: Optional[str] = None
    lecture_count: Optional[int] = None
    direct_url: str
    affiliate_url: Optional[str] = None
    is_active: bool
    is_featured: bool
    last_verified_at: datetime
    created_at: datetime
    platform: PlatformRef
    category: CategoryRef
    active_coupon: Optional[ActiveCoupon] = None


class LearningOutcomeIn(BaseModel):
    text: str = Field(min_length=1)
    sort_order: int = 0


class LearningOutcomeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    text: str
    sort_order: int


class SyllabusItemIn(BaseModel):
    title: str = Field(min_length=1)
    sort_order: int = 0


class SyllabusSectionIn(BaseModel):
    title: str = Field(min_length=1)
    duration: Optional[str] = None
    sort_order: int = 0
    items: List[SyllabusItemIn] = Field(default_factory=list)


class SyllabusItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    sort_order: int


class SyllabusSectionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    duration: Optional[str] = None
    sort_order: int
    items: List[SyllabusItemResponse] = Field(default_factory=list)


class LearningOutcomesUpdate(BaseModel):
    outcomes: List[LearningOutcomeIn]


class SyllabusUpdate(BaseModel):
    sections: List[SyllabusSectionIn]


class CourseFullDetails(CourseWithDetails):
    instructor_bio: Optional[str] = None
    learning_outcomes: List[LearningOutcomeResponse] = Field(default_factory=list)
    syllabus_sections: List[SyllabusSectionResponse] = Field(default_factory=list)
