"""Category request and response schemas."""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.common import MAX_PAGE_SIZE, SLUG_REGEX, PartialUpdate, SlugFromField


class CategoryCreate(SlugFromField):
    name: str = Field(min_length=1, max_length=100)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=100, pattern=SLUG_REGEX)
    description: Optional[str] = Field(default=None, max_length=500)
    icon_name: Optional[str] = Field(default=None, max_length=50)
    sort_order: int = 0


class CategoryUpdate(PartialUpdate):
    required_fields = frozenset({"name", "slug", "sort_order"})

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=100, pattern=SLUG_REGEX)
    description: Optional[str] = Field(default=None, max_length=500)
    icon_name: Optional[str] = Field(default=None, max_length=50)
    sort_order: Optional[int] = None


class CategorySearchParams(BaseModel):
    query: Optional[str] = Field(default=None, max_length=100)
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=MAX_PAGE_SIZE)


class CategoryOrder(BaseModel):
    id: uuid.UUID
    sort_order: int


class CategoryReorderRequest(BaseModel):
    items: List[CategoryOrder] = Field(min_length=1)


class CategoryResponse(BaseModel):
    """Category as returned by admin endpoints."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    slug: str
    description: Optional[str] = None
    icon_name: Optional[str] = None
    sort_order: int
    created_at: datetime
    updated_at: datetime


class CategoryWithCount(CategoryResponse):
    course_count: int = 0


class CategoryRef(BaseModel):
    """Category embedded in course and roadmap responses."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    slug: str
