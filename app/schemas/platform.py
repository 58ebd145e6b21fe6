"""Platform request and response schemas."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.common import (
    MAX_PAGE_SIZE,
    SLUG_REGEX,
    PartialUpdate,
    SlugFromField,
    UrlStr,
)


class PlatformCreate(SlugFromField):
    name: str = Field(min_length=1, max_length=100)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=100, pattern=SLUG_REGEX)
    logo_url: Optional[UrlStr] = None
    base_url: UrlStr
    is_active: bool = True


class PlatformUpdate(PartialUpdate):
    required_fields = frozenset({"name", "slug", "base_url", "is_active"})

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=100, pattern=SLUG_REGEX)
    logo_url: Optional[UrlStr] = None
    base_url: Optional[UrlStr] = None
    is_active: Optional[bool] = None


class PlatformSearchParams(BaseModel):
    query: Optional[str] = Field(default=None, max_length=100)
    is_active: Optional[bool] = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=MAX_PAGE_SIZE)


class PlatformResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    slug: str
    logo_url: Optional[str] = None
    base_url: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


class PlatformWithCount(PlatformResponse):
    course_count: int = 0


class PlatformSummary(BaseModel):
    """Active platform for dropdowns, with its active course count."""

    id: uuid.UUID
    name: str
    slug: str
    logo_url: Optional[str] = None
    course_count: int = 0


class PlatformPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    slug: str
    logo_url: Optional[str] = None
    base_url: str


class PlatformRef(BaseModel):
    """Platform embedded in course responses."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    slug: str
    logo_url: Optional[str] = None
