"""Click event request and response schemas."""

import uuid
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.common import MAX_PAGE_SIZE, UtcDatetime

ClickSource = Literal["WEB", "TELEGRAM"]


class ClickCreate(BaseModel):
    course_id: uuid.UUID
    source: ClickSource = "WEB"
    user_agent: Optional[str] = Field(default=None, max_length=512)
    referer: Optional[str] = Field(default=None, max_length=512)
    ip_hash: Optional[str] = Field(default=None, max_length=64)
    country: Optional[str] = Field(default=None, min_length=2, max_length=2)


class ClickStatsParams(BaseModel):
    start_date: Optional[UtcDatetime] = None
    end_date: Optional[UtcDatetime] = None
    course_id: Optional[uuid.UUID] = None
    source: Optional[ClickSource] = None


class ClickEventsParams(BaseModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=MAX_PAGE_SIZE)


class SourceCount(BaseModel):
    source: str
    count: int


class CountryCount(BaseModel):
    country: Optional[str] = None
    count: int


class ClickStats(BaseModel):
    total: int
    by_source: List[SourceCount]
    by_country: List[CountryCount]


class DailyClicks(BaseModel):
    date: str
    clicks: int


class ClickedCourse(BaseModel):
    id: uuid.UUID
    title: str
    slug: str
    thumbnail_url: Optional[str] = None


class TopClickedCourse(BaseModel):
    course: Optional[ClickedCourse] = None
    clicks: int


class ClickEventCourse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    slug: str


class ClickEventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    course_id: uuid.UUID
    source: str
    user_agent: Optional[str] = None
    referer: Optional[str] = None
    ip_hash: Optional[str] = None
    country: Optional[str] = None
    created_at: datetime
    course: Optional[ClickEventCourse] = None
