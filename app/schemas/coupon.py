"""Coupon request and response schemas."""

import uuid
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.common import MAX_PAGE_SIZE, PartialUpdate, UtcDatetime

DiscountType = Literal["PERCENTAGE", "FIXED"]


class CouponCreate(BaseModel):
    code: Optional[str] = Field(default=None, max_length=50)
    discount_type: DiscountType = "PERCENTAGE"
    discount_value: float = Field(ge=0)
    final_price: float = Field(ge=0)
    expires_at: Optional[UtcDatetime] = None
    is_active: bool = True
    source: Optional[str] = Field(default=None, max_length=100)
    course_id: uuid.UUID


class CouponUpdate(PartialUpdate):
    required_fields = frozenset(
        {"discount_type", "discount_value", "final_price", "is_active", "course_id"}
    )

    code: Optional[str] = Field(default=None, max_length=50)
    discount_type: Optional[DiscountType] = None
    discount_value: Optional[float] = Field(default=None, ge=0)
    final_price: Optional[float] = Field(default=None, ge=0)
    expires_at: Optional[UtcDatetime] = None
    is_active: Optional[bool] = None
    source: Optional[str] = Field(default=None, max_length=100)
    course_id: Optional[uuid.UUID] = None


class CouponSearchParams(BaseModel):
    query: Optional[str] = Field(default=None, max_length=100)
    course_id: Optional[uuid.UUID] = None
    is_active: Optional[bool] = None
    is_expired: Optional[bool] = None
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=MAX_PAGE_SIZE)


class CouponResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    code: Optional[str] = None
    discount_type: str
    discount_value: float
    final_price: float
    expires_at: Optional[datetime] = None
    is_active: bool
    source: Optional[str] = None
    verified_at: datetime
    course_id: uuid.UUID
    created_at: datetime
    updated_at: datetime


class CouponCourse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    slug: str
    original_price: float


class CouponWithCourse(CouponResponse):
    course: CouponCourse


class ActiveCoupon(BaseModel):
    """Best active coupon embedded in course responses."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    code: Optional[str] = None
    discount_type: str
    discount_value: float
    final_price: float
    expires_at: Optional[datetime] = None
    discount_percentage: int = 0

class DeactivatedCount(BaseModel):
    deactivated: int
