"""Service modules for the course discovery API."""

from app.services.admin_service import AdminService, admin_service
from app.services.auth_service import AuthService, auth_service
from app.services.base import ConflictError, InvalidReferenceError
from app.services.category_service import CategoryService, category_service
from app.services.click_service import ClickService, click_service
from app.services.coupon_service import CouponService, coupon_service
from app.services.course_service import CourseService, course_service
from app.services.platform_service import PlatformService, platform_service
from app.services.rate_limiter import RateLimiter, RateLimitResult, rate_limiter
from app.services.roadmap_service import RoadmapService, roadmap_service
from app.services.settings_service import SettingsService, settings_service

__all__ = [
    "AdminService",
    "admin_service",
    "AuthService",
    "auth_service",
    "ConflictError",
    "InvalidReferenceError",
    "CategoryService",
    "category_service",
    "ClickService",
    "click_service",
    "CouponService",
    "coupon_service",
    "CourseService",
    "course_service",
    "PlatformService",
    "platform_service",
    "RateLimiter",
    "RateLimitResult",
    "rate_limiter",
    "RoadmapService",
    "roadmap_service",
    "SettingsService",
    "settings_service",
]
