"""API routers for the course discovery backend."""

from app.routers.admin import router as admin_router
from app.routers.categories import admin_router as admin_categories_router
from app.routers.categories import router as categories_router
from app.routers.coupons import admin_router as admin_coupons_router
from app.routers.courses import admin_router as admin_courses_router
from app.routers.courses import router as courses_router
from app.routers.health import router as health_router
from app.routers.platforms import admin_router as admin_platforms_router
from app.routers.platforms import router as platforms_router
from app.routers.redirect import router as redirect_router
from app.routers.roadmaps import admin_router as admin_roadmaps_router
from app.routers.roadmaps import router as roadmaps_router
from app.routers.site import router as site_router

__all__ = [
    "admin_router",
    "admin_categories_router",
    "admin_coupons_router",
    "admin_courses_router",
    "admin_platforms_router",
    "admin_roadmaps_router",
    "categories_router",
    "courses_router",
    "health_router",
    "platforms_router",
    "redirect_router",
    "roadmaps_router",
    "site_router",
]
