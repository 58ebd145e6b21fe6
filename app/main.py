"""
Course discovery API - FastAPI Application Entry Point

Backend for a site that aggregates online courses with:
- Course search across platforms and categories
- Discount coupons and curated learning roadmaps
- Affiliate redirects with click analytics
- Supabase-authenticated admin endpoints
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings
from app.routers import (
    admin_categories_router,
    admin_coupons_router,
    admin_courses_router,
    admin_platforms_router,
    admin_roadmaps_router,
    admin_router,
    categories_router,
    courses_router,
    health_router,
    platforms_router,
    redirect_router,
    roadmaps_router,
    site_router,
)
from app.services.auth_service import auth_service

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown tasks:
    - Startup: Log configuration
    - Shutdown: Clean up resources
    """
    logger.info(f"Starting course discovery API ({settings.app_env})")
    logger.info(f"CORS origins: {settings.cors_origins}")

    yield

    logger.info("Shutting down course discovery API")
    await auth_service.close()


app = FastAPI(
    title="Course Discovery API",
    description="Online course search, coupons, roadmaps and affiliate redirects",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if not settings.is_production else None,
    redoc_url="/redoc" if not settings.is_production else None,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Public routers
app.include_router(health_router)
app.include_router(courses_router)
app.include_router(categories_router)
app.include_router(platforms_router)
app.include_router(roadmaps_router)
app.include_router(site_router)
app.include_router(redirect_router)

# Admin routers
app.include_router(admin_router)
app.include_router(admin_categories_router)
app.include_router(admin_coupons_router)
app.include_router(admin_platforms_router)
app.include_router(admin_courses_router)
app.include_router(admin_roadmaps_router)


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Course Discovery API",
        "version": "1.0.0",
        "status": "operational",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=not settings.is_production,
    )
