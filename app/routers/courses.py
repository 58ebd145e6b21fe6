"""Course endpoints."""

import uuid
from typing import Annotated, Any, Dict, List

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import get_db
from app.dependencies import get_current_admin, search_rate_limit
from app.routers.errors import conflict, not_found
from app.schemas.common import Page, SuccessResponse
from app.schemas.course import (
    AdminCourseSearchParams,
    CourseCreate,
    CourseFullDetails,
    CourseResponse,
    CourseSearchParams,
    CourseUpdate,
    CourseWithDetails,
    LearningOutcomeResponse,
    LearningOutcomesUpdate,
    SyllabusSectionResponse,
    SyllabusUpdate,
)
from app.services.course_service import course_service

router = APIRouter(prefix="/courses", tags=["Courses"])
admin_router = APIRouter(
    prefix="/admin/courses",
    tags=["Admin"],
    dependencies=[Depends(get_current_admin)],
)

SEARCH_CACHE_CONTROL = "public, s-maxage=60, stale-while-revalidate=300"


@router.get(
    "",
    response_model=Page[CourseWithDetails],
    dependencies=[Depends(search_rate_limit)],
)
async def search_courses(
    params: Annotated[CourseSearchParams, Query()],
    response: Response,
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    """
    Search active courses.

    Rate limited per client IP. Responses may be cached by the CDN
    for a minute.

    Raises:
        HTTPException(429): If the client exceeded the search limit.
    """
    result = await course_service.search_courses(db, **params.model_dump())
    response.headers["Cache-Control"] = SEARCH_CACHE_CONTROL
    return result


@router.get("/featured", response_model=List[CourseWithDetails])
async def get_featured_courses(
    limit: int = Query(8, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
) -> List[Dict[str, Any]]:
    """Featured courses, best rated first."""
    result = await course_service.get_featured_courses(db, limit=limit)
    return result["data"]


@router.get("/top-discounts", response_model=List[CourseWithDetails])
async def get_top_discount_courses(
    limit: int = Query(8, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
) -> List[Dict[str, Any]]:
    """Courses with an active coupon, biggest discount first."""
    result = await course_service.get_top_discount_courses(db, limit=limit)
    return result["data"]


@router.get("/{slug}", response_model=CourseFullDetails)
async def get_course(slug: str, db: AsyncSession = Depends(get_db)) -> Dict[str, Any]:
    """Course detail page with learning outcomes and syllabus."""
    course = await course_service.get_course_with_full_details(db, slug)
    if not course:
        raise not_found("Course")
    return course


@admin_router.get("", response_model=Page[CourseResponse])
async def list_courses(
    params: Annotated[AdminCourseSearchParams, Query()],
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    return await course_service.list_courses(db, **params.model_dump())


@admin_router.post("", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
async def create_course(
    body: CourseCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Create a course.

    Raises:
        HTTPException(409): If the slug is taken or the platform or
            category does not exist.
    """
    try:
        return await course_service.create_course(db, body.model_dump())
    except ValueError as e:
        raise conflict(e)


@admin_router.get("/{course_id}", response_model=CourseResponse)
async def get_course_by_id(
    course_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
):
    course = await course_service.get_course(db, course_id)
    if not course:
        raise not_found("Course")
    return course


@admin_router.put("/{course_id}", response_model=CourseResponse)
async def update_course(
    course_id: uuid.UUID,
    body: CourseUpdate,
    db: AsyncSession = Depends(get_db),
):
    try:
        course = await course_service.update_course(db, course_id, body.changes())
    except ValueError as e:
        raise conflict(e)
    if not course:
        raise not_found("Course")
    return course


@admin_router.delete("/{course_id}", response_model=SuccessResponse)
async def delete_course(
    course_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    if not await course_service.delete_course(db, course_id):
        raise not_found("Course")
    return {"success": True}


@admin_router.put("/{course_id}/outcomes", response_model=List[LearningOutcomeResponse])
async def update_learning_outcomes(
    course_id: uuid.UUID,
    body: LearningOutcomesUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Replace all learning outcomes of a course."""
    outcomes = await course_service.update_course_learning_outcomes(
        db, course_id, [outcome.model_dump() for outcome in body.outcomes]
    )
    if outcomes is None:
        raise not_found("Course")
    return outcomes


@admin_router.put("/{course_id}/syllabus", response_model=List[SyllabusSectionResponse])
async def update_syllabus(
    course_id: uuid.UUID,
    body: SyllabusUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Replace the whole syllabus of a course."""
    sections = await course_service.update_course_syllabus(
        db, course_id, [section.model_dump() for section in body.sections]
    )
    if sections is None:
        raise not_found("Course")
    return sections
