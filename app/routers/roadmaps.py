"""Roadmap endpoints."""

import uuid
from typing import Annotated, Any, Dict, List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import get_db
from app.dependencies import get_current_admin
from app.routers.errors import conflict, not_found
from app.schemas.common import Page, SuccessResponse
from app.schemas.roadmap import (
    RoadmapCreate,
    RoadmapDetail,
    RoadmapResponse,
    RoadmapSearchParams,
    RoadmapStepCreate,
    RoadmapStepReorderRequest,
    RoadmapStepResponse,
    RoadmapSummary,
    RoadmapUpdate,
    RoadmapWithSteps,
)
from app.services.roadmap_service import roadmap_service

router = APIRouter(prefix="/roadmaps", tags=["Roadmaps"])
admin_router = APIRouter(
    prefix="/admin/roadmaps",
    tags=["Admin"],
    dependencies=[Depends(get_current_admin)],
)


@router.get("", response_model=Page[RoadmapSummary])
async def search_roadmaps(
    params: Annotated[RoadmapSearchParams, Query()],
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    """Active roadmaps; the is_active filter is ignored on the public listing."""
    filters = params.model_dump()
    filters["is_active"] = True
    return await roadmap_service.search_roadmaps(db, **filters)


@router.get("/featured", response_model=List[RoadmapSummary])
async def get_featured_roadmaps(
    limit: int = Query(4, ge=1, le=20),
    db: AsyncSession = Depends(get_db),
) -> List[Dict[str, Any]]:
    return await roadmap_service.get_featured_roadmaps(db, limit=limit)


@router.get("/{slug}", response_model=RoadmapWithSteps)
async def get_roadmap(slug: str, db: AsyncSession = Depends(get_db)) -> Dict[str, Any]:
    """
    Roadmap page with ordered course steps and price totals.

    Raises:
        HTTPException(404): If no active roadmap has this slug.
    """
    roadmap = await roadmap_service.get_roadmap_by_slug(db, slug)
    if not roadmap:
        raise not_found("Roadmap")
    return roadmap


@admin_router.get("", response_model=Page[RoadmapSummary])
async def admin_search_roadmaps(
    params: Annotated[RoadmapSearchParams, Query()],
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    return await roadmap_service.search_roadmaps(db, **params.model_dump())


@admin_router.post("", response_model=RoadmapResponse, status_code=status.HTTP_201_CREATED)
async def create_roadmap(
    body: RoadmapCreate,
    db: AsyncSession = Depends(get_db),
):
    try:
        return await roadmap_service.create_roadmap(db, body.model_dump())
    except ValueError as e:
        raise conflict(e)


@admin_router.get("/{roadmap_id}", response_model=RoadmapDetail)
async def get_roadmap_by_id(
    roadmap_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    roadmap = await roadmap_service.get_roadmap_by_id(db, roadmap_id)
    if not roadmap:
        raise not_found("Roadmap")
    return roadmap


@admin_router.put("/{roadmap_id}", response_model=RoadmapResponse)
async def update_roadmap(
    roadmap_id: uuid.UUID,
    body: RoadmapUpdate,
    db: AsyncSession = Depends(get_db),
):
    try:
        roadmap = await roadmap_service.update_roadmap(db, roadmap_id, body.changes())
    except ValueError as e:
        raise conflict(e)
    if not roadmap:
        raise not_found("Roadmap")
    return roadmap


@admin_router.delete("/{roadmap_id}", response_model=SuccessResponse)
async def delete_roadmap(
    roadmap_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    if not await roadmap_service.delete_roadmap(db, roadmap_id):
        raise not_found("Roadmap")
    return {"success": True}


@admin_router.post(
    "/{roadmap_id}/steps",
    response_model=RoadmapStepResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_roadmap_step(
    roadmap_id: uuid.UUID,
    body: RoadmapStepCreate,
    db: AsyncSession = Depends(get_db),
):
    """
    Add a course step to a roadmap.

    Raises:
        HTTPException(404): If the roadmap does not exist.
        HTTPException(409): If the course does not exist.
    """
    try:
        step = await roadmap_service.add_roadmap_step(db, roadmap_id, body.model_dump())
    except ValueError as e:
        raise conflict(e)
    if not step:
        raise not_found("Roadmap")
    return step


@admin_router.put("/{roadmap_id}/steps/reorder", response_model=SuccessResponse)
async def reorder_roadmap_steps(
    roadmap_id: uuid.UUID,
    body: RoadmapStepReorderRequest,
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    reordered = await roadmap_service.reorder_roadmap_steps(
        db, roadmap_id, [item.model_dump() for item in body.items]
    )
    if not reordered:
        raise not_found("Roadmap")
    return {"success": True}


@admin_router.delete("/{roadmap_id}/steps/{step_id}", response_model=SuccessResponse)
async def remove_roadmap_step(
    roadmap_id: uuid.UUID,
    step_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    if not await roadmap_service.remove_roadmap_step(db, roadmap_id, step_id):
        raise not_found("Roadmap step")
    return {"success": True}
