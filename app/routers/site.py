"""Public site content endpoints."""

from typing import Dict

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import get_db
from app.schemas.settings import AboutPageStats, HomepageStats, MissionContent
from app.services.settings_service import settings_service

router = APIRouter(prefix="/site", tags=["Site"])


@router.get("/stats", response_model=AboutPageStats)
async def get_about_page_stats(db: AsyncSession = Depends(get_db)) -> Dict[str, str]:
    return await settings_service.get_about_page_stats(db)


@router.get("/mission", response_model=MissionContent)
async def get_mission_content(db: AsyncSession = Depends(get_db)) -> Dict[str, str]:
    return await settings_service.get_mission_content(db)


@router.get("/homepage", response_model=HomepageStats)
async def get_homepage_stats(db: AsyncSession = Depends(get_db)) -> Dict[str, str]:
    return await settings_service.get_homepage_stats(db)
