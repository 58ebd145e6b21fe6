"""
Affiliate redirector.

Sends visitors to the course page on its platform and records the
click in the background.
"""

import logging
import uuid
from typing import Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from fastapi import APIRouter, BackgroundTasks, Depends, Header, status
from fastapi.responses import PlainTextResponse, RedirectResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.config import get_settings
from app.db.database import get_db, get_session_factory
from app.dependencies import get_client_ip
from app.services.click_service import click_service
from app.services.course_service import course_service
from app.services.rate_limiter import rate_limiter
from app.utils import hash_ip

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Redirect"])


def with_coupon_code(url: str, coupon_code: Optional[str]) -> str:
    """Set Udemy's couponCode query parameter when a code is available."""
    if not coupon_code:
        return url

    parts = urlsplit(url)
    if "udemy.com" not in parts.netloc:
        return url

    query = dict(parse_qsl(parts.query, keep_blank_values=True))
    query["couponCode"] = coupon_code
    return urlunsplit(parts._replace(query=urlencode(query)))


def _country(value: Optional[str]) -> Optional[str]:
    if value and len(value) == 2:
        return value.upper()
    return None


@router.get("/out/{course_id}")
async def redirect_to_course(
    course_id: str,
    background_tasks: BackgroundTasks,
    src: Optional[str] = None,
    user_agent: Optional[str] = Header(None),
    referer: Optional[str] = Header(None),
    cf_ipcountry: Optional[str] = Header(None),
    ip: str = Depends(get_client_ip),
    db: AsyncSession = Depends(get_db),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> Response:
    """
    Redirect to a course's affiliate or direct URL.

    Unknown courses redirect to the site root. The click is stored
    after the response is sent; failures there never affect the
    redirect.
    """
    settings = get_settings()
    limit = rate_limiter.check_click(ip)
    if not limit.success:
        return PlainTextResponse(
            "Too Many Requests",
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            headers=limit.headers,
        )

    try:
        course = await course_service.get_course_by_id(db, uuid.UUID(course_id))
    except ValueError:
        course = None
    if not course:
        logger.info(f"Redirect requested for unknown course: {course_id}")
        return RedirectResponse(settings.site_url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)

    click = {
        "course_id": course["id"],
        "source": "TELEGRAM" if src == "tg" else "WEB",
        "user_agent": user_agent[:512] if user_agent else None,
        "referer": referer[:512] if referer else None,
        "ip_hash": hash_ip(ip, settings.ip_salt),
        "country": _country(cf_ipcountry),
    }
    background_tasks.add_task(click_service.record_click_in_background, session_factory, click)

    target = with_coupon_code(
        course["affiliate_url"] or course["direct_url"], course["coupon_code"]
    )
    return RedirectResponse(
        target,
        status_code=status.HTTP_307_TEMPORARY_REDIRECT,
        headers=limit.headers,
    )
