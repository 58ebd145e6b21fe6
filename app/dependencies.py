"""
FastAPI dependencies for authentication, authorization and rate limiting.
"""

import logging
from typing import Any, Callable, Dict, Optional

from fastapi import Depends, Header, HTTPException, Request, Response, status

from app.services.auth_service import auth_service
from app.services.rate_limiter import RateLimitResult, rate_limiter
from app.utils import client_ip

logger = logging.getLogger(__name__)


async def get_current_user(
    authorization: Optional[str] = Header(None, description="Bearer token"),
) -> Dict[str, Any]:
    """
    Validate JWT token and return user info.

    Extracts the Bearer token from the Authorization header,
    validates it against Supabase Auth, and returns user claims.

    Args:
        authorization: Authorization header value (Bearer <token>).

    Returns:
        Dict with 'sub', 'email' and 'is_admin' keys.

    Raises:
        HTTPException(401): If token is missing, invalid, or expired.
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization header format",
            headers={"WWW-Authenticate": "Bearer"},
        )

    token = authorization[7:]  # Remove "Bearer " prefix

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return await auth_service.get_user_info(token)
    except ValueError as e:
        logger.warning(f"Token validation failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_current_admin(
    user_info: Dict[str, Any] = Depends(get_current_user),
) -> Dict[str, Any]:
    """
    Require an authenticated admin.

    Raises:
        HTTPException(403): If the user is not flagged as admin.
    """
    if not user_info.get("is_admin"):
        logger.warning(f"Non-admin user {user_info.get('sub')} denied admin access")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user_info


def get_client_ip(request: Request) -> str:
    """First X-Forwarded-For address, else the peer address."""
    peer = request.client.host if request.client else "unknown"
    return client_ip(request.headers.get("x-forwarded-for"), peer)


def require_rate_limit(check: Callable[[str], RateLimitResult]):
    """
    Dependency factory that applies a rate limit per client IP.

    Args:
        check: Limiter method taking the client identifier.

    Returns:
        Dependency that sets rate-limit headers on the response and
        rejects the request with 429 once the limit is exceeded.
    """
    async def check_limit(
        response: Response,
        ip: str = Depends(get_client_ip),
    ) -> RateLimitResult:
        result = check(ip)
        if not result.success:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Too many requests. Please try again later.",
                headers=result.headers,
            )
        response.headers.update(result.headers)
        return result

    return check_limit


# Convenience dependencies for the limited endpoints
search_rate_limit = require_rate_limit(lambda ip: rate_limiter.check_search(ip))
click_rate_limit = require_rate_limit(lambda ip: rate_limiter.check_click(ip))
