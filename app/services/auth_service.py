"""
Supabase JWT validation service.

Validates access tokens issued by Supabase Auth. Projects using the
legacy shared secret sign with HS256; projects with asymmetric signing
keys publish them as a JWKS, which is fetched and cached.
"""

import logging
from typing import Any, Dict, Optional

import httpx
from cachetools import TTLCache
from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError

from app.config import get_settings

logger = logging.getLogger(__name__)

ASYMMETRIC_ALGORITHMS = ["RS256", "ES256"]


class AuthService:
    """
    Service for validating Supabase JWT tokens.

    Handles:
    - Fetching and caching the JWKS for asymmetric keys
    - Validating JWT signature, expiration, audience, and issuer
    - Checking the admin flag in the user metadata
    """

    def __init__(self):
        self.settings = get_settings()
        # Cache JWKS for 1 hour
        self._jwks_cache: TTLCache = TTLCache(maxsize=1, ttl=3600)
        self._http_client: Optional[httpx.AsyncClient] = None

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None or self._http_client.is_closed:
            self._http_client = httpx.AsyncClient(timeout=10.0)
        return self._http_client

    async def _fetch_jwks(self) -> Dict[str, Any]:
        """
        Fetch JWKS from Supabase Auth.

        Raises:
            RuntimeError: If JWKS cannot be fetched.
        """
        cache_key = "jwks"
        if cache_key in self._jwks_cache:
            return self._jwks_cache[cache_key]

        try:
            client = await self._get_http_client()
            response = await client.get(self.settings.supabase_jwks_url)
            response.raise_for_status()
            jwks = response.json()

            self._jwks_cache[cache_key] = jwks
            logger.info("Fetched and cached Supabase JWKS")
            return jwks
        except httpx.HTTPError as e:
            logger.error(f"Failed to fetch JWKS: {e}")
            raise RuntimeError(f"Failed to fetch JWKS from Supabase: {e}")

    def _get_signing_key(self, jwks: Dict[str, Any], token: str) -> Optional[Dict[str, Any]]:
        """Find the JWKS key matching the token's kid header."""
        try:
            kid = jwt.get_unverified_header(token).get("kid")
        except JWTError as e:
            logger.error(f"Error parsing token header: {e}")
            return None

        if not kid:
            logger.warning("Token missing 'kid' header")
            return None

        for key in jwks.get("keys", []):
            if key.get("kid") == kid:
                return key

        logger.warning(f"No matching key found for kid: {kid}")
        return None

    async def validate_token(self, token: str) -> Dict[str, Any]:
        """
        Validate a Supabase access token.

        Args:
            token: The JWT token to validate.

        Returns:
            The validated token claims.

        Raises:
            ValueError: If the token is invalid, expired, or verification fails.
        """
        if self.settings.supabase_jwt_secret:
            key: Any = self.settings.supabase_jwt_secret
            algorithms = ["HS256"]
        else:
            jwks = await self._fetch_jwks()
            key = self._get_signing_key(jwks, token)
            if not key:
                raise ValueError("Unable to find appropriate signing key")
            algorithms = ASYMMETRIC_ALGORITHMS

        issuer = self.settings.supabase_issuer if self.settings.supabase_url else None
        try:
            claims = jwt.decode(
                token,
                key,
                algorithms=algorithms,
                audience=self.settings.supabase_jwt_audience,
                issuer=issuer,
                options={
                    "verify_signature": True,
                    "verify_aud": True,
                    "verify_iss": issuer is not None,
                    "verify_exp": True,
                    "require_exp": True,
                    "require_sub": True,
                },
            )
        except ExpiredSignatureError:
            logger.warning("Token has expired")
            raise ValueError("Token has expired")
        except JWTError as e:
            logger.warning(f"JWT validation failed: {e}")
            raise ValueError(f"Token validation failed: {e}")

        logger.debug(f"Successfully validated token for user: {claims.get('sub')}")
        return claims

    @staticmethod
    def is_admin(claims: Dict[str, Any]) -> bool:
        """Admins carry is_admin: true in their user metadata."""
        metadata = claims.get("user_metadata") or {}
        return metadata.get("is_admin") is True

    async def get_user_info(self, token: str) -> Dict[str, Any]:
        """
        Extract user info from a validated token.

        Returns:
            Dict with 'sub', 'email' and 'is_admin' keys.

        Raises:
            ValueError: If token validation fails.
        """
        claims = await self.validate_token(token)
        return {
            "sub": claims["sub"],
            "email": claims.get("email", ""),
            "is_admin": self.is_admin(claims),
        }

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._http_client and not self._http_client.is_closed:
            await self._http_client.aclose()


# Global service instance
auth_service = AuthService()
