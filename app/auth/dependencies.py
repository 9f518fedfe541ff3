# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Gates the admin API on a Supabase Auth session.
#
# Supports both:
# - ES256/RS256 (Supabase JWT signing keys) via JWKS
# - HS256 (legacy Supabase JWT secret) as fallback
#
# Usage:
#   from app.auth import get_current_user, AuthUser
#
#   @router.get("/admin/thing")
#   async def admin_only(user: AuthUser = Depends(get_current_user)):
#       return {"user_id": user.id}
# =============================================================================

import logging
import time
from uuid import UUID

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt

from app.auth.models import AuthUser
from app.config import get_settings

logger = logging.getLogger(__name__)

AUDIENCE = "authenticated"

# HTTP Bearer token extractor
security = HTTPBearer(auto_error=False)

# Cache for JWKS keys
_jwks_cache: dict = {}
_jwks_cache_time: float = 0
JWKS_CACHE_TTL = 3600  # 1 hour


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _get_jwks_url() -> str:
    """JWKS endpoint of the project's auth service."""
    supabase_url = get_settings().SUPABASE_URL.rstrip("/")
    return f"{supabase_url}/auth/v1/.well-known/jwks.json"


def _fetch_jwks() -> dict:
    """Fetch JWKS from Supabase with caching."""
    global _jwks_cache, _jwks_cache_time

    current_time = time.time()
    if _jwks_cache and (current_time - _jwks_cache_time) < JWKS_CACHE_TTL:
        return _jwks_cache

    try:
        jwks_url = _get_jwks_url()
        response = httpx.get(jwks_url, timeout=10)
        response.raise_for_status()
        _jwks_cache = response.json()
        _jwks_cache_time = current_time
        logger.debug(f"Fetched JWKS from {jwks_url}")
        return _jwks_cache
    except httpx.HTTPError as e:
        logger.warning(f"Failed to fetch JWKS: {e}")
        # Stale keys beat no keys
        return _jwks_cache or {"keys": []}


def _get_signing_key(token: str) -> tuple[str | dict, str]:
    """
    Pick the key that verifies token.

    Returns:
        Tuple of (key, algorithm) to use for verification
    """
    secret = get_settings().SUPABASE_JWT_SECRET

    try:
        header = jwt.get_unverified_header(token)
    except JWTError:
        return secret, "HS256"

    alg = header.get("alg", "HS256")
    kid = header.get("kid")

    if alg == "HS256":
        return secret, "HS256"

    if kid:
        for key in _fetch_jwks().get("keys", []):
            if key.get("kid") == kid:
                return key, alg

    logger.warning(f"Could not find key for alg={alg}, kid={kid}, falling back to HS256")
    return secret, "HS256"


def decode_token(token: str) -> AuthUser:
    """
    Verify a Supabase access token and extract the user.

    Raises:
        HTTPException: 401 if the token is invalid, expired or malformed
    """
    try:
        signing_key, algorithm = _get_signing_key(token)
        payload = jwt.decode(token, signing_key, algorithms=[algorithm], audience=AUDIENCE)
    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise _unauthorized("Token has expired")
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise _unauthorized(f"Invalid token: {e}")

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("JWT token missing 'sub' claim")
        raise _unauthorized("Invalid token: missing user ID")

    try:
        user_uuid = UUID(user_id)
    except ValueError:
        logger.warning(f"Invalid UUID in token: {user_id}")
        raise _unauthorized("Invalid token: malformed user ID")

    return AuthUser(id=user_uuid, email=payload.get("email"), role=payload.get("role"))


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> AuthUser:
    """
    Require a valid admin session.

    Raises:
        HTTPException: 401 if the bearer token is missing, invalid or expired
    """
    if credentials is None:
        logger.warning("Admin request without bearer token")
        raise _unauthorized("Not authenticated")

    user = decode_token(credentials.credentials)
    logger.debug(f"Authenticated user: {user.id}")
    return user


async def get_current_user_optional(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> AuthUser | None:
    """
    The current user, or None when there is no valid session.

    Used by the session check, which reports rather than rejects.
    """
    if credentials is None:
        return None

    try:
        return decode_token(credentials.credentials)
    except HTTPException:
        return None
