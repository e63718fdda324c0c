# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication and role checks.
#
# Supports both:
# - ES256 (new Supabase JWT signing keys) via JWKS
# - HS256 (legacy Supabase JWT secret) as fallback
#
# The application role ("doctor" | "patient") is read from, in order:
#   app_metadata.role -> user_metadata.role -> user_role claim
# The top-level `role` claim is Supabase's Postgres role ("authenticated")
# and is not used.
#
# Usage:
#   from app.auth import get_current_patient, AuthUser
#
#   @router.get("/patient-only")
#   async def handler(user: AuthUser = Depends(get_current_patient)):
#       return {"user_id": user.id}
# =============================================================================

import logging
import time
from typing import Any, Optional
from uuid import UUID

import httpx
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError

from app.config import settings
from app.auth.models import AuthUser, UserRole
from app.exceptions import AuthenticationError, AuthorizationError

logger = logging.getLogger(__name__)

# Missing credentials are reported through AuthenticationError so the
# response uses the standard error envelope
security = HTTPBearer(auto_error=False)

# Cache for JWKS keys
_jwks_cache: dict = {}
_jwks_cache_time: float = 0
JWKS_CACHE_TTL = 3600  # 1 hour


def _get_jwks_url() -> str:
    """Get the JWKS URL from Supabase URL."""
    supabase_url = settings.SUPABASE_URL.rstrip('/')
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
    except Exception as e:
        logger.warning(f"Failed to fetch JWKS: {e}")
        # Return cached even if expired, as fallback
        if _jwks_cache:
            return _jwks_cache
        return {"keys": []}


def _get_signing_key(token: str) -> tuple[Any, str]:
    """
    Get the appropriate signing key for a token.

    Returns:
        Tuple of (key, algorithm) to use for verification
    """
    try:
        unverified_header = jwt.get_unverified_header(token)
    except JWTError:
        return settings.SUPABASE_JWT_SECRET, "HS256"

    alg = unverified_header.get("alg", "HS256")
    kid = unverified_header.get("kid")

    if alg == "HS256":
        return settings.SUPABASE_JWT_SECRET, "HS256"

    if kid:
        for key in _fetch_jwks().get("keys", []):
            if key.get("kid") == kid:
                return key, alg

    logger.warning(f"Could not find key for alg={alg}, kid={kid}, falling back to HS256")
    return settings.SUPABASE_JWT_SECRET, "HS256"


def extract_role(payload: dict[str, Any]) -> Optional[UserRole]:
    """
    Read the application role from a decoded token payload.

    Returns None when no recognised role is present.
    """
    candidates = [
        (payload.get("app_metadata") or {}).get("role"),
        (payload.get("user_metadata") or {}).get("role"),
        payload.get("user_role"),
    ]
    for value in candidates:
        if value in (UserRole.DOCTOR.value, UserRole.PATIENT.value):
            return UserRole(value)
    return None


def decode_token(token: str) -> AuthUser:
    """
    Verify a Supabase access token and build the AuthUser.

    Raises:
        AuthenticationError: If the token is invalid, expired or malformed
    """
    try:
        signing_key, algorithm = _get_signing_key(token)
        payload = jwt.decode(
            token,
            signing_key,
            algorithms=[algorithm],
            audience="authenticated"
        )
    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise AuthenticationError("Token has expired")
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise AuthenticationError("Invalid token")

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("JWT token missing 'sub' claim")
        raise AuthenticationError("Invalid token: missing user ID")

    try:
        user_uuid = UUID(user_id)
    except ValueError:
        logger.warning(f"Invalid UUID in token: {user_id}")
        raise AuthenticationError("Invalid token: malformed user ID")

    return AuthUser(id=user_uuid, email=payload.get("email"), role=extract_role(payload))


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> AuthUser:
    """
    Extract and validate the user from the Bearer token.

    Raises:
        AuthenticationError: 401 if the token is missing, invalid or expired
    """
    if credentials is None:
        raise AuthenticationError()

    user = decode_token(credentials.credentials)
    logger.debug(f"Authenticated user: {user.id} ({user.role})")
    return user


def require_role(role: UserRole):
    """
    Build a dependency that only admits users holding `role`.

    Usage:
        get_current_doctor = require_role(UserRole.DOCTOR)
    """

    async def dependency(user: AuthUser = Depends(get_current_user)) -> AuthUser:
        if user.role != role:
            raise AuthorizationError(role.value, user.role.value if user.role else None)
        return user

    return dependency


get_current_patient = require_role(UserRole.PATIENT)
