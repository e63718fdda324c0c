# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides JWT-based authentication using Supabase Auth, plus role checks.
#
# Usage:
#   from app.auth import get_current_patient, AuthUser
#
#   @router.post("/analyze")
#   async def analyze(user: AuthUser = Depends(get_current_patient)):
#       return {"user_id": user.id}
# =============================================================================

from app.auth.dependencies import (
    decode_token,
    extract_role,
    get_current_patient,
    get_current_user,
    require_role,
)
from app.auth.models import AuthUser, UserResponse, UserRole

__all__ = [
    "decode_token",
    "extract_role",
    "get_current_patient",
    "get_current_user",
    "require_role",
    "AuthUser",
    "UserResponse",
    "UserRole",
]
