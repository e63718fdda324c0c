# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for authentication-related operations.
#
# Note: Actual signup/login is handled by Supabase Auth client-side.
# These routes are for getting user info after authentication.
# =============================================================================

import logging

from fastapi import APIRouter, Depends

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, UserResponse
from app.dependencies import SupabaseDep
from lib.supabase_client import is_not_found

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(
    client: SupabaseDep,
    user: AuthUser = Depends(get_current_user),
) -> UserResponse:
    """
    Get the current authenticated user's profile.

    Raises:
        401: If not authenticated
    """
    try:
        response = (
            client.table("users")
            .select("id, email, name, role, created_at, updated_at")
            .eq("id", str(user.id))
            .single()
            .execute()
        )

        if response.data:
            return UserResponse(**response.data)

    except Exception as e:
        if not is_not_found(e):
            logger.warning(f"Could not fetch user profile: {e}")

    # User exists in auth but not yet in public.users
    return UserResponse(id=user.id, email=user.email, role=user.role)


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Verify that the current token is valid.

    Returns:
        dict: Confirmation with user_id and role

    Raises:
        401: If token is invalid or expired
    """
    return {
        "valid": True,
        "user_id": str(user.id),
        "email": user.email,
        "role": user.role.value if user.role else None,
    }
