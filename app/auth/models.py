# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class UserRole(str, Enum):
    """Application roles. Only patients submit check-ins."""
    DOCTOR = "doctor"
    PATIENT = "patient"


class AuthUser(BaseModel):
    """
    Authenticated user extracted from a Supabase JWT.

    This is the minimal user info available from the token itself,
    without querying the database. `role` is None when the token carries
    no recognised application role.
    """
    model_config = ConfigDict(frozen=True)

    id: UUID
    email: Optional[str] = None
    role: Optional[UserRole] = None

    @property
    def is_patient(self) -> bool:
        return self.role == UserRole.PATIENT


class UserResponse(BaseModel):
    """
    Full user response for API endpoints.

    Includes additional profile data from the public.users table.
    """
    id: UUID
    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[UserRole] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
