# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# Creates the Supabase client once per process and exposes the error type
# the repositories raise. Repositories receive the client instance through
# their constructor (see app/dependencies.py) rather than reaching for it
# themselves, so tests can hand them a mock.
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   client = SupabaseClient.get_client()
#   client.table("daily_logs").select("*").limit(1).execute()
# =============================================================================

from __future__ import annotations

import logging
from typing import Any
from uuid import UUID

from supabase import create_client, Client

from app.config import settings

logger = logging.getLogger(__name__)


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Attributes:
        code: Error code for categorization
        message: Human-readable error message
        details: Additional context for logging
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


def normalize_uuid(value: str | UUID) -> str:
    """Convert UUID to string for queries."""
    return str(value) if isinstance(value, UUID) else value


def is_not_found(error: Exception) -> bool:
    """True when PostgREST reports that `.single()` matched no rows."""
    return "PGRST116" in str(error)


class SupabaseClient:
    """
    Process-wide holder for the Supabase client.

    Uses the service_role key, which bypasses Row Level Security. Ownership
    checks therefore happen in the API layer (every query is scoped to the
    authenticated user's id).
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the Supabase client.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                )
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the cached client (used by tests)."""
        cls._instance = None
