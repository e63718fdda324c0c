# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# - supabase_client.py: Supabase client holder and error type
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError, normalize_uuid

__all__ = [
    "SupabaseClient",
    "SupabaseClientError",
    "normalize_uuid",
]
