# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the check-in pipeline and its collaborators:
# - models/: Pydantic schemas and transient media handles
# - prompts/: System instruction for the analysis model
# - repositories/: Supabase-backed persistence
# - services/: Staging, analysis client, validation, orchestration
#
# Routes live in app/; nothing here registers HTTP endpoints.
# =============================================================================
