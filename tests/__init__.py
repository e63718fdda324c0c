# =============================================================================
# tests/ - Test Suite
# =============================================================================
# Run with: pytest
# Provider, database and auth are faked; no network access is needed.
# =============================================================================
