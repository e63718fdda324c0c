# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - analyze.py: Video check-in submission
# - patient.py: Check-in eligibility and history for patients
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import analyze
from . import health
from . import patient

__all__ = [
    "analyze",
    "health",
    "patient",
]
