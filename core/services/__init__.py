# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .analysis_client import GeminiAnalysisClient
from .check_in_service import CheckInService
from .eligibility_service import CheckInEligibilityService
from .response_validator import parse_assessment
from .staging_service import FileStager

__all__ = [
    "GeminiAnalysisClient",
    "CheckInService",
    "CheckInEligibilityService",
    "parse_assessment",
    "FileStager",
]
