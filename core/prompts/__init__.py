# =============================================================================
# core/prompts/ - System Prompts
# =============================================================================
# - clinical_analysis.py: protocol and output schema for video check-ins
# =============================================================================

from core.prompts.clinical_analysis import (
    ANALYSIS_REQUEST,
    CLINICAL_ANALYSIS_PROMPT,
)

__all__ = [
    "ANALYSIS_REQUEST",
    "CLINICAL_ANALYSIS_PROMPT",
]
