# =============================================================================
# core/models/ - Data Models
# =============================================================================
# This package contains the schemas shared by services and routes:
# - assessment.py: the clinical assessment the model must return
# - daily_log.py: persisted check-ins and API response bodies
# - media.py: transient upload / staged video handles
# - remote_file.py: provider-side file lifecycle (tagged state)
# =============================================================================

# -----------------------------------------------------------------------------
# Assessment Models - Model output contract
# -----------------------------------------------------------------------------
from .assessment import (
    LOW_MOOD_THRESHOLD,
    AffectType,
    Assessment,
    Biomarkers,
    EyeContact,
    MentalStatusExam,
    RiskFlags,
    SpeechLatency,
    compute_risk_flag,
)

# -----------------------------------------------------------------------------
# Daily Log Models - Persistence and API bodies
# -----------------------------------------------------------------------------
from .daily_log import (
    CheckInData,
    CheckInEligibility,
    CheckInHistory,
    CheckInResponse,
    DailyLog,
    StreakInfo,
)

# -----------------------------------------------------------------------------
# Transient Media - Never persisted
# -----------------------------------------------------------------------------
from .media import StagedVideo, VideoUpload
from .remote_file import (
    Active,
    Failed,
    Processing,
    RemoteFile,
    RemoteFileState,
    Uploading,
)

__all__ = [
    # Assessment
    "LOW_MOOD_THRESHOLD",
    "AffectType",
    "Assessment",
    "Biomarkers",
    "EyeContact",
    "MentalStatusExam",
    "RiskFlags",
    "SpeechLatency",
    "compute_risk_flag",
    # Daily log
    "CheckInData",
    "CheckInEligibility",
    "CheckInHistory",
    "CheckInResponse",
    "DailyLog",
    "StreakInfo",
    # Media
    "StagedVideo",
    "VideoUpload",
    # Remote file
    "Active",
    "Failed",
    "Processing",
    "RemoteFile",
    "RemoteFileState",
    "Uploading",
]
