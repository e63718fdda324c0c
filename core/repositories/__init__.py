# =============================================================================
# core/repositories/ - Persistence Layer
# =============================================================================

from .daily_log_repository import DailyLogRepository, calculate_streak
from .follow_up_repository import FollowUpRepository

__all__ = [
    "DailyLogRepository",
    "FollowUpRepository",
    "calculate_streak",
]
