# =============================================================================
# core/services/eligibility_service.py - Check-in Eligibility
# =============================================================================
# A patient may check in when they are under an accepted follow-up with a
# doctor and have not already checked in today (UTC).
# =============================================================================

import logging
from typing import Protocol
from uuid import UUID

from core.models.daily_log import CheckInEligibility

logger = logging.getLogger(__name__)

NO_FOLLOW_UP_MESSAGE = "You need to be under follow-up with a doctor to check in."
ALREADY_CHECKED_IN_MESSAGE = "You already checked in today. Come back tomorrow!"


class FollowUpLookup(Protocol):
    def has_active_follow_up_by_patient_id(self, patient_id: UUID | str) -> bool: ...


class CheckInLookup(Protocol):
    def has_checked_in_today(self, user_id: UUID | str) -> bool: ...


class CheckInEligibilityService:
    """Decides whether a patient may submit a check-in right now."""

    def __init__(self, follow_ups: FollowUpLookup, daily_logs: CheckInLookup):
        self.follow_ups = follow_ups
        self.daily_logs = daily_logs

    def get_eligibility(self, patient_id: UUID | str) -> CheckInEligibility:
        has_active_follow_up = self.follow_ups.has_active_follow_up_by_patient_id(patient_id)
        has_checked_in_today = self.daily_logs.has_checked_in_today(patient_id)

        message = None
        if not has_active_follow_up:
            message = NO_FOLLOW_UP_MESSAGE
        elif has_checked_in_today:
            message = ALREADY_CHECKED_IN_MESSAGE

        return CheckInEligibility(
            can_check_in=has_active_follow_up and not has_checked_in_today,
            has_active_follow_up=has_active_follow_up,
            has_checked_in_today=has_checked_in_today,
            message=message,
        )

    def can_patient_check_in(self, patient_id: UUID | str) -> bool:
        return self.get_eligibility(patient_id).can_check_in
