# =============================================================================
# app/routers/patient.py - Patient Check-in Status Endpoints
# =============================================================================
# Read-only views a patient uses before and after checking in:
# - GET /patient/eligibility  - may I check in right now?
# - GET /patient/check-ins    - my recent check-ins and streak
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from app.auth import AuthUser, get_current_patient
from app.dependencies import DailyLogRepositoryDep, EligibilityServiceDep
from core.models.daily_log import CheckInData, CheckInEligibility, CheckInHistory

logger = logging.getLogger(__name__)

router = APIRouter()


class EligibilityResponse(BaseModel):
    """Response body for GET /patient/eligibility."""
    success: bool = True
    data: CheckInEligibility


@router.get("/eligibility", response_model=EligibilityResponse)
async def get_eligibility(
    eligibility: EligibilityServiceDep,
    user: AuthUser = Depends(get_current_patient),
) -> EligibilityResponse:
    """
    Check whether the current patient can submit a check-in.

    Returns:
        {"success": true, "data": {"canCheckIn", "hasActiveFollowUp", "hasCheckedInToday", "message"}}
    """
    return EligibilityResponse(data=eligibility.get_eligibility(user.id))


@router.get("/check-ins", response_model=CheckInHistory)
async def list_check_ins(
    daily_logs: DailyLogRepositoryDep,
    limit: Annotated[int, Query(ge=1, le=365, description="Maximum check-ins to return")] = 30,
    user: AuthUser = Depends(get_current_patient),
) -> CheckInHistory:
    """
    List the current patient's recent check-ins, newest first, with streak info.
    """
    logs = daily_logs.find_by_user_id(user.id, limit=limit)
    streak = daily_logs.get_streak(user.id)

    logger.debug(f"Returning {len(logs)} check-ins for user {user.id}")
    return CheckInHistory(
        data=[CheckInData.from_daily_log(log) for log in logs],
        streak=streak,
    )
