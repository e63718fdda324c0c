# =============================================================================
# core/models/daily_log.py - Daily Log Schemas
# =============================================================================
# These models define the persisted check-in record and the API contract
# around it:
# - DailyLog: one row of the daily_logs table
# - CheckInData / CheckInResponse: the body returned after a check-in
# - StreakInfo: consecutive-day check-in statistics
# - CheckInEligibility: whether a patient may check in right now
#
# A daily log stores only the derived assessment and risk flag. It never
# stores raw media or any reference to it.
# =============================================================================

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DailyLog(BaseModel):
    """
    One persisted check-in.

    Example:
        {
            "id": "550e8400-e29b-41d4-a716-446655440000",
            "user_id": "660e8400-e29b-41d4-a716-446655440001",
            "mood_score": 6,
            "risk_flag": false,
            "analysis_json": {"mood_score": 6, ...},
            "created_at": "2026-01-15T10:30:00Z"
        }
    """

    id: UUID = Field(..., description="Unique daily log identifier")
    user_id: UUID = Field(..., description="Patient who submitted the check-in")
    mood_score: int = Field(..., ge=1, le=10)
    risk_flag: bool = Field(..., description="Aggregate clinical concern flag")
    analysis_json: dict[str, Any] = Field(..., description="Validated assessment")
    created_at: datetime


class CheckInData(BaseModel):
    """Check-in result as returned to the client (camelCase on the wire)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: UUID
    mood_score: int
    risk_flag: bool
    analysis: dict[str, Any]
    created_at: datetime

    @classmethod
    def from_daily_log(cls, log: DailyLog) -> "CheckInData":
        return cls(
            id=log.id,
            mood_score=log.mood_score,
            risk_flag=log.risk_flag,
            analysis=log.analysis_json,
            created_at=log.created_at,
        )


class CheckInResponse(BaseModel):
    """Success envelope for POST /analyze."""
    success: bool = True
    data: CheckInData


class StreakInfo(BaseModel):
    """Consecutive-day check-in statistics for one patient."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    current_streak: int = 0
    longest_streak: int = 0
    total_check_ins: int = 0
    last_check_in: datetime | None = None


class CheckInEligibility(BaseModel):
    """Whether a patient may submit a check-in right now, and why not."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    can_check_in: bool
    has_active_follow_up: bool
    has_checked_in_today: bool
    message: str | None = None


class CheckInHistory(BaseModel):
    """Response body for GET /patient/check-ins."""
    success: bool = True
    data: list[CheckInData]
    streak: StreakInfo
