# =============================================================================
# core/repositories/daily_log_repository.py - Daily Log Persistence
# =============================================================================
# Reads and writes the daily_logs table:
#
#   daily_logs(id uuid, user_id uuid, mood_score int, risk_flag bool,
#              analysis_json jsonb, created_at timestamptz)
#
# Writes are insert-only. Nothing in this table references media.
# =============================================================================

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Iterable
from uuid import UUID

from supabase import Client

from core.models.daily_log import DailyLog, StreakInfo
from lib.supabase_client import SupabaseClientError, normalize_uuid

logger = logging.getLogger(__name__)

TABLE = "daily_logs"


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def calculate_streak(timestamps: Iterable[datetime], today: date | None = None) -> StreakInfo:
    """
    Compute check-in streaks from log timestamps.

    Multiple check-ins on one calendar day count once toward a streak. The
    current streak only counts if the latest check-in was today or
    yesterday (UTC).

    Args:
        timestamps: created_at of every log for the user, any order
        today: Reference day (defaults to the current UTC date)

    Returns:
        StreakInfo with current/longest streak, total and last check-in
    """
    stamps = sorted((_as_utc(ts) for ts in timestamps), reverse=True)
    if not stamps:
        return StreakInfo()

    today = today or _utc_today()
    days = sorted({ts.date() for ts in stamps}, reverse=True)

    current_streak = 0
    if days[0] in (today, today - timedelta(days=1)):
        current_streak = 1
        for previous, day in zip(days, days[1:]):
            if previous - day != timedelta(days=1):
                break
            current_streak += 1

    longest_streak = 1
    run = 1
    for previous, day in zip(days, days[1:]):
        if previous - day == timedelta(days=1):
            run += 1
        else:
            run = 1
        longest_streak = max(longest_streak, run)

    return StreakInfo(
        current_streak=current_streak,
        longest_streak=max(longest_streak, current_streak),
        total_check_ins=len(stamps),
        last_check_in=stamps[0],
    )


class DailyLogRepository:
    """
    Supabase-backed store for check-in results.
    """

    def __init__(self, client: Client):
        self.client = client

    def create(
        self,
        user_id: UUID | str,
        mood_score: int,
        risk_flag: bool,
        analysis_json: dict[str, Any],
    ) -> DailyLog:
        """
        Insert one daily log.

        Raises:
            SupabaseClientError: If the insert fails or returns no row
        """
        data = {
            "user_id": normalize_uuid(user_id),
            "mood_score": mood_score,
            "risk_flag": risk_flag,
            "analysis_json": analysis_json,
        }

        try:
            response = self.client.table(TABLE).insert(data).execute()
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to insert daily log: {e}",
                code="INSERT_DAILY_LOG_FAILED",
                details={"user_id": data["user_id"]},
            )

        if not response.data:
            raise SupabaseClientError(
                message="Insert returned no data",
                code="INSERT_NO_DATA",
            )

        log = DailyLog.model_validate(response.data[0])
        logger.info(f"Created daily log {log.id} for user {log.user_id}")
        return log

    def find_by_user_id(self, user_id: UUID | str, limit: int = 30) -> list[DailyLog]:
        """Most recent logs for a user, newest first."""
        try:
            response = (
                self.client.table(TABLE)
                .select("*")
                .eq("user_id", normalize_uuid(user_id))
                .order("created_at", desc=True)
                .limit(limit)
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch daily logs: {e}",
                code="FETCH_DAILY_LOGS_FAILED",
                details={"user_id": normalize_uuid(user_id), "limit": limit},
            )

        return [DailyLog.model_validate(row) for row in response.data or []]

    def get_latest_by_user_id(self, user_id: UUID | str) -> DailyLog | None:
        logs = self.find_by_user_id(user_id, limit=1)
        return logs[0] if logs else None

    def has_checked_in_today(self, user_id: UUID | str, today: date | None = None) -> bool:
        latest = self.get_latest_by_user_id(user_id)
        if latest is None:
            return False
        return _as_utc(latest.created_at).date() == (today or _utc_today())

    def get_streak(self, user_id: UUID | str, today: date | None = None) -> StreakInfo:
        try:
            response = (
                self.client.table(TABLE)
                .select("created_at")
                .eq("user_id", normalize_uuid(user_id))
                .order("created_at", desc=True)
                .execute()
            )
        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch check-in history: {e}",
                code="FETCH_STREAK_FAILED",
                details={"user_id": normalize_uuid(user_id)},
            )

        timestamps = [
            datetime.fromisoformat(row["created_at"].replace("Z", "+00:00"))
            for row in response.data or []
        ]
        return calculate_streak(timestamps, today=today)
