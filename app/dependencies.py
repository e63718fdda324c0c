# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for the check-in pipeline and its
# collaborators. Routes receive fully-built services through Depends();
# tests replace any of these providers via app.dependency_overrides.
# =============================================================================

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from google import genai
from supabase import Client

from app.config import Settings, get_settings
from core.repositories import DailyLogRepository, FollowUpRepository
from core.services import (
    CheckInEligibilityService,
    CheckInService,
    FileStager,
    GeminiAnalysisClient,
)
from lib.supabase_client import SupabaseClient


def get_supabase_client() -> Client:
    """
    Get the Supabase client instance.
    """
    return SupabaseClient.get_client()


@lru_cache
def _get_genai_client(api_key: str) -> genai.Client:
    return genai.Client(api_key=api_key)


def get_daily_log_repository(
    client: Annotated[Client, Depends(get_supabase_client)],
) -> DailyLogRepository:
    return DailyLogRepository(client)


def get_follow_up_repository(
    client: Annotated[Client, Depends(get_supabase_client)],
) -> FollowUpRepository:
    return FollowUpRepository(client)


def get_eligibility_service(
    follow_ups: Annotated[FollowUpRepository, Depends(get_follow_up_repository)],
    daily_logs: Annotated[DailyLogRepository, Depends(get_daily_log_repository)],
) -> CheckInEligibilityService:
    return CheckInEligibilityService(follow_ups, daily_logs)


def get_file_stager(
    settings: Annotated[Settings, Depends(get_settings)],
) -> FileStager:
    return FileStager(settings.TEMP_DIR)


def get_analysis_client(
    settings: Annotated[Settings, Depends(get_settings)],
) -> GeminiAnalysisClient:
    return GeminiAnalysisClient(
        client=_get_genai_client(settings.GOOGLE_API_KEY),
        model=settings.GEMINI_MODEL,
        poll_interval=settings.GEMINI_POLL_INTERVAL_SECONDS,
        max_poll_attempts=settings.GEMINI_MAX_POLL_ATTEMPTS,
        poll_timeout=settings.GEMINI_POLL_TIMEOUT_SECONDS,
    )


def get_check_in_service(
    settings: Annotated[Settings, Depends(get_settings)],
    stager: Annotated[FileStager, Depends(get_file_stager)],
    analysis_client: Annotated[GeminiAnalysisClient, Depends(get_analysis_client)],
    daily_logs: Annotated[DailyLogRepository, Depends(get_daily_log_repository)],
    eligibility: Annotated[CheckInEligibilityService, Depends(get_eligibility_service)],
) -> CheckInService:
    return CheckInService(
        stager=stager,
        analysis_client=analysis_client,
        daily_logs=daily_logs,
        eligibility=eligibility if settings.REQUIRE_CHECK_IN_ELIGIBILITY else None,
        max_upload_bytes=settings.max_upload_size_bytes,
        allowed_content_types=settings.allowed_video_types_list,
    )


# Type aliases for dependency injection
SupabaseDep = Annotated[Client, Depends(get_supabase_client)]
DailyLogRepositoryDep = Annotated[DailyLogRepository, Depends(get_daily_log_repository)]
EligibilityServiceDep = Annotated[CheckInEligibilityService, Depends(get_eligibility_service)]
CheckInServiceDep = Annotated[CheckInService, Depends(get_check_in_service)]
