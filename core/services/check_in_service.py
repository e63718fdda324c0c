# =============================================================================
# core/services/check_in_service.py - Video Check-in Pipeline
# =============================================================================
# Orchestrates one patient check-in:
#
#   1. authorize (patient role) - before any other work
#   2. eligibility (optional)   - active follow-up, not yet checked in today
#   3. validate upload          - non-empty, size limit, content type allow list
#   4. stage locally            \  two independent scopes; each deletes its
#   5. analyze remotely         /  own copy of the video on every exit path
#   6. validate the response    - strict Assessment schema
#   7. compute risk flag        - any boolean flag, or mood_score < 3
#   8. persist                  - derived JSON only, single insert
#
# Any failure in 1-7 aborts with nothing persisted.
#
# Usage:
#   service = CheckInService(stager, analysis_client, daily_logs)
#   log = await service.submit(user, VideoUpload(content, "video/mp4", "clip.mp4"))
# =============================================================================

import logging
from pathlib import Path
from typing import Any, Protocol
from uuid import UUID

from app.auth.models import AuthUser, UserRole
from app.exceptions import (
    AuthorizationError,
    CheckInNotAllowedError,
    EmptyVideoError,
    InvalidVideoTypeError,
    MissingVideoError,
    PersistenceError,
    VideoTooLargeError,
)
from core.models.assessment import compute_risk_flag
from core.models.daily_log import DailyLog
from core.models.media import VideoUpload
from core.services.eligibility_service import CheckInEligibilityService
from core.services.response_validator import parse_assessment
from core.services.staging_service import FileStager
from lib.supabase_client import SupabaseClientError

logger = logging.getLogger(__name__)

DEFAULT_MAX_UPLOAD_BYTES = 100 * 1024 * 1024
DEFAULT_ALLOWED_CONTENT_TYPES = ("video/mp4", "video/webm", "video/quicktime")


class VideoAnalyzer(Protocol):
    async def analyze(self, path: Path, mime_type: str) -> str: ...


class DailyLogWriter(Protocol):
    def create(
        self,
        user_id: UUID | str,
        mood_score: int,
        risk_flag: bool,
        analysis_json: dict[str, Any],
    ) -> DailyLog: ...


def base_content_type(content_type: str | None) -> str:
    """'video/mp4; codecs=avc1' -> 'video/mp4'"""
    return (content_type or "").split(";")[0].strip().lower()


class CheckInService:
    """
    The check-in pipeline, with every collaborator injected.
    """

    def __init__(
        self,
        stager: FileStager,
        analysis_client: VideoAnalyzer,
        daily_logs: DailyLogWriter,
        eligibility: CheckInEligibilityService | None = None,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
        allowed_content_types: tuple[str, ...] | list[str] = DEFAULT_ALLOWED_CONTENT_TYPES,
    ):
        self.stager = stager
        self.analysis_client = analysis_client
        self.daily_logs = daily_logs
        self.eligibility = eligibility
        self.max_upload_bytes = max_upload_bytes
        self.allowed_content_types = [t.lower() for t in allowed_content_types]

    async def submit(self, user: AuthUser, video: VideoUpload | None) -> DailyLog:
        """
        Run one check-in end to end.

        Returns:
            The persisted DailyLog

        Raises:
            AuthorizationError: Caller is not a patient
            CheckInNotAllowedError: Patient is not eligible right now
            VideoValidationError: Upload is missing, empty, too large or of the wrong type
            StagingError: Video could not be written to transient storage
            ProviderError: Remote upload, processing or generation failed
            AnalysisValidationError: Model output violates the schema
            PersistenceError: The daily log could not be stored
        """
        self.authorize(user)
        self.check_eligibility(user)
        video = self.validate_upload(video)

        logger.info(f"Starting check-in analysis for user {user.id}")

        async with self.stager.stage(video) as staged:
            raw_response = await self.analysis_client.analyze(staged.path, staged.mime_type)

        assessment = parse_assessment(raw_response)
        risk_flag = compute_risk_flag(assessment)

        try:
            log = self.daily_logs.create(
                user_id=user.id,
                mood_score=assessment.mood_score,
                risk_flag=risk_flag,
                analysis_json=assessment.model_dump(mode="json", exclude_none=True),
            )
        except SupabaseClientError as e:
            raise PersistenceError(e.message)

        if risk_flag:
            logger.warning(f"Check-in {log.id} for user {user.id} raised the risk flag")
        logger.info(f"Check-in {log.id} saved (mood_score={log.mood_score})")
        return log

    # -------------------------------------------------------------------------
    # Guards
    # -------------------------------------------------------------------------

    def authorize(self, user: AuthUser) -> None:
        if not user.is_patient:
            role = user.role.value if user.role else None
            logger.info(f"Rejected check-in from user {user.id} with role {role}")
            raise AuthorizationError(
                UserRole.PATIENT.value, role, message="Only patients can submit check-ins"
            )

    def preflight(self, user: AuthUser, declared_size: int | None) -> None:
        """
        Reject a request before its body is read: wrong role, or a declared
        size already over the limit. `submit` repeats the full checks.
        """
        self.authorize(user)
        if declared_size is not None:
            self.check_upload_size(declared_size)

    def check_upload_size(self, size_bytes: int) -> None:
        if size_bytes > self.max_upload_bytes:
            raise VideoTooLargeError(size_bytes, self.max_upload_bytes)

    def check_eligibility(self, user: AuthUser) -> None:
        if self.eligibility is None:
            return
        eligibility = self.eligibility.get_eligibility(user.id)
        if not eligibility.can_check_in:
            raise CheckInNotAllowedError(eligibility.message)

    def validate_upload(self, video: VideoUpload | None) -> VideoUpload:
        """
        Check presence, size and content type; returns the upload with its
        content type reduced to the bare media type.
        """
        if video is None:
            raise MissingVideoError()

        if video.size_bytes == 0:
            raise EmptyVideoError(video.filename)

        self.check_upload_size(video.size_bytes)

        content_type = base_content_type(video.content_type)
        if content_type not in self.allowed_content_types:
            raise InvalidVideoTypeError(video.content_type, self.allowed_content_types)

        return VideoUpload(
            content=video.content,
            content_type=content_type,
            filename=video.filename,
        )
