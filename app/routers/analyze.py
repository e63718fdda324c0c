# =============================================================================
# app/routers/analyze.py - Video Check-in Endpoint
# =============================================================================
# Accepts a patient's daily check-in video and returns the derived
# assessment. The video itself is never stored: it lives in a transient
# file (and a transient provider upload) only while this request runs.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile

from app.auth import AuthUser, get_current_user
from app.dependencies import CheckInServiceDep
from core.models.daily_log import CheckInData, CheckInResponse
from core.models.media import VideoUpload

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/analyze", response_model=CheckInResponse)
async def analyze_check_in(
    service: CheckInServiceDep,
    user: AuthUser = Depends(get_current_user),
    video: Annotated[UploadFile | None, File(description="Check-in video (mp4, webm or mov)")] = None,
) -> CheckInResponse:
    """
    Submit a video check-in.

    This endpoint:
    1. Requires a patient session
    2. Checks the patient may check in today
    3. Validates the video (max 100MB; mp4, webm or quicktime)
    4. Runs the transient analysis pipeline
    5. Stores only the derived assessment and risk flag

    Returns:
        {"success": true, "data": {"id", "moodScore", "riskFlag", "analysis", "createdAt"}}

    Raises:
        400: Missing/invalid video, or the model's assessment failed validation
        401: Not authenticated
        403: Not a patient, or not eligible to check in
        500: Analysis provider or storage failure
    """
    upload = None
    if video is not None:
        service.preflight(user, video.size)
        try:
            content = await video.read()
        finally:
            await video.close()
        upload = VideoUpload(
            content=content,
            content_type=video.content_type,
            filename=video.filename,
        )
        logger.info(
            f"Received check-in video: {video.content_type or '(no type)'}, "
            f"{len(content) / (1024 * 1024):.2f}MB"
        )

    log = await service.submit(user, upload)

    return CheckInResponse(data=CheckInData.from_daily_log(log))
