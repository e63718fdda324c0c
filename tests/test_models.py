# =============================================================================
# tests/test_models.py - Pydantic Model and Settings Tests
# =============================================================================
# Unit tests for the API-facing models to ensure:
# - Valid data is accepted and parsed correctly
# - Invalid data raises ValidationError
# - Models serialize to camelCase JSON where the client expects it
# - Settings parse their comma-separated values
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

from datetime import datetime, timezone
from uuid import uuid4

import pytest
from pydantic import ValidationError

from app.config import Settings
from core.models import (
    CheckInData,
    CheckInEligibility,
    CheckInResponse,
    DailyLog,
    RemoteFile,
    StreakInfo,
    VideoUpload,
)
from core.models.remote_file import Active, Processing


def _daily_log(**overrides) -> DailyLog:
    data = {
        "id": str(uuid4()),
        "user_id": str(uuid4()),
        "mood_score": 6,
        "risk_flag": False,
        "analysis_json": {"mood_score": 6},
        "created_at": "2026-03-10T09:00:00+00:00",
    }
    data.update(overrides)
    return DailyLog.model_validate(data)


# =============================================================================
# Daily Log Model Tests
# =============================================================================

class TestDailyLog:
    """Tests for DailyLog model."""

    def test_valid_row(self):
        """A Supabase row parses into a DailyLog."""
        log = _daily_log()

        assert log.mood_score == 6
        assert log.created_at.tzinfo is not None

    @pytest.mark.parametrize("score", [0, 11])
    def test_mood_score_range(self, score):
        with pytest.raises(ValidationError):
            _daily_log(mood_score=score)


class TestCheckInResponse:
    """Tests for the POST /analyze response body."""

    def test_camel_case_serialization(self):
        log = _daily_log(risk_flag=True)

        body = CheckInResponse(data=CheckInData.from_daily_log(log)).model_dump(
            mode="json", by_alias=True
        )

        assert body["success"] is True
        assert set(body["data"]) == {"id", "moodScore", "riskFlag", "analysis", "createdAt"}
        assert body["data"]["riskFlag"] is True
        assert body["data"]["analysis"] == {"mood_score": 6}

    def test_populate_by_field_name(self):
        data = CheckInData(
            id=uuid4(),
            mood_score=4,
            risk_flag=False,
            analysis={},
            created_at=datetime.now(timezone.utc),
        )

        assert data.mood_score == 4


class TestStreakAndEligibility:

    def test_streak_defaults(self):
        streak = StreakInfo()

        assert streak.model_dump(by_alias=True) == {
            "currentStreak": 0,
            "longestStreak": 0,
            "totalCheckIns": 0,
            "lastCheckIn": None,
        }

    def test_eligibility_aliases(self):
        eligibility = CheckInEligibility(
            can_check_in=True, has_active_follow_up=True, has_checked_in_today=False
        )

        dumped = eligibility.model_dump(by_alias=True)
        assert dumped["canCheckIn"] is True
        assert dumped["message"] is None


# =============================================================================
# Transient Media Tests
# =============================================================================

class TestMedia:

    def test_video_upload_size(self):
        assert VideoUpload(content=b"abc", content_type="video/mp4").size_bytes == 3

    def test_video_upload_repr_hides_content(self):
        assert "content=" not in repr(VideoUpload(content=b"\x00" * 10, content_type="video/mp4"))

    def test_remote_file_states(self):
        remote = RemoteFile(name="files/x", state=Processing())

        assert remote.state == Processing()
        assert Active(uri="u", mime_type="video/mp4") != Processing()


# =============================================================================
# Settings Tests
# =============================================================================

class TestSettings:

    def _settings(self, **overrides) -> Settings:
        values = {
            "SUPABASE_URL": "https://x.supabase.co",
            "SUPABASE_SERVICE_KEY": "service",
            "GOOGLE_API_KEY": "google",
        }
        values.update(overrides)
        return Settings(**values)

    def test_defaults(self):
        settings = self._settings()

        assert settings.max_upload_size_bytes == 100 * 1024 * 1024
        assert settings.allowed_video_types_list == ["video/mp4", "video/webm", "video/quicktime"]
        assert settings.GEMINI_MAX_POLL_ATTEMPTS == 60

    def test_comma_separated_lists(self):
        settings = self._settings(
            CORS_ORIGINS="http://localhost:3000, https://mindlog.app",
            ALLOWED_VIDEO_TYPES="Video/MP4, video/webm,",
        )

        assert settings.cors_origins_list == ["http://localhost:3000", "https://mindlog.app"]
        assert settings.allowed_video_types_list == ["video/mp4", "video/webm"]

    def test_poll_bounds_validated(self):
        with pytest.raises(ValidationError):
            self._settings(GEMINI_MAX_POLL_ATTEMPTS=0)
