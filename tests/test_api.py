# =============================================================================
# tests/test_api.py - HTTP API Tests
# =============================================================================
# Drives the FastAPI app through TestClient with real JWT verification and
# the service layer swapped in via app.dependency_overrides.
#
# Checks the wire contract: status codes, the camelCase success body, and
# the {success, error, code} failure envelope.
# =============================================================================

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from starlette.datastructures import UploadFile as StarletteUploadFile

from app.dependencies import (
    get_check_in_service,
    get_daily_log_repository,
    get_eligibility_service,
    get_supabase_client,
)
from app.main import app
from core.models.daily_log import CheckInEligibility, DailyLog, StreakInfo
from core.services.analysis_client import GeminiAnalysisClient
from core.services.check_in_service import CheckInService
from core.services.staging_service import FileStager
from tests.conftest import (
    DOCTOR_ID,
    PATIENT_ID,
    assessment_json,
    gemini_file,
    make_genai_client,
    make_token,
)

ANALYZE_URL = "/api/v1/analyze"
MB = 1024 * 1024


def _auth(role: str | None = "patient", user_id=PATIENT_ID, **kwargs) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user_id, role=role, **kwargs)}"}


def _video_files(size: int = 2 * MB, content_type: str = "video/mp4", filename: str = "checkin.mp4"):
    return {"video": (filename, b"\x00" * size, content_type)}


@pytest.fixture
def client():
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def use_service(staging_dir, daily_logs):
    """Install a CheckInService over the given fake genai client."""

    def install(genai_client) -> CheckInService:
        service = CheckInService(
            stager=FileStager(staging_dir),
            analysis_client=GeminiAnalysisClient(
                genai_client, max_poll_attempts=3, sleep=AsyncMock()
            ),
            daily_logs=daily_logs,
        )
        app.dependency_overrides[get_check_in_service] = lambda: service
        return service

    return install


# =============================================================================
# POST /api/v1/analyze
# =============================================================================

class TestAnalyzeEndpoint:

    def test_successful_check_in(self, client, use_service, daily_logs, staging_dir):
        genai_client = make_genai_client(("PROCESSING", "ACTIVE"), assessment_json(mood_score=6))
        use_service(genai_client)

        response = client.post(ANALYZE_URL, files=_video_files(), headers=_auth())

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["moodScore"] == 6
        assert body["data"]["riskFlag"] is False
        assert body["data"]["analysis"]["biomarkers"]["affect_type"] == "full_range"
        assert body["data"]["id"] == str(daily_logs.created[0].id)
        assert "createdAt" in body["data"]

        assert list(staging_dir.iterdir()) == []
        genai_client.aio.files.delete.assert_awaited_once()

    def test_low_mood_sets_risk_flag(self, client, use_service):
        use_service(make_genai_client(("ACTIVE",), assessment_json(mood_score=2)))

        response = client.post(ANALYZE_URL, files=_video_files(), headers=_auth())

        assert response.status_code == 200
        assert response.json()["data"]["riskFlag"] is True

    def test_doctor_is_forbidden(self, client, use_service, daily_logs):
        genai_client = make_genai_client(("ACTIVE",))
        use_service(genai_client)

        response = client.post(
            ANALYZE_URL, files=_video_files(), headers=_auth("doctor", user_id=DOCTOR_ID)
        )

        assert response.status_code == 403
        assert response.json() == {
            "success": False,
            "error": "Only patients can submit check-ins",
            "code": "FORBIDDEN",
        }
        genai_client.aio.files.upload.assert_not_awaited()
        genai_client.aio.models.generate_content.assert_not_awaited()
        assert daily_logs.created == []

    def test_missing_token(self, client, use_service):
        use_service(make_genai_client(("ACTIVE",)))

        response = client.post(ANALYZE_URL, files=_video_files())

        assert response.status_code == 401
        assert response.json()["success"] is False
        assert response.json()["error"] == "Unauthorized"

    def test_expired_token(self, client, use_service):
        use_service(make_genai_client(("ACTIVE",)))

        response = client.post(
            ANALYZE_URL, files=_video_files(), headers=_auth(expires_in=timedelta(minutes=-5))
        )

        assert response.status_code == 401
        assert response.json()["error"] == "Token has expired"

    def test_wrong_signature(self, client, use_service):
        use_service(make_genai_client(("ACTIVE",)))

        response = client.post(
            ANALYZE_URL, files=_video_files(), headers=_auth(secret="another-secret-entirely-wrong")
        )

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid token"

    def test_missing_video(self, client, use_service):
        use_service(make_genai_client(("ACTIVE",)))

        response = client.post(
            ANALYZE_URL, files={"note": ("note.txt", b"hello", "text/plain")}, headers=_auth()
        )

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "No video file provided",
            "code": "MISSING_VIDEO",
        }

    def test_unsupported_type(self, client, use_service):
        use_service(make_genai_client(("ACTIVE",)))

        response = client.post(
            ANALYZE_URL,
            files=_video_files(content_type="image/png", filename="photo.png"),
            headers=_auth(),
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_VIDEO_TYPE"

    def test_oversized_upload_rejected_before_body_is_read(self, client, use_service, daily_logs):
        genai_client = make_genai_client(("ACTIVE",))
        service = use_service(genai_client)
        service.max_upload_bytes = 1 * MB

        with patch.object(StarletteUploadFile, "read", new_callable=AsyncMock) as read:
            response = client.post(ANALYZE_URL, files=_video_files(size=2 * MB), headers=_auth())

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "File size exceeds 1MB limit",
            "code": "VIDEO_TOO_LARGE",
        }
        read.assert_not_awaited()
        genai_client.aio.files.upload.assert_not_awaited()
        assert daily_logs.created == []

    def test_oversized_upload_from_doctor_is_still_forbidden(self, client, use_service):
        service = use_service(make_genai_client(("ACTIVE",)))
        service.max_upload_bytes = 1 * MB

        response = client.post(
            ANALYZE_URL,
            files=_video_files(size=2 * MB),
            headers=_auth("doctor", user_id=DOCTOR_ID),
        )

        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"

    def test_invalid_model_output(self, client, use_service, daily_logs):
        use_service(make_genai_client(("ACTIVE",), assessment_json(mood_score="6")))

        response = client.post(ANALYZE_URL, files=_video_files(), headers=_auth())

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"].startswith("Invalid analysis response:")
        assert daily_logs.created == []

    def test_provider_processing_failure(self, client, use_service, daily_logs, staging_dir):
        genai_client = make_genai_client(("PROCESSING",))
        genai_client.aio.files.get = AsyncMock(return_value=gemini_file("FAILED"))
        use_service(genai_client)

        response = client.post(ANALYZE_URL, files=_video_files(), headers=_auth())

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Analysis failed: Video processing failed"
        assert daily_logs.created == []
        assert list(staging_dir.iterdir()) == []
        genai_client.aio.files.delete.assert_awaited_once()

    def test_provider_timeout(self, client, use_service):
        genai_client = make_genai_client(("PROCESSING",))
        genai_client.aio.files.get = AsyncMock(return_value=gemini_file("PROCESSING"))
        use_service(genai_client)

        response = client.post(ANALYZE_URL, files=_video_files(), headers=_auth())

        assert response.status_code == 500
        assert response.json()["code"] == "PROVIDER_TIMEOUT"
        assert response.json()["error"].startswith("Analysis failed:")


# =============================================================================
# Patient Endpoints
# =============================================================================

class TestPatientEndpoints:

    def test_eligibility(self, client):
        eligibility = MagicMock()
        eligibility.get_eligibility.return_value = CheckInEligibility(
            can_check_in=False,
            has_active_follow_up=False,
            has_checked_in_today=False,
            message="You need to be under follow-up with a doctor to check in.",
        )
        app.dependency_overrides[get_eligibility_service] = lambda: eligibility

        response = client.get("/api/v1/patient/eligibility", headers=_auth())

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "data": {
                "canCheckIn": False,
                "hasActiveFollowUp": False,
                "hasCheckedInToday": False,
                "message": "You need to be under follow-up with a doctor to check in.",
            },
        }
        eligibility.get_eligibility.assert_called_once_with(PATIENT_ID)

    def test_eligibility_requires_patient(self, client):
        app.dependency_overrides[get_eligibility_service] = lambda: MagicMock()

        response = client.get(
            "/api/v1/patient/eligibility", headers=_auth("doctor", user_id=DOCTOR_ID)
        )

        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"

    def test_check_in_history(self, client):
        now = datetime(2026, 3, 10, 9, 0, tzinfo=timezone.utc)
        log = DailyLog(
            id=uuid4(),
            user_id=PATIENT_ID,
            mood_score=4,
            risk_flag=False,
            analysis_json={"mood_score": 4},
            created_at=now,
        )
        repository = MagicMock()
        repository.find_by_user_id.return_value = [log]
        repository.get_streak.return_value = StreakInfo(
            current_streak=1, longest_streak=3, total_check_ins=9, last_check_in=now
        )
        app.dependency_overrides[get_daily_log_repository] = lambda: repository

        response = client.get("/api/v1/patient/check-ins?limit=5", headers=_auth())

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"][0]["moodScore"] == 4
        assert body["streak"]["longestStreak"] == 3
        assert body["streak"]["totalCheckIns"] == 9
        repository.find_by_user_id.assert_called_once_with(PATIENT_ID, limit=5)

    def test_check_in_history_limit_bounds(self, client):
        app.dependency_overrides[get_daily_log_repository] = lambda: MagicMock()

        response = client.get("/api/v1/patient/check-ins?limit=0", headers=_auth())

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"


# =============================================================================
# Auth and Health
# =============================================================================

class TestMiscEndpoints:

    def test_verify_token(self, client):
        response = client.get("/api/v1/auth/verify", headers=_auth(email="p@example.com"))

        assert response.status_code == 200
        assert response.json() == {
            "valid": True,
            "user_id": str(PATIENT_ID),
            "email": "p@example.com",
            "role": "patient",
        }

    def test_me_falls_back_to_token_claims(self, client):
        supabase = MagicMock()
        query = supabase.table.return_value.select.return_value.eq.return_value.single.return_value
        query.execute.side_effect = Exception("PGRST116: JSON object requested, multiple (or no) rows returned")
        app.dependency_overrides[get_supabase_client] = lambda: supabase

        response = client.get("/api/v1/auth/me", headers=_auth(email="p@example.com"))

        assert response.status_code == 200
        body = response.json()
        assert body["id"] == str(PATIENT_ID)
        assert body["role"] == "patient"
        assert body["name"] is None

    def test_me_from_users_table(self, client):
        supabase = MagicMock()
        query = supabase.table.return_value.select.return_value.eq.return_value.single.return_value
        query.execute.return_value = MagicMock(
            data={"id": str(PATIENT_ID), "email": "p@example.com", "name": "Pat", "role": "patient"}
        )
        app.dependency_overrides[get_supabase_client] = lambda: supabase

        response = client.get("/api/v1/auth/me", headers=_auth())

        assert response.json()["name"] == "Pat"
        supabase.table.assert_called_with("users")

    def test_health(self, client):
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_readiness_reports_database_failure(self, client):
        with patch(
            "lib.supabase_client.SupabaseClient.get_client",
            side_effect=RuntimeError("connection refused"),
        ):
            response = client.get("/api/v1/health/ready")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "degraded"
        assert body["checks"]["database"].startswith("unhealthy")

    def test_liveness(self, client):
        assert client.get("/api/v1/health/live").json()["status"] == "alive"

    def test_root(self, client):
        assert client.get("/").json()["name"] == "MindLog API"
