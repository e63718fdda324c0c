# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Fakes for the Gemini client and the daily log store
# - Helpers to build valid / invalid model responses and auth tokens
# =============================================================================

import json
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock
from uuid import UUID, uuid4

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-with-enough-length")
os.environ.setdefault("GOOGLE_API_KEY", "test-google-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest
from google.genai import types
from jose import jwt

from app.auth.models import AuthUser, UserRole
from core.models.daily_log import DailyLog

PATIENT_ID = UUID("11111111-1111-4111-8111-111111111111")
DOCTOR_ID = UUID("22222222-2222-4222-8222-222222222222")
REMOTE_FILE_NAME = "files/abc123"


# =============================================================================
# Assessment Payloads
# =============================================================================

def make_assessment(**overrides: Any) -> dict[str, Any]:
    """A valid assessment dict; keyword overrides replace top-level keys."""
    data = {
        "mood_score": 6,
        "risk_flags": {
            "suicidality_indicated": False,
            "self_harm_indicated": False,
            "severe_distress": False,
        },
        "biomarkers": {
            "speech_latency": "normal",
            "affect_type": "full_range",
            "eye_contact": "normal",
        },
        "clinical_summary": "Patient presents as euthymic with full-range affect and normal speech.",
    }
    data.update(overrides)
    return data


def make_mse() -> dict[str, Any]:
    return {
        "appearance": {"grooming": "well_groomed", "dress": "appropriate", "hygiene": "good", "posture": "relaxed"},
        "behavior": {"psychomotor": "normal", "eye_contact": "appropriate", "cooperation": "cooperative", "movements": "normal"},
        "speech": {"rate": "normal", "volume": "normal", "tone": "normal", "latency": "normal", "spontaneity": "spontaneous"},
        "mood_affect": {"reported_mood": "euthymic", "observed_affect": "full_range", "affect_range": "full", "congruence": "congruent", "lability": "stable"},
        "thought_process": {"organization": "organized", "flow": "goal_directed"},
        "thought_content": {"preoccupations": "none", "hopelessness_expressed": False, "worthlessness_expressed": False},
        "cognition": {"alertness": "alert", "attention": "intact", "estimated_insight": "good", "estimated_judgment": "good"},
    }


def assessment_json(**overrides: Any) -> str:
    return json.dumps(make_assessment(**overrides))


# =============================================================================
# Gemini Fakes
# =============================================================================

def gemini_file(state: str, name: str = REMOTE_FILE_NAME, error: str | None = None) -> types.File:
    return types.File(
        name=name,
        uri=f"https://generativelanguage.googleapis.com/v1beta/{name}",
        mime_type="video/mp4",
        state=types.FileState(state),
        error=types.FileStatus(message=error) if error else None,
    )


def make_genai_client(
    states: tuple[str, ...] = ("PROCESSING", "ACTIVE"),
    response_text: str | None = None,
) -> MagicMock:
    """
    Fake google-genai Client.

    `states[0]` is the state returned by upload; the rest are returned by
    successive files.get polls.
    """
    upload_state, *poll_states = states
    client = MagicMock()
    client.seen_paths = []

    async def upload(file, config=None):
        client.seen_paths.append(Path(file))
        assert Path(file).exists(), "video must be staged while uploading"
        return gemini_file(upload_state)

    client.aio.files.upload = AsyncMock(side_effect=upload)
    client.aio.files.get = AsyncMock(side_effect=[gemini_file(s) for s in poll_states])
    client.aio.files.delete = AsyncMock(return_value=None)
    client.aio.models.generate_content = AsyncMock(
        return_value=MagicMock(text=response_text if response_text is not None else assessment_json())
    )
    return client


class FakeClock:
    """Monotonic clock advanced only by its own sleep()."""

    def __init__(self):
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


# =============================================================================
# Persistence Fakes
# =============================================================================

class InMemoryDailyLogs:
    """Insert-only daily log store."""

    def __init__(self):
        self.created: list[DailyLog] = []

    def create(self, user_id, mood_score, risk_flag, analysis_json) -> DailyLog:
        log = DailyLog(
            id=uuid4(),
            user_id=user_id,
            mood_score=mood_score,
            risk_flag=risk_flag,
            analysis_json=analysis_json,
            created_at=datetime.now(timezone.utc),
        )
        self.created.append(log)
        return log


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def patient() -> AuthUser:
    return AuthUser(id=PATIENT_ID, email="patient@example.com", role=UserRole.PATIENT)


@pytest.fixture
def doctor() -> AuthUser:
    return AuthUser(id=DOCTOR_ID, email="doctor@example.com", role=UserRole.DOCTOR)


@pytest.fixture
def daily_logs() -> InMemoryDailyLogs:
    return InMemoryDailyLogs()


@pytest.fixture
def staging_dir(tmp_path) -> Path:
    path = tmp_path / "staging"
    path.mkdir()
    return path


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


def make_token(
    user_id: UUID | str,
    role: str | None = "patient",
    email: str = "user@example.com",
    expires_in: timedelta = timedelta(hours=1),
    secret: str | None = None,
) -> str:
    """Sign a Supabase-style access token with the test secret."""
    claims: dict[str, Any] = {
        "sub": str(user_id),
        "email": email,
        "aud": "authenticated",
        "role": "authenticated",
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    if role is not None:
        claims["app_metadata"] = {"provider": "email", "role": role}
    return jwt.encode(claims, secret or os.environ["SUPABASE_JWT_SECRET"], algorithm="HS256")
