# =============================================================================
# core/services/analysis_client.py - Gemini Video Analysis Client
# =============================================================================
# Drives one staged video through the Gemini Files and Models APIs:
#
#   1. upload the file (declared mime type)
#   2. poll its state until ACTIVE or FAILED (bounded by attempts AND time)
#   3. generate the assessment with the clinical system instruction, JSON mode
#   4. delete the provider-side copy, on every exit path
#
# The remote copy is held by its own scoped acquisition (`remote_file()`),
# independent of the local staging scope, so a failure on one side never
# skips cleanup on the other.
#
# Usage:
#   client = GeminiAnalysisClient(genai.Client(api_key=...), model="gemini-2.0-flash")
#   text = await client.analyze(staged.path, staged.mime_type)
# =============================================================================

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Awaitable, Callable

from google import genai
from google.genai import types

from app.exceptions import CleanupError, ProviderError, ProviderTimeoutError
from core.models.remote_file import (
    Active,
    Failed,
    Processing,
    RemoteFile,
    RemoteFileState,
    Uploading,
)
from core.prompts import ANALYSIS_REQUEST, CLINICAL_ANALYSIS_PROMPT

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.0-flash"
DEFAULT_POLL_INTERVAL = 1.0
DEFAULT_MAX_POLL_ATTEMPTS = 60
DEFAULT_POLL_TIMEOUT = 60.0


def normalize_video_mime_type(mime_type: str | None) -> str:
    """
    Map an upload's content type to one Gemini handles reliably.

    WebM is passed through; every other video container is declared as mp4.
    """
    if not mime_type or not mime_type.startswith("video/"):
        return "video/mp4"
    if mime_type == "video/webm":
        return mime_type
    return "video/mp4"


def to_remote_state(file: Any) -> RemoteFileState:
    """
    Translate a provider file object into the tagged lifecycle state.

    Unknown or unspecified states are treated as still processing; the
    bounded poll loop turns a stuck file into a timeout.
    """
    state = getattr(file, "state", None)
    state_name = str(getattr(state, "name", state) or "").upper()

    if state_name == "ACTIVE":
        return Active(
            uri=file.uri,
            mime_type=getattr(file, "mime_type", None) or "video/mp4",
        )
    if state_name == "FAILED":
        error = getattr(file, "error", None)
        return Failed(reason=getattr(error, "message", None))
    if state_name == "UPLOADING":
        return Uploading()
    return Processing()


class GeminiAnalysisClient:
    """
    Client for the remote half of a check-in analysis.

    Attributes:
        client: google-genai Client (only its `.aio` surface is used)
        model: Model ID for generation
        poll_interval: Seconds between state polls
        max_poll_attempts: Upper bound on state polls
        poll_timeout: Upper bound on total seconds spent waiting for ACTIVE
    """

    def __init__(
        self,
        client: genai.Client,
        model: str = DEFAULT_MODEL,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        max_poll_attempts: int = DEFAULT_MAX_POLL_ATTEMPTS,
        poll_timeout: float = DEFAULT_POLL_TIMEOUT,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client = client
        self.model = model
        self.poll_interval = poll_interval
        self.max_poll_attempts = max_poll_attempts
        self.poll_timeout = poll_timeout
        self._sleep = sleep
        self._clock = clock

    # -------------------------------------------------------------------------
    # Main Entry Point
    # -------------------------------------------------------------------------

    async def analyze(self, path: Path, mime_type: str) -> str:
        """
        Upload, wait, generate. Returns the model's raw response text.

        The uploaded copy is deleted before this returns or raises.

        Raises:
            ProviderError: Upload, processing or generation failed
            ProviderTimeoutError: The file never became ACTIVE in time
        """
        async with self.remote_file(path, mime_type) as remote:
            active = await self.wait_until_active(remote)
            return await self.generate(active)

    @asynccontextmanager
    async def remote_file(self, path: Path, mime_type: str) -> AsyncIterator[RemoteFile]:
        """Hold an uploaded provider file for the duration of the block."""
        remote = await self.upload(path, mime_type)
        try:
            yield remote
        finally:
            await self.delete(remote.name)

    # -------------------------------------------------------------------------
    # Provider Operations
    # -------------------------------------------------------------------------

    async def upload(self, path: Path, mime_type: str) -> RemoteFile:
        declared = normalize_video_mime_type(mime_type)
        logger.info(f"Uploading {Path(path).name} to Gemini as {declared}")

        try:
            file = await self.client.aio.files.upload(
                file=str(path),
                config=types.UploadFileConfig(mime_type=declared),
            )
        except Exception as e:
            raise ProviderError(f"Failed to upload video: {e}", code="PROVIDER_UPLOAD_FAILED")

        if not getattr(file, "name", None):
            raise ProviderError("Upload returned no file name", code="PROVIDER_UPLOAD_FAILED")

        return RemoteFile(name=file.name, state=to_remote_state(file))

    async def get_state(self, name: str) -> RemoteFileState:
        try:
            file = await self.client.aio.files.get(name=name)
        except Exception as e:
            raise ProviderError(f"Failed to check video status: {e}", code="PROVIDER_POLL_FAILED")
        return to_remote_state(file)

    async def wait_until_active(self, remote: RemoteFile) -> RemoteFile:
        """
        Poll until the file is ACTIVE.

        Polls at most `max_poll_attempts` times and for at most
        `poll_timeout` seconds, whichever is hit first. A status check
        that is still pending at the deadline is cancelled.

        Raises:
            ProviderError: The provider reported FAILED
            ProviderTimeoutError: Bounds exhausted while still processing
        """
        started = self._clock()
        deadline = started + self.poll_timeout
        attempts = 0
        state = remote.state

        while True:
            match state:
                case Active():
                    logger.info(f"Gemini file {remote.name} is active after {attempts} polls")
                    return RemoteFile(name=remote.name, state=state)

                case Failed(reason=reason):
                    detail = f": {reason}" if reason else ""
                    raise ProviderError(
                        f"Video processing failed{detail}",
                        code="PROVIDER_PROCESSING_FAILED",
                        details={"file_name": remote.name},
                    )

                case Uploading() | Processing():
                    remaining = deadline - self._clock()
                    if attempts >= self.max_poll_attempts or remaining <= 0:
                        raise ProviderTimeoutError(
                            remote.name, attempts, self._clock() - started
                        )
                    await self._sleep(min(self.poll_interval, remaining))
                    attempts += 1
                    remaining = deadline - self._clock()
                    try:
                        state = await asyncio.wait_for(
                            self.get_state(remote.name), timeout=max(remaining, 0.0)
                        )
                    except asyncio.TimeoutError:
                        logger.warning(f"Status check for {remote.name} hit the poll deadline")
                        raise ProviderTimeoutError(
                            remote.name, attempts, self._clock() - started
                        )

                case _:
                    raise ProviderError(f"Unrecognized file state: {state!r}")

    async def generate(self, remote: RemoteFile) -> str:
        """
        Request the structured assessment for an ACTIVE file.

        Raises:
            ProviderError: The file is not active, or generation failed
        """
        match remote.state:
            case Active(uri=uri, mime_type=mime_type):
                file_part = types.Part.from_uri(file_uri=uri, mime_type=mime_type)
            case _:
                raise ProviderError(f"File {remote.name} is not ready for analysis")

        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=[file_part, ANALYSIS_REQUEST],
                config=types.GenerateContentConfig(
                    system_instruction=CLINICAL_ANALYSIS_PROMPT,
                    response_mime_type="application/json",
                ),
            )
        except Exception as e:
            raise ProviderError(f"Failed to analyze video: {e}", code="PROVIDER_GENERATION_FAILED")

        text = response.text or ""
        if not text.strip():
            raise ProviderError("Model returned an empty response", code="PROVIDER_EMPTY_RESPONSE")

        logger.debug(f"Gemini response: {text[:200]}...")
        return text

    async def delete(self, name: str) -> None:
        """Delete the provider-side file. Failures are logged, never raised."""
        try:
            await self.client.aio.files.delete(name=name)
            logger.info(f"Deleted Gemini file {name}")
        except Exception as e:
            error = CleanupError(f"remote file {name}", str(e))
            logger.error(f"Remote video cleanup failed: {error.message}")
