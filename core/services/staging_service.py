# =============================================================================
# core/services/staging_service.py - Transient Video Staging
# =============================================================================
# Writes an uploaded video to a request-unique file in the temp directory and
# guarantees the file is gone when the `stage()` block exits, whatever the
# exit path (normal return, exception, cancellation).
#
# Usage:
#   stager = FileStager(settings.TEMP_DIR)
#   async with stager.stage(upload) as staged:
#       await analyze(staged.path)
#   # staged.path no longer exists here
# =============================================================================

import asyncio
import logging
import os
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from app.exceptions import CleanupError, StagingError
from core.models.media import StagedVideo, VideoUpload

logger = logging.getLogger(__name__)

FILE_PREFIX = "scan_"
DEFAULT_EXTENSION = ".mp4"

# Fallback extension when the upload has no usable filename
_EXTENSIONS_BY_TYPE = {
    "video/mp4": ".mp4",
    "video/webm": ".webm",
    "video/quicktime": ".mov",
}


class FileStager:
    """
    Request-scoped local staging for uploaded videos.

    Files are named `scan_<uuid4><ext>` so concurrent check-ins never
    collide. Deletion is restricted to files inside `temp_dir`.
    """

    def __init__(self, temp_dir: str | Path, prefix: str = FILE_PREFIX):
        self.temp_dir = Path(temp_dir)
        self.prefix = prefix

    @asynccontextmanager
    async def stage(self, upload: VideoUpload) -> AsyncIterator[StagedVideo]:
        """
        Write `upload` to transient storage for the duration of the block.

        Raises:
            StagingError: If the file cannot be written
        """
        path = self._build_path(upload)
        await self._write(path, upload.content)
        logger.info(f"Staged check-in video: {path.name} ({upload.size_bytes} bytes)")

        try:
            yield StagedVideo(
                path=path,
                mime_type=(upload.content_type or "video/mp4").lower(),
                size_bytes=upload.size_bytes,
            )
        finally:
            self._cleanup(path)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _build_path(self, upload: VideoUpload) -> Path:
        extension = self.get_file_extension(upload.filename, upload.content_type)
        return self.temp_dir / f"{self.prefix}{uuid.uuid4().hex}{extension}"

    async def _write(self, path: Path, content: bytes) -> None:
        try:
            self.temp_dir.mkdir(parents=True, exist_ok=True)
            await asyncio.to_thread(path.write_bytes, content)
        except OSError as e:
            logger.error(f"Failed to stage video {path.name}: {e}")
            # A partial write must not outlive the request either
            self._cleanup(path)
            raise StagingError(str(e))

    def _cleanup(self, path: Path) -> None:
        """Delete a staged file, logging (never raising) on failure."""
        try:
            self.delete(path)
        except CleanupError as e:
            logger.error(f"Transient video cleanup failed: {e.message}")

    def delete(self, path: Path) -> None:
        """
        Remove a staged file.

        A missing file is not an error.

        Raises:
            CleanupError: If the path is outside the temp dir or unlink fails
        """
        resolved = Path(os.path.abspath(path))
        root = Path(os.path.abspath(self.temp_dir))
        if resolved.parent != root:
            raise CleanupError(str(path), "path is outside the staging directory")

        try:
            resolved.unlink(missing_ok=True)
            logger.debug(f"Deleted staged video: {resolved.name}")
        except OSError as e:
            raise CleanupError(str(path), str(e))

    @staticmethod
    def get_file_extension(filename: str | None, content_type: str | None = None) -> str:
        """
        Pick an extension for the staged file.

        Uses the upload's own suffix when it is a plain alphanumeric one,
        otherwise derives it from the content type, defaulting to .mp4.
        """
        suffix = Path(filename).suffix.lower() if filename else ""
        if suffix and suffix[1:].isalnum() and len(suffix) <= 6:
            return suffix
        return _EXTENSIONS_BY_TYPE.get((content_type or "").lower(), DEFAULT_EXTENSION)
