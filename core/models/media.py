# =============================================================================
# core/models/media.py - Transient Media Handles
# =============================================================================
# - VideoUpload: what the HTTP layer hands to the check-in pipeline
# - StagedVideo: the local, request-scoped copy of that upload
#
# Neither is ever persisted. A StagedVideo path is only valid inside the
# FileStager.stage() block that produced it.
# =============================================================================

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class VideoUpload:
    """An uploaded check-in video, fully read into memory."""
    content: bytes = field(repr=False)
    content_type: str | None
    filename: str | None = None

    @property
    def size_bytes(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class StagedVideo:
    """A video written to transient local storage."""
    path: Path
    mime_type: str
    size_bytes: int
