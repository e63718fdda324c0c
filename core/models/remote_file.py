# =============================================================================
# core/models/remote_file.py - Provider-side File Lifecycle
# =============================================================================
# A video uploaded to the inference provider moves through:
#
#   Uploading -> Processing -> Active | Failed
#
# The provider reports state as a loosely-typed enum on its file object.
# We translate it once, at the client boundary, into the tagged union below so
# the poll loop can `match` over it exhaustively instead of comparing strings.
# =============================================================================

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Uploading:
    """Bytes are still being transferred."""


@dataclass(frozen=True)
class Processing:
    """Upload finished; the provider is still preparing the file."""


@dataclass(frozen=True)
class Active:
    """The file is ready to be referenced from a generation request."""
    uri: str
    mime_type: str


@dataclass(frozen=True)
class Failed:
    """The provider gave up on the file."""
    reason: str | None = None


RemoteFileState = Union[Uploading, Processing, Active, Failed]


@dataclass(frozen=True)
class RemoteFile:
    """
    Handle to a file held in the provider's storage.

    `name` is the provider's identifier (e.g. "files/abc123"); it is what
    the get and delete calls take.
    """
    name: str
    state: RemoteFileState
