"""
Exception hierarchy for tubeexplode.

Every error raised by the library derives from TubeExplodeError so callers
can catch the whole family in one place.
"""

from enum import Enum
from typing import Optional


class TubeExplodeError(Exception):
    """Base exception for all library errors."""


class CipherParseReason(str, Enum):
    """Machine-readable reason attached to a CipherParseError."""
    TIMESTAMP_NOT_FOUND = "timestamp_not_found"
    DECIPHER_FUNCTION_NOT_FOUND = "decipher_function_not_found"
    CONTAINER_NAME_NOT_FOUND = "container_name_not_found"
    CONTAINER_DEFINITION_NOT_FOUND = "container_definition_not_found"
    NO_OPERATIONS_FOUND = "no_operations_found"


class CipherParseError(TubeExplodeError):
    """
    Raised when the player script cannot be turned into a cipher manifest.

    Args:
        reason: Which parse phase failed
        message: Human readable description
        container_name: Unresolved container name, when relevant
    """

    def __init__(self, reason: CipherParseReason, message: str, container_name: Optional[str] = None):
        super().__init__(message)
        self.reason = reason
        self.container_name = container_name


class PlayerScriptError(TubeExplodeError):
    """Raised when the player script location cannot be determined."""


class RequestFailedError(TubeExplodeError):
    """Raised when an HTTP request still fails after all retries."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NetworkDisabledError(RequestFailedError):
    """Raised when a request is attempted while running offline."""


class VideoUnavailableError(TubeExplodeError):
    """Raised when the platform reports a video as not playable."""


class StreamUndecryptableError(TubeExplodeError):
    """Raised when a stream's signature cannot be decrypted right now."""


class InvalidVideoIdError(TubeExplodeError, ValueError):
    """Raised when a string is neither a video ID nor a recognised video URL."""
