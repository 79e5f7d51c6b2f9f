"""
Error taxonomy for the generation core.

The remote endpoint does not expose a typed exception hierarchy we can rely
on, so failures are classified by inspecting the error text. The matcher is
kept here so the rest of the package never looks at error strings directly.
"""
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Failure classes a caller can act on."""
    CAPABILITY_UNAVAILABLE = "capability_unavailable"
    GENERATION_FAILED = "generation_failed"
    UNUSABLE_CONTENT = "unusable_content"


# Substrings (matched case-insensitively) that mark a model or capability as
# unavailable for the caller's key: HTTP 404 and the SDK's NOT_FOUND status.
CAPABILITY_UNAVAILABLE_SIGNALS = ("404", "not found", "not_found")


class GenerationError(Exception):
    """Base error raised by the generation core."""

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.GENERATION_FAILED):
        super().__init__(message)
        self.kind = kind


class MalformedOutputError(GenerationError):
    """Model output could not be parsed into the expected payload."""

    def __init__(self, message: str):
        super().__init__(message, kind=ErrorKind.UNUSABLE_CONTENT)


class VideoJobTimeoutError(GenerationError):
    """A video job did not complete before the caller's deadline."""

    def __init__(self, message: str, operation_id: Optional[str] = None):
        super().__init__(message, kind=ErrorKind.GENERATION_FAILED)
        self.operation_id = operation_id


class PipelineStateError(RuntimeError):
    """An operation was requested from a pipeline stage that does not allow it."""


def classify_error(exc: BaseException) -> ErrorKind:
    """
    Classify an exception raised by a remote generation call.

    Args:
        exc: Exception raised by the SDK (or by this package)

    Returns:
        The ErrorKind of the failure. Errors already raised as GenerationError
        keep their kind; anything else is matched against
        CAPABILITY_UNAVAILABLE_SIGNALS and defaults to GENERATION_FAILED.
    """
    if isinstance(exc, GenerationError):
        return exc.kind

    message = str(exc).lower()
    if any(signal in message for signal in CAPABILITY_UNAVAILABLE_SIGNALS):
        return ErrorKind.CAPABILITY_UNAVAILABLE
    return ErrorKind.GENERATION_FAILED


def describe_failure(exc: BaseException) -> str:
    """Human-readable message for a failed operation, by failure class."""
    kind = classify_error(exc)
    if kind == ErrorKind.CAPABILITY_UNAVAILABLE:
        return f"Capability unavailable for this API key: {exc}"
    if kind == ErrorKind.UNUSABLE_CONTENT:
        return f"The model produced unusable content: {exc}"
    return f"Generation failed: {exc}"
