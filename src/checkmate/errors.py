"""Typed errors raised by the verification pipeline.

Every error carries a stable ``code`` and a caller-safe ``message``. The
boundary layer (CLI, HTTP handler) converts them with :func:`to_failure`,
which never exposes stack traces or vendor error text.
"""

import logging
from typing import Any

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "An internal server error occurred"


class CheckmateError(Exception):
    """Base class for all pipeline errors.

    Args:
        code: Stable machine-readable error code.
        message: Human-readable message safe to show to callers.
        status_code: HTTP-style status used by boundary layers.
        context: Optional structured details (never vendor error text).
    """

    def __init__(
        self,
        code: str,
        message: str,
        *,
        status_code: int = 500,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.status_code = status_code
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Structured failure object for callers."""
        failure: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.context:
            failure["context"] = self.context
        return failure


class ValidationError(CheckmateError):
    """Bad or missing input. Never retried."""

    def __init__(self, code: str, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(code, message, status_code=400, context=context)

    @classmethod
    def missing_url(cls) -> "ValidationError":
        return cls("MISSING_URL", "A URL is required")

    @classmethod
    def invalid_url(cls, url: str) -> "ValidationError":
        return cls("INVALID_URL", "The URL is not a valid http(s) URL", context={"url": url})

    @classmethod
    def unsupported_platform(cls, url: str) -> "ValidationError":
        return cls(
            "UNSUPPORTED_PLATFORM",
            "The URL does not belong to a supported platform",
            context={"url": url},
        )


class ConfigurationError(CheckmateError):
    """A required credential or setting is missing."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__("MISSING_API_KEY", message, status_code=500, context=context)


class ExtractionFailed(CheckmateError):
    """Content could not be extracted from the URL. Fatal for the pipeline."""

    def __init__(self, platform: str, url: str, cause: BaseException | None = None) -> None:
        super().__init__(
            "EXTRACTION_FAILED",
            f"Failed to extract content from {platform}",
            status_code=502,
            context={"platform": platform, "url": url, "cause": _cause_kind(cause)},
        )
        self.platform = platform
        self.url = url
        self.cause = cause


class TranscriptionFailed(CheckmateError):
    """Speech-to-text failed. The pipeline swallows this into a null transcription."""

    def __init__(
        self, media_url: str, cause: BaseException | None = None, *, status_code: int = 500
    ) -> None:
        super().__init__(
            "TRANSCRIPTION_FAILED",
            "Failed to transcribe media",
            status_code=status_code,
            context={"media_url": media_url, "cause": _cause_kind(cause)},
        )
        self.cause = cause


class FactCheckFailed(CheckmateError):
    """The research round trip produced no usable result."""

    def __init__(self, reason: str) -> None:
        super().__init__("FACT_CHECK_FAILED", "Fact-checking failed", context={"reason": reason})


class CircuitOpen(CheckmateError):
    """A protected dependency is failing fast."""

    def __init__(self, service: str) -> None:
        super().__init__(
            "CIRCUIT_OPEN",
            f"Circuit breaker is open for {service}",
            status_code=503,
            context={"service": service},
        )
        self.service = service


class OperationTimeout(CheckmateError):
    """A unit of work did not finish within its time budget."""

    def __init__(self, operation: str, seconds: float) -> None:
        super().__init__(
            "REQUEST_TIMEOUT",
            f"Operation '{operation}' timed out after {seconds:g}s",
            status_code=408,
            context={"operation": operation, "seconds": seconds},
        )
        self.operation = operation
        self.seconds = seconds


class RateLimited(CheckmateError):
    """Too many requests for an identity or operation. Never retried automatically."""

    def __init__(self, retry_after: int, *, key: str | None = None) -> None:
        context: dict[str, Any] = {"retry_after": retry_after}
        if key:
            context["key"] = key
        super().__init__(
            "RATE_LIMITED",
            f"Too many requests. Retry after {retry_after} seconds",
            status_code=429,
            context=context,
        )
        self.retry_after = retry_after


class InternalError(CheckmateError):
    """Catch-all for unexpected failures. Only a generic message is exposed."""

    def __init__(self) -> None:
        super().__init__("INTERNAL_ERROR", INTERNAL_ERROR_MESSAGE)


def to_failure(exc: BaseException) -> dict[str, Any]:
    """Convert any exception into a caller-safe failure object.

    Args:
        exc: The exception that reached the boundary.

    Returns:
        ``{code, message, context?}`` dict.
    """
    if isinstance(exc, CheckmateError):
        return exc.to_dict()
    logger.error("Unexpected error at boundary", exc_info=exc)
    return InternalError().to_dict()


def _cause_kind(cause: BaseException | None) -> str | None:
    """Name the failure kind without leaking vendor error text."""
    if cause is None:
        return None
    if isinstance(cause, CheckmateError):
        return cause.code
    return type(cause).__name__
