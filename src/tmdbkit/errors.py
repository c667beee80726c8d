"""Exceptions raised by the TMDB client and decoding of API error bodies.

TMDB reports failures with a JSON envelope::

    {"status_message": "...", "success": false, "status_code": 34}

``decode_error`` turns a non-success response into the matching exception.
Bodies that are not an envelope become ``TMDBOpaqueError`` so callers can
tell structured failures apart from raw upstream noise.
"""

import httpx
from pydantic import BaseModel, ValidationError

from tmdbkit.retry import retry_duration


class TMDBError(Exception):
    """Base exception for TMDB client errors."""

    pass


class TMDBUsageError(TMDBError, ValueError):
    """Raised for invalid arguments before any request is sent."""

    pass


class TMDBTransportError(TMDBError):
    """Raised when the request could not be delivered (DNS, connect, timeout)."""

    pass


class TMDBDecodeError(TMDBError):
    """Raised when a successful response body does not match the expected shape."""

    pass


class ErrorEnvelope(BaseModel):
    """Error body returned by the TMDB API."""

    status_message: str = ""
    success: bool = False
    status_code: int = 0


class TMDBAPIError(TMDBError):
    """Error reported by the TMDB API.

    Attributes:
        status_message: Human readable message from the API
        success: Success flag from the envelope (always False in practice)
        status_code: TMDB status code from the envelope, or the HTTP status
            when the body was empty
    """

    def __init__(self, status_message: str = "", success: bool = False, status_code: int = 0):
        self.status_message = status_message
        self.success = success
        self.status_code = status_code
        super().__init__(str(self))

    def __str__(self) -> str:
        return (
            f"code: {self.status_code} | success: {str(self.success).lower()} "
            f"| message: {self.status_message}"
        )

    @classmethod
    def from_envelope(cls, envelope: ErrorEnvelope, **kwargs) -> "TMDBAPIError":
        """Create the error from a decoded envelope."""
        return cls(
            status_message=envelope.status_message,
            success=envelope.success,
            status_code=envelope.status_code,
            **kwargs,
        )


class TMDBAuthError(TMDBAPIError):
    """Raised when the API key or session is rejected (HTTP 401)."""

    pass


class TMDBNotFoundError(TMDBAPIError):
    """Raised when a resource is not found on TMDB (HTTP 404)."""

    pass


class TMDBRateLimitError(TMDBAPIError):
    """Raised when TMDB rate limit is exceeded (HTTP 429)."""

    def __init__(
        self,
        status_message: str = "",
        success: bool = False,
        status_code: int = 429,
        retry_after: float = 0.0,
    ):
        self.retry_after = retry_after
        super().__init__(status_message, success, status_code)


class TMDBOpaqueError(TMDBError):
    """Raised when an error response body is not a TMDB error envelope."""

    def __init__(self, status_code: int, raw: bytes):
        self.status_code = status_code
        self.raw = raw
        super().__init__(f"couldn't decode error: ({len(raw)}) [{raw.decode(errors='replace')}]")


_STATUS_ERRORS: dict[int, type[TMDBAPIError]] = {
    httpx.codes.UNAUTHORIZED: TMDBAuthError,
    httpx.codes.NOT_FOUND: TMDBNotFoundError,
    httpx.codes.TOO_MANY_REQUESTS: TMDBRateLimitError,
}


def decode_error(response: httpx.Response) -> TMDBError:
    """Build the exception describing a non-success response.

    Args:
        response: Response whose body has been read

    Returns:
        TMDBAPIError (or a status specific subclass) for empty bodies and
        error envelopes, TMDBOpaqueError for anything else
    """
    raw = response.content
    error_cls = _STATUS_ERRORS.get(response.status_code, TMDBAPIError)
    extra = {}
    if error_cls is TMDBRateLimitError:
        extra["retry_after"] = retry_duration(response.headers)

    if not raw:
        return error_cls(
            status_message=httpx.codes.get_reason_phrase(response.status_code),
            success=False,
            status_code=response.status_code,
            **extra,
        )

    try:
        envelope = ErrorEnvelope.model_validate_json(raw)
    except ValidationError:
        return TMDBOpaqueError(response.status_code, raw)

    return error_cls.from_envelope(envelope, **extra)
