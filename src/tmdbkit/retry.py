"""Retry policy for throttled TMDB responses.

Both functions are pure: the executor decides whether retrying is enabled
and how many attempts remain.
"""

from collections.abc import Mapping

import httpx

# Seconds to wait when the server gives no usable Retry-After header
DEFAULT_RETRY_DURATION = 5.0

# Retries allowed per call unless the client opts into unbounded retrying
DEFAULT_MAX_RETRY_ATTEMPTS = 10

RETRYABLE_STATUS_CODES = frozenset({httpx.codes.ACCEPTED, httpx.codes.TOO_MANY_REQUESTS})


def should_retry(status_code: int) -> bool:
    """Check whether a status code asks the caller to try again later."""
    return status_code in RETRYABLE_STATUS_CODES


def retry_duration(headers: Mapping[str, str]) -> float:
    """Get the delay in seconds before re-issuing a throttled request.

    Args:
        headers: Response headers

    Returns:
        Retry-After value when it is a non-negative integer,
        DEFAULT_RETRY_DURATION otherwise
    """
    value = headers.get("Retry-After")
    if not value:
        return DEFAULT_RETRY_DURATION

    try:
        seconds = int(value.strip())
    except ValueError:
        return DEFAULT_RETRY_DURATION

    if seconds < 0:
        return DEFAULT_RETRY_DURATION
    return float(seconds)
