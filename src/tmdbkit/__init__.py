"""Async client for The Movie Database (TMDB) API.

All endpoint calls share one request pipeline: build the request, send it,
optionally retry on throttling, decode the payload or the API error.
"""

from tmdbkit.api import TMDBClient
from tmdbkit.client import BaseTMDBClient
from tmdbkit.config import Settings, TransportConfig
from tmdbkit.errors import (
    TMDBAPIError,
    TMDBAuthError,
    TMDBDecodeError,
    TMDBError,
    TMDBNotFoundError,
    TMDBOpaqueError,
    TMDBRateLimitError,
    TMDBTransportError,
    TMDBUsageError,
    decode_error,
)
from tmdbkit.models import (
    Credits,
    MediaType,
    Movie,
    Page,
    PersonDetails,
    Response,
    SearchResult,
    TVShow,
)
from tmdbkit.retry import retry_duration, should_retry
from tmdbkit.urls import format_options

__all__ = [
    # Client
    "TMDBClient",
    "BaseTMDBClient",
    "Settings",
    "TransportConfig",
    # Errors
    "TMDBError",
    "TMDBUsageError",
    "TMDBTransportError",
    "TMDBDecodeError",
    "TMDBAPIError",
    "TMDBAuthError",
    "TMDBNotFoundError",
    "TMDBRateLimitError",
    "TMDBOpaqueError",
    "decode_error",
    # Models
    "Credits",
    "MediaType",
    "Movie",
    "Page",
    "PersonDetails",
    "Response",
    "SearchResult",
    "TVShow",
    # Helpers
    "format_options",
    "retry_duration",
    "should_retry",
]
