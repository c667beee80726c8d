"""Client handle and request executor shared by every TMDB endpoint call.

The handle stores credentials and behaviour flags. Each call goes through
``get`` or ``request``, which send one HTTP request, optionally retry on
throttling, and decode either the payload or the API error envelope.

The handle is not synchronized: configure it before issuing concurrent
calls and do not mutate it while calls are in flight.
"""

import asyncio
import json
import uuid
from functools import lru_cache
from typing import Any

import httpx
import structlog
from pydantic import BaseModel, TypeAdapter, ValidationError

from tmdbkit.config import DEFAULT_TIMEOUT, Settings, TransportConfig, get_settings
from tmdbkit.errors import (
    TMDBDecodeError,
    TMDBTransportError,
    TMDBUsageError,
    decode_error,
)
from tmdbkit.retry import DEFAULT_MAX_RETRY_ATTEMPTS, retry_duration, should_retry

logger = structlog.get_logger(__name__)

JSON_CONTENT_TYPE = "application/json;charset=utf-8"


@lru_cache(maxsize=128)
def _adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


def _encode_body(body: Any) -> bytes:
    if isinstance(body, BaseModel):
        return body.model_dump_json(exclude_none=True).encode()
    return json.dumps(body).encode()


class BaseTMDBClient:
    """Configured handle through which all TMDB calls are issued.

    Example:
        async with TMDBClient("api-key") as client:
            client.enable_auto_retry()
            movie = await client.get_movie_details(550)
    """

    def __init__(
        self,
        api_key: str,
        *,
        session_id: str | None = None,
        transport_config: TransportConfig | None = None,
        max_retry_attempts: int | None = DEFAULT_MAX_RETRY_ATTEMPTS,
    ):
        """Initialize the client handle.

        Args:
            api_key: TMDB API key (required)
            session_id: Optional session id for account and rating calls
            transport_config: HTTP transport settings
            max_retry_attempts: Retries allowed per call when auto retry is
                enabled. None retries until a non-throttling status arrives.

        Raises:
            TMDBUsageError: If api_key or session_id is empty
        """
        if not api_key:
            raise TMDBUsageError("API key is empty")

        self._api_key = api_key
        self._session_id: str | None = None
        self._auto_retry = False
        self._with_context = False
        self._max_retry_attempts = max_retry_attempts
        self._transport = transport_config or TransportConfig()
        self._http: httpx.AsyncClient | None = None
        self._http_stale = False
        self._http_owns_transport = True

        if session_id is not None:
            self.set_session_id(session_id)

    @classmethod
    def from_settings(cls, config: Settings | None = None):
        """Create a client from environment configuration.

        Args:
            config: Settings to use. Loads them from the environment if None.

        Raises:
            TMDBUsageError: If no API key is configured
        """
        config = config or get_settings()
        if config.api_key is None:
            raise TMDBUsageError("TMDB_API_KEY is not set")

        client = cls(
            config.api_key.get_secret_value(),
            transport_config=config.transport_config(),
            max_retry_attempts=config.max_retry_attempts,
        )
        if config.session_id is not None:
            client.set_session_id(config.session_id.get_secret_value())
        if config.auto_retry:
            client.enable_auto_retry()
        if config.with_context:
            client.enable_context_propagation()
        return client

    async def __aenter__(self):
        return self

    async def __aexit__(self, _exc_type: Any, _exc_val: Any, _exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the pooled HTTP client.

        A transport passed in TransportConfig.transport belongs to the caller
        and is left open.
        """
        await self._release_http()

    async def _release_http(self) -> None:
        if self._http is None:
            return
        if self._http_owns_transport:
            await self._http.aclose()
        self._http = None

    # =========================================================================
    # Configuration
    # =========================================================================

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def session_id(self) -> str | None:
        return self._session_id

    @property
    def auto_retry(self) -> bool:
        return self._auto_retry

    @property
    def with_context(self) -> bool:
        return self._with_context

    @property
    def max_retry_attempts(self) -> int | None:
        return self._max_retry_attempts

    @property
    def transport_config(self) -> TransportConfig:
        return self._transport

    def set_session_id(self, session_id: str) -> None:
        """Set the session id used by subsequent calls.

        Raises:
            TMDBUsageError: If session_id is empty
        """
        if not session_id:
            raise TMDBUsageError("The session id is empty")
        self._session_id = session_id

    def set_transport_config(self, config: TransportConfig) -> None:
        """Replace the transport settings.

        The pooled HTTP client is rebuilt on the next call.
        """
        self._transport = config
        self._http_stale = True

    def enable_auto_retry(self) -> None:
        """Retry throttled (202/429) responses after the Retry-After delay."""
        self._auto_retry = True

    def enable_context_propagation(self) -> None:
        """Run each call in a request-scoped context.

        Calls bind a request id to structlog context variables and, when
        TransportConfig.call_deadline is set, are cancelled once the
        deadline passes, retry sleeps included.
        """
        self._with_context = True

    def set_max_retry_attempts(self, attempts: int | None) -> None:
        """Cap retries per call. None allows unbounded retrying."""
        self._max_retry_attempts = attempts

    # =========================================================================
    # Request Execution
    # =========================================================================

    async def get(self, url: str, target: Any = None) -> Any:
        """Send a GET request and decode the response.

        Args:
            url: Full request URL including the query string
            target: Type to decode the body into (pydantic model, dict, ...).
                Decodes into a JSON object if None.

        Returns:
            Decoded body, or None for 204 No Content

        Raises:
            TMDBUsageError: Empty URL
            TMDBTransportError: Request could not be delivered
            TMDBAPIError: API returned an error envelope
            TMDBOpaqueError: API returned an unparsable error body
            TMDBDecodeError: Success body did not match target
        """
        return await self._execute("GET", url, None, target)

    async def request(self, url: str, body: Any, method: str, target: Any = None) -> Any:
        """Send a request carrying a JSON body (POST, PUT, DELETE).

        Args:
            url: Full request URL including the query string
            body: JSON-serializable body or pydantic model; None sends no body
            method: HTTP method
            target: Type to decode the body into. Decodes into a JSON object if None.

        Returns:
            Decoded body

        Raises:
            Same as get(). 204 No Content is reported as TMDBAPIError.
        """
        return await self._execute(method.upper(), url, body, target)

    async def _execute(self, method: str, url: str, body: Any, target: Any) -> Any:
        if not url:
            raise TMDBUsageError("url field is empty")

        if self._transport.timeout is None:
            self._transport = self._transport.model_copy(update={"timeout": DEFAULT_TIMEOUT})
            self._http_stale = True

        if not self._with_context:
            return await self._send(method, url, body, target)

        with structlog.contextvars.bound_contextvars(
            tmdb_request_id=uuid.uuid4().hex[:12],
            tmdb_method=method,
        ):
            deadline = self._transport.call_deadline
            if deadline is None:
                return await self._send(method, url, body, target)
            try:
                return await asyncio.wait_for(self._send(method, url, body, target), timeout=deadline)
            except asyncio.TimeoutError as e:
                raise TMDBTransportError(f"call deadline of {deadline}s exceeded") from e

    async def _get_http(self) -> httpx.AsyncClient:
        if self._http is not None and not self._http_stale:
            return self._http

        await self._release_http()
        self._http = httpx.AsyncClient(
            timeout=self._transport.timeout,
            headers=self._transport.headers,
            transport=self._transport.transport,
        )
        self._http_owns_transport = self._transport.transport is None
        self._http_stale = False
        return self._http

    async def _send(self, method: str, url: str, body: Any, target: Any) -> Any:
        http = await self._get_http()
        content = None if body is None else _encode_body(body)
        request = http.build_request(
            method,
            url,
            content=content,
            headers={"content-type": JSON_CONTENT_TYPE},
        )
        path = request.url.path
        retries = 0

        while True:
            logger.debug("tmdb_request", method=method, path=path, retries=retries)
            try:
                response = await http.send(request)
            except httpx.HTTPError as e:
                raise TMDBTransportError(f"HTTP error: {e}") from e

            try:
                if not self._retry_allowed(response.status_code, retries):
                    return self._handle_response(method, response, target)
                delay = retry_duration(response.headers)
            finally:
                await response.aclose()

            retries += 1
            logger.info(
                "tmdb_retry_scheduled",
                method=method,
                path=path,
                status_code=response.status_code,
                delay=delay,
                retries=retries,
            )
            await asyncio.sleep(delay)

    def _retry_allowed(self, status_code: int, retries: int) -> bool:
        if not self._auto_retry or not should_retry(status_code):
            return False
        return self._max_retry_attempts is None or retries < self._max_retry_attempts

    def _handle_response(self, method: str, response: httpx.Response, target: Any) -> Any:
        status = response.status_code

        if method == "GET":
            if status == httpx.codes.NO_CONTENT:
                return None
            if status != httpx.codes.OK:
                raise self._error(method, response)
        elif status >= 300 or status < 200 or status == httpx.codes.NO_CONTENT:
            raise self._error(method, response)

        try:
            return _adapter(dict[str, Any] if target is None else target).validate_json(response.content)
        except ValidationError as e:
            raise TMDBDecodeError(f"could not decode the data: {e}") from e

    def _error(self, method: str, response: httpx.Response) -> Exception:
        error = decode_error(response)
        logger.debug(
            "tmdb_response_error",
            method=method,
            path=response.request.url.path,
            status_code=response.status_code,
            error=str(error),
        )
        return error

    def _require_session(self) -> str:
        if not self._session_id:
            raise TMDBUsageError("The session id is empty")
        return self._session_id
