"""Internal HTTP handling utilities for the Hoàn Hảo client.

This module provides the low-level HTTP communication layer used by all
sub-clients. It handles:
- Making HTTP requests (sync and async)
- Bearer token authentication
- Response parsing and error handling
- Retry logic with exponential backoff

This is an internal module and should not be imported directly by users.
"""

import asyncio
import logging
import time
from typing import Any, Literal

import httpx

from client.exceptions import (
    APIError,
    AuthenticationError,
    ConflictError,
    ConnectionError,
    NotAuthenticatedError,
    NotFoundError,
    PermissionDeniedError,
    ServerError,
    TimeoutError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# HTTP methods supported by the client
HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]

# Status codes that trigger automatic retry (when retry is enabled)
RETRYABLE_STATUS_CODES = {502, 503, 504}

# Default backoff settings for retry logic
DEFAULT_RETRY_BACKOFF_BASE = 0.5  # seconds
DEFAULT_RETRY_BACKOFF_MAX = 30.0  # seconds

DEFAULT_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}

_STATUS_ERRORS: dict[int, type[APIError]] = {
    400: ValidationError,
    401: AuthenticationError,
    403: PermissionDeniedError,
    404: NotFoundError,
    409: ConflictError,
    422: ValidationError,
}


def _parse_error_response(response: httpx.Response) -> tuple[str, str | None, dict | None]:
    """Parse an error response to extract message, type, and details.

    The backend services are not consistent: the Go services answer
    ``{"error": "..."}``, the auth service ``{"message": "..."}`` and
    gateway/validation layers ``{"detail": ...}``. All three are understood.
    Falls back to the raw response text if the body is not JSON.

    Args:
        response: The HTTP response to parse.

    Returns:
        A tuple of (message, error_type, details).
    """
    try:
        body = response.json()
    except ValueError:
        text = response.text.strip()
        if text:
            return text, None, None
        return f"HTTP {response.status_code} error", None, None

    if isinstance(body, dict):
        detail = body.get("detail")
        if isinstance(detail, str):
            return detail, body.get("type"), body.get("details")
        elif isinstance(detail, list):
            # Validation errors come as a list
            messages = [
                f"{err.get('loc', ['unknown'])[-1]}: {err.get('msg', 'invalid')}"
                for err in detail
                if isinstance(err, dict)
            ]
            return "; ".join(messages), "validation_error", {"errors": detail}
        elif isinstance(detail, dict):
            return detail.get("message", str(detail)), detail.get("type"), detail

        if "message" in body:
            return str(body["message"]), body.get("type"), body.get("details")

        if "error" in body:
            return str(body["error"]), body.get("type"), body.get("details")

    return str(body), None, None


def _raise_for_status(response: httpx.Response) -> None:
    """Raise the mapped APIError subclass for an error response.

    Statuses without a subclass raise ServerError (5xx) or a plain
    APIError carrying the error type from the body.
    """
    if response.is_success:
        return

    message, error_type, details = _parse_error_response(response)
    status_code = response.status_code

    try:
        response_body = response.json()
    except ValueError:
        response_body = response.text

    exc_class = _STATUS_ERRORS.get(status_code)
    if exc_class is None:
        exc_class = ServerError if status_code >= 500 else APIError
    raise exc_class(
        message,
        status_code=status_code,
        error_type=error_type if exc_class is APIError else None,
        details=details,
        response_body=response_body,
    )


def _calculate_backoff(attempt: int, base: float = DEFAULT_RETRY_BACKOFF_BASE) -> float:
    """Calculate exponential backoff delay for retry attempts.

    Uses base * 2^attempt, capped at DEFAULT_RETRY_BACKOFF_MAX seconds.

    Args:
        attempt: The retry attempt number (0-indexed).
        base: Base delay in seconds.

    Returns:
        The delay in seconds before the next retry.
    """
    delay = base * (2 ** attempt)
    return min(delay, DEFAULT_RETRY_BACKOFF_MAX)


def _clean_params(params: dict[str, Any] | None) -> dict[str, Any] | None:
    """Drop query parameters whose value is None."""
    if not params:
        return params
    return {k: v for k, v in params.items() if v is not None}


def _parse_body(response: httpx.Response) -> Any:
    """Return the parsed JSON body, or None for empty responses."""
    if response.content:
        return response.json()
    return None


class _TokenMixin:
    """Access token bookkeeping shared by the sync and async clients."""

    access_token: str | None

    def set_access_token(self, token: str | None) -> None:
        """Set (or replace) the bearer token sent with every request.

        Args:
            token: The access token, or None to stop authenticating.
        """
        self.access_token = token or None

    def clear_access_token(self) -> None:
        """Forget the bearer token."""
        self.access_token = None

    @property
    def is_authenticated(self) -> bool:
        """Whether requests will carry an Authorization header."""
        return self.access_token is not None

    def _headers(self, require_auth: bool) -> dict[str, str]:
        if require_auth and not self.access_token:
            raise NotAuthenticatedError()
        if self.access_token:
            return {"Authorization": f"Bearer {self.access_token}"}
        return {}


class HTTPClient(_TokenMixin):
    """Synchronous HTTP client for making API requests.

    Wraps httpx.Client with bearer authentication, error handling, retry
    logic, and convenience methods for the Hoàn Hảo API.

    Attributes:
        base_url: The base URL for all API requests (usually the gateway).
        timeout: Request timeout in seconds.
        retry_enabled: Whether to retry on transient failures.
        max_retries: Maximum number of retry attempts.
        access_token: Bearer token attached to requests, if any.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        retry_enabled: bool = False,
        max_retries: int = 3,
        access_token: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the HTTP client.

        Args:
            base_url: The base URL for all API requests.
            timeout: Request timeout in seconds.
            retry_enabled: Whether to retry on transient failures.
            max_retries: Maximum number of retry attempts.
            access_token: Initial bearer token.
            transport: Custom transport (e.g., MockTransport for testing).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_enabled = retry_enabled
        self.max_retries = max_retries
        self.access_token = access_token or None

        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers=DEFAULT_HEADERS,
            transport=transport,
        )

    def close(self) -> None:
        """Close the HTTP client and release resources."""
        self._client.close()

    def __enter__(self) -> "HTTPClient":
        """Enter context manager."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit context manager and close client."""
        self.close()

    def request(
        self,
        method: HttpMethod,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        require_auth: bool = False,
    ) -> Any:
        """Make an HTTP request and return the parsed JSON response.

        Args:
            method: The HTTP method (GET, POST, etc.).
            path: The URL path (will be appended to base_url).
            params: Query parameters to include in the URL.
            json: JSON body to send with the request.
            require_auth: Fail fast with NotAuthenticatedError when no
                access token is set.

        Returns:
            The parsed JSON response body, or None for empty responses.

        Raises:
            NotAuthenticatedError: If require_auth is set and there is no token.
            ConnectionError: If the connection fails.
            TimeoutError: If the request times out.
            APIError: If the server returns an error response.
        """
        url = f"{self.base_url}{path}"
        headers = self._headers(require_auth)
        params = _clean_params(params)

        last_exception: Exception | None = None
        attempts = self.max_retries + 1 if self.retry_enabled else 1

        for attempt in range(attempts):
            try:
                response = self._client.request(
                    method=method,
                    url=path,
                    params=params,
                    json=json,
                    headers=headers,
                )

                if (
                    self.retry_enabled
                    and response.status_code in RETRYABLE_STATUS_CODES
                    and attempt < attempts - 1
                ):
                    delay = _calculate_backoff(attempt)
                    logger.info(
                        "%s %s answered %s, retrying in %.1fs",
                        method, path, response.status_code, delay,
                    )
                    time.sleep(delay)
                    continue

                _raise_for_status(response)
                return _parse_body(response)

            except httpx.ConnectError as e:
                last_exception = ConnectionError(
                    message=f"Failed to connect to {url}",
                    url=url,
                    cause=e,
                )
                if not self.retry_enabled or attempt >= attempts - 1:
                    raise last_exception from e
                time.sleep(_calculate_backoff(attempt))

            except httpx.TimeoutException as e:
                last_exception = TimeoutError(
                    message=f"Request to {url} timed out",
                    timeout=self.timeout,
                    url=url,
                )
                if not self.retry_enabled or attempt >= attempts - 1:
                    raise last_exception from e
                time.sleep(_calculate_backoff(attempt))

        if last_exception:
            raise last_exception
        raise RuntimeError("Unexpected error in request retry loop")

    def get(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        require_auth: bool = False,
    ) -> Any:
        """Make a GET request."""
        return self.request("GET", path, params=params, require_auth=require_auth)

    def post(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        require_auth: bool = False,
    ) -> Any:
        """Make a POST request."""
        return self.request(
            "POST", path, params=params, json=json, require_auth=require_auth
        )

    def put(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        require_auth: bool = False,
    ) -> Any:
        """Make a PUT request."""
        return self.request(
            "PUT", path, params=params, json=json, require_auth=require_auth
        )

    def delete(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        require_auth: bool = False,
    ) -> Any:
        """Make a DELETE request.

        Some backend endpoints (removing a group member) expect a JSON body
        on DELETE, so one can be passed.
        """
        return self.request(
            "DELETE", path, params=params, json=json, require_auth=require_auth
        )


class AsyncHTTPClient(_TokenMixin):
    """Asynchronous HTTP client for making API requests.

    Wraps httpx.AsyncClient with bearer authentication, error handling,
    retry logic, and convenience methods for the Hoàn Hảo API.

    Attributes:
        base_url: The base URL for all API requests (usually the gateway).
        timeout: Request timeout in seconds.
        retry_enabled: Whether to retry on transient failures.
        max_retries: Maximum number of retry attempts.
        access_token: Bearer token attached to requests, if any.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        retry_enabled: bool = False,
        max_retries: int = 3,
        access_token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the async HTTP client.

        Args:
            base_url: The base URL for all API requests.
            timeout: Request timeout in seconds.
            retry_enabled: Whether to retry on transient failures.
            max_retries: Maximum number of retry attempts.
            access_token: Initial bearer token.
            transport: Custom transport (e.g., MockTransport for testing).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.retry_enabled = retry_enabled
        self.max_retries = max_retries
        self.access_token = access_token or None

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            headers=DEFAULT_HEADERS,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHTTPClient":
        """Enter async context manager."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Exit async context manager and close client."""
        await self.close()

    async def request(
        self,
        method: HttpMethod,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        require_auth: bool = False,
    ) -> Any:
        """Make an async HTTP request and return the parsed JSON response.

        Args:
            method: The HTTP method (GET, POST, etc.).
            path: The URL path (will be appended to base_url).
            params: Query parameters to include in the URL.
            json: JSON body to send with the request.
            require_auth: Fail fast with NotAuthenticatedError when no
                access token is set.

        Returns:
            The parsed JSON response body, or None for empty responses.

        Raises:
            NotAuthenticatedError: If require_auth is set and there is no token.
            ConnectionError: If the connection fails.
            TimeoutError: If the request times out.
            APIError: If the server returns an error response.
        """
        url = f"{self.base_url}{path}"
        headers = self._headers(require_auth)
        params = _clean_params(params)

        last_exception: Exception | None = None
        attempts = self.max_retries + 1 if self.retry_enabled else 1

        for attempt in range(attempts):
            try:
                response = await self._client.request(
                    method=method,
                    url=path,
                    params=params,
                    json=json,
                    headers=headers,
                )

                if (
                    self.retry_enabled
                    and response.status_code in RETRYABLE_STATUS_CODES
                    and attempt < attempts - 1
                ):
                    delay = _calculate_backoff(attempt)
                    logger.info(
                        "%s %s answered %s, retrying in %.1fs",
                        method, path, response.status_code, delay,
                    )
                    await asyncio.sleep(delay)
                    continue

                _raise_for_status(response)
                return _parse_body(response)

            except httpx.ConnectError as e:
                last_exception = ConnectionError(
                    message=f"Failed to connect to {url}",
                    url=url,
                    cause=e,
                )
                if not self.retry_enabled or attempt >= attempts - 1:
                    raise last_exception from e
                await asyncio.sleep(_calculate_backoff(attempt))

            except httpx.TimeoutException as e:
                last_exception = TimeoutError(
                    message=f"Request to {url} timed out",
                    timeout=self.timeout,
                    url=url,
                )
                if not self.retry_enabled or attempt >= attempts - 1:
                    raise last_exception from e
                await asyncio.sleep(_calculate_backoff(attempt))

        if last_exception:
            raise last_exception
        raise RuntimeError("Unexpected error in request retry loop")

    async def get(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        require_auth: bool = False,
    ) -> Any:
        """Make an async GET request."""
        return await self.request("GET", path, params=params, require_auth=require_auth)

    async def post(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        require_auth: bool = False,
    ) -> Any:
        """Make an async POST request."""
        return await self.request(
            "POST", path, params=params, json=json, require_auth=require_auth
        )

    async def put(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        require_auth: bool = False,
    ) -> Any:
        """Make an async PUT request."""
        return await self.request(
            "PUT", path, params=params, json=json, require_auth=require_auth
        )

    async def delete(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        require_auth: bool = False,
    ) -> Any:
        """Make an async DELETE request."""
        return await self.request(
            "DELETE", path, params=params, json=json, require_auth=require_auth
        )
