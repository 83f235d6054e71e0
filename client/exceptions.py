"""Exception hierarchy for the Hoàn Hảo API client.

Exception Hierarchy:
    HoanHaoClientError (base)
    ├── NotAuthenticatedError - No access token for a protected call
    ├── ConnectionError - Network/connection failures
    ├── TimeoutError - Request timeout
    └── APIError - Server returned an error response
        ├── ValidationError (HTTP 400/422)
        ├── AuthenticationError (HTTP 401)
        ├── PermissionDeniedError (HTTP 403)
        ├── NotFoundError (HTTP 404)
        ├── ConflictError (HTTP 409)
        └── ServerError (HTTP 5xx)

Example:
    try:
        client.friends.send_request(friend_id=42)
    except ConflictError:
        # Request already pending
        pass
    except AuthenticationError:
        # Token expired, log in again
        ...
"""

from typing import Any


class HoanHaoClientError(Exception):
    """Base exception for all Hoàn Hảo client errors.

    Attributes:
        message: Text suitable for showing to the user.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class NotAuthenticatedError(HoanHaoClientError):
    """A protected operation was called without an access token.

    Raised client-side before any request is made, so callers can send the
    user to the login page without a round trip.
    """

    def __init__(self, message: str = "Bạn chưa đăng nhập") -> None:
        super().__init__(message)


class ConnectionError(HoanHaoClientError):
    """The backend could not be reached.

    Attributes:
        url: The URL of the failed request.
        cause: The underlying httpx error.
    """

    def __init__(self, message: str, url: str | None = None, cause: Exception | None = None) -> None:
        self.url = url
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.message} (url: {self.url})" if self.url else self.message


class TimeoutError(HoanHaoClientError):
    """The backend did not answer in time."""

    def __init__(self, message: str, timeout: float | None = None, url: str | None = None) -> None:
        self.timeout = timeout
        self.url = url
        super().__init__(message)

    def __str__(self) -> str:
        parts = []
        if self.timeout is not None:
            parts.append(f"timeout: {self.timeout}s")
        if self.url:
            parts.append(f"url: {self.url}")
        return f"{self.message} ({', '.join(parts)})" if parts else self.message


class APIError(HoanHaoClientError):
    """The backend answered with an HTTP error status.

    Subclasses fix ``status_code`` and ``error_type`` for the statuses the
    client maps; both can still be given per instance.

    Attributes:
        status_code: HTTP status code.
        error_type: Short error code, from the subclass or the response.
        details: Structured error details from the response, if any.
        response_body: Raw response body for debugging.
    """

    status_code: int = 500
    error_type: str | None = None

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        error_type: str | None = None,
        details: dict[str, Any] | None = None,
        response_body: Any = None,
    ) -> None:
        if status_code is not None:
            self.status_code = status_code
        if error_type is not None:
            self.error_type = error_type
        self.details = details
        self.response_body = response_body
        super().__init__(message)

    def __str__(self) -> str:
        if self.error_type:
            return f"[HTTP {self.status_code}] [{self.error_type}] {self.message}"
        return f"[HTTP {self.status_code}] {self.message}"


class ValidationError(APIError):
    """Request validation failed (HTTP 400 or 422).

    The backend services reject malformed payloads with 400 (binding
    errors) or 422; both end up here. ``details`` typically holds the
    field-level errors.
    """

    status_code = 422
    error_type = "validation_error"


class AuthenticationError(APIError):
    """Missing, invalid or expired credentials (HTTP 401).

    Raised on a failed login as well as on any call made with a token the
    backend no longer accepts.
    """

    status_code = 401
    error_type = "unauthorized"


class PermissionDeniedError(APIError):
    """Authenticated but not allowed, e.g. editing a group without the admin role (HTTP 403)."""

    status_code = 403
    error_type = "forbidden"


class NotFoundError(APIError):
    status_code = 404
    error_type = "not_found"


class ConflictError(APIError):
    """The action does not fit the current state (HTTP 409).

    For example a friend request that is already pending, or joining a
    group the user already belongs to.
    """

    status_code = 409
    error_type = "conflict"


class ServerError(APIError):
    """Server-side error (HTTP 5xx).

    With retries enabled, 502/503/504 answers are retried before this is
    raised.
    """

    status_code = 500
    error_type = "server_error"
