"""Base class for all sub-clients.

This module provides the base classes that the service-specific sub-clients
inherit from. They give access to the shared HTTP client and convenience
methods for making requests.

This is an internal module and should not be imported directly by users.
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from client._http import AsyncHTTPClient, HTTPClient


class BaseClient:
    """Base class for synchronous sub-clients.

    All service clients (AuthClient, FriendsClient, etc.) inherit from this
    class. Requests default to ``require_auth=True`` because almost every
    backend endpoint sits behind the JWT middleware; the few public ones
    pass ``require_auth=False`` explicitly.

    Attributes:
        _http: The shared HTTP client for making requests.
    """

    def __init__(self, http_client: "HTTPClient") -> None:
        """Initialize the sub-client.

        Args:
            http_client: The shared HTTP client instance.
        """
        self._http = http_client

    def _get(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        require_auth: bool = True,
    ) -> Any:
        """Make a GET request."""
        return self._http.get(path, params=params, require_auth=require_auth)

    def _post(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        require_auth: bool = True,
    ) -> Any:
        """Make a POST request."""
        return self._http.post(path, json=json, params=params, require_auth=require_auth)

    def _put(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        require_auth: bool = True,
    ) -> Any:
        """Make a PUT request."""
        return self._http.put(path, json=json, params=params, require_auth=require_auth)

    def _delete(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        require_auth: bool = True,
    ) -> Any:
        """Make a DELETE request."""
        return self._http.delete(path, json=json, params=params, require_auth=require_auth)


class AsyncBaseClient:
    """Base class for asynchronous sub-clients.

    Mirrors BaseClient for the async service clients.

    Attributes:
        _http: The shared async HTTP client for making requests.
    """

    def __init__(self, http_client: "AsyncHTTPClient") -> None:
        """Initialize the async sub-client.

        Args:
            http_client: The shared async HTTP client instance.
        """
        self._http = http_client

    async def _get(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        require_auth: bool = True,
    ) -> Any:
        """Make an async GET request."""
        return await self._http.get(path, params=params, require_auth=require_auth)

    async def _post(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        require_auth: bool = True,
    ) -> Any:
        """Make an async POST request."""
        return await self._http.post(
            path, json=json, params=params, require_auth=require_auth
        )

    async def _put(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        require_auth: bool = True,
    ) -> Any:
        """Make an async PUT request."""
        return await self._http.put(
            path, json=json, params=params, require_auth=require_auth
        )

    async def _delete(
        self,
        path: str,
        json: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        require_auth: bool = True,
    ) -> Any:
        """Make an async DELETE request."""
        return await self._http.delete(
            path, json=json, params=params, require_auth=require_auth
        )
