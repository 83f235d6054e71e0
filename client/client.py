"""Main Hoàn Hảo client classes.

This module provides the main entry points for talking to the Hoàn Hảo
backend services:
- HoanHaoClient: Synchronous client
- AsyncHoanHaoClient: Asynchronous client

Both clients provide namespaced access to the services through sub-client
properties (client.auth, client.users, client.friends, client.groups,
client.posts). All sub-clients share one HTTP client, and therefore one
access token.

Example:
    Synchronous usage::

        from client import HoanHaoClient

        with HoanHaoClient(base_url="http://localhost:8000") as client:
            client.auth.login("1@gmail.com", "123456")
            me = client.users.get_me()
            feed = client.posts.feed(limit=10)

    Asynchronous usage::

        from client import AsyncHoanHaoClient

        async with AsyncHoanHaoClient(access_token=token) as client:
            friends = await client.friends.list()
"""

from typing import Any

from client._auth import AsyncAuthClient, AuthClient
from client._friends import AsyncFriendsClient, FriendsClient
from client._groups import AsyncGroupsClient, GroupsClient
from client._http import AsyncHTTPClient, HTTPClient
from client._posts import AsyncPostsClient, PostsClient
from client._users import AsyncUsersClient, UsersClient


class HoanHaoClient:
    """Synchronous client for the Hoàn Hảo API.

    Provides a unified interface to the backend services through namespaced
    sub-clients. Supports the context manager protocol for automatic
    resource cleanup.

    Attributes:
        base_url: The base URL of the API gateway.
        timeout: Request timeout in seconds.
        retry_enabled: Whether automatic retry is enabled.
        max_retries: Maximum number of retry attempts.

    Example:
        Basic usage with context manager::

            with HoanHaoClient() as client:
                tokens = client.auth.login("1@gmail.com", "123456")
                client.friends.send_request(friend_id=42)
                group = client.groups.create(name="Hội mèo")

        Manual lifecycle management::

            client = HoanHaoClient(access_token=token)
            try:
                client.posts.feed()
            finally:
                client.close()
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout: float = 30.0,
        retry_enabled: bool = False,
        max_retries: int = 3,
        access_token: str | None = None,
        transport: Any = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: The base URL of the API gateway (default: http://localhost:8000).
            timeout: Request timeout in seconds (default: 30.0).
            retry_enabled: Whether to automatically retry on transient failures.
                Retries on connection errors, timeouts, and HTTP 502/503/504
                with exponential backoff (default: False).
            max_retries: Maximum number of retry attempts when retry is enabled
                (default: 3).
            access_token: Bearer token of an already logged-in user.
            transport: Custom HTTP transport (e.g., MockTransport for testing).
        """
        self._base_url = base_url
        self._timeout = timeout
        self._retry_enabled = retry_enabled
        self._max_retries = max_retries

        self._http = HTTPClient(
            base_url=base_url,
            timeout=timeout,
            retry_enabled=retry_enabled,
            max_retries=max_retries,
            access_token=access_token,
            transport=transport,
        )

        # Sub-clients are created on first access
        self._auth: AuthClient | None = None
        self._users: UsersClient | None = None
        self._friends: FriendsClient | None = None
        self._groups: GroupsClient | None = None
        self._posts: PostsClient | None = None

    def __enter__(self) -> "HoanHaoClient":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the client and release resources."""
        self._http.close()

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def retry_enabled(self) -> bool:
        return self._retry_enabled

    @property
    def max_retries(self) -> int:
        return self._max_retries

    @property
    def access_token(self) -> str | None:
        """The bearer token currently attached to requests."""
        return self._http.access_token

    @access_token.setter
    def access_token(self, token: str | None) -> None:
        self._http.set_access_token(token)

    @property
    def is_authenticated(self) -> bool:
        return self._http.is_authenticated

    # Sub-client properties (lazy initialization)

    @property
    def auth(self) -> AuthClient:
        """Access auth service endpoints (/auth/*).

        Registration, login, token refresh and password reset.
        """
        if self._auth is None:
            self._auth = AuthClient(self._http)
        return self._auth

    @property
    def users(self) -> UsersClient:
        """Access user profile endpoints (/users/*)."""
        if self._users is None:
            self._users = UsersClient(self._http)
        return self._users

    @property
    def friends(self) -> FriendsClient:
        """Access friendship endpoints (/friends/*).

        Friend lists, requests, suggestions, and the friend actions
        (send-request, accept, reject, cancel, unfriend, block, unblock).
        """
        if self._friends is None:
            self._friends = FriendsClient(self._http)
        return self._friends

    @property
    def groups(self) -> GroupsClient:
        """Access group endpoints (/groups/*)."""
        if self._groups is None:
            self._groups = GroupsClient(self._http)
        return self._groups

    @property
    def posts(self) -> PostsClient:
        """Access post endpoints (/post/*): feed, posts, comments, likes."""
        if self._posts is None:
            self._posts = PostsClient(self._http)
        return self._posts


class AsyncHoanHaoClient:
    """Asynchronous client for the Hoàn Hảo API.

    Same surface as HoanHaoClient, with every endpoint method awaitable.
    The web front creates one per incoming request, bound to the caller's
    access token.

    Example:
        Basic usage with async context manager::

            async with AsyncHoanHaoClient(access_token=token) as client:
                me, feed = await asyncio.gather(
                    client.users.get_me(),
                    client.posts.feed(limit=10),
                )
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout: float = 30.0,
        retry_enabled: bool = False,
        max_retries: int = 3,
        access_token: str | None = None,
        transport: Any = None,
    ) -> None:
        """Initialize the async client. See HoanHaoClient for arguments."""
        self._base_url = base_url
        self._timeout = timeout
        self._retry_enabled = retry_enabled
        self._max_retries = max_retries

        self._http = AsyncHTTPClient(
            base_url=base_url,
            timeout=timeout,
            retry_enabled=retry_enabled,
            max_retries=max_retries,
            access_token=access_token,
            transport=transport,
        )

        self._auth: AsyncAuthClient | None = None
        self._users: AsyncUsersClient | None = None
        self._friends: AsyncFriendsClient | None = None
        self._groups: AsyncGroupsClient | None = None
        self._posts: AsyncPostsClient | None = None

    async def __aenter__(self) -> "AsyncHoanHaoClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the client and release resources."""
        await self._http.close()

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def retry_enabled(self) -> bool:
        return self._retry_enabled

    @property
    def max_retries(self) -> int:
        return self._max_retries

    @property
    def access_token(self) -> str | None:
        """The bearer token currently attached to requests."""
        return self._http.access_token

    @access_token.setter
    def access_token(self, token: str | None) -> None:
        self._http.set_access_token(token)

    @property
    def is_authenticated(self) -> bool:
        return self._http.is_authenticated

    @property
    def auth(self) -> AsyncAuthClient:
        """Access auth service endpoints (/auth/*)."""
        if self._auth is None:
            self._auth = AsyncAuthClient(self._http)
        return self._auth

    @property
    def users(self) -> AsyncUsersClient:
        """Access user profile endpoints (/users/*)."""
        if self._users is None:
            self._users = AsyncUsersClient(self._http)
        return self._users

    @property
    def friends(self) -> AsyncFriendsClient:
        """Access friendship endpoints (/friends/*)."""
        if self._friends is None:
            self._friends = AsyncFriendsClient(self._http)
        return self._friends

    @property
    def groups(self) -> AsyncGroupsClient:
        """Access group endpoints (/groups/*)."""
        if self._groups is None:
            self._groups = AsyncGroupsClient(self._http)
        return self._groups

    @property
    def posts(self) -> AsyncPostsClient:
        """Access post endpoints (/post/*)."""
        if self._posts is None:
            self._posts = AsyncPostsClient(self._http)
        return self._posts
