"""Hoàn Hảo API Client Library.

This module provides a type-safe Python client for the Hoàn Hảo backend
services (auth, users, friends, groups, posts). It supports both
synchronous and asynchronous usage patterns.

Example:
    Synchronous usage::

        from client import HoanHaoClient

        with HoanHaoClient(base_url="http://localhost:8000") as client:
            client.auth.login("1@gmail.com", "123456")
            client.friends.send_request(friend_id=42)

    Asynchronous usage::

        from client import AsyncHoanHaoClient

        async with AsyncHoanHaoClient(access_token=token) as client:
            feed = await client.posts.feed(limit=10)

Exports:
    HoanHaoClient: Synchronous client.
    AsyncHoanHaoClient: Asynchronous client.

    Exceptions:
        HoanHaoClientError: Base exception for all client errors.
        NotAuthenticatedError: Operation needs a token and none is set.
        ConnectionError: Failed to connect to the server.
        TimeoutError: Request timed out.
        APIError: Server returned an error response.
        ValidationError: Request validation failed (HTTP 400/422).
        AuthenticationError: Token missing or rejected (HTTP 401).
        PermissionDeniedError: Action not allowed (HTTP 403).
        NotFoundError: Resource not found (HTTP 404).
        ConflictError: State conflict (HTTP 409).
        ServerError: Server-side error (HTTP 5xx).
"""

from client._auth import AsyncAuthClient, AuthClient
from client._friends import (
    FRIEND_ACTIONS,
    AsyncFriendsClient,
    Friend,
    FriendList,
    FriendsClient,
    FriendshipStatus,
    FriendSuggestion,
)
from client._groups import (
    AsyncGroupsClient,
    Group,
    GroupDetail,
    GroupList,
    GroupMember,
    GroupMemberList,
    GroupsClient,
)
from client._posts import (
    AsyncPostsClient,
    Comment,
    FeedResponse,
    LikeResponse,
    Post,
    PostAuthor,
    PostMedia,
    PostsClient,
)
from client._users import AsyncUsersClient, UsersClient
from client.exceptions import (
    APIError,
    AuthenticationError,
    ConflictError,
    ConnectionError,
    HoanHaoClientError,
    NotAuthenticatedError,
    NotFoundError,
    PermissionDeniedError,
    ServerError,
    TimeoutError,
    ValidationError,
)
from client.models import (
    LoginResponse,
    MessageResponse,
    PublicProfile,
    UserBasic,
    UserList,
    UserProfile,
)
from client.client import AsyncHoanHaoClient, HoanHaoClient

__all__ = [
    # Main clients
    "HoanHaoClient",
    "AsyncHoanHaoClient",
    # Sub-clients
    "AuthClient",
    "AsyncAuthClient",
    "UsersClient",
    "AsyncUsersClient",
    "FriendsClient",
    "AsyncFriendsClient",
    "GroupsClient",
    "AsyncGroupsClient",
    "PostsClient",
    "AsyncPostsClient",
    # Exceptions
    "HoanHaoClientError",
    "NotAuthenticatedError",
    "ConnectionError",
    "TimeoutError",
    "APIError",
    "ValidationError",
    "AuthenticationError",
    "PermissionDeniedError",
    "NotFoundError",
    "ConflictError",
    "ServerError",
    # Response models - Shared
    "MessageResponse",
    "LoginResponse",
    "UserBasic",
    "UserProfile",
    "PublicProfile",
    "UserList",
    # Response models - Friends
    "FRIEND_ACTIONS",
    "Friend",
    "FriendList",
    "FriendSuggestion",
    "FriendshipStatus",
    # Response models - Groups
    "Group",
    "GroupDetail",
    "GroupList",
    "GroupMember",
    "GroupMemberList",
    # Response models - Posts
    "Post",
    "PostAuthor",
    "PostMedia",
    "FeedResponse",
    "Comment",
    "LikeResponse",
]
