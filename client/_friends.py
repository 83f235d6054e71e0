"""Friendship sub-client for the Hoàn Hảo API.

This module provides FriendsClient and AsyncFriendsClient for the
friendship endpoints (/friends/*).

This is an internal module. Import from `client` instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, Field

from client._base import AsyncBaseClient, BaseClient
from client.models import MessageResponse, UserBasic

if TYPE_CHECKING:
    from client._http import AsyncHTTPClient, HTTPClient


# Type aliases for friendship fields
FriendStatus = Literal["pending", "accepted", "rejected", "blocked"]
RequestDirection = Literal["incoming", "outgoing"]
FriendAction = Literal[
    "send-request", "accept", "reject", "cancel", "unfriend", "block", "unblock"
]

FRIEND_ACTIONS: tuple[str, ...] = (
    "send-request",
    "accept",
    "reject",
    "cancel",
    "unfriend",
    "block",
    "unblock",
)

MAX_SUGGESTIONS = 50
MAX_PAGE_SIZE = 100


# Response models for friendship endpoints


class Friend(BaseModel):
    """A friendship row seen from the current user's side.

    Attributes:
        id: Friendship (or request) ID.
        user_id: The user who initiated the friendship.
        friend_id: The other user.
        status: pending, accepted, rejected or blocked.
        created_at: When the request was sent.
        updated_at: When the status last changed.
        friend: The other user's card.
        mutual_friends_count: Number of friends in common.
    """

    id: int
    user_id: int
    friend_id: int
    status: FriendStatus = "pending"
    created_at: str | None = None
    updated_at: str | None = None
    friend: UserBasic
    mutual_friends_count: int = 0


class FriendList(BaseModel):
    """Paginated list of friendships or friend requests.

    Attributes:
        friends: Rows on this page.
        total: Total rows.
        page: Current page (1-indexed).
        page_size: Page size.
    """

    friends: list[Friend] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 10


class FriendSuggestion(UserBasic):
    """A suggested user with the number of mutual friends."""

    mutual_friends_count: int = 0


class FriendshipStatus(BaseModel):
    """Friendship status between the current user and another user.

    Attributes:
        status: e.g. "none", "pending_sent", "pending_received", "friends",
            "blocked". The backend owns the vocabulary.
        friendship_id: ID of the underlying row, if any.
    """

    status: str = "none"
    friendship_id: int | None = None


def _check_page(page: int, page_size: int) -> None:
    if page < 1:
        raise ValueError("page must be >= 1")
    if not 1 <= page_size <= MAX_PAGE_SIZE:
        raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}")


def _check_action(action: str) -> None:
    if action not in FRIEND_ACTIONS:
        raise ValueError(f"Unknown friend action '{action}'. Expected one of {FRIEND_ACTIONS}")


def _suggestions(data: Any) -> list[FriendSuggestion]:
    # Older gateway versions return a bare list
    items = data.get("suggestions", []) if isinstance(data, dict) else (data or [])
    return [FriendSuggestion(**item) for item in items]


def _mutual_count(data: Any) -> int:
    if isinstance(data, dict):
        for key in ("mutual_friends_count", "count", "total"):
            if key in data:
                return int(data[key])
        return 0
    return int(data or 0)


def _message(data: Any) -> MessageResponse:
    if isinstance(data, dict):
        return MessageResponse(**data)
    return MessageResponse()


class FriendsClient(BaseClient):
    """Synchronous client for friendship endpoints (/friends/*).

    Every endpoint requires authentication.

    Example:
        with HoanHaoClient(access_token=token) as client:
            page = client.friends.list(page=1)
            incoming = client.friends.requests()
            for row in incoming.friends:
                client.friends.accept(row.friend.id)
    """

    _BASE_PATH = "/friends"

    def list(
        self,
        page: int = 1,
        page_size: int = 10,
        status: FriendStatus | None = None,
    ) -> FriendList:
        """List the current user's friends.

        Args:
            page: Page number (1-indexed).
            page_size: Rows per page (1-100).
            status: Optional status filter.

        Returns:
            A page of friendships.
        """
        _check_page(page, page_size)
        data = self._get(
            self._BASE_PATH,
            params={"page": page, "page_size": page_size, "status": status},
        )
        return FriendList(**data)

    def requests(
        self,
        type: RequestDirection = "incoming",
        page: int = 1,
        page_size: int = 10,
    ) -> FriendList:
        """List pending friend requests.

        Args:
            type: "incoming" (received) or "outgoing" (sent).
            page: Page number (1-indexed).
            page_size: Rows per page (1-100).
        """
        _check_page(page, page_size)
        data = self._get(
            f"{self._BASE_PATH}/requests",
            params={"type": type, "page": page, "page_size": page_size},
        )
        return FriendList(**data)

    def suggestions(self, limit: int = 10) -> list[FriendSuggestion]:
        """Get people the current user may know.

        Args:
            limit: Maximum suggestions (1-50).
        """
        if not 1 <= limit <= MAX_SUGGESTIONS:
            raise ValueError(f"limit must be between 1 and {MAX_SUGGESTIONS}")
        data = self._get(f"{self._BASE_PATH}/suggestions", params={"limit": limit})
        return _suggestions(data)

    def of_user(self, username: str, page: int = 1, page_size: int = 10) -> FriendList:
        """List another user's friends."""
        _check_page(page, page_size)
        data = self._get(
            f"{self._BASE_PATH}/user/{username}",
            params={"page": page, "page_size": page_size},
        )
        return FriendList(**data)

    def mutual(self, username: str) -> int:
        """Count friends in common with another user."""
        data = self._get(f"{self._BASE_PATH}/mutual/{username}")
        return _mutual_count(data)

    def status(self, username: str) -> FriendshipStatus:
        """Get the friendship status with another user."""
        data = self._get(f"{self._BASE_PATH}/status/{username}")
        return FriendshipStatus(**data)

    def action(self, action: FriendAction, friend_id: int) -> MessageResponse:
        """Perform a friendship action on another user.

        Args:
            action: One of FRIEND_ACTIONS.
            friend_id: The other user's ID.

        Returns:
            The service acknowledgement.

        Raises:
            ValueError: If the action is unknown.
            ConflictError: If the action does not fit the current status.
        """
        _check_action(action)
        data = self._post(f"{self._BASE_PATH}/{action}", json={"friend_id": friend_id})
        return _message(data)

    def send_request(self, friend_id: int) -> MessageResponse:
        """Send a friend request."""
        return self.action("send-request", friend_id)

    def accept(self, friend_id: int) -> MessageResponse:
        """Accept a friend request from friend_id."""
        return self.action("accept", friend_id)

    def reject(self, friend_id: int) -> MessageResponse:
        """Reject a friend request from friend_id."""
        return self.action("reject", friend_id)

    def cancel(self, friend_id: int) -> MessageResponse:
        """Cancel a friend request previously sent to friend_id."""
        return self.action("cancel", friend_id)

    def unfriend(self, friend_id: int) -> MessageResponse:
        """Remove friend_id from the friend list."""
        return self.action("unfriend", friend_id)

    def block(self, friend_id: int) -> MessageResponse:
        """Block friend_id."""
        return self.action("block", friend_id)

    def unblock(self, friend_id: int) -> MessageResponse:
        """Unblock friend_id."""
        return self.action("unblock", friend_id)


class AsyncFriendsClient(AsyncBaseClient):
    """Asynchronous client for friendship endpoints (/friends/*)."""

    _BASE_PATH = "/friends"

    async def list(
        self,
        page: int = 1,
        page_size: int = 10,
        status: FriendStatus | None = None,
    ) -> FriendList:
        """List the current user's friends."""
        _check_page(page, page_size)
        data = await self._get(
            self._BASE_PATH,
            params={"page": page, "page_size": page_size, "status": status},
        )
        return FriendList(**data)

    async def requests(
        self,
        type: RequestDirection = "incoming",
        page: int = 1,
        page_size: int = 10,
    ) -> FriendList:
        """List pending friend requests."""
        _check_page(page, page_size)
        data = await self._get(
            f"{self._BASE_PATH}/requests",
            params={"type": type, "page": page, "page_size": page_size},
        )
        return FriendList(**data)

    async def suggestions(self, limit: int = 10) -> list[FriendSuggestion]:
        """Get people the current user may know."""
        if not 1 <= limit <= MAX_SUGGESTIONS:
            raise ValueError(f"limit must be between 1 and {MAX_SUGGESTIONS}")
        data = await self._get(f"{self._BASE_PATH}/suggestions", params={"limit": limit})
        return _suggestions(data)

    async def of_user(
        self, username: str, page: int = 1, page_size: int = 10
    ) -> FriendList:
        """List another user's friends."""
        _check_page(page, page_size)
        data = await self._get(
            f"{self._BASE_PATH}/user/{username}",
            params={"page": page, "page_size": page_size},
        )
        return FriendList(**data)

    async def mutual(self, username: str) -> int:
        """Count friends in common with another user."""
        data = await self._get(f"{self._BASE_PATH}/mutual/{username}")
        return _mutual_count(data)

    async def status(self, username: str) -> FriendshipStatus:
        """Get the friendship status with another user."""
        data = await self._get(f"{self._BASE_PATH}/status/{username}")
        return FriendshipStatus(**data)

    async def action(self, action: FriendAction, friend_id: int) -> MessageResponse:
        """Perform a friendship action. See FriendsClient.action."""
        _check_action(action)
        data = await self._post(
            f"{self._BASE_PATH}/{action}", json={"friend_id": friend_id}
        )
        return _message(data)

    async def send_request(self, friend_id: int) -> MessageResponse:
        return await self.action("send-request", friend_id)

    async def accept(self, friend_id: int) -> MessageResponse:
        return await self.action("accept", friend_id)

    async def reject(self, friend_id: int) -> MessageResponse:
        return await self.action("reject", friend_id)

    async def cancel(self, friend_id: int) -> MessageResponse:
        return await self.action("cancel", friend_id)

    async def unfriend(self, friend_id: int) -> MessageResponse:
        return await self.action("unfriend", friend_id)

    async def block(self, friend_id: int) -> MessageResponse:
        return await self.action("block", friend_id)

    async def unblock(self, friend_id: int) -> MessageResponse:
        return await self.action("unblock", friend_id)
