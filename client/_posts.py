"""Post service sub-client for the Hoàn Hảo API.

This module provides PostsClient and AsyncPostsClient for the post
endpoints (/post/*): the news feed, post CRUD, comments and likes.

This is an internal module. Import from `client` instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, Field

from client._base import AsyncBaseClient, BaseClient
from client.models import MessageResponse

if TYPE_CHECKING:
    from client._http import AsyncHTTPClient, HTTPClient


# Type aliases for post fields
FeedMode = Literal["latest", "popular"]
Visibility = Literal["public", "friends", "private"]
MediaType = Literal["image", "video"]

POST_UPDATE_FIELDS = ("content", "visibility", "media", "location", "feeling")
MAX_FEED_LIMIT = 50


# Response models for post endpoints


class PostMedia(BaseModel):
    """An image or video attached to a post."""

    id: int | None = None
    post_id: int | None = None
    media_url: str
    media_type: MediaType = "image"
    created_at: str | None = None


class PostAuthor(BaseModel):
    """Author card embedded in posts and comments."""

    id: int
    username: str = ""
    full_name: str = ""
    profile_picture_url: str | None = None


class Post(BaseModel):
    """A post as returned by the post service.

    Attributes:
        id: Post ID.
        user_id: Author's user ID.
        content: Text content.
        visibility: "public", "friends" or "private".
        created_at: Creation timestamp.
        updated_at: Last edit timestamp.
        media: Attached images and videos.
        total_likes: Like counter.
        total_comments: Comment counter.
        total_shares: Share counter.
        liked: Whether the current user liked the post.
        author: Author card.
    """

    id: int
    user_id: int
    content: str = ""
    visibility: Visibility = "public"
    created_at: str | None = None
    updated_at: str | None = None
    media: list[PostMedia] = Field(default_factory=list)
    total_likes: int = 0
    total_comments: int = 0
    total_shares: int = 0
    liked: bool = False
    author: PostAuthor | None = None


class FeedResponse(BaseModel):
    """A window of the news feed.

    Attributes:
        posts: Posts in this window.
        total: Total posts available.
        limit: Window size requested.
        offset: Window start.
    """

    posts: list[Post] = Field(default_factory=list)
    total: int = 0
    limit: int = 10
    offset: int = 0


class Comment(BaseModel):
    """A comment or reply on a post.

    ``replies`` is populated when the backend returns comments already
    nested; flat lists can be nested with ``web.feed.build_comment_tree``.
    """

    id: int
    post_id: int
    user_id: int
    parent_comment_id: int | None = None
    content: str = ""
    created_at: str | None = None
    updated_at: str | None = None
    is_deleted: bool = False
    likes: int = 0
    author: PostAuthor | None = None
    replies: list[Comment] = Field(default_factory=list)


class LikeResponse(BaseModel):
    """Result of toggling a like."""

    liked: bool
    total_likes: int = 0


def _check_window(limit: int, offset: int) -> None:
    if not 1 <= limit <= MAX_FEED_LIMIT:
        raise ValueError(f"limit must be between 1 and {MAX_FEED_LIMIT}")
    if offset < 0:
        raise ValueError("offset must be >= 0")


def _create_payload(
    content: str,
    visibility: str,
    media: list[dict[str, Any]] | None,
    location: str | None,
    feeling: str | None,
    tagged_users: list[int] | None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {"content": content, "visibility": visibility}
    if media:
        payload["media"] = media
    if location:
        payload["location"] = location
    if feeling:
        payload["feeling"] = feeling
    if tagged_users:
        payload["tagged_users"] = tagged_users
    return payload


def _update_payload(fields: dict[str, Any]) -> dict[str, Any]:
    unknown = set(fields) - set(POST_UPDATE_FIELDS)
    if unknown:
        raise ValueError(f"Unknown post fields: {sorted(unknown)}")
    return {k: v for k, v in fields.items() if v is not None}


def _comment_payload(content: str, parent_id: int | None) -> dict[str, Any]:
    payload: dict[str, Any] = {"content": content}
    if parent_id is not None:
        payload["parent_comment_id"] = parent_id
    return payload


def _comments(data: Any) -> list[Comment]:
    items = data.get("comments", []) if isinstance(data, dict) else (data or [])
    return [Comment(**item) for item in items]


def _message(data: Any) -> MessageResponse:
    if isinstance(data, dict):
        return MessageResponse(**data)
    return MessageResponse()


class PostsClient(BaseClient):
    """Synchronous client for post endpoints (/post/*).

    Reading a single post works anonymously. The feed and every write need
    an access token.

    Example:
        with HoanHaoClient(access_token=token) as client:
            feed = client.posts.feed(limit=10, mode="popular")
            for post in feed.posts:
                print(post.author.full_name, post.content)
            client.posts.toggle_like(feed.posts[0].id)
    """

    _BASE_PATH = "/post"

    def feed(self, limit: int = 10, offset: int = 0, mode: FeedMode = "latest") -> FeedResponse:
        """Get a window of the current user's news feed.

        Args:
            limit: Number of posts (1-50).
            offset: Number of posts to skip.
            mode: "latest" or "popular".

        Returns:
            The feed window.
        """
        _check_window(limit, offset)
        data = self._get(
            f"{self._BASE_PATH}/feed",
            params={"limit": limit, "offset": offset, "mode": mode},
        )
        return FeedResponse(**data)

    def by_user(self, username: str, limit: int = 10, offset: int = 0) -> FeedResponse:
        """Get a window of one user's posts."""
        _check_window(limit, offset)
        data = self._get(
            f"{self._BASE_PATH}/user/{username}",
            params={"limit": limit, "offset": offset},
        )
        return FeedResponse(**data)

    def get(self, post_id: int) -> Post:
        """Get a single post.

        Raises:
            NotFoundError: If the post does not exist or is not visible.
        """
        data = self._get(f"{self._BASE_PATH}/{post_id}", require_auth=False)
        return Post(**data)

    def create(
        self,
        content: str,
        visibility: Visibility = "public",
        media: list[dict[str, Any]] | None = None,
        location: str | None = None,
        feeling: str | None = None,
        tagged_users: list[int] | None = None,
    ) -> Post:
        """Publish a post.

        Args:
            content: Text content.
            visibility: "public", "friends" or "private".
            media: Items of the form {"media_url": ..., "media_type": ...}.
            location: Optional check-in location.
            feeling: Optional feeling/activity.
            tagged_users: IDs of tagged users.

        Returns:
            The created post.
        """
        data = self._post(
            self._BASE_PATH,
            json=_create_payload(content, visibility, media, location, feeling, tagged_users),
        )
        return Post(**data)

    def update(self, post_id: int, **fields: Any) -> Post:
        """Edit a post. Only the author may do this.

        Raises:
            ValueError: If an unknown field is passed.
        """
        data = self._put(f"{self._BASE_PATH}/{post_id}", json=_update_payload(fields))
        return Post(**data)

    def delete(self, post_id: int) -> MessageResponse:
        """Delete a post."""
        return _message(self._delete(f"{self._BASE_PATH}/{post_id}"))

    def comments(self, post_id: int) -> list[Comment]:
        """List a post's comments."""
        data = self._get(f"{self._BASE_PATH}/{post_id}/comments", require_auth=False)
        return _comments(data)

    def add_comment(self, post_id: int, content: str, parent_id: int | None = None) -> Comment:
        """Comment on a post, or reply to a comment when parent_id is given."""
        data = self._post(
            f"{self._BASE_PATH}/{post_id}/comments",
            json=_comment_payload(content, parent_id),
        )
        return Comment(**data)

    def toggle_like(self, post_id: int) -> LikeResponse:
        """Like the post, or remove the like if already liked."""
        data = self._post(f"{self._BASE_PATH}/{post_id}/like")
        return LikeResponse(**data)


class AsyncPostsClient(AsyncBaseClient):
    """Asynchronous client for post endpoints (/post/*)."""

    _BASE_PATH = "/post"

    async def feed(
        self, limit: int = 10, offset: int = 0, mode: FeedMode = "latest"
    ) -> FeedResponse:
        """Get a window of the current user's news feed."""
        _check_window(limit, offset)
        data = await self._get(
            f"{self._BASE_PATH}/feed",
            params={"limit": limit, "offset": offset, "mode": mode},
        )
        return FeedResponse(**data)

    async def by_user(
        self, username: str, limit: int = 10, offset: int = 0
    ) -> FeedResponse:
        """Get a window of one user's posts."""
        _check_window(limit, offset)
        data = await self._get(
            f"{self._BASE_PATH}/user/{username}",
            params={"limit": limit, "offset": offset},
        )
        return FeedResponse(**data)

    async def get(self, post_id: int) -> Post:
        """Get a single post."""
        data = await self._get(f"{self._BASE_PATH}/{post_id}", require_auth=False)
        return Post(**data)

    async def create(
        self,
        content: str,
        visibility: Visibility = "public",
        media: list[dict[str, Any]] | None = None,
        location: str | None = None,
        feeling: str | None = None,
        tagged_users: list[int] | None = None,
    ) -> Post:
        """Publish a post. See PostsClient.create."""
        data = await self._post(
            self._BASE_PATH,
            json=_create_payload(content, visibility, media, location, feeling, tagged_users),
        )
        return Post(**data)

    async def update(self, post_id: int, **fields: Any) -> Post:
        """Edit a post."""
        data = await self._put(
            f"{self._BASE_PATH}/{post_id}", json=_update_payload(fields)
        )
        return Post(**data)

    async def delete(self, post_id: int) -> MessageResponse:
        """Delete a post."""
        return _message(await self._delete(f"{self._BASE_PATH}/{post_id}"))

    async def comments(self, post_id: int) -> list[Comment]:
        """List a post's comments."""
        data = await self._get(
            f"{self._BASE_PATH}/{post_id}/comments", require_auth=False
        )
        return _comments(data)

    async def add_comment(
        self, post_id: int, content: str, parent_id: int | None = None
    ) -> Comment:
        """Comment on a post or reply to a comment."""
        data = await self._post(
            f"{self._BASE_PATH}/{post_id}/comments",
            json=_comment_payload(content, parent_id),
        )
        return Comment(**data)

    async def toggle_like(self, post_id: int) -> LikeResponse:
        """Toggle the current user's like."""
        data = await self._post(f"{self._BASE_PATH}/{post_id}/like")
        return LikeResponse(**data)
