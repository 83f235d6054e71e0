"""View models for posts and comments in the feed and on post pages."""

from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field

from client import Comment, Post, PostAuthor
from web.formatting import format_timestamp, parse_datetime, time_ago
from web.media import avatar_url

_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


class AuthorView(BaseModel):
    name: str
    username: str = ""
    avatar: str
    timestamp: str = ""


class Engagement(BaseModel):
    likes: int = 0
    comments: int = 0
    shares: int = 0


class PostCard(BaseModel):
    """A post as rendered in the feed.

    Attributes:
        id: Post ID.
        type: "gallery" when the post has media, otherwise "regular".
        author: Author name, handle, avatar and formatted timestamp.
        content: Text content.
        engagement: Like, comment and share counters.
        liked: Whether the viewer liked the post.
        images: Media URLs (gallery posts only).
        total_images: Number of media items.
    """

    id: int
    type: Literal["gallery", "regular"] = "regular"
    author: AuthorView
    content: str = ""
    engagement: Engagement = Field(default_factory=Engagement)
    liked: bool = False
    images: list[str] = Field(default_factory=list)
    total_images: int = 0


class CommentView(BaseModel):
    id: int
    author: AuthorView
    content: str = ""
    likes: int = 0
    is_deleted: bool = False
    parent_comment_id: int | None = None
    replies: list["CommentView"] = Field(default_factory=list)


def _author_view(author: PostAuthor | None, user_id: int, timestamp: str) -> AuthorView:
    if author is None:
        return AuthorView(name=f"#{user_id}", avatar=avatar_url(None), timestamp=timestamp)
    return AuthorView(
        name=author.full_name or author.username,
        username=author.username,
        avatar=avatar_url(author.profile_picture_url),
        timestamp=timestamp,
    )


def to_post_card(post: Post, locale: str = "vi") -> PostCard:
    """Map a post from the post service to its feed card."""
    images = [m.media_url for m in post.media]
    return PostCard(
        id=post.id,
        type="gallery" if images else "regular",
        author=_author_view(post.author, post.user_id, format_timestamp(post.created_at, locale)),
        content=post.content,
        engagement=Engagement(
            likes=post.total_likes,
            comments=post.total_comments,
            shares=post.total_shares,
        ),
        liked=post.liked,
        images=images,
        total_images=len(images),
    )


def apply_like(card: PostCard, liked: bool, total_likes: int | None = None) -> PostCard:
    """Return the card after a like toggle.

    When the service reports the new total it is used; otherwise the
    counter is adjusted locally.
    """
    if total_likes is None:
        total_likes = card.engagement.likes
        if liked and not card.liked:
            total_likes += 1
        elif not liked and card.liked:
            total_likes = max(total_likes - 1, 0)
    engagement = card.engagement.model_copy(update={"likes": total_likes})
    return card.model_copy(update={"liked": liked, "engagement": engagement})


def apply_new_comment(card: PostCard) -> PostCard:
    engagement = card.engagement.model_copy(update={"comments": card.engagement.comments + 1})
    return card.model_copy(update={"engagement": engagement})


def _comment_view(comment: Comment, locale: str) -> CommentView:
    return CommentView(
        id=comment.id,
        author=_author_view(comment.author, comment.user_id, time_ago(comment.created_at, locale=locale)),
        content=comment.content,
        likes=comment.likes,
        is_deleted=comment.is_deleted,
        parent_comment_id=comment.parent_comment_id,
    )


def _flatten(comments: list[Comment]) -> list[Comment]:
    flat: list[Comment] = []
    for comment in comments:
        flat.append(comment)
        flat.extend(_flatten(comment.replies))
    return flat


def _creation_order(comment: Comment) -> tuple[datetime, int]:
    # Unparseable timestamps sort first
    return parse_datetime(comment.created_at) or _EARLIEST, comment.id


def build_comment_tree(comments: list[Comment], locale: str = "vi") -> list[CommentView]:
    """Nest replies under their parent comment.

    Accepts flat or already nested input. Siblings are ordered by creation
    time. Deleted comments are dropped unless they still have replies.
    Replies whose parent is missing are shown at the top level.
    """
    flat = sorted(_flatten(comments), key=_creation_order)
    views = {c.id: _comment_view(c, locale) for c in flat}

    roots: list[CommentView] = []
    for comment in flat:
        view = views[comment.id]
        parent = views.get(comment.parent_comment_id) if comment.parent_comment_id else None
        if parent is None or parent is view:
            roots.append(view)
        else:
            parent.replies.append(view)

    return _prune(roots)


def _prune(views: list[CommentView]) -> list[CommentView]:
    kept = []
    for view in views:
        view.replies = _prune(view.replies)
        if view.is_deleted and not view.replies:
            continue
        kept.append(view)
    return kept
