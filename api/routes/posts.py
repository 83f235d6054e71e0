"""Feed and post pages.

The home news feed, a post's own page with its comment thread, and the
post actions: publishing, commenting, liking and deleting.
"""

from typing import Literal

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from api.dependencies import ClientDep, FormDataDep, LocaleDep, ToastsDep, require_session
from api.models import ActionResult, PageResponse
from api.utils import guarded
from web.feed import CommentView, PostCard, build_comment_tree, to_post_card
from web.forms import CommentForm, PostForm, parse_form
from web.pagination import FeedCursor

router = APIRouter(
    prefix="/{locale}",
    tags=["posts"],
    dependencies=[Depends(require_session)],
)

FEED_LIMIT = 10


# ============================================================================
# Response Models
# ============================================================================


class FeedView(BaseModel):
    """A window of the news feed.

    Attributes:
        posts: Post cards in this window.
        mode: Feed ordering.
        cursor: Scroll position to request the next window from.
    """

    posts: list[PostCard] = Field(default_factory=list)
    mode: Literal["latest", "popular"] = "latest"
    cursor: FeedCursor


class PostPage(BaseModel):
    """A post with its comment thread."""

    post: PostCard
    comments: list[CommentView] = Field(default_factory=list)


class LikeView(BaseModel):
    liked: bool
    total_likes: int


# ============================================================================
# Endpoints
# ============================================================================


@router.get("", response_model=PageResponse[FeedView])
async def home_feed(
    locale: LocaleDep,
    client: ClientDep,
    toasts: ToastsDep,
    mode: Literal["latest", "popular"] = "latest",
    page: int = Query(default=1, ge=1),
):
    """Show one window of the news feed.

    ``page`` counts windows of FEED_LIMIT posts; the returned cursor tells
    the infinite scroll whether more posts are left.
    """
    cursor = FeedCursor.for_page(page, FEED_LIMIT)
    feed = await guarded(
        client.posts.feed(limit=cursor.limit, offset=cursor.offset, mode=mode),
        toasts,
        "posts.feedFailed",
    )
    if feed is None:
        return PageResponse[FeedView](locale=locale, toasts=toasts.drain())

    cursor.advance(len(feed.posts))
    if feed.total and cursor.offset >= feed.total:
        cursor.has_more = False
    return PageResponse[FeedView](
        locale=locale,
        data=FeedView(
            posts=[to_post_card(post, locale) for post in feed.posts],
            mode=mode,
            cursor=cursor,
        ),
        toasts=toasts.drain(),
    )


@router.get("/{username}/post/{post_id}", response_model=PageResponse[PostPage])
async def post_detail(
    username: str,
    post_id: int,
    locale: LocaleDep,
    client: ClientDep,
    toasts: ToastsDep,
):
    """Show a post and its comment thread.

    When the post belongs to someone other than ``username``, the browser
    is sent to the post's canonical address.
    """
    post = await guarded(client.posts.get(post_id), toasts, "posts.loadFailed")
    if post is None:
        return PageResponse[PostPage](locale=locale, toasts=toasts.drain())

    comments = await guarded(client.posts.comments(post_id), toasts, "posts.loadFailed")
    redirect = None
    if post.author and post.author.username and post.author.username != username:
        redirect = f"/{locale}/{post.author.username}/post/{post.id}"
    return PageResponse[PostPage](
        locale=locale,
        data=PostPage(
            post=to_post_card(post, locale),
            comments=build_comment_tree(comments or [], locale),
        ),
        toasts=toasts.drain(),
        redirect=redirect,
    )


@router.post("/posts", response_model=PageResponse[PostCard])
async def create_post(locale: LocaleDep, data: FormDataDep, client: ClientDep, toasts: ToastsDep):
    """Publish a post."""
    form = parse_form(PostForm, data, locale)
    post = await guarded(client.posts.create(**form.client_kwargs()), toasts, "posts.createFailed")
    if post is None:
        return PageResponse[PostCard](locale=locale, toasts=toasts.drain())
    toasts.success("posts.created")
    return PageResponse[PostCard](locale=locale, data=to_post_card(post, locale), toasts=toasts.drain())


@router.post("/posts/{post_id}/comments", response_model=PageResponse[CommentView])
async def add_comment(
    post_id: int,
    locale: LocaleDep,
    data: FormDataDep,
    client: ClientDep,
    toasts: ToastsDep,
):
    """Comment on a post, or reply to a comment."""
    form = parse_form(CommentForm, data, locale)
    comment = await guarded(
        client.posts.add_comment(post_id, form.content, parent_id=form.parent_id),
        toasts,
        "posts.commentFailed",
    )
    if comment is None:
        return PageResponse[CommentView](locale=locale, toasts=toasts.drain())
    toasts.success("posts.commentAdded")
    return PageResponse[CommentView](
        locale=locale,
        data=build_comment_tree([comment], locale)[0],
        toasts=toasts.drain(),
    )


@router.post("/posts/{post_id}/like", response_model=PageResponse[LikeView])
async def toggle_like(post_id: int, locale: LocaleDep, client: ClientDep, toasts: ToastsDep):
    """Like a post, or take the like back."""
    result = await guarded(client.posts.toggle_like(post_id), toasts, "posts.likeFailed")
    return PageResponse[LikeView](
        locale=locale,
        data=LikeView(liked=result.liked, total_likes=result.total_likes) if result is not None else None,
        toasts=toasts.drain(),
    )


@router.delete("/posts/{post_id}", response_model=PageResponse[ActionResult])
async def delete_post(post_id: int, locale: LocaleDep, client: ClientDep, toasts: ToastsDep):
    """Delete one of the logged-in user's posts."""
    result = await guarded(client.posts.delete(post_id), toasts, "posts.deleteFailed")
    if result is not None:
        toasts.success("posts.deleted")
    return PageResponse[ActionResult](
        locale=locale,
        data=ActionResult(ok=result is not None),
        toasts=toasts.drain(),
    )
