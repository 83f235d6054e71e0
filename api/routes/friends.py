"""Friends pages.

Friend list, incoming/outgoing requests, suggestions, and the friendship
actions (send request, accept, reject, cancel, unfriend, block, unblock).
"""

from typing import Literal

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from api.dependencies import ClientDep, LocaleDep, ToastsDep, require_session
from api.models import ActionResult, PageResponse
from api.utils import guarded
from client import Friend, FriendSuggestion
from web.pagination import Pagination

router = APIRouter(
    prefix="/{locale}/friends",
    tags=["friends"],
    dependencies=[Depends(require_session)],
)

PAGE_SIZE = 10


# ============================================================================
# Request/Response Models
# ============================================================================


class FriendActionRequest(BaseModel):
    """Request model for a friendship action."""

    friend_id: int = Field(..., gt=0, description="The other user's ID")


class FriendListView(BaseModel):
    """A page of friends or friend requests.

    Attributes:
        friends: Rows on this page.
        total: Total rows across all pages.
    """

    friends: list[Friend] = Field(default_factory=list)
    total: int = 0


class SuggestionsView(BaseModel):
    suggestions: list[FriendSuggestion] = Field(default_factory=list)


# ============================================================================
# Endpoints
# ============================================================================


@router.get("/list", response_model=PageResponse[FriendListView])
async def friend_list(
    locale: LocaleDep,
    client: ClientDep,
    toasts: ToastsDep,
    page: int = Query(default=1, ge=1),
):
    """List the logged-in user's friends, one page at a time."""
    result = await guarded(client.friends.list(page=page, page_size=PAGE_SIZE), toasts, "friends.loadFailed")
    if result is None:
        return PageResponse[FriendListView](locale=locale, toasts=toasts.drain())
    return PageResponse[FriendListView](
        locale=locale,
        data=FriendListView(friends=result.friends, total=result.total),
        pagination=Pagination.for_items(page, result.total, PAGE_SIZE),
    )


@router.get("/requests", response_model=PageResponse[FriendListView])
async def friend_requests(
    locale: LocaleDep,
    client: ClientDep,
    toasts: ToastsDep,
    page: int = Query(default=1, ge=1),
    type: Literal["incoming", "outgoing"] = "incoming",
):
    """List pending friend requests, received or sent."""
    result = await guarded(
        client.friends.requests(type=type, page=page, page_size=PAGE_SIZE),
        toasts,
        "friends.requestsFailed",
    )
    if result is None:
        return PageResponse[FriendListView](locale=locale, toasts=toasts.drain())
    return PageResponse[FriendListView](
        locale=locale,
        data=FriendListView(friends=result.friends, total=result.total),
        pagination=Pagination.for_items(page, result.total, PAGE_SIZE),
    )


@router.get("/suggestions", response_model=PageResponse[SuggestionsView])
async def friend_suggestions(
    locale: LocaleDep,
    client: ClientDep,
    toasts: ToastsDep,
    limit: int = Query(default=10, ge=1, le=50),
):
    """People the logged-in user may know."""
    result = await guarded(client.friends.suggestions(limit=limit), toasts, "friends.suggestionsFailed")
    return PageResponse[SuggestionsView](
        locale=locale,
        data=SuggestionsView(suggestions=result) if result is not None else None,
        toasts=toasts.drain(),
    )


@router.post("/{action}", response_model=PageResponse[ActionResult])
async def friend_action(
    action: Literal["send-request", "accept", "reject", "cancel", "unfriend", "block", "unblock"],
    request: FriendActionRequest,
    locale: LocaleDep,
    client: ClientDep,
    toasts: ToastsDep,
):
    """Perform a friendship action on another user."""
    result = await guarded(client.friends.action(action, request.friend_id), toasts, "friends.actionFailed")
    if result is None:
        return PageResponse[ActionResult](locale=locale, data=ActionResult(ok=False), toasts=toasts.drain())
    toasts.success(f"friends.{action}")
    return PageResponse[ActionResult](
        locale=locale,
        data=ActionResult(ok=True, message=result.message or None),
        toasts=toasts.drain(),
    )
