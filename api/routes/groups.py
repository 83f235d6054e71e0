"""Groups pages.

Browsing and searching groups, creating and editing them, and managing
membership: joining, leaving, inviting, and admin decisions on members.
"""

from typing import Literal

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from api.dependencies import ClientDep, FormDataDep, LocaleDep, ToastsDep, require_session
from api.models import ActionResult, PageResponse
from api.utils import guarded
from client import Group, GroupDetail, GroupMember
from web.forms import GroupForm, GroupUpdateForm, parse_form
from web.formatting import format_date
from web.pagination import Pagination
from web.toasts import ToastQueue

router = APIRouter(
    prefix="/{locale}/groups",
    tags=["groups"],
    dependencies=[Depends(require_session)],
)

PAGE_SIZE = 10

# Success toast key per member action
MEMBER_ACTIONS = {"approve": "groups.approve", "reject": "groups.reject", "remove": "groups.remove"}


# ============================================================================
# Request/Response Models
# ============================================================================


class InviteRequest(BaseModel):
    """Request model for inviting a user to a group."""

    user_id: int = Field(..., gt=0)


class MemberActionRequest(BaseModel):
    """Request model for an admin decision on a member."""

    user_id: int = Field(..., gt=0)


class JoinRequest(BaseModel):
    nickname: str | None = Field(None, max_length=50)


class GroupListView(BaseModel):
    """A page of groups.

    Attributes:
        groups: Groups on this page.
        total: Total matching groups.
        query: The search text, echoed back for the search box.
    """

    groups: list[Group] = Field(default_factory=list)
    total: int = 0
    query: str | None = None


class GroupView(BaseModel):
    """A group's page.

    Attributes:
        group: The group and the viewer's membership.
        is_admin: Whether the viewer can edit the group and decide on members.
        is_member: Whether the viewer is an approved member.
        created_at: Localized creation date.
    """

    group: GroupDetail
    is_admin: bool = False
    is_member: bool = False
    created_at: str = ""


class MemberListView(BaseModel):
    members: list[GroupMember] = Field(default_factory=list)
    total: int = 0


def _group_view(group: GroupDetail, locale: str) -> GroupView:
    return GroupView(
        group=group,
        is_admin=group.is_admin,
        is_member=group.is_member,
        created_at=format_date(group.created_at, locale),
    )


def _action_page(locale: str, toasts: ToastQueue, ok: bool, **extra) -> PageResponse[ActionResult]:
    return PageResponse[ActionResult](
        locale=locale, data=ActionResult(ok=ok), toasts=toasts.drain(), **extra
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.get("", response_model=PageResponse[GroupListView])
async def list_groups(
    locale: LocaleDep,
    client: ClientDep,
    toasts: ToastsDep,
    query: str | None = None,
    privacy: Literal["public", "private"] | None = None,
    page: int = Query(default=1, ge=1),
):
    """Browse or search groups."""
    result = await guarded(
        client.groups.list(query=query or None, privacy=privacy, page=page, page_size=PAGE_SIZE),
        toasts,
        "groups.loadFailed",
    )
    if result is None:
        return PageResponse[GroupListView](locale=locale, toasts=toasts.drain())
    return PageResponse[GroupListView](
        locale=locale,
        data=GroupListView(groups=result.groups, total=result.total, query=query),
        pagination=Pagination.for_items(page, result.total, PAGE_SIZE),
    )


# Defined before /{group_id} so "mine" is not read as a group ID
@router.get("/mine", response_model=PageResponse[GroupListView])
async def my_groups(
    locale: LocaleDep,
    client: ClientDep,
    toasts: ToastsDep,
    page: int = Query(default=1, ge=1),
):
    """List the groups the logged-in user belongs to."""
    result = await guarded(client.groups.mine(page=page, page_size=PAGE_SIZE), toasts, "groups.loadFailed")
    if result is None:
        return PageResponse[GroupListView](locale=locale, toasts=toasts.drain())
    return PageResponse[GroupListView](
        locale=locale,
        data=GroupListView(groups=result.groups, total=result.total),
        pagination=Pagination.for_items(page, result.total, PAGE_SIZE),
    )


@router.post("", response_model=PageResponse[Group])
async def create_group(locale: LocaleDep, data: FormDataDep, client: ClientDep, toasts: ToastsDep):
    """Create a group and send the browser to its page."""
    form = parse_form(GroupForm, data, locale)
    group = await guarded(client.groups.create(**form.client_kwargs()), toasts, "groups.createFailed")
    if group is None:
        return PageResponse[Group](locale=locale, toasts=toasts.drain())
    toasts.success("groups.created", name=group.name)
    return PageResponse[Group](
        locale=locale,
        data=group,
        toasts=toasts.drain(),
        redirect=f"/{locale}/groups/{group.id}",
    )


@router.get("/{group_id}", response_model=PageResponse[GroupView])
async def group_detail(group_id: int, locale: LocaleDep, client: ClientDep, toasts: ToastsDep):
    """Show a group's page."""
    group = await guarded(client.groups.get(group_id), toasts, "groups.detailFailed")
    return PageResponse[GroupView](
        locale=locale,
        data=_group_view(group, locale) if group is not None else None,
        toasts=toasts.drain(),
    )


@router.post("/{group_id}", response_model=PageResponse[Group])
async def edit_group(
    group_id: int,
    locale: LocaleDep,
    data: FormDataDep,
    client: ClientDep,
    toasts: ToastsDep,
):
    """Save group settings. Only the submitted fields change."""
    form = parse_form(GroupUpdateForm, data, locale)
    group = await guarded(client.groups.update(group_id, **form.changed_fields()), toasts, "groups.updateFailed")
    if group is not None:
        toasts.success("groups.changesSaved")
    return PageResponse[Group](locale=locale, data=group, toasts=toasts.drain())


@router.delete("/{group_id}", response_model=PageResponse[ActionResult])
async def delete_group(group_id: int, locale: LocaleDep, client: ClientDep, toasts: ToastsDep):
    """Delete a group and send the browser back to the group list."""
    result = await guarded(client.groups.delete(group_id), toasts, "groups.deleteFailed")
    if result is None:
        return _action_page(locale, toasts, ok=False)
    toasts.success("groups.deleted")
    return _action_page(locale, toasts, ok=True, redirect=f"/{locale}/groups")


@router.get("/{group_id}/members", response_model=PageResponse[MemberListView])
async def group_members(
    group_id: int,
    locale: LocaleDep,
    client: ClientDep,
    toasts: ToastsDep,
    role: Literal["member", "admin"] | None = None,
    status: Literal["pending", "approved", "rejected"] | None = None,
    page: int = Query(default=1, ge=1),
):
    """List a group's members, optionally filtered by role or status."""
    result = await guarded(
        client.groups.members(group_id, role=role, status=status, page=page, page_size=PAGE_SIZE),
        toasts,
        "groups.membersFailed",
    )
    if result is None:
        return PageResponse[MemberListView](locale=locale, toasts=toasts.drain())
    return PageResponse[MemberListView](
        locale=locale,
        data=MemberListView(members=result.members, total=result.total),
        pagination=Pagination.for_items(page, result.total, PAGE_SIZE),
    )


@router.post("/{group_id}/join", response_model=PageResponse[ActionResult])
async def join_group(
    group_id: int,
    locale: LocaleDep,
    client: ClientDep,
    toasts: ToastsDep,
    request: JoinRequest | None = None,
):
    """Join a public group, or ask to join a private one."""
    nickname = request.nickname if request else None
    result = await guarded(client.groups.join(group_id, nickname=nickname), toasts, "groups.actionFailed")
    if result is not None:
        toasts.success("groups.joined")
    return _action_page(locale, toasts, ok=result is not None)


@router.post("/{group_id}/leave", response_model=PageResponse[ActionResult])
async def leave_group(group_id: int, locale: LocaleDep, client: ClientDep, toasts: ToastsDep):
    """Leave a group."""
    result = await guarded(client.groups.leave(group_id), toasts, "groups.actionFailed")
    if result is not None:
        toasts.success("groups.left")
    return _action_page(locale, toasts, ok=result is not None)


@router.post("/{group_id}/invite", response_model=PageResponse[ActionResult])
async def invite_to_group(
    group_id: int,
    request: InviteRequest,
    locale: LocaleDep,
    client: ClientDep,
    toasts: ToastsDep,
):
    """Invite a user to a group."""
    result = await guarded(client.groups.invite(group_id, request.user_id), toasts, "groups.actionFailed")
    if result is not None:
        toasts.success("groups.invited")
    return _action_page(locale, toasts, ok=result is not None)


@router.post("/{group_id}/members/{action}", response_model=PageResponse[ActionResult])
async def member_action(
    group_id: int,
    action: Literal["approve", "reject", "remove"],
    request: MemberActionRequest,
    locale: LocaleDep,
    client: ClientDep,
    toasts: ToastsDep,
):
    """Approve or reject a join request, or remove a member (admins only)."""
    if action == "remove":
        call = client.groups.remove_member(group_id, request.user_id)
    else:
        call = client.groups.decide(group_id, request.user_id, action)
    result = await guarded(call, toasts, "groups.actionFailed")
    if result is not None:
        toasts.success(MEMBER_ACTIONS[action])
    return _action_page(locale, toasts, ok=result is not None)
