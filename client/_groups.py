"""Group sub-client for the Hoàn Hảo API.

This module provides GroupsClient and AsyncGroupsClient for the group
endpoints (/groups/*): browsing, creating and administering groups and
their members.

This is an internal module. Import from `client` instead.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, Field

from client._base import AsyncBaseClient, BaseClient
from client.models import MessageResponse, UserBasic

if TYPE_CHECKING:
    from client._http import AsyncHTTPClient, HTTPClient


# Type aliases for group fields
GroupPrivacy = Literal["public", "private"]
MemberRole = Literal["member", "admin"]
MemberStatus = Literal["pending", "approved", "rejected"]
MemberDecision = Literal["approve", "reject"]

GROUP_UPDATE_FIELDS = ("name", "description", "privacy", "cover_image", "avatar", "rules")


# Response models for group endpoints


class Group(BaseModel):
    """Summary of a group.

    Attributes:
        id: Group ID.
        name: Group name.
        description: Free-text description.
        privacy: "public" or "private".
        cover_image: Cover image URL.
        avatar: Avatar image URL.
        rules: Group rules, in display order.
        member_count: Number of approved members.
        created_by: Creator's user ID.
        created_at: Creation timestamp.
        updated_at: Last update timestamp.
        creator: Creator's user card.
    """

    id: int
    name: str
    description: str = ""
    privacy: GroupPrivacy = "public"
    cover_image: str = ""
    avatar: str = ""
    rules: list[str] = Field(default_factory=list)
    member_count: int = 0
    created_by: int | None = None
    created_at: str | None = None
    updated_at: str | None = None
    creator: UserBasic | None = None


class GroupMember(BaseModel):
    """Membership of a user in a group.

    Attributes:
        id: Membership ID.
        group_id: Group ID.
        user_id: Member's user ID.
        role: "member" or "admin".
        nickname: Nickname inside the group.
        is_muted: Whether the member is muted.
        status: "pending", "approved" or "rejected".
        joined_at: When the membership was created.
        left_at: When the member left, if they did.
        user: The member's user card.
    """

    id: int
    group_id: int
    user_id: int
    role: MemberRole = "member"
    nickname: str = ""
    is_muted: bool = False
    status: MemberStatus = "approved"
    joined_at: str | None = None
    left_at: str | None = None
    user: UserBasic | None = None


class GroupDetail(Group):
    """A group plus the current user's membership (if any)."""

    current_user_member: GroupMember | None = None

    @property
    def is_admin(self) -> bool:
        """Whether the current user administers this group."""
        member = self.current_user_member
        return member is not None and member.status == "approved" and member.role == "admin"

    @property
    def is_member(self) -> bool:
        """Whether the current user is an approved member."""
        member = self.current_user_member
        return member is not None and member.status == "approved"


class GroupList(BaseModel):
    """Paginated list of groups.

    Attributes:
        groups: Groups on this page.
        total: Total matching groups.
        page: Current page (1-indexed).
        size: Page size.
    """

    groups: list[Group] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    size: int = 10


class GroupMemberList(BaseModel):
    """Paginated list of group members."""

    members: list[GroupMember] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    size: int = 10


def _group_payload(fields: dict[str, Any]) -> dict[str, Any]:
    unknown = set(fields) - set(GROUP_UPDATE_FIELDS)
    if unknown:
        raise ValueError(f"Unknown group fields: {sorted(unknown)}")
    return {k: v for k, v in fields.items() if v is not None}


def _member_update_payload(
    role: str | None, nickname: str | None, is_muted: bool | None
) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    if role is not None:
        payload["role"] = role
    if nickname is not None:
        payload["nickname"] = nickname
    if is_muted is not None:
        payload["is_muted"] = is_muted
    if not payload:
        raise ValueError("Nothing to update: pass role, nickname or is_muted")
    return payload


def _message(data: Any) -> MessageResponse:
    if isinstance(data, dict):
        return MessageResponse(**data)
    return MessageResponse()


class GroupsClient(BaseClient):
    """Synchronous client for group endpoints (/groups/*).

    Listing and viewing groups works anonymously (public groups only);
    everything else needs an access token.

    Example:
        with HoanHaoClient(access_token=token) as client:
            group = client.groups.create(
                name="Yêu mèo Sài Gòn",
                description="Hội những người yêu mèo",
                privacy="public",
                rules=["Tôn trọng lẫn nhau"],
            )
            client.groups.invite(group.id, user_id=42)
    """

    _BASE_PATH = "/groups"

    def list(
        self,
        query: str | None = None,
        privacy: GroupPrivacy | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> GroupList:
        """Search or browse groups.

        Args:
            query: Free-text search on the group name.
            privacy: Optional privacy filter.
            page: Page number (1-indexed).
            page_size: Groups per page.
        """
        data = self._get(
            self._BASE_PATH,
            params={
                "query": query,
                "privacy": privacy,
                "page": page,
                "page_size": page_size,
            },
            require_auth=False,
        )
        return GroupList(**data)

    def mine(self, page: int = 1, page_size: int = 10) -> GroupList:
        """List the groups the current user belongs to."""
        data = self._get(
            f"{self._BASE_PATH}/me",
            params={"page": page, "page_size": page_size},
        )
        return GroupList(**data)

    def get(self, group_id: int) -> GroupDetail:
        """Get a group's details.

        Raises:
            NotFoundError: If the group does not exist or is hidden.
        """
        data = self._get(f"{self._BASE_PATH}/{group_id}", require_auth=False)
        return GroupDetail(**data)

    def members(
        self,
        group_id: int,
        role: MemberRole | None = None,
        status: MemberStatus | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> GroupMemberList:
        """List a group's members, optionally filtered by role or status."""
        data = self._get(
            f"{self._BASE_PATH}/{group_id}/members",
            params={
                "role": role,
                "status": status,
                "page": page,
                "page_size": page_size,
            },
            require_auth=False,
        )
        return GroupMemberList(**data)

    def create(
        self,
        name: str,
        description: str = "",
        privacy: GroupPrivacy = "public",
        cover_image: str | None = None,
        rules: list[str] | None = None,
    ) -> Group:
        """Create a group. The creator becomes its admin.

        Args:
            name: Group name (3-100 characters).
            description: Description (up to 1000 characters).
            privacy: "public" or "private".
            cover_image: Optional cover image URL.
            rules: Optional list of rules.

        Returns:
            The created group.
        """
        payload: dict[str, Any] = {
            "name": name,
            "description": description,
            "privacy": privacy,
        }
        if cover_image:
            payload["cover_image"] = cover_image
        if rules:
            payload["rules"] = rules
        data = self._post(self._BASE_PATH, json=payload)
        return Group(**data)

    def update(self, group_id: int, **fields: Any) -> Group:
        """Update a group's settings (admins only).

        Args:
            group_id: The group to update.
            **fields: Any of GROUP_UPDATE_FIELDS.

        Raises:
            ValueError: If an unknown field is passed.
            PermissionDeniedError: If the user is not an admin.
        """
        data = self._put(f"{self._BASE_PATH}/{group_id}", json=_group_payload(fields))
        return Group(**data)

    def delete(self, group_id: int) -> MessageResponse:
        """Delete a group (admins only)."""
        return _message(self._delete(f"{self._BASE_PATH}/{group_id}"))

    def join(self, group_id: int, nickname: str | None = None) -> MessageResponse:
        """Join a public group, or ask to join a private one."""
        payload: dict[str, Any] = {"group_id": group_id}
        if nickname:
            payload["nickname"] = nickname
        return _message(self._post(f"{self._BASE_PATH}/join", json=payload))

    def leave(self, group_id: int) -> MessageResponse:
        """Leave a group."""
        return _message(self._post(f"{self._BASE_PATH}/{group_id}/leave"))

    def invite(self, group_id: int, user_id: int) -> MessageResponse:
        """Invite a user to a group."""
        return _message(
            self._post(f"{self._BASE_PATH}/{group_id}/invite", json={"user_id": user_id})
        )

    def decide(self, group_id: int, user_id: int, decision: MemberDecision) -> MessageResponse:
        """Approve or reject a pending join request."""
        if decision not in ("approve", "reject"):
            raise ValueError("decision must be 'approve' or 'reject'")
        return _message(
            self._post(
                f"{self._BASE_PATH}/{group_id}/members/{decision}",
                json={"user_id": user_id},
            )
        )

    def approve(self, group_id: int, user_id: int) -> MessageResponse:
        """Approve a pending join request."""
        return self.decide(group_id, user_id, "approve")

    def reject(self, group_id: int, user_id: int) -> MessageResponse:
        """Reject a pending join request."""
        return self.decide(group_id, user_id, "reject")

    def remove_member(self, group_id: int, user_id: int) -> MessageResponse:
        """Remove a member from a group (admins only)."""
        return _message(
            self._delete(f"{self._BASE_PATH}/{group_id}/members", json={"user_id": user_id})
        )

    def update_member(
        self,
        group_id: int,
        member_id: int,
        role: MemberRole | None = None,
        nickname: str | None = None,
        is_muted: bool | None = None,
    ) -> GroupMember:
        """Change a member's role, nickname or mute flag."""
        data = self._put(
            f"{self._BASE_PATH}/{group_id}/members/{member_id}",
            json=_member_update_payload(role, nickname, is_muted),
        )
        return GroupMember(**data)


class AsyncGroupsClient(AsyncBaseClient):
    """Asynchronous client for group endpoints (/groups/*)."""

    _BASE_PATH = "/groups"

    async def list(
        self,
        query: str | None = None,
        privacy: GroupPrivacy | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> GroupList:
        """Search or browse groups."""
        data = await self._get(
            self._BASE_PATH,
            params={
                "query": query,
                "privacy": privacy,
                "page": page,
                "page_size": page_size,
            },
            require_auth=False,
        )
        return GroupList(**data)

    async def mine(self, page: int = 1, page_size: int = 10) -> GroupList:
        """List the groups the current user belongs to."""
        data = await self._get(
            f"{self._BASE_PATH}/me",
            params={"page": page, "page_size": page_size},
        )
        return GroupList(**data)

    async def get(self, group_id: int) -> GroupDetail:
        """Get a group's details."""
        data = await self._get(f"{self._BASE_PATH}/{group_id}", require_auth=False)
        return GroupDetail(**data)

    async def members(
        self,
        group_id: int,
        role: MemberRole | None = None,
        status: MemberStatus | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> GroupMemberList:
        """List a group's members."""
        data = await self._get(
            f"{self._BASE_PATH}/{group_id}/members",
            params={
                "role": role,
                "status": status,
                "page": page,
                "page_size": page_size,
            },
            require_auth=False,
        )
        return GroupMemberList(**data)

    async def create(
        self,
        name: str,
        description: str = "",
        privacy: GroupPrivacy = "public",
        cover_image: str | None = None,
        rules: list[str] | None = None,
    ) -> Group:
        """Create a group. See GroupsClient.create."""
        payload: dict[str, Any] = {
            "name": name,
            "description": description,
            "privacy": privacy,
        }
        if cover_image:
            payload["cover_image"] = cover_image
        if rules:
            payload["rules"] = rules
        data = await self._post(self._BASE_PATH, json=payload)
        return Group(**data)

    async def update(self, group_id: int, **fields: Any) -> Group:
        """Update a group's settings (admins only)."""
        data = await self._put(
            f"{self._BASE_PATH}/{group_id}", json=_group_payload(fields)
        )
        return Group(**data)

    async def delete(self, group_id: int) -> MessageResponse:
        """Delete a group (admins only)."""
        return _message(await self._delete(f"{self._BASE_PATH}/{group_id}"))

    async def join(self, group_id: int, nickname: str | None = None) -> MessageResponse:
        """Join or ask to join a group."""
        payload: dict[str, Any] = {"group_id": group_id}
        if nickname:
            payload["nickname"] = nickname
        return _message(await self._post(f"{self._BASE_PATH}/join", json=payload))

    async def leave(self, group_id: int) -> MessageResponse:
        """Leave a group."""
        return _message(await self._post(f"{self._BASE_PATH}/{group_id}/leave"))

    async def invite(self, group_id: int, user_id: int) -> MessageResponse:
        """Invite a user to a group."""
        return _message(
            await self._post(
                f"{self._BASE_PATH}/{group_id}/invite", json={"user_id": user_id}
            )
        )

    async def decide(
        self, group_id: int, user_id: int, decision: MemberDecision
    ) -> MessageResponse:
        """Approve or reject a pending join request."""
        if decision not in ("approve", "reject"):
            raise ValueError("decision must be 'approve' or 'reject'")
        return _message(
            await self._post(
                f"{self._BASE_PATH}/{group_id}/members/{decision}",
                json={"user_id": user_id},
            )
        )

    async def approve(self, group_id: int, user_id: int) -> MessageResponse:
        return await self.decide(group_id, user_id, "approve")

    async def reject(self, group_id: int, user_id: int) -> MessageResponse:
        return await self.decide(group_id, user_id, "reject")

    async def remove_member(self, group_id: int, user_id: int) -> MessageResponse:
        """Remove a member from a group (admins only)."""
        return _message(
            await self._delete(
                f"{self._BASE_PATH}/{group_id}/members", json={"user_id": user_id}
            )
        )

    async def update_member(
        self,
        group_id: int,
        member_id: int,
        role: MemberRole | None = None,
        nickname: str | None = None,
        is_muted: bool | None = None,
    ) -> GroupMember:
        """Change a member's role, nickname or mute flag."""
        data = await self._put(
            f"{self._BASE_PATH}/{group_id}/members/{member_id}",
            json=_member_update_payload(role, nickname, is_muted),
        )
        return GroupMember(**data)
