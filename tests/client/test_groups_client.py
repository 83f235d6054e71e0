"""Unit tests for the GroupsClient and AsyncGroupsClient.

This module tests the group sub-client: browsing, creating and editing
groups, and the membership operations.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from client._groups import (
    AsyncGroupsClient,
    Group,
    GroupDetail,
    GroupList,
    GroupMember,
    GroupMemberList,
    GroupsClient,
)

GROUP = {
    "id": 3,
    "name": "Hội mèo",
    "description": "Yêu mèo",
    "privacy": "public",
    "rules": ["Lịch sự"],
    "member_count": 12,
    "created_by": 1,
    "created_at": "2024-05-01T08:00:00Z",
}

MEMBER = {
    "id": 20,
    "group_id": 3,
    "user_id": 1,
    "role": "admin",
    "status": "approved",
    "user": {"id": 1, "username": "lan"},
}


# =============================================================================
# Response Model Tests
# =============================================================================


class TestGroupDetail:
    """Tests for the membership helpers on GroupDetail."""

    def test_admin(self):
        group = GroupDetail(**GROUP, current_user_member=MEMBER)
        assert group.is_admin is True
        assert group.is_member is True

    def test_plain_member(self):
        group = GroupDetail(**GROUP, current_user_member={**MEMBER, "role": "member"})
        assert group.is_admin is False
        assert group.is_member is True

    def test_pending_member(self):
        group = GroupDetail(**GROUP, current_user_member={**MEMBER, "status": "pending"})
        assert group.is_admin is False
        assert group.is_member is False

    def test_outsider(self):
        group = GroupDetail(**GROUP)
        assert group.is_member is False

    def test_group_defaults(self):
        group = Group(id=1, name="abc")
        assert group.privacy == "public"
        assert group.rules == []


# =============================================================================
# GroupsClient Tests
# =============================================================================


class TestGroupsClientQueries:
    """Tests for list(), mine(), get() and members()."""

    def test_list_is_public(self):
        mock_http = MagicMock()
        mock_http.get.return_value = {"groups": [GROUP], "total": 1, "page": 1, "size": 10}

        result = GroupsClient(mock_http).list(query="mèo", privacy="public")

        mock_http.get.assert_called_once_with(
            "/groups",
            params={"query": "mèo", "privacy": "public", "page": 1, "page_size": 10},
            require_auth=False,
        )
        assert isinstance(result, GroupList)
        assert result.groups[0].name == "Hội mèo"

    def test_mine(self):
        mock_http = MagicMock()
        mock_http.get.return_value = {"groups": [], "total": 0}

        GroupsClient(mock_http).mine(page=2)

        mock_http.get.assert_called_once_with(
            "/groups/me", params={"page": 2, "page_size": 10}, require_auth=True
        )

    def test_get(self):
        mock_http = MagicMock()
        mock_http.get.return_value = {**GROUP, "current_user_member": MEMBER}

        result = GroupsClient(mock_http).get(3)

        mock_http.get.assert_called_once_with("/groups/3", params=None, require_auth=False)
        assert isinstance(result, GroupDetail)
        assert result.is_admin is True

    def test_members_filters(self):
        mock_http = MagicMock()
        mock_http.get.return_value = {"members": [MEMBER], "total": 1}

        result = GroupsClient(mock_http).members(3, status="pending")

        mock_http.get.assert_called_once_with(
            "/groups/3/members",
            params={"role": None, "status": "pending", "page": 1, "page_size": 10},
            require_auth=False,
        )
        assert isinstance(result, GroupMemberList)
        assert result.members[0].role == "admin"


class TestGroupsClientCreateUpdate:
    """Tests for create(), update() and delete()."""

    def test_create_minimal(self):
        mock_http = MagicMock()
        mock_http.post.return_value = GROUP

        result = GroupsClient(mock_http).create(name="Hội mèo")

        mock_http.post.assert_called_once_with(
            "/groups",
            json={"name": "Hội mèo", "description": "", "privacy": "public"},
            params=None,
            require_auth=True,
        )
        assert isinstance(result, Group)

    def test_create_with_rules_and_cover(self):
        mock_http = MagicMock()
        mock_http.post.return_value = GROUP

        GroupsClient(mock_http).create(
            name="Hội mèo",
            privacy="private",
            cover_image="https://img.test/c.png",
            rules=["Lịch sự"],
        )

        payload = mock_http.post.call_args.kwargs["json"]
        assert payload["privacy"] == "private"
        assert payload["cover_image"] == "https://img.test/c.png"
        assert payload["rules"] == ["Lịch sự"]

    def test_update_drops_none(self):
        mock_http = MagicMock()
        mock_http.put.return_value = GROUP

        GroupsClient(mock_http).update(3, name="Mới", description=None)

        mock_http.put.assert_called_once_with(
            "/groups/3", json={"name": "Mới"}, params=None, require_auth=True
        )

    def test_update_unknown_field(self):
        with pytest.raises(ValueError, match="Unknown group fields"):
            GroupsClient(MagicMock()).update(3, owner=5)

    def test_delete(self):
        mock_http = MagicMock()
        mock_http.delete.return_value = {"message": "deleted"}

        result = GroupsClient(mock_http).delete(3)

        mock_http.delete.assert_called_once_with(
            "/groups/3", json=None, params=None, require_auth=True
        )
        assert result.message == "deleted"


class TestGroupsClientMembership:
    """Tests for join, leave, invite and member administration."""

    def test_join_with_nickname(self):
        mock_http = MagicMock()
        mock_http.post.return_value = {"message": "joined"}

        GroupsClient(mock_http).join(3, nickname="Lan")

        mock_http.post.assert_called_once_with(
            "/groups/join",
            json={"group_id": 3, "nickname": "Lan"},
            params=None,
            require_auth=True,
        )

    def test_join_without_nickname(self):
        mock_http = MagicMock()
        mock_http.post.return_value = {}

        GroupsClient(mock_http).join(3)

        assert mock_http.post.call_args.kwargs["json"] == {"group_id": 3}

    def test_leave(self):
        mock_http = MagicMock()
        mock_http.post.return_value = None

        result = GroupsClient(mock_http).leave(3)

        mock_http.post.assert_called_once_with(
            "/groups/3/leave", json=None, params=None, require_auth=True
        )
        assert result.message == ""

    def test_invite(self):
        mock_http = MagicMock()
        mock_http.post.return_value = {"message": "invited"}

        GroupsClient(mock_http).invite(3, user_id=9)

        mock_http.post.assert_called_once_with(
            "/groups/3/invite", json={"user_id": 9}, params=None, require_auth=True
        )

    @pytest.mark.parametrize("decision", ["approve", "reject"])
    def test_decide(self, decision):
        mock_http = MagicMock()
        mock_http.post.return_value = {"message": "ok"}

        GroupsClient(mock_http).decide(3, 9, decision)

        mock_http.post.assert_called_once_with(
            f"/groups/3/members/{decision}", json={"user_id": 9}, params=None, require_auth=True
        )

    def test_decide_rejects_unknown(self):
        with pytest.raises(ValueError):
            GroupsClient(MagicMock()).decide(3, 9, "ban")

    def test_remove_member_sends_body_on_delete(self):
        mock_http = MagicMock()
        mock_http.delete.return_value = {"message": "removed"}

        GroupsClient(mock_http).remove_member(3, 9)

        mock_http.delete.assert_called_once_with(
            "/groups/3/members", json={"user_id": 9}, params=None, require_auth=True
        )

    def test_update_member(self):
        mock_http = MagicMock()
        mock_http.put.return_value = {**MEMBER, "role": "member", "is_muted": True}

        result = GroupsClient(mock_http).update_member(3, 20, is_muted=True)

        mock_http.put.assert_called_once_with(
            "/groups/3/members/20", json={"is_muted": True}, params=None, require_auth=True
        )
        assert isinstance(result, GroupMember)
        assert result.is_muted is True

    def test_update_member_needs_a_change(self):
        with pytest.raises(ValueError, match="Nothing to update"):
            GroupsClient(MagicMock()).update_member(3, 20)


# =============================================================================
# AsyncGroupsClient Tests
# =============================================================================


class TestAsyncGroupsClient:
    """Tests for AsyncGroupsClient."""

    async def test_get(self):
        mock_http = AsyncMock()
        mock_http.get.return_value = GROUP

        result = await AsyncGroupsClient(mock_http).get(3)

        mock_http.get.assert_called_once_with("/groups/3", params=None, require_auth=False)
        assert result.member_count == 12

    async def test_create(self):
        mock_http = AsyncMock()
        mock_http.post.return_value = GROUP

        await AsyncGroupsClient(mock_http).create(name="Hội mèo", rules=["a"])

        mock_http.post.assert_called_once_with(
            "/groups",
            json={"name": "Hội mèo", "description": "", "privacy": "public", "rules": ["a"]},
            params=None,
            require_auth=True,
        )

    async def test_approve(self):
        mock_http = AsyncMock()
        mock_http.post.return_value = {"message": "approved"}

        result = await AsyncGroupsClient(mock_http).approve(3, 9)

        mock_http.post.assert_called_once_with(
            "/groups/3/members/approve", json={"user_id": 9}, params=None, require_auth=True
        )
        assert result.message == "approved"

    async def test_remove_member(self):
        mock_http = AsyncMock()
        mock_http.delete.return_value = {"message": "removed"}

        await AsyncGroupsClient(mock_http).remove_member(3, 9)

        mock_http.delete.assert_called_once_with(
            "/groups/3/members", json={"user_id": 9}, params=None, require_auth=True
        )
