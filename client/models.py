"""Shared response models for the Hoàn Hảo API client.

Models used by more than one sub-client live here. Service-specific models
(friends, groups, posts) are defined next to the sub-client that returns
them.

Timestamps are kept as the ISO strings the backend sends; formatting for
display happens in the web layer.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

__all__ = [
    "LoginResponse",
    "MessageResponse",
    "PublicProfile",
    "UserBasic",
    "UserList",
    "UserProfile",
]


class MessageResponse(BaseModel):
    """Acknowledgement returned by mutating endpoints.

    The backend answers with ``{"message": "..."}`` for most actions and
    sometimes adds a ``data`` payload.

    Attributes:
        message: Human-readable result message.
        data: Optional payload accompanying the message.
    """

    message: str = Field("", description="Result message")
    data: Any = Field(None, description="Optional payload")


class LoginResponse(BaseModel):
    """Token pair returned by login and refresh.

    The auth service uses camelCase keys on the wire.

    Attributes:
        access_token: Short-lived JWT sent as a bearer token.
        refresh_token: Long-lived token used to obtain a new access token.
    """

    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(..., alias="accessToken")
    refresh_token: str | None = Field(None, alias="refreshToken")


class UserBasic(BaseModel):
    """Minimal user card used in friend lists, suggestions and authorship.

    Attributes:
        id: User ID.
        username: Unique handle.
        email: Email address (only present for some callers).
        full_name: Display name.
        profile_picture_url: Avatar URL.
        cover_picture_url: Cover photo URL.
    """

    id: int
    username: str
    email: str | None = None
    full_name: str = ""
    profile_picture_url: str | None = None
    cover_picture_url: str | None = None


class UserProfile(BaseModel):
    """Full profile of a user, as returned by ``/users/me``.

    Attributes:
        id: User ID.
        username: Unique handle.
        full_name: Display name.
        is_active: Whether the account is active.
        is_verified: Whether the account is verified.
        last_login_at: Last login timestamp.
        bio: Free-text biography.
        location: Free-text location.
        country_id: Country reference.
        province_id: Province reference.
        district_id: District reference.
        website: Personal website.
        profile_picture_url: Avatar URL.
        cover_picture_url: Cover photo URL.
        date_of_birth: ISO date (YYYY-MM-DD).
        work: Workplace.
        education: School.
        relationship: Relationship status.
        created_at: Account creation timestamp.
        updated_at: Last profile update timestamp.
    """

    id: int
    username: str
    email: str | None = None
    full_name: str = ""
    is_active: bool = True
    is_verified: bool = False
    last_login_at: str | None = None
    bio: str = ""
    location: str = ""
    country_id: int | None = None
    province_id: int | None = None
    district_id: int | None = None
    website: str = ""
    profile_picture_url: str = ""
    cover_picture_url: str = ""
    date_of_birth: str | None = None
    work: str = ""
    education: str = ""
    relationship: str = ""
    created_at: str | None = None
    updated_at: str | None = None


class PublicProfile(BaseModel):
    """Another user's profile together with the viewer's friendship status.

    Attributes:
        profile: The user's profile.
        friend_status: Friendship status between viewer and this user.
    """

    profile: UserProfile
    friend_status: str = "none"


class UserList(BaseModel):
    """Paginated list of users (search results).

    Attributes:
        users: Users on this page.
        total: Total matching users.
        page: Current page (1-indexed).
        page_size: Page size.
    """

    users: list[UserBasic] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 10
