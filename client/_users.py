"""User service sub-client for the Hoàn Hảo API.

This module provides UsersClient and AsyncUsersClient for the user profile
endpoints (/users/*).

This is an internal module. Import from `client` instead.
"""

from typing import TYPE_CHECKING, Any

from client._base import AsyncBaseClient, BaseClient
from client.models import PublicProfile, UserList, UserProfile

if TYPE_CHECKING:
    from client._http import AsyncHTTPClient, HTTPClient


# Fields accepted by PUT /users/me
PROFILE_FIELDS = (
    "full_name",
    "bio",
    "location",
    "country_id",
    "province_id",
    "district_id",
    "website",
    "date_of_birth",
    "work",
    "education",
    "relationship",
)


def _profile_update_payload(fields: dict[str, Any]) -> dict[str, Any]:
    unknown = set(fields) - set(PROFILE_FIELDS)
    if unknown:
        raise ValueError(f"Unknown profile fields: {sorted(unknown)}")
    return {k: v for k, v in fields.items() if v is not None}


def _unwrap(data: Any) -> Any:
    # The user service wraps some payloads in {"data": ...}
    if isinstance(data, dict) and "data" in data and isinstance(data["data"], dict):
        return data["data"]
    return data


def _public_profile(data: Any) -> PublicProfile:
    data = _unwrap(data)
    if "profile" in data:
        return PublicProfile(**data)
    return PublicProfile(profile=UserProfile(**data))


class UsersClient(BaseClient):
    """Synchronous client for user profile endpoints (/users/*).

    Example:
        with HoanHaoClient(access_token=token) as client:
            me = client.users.get_me()
            client.users.update_me(bio="Xin chào!")
            other = client.users.get_user("lan.nguyen")
            print(other.friend_status)
    """

    _BASE_PATH = "/users"

    def get_me(self) -> UserProfile:
        """Get the profile of the logged-in user.

        Raises:
            NotAuthenticatedError: If no access token is set.
            AuthenticationError: If the token was rejected.
        """
        data = self._get(f"{self._BASE_PATH}/me")
        return UserProfile(**_unwrap(data))

    def update_me(self, **fields: Any) -> UserProfile:
        """Update the logged-in user's profile.

        Only the given, non-None fields are sent.

        Args:
            **fields: Any of PROFILE_FIELDS.

        Returns:
            The updated profile.

        Raises:
            ValueError: If an unknown field is passed.
            ValidationError: If the service rejects a value.
        """
        data = self._put(f"{self._BASE_PATH}/me", json=_profile_update_payload(fields))
        return UserProfile(**_unwrap(data))

    def get_user(self, username: str) -> PublicProfile:
        """Get another user's public profile.

        Args:
            username: The user's handle.

        Returns:
            The profile and the viewer's friendship status with that user.

        Raises:
            NotFoundError: If no such user exists.
        """
        data = self._get(f"{self._BASE_PATH}/{username}", require_auth=False)
        return _public_profile(data)

    def search(
        self,
        query: str | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> UserList:
        """Search users by name or username."""
        data = self._get(
            self._BASE_PATH,
            params={"query": query, "page": page, "page_size": page_size},
            require_auth=False,
        )
        return UserList(**_unwrap(data))


class AsyncUsersClient(AsyncBaseClient):
    """Asynchronous client for user profile endpoints (/users/*)."""

    _BASE_PATH = "/users"

    async def get_me(self) -> UserProfile:
        """Get the profile of the logged-in user."""
        data = await self._get(f"{self._BASE_PATH}/me")
        return UserProfile(**_unwrap(data))

    async def update_me(self, **fields: Any) -> UserProfile:
        """Update the logged-in user's profile. See UsersClient.update_me."""
        data = await self._put(
            f"{self._BASE_PATH}/me", json=_profile_update_payload(fields)
        )
        return UserProfile(**_unwrap(data))

    async def get_user(self, username: str) -> PublicProfile:
        """Get another user's public profile."""
        data = await self._get(f"{self._BASE_PATH}/{username}", require_auth=False)
        return _public_profile(data)

    async def search(
        self,
        query: str | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> UserList:
        """Search users by name or username."""
        data = await self._get(
            self._BASE_PATH,
            params={"query": query, "page": page, "page_size": page_size},
            require_auth=False,
        )
        return UserList(**_unwrap(data))
