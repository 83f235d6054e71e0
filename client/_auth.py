"""Auth service sub-client for the Hoàn Hảo API.

This module provides AuthClient and AsyncAuthClient for the auth service
endpoints (/auth/*): registration, login, token refresh and password reset.

This is an internal module. Import from `client` instead.
"""

from typing import TYPE_CHECKING, Any

from client._base import AsyncBaseClient, BaseClient
from client.models import LoginResponse, MessageResponse

if TYPE_CHECKING:
    from client._http import AsyncHTTPClient, HTTPClient


def _register_payload(
    username: str,
    email: str,
    password: str,
    full_name: str,
    date_of_birth: str,
    country_code: str,
    phone_number: str | None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "username": username,
        "email": email,
        "password": password,
        "fullName": full_name,
        "dateOfBirth": date_of_birth,
        "countryCode": country_code,
    }
    if phone_number:
        payload["phoneNumber"] = phone_number
    return payload


def _reset_payload(token: str, new_password: str, email: str | None) -> dict[str, Any]:
    payload: dict[str, Any] = {"token": token, "newPassword": new_password}
    if email:
        payload["email"] = email
    return payload


def _message(data: Any) -> MessageResponse:
    if isinstance(data, dict):
        return MessageResponse(**data)
    return MessageResponse(message=str(data or ""))


class AuthClient(BaseClient):
    """Synchronous client for auth service endpoints (/auth/*).

    A successful ``login`` or ``refresh_token`` stores the new access token
    on the shared HTTP client, so every sub-client of the same
    HoanHaoClient is authenticated afterwards.

    Example:
        with HoanHaoClient() as client:
            client.auth.login("1@gmail.com", "123456")
            me = client.users.get_me()
    """

    _BASE_PATH = "/auth"

    def register(
        self,
        username: str,
        email: str,
        password: str,
        full_name: str,
        date_of_birth: str,
        country_code: str = "+84",
        phone_number: str | None = None,
    ) -> MessageResponse:
        """Register a new account.

        Args:
            username: Desired handle.
            email: Email address.
            password: Plain-text password.
            full_name: Display name.
            date_of_birth: ISO date (YYYY-MM-DD).
            country_code: Phone country code (default: "+84").
            phone_number: Optional local phone number.

        Returns:
            The service acknowledgement.

        Raises:
            ValidationError: If the service rejects the data.
            ConflictError: If the username or email is taken.
        """
        data = self._post(
            f"{self._BASE_PATH}/register",
            json=_register_payload(
                username, email, password, full_name,
                date_of_birth, country_code, phone_number,
            ),
            require_auth=False,
        )
        return _message(data)

    def login(self, username_or_email_or_phone: str, password: str) -> LoginResponse:
        """Log in and keep the access token for subsequent calls.

        Args:
            username_or_email_or_phone: Any of the account identifiers.
            password: Plain-text password.

        Returns:
            The token pair.

        Raises:
            AuthenticationError: If the credentials are wrong.
        """
        data = self._post(
            f"{self._BASE_PATH}/login",
            json={
                "usernameOrEmailOrPhone": username_or_email_or_phone,
                "password": password,
            },
            require_auth=False,
        )
        tokens = LoginResponse(**data)
        self._http.set_access_token(tokens.access_token)
        return tokens

    def refresh_token(self, refresh_token: str) -> LoginResponse:
        """Exchange a refresh token for a new token pair.

        Args:
            refresh_token: The refresh token from a previous login.

        Returns:
            The new token pair.
        """
        data = self._post(
            f"{self._BASE_PATH}/refresh-token",
            params={"refreshToken": refresh_token},
            require_auth=False,
        )
        tokens = LoginResponse(**data)
        self._http.set_access_token(tokens.access_token)
        return tokens

    def forgot_password(self, email: str) -> MessageResponse:
        """Ask the service to email a password reset link."""
        data = self._post(
            f"{self._BASE_PATH}/forgot-password",
            json={"email": email},
            require_auth=False,
        )
        return _message(data)

    def reset_password(
        self,
        token: str,
        new_password: str,
        email: str | None = None,
    ) -> MessageResponse:
        """Set a new password using the token from the reset email.

        Args:
            token: Reset token from the email link.
            new_password: The new password.
            email: Account email, when the link carried it.

        Returns:
            The service acknowledgement.
        """
        data = self._post(
            f"{self._BASE_PATH}/reset-password",
            json=_reset_payload(token, new_password, email),
            require_auth=False,
        )
        return _message(data)

    def logout(self) -> None:
        """Forget the access token. The auth service keeps no server session."""
        self._http.clear_access_token()


class AsyncAuthClient(AsyncBaseClient):
    """Asynchronous client for auth service endpoints (/auth/*).

    Example:
        async with AsyncHoanHaoClient() as client:
            await client.auth.login("1@gmail.com", "123456")
    """

    _BASE_PATH = "/auth"

    async def register(
        self,
        username: str,
        email: str,
        password: str,
        full_name: str,
        date_of_birth: str,
        country_code: str = "+84",
        phone_number: str | None = None,
    ) -> MessageResponse:
        """Register a new account. See AuthClient.register."""
        data = await self._post(
            f"{self._BASE_PATH}/register",
            json=_register_payload(
                username, email, password, full_name,
                date_of_birth, country_code, phone_number,
            ),
            require_auth=False,
        )
        return _message(data)

    async def login(self, username_or_email_or_phone: str, password: str) -> LoginResponse:
        """Log in and keep the access token. See AuthClient.login."""
        data = await self._post(
            f"{self._BASE_PATH}/login",
            json={
                "usernameOrEmailOrPhone": username_or_email_or_phone,
                "password": password,
            },
            require_auth=False,
        )
        tokens = LoginResponse(**data)
        self._http.set_access_token(tokens.access_token)
        return tokens

    async def refresh_token(self, refresh_token: str) -> LoginResponse:
        """Exchange a refresh token. See AuthClient.refresh_token."""
        data = await self._post(
            f"{self._BASE_PATH}/refresh-token",
            params={"refreshToken": refresh_token},
            require_auth=False,
        )
        tokens = LoginResponse(**data)
        self._http.set_access_token(tokens.access_token)
        return tokens

    async def forgot_password(self, email: str) -> MessageResponse:
        """Ask for a password reset email."""
        data = await self._post(
            f"{self._BASE_PATH}/forgot-password",
            json={"email": email},
            require_auth=False,
        )
        return _message(data)

    async def reset_password(
        self,
        token: str,
        new_password: str,
        email: str | None = None,
    ) -> MessageResponse:
        """Set a new password. See AuthClient.reset_password."""
        data = await self._post(
            f"{self._BASE_PATH}/reset-password",
            json=_reset_payload(token, new_password, email),
            require_auth=False,
        )
        return _message(data)

    def logout(self) -> None:
        """Forget the access token."""
        self._http.clear_access_token()
