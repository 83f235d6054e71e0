"""Unit tests for the AuthClient and AsyncAuthClient.

This module tests the auth service sub-client: registration, login, token
refresh, password reset and logout. The shared HTTP client is mocked.
"""

from unittest.mock import AsyncMock, MagicMock

from client._auth import AsyncAuthClient, AuthClient
from client.models import LoginResponse, MessageResponse


# =============================================================================
# Response Model Tests
# =============================================================================


class TestLoginResponse:
    """Tests for the LoginResponse model."""

    def test_parses_camel_case(self):
        tokens = LoginResponse(**{"accessToken": "a", "refreshToken": "r"})
        assert tokens.access_token == "a"
        assert tokens.refresh_token == "r"

    def test_populate_by_name(self):
        tokens = LoginResponse(access_token="a")
        assert tokens.refresh_token is None


# =============================================================================
# AuthClient Tests
# =============================================================================


class TestAuthClientRegister:
    """Tests for AuthClient.register() method."""

    def test_register_minimal(self):
        mock_http = MagicMock()
        mock_http.post.return_value = {"message": "Đăng ký thành công"}

        client = AuthClient(mock_http)
        result = client.register(
            username="lan",
            email="lan@example.com",
            password="secret1",
            full_name="Nguyễn Lan",
            date_of_birth="2000-01-31",
        )

        mock_http.post.assert_called_once_with(
            "/auth/register",
            json={
                "username": "lan",
                "email": "lan@example.com",
                "password": "secret1",
                "fullName": "Nguyễn Lan",
                "dateOfBirth": "2000-01-31",
                "countryCode": "+84",
            },
            params=None,
            require_auth=False,
        )
        assert isinstance(result, MessageResponse)
        assert result.message == "Đăng ký thành công"

    def test_register_with_phone(self):
        mock_http = MagicMock()
        mock_http.post.return_value = {"message": "ok"}

        client = AuthClient(mock_http)
        client.register(
            username="lan",
            email="lan@example.com",
            password="secret1",
            full_name="Lan",
            date_of_birth="2000-01-31",
            country_code="+1",
            phone_number="0912345678",
        )

        payload = mock_http.post.call_args.kwargs["json"]
        assert payload["countryCode"] == "+1"
        assert payload["phoneNumber"] == "0912345678"

    def test_register_plain_text_answer(self):
        mock_http = MagicMock()
        mock_http.post.return_value = "created"

        result = AuthClient(mock_http).register("u", "e@x.vn", "pw1234", "N", "2000-01-01")

        assert result.message == "created"


class TestAuthClientLogin:
    """Tests for AuthClient.login() method."""

    def test_login_stores_token(self):
        mock_http = MagicMock()
        mock_http.post.return_value = {"accessToken": "jwt", "refreshToken": "ref"}

        client = AuthClient(mock_http)
        tokens = client.login("1@gmail.com", "123456")

        mock_http.post.assert_called_once_with(
            "/auth/login",
            json={"usernameOrEmailOrPhone": "1@gmail.com", "password": "123456"},
            params=None,
            require_auth=False,
        )
        mock_http.set_access_token.assert_called_once_with("jwt")
        assert tokens.refresh_token == "ref"

    def test_refresh_token(self):
        mock_http = MagicMock()
        mock_http.post.return_value = {"accessToken": "new"}

        tokens = AuthClient(mock_http).refresh_token("ref")

        mock_http.post.assert_called_once_with(
            "/auth/refresh-token",
            json=None,
            params={"refreshToken": "ref"},
            require_auth=False,
        )
        mock_http.set_access_token.assert_called_once_with("new")
        assert tokens.access_token == "new"

    def test_logout_clears_token(self):
        mock_http = MagicMock()

        AuthClient(mock_http).logout()

        mock_http.clear_access_token.assert_called_once()
        mock_http.post.assert_not_called()


class TestAuthClientPasswordReset:
    """Tests for forgot_password() and reset_password()."""

    def test_forgot_password(self):
        mock_http = MagicMock()
        mock_http.post.return_value = {"message": "sent"}

        AuthClient(mock_http).forgot_password("lan@example.com")

        mock_http.post.assert_called_once_with(
            "/auth/forgot-password",
            json={"email": "lan@example.com"},
            params=None,
            require_auth=False,
        )

    def test_reset_password_with_email(self):
        mock_http = MagicMock()
        mock_http.post.return_value = {"message": "done"}

        AuthClient(mock_http).reset_password("tok", "newpass", email="lan@example.com")

        mock_http.post.assert_called_once_with(
            "/auth/reset-password",
            json={"token": "tok", "newPassword": "newpass", "email": "lan@example.com"},
            params=None,
            require_auth=False,
        )

    def test_reset_password_without_email(self):
        mock_http = MagicMock()
        mock_http.post.return_value = {"message": "done"}

        AuthClient(mock_http).reset_password("tok", "newpass")

        assert "email" not in mock_http.post.call_args.kwargs["json"]


# =============================================================================
# AsyncAuthClient Tests
# =============================================================================


class TestAsyncAuthClient:
    """Tests for AsyncAuthClient."""

    async def test_login(self):
        # set_access_token is synchronous, so only post is awaited
        mock_http = MagicMock()
        mock_http.post = AsyncMock(return_value={"accessToken": "jwt"})

        client = AsyncAuthClient(mock_http)
        tokens = await client.login("lan", "secret1")

        mock_http.post.assert_called_once_with(
            "/auth/login",
            json={"usernameOrEmailOrPhone": "lan", "password": "secret1"},
            params=None,
            require_auth=False,
        )
        mock_http.set_access_token.assert_called_once_with("jwt")
        assert tokens.access_token == "jwt"

    async def test_refresh_token_sent_as_query_parameter(self):
        mock_http = MagicMock()
        mock_http.post = AsyncMock(return_value={"accessToken": "new", "refreshToken": "ref-2"})

        tokens = await AsyncAuthClient(mock_http).refresh_token("ref")

        mock_http.post.assert_called_once_with(
            "/auth/refresh-token",
            json=None,
            params={"refreshToken": "ref"},
            require_auth=False,
        )
        mock_http.set_access_token.assert_called_once_with("new")
        assert tokens.refresh_token == "ref-2"

    async def test_register(self):
        mock_http = AsyncMock()
        mock_http.post.return_value = {"message": "ok"}

        result = await AsyncAuthClient(mock_http).register(
            "lan", "lan@example.com", "secret1", "Lan", "2000-01-31"
        )

        assert mock_http.post.call_args.args == ("/auth/register",)
        assert result.message == "ok"

    async def test_forgot_password(self):
        mock_http = AsyncMock()
        mock_http.post.return_value = {"message": "sent"}

        await AsyncAuthClient(mock_http).forgot_password("lan@example.com")

        mock_http.post.assert_called_once_with(
            "/auth/forgot-password",
            json={"email": "lan@example.com"},
            params=None,
            require_auth=False,
        )
