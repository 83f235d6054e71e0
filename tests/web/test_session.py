"""Tests for the session model and the auth flows of AuthService.

AuthService is driven with a real AsyncHoanHaoClient whose transport is
the fake backend, and a Starlette Response collecting the cookies.
"""

import httpx
import pytest
from starlette.responses import Response

from client import AsyncHoanHaoClient
from config import Settings
from tests.fixtures.backend import ME, body_of
from web.forms import ForgotPasswordForm, LoginForm, RegisterForm, ResetPasswordForm
from web.session import AuthService, AuthSession, session_from_cookies
from web.toasts import ToastQueue


@pytest.fixture
def service_factory(backend):
    """Build an AuthService for the fake backend.

    Returns:
        A function ``(use_mock_auth=False, locale="en") -> (service, toasts)``.
    """

    def factory(use_mock_auth=False, locale="en"):
        client = AsyncHoanHaoClient(base_url="http://backend", transport=backend.transport)
        toasts = ToastQueue(locale)
        settings = Settings(use_mock_auth=use_mock_auth, mock_auth_latency=0)
        return AuthService(client, settings, toasts), toasts

    return factory


def cookie_headers(response):
    return response.headers.getlist("set-cookie")


LOGIN = LoginForm(username_or_email_or_phone="1@gmail.com", password="123456")


class TestAuthSession:
    def test_from_cookies(self):
        session = session_from_cookies({"access_token": "jwt", "refresh_token": "ref"})
        assert session.is_authenticated
        assert session.refresh_token == "ref"

    def test_empty_cookie_is_anonymous(self):
        assert not session_from_cookies({"access_token": ""}).is_authenticated
        assert not AuthSession().is_authenticated


class TestLogin:
    async def test_success(self, backend, service_factory):
        backend.on("POST", "/auth/login", json={"accessToken": "jwt-1", "refreshToken": "ref-1"})
        backend.on("GET", "/users/me", json=ME)
        service, toasts = service_factory()
        response = Response()

        session = await service.login(LOGIN, response)

        assert session.user.username == "lan"
        assert session.access_token == "jwt-1"
        assert body_of(backend.last("POST", "/auth/login")) == {
            "usernameOrEmailOrPhone": "1@gmail.com",
            "password": "123456",
        }
        assert backend.last("GET", "/users/me").headers["Authorization"] == "Bearer jwt-1"
        assert [c.split(";")[0] for c in cookie_headers(response)] == [
            "access_token=jwt-1",
            "refresh_token=ref-1",
        ]
        assert [t.message for t in toasts.drain()] == ["Logged in successfully!"]

    async def test_without_refresh_token(self, backend, service_factory):
        backend.on("POST", "/auth/login", json={"accessToken": "jwt-1"})
        backend.on("GET", "/users/me", json=ME)
        service, _ = service_factory()
        response = Response()

        await service.login(LOGIN, response)

        assert len(cookie_headers(response)) == 1

    async def test_backend_message_is_shown(self, backend, service_factory):
        backend.on("POST", "/auth/login", status=401, json={"message": "Sai mật khẩu"})
        service, toasts = service_factory()
        response = Response()

        assert await service.login(LOGIN, response) is None

        assert cookie_headers(response) == []
        toast = toasts.drain()[0]
        assert toast.kind == "error"
        assert toast.message == "Sai mật khẩu"

    async def test_backend_down(self, backend, service_factory):
        backend.on("POST", "/auth/login", status=503, json={})
        service, toasts = service_factory()

        assert await service.login(LOGIN, Response()) is None

        assert toasts.drain()[0].message == "Login failed"

    async def test_mock_mode(self, backend, service_factory):
        service, toasts = service_factory(use_mock_auth=True)
        response = Response()

        session = await service.login(LOGIN, response)

        assert session.access_token == "fake-jwt-token"
        assert session.user.full_name == "Người Dùng"
        assert backend.requests == []

    async def test_mock_mode_rejects(self, service_factory):
        service, toasts = service_factory(use_mock_auth=True, locale="vi")
        form = LoginForm(username_or_email_or_phone="1@gmail.com", password="nope")

        assert await service.login(form, Response()) is None
        assert toasts.drain()[0].message == "Sai thông tin đăng nhập!"


class TestRegisterAndReset:
    async def test_register(self, backend, service_factory):
        backend.on("POST", "/auth/register", json={"message": "ok"})
        service, toasts = service_factory()
        form = RegisterForm(
            full_name="Nguyễn Lan",
            username="lan",
            email="lan@example.com",
            password="secret1",
            confirm_password="secret1",
            date_of_birth="2000-01-31",
        )

        assert await service.register(form) is True

        payload = body_of(backend.last("POST", "/auth/register"))
        assert payload["fullName"] == "Nguyễn Lan"
        assert payload["dateOfBirth"] == "2000-01-31"
        assert "phoneNumber" not in payload
        assert toasts.drain()[0].kind == "success"

    async def test_register_conflict(self, backend, service_factory):
        backend.on("POST", "/auth/register", status=409, json={"message": "Email đã tồn tại"})
        service, toasts = service_factory()
        form = RegisterForm(
            full_name="Nguyễn Lan",
            username="lan",
            email="lan@example.com",
            password="secret1",
            confirm_password="secret1",
            date_of_birth="2000-01-31",
        )

        assert await service.register(form) is False
        assert toasts.drain()[0].message == "Email đã tồn tại"

    async def test_forgot_password(self, backend, service_factory):
        backend.on("POST", "/auth/forgot-password", json={"message": "sent"})
        service, toasts = service_factory()

        assert await service.request_password_reset(ForgotPasswordForm(email="lan@example.com"))
        assert toasts.drain()[0].message == "Password reset email sent!"

    async def test_reset_password(self, backend, service_factory):
        backend.on("POST", "/auth/reset-password", json={"message": "done"})
        service, _ = service_factory()
        form = ResetPasswordForm(
            token="tok", email="lan@example.com", password="secret1", confirm_password="secret1"
        )

        assert await service.confirm_password_reset(form)
        assert body_of(backend.last("POST", "/auth/reset-password")) == {
            "token": "tok",
            "newPassword": "secret1",
            "email": "lan@example.com",
        }

    async def test_mock_reset_with_bad_token(self, service_factory):
        service, toasts = service_factory(use_mock_auth=True)
        form = ResetPasswordForm(
            token="tok", email="lan@example.com", password="secret1", confirm_password="secret1"
        )

        assert await service.confirm_password_reset(form) is False
        assert toasts.drain()[0].message == "Invalid or expired token!"


class TestLogoutAndCheckAuth:
    def test_logout(self, service_factory):
        service, toasts = service_factory()
        service.client.access_token = "jwt-1"
        response = Response()

        service.logout(response)

        assert service.client.access_token is None
        assert all("max-age=-1" in c for c in cookie_headers(response))
        assert toasts.drain()[0].message == "Logged out"

    async def test_anonymous(self, backend, service_factory):
        service, _ = service_factory()
        session = await service.check_auth(AuthSession(), Response())
        assert session.user is None
        assert backend.requests == []

    async def test_valid_session(self, backend, service_factory):
        backend.on("GET", "/users/me", json=ME)
        service, _ = service_factory()

        session = await service.check_auth(AuthSession(access_token="jwt-1"), Response())

        assert session.user.id == 1
        assert session.access_token == "jwt-1"

    async def test_expired_token_is_refreshed(self, backend, service_factory):
        def me(request):
            if request.headers["Authorization"] == "Bearer jwt-new":
                return httpx.Response(200, json=ME)
            return httpx.Response(401, json={"message": "expired"})

        backend.on("GET", "/users/me", handler=me)
        backend.on("POST", "/auth/refresh-token", json={"accessToken": "jwt-new"})
        service, _ = service_factory()
        response = Response()

        session = await service.check_auth(
            AuthSession(access_token="jwt-old", refresh_token="ref-1"), response
        )

        assert session.access_token == "jwt-new"
        assert session.refresh_token == "ref-1"
        assert session.user.username == "lan"
        assert cookie_headers(response)[0].startswith("access_token=jwt-new;")
        refresh = backend.last("POST", "/auth/refresh-token")
        assert refresh.url.params["refreshToken"] == "ref-1"
        assert body_of(refresh) is None

    async def test_rejected_session_is_cleared(self, backend, service_factory):
        backend.on("GET", "/users/me", status=401, json={"message": "expired"})
        backend.on("POST", "/auth/refresh-token", status=401, json={"message": "expired"})
        service, _ = service_factory()
        response = Response()

        session = await service.check_auth(
            AuthSession(access_token="jwt-old", refresh_token="ref-1"), response
        )

        assert session == AuthSession()
        names = [c.split("=", 1)[0] for c in cookie_headers(response)]
        assert names == ["access_token", "refresh_token"]
