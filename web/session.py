"""Login state and the auth flows behind the auth screens.

The session lives in two cookies (access and refresh token). ``AuthService``
runs the login, registration, password reset and logout flows against the
auth service (or the mock backend), writes the cookies on the response and
reports the outcome through toasts.
"""

import logging
from collections.abc import Mapping

from pydantic import BaseModel

from client import AsyncHoanHaoClient, HoanHaoClientError, LoginResponse, UserProfile
from config import Settings
from web import cookies, mock_auth
from web.cookies import CookieSink
from web.forms import ForgotPasswordForm, LoginForm, RegisterForm, ResetPasswordForm
from web.mock_auth import MockAuthError
from web.toasts import ToastQueue, backend_message

logger = logging.getLogger(__name__)


class AuthSession(BaseModel):
    """Who is making the request.

    Attributes:
        access_token: Bearer token from the access cookie.
        refresh_token: Refresh token from the refresh cookie.
        user: Profile of the logged-in user, once loaded.
    """

    access_token: str | None = None
    refresh_token: str | None = None
    user: UserProfile | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)


def session_from_cookies(request_cookies: Mapping[str, str]) -> AuthSession:
    """Build the (not yet verified) session from request cookies."""
    return AuthSession(
        access_token=cookies.get_access_token(dict(request_cookies)),
        refresh_token=cookies.get_refresh_token(dict(request_cookies)),
    )


class AuthService:
    """Auth flows for one request.

    Each flow returns whether it succeeded (or the new session) and pushes a
    success or error toast. Backend failures never propagate.

    Args:
        client: Client bound to the request.
        settings: Application settings (mock mode, latency).
        toasts: Queue receiving the outcome messages.
    """

    def __init__(self, client: AsyncHoanHaoClient, settings: Settings, toasts: ToastQueue) -> None:
        self.client = client
        self.settings = settings
        self.toasts = toasts

    @property
    def mock(self) -> bool:
        return self.settings.use_mock_auth

    def _failed(self, exc: Exception, fallback: str) -> None:
        if isinstance(exc, MockAuthError):
            self.toasts.error(exc.message_key)
        else:
            logger.warning("Auth call failed: %s", exc)
            self.toasts.error(backend_message(exc), fallback=fallback)

    async def _load_profile(self, token: str) -> UserProfile:
        if self.mock:
            return await mock_auth.mock_profile(token, self.settings.mock_auth_latency)
        self.client.access_token = token
        return await self.client.users.get_me()

    async def login(self, form: LoginForm, response: CookieSink) -> AuthSession | None:
        """Log in, store the tokens in cookies and load the user's profile.

        Returns:
            The new session, or None if the login failed.
        """
        try:
            if self.mock:
                tokens = await mock_auth.mock_login(
                    form.username_or_email_or_phone,
                    form.password,
                    self.settings.mock_auth_latency,
                )
            else:
                tokens = await self.client.auth.login(form.username_or_email_or_phone, form.password)
            user = await self._load_profile(tokens.access_token)
        except (HoanHaoClientError, MockAuthError) as e:
            self._failed(e, "auth.loginFailed")
            return None

        self._store_tokens(tokens, response)
        self.toasts.success("auth.loginSuccess")
        logger.info("User %s logged in", user.username)
        return AuthSession(
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            user=user,
        )

    async def register(self, form: RegisterForm) -> bool:
        try:
            if self.mock:
                await mock_auth.mock_register(form.email, form.password, self.settings.mock_auth_latency)
            else:
                await self.client.auth.register(**form.client_kwargs())
        except (HoanHaoClientError, MockAuthError) as e:
            self._failed(e, "auth.registerFailed")
            return False
        self.toasts.success("auth.registerSuccess")
        return True

    async def request_password_reset(self, form: ForgotPasswordForm) -> bool:
        try:
            if self.mock:
                await mock_auth.mock_forgot_password(form.email, self.settings.mock_auth_latency)
            else:
                await self.client.auth.forgot_password(form.email)
        except (HoanHaoClientError, MockAuthError) as e:
            self._failed(e, "auth.resetFailed")
            return False
        self.toasts.success("auth.forgotPasswordSent")
        return True

    async def confirm_password_reset(self, form: ResetPasswordForm) -> bool:
        try:
            if self.mock:
                await mock_auth.mock_reset_password(
                    form.token, form.password, self.settings.mock_auth_latency
                )
            else:
                await self.client.auth.reset_password(form.token, form.password, form.email)
        except (HoanHaoClientError, MockAuthError) as e:
            self._failed(e, "auth.resetFailed")
            return False
        self.toasts.success("auth.resetSuccess")
        return True

    def logout(self, response: CookieSink) -> None:
        cookies.clear_auth_cookies(response, self.settings.cookie_secure)
        self.client.auth.logout()
        self.toasts.success("auth.logoutSuccess")

    async def check_auth(self, session: AuthSession, response: CookieSink) -> AuthSession:
        """Verify the session by loading the user's profile.

        An expired access token is renewed with the refresh token when
        there is one. If the session cannot be verified the auth cookies
        are cleared and an anonymous session is returned.
        """
        if not session.is_authenticated:
            return AuthSession()
        try:
            user = await self._load_profile(session.access_token)
            return session.model_copy(update={"user": user})
        except (HoanHaoClientError, MockAuthError) as e:
            logger.info("Stored session rejected: %s", e)

        if session.refresh_token and not self.mock:
            try:
                tokens = await self.client.auth.refresh_token(session.refresh_token)
                user = await self._load_profile(tokens.access_token)
            except HoanHaoClientError as e:
                logger.info("Token refresh failed: %s", e)
            else:
                self._store_tokens(tokens, response)
                return AuthSession(
                    access_token=tokens.access_token,
                    refresh_token=tokens.refresh_token or session.refresh_token,
                    user=user,
                )

        cookies.clear_auth_cookies(response, self.settings.cookie_secure)
        self.client.auth.logout()
        return AuthSession()

    def _store_tokens(self, tokens: LoginResponse, response: CookieSink) -> None:
        cookies.set_access_token(response, tokens.access_token, self.settings.cookie_secure)
        if tokens.refresh_token:
            cookies.set_refresh_token(response, tokens.refresh_token, self.settings.cookie_secure)
