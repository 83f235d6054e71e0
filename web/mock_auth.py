"""Stand-in auth backend with hardcoded credentials.

Used when ``USE_MOCK_AUTH`` is on, so the auth screens can be exercised
without the auth service. Every call waits ``latency`` seconds to behave
like a network round trip.
"""

import asyncio
import logging

from client import LoginResponse, MessageResponse, UserProfile

logger = logging.getLogger(__name__)

MOCK_EMAIL = "1@gmail.com"
MOCK_PASSWORD = "123456"
MOCK_TOKEN = "fake-jwt-token"
MOCK_REFRESH_TOKEN = "fake-refresh-token"
MOCK_USER_NAME = "Người Dùng"
MOCK_RESET_TOKEN = "valid-token"
MIN_PASSWORD_LENGTH = 6


class MockAuthError(Exception):
    """A mock auth call failed.

    Attributes:
        message_key: Catalog key of the message to show.
    """

    def __init__(self, message_key: str) -> None:
        self.message_key = message_key
        super().__init__(message_key)


async def mock_login(email: str, password: str, latency: float = 1.0) -> LoginResponse:
    await asyncio.sleep(latency)
    if email == MOCK_EMAIL and password == MOCK_PASSWORD:
        return LoginResponse(access_token=MOCK_TOKEN, refresh_token=MOCK_REFRESH_TOKEN)
    logger.info("Mock login rejected for %s", email)
    raise MockAuthError("auth.invalidCredentials")


async def mock_register(email: str, password: str, latency: float = 1.0) -> MessageResponse:
    await asyncio.sleep(latency)
    if email and len(password) >= MIN_PASSWORD_LENGTH:
        return MessageResponse(message="auth.registerSuccess")
    raise MockAuthError("auth.registerFailed")


async def mock_forgot_password(email: str, latency: float = 1.0) -> MessageResponse:
    await asyncio.sleep(latency)
    if email == MOCK_EMAIL:
        return MessageResponse(message="auth.forgotPasswordSent")
    raise MockAuthError("auth.emailNotFound")


async def mock_reset_password(token: str, new_password: str, latency: float = 1.0) -> MessageResponse:
    await asyncio.sleep(latency)
    if token != MOCK_RESET_TOKEN:
        raise MockAuthError("auth.invalidResetToken")
    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise MockAuthError("auth.passwordTooShort")
    return MessageResponse(message="auth.resetSuccess")


async def mock_profile(token: str, latency: float = 1.0) -> UserProfile:
    """Profile of the mock user, for the mock token only."""
    await asyncio.sleep(latency)
    if token != MOCK_TOKEN:
        raise MockAuthError("auth.sessionExpired")
    return UserProfile(
        id=1,
        username=MOCK_EMAIL.split("@")[0],
        email=MOCK_EMAIL,
        full_name=MOCK_USER_NAME,
    )
