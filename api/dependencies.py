"""Dependency injection providers for the FastAPI application.

This module defines the dependencies page handlers receive: settings, the
page locale, the caller's session, a backend client bound to the caller's
token, the toast queue and the auth service.
"""

from collections.abc import AsyncIterator
from typing import Annotated, Any

import httpx
from fastapi import Depends, Request

from client import AsyncHoanHaoClient, NotAuthenticatedError
from config import Settings, get_settings
from web.forms import FormValidationError
from web.i18n import UnsupportedLocaleError, is_supported, translate
from web.session import AuthService, AuthSession, session_from_cookies
from web.toasts import ToastQueue


def get_locale(locale: str) -> str:
    """Validate the ``{locale}`` path parameter.

    Raises:
        UnsupportedLocaleError: If the locale is not supported.
    """
    if not is_supported(locale):
        raise UnsupportedLocaleError(locale)
    return locale


def get_backend_transport() -> httpx.AsyncBaseTransport | None:
    """Transport used to reach the backend.

    None means a real network connection. Tests override this dependency
    with an ``httpx.MockTransport``.
    """
    return None


def get_session(request: Request) -> AuthSession:
    """The caller's session, read from the auth cookies (not verified)."""
    return session_from_cookies(request.cookies)


def require_session(session: Annotated[AuthSession, Depends(get_session)]) -> AuthSession:
    """The caller's session, for pages that need a logged-in user.

    Raises:
        NotAuthenticatedError: If there is no access token cookie.
    """
    if not session.is_authenticated:
        raise NotAuthenticatedError()
    return session


def get_toasts(locale: Annotated[str, Depends(get_locale)]) -> ToastQueue:
    return ToastQueue(locale)


async def get_client(
    settings: Annotated[Settings, Depends(get_settings)],
    transport: Annotated[httpx.AsyncBaseTransport | None, Depends(get_backend_transport)],
    session: Annotated[AuthSession, Depends(get_session)],
) -> AsyncIterator[AsyncHoanHaoClient]:
    """A backend client bound to the caller's token, closed after the request."""
    async with AsyncHoanHaoClient(
        base_url=settings.api_base_url,
        timeout=settings.api_timeout,
        retry_enabled=settings.api_retry_enabled,
        max_retries=settings.api_max_retries,
        access_token=session.access_token,
        transport=transport,
    ) as client:
        yield client


def get_auth_service(
    client: Annotated[AsyncHoanHaoClient, Depends(get_client)],
    settings: Annotated[Settings, Depends(get_settings)],
    toasts: Annotated[ToastQueue, Depends(get_toasts)],
) -> AuthService:
    return AuthService(client, settings, toasts)


async def get_form_data(
    request: Request, locale: Annotated[str, Depends(get_locale)]
) -> dict[str, Any]:
    """The submitted form, as a JSON object. An empty body is an empty form.

    Raises:
        FormValidationError: If the body is not a JSON object.
    """
    body = await request.body()
    if not body.strip():
        return {}
    try:
        data = await request.json()
    except ValueError:
        data = None
    if not isinstance(data, dict):
        raise FormValidationError({"form": translate("validation.invalid", locale)})
    return data


# Type aliases for dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings)]
LocaleDep = Annotated[str, Depends(get_locale)]
SessionDep = Annotated[AuthSession, Depends(get_session)]
AuthedSessionDep = Annotated[AuthSession, Depends(require_session)]
ToastsDep = Annotated[ToastQueue, Depends(get_toasts)]
ClientDep = Annotated[AsyncHoanHaoClient, Depends(get_client)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
FormDataDep = Annotated[dict[str, Any], Depends(get_form_data)]
