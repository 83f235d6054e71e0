"""Exception handlers for the Hoàn Hảo web front.

This module converts the exceptions page handlers let through into
localized JSON page responses.
"""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

from api.models import FormErrorResponse
from client import AuthenticationError, NotAuthenticatedError
from config import Settings, get_settings
from web import cookies
from web.forms import FormValidationError
from web.i18n import UnsupportedLocaleError, is_supported, split_locale, translate
from web.toasts import Toast

logger = logging.getLogger(__name__)


def app_settings(request: Request) -> Settings:
    """Settings as route dependencies see them, honoring app overrides."""
    provider = request.app.dependency_overrides.get(get_settings, get_settings)
    return provider()


def request_locale(request: Request) -> str:
    """Locale of the page being requested, falling back to the default."""
    locale = getattr(request.state, "locale", None)
    if is_supported(locale):
        return locale
    locale, _ = split_locale(request.url.path)
    return locale or app_settings(request).default_locale


def _error_toast(key: str, locale: str, **params) -> dict:
    return Toast(kind="error", message=translate(key, locale, **params)).model_dump()


# Exception Handlers


async def form_validation_handler(request: Request, exc: FormValidationError):
    """Handle FormValidationError exceptions.

    Returns a 422 with the localized message of each invalid field and the
    submitted values, so the form can be shown again.
    """
    body = FormErrorResponse(locale=request_locale(request), errors=exc.errors, values=exc.values)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=body.model_dump(mode="json"),
    )


async def not_authenticated_handler(
    request: Request, exc: NotAuthenticatedError | AuthenticationError
):
    """Handle missing or rejected credentials.

    Returns a 401 pointing the browser at the login page. When the backend
    rejected the token, the stale auth cookies are cleared as well.
    """
    locale = request_locale(request)
    key = "auth.notLoggedIn" if isinstance(exc, NotAuthenticatedError) else "auth.sessionExpired"
    response = JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={
            "locale": locale,
            "data": None,
            "loading": False,
            "toasts": [_error_toast(key, locale)],
            "pagination": None,
            "redirect": f"/{locale}/login",
        },
    )
    if isinstance(exc, AuthenticationError):
        logger.info("Backend rejected the session on %s", request.url.path)
        cookies.clear_auth_cookies(response, app_settings(request).cookie_secure)
    return response


async def unsupported_locale_handler(request: Request, exc: UnsupportedLocaleError):
    """Handle UnsupportedLocaleError exceptions with a 404."""
    locale = app_settings(request).default_locale
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "locale": locale,
            "error": "Unsupported Locale",
            "detail": translate("errors.unsupportedLocale", locale, code=exc.locale),
        },
    )


async def generic_exception_handler(request: Request, exc: Exception):
    """Handle any unhandled exceptions.

    Logs the traceback and answers with a generic localized message.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    locale = request_locale(request)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "locale": locale,
            "error": "Internal Server Error",
            "detail": translate("errors.unexpected", locale),
            "type": type(exc).__name__,
        },
    )
