"""Locale routing and message catalogs.

Every page lives under a locale prefix (``/vi/...``, ``/en/...``). Message
catalogs are JSON files in ``web/messages`` with nested keys that are
addressed with dots (``"auth.loginSuccess"``) and may contain ``{name}``
placeholders.
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

logger = logging.getLogger(__name__)

SUPPORTED_LOCALES = ("en", "vi")
DEFAULT_LOCALE = "vi"
FALLBACK_LOCALE = "en"
LOCALE_COOKIE = "NEXT_LOCALE"

# Pages reachable without logging in, given without the locale prefix
PUBLIC_ROUTES = ("/login", "/register", "/forgot-password", "/reset-password")

# Paths served as-is, without a locale prefix
EXEMPT_PREFIXES = ("/health", "/docs", "/redoc", "/openapi.json", "/static")

MESSAGES_DIR = Path(__file__).parent / "messages"


class UnsupportedLocaleError(ValueError):
    """Raised when a locale outside SUPPORTED_LOCALES is requested."""

    def __init__(self, locale: str) -> None:
        self.locale = locale
        super().__init__(f"Unsupported locale '{locale}'")


class _KeepMissing(dict):
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"


def _flatten(tree: dict[str, Any], prefix: str = "") -> dict[str, str]:
    flat: dict[str, str] = {}
    for key, value in tree.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, f"{dotted}."))
        else:
            flat[dotted] = str(value)
    return flat


def is_supported(locale: str | None) -> bool:
    return locale in SUPPORTED_LOCALES


@lru_cache
def load_messages(locale: str) -> dict[str, str]:
    """Load the catalog of a locale as a flat ``{dotted.key: message}`` dict.

    Raises:
        UnsupportedLocaleError: If the locale is not supported.
    """
    if not is_supported(locale):
        raise UnsupportedLocaleError(locale)
    path = MESSAGES_DIR / f"{locale}.json"
    with path.open(encoding="utf-8") as f:
        return _flatten(json.load(f))


def translate(key: str, locale: str = DEFAULT_LOCALE, /, **params: Any) -> str:
    """Look up a message and fill in its placeholders.

    Unknown locales and keys missing from the locale's catalog fall back to
    the fallback locale, then to the key itself. Placeholders without a
    matching parameter are left untouched.

    Args:
        key: Dotted message key, e.g. "friends.send-request".
        locale: Locale to translate to.
        **params: Placeholder values.

    Returns:
        The translated message.
    """
    for candidate in (locale, FALLBACK_LOCALE):
        if not is_supported(candidate):
            continue
        message = load_messages(candidate).get(key)
        if message is not None:
            return message.format_map(_KeepMissing(params))
    logger.debug("Missing translation for '%s' (%s)", key, locale)
    return key


def split_locale(path: str) -> tuple[str | None, str]:
    """Split a path into its locale prefix and the rest.

    >>> split_locale("/vi/friends/list")
    ('vi', '/friends/list')
    >>> split_locale("/friends/list")
    (None, '/friends/list')
    """
    if not path.startswith("/"):
        path = "/" + path
    segments = path.split("/", 2)
    if segments[1] in SUPPORTED_LOCALES:
        rest = "/" + segments[2] if len(segments) > 2 else "/"
        return segments[1], rest
    return None, path


def localize_path(path: str, locale: str) -> str:
    """Return ``path`` under the ``locale`` prefix, replacing any existing one.

    Raises:
        UnsupportedLocaleError: If the locale is not supported.
    """
    if not is_supported(locale):
        raise UnsupportedLocaleError(locale)
    _, rest = split_locale(path)
    if rest == "/":
        return f"/{locale}"
    return f"/{locale}{rest}"


def switch_locale_path(path: str, current: str, new: str) -> str:
    """Rewrite a page path from one locale to another.

    A path without a locale prefix is taken to be in ``current``.

    Raises:
        UnsupportedLocaleError: If ``new`` is not supported.
    """
    if not is_supported(new):
        raise UnsupportedLocaleError(new)
    locale, rest = split_locale(path)
    if locale is not None and locale != current:
        logger.debug("Path %s is in %s, not %s", path, locale, current)
    return localize_path(rest, new)


def _accept_language_tags(header: str) -> list[str]:
    weighted: list[tuple[float, int, str]] = []
    for position, part in enumerate(header.split(",")):
        tag, _, params = part.strip().partition(";")
        if not tag:
            continue
        quality = 1.0
        params = params.strip()
        if params.startswith("q="):
            try:
                quality = float(params[2:])
            except ValueError:
                quality = 0.0
        weighted.append((-quality, position, tag.split("-")[0].lower()))
    return [tag for _, _, tag in sorted(weighted) if tag != "*"]


def negotiate_locale(
    cookie_value: str | None,
    accept_language: str | None,
    default: str = DEFAULT_LOCALE,
) -> str:
    """Pick the locale for a request without a locale prefix.

    The locale cookie wins when it names a supported locale, then the first
    supported language of the Accept-Language header (by quality), then
    ``default``.
    """
    if is_supported(cookie_value):
        return cookie_value
    if accept_language:
        for tag in _accept_language_tags(accept_language):
            if is_supported(tag):
                return tag
    return default


def is_public_route(path: str) -> bool:
    """Whether the page at ``path`` (with or without locale) needs no login."""
    _, rest = split_locale(path)
    return any(rest == route or rest.startswith(route + "/") for route in PUBLIC_ROUTES)


def _is_exempt(path: str) -> bool:
    return any(path == prefix or path.startswith(prefix + "/") for prefix in EXEMPT_PREFIXES)


class LocaleMiddleware(BaseHTTPMiddleware):
    """Redirect page requests without a locale prefix to a localized URL.

    Requests that already carry a prefix get ``request.state.locale`` set.
    """

    def __init__(self, app: Any, default_locale: str = DEFAULT_LOCALE) -> None:
        super().__init__(app)
        self.default_locale = default_locale if is_supported(default_locale) else DEFAULT_LOCALE

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if _is_exempt(path):
            return await call_next(request)

        locale, _ = split_locale(path)
        if locale is None:
            locale = negotiate_locale(
                request.cookies.get(LOCALE_COOKIE),
                request.headers.get("accept-language"),
                self.default_locale,
            )
            target = localize_path(path, locale)
            if request.url.query:
                target = f"{target}?{request.url.query}"
            logger.debug("Redirecting %s to %s", path, target)
            return RedirectResponse(target, status_code=307)

        request.state.locale = locale
        return await call_next(request)
