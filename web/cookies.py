"""Cookie helpers for token and locale storage.

Cookies are written as raw ``Set-Cookie`` strings so the attribute layout
is under our control: ``name=value; max-age=N; path=P; secure;
samesite=S``, with any attribute whose value is falsy left out.

The ``secure`` flag is passed in by the caller from its request's
``Settings.cookie_secure``.
"""

from typing import Any, Protocol
from urllib.parse import quote, unquote

from web.i18n import LOCALE_COOKIE

ACCESS_TOKEN_COOKIE = "access_token"
REFRESH_TOKEN_COOKIE = "refresh_token"

ACCESS_TOKEN_MAX_AGE = 3600  # 1 hour
REFRESH_TOKEN_MAX_AGE = 2592000  # 30 days
LOCALE_MAX_AGE = 31536000  # 1 year

DEFAULT_OPTIONS: dict[str, Any] = {
    "path": "/",
    "samesite": "strict",
    "secure": False,
    "max_age": 86400,  # 1 day
}


class CookieSink(Protocol):
    """Anything that collects Set-Cookie headers, e.g. a Starlette Response."""

    headers: Any


def _encode(value: str) -> str:
    # Same escaping as JavaScript's encodeURIComponent
    return quote(value, safe="-_.!~*'()")


def build_cookie(name: str, value: str, **options: Any) -> str:
    """Build a Set-Cookie header value.

    Args:
        name: Cookie name (percent-encoded).
        value: Cookie value (percent-encoded).
        **options: ``max_age``, ``path``, ``secure`` and ``samesite``,
            overriding the defaults.

    Returns:
        The header value.
    """
    opts = {**DEFAULT_OPTIONS, **options}
    cookie = f"{_encode(name)}={_encode(value)}"
    if opts.get("max_age"):
        cookie += f"; max-age={opts['max_age']}"
    if opts.get("path"):
        cookie += f"; path={opts['path']}"
    if opts.get("secure"):
        cookie += "; secure"
    if opts.get("samesite"):
        cookie += f"; samesite={opts['samesite']}"
    return cookie


def get_cookie(cookie_header: str | None, name: str) -> str | None:
    """Read a cookie from a ``Cookie`` request header."""
    if not cookie_header:
        return None
    prefix = _encode(name) + "="
    for part in cookie_header.split(";"):
        part = part.strip()
        if part.startswith(prefix):
            return unquote(part[len(prefix):])
    return None


def remove_cookie(name: str, **options: Any) -> str:
    """Build a Set-Cookie header value that expires the cookie."""
    return build_cookie(name, "", **{**options, "max_age": -1})


def set_cookie(response: CookieSink, name: str, value: str, **options: Any) -> None:
    response.headers.append("set-cookie", build_cookie(name, value, **options))


def delete_cookie(response: CookieSink, name: str, secure: bool = False) -> None:
    response.headers.append("set-cookie", remove_cookie(name, secure=secure))


def set_access_token(response: CookieSink, token: str, secure: bool = False) -> None:
    set_cookie(response, ACCESS_TOKEN_COOKIE, token, max_age=ACCESS_TOKEN_MAX_AGE, secure=secure)


def set_refresh_token(response: CookieSink, token: str, secure: bool = False) -> None:
    set_cookie(response, REFRESH_TOKEN_COOKIE, token, max_age=REFRESH_TOKEN_MAX_AGE, secure=secure)


def set_locale(response: CookieSink, locale: str, secure: bool = False) -> None:
    # Readable by the browser-side language switcher, so samesite lax
    set_cookie(response, LOCALE_COOKIE, locale, max_age=LOCALE_MAX_AGE, samesite="lax", secure=secure)


def get_access_token(cookies: dict[str, str]) -> str | None:
    return cookies.get(ACCESS_TOKEN_COOKIE) or None


def get_refresh_token(cookies: dict[str, str]) -> str | None:
    return cookies.get(REFRESH_TOKEN_COOKIE) or None


def clear_auth_cookies(response: CookieSink, secure: bool = False) -> None:
    delete_cookie(response, ACCESS_TOKEN_COOKIE, secure)
    delete_cookie(response, REFRESH_TOKEN_COOKIE, secure)
