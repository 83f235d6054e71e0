"""Toast notifications collected while handling a request."""

from typing import Literal

from pydantic import BaseModel

from client import APIError, ServerError
from web.i18n import translate

ToastKind = Literal["success", "error", "info"]


def backend_message(exc: Exception) -> str | None:
    """Text of a 4xx backend answer, worth showing to the user as-is.

    Network failures and 5xx answers return None, so callers show their
    own localized message instead.
    """
    if isinstance(exc, APIError) and not isinstance(exc, ServerError):
        return exc.message or None
    return None


class Toast(BaseModel):
    kind: ToastKind
    message: str


class ToastQueue:
    """Toasts to show with the next page response.

    Messages are given either as catalog keys (translated in the queue's
    locale) or as text received from the backend, which is shown as-is.

    Example:
        toasts = ToastQueue("vi")
        toasts.success("auth.loginSuccess")
        toasts.error(backend_message(exc), fallback="auth.loginFailed")
        page = PageResponse(locale="vi", toasts=toasts.drain())
    """

    def __init__(self, locale: str = "vi") -> None:
        self.locale = locale
        self._toasts: list[Toast] = []

    def __len__(self) -> int:
        return len(self._toasts)

    def _push(self, kind: ToastKind, message: str | None, fallback: str | None, params: dict) -> Toast:
        text = translate(message, self.locale, **params) if message else None
        if not text and fallback:
            text = translate(fallback, self.locale, **params)
        toast = Toast(kind=kind, message=text or "")
        self._toasts.append(toast)
        return toast

    def success(self, message: str, fallback: str | None = None, **params) -> Toast:
        return self._push("success", message, fallback, params)

    def error(self, message: str | None, fallback: str | None = None, **params) -> Toast:
        return self._push("error", message, fallback, params)

    def info(self, message: str, fallback: str | None = None, **params) -> Toast:
        return self._push("info", message, fallback, params)

    def drain(self) -> list[Toast]:
        """Return the queued toasts and empty the queue."""
        toasts, self._toasts = self._toasts, []
        return toasts
