"""Utility functions for page route handlers.

This module contains helpers shared by the page routers, such as calling
the backend with failures turned into toasts.
"""

import logging
from collections.abc import Awaitable
from typing import TypeVar

from client import AuthenticationError, HoanHaoClientError, NotAuthenticatedError
from web.toasts import ToastQueue, backend_message

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def guarded(call: Awaitable[T], toasts: ToastQueue, fallback: str, **params) -> T | None:
    """Await a backend call, turning client errors into an error toast.

    Error messages of 4xx backend answers are shown as-is; everything else
    (network failures, 5xx) shows the localized ``fallback`` message.
    Missing or rejected credentials are not handled here: they propagate
    to the app's 401 handler.

    Args:
        call: The backend call to await.
        toasts: Queue for the error toast.
        fallback: Catalog key of the message to show.
        **params: Placeholder values for the fallback message.

    Returns:
        The call's result, or None if it failed.
    """
    try:
        return await call
    except (NotAuthenticatedError, AuthenticationError):
        raise
    except HoanHaoClientError as e:
        logger.warning("%s: %s", fallback, e)
        toasts.error(backend_message(e), fallback=fallback, **params)
        return None
