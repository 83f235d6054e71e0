"""Shared response models for page endpoints.

Every page endpoint answers with a ``PageResponse``: the view model a
template would render, plus the toasts to show and, when the browser
should go elsewhere, the path to redirect to.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from web.pagination import Pagination
from web.toasts import Toast

# Generic type variable for page data
DataT = TypeVar("DataT")


class PageResponse(BaseModel, Generic[DataT]):
    """Response model for page endpoints.

    Attributes:
        locale: Locale the page is rendered in.
        data: The page's view model (None when loading it failed).
        loading: Whether the page is still waiting for data. Always False
            once a response is sent.
        toasts: Notifications to show.
        pagination: Pager state for paginated pages.
        redirect: Localized path the browser should go to, if any.
    """

    locale: str
    data: DataT | None = None
    loading: bool = False
    toasts: list[Toast] = Field(default_factory=list)
    pagination: Pagination | None = None
    redirect: str | None = None


class FormErrorResponse(BaseModel):
    """Response model for rejected form submissions (HTTP 422).

    Attributes:
        locale: Locale the errors are rendered in.
        errors: Localized message per field.
        values: The submitted values, minus secrets.
        toasts: Notifications to show.
    """

    locale: str
    errors: dict[str, str]
    values: dict[str, Any] = Field(default_factory=dict)
    toasts: list[Toast] = Field(default_factory=list)


class ActionResult(BaseModel):
    """Outcome of a button-style action (friend request, join group, ...)."""

    ok: bool
    message: str | None = None
