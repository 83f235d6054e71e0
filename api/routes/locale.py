"""Language switcher.

Switching the UI language rewrites the current page path to the new
locale and remembers the choice in the locale cookie.
"""

from fastapi import APIRouter, Response
from pydantic import BaseModel, Field

from api.dependencies import LocaleDep, SettingsDep
from api.models import PageResponse
from web import cookies
from web.i18n import switch_locale_path
from web.toasts import ToastQueue

router = APIRouter(
    prefix="/{locale}",
    tags=["locale"],
)


class LocaleChangeRequest(BaseModel):
    """Request model for switching the UI language.

    Attributes:
        locale: The language to switch to.
        path: The page the user is on.
    """

    locale: str = Field(..., description="Target locale, e.g. 'en'")
    path: str = Field("/", description="Current page path")


class LocaleView(BaseModel):
    locale: str
    path: str


@router.post("/locale", response_model=PageResponse[LocaleView])
async def change_locale(
    locale: LocaleDep, settings: SettingsDep, request: LocaleChangeRequest, response: Response
):
    """Switch the UI language and send the browser to the same page in it.

    Raises:
        UnsupportedLocaleError: If the target locale is not supported.
    """
    path = switch_locale_path(request.path, locale, request.locale)
    cookies.set_locale(response, request.locale, settings.cookie_secure)

    toasts = ToastQueue(request.locale)
    toasts.info("locale.changed")
    return PageResponse[LocaleView](
        locale=request.locale,
        data=LocaleView(locale=request.locale, path=path),
        toasts=toasts.drain(),
        redirect=path,
    )
