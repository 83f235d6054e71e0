"""Authentication pages.

Login, registration, password reset and logout. These pages are public:
none of them requires a logged-in user.
"""

from typing import Any, Literal

from fastapi import APIRouter, Response
from pydantic import BaseModel, Field

from api.dependencies import (
    AuthServiceDep,
    FormDataDep,
    LocaleDep,
    SessionDep,
    ToastsDep,
)
from api.models import ActionResult, PageResponse
from client import UserProfile
from web.forms import (
    DEFAULT_COUNTRY_CODE,
    ForgotPasswordForm,
    LoginForm,
    RegisterForm,
    ResetPasswordForm,
    parse_form,
)
from web.i18n import is_public_route, localize_path

router = APIRouter(
    prefix="/{locale}",
    tags=["auth"],
)


# ============================================================================
# Response Models
# ============================================================================


class AuthFormPage(BaseModel):
    """An empty (or pre-filled) auth form.

    Attributes:
        form: Which form to render.
        values: Initial field values.
    """

    form: Literal["login", "register", "forgot-password", "reset-password"]
    values: dict[str, Any] = Field(default_factory=dict)


class SessionView(BaseModel):
    """Who is logged in."""

    authenticated: bool
    user: UserProfile | None = None


def _after_login(next_path: str | None, locale: str) -> str:
    # Only local pages, and never back to an auth page
    if (
        next_path
        and next_path.startswith("/")
        and not next_path.startswith("//")
        and not is_public_route(next_path)
    ):
        return localize_path(next_path, locale)
    return f"/{locale}"


# ============================================================================
# Endpoints
# ============================================================================


@router.get("/login", response_model=PageResponse[AuthFormPage])
async def login_page(locale: LocaleDep, session: SessionDep):
    """Show the login form, or send logged-in users to the feed."""
    if session.is_authenticated:
        return PageResponse[AuthFormPage](locale=locale, redirect=f"/{locale}")
    return PageResponse[AuthFormPage](locale=locale, data=AuthFormPage(form="login"))


@router.post("/login", response_model=PageResponse[SessionView])
async def login(
    locale: LocaleDep,
    data: FormDataDep,
    service: AuthServiceDep,
    toasts: ToastsDep,
    response: Response,
    next: str | None = None,
):
    """Log in with username, email or phone number and a password.

    On success the token cookies are set and the browser is sent to the
    page given by `next` (when it is a local, non-auth page) or the feed.
    On failure an error toast explains why.
    """
    form = parse_form(LoginForm, data, locale)
    session = await service.login(form, response)
    if session is None:
        return PageResponse[SessionView](
            locale=locale,
            data=SessionView(authenticated=False),
            toasts=toasts.drain(),
        )
    return PageResponse[SessionView](
        locale=locale,
        data=SessionView(authenticated=True, user=session.user),
        toasts=toasts.drain(),
        redirect=_after_login(next, locale),
    )


@router.get("/register", response_model=PageResponse[AuthFormPage])
async def register_page(locale: LocaleDep):
    """Show the registration form."""
    return PageResponse[AuthFormPage](
        locale=locale,
        data=AuthFormPage(form="register", values={"country_code": DEFAULT_COUNTRY_CODE}),
    )


@router.post("/register", response_model=PageResponse[ActionResult])
async def register(
    locale: LocaleDep,
    data: FormDataDep,
    service: AuthServiceDep,
    toasts: ToastsDep,
):
    """Create an account, then send the browser to the login page."""
    form = parse_form(RegisterForm, data, locale)
    ok = await service.register(form)
    return PageResponse[ActionResult](
        locale=locale,
        data=ActionResult(ok=ok),
        toasts=toasts.drain(),
        redirect=f"/{locale}/login" if ok else None,
    )


@router.get("/forgot-password", response_model=PageResponse[AuthFormPage])
async def forgot_password_page(locale: LocaleDep):
    """Show the "forgot password" form."""
    return PageResponse[AuthFormPage](locale=locale, data=AuthFormPage(form="forgot-password"))


@router.post("/forgot-password", response_model=PageResponse[ActionResult])
async def forgot_password(
    locale: LocaleDep,
    data: FormDataDep,
    service: AuthServiceDep,
    toasts: ToastsDep,
):
    """Ask for a password reset email."""
    form = parse_form(ForgotPasswordForm, data, locale)
    ok = await service.request_password_reset(form)
    return PageResponse[ActionResult](locale=locale, data=ActionResult(ok=ok), toasts=toasts.drain())


@router.get("/reset-password", response_model=PageResponse[AuthFormPage])
async def reset_password_page(
    locale: LocaleDep,
    toasts: ToastsDep,
    token: str | None = None,
    email: str | None = None,
):
    """Show the new-password form opened from the reset email link.

    A link without a token cannot work, so the browser is sent back to the
    "forgot password" page.
    """
    if not token:
        toasts.error("auth.invalidResetToken")
        return PageResponse[AuthFormPage](
            locale=locale,
            toasts=toasts.drain(),
            redirect=f"/{locale}/forgot-password",
        )
    return PageResponse[AuthFormPage](
        locale=locale,
        data=AuthFormPage(form="reset-password", values={"token": token, "email": email or ""}),
    )


@router.post("/reset-password", response_model=PageResponse[ActionResult])
async def reset_password(
    locale: LocaleDep,
    data: FormDataDep,
    service: AuthServiceDep,
    toasts: ToastsDep,
):
    """Set a new password, then send the browser to the login page."""
    form = parse_form(ResetPasswordForm, data, locale)
    ok = await service.confirm_password_reset(form)
    return PageResponse[ActionResult](
        locale=locale,
        data=ActionResult(ok=ok),
        toasts=toasts.drain(),
        redirect=f"/{locale}/login" if ok else None,
    )


@router.post("/logout", response_model=PageResponse[ActionResult])
async def logout(
    locale: LocaleDep,
    service: AuthServiceDep,
    toasts: ToastsDep,
    response: Response,
):
    """Clear the auth cookies and send the browser to the login page."""
    service.logout(response)
    return PageResponse[ActionResult](
        locale=locale,
        data=ActionResult(ok=True),
        toasts=toasts.drain(),
        redirect=f"/{locale}/login",
    )


@router.get("/session", response_model=PageResponse[SessionView])
async def current_session(
    locale: LocaleDep,
    session: SessionDep,
    service: AuthServiceDep,
    response: Response,
):
    """Verify the session cookies and return the logged-in user, if any."""
    session = await service.check_auth(session, response)
    return PageResponse[SessionView](
        locale=locale,
        data=SessionView(authenticated=session.user is not None, user=session.user),
    )
