"""Profile pages.

The logged-in user's own profile (view and edit) and other users' public
profiles, each with the first page of the user's posts.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from api.dependencies import ClientDep, FormDataDep, LocaleDep, ToastsDep, require_session
from api.models import PageResponse
from api.utils import guarded
from client import AsyncHoanHaoClient, UserProfile
from web.feed import PostCard, to_post_card
from web.forms import EditProfileForm, parse_form
from web.formatting import format_date
from web.media import avatar_url
from web.toasts import ToastQueue

router = APIRouter(
    prefix="/{locale}/profile",
    tags=["profile"],
    dependencies=[Depends(require_session)],
)

POSTS_PER_PAGE = 10


# ============================================================================
# Response Models
# ============================================================================


class ProfileView(BaseModel):
    """A profile page.

    Attributes:
        profile: The user's profile.
        avatar: Avatar URL, with placeholder fallback.
        date_of_birth: Localized date of birth.
        is_me: Whether the viewer is looking at their own profile.
        friend_status: Viewer's friendship status with the user.
        mutual_friends: Friends in common with the viewer.
        posts: First page of the user's posts.
    """

    profile: UserProfile
    avatar: str
    date_of_birth: str = ""
    is_me: bool = False
    friend_status: str = "none"
    mutual_friends: int = 0
    posts: list[PostCard] = Field(default_factory=list)


async def _user_posts(
    client: AsyncHoanHaoClient, username: str, toasts: ToastQueue, locale: str
) -> list[PostCard]:
    feed = await guarded(client.posts.by_user(username, limit=POSTS_PER_PAGE), toasts, "posts.feedFailed")
    if feed is None:
        return []
    return [to_post_card(post, locale) for post in feed.posts]


def _profile_view(profile: UserProfile, locale: str, **extra) -> ProfileView:
    return ProfileView(
        profile=profile,
        avatar=avatar_url(profile.profile_picture_url, seed=profile.username),
        date_of_birth=format_date(profile.date_of_birth, locale),
        **extra,
    )


# ============================================================================
# Endpoints
# ============================================================================


@router.get("/me", response_model=PageResponse[ProfileView])
async def my_profile(locale: LocaleDep, client: ClientDep, toasts: ToastsDep):
    """Show the logged-in user's profile."""
    profile = await guarded(client.users.get_me(), toasts, "profile.loadFailed")
    if profile is None:
        return PageResponse[ProfileView](locale=locale, toasts=toasts.drain())
    posts = await _user_posts(client, profile.username, toasts, locale)
    return PageResponse[ProfileView](
        locale=locale,
        data=_profile_view(profile, locale, is_me=True, friend_status="self", posts=posts),
        toasts=toasts.drain(),
    )


@router.post("/me", response_model=PageResponse[ProfileView])
async def edit_my_profile(
    locale: LocaleDep,
    data: FormDataDep,
    client: ClientDep,
    toasts: ToastsDep,
):
    """Save profile edits. Only the submitted, non-blank fields change."""
    form = parse_form(EditProfileForm, data, locale)
    fields = form.changed_fields()
    if not fields:
        profile = await guarded(client.users.get_me(), toasts, "profile.loadFailed")
    else:
        profile = await guarded(client.users.update_me(**fields), toasts, "profile.updateFailed")
        if profile is not None:
            toasts.success("profile.updated")
    if profile is None:
        return PageResponse[ProfileView](locale=locale, toasts=toasts.drain())
    return PageResponse[ProfileView](
        locale=locale,
        data=_profile_view(profile, locale, is_me=True, friend_status="self"),
        toasts=toasts.drain(),
    )


@router.get("/{username}", response_model=PageResponse[ProfileView])
async def user_profile(username: str, locale: LocaleDep, client: ClientDep, toasts: ToastsDep):
    """Show another user's public profile."""
    public = await guarded(client.users.get_user(username), toasts, "profile.publicLoadFailed")
    if public is None:
        return PageResponse[ProfileView](locale=locale, toasts=toasts.drain())

    mutual = await guarded(client.friends.mutual(username), toasts, "friends.loadFailed")
    posts = await _user_posts(client, username, toasts, locale)
    return PageResponse[ProfileView](
        locale=locale,
        data=_profile_view(
            public.profile,
            locale,
            friend_status=public.friend_status,
            mutual_friends=mutual or 0,
            posts=posts,
        ),
        toasts=toasts.drain(),
    )
