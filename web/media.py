"""Image loading state and avatar fallbacks."""

from urllib.parse import quote

from pydantic import BaseModel

AVATAR_PLACEHOLDER = "https://api.dicebear.com/7.x/avataaars/svg?seed={seed}"


def avatar_url(url: str | None, seed: str = "default") -> str:
    """Return ``url``, or a generated placeholder avatar when it is empty."""
    if url:
        return url
    return AVATAR_PLACEHOLDER.format(seed=quote(seed or "default", safe=""))


class ImageState(BaseModel):
    """Loading state of one lazily loaded image.

    The image starts out loading. ``on_load`` and ``on_error`` end the
    loading phase; changing the source starts it over.

    Attributes:
        src: Image URL.
        fallback: URL shown instead when the image fails to load.
        loading: Whether the image is still loading.
        error: Whether loading failed.
    """

    src: str | None = None
    fallback: str | None = None
    loading: bool = True
    error: bool = False

    def on_load(self) -> None:
        self.loading = False

    def on_error(self) -> None:
        self.loading = False
        self.error = True

    def set_src(self, src: str | None) -> None:
        self.src = src
        if src:
            self.loading = True
            self.error = False

    @property
    def display_src(self) -> str | None:
        if self.error and self.fallback:
            return self.fallback
        return self.src
