"""Tests for avatar fallbacks and image loading state."""

from web.media import AVATAR_PLACEHOLDER, ImageState, avatar_url


class TestAvatarUrl:
    def test_keeps_url(self):
        assert avatar_url("https://img.test/a.png") == "https://img.test/a.png"

    def test_placeholder(self):
        assert avatar_url(None) == AVATAR_PLACEHOLDER.format(seed="default")
        assert avatar_url("", seed="Lan Anh").endswith("seed=Lan%20Anh")

    def test_blank_seed(self):
        assert avatar_url(None, seed="").endswith("seed=default")


class TestImageState:
    def test_starts_loading(self):
        image = ImageState(src="https://img.test/a.png")
        assert image.loading is True
        assert image.error is False

    def test_load(self):
        image = ImageState(src="https://img.test/a.png")
        image.on_load()
        assert image.loading is False
        assert image.display_src == "https://img.test/a.png"

    def test_error_uses_fallback(self):
        image = ImageState(src="https://img.test/a.png", fallback="https://img.test/none.png")
        image.on_error()
        assert image.loading is False
        assert image.display_src == "https://img.test/none.png"

    def test_error_without_fallback(self):
        image = ImageState(src="https://img.test/a.png")
        image.on_error()
        assert image.display_src == "https://img.test/a.png"

    def test_new_src_starts_over(self):
        image = ImageState(src="https://img.test/a.png")
        image.on_error()
        image.set_src("https://img.test/b.png")
        assert image.loading is True
        assert image.error is False
