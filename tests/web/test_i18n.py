"""Tests for locale routing and message catalogs."""

import pytest

from web.i18n import (
    SUPPORTED_LOCALES,
    UnsupportedLocaleError,
    is_public_route,
    load_messages,
    localize_path,
    negotiate_locale,
    split_locale,
    switch_locale_path,
    translate,
)


class TestCatalogs:
    def test_catalogs_have_the_same_keys(self):
        assert set(load_messages("vi")) == set(load_messages("en"))

    def test_keys_are_flattened(self):
        messages = load_messages("en")
        assert messages["auth.loginSuccess"] == "Logged in successfully!"
        assert "auth" not in messages

    def test_unsupported_locale(self):
        with pytest.raises(UnsupportedLocaleError) as exc_info:
            load_messages("fr")
        assert exc_info.value.locale == "fr"


class TestTranslate:
    def test_vietnamese(self):
        assert translate("auth.loginSuccess", "vi") == "Đăng nhập thành công!"

    def test_default_locale_is_vietnamese(self):
        assert translate("auth.logoutSuccess") == "Đã đăng xuất"

    def test_placeholders(self):
        assert translate("groups.created", "en", name="Cats") == "Group Cats created"

    def test_missing_placeholder_left_untouched(self):
        assert translate("groups.created", "en") == "Group {name} created"

    def test_unsupported_locale_message(self):
        assert translate("errors.unsupportedLocale", "en", code="fr") == "Unsupported language: fr"

    def test_placeholder_named_like_a_parameter(self):
        # key and locale are positional-only, so they never clash with placeholders
        assert translate("errors.unsupportedLocale", "vi", key="x", locale="fr").startswith("Ngôn ngữ")

    def test_unknown_locale_falls_back_to_english(self):
        assert translate("auth.loginSuccess", "fr") == "Logged in successfully!"

    def test_unknown_key_is_returned_as_is(self):
        assert translate("Email đã tồn tại", "vi") == "Email đã tồn tại"


class TestPaths:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("/vi/friends/list", ("vi", "/friends/list")),
            ("/en", ("en", "/")),
            ("/en/", ("en", "/")),
            ("/friends", (None, "/friends")),
            ("/", (None, "/")),
            ("groups/3", (None, "/groups/3")),
            ("/venue", (None, "/venue")),
        ],
    )
    def test_split_locale(self, path, expected):
        assert split_locale(path) == expected

    def test_localize_path(self):
        assert localize_path("/friends/list", "en") == "/en/friends/list"
        assert localize_path("/vi/friends/list", "en") == "/en/friends/list"
        assert localize_path("/", "vi") == "/vi"

    def test_localize_path_rejects_unknown_locale(self):
        with pytest.raises(UnsupportedLocaleError):
            localize_path("/friends", "de")

    def test_switch_locale_path(self):
        assert switch_locale_path("/vi/groups/3", "vi", "en") == "/en/groups/3"
        assert switch_locale_path("/groups/3", "vi", "en") == "/en/groups/3"
        assert switch_locale_path("/vi", "vi", "en") == "/en"

    def test_switch_to_same_locale(self):
        assert switch_locale_path("/vi/groups", "vi", "vi") == "/vi/groups"

    def test_switch_to_unsupported(self):
        with pytest.raises(UnsupportedLocaleError):
            switch_locale_path("/vi/groups", "vi", "ja")

    @pytest.mark.parametrize(
        "path",
        ["/vi/login", "/en/register", "/forgot-password", "/vi/reset-password/abc"],
    )
    def test_public_routes(self, path):
        assert is_public_route(path)

    @pytest.mark.parametrize("path", ["/vi", "/vi/friends", "/en/loginx", "/en/profile/me"])
    def test_protected_routes(self, path):
        assert not is_public_route(path)


class TestNegotiateLocale:
    def test_cookie_wins(self):
        assert negotiate_locale("en", "vi-VN,vi;q=0.9") == "en"

    def test_unsupported_cookie_ignored(self):
        assert negotiate_locale("fr", "en-US,en;q=0.9") == "en"

    def test_accept_language_quality_order(self):
        assert negotiate_locale(None, "fr;q=1.0, en;q=0.5, vi;q=0.8") == "vi"

    def test_wildcard_and_junk(self):
        assert negotiate_locale(None, "*, xx;q=abc") == "vi"

    def test_default(self):
        assert negotiate_locale(None, None) == "vi"
        assert negotiate_locale(None, None, default="en") == "en"

    def test_supported_locales(self):
        assert SUPPORTED_LOCALES == ("en", "vi")
