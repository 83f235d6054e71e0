"""Tests for form validation and localized form errors."""

from datetime import date, timedelta

import pytest

from web.forms import (
    CommentForm,
    EditProfileForm,
    ForgotPasswordForm,
    FormValidationError,
    GroupForm,
    GroupUpdateForm,
    LoginForm,
    PostForm,
    RegisterForm,
    ResetPasswordForm,
    add_rule,
    parse_form,
    remove_rule,
    safe_values,
)

REGISTRATION = {
    "full_name": "Nguyễn Lan",
    "username": "lan",
    "email": "lan@example.com",
    "password": "secret1",
    "confirm_password": "secret1",
    "date_of_birth": "2000-01-31",
}


def errors_of(form_cls, data, locale="en"):
    with pytest.raises(FormValidationError) as exc_info:
        parse_form(form_cls, data, locale)
    return exc_info.value.errors


# =============================================================================
# Auth forms
# =============================================================================


class TestLoginForm:
    def test_valid(self):
        form = parse_form(LoginForm, {"username_or_email_or_phone": " lan ", "password": "x"}, "vi")
        assert form.username_or_email_or_phone == "lan"

    def test_blank_fields(self):
        errors = errors_of(LoginForm, {"username_or_email_or_phone": "   ", "password": ""})
        assert errors == {
            "username_or_email_or_phone": "This field is required",
            "password": "This field is required",
        }

    def test_missing_fields_in_vietnamese(self):
        errors = errors_of(LoginForm, {}, locale="vi")
        assert errors["password"] == "Trường này là bắt buộc"


class TestRegisterForm:
    def test_valid(self):
        form = parse_form(RegisterForm, REGISTRATION, "vi")
        assert form.country_code == "+84"
        assert form.phone_number is None
        assert form.date_of_birth == date(2000, 1, 31)

    def test_client_kwargs(self):
        form = parse_form(RegisterForm, {**REGISTRATION, "phone_number": "0912345678"}, "vi")
        assert form.client_kwargs() == {
            "username": "lan",
            "email": "lan@example.com",
            "password": "secret1",
            "full_name": "Nguyễn Lan",
            "date_of_birth": "2000-01-31",
            "country_code": "+84",
            "phone_number": "0912345678",
        }

    def test_password_mismatch(self):
        errors = errors_of(RegisterForm, {**REGISTRATION, "confirm_password": "secret2"})
        assert errors == {"confirm_password": "Passwords do not match"}

    def test_short_values(self):
        errors = errors_of(
            RegisterForm,
            {**REGISTRATION, "full_name": "L", "username": "ab", "password": "123", "confirm_password": "123"},
        )
        assert errors["full_name"] == "Must be at least 2 characters"
        assert errors["username"] == "Must be at least 3 characters"
        assert errors["password"] == "Must be at least 6 characters"

    def test_bad_email(self):
        errors = errors_of(RegisterForm, {**REGISTRATION, "email": "not-an-email"})
        assert errors == {"email": "Invalid email address"}

    @pytest.mark.parametrize("phone", ["912345678", "0123", "09123456789012", "0912abc678"])
    def test_bad_phone(self, phone):
        errors = errors_of(RegisterForm, {**REGISTRATION, "phone_number": phone})
        assert errors == {"phone_number": "Invalid phone number (must start with 0 and have 9-11 digits)"}

    def test_blank_phone_is_optional(self):
        form = parse_form(RegisterForm, {**REGISTRATION, "phone_number": "  "}, "en")
        assert form.phone_number is None

    def test_missing_date_of_birth(self):
        errors = errors_of(RegisterForm, {**REGISTRATION, "date_of_birth": ""})
        assert errors == {"date_of_birth": "This field is required"}

    def test_bad_date_of_birth(self):
        errors = errors_of(RegisterForm, {**REGISTRATION, "date_of_birth": "31/01/2000"})
        assert errors == {"date_of_birth": "Invalid date"}


class TestPasswordResetForms:
    def test_forgot_password(self):
        form = parse_form(ForgotPasswordForm, {"email": " lan@example.com "}, "vi")
        assert form.email == "lan@example.com"

    def test_email_domain_is_normalized(self):
        form = parse_form(ForgotPasswordForm, {"email": "Lan@EXAMPLE.com"}, "vi")
        assert form.email == "Lan@example.com"

    @pytest.mark.parametrize("email", ["", "lan@", 42])
    def test_invalid_email_in_vietnamese(self, email):
        errors = errors_of(ForgotPasswordForm, {"email": email}, "vi")
        assert errors == {"email": "Email không hợp lệ"}

    def test_reset_password_mismatch(self):
        errors = errors_of(
            ResetPasswordForm,
            {"token": "t", "email": "lan@example.com", "password": "secret1", "confirm_password": "other1"},
        )
        assert errors == {"confirm_password": "Passwords do not match"}

    def test_reset_password_needs_token(self):
        errors = errors_of(
            ResetPasswordForm,
            {"token": "", "email": "lan@example.com", "password": "secret1", "confirm_password": "secret1"},
        )
        assert "token" in errors


class TestFormValidationError:
    def test_secrets_are_not_echoed(self):
        with pytest.raises(FormValidationError) as exc_info:
            parse_form(RegisterForm, {**REGISTRATION, "email": "bad"}, "vi")
        values = exc_info.value.values
        assert values["username"] == "lan"
        assert "password" not in values
        assert "confirm_password" not in values

    def test_safe_values(self):
        assert safe_values({"a": 1, "token": "t", "new_password": "x"}) == {"a": 1}


# =============================================================================
# Profile form
# =============================================================================


class TestEditProfileForm:
    def test_blank_fields_are_dropped(self):
        form = parse_form(EditProfileForm, {"bio": "  ", "location": "Hà Nội", "website": ""}, "vi")
        assert form.changed_fields() == {"location": "Hà Nội"}

    def test_date_is_sent_as_iso(self):
        form = parse_form(EditProfileForm, {"date_of_birth": "1999-12-01"}, "vi")
        assert form.changed_fields() == {"date_of_birth": "1999-12-01"}

    def test_future_date(self):
        tomorrow = (date.today() + timedelta(days=1)).isoformat()
        errors = errors_of(EditProfileForm, {"date_of_birth": tomorrow})
        assert errors == {"date_of_birth": "Date cannot be in the future"}

    def test_bad_website(self):
        errors = errors_of(EditProfileForm, {"website": "lan dot vn"})
        assert errors == {"website": "Invalid URL"}

    def test_long_bio(self):
        errors = errors_of(EditProfileForm, {"bio": "x" * 501})
        assert errors == {"bio": "Must be at most 500 characters"}


# =============================================================================
# Group forms
# =============================================================================


class TestGroupForm:
    def test_defaults(self):
        form = parse_form(GroupForm, {"name": "Hội mèo"}, "vi")
        assert form.client_kwargs() == {
            "name": "Hội mèo",
            "description": "",
            "privacy": "public",
            "cover_image": None,
            "rules": [],
        }

    def test_rules_are_cleaned(self):
        form = parse_form(GroupForm, {"name": "Hội mèo", "rules": [" Lịch sự ", "", "  "]}, "vi")
        assert form.rules == ["Lịch sự"]

    def test_short_name(self):
        errors = errors_of(GroupForm, {"name": "ab"})
        assert errors == {"name": "Must be at least 3 characters"}

    def test_bad_privacy(self):
        errors = errors_of(GroupForm, {"name": "Hội mèo", "privacy": "secret"})
        assert errors == {"privacy": "Invalid value"}

    def test_update_only_sends_changes(self):
        form = parse_form(GroupUpdateForm, {"description": "Mới", "rules": ["a", " "]}, "vi")
        assert form.changed_fields() == {"description": "Mới", "rules": ["a"]}

    def test_rule_helpers(self):
        rules = add_rule(["a"], " b ")
        assert rules == ["a", "b"]
        assert add_rule(rules, "  ") == ["a", "b"]
        assert remove_rule(rules, 0) == ["b"]
        assert remove_rule(rules, 5) == ["a", "b"]


# =============================================================================
# Post forms
# =============================================================================


class TestPostForm:
    def test_text_post(self):
        form = parse_form(PostForm, {"content": "Xin chào"}, "vi")
        assert form.client_kwargs() == {"content": "Xin chào", "visibility": "public", "media": None}

    def test_media_only_post(self):
        form = parse_form(PostForm, {"media": [{"media_url": "https://img.test/1.jpg"}]}, "vi")
        assert form.client_kwargs()["media"] == [
            {"media_url": "https://img.test/1.jpg", "media_type": "image"}
        ]

    def test_empty_post(self):
        errors = errors_of(PostForm, {"content": "   "})
        assert errors == {"content": "Write something or add a photo"}

    def test_empty_post_without_content_key(self):
        errors = errors_of(PostForm, {})
        assert errors == {"content": "Write something or add a photo"}

    def test_bad_visibility(self):
        errors = errors_of(PostForm, {"content": "x", "visibility": "everyone"})
        assert errors == {"visibility": "Invalid value"}

    def test_comment(self):
        form = parse_form(CommentForm, {"content": " Hay ", "parent_id": 9}, "vi")
        assert form.content == "Hay"
        assert form.parent_id == 9

    def test_blank_comment(self):
        errors = errors_of(CommentForm, {"content": " "})
        assert errors == {"content": "This field is required"}


# =============================================================================
# Length limits
# =============================================================================


LIMITS = [
    (GroupForm, {}, "name", 100),
    (GroupForm, {"name": "Hội mèo"}, "description", 1000),
    (PostForm, {}, "content", 5000),
    (CommentForm, {}, "content", 2000),
]


class TestLengthLimits:
    @pytest.mark.parametrize(("form_cls", "base", "field", "limit"), LIMITS)
    def test_at_limit(self, form_cls, base, field, limit):
        form = parse_form(form_cls, {**base, field: "x" * limit}, "vi")
        assert len(getattr(form, field)) == limit

    @pytest.mark.parametrize(("form_cls", "base", "field", "limit"), LIMITS)
    def test_past_limit(self, form_cls, base, field, limit):
        errors = errors_of(form_cls, {**base, field: "x" * (limit + 1)})
        assert errors == {field: f"Must be at most {limit} characters"}

    def test_past_limit_in_vietnamese(self):
        errors = errors_of(CommentForm, {"content": "x" * 2001}, "vi")
        assert errors == {"content": "Không được vượt quá 2000 ký tự"}
