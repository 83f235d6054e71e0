"""Form models for the auth, profile, group and post screens.

Forms are pydantic models. Validation errors carry message catalog keys
rather than text, so they can be rendered in the visitor's language with
``form_errors``. ``parse_form`` validates a submitted payload and raises
``FormValidationError`` with the localized messages.
"""

import re
from datetime import date
from typing import Annotated, Any, Literal, TypeVar

from pydantic import (
    BaseModel,
    EmailStr,
    Field,
    HttpUrl,
    StringConstraints,
    TypeAdapter,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    WrapValidator,
    field_validator,
    model_validator,
)
from pydantic_core import PydanticCustomError

from web.i18n import translate

FormT = TypeVar("FormT", bound=BaseModel)

PHONE_PATTERN = re.compile(r"^0[0-9]{8,10}$")
DEFAULT_COUNTRY_CODE = "+84"

# Fields never echoed back to the browser
SECRET_FIELDS = frozenset({"password", "confirm_password", "new_password", "token"})

# Built-in pydantic error types and the catalog keys they render as
_BUILTIN_ERROR_KEYS = {
    "missing": "required",
    "string_type": "invalid",
    "string_too_short": "minLength",
    "string_too_long": "maxLength",
    "literal_error": "choice",
    "date_parsing": "date",
    "date_from_datetime_parsing": "date",
    "date_from_datetime_inexact": "date",
    "date_type": "date",
    "int_parsing": "invalid",
    "list_type": "invalid",
}

_URL = TypeAdapter(HttpUrl)

Trimmed = Annotated[str, StringConstraints(strip_whitespace=True)]
NonBlank = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class FormValidationError(Exception):
    """A submitted form did not validate.

    Attributes:
        errors: Localized message per field name.
        values: The submitted values, minus secrets, to refill the form.
    """

    def __init__(self, errors: dict[str, str], values: dict[str, Any] | None = None) -> None:
        self.errors = errors
        self.values = values or {}
        super().__init__(f"Invalid form fields: {sorted(errors)}")


def _error(key: str, **ctx: Any) -> PydanticCustomError:
    return PydanticCustomError(key, key, ctx or None)


def _email_error(value: Any, handler: ValidatorFunctionWrapHandler) -> str:
    try:
        return handler(value)
    except ValidationError:
        raise _error("email") from None


# EmailStr, reporting failures under the "email" catalog key
Email = Annotated[EmailStr, WrapValidator(_email_error)]


def _check_url(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    try:
        _URL.validate_python(value)
    except ValidationError:
        raise _error("url") from None
    return value


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _error_message(error: dict[str, Any], locale: str) -> str:
    error_type = error["type"]
    ctx = error.get("ctx") or {}
    if error_type == "string_too_short":
        if ctx.get("min_length") == 1:
            return translate("validation.required", locale)
        return translate("validation.minLength", locale, min=ctx.get("min_length"))
    if error_type == "string_too_long":
        return translate("validation.maxLength", locale, max=ctx.get("max_length"))
    key = _BUILTIN_ERROR_KEYS.get(error_type, error_type)
    message = translate(f"validation.{key}", locale, **ctx)
    if message == f"validation.{key}":
        return translate("validation.invalid", locale)
    return message


def form_errors(exc: ValidationError, locale: str) -> dict[str, str]:
    """Render a form's validation errors as ``{field: message}``.

    Only the first error of each field is kept. Errors that do not belong
    to a field are reported under ``"form"``.
    """
    errors: dict[str, str] = {}
    for error in exc.errors():
        loc = error.get("loc") or ()
        field = str(loc[0]) if loc else "form"
        if field not in errors:
            errors[field] = _error_message(error, locale)
    return errors


def safe_values(data: dict[str, Any]) -> dict[str, Any]:
    """Drop secret fields from submitted values."""
    return {k: v for k, v in data.items() if k not in SECRET_FIELDS}


def parse_form(form_cls: type[FormT], data: dict[str, Any], locale: str) -> FormT:
    """Validate submitted data against a form model.

    Raises:
        FormValidationError: With localized messages and the safe values.
    """
    try:
        return form_cls.model_validate(data)
    except ValidationError as e:
        raise FormValidationError(form_errors(e, locale), safe_values(data)) from e


def add_rule(rules: list[str], new_rule: str) -> list[str]:
    """Return ``rules`` with ``new_rule`` appended. Blank rules are ignored."""
    new_rule = new_rule.strip()
    if not new_rule:
        return list(rules)
    return [*rules, new_rule]


def remove_rule(rules: list[str], index: int) -> list[str]:
    """Return ``rules`` without the rule at ``index``. Bad indexes are ignored."""
    if not 0 <= index < len(rules):
        return list(rules)
    return [rule for i, rule in enumerate(rules) if i != index]


# Auth forms


class LoginForm(BaseModel):
    """Login with any account identifier and a password."""

    username_or_email_or_phone: NonBlank
    password: str = Field(min_length=1)


class RegisterForm(BaseModel):
    """Account registration.

    Args:
        full_name: Display name, at least 2 characters.
        username: Handle, at least 3 characters.
        email: Email address.
        password: At least 6 characters.
        confirm_password: Must equal password.
        date_of_birth: ISO date.
        country_code: Phone country code.
        phone_number: Optional local number, 0 followed by 8-10 digits.
    """

    full_name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=2)]
    username: Annotated[str, StringConstraints(strip_whitespace=True, min_length=3)]
    email: Email
    password: str = Field(min_length=6)
    confirm_password: str = Field(min_length=6)
    date_of_birth: date
    country_code: Trimmed = DEFAULT_COUNTRY_CODE
    phone_number: str | None = None

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, v: str, info: ValidationInfo) -> str:
        password = info.data.get("password")
        if password is not None and v != password:
            raise _error("passwordMismatch")
        return v

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def date_required(cls, v: Any) -> Any:
        if v is None or (isinstance(v, str) and not v.strip()):
            raise _error("required")
        return v

    @field_validator("phone_number", mode="before")
    @classmethod
    def validate_phone(cls, v: Any) -> Any:
        v = _blank_to_none(v)
        if v is None:
            return None
        v = str(v).strip()
        if not PHONE_PATTERN.match(v):
            raise _error("phone")
        return v

    @field_validator("country_code")
    @classmethod
    def default_country_code(cls, v: str) -> str:
        return v or DEFAULT_COUNTRY_CODE

    def client_kwargs(self) -> dict[str, Any]:
        """Arguments for ``AuthClient.register``."""
        return {
            "username": self.username,
            "email": self.email,
            "password": self.password,
            "full_name": self.full_name,
            "date_of_birth": self.date_of_birth.isoformat(),
            "country_code": self.country_code,
            "phone_number": self.phone_number,
        }


class ForgotPasswordForm(BaseModel):
    email: Email


class ResetPasswordForm(BaseModel):
    """New password, submitted from the link in the reset email."""

    token: NonBlank
    email: Email
    password: str = Field(min_length=6)
    confirm_password: str = Field(min_length=6)

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, v: str, info: ValidationInfo) -> str:
        password = info.data.get("password")
        if password is not None and v != password:
            raise _error("passwordMismatch")
        return v


# Profile


class EditProfileForm(BaseModel):
    """Profile edits. Every field is optional; blank strings are not sent."""

    full_name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=2)] | None = None
    bio: Annotated[str, StringConstraints(strip_whitespace=True, max_length=500)] | None = None
    location: Annotated[str, StringConstraints(strip_whitespace=True, max_length=100)] | None = None
    website: str | None = None
    date_of_birth: date | None = None
    work: Annotated[str, StringConstraints(strip_whitespace=True, max_length=100)] | None = None
    education: Annotated[str, StringConstraints(strip_whitespace=True, max_length=100)] | None = None
    relationship: Annotated[str, StringConstraints(strip_whitespace=True, max_length=100)] | None = None

    @model_validator(mode="before")
    @classmethod
    def drop_blank_fields(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: _blank_to_none(v) for k, v in data.items()}
        return data

    @field_validator("website")
    @classmethod
    def validate_website(cls, v: str | None) -> str | None:
        return _check_url(v)

    @field_validator("date_of_birth")
    @classmethod
    def not_in_future(cls, v: date | None) -> date | None:
        if v is not None and v > date.today():
            raise _error("dateInFuture")
        return v

    def changed_fields(self) -> dict[str, Any]:
        """Fields to send to ``UsersClient.update_me``."""
        return self.model_dump(mode="json", exclude_none=True)


# Groups

GroupName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=100)]
GroupDescription = Annotated[str, StringConstraints(strip_whitespace=True, max_length=1000)]


def _clean_rules(rules: list[str] | None) -> list[str] | None:
    if rules is None:
        return None
    return [rule.strip() for rule in rules if rule.strip()]


class GroupForm(BaseModel):
    """Group creation.

    Args:
        name: 3-100 characters.
        description: Up to 1000 characters.
        privacy: "public" or "private".
        cover_image: Optional image URL.
        rules: Group rules; blank entries are dropped.
    """

    name: GroupName
    description: GroupDescription = ""
    privacy: Literal["public", "private"] = "public"
    cover_image: str | None = None
    rules: list[str] = Field(default_factory=list)

    @field_validator("cover_image")
    @classmethod
    def validate_cover_image(cls, v: str | None) -> str | None:
        return _check_url(v)

    @field_validator("rules")
    @classmethod
    def clean_rules(cls, v: list[str]) -> list[str]:
        return _clean_rules(v)

    def client_kwargs(self) -> dict[str, Any]:
        """Arguments for ``GroupsClient.create``."""
        return self.model_dump()


class GroupUpdateForm(BaseModel):
    """Group settings edit; only the submitted fields change."""

    name: GroupName | None = None
    description: GroupDescription | None = None
    privacy: Literal["public", "private"] | None = None
    cover_image: str | None = None
    rules: list[str] | None = None

    @field_validator("cover_image")
    @classmethod
    def validate_cover_image(cls, v: str | None) -> str | None:
        return _check_url(v)

    @field_validator("rules")
    @classmethod
    def clean_rules(cls, v: list[str] | None) -> list[str] | None:
        return _clean_rules(v)

    def changed_fields(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


# Posts


class MediaItem(BaseModel):
    media_url: str
    media_type: Literal["image", "video"] = "image"

    @field_validator("media_url")
    @classmethod
    def validate_media_url(cls, v: str) -> str:
        url = _check_url(v)
        if url is None:
            raise _error("required")
        return url


class PostForm(BaseModel):
    """A new post: text, media, or both."""

    media: list[MediaItem] = Field(default_factory=list)
    content: Annotated[str, StringConstraints(max_length=5000)] = Field("", validate_default=True)
    visibility: Literal["public", "friends", "private"] = "public"

    @field_validator("content")
    @classmethod
    def content_or_media(cls, v: str, info: ValidationInfo) -> str:
        if not v.strip() and not info.data.get("media"):
            raise _error("contentRequired")
        return v

    def client_kwargs(self) -> dict[str, Any]:
        """Arguments for ``PostsClient.create``."""
        return {
            "content": self.content,
            "visibility": self.visibility,
            "media": [item.model_dump() for item in self.media] or None,
        }


class CommentForm(BaseModel):
    content: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=2000)]
    parent_id: int | None = None
