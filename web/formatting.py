"""Date and time formatting for display."""

from datetime import date, datetime, timezone

from web.i18n import translate

_DATE_FORMATS = {
    "vi": "%d/%m/%Y",
    "en": "%m/%d/%Y",
}


def parse_datetime(value: str | date | datetime | None) -> datetime | None:
    """Parse an ISO timestamp or date. Naive values are taken as UTC.

    Returns:
        The aware datetime, or None if the value cannot be parsed.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_date(value: str | date | datetime | None, locale: str = "vi") -> str:
    """Format a date as dd/mm/yyyy (vi) or mm/dd/yyyy (en).

    Strings that cannot be parsed are returned unchanged.
    """
    if value is None:
        return ""
    parsed = parse_datetime(value)
    if parsed is None:
        return str(value)
    return parsed.strftime(_DATE_FORMATS.get(locale, _DATE_FORMATS["vi"]))


def format_timestamp(value: str | datetime | None, locale: str = "vi") -> str:
    """Format a timestamp as the localized date followed by HH:MM."""
    if value is None:
        return ""
    parsed = parse_datetime(value)
    if parsed is None:
        return str(value)
    return f"{format_date(parsed, locale)} {parsed.strftime('%H:%M')}"


def time_ago(
    value: str | datetime | None,
    now: datetime | None = None,
    locale: str = "vi",
) -> str:
    """Relative time ("5 phút trước"), falling back to the date after a week."""
    parsed = parse_datetime(value)
    if parsed is None:
        return "" if value is None else str(value)
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    seconds = int((now - parsed).total_seconds())
    if seconds < 60:
        return translate("time.justNow", locale)
    if seconds < 3600:
        return translate("time.minutesAgo", locale, count=seconds // 60)
    if seconds < 86400:
        return translate("time.hoursAgo", locale, count=seconds // 3600)
    if seconds < 7 * 86400:
        return translate("time.daysAgo", locale, count=seconds // 86400)
    return format_date(parsed, locale)
