import math
import re

WORDS_PER_MINUTE = 200

_US_PHONE_DIGITS_RE = re.compile(r"^1?\d{10}$")


def slugify(text: str) -> str:
    """URL-safe slug: lowercase ascii letters, digits and single hyphens."""
    slug = str(text).lower().strip()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def reading_time(text: str, words_per_minute: int = WORDS_PER_MINUTE) -> int:
    words = len(text.split())
    return max(1, math.ceil(words / words_per_minute))


def digits_only(value: str) -> str:
    return re.sub(r"\D", "", value or "")


def is_valid_phone(phone: str | None) -> bool:
    # US numbers: ten digits with an optional leading country code 1
    return bool(phone) and bool(_US_PHONE_DIGITS_RE.match(digits_only(phone)))


def format_phone(phone: str | None) -> str | None:
    if not phone:
        return phone
    cleaned = digits_only(phone)
    if len(cleaned) == 10:
        return f"({cleaned[:3]}) {cleaned[3:6]}-{cleaned[6:]}"
    if len(cleaned) == 11 and cleaned[0] == "1":
        return f"+1 ({cleaned[1:4]}) {cleaned[4:7]}-{cleaned[7:]}"
    return phone


def display_name(value: str) -> str:
    """'market-trends' -> 'Market Trends'"""
    return " ".join(word.capitalize() for word in value.split("-"))


def split_list(value: str | list | None) -> list[str]:
    """Comma separated form input to a list of trimmed, non-empty strings."""
    if value is None:
        return []
    items = value if isinstance(value, list) else value.split(",")
    return [item.strip() for item in items if item and item.strip()]
