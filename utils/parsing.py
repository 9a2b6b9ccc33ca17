"""Text, number, timestamp and identifier helpers shared by the store and services."""

import re
import uuid
from datetime import datetime, timezone
from typing import Any

from .schema import MAX_INTEGER, MIN_INTEGER

_TOKEN_RE = re.compile(r"\w+", re.UNICODE)


def clean_text(value: Any) -> str:
    """Return value as a stripped string; None becomes ''."""
    if value is None:
        return ''
    return str(value).strip()


def normalize_email(email: Any) -> str:
    """Emails are compared and stored stripped and lower-cased."""
    return clean_text(email).lower()


def to_int(value: Any) -> int | None:
    """
    Convert a numeric value (int, float, or numeric string) to int.
    Returns None when the value is missing, not numeric, or outside the
    signed 64-bit range SQLite can store.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if MIN_INTEGER <= value <= MAX_INTEGER else None
    if isinstance(value, float):
        return to_int(int(value)) if value.is_integer() else None
    text = str(value).strip()
    if not text:
        return None
    try:
        return to_int(int(text))
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    return to_int(int(number)) if number.is_integer() else None


def normalize_skills(value: Any) -> list[str]:
    """
    Build a skills list from a list or a comma-separated string.
    Blank entries are dropped and duplicates (case-insensitive) collapsed, keeping first spelling.
    """
    if value is None:
        return []
    if isinstance(value, str):
        items = value.split(',')
    else:
        items = list(value)

    seen = set()
    result = []
    for item in items:
        skill = clean_text(item)
        key = skill.lower()
        if skill and key not in seen:
            seen.add(key)
            result.append(skill)
    return result


def tokenize_search(text: Any) -> list[str]:
    """Split free-text search input into unique lower-case word tokens."""
    seen = set()
    tokens = []
    for token in _TOKEN_RE.findall(clean_text(text).lower()):
        if token not in seen:
            seen.add(token)
            tokens.append(token)
    return tokens


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 with fixed microsecond precision so stored values sort lexically."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec='microseconds')


def parse_timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value)


def new_id() -> str:
    """Opaque identifier for new records."""
    return uuid.uuid4().hex
