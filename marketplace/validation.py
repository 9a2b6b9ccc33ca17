"""Field checks for request payloads; all problems are collected and raised together."""

from __future__ import annotations

from typing import Any, Iterable

from utils.parsing import clean_text, normalize_skills, to_int

from .errors import ValidationError


class FieldErrors:
    """
    Collects per-field validation problems.

    Usage:
        errors = FieldErrors()
        title = errors.require_text(data, "title", "Title")
        errors.raise_if_any()
    """

    def __init__(self) -> None:
        self.errors: list[dict[str, str]] = []

    def add(self, field: str, message: str) -> None:
        self.errors.append({"field": field, "message": message})

    def require_text(self, data: dict[str, Any], field: str, label: str) -> str:
        value = clean_text(data.get(field))
        if not value:
            self.add(field, f"{label} is required")
        return value

    def optional_text(self, data: dict[str, Any], field: str) -> str | None:
        return clean_text(data.get(field)) or None

    def require_choice(
        self,
        data: dict[str, Any],
        field: str,
        label: str,
        choices: Iterable[str],
        default: str | None = None,
    ) -> str:
        value = clean_text(data.get(field)) or default
        if not value:
            self.add(field, f"{label} is required")
            return ""
        if value not in choices:
            self.add(field, f"{label} must be one of: {', '.join(choices)}")
        return value

    def require_int(self, data: dict[str, Any], field: str, label: str, minimum: int | None = None) -> int:
        number = to_int(data.get(field))
        if number is None:
            self.add(field, f"{label} must be a number")
            return 0
        if minimum is not None and number < minimum:
            self.add(field, f"{label} must be at least {minimum}")
        return number

    def optional_int(self, data: dict[str, Any], field: str, label: str, minimum: int | None = None) -> int | None:
        if data.get(field) is None or clean_text(data.get(field)) == "":
            return None
        return self.require_int(data, field, label, minimum=minimum)

    def skills(self, data: dict[str, Any], field: str = "skills") -> list[str]:
        value = data.get(field)
        if value is not None and not isinstance(value, (str, list, tuple, set)):
            self.add(field, "Skills must be a list of strings")
            return []
        return normalize_skills(value)

    def raise_if_any(self) -> None:
        if self.errors:
            raise ValidationError(errors=self.errors)


def normalize_keys(data: dict[str, Any] | None, aliases: dict[str, str]) -> dict[str, Any]:
    """Map wire (camelCase) keys to attribute names; keys without an alias pass through."""
    return {aliases.get(key, key): value for key, value in (data or {}).items()}
