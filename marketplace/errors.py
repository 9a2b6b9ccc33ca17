"""Error taxonomy raised by the services and repositories."""

from __future__ import annotations


class MarketplaceError(Exception):
    """Base class for every failure the core reports to its caller."""

    default_message = "Request failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)

    def to_dict(self) -> dict:
        return {"type": type(self).__name__, "message": self.message}


class ValidationError(MarketplaceError):
    """Malformed or missing input. Carries one entry per offending field."""

    default_message = "Validation failed"

    def __init__(self, message: str | None = None, errors: list[dict[str, str]] | None = None) -> None:
        self.errors = list(errors or [])
        if message is None and len(self.errors) == 1:
            message = self.errors[0]["message"]
        super().__init__(message)

    @classmethod
    def for_field(cls, field: str, message: str) -> ValidationError:
        return cls(errors=[{"field": field, "message": message}])

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["errors"] = list(self.errors)
        return data


class WeakPassword(ValidationError):
    default_message = "Password is too short"


class NotFound(MarketplaceError):
    default_message = "Not found"


class JobNotFound(NotFound):
    default_message = "Job not found"


class Unauthenticated(MarketplaceError):
    default_message = "Not authorized"


class InvalidCredentials(Unauthenticated):
    default_message = "Invalid email or password"


class Forbidden(MarketplaceError):
    default_message = "Access denied"


class WrongRole(Forbidden):
    default_message = "Access denied for this role"


class WrongCurrentPassword(MarketplaceError):
    default_message = "Current password is incorrect"


class DuplicateEmail(MarketplaceError):
    default_message = "A user with this email already exists"


class DuplicateApplication(MarketplaceError):
    default_message = "You have already applied for this job"


class JobNotActive(MarketplaceError):
    default_message = "This job is no longer active"


class InvalidStatus(MarketplaceError):
    default_message = "Invalid status"


class StoreError(MarketplaceError):
    """Persistent store failure. Safe to retry only for idempotent operations."""

    default_message = "Storage failure"
