"""
Request boundary: dispatches a method name plus a flat JSON-able payload to the services.

    handle_request(services, "jobs.list", {"location": "Whitefield", "page": 2})
    handle_request(services, "applications.apply", {"jobId": "..."}, token=credential)

Responses are {"ok": True, "result": ...} or {"ok": False, "error": {...}}.
"""

from __future__ import annotations

from typing import Any, Callable

from utils.log import get_logger
from utils.parsing import to_int
from utils.schema import ROLE_EMPLOYER, ROLE_JOB_SEEKER

from .errors import MarketplaceError, ValidationError
from .factory import Services
from .models import User

log = get_logger(__name__)

PUBLIC = "public"
ANY_USER = "any"

# method name -> (handler, access); access is PUBLIC, ANY_USER or a role
_METHODS: dict[str, tuple[Callable[..., Any], str]] = {}


def method(name: str, access: str = ANY_USER) -> Callable:
    def decorator(fn: Callable) -> Callable:
        _METHODS[name] = (fn, access)
        return fn

    return decorator


def available_methods() -> list[str]:
    return sorted(_METHODS)


def _required(payload: dict[str, Any], *keys: str) -> Any:
    """First non-empty value among keys, else ValidationError naming the first key."""
    for key in keys:
        value = payload.get(key)
        if value not in (None, ""):
            return value
    raise ValidationError.for_field(keys[0], f"{keys[0]} is required")


def _page_number(payload: dict[str, Any], key: str, *aliases: str) -> int | None:
    for name in (key,) + aliases:
        raw = payload.get(name)
        if raw in (None, ""):
            continue
        number = to_int(raw)
        if number is None:
            raise ValidationError.for_field(name, f"{name} must be a number")
        return number
    return None


def handle_request(
    services: Services,
    method_name: str,
    payload: dict[str, Any] | None = None,
    token: str | None = None,
) -> dict[str, Any]:
    """Run one request. Domain failures become error responses; anything else propagates."""
    payload = dict(payload or {})
    try:
        if method_name not in _METHODS:
            raise ValidationError.for_field("method", f"Unknown method: {method_name}")
        handler, access = _METHODS[method_name]
        if access == PUBLIC:
            result = handler(services, payload)
        else:
            required_role = None if access == ANY_USER else access
            user = services.identity.authorize(token, required_role=required_role)
            result = handler(services, payload, user)
    except MarketplaceError as exc:
        log.debug("%s failed: %s: %s", method_name, type(exc).__name__, exc)
        return {"ok": False, "error": exc.to_dict()}
    return {"ok": True, "result": result}


# =========================================================================
# Identity
# =========================================================================


@method("register", PUBLIC)
def _register(services: Services, payload: dict[str, Any]) -> dict[str, Any]:
    fields = {k: v for k, v in payload.items() if k not in ("name", "email", "password", "role")}
    user = services.identity.register(
        payload.get("name"), payload.get("email"), payload.get("password"), payload.get("role"), **fields
    )
    token = services.identity.issue_credential(user)
    return {"token": token, "user": user.to_dict()}


@method("login", PUBLIC)
def _login(services: Services, payload: dict[str, Any]) -> dict[str, Any]:
    token = services.identity.authenticate(payload.get("email") or "", payload.get("password") or "")
    user = services.identity.authorize(token)
    return {"token": token, "user": user.to_dict()}


@method("me")
@method("profile.get")
def _profile(services: Services, payload: dict[str, Any], user: User) -> dict[str, Any]:
    return user.to_dict()


@method("profile.update")
def _update_profile(services: Services, payload: dict[str, Any], user: User) -> dict[str, Any]:
    return services.identity.update_profile(user, payload).to_dict()


@method("password.change")
def _change_password(services: Services, payload: dict[str, Any], user: User) -> dict[str, Any]:
    services.identity.change_password(
        user.id, payload.get("currentPassword") or "", payload.get("newPassword") or ""
    )
    return {"message": "Password updated successfully"}


# =========================================================================
# Jobs
# =========================================================================


@method("jobs.list", PUBLIC)
def _list_jobs(services: Services, payload: dict[str, Any]) -> dict[str, Any]:
    page = _page_number(payload, "page")
    page_size = _page_number(payload, "pageSize", "limit")
    return services.catalog.list_jobs(payload, page=page, page_size=page_size).to_dict()


@method("jobs.get", PUBLIC)
def _get_job(services: Services, payload: dict[str, Any]) -> dict[str, Any]:
    return services.catalog.get_job(_required(payload, "id", "jobId")).to_dict()


@method("jobs.create", ROLE_EMPLOYER)
def _create_job(services: Services, payload: dict[str, Any], user: User) -> dict[str, Any]:
    return services.catalog.create_job(user, payload).to_dict()


@method("jobs.update", ROLE_EMPLOYER)
def _update_job(services: Services, payload: dict[str, Any], user: User) -> dict[str, Any]:
    job_id = _required(payload, "id", "jobId")
    fields = {k: v for k, v in payload.items() if k not in ("id", "jobId")}
    return services.catalog.update_job(user, job_id, fields).to_dict()


@method("jobs.close", ROLE_EMPLOYER)
def _close_job(services: Services, payload: dict[str, Any], user: User) -> dict[str, Any]:
    outcome = services.catalog.close_or_delete_job(user, _required(payload, "id", "jobId"))
    return {"id": payload.get("id") or payload.get("jobId"), "outcome": outcome}


@method("jobs.mine", ROLE_EMPLOYER)
def _my_jobs(services: Services, payload: dict[str, Any], user: User) -> list[dict[str, Any]]:
    return [job.to_dict() for job in services.catalog.list_my_jobs(user)]


# =========================================================================
# Applications
# =========================================================================


@method("applications.apply")
def _apply(services: Services, payload: dict[str, Any], user: User) -> dict[str, Any]:
    application = services.ledger.apply(
        user,
        _required(payload, "jobId"),
        cover_letter=payload.get("coverLetter"),
        resume=payload.get("resume"),
    )
    return application.to_dict()


@method("applications.mine", ROLE_JOB_SEEKER)
def _my_applications(services: Services, payload: dict[str, Any], user: User) -> list[dict[str, Any]]:
    return [a.to_dict() for a in services.ledger.my_applications(user)]


@method("applications.for_job", ROLE_EMPLOYER)
def _applications_for_job(services: Services, payload: dict[str, Any], user: User) -> list[dict[str, Any]]:
    return [a.to_dict() for a in services.ledger.applications_for_job(user, _required(payload, "jobId"))]


@method("applications.update_status", ROLE_EMPLOYER)
def _update_status(services: Services, payload: dict[str, Any], user: User) -> dict[str, Any]:
    application_id = _required(payload, "id", "applicationId")
    return services.ledger.update_status(user, application_id, payload.get("status")).to_dict()


@method("applications.get")
def _get_application(services: Services, payload: dict[str, Any], user: User) -> dict[str, Any]:
    application_id = _required(payload, "id", "applicationId")
    return services.ledger.get_application(user, application_id).to_dict()
