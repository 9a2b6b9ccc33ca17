"""Factory for the store, repositories and services (DI-friendly)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable

from local_storage import MarketplaceDatabase
from utils.parsing import utc_now

from .repository import ApplicationRepository, JobRepository, UserRepository
from .services import ApplicationLedgerService, IdentityService, JobCatalogService


@dataclass
class Services:
    """The three cooperating components sharing one store."""

    identity: IdentityService
    catalog: JobCatalogService
    ledger: ApplicationLedgerService
    store: Any


def create_store(db_path: str) -> MarketplaceDatabase:
    """Open (creating if needed) the SQLite store at db_path."""
    return MarketplaceDatabase(db_path)


def create_services(
    store: Any,
    jwt_secret: str,
    settings: dict[str, Any] | None = None,
    clock: Callable[[], datetime] = utc_now,
    hash_iterations: int | None = None,
) -> Services:
    """
    Wire repositories and services over store.

    settings: optional config values (token_ttl_hours, min_password_length, page_size),
    as returned by config.get_settings().
    """
    settings = settings or {}
    users = UserRepository(store)
    jobs = JobRepository(store)
    applications = ApplicationRepository(store)

    identity_kwargs: dict[str, Any] = {"clock": clock, "hash_iterations": hash_iterations}
    if settings.get("token_ttl_hours"):
        identity_kwargs["token_ttl"] = timedelta(hours=float(settings["token_ttl_hours"]))
    if settings.get("min_password_length"):
        identity_kwargs["min_password_length"] = int(settings["min_password_length"])

    catalog_kwargs: dict[str, Any] = {"clock": clock}
    if settings.get("page_size"):
        catalog_kwargs["default_page_size"] = int(settings["page_size"])

    return Services(
        identity=IdentityService(users, jwt_secret, **identity_kwargs),
        catalog=JobCatalogService(jobs, users, applications, **catalog_kwargs),
        ledger=ApplicationLedgerService(applications, jobs, users, clock=clock),
        store=store,
    )


def create_services_from_settings(settings: dict[str, Any]) -> Services:
    """Open the configured database and build services. Requires settings['jwt_secret']."""
    if not settings.get("jwt_secret"):
        raise ValueError("JWT_SECRET is not set. Add it to your environment or .env file.")
    store = create_store(settings["database_path"])
    return create_services(
        store,
        settings["jwt_secret"],
        settings=settings,
        hash_iterations=settings.get("password_hash_iterations"),
    )
