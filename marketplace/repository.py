"""Repositories: DAOs over MarketplaceDatabase returning domain models."""

from __future__ import annotations

import functools
import sqlite3
from typing import Any, Callable

from utils.log import get_logger

from .errors import DuplicateApplication, DuplicateEmail, StoreError
from .models import Application, Job, User

log = get_logger(__name__)


def _is_unique_violation(exc: sqlite3.IntegrityError) -> bool:
    return "UNIQUE constraint failed" in str(exc)


def translate_store_errors(fn: Callable) -> Callable:
    """Re-raise any sqlite3 error escaping the wrapped method as StoreError."""

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return fn(*args, **kwargs)
        except sqlite3.Error as exc:
            log.error("%s failed: %s", fn.__qualname__, exc)
            raise StoreError(f"Storage failure: {exc}") from exc

    return wrapper


class _Repository:
    def __init__(self, store: Any) -> None:
        """
        Args:
            store: Object exposing the record methods of local_storage.MarketplaceDatabase.
        """
        self._store = store

    @property
    def store(self) -> Any:
        """Underlying store."""
        return self._store


class UserRepository(_Repository):
    """User persistence. Emails are unique across all users."""

    @translate_store_errors
    def add(self, user: User) -> User:
        try:
            self._store.add_user(user.to_row())
        except sqlite3.IntegrityError as exc:
            if _is_unique_violation(exc):
                raise DuplicateEmail() from exc
            raise
        return user

    @translate_store_errors
    def get(self, user_id: str) -> User | None:
        row = self._store.get_user(user_id)
        return User.from_row(row) if row else None

    @translate_store_errors
    def get_by_email(self, email: str) -> User | None:
        row = self._store.get_user_by_email(email)
        return User.from_row(row) if row else None

    @translate_store_errors
    def update(self, user_id: str, updates: dict[str, Any]) -> int:
        """Update columns of one user. Returns number of rows updated."""
        return self._store.update_user(user_id, updates)


class JobRepository(_Repository):
    """Job posting persistence and listing queries."""

    @translate_store_errors
    def add(self, job: Job) -> Job:
        self._store.add_job(job.to_row())
        return job

    @translate_store_errors
    def get(self, job_id: str) -> Job | None:
        row = self._store.get_job(job_id)
        return Job.from_row(row) if row else None

    @translate_store_errors
    def update(self, job_id: str, updates: dict[str, Any]) -> int:
        return self._store.update_job(job_id, updates)

    @translate_store_errors
    def delete(self, job_id: str) -> int:
        return self._store.delete_job(job_id)

    @translate_store_errors
    def search(self, filters: dict[str, Any], limit: int, offset: int) -> tuple[list[Job], int]:
        """Return (one page of matching jobs, total number of matches)."""
        rows = self._store.search_jobs(filters, limit=limit, offset=offset)
        total = self._store.count_jobs(filters)
        return [Job.from_row(r) for r in rows], total

    @translate_store_errors
    def list_by_employer(self, employer_id: str) -> list[Job]:
        return [Job.from_row(r) for r in self._store.get_jobs_by_employer(employer_id)]


class ApplicationRepository(_Repository):
    """Application persistence. At most one application per (job, applicant)."""

    @translate_store_errors
    def add(self, application: Application) -> Application:
        try:
            self._store.add_application(application.to_row())
        except sqlite3.IntegrityError as exc:
            if _is_unique_violation(exc):
                raise DuplicateApplication() from exc
            raise
        return application

    @translate_store_errors
    def get(self, application_id: str) -> Application | None:
        row = self._store.get_application(application_id)
        return Application.from_row(row) if row else None

    @translate_store_errors
    def update(self, application_id: str, updates: dict[str, Any]) -> int:
        return self._store.update_application(application_id, updates)

    @translate_store_errors
    def list_by_applicant(self, applicant_id: str) -> list[Application]:
        """Applications with job summaries, newest first."""
        return [Application.from_row(r) for r in self._store.get_applications_by_applicant(applicant_id)]

    @translate_store_errors
    def list_by_job(self, job_id: str) -> list[Application]:
        """Applications with applicant summaries, newest first."""
        return [Application.from_row(r) for r in self._store.get_applications_by_job(job_id)]

    @translate_store_errors
    def count_for_job(self, job_id: str) -> int:
        return self._store.count_applications_for_job(job_id)

    @translate_store_errors
    def exists(self, job_id: str, applicant_id: str) -> bool:
        return self._store.find_application(job_id, applicant_id) is not None
