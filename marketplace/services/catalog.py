"""JobCatalogService: job postings, public listing and search, owner-only changes."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable

from utils.log import get_logger
from utils.parsing import new_id, tokenize_search, utc_now
from utils.schema import (
    CATEGORIES,
    DEFAULT_JOB_TYPE,
    JOB_STATUS_ACTIVE,
    JOB_STATUS_CLOSED,
    JOB_STATUSES,
    JOB_TYPES,
    LOCATIONS,
    MAX_INTEGER,
)

from ..errors import Forbidden, JobNotFound, ValidationError, WrongRole
from ..models import EmployerSummary, Job, JobFilter, JobPage, User
from ..repository import ApplicationRepository, JobRepository, UserRepository
from ..validation import FieldErrors, normalize_keys

log = get_logger(__name__)

DEFAULT_PAGE_SIZE = 10

_JOB_ALIASES = {
    "jobType": "job_type",
    "salaryMin": "salary_min",
    "salaryMax": "salary_max",
    "experienceRequired": "experience_required",
}

# Fields an owner may change; id, employer and posted date are fixed at creation
_UPDATABLE_FIELDS = (
    "title", "company", "description", "location", "category", "job_type",
    "salary_min", "salary_max", "experience_required", "skills", "status",
)

CLOSED = "closed"
DELETED = "deleted"


def _require_employer(user: User) -> None:
    if not user.is_employer:
        raise WrongRole("Access denied. Employers only.")


class JobCatalogService:
    """Service for job postings. Uses JobRepository for storage; never caches."""

    def __init__(
        self,
        jobs: JobRepository,
        users: UserRepository,
        applications: ApplicationRepository,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._jobs = jobs
        self._users = users
        self._applications = applications
        self._default_page_size = default_page_size
        self._clock = clock

    @property
    def repository(self) -> JobRepository:
        return self._jobs

    # --- Public reads ---

    def list_jobs(
        self,
        filters: JobFilter | dict[str, Any] | None = None,
        page: int | None = 1,
        page_size: int | None = None,
    ) -> JobPage:
        """
        One page of active jobs, newest posted first.

        filters: JobFilter or its wire dict (location, category, minSalary, maxSalary,
        experienceRequired, search). page is 1-based.
        """
        if not isinstance(filters, JobFilter):
            filters = JobFilter.from_dict(filters)
        page = 1 if page is None else page
        page_size = self._default_page_size if page_size is None else page_size
        if page < 1 or page_size < 1:
            raise ValidationError.for_field("page", "page and pageSize must be positive integers")

        query = {
            "status": JOB_STATUS_ACTIVE,
            "location": filters.location,
            "category": filters.category,
            "min_salary": filters.min_salary,
            "max_salary": filters.max_salary,
            "max_experience": filters.experience_required,
            "search_tokens": tokenize_search(filters.search),
        }
        offset = min((page - 1) * page_size, MAX_INTEGER)
        items, total = self._jobs.search(query, limit=min(page_size, MAX_INTEGER), offset=offset)
        return JobPage(items=items, total_count=total, page=page, page_size=page_size)

    def get_job(self, job_id: str) -> Job:
        """Job detail in any status, with the posting employer's contact summary."""
        job = self._jobs.get(job_id)
        if job is None:
            raise JobNotFound()
        employer = self._users.get(job.employer_id)
        if employer is not None:
            job = job.copy_with_updates(employer=EmployerSummary.from_user(employer))
        return job

    # --- Owner operations ---

    def create_job(self, employer: User, fields: dict[str, Any]) -> Job:
        _require_employer(employer)
        data = normalize_keys(fields, _JOB_ALIASES)

        errors = FieldErrors()
        job = Job(
            id=new_id(),
            title=errors.require_text(data, "title", "Title"),
            company=errors.require_text(data, "company", "Company"),
            description=errors.require_text(data, "description", "Description"),
            location=errors.require_choice(data, "location", "Location", LOCATIONS),
            category=errors.require_choice(data, "category", "Category", CATEGORIES),
            job_type=errors.require_choice(data, "job_type", "Job type", JOB_TYPES, default=DEFAULT_JOB_TYPE),
            salary_min=errors.require_int(data, "salary_min", "Minimum salary"),
            salary_max=errors.require_int(data, "salary_max", "Maximum salary"),
            experience_required=errors.require_int(data, "experience_required", "Experience required", minimum=0),
            skills=errors.skills(data),
            employer_id=employer.id,
            status=JOB_STATUS_ACTIVE,
            posted_date=self._clock(),
        )
        errors.raise_if_any()

        self._jobs.add(job)
        log.info("Employer %s posted job %s (%s)", employer.id, job.id, job.title)
        return job

    def _owned_job(self, employer: User, job_id: str, action: str) -> Job:
        job = self._jobs.get(job_id)
        if job is None:
            raise JobNotFound()
        if not job.is_owned_by(employer):
            raise Forbidden(f"Not authorized to {action} this job")
        return job

    def update_job(self, employer: User, job_id: str, fields: dict[str, Any]) -> Job:
        """Partial update by the owning employer. Unknown and fixed fields are ignored."""
        _require_employer(employer)
        job = self._owned_job(employer, job_id, "update")
        data = normalize_keys(fields, _JOB_ALIASES)

        errors = FieldErrors()
        updates: dict[str, Any] = {}
        for name in _UPDATABLE_FIELDS:
            if name not in data:
                continue
            if name in ("title", "company", "description"):
                updates[name] = errors.require_text(data, name, name.capitalize())
            elif name == "location":
                updates[name] = errors.require_choice(data, name, "Location", LOCATIONS)
            elif name == "category":
                updates[name] = errors.require_choice(data, name, "Category", CATEGORIES)
            elif name == "job_type":
                updates[name] = errors.require_choice(data, name, "Job type", JOB_TYPES)
            elif name == "status":
                updates[name] = errors.require_choice(data, name, "Status", JOB_STATUSES)
            elif name == "skills":
                updates[name] = errors.skills(data)
            else:
                minimum = 0 if name == "experience_required" else None
                updates[name] = errors.require_int(data, name, name.replace("_", " ").capitalize(), minimum=minimum)
        errors.raise_if_any()

        if updates:
            self._jobs.update(job.id, updates)
            log.info("Employer %s updated job %s: %s", employer.id, job.id, sorted(updates))
        return job.copy_with_updates(**updates)

    def close_or_delete_job(self, employer: User, job_id: str) -> str:
        """
        Take a job off the public listing.

        Jobs that already have applications are closed so the applications keep their
        job; jobs nobody applied to are deleted. Returns CLOSED or DELETED.
        """
        _require_employer(employer)
        job = self._owned_job(employer, job_id, "delete")
        if self._applications.count_for_job(job.id) > 0:
            self._jobs.update(job.id, {"status": JOB_STATUS_CLOSED})
            log.info("Employer %s closed job %s", employer.id, job.id)
            return CLOSED
        self._jobs.delete(job.id)
        log.info("Employer %s deleted job %s", employer.id, job.id)
        return DELETED

    def list_my_jobs(self, employer: User) -> list[Job]:
        """Every job of the employer, any status, newest first."""
        _require_employer(employer)
        return self._jobs.list_by_employer(employer.id)
