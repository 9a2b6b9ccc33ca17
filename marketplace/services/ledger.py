"""ApplicationLedgerService: job applications and their review status."""

from __future__ import annotations

from datetime import datetime
from typing import Callable

from utils.log import get_logger
from utils.parsing import clean_text, new_id, utc_now
from utils.schema import APPLICATION_STATUS_PENDING, APPLICATION_STATUSES

from ..errors import (
    DuplicateApplication,
    Forbidden,
    InvalidStatus,
    JobNotActive,
    JobNotFound,
    NotFound,
    WrongRole,
)
from ..models import ApplicantSummary, Application, User
from ..repository import ApplicationRepository, JobRepository, UserRepository

log = get_logger(__name__)


class ApplicationLedgerService:
    """
    Service for applications. Reads jobs through JobRepository to check they are open
    and owned; the unique (job, applicant) index is the final guard against duplicates.

    Status changes are unrestricted among pending, reviewed, accepted and rejected;
    only creation fixes the initial status to pending.
    """

    def __init__(
        self,
        applications: ApplicationRepository,
        jobs: JobRepository,
        users: UserRepository,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._applications = applications
        self._jobs = jobs
        self._users = users
        self._clock = clock

    @property
    def repository(self) -> ApplicationRepository:
        return self._applications

    def apply(
        self,
        applicant: User,
        job_id: str,
        cover_letter: str | None = None,
        resume: str | None = None,
    ) -> Application:
        """
        Submit an application. Checks, in order: the job exists, it is active, the
        applicant has not applied before, the caller is a job seeker.
        """
        job = self._jobs.get(job_id)
        if job is None:
            raise JobNotFound()
        if not job.is_active:
            raise JobNotActive()
        if self._applications.exists(job.id, applicant.id):
            raise DuplicateApplication()
        if not applicant.is_job_seeker:
            raise WrongRole("Access denied. Job seekers only.")

        now = self._clock()
        application = Application(
            id=new_id(),
            job_id=job.id,
            applicant_id=applicant.id,
            status=APPLICATION_STATUS_PENDING,
            applied_date=now,
            updated_date=now,
            cover_letter=clean_text(cover_letter) or None,
            resume=clean_text(resume) or None,
        )
        self._applications.add(application)
        log.info("User %s applied to job %s", applicant.id, job.id)
        return application.copy_with_updates(
            job=job.summary(),
            applicant=ApplicantSummary.from_user(applicant),
        )

    def my_applications(self, applicant: User) -> list[Application]:
        """The applicant's applications with job summaries, newest first."""
        if not applicant.is_job_seeker:
            raise WrongRole("Access denied. Job seekers only.")
        return self._applications.list_by_applicant(applicant.id)

    def applications_for_job(self, employer: User, job_id: str) -> list[Application]:
        """Applications to one of the employer's jobs with applicant summaries, newest first."""
        job = self._jobs.get(job_id)
        if job is None:
            raise JobNotFound()
        if not job.is_owned_by(employer):
            raise Forbidden("Not authorized to view these applications")
        return self._applications.list_by_job(job.id)

    def update_status(self, employer: User, application_id: str, new_status: str) -> Application:
        """
        Set an application's status. Ownership is checked before the status value,
        so a non-owner is always refused with Forbidden.
        """
        application = self._applications.get(application_id)
        if application is None:
            raise NotFound("Application not found")
        job = self._jobs.get(application.job_id)
        if job is None or not job.is_owned_by(employer):
            raise Forbidden("Not authorized to update this application")
        if new_status not in APPLICATION_STATUSES:
            raise InvalidStatus(f"Invalid status: {new_status!r}")

        updated = application.copy_with_updates(status=new_status, updated_date=self._clock())
        self._applications.update(application.id, {
            "status": updated.status,
            "updated_date": updated.to_row()["updated_date"],
        })
        log.info("Application %s moved %s -> %s", application.id, application.status, new_status)
        return updated

    def get_application(self, requester: User, application_id: str) -> Application:
        """Visible to the applicant and to the employer owning the job."""
        application = self._applications.get(application_id)
        if application is None:
            raise NotFound("Application not found")
        job = self._jobs.get(application.job_id)
        is_applicant = application.applicant_id == requester.id
        is_owner = job is not None and job.is_owned_by(requester)
        if not is_applicant and not is_owner:
            raise Forbidden("Not authorized to view this application")

        applicant = self._users.get(application.applicant_id)
        return application.copy_with_updates(
            job=job.summary() if job is not None else None,
            applicant=ApplicantSummary.from_user(applicant) if applicant is not None else None,
        )
