"""Domain models: users (employer / job seeker variants), jobs, applications and read models."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, ClassVar

from utils.parsing import clean_text, format_timestamp, normalize_skills, parse_timestamp, to_int
from utils.schema import (
    JOB_STATUS_ACTIVE,
    ROLE_EMPLOYER,
    ROLE_JOB_SEEKER,
)

from .errors import ValidationError


def _timestamp(value: datetime | None) -> str | None:
    return format_timestamp(value) if value is not None else None


# =========================================================================
# Users
# =========================================================================


@dataclass(frozen=True)
class User:
    """
    Fields shared by every account. Never instantiated directly: rows are
    loaded as Employer or JobSeeker depending on their role.
    """

    role: ClassVar[str] = ""

    id: str
    name: str
    email: str
    password_hash: str = field(default="", repr=False)
    location: str | None = None
    phone: str | None = None
    created_date: datetime | None = None

    # Fields a user may change through a profile update
    PROFILE_FIELDS: ClassVar[tuple[str, ...]] = ("name", "phone", "location")

    @property
    def is_employer(self) -> bool:
        return self.role == ROLE_EMPLOYER

    @property
    def is_job_seeker(self) -> bool:
        return self.role == ROLE_JOB_SEEKER

    def _variant_row(self) -> dict[str, Any]:
        return {}

    def _variant_dict(self) -> dict[str, Any]:
        return {}

    def to_row(self) -> dict[str, Any]:
        """Storage row with every user column; fields of the other variant are None."""
        row = {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "password_hash": self.password_hash,
            "role": self.role,
            "company": None,
            "location": self.location,
            "phone": self.phone,
            "resume": None,
            "skills": None,
            "experience": None,
            "created_date": _timestamp(self.created_date),
        }
        row.update(self._variant_row())
        return row

    def to_dict(self) -> dict[str, Any]:
        """Wire form. The password hash is never included."""
        data = {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "location": self.location,
            "phone": self.phone,
            "createdDate": _timestamp(self.created_date),
        }
        data.update(self._variant_dict())
        return data

    @staticmethod
    def from_row(row: dict[str, Any]) -> User:
        """Build the variant matching the row's role."""
        role = row.get("role")
        common = {
            "id": row["id"],
            "name": row.get("name") or "",
            "email": row.get("email") or "",
            "password_hash": row.get("password_hash") or "",
            "location": row.get("location"),
            "phone": row.get("phone"),
            "created_date": parse_timestamp(row.get("created_date")),
        }
        if role == ROLE_EMPLOYER:
            return Employer(company=row.get("company"), **common)
        if role == ROLE_JOB_SEEKER:
            return JobSeeker(
                resume=row.get("resume"),
                skills=normalize_skills(row.get("skills")),
                experience=row.get("experience"),
                **common,
            )
        raise ValueError(f"Unknown user role: {role!r}")


@dataclass(frozen=True)
class Employer(User):
    role: ClassVar[str] = ROLE_EMPLOYER
    PROFILE_FIELDS: ClassVar[tuple[str, ...]] = User.PROFILE_FIELDS + ("company",)

    company: str | None = None

    def _variant_row(self) -> dict[str, Any]:
        return {"company": self.company}

    def _variant_dict(self) -> dict[str, Any]:
        return {"company": self.company}


@dataclass(frozen=True)
class JobSeeker(User):
    role: ClassVar[str] = ROLE_JOB_SEEKER
    PROFILE_FIELDS: ClassVar[tuple[str, ...]] = User.PROFILE_FIELDS + ("resume", "skills", "experience")

    resume: str | None = None
    skills: list[str] = field(default_factory=list)
    experience: int | None = None

    def _variant_row(self) -> dict[str, Any]:
        return {"resume": self.resume, "skills": list(self.skills), "experience": self.experience}

    def _variant_dict(self) -> dict[str, Any]:
        return {"resume": self.resume, "skills": list(self.skills), "experience": self.experience}


@dataclass(frozen=True)
class EmployerSummary:
    id: str
    name: str
    email: str
    company: str | None = None
    phone: str | None = None

    @classmethod
    def from_user(cls, user: User) -> EmployerSummary:
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            company=getattr(user, "company", None),
            phone=user.phone,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "email": self.email, "company": self.company, "phone": self.phone}


@dataclass(frozen=True)
class ApplicantSummary:
    id: str
    name: str
    email: str
    phone: str | None = None
    skills: list[str] = field(default_factory=list)
    experience: int | None = None

    @classmethod
    def from_user(cls, user: User) -> ApplicantSummary:
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            phone=user.phone,
            skills=list(getattr(user, "skills", [])),
            experience=getattr(user, "experience", None),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "skills": list(self.skills),
            "experience": self.experience,
        }


# =========================================================================
# Jobs
# =========================================================================


@dataclass(frozen=True)
class JobSummary:
    id: str
    title: str
    company: str
    location: str
    salary_min: int
    salary_max: int
    status: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "company": self.company,
            "location": self.location,
            "salaryMin": self.salary_min,
            "salaryMax": self.salary_max,
            "status": self.status,
        }


@dataclass(frozen=True)
class Job:
    """A job posting owned by the employer that created it."""

    id: str
    title: str
    company: str
    description: str
    location: str
    category: str
    job_type: str
    salary_min: int
    salary_max: int
    experience_required: int
    employer_id: str
    status: str = JOB_STATUS_ACTIVE
    skills: list[str] = field(default_factory=list)
    posted_date: datetime | None = None
    employer: EmployerSummary | None = field(default=None, compare=False)

    @property
    def is_active(self) -> bool:
        return self.status == JOB_STATUS_ACTIVE

    def is_owned_by(self, user: User) -> bool:
        return user.is_employer and self.employer_id == user.id

    def summary(self) -> JobSummary:
        return JobSummary(
            id=self.id,
            title=self.title,
            company=self.company,
            location=self.location,
            salary_min=self.salary_min,
            salary_max=self.salary_max,
            status=self.status,
        )

    def copy_with_updates(self, **updates: Any) -> Job:
        return replace(self, **updates)

    def to_row(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "company": self.company,
            "description": self.description,
            "location": self.location,
            "category": self.category,
            "job_type": self.job_type,
            "salary_min": self.salary_min,
            "salary_max": self.salary_max,
            "experience_required": self.experience_required,
            "skills": list(self.skills),
            "employer_id": self.employer_id,
            "status": self.status,
            "posted_date": _timestamp(self.posted_date),
        }

    def to_dict(self) -> dict[str, Any]:
        data = {
            "id": self.id,
            "title": self.title,
            "company": self.company,
            "description": self.description,
            "location": self.location,
            "category": self.category,
            "jobType": self.job_type,
            "salaryMin": self.salary_min,
            "salaryMax": self.salary_max,
            "experienceRequired": self.experience_required,
            "skills": list(self.skills),
            "employerId": self.employer_id,
            "status": self.status,
            "postedDate": _timestamp(self.posted_date),
        }
        if self.employer is not None:
            data["employer"] = self.employer.to_dict()
        return data

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> Job:
        return cls(
            id=row["id"],
            title=row["title"],
            company=row["company"],
            description=row["description"],
            location=row["location"],
            category=row["category"],
            job_type=row["job_type"],
            salary_min=row["salary_min"],
            salary_max=row["salary_max"],
            experience_required=row["experience_required"],
            employer_id=row["employer_id"],
            status=row["status"],
            skills=normalize_skills(row.get("skills")),
            posted_date=parse_timestamp(row.get("posted_date")),
        )

    def __repr__(self) -> str:
        return f"Job({self.title!r} @ {self.company!r}, {self.status})"


@dataclass(frozen=True)
class JobFilter:
    """Options recognized by the public job listing. None means 'not filtered'."""

    location: str | None = None
    category: str | None = None
    min_salary: int | None = None
    max_salary: int | None = None
    experience_required: int | None = None
    search: str | None = None

    # Wire name -> attribute
    _KEYS: ClassVar[dict[str, str]] = {
        "location": "location",
        "category": "category",
        "minSalary": "min_salary",
        "min_salary": "min_salary",
        "maxSalary": "max_salary",
        "max_salary": "max_salary",
        "experienceRequired": "experience_required",
        "experience_required": "experience_required",
        "search": "search",
    }
    _NUMERIC: ClassVar[frozenset[str]] = frozenset({"min_salary", "max_salary", "experience_required"})

    @classmethod
    def from_dict(cls, options: dict[str, Any] | None) -> JobFilter:
        """
        Build a filter from request options. Empty strings count as absent;
        numeric options must parse as integers. Unrecognized keys are ignored.
        """
        values: dict[str, Any] = {}
        errors = []
        for key, raw in (options or {}).items():
            attr = cls._KEYS.get(key)
            if attr is None or raw is None or clean_text(raw) == "":
                continue
            if attr in cls._NUMERIC:
                number = to_int(raw)
                if number is None:
                    errors.append({"field": key, "message": f"{key} must be a number"})
                    continue
                values[attr] = number
            else:
                values[attr] = clean_text(raw)
        if errors:
            raise ValidationError(errors=errors)
        return cls(**values)


@dataclass(frozen=True)
class JobPage:
    items: list[Job]
    total_count: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.page_size) if self.page_size else 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "items": [job.to_dict() for job in self.items],
            "totalCount": self.total_count,
            "totalPages": self.total_pages,
            "currentPage": self.page,
        }


# =========================================================================
# Applications
# =========================================================================


@dataclass(frozen=True)
class Application:
    """A job seeker's application to one job. Unique per (job_id, applicant_id)."""

    id: str
    job_id: str
    applicant_id: str
    status: str
    applied_date: datetime
    updated_date: datetime
    cover_letter: str | None = None
    resume: str | None = None
    job: JobSummary | None = field(default=None, compare=False)
    applicant: ApplicantSummary | None = field(default=None, compare=False)

    def copy_with_updates(self, **updates: Any) -> Application:
        return replace(self, **updates)

    def to_row(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "job_id": self.job_id,
            "applicant_id": self.applicant_id,
            "status": self.status,
            "cover_letter": self.cover_letter,
            "resume": self.resume,
            "applied_date": _timestamp(self.applied_date),
            "updated_date": _timestamp(self.updated_date),
        }

    def to_dict(self) -> dict[str, Any]:
        data = {
            "id": self.id,
            "jobId": self.job_id,
            "applicantId": self.applicant_id,
            "status": self.status,
            "coverLetter": self.cover_letter,
            "resume": self.resume,
            "appliedDate": _timestamp(self.applied_date),
            "updatedDate": _timestamp(self.updated_date),
        }
        if self.job is not None:
            data["job"] = self.job.to_dict()
        if self.applicant is not None:
            data["applicant"] = self.applicant.to_dict()
        return data

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> Application:
        """
        Build from a storage row. Rows from the joined list queries carry
        'job__' or 'applicant__' prefixed summary columns.
        """
        job = None
        if "job__title" in row:
            job = JobSummary(
                id=row["job_id"],
                title=row["job__title"],
                company=row["job__company"],
                location=row["job__location"],
                salary_min=row["job__salary_min"],
                salary_max=row["job__salary_max"],
                status=row["job__status"],
            )
        applicant = None
        if "applicant__name" in row:
            applicant = ApplicantSummary(
                id=row["applicant_id"],
                name=row["applicant__name"],
                email=row["applicant__email"],
                phone=row.get("applicant__phone"),
                skills=normalize_skills(row.get("applicant__skills")),
                experience=row.get("applicant__experience"),
            )
        return cls(
            id=row["id"],
            job_id=row["job_id"],
            applicant_id=row["applicant_id"],
            status=row["status"],
            applied_date=parse_timestamp(row["applied_date"]),
            updated_date=parse_timestamp(row["updated_date"]),
            cover_letter=row.get("cover_letter"),
            resume=row.get("resume"),
            job=job,
            applicant=applicant,
        )
