"""Unit tests for the domain models."""

from datetime import datetime, timezone

import pytest

from marketplace.errors import ValidationError
from marketplace.models import (
    Application,
    Employer,
    EmployerSummary,
    Job,
    JobFilter,
    JobPage,
    JobSeeker,
    User,
)

POSTED = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


def _job(**overrides):
    values = dict(
        id="j1",
        title="Engineer",
        company="Acme",
        description="Code stuff.",
        location="Whitefield",
        category="Software Development",
        job_type="Full-time",
        salary_min=100,
        salary_max=200,
        experience_required=1,
        employer_id="e1",
        skills=["Python"],
        posted_date=POSTED,
    )
    values.update(overrides)
    return Job(**values)


class TestUser:
    def test_from_row_dispatches_on_role(self):
        employer = User.from_row({"id": "u1", "name": "A", "email": "a@x.com", "role": "employer", "company": "Acme"})
        seeker = User.from_row({"id": "u2", "name": "B", "email": "b@x.com", "role": "job_seeker",
                                "skills": ["Go"], "experience": 2})
        assert isinstance(employer, Employer)
        assert employer.company == "Acme"
        assert isinstance(seeker, JobSeeker)
        assert seeker.skills == ["Go"]
        assert seeker.experience == 2

    def test_unknown_role(self):
        with pytest.raises(ValueError, match="Unknown user role"):
            User.from_row({"id": "u1", "role": "admin"})

    def test_to_dict_hides_password_hash(self):
        user = Employer(id="u1", name="A", email="a@x.com", password_hash="secret-hash", company="Acme")
        data = user.to_dict()
        assert "secret-hash" not in data.values()
        assert data["role"] == "employer"
        assert data["company"] == "Acme"
        assert "secret-hash" not in repr(user)

    def test_to_row_round_trip(self):
        user = JobSeeker(
            id="u1", name="B", email="b@x.com", password_hash="h",
            created_date=POSTED, skills=["Go", "SQL"], experience=4,
        )
        row = user.to_row()
        assert row["company"] is None
        assert row["created_date"] == "2024-05-01T09:30:00.000000+00:00"
        assert User.from_row(row) == user

    def test_role_flags(self):
        assert Employer(id="u", name="n", email="e").is_employer
        assert JobSeeker(id="u", name="n", email="e").is_job_seeker
        assert not JobSeeker(id="u", name="n", email="e").is_employer

    def test_profile_fields_per_variant(self):
        assert "company" in Employer.PROFILE_FIELDS
        assert "company" not in JobSeeker.PROFILE_FIELDS
        assert "skills" in JobSeeker.PROFILE_FIELDS
        assert "email" not in JobSeeker.PROFILE_FIELDS


class TestJob:
    def test_row_round_trip(self):
        job = _job()
        assert Job.from_row(job.to_row()) == job

    def test_to_dict(self):
        job = _job(employer=EmployerSummary(id="e1", name="Boss", email="boss@acme.com", company="Acme"))
        data = job.to_dict()
        assert data["jobType"] == "Full-time"
        assert data["salaryMin"] == 100
        assert data["employerId"] == "e1"
        assert data["postedDate"] == "2024-05-01T09:30:00.000000+00:00"
        assert data["employer"]["email"] == "boss@acme.com"
        assert "employer" not in _job().to_dict()

    def test_ownership(self):
        job = _job()
        assert job.is_owned_by(Employer(id="e1", name="n", email="e"))
        assert not job.is_owned_by(Employer(id="e2", name="n", email="e"))
        assert not job.is_owned_by(JobSeeker(id="e1", name="n", email="e"))

    def test_copy_with_updates(self):
        job = _job()
        closed = job.copy_with_updates(status="closed")
        assert closed.status == "closed"
        assert not closed.is_active
        assert job.is_active

    def test_summary(self):
        summary = _job().summary()
        assert summary.to_dict() == {
            "id": "j1", "title": "Engineer", "company": "Acme", "location": "Whitefield",
            "salaryMin": 100, "salaryMax": 200, "status": "active",
        }

    def test_repr(self):
        assert repr(_job()) == "Job('Engineer' @ 'Acme', active)"


class TestJobFilter:
    def test_camel_and_snake_keys(self):
        assert JobFilter.from_dict({"minSalary": "100", "max_salary": 500}) == JobFilter(min_salary=100, max_salary=500)

    def test_empty_values_and_unknown_keys_ignored(self):
        assert JobFilter.from_dict({"location": "", "category": None, "page": 3, "sort": "x"}) == JobFilter()
        assert JobFilter.from_dict(None) == JobFilter()

    def test_text_is_stripped(self):
        assert JobFilter.from_dict({"search": "  react  "}).search == "react"

    def test_bad_numbers_collected(self):
        with pytest.raises(ValidationError) as exc_info:
            JobFilter.from_dict({"minSalary": "abc", "experienceRequired": "1.5"})
        assert {e["field"] for e in exc_info.value.errors} == {"minSalary", "experienceRequired"}


class TestJobPage:
    @pytest.mark.parametrize("total,size,pages", [(0, 10, 0), (1, 10, 1), (10, 10, 1), (25, 10, 3)])
    def test_total_pages(self, total, size, pages):
        assert JobPage(items=[], total_count=total, page=1, page_size=size).total_pages == pages


class TestApplication:
    def test_from_joined_job_row(self):
        row = {
            "id": "a1", "job_id": "j1", "applicant_id": "u1", "status": "pending",
            "cover_letter": None, "resume": None,
            "applied_date": "2024-05-01T09:30:00.000000+00:00",
            "updated_date": "2024-05-02T09:30:00.000000+00:00",
            "job__title": "Engineer", "job__company": "Acme", "job__location": "Whitefield",
            "job__salary_min": 100, "job__salary_max": 200, "job__status": "closed",
        }
        application = Application.from_row(row)
        assert application.job.title == "Engineer"
        assert application.job.status == "closed"
        assert application.applicant is None
        assert application.applied_date == POSTED

        data = application.to_dict()
        assert data["jobId"] == "j1"
        assert data["job"]["id"] == "j1"
        assert "applicant" not in data

    def test_from_joined_applicant_row(self):
        row = {
            "id": "a1", "job_id": "j1", "applicant_id": "u1", "status": "accepted",
            "applied_date": "2024-05-01T09:30:00.000000+00:00",
            "updated_date": "2024-05-01T09:30:00.000000+00:00",
            "applicant__name": "Rajesh", "applicant__email": "r@x.com", "applicant__phone": None,
            "applicant__skills": ["React"], "applicant__experience": 3,
        }
        application = Application.from_row(row)
        assert application.applicant.name == "Rajesh"
        assert application.applicant.skills == ["React"]
        assert application.to_dict()["applicant"]["experience"] == 3
