"""Shared fixtures: a throwaway SQLite store and services wired over it."""

from datetime import timedelta

import pytest

from local_storage import MarketplaceDatabase
from marketplace.factory import create_services
from utils.parsing import utc_now
from utils.schema import ROLE_EMPLOYER, ROLE_JOB_SEEKER

JWT_SECRET = "job-board-test-signing-key-0123456789"
HASH_ITERATIONS = 1000
PASSWORD = "password123"


class SteppingClock:
    """Starts an hour in the past and moves one second forward per reading."""

    def __init__(self, start=None, step=timedelta(seconds=1)):
        self.current = start or (utc_now() - timedelta(hours=1))
        self.step = step

    def __call__(self):
        self.current += self.step
        return self.current


@pytest.fixture
def store(tmp_path):
    return MarketplaceDatabase(str(tmp_path / "board.db"))


@pytest.fixture
def clock():
    return SteppingClock()


@pytest.fixture
def services(store, clock):
    return create_services(store, JWT_SECRET, clock=clock, hash_iterations=HASH_ITERATIONS)


@pytest.fixture
def employer(services):
    return services.identity.register(
        "Tech Solutions", "hr@techsolutions.com", PASSWORD, ROLE_EMPLOYER,
        company="Tech Solutions Pvt Ltd", location="Whitefield", phone="+91 9876543210",
    )


@pytest.fixture
def other_employer(services):
    return services.identity.register(
        "Innovate Labs", "hr@innovatelabs.com", PASSWORD, ROLE_EMPLOYER, company="Innovate Labs India",
    )


@pytest.fixture
def seeker(services):
    return services.identity.register(
        "Rajesh Kumar", "rajesh@example.com", PASSWORD, ROLE_JOB_SEEKER,
        skills=["JavaScript", "React"], experience=3, phone="+91 9876543213",
    )


@pytest.fixture
def other_seeker(services):
    return services.identity.register("Priya Sharma", "priya@example.com", PASSWORD, ROLE_JOB_SEEKER)


def job_fields(**overrides):
    fields = {
        "title": "Senior React Developer",
        "company": "Tech Solutions Pvt Ltd",
        "description": "Build web applications with React.",
        "location": "Whitefield",
        "category": "Software Development",
        "jobType": "Full-time",
        "salaryMin": 800000,
        "salaryMax": 1200000,
        "experienceRequired": 3,
        "skills": ["React", "JavaScript"],
    }
    fields.update(overrides)
    return fields


@pytest.fixture
def job(services, employer):
    return services.catalog.create_job(employer, job_fields())
