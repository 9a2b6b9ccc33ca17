"""Tests for the request dispatcher in marketplace.api."""

import pytest

from conftest import PASSWORD, job_fields
from marketplace.api import available_methods, handle_request


def _ok(response):
    assert response["ok"], response
    return response["result"]


def _error_type(response):
    assert not response["ok"], response
    return response["error"]["type"]


@pytest.fixture
def employer_token(services):
    result = _ok(handle_request(services, "register", {
        "name": "Tech Solutions", "email": "hr@techsolutions.com", "password": PASSWORD,
        "role": "employer", "company": "Tech Solutions Pvt Ltd",
    }))
    return result["token"]


@pytest.fixture
def seeker_token(services):
    result = _ok(handle_request(services, "register", {
        "name": "Rajesh Kumar", "email": "rajesh@example.com", "password": PASSWORD,
        "role": "job_seeker", "skills": "React, Node.js", "experience": 3,
    }))
    return result["token"]


class TestIdentityMethods:
    def test_register_returns_user_without_hash(self, services):
        result = _ok(handle_request(services, "register", {
            "name": "Priya", "email": "priya@example.com", "password": PASSWORD, "role": "job_seeker",
        }))
        assert result["token"]
        assert result["user"]["email"] == "priya@example.com"
        assert "password_hash" not in result["user"]
        assert "passwordHash" not in result["user"]

    def test_register_validation_errors(self, services):
        response = handle_request(services, "register", {"email": "x@example.com"})
        assert _error_type(response) == "ValidationError"
        assert {e["field"] for e in response["error"]["errors"]} >= {"name", "password", "role"}

    def test_login_and_me(self, services, seeker_token):
        result = _ok(handle_request(services, "login", {"email": "rajesh@example.com", "password": PASSWORD}))
        me = _ok(handle_request(services, "me", token=result["token"]))
        assert me["name"] == "Rajesh Kumar"
        assert me["skills"] == ["React", "Node.js"]

    def test_bad_login(self, services, seeker_token):
        response = handle_request(services, "login", {"email": "rajesh@example.com", "password": "nope"})
        assert _error_type(response) == "InvalidCredentials"
        assert response["error"]["message"] == "Invalid email or password"

    def test_me_without_token(self, services):
        assert _error_type(handle_request(services, "me")) == "Unauthenticated"

    def test_profile_update(self, services, seeker_token):
        result = _ok(handle_request(services, "profile.update", {"yearsOfExperience": 4}, token=seeker_token))
        assert result["experience"] == 4
        assert _ok(handle_request(services, "profile.get", token=seeker_token))["experience"] == 4

    def test_password_change(self, services, seeker_token):
        result = _ok(handle_request(services, "password.change", {
            "currentPassword": PASSWORD, "newPassword": "brand-new",
        }, token=seeker_token))
        assert result == {"message": "Password updated successfully"}
        _ok(handle_request(services, "login", {"email": "rajesh@example.com", "password": "brand-new"}))

    def test_password_change_wrong_current(self, services, seeker_token):
        response = handle_request(services, "password.change", {
            "currentPassword": "wrong-one", "newPassword": "brand-new",
        }, token=seeker_token)
        assert _error_type(response) == "WrongCurrentPassword"

    def test_numeric_passwords_are_rejected(self, services, seeker_token):
        register = handle_request(services, "register", {
            "name": "Priya", "email": "priya@example.com", "password": 1234567, "role": "job_seeker",
        })
        assert _error_type(register) == "ValidationError"
        assert [e["field"] for e in register["error"]["errors"]] == ["password"]

        login = handle_request(services, "login", {"email": "rajesh@example.com", "password": 1234567})
        assert _error_type(login) == "InvalidCredentials"

        change = handle_request(services, "password.change", {
            "currentPassword": PASSWORD, "newPassword": 1234567,
        }, token=seeker_token)
        assert _error_type(change) == "WeakPassword"
        _ok(handle_request(services, "login", {"email": "rajesh@example.com", "password": PASSWORD}))


class TestJobMethods:
    def test_create_list_get(self, services, employer_token):
        created = _ok(handle_request(services, "jobs.create", job_fields(), token=employer_token))
        assert created["salaryMin"] == 800000

        page = _ok(handle_request(services, "jobs.list", {"location": "Whitefield", "page": "1", "limit": "5"}))
        assert page["totalCount"] == 1
        assert page["totalPages"] == 1
        assert page["currentPage"] == 1
        assert page["items"][0]["id"] == created["id"]

        detail = _ok(handle_request(services, "jobs.get", {"id": created["id"]}))
        assert detail["employer"]["company"] == "Tech Solutions Pvt Ltd"

    def test_create_requires_employer(self, services, seeker_token):
        response = handle_request(services, "jobs.create", job_fields(), token=seeker_token)
        assert _error_type(response) == "WrongRole"

    def test_invalid_page(self, services):
        assert _error_type(handle_request(services, "jobs.list", {"page": "first"})) == "ValidationError"
        assert _error_type(handle_request(services, "jobs.list", {"page": 0})) == "ValidationError"

    def test_out_of_range_numbers(self, services, employer_token):
        response = handle_request(services, "jobs.create", job_fields(salaryMax=10**20), token=employer_token)
        assert _error_type(response) == "ValidationError"
        assert _error_type(handle_request(services, "jobs.list", {"minSalary": "1e20"})) == "ValidationError"
        assert _ok(handle_request(services, "jobs.list", {"page": 10**18}))["items"] == []

    def test_get_requires_id(self, services):
        response = handle_request(services, "jobs.get", {})
        assert _error_type(response) == "ValidationError"
        assert response["error"]["errors"][0]["field"] == "id"

    def test_get_missing(self, services):
        assert _error_type(handle_request(services, "jobs.get", {"id": "missing"})) == "JobNotFound"

    def test_update_close_and_mine(self, services, employer_token):
        created = _ok(handle_request(services, "jobs.create", job_fields(), token=employer_token))
        updated = _ok(handle_request(services, "jobs.update", {"id": created["id"], "salaryMax": 1400000},
                                     token=employer_token))
        assert updated["salaryMax"] == 1400000

        mine = _ok(handle_request(services, "jobs.mine", token=employer_token))
        assert [j["id"] for j in mine] == [created["id"]]

        closed = _ok(handle_request(services, "jobs.close", {"id": created["id"]}, token=employer_token))
        assert closed == {"id": created["id"], "outcome": "deleted"}


class TestApplicationMethods:
    def test_apply_and_review(self, services, employer_token, seeker_token):
        job = _ok(handle_request(services, "jobs.create", job_fields(), token=employer_token))

        application = _ok(handle_request(services, "applications.apply", {
            "jobId": job["id"], "coverLetter": "Hello",
        }, token=seeker_token))
        assert application["status"] == "pending"
        assert application["job"]["title"] == job["title"]

        again = handle_request(services, "applications.apply", {"jobId": job["id"]}, token=seeker_token)
        assert _error_type(again) == "DuplicateApplication"

        inbox = _ok(handle_request(services, "applications.for_job", {"jobId": job["id"]}, token=employer_token))
        assert inbox[0]["applicant"]["name"] == "Rajesh Kumar"

        reviewed = _ok(handle_request(services, "applications.update_status", {
            "applicationId": application["id"], "status": "reviewed",
        }, token=employer_token))
        assert reviewed["status"] == "reviewed"
        assert reviewed["updatedDate"] > reviewed["appliedDate"]

        mine = _ok(handle_request(services, "applications.mine", token=seeker_token))
        assert mine[0]["status"] == "reviewed"

        detail = _ok(handle_request(services, "applications.get", {"id": application["id"]}, token=employer_token))
        assert detail["applicant"]["email"] == "rajesh@example.com"

        closed = _ok(handle_request(services, "jobs.close", {"jobId": job["id"]}, token=employer_token))
        assert closed["outcome"] == "closed"

    def test_employer_applying_gets_wrong_role(self, services, employer_token):
        job = _ok(handle_request(services, "jobs.create", job_fields(), token=employer_token))
        response = handle_request(services, "applications.apply", {"jobId": job["id"]}, token=employer_token)
        assert _error_type(response) == "WrongRole"

    def test_job_seeker_cannot_review(self, services, seeker_token):
        response = handle_request(services, "applications.update_status", {"id": "x", "status": "accepted"},
                                  token=seeker_token)
        assert _error_type(response) == "WrongRole"


class TestDispatch:
    def test_unknown_method(self, services):
        response = handle_request(services, "jobs.purge")
        assert _error_type(response) == "ValidationError"
        assert "Unknown method" in response["error"]["message"]

    def test_available_methods(self):
        methods = available_methods()
        assert "register" in methods
        assert "applications.update_status" in methods
        assert methods == sorted(methods)
