"""
Tests for job API endpoints.

Tests:
- Public reads: list with filters, single job
- Admin-gated writes: create, partial update, delete
- Error envelope and status codes for each failure kind
"""

import pytest
from datetime import timedelta
from decimal import Decimal

from core.config import settings
from core.security import create_access_token


def auth(token):
    return {"Authorization": f"Bearer {token}"}


NEW_JOB = {
    "title": "testJob",
    "salary": 100000,
    "equity": "0.1",
    "companyHandle": "c3",
}


class TestListJobs:
    """Test GET /jobs."""

    def test_lists_all_jobs_anonymously(self, fake_executor, make_job, api_client):
        rows = [make_job(id=i, title=f"j{i}") for i in range(1, 5)]
        executor = fake_executor(rows)

        response = api_client(executor).get("/jobs")

        assert response.status_code == 200
        jobs = response.json()["jobs"]
        assert [job["title"] for job in jobs] == ["j1", "j2", "j3", "j4"]
        assert "WHERE" not in executor.statements[0]

    def test_record_shape(self, fake_executor, make_job, api_client):
        executor = fake_executor([make_job(id=2, equity=Decimal("0.10"), company_handle="c2")])

        response = api_client(executor).get("/jobs")

        assert response.json() == {
            "jobs": [
                {
                    "id": 2,
                    "title": "j1",
                    "salary": 100000,
                    "equity": "0.10",
                    "companyHandle": "c2",
                }
            ]
        }

    def test_all_filters(self, fake_executor, make_job, api_client):
        executor = fake_executor([make_job(id=2, title="j2", equity="0.2")])

        response = api_client(executor).get(
            "/jobs", params={"title": "j", "minSalary": 10000, "hasEquity": "true"}
        )

        assert response.status_code == 200
        assert [job["title"] for job in response.json()["jobs"]] == ["j2"]
        sql, values = executor.calls[0]
        assert sql.endswith("WHERE title ILIKE $1 AND salary > $2 AND equity > 0")
        assert values == ["%j%", 10000]

    def test_has_equity_false_is_not_a_filter(self, fake_executor, make_job, api_client):
        executor = fake_executor([make_job()])

        response = api_client(executor).get("/jobs", params={"hasEquity": "false"})

        assert response.status_code == 200
        assert "equity > 0" not in executor.statements[0]

    def test_filtered_no_match_is_400(self, fake_executor, api_client):
        executor = fake_executor([])

        response = api_client(executor).get("/jobs", params={"title": "nonexistent"})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "NO_MATCH"
        assert error["message"] == "No jobs fit those parameters"

    def test_filtered_no_match_can_be_empty_list(self, fake_executor, api_client, monkeypatch):
        monkeypatch.setattr(settings, "jobs_no_match_is_error", False)
        executor = fake_executor([])

        response = api_client(executor).get("/jobs", params={"title": "nonexistent"})

        assert response.status_code == 200
        assert response.json() == {"jobs": []}

    def test_unfiltered_empty_list(self, fake_executor, api_client):
        response = api_client(fake_executor([])).get("/jobs")

        assert response.status_code == 200
        assert response.json() == {"jobs": []}

    @pytest.mark.parametrize("params", [
        {"minSalary": "lots"},
        {"minSalary": -1},
        {"hasEquity": "maybe"},
        {"title": ""},
        {"minSalary": 2_147_483_648},
    ])
    def test_invalid_query_params(self, fake_executor, api_client, params):
        executor = fake_executor()

        response = api_client(executor).get("/jobs", params=params)

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"
        assert executor.calls == []


class TestGetJob:
    """Test GET /jobs/{id}."""

    def test_get_job(self, fake_executor, make_job, api_client):
        response = api_client(fake_executor([make_job(id=5)])).get("/jobs/5")

        assert response.status_code == 200
        assert response.json()["job"]["id"] == 5

    def test_missing_job_is_404(self, fake_executor, api_client):
        response = api_client(fake_executor([])).get("/jobs/0")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    def test_id_beyond_integer_column_is_400(self, fake_executor, api_client):
        executor = fake_executor()

        response = api_client(executor).get("/jobs/3000000000")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"
        assert executor.calls == []

    def test_non_integer_id_is_400(self, fake_executor, api_client):
        response = api_client(fake_executor()).get("/jobs/abc")
        assert response.status_code == 400


class TestCreateJob:
    """Test POST /jobs."""

    def test_admin_creates_job(self, fake_executor, make_job, api_client, admin_token):
        created = make_job(id=11, title="testJob", equity="0.1", company_handle="c3")
        executor = fake_executor([], [created])

        response = api_client(executor).post("/jobs", json=NEW_JOB, headers=auth(admin_token))

        assert response.status_code == 200
        assert response.json() == {
            "job": {
                "id": 11,
                "title": "testJob",
                "salary": 100000,
                "equity": "0.1",
                "companyHandle": "c3",
            }
        }
        assert executor.calls[1][1] == ["testJob", 100000, Decimal("0.1"), "c3"]

    def test_snake_case_company_handle_accepted(self, fake_executor, make_job, api_client, admin_token):
        body = {"title": "testJob", "company_handle": "c3"}
        executor = fake_executor([], [make_job(id=12, title="testJob", salary=None, equity=None)])

        response = api_client(executor).post("/jobs", json=body, headers=auth(admin_token))

        assert response.status_code == 200
        assert executor.calls[1][1] == ["testJob", None, None, "c3"]

    def test_non_admin_is_401(self, fake_executor, api_client, user_token):
        executor = fake_executor()

        response = api_client(executor).post("/jobs", json=NEW_JOB, headers=auth(user_token))

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"
        assert executor.calls == []

    def test_anonymous_is_401(self, fake_executor, api_client):
        executor = fake_executor()

        response = api_client(executor).post("/jobs", json=NEW_JOB)

        assert response.status_code == 401
        assert executor.calls == []

    def test_duplicate_is_400(self, fake_executor, api_client, admin_token):
        executor = fake_executor([{"id": 1}])

        response = api_client(executor).post("/jobs", json=NEW_JOB, headers=auth(admin_token))

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "DUPLICATE"

    @pytest.mark.parametrize("body", [
        {"salary": 1, "companyHandle": "c1"},
        {"title": "t"},
        {**NEW_JOB, "salary": "not-a-number"},
        {**NEW_JOB, "equity": "1.5"},
        {**NEW_JOB, "salary": -5},
        {**NEW_JOB, "salary": 3_000_000_000},
        {**NEW_JOB, "equity": 2},
        {**NEW_JOB, "unexpected": True},
    ])
    def test_invalid_body_is_400(self, fake_executor, api_client, admin_token, body):
        executor = fake_executor()

        response = api_client(executor).post("/jobs", json=body, headers=auth(admin_token))

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"
        assert executor.calls == []


class TestUpdateJob:
    """Test PATCH /jobs/{id}."""

    def test_partial_update(self, fake_executor, make_job, api_client, admin_token):
        executor = fake_executor([make_job(id=1, title="New")])

        response = api_client(executor).patch(
            "/jobs/1", json={"title": "New"}, headers=auth(admin_token)
        )

        assert response.status_code == 200
        assert response.json()["job"]["title"] == "New"
        sql, values = executor.calls[0]
        assert 'SET "title"=$1 WHERE id = $2' in sql
        assert values == ["New", 1]

    def test_salary_zero_is_an_update(self, fake_executor, make_job, api_client, admin_token):
        executor = fake_executor([make_job(id=1, salary=0)])

        response = api_client(executor).patch(
            "/jobs/1", json={"salary": 0}, headers=auth(admin_token)
        )

        assert response.status_code == 200
        assert executor.calls[0][1] == [0, 1]

    def test_empty_body_is_400(self, fake_executor, api_client, admin_token):
        executor = fake_executor()

        response = api_client(executor).patch("/jobs/1", json={}, headers=auth(admin_token))

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_REQUEST"
        assert executor.calls == []

    def test_company_handle_is_rejected(self, fake_executor, api_client, admin_token):
        executor = fake_executor()

        response = api_client(executor).patch(
            "/jobs/1", json={"companyHandle": "c2"}, headers=auth(admin_token)
        )

        assert response.status_code == 400
        assert executor.calls == []

    def test_null_title_is_rejected(self, fake_executor, api_client, admin_token):
        response = api_client(fake_executor()).patch(
            "/jobs/1", json={"title": None}, headers=auth(admin_token)
        )
        assert response.status_code == 400

    @pytest.mark.parametrize("body,field", [
        ({"salary": "lots"}, "body.salary"),
        ({"salary": 3_000_000_000}, "body.salary"),
        ({"equity": 2}, "body.equity"),
    ])
    def test_invalid_fields_are_400_with_details(
        self, fake_executor, api_client, admin_token, body, field
    ):
        executor = fake_executor()

        response = api_client(executor).patch("/jobs/1", json=body, headers=auth(admin_token))

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "INVALID_REQUEST"
        assert [detail["field"] for detail in error["details"]] == [field]
        assert executor.calls == []

    def test_id_beyond_integer_column_is_400(self, fake_executor, api_client, admin_token):
        executor = fake_executor()

        response = api_client(executor).patch(
            "/jobs/3000000000", json={"salary": 1}, headers=auth(admin_token)
        )

        assert response.status_code == 400
        assert executor.calls == []

    def test_missing_job_is_404(self, fake_executor, api_client, admin_token):
        response = api_client(fake_executor([])).patch(
            "/jobs/0", json={"salary": 1}, headers=auth(admin_token)
        )
        assert response.status_code == 404

    def test_non_admin_is_401(self, fake_executor, api_client, user_token):
        executor = fake_executor()

        response = api_client(executor).patch(
            "/jobs/1", json={"title": "New"}, headers=auth(user_token)
        )

        assert response.status_code == 401
        assert executor.calls == []


class TestDeleteJob:
    """Test DELETE /jobs/{id}."""

    def test_admin_deletes_job(self, fake_executor, make_job, api_client, admin_token):
        executor = fake_executor([make_job(id=3)])

        response = api_client(executor).delete("/jobs/3", headers=auth(admin_token))

        assert response.status_code == 200
        assert response.json() == {"deleted": "Deleted job with id: 3"}

    def test_missing_job_is_404(self, fake_executor, api_client, admin_token):
        response = api_client(fake_executor([])).delete("/jobs/0", headers=auth(admin_token))
        assert response.status_code == 404

    def test_id_beyond_integer_column_is_400(self, fake_executor, api_client, admin_token):
        executor = fake_executor()

        response = api_client(executor).delete("/jobs/3000000000", headers=auth(admin_token))

        assert response.status_code == 400
        assert executor.calls == []

    def test_anonymous_is_401(self, fake_executor, api_client):
        executor = fake_executor()

        response = api_client(executor).delete("/jobs/3")

        assert response.status_code == 401
        assert executor.calls == []


class TestTokens:
    """Test token handling on job routes."""

    def test_invalid_token_is_rejected_before_routing(self, fake_executor, make_job, api_client):
        executor = fake_executor([make_job()])

        response = api_client(executor).get("/jobs", headers=auth("not-a-jwt"))

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "TOKEN_INVALID"
        assert response.headers["WWW-Authenticate"] == "Bearer"
        assert executor.calls == []

    def test_expired_token(self, fake_executor, api_client):
        token = create_access_token("admin", is_admin=True, expires_delta=timedelta(seconds=-1))

        response = api_client(fake_executor()).delete("/jobs/1", headers=auth(token))

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "TOKEN_EXPIRED"

    def test_request_id_is_echoed(self, fake_executor, api_client):
        response = api_client(fake_executor([])).get(
            "/jobs", headers={"x-request-id": "req-123"}
        )
        assert response.headers["x-request-id"] == "req-123"
