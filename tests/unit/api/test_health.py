"""Tests for health and readiness endpoints."""

from sqlalchemy.exc import OperationalError


class TestHealth:

    def test_health(self, api_client, fake_executor):
        executor = fake_executor()

        response = api_client(executor).get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": "0.1.0"}
        assert executor.calls == []

    def test_ready(self, api_client, fake_executor):
        executor = fake_executor([{"?column?": 1}])

        response = api_client(executor).get("/ready")

        assert response.status_code == 200
        assert response.json() == {"status": "ready"}
        assert executor.statements == ["SELECT 1"]

    def test_not_ready_when_database_down(self, api_client, fake_executor):
        executor = fake_executor(OperationalError("SELECT 1", {}, Exception("connection refused")))

        response = api_client(executor).get("/ready")

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "DATABASE_ERROR"
