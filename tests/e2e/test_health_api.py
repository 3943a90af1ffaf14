"""End-to-end test for the health endpoint."""

from fastapi.testclient import TestClient

from forum.interface.api.app import create_app
from tests.di import build_test_container


def test_health_check():
    with TestClient(create_app(build_test_container(with_fastapi=True))) as client:
        response = client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["version"] == "0.1.0"
    assert "git_sha" in data
