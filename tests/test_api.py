import pytest
from fastapi.testclient import TestClient

from script_studio.api import app


@pytest.fixture
def client():
    return TestClient(app)


@pytest.mark.parametrize("path, message", [
    ("/api/submitTopic", "Topic submitted successfully"),
    ("/api/approveScript", "Script approved successfully"),
])
def test_acknowledges_json(client, path, message):
    response = client.post(path, json={"topic": "cats"})

    assert response.status_code == 200
    assert response.json() == {"success": True, "message": message}


@pytest.mark.parametrize("path, message", [
    ("/api/submitTopic", "Failed to submit topic"),
    ("/api/approveScript", "Failed to approve script"),
])
def test_unreadable_body(client, path, message):
    response = client.post(path, content=b"not json", headers={"Content-Type": "application/json"})

    assert response.status_code == 500
    assert response.json() == {"success": False, "message": message}


def test_get_script(client):
    response = client.get("/api/getScript")

    assert response.status_code == 200
    data = response.json()
    assert data["script"].startswith("Welcome to our video on how to bake a cake!")
    assert len(data["mediaNotes"]) == 4
