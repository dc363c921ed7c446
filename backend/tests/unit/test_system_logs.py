import logging

from fastapi.testclient import TestClient

from backend.src.api.main import app
from backend.src.api.routes.system import LOG_BUFFER

client = TestClient(app)


def test_logs_endpoint_returns_recent_records() -> None:
    LOG_BUFFER.clear()
    logging.getLogger("backend.test").warning("tree rebuilt", extra={"count": 3})

    response = client.get("/api/system/logs")

    assert response.status_code == 200
    entries = response.json()
    assert entries[-1]["message"] == "tree rebuilt"
    assert entries[-1]["level"] == "WARNING"
    assert entries[-1]["extra"] == {"count": 3}


def test_logs_endpoint_limit() -> None:
    LOG_BUFFER.clear()
    for i in range(5):
        logging.getLogger("backend.test").warning(f"entry {i}")

    response = client.get("/api/system/logs", params={"limit": 2})

    assert [entry["message"] for entry in response.json()] == ["entry 3", "entry 4"]
