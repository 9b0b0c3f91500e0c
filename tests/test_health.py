from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from host_registry import db
from host_registry.main import app

client = TestClient(app)


class FakeDatabase:
    def __init__(self, error=None):
        self.error = error
        self.commands = []

    def command(self, name):
        self.commands.append(name)
        if self.error is not None:
            raise self.error
        return {"ok": 1.0}


def test_health_reports_reachable_database(monkeypatch):
    database = FakeDatabase()
    monkeypatch.setattr(db, "connect", lambda: database)

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "up"}
    assert database.commands == ["ping"]


def test_health_unreachable_database_maps_to_503(monkeypatch):
    monkeypatch.setattr(
        db,
        "connect",
        lambda: FakeDatabase(error=ServerSelectionTimeoutError("no servers")),
    )

    response = client.get("/health")

    assert response.status_code == 503
    assert response.json()["database"] == "down"
