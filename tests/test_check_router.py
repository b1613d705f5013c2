"""
tests/test_check_router.py

POST /check admission rules and SSE response, with in-memory collaborators.
"""

from __future__ import annotations

import json
import uuid

import pytest
from fastapi.testclient import TestClient

from app.auth import SessionPrincipal, get_session
from app.config import CheckPipelineSettings, SecuritySettings, get_security_settings
from app.indexing.orchestrator import CheckOrchestrator
from app.indexing.streaming import CheckStreamEmitter
from app.main import app
from app.security import TOKEN_HEADER, generate_request_token
from app.services.check_service import CheckService, get_check_service
from conftest import InMemoryCheckStorage, StubAutomation

SECRET = "router-secret"
GUEST_IP = "203.0.113.7"


@pytest.fixture()
def memory_storage() -> InMemoryCheckStorage:
    return InMemoryCheckStorage()


@pytest.fixture()
def client(memory_storage: InMemoryCheckStorage):
    settings = CheckPipelineSettings()
    orchestrator = CheckOrchestrator(
        storage=memory_storage,
        automation=StubAutomation(),  # type: ignore[arg-type]
        settings=settings,
    )
    service = CheckService(storage=memory_storage, emitter=CheckStreamEmitter(orchestrator), settings=settings)

    app.dependency_overrides[get_check_service] = lambda: service
    app.dependency_overrides[get_security_settings] = lambda: SecuritySettings(secret=SECRET)
    app.dependency_overrides[get_session] = lambda: None
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _headers() -> dict[str, str]:
    return {TOKEN_HEADER: generate_request_token(SECRET), "X-Forwarded-For": GUEST_IP}


def _events(body: str) -> list[dict]:
    return [json.loads(chunk[len("data: ") :]) for chunk in body.split("\n\n") if chunk.startswith("data: ")]


class TestCheckAdmission:
    def test_missing_token_is_forbidden(self, client: TestClient) -> None:
        response = client.post("/check", json={"urls": ["https://a.test/"]})
        assert response.status_code == 403
        assert "error" in response.json()

    def test_bad_token_is_rejected_before_body_parsing(self, client: TestClient) -> None:
        response = client.post("/check", content=b"not json", headers={TOKEN_HEADER: "nope"})
        assert response.status_code == 403

    def test_malformed_body(self, client: TestClient) -> None:
        response = client.post("/check", content=b"not json", headers=_headers())
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request body"}

    def test_urls_must_be_strings(self, client: TestClient) -> None:
        response = client.post("/check", json={"urls": "https://a.test/"}, headers=_headers())
        assert response.status_code == 400

    def test_blank_urls_only(self, client: TestClient) -> None:
        response = client.post("/check", json={"urls": ["", "   "]}, headers=_headers())
        assert response.status_code == 400
        assert response.json() == {"error": "No URLs provided"}

    def test_guest_over_quota(self, client: TestClient, memory_storage: InMemoryCheckStorage) -> None:
        memory_storage.ip_counts[GUEST_IP] = 30
        response = client.post("/check", json={"urls": ["https://a.test/"]}, headers=_headers())
        assert response.status_code == 429

    def test_guest_mode_disabled(self, client: TestClient, memory_storage: InMemoryCheckStorage) -> None:
        memory_storage.settings["guest_mode"] = "false"
        response = client.post("/check", json={"urls": ["https://a.test/"]}, headers=_headers())
        assert response.status_code == 403


class TestCheckStream:
    def test_guest_request_is_truncated_to_remaining_quota(
        self,
        client: TestClient,
        memory_storage: InMemoryCheckStorage,
    ) -> None:
        memory_storage.ip_counts[GUEST_IP] = 5
        urls = [f"https://a.test/{i}" for i in range(31)]

        response = client.post("/check", json={"urls": urls}, headers=_headers())

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert response.headers["cache-control"] == "no-cache"
        events = _events(response.text)
        assert events[0] == {"type": "meta", "total": 25}
        assert len([event for event in events if event["type"] == "result"]) == 25
        assert events[-1] == {"type": "done", "total": 25}
        assert memory_storage.ip_counts[GUEST_IP] == 30

    def test_economy_mode_alias_and_trimmed_urls(self, client: TestClient) -> None:
        response = client.post(
            "/check",
            json={"urls": ["  https://a.test/x  ", ""], "economyMode": True},
            headers=_headers(),
        )

        results = [event for event in _events(response.text) if event["type"] == "result"]
        assert [event["url"] for event in results] == ["https://a.test/x"]

    def test_authenticated_user_gets_batch(self, client: TestClient, memory_storage: InMemoryCheckStorage) -> None:
        user_id = uuid.uuid4()
        app.dependency_overrides[get_session] = lambda: SessionPrincipal(
            user_id=user_id,
            email="user@a.test",
            name="User",
            role="user",
        )
        urls = [f"https://a.test/{i}" for i in range(40)]

        response = client.post("/check", json={"urls": urls}, headers=_headers())

        events = _events(response.text)
        assert events[0] == {"type": "meta", "total": 40}
        assert len(memory_storage.batches) == 1
        batch = next(iter(memory_storage.batches.values()))
        assert batch.user_id == user_id
        assert batch.total_urls == 40
        assert len(memory_storage.batch_results) == 40
        assert memory_storage.ip_counts == {}


class TestSecurityToken:
    def test_token_endpoint(self, client: TestClient) -> None:
        response = client.get("/security/token")
        assert response.status_code == 200
        assert response.json() == {"token": generate_request_token(SECRET)}

    def test_health(self, client: TestClient) -> None:
        assert client.get("/health").json() == {"status": "ok"}
