"""
tests/test_admin.py

Admin feature switches, plan updates and stats surfaces.
"""

from __future__ import annotations

import uuid

import pytest
from fastapi.testclient import TestClient

from app.auth import SessionPrincipal, get_session
from app.main import app
from app.services import admin_service as admin_module
from app.services.admin_service import AdminService, get_admin_service
from db.repositories.errors import UserNotFoundError
from db.session import get_db

ADMIN = SessionPrincipal(user_id=uuid.uuid4(), email="admin@a.test", name="Admin", role="admin")


class FakeSession:
    def __init__(self) -> None:
        self.commits = 0
        self.rollbacks = 0

    def commit(self) -> None:
        self.commits += 1

    def rollback(self) -> None:
        self.rollbacks += 1


class FakeSettingRepository:
    store: dict[str, str] = {}

    def __init__(self, session) -> None:
        self._session = session

    def get(self, key: str) -> str | None:
        return self.store.get(key)

    def upsert(self, key: str, value: str) -> None:
        self.store[key] = value


class FakeUserRepository:
    plans: dict[str, str] = {}

    def __init__(self, session) -> None:
        self._session = session

    def set_plan(self, *, email: str, plan: str) -> None:
        if email not in self.plans:
            raise UserNotFoundError(email)
        self.plans[email] = plan


@pytest.fixture(autouse=True)
def fake_repositories(monkeypatch: pytest.MonkeyPatch) -> None:
    FakeSettingRepository.store = {}
    FakeUserRepository.plans = {"user@a.test": "free"}
    monkeypatch.setattr(admin_module, "SettingRepository", FakeSettingRepository)
    monkeypatch.setattr(admin_module, "UserRepository", FakeUserRepository)


class TestAdminService:
    def test_switches_default_to_enabled(self) -> None:
        config = AdminService().get_config(db=FakeSession())
        assert config.guest_mode is True
        assert config.public_signup is True

    def test_update_only_given_switches(self) -> None:
        session = FakeSession()
        config = AdminService().update_config(db=session, guest_mode=False)

        assert FakeSettingRepository.store == {"guest_mode": "false"}
        assert config.guest_mode is False
        assert config.public_signup is True
        assert session.commits == 1

    def test_set_plan_unknown_user_rolls_back(self) -> None:
        session = FakeSession()
        with pytest.raises(UserNotFoundError):
            AdminService().set_plan(db=session, email="ghost@a.test", plan="premium")
        assert session.rollbacks == 1


@pytest.fixture()
def client():
    session = FakeSession()

    def fake_db():
        yield session

    app.dependency_overrides[get_db] = fake_db
    app.dependency_overrides[get_session] = lambda: ADMIN
    app.dependency_overrides[get_admin_service] = AdminService
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


class TestAdminRoutes:
    def test_config_round_trip(self, client: TestClient) -> None:
        response = client.post("/admin/config", json={"public_signup": False})
        assert response.status_code == 200
        assert response.json() == {"guest_mode": True, "public_signup": False}
        assert client.get("/admin/config").json() == {"guest_mode": True, "public_signup": False}

    def test_set_plan(self, client: TestClient) -> None:
        response = client.post("/admin/users", json={"email": "user@a.test", "plan": "premium"})
        assert response.status_code == 200
        assert FakeUserRepository.plans["user@a.test"] == "premium"

    def test_set_plan_unknown_user(self, client: TestClient) -> None:
        response = client.post("/admin/users", json={"email": "ghost@a.test", "plan": "premium"})
        assert response.status_code == 404

    def test_invalid_plan(self, client: TestClient) -> None:
        response = client.post("/admin/users", json={"email": "user@a.test", "plan": "gold"})
        assert response.status_code == 400
