#!/usr/bin/env python3
"""
Tests for resolving the session context from a bearer token and the
Firestore profile document. Firebase calls are monkeypatched.
"""

import pytest
from fastapi.testclient import TestClient

from core import deps
from core.errors import ProfileExists
from main import app
from models.user import UserRole
from services import profile_service

AUTH = {"Authorization": "Bearer test-token"}


@pytest.fixture
def client(monkeypatch):
    monkeypatch.setattr(deps, "verify_id_token", lambda token: {"uid": "u-1", "email": "ada@example.com"})
    return TestClient(app)


def use_profile(monkeypatch, profile):
    monkeypatch.setattr(deps, "get_profile", lambda uid: profile)


def test_missing_header_is_unauthorized(client):
    response = client.get("/auth/me")

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


def test_invalid_token_is_unauthorized(monkeypatch):
    def reject(token):
        raise ValueError("expired")

    monkeypatch.setattr(deps, "verify_id_token", reject)

    response = TestClient(app).get("/auth/me", headers=AUTH)

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired token"


def test_missing_profile_is_an_invalid_session(client, monkeypatch):
    use_profile(monkeypatch, None)

    response = client.get("/auth/me", headers=AUTH)

    assert response.status_code == 401
    assert "sign in again" in response.json()["detail"]


def test_unknown_role_is_an_invalid_session(client, monkeypatch):
    use_profile(monkeypatch, {"role": "owner", "displayName": "Ada"})

    assert client.get("/auth/me", headers=AUTH).status_code == 401


def test_profile_resolves_session_context(client, monkeypatch):
    use_profile(monkeypatch, {"role": "worker", "displayName": "Ada Lovelace", "email": "ada@example.com"})

    response = client.get("/auth/me", headers=AUTH)

    assert response.status_code == 200
    assert response.json() == {
        "uid": "u-1",
        "email": "ada@example.com",
        "display_name": "Ada Lovelace",
        "role": "worker",
    }


def test_worker_cannot_reach_manager_routes(client, monkeypatch):
    use_profile(monkeypatch, {"role": "worker", "displayName": "Ada Lovelace"})

    assert client.get("/admin/analytics/summary", headers=AUTH).status_code == 403


def test_sign_up_creates_profile(client, monkeypatch):
    created = {}

    def fake_create_profile(uid, email, role, display_name, photo_url=None):
        created.update(uid=uid, email=email, role=role, display_name=display_name)
        return {}

    monkeypatch.setattr("api.auth_routes.create_profile", fake_create_profile)

    response = client.post("/auth/profile", headers=AUTH, json={"role": "manager", "display_name": "Ada"})

    assert response.status_code == 201
    assert response.json()["role"] == "manager"
    assert created == {"uid": "u-1", "email": "ada@example.com", "role": UserRole.MANAGER, "display_name": "Ada"}


def test_create_profile_refuses_existing_document(monkeypatch):
    monkeypatch.setattr(profile_service, "get_firestore_client", lambda: FakeFirestore())
    monkeypatch.setattr(profile_service, "get_profile", lambda uid: {"role": "worker"})

    with pytest.raises(ProfileExists):
        profile_service.create_profile("u-1", "ada@example.com", UserRole.WORKER, "Ada")


def test_sign_out_revokes_tokens(client, monkeypatch):
    use_profile(monkeypatch, {"role": "worker", "displayName": "Ada Lovelace"})
    revoked = []
    monkeypatch.setattr("api.auth_routes.revoke_refresh_tokens", revoked.append)

    response = client.post("/auth/sign-out", headers=AUTH)

    assert response.status_code == 200
    assert revoked == ["u-1"]


class FakeFirestore:
    """Just enough of the Firestore client for collection().document()."""

    def collection(self, name):
        return self

    def document(self, doc_id):
        return self

    def set(self, data):
        raise AssertionError("existing profiles must not be overwritten")
