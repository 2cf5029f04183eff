from __future__ import annotations

from collections.abc import Iterator

import pytest
from flask import Flask
from prometheus_client import REGISTRY

from user_service.app import create_app
from user_service.infrastructure.container import Container
from user_service.infrastructure.db import ENGINE, Base, SessionLocal
from user_service.infrastructure.db.models import RevokedToken, SiteUser

REGISTER_BODY = {"userId": "alice", "password": "secret123", "phoneNumber": "010-1234-5678"}


@pytest.fixture(autouse=True)
def reset_database() -> Iterator[None]:
    Base.metadata.drop_all(bind=ENGINE)
    Base.metadata.create_all(bind=ENGINE)
    yield
    SessionLocal.remove()
    Base.metadata.drop_all(bind=ENGINE)


@pytest.fixture()
def app() -> Flask:
    return create_app(Container())


def test_register_login_refresh_profile_logout_flow(app: Flask) -> None:
    with app.test_client() as client:
        register = client.post("/api/user/v1/auth/register", json=REGISTER_BODY)
        assert register.status_code == 200
        assert register.get_json() == {"ok": True}

        duplicate = client.post("/api/user/v1/auth/register", json=REGISTER_BODY)
        assert duplicate.status_code == 409
        assert duplicate.get_json()["error"] == "duplicate_user"

        login = client.post(
            "/api/user/v1/auth/login", json={"userId": "alice", "password": "secret123"}
        )
        assert login.status_code == 200
        tokens = login.get_json()["data"]
        assert tokens["access"]["token"]
        refresh_token = tokens["refresh"]["token"]

        refreshed = client.post("/api/user/v1/auth/refresh", json={"token": refresh_token})
        assert refreshed.status_code == 200
        assert refreshed.get_json()["data"]["token"]

        profile = client.get("/api/user/v1/profile", headers={"X-Auth-UserId": "alice"})
        assert profile.status_code == 200
        data = profile.get_json()["data"]
        assert data["userId"] == "alice"
        assert data["phoneNumber"] == "010-1234-5678"
        assert "password" not in str(data).lower()

        logout = client.post("/api/user/v1/auth/logout", json={"token": refresh_token})
        assert logout.status_code == 200

        after_logout = client.post("/api/user/v1/auth/refresh", json={"token": refresh_token})
        assert after_logout.status_code == 403
        assert after_logout.get_json()["error"] == "invalid_token"

    session = SessionLocal()
    try:
        stored = session.query(SiteUser).one()
        assert stored.user_id == "alice"
        assert stored.password_hash != "secret123"
        assert session.query(RevokedToken).count() == 1
    finally:
        session.close()


def test_login_errors(app: Flask) -> None:
    with app.test_client() as client:
        client.post("/api/user/v1/auth/register", json=REGISTER_BODY)

        wrong = client.post(
            "/api/user/v1/auth/login", json={"userId": "alice", "password": "not-it"}
        )
        unknown = client.post(
            "/api/user/v1/auth/login", json={"userId": "nobody", "password": "secret123"}
        )

    assert wrong.status_code == 401
    assert wrong.get_json()["error"] == "invalid_credentials"
    assert unknown.status_code == 404
    assert unknown.get_json()["error"] == "user_not_found"


def test_access_token_cannot_be_used_to_refresh(app: Flask) -> None:
    with app.test_client() as client:
        client.post("/api/user/v1/auth/register", json=REGISTER_BODY)
        login = client.post(
            "/api/user/v1/auth/login", json={"userId": "alice", "password": "secret123"}
        )
        access_token = login.get_json()["data"]["access"]["token"]

        response = client.post("/api/user/v1/auth/refresh", json={"token": access_token})

    assert response.status_code == 403


def test_profile_for_unknown_user_is_404(app: Flask) -> None:
    with app.test_client() as client:
        response = client.get("/api/user/v1/profile", headers={"X-Auth-UserId": "ghost"})

    assert response.status_code == 404
    assert response.get_json()["error"] == "user_not_found"


def test_probes_and_metrics(app: Flask) -> None:
    with app.test_client() as client:
        liveness = client.get("/backend/user/v1/k8s/liveness")
        readiness = client.get("/backend/user/v1/k8s/readiness")
        client.post("/api/user/v1/auth/login", json={"userId": "nobody", "password": "x"})
        metrics = client.get("/backend/user/v1/metrics")

    assert liveness.status_code == 200
    assert readiness.status_code == 200
    assert readiness.get_json()["database"] == "ok"
    assert metrics.status_code == 200
    assert b"user_service_auth_operations_total" in metrics.data
    assert (
        REGISTRY.get_sample_value(
            "user_service_auth_operations_total",
            {"operation": "login", "outcome": "user_not_found"},
        )
        or 0
    ) >= 1


def test_responses_carry_security_headers(app: Flask) -> None:
    with app.test_client() as client:
        response = client.get("/backend/user/v1/k8s/liveness", headers={"X-Request-ID": "req-42"})

    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
