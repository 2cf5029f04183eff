from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import cast
from unittest.mock import MagicMock

import pytest
from flask import Flask

from user_service.application.services.token_codec import JoseTokenCodec
from user_service.application.use_cases.accounts import (
    GetProfileUseCase,
    LoginUseCase,
    RegisterAccountUseCase,
)
from user_service.domain.accounts.entities import Account, ProfileView
from user_service.domain.accounts.exceptions import (
    DuplicateUserError,
    InvalidCredentialsError,
    UserNotFoundError,
)
from user_service.interfaces.http.controllers.auth_controller import AuthController
from user_service.interfaces.http.controllers.profile_controller import ProfileController
from user_service.shared.middleware.error_handler import configure_error_handling
from user_service.shared.result import Err, Ok


@pytest.fixture()
def flask_app() -> Flask:
    app = Flask(__name__)
    configure_error_handling(app)
    return app


def _controller(**overrides: object) -> AuthController:
    options: dict[str, object] = {
        "register_use_case": MagicMock(),
        "login_use_case": MagicMock(),
        "refresh_use_case": MagicMock(),
        "revoke_use_case": MagicMock(),
    }
    options.update(overrides)
    return AuthController(**options)  # type: ignore[arg-type]


def test_register_endpoint_passes_fields(flask_app: Flask) -> None:
    register_called: dict[str, tuple[str, str, str]] = {}

    class StubRegister:
        def execute(self, user_id: str, password: str, phone_number: str) -> Ok[Account]:
            register_called["args"] = (user_id, password, phone_number)
            return Ok(
                Account(
                    id=1,
                    user_id=user_id,
                    password_hash="hash",
                    phone_number=phone_number,
                    created_at=datetime.now(UTC),
                )
            )

    controller = _controller(register_use_case=cast(RegisterAccountUseCase, StubRegister()))
    flask_app.register_blueprint(controller.as_blueprint())

    with flask_app.test_client() as client:
        response = client.post(
            "/api/user/v1/auth/register",
            json={"userId": "alice", "password": "secret123", "phoneNumber": "010-1234-5678"},
        )

    assert response.status_code == 200
    assert response.get_json() == {"ok": True}
    assert register_called["args"] == ("alice", "secret123", "010-1234-5678")


def test_register_duplicate_returns_409(flask_app: Flask) -> None:
    register = MagicMock()
    register.execute.return_value = Err(DuplicateUserError())
    flask_app.register_blueprint(_controller(register_use_case=register).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post(
            "/api/user/v1/auth/register",
            json={"userId": "alice", "password": "secret123", "phoneNumber": "010-1234-5678"},
        )

    assert response.status_code == 409
    assert response.get_json()["error"] == "duplicate_user"


@pytest.mark.parametrize(
    "payload",
    [
        {"userId": "a", "password": "secret123", "phoneNumber": "010-1234-5678"},
        {"userId": "alice", "password": "short", "phoneNumber": "010-1234-5678"},
        {"userId": "alice", "password": "secret123", "phoneNumber": "call me"},
        {"userId": "al ice", "password": "secret123", "phoneNumber": "010-1234-5678"},
        {"password": "secret123"},
    ],
)
def test_register_invalid_payload_returns_422(flask_app: Flask, payload: dict) -> None:
    register = MagicMock()
    flask_app.register_blueprint(_controller(register_use_case=register).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/user/v1/auth/register", json=payload)

    assert response.status_code == 422
    assert response.get_json()["error"] == "validation_error"
    register.execute.assert_not_called()


def test_login_returns_token_pair_and_uses_device_header(flask_app: Flask) -> None:
    codec = JoseTokenCodec(secret="controller-secret")
    login = MagicMock()
    login.execute.side_effect = lambda user_id, password, device: Ok(
        codec.issue_access_refresh_pair(user_id, device)
    )
    flask_app.register_blueprint(
        _controller(login_use_case=cast(LoginUseCase, login)).as_blueprint()
    )

    with flask_app.test_client() as client:
        response = client.post(
            "/api/user/v1/auth/login",
            json={"userId": "bob", "password": "rightpw"},
            headers={"X-Client-Device": "APP"},
        )

    assert response.status_code == 200
    body = response.get_json()
    assert body["ok"] is True
    assert body["data"]["access"]["expiresIn"] == 30 * 60
    assert body["data"]["refresh"]["expiresIn"] == 14 * 24 * 60 * 60
    assert codec.validate(body["data"]["access"]["token"]) == "bob"
    login.execute.assert_called_once_with("bob", "rightpw", "APP")


def test_login_defaults_device_class(flask_app: Flask) -> None:
    login = MagicMock()
    login.execute.return_value = Err(InvalidCredentialsError())
    flask_app.register_blueprint(
        _controller(login_use_case=login, default_device_class="WEB").as_blueprint()
    )

    with flask_app.test_client() as client:
        response = client.post(
            "/api/user/v1/auth/login", json={"userId": "bob", "password": "wrongpw"}
        )

    assert response.status_code == 401
    assert response.get_json()["error"] == "invalid_credentials"
    login.execute.assert_called_once_with("bob", "wrongpw", "WEB")


def test_login_unknown_user_is_404_by_default(flask_app: Flask) -> None:
    login = MagicMock()
    login.execute.return_value = Err(UserNotFoundError())
    flask_app.register_blueprint(_controller(login_use_case=login).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/user/v1/auth/login", json={"userId": "ghost", "password": "x"})

    assert response.status_code == 404
    assert response.get_json()["error"] == "user_not_found"


def test_login_unknown_user_is_opaque_when_enabled(flask_app: Flask) -> None:
    login = MagicMock()
    login.execute.return_value = Err(UserNotFoundError())
    flask_app.register_blueprint(
        _controller(login_use_case=login, opaque_login_errors=True).as_blueprint()
    )

    with flask_app.test_client() as client:
        response = client.post("/api/user/v1/auth/login", json={"userId": "ghost", "password": "x"})

    assert response.status_code == 401
    assert response.get_json()["error"] == "invalid_credentials"


def test_refresh_returns_access_token(flask_app: Flask) -> None:
    codec = JoseTokenCodec(secret="controller-secret", access_ttl=timedelta(minutes=5))
    refresh = MagicMock()
    refresh.execute.return_value = Ok(codec.issue_access_token("bob", "WEB"))
    flask_app.register_blueprint(_controller(refresh_use_case=refresh).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/user/v1/auth/refresh", json={"token": "refresh-token"})

    assert response.status_code == 200
    data = response.get_json()["data"]
    assert data["expiresIn"] == 300
    assert codec.validate(data["token"]) == "bob"
    refresh.execute.assert_called_once_with("refresh-token")


def test_refresh_without_token_is_422(flask_app: Flask) -> None:
    flask_app.register_blueprint(_controller().as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/user/v1/auth/refresh", json={})

    assert response.status_code == 422
    assert "token" in response.get_json()["context"]["fields"]


def test_unexpected_exception_is_generic_500(flask_app: Flask) -> None:
    refresh = MagicMock()
    refresh.execute.side_effect = RuntimeError("database exploded at host db-1")
    flask_app.register_blueprint(_controller(refresh_use_case=refresh).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/user/v1/auth/refresh", json={"token": "t"})

    assert response.status_code == 500
    assert response.get_json() == {"error": "internal_error"}


def test_profile_requires_user_id_header(flask_app: Flask) -> None:
    get_profile = MagicMock()
    controller = ProfileController(get_profile_use_case=cast(GetProfileUseCase, get_profile))
    flask_app.register_blueprint(controller.as_blueprint())

    with flask_app.test_client() as client:
        response = client.get("/api/user/v1/profile")

    assert response.status_code == 400
    body = response.get_json()
    assert body["error"] == "missing_context"
    assert body["context"] == {"header": "X-Auth-UserId"}
    get_profile.execute.assert_not_called()


def test_profile_returns_projection(flask_app: Flask) -> None:
    created = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)
    get_profile = MagicMock()
    get_profile.execute.return_value = Ok(
        ProfileView(user_id="alice", phone_number="010-1234-5678", created_at=created)
    )
    controller = ProfileController(get_profile_use_case=get_profile)
    flask_app.register_blueprint(controller.as_blueprint())

    with flask_app.test_client() as client:
        response = client.get("/api/user/v1/profile", headers={"X-Auth-UserId": "alice"})

    assert response.status_code == 200
    assert response.get_json() == {
        "ok": True,
        "data": {
            "userId": "alice",
            "phoneNumber": "010-1234-5678",
            "createdAt": created.isoformat(),
        },
    }
    get_profile.execute.assert_called_once_with("alice")
