from __future__ import annotations

from datetime import UTC, datetime
from typing import cast
from unittest.mock import MagicMock

import pytest
from flask import Flask
from sqlalchemy.exc import OperationalError

from gpa_tracker.application.use_cases.users.login_user import LoginUserUseCase
from gpa_tracker.application.use_cases.users.register_user import RegisterUserUseCase
from gpa_tracker.application.use_cases.users.reset_password import ResetPasswordUseCase
from gpa_tracker.domain.users.entities import User
from gpa_tracker.domain.users.exceptions import (
    InvalidCredentialsError,
    InvalidOrExpiredResetTokenError,
    UserAlreadyExistsError,
)
from gpa_tracker.interfaces.http.controllers.auth_controller import AuthController
from gpa_tracker.shared.middleware.error_handler import configure_error_handling

ALICE = User(
    id=1,
    username="alice",
    email="a@x.io",
    password_hash="hash",
    tenant_name="user_alice_data",
    created_at=datetime.now(UTC),
)


@pytest.fixture()
def flask_app() -> Flask:
    app = Flask(__name__)
    configure_error_handling(app)
    return app


def _controller(**overrides) -> AuthController:
    use_cases = {
        "register_use_case": MagicMock(),
        "login_use_case": MagicMock(),
        "request_reset_use_case": MagicMock(),
        "reset_password_use_case": MagicMock(),
    }
    use_cases.update(overrides)
    return AuthController(**use_cases)


def test_register_endpoint_accepts_pass_alias(flask_app: Flask) -> None:
    register_called: dict[str, tuple[str, str, str]] = {}

    class StubRegister:
        def execute(self, username: str, email: str, password: str) -> User:
            register_called["args"] = (username, email, password)
            return ALICE

    controller = _controller(register_use_case=cast(RegisterUserUseCase, StubRegister()))
    flask_app.register_blueprint(controller.as_blueprint())

    with flask_app.test_client() as client:
        response = client.post(
            "/api/register", json={"username": "alice", "email": "a@x.io", "pass": "pw1"}
        )

    assert response.status_code == 201
    assert response.get_json() == {"message": "User created successfully"}
    assert register_called["args"] == ("alice", "a@x.io", "pw1")


def test_register_missing_fields_returns_400(flask_app: Flask) -> None:
    register = MagicMock()
    flask_app.register_blueprint(_controller(register_use_case=register).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/register", json={"email": "a@x.io"})

    assert response.status_code == 400
    payload = response.get_json()
    assert payload["error"] == "validation_error"
    assert "username" in payload["context"]["fields"]
    register.execute.assert_not_called()


def test_register_duplicate_returns_400(flask_app: Flask) -> None:
    register = MagicMock()
    register.execute.side_effect = UserAlreadyExistsError()
    flask_app.register_blueprint(_controller(register_use_case=register).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post(
            "/api/register", json={"username": "alice", "email": "a@x.io", "password": "pw"}
        )

    assert response.status_code == 400
    assert response.get_json() == {"error": "user_already_exists"}


def test_login_returns_token_and_public_profile(flask_app: Flask) -> None:
    class StubLogin:
        def execute(self, username: str, password: str) -> tuple[User, str]:
            return ALICE, "jwt-token"

    controller = _controller(login_use_case=cast(LoginUserUseCase, StubLogin()))
    flask_app.register_blueprint(controller.as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/login", json={"username": "alice", "pass": "pw1"})

    assert response.status_code == 200
    assert response.get_json() == {
        "token": "jwt-token",
        "user": {"id": 1, "username": "alice", "email": "a@x.io"},
    }


def test_login_invalid_credentials_returns_401(flask_app: Flask) -> None:
    login = MagicMock()
    login.execute.side_effect = InvalidCredentialsError()
    flask_app.register_blueprint(_controller(login_use_case=login).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/login", json={"username": "alice", "password": "bad"})

    assert response.status_code == 401
    assert response.get_json() == {"error": "invalid_credentials"}


def test_login_invalid_payload_returns_400(flask_app: Flask) -> None:
    flask_app.register_blueprint(_controller().as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/login", json={"username": "a"})

    assert response.status_code == 400
    assert response.get_json()["error"] == "validation_error"


def test_forgot_password_returns_generic_message(flask_app: Flask) -> None:
    request_reset = MagicMock()
    request_reset.execute.return_value = "generic"
    flask_app.register_blueprint(_controller(request_reset_use_case=request_reset).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/forgot-password", json={"email": "a@x.io"})

    assert response.status_code == 200
    assert response.get_json() == {"message": "generic"}
    request_reset.execute.assert_called_once_with("a@x.io")


def test_reset_password_accepts_new_pass_alias(flask_app: Flask) -> None:
    reset_called: dict[str, tuple[str, str]] = {}

    class StubReset:
        def execute(self, token: str, new_password: str) -> int:
            reset_called["args"] = (token, new_password)
            return 1

    controller = _controller(reset_password_use_case=cast(ResetPasswordUseCase, StubReset()))
    flask_app.register_blueprint(controller.as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/reset-password", json={"token": "abc", "newPass": "pw2"})

    assert response.status_code == 200
    assert response.get_json() == {"message": "Password has been reset!"}
    assert reset_called["args"] == ("abc", "pw2")


def test_reset_password_bad_token_returns_400(flask_app: Flask) -> None:
    reset = MagicMock()
    reset.execute.side_effect = InvalidOrExpiredResetTokenError()
    flask_app.register_blueprint(_controller(reset_password_use_case=reset).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post(
            "/api/reset-password", json={"token": "abc", "newPassword": "pw2"}
        )

    assert response.status_code == 400
    assert response.get_json() == {"error": "invalid_or_expired_reset_token"}


class BrokenStorage:
    def execute(self, *args, **kwargs):
        raise OperationalError("INSERT INTO users", {}, Exception("database is locked"))


@pytest.mark.parametrize(
    ("path", "body", "use_case", "code"),
    [
        (
            "/api/register",
            {"username": "alice", "email": "a@x.io", "password": "pw"},
            "register_use_case",
            "auth_register_failed",
        ),
        (
            "/api/login",
            {"username": "alice", "password": "pw"},
            "login_use_case",
            "auth_login_failed",
        ),
        (
            "/api/forgot-password",
            {"email": "a@x.io"},
            "request_reset_use_case",
            "auth_forgot_password_failed",
        ),
        (
            "/api/reset-password",
            {"token": "abc", "newPassword": "pw2"},
            "reset_password_use_case",
            "auth_reset_password_failed",
        ),
    ],
)
def test_storage_failures_map_to_failed_codes(
    flask_app: Flask, path: str, body: dict, use_case: str, code: str
) -> None:
    controller = _controller(**{use_case: BrokenStorage()})
    flask_app.register_blueprint(controller.as_blueprint())

    with flask_app.test_client() as client:
        response = client.post(path, json=body)

    assert response.status_code == 500
    assert response.get_json() == {"error": code}


def test_login_strips_username(flask_app: Flask) -> None:
    login = MagicMock()
    login.execute.return_value = (ALICE, "jwt-token")
    flask_app.register_blueprint(_controller(login_use_case=login).as_blueprint())

    with flask_app.test_client() as client:
        response = client.post("/api/login", json={"username": "  alice ", "pass": "pw1"})

    assert response.status_code == 200
    login.execute.assert_called_once_with("alice", "pw1")
