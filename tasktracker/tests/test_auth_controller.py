from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest
from flask import Flask

from tasktracker.domain.users.entities import IssuedSession, SessionCookie, User
from tasktracker.domain.users.exceptions import (
    DeliveryFailureError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    TokenMalformedError,
    UserNotFoundError,
)
from tasktracker.interfaces.http.controllers.auth_controller import AuthController
from tasktracker.interfaces.http.session_guard import SessionGuard
from tasktracker.shared.middleware.error_handler import configure_error_handling

NOW = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)


def _user() -> User:
    return User(
        id=1,
        username="alice",
        email="alice@example.com",
        password_hash="hash",
        password_changed_at=NOW,
        created_at=NOW,
    )


def _issued() -> IssuedSession:
    cookie = SessionCookie(name="jwt", value="token123", max_age=86400, secure=False)
    return IssuedSession(user=_user(), token="token123", cookie=cookie)


def _reject(token: str | None) -> User:
    raise TokenMalformedError()


@pytest.fixture()
def use_cases() -> dict[str, MagicMock]:
    return {
        "register_use_case": MagicMock(),
        "login_use_case": MagicMock(),
        "logout_use_case": MagicMock(),
        "forgot_password_use_case": MagicMock(),
        "reset_password_use_case": MagicMock(),
        "check_reset_token_use_case": MagicMock(),
    }


@pytest.fixture()
def flask_app(use_cases: dict[str, MagicMock]) -> Flask:
    app = Flask(__name__)
    configure_error_handling(app)
    controller = AuthController(**use_cases, guard=SessionGuard(_reject))
    app.register_blueprint(controller.as_blueprint())
    return app


def test_register_endpoint_sets_cookie(flask_app: Flask, use_cases) -> None:
    use_cases["register_use_case"].execute.return_value = _issued()

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/register",
            json={"username": "alice", "email": "Alice@Example.com", "password": "password123"},
        )

    assert response.status_code == 201
    use_cases["register_use_case"].execute.assert_called_once_with(
        "alice", "alice@example.com", "password123"
    )
    assert response.get_json()["data"]["user"]["username"] == "alice"
    cookie = response.headers["Set-Cookie"]
    assert cookie.startswith("jwt=token123")
    assert "HttpOnly" in cookie
    assert "SameSite=Strict" in cookie


@pytest.mark.parametrize(
    "payload",
    [
        {"username": "al", "email": "alice@example.com", "password": "password123"},
        {"username": "alice", "email": "not-an-email", "password": "password123"},
        {"username": "alice", "email": "alice@example.com", "password": "short"},
        {"username": "al ice!", "email": "alice@example.com", "password": "password123"},
    ],
)
def test_register_invalid_payload_returns_422(flask_app: Flask, use_cases, payload) -> None:
    with flask_app.test_client() as client:
        response = client.post("/api/auth/register", json=payload)

    assert response.status_code == 422
    assert response.get_json()["error"] == "validation_error"
    use_cases["register_use_case"].execute.assert_not_called()


def test_login_invalid_credentials_returns_401(flask_app: Flask, use_cases) -> None:
    use_cases["login_use_case"].execute.side_effect = InvalidCredentialsError()

    with flask_app.test_client() as client:
        response = client.post(
            "/api/auth/login", json={"email": "alice@example.com", "password": "nope"}
        )

    assert response.status_code == 401
    assert response.get_json() == {"error": "invalid_credentials"}


def test_me_requires_session(flask_app: Flask) -> None:
    with flask_app.test_client() as client:
        response = client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.get_json() == {"error": "authentication_failed"}


def test_me_returns_current_user(use_cases) -> None:
    app = Flask(__name__)
    configure_error_handling(app)
    seen: list[str | None] = []

    def _accept(token: str | None) -> User:
        seen.append(token)
        return _user()

    controller = AuthController(**use_cases, guard=SessionGuard(_accept))
    app.register_blueprint(controller.as_blueprint())

    with app.test_client() as client:
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer abc.def"})

    assert response.status_code == 200
    assert response.get_json()["data"]["user"]["email"] == "alice@example.com"
    assert seen == ["abc.def"]


def test_logout_clears_cookie(flask_app: Flask, use_cases) -> None:
    use_cases["logout_use_case"].execute.return_value = SessionCookie(
        name="jwt", value="", max_age=0, secure=False
    )

    with flask_app.test_client() as client:
        response = client.post("/api/auth/logout")

    assert response.status_code == 200
    assert response.get_json()["status"] == "success"
    assert "Max-Age=0" in response.headers["Set-Cookie"]


def test_forgot_password_unknown_email_returns_404(flask_app: Flask, use_cases) -> None:
    use_cases["forgot_password_use_case"].execute.side_effect = UserNotFoundError()

    with flask_app.test_client() as client:
        response = client.post("/api/auth/forgot-password", json={"email": "nobody@example.com"})

    assert response.status_code == 404
    assert response.get_json() == {"error": "user_not_found"}


def test_forgot_password_delivery_failure_returns_500(flask_app: Flask, use_cases) -> None:
    error = DeliveryFailureError()
    error.__cause__ = RuntimeError("smtp said no to secret-details")
    use_cases["forgot_password_use_case"].execute.side_effect = error

    with flask_app.test_client() as client:
        response = client.post("/api/auth/forgot-password", json={"email": "alice@example.com"})

    assert response.status_code == 500
    assert response.get_json() == {"error": "email_delivery_failed"}
    assert b"secret-details" not in response.data


def test_reset_password_passes_path_token(flask_app: Flask, use_cases) -> None:
    use_cases["reset_password_use_case"].execute.return_value = _issued()

    with flask_app.test_client() as client:
        response = client.patch(
            "/api/auth/reset-password/abc123", json={"password": "newpass1234"}
        )

    assert response.status_code == 200
    use_cases["reset_password_use_case"].execute.assert_called_once_with("abc123", "newpass1234")
    assert response.headers["Set-Cookie"].startswith("jwt=")


def test_check_token_invalid_returns_400(flask_app: Flask, use_cases) -> None:
    use_cases["check_reset_token_use_case"].execute.side_effect = InvalidOrExpiredTokenError()

    with flask_app.test_client() as client:
        response = client.get("/api/auth/check-token/deadbeef")

    assert response.status_code == 400
    assert response.get_json() == {"error": "invalid_or_expired_token"}
