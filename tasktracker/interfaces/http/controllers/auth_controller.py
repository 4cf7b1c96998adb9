# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import TypeVar

from flask import Blueprint, Response, g, jsonify, request
from pydantic import BaseModel, ValidationError

from tasktracker.application.use_cases.users.check_reset_token import CheckResetTokenUseCase
from tasktracker.application.use_cases.users.forgot_password import ForgotPasswordUseCase
from tasktracker.application.use_cases.users.login_user import LoginUserUseCase
from tasktracker.application.use_cases.users.logout_user import LogoutUserUseCase
from tasktracker.application.use_cases.users.register_user import RegisterUserUseCase
from tasktracker.application.use_cases.users.reset_password import ResetPasswordUseCase
from tasktracker.domain.users.entities import IssuedSession, SessionCookie, User
from tasktracker.interfaces.http.dto.auth import (
    ForgotPasswordRequestDTO,
    LoginRequestDTO,
    RegisterRequestDTO,
    ResetPasswordRequestDTO,
)
from tasktracker.interfaces.http.session_guard import SessionGuard
from tasktracker.shared.errors.validation import raise_validation_error
from tasktracker.shared.logging import logger
from tasktracker.shared.middleware.rate_limit import rate_limit

_DTO = TypeVar("_DTO", bound=BaseModel)


def _parse(dto: type[_DTO]) -> _DTO:
    try:
        return dto.model_validate(request.get_json(silent=True) or {})
    except ValidationError as exc:
        raise_validation_error(exc)


def _user_payload(user: User) -> dict:
    return {"status": "success", "data": {"user": user.to_public()}}


def _with_cookie(payload: dict, cookie: SessionCookie) -> Response:
    response = jsonify(payload)
    response.set_cookie(**cookie.as_kwargs())
    return response


class AuthController:
    def __init__(
        self,
        *,
        register_use_case: RegisterUserUseCase,
        login_use_case: LoginUserUseCase,
        logout_use_case: LogoutUserUseCase,
        forgot_password_use_case: ForgotPasswordUseCase,
        reset_password_use_case: ResetPasswordUseCase,
        check_reset_token_use_case: CheckResetTokenUseCase,
        guard: SessionGuard,
    ) -> None:
        self._register_use_case = register_use_case
        self._login_use_case = login_use_case
        self._logout_use_case = logout_use_case
        self._forgot_password_use_case = forgot_password_use_case
        self._reset_password_use_case = reset_password_use_case
        self._check_reset_token_use_case = check_reset_token_use_case
        self._guard = guard

    def _session_response(self, issued: IssuedSession, status: int) -> tuple[Response, int]:
        return _with_cookie(_user_payload(issued.user), issued.cookie), status

    @rate_limit(limit=5, window_seconds=60.0)
    def register(self) -> tuple[Response, int]:
        dto = _parse(RegisterRequestDTO)
        issued = self._register_use_case.execute(dto.username, dto.email, dto.password)
        logger.info(f"auth.register: ok user_id={issued.user.id}")
        return self._session_response(issued, 201)

    @rate_limit(limit=10, window_seconds=60.0)
    def login(self) -> tuple[Response, int]:
        dto = _parse(LoginRequestDTO)
        issued = self._login_use_case.execute(dto.email, dto.password)
        logger.info(f"auth.login: ok user_id={issued.user.id}")
        return self._session_response(issued, 200)

    def me(self) -> tuple[Response, int]:
        return jsonify(_user_payload(g.current_user)), 200

    def logout(self) -> tuple[Response, int]:
        cookie = self._logout_use_case.execute()
        payload = {"status": "success", "message": "Logged out successfully"}
        logger.info("auth.logout: ok")
        return _with_cookie(payload, cookie), 200

    @rate_limit(limit=5, window_seconds=60.0)
    def forgot_password(self) -> tuple[Response, int]:
        dto = _parse(ForgotPasswordRequestDTO)
        self._forgot_password_use_case.execute(dto.email)
        return jsonify({"status": "success", "message": "Token sent to email!"}), 200

    def reset_password(self, token: str) -> tuple[Response, int]:
        dto = _parse(ResetPasswordRequestDTO)
        issued = self._reset_password_use_case.execute(token, dto.password)
        logger.info(f"auth.reset_password: ok user_id={issued.user.id}")
        return self._session_response(issued, 200)

    def check_token(self, token: str) -> tuple[Response, int]:
        self._check_reset_token_use_case.execute(token)
        return jsonify({"status": "success", "message": "Token is valid"}), 200

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("auth", __name__, url_prefix="/api/auth")
        bp.add_url_rule("/register", view_func=self.register, methods=["POST"])
        bp.add_url_rule("/login", view_func=self.login, methods=["POST"])
        bp.add_url_rule("/me", view_func=self._guard(self.me), methods=["GET"])
        bp.add_url_rule("/logout", view_func=self.logout, methods=["POST"])
        bp.add_url_rule(
            "/forgot-password", view_func=self.forgot_password, methods=["POST"]
        )
        bp.add_url_rule(
            "/reset-password/<token>", view_func=self.reset_password, methods=["PATCH"]
        )
        bp.add_url_rule("/check-token/<token>", view_func=self.check_token, methods=["GET"])
        return bp
