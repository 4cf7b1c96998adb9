# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import wraps

from flask import g, request

from tasktracker.domain.users.entities import User


class SessionGuard:
    """Wraps a view so it only runs for a valid session.

    The token is read from the session cookie first and from an
    ``Authorization: Bearer`` header otherwise. Rejections propagate as
    ``SessionAuthenticationError`` and render as 401.
    """

    def __init__(self, authenticate: Callable[[str | None], User], *, cookie_name: str = "jwt") -> None:
        self._authenticate = authenticate
        self._cookie_name = cookie_name

    def _token(self) -> str | None:
        token = request.cookies.get(self._cookie_name)
        if token:
            return token
        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith("Bearer "):
            return auth_header[7:].strip() or None
        return None

    def __call__(self, view: Callable) -> Callable:
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = self._authenticate(self._token())
            g.user_id = user.id
            g.current_user = user
            return view(*args, **kwargs)

        return wrapper


__all__ = ["SessionGuard"]
