# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime, timedelta

from tasktracker.domain.users.entities import IssuedSession, SessionCookie, User
from tasktracker.domain.users.exceptions import PasswordChangedError, SubjectMissingError
from tasktracker.domain.users.repositories import TokenCodec, UserRepository


class SessionIssuer:
    """Turns an authenticated user into a signed token plus cookie instructions.

    Sessions are never stored. A token is honoured only while it is unexpired
    and was issued no earlier than the subject's ``password_changed_at``, which
    is how a password rotation revokes every older session.
    """

    def __init__(
        self,
        *,
        codec: TokenCodec,
        users: UserRepository,
        lifetime: timedelta,
        cookie_name: str = "jwt",
        cookie_secure: bool = False,
        cookie_samesite: str = "Strict",
    ) -> None:
        self._codec = codec
        self._users = users
        self._lifetime = lifetime
        self._cookie_name = cookie_name
        self._cookie_secure = cookie_secure
        self._cookie_samesite = cookie_samesite

    @property
    def cookie_name(self) -> str:
        return self._cookie_name

    def issue(self, user: User, now: datetime) -> IssuedSession:
        token = self._codec.issue(user.id, now)
        cookie = SessionCookie(
            name=self._cookie_name,
            value=token,
            max_age=int(self._lifetime.total_seconds()),
            secure=self._cookie_secure,
            samesite=self._cookie_samesite,
        )
        return IssuedSession(user=user, token=token, cookie=cookie)

    def clear(self) -> SessionCookie:
        return SessionCookie(
            name=self._cookie_name,
            value="",
            max_age=0,
            secure=self._cookie_secure,
            samesite=self._cookie_samesite,
        )

    def authenticate(self, token: str, now: datetime) -> User:
        claims = self._codec.parse(token, now)
        user = self._users.find_by_id(claims.user_id)
        if user is None:
            raise SubjectMissingError()
        if claims.issued_at < user.password_changed_at:
            raise PasswordChangedError()
        return user


__all__ = ["SessionIssuer"]
