# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import secrets

from tasktracker.application.services.session_issuer import SessionIssuer
from tasktracker.domain.users.entities import IssuedSession
from tasktracker.domain.users.exceptions import InvalidCredentialsError
from tasktracker.domain.users.repositories import PasswordHasher, UserRepository
from tasktracker.shared.clock import Clock, utcnow
from tasktracker.shared.logging import logger


class LoginUserUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        sessions: SessionIssuer,
        password_hasher: PasswordHasher,
        clock: Clock = utcnow,
    ) -> None:
        self._users = users
        self._sessions = sessions
        self._password_hasher = password_hasher
        self._clock = clock
        self._dummy_hash: str | None = None

    def _decoy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = self._password_hasher.hash(secrets.token_urlsafe(16))
        return self._dummy_hash

    def execute(self, email: str, password: str) -> IssuedSession:
        user = self._users.find_by_email(email)
        if user is None:
            # decoy verify, same cost as a real check
            self._password_hasher.verify(password, self._decoy_hash())
            logger.info("auth.login: rejected (unknown account)")
            raise InvalidCredentialsError()

        if not self._password_hasher.verify(password, user.password_hash):
            logger.info(f"auth.login: rejected (bad password) user_id={user.id}")
            raise InvalidCredentialsError()

        logger.info(f"auth.login: ok user_id={user.id}")
        return self._sessions.issue(user, self._clock())
