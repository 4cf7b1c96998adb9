# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from tasktracker.application.services.session_issuer import SessionIssuer
from tasktracker.domain.users.entities import IssuedSession, User
from tasktracker.domain.users.exceptions import UserAlreadyExistsError
from tasktracker.domain.users.repositories import PasswordHasher, UserRepository
from tasktracker.shared.clock import Clock, utcnow
from tasktracker.shared.logging import logger


class RegisterUserUseCase:
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

    def execute(self, username: str, email: str, password: str) -> IssuedSession:
        existing = self._users.find_by_username_or_email(username, email)
        if existing:
            raise UserAlreadyExistsError()
        hashed = self._password_hasher.hash(password)
        now = self._clock()
        user = User(
            id=0,
            username=username,
            email=email,
            password_hash=hashed,
            password_changed_at=now,
            created_at=now,
        )
        # The store's unique constraints catch a racing duplicate.
        persisted = self._users.add(user)
        logger.info(f"auth.register: created user_id={persisted.id}")
        return self._sessions.issue(persisted, now)
