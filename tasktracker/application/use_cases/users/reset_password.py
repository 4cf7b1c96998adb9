# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from tasktracker.application.services.session_issuer import SessionIssuer
from tasktracker.domain.users.entities import IssuedSession
from tasktracker.domain.users.exceptions import InvalidOrExpiredTokenError
from tasktracker.domain.users.repositories import (
    PasswordHasher,
    ResetTokenFactory,
    UserRepository,
)
from tasktracker.shared.clock import Clock, utcnow
from tasktracker.shared.logging import logger


class ResetPasswordUseCase:
    def __init__(
        self,
        *,
        users: UserRepository,
        reset_tokens: ResetTokenFactory,
        password_hasher: PasswordHasher,
        sessions: SessionIssuer,
        clock: Clock = utcnow,
    ) -> None:
        self._users = users
        self._reset_tokens = reset_tokens
        self._password_hasher = password_hasher
        self._sessions = sessions
        self._clock = clock

    def execute(self, token: str, new_password: str) -> IssuedSession:
        digest = self._reset_tokens.digest(token)
        user = self._users.find_by_reset_digest_if_unexpired(digest, self._clock())
        if user is None or not self._reset_tokens.matches(token, user.reset_token_digest or ""):
            logger.info("auth.reset_password: rejected ticket")
            raise InvalidOrExpiredTokenError()

        password_hash = self._password_hasher.hash(new_password)

        # One clock reading stamps both the rotation and the new session, so
        # the session is not older than the watermark it is checked against.
        now = self._clock()
        updated = self._users.redeem_reset_token(
            user.id,
            digest=digest,
            password_hash=password_hash,
            changed_at=now,
            now=now,
        )
        if updated is None:
            logger.info(f"auth.reset_password: ticket already redeemed or expired user_id={user.id}")
            raise InvalidOrExpiredTokenError()

        logger.info(f"auth.reset_password: password rotated user_id={updated.id}")
        return self._sessions.issue(updated, now)
