# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from tasktracker.application.services.session_issuer import SessionIssuer
from tasktracker.domain.users.entities import User
from tasktracker.domain.users.exceptions import SessionAuthenticationError, TokenMalformedError
from tasktracker.shared.clock import Clock, utcnow
from tasktracker.shared.logging import logger


class AuthenticateSessionUseCase:
    def __init__(self, *, sessions: SessionIssuer, clock: Clock = utcnow) -> None:
        self._sessions = sessions
        self._clock = clock

    def execute(self, token: str | None) -> User:
        if not token:
            raise TokenMalformedError()
        try:
            return self._sessions.authenticate(token, self._clock())
        except SessionAuthenticationError as exc:
            logger.info(f"auth.session: rejected reason={exc.reason}")
            raise
