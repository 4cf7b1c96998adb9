# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from tasktracker.domain.users.exceptions import InvalidOrExpiredTokenError
from tasktracker.domain.users.repositories import ResetTokenFactory, UserRepository
from tasktracker.shared.clock import Clock, utcnow


class CheckResetTokenUseCase:
    """Read-only ticket probe used before rendering the reset form."""

    def __init__(
        self,
        *,
        users: UserRepository,
        reset_tokens: ResetTokenFactory,
        clock: Clock = utcnow,
    ) -> None:
        self._users = users
        self._reset_tokens = reset_tokens
        self._clock = clock

    def execute(self, token: str) -> None:
        digest = self._reset_tokens.digest(token)
        user = self._users.find_by_reset_digest_if_unexpired(digest, self._clock())
        if user is None:
            raise InvalidOrExpiredTokenError()
