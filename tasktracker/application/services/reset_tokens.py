# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import hashlib
import hmac
import secrets
from datetime import datetime, timedelta

from tasktracker.domain.users.entities import ResetTicket
from tasktracker.domain.users.repositories import ResetTokenFactory

MIN_TOKEN_BYTES = 16


class ResetTokenGenerator(ResetTokenFactory):
    """Single-use reset secrets.

    Only the SHA-256 hex digest of the random value is stored; it serves
    as the lookup key.
    """

    def __init__(self, *, lifetime: timedelta, nbytes: int = 32) -> None:
        if nbytes < MIN_TOKEN_BYTES:
            raise ValueError(f"reset tokens need at least {MIN_TOKEN_BYTES} random bytes")
        self._lifetime = lifetime
        self._nbytes = nbytes

    @property
    def lifetime(self) -> timedelta:
        return self._lifetime

    def generate(self, now: datetime) -> ResetTicket:
        token = secrets.token_hex(self._nbytes)
        return ResetTicket(
            token=token,
            digest=self.digest(token),
            expires_at=now + self._lifetime,
        )

    def digest(self, token: str) -> str:
        return hashlib.sha256(token.encode("utf-8")).hexdigest()

    def matches(self, token: str, digest: str) -> bool:
        return hmac.compare_digest(self.digest(token), digest)


__all__ = ["ResetTokenGenerator"]
