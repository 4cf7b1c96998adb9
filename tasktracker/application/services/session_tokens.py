# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Signed, self-contained session tokens."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

from itsdangerous import BadData, BadSignature, URLSafeSerializer

from tasktracker.domain.users.entities import SessionClaims
from tasktracker.domain.users.exceptions import (
    SignatureInvalidError,
    TokenExpiredError,
    TokenMalformedError,
)
from tasktracker.domain.users.repositories import TokenCodec


@dataclass(slots=True, frozen=True)
class TokenSettings:
    """Signing material, built once at startup and never mutated."""

    secret_key: str = field(repr=False)
    lifetime: timedelta
    salt: str = "tasktracker.session.v1"

    def __post_init__(self) -> None:
        if not self.secret_key:
            raise ValueError("token secret must not be empty")
        if self.lifetime <= timedelta(0):
            raise ValueError("token lifetime must be positive")


class SignedSessionTokenCodec(TokenCodec):
    """HMAC-signed ``{sub, iat, exp}`` payloads via itsdangerous.

    Timestamps are float epoch seconds so that a session stamped with the
    same clock reading as ``password_changed_at`` compares equal, not earlier.
    """

    def __init__(self, settings: TokenSettings) -> None:
        self._serializer = URLSafeSerializer(
            settings.secret_key,
            salt=settings.salt,
            signer_kwargs={"digest_method": hashlib.sha256},
        )
        self._lifetime = settings.lifetime

    @property
    def lifetime(self) -> timedelta:
        return self._lifetime

    def issue(self, user_id: int, now: datetime) -> str:
        issued_at = now.timestamp()
        payload = {
            "sub": user_id,
            "iat": issued_at,
            "exp": issued_at + self._lifetime.total_seconds(),
        }
        return str(self._serializer.dumps(payload))

    def parse(self, token: str, now: datetime) -> SessionClaims:
        if not isinstance(token, str) or not token.strip():
            raise TokenMalformedError()
        try:
            payload = self._serializer.loads(token)
        except BadSignature as exc:
            # No separator at all means the value was never a signed token.
            if exc.payload is None:
                raise TokenMalformedError() from exc
            raise SignatureInvalidError() from exc
        except BadData as exc:
            raise TokenMalformedError() from exc

        claims = _claims_from_payload(payload)
        if now >= claims.expires_at:
            raise TokenExpiredError()
        return claims


def _claims_from_payload(payload: Any) -> SessionClaims:
    if not isinstance(payload, dict):
        raise TokenMalformedError()
    sub, iat, exp = payload.get("sub"), payload.get("iat"), payload.get("exp")
    if not isinstance(sub, int) or isinstance(sub, bool):
        raise TokenMalformedError()
    if not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in (iat, exp)):
        raise TokenMalformedError()
    try:
        return SessionClaims(
            user_id=sub,
            issued_at=datetime.fromtimestamp(iat, UTC),
            expires_at=datetime.fromtimestamp(exp, UTC),
        )
    except (OverflowError, OSError, ValueError) as exc:
        raise TokenMalformedError() from exc


__all__ = ["SignedSessionTokenCodec", "TokenSettings"]
