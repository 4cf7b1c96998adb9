# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from tasktracker.domain.exceptions import InvariantViolation


@dataclass(slots=True, frozen=True)
class User:

    id: int
    username: str
    email: str
    password_hash: str = field(repr=False)
    password_changed_at: datetime
    created_at: datetime
    reset_token_digest: str | None = field(default=None, repr=False)
    reset_token_expires_at: datetime | None = None

    def __post_init__(self) -> None:
        if (self.reset_token_digest is None) != (self.reset_token_expires_at is None):
            raise InvariantViolation(
                "reset token digest and expiry must be set or cleared together",
                field="reset_token",
            )

    def to_public(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(slots=True, frozen=True)
class SessionClaims:

    user_id: int
    issued_at: datetime
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class ResetTicket:
    """A freshly minted reset secret; only ``digest`` is ever persisted."""

    token: str = field(repr=False)
    digest: str = field(repr=False)
    expires_at: datetime


@dataclass(slots=True, frozen=True)
class SessionCookie:
    """Instructions for the HTTP boundary to set or clear the session cookie."""

    name: str
    value: str = field(repr=False)
    max_age: int
    secure: bool
    httponly: bool = True
    samesite: str = "Strict"
    path: str = "/"

    def as_kwargs(self) -> dict[str, Any]:
        return {
            "key": self.name,
            "value": self.value,
            "max_age": self.max_age,
            "secure": self.secure,
            "httponly": self.httponly,
            "samesite": self.samesite,
            "path": self.path,
        }


@dataclass(slots=True, frozen=True)
class IssuedSession:

    user: User
    token: str = field(repr=False)
    cookie: SessionCookie
