# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .entities import ResetTicket, SessionClaims, User


class UserRepository(Protocol):
    def find_by_id(self, user_id: int) -> User | None: ...
    def find_by_email(self, email: str) -> User | None: ...
    def find_by_username_or_email(self, username: str, email: str) -> User | None: ...
    def find_by_reset_digest_if_unexpired(self, digest: str, now: datetime) -> User | None: ...
    def add(self, user: User) -> User: ...

    def update_reset_fields(
        self, user_id: int, *, digest: str | None, expires_at: datetime | None
    ) -> None: ...

    def clear_reset_ticket(self, user_id: int, *, digest: str) -> bool: ...

    def redeem_reset_token(
        self,
        user_id: int,
        *,
        digest: str,
        password_hash: str,
        changed_at: datetime,
        now: datetime,
    ) -> User | None: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...


class TokenCodec(Protocol):
    def issue(self, user_id: int, now: datetime) -> str: ...
    def parse(self, token: str, now: datetime) -> SessionClaims: ...


class ResetTokenFactory(Protocol):
    def generate(self, now: datetime) -> ResetTicket: ...
    def digest(self, token: str) -> str: ...
    def matches(self, token: str, digest: str) -> bool: ...


class MailSender(Protocol):
    def send(self, to_address: str, subject: str, body: str) -> None: ...
