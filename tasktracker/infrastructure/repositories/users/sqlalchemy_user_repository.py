# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

from sqlalchemy import or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from tasktracker.domain.users.entities import User as DomainUser
from tasktracker.domain.users.exceptions import UserAlreadyExistsError
from tasktracker.domain.users.repositories import UserRepository
from tasktracker.infrastructure.db.models import User
from tasktracker.infrastructure.unit_of_work import unit_of_work_scope
from tasktracker.shared.clock import ensure_utc


def _to_domain(row: User) -> DomainUser:
    return DomainUser(
        id=row.id,
        username=row.username,
        email=row.email,
        password_hash=row.password_hash,
        password_changed_at=ensure_utc(row.password_changed_at),
        created_at=ensure_utc(row.created_at),
        reset_token_digest=row.reset_token_digest,
        reset_token_expires_at=(
            ensure_utc(row.reset_token_expires_at) if row.reset_token_expires_at else None
        ),
    )


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def find_by_id(self, user_id: int) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.get(User, user_id)
            return _to_domain(row) if row else None

    def find_by_email(self, email: str) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.scalars(select(User).where(User.email == email)).first()
            return _to_domain(row) if row else None

    def find_by_username_or_email(self, username: str, email: str) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.scalars(
                select(User).where(or_(User.username == username, User.email == email))
            ).first()
            return _to_domain(row) if row else None

    def find_by_reset_digest_if_unexpired(self, digest: str, now: datetime) -> DomainUser | None:
        with unit_of_work_scope(self._session_factory) as session:
            row = session.scalars(
                select(User).where(
                    User.reset_token_digest == digest,
                    User.reset_token_expires_at > now,
                )
            ).first()
            return _to_domain(row) if row else None

    def add(self, user: DomainUser) -> DomainUser:
        try:
            with unit_of_work_scope(self._session_factory) as session:
                row = User(
                    username=user.username,
                    email=user.email,
                    password_hash=user.password_hash,
                    password_changed_at=user.password_changed_at,
                    created_at=user.created_at,
                )
                session.add(row)
                session.flush()
                session.refresh(row)
                return _to_domain(row)
        except IntegrityError as exc:
            raise UserAlreadyExistsError() from exc

    def update_reset_fields(
        self, user_id: int, *, digest: str | None, expires_at: datetime | None
    ) -> None:
        if (digest is None) != (expires_at is None):
            raise ValueError("reset digest and expiry must be set or cleared together")
        with unit_of_work_scope(self._session_factory) as session:
            session.execute(
                update(User)
                .where(User.id == user_id)
                .values(reset_token_digest=digest, reset_token_expires_at=expires_at)
            )

    def clear_reset_ticket(self, user_id: int, *, digest: str) -> bool:
        """Drop the ticket only while it is still the one identified by ``digest``."""
        with unit_of_work_scope(self._session_factory) as session:
            result = session.execute(
                update(User)
                .where(User.id == user_id, User.reset_token_digest == digest)
                .values(reset_token_digest=None, reset_token_expires_at=None)
                .execution_options(synchronize_session=False)
            )
            return result.rowcount == 1

    def redeem_reset_token(
        self,
        user_id: int,
        *,
        digest: str,
        password_hash: str,
        changed_at: datetime,
        now: datetime,
    ) -> DomainUser | None:
        # Check-and-clear in one conditional UPDATE: of two racing redemptions
        # only one can still see the digest.
        with unit_of_work_scope(self._session_factory) as session:
            result = session.execute(
                update(User)
                .where(
                    User.id == user_id,
                    User.reset_token_digest == digest,
                    User.reset_token_expires_at > now,
                )
                .values(
                    password_hash=password_hash,
                    password_changed_at=changed_at,
                    reset_token_digest=None,
                    reset_token_expires_at=None,
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                return None
            row = session.get(User, user_id, populate_existing=True)
            return _to_domain(row) if row else None
