from __future__ import annotations

import os
import tempfile
from dataclasses import replace
from datetime import UTC, datetime, timedelta

_TMP_DIR = tempfile.mkdtemp(prefix="tasktracker-tests-")
os.environ["APP_ENV"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key-for-the-suite-0123456789"
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["LOG_FILE"] = os.path.join(_TMP_DIR, "app.log")
os.environ["ENABLE_RATE_LIMIT"] = "0"
os.environ["EMAIL_USE_TLS"] = "0"

import pytest  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from tasktracker.application.services.reset_tokens import ResetTokenGenerator  # noqa: E402
from tasktracker.application.services.session_issuer import SessionIssuer  # noqa: E402
from tasktracker.application.services.session_tokens import (  # noqa: E402
    SignedSessionTokenCodec,
    TokenSettings,
)
from tasktracker.domain.users.entities import User  # noqa: E402
from tasktracker.domain.users.exceptions import (  # noqa: E402
    MailDeliveryError,
    UserAlreadyExistsError,
)
from tasktracker.domain.users.repositories import (  # noqa: E402
    MailSender,
    PasswordHasher,
    UserRepository,
)
from tasktracker.infrastructure.db import Base  # noqa: E402
from tasktracker.infrastructure.db import models  # noqa: E402,F401


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[int, User] = {}
        self._seq = 1
        self.fail_on_clear = False

    def find_by_id(self, user_id: int) -> User | None:
        return self._users.get(user_id)

    def find_by_email(self, email: str) -> User | None:
        return next((u for u in self._users.values() if u.email == email), None)

    def find_by_username_or_email(self, username: str, email: str) -> User | None:
        return next(
            (u for u in self._users.values() if u.username == username or u.email == email),
            None,
        )

    def find_by_reset_digest_if_unexpired(self, digest: str, now: datetime) -> User | None:
        for user in self._users.values():
            if (
                user.reset_token_digest == digest
                and user.reset_token_expires_at is not None
                and user.reset_token_expires_at > now
            ):
                return user
        return None

    def add(self, user: User) -> User:
        if self.find_by_username_or_email(user.username, user.email):
            raise UserAlreadyExistsError()
        new_user = replace(user, id=self._seq)
        self._seq += 1
        self._users[new_user.id] = new_user
        return new_user

    def update_reset_fields(
        self, user_id: int, *, digest: str | None, expires_at: datetime | None
    ) -> None:
        user = self._users[user_id]
        self._users[user_id] = replace(
            user, reset_token_digest=digest, reset_token_expires_at=expires_at
        )

    def clear_reset_ticket(self, user_id: int, *, digest: str) -> bool:
        if self.fail_on_clear:
            raise RuntimeError("store went away")
        user = self._users[user_id]
        if user.reset_token_digest != digest:
            return False
        self._users[user_id] = replace(user, reset_token_digest=None, reset_token_expires_at=None)
        return True

    def redeem_reset_token(
        self,
        user_id: int,
        *,
        digest: str,
        password_hash: str,
        changed_at: datetime,
        now: datetime,
    ) -> User | None:
        user = self._users.get(user_id)
        if (
            user is None
            or user.reset_token_digest != digest
            or user.reset_token_expires_at is None
            or user.reset_token_expires_at <= now
        ):
            return None
        updated = replace(
            user,
            password_hash=password_hash,
            password_changed_at=changed_at,
            reset_token_digest=None,
            reset_token_expires_at=None,
        )
        self._users[user_id] = updated
        return updated


class DeterministicHasher(PasswordHasher):
    def hash(self, password: str) -> str:
        return f"hashed:{password}"

    def verify(self, password: str, hashed: str) -> bool:
        return hashed == f"hashed:{password}"


class FakeClock:
    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class RecordingMailer(MailSender):
    def __init__(self) -> None:
        self.sent: list[tuple[str, str, str]] = []

    def send(self, to_address: str, subject: str, body: str) -> None:
        self.sent.append((to_address, subject, body))


class FailingMailer(MailSender):
    def send(self, to_address: str, subject: str, body: str) -> None:
        raise MailDeliveryError("connection refused")


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture()
def hasher() -> DeterministicHasher:
    return DeterministicHasher()


@pytest.fixture()
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture()
def failing_mailer() -> FailingMailer:
    return FailingMailer()


@pytest.fixture()
def token_settings() -> TokenSettings:
    return TokenSettings(secret_key="unit-test-secret", lifetime=timedelta(days=1))


@pytest.fixture()
def codec(token_settings: TokenSettings) -> SignedSessionTokenCodec:
    return SignedSessionTokenCodec(token_settings)


@pytest.fixture()
def sessions(
    codec: SignedSessionTokenCodec, users: InMemoryUserRepository
) -> SessionIssuer:
    return SessionIssuer(codec=codec, users=users, lifetime=codec.lifetime)


@pytest.fixture()
def reset_tokens() -> ResetTokenGenerator:
    return ResetTokenGenerator(lifetime=timedelta(minutes=10))


@pytest.fixture()
def sqlite_session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
