from __future__ import annotations

import hashlib
import re
from datetime import timedelta

import pytest

from tasktracker.application.use_cases.users.authenticate_session import (
    AuthenticateSessionUseCase,
)
from tasktracker.application.use_cases.users.check_reset_token import CheckResetTokenUseCase
from tasktracker.application.use_cases.users.forgot_password import (
    ForgotPasswordUseCase,
    build_reset_url,
    lifetime_in_minutes,
)
from tasktracker.application.use_cases.users.register_user import RegisterUserUseCase
from tasktracker.application.use_cases.users.reset_password import ResetPasswordUseCase
from tasktracker.domain.users.exceptions import (
    DeliveryFailureError,
    InvalidOrExpiredTokenError,
    MailDeliveryError,
    PasswordChangedError,
    UserNotFoundError,
)

_TOKEN_RE = re.compile(r"/reset-password/([0-9a-f]{64})")


@pytest.fixture()
def alice(users, sessions, hasher, clock):
    register = RegisterUserUseCase(
        users=users, sessions=sessions, password_hasher=hasher, clock=clock
    )
    return register.execute("alice", "alice@example.com", "password123")


def _forgot(users, reset_tokens, mailer, clock) -> ForgotPasswordUseCase:
    return ForgotPasswordUseCase(
        users=users,
        reset_tokens=reset_tokens,
        mailer=mailer,
        frontend_base="http://localhost:3000/",
        lifetime=timedelta(minutes=10),
        clock=clock,
    )


@pytest.fixture()
def reset(users, reset_tokens, hasher, sessions, clock) -> ResetPasswordUseCase:
    return ResetPasswordUseCase(
        users=users,
        reset_tokens=reset_tokens,
        password_hasher=hasher,
        sessions=sessions,
        clock=clock,
    )


def _mailed_token(mailer) -> str:
    _, _, body = mailer.sent[-1]
    match = _TOKEN_RE.search(body)
    assert match is not None
    return match.group(1)


def test_build_reset_url_joins_cleanly() -> None:
    assert build_reset_url("https://app.test/", "abc") == "https://app.test/reset-password/abc"


def test_forgot_password_persists_digest_and_mails_secret(
    alice, users, reset_tokens, mailer, clock
) -> None:
    _forgot(users, reset_tokens, mailer, clock).execute("alice@example.com")

    to_address, subject, body = mailer.sent[0]
    token = _mailed_token(mailer)
    stored = users.find_by_id(alice.user.id)
    assert to_address == "alice@example.com"
    assert "10 min" in subject
    assert "http://localhost:3000/reset-password/" in body
    assert stored.reset_token_digest == hashlib.sha256(token.encode()).hexdigest()
    assert stored.reset_token_digest != token
    assert stored.reset_token_expires_at == clock.now + reset_tokens.lifetime


def test_forgot_password_unknown_email(users, reset_tokens, mailer, clock) -> None:
    with pytest.raises(UserNotFoundError):
        _forgot(users, reset_tokens, mailer, clock).execute("nobody@example.com")

    assert mailer.sent == []


def test_delivery_failure_clears_ticket(
    alice, users, reset_tokens, failing_mailer, clock
) -> None:
    with pytest.raises(DeliveryFailureError) as exc_info:
        _forgot(users, reset_tokens, failing_mailer, clock).execute("alice@example.com")

    stored = users.find_by_id(alice.user.id)
    assert stored.reset_token_digest is None
    assert stored.reset_token_expires_at is None
    assert exc_info.value.to_dict() == {"error": "email_delivery_failed"}


def test_delivery_failure_reported_even_when_cleanup_fails(
    alice, users, reset_tokens, failing_mailer, clock
) -> None:
    users.fail_on_clear = True

    with pytest.raises(DeliveryFailureError):
        _forgot(users, reset_tokens, failing_mailer, clock).execute("alice@example.com")


def test_failed_delivery_keeps_newer_concurrent_ticket(
    alice, users, reset_tokens, mailer, clock
) -> None:
    class SlowFailingMailer:
        """Lets a second request issue and mail its ticket, then fails."""

        def send(self, to_address: str, subject: str, body: str) -> None:
            _forgot(users, reset_tokens, mailer, clock).execute("alice@example.com")
            raise MailDeliveryError("connection reset")

    with pytest.raises(DeliveryFailureError):
        _forgot(users, reset_tokens, SlowFailingMailer(), clock).execute("alice@example.com")

    newer = _mailed_token(mailer)
    stored = users.find_by_reset_digest_if_unexpired(reset_tokens.digest(newer), clock.now)
    assert stored is not None
    assert stored.id == alice.user.id


@pytest.mark.parametrize(
    ("lifetime", "minutes"),
    [
        (timedelta(minutes=10), 10),
        (timedelta(seconds=90), 2),
        (timedelta(seconds=60), 1),
    ],
)
def test_lifetime_in_minutes_rounds_up(lifetime: timedelta, minutes: int) -> None:
    assert lifetime_in_minutes(lifetime) == minutes


def test_mail_never_understates_short_lifetimes(alice, users, reset_tokens, mailer, clock) -> None:
    forgot = ForgotPasswordUseCase(
        users=users,
        reset_tokens=reset_tokens,
        mailer=mailer,
        frontend_base="http://localhost:3000",
        lifetime=timedelta(seconds=90),
        clock=clock,
    )

    forgot.execute("alice@example.com")

    _, subject, body = mailer.sent[0]
    assert "2 min" in subject
    assert "expire in 2 minutes" in body


def test_reset_password_rotates_and_issues_session(
    alice, users, reset_tokens, mailer, reset, sessions, clock
) -> None:
    _forgot(users, reset_tokens, mailer, clock).execute("alice@example.com")
    token = _mailed_token(mailer)
    clock.advance(minutes=1)

    issued = reset.execute(token, "newpass1234")

    stored = users.find_by_id(alice.user.id)
    assert stored.password_hash == "hashed:newpass1234"
    assert stored.password_changed_at == clock.now
    assert stored.reset_token_digest is None
    assert stored.reset_token_expires_at is None
    authenticate = AuthenticateSessionUseCase(sessions=sessions, clock=clock)
    assert authenticate.execute(issued.token).id == alice.user.id
    with pytest.raises(PasswordChangedError):
        authenticate.execute(alice.token)


def test_reset_ticket_is_single_use(
    alice, users, reset_tokens, mailer, reset, clock
) -> None:
    _forgot(users, reset_tokens, mailer, clock).execute("alice@example.com")
    token = _mailed_token(mailer)
    reset.execute(token, "newpass1234")

    with pytest.raises(InvalidOrExpiredTokenError):
        reset.execute(token, "another-pass")

    assert users.find_by_id(alice.user.id).password_hash == "hashed:newpass1234"


def test_expired_ticket_is_rejected(
    alice, users, reset_tokens, mailer, reset, clock
) -> None:
    _forgot(users, reset_tokens, mailer, clock).execute("alice@example.com")
    token = _mailed_token(mailer)
    clock.advance(minutes=10)

    with pytest.raises(InvalidOrExpiredTokenError):
        reset.execute(token, "newpass1234")

    assert users.find_by_id(alice.user.id).password_hash == "hashed:password123"


def test_unknown_ticket_is_rejected(alice, reset) -> None:
    with pytest.raises(InvalidOrExpiredTokenError):
        reset.execute("0" * 64, "newpass1234")


def test_newer_request_supersedes_older_ticket(
    alice, users, reset_tokens, mailer, reset, clock
) -> None:
    forgot = _forgot(users, reset_tokens, mailer, clock)
    forgot.execute("alice@example.com")
    first = _mailed_token(mailer)
    forgot.execute("alice@example.com")
    second = _mailed_token(mailer)

    with pytest.raises(InvalidOrExpiredTokenError):
        reset.execute(first, "newpass1234")
    reset.execute(second, "newpass1234")


def test_check_token_is_read_only(alice, users, reset_tokens, mailer, clock) -> None:
    _forgot(users, reset_tokens, mailer, clock).execute("alice@example.com")
    token = _mailed_token(mailer)
    check = CheckResetTokenUseCase(users=users, reset_tokens=reset_tokens, clock=clock)

    check.execute(token)
    check.execute(token)

    assert users.find_by_id(alice.user.id).reset_token_digest is not None


def test_check_token_rejects_expired(alice, users, reset_tokens, mailer, clock) -> None:
    _forgot(users, reset_tokens, mailer, clock).execute("alice@example.com")
    token = _mailed_token(mailer)
    clock.advance(minutes=11)
    check = CheckResetTokenUseCase(users=users, reset_tokens=reset_tokens, clock=clock)

    with pytest.raises(InvalidOrExpiredTokenError):
        check.execute(token)
