# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import math
from datetime import timedelta

from tasktracker.domain.users.entities import ResetTicket, User
from tasktracker.domain.users.exceptions import DeliveryFailureError, UserNotFoundError
from tasktracker.domain.users.repositories import MailSender, ResetTokenFactory, UserRepository
from tasktracker.shared.clock import Clock, utcnow
from tasktracker.shared.logging import logger

RESET_MAIL_SUBJECT = "Your password reset token (valid for {minutes} min)"
RESET_MAIL_BODY = (
    "Forgot your password? Click the link below to reset your password:\n\n"
    "{url}\n\n"
    "If you didn't request this, please ignore this email. "
    "The link will expire in {minutes} minutes."
)


def lifetime_in_minutes(lifetime: timedelta) -> int:
    return max(1, math.ceil(lifetime.total_seconds() / 60))


def build_reset_url(frontend_base: str, token: str) -> str:
    return f"{frontend_base.rstrip('/')}/reset-password/{token}"


class ForgotPasswordUseCase:
    """Issues a reset ticket and mails it.

    The ticket is persisted before the mail goes out. If sending fails this
    request's ticket is cleared again, unless a newer one has replaced it,
    so no redeemable ticket exists that the user was never told about.
    """

    def __init__(
        self,
        *,
        users: UserRepository,
        reset_tokens: ResetTokenFactory,
        mailer: MailSender,
        frontend_base: str,
        lifetime: timedelta,
        clock: Clock = utcnow,
    ) -> None:
        self._users = users
        self._reset_tokens = reset_tokens
        self._mailer = mailer
        self._frontend_base = frontend_base
        self._lifetime_minutes = lifetime_in_minutes(lifetime)
        self._clock = clock

    def execute(self, email: str) -> None:
        user = self._users.find_by_email(email)
        if user is None:
            raise UserNotFoundError()

        ticket = self._reset_tokens.generate(self._clock())
        self._users.update_reset_fields(
            user.id, digest=ticket.digest, expires_at=ticket.expires_at
        )
        logger.info(
            f"auth.forgot_password: ticket issued user_id={user.id} "
            f"expires_at={ticket.expires_at.isoformat()}"
        )

        try:
            self._send(user, ticket)
        except Exception as exc:
            logger.error(
                f"auth.forgot_password: delivery failed user_id={user.id} "
                f"cause={type(exc).__name__}: {exc}"
            )
            self._invalidate(user, ticket)
            raise DeliveryFailureError() from exc

        logger.info(f"auth.forgot_password: mail sent user_id={user.id}")

    def _send(self, user: User, ticket: ResetTicket) -> None:
        url = build_reset_url(self._frontend_base, ticket.token)
        self._mailer.send(
            user.email,
            RESET_MAIL_SUBJECT.format(minutes=self._lifetime_minutes),
            RESET_MAIL_BODY.format(url=url, minutes=self._lifetime_minutes),
        )

    def _invalidate(self, user: User, ticket: ResetTicket) -> None:
        # a newer ticket from a concurrent request stays redeemable
        try:
            cleared = self._users.clear_reset_ticket(user.id, digest=ticket.digest)
        except Exception:
            # The delivery error is what the caller sees either way.
            logger.exception(
                f"auth.forgot_password: failed to clear ticket after delivery failure user_id={user.id}"
            )
        else:
            logger.info(
                f"auth.forgot_password: ticket invalidated user_id={user.id} cleared={cleared}"
            )
