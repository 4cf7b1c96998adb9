# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from tasktracker.shared.errors.base import DomainError


class UserAlreadyExistsError(DomainError):
    default_code = "user_already_exists"
    default_status = HTTPStatus.CONFLICT


class InvalidCredentialsError(DomainError):
    default_code = "invalid_credentials"
    default_status = HTTPStatus.UNAUTHORIZED


class UserNotFoundError(DomainError):
    default_code = "user_not_found"
    default_status = HTTPStatus.NOT_FOUND


class InvalidOrExpiredTokenError(DomainError):
    default_code = "invalid_or_expired_token"
    default_status = HTTPStatus.BAD_REQUEST


class DeliveryFailureError(DomainError):
    default_code = "email_delivery_failed"
    default_status = HTTPStatus.INTERNAL_SERVER_ERROR


class MailDeliveryError(Exception):
    """Raised by mail adapters when a message could not be handed off."""


class SessionAuthenticationError(DomainError):
    """Every session failure renders the same way; ``reason`` is for logs only."""

    default_code = "authentication_failed"
    default_status = HTTPStatus.UNAUTHORIZED
    reason = "unauthenticated"

    def log_detail(self) -> str:
        return f"{self.code} reason={self.reason}"


class TokenMalformedError(SessionAuthenticationError):
    reason = "malformed"


class SignatureInvalidError(SessionAuthenticationError):
    reason = "bad_signature"


class TokenExpiredError(SessionAuthenticationError):
    reason = "expired"


class PasswordChangedError(SessionAuthenticationError):
    reason = "password_changed"


class SubjectMissingError(SessionAuthenticationError):
    reason = "subject_missing"
