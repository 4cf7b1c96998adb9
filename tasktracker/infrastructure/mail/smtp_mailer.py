# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

import smtplib
from email.message import EmailMessage

from tasktracker.domain.users.exceptions import MailDeliveryError
from tasktracker.domain.users.repositories import MailSender
from tasktracker.shared.config.settings import MailConfig
from tasktracker.shared.logging import logger


class SmtpMailSender(MailSender):
    """Plain-text mail over SMTP, one attempt per message."""

    def __init__(self, config: MailConfig) -> None:
        self._config = config

    def _build(self, to_address: str, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self._config.sender
        message["To"] = to_address
        message["Subject"] = subject
        message.set_content(body)
        return message

    def send(self, to_address: str, subject: str, body: str) -> None:
        config = self._config
        message = self._build(to_address, subject, body)
        try:
            with smtplib.SMTP(config.host, config.port, timeout=config.timeout) as client:
                if config.use_tls:
                    client.starttls()
                if config.username:
                    client.login(config.username, config.password or "")
                client.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.warning(f"mail.smtp: delivery failed host={config.host} error={type(exc).__name__}")
            raise MailDeliveryError(str(exc)) from exc
        logger.info(f"mail.smtp: sent to={to_address}")


__all__ = ["SmtpMailSender"]
