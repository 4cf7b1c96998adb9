"""Use-case for ending a browser session."""

from __future__ import annotations

from tasktracker.application.services.session_issuer import SessionIssuer
from tasktracker.domain.users.entities import SessionCookie


class LogoutUserUseCase:
    def __init__(self, *, sessions: SessionIssuer) -> None:
        self._sessions = sessions

    def execute(self) -> SessionCookie:
        # Stateless: only the client's cookie is cleared, the token itself stays valid until expiry.
        return self._sessions.clear()
