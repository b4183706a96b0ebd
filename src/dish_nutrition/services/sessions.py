"""Bearer-token session lifecycle."""

import logging
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from dish_nutrition.domain.sessions import AuthSession, Role

_logger = logging.getLogger(__name__)


class SessionRepository(Protocol):
    """Persistence interface for auth sessions."""

    def create_session(self, session: AuthSession) -> AuthSession:
        """Persist a new session and return it."""

    def get_active_session(self, token: str) -> AuthSession | None:
        """Return the session for a token unless it was revoked."""

    def revoke_session(self, token: str, revoked_at: datetime) -> bool:
        """Mark a session revoked; return False when it was not active."""


@dataclass
class SessionService:
    """Issues, resolves and revokes API sessions."""

    repository: SessionRepository
    token_bytes: int = 32

    def issue(self, user_id: UUID, role: Role) -> AuthSession:
        """Create a session for a user who has just logged in."""
        session = AuthSession(
            token=secrets.token_urlsafe(self.token_bytes),
            user_id=user_id,
            role=role,
            issued_at=datetime.now(tz=UTC),
        )
        created = self.repository.create_session(session)
        _logger.info("Issued session for user_id=%s role=%s", user_id, role)
        return created

    def resolve(self, token: str | None) -> AuthSession | None:
        """Load the session for a bearer token, if it is still active."""
        if not token:
            return None
        return self.repository.get_active_session(token)

    def revoke(self, token: str) -> bool:
        """End a session on logout."""
        revoked = self.repository.revoke_session(token, datetime.now(tz=UTC))
        if revoked:
            _logger.info("Revoked session")
        return revoked
