"""Supabase-backed auth session repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from dish_nutrition.domain.sessions import AuthSession, Role
from dish_nutrition.services.sessions import SessionRepository


@dataclass
class SupabaseSessionRepository(SessionRepository):
    """Supabase implementation for bearer-token sessions."""

    client: Client

    def create_session(self, session: AuthSession) -> AuthSession:
        """Insert a session row and return it."""
        response = (
            self.client.table("auth_sessions")
            .insert(
                {
                    "token": session.token,
                    "user_id": str(session.user_id),
                    "role": session.role.value,
                    "issued_at": session.issued_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create session")
        return _parse_session(response.data[0])

    def get_active_session(self, token: str) -> AuthSession | None:
        """Return the session for a token unless it was revoked."""
        response = (
            self.client.table("auth_sessions")
            .select("token, user_id, role, issued_at")
            .eq("token", token)
            .is_("revoked_at", "null")
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_session(response.data[0])

    def revoke_session(self, token: str, revoked_at: datetime) -> bool:
        """Stamp revoked_at on an active session."""
        response = (
            self.client.table("auth_sessions")
            .update({"revoked_at": revoked_at.isoformat()})
            .eq("token", token)
            .is_("revoked_at", "null")
            .execute()
        )
        return bool(response.data)


def _parse_session(row: dict[str, object]) -> AuthSession:
    return AuthSession(
        token=str(row["token"]),
        user_id=UUID(row["user_id"]),
        role=Role(row["role"]),
        issued_at=datetime.fromisoformat(row["issued_at"]),
    )
