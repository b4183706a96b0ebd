"""Domain models for authenticated API sessions."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class Role(StrEnum):
    """Account roles, from least to most privileged."""

    USER = "USER"
    VERIFIED = "VERIFIED"
    ADMIN = "ADMIN"


@dataclass(frozen=True)
class AuthSession:
    """A bearer token bound to a user and role."""

    token: str
    user_id: UUID
    role: Role
    issued_at: datetime

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @property
    def can_manage_listings(self) -> bool:
        """Return True for roles allowed to edit restaurant menus."""
        return self.role in {Role.VERIFIED, Role.ADMIN}
