"""Error types raised by services."""

from enum import StrEnum


class FoodLookupErrorKind(StrEnum):
    """Failure categories for food database lookups."""

    NETWORK = "network"
    TIMEOUT = "timeout"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    UNAUTHORIZED = "unauthorized"
    UPSTREAM = "upstream"
    INVALID_RESPONSE = "invalid_response"

    @property
    def retryable(self) -> bool:
        return self not in {
            FoodLookupErrorKind.NOT_FOUND,
            FoodLookupErrorKind.UNAUTHORIZED,
            FoodLookupErrorKind.INVALID_RESPONSE,
        }


class FoodLookupError(Exception):
    """Raised when the food database cannot answer a request."""

    def __init__(
        self,
        kind: FoodLookupErrorKind,
        message: str,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code


class NotFoundError(Exception):
    """Raised when a requested restaurant or dish does not exist."""


class PermissionDeniedError(Exception):
    """Raised when a session may not modify a resource."""
