"""Error taxonomy for the core operations.

Every precondition failure has its own type so the HTTP layer can pick a
status code without parsing messages. Only StorageFailure is transient.
"""
from datetime import datetime, timedelta
from typing import Any


class ArenaError(Exception):
    """Base class for all domain errors."""

    kind = "ArenaError"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.kind)
        self.message = message or self.kind

    def extra(self) -> dict[str, Any]:
        """Additional fields rendered alongside the error in API responses."""
        return {}


class NotFound(ArenaError):
    kind = "NotFound"

    def __init__(self, resource: str, identifier: Any = None) -> None:
        message = f"{resource} not found"
        if identifier is not None:
            message = f"{resource} '{identifier}' not found"
        super().__init__(message)
        self.resource = resource
        self.identifier = identifier


class NotActive(ArenaError):
    kind = "NotActive"


class InsufficientFunds(ArenaError):
    kind = "InsufficientFunds"

    def __init__(self, balance: int, required: int) -> None:
        super().__init__(f"Insufficient points: have {balance}, need {required}")
        self.balance = balance
        self.required = required


class Full(ArenaError):
    kind = "Full"

    def __init__(self, message: str = "Tournament full") -> None:
        super().__init__(message)


class AlreadyEntered(ArenaError):
    kind = "AlreadyEntered"

    def __init__(self, message: str = "Already participated") -> None:
        super().__init__(message)


class CooldownActive(ArenaError):
    kind = "CooldownActive"

    def __init__(self, remaining: timedelta, next_claim_available: datetime) -> None:
        hours = remaining.total_seconds() / 3600
        super().__init__(f"Wait {hours:.1f} hours before claiming again")
        self.remaining = remaining
        self.next_claim_available = next_claim_available

    def extra(self) -> dict[str, Any]:
        return {
            "remaining_seconds": int(self.remaining.total_seconds()),
            "next_claim_available": self.next_claim_available.isoformat(),
        }


class ValidationError(ArenaError):
    kind = "ValidationError"


class AlreadyExists(ArenaError):
    kind = "AlreadyExists"


class AuthenticationError(ArenaError):
    kind = "AuthenticationError"


class PermissionDenied(ArenaError):
    kind = "PermissionDenied"


class StorageFailure(ArenaError):
    """Database error; the transaction was rolled back. May be retried by the caller."""

    kind = "StorageFailure"
