"""Core abstractions: error taxonomy and its HTTP mapping."""
from prediction_arena.core.error_mapper import ArenaErrorMapper
from prediction_arena.core.errors import (AlreadyEntered, AlreadyExists,
                                          ArenaError, AuthenticationError,
                                          CooldownActive, Full,
                                          InsufficientFunds, NotActive,
                                          NotFound, PermissionDenied,
                                          StorageFailure, ValidationError)

__all__ = [
    "AlreadyEntered",
    "AlreadyExists",
    "ArenaError",
    "ArenaErrorMapper",
    "AuthenticationError",
    "CooldownActive",
    "Full",
    "InsufficientFunds",
    "NotActive",
    "NotFound",
    "PermissionDenied",
    "StorageFailure",
    "ValidationError",
]
