"""Pydantic schemas for API and service results. Not persisted to DB."""
from prediction_arena.schemas.tournaments import (EntryReceipt, EntryRequest,
                                                  ParticipantRead,
                                                  ResolveRequest,
                                                  SettlementResult,
                                                  SweepResult,
                                                  TournamentCreate,
                                                  TournamentPage,
                                                  TournamentRead,
                                                  TournamentTypeInfo,
                                                  TournamentUpdate)
from prediction_arena.schemas.users import (AuthResponse, ClaimResult,
                                            LoginRequest, RefreshRequest,
                                            RegisterRequest, TokenResponse,
                                            UserPublic, UserStats)

__all__ = [
    "AuthResponse",
    "ClaimResult",
    "EntryReceipt",
    "EntryRequest",
    "LoginRequest",
    "ParticipantRead",
    "RefreshRequest",
    "RegisterRequest",
    "ResolveRequest",
    "SettlementResult",
    "SweepResult",
    "TokenResponse",
    "TournamentCreate",
    "TournamentPage",
    "TournamentRead",
    "TournamentTypeInfo",
    "TournamentUpdate",
    "UserPublic",
    "UserStats",
]
