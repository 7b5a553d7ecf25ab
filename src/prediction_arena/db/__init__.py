"""Database package: models and session management."""
from prediction_arena.db.models import (Participant, Role, Tournament,
                                        TournamentStatus, TournamentType, User)

__all__ = [
    "Participant",
    "Role",
    "Tournament",
    "TournamentStatus",
    "TournamentType",
    "User",
]
