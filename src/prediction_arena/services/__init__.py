"""Service layer: ledger, tournament registry, entry and settlement transactions."""
from prediction_arena.services.accounts import AccountService
from prediction_arena.services.entry import EntryCoordinator
from prediction_arena.services.ledger import Ledger
from prediction_arena.services.scheduler import LifecycleScheduler
from prediction_arena.services.settlement import SettlementEngine
from prediction_arena.services.tournaments import TournamentRegistry

__all__ = [
    "AccountService",
    "EntryCoordinator",
    "Ledger",
    "LifecycleScheduler",
    "SettlementEngine",
    "TournamentRegistry",
]
