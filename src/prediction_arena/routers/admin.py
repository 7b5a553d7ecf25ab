"""Admin routes: tournament management, resolution and manual sweeps."""
import logging

from fastapi import APIRouter, status

from prediction_arena.dependencies import (AdminUser, RegistryDep,
                                           SchedulerDep, SettlementDep)
from prediction_arena.schemas import (ParticipantRead, ResolveRequest,
                                      SettlementResult, SweepResult,
                                      TournamentCreate, TournamentRead,
                                      TournamentUpdate)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin", tags=["admin"])


@router.post(
    "/tournaments", response_model=TournamentRead, status_code=status.HTTP_201_CREATED
)
def create_tournament(
    body: TournamentCreate, admin: AdminUser, registry: RegistryDep
) -> TournamentRead:
    logger.info("Admin %s creating tournament %r", admin.id, body.title)
    return registry.create(body)


@router.put("/tournaments/{tournament_id}", response_model=TournamentRead)
def update_tournament(
    tournament_id: int, body: TournamentUpdate, admin: AdminUser, registry: RegistryDep
) -> TournamentRead:
    logger.info("Admin %s updating tournament %s", admin.id, tournament_id)
    return registry.update(tournament_id, body)


@router.post("/tournaments/{tournament_id}/resolve", response_model=SettlementResult)
def resolve_tournament(
    tournament_id: int, body: ResolveRequest, admin: AdminUser, settlement: SettlementDep
) -> SettlementResult:
    """Resolve a closed tournament and distribute its prize pool."""
    logger.info(
        "Admin %s resolving tournament %s with answer %r",
        admin.id,
        tournament_id,
        body.correct_answer,
    )
    return settlement.resolve(tournament_id, body.correct_answer)


@router.get(
    "/tournaments/{tournament_id}/participants", response_model=list[ParticipantRead]
)
def list_participants(
    tournament_id: int, _admin: AdminUser, registry: RegistryDep
) -> list[ParticipantRead]:
    return registry.participants(tournament_id)


@router.post("/lifecycle/sweep", response_model=SweepResult)
def run_sweep(_admin: AdminUser, scheduler: SchedulerDep) -> SweepResult:
    """Run the lifecycle sweep now instead of waiting for the next tick."""
    return scheduler.run_once()
