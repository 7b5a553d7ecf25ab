"""Public tournament routes and tournament entry.

Handlers are sync so FastAPI runs them in its threadpool; each call into the
core is one database transaction.
"""
from fastapi import APIRouter, Query, Response

from prediction_arena.dependencies import CurrentUserId, EntryDep, RegistryDep
from prediction_arena.schemas import (EntryReceipt, EntryRequest,
                                      TournamentRead, TournamentTypeInfo)
from prediction_arena.services.tournaments import (DEFAULT_PAGE_SIZE,
                                                   MAX_PAGE_SIZE)

router = APIRouter(tags=["tournaments"])


@router.get("/tournaments", response_model=list[TournamentRead])
def list_tournaments(
    response: Response,
    registry: RegistryDep,
    category: str = Query(default="all", description="crypto | stocks | politics | all"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(
        default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, alias="pageSize"
    ),
) -> list[TournamentRead]:
    """List pending and active tournaments, newest first.

    Pagination metadata is returned in the X-Total-Count, X-Page and
    X-Page-Size headers.
    """
    result = registry.list_open(category=category, page=page, page_size=page_size)
    response.headers["Cache-Control"] = "public, max-age=60"
    response.headers["X-Total-Count"] = str(result.total)
    response.headers["X-Page"] = str(result.page)
    response.headers["X-Page-Size"] = str(result.page_size)
    return result.items


@router.get("/tournaments/{tournament_id}", response_model=TournamentRead)
def get_tournament(tournament_id: int, registry: RegistryDep) -> TournamentRead:
    return registry.get(tournament_id)


@router.get("/tournament-types", response_model=list[TournamentTypeInfo])
def list_tournament_types(registry: RegistryDep) -> list[TournamentTypeInfo]:
    return registry.list_types()


@router.post("/tournaments/{tournament_id}/enter", response_model=EntryReceipt)
def enter_tournament(
    tournament_id: int,
    body: EntryRequest,
    user_id: CurrentUserId,
    coordinator: EntryDep,
) -> EntryReceipt:
    """Stake the entry fee on a prediction in an active tournament."""
    return coordinator.enter(tournament_id, user_id, body.prediction)
