"""Authenticated user routes: stats and free-point claims."""
from fastapi import APIRouter

from prediction_arena.dependencies import CurrentUserId, LedgerDep
from prediction_arena.schemas import ClaimResult, UserStats

router = APIRouter(prefix="/user", tags=["user"])


@router.get("/stats", response_model=UserStats)
def get_stats(user_id: CurrentUserId, ledger: LedgerDep) -> UserStats:
    return ledger.get_stats(user_id)


@router.post("/claim-free-points", response_model=ClaimResult)
def claim_free_points(user_id: CurrentUserId, ledger: LedgerDep) -> ClaimResult:
    """Claim the periodic free points; 429 while the cooldown is running."""
    return ledger.claim_free(user_id)
