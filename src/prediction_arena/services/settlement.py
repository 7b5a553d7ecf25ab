"""Settlement engine: resolves a closed tournament and pays its winners."""
import logging

from sqlalchemy import update
from sqlalchemy.engine import Engine
from sqlmodel import select

from prediction_arena.core.errors import NotActive, ValidationError
from prediction_arena.db.models import Participant, TournamentStatus, User
from prediction_arena.db.sessions import unit_of_work
from prediction_arena.schemas import SettlementResult
from prediction_arena.services.tournaments import lock_tournament
from prediction_arena.utils import Clock, utcnow

logger = logging.getLogger(__name__)


def split_prize(prize_pool: int, winner_count: int) -> tuple[int, int]:
    """Return (prize_per_winner, undistributed). Rounds down; no winners forfeits the pool."""
    if winner_count <= 0:
        return 0, prize_pool
    return prize_pool // winner_count, prize_pool % winner_count


class SettlementEngine:
    """Resolves tournaments against the correct answer in a single transaction."""

    def __init__(self, engine: Engine, *, clock: Clock = utcnow) -> None:
        self._engine = engine
        self._clock = clock

    def resolve(self, tournament_id: int, correct_answer: str) -> SettlementResult:
        """Mark the tournament resolved and credit every correct prediction.

        Each winner receives floor(prize_pool / winners) and one more won
        tournament. The remainder is kept back, and with no winners the
        whole pool is forfeited. A failure part way rolls back every credit.

        Raises:
            NotFound: unknown tournament.
            NotActive: tournament is not closed (still open, or already resolved).
            ValidationError: correct_answer is not one of the options.
        """
        correct_answer = correct_answer.strip()
        now = self._clock()
        with unit_of_work(self._engine) as session:
            tournament = lock_tournament(session, tournament_id)
            if tournament.status != TournamentStatus.CLOSED.value:
                raise NotActive(
                    f"Tournament is {tournament.status}; only closed tournaments can be resolved"
                )
            if correct_answer not in tournament.options:
                raise ValidationError(
                    f"Correct answer must be one of: {', '.join(tournament.options)}"
                )

            tournament.status = TournamentStatus.RESOLVED.value
            tournament.correct_answer = correct_answer
            tournament.updated_at = now
            session.add(tournament)

            winner_ids = session.exec(
                select(Participant.user_id).where(
                    Participant.tournament_id == tournament_id,
                    Participant.prediction == correct_answer,
                )
            ).all()
            prize, undistributed = split_prize(tournament.prize_pool, len(winner_ids))

            if winner_ids:
                # Winner rows are locked in id order before the credit.
                session.exec(
                    select(User.id)
                    .where(User.id.in_(winner_ids))
                    .order_by(User.id)
                    .with_for_update()
                ).all()
                session.exec(
                    update(User)
                    .where(User.id.in_(winner_ids))
                    .values(
                        points=User.points + prize,
                        won_tournaments=User.won_tournaments + 1,
                    )
                    .execution_options(synchronize_session=False)
                )

        if winner_ids:
            logger.info(
                "Tournament %s resolved with %s winners, %s points each",
                tournament_id,
                len(winner_ids),
                prize,
            )
        else:
            logger.info("Tournament %s resolved, no winners", tournament_id)
        return SettlementResult(
            tournament_id=tournament_id,
            correct_answer=correct_answer,
            winner_count=len(winner_ids),
            prize_per_winner=prize,
            undistributed=undistributed,
        )
