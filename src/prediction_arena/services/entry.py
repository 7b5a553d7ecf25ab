"""Entry transaction coordinator.

A tournament entry debits the user, records the prediction and grows the
tournament's pool in one transaction. Rows are locked on read (FOR UPDATE, or
BEGIN IMMEDIATE on SQLite) and every write is a guarded compare-and-swap whose
row count is checked, so concurrent entries cannot oversubscribe a tournament
or overdraw a balance.
"""
import logging

from sqlalchemy import update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from prediction_arena.core.errors import (AlreadyEntered, Full,
                                          InsufficientFunds, NotActive,
                                          ValidationError)
from prediction_arena.db.models import (Participant, Tournament,
                                        TournamentStatus, User)
from prediction_arena.db.sessions import unit_of_work
from prediction_arena.schemas import EntryReceipt
from prediction_arena.services.ledger import lock_user
from prediction_arena.services.tournaments import lock_tournament

logger = logging.getLogger(__name__)


def _check_active(tournament: Tournament) -> None:
    if tournament.status != TournamentStatus.ACTIVE.value:
        raise NotActive(f"Tournament is {tournament.status}, not active")


def _has_entered(session: Session, tournament_id: int, user_id: int) -> bool:
    existing = session.exec(
        select(Participant.id).where(
            Participant.tournament_id == tournament_id,
            Participant.user_id == user_id,
        )
    ).first()
    return existing is not None


class EntryCoordinator:
    """Enforces atomic tournament entry."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def enter(self, tournament_id: int, user_id: int, prediction: str) -> EntryReceipt:
        """Enter a user into an active tournament with the given prediction.

        Preconditions are checked in order: tournament exists and is active
        (the prediction must be one of its options), the user can pay the fee,
        a slot is free, and the user has not entered yet.

        Raises:
            NotFound, NotActive, ValidationError, InsufficientFunds, Full,
            AlreadyEntered: precondition failures; nothing is written.
            StorageFailure: database error; the transaction was rolled back.
        """
        prediction = prediction.strip()
        with unit_of_work(self._engine) as session:
            tournament = lock_tournament(session, tournament_id)
            _check_active(tournament)
            if prediction not in tournament.options:
                raise ValidationError(
                    f"Prediction must be one of: {', '.join(tournament.options)}"
                )
            fee = tournament.entry_fee

            user = lock_user(session, user_id)
            if user.points < fee:
                raise InsufficientFunds(user.points, fee)
            if tournament.current_participants >= tournament.max_participants:
                raise Full()
            if _has_entered(session, tournament_id, user_id):
                raise AlreadyEntered()

            debited = session.exec(
                update(User)
                .where(User.id == user_id, User.points >= fee)
                .values(
                    points=User.points - fee,
                    total_tournaments=User.total_tournaments + 1,
                )
                .execution_options(synchronize_session=False)
            ).rowcount
            if debited != 1:
                session.refresh(user)
                raise InsufficientFunds(user.points, fee)

            session.add(
                Participant(
                    tournament_id=tournament_id,
                    user_id=user_id,
                    prediction=prediction,
                    points_paid=fee,
                )
            )
            try:
                session.flush()
            except IntegrityError as exc:
                raise AlreadyEntered() from exc

            claimed = session.exec(
                update(Tournament)
                .where(
                    Tournament.id == tournament_id,
                    Tournament.status == TournamentStatus.ACTIVE.value,
                    Tournament.current_participants < Tournament.max_participants,
                )
                .values(
                    current_participants=Tournament.current_participants + 1,
                    prize_pool=Tournament.prize_pool + fee,
                )
                .execution_options(synchronize_session=False)
            ).rowcount
            if claimed != 1:
                session.refresh(tournament)
                _check_active(tournament)
                raise Full()

            session.refresh(user)
            session.refresh(tournament)
            receipt = EntryReceipt(
                tournament_id=tournament_id,
                user_id=user_id,
                prediction=prediction,
                points_paid=fee,
                balance=user.points,
                prize_pool=tournament.prize_pool,
                current_participants=tournament.current_participants,
            )

        logger.info(
            "User %s entered tournament %s with prediction %r", user_id, tournament_id, prediction
        )
        return receipt
