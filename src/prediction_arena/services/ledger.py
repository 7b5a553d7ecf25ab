"""Ledger: owns user point balances, the free-claim policy and user stats."""
import logging
from datetime import timedelta

from sqlalchemy import or_, update
from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from prediction_arena.core.errors import CooldownActive, NotFound
from prediction_arena.db.models import User
from prediction_arena.db.sessions import unit_of_work
from prediction_arena.schemas import ClaimResult, UserStats
from prediction_arena.utils import Clock, utcnow

logger = logging.getLogger(__name__)


def lock_user(session: Session, user_id: int) -> User:
    """Load a user row with a write lock, or raise NotFound."""
    user = session.exec(
        select(User).where(User.id == user_id).with_for_update()
    ).first()
    if user is None:
        raise NotFound("User", user_id)
    return user


class Ledger:
    """Point balance operations.

    Args:
        engine: Storage engine; every operation runs in its own transaction.
        clock: Returns the current aware UTC time.
        claim_points: Points awarded per free claim.
        claim_cooldown: Minimum time between two free claims.
    """

    def __init__(
        self,
        engine: Engine,
        *,
        clock: Clock = utcnow,
        claim_points: int = 500,
        claim_cooldown: timedelta = timedelta(hours=24),
    ) -> None:
        self._engine = engine
        self._clock = clock
        self._claim_points = claim_points
        self._claim_cooldown = claim_cooldown

    @property
    def claim_cooldown(self) -> timedelta:
        return self._claim_cooldown

    def balance(self, user_id: int) -> int:
        with unit_of_work(self._engine) as session:
            user = session.get(User, user_id)
            if user is None:
                raise NotFound("User", user_id)
            return user.points

    def claim_free(self, user_id: int) -> ClaimResult:
        """Credit the free-claim award unless the cooldown is still running.

        Raises:
            NotFound: unknown user.
            CooldownActive: last claim was less than the cooldown ago.
        """
        now = self._clock()
        threshold = now - self._claim_cooldown
        with unit_of_work(self._engine) as session:
            user = lock_user(session, user_id)
            if user.last_claim_date is not None and user.last_claim_date > threshold:
                next_at = user.last_claim_date + self._claim_cooldown
                raise CooldownActive(next_at - now, next_at)

            # Guarded so a concurrent claim that already stamped the row cannot credit twice.
            result = session.exec(
                update(User)
                .where(
                    User.id == user_id,
                    or_(User.last_claim_date.is_(None), User.last_claim_date <= threshold),
                )
                .values(points=User.points + self._claim_points, last_claim_date=now)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                session.refresh(user)
                next_at = (user.last_claim_date or now) + self._claim_cooldown
                raise CooldownActive(next_at - now, next_at)
            session.refresh(user)
            balance = user.points

        logger.info("User %s claimed %s free points", user_id, self._claim_points)
        return ClaimResult(
            points_awarded=self._claim_points,
            balance=balance,
            next_claim_available=now + self._claim_cooldown,
        )

    def get_stats(self, user_id: int) -> UserStats:
        """Return the user's ledger view with accuracy and next claim time."""
        now = self._clock()
        with unit_of_work(self._engine) as session:
            user = session.get(User, user_id)
            if user is None:
                raise NotFound("User", user_id)
            accuracy = (
                round(user.won_tournaments / user.total_tournaments * 100)
                if user.total_tournaments > 0
                else 0
            )
            next_claim = (
                user.last_claim_date + self._claim_cooldown
                if user.last_claim_date is not None
                else now
            )
            return UserStats(
                id=user.id,
                email=user.email,
                username=user.username,
                wallet_address=user.wallet_address,
                role=user.role,
                points=user.points,
                total_tournaments=user.total_tournaments,
                won_tournaments=user.won_tournaments,
                accuracy=accuracy,
                last_claim_date=user.last_claim_date,
                next_claim_available=next_claim,
                created_at=user.created_at,
            )
