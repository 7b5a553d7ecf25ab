"""Tournament registry: lifecycle state, admin edits, read model and the sweep."""
import logging
from datetime import datetime

from sqlalchemy import func, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from prediction_arena.core.errors import (AlreadyExists, NotActive, NotFound,
                                          ValidationError)
from prediction_arena.db.models import (Participant, Tournament,
                                        TournamentStatus, TournamentType)
from prediction_arena.db.sessions import unit_of_work
from prediction_arena.schemas import (ParticipantRead, SweepResult,
                                      TournamentCreate, TournamentPage,
                                      TournamentRead, TournamentTypeInfo,
                                      TournamentUpdate)
from prediction_arena.utils import Clock, to_utc, utcnow

logger = logging.getLogger(__name__)

VALID_CATEGORIES = ("crypto", "stocks", "politics")
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

TYPE_DESCRIPTIONS = {
    TournamentType.YES_NO: "Two-outcome prediction (yes/no)",
    TournamentType.MULTIPLE_CHOICE: "Prediction with several possible outcomes",
}

_OPEN_STATUSES = (TournamentStatus.PENDING.value, TournamentStatus.ACTIVE.value)


def lock_tournament(session: Session, tournament_id: int) -> Tournament:
    """Load a tournament row with a write lock, or raise NotFound."""
    tournament = session.exec(
        select(Tournament).where(Tournament.id == tournament_id).with_for_update()
    ).first()
    if tournament is None:
        raise NotFound("Tournament", tournament_id)
    return tournament


def normalize_options(options: list[str], tournament_type: TournamentType) -> list[str]:
    """Strip labels and check they form a valid, ordered option list."""
    cleaned = [o.strip() for o in options]
    if any(not o for o in cleaned):
        raise ValidationError("Option labels must not be empty")
    if len(set(cleaned)) != len(cleaned):
        raise ValidationError("Option labels must be unique")
    if len(cleaned) < 2:
        raise ValidationError("A tournament needs at least two options")
    if tournament_type == TournamentType.YES_NO and len(cleaned) != 2:
        raise ValidationError("A yes/no tournament has exactly two options")
    return cleaned


class TournamentRegistry:
    """Owns tournament status, participant count and prize pool bookkeeping."""

    def __init__(self, engine: Engine, *, clock: Clock = utcnow) -> None:
        self._engine = engine
        self._clock = clock

    def create(self, data: TournamentCreate) -> TournamentRead:
        """Create a tournament; it starts active if its window has already opened."""
        now = self._clock()
        start = to_utc(data.start_time)
        end = to_utc(data.end_time)
        if end <= start:
            raise ValidationError("end_time must be after start_time")
        options = normalize_options(data.options, data.tournament_type)
        status = TournamentStatus.ACTIVE if start <= now else TournamentStatus.PENDING
        tournament = Tournament(
            title=data.title.strip(),
            description=data.description,
            category=data.category.strip().lower(),
            tournament_type=data.tournament_type.value,
            options=options,
            entry_fee=data.entry_fee,
            max_participants=data.max_participants,
            start_time=start,
            end_time=end,
            status=status.value,
            created_at=now,
            updated_at=now,
        )
        with unit_of_work(self._engine) as session:
            session.add(tournament)
            try:
                session.flush()
            except IntegrityError as exc:
                raise AlreadyExists(f"Tournament '{tournament.title}' already exists") from exc
            session.refresh(tournament)
            logger.info("Created tournament %s (%s)", tournament.id, tournament.title)
            return TournamentRead.from_row(tournament, now=now, participant_count=0)

    def update(self, tournament_id: int, data: TournamentUpdate) -> TournamentRead:
        """Apply a partial admin update to an open tournament."""
        now = self._clock()
        changes = data.model_dump(exclude_unset=True)
        with unit_of_work(self._engine) as session:
            tournament = lock_tournament(session, tournament_id)
            if tournament.status not in _OPEN_STATUSES:
                raise NotActive(f"Tournament is {tournament.status}; only open tournaments can be edited")
            has_entries = tournament.current_participants > 0
            if has_entries and (
                changes.get("entry_fee") is not None or changes.get("options") is not None
            ):
                raise ValidationError("Entry fee and options are fixed once players have entered")

            if changes.get("title") is not None:
                tournament.title = changes["title"].strip()
            if "description" in changes:
                tournament.description = changes["description"]
            if changes.get("category") is not None:
                tournament.category = changes["category"].strip().lower()
            if changes.get("options") is not None:
                tournament.options = normalize_options(
                    changes["options"], TournamentType(tournament.tournament_type)
                )
            if changes.get("entry_fee") is not None:
                tournament.entry_fee = changes["entry_fee"]
            if changes.get("max_participants") is not None:
                if changes["max_participants"] < tournament.current_participants:
                    raise ValidationError("Capacity cannot drop below current participants")
                tournament.max_participants = changes["max_participants"]
            if changes.get("start_time") is not None:
                tournament.start_time = to_utc(changes["start_time"])
            if changes.get("end_time") is not None:
                tournament.end_time = to_utc(changes["end_time"])
            if tournament.end_time <= tournament.start_time:
                raise ValidationError("end_time must be after start_time")
            tournament.updated_at = now

            session.add(tournament)
            try:
                session.flush()
            except IntegrityError as exc:
                raise AlreadyExists(f"Tournament '{tournament.title}' already exists") from exc
            session.refresh(tournament)
            return TournamentRead.from_row(tournament, now=now)

    def get(self, tournament_id: int) -> TournamentRead:
        now = self._clock()
        with unit_of_work(self._engine) as session:
            tournament = session.get(Tournament, tournament_id)
            if tournament is None:
                raise NotFound("Tournament", tournament_id)
            count = session.exec(
                select(func.count(Participant.id)).where(
                    Participant.tournament_id == tournament_id
                )
            ).one()
            return TournamentRead.from_row(tournament, now=now, participant_count=count)

    def list_open(
        self,
        category: str | None = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> TournamentPage:
        """List pending and active tournaments, newest first.

        Unknown categories (and "all") mean no category filter.
        """
        now = self._clock()
        page = max(page, 1)
        page_size = min(max(page_size, 1), MAX_PAGE_SIZE)
        category = (category or "all").lower()

        conditions = [Tournament.status.in_(_OPEN_STATUSES)]
        if category in VALID_CATEGORIES:
            conditions.append(Tournament.category == category)

        counts = (
            select(Participant.tournament_id, func.count(Participant.id).label("n"))
            .group_by(Participant.tournament_id)
            .subquery()
        )
        with unit_of_work(self._engine) as session:
            total = session.exec(
                select(func.count(Tournament.id)).where(*conditions)
            ).one()
            rows = session.exec(
                select(Tournament, func.coalesce(counts.c.n, 0))
                .outerjoin(counts, counts.c.tournament_id == Tournament.id)
                .where(*conditions)
                .order_by(Tournament.created_at.desc(), Tournament.id.desc())
                .offset((page - 1) * page_size)
                .limit(page_size)
            ).all()
            items = [
                TournamentRead.from_row(t, now=now, participant_count=n) for t, n in rows
            ]

        logger.info(
            "Tournaments fetched: category=%s page=%s page_size=%s count=%s total=%s",
            category,
            page,
            page_size,
            len(items),
            total,
        )
        return TournamentPage(items=items, total=total, page=page, page_size=page_size)

    def list_types(self) -> list[TournamentTypeInfo]:
        return [
            TournamentTypeInfo(name=t, description=TYPE_DESCRIPTIONS[t]) for t in TournamentType
        ]

    def participants(self, tournament_id: int) -> list[ParticipantRead]:
        with unit_of_work(self._engine) as session:
            if session.get(Tournament, tournament_id) is None:
                raise NotFound("Tournament", tournament_id)
            rows = session.exec(
                select(Participant)
                .where(Participant.tournament_id == tournament_id)
                .order_by(Participant.id)
            ).all()
            return [
                ParticipantRead(
                    user_id=p.user_id,
                    prediction=p.prediction,
                    points_paid=p.points_paid,
                    created_at=p.created_at,
                )
                for p in rows
            ]

    def sweep(self, now: datetime | None = None) -> SweepResult:
        """Apply time-based transitions: pending -> active, then active -> closed.

        Each update is guarded by the current status, so re-running the sweep
        (or two overlapping sweeps) never repeats a transition.
        """
        now = now or self._clock()
        with unit_of_work(self._engine) as session:
            started = session.exec(
                update(Tournament)
                .where(
                    Tournament.status == TournamentStatus.PENDING.value,
                    Tournament.start_time <= now,
                )
                .values(status=TournamentStatus.ACTIVE.value, updated_at=now)
                .execution_options(synchronize_session=False)
            ).rowcount
            closed = session.exec(
                update(Tournament)
                .where(
                    Tournament.status == TournamentStatus.ACTIVE.value,
                    Tournament.end_time <= now,
                )
                .values(status=TournamentStatus.CLOSED.value, updated_at=now)
                .execution_options(synchronize_session=False)
            ).rowcount
        logger.info("Lifecycle sweep - started: %s, closed: %s", started, closed)
        return SweepResult(started=started, closed=closed)
