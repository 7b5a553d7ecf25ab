"""Tournament read model, admin payloads and core operation results."""
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from prediction_arena.db.models import (Tournament, TournamentStatus,
                                        TournamentType)
from prediction_arena.utils import to_utc


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TournamentRead(_CamelModel):
    """Public view of a tournament. Options are always a decoded list."""

    id: int
    title: str
    description: str | None = None
    category: str
    tournament_type: TournamentType
    options: list[str]
    entry_fee: int
    max_participants: int
    current_participants: int
    prize_pool: int
    start_time: datetime
    end_time: datetime
    status: TournamentStatus
    correct_answer: str | None = None
    expired: bool = False
    participant_count: int = 0

    @classmethod
    def from_row(
        cls, row: Tournament, *, now: datetime, participant_count: int | None = None
    ) -> "TournamentRead":
        return cls(
            id=row.id,
            title=row.title,
            description=row.description,
            category=row.category,
            tournament_type=TournamentType(row.tournament_type),
            options=list(row.options),
            entry_fee=row.entry_fee,
            max_participants=row.max_participants,
            current_participants=row.current_participants,
            prize_pool=row.prize_pool,
            start_time=row.start_time,
            end_time=row.end_time,
            status=TournamentStatus(row.status),
            correct_answer=row.correct_answer,
            expired=row.end_time < now,
            participant_count=(
                row.current_participants if participant_count is None else participant_count
            ),
        )


class TournamentPage(BaseModel):
    items: list[TournamentRead]
    total: int
    page: int
    page_size: int


class TournamentTypeInfo(BaseModel):
    name: TournamentType
    description: str


class TournamentCreate(BaseModel):
    """Admin payload for a new tournament."""

    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    category: str = Field(min_length=1, max_length=50)
    tournament_type: TournamentType = TournamentType.MULTIPLE_CHOICE
    options: list[str] = Field(min_length=2)
    entry_fee: int = Field(gt=0)
    max_participants: int = Field(gt=0)
    start_time: datetime
    end_time: datetime

    @model_validator(mode="after")
    def _check_window(self) -> "TournamentCreate":
        if to_utc(self.end_time) <= to_utc(self.start_time):
            raise ValueError("end_time must be after start_time")
        return self


class TournamentUpdate(BaseModel):
    """Admin payload for partial updates; omitted fields are unchanged."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    category: str | None = Field(default=None, min_length=1, max_length=50)
    options: list[str] | None = Field(default=None, min_length=2)
    entry_fee: int | None = Field(default=None, gt=0)
    max_participants: int | None = Field(default=None, gt=0)
    start_time: datetime | None = None
    end_time: datetime | None = None


class ParticipantRead(BaseModel):
    user_id: int
    prediction: str
    points_paid: int
    created_at: datetime


class EntryRequest(BaseModel):
    prediction: str = Field(min_length=1, max_length=200)


class EntryReceipt(BaseModel):
    """Result of a successful tournament entry."""

    tournament_id: int
    user_id: int
    prediction: str
    points_paid: int
    balance: int
    prize_pool: int
    current_participants: int


class ResolveRequest(BaseModel):
    correct_answer: str = Field(min_length=1, max_length=200)


class SettlementResult(BaseModel):
    """Outcome of resolving a tournament."""

    tournament_id: int
    correct_answer: str
    winner_count: int
    prize_per_winner: int
    undistributed: int


class SweepResult(BaseModel):
    started: int
    closed: int
