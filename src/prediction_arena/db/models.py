"""Database models for the prediction arena.

Users hold the points ledger, tournaments hold lifecycle and pool state, and
participants record one prediction per user per tournament.
"""
from datetime import datetime
from enum import Enum

from sqlalchemy import CheckConstraint, Column, String, UniqueConstraint
from sqlmodel import Field, SQLModel

from prediction_arena.db.types import JSONEncodedList, UTCDateTime
from prediction_arena.utils import utcnow


class TournamentStatus(str, Enum):
    """Lifecycle states. Transitions only move forward."""

    PENDING = "pending"
    ACTIVE = "active"
    CLOSED = "closed"
    RESOLVED = "resolved"


class TournamentType(str, Enum):
    YES_NO = "yes_no"
    MULTIPLE_CHOICE = "multiple_choice"


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


class User(SQLModel, table=True):
    """User account and point balance."""

    __tablename__ = "users"
    __table_args__ = (CheckConstraint("points >= 0", name="ck_users_points_non_negative"),)

    id: int | None = Field(default=None, primary_key=True)
    email: str | None = Field(default=None, unique=True, index=True)
    wallet_address: str | None = Field(default=None, unique=True, index=True)
    username: str | None = Field(default=None, index=True)
    password_hash: str | None = None
    role: str = Field(default=Role.USER.value)  # user | admin
    points: int = Field(default=1000)
    total_tournaments: int = Field(default=0)
    won_tournaments: int = Field(default=0)
    last_claim_date: datetime | None = Field(
        default=None, sa_column=Column(UTCDateTime, nullable=True)
    )
    created_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(UTCDateTime, nullable=False)
    )


class Tournament(SQLModel, table=True):
    """A prediction tournament with its accumulated prize pool."""

    __tablename__ = "tournaments"
    __table_args__ = (
        CheckConstraint("entry_fee > 0", name="ck_tournaments_entry_fee_positive"),
        CheckConstraint(
            "current_participants <= max_participants",
            name="ck_tournaments_capacity",
        ),
        CheckConstraint("prize_pool >= 0", name="ck_tournaments_prize_pool"),
    )

    id: int | None = Field(default=None, primary_key=True)
    title: str = Field(unique=True, index=True)
    description: str | None = None
    category: str = Field(index=True)  # crypto | stocks | politics | ...
    tournament_type: str = Field(
        default=TournamentType.MULTIPLE_CHOICE.value,
        sa_column=Column(String(32), nullable=False),
    )
    options: list[str] = Field(
        default_factory=list, sa_column=Column(JSONEncodedList, nullable=False)
    )
    entry_fee: int
    max_participants: int
    current_participants: int = Field(default=0)
    prize_pool: int = Field(default=0)
    start_time: datetime = Field(sa_column=Column(UTCDateTime, nullable=False))
    end_time: datetime = Field(sa_column=Column(UTCDateTime, nullable=False))
    status: str = Field(
        default=TournamentStatus.PENDING.value,
        sa_column=Column(String(16), nullable=False, index=True),
    )
    correct_answer: str | None = None
    created_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(UTCDateTime, nullable=False)
    )
    updated_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(UTCDateTime, nullable=False)
    )


class Participant(SQLModel, table=True):
    """One user's prediction in one tournament. Immutable once written."""

    __tablename__ = "participants"
    __table_args__ = (
        UniqueConstraint("tournament_id", "user_id", name="uq_participants_tournament_user"),
    )

    id: int | None = Field(default=None, primary_key=True)
    tournament_id: int = Field(foreign_key="tournaments.id", index=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    prediction: str
    points_paid: int
    created_at: datetime = Field(
        default_factory=utcnow, sa_column=Column(UTCDateTime, nullable=False)
    )
