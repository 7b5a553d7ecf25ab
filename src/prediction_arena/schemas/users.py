"""Account, auth and ledger payloads."""
from datetime import datetime

from pydantic import BaseModel, Field

from prediction_arena.db.models import User


class UserPublic(BaseModel):
    id: int
    email: str | None = None
    username: str | None = None
    wallet_address: str | None = None
    points: int

    @classmethod
    def from_row(cls, row: User) -> "UserPublic":
        return cls(
            id=row.id,
            email=row.email,
            username=row.username,
            wallet_address=row.wallet_address,
            points=row.points,
        )


class RegisterRequest(BaseModel):
    email: str | None = Field(default=None, max_length=320)
    wallet_address: str | None = Field(default=None, max_length=128)
    username: str | None = Field(default=None, max_length=64)
    password: str | None = Field(default=None, max_length=128)


class LoginRequest(BaseModel):
    identifier: str | None = None  # username or email
    wallet_address: str | None = None
    password: str | None = None


class RefreshRequest(BaseModel):
    refresh_token: str


class AuthResponse(BaseModel):
    token: str
    refresh_token: str | None = None
    user: UserPublic


class TokenResponse(BaseModel):
    token: str


class UserStats(BaseModel):
    """Ledger read model. Never includes the password hash."""

    id: int
    email: str | None = None
    username: str | None = None
    wallet_address: str | None = None
    role: str
    points: int
    total_tournaments: int
    won_tournaments: int
    accuracy: int
    last_claim_date: datetime | None = None
    next_claim_available: datetime
    created_at: datetime


class ClaimResult(BaseModel):
    success: bool = True
    points_awarded: int
    balance: int
    next_claim_available: datetime
