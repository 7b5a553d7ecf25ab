"""Registration, login and token refresh."""
from fastapi import APIRouter, status

from prediction_arena.dependencies import AccountsDep
from prediction_arena.schemas import (AuthResponse, LoginRequest,
                                      RefreshRequest, RegisterRequest,
                                      TokenResponse)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, accounts: AccountsDep) -> AuthResponse:
    """Create an account with the initial point balance and return a token."""
    return accounts.register(body)


@router.post("/login", response_model=AuthResponse)
def login(body: LoginRequest, accounts: AccountsDep) -> AuthResponse:
    """Log in by username/email and password, or by wallet address."""
    return accounts.login(body)


@router.post("/refresh", response_model=TokenResponse)
def refresh(body: RefreshRequest, accounts: AccountsDep) -> TokenResponse:
    return accounts.refresh(body.refresh_token)
