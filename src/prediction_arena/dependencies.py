"""FastAPI dependency injection: app.state.container holds singletons; Depends() resolves them."""
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from prediction_arena.container import Container
from prediction_arena.core.errors import AuthenticationError, PermissionDenied
from prediction_arena.db.models import Role, User
from prediction_arena.services import (AccountService, EntryCoordinator,
                                       Ledger, LifecycleScheduler,
                                       SettlementEngine, TournamentRegistry)

_bearer = HTTPBearer(auto_error=False)


def _container(request: Request) -> Container:
    return request.app.state.container


def get_ledger(request: Request) -> Ledger:
    return _container(request).ledger()


def get_registry(request: Request) -> TournamentRegistry:
    return _container(request).registry()


def get_entry_coordinator(request: Request) -> EntryCoordinator:
    return _container(request).entry_coordinator()


def get_settlement(request: Request) -> SettlementEngine:
    return _container(request).settlement()


def get_accounts(request: Request) -> AccountService:
    return _container(request).accounts()


def get_scheduler(request: Request) -> LifecycleScheduler:
    return _container(request).scheduler()


def get_current_user_id(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> int:
    """Resolve the authenticated user id from the bearer token."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access token required")
    return _container(request).tokens().decode_access(credentials.credentials)


def get_admin_user(
    request: Request,
    user_id: int = Depends(get_current_user_id),
) -> User:
    """Require an authenticated admin."""
    user = get_accounts(request).get_user(user_id)
    if user.role != Role.ADMIN.value:
        raise PermissionDenied("Admin role required")
    return user


# Type aliases for route injection
LedgerDep = Annotated[Ledger, Depends(get_ledger)]
RegistryDep = Annotated[TournamentRegistry, Depends(get_registry)]
EntryDep = Annotated[EntryCoordinator, Depends(get_entry_coordinator)]
SettlementDep = Annotated[SettlementEngine, Depends(get_settlement)]
AccountsDep = Annotated[AccountService, Depends(get_accounts)]
SchedulerDep = Annotated[LifecycleScheduler, Depends(get_scheduler)]
CurrentUserId = Annotated[int, Depends(get_current_user_id)]
AdminUser = Annotated[User, Depends(get_admin_user)]
