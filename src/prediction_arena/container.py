"""DI container: the composition root for settings, storage, clock and services.

main.create_app() stores the container on app.state; FastAPI dependencies in
dependencies.py resolve services from it. Tests override providers (settings,
clock) before the app starts.
"""
from datetime import timedelta

from dependency_injector import containers, providers

from prediction_arena.config import get_settings
from prediction_arena.core import ArenaErrorMapper
from prediction_arena.db.sessions import create_db_engine
from prediction_arena.security import TokenIssuer
from prediction_arena.services import (AccountService, EntryCoordinator,
                                       Ledger, LifecycleScheduler,
                                       SettlementEngine, TournamentRegistry)
from prediction_arena.utils import utcnow


class Container(containers.DeclarativeContainer):
    settings = providers.Singleton(get_settings)
    clock = providers.Object(utcnow)

    engine = providers.Singleton(
        create_db_engine,
        settings.provided.database_url,
        echo=settings.provided.sql_echo,
        pool_size=settings.provided.pool_size,
        max_overflow=settings.provided.max_overflow,
    )

    tokens = providers.Singleton(
        TokenIssuer,
        settings.provided.jwt_secret,
        settings.provided.jwt_refresh_secret,
        algorithm=settings.provided.jwt_algorithm,
        access_ttl=providers.Factory(timedelta, days=settings.provided.access_token_days),
        refreshed_access_ttl=providers.Factory(
            timedelta, minutes=settings.provided.refreshed_access_token_minutes
        ),
        refresh_ttl=providers.Factory(timedelta, days=settings.provided.refresh_token_days),
    )

    error_mapper = providers.Singleton(ArenaErrorMapper)

    ledger = providers.Singleton(
        Ledger,
        engine,
        clock=clock,
        claim_points=settings.provided.free_claim_points,
        claim_cooldown=providers.Factory(
            timedelta, hours=settings.provided.free_claim_cooldown_hours
        ),
    )
    registry = providers.Singleton(TournamentRegistry, engine, clock=clock)
    entry_coordinator = providers.Singleton(EntryCoordinator, engine)
    settlement = providers.Singleton(SettlementEngine, engine, clock=clock)
    accounts = providers.Singleton(
        AccountService,
        engine,
        tokens,
        initial_points=settings.provided.initial_points,
    )

    scheduler = providers.Singleton(
        LifecycleScheduler,
        registry,
        interval_seconds=settings.provided.sweep_interval_seconds,
        clock=clock,
    )


def init_container(**overrides) -> Container:
    """Create a container; keyword arguments override providers by name.

    Example: init_container(settings=Settings(database_url="sqlite:///arena.db")).
    """
    container = Container()
    for name, value in overrides.items():
        getattr(container, name).override(providers.Object(value))
    return container
