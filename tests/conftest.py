"""Shared fixtures: a file-backed SQLite database per test, a fixed clock and the services."""
import itertools
import threading
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from prediction_arena.config import Settings
from prediction_arena.container import init_container
from prediction_arena.db.models import Tournament, TournamentStatus, User
from prediction_arena.db.sessions import init_db
from prediction_arena.main import create_app

START = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
_titles = itertools.count(1)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime = START) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'arena.db'}",
        jwt_secret="test-secret",
        jwt_refresh_secret="test-refresh-secret",
        scheduler_enabled=False,
        rate_limit_enabled=False,
        seed_demo_data=False,
    )


@pytest.fixture
def container(settings, clock):
    return init_container(settings=settings, clock=clock)


@pytest.fixture
def engine(container):
    engine = container.engine()
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def ledger(container, engine):
    return container.ledger()


@pytest.fixture
def registry(container, engine):
    return container.registry()


@pytest.fixture
def coordinator(container, engine):
    return container.entry_coordinator()


@pytest.fixture
def settlement(container, engine):
    return container.settlement()


@pytest.fixture
def accounts(container, engine):
    return container.accounts()


@pytest.fixture
def client(container, engine):
    """FastAPI test client wired to the per-test container."""
    with TestClient(create_app(container)) as c:
        yield c


def make_user(engine, *, points=1000, role="user", email=None, username=None, **fields):
    with Session(engine, expire_on_commit=False) as session:
        user = User(points=points, role=role, email=email, username=username, **fields)
        session.add(user)
        session.commit()
        session.refresh(user)
        return user


def make_tournament(
    engine,
    *,
    status=TournamentStatus.ACTIVE,
    entry_fee=100,
    max_participants=10,
    options=("Yes", "No"),
    category="crypto",
    start_time=START - timedelta(hours=1),
    end_time=START + timedelta(hours=2),
    **fields,
):
    with Session(engine, expire_on_commit=False) as session:
        tournament = Tournament(
            title=fields.pop("title", f"Tournament {next(_titles)}"),
            category=category,
            tournament_type="yes_no" if len(options) == 2 else "multiple_choice",
            options=list(options),
            entry_fee=entry_fee,
            max_participants=max_participants,
            start_time=start_time,
            end_time=end_time,
            status=TournamentStatus(status).value,
            **fields,
        )
        session.add(tournament)
        session.commit()
        session.refresh(tournament)
        return tournament


def get_user(engine, user_id):
    with Session(engine) as session:
        return session.get(User, user_id)


def get_tournament(engine, tournament_id):
    with Session(engine, expire_on_commit=False) as session:
        return session.get(Tournament, tournament_id)


def race(n, target):
    """Run target(i) in n threads released together; return results or exceptions."""
    barrier = threading.Barrier(n)
    outcomes = [None] * n

    def run(i):
        barrier.wait()
        try:
            outcomes[i] = target(i)
        except Exception as exc:  # pylint: disable=broad-except
            outcomes[i] = exc

    threads = [threading.Thread(target=run, args=(i,)) for i in range(n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)
    return outcomes
