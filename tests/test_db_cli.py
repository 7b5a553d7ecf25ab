"""Database task CLI: table creation, seeding and admin promotion."""
import pytest
from sqlmodel import Session, create_engine, select

from prediction_arena.config import get_settings
from prediction_arena.db.cli import main
from prediction_arena.db.models import Role, User


@pytest.fixture
def database_url(tmp_path, monkeypatch):
    url = f"sqlite:///{tmp_path / 'cli.db'}"
    monkeypatch.setenv("ARENA_DATABASE_URL", url)
    monkeypatch.setenv("ARENA_SCHEDULER_ENABLED", "false")
    get_settings.cache_clear()
    yield url
    get_settings.cache_clear()


def test_seed_then_promote(database_url, capsys):
    assert main(["init"]) == 0
    assert main(["seed"]) == 0
    assert "Created 5 tournaments and 3 users" in capsys.readouterr().out

    assert main(["promote", "Alice@test.com"]) == 0

    engine = create_engine(database_url)
    with Session(engine) as session:
        alice = session.exec(select(User).where(User.email == "alice@test.com")).one()
    engine.dispose()
    assert alice.role == Role.ADMIN.value


def test_promote_unknown_user(database_url, capsys):
    main(["init"])
    assert main(["promote", "nobody@test.com"]) == 1
    assert "NotFound" in capsys.readouterr().err
