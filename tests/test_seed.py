"""Demo data seeding."""
from sqlmodel import Session, select

from prediction_arena.db.models import Tournament, TournamentStatus, User
from prediction_arena.services.seed import (DEMO_USERS, SAMPLE_TOURNAMENTS,
                                            seed_demo_data)


def test_seed_is_idempotent(engine, clock):
    assert seed_demo_data(engine, clock) == (len(SAMPLE_TOURNAMENTS), len(DEMO_USERS))
    assert seed_demo_data(engine, clock) == (0, 0)

    with Session(engine) as session:
        tournaments = session.exec(select(Tournament)).all()
        users = session.exec(select(User)).all()
    assert len(tournaments) == len(SAMPLE_TOURNAMENTS)
    assert len(users) == len(DEMO_USERS)
    assert all(t.status == TournamentStatus.ACTIVE.value for t in tournaments)
    assert all(isinstance(t.options, list) and len(t.options) >= 2 for t in tournaments)


def test_seeded_tournaments_accept_entries(engine, clock, coordinator):
    seed_demo_data(engine, clock)
    with Session(engine) as session:
        bob = session.exec(select(User).where(User.username == "Bob")).one()
        fed = session.exec(
            select(Tournament).where(Tournament.title.startswith("Next US Fed"))
        ).one()

    receipt = coordinator.enter(fed.id, bob.id, "Keep Same")

    assert receipt.balance == 3200 - 200
