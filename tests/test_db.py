"""Storage adapter: timestamp handling and transaction rollback."""
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError
from sqlmodel import Session, select

from conftest import START, get_tournament, get_user, make_tournament, make_user
from prediction_arena.core.errors import StorageFailure
from prediction_arena.db.models import Participant, User
from prediction_arena.db.sessions import unit_of_work


def test_plain_insert_stores_aware_utc(engine):
    tournament = make_tournament(engine)
    with unit_of_work(engine) as session:
        user = User(username="plain", email="plain@test.com")
        session.add(user)
        session.flush()
        session.add(
            Participant(
                tournament_id=tournament.id, user_id=user.id, prediction="Yes", points_paid=100
            )
        )

    stored = get_user(engine, user.id)
    assert stored.created_at.tzinfo is not None
    assert stored.created_at.utcoffset() == timedelta(0)
    with Session(engine) as session:
        participant = session.exec(select(Participant)).one()
    assert participant.created_at.utcoffset() == timedelta(0)


def test_offset_datetimes_are_normalized_to_utc(engine):
    tokyo = timezone(timedelta(hours=9))
    tournament = make_tournament(
        engine, start_time=datetime(2026, 1, 1, 20, 0, tzinfo=tokyo)
    )
    assert get_tournament(engine, tournament.id).start_time == datetime(
        2026, 1, 1, 11, 0, tzinfo=timezone.utc
    )


def test_naive_datetimes_are_taken_as_utc(engine):
    user = make_user(engine, last_claim_date=START.replace(tzinfo=None))
    assert get_user(engine, user.id).last_claim_date == START


def test_storage_error_rolls_back_and_surfaces_as_storage_failure(engine):
    user = make_user(engine, points=10)

    with pytest.raises(StorageFailure):
        with unit_of_work(engine) as session:
            row = session.get(User, user.id)
            row.points = 999
            session.add(row)
            session.flush()
            raise OperationalError("UPDATE users", {}, Exception("disk I/O error"))

    assert get_user(engine, user.id).points == 10


def test_other_errors_roll_back_and_propagate(engine):
    user = make_user(engine, points=10)

    with pytest.raises(KeyError):
        with unit_of_work(engine) as session:
            row = session.get(User, user.id)
            row.points = 0
            session.add(row)
            session.flush()
            raise KeyError("boom")

    assert get_user(engine, user.id).points == 10
