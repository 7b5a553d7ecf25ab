"""Demo data: sample tournaments and users. Idempotent."""
import logging
from datetime import timedelta

from sqlalchemy.engine import Engine
from sqlmodel import select

from prediction_arena.db.models import (Tournament, TournamentStatus,
                                        TournamentType, User)
from prediction_arena.db.sessions import unit_of_work
from prediction_arena.utils import Clock, utcnow

logger = logging.getLogger(__name__)

# (title, category, options, entry_fee, max_participants, hours open)
SAMPLE_TOURNAMENTS = [
    ("Bitcoin Price Prediction - End of Week", "crypto",
     ["Above $45,000", "Below $45,000"], 100, 50, 2),
    ("Tesla Stock Movement Next Day", "stocks",
     ["Up 3%+", "Down 3%+", "Sideways (-3% to +3%)"], 150, 30, 4),
    ("Next US Fed Interest Rate Decision", "politics",
     ["Increase 0.25%", "Keep Same", "Decrease 0.25%"], 200, 40, 6),
    ("Ethereum vs Solana Market Cap", "crypto",
     ["Ethereum higher", "Solana higher"], 75, 25, 5),
    ("Apple Stock Prediction", "stocks",
     ["Up 5%+", "Down 5%+", "Flat"], 120, 60, 3),
]

DEMO_USERS = [
    ("demo@test.com", "DemoUser", 2500),
    ("alice@test.com", "Alice", 1800),
    ("bob@test.com", "Bob", 3200),
]


def seed_demo_data(engine: Engine, clock: Clock = utcnow) -> tuple[int, int]:
    """Insert missing sample tournaments and demo users.

    Returns (tournaments_created, users_created).
    """
    now = clock()
    created_tournaments = 0
    created_users = 0
    with unit_of_work(engine) as session:
        existing_titles = set(session.exec(select(Tournament.title)).all())
        for title, category, options, fee, capacity, hours in SAMPLE_TOURNAMENTS:
            if title in existing_titles:
                continue
            session.add(
                Tournament(
                    title=title,
                    category=category,
                    tournament_type=(
                        TournamentType.YES_NO.value
                        if len(options) == 2
                        else TournamentType.MULTIPLE_CHOICE.value
                    ),
                    options=options,
                    entry_fee=fee,
                    max_participants=capacity,
                    start_time=now - timedelta(minutes=1),
                    end_time=now + timedelta(hours=hours),
                    status=TournamentStatus.ACTIVE.value,
                    created_at=now,
                    updated_at=now,
                )
            )
            created_tournaments += 1
            logger.info("Created tournament: %s", title)

        existing_emails = set(session.exec(select(User.email)).all())
        for email, username, points in DEMO_USERS:
            if email in existing_emails:
                continue
            session.add(User(email=email, username=username, points=points))
            created_users += 1
            logger.info("Created test user: %s", username)

    return created_tournaments, created_users
