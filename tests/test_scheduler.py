"""Lifecycle scheduler wiring."""
from datetime import timedelta

from conftest import START, get_tournament, make_tournament
from prediction_arena.db.models import TournamentStatus
from prediction_arena.services import LifecycleScheduler


def test_run_once_sweeps_with_the_injected_clock(engine, registry, clock):
    tournament = make_tournament(engine, end_time=START + timedelta(minutes=30))
    scheduler = LifecycleScheduler(registry, interval_seconds=60, clock=clock)

    assert scheduler.run_once().closed == 0
    clock.advance(minutes=30)
    assert scheduler.run_once().closed == 1
    assert get_tournament(engine, tournament.id).status == TournamentStatus.CLOSED.value


def test_start_and_shutdown(registry, clock):
    scheduler = LifecycleScheduler(registry, interval_seconds=3600, clock=clock)
    assert not scheduler.running

    scheduler.start()
    try:
        assert scheduler.running
        scheduler.start()
        assert scheduler.running
    finally:
        scheduler.shutdown()
    assert not scheduler.running
    scheduler.shutdown()


def test_container_builds_scheduler_from_settings(container):
    scheduler = container.scheduler()
    assert scheduler is container.scheduler()
    assert not scheduler.running
