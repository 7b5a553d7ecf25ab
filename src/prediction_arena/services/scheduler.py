"""Periodic lifecycle sweep on an APScheduler background thread."""
import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from prediction_arena.core.errors import ArenaError
from prediction_arena.schemas import SweepResult
from prediction_arena.services.tournaments import TournamentRegistry
from prediction_arena.utils import Clock, utcnow

logger = logging.getLogger(__name__)

_JOB_ID = "tournament-lifecycle-sweep"


class LifecycleScheduler:
    """Runs TournamentRegistry.sweep on a fixed interval.

    start() and shutdown() are the explicit init/teardown hooks, called from
    the application lifespan.
    """

    def __init__(
        self,
        registry: TournamentRegistry,
        *,
        interval_seconds: float = 60.0,
        clock: Clock = utcnow,
    ) -> None:
        self._registry = registry
        self._interval_seconds = interval_seconds
        self._clock = clock
        self._scheduler: BackgroundScheduler | None = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def run_once(self) -> SweepResult:
        """Run one sweep synchronously."""
        return self._registry.sweep(self._clock())

    def _tick(self) -> None:
        try:
            self.run_once()
        except ArenaError as exc:
            logger.error("Lifecycle sweep failed: %s", exc.message)

    def start(self) -> None:
        if self.running:
            return
        scheduler = BackgroundScheduler(timezone="UTC")
        scheduler.add_job(
            self._tick,
            IntervalTrigger(seconds=self._interval_seconds),
            id=_JOB_ID,
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info("Lifecycle scheduler started (every %ss)", self._interval_seconds)

    def shutdown(self, wait: bool = True) -> None:
        if self._scheduler is None:
            return
        if self._scheduler.running:
            self._scheduler.shutdown(wait=wait)
        self._scheduler = None
        logger.info("Lifecycle scheduler stopped")
