"""Shared utilities: clock and logging setup."""
import logging
from collections.abc import Callable
from datetime import datetime, timezone

Clock = Callable[[], datetime]

_LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    """Normalize a datetime to aware UTC; naive values are assumed UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(level=level.upper(), format=_LOG_FORMAT)
