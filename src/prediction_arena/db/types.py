"""Column types used by the storage adapter."""
import json
from datetime import timezone

from sqlalchemy import DateTime, Text
from sqlalchemy.types import TypeDecorator

from prediction_arena.utils import to_utc


class JSONEncodedList(TypeDecorator):
    """Stores a list of strings as JSON text; Python code only ever sees list[str]."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return json.dumps([str(item) for item in value])

    def process_result_value(self, value, dialect):
        if value is None:
            return []
        decoded = json.loads(value)
        # Older rows may hold a doubly-encoded string.
        if isinstance(decoded, str):
            decoded = json.loads(decoded)
        return [str(item) for item in decoded]


class UTCDateTime(TypeDecorator):
    """Timezone-aware UTC timestamps.

    PostgreSQL stores timestamptz. SQLite has no timezone support, so values
    are written as UTC without an offset and read back with UTC attached.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        value = to_utc(value)
        if dialect.name == "sqlite":
            return value.replace(tzinfo=None)
        return value

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
