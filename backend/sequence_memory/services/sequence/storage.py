"""Key-value backends for persisted player data.

Anything with ``get(key)`` and ``set(key, value)`` works; the stats store
never needs to know which backend it was handed.
"""

from typing import Dict, Optional

from sequence_memory import db
from sequence_memory.models import KeyValue


class MemoryStorage:
    """Process-local storage. Forgets everything on restart."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value


class DatabaseStorage:
    """Stores values as rows of the ``key_value`` table."""

    def __init__(self, app):
        self.app = app

    def get(self, key: str) -> Optional[str]:
        with self.app.app_context():
            row = db.session.get(KeyValue, key)
            return row.value if row else None

    def set(self, key: str, value: str) -> None:
        with self.app.app_context():
            row = db.session.get(KeyValue, key)
            if row is None:
                row = KeyValue(key=key)
            row.value = value
            db.session.add(row)
            try:
                db.session.commit()
            except Exception:
                db.session.rollback()
                raise
