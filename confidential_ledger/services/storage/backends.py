"""
Event Storage Implementations

Two backends behind EventStorageInterface:
- InMemoryEventStorage: a list, for tests and embedded use
- JsonLinesEventStorage: one JSON object per line in a local file

TRADEOFFS of the JSON-lines file:
- No indexing (we filter in Python)
- Whole-file scan for reads (fine for an audit trail of this size)
- Human-readable and trivially exportable
"""

from pathlib import Path
from typing import Union

from pydantic import ValidationError

from confidential_ledger.models.events import LedgerEvent
from confidential_ledger.models.ciphertext import normalize_principal
from confidential_ledger.services.storage.interface import (
    EventStorageError,
    EventStorageInterface,
)


def _involves(event: LedgerEvent, principal: str) -> bool:
    if event.principal == principal:
        return True
    return principal in (
        event.details.get("previous_owner"),
        event.details.get("new_owner"),
    )


class InMemoryEventStorage(EventStorageInterface):
    """Keeps events in a Python list."""

    def __init__(self):
        self._events: list[LedgerEvent] = []

    def append_event(self, event: LedgerEvent) -> bool:
        self._events.append(event)
        return True

    def get_events_by_principal(self, principal: str) -> list[LedgerEvent]:
        principal = normalize_principal(principal)
        return [e for e in self._events if _involves(e, principal)]

    def get_recent_events(self, limit: int = 100) -> list[LedgerEvent]:
        return list(reversed(self._events))[:limit]

    def __len__(self) -> int:
        return len(self._events)


class JsonLinesEventStorage(EventStorageInterface):
    """Appends events to a JSON-lines file."""

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise EventStorageError(f"Cannot create event log directory: {e}")

    @property
    def path(self) -> Path:
        return self._path

    def append_event(self, event: LedgerEvent) -> bool:
        try:
            with self._path.open("a", encoding="utf-8") as fh:
                fh.write(event.to_json_line() + "\n")
        except OSError as e:
            raise EventStorageError(f"Failed to append event {event.event_id}: {e}")
        return True

    def _read_all(self) -> list[LedgerEvent]:
        if not self._path.exists():
            return []
        events = []
        try:
            with self._path.open("r", encoding="utf-8") as fh:
                for line_no, line in enumerate(fh, start=1):
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        events.append(LedgerEvent.from_json_line(line))
                    except ValidationError as e:
                        raise EventStorageError(
                            f"Corrupt event at {self._path}:{line_no}: {e}"
                        )
        except OSError as e:
            raise EventStorageError(f"Failed to read event log: {e}")
        return events

    def get_events_by_principal(self, principal: str) -> list[LedgerEvent]:
        principal = normalize_principal(principal)
        return [e for e in self._read_all() if _involves(e, principal)]

    def get_recent_events(self, limit: int = 100) -> list[LedgerEvent]:
        return list(reversed(self._read_all()))[:limit]
