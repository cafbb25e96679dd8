"""
Event repositories
==================

The planner never talks to a concrete store. Anything with a `list_all()`
method returning `Event` objects can feed it: an in-memory list in tests,
a JSON/CSV/Excel export on the command line, or an adapter over a remote
table store owned by the surrounding application.
"""

from __future__ import annotations
from pathlib import Path
from typing import Iterable, List, Protocol
from .exceptions import EventDataError
from .loader import load_events_json, load_events_table
from .models import Event


class EventRepository(Protocol):
    def list_all(self) -> List[Event]:
        ...


class InMemoryEventRepository:
    """Repository over an already-materialized list of events."""

    def __init__(self, events: Iterable[Event] = ()):
        self._events = list(events)

    def list_all(self) -> List[Event]:
        return list(self._events)


class FileEventRepository:
    """Repository over an exported file; the reader is picked by suffix.

    The file is read on every `list_all()` call, so edits to the export are
    picked up without rebuilding the repository.
    """

    READERS = {
        ".json": load_events_json,
        ".csv": load_events_table,
        ".xlsx": load_events_table,
        ".xlsm": load_events_table,
    }

    def __init__(self, path: str, *, strict: bool = False):
        self.path = path
        self.strict = strict
        suffix = Path(path).suffix.lower()
        if suffix not in self.READERS:
            raise EventDataError(f"Unsupported event file type {suffix!r} (use .json, .csv or .xlsx)")
        self._reader = self.READERS[suffix]

    def list_all(self) -> List[Event]:
        return self._reader(self.path, strict=self.strict)
