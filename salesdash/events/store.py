from __future__ import annotations
import json
import logging
from pathlib import Path
from typing import Iterable, List

from salesdash.events.model import Event, event_from_dict

log = logging.getLogger(__name__)


class EventStoreError(RuntimeError):
    """The event snapshot could not be loaded."""


class EventStore:
    def list_events(self) -> List[Event]:
        raise NotImplementedError


class InMemoryEventStore(EventStore):
    def __init__(self, events: Iterable[Event] = ()):
        self._events: List[Event] = list(events)

    def add(self, event: Event) -> None:
        self._events.append(event)

    def list_events(self) -> List[Event]:
        # copy so callers never observe later mutations
        return list(self._events)


class JsonFileEventStore(EventStore):
    """Reads a JSON array of raw event records (the ``/api/events`` export shape)."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def list_events(self) -> List[Event]:
        if not self.path.exists():
            log.warning("events file %s not found; using empty snapshot", self.path)
            return []
        try:
            text = self.path.read_text(encoding="utf-8").strip()
            data = json.loads(text) if text else []
        except (OSError, ValueError) as e:
            raise EventStoreError(f"failed to read events from {self.path}: {e}") from e
        if not isinstance(data, list):
            raise EventStoreError(f"expected a JSON array in {self.path}")
        events = [event_from_dict(r) for r in data if isinstance(r, dict)]
        log.debug("loaded %d events from %s", len(events), self.path)
        return events
