"""
Sync progress events for Document Sync.

The orchestrator emits events in order; the UI (or a test) consumes them.
Four kinds:
    StatusEvent   - before each download {stage, total, current, file, percent}
    ProgressEvent - per received chunk {file, percent}
    CompleteEvent - after the cache is saved {downloaded, failed, total}
    ErrorEvent    - unexpected failure {message}
"""

from dataclasses import asdict, dataclass
from typing import Callable, Iterator, Union


@dataclass(frozen=True)
class StatusEvent:
    stage: str
    total: int
    current: int
    file: str
    percent: int = 0

    kind = "sync-status"


@dataclass(frozen=True)
class ProgressEvent:
    file: str
    percent: int

    kind = "sync-progress"


@dataclass(frozen=True)
class CompleteEvent:
    downloaded: int
    failed: int
    total: int

    kind = "sync-complete"


@dataclass(frozen=True)
class ErrorEvent:
    message: str

    kind = "sync-error"


SyncEvent = Union[StatusEvent, ProgressEvent, CompleteEvent, ErrorEvent]
EventListener = Callable[[SyncEvent], None]


def event_payload(event: SyncEvent) -> dict:
    """Plain dict form of an event (what a UI channel would send)."""
    return asdict(event)


class SyncEvents:
    """
    Ordered event channel for one sync session.

    Listeners are called synchronously in emit order. Every event is also kept
    in history so callers can inspect a finished sync.
    """

    def __init__(self):
        self._listeners: list[EventListener] = []
        self._history: list[SyncEvent] = []

    def subscribe(self, listener: EventListener) -> Callable[[], None]:
        """Register a listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def emit(self, event: SyncEvent):
        self._history.append(event)
        for listener in list(self._listeners):
            listener(event)

    def clear(self):
        """Drop history (called at the start of each sync)."""
        self._history = []

    @property
    def history(self) -> list[SyncEvent]:
        return list(self._history)

    def of_kind(self, event_type: type) -> list[SyncEvent]:
        return [e for e in self._history if isinstance(e, event_type)]

    def __iter__(self) -> Iterator[SyncEvent]:
        return iter(list(self._history))

    def __len__(self) -> int:
        return len(self._history)
