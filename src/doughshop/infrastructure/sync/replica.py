"""Bounded-staleness read model over an authoritative snapshot source.

A replica holds a local copy of some shared state (stock levels, order
statuses) for one viewer.  It is refreshed three ways:

- immediately, when a subscribed event is published in this process;
- by a background poll at a fixed interval, which also picks up writes
  made by other processes sharing the same store;
- on demand via ``refresh()``.

A refresh replaces the local copy wholesale when the serialized snapshot
differs: the last full snapshot wins.  Staleness is bounded by the poll
interval; there is no read-your-writes ordering across processes.
"""

from __future__ import annotations

import json
import threading
from typing import Any, Callable, Iterable, Type

import structlog

from doughshop.domain.bus import EventBus
from doughshop.domain.events import DomainEvent

logger = structlog.get_logger(__name__)

DEFAULT_POLL_INTERVAL = 0.5

Snapshot = dict[str, Any]
ChangeListener = Callable[[Snapshot, Snapshot], None]


class SnapshotReplica:

    def __init__(
        self,
        source: Callable[[], Snapshot],
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        name: str = "replica",
    ) -> None:
        if poll_interval <= 0:
            raise ValueError("poll_interval must be positive")
        self._source = source
        self._poll_interval = poll_interval
        self._name = name
        self._state: Snapshot = {}
        self._serialized = self._serialize(self._state)
        self._listeners: list[ChangeListener] = []
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    # --- Reading --------------------------------------------------------------

    @property
    def state(self) -> Snapshot:
        with self._lock:
            return json.loads(self._serialized)

    def on_change(self, listener: ChangeListener) -> None:
        """Call ``listener(old, new)`` whenever a refresh replaces the state."""
        self._listeners.append(listener)

    # --- Refreshing -----------------------------------------------------------

    def refresh(self) -> bool:
        """Re-read the source; returns True if the local copy was replaced."""
        fresh = self._source()
        serialized = self._serialize(fresh)
        with self._lock:
            if serialized == self._serialized:
                return False
            old = json.loads(self._serialized)
            self._serialized = serialized
            new = json.loads(serialized)
        logger.debug("sync.snapshot_replaced", replica=self._name)
        for listener in list(self._listeners):
            try:
                listener(old, new)
            except Exception:
                logger.exception("sync.listener_failed", replica=self._name)
        return True

    def follow(self, bus: EventBus, event_classes: Iterable[Type[DomainEvent]]) -> None:
        """Refresh straight away whenever one of *event_classes* is published."""
        for event_class in event_classes:
            bus.subscribe(event_class, self._on_event)

    def _on_event(self, event: DomainEvent) -> None:
        self.refresh()

    # --- Polling --------------------------------------------------------------

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self.refresh()
        self._thread = threading.Thread(
            target=self._run, name=f"{self._name}-poller", daemon=True
        )
        self._thread.start()
        logger.info("sync.polling_started", replica=self._name, interval=self._poll_interval)

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
        logger.info("sync.polling_stopped", replica=self._name)

    def _run(self) -> None:
        while not self._stop.wait(self._poll_interval):
            try:
                self.refresh()
            except Exception:
                # A torn or missing store is retried on the next tick.
                logger.warning("sync.poll_failed", replica=self._name, exc_info=True)

    def __enter__(self) -> SnapshotReplica:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    @staticmethod
    def _serialize(snapshot: Snapshot) -> str:
        return json.dumps(snapshot, sort_keys=True, default=str)
