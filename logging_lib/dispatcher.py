"""Dispatcher fan-out for log records."""

from __future__ import annotations

import sys
from threading import RLock
from typing import Iterable, List, Mapping, Protocol

from .queue import RingBufferQueue


class Sink(Protocol):
    def emit(self, record: Mapping[str, object]) -> None:  # pragma: no cover - protocol
        ...


class Dispatcher:
    """Synchronous dispatcher that forwards queued records to sinks.

    With ``auto_flush`` enabled every submitted record is written straight
    through. Disabled, records accumulate in the ring queue until
    :meth:`flush` is called (the monitor runner flushes once per tick), and
    the oldest records are dropped when the queue overflows in between.
    """

    def __init__(
        self,
        queue: RingBufferQueue,
        sinks: Iterable[Sink] = (),
        *,
        auto_flush: bool = True,
    ) -> None:
        """Initialize the dispatcher with a given queue and sinks."""

        self._queue = queue
        self._sinks: List[Sink] = list(sinks)
        self._auto_flush = auto_flush
        self._lock = RLock()

    @property
    def sinks(self) -> List[Sink]:
        with self._lock:
            return list(self._sinks)

    def register_sink(self, sink: Sink) -> None:
        """Register a sink with the dispatcher."""

        with self._lock:
            self._sinks.append(sink)

    def register_sinks(self, sinks: Iterable[Sink]) -> None:
        """Register multiple sinks with the dispatcher."""

        for sink in sinks:
            self.register_sink(sink)

    def submit(self, record: Mapping[str, object]) -> None:
        """Submit a record to the dispatcher."""

        self._queue.put(record)

        if self._auto_flush:
            self.flush()

    def emit_immediate(self, record: Mapping[str, object]) -> None:
        """Bypass the queue and write ``record`` to every sink."""

        for sink in self.sinks:
            self._emit(sink, record)

    def flush(self) -> int:
        """Flush the queue to the sinks and return the number of records written."""

        batch = self._queue.drain()

        if not batch:
            return 0

        sinks_snapshot = self.sinks

        for record in batch:
            for sink in sinks_snapshot:
                self._emit(sink, record)

        return len(batch)

    def stop(self) -> None:
        """Flush anything still queued."""

        self.flush()

    @staticmethod
    def _emit(sink: Sink, record: Mapping[str, object]) -> None:
        try:
            sink.emit(record)
        except Exception as exc:  # pragma: no cover - a broken sink must not stop the monitor loop
            print(f"logging_lib dispatcher failed to emit record: {exc}", file=sys.stderr)
