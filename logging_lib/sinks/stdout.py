"""Stdout sink emitting NDJSON."""

from __future__ import annotations

import json
import sys
import threading
from typing import Mapping, TextIO


class StdoutSink:
    """Write structured records to a text stream as NDJSON."""

    def __init__(self, stream: TextIO | None = None) -> None:
        """Initialize the sink; ``stream`` defaults to ``sys.stdout`` at emit time."""

        self._stream = stream # Explicit stream, or None to follow sys.stdout
        self._lock = threading.Lock()

    def emit(self, record: Mapping[str, object]) -> None:
        """Emit a record as a single JSON line."""

        payload = dict(record)
        payload.setdefault("severity", payload.get("level", "INFO"))

        line = json.dumps(payload, separators=(",", ":"), default=str)
        stream = self._stream or sys.stdout

        with self._lock:
            stream.write(line + "\n")
            stream.flush()
