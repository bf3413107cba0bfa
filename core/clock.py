# core/clock.py
# Host clock backed by the monotonic OS timer

import time

from interfaces import Clock


class SystemClock(Clock):
    """Host clock backed by ``time.monotonic``."""

    def now_ms(self) -> int:
        return int(time.monotonic() * 1000)

    def sleep_ms(self, ms: int) -> None:
        if ms > 0:
            time.sleep(ms / 1000.0)
