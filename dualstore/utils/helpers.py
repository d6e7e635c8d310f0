# ==============================================================================
# HELPER UTILITIES
# ==============================================================================
# Clock helpers shared by both adapters
# ==============================================================================

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Optional

_TICK = timedelta(milliseconds=1)


class MillisecondClock:
    """
    Strictly increasing UTC clock at millisecond precision.

    BSON dates only keep milliseconds, so both stores are stamped with
    the same precision and round-trip without drift. Two calls landing in
    the same millisecond (or a wall clock stepping backwards) would give
    equal stamps; each call therefore returns at least one tick past the
    previous one.
    """

    def __init__(self) -> None:
        self._last: Optional[datetime] = None
        self._lock = threading.Lock()

    def now(self) -> datetime:
        current = datetime.now(timezone.utc)
        current = current.replace(microsecond=(current.microsecond // 1000) * 1000)

        with self._lock:
            if self._last is not None and current <= self._last:
                current = self._last + _TICK
            self._last = current
        return current


_clock = MillisecondClock()


def utc_now() -> datetime:
    """Next stamp from the process-wide millisecond clock."""
    return _clock.now()


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes read back from a store."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
