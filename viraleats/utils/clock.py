"""Injectable wall clock. Services take a Clock so tests can move time."""

from __future__ import annotations

import time
from datetime import datetime, timezone
from typing import Callable
from zoneinfo import ZoneInfo

Clock = Callable[[], float]

system_clock: Clock = time.time


def utc_now(clock: Clock) -> datetime:
    return datetime.fromtimestamp(clock(), tz=timezone.utc)


def local_now(clock: Clock, tz_name: str) -> datetime:
    """Wall time in the configured market timezone (Asia/Kuala_Lumpur by default)."""
    return datetime.fromtimestamp(clock(), tz=ZoneInfo(tz_name))
