from __future__ import annotations

import logging
import sys
import time
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, TextIO, Union

from .logging_utils import format_duration
from .models import GateStats


logger = logging.getLogger(__name__)


Interval = Union[float, int, timedelta]


def _to_seconds(interval: Interval) -> float:
    if isinstance(interval, timedelta):
        return interval.total_seconds()
    return float(interval)


class ThrottleGate:
    """Let an action through at most once per ``interval`` seconds.

    The gate is a reactive check: callers ask it whether they may run now and
    it answers ``True`` (permitted) or ``False`` (rejected). Bookkeeping is
    updated only on permitted evaluations.

    Not thread-safe. Share a gate between threads only behind your own lock.
    """

    def __init__(
        self,
        interval: Interval,
        label: str,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._interval = _to_seconds(interval)
        self.label = str(label)
        self._clock = clock

        self._created_at = clock()
        self._created_date = datetime.now(timezone.utc)
        self._last_run_at: Optional[float] = None
        self._total_calls = 0

    def __repr__(self) -> str:
        return (
            f"ThrottleGate(label={self.label!r}, interval={self._interval!r}, "
            f"total_calls={self._total_calls})"
        )

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def total_calls(self) -> int:
        return self._total_calls

    @property
    def created_at(self) -> float:
        return self._created_at

    @property
    def created_date(self) -> datetime:
        return self._created_date

    @property
    def last_run_at(self) -> Optional[float]:
        return self._last_run_at

    def _interval_satisfied(self, now: float) -> bool:
        if self._last_run_at is None:
            return True
        elapsed = now - self._last_run_at
        # A clock that stepped backwards counts as satisfied.
        if elapsed < 0:
            return True
        return elapsed >= self._interval

    def try_run(self) -> bool:
        """Decide whether a run is permitted now and record it if so."""
        now = self._clock()
        if not self._interval_satisfied(now):
            return False
        self._last_run_at = now
        self._total_calls += 1
        return True

    def run_if_permitted(self, action: Callable[[], object]) -> bool:
        """Call ``action`` once if the gate permits a run now.

        The run is counted before ``action`` is called, so an action that
        raises still counts. Its exception reaches the caller unchanged.
        """
        if not self.try_run():
            return False
        action()
        return True

    def run_with_msg(self) -> bool:
        """Same as :meth:`try_run`, logging a message when throttled."""
        if self.try_run():
            return True
        logger.info(
            "%s throttled, last run %s ago, next run possible in %s",
            self.label,
            format_duration(self.since_last_run() or 0.0),
            format_duration(self.wait_time()),
        )
        return False

    def since_last_run(self) -> Optional[float]:
        if self._last_run_at is None:
            return None
        return self._clock() - self._last_run_at

    def wait_time(self) -> float:
        """Seconds until the next evaluation would be permitted (0.0 if now)."""
        now = self._clock()
        if self._interval_satisfied(now):
            return 0.0
        assert self._last_run_at is not None
        return max(0.0, self._interval - (now - self._last_run_at))

    def elapsed_lifetime(self) -> float:
        return max(0.0, self._clock() - self._created_at)

    def stats(self) -> GateStats:
        lifetime = self.elapsed_lifetime()
        rate = self._total_calls / lifetime if lifetime > 0 else 0.0
        return GateStats(
            label=self.label,
            total_calls=self._total_calls,
            lifetime=lifetime,
            rate=rate,
        )

    def format_stats(self) -> str:
        return self.stats().format()

    def print_stats(self, file: Optional[TextIO] = None) -> None:
        print(self.format_stats(), file=file if file is not None else sys.stdout)
