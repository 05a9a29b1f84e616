"""Throttle events and record event stats.

A :class:`ThrottleGate` is created with an interval and a label. Each call to
``try_run()`` returns ``True`` at most once per interval and counts the runs it
let through, so callers can gate an action and report how often it ran.
"""

from .gate import ThrottleGate
from .models import GateStats

__all__ = ["GateStats", "ThrottleGate"]
