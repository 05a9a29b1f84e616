from __future__ import annotations

from dataclasses import dataclass

from .logging_utils import format_duration


@dataclass(frozen=True)
class GateStats:
    label: str
    total_calls: int
    lifetime: float  # seconds
    rate: float  # calls per second

    def format(self) -> str:
        return (
            f"{self.label} called {self.rate:.2f}/sec, total calls {self.total_calls}, "
            f"has been running for {format_duration(self.lifetime)}"
        )
