from __future__ import annotations

import json
import math
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterable

import yaml

from .gate import ThrottleGate


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class GateConfig:
    label: str
    interval: float  # seconds

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "GateConfig":
        if not isinstance(d, dict):
            raise ConfigError(f"gate entry must be a mapping, got {type(d).__name__}")
        if "label" not in d:
            raise ConfigError(f"gate entry is missing 'label': {d!r}")
        if "interval" not in d:
            raise ConfigError(f"gate {d['label']!r} is missing 'interval'")

        raw = d["interval"]
        # bool is an int subclass; reject it explicitly.
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            raise ConfigError(f"gate {d['label']!r}: interval must be a number of seconds, got {raw!r}")
        if not math.isfinite(raw):
            raise ConfigError(f"gate {d['label']!r}: interval must be finite, got {raw!r}")
        if raw < 0:
            raise ConfigError(f"gate {d['label']!r}: interval must be >= 0, got {raw!r}")
        return GateConfig(label=str(d["label"]), interval=float(raw))


def load_gates_config(path: Path) -> dict[str, Any]:
    """Read a YAML or JSON gates file. An empty file yields ``{}``."""
    data = path.read_text(encoding="utf-8")
    if not data.strip():
        return {}
    try:
        if path.suffix.lower() in {".yaml", ".yml"}:
            cfg = yaml.safe_load(data)
        else:
            cfg = json.loads(data)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigError(f"cannot parse {path}: {exc}") from exc

    if cfg is None:
        return {}
    if not isinstance(cfg, dict):
        raise ConfigError(f"{path}: top level must be a mapping, got {type(cfg).__name__}")
    return cfg


def gate_configs_from_dict(d: dict[str, Any]) -> list[GateConfig]:
    if not isinstance(d, dict):
        raise ConfigError(f"config must be a mapping, got {type(d).__name__}")
    gates = d.get("gates")
    if gates is None:
        raise ConfigError("config has no 'gates' section")
    if not isinstance(gates, list):
        raise ConfigError("'gates' must be a list")
    return [GateConfig.from_dict(g) for g in gates]


def build_gates(
    configs: Iterable[GateConfig],
    clock: Callable[[], float] = time.monotonic,
) -> dict[str, ThrottleGate]:
    """Create one gate per config, keyed by label (last duplicate wins)."""
    return {c.label: ThrottleGate(c.interval, c.label, clock=clock) for c in configs}
