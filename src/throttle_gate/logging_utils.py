from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def setup_logging(level: int = logging.INFO, log_file: Optional[Path] = None) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
    root = logging.getLogger()
    root.setLevel(level)
    if log_file is None:
        return

    log_file.parent.mkdir(parents=True, exist_ok=True)
    target = str(log_file.resolve())
    for h in root.handlers:
        if isinstance(h, logging.FileHandler) and h.baseFilename == target:
            return
    handler = logging.FileHandler(target, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)


def format_duration(seconds: float) -> str:
    """Render a duration for humans: ``10us``, ``250ms``, ``1.5s``, ``3m2s``.

    Sub-unit digits are truncated, so a value never spills into the next unit.
    """
    micros = int(round(seconds * 1_000_000))
    if micros <= 0:
        return "0us"
    if micros < 1_000:
        return f"{micros}us"
    if micros < 1_000_000:
        return f"{micros // 1_000}ms"
    if micros < 60_000_000:
        millis = micros // 1_000
        return f"{millis / 1000:.3f}".rstrip("0").rstrip(".") + "s"

    total = micros // 1_000_000
    hours, rem = divmod(total, 3600)
    minutes, secs = divmod(rem, 60)
    parts = []
    if hours:
        parts.append(f"{hours}h")
    if minutes:
        parts.append(f"{minutes}m")
    if secs:
        parts.append(f"{secs}s")
    return "".join(parts)
