from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path

from .config import build_gates, gate_configs_from_dict, load_gates_config
from .gate import ThrottleGate
from .logging_utils import setup_logging


logger = logging.getLogger(__name__)


def _cmd_demo(args: argparse.Namespace) -> int:
    gate = ThrottleGate(args.interval, args.label)

    # gates always run when there is no previous run
    gate.try_run()
    rejected = 0
    for _ in range(args.attempts):
        if not gate.try_run():
            rejected += 1

    logger.info("Gate %s: %d permitted, %d rejected", gate.label, gate.total_calls, rejected)
    gate.print_stats()
    if gate.total_calls != 1:
        logger.error("Expected exactly one permitted run, got %d", gate.total_calls)
        return 1
    return 0


def _cmd_simulate(args: argparse.Namespace) -> int:
    cfg = load_gates_config(Path(args.config))
    gates = build_gates(gate_configs_from_dict(cfg))
    logger.info("Loaded %d gates from %s", len(gates), args.config)

    for i in range(args.calls):
        if i and args.pause > 0:
            time.sleep(args.pause)
        for gate in gates.values():
            if gate.run_with_msg():
                logger.debug("%s permitted (call %d)", gate.label, gate.total_calls)

    for gate in gates.values():
        gate.print_stats()
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="throttle-gate")
    p.add_argument("--verbose", action="store_true", default=False, help="Enable debug logging")
    p.add_argument("--log-file", type=str, default=None)
    sub = p.add_subparsers(dest="cmd", required=True)

    demo = sub.add_parser("demo", help="Run one gate once, then hammer it")
    demo.add_argument("--interval", type=float, default=10.0, help="Seconds between permitted runs")
    demo.add_argument("--label", type=str, default="Break")
    demo.add_argument("--attempts", type=int, default=100)
    demo.set_defaults(func=_cmd_demo)

    sim = sub.add_parser("simulate", help="Evaluate gates loaded from YAML/JSON config")
    sim.add_argument("--config", type=str, required=True)
    sim.add_argument("--calls", type=int, default=10)
    sim.add_argument("--pause", type=float, default=0.0, help="Seconds to sleep between rounds")
    sim.set_defaults(func=_cmd_simulate)

    return p


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        log_file=Path(args.log_file) if args.log_file else None,
    )
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
