# main.py
from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, TextIO

from debug import COMPONENTS, Debug, debug
from errors import MachineError
from machine import Machine
from suites import SUITES, build_suite
from utilities import load_config, process_messages

# ────────────────────────────────────────────────────────────────────────
#  0. Configuration
# ────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class Config:
    """Runtime switches for the output side of a run."""

    block: int = 5                  # display group size
    line_ending: str = "\r\n"       # historical tooling expects CRLF


# ────────────────────────────────────────────────────────────────────────
#  1. Run
# ────────────────────────────────────────────────────────────────────────


def build_machine(args: argparse.Namespace) -> Machine:
    if args.suite:
        return build_suite(args.suite)
    return load_config(args.config)


def convert_stream(machine: Machine, source: TextIO, sink: TextIO, cfg: Config) -> None:
    """Convert every message group in *source*, writing results to *sink*."""
    lines = (line.rstrip("\r\n") for line in source)
    for out in process_messages(machine, lines, cfg.block):
        sink.write(out + cfg.line_ending)


def run_with(args: argparse.Namespace, cfg: Config) -> None:
    machine = build_machine(args)

    if args.input:
        source = open(args.input, encoding="utf-8")
    else:
        source = sys.stdin
    try:
        if args.output:
            with open(args.output, "w", encoding="utf-8", newline="") as sink:
                convert_stream(machine, source, sink, cfg)
        else:
            convert_stream(machine, source, sys.stdout, cfg)
    finally:
        if source is not sys.stdin:
            source.close()


# ────────────────────────────────────────────────────────────────────────
#  2. CLI helpers
# ────────────────────────────────────────────────────────────────────────


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Encrypt or decrypt with a rotor machine")
    p.add_argument("config", nargs="?", type=Path, help="Machine configuration file (text, or .json)")
    p.add_argument("input", nargs="?", type=Path, help="Messages to convert. Default: standard input")
    p.add_argument("output", nargs="?", type=Path, help="Where to write results. Default: standard output")
    p.add_argument("--suite", choices=sorted(SUITES), help="Use a built-in rotor suite instead of a configuration file")
    p.add_argument("--block", type=int, default=5, help="Output group size. Default: 5")
    p.add_argument(
        "--debug", action="append", default=[], metavar="COMPONENT",
        choices=list(COMPONENTS) + ["all"], help="Log a component (repeatable, or 'all')",
    )
    p.add_argument("--log-file", metavar="FILE", help="Also write debug output to FILE")
    args = p.parse_args(argv)

    # with --suite the positionals shift one place to the left
    if args.suite:
        if args.output is not None:
            p.error("--suite takes at most INPUT and OUTPUT")
        args.config, args.input, args.output = None, args.config, args.input
    elif args.config is None:
        p.error("a configuration file or --suite is required")
    if args.block < 1:
        p.error("--block must be positive")
    return args


def setup_logging(args: argparse.Namespace) -> None:
    if not args.debug:
        return
    Debug.configure(log_to=args.log_file)
    if "all" in args.debug:
        debug.enable(*COMPONENTS)
    else:
        debug.enable(*args.debug)


# ────────────────────────────────────────────────────────────────────────
#  3. Main entry point
# ────────────────────────────────────────────────────────────────────────


def main(argv: Optional[List[str]] = None) -> int:
    """Exit status 0 when every group converts, 1 on the first error."""
    args = parse_args(argv)
    setup_logging(args)
    cfg = Config(block=args.block)

    try:
        run_with(args, cfg)
    except (MachineError, OSError) as excp:
        print(f"Error: {excp}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
