# settings_generator.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from random import Random, SystemRandom
from typing import List, Optional

from errors import MachineError, SetupError
from machine import Machine
from suites import SUITES, build_suite
from utilities import load_config

# ── helpers ───────────────────────────────────────────────────────


def build_rng(seed: int | None) -> Random | SystemRandom:
    """Deterministic RNG when *seed* given; CSPRNG otherwise."""
    return Random(seed) if seed is not None else SystemRandom()


def choose_pairs(alpha: str, k: int, rng: Random | SystemRandom) -> List[str]:
    """Return *k* disjoint plug pairs."""
    max_possible = len(alpha) // 2
    k = min(k, max_possible)
    pool = list(alpha)
    rng.shuffle(pool)
    return [a + b for a, b in zip(pool[::2], pool[1::2])][:k]


def choose_rotors(machine: Machine, rng: Random | SystemRandom) -> List[str]:
    """Pick a reflector, then fixed and moving rotors for their slots."""
    by_kind: dict[str, list[str]] = {"reflector": [], "fixed": [], "moving": []}
    for name, rotor in sorted(machine.available_rotors.items()):
        by_kind[rotor.kind].append(name)

    n_moving = machine.num_pawls
    n_fixed = machine.num_rotors - machine.num_pawls - 1
    wanted = {"reflector": 1, "fixed": n_fixed, "moving": n_moving}
    for kind, count in wanted.items():
        if len(by_kind[kind]) < count:
            raise SetupError(
                f"Need {count} {kind} rotor(s), catalog has {len(by_kind[kind])}"
            )

    return (
        rng.sample(by_kind["reflector"], 1)
        + rng.sample(by_kind["fixed"], n_fixed)
        + rng.sample(by_kind["moving"], n_moving)
    )


def generate_settings(
    machine: Machine, rng: Random | SystemRandom, max_pairs: int = 10
) -> str:
    """Return a random setting line the machine will accept."""
    alpha = machine.alphabet.chars
    width = machine.num_rotors - 1

    rotors = choose_rotors(machine, rng)
    setting = "".join(rng.choices(alpha, k=width))
    ring = "".join(rng.choices(alpha, k=width))
    plugs = " ".join(f"({pair})" for pair in choose_pairs(alpha, max_pairs, rng))

    return " ".join(part for part in ["*", *rotors, setting, ring, plugs] if part)


def parse_cli(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Generate a random message-group setting line")
    src = p.add_mutually_exclusive_group(required=True)
    src.add_argument("--config", type=Path, help="Machine configuration file")
    src.add_argument("--suite", choices=sorted(SUITES), help="Built-in rotor suite")
    p.add_argument("--seed", type=int, help="Deterministic seed (omit for random)")
    p.add_argument("--pairs", type=int, default=10, help="Maximum plugboard pairs (default: 10)")
    return p.parse_args(argv)


# ── main ─────────────────────────────────────────────────────────


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_cli(argv)
    try:
        machine = build_suite(args.suite) if args.suite else load_config(args.config)
        print(generate_settings(machine, build_rng(args.seed), args.pairs))
    except (MachineError, OSError) as excp:
        print(f"Error: {excp}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
