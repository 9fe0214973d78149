# utilities.py
from __future__ import annotations

import json
from collections import deque
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Deque

from alphabet import Alphabet
from debug import debug
from errors import ConfigurationError, SetupError
from machine import Machine
from permutation import Permutation, check_cycle_validity
from rotor_and_reflector import FIXED, MOVING, REFLECTOR, Rotor

# ────────────────────────────────────────────────────────────────────────
#  0. Trivial helpers
# ────────────────────────────────────────────────────────────────────────

_TYPE_CODES = {"M": MOVING, "N": FIXED, "R": REFLECTOR}


def _is_cycle_token(token: str) -> bool:
    return "(" in token or ")" in token


def _take_cycles(tokens: Deque[str]) -> str:
    """Pop and join the leading tokens that belong to cycle notation."""
    parts = []
    while tokens and _is_cycle_token(tokens[0]):
        parts.append(tokens.popleft())
    return " ".join(parts)


def _read_int(token: object, what: str) -> int:
    try:
        return int(token)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{what} must be an integer, got {token!r}") from None


def make_rotor(
    name: str, kind: str, notches: str, perm: Permutation
) -> Rotor:
    if _is_cycle_token(name):
        raise ConfigurationError(f"Characters ( or ) not allowed in rotor name {name!r}")
    if kind == MOVING:
        return Rotor.moving(name, perm, notches)
    if notches:
        raise ConfigurationError(f"Notch given for {kind} {name}")
    if kind == FIXED:
        return Rotor.fixed(name, perm)
    if kind == REFLECTOR:
        return Rotor.reflector(name, perm)
    raise ConfigurationError(f"Wrong rotor type {kind!r} for {name}")


# ────────────────────────────────────────────────────────────────────────
#  1. Machine description
# ────────────────────────────────────────────────────────────────────────


def _read_rotor(tokens: Deque[str], alphabet: Alphabet) -> Rotor:
    try:
        name = tokens.popleft()
        info = tokens.popleft()
    except IndexError:
        raise ConfigurationError("bad rotor description") from None

    code, notches = info[0], info[1:]
    if code not in _TYPE_CODES:
        raise ConfigurationError(f"Wrong rotor type {code!r}. Must be M, N or R.")

    cycles = _take_cycles(tokens)
    check_cycle_validity(cycles)
    return make_rotor(name, _TYPE_CODES[code], notches, Permutation(cycles, alphabet))


def _catalog_machine(
    alphabet: Alphabet, num_rotors: int, num_pawls: int, rotors: Iterable[Rotor]
) -> Machine:
    catalog: dict[str, Rotor] = {}
    for rotor in rotors:
        if rotor.name in catalog:
            raise ConfigurationError(f"Duplicate rotor {rotor.name!r} in configuration")
        catalog[rotor.name] = rotor
        debug.log("config", f"{rotor.kind} {rotor.name}")
    return Machine(alphabet, num_rotors, num_pawls, catalog)


def read_config(text: str) -> Machine:
    """Build a Machine from the text format.

    ``ALPHABET NUM_ROTORS NUM_PAWLS`` followed by any number of
    ``NAME TYPE[NOTCHES] (CYCLES)...`` descriptions, TYPE being M, N or R.
    """
    tokens: Deque[str] = deque(text.split())
    try:
        alphabet = Alphabet(tokens.popleft())
        num_rotors = _read_int(tokens.popleft(), "Number of rotors")
        num_pawls = _read_int(tokens.popleft(), "Number of pawls")
    except IndexError:
        raise ConfigurationError("configuration file truncated") from None

    rotors = []
    while tokens:
        rotors.append(_read_rotor(tokens, alphabet))
    return _catalog_machine(alphabet, num_rotors, num_pawls, rotors)


_JSON_KINDS = {MOVING, FIXED, REFLECTOR}


def read_config_json(data: dict) -> Machine:
    """Build a Machine from an already decoded JSON document."""
    required = {"alphabet", "num_rotors", "num_pawls", "rotors"}
    missing = required - data.keys()
    if missing:
        raise ConfigurationError(f"Missing keys in config: {', '.join(sorted(missing))}")

    alphabet = Alphabet(data["alphabet"])
    rotors = []
    for entry in data["rotors"]:
        try:
            name, kind = entry["name"], entry["type"]
        except KeyError as exc:
            raise ConfigurationError(f"Rotor entry without {exc.args[0]!r}") from None
        if kind not in _JSON_KINDS:
            raise ConfigurationError(f"Wrong rotor type {kind!r} for {name}")
        if "wiring" in entry:
            perm = Permutation.from_wiring(entry["wiring"], alphabet)
        else:
            perm = Permutation(entry.get("cycles", ""), alphabet)
        rotors.append(make_rotor(name, kind, entry.get("notches", ""), perm))

    return _catalog_machine(
        alphabet,
        _read_int(data["num_rotors"], "num_rotors"),
        _read_int(data["num_pawls"], "num_pawls"),
        rotors,
    )


def load_config(path: str | Path) -> Machine:
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"{path}: {exc}") from None
        return read_config_json(data)
    return read_config(text)


# ────────────────────────────────────────────────────────────────────────
#  2. Setting lines
# ────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class GroupSettings:
    """Everything one ``*`` line asks of the machine."""

    rotors: tuple[str, ...]
    setting: str
    ring_setting: str
    plugboard: Permutation


def is_settings_line(line: str) -> bool:
    return line.lstrip().startswith("*")


def parse_settings(line: str, machine: Machine) -> GroupSettings:
    """Parse ``* REFL R1 ... Rn SETTING [RING] [CYCLES...]``."""
    body = line.lstrip()
    if not body.startswith("*"):
        raise SetupError(f"Setting line must start with '*': {line!r}")

    tokens: Deque[str] = deque(body[1:].split())
    n = machine.num_rotors
    if len(tokens) < n + 1:
        raise SetupError(f"Setting line needs {n} rotor names and a setting: {line!r}")

    names = tuple(tokens.popleft() for _ in range(n))
    setting = tokens.popleft()
    ring_setting = ""
    if tokens and not _is_cycle_token(tokens[0]):
        ring_setting = tokens.popleft()

    cycles = _take_cycles(tokens)
    if tokens:
        raise SetupError(f"Unexpected {tokens[0]!r} in setting line")
    check_cycle_validity(cycles)

    return GroupSettings(names, setting, ring_setting, Permutation(cycles, machine.alphabet))


def apply_settings(machine: Machine, settings: GroupSettings) -> None:
    """Set up MACHINE for a group; a rejected line leaves it as it was."""
    machine.configure(
        settings.rotors, settings.setting, settings.ring_setting, settings.plugboard
    )


# ────────────────────────────────────────────────────────────────────────
#  3. Message stream
# ────────────────────────────────────────────────────────────────────────


def preprocess_message(line: str) -> str:
    """Drop blanks and tabs; every other character must be in the alphabet."""
    return "".join(line.split())


def format_message_line(msg: str, block: int = 5) -> str:
    """MSG in groups of BLOCK symbols, the last group possibly shorter."""
    return " ".join(msg[i : i + block] for i in range(0, len(msg), block))


def process_messages(
    machine: Machine, lines: Iterable[str], block: int = 5
) -> Iterator[str]:
    """Yield one output line per message line; setting lines yield nothing.

    Blank lines ahead of the first setting line are dropped.  Any other
    line there, or a stream with no setting line at all, is a SetupError.
    """
    configured = False
    for line in lines:
        if is_settings_line(line):
            apply_settings(machine, parse_settings(line, machine))
            configured = True
            continue

        msg = preprocess_message(line)
        if not configured:
            if msg:
                raise SetupError("Input must start with a setting line ('*')")
            continue
        yield format_message_line(machine.convert_message(msg), block)

    if not configured:
        raise SetupError("No setting line ('*') in input")
