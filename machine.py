# machine.py  ─────────────────────────────────────────────────────────
from __future__ import annotations

from collections.abc import Mapping, Sequence

from alphabet import Alphabet
from debug import debug
from errors import ConfigurationError, SetupError
from permutation import Permutation
from rotor_and_reflector import Rotor


class Machine:
    """A rotor machine with ``num_rotors`` slots and ``num_pawls`` pawls.

    Slot 0 holds the reflector, the rightmost ``num_pawls`` slots hold
    moving rotors and anything in between is a fixed rotor.  Rotors are
    borrowed from ``all_rotors``, the catalog read from configuration.
    """

    def __init__(
        self,
        alphabet: Alphabet,
        num_rotors: int,
        num_pawls: int,
        all_rotors: Mapping[str, Rotor],
    ) -> None:
        if num_pawls < 0 or num_rotors <= num_pawls:
            raise ConfigurationError(
                f"Invalid number of rotors ({num_rotors}) or pawls ({num_pawls})"
            )

        self._alphabet = alphabet
        self._num_rotors = num_rotors
        self._num_pawls = num_pawls
        self._all_rotors = dict(all_rotors)
        self._rotors: list[Rotor] = []
        self._plugboard = Permutation.identity(alphabet)

    # ── description ─────────────────────────────────────────────
    @property
    def alphabet(self) -> Alphabet:
        return self._alphabet

    @property
    def num_rotors(self) -> int:
        return self._num_rotors

    @property
    def num_pawls(self) -> int:
        return self._num_pawls

    @property
    def available_rotors(self) -> Mapping[str, Rotor]:
        return self._all_rotors

    @property
    def rotors(self) -> tuple[Rotor, ...]:
        return tuple(self._rotors)

    @property
    def plugboard(self) -> Permutation:
        return self._plugboard

    def positions(self) -> str:
        """Window letters of slots 1..n, leftmost first."""
        return "".join(self._alphabet.to_char(r.setting) for r in self._rotors[1:])

    # ── per-group setup ─────────────────────────────────────────
    def _resolve(self, names: Sequence[str]) -> list[Rotor]:
        """Look up NAMES and check slot rules without touching my slots."""
        if len(names) != self._num_rotors:
            raise SetupError(
                f"Expected {self._num_rotors} rotor names, got {len(names)}"
            )

        chosen: list[Rotor] = []
        for name in names:
            rotor = self._all_rotors.get(name)
            if rotor is None:
                raise SetupError(f"Could not find rotor {name!r}")
            if rotor in chosen:
                raise SetupError(f"Duplicate rotor {name!r}")
            chosen.append(rotor)

        self._check_positions(chosen)
        return chosen

    def insert_rotors(self, names: Sequence[str]) -> None:
        """Fill my slots with the rotors called NAMES (NAMES[0] is the reflector)."""
        self._rotors = self._resolve(names)
        debug.log("setup", f"rotors {' '.join(names)}")

    def _check_positions(self, rotors: list[Rotor]) -> None:
        first_moving = self._num_rotors - self._num_pawls
        for i, rotor in enumerate(rotors):
            if rotor.reflects:
                ok = i == 0
            elif rotor.rotates:
                ok = i >= first_moving
            else:
                ok = 0 < i < first_moving
            if not ok:
                raise SetupError(f"{rotor.kind} {rotor.name} cannot go in slot {i}")

    def _require_rotors(self) -> None:
        if not self._rotors:
            raise SetupError("No rotors inserted")

    def _check_text(self, text: str, what: str) -> None:
        if len(text) != self._num_rotors - 1:
            raise SetupError(
                f"{what} {text!r} must have {self._num_rotors - 1} characters"
            )
        for ch in text:
            if ch not in self._alphabet:
                raise SetupError(f"{what} character {ch!r} not in alphabet")

    def set_rotors(self, setting: str) -> None:
        """Set slots 1..n from SETTING, one alphabet symbol per slot.

        The reflector in slot 0 is never set this way.
        """
        self._require_rotors()
        self._check_text(setting, "Rotor setting")
        for rotor, ch in zip(self._rotors[1:], setting):
            rotor.set(ch)
        debug.log("setup", f"setting {setting}")

    def set_ring_setting(self, ring_setting: str = "") -> None:
        """Set ring offsets of slots 1..n; an empty string means all zero."""
        self._require_rotors()
        if not ring_setting:
            ring_setting = self._alphabet.to_char(0) * (self._num_rotors - 1)
        self._check_text(ring_setting, "Ring setting")
        for rotor, ch in zip(self._rotors[1:], ring_setting):
            rotor.set_ring_setting(ch)
        debug.log("setup", f"ring setting {ring_setting}")

    def _check_plugboard(self, plugboard: Permutation) -> None:
        if plugboard.alphabet != self._alphabet:
            raise SetupError("Plugboard alphabet differs from machine alphabet")

    def set_plugboard(self, plugboard: Permutation) -> None:
        self._check_plugboard(plugboard)
        self._plugboard = plugboard
        debug.log("setup", f"plugboard {plugboard}")

    def configure(
        self,
        names: Sequence[str],
        setting: str,
        ring_setting: str = "",
        plugboard: Permutation | None = None,
    ) -> None:
        """Set up a whole message group, or leave me untouched on error.

        Names, slot rules, both setting strings and the plugboard are all
        checked before any slot or rotor changes.
        """
        self._resolve(names)
        self._check_text(setting, "Rotor setting")
        if ring_setting:
            self._check_text(ring_setting, "Ring setting")
        if plugboard is None:
            plugboard = Permutation.identity(self._alphabet)
        self._check_plugboard(plugboard)

        self.insert_rotors(names)
        self.set_rotors(setting)
        self.set_ring_setting(ring_setting)
        self.set_plugboard(plugboard)

    # ── stepping logic  ─────────────────────────────────────────
    def _step_rotors(self) -> None:
        """Advance rotors for one key-press.

        Notches are read once, before anything moves.  A rotor that can
        move takes its right-hand neighbour with it and the scan then skips
        that neighbour, which gives the middle rotor its double step.
        """
        rotors = self._rotors
        last = len(rotors) - 1
        notched = [r.at_notch() for r in rotors]
        can_move = [
            i == last or (rotors[i].rotates and notched[i + 1])
            for i in range(last + 1)
        ]

        i = 0
        while i <= last:
            if can_move[i]:
                rotors[i].advance()
                if i < last:
                    rotors[i + 1].advance()
                    i += 1
            i += 1

        debug.log("stepping", f"positions {self.positions()}")

    # ── encipher one symbol  ────────────────────────────────────
    def convert(self, c: int) -> int:
        """Advance the rotors, then send index C through the machine."""
        self._require_rotors()
        self._step_rotors()

        signal = self._plugboard.permute(c)
        for rotor in reversed(self._rotors):
            signal = rotor.convert_forward(signal)
        for rotor in self._rotors[1:]:
            signal = rotor.convert_backward(signal)
        out = self._plugboard.invert(signal)

        debug.log("signal", f"{c} -> {out}")
        return out

    def convert_message(self, msg: str) -> str:
        """Encode or decode MSG symbol by symbol, in order."""
        to_int, to_char = self._alphabet.to_int, self._alphabet.to_char
        return "".join(to_char(self.convert(to_int(ch))) for ch in msg)

    def __repr__(self) -> str:
        names = " ".join(r.name for r in self._rotors) or "empty"
        return f"<Machine {names} at {self.positions() or '-'}>"
