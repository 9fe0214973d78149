# rotor_and_reflector.py
from __future__ import annotations

from collections.abc import Iterable

from alphabet import Alphabet
from debug import debug
from errors import ConfigurationError, SetupError
from permutation import Permutation

MOVING = "moving"
FIXED = "fixed"
REFLECTOR = "reflector"


class Rotor:
    """One wheel of the machine.

    A single class covers all three kinds; what a wheel may do is fixed by
    its flags at construction:

    * reflector: ``reflects``, never rotates, wiring must be a derangement
    * fixed rotor: neither flag
    * moving rotor: ``rotates`` and carries a non-empty notch set

    Use :meth:`moving`, :meth:`fixed` or :meth:`reflector` rather than
    calling the constructor directly.
    """

    def __init__(
        self,
        name: str,
        permutation: Permutation,
        *,
        rotates: bool = False,
        reflects: bool = False,
        notches: Iterable[int] = (),
    ) -> None:
        if rotates and reflects:
            raise ConfigurationError(f"Rotor {name} cannot both rotate and reflect")
        if reflects and not permutation.derangement():
            raise ConfigurationError(f"Reflector {name} is not a derangement")

        self._name = name
        self._permutation = permutation
        self._rotates = rotates
        self._reflects = reflects
        self._notches = frozenset(permutation.wrap(n) for n in notches)
        self._setting = 0
        self._ring_setting = 0

    # ── factories ────────────────────────────────────────────────
    @classmethod
    def moving(cls, name: str, permutation: Permutation, notches: str) -> "Rotor":
        if not notches:
            raise ConfigurationError(f"No notch specified for moving rotor {name}")
        alphabet = permutation.alphabet
        for ch in notches:
            if ch not in alphabet:
                raise SetupError(f"Notch {ch!r} of rotor {name} not in alphabet")
        return cls(
            name,
            permutation,
            rotates=True,
            notches=[alphabet.to_int(ch) for ch in notches],
        )

    @classmethod
    def fixed(cls, name: str, permutation: Permutation) -> "Rotor":
        return cls(name, permutation)

    @classmethod
    def reflector(cls, name: str, permutation: Permutation) -> "Rotor":
        return cls(name, permutation, reflects=True)

    # ── read-only description ────────────────────────────────────
    @property
    def name(self) -> str:
        return self._name

    @property
    def permutation(self) -> Permutation:
        return self._permutation

    @property
    def alphabet(self) -> Alphabet:
        return self._permutation.alphabet

    @property
    def size(self) -> int:
        return self._permutation.size

    @property
    def rotates(self) -> bool:
        return self._rotates

    @property
    def reflects(self) -> bool:
        return self._reflects

    @property
    def notches(self) -> frozenset[int]:
        return self._notches

    @property
    def kind(self) -> str:
        if self._reflects:
            return REFLECTOR
        return MOVING if self._rotates else FIXED

    # ── setting & ring ───────────────────────────────────────────
    @property
    def setting(self) -> int:
        return self._setting

    @property
    def ring_setting(self) -> int:
        return self._ring_setting

    def _position(self, posn: int | str) -> int:
        if isinstance(posn, str):
            return self.alphabet.to_int(posn)
        return self._permutation.wrap(posn)

    def set(self, posn: int | str) -> None:
        """Set the window position, as an index or an alphabet symbol."""
        self._setting = self._position(posn)

    def set_ring_setting(self, posn: int | str) -> None:
        self._ring_setting = self._position(posn)

    # ── stepping ─────────────────────────────────────────────────
    def at_notch(self) -> bool:
        """True iff I am positioned to let the rotor on my left advance."""
        return self._rotates and self._setting in self._notches

    def advance(self) -> None:
        if self._rotates:
            self._setting = self._permutation.wrap(self._setting + 1)
            debug.log("rotor", f"{self._name} -> {self._setting}")

    # ── signal paths ─────────────────────────────────────────────
    def convert_forward(self, p: int) -> int:
        wrap = self._permutation.wrap
        shift = self._setting - self._ring_setting
        mapped = self._permutation.permute(wrap(p + shift))
        return wrap(mapped - shift)

    def convert_backward(self, e: int) -> int:
        wrap = self._permutation.wrap
        shift = self._setting - self._ring_setting
        mapped = self._permutation.invert(wrap(e + shift))
        return wrap(mapped - shift)

    # ── niceties ─────────────────────────────────────────────────
    def __repr__(self) -> str:
        return (
            f"<Rotor {self._name} {self.kind} "
            f"pos={self._setting} ring={self._ring_setting}>"
        )
