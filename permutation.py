# permutation.py
from __future__ import annotations

import re

from alphabet import Alphabet, is_permitted
from debug import debug
from errors import ConfigurationError

_cycle_re = re.compile(r"\(([^()]+)\)")


def check_cycle_validity(cycles: str) -> None:
    """Raise ConfigurationError unless *cycles* is well-formed cycle notation.

    Accepted: zero or more parenthesised, non-empty runs of permitted
    symbols, one nesting level only.  Whitespace is ignored.  Membership in
    a particular alphabet is checked later, when the Permutation is built.
    """
    text = "".join(cycles.split())
    if not text:
        return
    if text[0] != "(" or text[-1] != ")":
        raise ConfigurationError(f"Permutation cycles invalid: {cycles!r}")

    depth = 0
    run = 0
    for ch in text:
        if ch == "(":
            if depth != 0:
                raise ConfigurationError(f"Nested cycle in {cycles!r}")
            depth = 1
        elif ch == ")":
            if depth != 1 or run == 0:
                raise ConfigurationError(f"Empty or unbalanced cycle in {cycles!r}")
            depth = 0
            run = 0
        elif is_permitted(ch):
            if depth != 1:
                raise ConfigurationError(
                    f"Symbol {ch!r} outside parentheses in {cycles!r}"
                )
            run += 1
        else:
            raise ConfigurationError(f"Invalid character {ch!r} in {cycles!r}")
    if depth != 0:
        raise ConfigurationError(f"Unbalanced parentheses in {cycles!r}")


class Permutation:
    """A bijection over the indices of an alphabet, given in cycle notation.

    ``"(AELTPHQXRU) (BKNW)"`` sends A→E, E→L, …, U→A and B→K, …, W→B;
    symbols that appear in no cycle map to themselves.  Successor and
    predecessor tables are filled once here, so both directions are a
    single list lookup.
    """

    def __init__(self, cycles: str, alphabet: Alphabet) -> None:
        check_cycle_validity(cycles)

        self.alphabet = alphabet
        size = alphabet.size
        self._succ: list[int] = list(range(size))
        self._pred: list[int] = list(range(size))

        seen = [False] * size
        for group in _cycle_re.findall("".join(cycles.split())):
            members = []
            for ch in group:
                if ch not in alphabet:
                    raise ConfigurationError(
                        f"Cycle symbol {ch!r} is not in the alphabet"
                    )
                i = alphabet.to_int(ch)
                if seen[i]:
                    raise ConfigurationError(
                        f"Symbol {ch!r} appears in more than one cycle"
                    )
                seen[i] = True
                members.append(i)

            for k, i in enumerate(members):
                j = members[(k + 1) % len(members)]
                self._succ[i] = j
                self._pred[j] = i

        debug.log("permutation", f"{self} over {size} symbols")

    # ── alternative constructors ─────────────────────────────────
    @classmethod
    def identity(cls, alphabet: Alphabet) -> "Permutation":
        return cls("", alphabet)

    @classmethod
    def from_wiring(cls, wiring: str, alphabet: Alphabet) -> "Permutation":
        """Build from a wiring string: symbol k of *alphabet* maps to wiring[k]."""
        if sorted(wiring) != sorted(alphabet.chars):
            raise ConfigurationError("wiring must be a permutation of alphabet")

        done: set[str] = set()
        groups = []
        for start in alphabet:
            if start in done:
                continue
            group = ""
            ch = start
            while ch not in done:
                done.add(ch)
                group += ch
                ch = wiring[alphabet.to_int(ch)]
            groups.append(f"({group})")
        return cls(" ".join(groups), alphabet)

    # ── lookups ──────────────────────────────────────────────────
    @property
    def size(self) -> int:
        return self.alphabet.size

    def wrap(self, p: int) -> int:
        """Return P modulo size(), always in 0..size()-1."""
        return p % self.alphabet.size

    def permute(self, p: int) -> int:
        return self._succ[self.wrap(p)]

    def invert(self, c: int) -> int:
        return self._pred[self.wrap(c)]

    def permute_char(self, p: str) -> str:
        return self.alphabet.to_char(self.permute(self.alphabet.to_int(p)))

    def invert_char(self, c: str) -> str:
        return self.alphabet.to_char(self.invert(self.alphabet.to_int(c)))

    def derangement(self) -> bool:
        """True iff no index maps to itself."""
        return all(j != i for i, j in enumerate(self._succ))

    def cycles(self) -> list[tuple[int, ...]]:
        """Every cycle, fixed points included, each starting at its lowest index."""
        done = [False] * self.size
        out: list[tuple[int, ...]] = []
        for start in range(self.size):
            if done[start]:
                continue
            cycle = []
            i = start
            while not done[i]:
                done[i] = True
                cycle.append(i)
                i = self._succ[i]
            out.append(tuple(cycle))
        return out

    # ── niceties ─────────────────────────────────────────────────
    def __str__(self) -> str:
        to_char = self.alphabet.to_char
        return " ".join(
            "(" + "".join(to_char(i) for i in cycle) + ")"
            for cycle in self.cycles()
            if len(cycle) > 1
        )

    def __repr__(self) -> str:
        return f"<Permutation {self}>"
