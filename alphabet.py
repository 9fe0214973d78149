# alphabet.py
from __future__ import annotations

from collections.abc import Iterator

from debug import debug
from errors import ConfigurationError, ConversionError

ALPHA26 = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def is_permitted(ch: str) -> bool:
    """True for printable ASCII other than blank, '(', ')' and '*'.

    Parentheses delimit cycles and '*' starts a setting line, so none of
    them may ever be a symbol.
    """
    return len(ch) == 1 and ("!" <= ch <= "'" or "+" <= ch <= "~")


class Alphabet:
    """Ordered, duplicate-free symbols numbered 0..size-1."""

    def __init__(self, chars: str = ALPHA26) -> None:
        if len(chars) < 2:
            raise ConfigurationError(
                f"Alphabet needs at least 2 symbols, got {len(chars)}"
            )
        for ch in chars:
            if not is_permitted(ch):
                raise ConfigurationError(f"Invalid character {ch!r} in alphabet")

        self._chars: str = chars
        self._index: dict[str, int] = {ch: i for i, ch in enumerate(chars)}
        if len(self._index) != len(chars):
            dup = next(ch for ch in chars if chars.count(ch) > 1)
            raise ConfigurationError(f"Duplicate alphabet character {dup!r}")

        debug.log("alphabet", f"{len(chars)} symbols: {chars}")

    @property
    def size(self) -> int:
        return len(self._chars)

    @property
    def chars(self) -> str:
        return self._chars

    def contains(self, ch: str) -> bool:
        return ch in self._index

    # symbol → integer signal
    def to_int(self, ch: str) -> int:
        try:
            return self._index[ch]
        except KeyError:
            raise ConversionError(
                f"Invalid character {ch!r} for current alphabet."
            ) from None

    # integer signal → symbol
    def to_char(self, index: int) -> str:
        if not 0 <= index < len(self._chars):
            hi = len(self._chars) - 1
            raise ConversionError(f"Signal {index} out of range 0-{hi}")
        return self._chars[index]

    def __len__(self) -> int:
        return len(self._chars)

    def __contains__(self, ch: object) -> bool:
        return ch in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self._chars)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Alphabet):
            return NotImplemented
        return self._chars == other._chars

    def __hash__(self) -> int:
        return hash(self._chars)

    def __repr__(self) -> str:
        return f"<Alphabet {self._chars}>"
