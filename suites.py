# suites.py
from __future__ import annotations

from typing import Dict, List, Tuple

from alphabet import ALPHA26, Alphabet
from errors import ConfigurationError
from machine import Machine
from permutation import Permutation
from rotor_and_reflector import FIXED, MOVING, REFLECTOR, Rotor
from utilities import make_rotor

# ── historical wirings (symbol k of ALPHA26 goes to wiring[k]) ─────
WIRINGS: Dict[str, str] = {
    "I":      "EKMFLGDQVZNTOWYHXUSPAIBRCJ",
    "II":     "AJDKSIRUXBLHWTMCQGZNPYFVOE",
    "III":    "BDFHJLCPRTXVZNYEIWGAKMUSQO",
    "IV":     "ESOVPZJAYQUIRHXLNFTGKDCMWB",
    "V":      "VZBRGITYUPSDNHLXAWMJQOFECK",
    "VI":     "JPGVOUMFYQBENHZRDKASXLICTW",
    "VII":    "NZJHGRCXMYSWBOUFAIVLPEKQDT",
    "VIII":   "FKQHTLXOCBJSPDZRAMEWNIUYGV",
    "Beta":   "LEYJVCNIXWPBQMDRTAKZGFUHOS",
    "Gamma":  "FSOKANUERHMBTIYCWLQPZXVGJD",
    "A":      "EJMZALYXVBWFCRQUONTSPIKHGD",
    "B":      "YRUHQSLDPXNGOKMIEBFZCWVJAT",
    "C":      "FVPJIAOYEDRZXWGCTKUQSBNMHL",
    "B-thin": "ENKQAUYWJICOPBLMDXZVFTHRGS",
    "C-thin": "RDOBJNTKVEHMLFCWZAXGYIPSUQ",
}

# (catalog name, kind, notches, wiring key)
Wheel = Tuple[str, str, str, str]

_ROTORS: List[Wheel] = [
    ("I",    MOVING, "Q",  "I"),
    ("II",   MOVING, "E",  "II"),
    ("III",  MOVING, "V",  "III"),
    ("IV",   MOVING, "J",  "IV"),
    ("V",    MOVING, "Z",  "V"),
    ("VI",   MOVING, "ZM", "VI"),
    ("VII",  MOVING, "ZM", "VII"),
    ("VIII", MOVING, "ZM", "VIII"),
]

SUITES: Dict[str, Dict] = {
    "m3": {
        "alphabet": ALPHA26,
        "num_rotors": 4,
        "num_pawls": 3,
        "wheels": _ROTORS + [
            ("A", REFLECTOR, "", "A"),
            ("B", REFLECTOR, "", "B"),
            ("C", REFLECTOR, "", "C"),
        ],
    },
    "m4": {
        "alphabet": ALPHA26,
        "num_rotors": 5,
        "num_pawls": 3,
        "wheels": _ROTORS + [
            ("Beta",  FIXED,     "", "Beta"),
            ("Gamma", FIXED,     "", "Gamma"),
            ("B",     REFLECTOR, "", "B-thin"),
            ("C",     REFLECTOR, "", "C-thin"),
        ],
    },
}

_TYPE_TAGS = {MOVING: "M", FIXED: "N", REFLECTOR: "R"}


def _suite(name: str) -> Dict:
    try:
        return SUITES[name.lower()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown suite {name!r}. Expected one of {list(SUITES)}"
        ) from None


def build_rotor(wheel: Wheel, alphabet: Alphabet) -> Rotor:
    name, kind, notches, key = wheel
    perm = Permutation.from_wiring(WIRINGS[key], alphabet)
    return make_rotor(name, kind, notches, perm)


def build_suite(name: str) -> Machine:
    """Return a fresh Machine holding a fresh catalog for suite *name*."""
    suite = _suite(name)
    alphabet = Alphabet(suite["alphabet"])
    catalog = {w[0]: build_rotor(w, alphabet) for w in suite["wheels"]}
    return Machine(alphabet, suite["num_rotors"], suite["num_pawls"], catalog)


def render_config(name: str) -> str:
    """Suite *name* written out in the text configuration format."""
    suite = _suite(name)
    alphabet = Alphabet(suite["alphabet"])
    lines = [suite["alphabet"], f"{suite['num_rotors']} {suite['num_pawls']}"]
    for wheel in suite["wheels"]:
        rotor = build_rotor(wheel, alphabet)
        tag = _TYPE_TAGS[wheel[1]] + wheel[2]
        lines.append(f"{rotor.name:<6} {tag:<4} {rotor.permutation}")
    return "\n".join(lines) + "\n"
