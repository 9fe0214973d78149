from random import Random

import pytest

import settings_generator
from errors import SetupError
from machine import Machine
from permutation import Permutation
from rotor_and_reflector import Rotor
from settings_generator import build_rng, choose_pairs, generate_settings
from utilities import apply_settings, parse_settings


def test_choose_pairs_are_disjoint():
    pairs = choose_pairs("ABCDEFGHIJ", 10, Random(3))
    assert len(pairs) == 5
    letters = "".join(pairs)
    assert len(set(letters)) == len(letters)


def test_seed_is_deterministic(m4):
    assert generate_settings(m4, build_rng(7)) == generate_settings(m4, build_rng(7))


@pytest.mark.parametrize("seed", range(5))
def test_generated_line_is_accepted_and_reciprocal(m4, seed):
    line = generate_settings(m4, build_rng(seed), max_pairs=6)
    settings = parse_settings(line, m4)
    assert settings.plugboard.derangement() is False
    apply_settings(m4, settings)
    cipher = m4.convert_message("ATTACKATDAWN")
    apply_settings(m4, settings)
    assert m4.convert_message(cipher) == "ATTACKATDAWN"


def test_slot_kinds(m4):
    names = parse_settings(generate_settings(m4, build_rng(1)), m4).rotors
    kinds = [m4.available_rotors[n].kind for n in names]
    assert kinds == ["reflector", "fixed", "moving", "moving", "moving"]


def test_catalog_too_small(alpha):
    catalog = {
        "R": Rotor.reflector("R", Permutation("(AB)(CD)(EF)(GH)(IJ)(KL)(MN)(OP)(QR)(ST)(UV)(WX)(YZ)", alpha)),
        "M": Rotor.moving("M", Permutation("", alpha), "A"),
    }
    with pytest.raises(SetupError):
        generate_settings(Machine(alpha, 3, 2, catalog), build_rng(0))


def test_cli(capsys):
    assert settings_generator.main(["--suite", "m3", "--seed", "11", "--pairs", "3"]) == 0
    line = capsys.readouterr().out.strip()
    assert line.startswith("* ")
    assert line.count("(") == 3
