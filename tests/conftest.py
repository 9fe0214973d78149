import pytest

from alphabet import Alphabet
from permutation import Permutation
from rotor_and_reflector import Rotor
from suites import build_suite, render_config

ROTOR_I = "(AELTPHQXRU) (BKNW) (CMOY) (DFG) (IV) (JZ) (S)"
REFLECTOR_B = "(AY) (BR) (CU) (DH) (EQ) (FS) (GL) (IP) (JX) (KN) (MO) (TZ) (VW)"


@pytest.fixture
def alpha():
    return Alphabet()


@pytest.fixture
def rotor_i(alpha):
    return Rotor.moving("I", Permutation(ROTOR_I, alpha), "Q")


@pytest.fixture
def reflector_b(alpha):
    return Rotor.reflector("B", Permutation(REFLECTOR_B, alpha))


@pytest.fixture
def m3():
    """Reflector + three moving rotors, wide reflectors A/B/C."""
    return build_suite("m3")


@pytest.fixture
def m4():
    return build_suite("m4")


@pytest.fixture
def m4_conf(tmp_path):
    path = tmp_path / "default.conf"
    path.write_text(render_config("m4"), encoding="utf-8")
    return path
