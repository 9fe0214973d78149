# errors.py
from __future__ import annotations


class MachineError(ValueError):
    """Base class for everything the rotor machine refuses to do."""


class ConfigurationError(MachineError):
    """Bad alphabet, cycle notation, reflector wiring or rotor/pawl counts."""


class SetupError(MachineError):
    """A message group asked for rotors or settings the machine cannot take."""


class ConversionError(MachineError, LookupError):
    """A symbol or index has no counterpart in the alphabet."""
