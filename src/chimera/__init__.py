"""Character mechanics and melee combat for creatures with mutable bodies."""

__version__ = "0.1.0"
