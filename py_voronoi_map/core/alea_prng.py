"""
Alea pseudo-random number generator.

Johannes Baagøe's Alea algorithm: small, fast and fully reproducible from a
seed string, so two runs seeded alike place their sites identically.
"""

from typing import Iterable, Union

_TWO_POW_32 = 0x100000000
_TWO_POW_MINUS_32 = 2.3283064365386963e-10


def _uint32(n):
    """Convert to unsigned 32-bit integer."""
    return int(n) & 0xFFFFFFFF


def _masher():
    """Return the Mash hash function with its own running state."""
    n = 0xEFC8249D

    def mash(data) -> float:
        nonlocal n
        for char in str(data):
            n += ord(char)
            h = 0.02519603282416938 * n
            n = _uint32(h)
            h -= n
            h *= n
            n = _uint32(h)
            h -= n
            n += h * _TWO_POW_32
        return _uint32(n) * _TWO_POW_MINUS_32

    return mash


class AleaPRNG:
    """Seeded uniform generator over [0, 1)."""

    def __init__(self, seed: Union[str, int, Iterable] = "default"):
        if hasattr(seed, "__iter__") and not isinstance(seed, str):
            parts = list(seed)
        else:
            parts = [seed]

        self.seed = seed
        mash = _masher()
        self.s0 = mash(" ")
        self.s1 = mash(" ")
        self.s2 = mash(" ")
        self.c = 1

        for part in parts:
            self.s0 = self._wrap(self.s0 - mash(part))
            self.s1 = self._wrap(self.s1 - mash(part))
            self.s2 = self._wrap(self.s2 - mash(part))

    @staticmethod
    def _wrap(value: float) -> float:
        return value + 1 if value < 0 else value

    def random(self) -> float:
        """Generate next random number in [0, 1)."""
        t = 2091639 * self.s0 + self.c * _TWO_POW_MINUS_32
        self.s0 = self.s1
        self.s1 = self.s2
        self.c = int(t)
        self.s2 = t - self.c
        return self.s2

    def uniform(self, low: float, high: float) -> float:
        """Draw a float in [low, high)."""
        return low + (high - low) * self.random()
