"""
Deterministic pseudo-random number generator.

Every randomized decision of the scrambler (shuffles, the name
permutation, operator flips) draws from one instance of this generator,
so a seed fully determines the output.  It is a plain 48-bit linear
congruential generator and is not meant to be cryptographically strong.
"""

from __future__ import annotations

from smtscrambler.constants import (
    LCG_INCREMENT,
    LCG_MODULUS,
    LCG_MULTIPLIER,
    LCG_OUTPUT_SHIFT,
    NO_SCRAMBLE_SEED,
)


class LinearCongruentialGenerator:
    """Seeded LCG; seed ``0`` means "do not randomize anything"."""

    def __init__(self, seed: int) -> None:
        if seed < 0:
            raise ValueError(f"seed must be >= 0, got {seed}")
        self.seed = seed
        self._state = seed % LCG_MODULUS

    @property
    def enabled(self) -> bool:
        return self.seed != NO_SCRAMBLE_SEED

    def next_bounded(self, upper_bound: int) -> int:
        """Advance the state and return a value in ``[0, upper_bound)``."""
        if upper_bound <= 0:
            raise ValueError(f"upper bound must be positive, got {upper_bound}")
        self._state = (self._state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return (self._state >> LCG_OUTPUT_SHIFT) % upper_bound

    def coin(self) -> bool:
        return self.next_bounded(2) == 1
