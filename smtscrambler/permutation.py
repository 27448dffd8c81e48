"""
Random permutation of name ids for the plain renaming mode.

The scrambler may print a benchmark in several chunks (one per
``check-sat``).  Names printed in an earlier chunk must keep their uniform
name, so every extension only shuffles the ids introduced since the last
one.  Index 0 belongs to "unregistered" and is never moved.
"""

from __future__ import annotations

import logging
from typing import List

from smtscrambler.prng import LinearCongruentialGenerator

logger = logging.getLogger(__name__)


class PermutationTable:
    def __init__(self) -> None:
        self._table: List[int] = []

    def __len__(self) -> int:
        return len(self._table)

    def __getitem__(self, name_id: int) -> int:
        return self._table[name_id]

    def as_list(self) -> List[int]:
        return list(self._table)

    def extend(self, next_id: int, prng: LinearCongruentialGenerator) -> None:
        """Cover ids ``[0, next_id)``, shuffling only the newly added suffix."""
        old_size = len(self._table)
        if old_size > next_id:
            raise ValueError(f"permutation already covers {old_size} ids, registry has {next_id}")
        if old_size == next_id:
            return
        self._table.extend(range(old_size, next_id))
        if not prng.enabled:
            return
        # Knuth shuffle restricted to [max(1, old_size), next_id - 1]
        for i in range(max(1, old_size), next_id - 1):
            j = i + prng.next_bounded(next_id - i)
            self._table[i], self._table[j] = self._table[j], self._table[i]
        logger.debug("permuted name ids %d..%d", max(1, old_size), next_id - 1)
