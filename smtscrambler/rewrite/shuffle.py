"""
Reordering of sibling commands.

Two interchangeable strategies work on a slice ``[start, end)`` of a
list: a uniform Fisher-Yates shuffle driven by the PRNG, and a stable sort
by externally supplied rank scores.  :func:`find_runs` yields the maximal
slices of same-kind commands they are applied to.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterator, List, MutableSequence, Sequence, Tuple, TypeVar

from smtscrambler.prng import LinearCongruentialGenerator
from smtscrambler.utils.file_handlers import PathLike, read_rank_file

logger = logging.getLogger(__name__)

T = TypeVar("T")


def shuffle_list(items: MutableSequence[T], start: int, end: int,
                 prng: LinearCongruentialGenerator) -> None:
    """In-place Fisher-Yates shuffle of ``items[start:end]``."""
    if not prng.enabled:
        return
    for i in range(end - start - 1, 0, -1):
        j = prng.next_bounded(i + 1)
        items[start + i], items[start + j] = items[start + j], items[start + i]


def rank_sort(items: MutableSequence[T], start: int, end: int,
              ranks: Sequence[float]) -> None:
    """Stable ascending sort of ``items[start:end]`` by ``ranks``.

    ``ranks[k]`` scores ``items[start + k]``; ties keep their relative order.
    """
    size = end - start
    if len(ranks) != size:
        raise ValueError(f"expected {size} ranks, got {len(ranks)}")
    order = sorted(range(size), key=lambda k: ranks[k])
    items[start:end] = [items[start + k] for k in order]


def find_runs(items: Sequence[T], belongs: Callable[[T], bool]) -> Iterator[Tuple[int, int]]:
    """Yield ``(start, end)`` of every maximal run of items satisfying *belongs*."""
    i = 0
    while i < len(items):
        if not belongs(items[i]):
            i += 1
            continue
        j = i + 1
        while j < len(items) and belongs(items[j]):
            j += 1
        yield i, j
        i = j


class RankSource:
    """Hands out the scores of a rank file, one block per assertion run.

    A block that the file cannot fill is replaced by zeros (which leaves the
    run in its original order) and a warning is logged.
    """

    def __init__(self, ranks: Sequence[float], origin: str = "<ranks>") -> None:
        self._ranks: List[float] = list(ranks)
        self._pos = 0
        self.origin = origin

    @classmethod
    def from_file(cls, path: PathLike) -> "RankSource":
        return cls(read_rank_file(path), origin=str(path))

    @property
    def remaining(self) -> int:
        return len(self._ranks) - self._pos

    def take(self, size: int) -> List[float]:
        if self.remaining < size:
            logger.warning("%s: %d ranks needed for the assertion run, %d available; "
                           "keeping the original order", self.origin, size, self.remaining)
            self._pos = len(self._ranks)
            return [0.0] * size
        block = self._ranks[self._pos:self._pos + size]
        self._pos += size
        return block

    def finish(self) -> None:
        if self.remaining:
            logger.warning("%s: %d ranks were not used", self.origin, self.remaining)
