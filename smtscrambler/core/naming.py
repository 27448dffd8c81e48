"""
Renaming strategies.

The transform pipeline is the same in both modes; what differs is how the
commands of a drain cycle are reordered and how a symbol is mapped to its
uniform id:

* :class:`PermutedNaming` shuffles runs of ``declare-fun`` and runs of
  ``assert`` uniformly and prints ``x<perm[id]>`` where ``id`` comes from the
  registry filled by the front-end and ``perm`` is a random permutation.
* :class:`FirstOccurrenceNaming` sorts the assertions by external ranks,
  numbers names in the order they first appear in the sorted assertions,
  and sorts the declarations to match.  Every other declared or bound
  name is numbered afterwards so that no original name leaks through.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from smtscrambler.errors import SplitRunError
from smtscrambler.parsing.ast import Node
from smtscrambler.parsing.types import Command, is_declaration_keyword
from smtscrambler.permutation import PermutationTable
from smtscrambler.prng import LinearCongruentialGenerator
from smtscrambler.registry import SymbolRegistry
from smtscrambler.rewrite.declarations import assign_first_occurrence, sort_declarations
from smtscrambler.rewrite.oracle import Logic
from smtscrambler.rewrite.shuffle import RankSource, find_runs, rank_sort, shuffle_list

logger = logging.getLogger(__name__)


@dataclass
class ScrambleContext:
    """State shared by every drain cycle of one run."""

    prng: LinearCongruentialGenerator
    logic: Logic = field(default_factory=Logic)
    registry: SymbolRegistry = field(default_factory=SymbolRegistry)
    rank_registry: SymbolRegistry = field(default_factory=SymbolRegistry)
    permutation: PermutationTable = field(default_factory=PermutationTable)

    @classmethod
    def from_seed(cls, seed: int) -> "ScrambleContext":
        return cls(prng=LinearCongruentialGenerator(seed))


def _is_assert(node: Node) -> bool:
    return node.command is Command.ASSERT


def _is_declare_fun(node: Node) -> bool:
    return node.command is Command.DECLARE_FUN


def _is_declaration(node: Node) -> bool:
    return is_declaration_keyword(node.symbol)


class NamingStrategy:
    def __init__(self, context: ScrambleContext) -> None:
        self.context = context

    def reorder(self, commands: List[Node]) -> None:
        raise NotImplementedError

    def uniform_id(self, symbol: str) -> int:
        raise NotImplementedError


class PermutedNaming(NamingStrategy):
    def reorder(self, commands: List[Node]) -> None:
        prng = self.context.prng
        if prng.enabled:
            for predicate in (_is_declare_fun, _is_assert):
                for start, end in find_runs(commands, predicate):
                    if end - start > 1:
                        shuffle_list(commands, start, end, prng)
        self.context.permutation.extend(self.context.registry.next_id, prng)

    def uniform_id(self, symbol: str) -> int:
        name_id = self.context.registry.lookup(symbol)
        if name_id == 0:
            return 0
        return self.context.permutation[name_id]


class FirstOccurrenceNaming(NamingStrategy):
    def __init__(self, context: ScrambleContext, ranks: Optional[RankSource] = None) -> None:
        super().__init__(context)
        self.ranks = ranks

    def _declared(self, symbol: str) -> bool:
        return symbol in self.context.registry

    def _single_run(self, commands: List[Node], predicate, kind: str):
        runs = list(find_runs(commands, predicate))
        if len(runs) > 1:
            raise SplitRunError(kind)
        return runs[0] if runs else None

    def reorder(self, commands: List[Node]) -> None:
        registry = self.context.rank_registry

        run = self._single_run(commands, _is_assert, "assertions")
        if run is not None and self.ranks is not None:
            start, end = run
            ranks = self.ranks.take(end - start)
            if end - start > 1:
                rank_sort(commands, start, end, ranks)

        # number names in the order they first appear in the sorted assertions
        for cmd in commands:
            if _is_assert(cmd):
                assign_first_occurrence(cmd, registry, self._declared)

        run = self._single_run(commands, _is_declaration, "declarations and definitions")
        if run is not None and run[1] - run[0] > 1:
            sort_declarations(commands, run[0], run[1], registry)

        # declared names that no assertion mentions, in declaration order
        for symbol, _ in self.context.registry.items():
            registry.register(symbol)
        logger.debug("first-occurrence ids assigned: %d", len(registry))

    def uniform_id(self, symbol: str) -> int:
        return self.context.rank_registry.lookup(symbol)
