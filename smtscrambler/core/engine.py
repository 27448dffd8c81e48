"""
The benchmark transformation engine.

The front-end appends top-level commands to the engine's buffer.  Whenever
a ``check-sat`` arrives (and once more at the end of the input) the engine
runs the transform pipeline over the buffered commands:

1. drop assertions outside the unsat core (when a keep set is given);
2. reorder declarations and assertions, and fix the uniform names
   (through the active :class:`~smtscrambler.core.naming.NamingStrategy`);
3. print the commands;

and then empties the buffer.  Registries, the name permutation and the
PRNG live in a :class:`ScrambleContext` that survives across cycles, so a
symbol keeps its uniform name for the whole benchmark.
"""

from __future__ import annotations

import io
import logging
import sys
from dataclasses import dataclass
from typing import List, MutableSequence, Optional, Set, TextIO

from smtscrambler.constants import MAX_COMMAND_CHILDREN, RECURSION_LIMIT
from smtscrambler.core.naming import (
    FirstOccurrenceNaming,
    NamingStrategy,
    PermutedNaming,
    ScrambleContext,
)
from smtscrambler.core.printer import AnnotationMode, Printer, prelude
from smtscrambler.core.unsat_core import core_comment, filter_named
from smtscrambler.parsing.ast import Node, make_name_node, make_node
from smtscrambler.parsing.parse import FrontEnd
from smtscrambler.parsing.types import Command
from smtscrambler.rewrite import oracle
from smtscrambler.rewrite.shuffle import RankSource, shuffle_list

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Debug infrastructure, switched on by ``--debug`` on the command line.
# ---------------------------------------------------------------------------
_package_logger = logging.getLogger("smtscrambler")


def enable_debug() -> None:
    """Turn on verbose debug logging for the whole package."""
    _package_logger.setLevel(logging.DEBUG)
    if not _package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s [DEBUG] %(name)s: %(message)s"))
        _package_logger.addHandler(handler)


@dataclass
class ScrambleOptions:
    seed: int = 0
    annotations: AnnotationMode = AnnotationMode.ALL
    incremental: bool = False
    gen_unsat_core: bool = False
    gen_model: bool = False
    gen_proof: bool = False
    support_non_smtcomp: bool = False
    support_z3: bool = False
    count_asserts: bool = False


class Engine:
    """Command buffer plus the transform-and-print pipeline."""

    def __init__(self, options: Optional[ScrambleOptions] = None,
                 out: Optional[TextIO] = None,
                 keep: Optional[Set[str]] = None,
                 ranks: Optional[RankSource] = None,
                 rank_mode: Optional[bool] = None,
                 auto_drain: bool = True) -> None:
        self.options = options or ScrambleOptions()
        self.out = out if out is not None else io.StringIO()
        self.keep = keep
        self.ranks = ranks
        self.auto_drain = auto_drain
        self.context = ScrambleContext.from_seed(self.options.seed)
        self.commands: List[Node] = []
        self.printer = Printer(
            annotations=self.options.annotations,
            gen_unsat_core=self.options.gen_unsat_core,
            gen_model=self.options.gen_model,
            gen_proof=self.options.gen_proof,
        )
        if rank_mode is None:
            rank_mode = ranks is not None
        self.naming: NamingStrategy = (
            FirstOccurrenceNaming(self.context, ranks) if rank_mode
            else PermutedNaming(self.context)
        )
        self.front_end = FrontEnd(
            self,
            support_non_smtcomp=self.options.support_non_smtcomp,
            support_z3=self.options.support_z3,
        )
        self._started = False
        self.cycles = 0

    # -- Tree construction primitives ----------------------------------------

    def new_command(self, keyword: str, *children: Optional[Node]) -> Node:
        """Append a top-level command to the buffer."""
        if not keyword:
            raise ValueError("a command needs a keyword")
        present = [c for c in children if c is not None]
        if len(present) > MAX_COMMAND_CHILDREN:
            raise ValueError(f"{keyword}: at most {MAX_COMMAND_CHILDREN} children, got {len(present)}")
        node = Node(symbol=keyword, children=present)
        self.commands.append(node)
        return node

    make_node = staticmethod(make_node)
    make_name_node = staticmethod(make_name_node)

    def register_name(self, text: str) -> int:
        return self.context.registry.register(text)

    def set_logic(self, name: str) -> None:
        self.context.logic.set(name)
        logger.debug("logic set to %s", name)

    # -- Oracle hooks used while terms are built -------------------------------

    def is_commutative(self, head: Node) -> Optional[int]:
        return oracle.is_commutative(head, self.context.logic)

    def flip_antisymmetric(self, head: Node) -> Optional[Node]:
        return oracle.flip_antisymmetric(head, self.context.logic, self.context.prng)

    def shuffle(self, items: MutableSequence[Node], start: int, end: int) -> None:
        if end - start > 1:
            shuffle_list(items, start, end, self.context.prng)

    # -- Pipeline ------------------------------------------------------------

    def begin(self) -> None:
        """Print the prelude (once, before any command)."""
        if self._started:
            return
        self._started = True
        if self.keep is not None:
            self.out.write(core_comment(self.keep) + "\n")
        for line in prelude(
            incremental=self.options.incremental,
            count_asserts=self.options.count_asserts,
            gen_unsat_core=self.options.gen_unsat_core,
            gen_model=self.options.gen_model,
            gen_proof=self.options.gen_proof,
        ):
            self.out.write(line + "\n")

    def at_checkpoint(self) -> bool:
        return bool(self.commands) and self.commands[-1].command is Command.CHECK_SAT

    def drain(self) -> None:
        """Run the transform pipeline over the buffer, print it and empty it."""
        self.begin()
        if self.keep is not None:
            filter_named(self.commands, self.keep)
        if not self.commands:
            return
        self.cycles += 1
        logger.debug("drain cycle %d: %d commands", self.cycles, len(self.commands))
        self.naming.reorder(self.commands)
        for cmd in self.commands:
            self.printer.print_command(self.out, cmd, self.naming.uniform_id)
        self.commands.clear()

    def feed(self, text: str) -> None:
        """Read *text* command by command, draining at every checkpoint."""
        if sys.getrecursionlimit() < RECURSION_LIMIT:
            sys.setrecursionlimit(RECURSION_LIMIT)
        if self.auto_drain:
            self.begin()
        for _ in self.front_end.commands(text):
            if self.auto_drain and self.at_checkpoint():
                self.drain()

    def finish(self) -> None:
        """End of input: drain whatever is left."""
        if self.auto_drain:
            self.drain()
        if self.ranks is not None:
            self.ranks.finish()

    def count_assertions(self) -> int:
        return sum(1 for cmd in self.commands if cmd.command is Command.ASSERT)


def scramble(text: str, options: Optional[ScrambleOptions] = None,
             keep: Optional[Set[str]] = None,
             ranks: Optional[RankSource] = None,
             rank_mode: Optional[bool] = None) -> str:
    """Scramble a whole benchmark held in memory and return the output text."""
    out = io.StringIO()
    engine = Engine(options, out=out, keep=keep, ranks=ranks, rank_mode=rank_mode)
    engine.feed(text)
    engine.finish()
    return out.getvalue()


def count_assertions(text: str, options: Optional[ScrambleOptions] = None) -> int:
    engine = Engine(options, auto_drain=False)
    engine.feed(text)
    return engine.count_assertions()
