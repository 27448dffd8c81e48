"""
Equisatisfiability check between a benchmark and its scrambled version.

Scrambling must not change the answer of a benchmark.  This module feeds
the declarations, definitions and assertions that precede the first
``check-sat`` of each script to z3 and compares the two answers.  A
mismatch is reported only when both answers are definite.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List

import z3

from smtscrambler.constants import DEFAULT_VERIFY_TIMEOUT_MS
from smtscrambler.core.engine import Engine, ScrambleOptions
from smtscrambler.core.printer import Printer
from smtscrambler.parsing.types import Command, is_declaration_keyword

logger = logging.getLogger(__name__)

_DEFINITE = frozenset({"sat", "unsat"})


@dataclass
class EquisatResult:
    original: str
    scrambled: str

    @property
    def mismatch(self) -> bool:
        return (self.original in _DEFINITE and self.scrambled in _DEFINITE
                and self.original != self.scrambled)

    def __str__(self) -> str:
        verdict = "MISMATCH" if self.mismatch else "ok"
        return f"equisat {verdict}: original={self.original} scrambled={self.scrambled}"


def first_query(text: str) -> str:
    """The commands z3 needs to answer the first ``check-sat`` of *text*.

    The script is read with the scrambler's own front-end (with every
    command group enabled and no randomization) and the relevant commands
    are printed back verbatim.
    """
    engine = Engine(ScrambleOptions(seed=0, support_non_smtcomp=True, support_z3=True),
                    auto_drain=False)
    printer = Printer()
    kept: List[str] = []
    answered = False
    for cmd in engine.front_end.commands(text):
        command = cmd.command
        if command in (Command.PUSH, Command.POP):
            raise ValueError("incremental scripts (push/pop) cannot be checked")
        if command is Command.CHECK_SAT:
            answered = True
        if answered:
            continue
        if command is Command.ASSERT or is_declaration_keyword(cmd.symbol):
            kept.append(printer.format_term(cmd))
    return "\n".join(kept)


def solve(text: str, timeout_ms: int = DEFAULT_VERIFY_TIMEOUT_MS) -> str:
    """Return z3's answer (``sat``, ``unsat`` or ``unknown``) for *text*."""
    solver = z3.Solver()
    solver.set("timeout", timeout_ms)
    try:
        solver.add(z3.parse_smt2_string(first_query(text), ctx=solver.ctx))
    except z3.Z3Exception as exc:
        logger.warning("z3 could not parse the script: %s", exc)
        return "unknown"
    return str(solver.check())


def check_equisatisfiable(original: str, scrambled: str,
                          timeout_ms: int = DEFAULT_VERIFY_TIMEOUT_MS) -> EquisatResult:
    result = EquisatResult(solve(original, timeout_ms), solve(scrambled, timeout_ms))
    logger.debug("%s", result)
    return result
