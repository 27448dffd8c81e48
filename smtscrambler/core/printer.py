"""
Serialization of scrambled commands back to SMT-LIB text.

The printer substitutes uniform names, applies the term-annotation policy,
optionally wraps every assertion in a fresh ``:named`` annotation and
appends the companion commands requested after each ``check-sat``.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, List, Optional, TextIO

from smtscrambler.constants import (
    ANNOTATION_NAME_PREFIX,
    GET_MODEL,
    GET_PROOF,
    GET_UNSAT_CORE,
    PRINT_SUCCESS_OFF,
    PRODUCE_MODELS,
    PRODUCE_PROOFS,
    PRODUCE_UNSAT_CORES,
    UNIFORM_NAME_PREFIX,
)
from smtscrambler.parsing.ast import Node
from smtscrambler.parsing.types import ANNOTATION, PATTERN, Command

# Maps a symbol to its uniform id; 0 means "print the symbol verbatim".
Namer = Callable[[str], int]


class AnnotationMode(Enum):
    """What happens to ``(! term attr ...)`` wrappers.

    all:     keep all term annotations.
    pattern: keep pattern annotations, strip named annotations.
    none:    remove all term annotations.
    """

    ALL = "true"
    PATTERN = "pattern"
    NONE = "false"


def make_name(name_id: int) -> str:
    return f"{UNIFORM_NAME_PREFIX}{name_id}"


def prelude(*, incremental: bool = False, count_asserts: bool = False,
            gen_unsat_core: bool = False, gen_model: bool = False,
            gen_proof: bool = False) -> List[str]:
    """Commands printed once before the benchmark itself."""
    lines = []
    if not incremental and not count_asserts:
        # success responses only matter to the incremental trace executor
        lines.append(PRINT_SUCCESS_OFF)
    if gen_unsat_core:
        lines.append(PRODUCE_UNSAT_CORES)
    if gen_model:
        lines.append(PRODUCE_MODELS)
    if gen_proof:
        lines.append(PRODUCE_PROOFS)
    return lines


class Printer:
    def __init__(self, annotations: AnnotationMode = AnnotationMode.ALL,
                 gen_unsat_core: bool = False, gen_model: bool = False,
                 gen_proof: bool = False) -> None:
        self.annotations = annotations
        self.gen_unsat_core = gen_unsat_core
        self.gen_model = gen_model
        self.gen_proof = gen_proof
        self._annotation_count = 0

    def next_annotation_name(self) -> str:
        self._annotation_count += 1
        return f"{ANNOTATION_NAME_PREFIX}{self._annotation_count}"

    def companions(self) -> List[str]:
        extra = []
        if self.gen_unsat_core:
            extra.append(GET_UNSAT_CORE)
        if self.gen_model:
            extra.append(GET_MODEL)
        if self.gen_proof:
            extra.append(GET_PROOF)
        return extra

    def keep_annotation(self, node: Node) -> bool:
        if self.annotations is AnnotationMode.NONE:
            return False
        if self.annotations is AnnotationMode.ALL:
            return True
        return len(node.children) == 2 and node.children[1].symbol == PATTERN

    # -- Serialization ---------------------------------------------------------

    def format_term(self, node: Node, namer: Optional[Namer] = None) -> str:
        parts: List[str] = []
        self._emit(node, namer, parts)
        return "".join(parts)

    def format_command(self, node: Node, namer: Optional[Namer] = None) -> str:
        """One top-level command, plus any companion lines after ``check-sat``."""
        command = node.command
        if command is Command.ASSERT and self.gen_unsat_core:
            label = self.next_annotation_name()
            body = " ".join(self.format_term(c, namer) for c in node.children)
            text = f"({node.symbol} (! {body} :named {label}))"
        else:
            text = self.format_term(node, namer)
        if command is Command.CHECK_SAT:
            text = "\n".join([text, *self.companions()])
        return text

    def print_command(self, out: TextIO, node: Node, namer: Optional[Namer] = None) -> None:
        out.write(self.format_command(node, namer))
        out.write("\n")

    def _emit(self, node: Node, namer: Optional[Namer], parts: List[str]) -> None:
        if node.symbol == ANNOTATION and node.children and not self.keep_annotation(node):
            self._emit(node.children[0], namer, parts)
            return

        if node.needs_parens:
            parts.append("(")
        if node.symbol:
            parts.append(self._symbol_text(node, namer))
        for i, child in enumerate(node.children):
            if i > 0 or node.symbol:
                parts.append(" ")
            self._emit(child, namer, parts)
        if node.needs_parens:
            parts.append(")")

    @staticmethod
    def _symbol_text(node: Node, namer: Optional[Namer]) -> str:
        if node.is_name and namer is not None:
            name_id = namer(node.symbol)
            if name_id:
                return make_name(name_id)
        return node.symbol
