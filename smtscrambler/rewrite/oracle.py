"""
Logic-sensitive rewrite oracle.

Given the benchmark's logic and the operator of an application, decides
whether the operands may be shuffled (commutativity) or whether the
operator may be replaced by its mirror image with the two operands swapped
(antisymmetric relations such as ``<`` / ``>``).

The logic is classified into families by substring match on its name,
e.g. ``QF_AUFLIA`` is arithmetic and ``QF_BVFP`` is both bit-vector and
floating point.  The classification is computed once per run.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional

from smtscrambler.constants import (
    ARITHMETIC_LOGIC_MARKERS,
    BITVECTOR_LOGIC_MARKERS,
    DIFFERENCE_LOGIC_MARKERS,
    FLOATING_POINT_LOGIC_MARKERS,
)
from smtscrambler.errors import LogicAlreadySetError, LogicNotSetError
from smtscrambler.parsing.ast import Node, make_node
from smtscrambler.parsing.types import AS, EQUALS
from smtscrambler.prng import LinearCongruentialGenerator


# ---------------------------------------------------------------------------
# Logic
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LogicFamilies:
    difference: bool
    arithmetic: bool
    bitvector: bool
    floating_point: bool

    @classmethod
    def classify(cls, logic: str) -> "LogicFamilies":
        def matches(markers) -> bool:
            return any(marker in logic for marker in markers)

        return cls(
            difference=matches(DIFFERENCE_LOGIC_MARKERS),
            arithmetic=matches(ARITHMETIC_LOGIC_MARKERS),
            bitvector=matches(BITVECTOR_LOGIC_MARKERS),
            floating_point=matches(FLOATING_POINT_LOGIC_MARKERS),
        )


class Logic:
    """The single ``set-logic`` value of a run."""

    def __init__(self) -> None:
        self._name: Optional[str] = None
        self._families: Optional[LogicFamilies] = None

    @property
    def is_set(self) -> bool:
        return self._name is not None

    @property
    def name(self) -> str:
        if self._name is None:
            raise LogicNotSetError()
        return self._name

    def set(self, name: str) -> None:
        # each benchmark contains a single set-logic command
        if self._name is not None:
            raise LogicAlreadySetError(self._name, name)
        self._name = name

    @property
    def families(self) -> LogicFamilies:
        if self._families is None:
            self._families = LogicFamilies.classify(self.name)
        return self._families


# ---------------------------------------------------------------------------
# Operator tables
# ---------------------------------------------------------------------------

CORE_COMMUTATIVE: FrozenSet[str] = frozenset({"and", "or", "xor", "distinct"})
ARITH_COMMUTATIVE: FrozenSet[str] = frozenset({"+", "*"})
BV_COMMUTATIVE: FrozenSet[str] = frozenset({
    "bvand", "bvor", "bvxor", "bvnand", "bvnor", "bvcomp", "bvadd", "bvmul",
})
# fp.add / fp.mul take the rounding mode first; only the operands commute.
FP_COMMUTATIVE: Dict[str, int] = {"fp.eq": 0, "fp.add": 1, "fp.mul": 1}

ARITH_MIRROR: Dict[str, str] = {"<": ">", ">": "<", "<=": ">=", ">=": "<="}
BV_MIRROR: Dict[str, str] = {
    "bvslt": "bvsgt", "bvsle": "bvsge", "bvult": "bvugt", "bvule": "bvuge",
    "bvsgt": "bvslt", "bvsge": "bvsle", "bvugt": "bvult", "bvuge": "bvule",
}
FP_MIRROR: Dict[str, str] = {
    "fp.leq": "fp.geq", "fp.lt": "fp.gt", "fp.geq": "fp.leq", "fp.gt": "fp.lt",
}


def operator_symbol(head: Node) -> str:
    """Operator name of an application head, looking through ``(as f S)``."""
    if head.symbol == AS:
        if not head.children:
            raise ValueError("qualified identifier without identifier")
        return head.children[0].symbol
    return head.symbol


# ---------------------------------------------------------------------------
# Oracle
# ---------------------------------------------------------------------------

def is_commutative(head: Node, logic: Logic) -> Optional[int]:
    """Index from which the operands of *head* may be permuted, or ``None``."""
    symbol = operator_symbol(head)
    if not symbol:
        return None

    if symbol in CORE_COMMUTATIVE:
        return 0
    families = logic.families
    if symbol == EQUALS and not families.difference:
        return 0
    if families.arithmetic and symbol in ARITH_COMMUTATIVE:
        return 0
    if families.bitvector and symbol in BV_COMMUTATIVE:
        return 0
    if families.floating_point and symbol in FP_COMMUTATIVE:
        return FP_COMMUTATIVE[symbol]
    return None


def mirror_symbol(symbol: str, logic: Logic) -> Optional[str]:
    families = logic.families
    if families.arithmetic and symbol in ARITH_MIRROR:
        return ARITH_MIRROR[symbol]
    if families.bitvector and symbol in BV_MIRROR:
        return BV_MIRROR[symbol]
    if families.floating_point and symbol in FP_MIRROR:
        return FP_MIRROR[symbol]
    return None


def flip_antisymmetric(head: Node, logic: Logic,
                       prng: LinearCongruentialGenerator) -> Optional[Node]:
    """Maybe return the mirrored operator for *head*.

    Returns ``None`` when randomization is off, when the coin says no, or
    when the operator is not an ordering relation of the active logic.  The
    caller must swap the two operands when a node is returned.
    """
    if not prng.enabled:
        return None
    symbol = operator_symbol(head)
    mirrored = mirror_symbol(symbol, logic) if symbol else None
    if mirrored is None or not prng.coin():
        return None
    return make_node(mirrored)
