"""Tests for the logic-sensitive commutativity / antisymmetry oracle."""

import pytest

from smtscrambler.errors import LogicAlreadySetError, LogicNotSetError
from smtscrambler.parsing.ast import make_name_node, make_node
from smtscrambler.prng import LinearCongruentialGenerator
from smtscrambler.rewrite.oracle import (
    Logic,
    LogicFamilies,
    flip_antisymmetric,
    is_commutative,
    operator_symbol,
)


def _logic(name: str) -> Logic:
    logic = Logic()
    logic.set(name)
    return logic


def test_logic_families() -> None:
    fam = LogicFamilies.classify("QF_AUFLIA")
    assert fam.arithmetic and not fam.bitvector and not fam.difference
    fam = LogicFamilies.classify("QF_BVFP")
    assert fam.bitvector and fam.floating_point and not fam.arithmetic
    assert LogicFamilies.classify("QF_IDL").difference


def test_logic_set_once() -> None:
    logic = Logic()
    assert not logic.is_set
    with pytest.raises(LogicNotSetError):
        _ = logic.name
    logic.set("QF_LIA")
    with pytest.raises(LogicAlreadySetError):
        logic.set("QF_BV")
    assert logic.name == "QF_LIA"


def test_arithmetic_plus_is_commutative() -> None:
    assert is_commutative(make_name_node("+"), _logic("QF_LIA")) == 0
    assert is_commutative(make_name_node("*"), _logic("QF_NRA")) == 0
    assert is_commutative(make_name_node("-"), _logic("QF_LIA")) is None
    assert is_commutative(make_name_node("+"), _logic("QF_BV")) is None


def test_equality_not_commutative_in_difference_logic() -> None:
    assert is_commutative(make_name_node("="), _logic("QF_IDL")) is None
    assert is_commutative(make_name_node("="), _logic("QF_LIA")) == 0


def test_core_operators_do_not_need_a_logic() -> None:
    assert is_commutative(make_name_node("and"), Logic()) == 0
    with pytest.raises(LogicNotSetError):
        is_commutative(make_name_node("+"), Logic())


def test_floating_point_rounding_mode_stays_first() -> None:
    logic = _logic("QF_FP")
    assert is_commutative(make_name_node("fp.add"), logic) == 1
    assert is_commutative(make_name_node("fp.eq"), logic) == 0


def test_bitvector_operators() -> None:
    logic = _logic("QF_BV")
    assert is_commutative(make_name_node("bvadd"), logic) == 0
    assert is_commutative(make_name_node("bvsub"), logic) is None


def test_operator_symbol_looks_through_as() -> None:
    head = make_node("as", make_name_node("+"), make_name_node("Int"))
    assert operator_symbol(head) == "+"
    assert is_commutative(head, _logic("QF_LIA")) == 0


def test_flip_disabled_without_seed() -> None:
    prng = LinearCongruentialGenerator(0)
    for _ in range(10):
        assert flip_antisymmetric(make_name_node("<"), _logic("QF_LIA"), prng) is None


def test_flip_returns_the_mirror() -> None:
    logic = _logic("QF_LIA")
    prng = LinearCongruentialGenerator(2024)
    results = {flip_antisymmetric(make_name_node("<="), logic, prng) is not None for _ in range(64)}
    assert results == {True, False}
    prng = LinearCongruentialGenerator(2024)
    for _ in range(64):
        flipped = flip_antisymmetric(make_name_node("<="), logic, prng)
        if flipped is not None:
            assert flipped.symbol == ">="


def test_flip_draws_no_coin_for_other_operators() -> None:
    logic = _logic("QF_BV")
    prng = LinearCongruentialGenerator(77)
    assert flip_antisymmetric(make_name_node("<"), logic, prng) is None
    assert flip_antisymmetric(make_name_node("="), logic, prng) is None
    assert prng.next_bounded(1000) == LinearCongruentialGenerator(77).next_bounded(1000)
