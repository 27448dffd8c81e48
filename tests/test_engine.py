"""End-to-end tests of the transform pipeline through :func:`scramble`."""

import logging
import re

import pytest

from smtscrambler import Engine, ScrambleOptions, scramble
from smtscrambler.core.engine import count_assertions
from smtscrambler.core.printer import AnnotationMode
from smtscrambler.errors import LogicNotSetError, SplitRunError
from smtscrambler.parsing.ast import make_node
from smtscrambler.rewrite.shuffle import RankSource

RANKED = """\
(set-logic QF_LIA)
(declare-fun a () Int)
(declare-fun b () Int)
(declare-fun c () Int)
(assert (> a 3))
(assert (> b 1))
(assert (> c 2))
(check-sat)
"""

NAMED = """\
(set-logic QF_LIA)
(declare-fun a () Int)
(assert (! (> a 0) :named n1))
(assert (! (> a 1) :named n2))
(assert (< a 5))
(check-sat)
"""

TWO_CHECKS = """\
(set-logic QF_LIA)
(declare-fun a () Int)
(assert (> a 0))
(check-sat)
(declare-fun b () Int)
(assert (> b a))
(check-sat)
"""


def _lines(text: str) -> list:
    return text.splitlines()


def _declared(text: str) -> list:
    return [line.split()[1] for line in _lines(text) if line.startswith("(declare-fun ")]


def test_seed_zero_keeps_order_and_numbers_names(lia_benchmark) -> None:
    out = scramble(lia_benchmark, ScrambleOptions(seed=0))
    assert _lines(out) == [
        "(set-option :print-success false)",
        "(set-info :status sat)",
        "(set-logic QF_LIA)",
        "(declare-fun x1 () Int)",
        "(declare-fun x2 () Int)",
        "(declare-fun x3 () Int)",
        "(assert (< x1 x2))",
        "(assert (> (+ x1 x2 x3) 0))",
        "(assert (= x3 2))",
        "(check-sat)",
        "(exit)",
    ]


def test_same_seed_same_output(lia_benchmark) -> None:
    first = scramble(lia_benchmark, ScrambleOptions(seed=1234))
    second = scramble(lia_benchmark, ScrambleOptions(seed=1234))
    assert first == second
    assert sorted(_declared(first)) == ["x1", "x2", "x3"]


def test_scrambled_output_only_uses_uniform_names(lia_benchmark) -> None:
    out = scramble(lia_benchmark, ScrambleOptions(seed=99))
    body = "\n".join(_lines(out)[3:])
    assert not re.search(r"\b[abc]\b", body)
    assert len([line for line in _lines(out) if line.startswith("(assert")]) == 3


def test_ordering_relations_may_be_mirrored(lia_benchmark) -> None:
    """(< a b) is the first randomized decision; the coin picks (> b a) or keeps it."""
    relation = re.compile(r"\(assert \(([<>]) (x\d) (x\d)\)\)")
    for seed, flipped in ((1, False), (2, True), (3, False), (4, True)):
        out = scramble(lia_benchmark, ScrambleOptions(seed=seed))
        (match,) = [m for m in map(relation.fullmatch, _lines(out)) if m]
        assert match.group(1) == (">" if flipped else "<")
        assert match.group(2) != match.group(3)


def test_names_persist_across_check_sat() -> None:
    out = scramble(TWO_CHECKS, ScrambleOptions(seed=31))
    first, second = _declared(out)
    assert first != second
    lines = _lines(out)
    split = lines.index("(check-sat)")
    assert any(first in line for line in lines[:split] if line.startswith("(assert"))
    later = [line for line in lines[split + 1:] if line.startswith("(assert")]
    assert len(later) == 1 and first in later[0] and second in later[0]


def test_rescrambling_with_seed_zero_is_idempotent(lia_benchmark) -> None:
    options = ScrambleOptions(seed=0, incremental=True)
    once = scramble(lia_benchmark, options)
    assert scramble(once, options) == once


def test_rescrambling_keeps_structure(lia_benchmark, parse) -> None:
    scrambled = scramble(lia_benchmark, ScrambleOptions(seed=77, incremental=True))
    again = scramble(scrambled, ScrambleOptions(seed=0, incremental=True))
    assert [c.shape() for c in parse(again)] == [c.shape() for c in parse(scrambled)]


def test_rank_mode_sorts_assertions_and_declarations() -> None:
    out = scramble(RANKED, ScrambleOptions(seed=0), ranks=RankSource([3.0, 1.0, 2.0]))
    assert _lines(out) == [
        "(set-option :print-success false)",
        "(set-logic QF_LIA)",
        "(declare-fun x1 () Int)",
        "(declare-fun x2 () Int)",
        "(declare-fun x3 () Int)",
        "(assert (> x1 1))",
        "(assert (> x2 2))",
        "(assert (> x3 3))",
        "(check-sat)",
    ]


def test_rank_mode_with_too_few_ranks_keeps_order(caplog) -> None:
    with caplog.at_level(logging.WARNING):
        out = scramble(RANKED, ScrambleOptions(seed=0), ranks=RankSource([1.0]))
    assert "(assert (> x1 3))" in _lines(out)
    assert "ranks needed" in caplog.text


def test_rank_mode_rejects_split_assertions() -> None:
    text = "(set-logic QF_LIA)(declare-fun a () Int)(assert (> a 0))" \
           "(declare-fun b () Int)(assert (> b 0))"
    with pytest.raises(SplitRunError, match="assertions in multiple chunks"):
        scramble(text, ranks=RankSource([1.0, 2.0]))


def test_unsat_core_filter() -> None:
    out = scramble(NAMED, ScrambleOptions(seed=0), keep={"n2"})
    assert _lines(out) == [
        ";; parsed 1 names: n2",
        "(set-option :print-success false)",
        "(set-logic QF_LIA)",
        "(declare-fun x1 () Int)",
        "(assert (! (> x1 1) :named x3))",
        "(assert (< x1 5))",
        "(check-sat)",
    ]


def test_unsat_core_generation(lia_benchmark) -> None:
    options = ScrambleOptions(seed=0, gen_unsat_core=True, annotations=AnnotationMode.NONE)
    lines = _lines(scramble(lia_benchmark, options))
    assert lines[:2] == ["(set-option :print-success false)",
                         "(set-option :produce-unsat-cores true)"]
    assert "(assert (! (< x1 x2) :named smtcomp1))" in lines
    assert "(assert (! (= x3 2) :named smtcomp3))" in lines
    assert lines[lines.index("(check-sat)") + 1] == "(get-unsat-core)"


def test_count_assertions(lia_benchmark) -> None:
    assert count_assertions(lia_benchmark) == 3


def test_missing_logic_is_fatal() -> None:
    with pytest.raises(LogicNotSetError):
        scramble("(declare-fun a () Int)(assert (> a 0))")


def test_command_child_limit() -> None:
    engine = Engine()
    with pytest.raises(ValueError):
        engine.new_command("assert", *[make_node("x") for _ in range(5)])


def test_rank_mode_renames_unused_constructors() -> None:
    text = "(set-logic QF_DT)(declare-datatype Color ((red) (green)))" \
           "(declare-fun c () Color)(assert (= c green))(check-sat)"
    out = scramble(text, ScrambleOptions(seed=0), ranks=RankSource([1.0]))
    assert _lines(out) == [
        "(set-option :print-success false)",
        "(set-logic QF_DT)",
        "(declare-datatype x3 ((x4) (x2)))",
        "(declare-fun x1 () x3)",
        "(assert (= x1 x2))",
        "(check-sat)",
    ]


def test_rank_mode_renames_unused_binders() -> None:
    text = "(set-logic LIA)(declare-fun a () Int)" \
           "(assert (forall ((secret Int) (y Int)) (> a y)))(check-sat)"
    out = scramble(text, ScrambleOptions(seed=0), ranks=RankSource([1.0]))
    assert "secret" not in out
    assert "(declare-fun x2 () Int)" in _lines(out)
    assert "(assert (forall ((x3 Int) (x1 Int)) (> x2 x1)))" in _lines(out)


def test_rank_mode_rejects_split_declarations() -> None:
    text = "(set-logic QF_LIA)(declare-fun a () Int)(assert (> a 0))(declare-fun b () Int)"
    with pytest.raises(SplitRunError, match="declarations and definitions in multiple chunks"):
        scramble(text, ranks=RankSource([1.0]))


RUNS = "(set-logic QF_UF)\n" + "".join(
    f"(declare-fun d{k} ({' '.join(['Int'] * k)}) Bool)\n" for k in range(1, 6)
) + "".join(f"(assert (d1 {k}))\n" for k in range(1, 6)) + "(check-sat)\n"


def test_declaration_and_assertion_runs_are_shuffled() -> None:
    lines = _lines(scramble(RUNS, ScrambleOptions(seed=5)))
    arities = [line.count("Int") for line in lines if line.startswith("(declare-fun ")]
    assert arities == [2, 1, 4, 3, 5]
    constants = [re.fullmatch(r"\(assert \(x\d (\d)\)\)", line) for line in lines
                 if line.startswith("(assert")]
    assert [int(m.group(1)) for m in constants] == [4, 3, 2, 1, 5]


def test_runs_keep_their_order_with_seed_zero() -> None:
    lines = _lines(scramble(RUNS, ScrambleOptions(seed=0)))
    assert [line.count("Int") for line in lines if line.startswith("(declare-fun ")] == [1, 2, 3, 4, 5]
    assert [line for line in lines if line.startswith("(assert")] == [
        f"(assert (x1 {k}))" for k in range(1, 6)
    ]


def test_commutative_operands_are_shuffled() -> None:
    text = "(set-logic QF_UFLIA)(declare-fun p (Int) Bool)(assert (p (+ 1 2 3 4)))(check-sat)"
    shuffled = [line for line in _lines(scramble(text, ScrambleOptions(seed=5)))
                if line.startswith("(assert")]
    assert len(shuffled) == 1
    assert re.fullmatch(r"\(assert \(x\d \(\+ 2 3 4 1\)\)\)", shuffled[0])
    assert "(assert (x1 (+ 1 2 3 4)))" in _lines(scramble(text, ScrambleOptions(seed=0)))


def test_deeply_nested_terms() -> None:
    depth = 5000
    text = "(set-logic QF_LIA)(declare-fun x () Int)(assert (> " \
           + "(+ 1 " * depth + "x" + ")" * depth + " 0))(check-sat)"
    out = scramble(text, ScrambleOptions(seed=0))
    assert out.count("(+ 1 ") == depth
    assert "(+ 1 x1)" in out
