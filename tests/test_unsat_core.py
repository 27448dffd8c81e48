"""Tests for the keep-file reader and the unsat-core filter."""

from pathlib import Path

import pytest

from smtscrambler.core.unsat_core import (
    core_comment,
    filter_named,
    get_named_annotation,
    load_core,
    parse_core,
)
from smtscrambler.errors import CoreFileFormatError

NAMED = """\
(set-logic QF_LIA)
(declare-fun a () Int)
(assert (! (> a 0) :named n1))
(assert (! (> a 1) :named n2))
(assert (< a 5))
(check-sat)
"""


def test_parse_core_variants() -> None:
    assert parse_core("unsat (n1 n2)") == {"n1", "n2"}
    assert parse_core("unsat\n( n1\n|n 2| )\n") == {"n1", "n 2"}
    assert parse_core("unsat ()") == set()


def test_parse_core_rejects_other_answers() -> None:
    with pytest.raises(CoreFileFormatError):
        parse_core("sat")
    with pytest.raises(CoreFileFormatError):
        parse_core("unsat n1 n2")
    with pytest.raises(CoreFileFormatError):
        parse_core("unsat (n1 n2")
    with pytest.raises(CoreFileFormatError):
        parse_core("")


def test_load_core(tmp_path: Path) -> None:
    core_file = tmp_path / "core.txt"
    core_file.write_text("unsat\n(smtcomp2 smtcomp7)\n")
    assert load_core(core_file) == {"smtcomp2", "smtcomp7"}
    with pytest.raises(CoreFileFormatError):
        load_core(tmp_path / "missing.txt")


def test_core_comment_is_sorted() -> None:
    assert core_comment({"b", "a"}) == ";; parsed 2 names: a b"
    assert core_comment(set()) == ";; parsed 0 names:"


def test_get_named_annotation(parse) -> None:
    commands = parse(NAMED)
    assert get_named_annotation(commands[2]) == "n1"
    assert get_named_annotation(commands[4]) is None


def test_filter_keeps_only_core_and_unnamed(parse) -> None:
    """Unnamed assertions and non-assert commands always survive."""
    commands = parse(NAMED)
    dropped = filter_named(commands, {"n2"})
    assert dropped == 1
    assert [cmd.symbol for cmd in commands] == [
        "set-logic", "declare-fun", "assert", "assert", "check-sat",
    ]
    assert get_named_annotation(commands[2]) == "n2"
