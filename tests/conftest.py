"""Shared fixtures: benchmark snippets and a front-end that only buffers."""

from typing import List

import pytest

from smtscrambler.core.engine import Engine, ScrambleOptions
from smtscrambler.parsing.ast import Node

LIA_BENCHMARK = """\
; a tiny benchmark
(set-info :status sat)
(set-logic QF_LIA)
(declare-fun a () Int)
(declare-fun b () Int)
(declare-fun c () Int)
(assert (< a b))
(assert (> (+ a b c) 0))
(assert (= c 2))
(check-sat)
(exit)
"""


@pytest.fixture
def parse():
    """Parse SMT-LIB text into the engine's buffer without printing anything."""

    def _parse(text: str, **options) -> List[Node]:
        engine = Engine(ScrambleOptions(**options), auto_drain=False)
        engine.feed(text)
        return engine.commands

    return _parse


@pytest.fixture
def lia_benchmark() -> str:
    return LIA_BENCHMARK
