"""
smtscrambler: anonymize and randomize SMT-LIB 2.6 benchmark scripts.

The engine buffers the commands read from a benchmark, and at every
``check-sat`` (or at the end of the input) reorders, renames and prints
them.  See :mod:`smtscrambler.core.engine`.
"""

from smtscrambler.core.engine import Engine, ScrambleOptions, scramble

__all__ = ["Engine", "ScrambleOptions", "scramble"]
