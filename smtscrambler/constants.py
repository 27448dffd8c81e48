"""
Global constants used across the scrambler.

Guidelines
----------
* Every constant is typed and immutable (``Final`` / ``frozenset``).
* Values that end up in printed benchmarks live here so the printer and
  the tests agree on them.
"""

from __future__ import annotations

from typing import Final, Tuple

# -- Pseudo-random number generator ------------------------------------------

LCG_MULTIPLIER: Final[int] = 25214903917
LCG_INCREMENT: Final[int] = 11
LCG_MODULUS: Final[int] = 1 << 48
LCG_OUTPUT_SHIFT: Final[int] = 16

# A seed of zero switches every randomized transformation off.
NO_SCRAMBLE_SEED: Final[int] = 0

# -- Printing ----------------------------------------------------------------

UNIFORM_NAME_PREFIX: Final[str] = "x"
ANNOTATION_NAME_PREFIX: Final[str] = "smtcomp"

PRINT_SUCCESS_OFF: Final[str] = "(set-option :print-success false)"
PRODUCE_UNSAT_CORES: Final[str] = "(set-option :produce-unsat-cores true)"
PRODUCE_MODELS: Final[str] = "(set-option :produce-models true)"
PRODUCE_PROOFS: Final[str] = "(set-option :produce-proofs true)"

GET_UNSAT_CORE: Final[str] = "(get-unsat-core)"
GET_MODEL: Final[str] = "(get-model)"
GET_PROOF: Final[str] = "(get-proof)"

# -- Logic families (substring match on the set-logic argument) --------------

DIFFERENCE_LOGIC_MARKERS: Final[Tuple[str, ...]] = ("IDL", "RDL")
ARITHMETIC_LOGIC_MARKERS: Final[Tuple[str, ...]] = ("IA", "RA")
BITVECTOR_LOGIC_MARKERS: Final[Tuple[str, ...]] = ("BV",)
FLOATING_POINT_LOGIC_MARKERS: Final[Tuple[str, ...]] = ("FP",)

# -- Front-end limits ----------------------------------------------------------

MAX_COMMAND_CHILDREN: Final[int] = 4

# Term builders and the printer recurse once per nesting level.
RECURSION_LIMIT: Final[int] = 100_000

# -- Verification ------------------------------------------------------------

DEFAULT_VERIFY_TIMEOUT_MS: Final[int] = 10_000
