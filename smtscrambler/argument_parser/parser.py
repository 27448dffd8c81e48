"""
Command-line argument parsing for the scrambler.

Parsed values land in a dataclass so the contract between the CLI and the
engine is explicit; :meth:`ScramblerArgs.to_options` hands the engine the
part it cares about.
"""

from __future__ import annotations

import argparse
import time
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

from smtscrambler.constants import DEFAULT_VERIFY_TIMEOUT_MS
from smtscrambler.core.engine import ScrambleOptions
from smtscrambler.core.printer import AnnotationMode


@dataclass
class ScramblerArgs:
    """Container for parsed CLI arguments."""

    input: Optional[str] = None
    output: Optional[str] = None
    seed: int = 0
    term_annot: str = AnnotationMode.ALL.value
    core: Optional[str] = None
    ranks: Optional[str] = None
    incremental: bool = False
    gen_unsat_core: bool = False
    gen_model_val: bool = False
    gen_proof: bool = False
    support_non_smtcomp: bool = False
    support_z3: bool = False
    count_asserts: bool = False
    verify: bool = False
    verify_timeout: int = DEFAULT_VERIFY_TIMEOUT_MS
    debug: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_options(self) -> ScrambleOptions:
        return ScrambleOptions(
            seed=self.seed,
            annotations=AnnotationMode(self.term_annot),
            incremental=self.incremental,
            gen_unsat_core=self.gen_unsat_core,
            gen_model=self.gen_model_val,
            gen_proof=self.gen_proof,
            support_non_smtcomp=self.support_non_smtcomp,
            support_z3=self.support_z3,
            count_asserts=self.count_asserts,
        )


def _seed(value: str) -> int:
    seed = int(value)
    if seed < 0:
        raise argparse.ArgumentTypeError(f"seed must be >= 0, got {seed}")
    return seed


def _build_parser() -> argparse.ArgumentParser:
    """Construct the ``ArgumentParser`` (no side-effects)."""
    parser = argparse.ArgumentParser(
        description="SMT-LIB 2.6 benchmark scrambler: renames symbols and shuffles "
                    "commands and operands without changing satisfiability",
    )
    parser.add_argument("input", nargs="?", default=None,
                        help="benchmark file to scramble (default: stdin)")
    parser.add_argument("--output", "-o", default=None, help="output file (default: stdout)")
    parser.add_argument(
        "--seed", type=_seed, default=None,
        help="seed for the pseudo-random generator; 0 disables scrambling "
             "(default: current time)",
    )
    parser.add_argument(
        "--term-annot", choices=[m.value for m in AnnotationMode],
        default=AnnotationMode.ALL.value,
        help="keep term annotations: all (true), only patterns (pattern) or none (false) "
             "(default: %(default)s)",
    )
    parser.add_argument("--core", metavar="FILE", default=None,
                        help="solver output 'unsat (n1 ...)'; print only the named assertions in it")
    parser.add_argument("--ranks", metavar="FILE", default=None,
                        help="whitespace-separated assertion ranks; switches to rank-based naming")
    parser.add_argument("--incremental", action="store_true",
                        help="produce output for the incremental track")
    parser.add_argument("--gen-unsat-core", action="store_true",
                        help="name every assertion and ask for an unsat core after check-sat")
    parser.add_argument("--gen-model-val", action="store_true",
                        help="ask for a model after check-sat")
    parser.add_argument("--gen-proof", action="store_true", help="ask for a proof after check-sat")
    parser.add_argument("--support-non-smtcomp", action="store_true",
                        help="accept SMT-LIB commands not used in SMT-COMP benchmarks")
    parser.add_argument("--support-z3", action="store_true", help="accept Z3 extension commands")
    parser.add_argument("--count-asserts", action="store_true",
                        help="only print the number of assertions to stderr")
    parser.add_argument("--verify", action="store_true",
                        help="check with z3 that the output is equisatisfiable with the input")
    parser.add_argument(
        "--verify-timeout", type=int, default=DEFAULT_VERIFY_TIMEOUT_MS,
        help="z3 timeout in milliseconds for --verify (default: %(default)s)",
    )
    parser.add_argument("--debug", action="store_true", help="enable verbose debug logging for diagnostics")
    return parser


def parse_args(argv=None) -> ScramblerArgs:
    """Parse *argv* (or ``sys.argv``) and return a :class:`ScramblerArgs`."""
    ns = _build_parser().parse_args(argv)
    seed = ns.seed
    if seed is None:
        seed = int(time.time())
    return ScramblerArgs(
        input=ns.input,
        output=ns.output,
        seed=seed,
        term_annot=ns.term_annot,
        core=ns.core,
        ranks=ns.ranks,
        incremental=ns.incremental,
        gen_unsat_core=ns.gen_unsat_core,
        gen_model_val=ns.gen_model_val,
        gen_proof=ns.gen_proof,
        support_non_smtcomp=ns.support_non_smtcomp,
        support_z3=ns.support_z3,
        count_asserts=ns.count_asserts,
        verify=ns.verify,
        verify_timeout=ns.verify_timeout,
        debug=ns.debug,
    )
