"""
Entry point of the SMT-LIB benchmark scrambler.

    scrambler.py [--seed N] [options] [input.smt2] > scrambled.smt2
"""

import io
import logging
import sys

from smtscrambler.argument_parser.parser import ScramblerArgs, parse_args
from smtscrambler.core.engine import Engine, enable_debug
from smtscrambler.core.unsat_core import load_core
from smtscrambler.errors import InputError, ScramblerError
from smtscrambler.rewrite.shuffle import RankSource
from smtscrambler.utils.file_handlers import decode_text, read_text

logger = logging.getLogger("smtscrambler.cli")


def _read_input(args: ScramblerArgs) -> str:
    if args.input is None:
        return decode_text(sys.stdin.buffer.read(), "<stdin>")
    try:
        return read_text(args.input)
    except OSError as exc:
        raise InputError(f"cannot read {args.input}: {exc}") from exc


def _write_output(args: ScramblerArgs, text: str) -> None:
    if args.output is None:
        sys.stdout.write(text)
        sys.stdout.flush()
    else:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(text)


def run(args: ScramblerArgs) -> int:
    text = _read_input(args)
    options = args.to_options()

    if args.count_asserts:
        engine = Engine(options, auto_drain=False)
        engine.feed(text)
        sys.stderr.write(f"; Number of assertions: {engine.count_assertions()}\n")
        return 0

    keep = load_core(args.core) if args.core else None
    ranks = RankSource.from_file(args.ranks) if args.ranks else None
    logger.debug("seed=%d rank mode=%s core filter=%s", args.seed, ranks is not None, keep is not None)

    out = io.StringIO()
    engine = Engine(options, out=out, keep=keep, ranks=ranks)
    engine.feed(text)
    engine.finish()
    scrambled = out.getvalue()
    _write_output(args, scrambled)

    if args.verify:
        # z3 is only needed for this option
        from smtscrambler.verify.equisat import check_equisatisfiable

        try:
            result = check_equisatisfiable(text, scrambled, args.verify_timeout)
        except ValueError as exc:
            sys.stderr.write(f"; verification skipped: {exc}\n")
            return 0
        sys.stderr.write(f"; {result}\n")
        if result.mismatch:
            return 2
    return 0


def main(argv=None) -> int:
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    args = parse_args(argv)
    if args.debug:
        enable_debug()

    try:
        return run(args)
    except ScramblerError as exc:
        sys.stderr.write(f"ERROR {exc}\n")
        return 1


if __name__ == "__main__":
    sys.exit(main())
