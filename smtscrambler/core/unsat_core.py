"""
Unsat-core post-processing.

In the unsat-core track every assertion of a scrambled benchmark carries a
``:named`` annotation.  Given the names a solver reported in its core, the
benchmark is re-printed with only those assertions, so that the reduced
benchmark can be checked independently.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Set

from smtscrambler.errors import CoreFileFormatError, ParseError
from smtscrambler.parsing.ast import Node
from smtscrambler.parsing.parse import tokenize
from smtscrambler.parsing.types import ANNOTATION, NAMED, Command
from smtscrambler.registry import unquote
from smtscrambler.utils.file_handlers import PathLike, read_core_file

logger = logging.getLogger(__name__)


def parse_core(text: str) -> Set[str]:
    """Parse solver output of the form ``unsat (n1 n2 ... nk)``.

    Names may be quoted (``|a name|``); anything after the closing
    parenthesis is ignored.
    """
    try:
        tokens = iter(tokenize(text))
        first = next(tokens, None)
        if first is None or first.text != "unsat":
            raise CoreFileFormatError("core file must start with 'unsat'")
        opening = next(tokens, None)
        if opening is None or opening.text != "(":
            raise CoreFileFormatError("expected '(' after 'unsat'")

        names: Set[str] = set()
        for token in tokens:
            if token.text == ")":
                return names
            if token.text == "(":
                raise CoreFileFormatError(f"line {token.line}: unexpected '(' in the core names")
            names.add(unquote(token.text))
    except ParseError as exc:
        raise CoreFileFormatError(str(exc)) from exc
    raise CoreFileFormatError("missing ')' after the core names")


def load_core(path: PathLike) -> Set[str]:
    text = read_core_file(path)
    try:
        return parse_core(text)
    except CoreFileFormatError as exc:
        raise CoreFileFormatError(f"parsing core names from {path}: {exc}") from exc


def core_comment(names: Set[str]) -> str:
    """The ``;; parsed N names: ...`` line echoed at the top of the output."""
    ordered = sorted(names)
    return f";; parsed {len(ordered)} names:" + "".join(f" {name}" for name in ordered)


def get_named_annotation(root: Node) -> Optional[str]:
    """The ``:named`` label of the first annotation found under *root*."""
    to_process = [root]
    seen: Set[int] = set()
    while to_process:
        cur = to_process.pop()
        if id(cur) in seen:
            continue
        seen.add(id(cur))

        if cur.symbol == ANNOTATION:
            if cur.children:
                to_process.append(cur.children[0])
            for attr in cur.children[1:]:
                if attr.symbol == NAMED and attr.children:
                    return attr.children[0].symbol
        else:
            to_process.extend(cur.children)
    return None


def filter_named(commands: List[Node], to_keep: Set[str]) -> int:
    """Drop named assertions whose name is not in *to_keep*.

    Works in place and keeps the order of the surviving commands.  Returns
    the number of dropped assertions.
    """
    kept: List[Node] = []
    for cmd in commands:
        if cmd.command is Command.ASSERT:
            name = get_named_annotation(cmd)
            if name is not None and unquote(name) not in to_keep:
                continue
        kept.append(cmd)
    dropped = len(commands) - len(kept)
    commands[:] = kept
    if dropped:
        logger.debug("unsat-core filter dropped %d assertions", dropped)
    return dropped
