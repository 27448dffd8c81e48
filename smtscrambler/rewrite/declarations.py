"""
First-occurrence numbering and declaration sorting for rank mode.

In rank mode uniform names are handed out in the order in which names
first appear in the (already reordered) assertions.  Declarations are then
sorted by the id of the symbol they introduce so that the printed
benchmark declares ``x1`` before ``x2``, and so on.

Both steps share one traversal: at every node the name leaves among its
direct children are visited first, left to right, then the traversal
descends into the children, skipping the head position of symbol-less
lists (the operator of an application).
"""

from __future__ import annotations

from typing import Callable, Iterator, List, MutableSequence, Optional

from smtscrambler.parsing.ast import Node
from smtscrambler.parsing.types import EQUALS
from smtscrambler.registry import SymbolRegistry


def _is_name_leaf(node: Node) -> bool:
    return node.is_leaf and node.is_name and bool(node.symbol) and node.symbol != EQUALS


def iter_name_leaves(node: Node) -> Iterator[Node]:
    for child in node.children:
        if _is_name_leaf(child):
            yield child
    for i, child in enumerate(node.children):
        if i > 0 or node.symbol:
            yield from iter_name_leaves(child)


def assign_first_occurrence(node: Node, registry: SymbolRegistry,
                            eligible: Optional[Callable[[str], bool]] = None) -> None:
    """Register every name under *node* in traversal order.

    *eligible* restricts registration to some symbols, e.g. to those the
    front-end saw declared or bound.
    """
    for leaf in iter_name_leaves(node):
        if eligible is None or eligible(leaf.symbol):
            registry.register(leaf.symbol)


def first_name_id(node: Node, registry: SymbolRegistry) -> int:
    """Id of the first name under *node*, or 0 when there is none."""
    for leaf in iter_name_leaves(node):
        return registry.lookup(leaf.symbol)
    return 0


def sort_declarations(commands: MutableSequence[Node], start: int, end: int,
                      registry: SymbolRegistry) -> None:
    """Stable sort of ``commands[start:end]`` by :func:`first_name_id`."""
    run: List[Node] = list(commands[start:end])
    run.sort(key=lambda cmd: first_name_id(cmd, registry))
    commands[start:end] = run
