"""
In-memory representation of an SMT-LIB script.

Every s-expression becomes a :class:`Node`.  Applications are grouping
lists whose first child is the operator, e.g. ``(+ a b)`` is a node with
an empty symbol and children ``[+, a, b]``; commands carry their keyword
as the symbol, e.g. ``(assert t)`` is ``Node("assert", [t])``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from smtscrambler.parsing.types import Command


@dataclass(eq=False)
class Node:
    symbol: str = ""
    children: List["Node"] = field(default_factory=list)
    is_name: bool = False
    needs_parens: bool = True

    @property
    def command(self) -> Optional[Command]:
        """The command keyword of a top-level node, or ``None``."""
        return Command.lookup(self.symbol)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def walk(self) -> Iterator["Node"]:
        """Pre-order iteration over this node and all its descendants."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def shape(self):
        """Structure of the tree with renameable names blanked out."""
        head = "<name>" if self.is_name else self.symbol
        return (head, self.needs_parens, tuple(c.shape() for c in self.children))

    def __repr__(self) -> str:
        flag = "*" if self.is_name else ""
        if not self.children:
            return f"Node({self.symbol!r}{flag})"
        return f"Node({self.symbol!r}{flag}, {self.children!r})"


def make_node(symbol: Optional[str] = None, *children: Optional[Node],
              needs_parens: Optional[bool] = None) -> Node:
    """Build a generic node.

    A node with a symbol and no children is a bare leaf and prints without
    parentheses unless *needs_parens* says otherwise.  ``None`` children are
    skipped so callers can pass optional parts directly.
    """
    node = Node(symbol=symbol or "", children=[c for c in children if c is not None])
    if needs_parens is None:
        needs_parens = not (node.symbol and not node.children)
    node.needs_parens = needs_parens
    return node


def make_list(children: List[Node]) -> Node:
    """A pure grouping list ``(c1 c2 ...)``."""
    return Node(symbol="", children=list(children))


def make_application(head: Node, args: List[Node]) -> Node:
    return Node(symbol="", children=[head, *args])


def make_name_node(symbol: str, index: Optional[Node] = None) -> Node:
    """A use of an identifier that may be renamed.

    With an *index* child the node is a parametrized identifier such as
    ``(_ extract 3 0)`` and prints in parentheses.
    """
    if not symbol:
        raise ValueError("a name node needs a symbol")
    node = Node(symbol=symbol, is_name=True, needs_parens=False)
    if index is not None:
        node.children.append(index)
        node.needs_parens = True
    return node
