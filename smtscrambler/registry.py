"""
Bijection between benchmark-declared symbols and small integer ids.

There are three kinds of names: the names declared in the input benchmark
(sort and function symbols, bound variables), the ids handed out here
while the benchmark is read, and the uniform names ``x1, x2, ...`` that
the printer derives from the ids.  Ids do not resolve shadowing: two
binders with the same text share one id.
"""

from __future__ import annotations

from typing import Dict, Iterator, Tuple


def unquote(symbol: str) -> str:
    """``|foo|`` and ``foo`` denote the same SMT-LIB symbol."""
    if len(symbol) > 1 and symbol[0] == "|" and symbol[-1] == "|":
        return symbol[1:-1]
    return symbol


class SymbolRegistry:
    """First-come-first-served ids starting at 1; 0 means "not registered"."""

    def __init__(self) -> None:
        self._ids: Dict[str, int] = {}
        self.next_id = 1

    def register(self, symbol: str) -> int:
        key = unquote(symbol)
        name_id = self._ids.get(key)
        if name_id is None:
            name_id = self.next_id
            self._ids[key] = name_id
            self.next_id += 1
        return name_id

    def lookup(self, symbol: str) -> int:
        return self._ids.get(unquote(symbol), 0)

    def __contains__(self, symbol: str) -> bool:
        return unquote(symbol) in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def items(self) -> Iterator[Tuple[str, int]]:
        return iter(self._ids.items())
