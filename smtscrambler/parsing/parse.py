"""
SMT-LIB 2.6 front-end.

Reads benchmark text, checks the s-expression shape of each command and
hands it to the engine through the tree-construction primitives
(``new_command``, ``make_node``, ``make_name_node``, ``register_name``).
It also applies the rewrite oracle while terms are built: operands of
commutative operators are shuffled, and ordering relations may be flipped
with their two operands swapped.

This is not a validating parser: sorts are not checked, and symbols are
not resolved against their declarations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, List, Optional, Union

from smtscrambler.errors import ParseError
from smtscrambler.parsing.ast import Node, make_application, make_list, make_name_node, make_node
from smtscrambler.parsing.types import (
    ANNOTATION,
    AS,
    BINDERS,
    INDEXED,
    LET,
    MATCH,
    NAMED,
    PATTERN,
    Command,
    CommandSupport,
)

if TYPE_CHECKING:
    from smtscrambler.core.engine import Engine

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Tokens and raw s-expressions
# ---------------------------------------------------------------------------

@dataclass
class Atom:
    text: str
    line: int

    @property
    def is_keyword(self) -> bool:
        return self.text.startswith(":")

    @property
    def is_constant(self) -> bool:
        t = self.text
        return t[0].isdigit() or t[0] == '"' or t.startswith("#b") or t.startswith("#x")


@dataclass
class SList:
    items: List["SExpr"] = field(default_factory=list)
    line: int = 0


SExpr = Union[Atom, SList]

_DELIMITERS = set(" \t\r\n()|\";")


def tokenize(text: str) -> Iterator[Atom]:
    """Split *text* into parentheses, quoted symbols, strings and plain tokens."""
    i, n, line = 0, len(text), 1
    while i < n:
        c = text[i]
        if c == "\n":
            line += 1
            i += 1
        elif c in " \t\r":
            i += 1
        elif c == ";":
            while i < n and text[i] != "\n":
                i += 1
        elif c in "()":
            yield Atom(c, line)
            i += 1
        elif c == "|":
            j = text.find("|", i + 1)
            if j < 0:
                raise ParseError("unterminated |...| symbol", line)
            yield Atom(text[i:j + 1], line)
            line += text.count("\n", i, j)
            i = j + 1
        elif c == '"':
            j = i + 1
            while True:
                j = text.find('"', j)
                if j < 0:
                    raise ParseError("unterminated string literal", line)
                # "" is an escaped quote inside a string
                if j + 1 < n and text[j + 1] == '"':
                    j += 2
                    continue
                break
            yield Atom(text[i:j + 1], line)
            line += text.count("\n", i, j)
            i = j + 1
        else:
            j = i
            while j < n and text[j] not in _DELIMITERS:
                j += 1
            yield Atom(text[i:j], line)
            i = j


def read_sexprs(text: str) -> Iterator[SExpr]:
    """Yield the top-level s-expressions of *text* one at a time."""
    stack: List[SList] = []
    for tok in tokenize(text):
        if tok.text == "(":
            stack.append(SList(line=tok.line))
        elif tok.text == ")":
            if not stack:
                raise ParseError("unexpected ')'", tok.line)
            done = stack.pop()
            if stack:
                stack[-1].items.append(done)
            else:
                yield done
        elif stack:
            stack[-1].items.append(tok)
        else:
            raise ParseError(f"expected a command, found {tok.text!r}", tok.line)
    if stack:
        raise ParseError("unbalanced '(' at end of input", stack[0].line)


# ---------------------------------------------------------------------------
# Command and term builders
# ---------------------------------------------------------------------------

class FrontEnd:
    """Turns raw s-expressions into engine commands."""

    def __init__(self, engine: "Engine", support_non_smtcomp: bool = False,
                 support_z3: bool = False) -> None:
        self.engine = engine
        self.support_non_smtcomp = support_non_smtcomp
        self.support_z3 = support_z3

    def commands(self, text: str) -> Iterator[Node]:
        for sexpr in read_sexprs(text):
            yield self.command(sexpr)

    # -- helpers ---------------------------------------------------------------

    @staticmethod
    def _atom(x: SExpr, what: str) -> Atom:
        if not isinstance(x, Atom):
            raise ParseError(f"expected {what}, found a list", x.line)
        return x

    @staticmethod
    def _list(x: SExpr, what: str) -> SList:
        if not isinstance(x, SList):
            raise ParseError(f"expected {what}, found {x.text!r}", x.line)
        return x

    @staticmethod
    def _arity(items: List[SExpr], low: int, high: int, keyword: str, line: int) -> None:
        if not low <= len(items) <= high:
            expected = str(low) if low == high else f"{low}-{high}"
            raise ParseError(f"{keyword} expects {expected} arguments, got {len(items)}", line)

    def _declare(self, x: SExpr, what: str) -> Node:
        """A symbol at a declaration or binder site."""
        atom = self._atom(x, what)
        self.engine.register_name(atom.text)
        return make_name_node(atom.text)

    @staticmethod
    def _inline(nodes: List[Node]) -> Optional[Node]:
        """Several trailing arguments printed side by side without parentheses."""
        if not nodes:
            return None
        if len(nodes) == 1:
            return nodes[0]
        return Node(symbol="", children=nodes, needs_parens=False)

    # -- generic s-expressions ---------------------------------------------------

    def sexpr(self, x: SExpr) -> Node:
        if isinstance(x, Atom):
            return make_node(x.text)
        return make_list([self.sexpr(item) for item in x.items])

    def attribute_values(self, items: List[SExpr]) -> List[Node]:
        return [self.sexpr(item) for item in items]

    # -- sorts and identifiers ---------------------------------------------------

    def identifier(self, x: SExpr) -> Node:
        if isinstance(x, Atom):
            return make_name_node(x.text)
        items = x.items
        if len(items) < 2 or not isinstance(items[0], Atom) or items[0].text != INDEXED:
            raise ParseError("malformed identifier", x.line)
        symbol = self._atom(items[1], "an indexed symbol")
        indices = [make_node(self._atom(i, "an index").text) for i in items[2:]]
        return make_name_node(INDEXED, make_node(symbol.text, *indices, needs_parens=False))

    def sort(self, x: SExpr) -> Node:
        if isinstance(x, Atom):
            return make_name_node(x.text)
        items = x.items
        if not items:
            raise ParseError("empty sort", x.line)
        if isinstance(items[0], Atom) and items[0].text == INDEXED:
            return self.identifier(x)
        return make_application(self.identifier(items[0]), [self.sort(s) for s in items[1:]])

    def qual_identifier(self, x: SExpr) -> Node:
        if isinstance(x, SList) and x.items and isinstance(x.items[0], Atom) \
                and x.items[0].text == AS:
            self._arity(x.items, 3, 3, AS, x.line)
            return make_node(AS, self.identifier(x.items[1]), self.sort(x.items[2]))
        return self.identifier(x)

    def sorted_vars(self, x: SExpr) -> Node:
        binders = []
        for var in self._list(x, "a list of sorted variables").items:
            pair = self._list(var, "a sorted variable")
            self._arity(pair.items, 2, 2, "sorted variable", pair.line)
            binders.append(make_list([self._declare(pair.items[0], "a variable"),
                                      self.sort(pair.items[1])]))
        return make_list(binders)

    # -- terms -------------------------------------------------------------------

    def term(self, x: SExpr) -> Node:
        if isinstance(x, Atom):
            if x.is_constant:
                return make_node(x.text)
            if x.is_keyword:
                raise ParseError(f"unexpected keyword {x.text!r} in term", x.line)
            return make_name_node(x.text)

        items = x.items
        if not items:
            raise ParseError("empty term", x.line)
        head = items[0]
        if isinstance(head, Atom):
            if head.text == LET:
                return self._let(items, x.line)
            if head.text in BINDERS:
                self._arity(items, 3, 3, head.text, x.line)
                return make_node(head.text, self.sorted_vars(items[1]), self.term(items[2]))
            if head.text == MATCH:
                return self._match(items, x.line)
            if head.text == ANNOTATION:
                return self._annotated(items, x.line)
            if head.text in (AS, INDEXED):
                return self.qual_identifier(x)
        if len(items) < 2:
            raise ParseError("application without arguments", x.line)
        return self.application(self.qual_identifier(head), [self.term(a) for a in items[1:]])

    def application(self, head: Node, args: List[Node]) -> Node:
        """Build ``(head args...)``, letting the oracle scramble operand order."""
        start = self.engine.is_commutative(head)
        if start is not None:
            self.engine.shuffle(args, start, len(args))
        elif len(args) == 2:
            flipped = self.engine.flip_antisymmetric(head)
            if flipped is not None:
                head = flipped
                args.reverse()
        return make_application(head, args)

    def _let(self, items: List[SExpr], line: int) -> Node:
        self._arity(items, 3, 3, LET, line)
        bindings = []
        for binding in self._list(items[1], "a list of bindings").items:
            pair = self._list(binding, "a binding")
            self._arity(pair.items, 2, 2, "binding", pair.line)
            var = self._declare(pair.items[0], "a variable")
            bindings.append(make_list([var, self.term(pair.items[1])]))
        return make_node(LET, make_list(bindings), self.term(items[2]))

    def _match(self, items: List[SExpr], line: int) -> Node:
        self._arity(items, 3, 3, MATCH, line)
        cases = []
        for case in self._list(items[2], "a list of match cases").items:
            pair = self._list(case, "a match case")
            self._arity(pair.items, 2, 2, "match case", pair.line)
            cases.append(make_list([self._pattern(pair.items[0]), self.term(pair.items[1])]))
        return make_node(MATCH, self.term(items[1]), make_list(cases))

    def _pattern(self, x: SExpr) -> Node:
        if isinstance(x, Atom):
            return self._declare(x, "a pattern")
        if len(x.items) < 2:
            raise ParseError("malformed pattern", x.line)
        constructor = self.identifier(x.items[0])
        return make_list([constructor, *[self._declare(v, "a pattern variable") for v in x.items[1:]]])

    def _annotated(self, items: List[SExpr], line: int) -> Node:
        if len(items) < 3:
            raise ParseError("annotation without attributes", line)
        body = self.term(items[1])
        attrs = []
        rest = items[2:]
        i = 0
        while i < len(rest):
            key = self._atom(rest[i], "an attribute keyword")
            if not key.is_keyword:
                raise ParseError(f"expected an attribute keyword, found {key.text!r}", key.line)
            value: Optional[SExpr] = None
            if i + 1 < len(rest) and not (isinstance(rest[i + 1], Atom) and rest[i + 1].is_keyword):
                value = rest[i + 1]
                i += 1
            i += 1
            attrs.append(make_node(key.text, self._attribute_value(key.text, value),
                                   needs_parens=False))
        return make_node(ANNOTATION, body, *attrs)

    def _attribute_value(self, keyword: str, value: Optional[SExpr]) -> Optional[Node]:
        if value is None:
            return None
        if keyword == NAMED:
            return self._declare(value, "a name")
        if keyword == PATTERN:
            return make_list([self.term(t) for t in self._list(value, "a pattern").items])
        return self.sexpr(value)

    # -- datatypes ---------------------------------------------------------------

    def datatype_dec(self, x: SExpr) -> Node:
        items = self._list(x, "a datatype declaration").items
        if items and isinstance(items[0], Atom) and items[0].text == "par":
            self._arity(items, 3, 3, "par", x.line)
            params = [self._declare(p, "a sort parameter")
                      for p in self._list(items[1], "sort parameters").items]
            return make_node("par", make_list(params), self._constructors(items[2]))
        return self._constructors(x)

    def _constructors(self, x: SExpr) -> Node:
        ctors = []
        for ctor in self._list(x, "a list of constructors").items:
            parts = self._list(ctor, "a constructor").items
            if not parts:
                raise ParseError("empty constructor declaration", ctor.line)
            name = self._declare(parts[0], "a constructor")
            selectors = []
            for sel in parts[1:]:
                pair = self._list(sel, "a selector")
                self._arity(pair.items, 2, 2, "selector", pair.line)
                selectors.append(make_list([self._declare(pair.items[0], "a selector"),
                                            self.sort(pair.items[1])]))
            ctors.append(make_list([name, *selectors]))
        return make_list(ctors)

    # -- commands ------------------------------------------------------------------

    def command(self, x: SExpr) -> Node:
        items = self._list(x, "a command").items
        if not items:
            raise ParseError("empty command", x.line)
        keyword = self._atom(items[0], "a command keyword").text
        cmd = Command.lookup(keyword)
        if cmd is None:
            raise ParseError(f"unknown command {keyword!r}", x.line)
        self._check_support(cmd, x.line)
        args = items[1:]
        children = self._command_children(cmd, args, x.line)
        return self.engine.new_command(keyword, *children)

    def _check_support(self, cmd: Command, line: int) -> None:
        if cmd.support is CommandSupport.NON_SMTCOMP and not self.support_non_smtcomp:
            raise ParseError(f"{cmd.value} is not supported by SMT-COMP "
                             "(use --support-non-smtcomp)", line)
        if cmd.support is CommandSupport.Z3 and not self.support_z3:
            raise ParseError(f"{cmd.value} is a Z3 extension (use --support-z3)", line)

    def _command_children(self, cmd: Command, args: List[SExpr], line: int) -> List[Node]:
        kw = cmd.value
        if cmd is Command.SET_LOGIC:
            self._arity(args, 1, 1, kw, line)
            logic = self._atom(args[0], "a logic name").text
            self.engine.set_logic(logic)
            return [make_node(logic)]
        if cmd in (Command.SET_INFO, Command.SET_OPTION):
            self._arity(args, 1, 2, kw, line)
            return [make_node(self._atom(args[0], "a keyword").text),
                    *self.attribute_values(args[1:])]
        if cmd is Command.DECLARE_SORT:
            self._arity(args, 1, 2, kw, line)
            return [self._declare(args[0], "a sort symbol"), *self.attribute_values(args[1:])]
        if cmd is Command.DEFINE_SORT:
            self._arity(args, 3, 3, kw, line)
            name = self._declare(args[0], "a sort symbol")
            params = [self._declare(p, "a sort parameter")
                      for p in self._list(args[1], "sort parameters").items]
            return [name, make_list(params), self.sort(args[2])]
        if cmd is Command.DECLARE_FUN:
            self._arity(args, 3, 3, kw, line)
            name = self._declare(args[0], "a function symbol")
            domain = [self.sort(s) for s in self._list(args[1], "a list of sorts").items]
            return [name, make_list(domain), self.sort(args[2])]
        if cmd is Command.DECLARE_CONST:
            self._arity(args, 2, 2, kw, line)
            return [self._declare(args[0], "a constant symbol"), self.sort(args[1])]
        if cmd in (Command.DEFINE_FUN, Command.DEFINE_FUN_REC):
            self._arity(args, 4, 4, kw, line)
            name = self._declare(args[0], "a function symbol")
            return [name, self.sorted_vars(args[1]), self.sort(args[2]), self.term(args[3])]
        if cmd is Command.DEFINE_FUNS_REC:
            self._arity(args, 2, 2, kw, line)
            return self._define_funs_rec(args)
        if cmd is Command.DECLARE_DATATYPE:
            self._arity(args, 2, 2, kw, line)
            return [self._declare(args[0], "a datatype symbol"), self.datatype_dec(args[1])]
        if cmd is Command.DECLARE_DATATYPES:
            self._arity(args, 2, 2, kw, line)
            sort_decs = []
            for dec in self._list(args[0], "sort declarations").items:
                pair = self._list(dec, "a sort declaration")
                self._arity(pair.items, 2, 2, "sort declaration", pair.line)
                sort_decs.append(make_list([self._declare(pair.items[0], "a datatype symbol"),
                                            make_node(self._atom(pair.items[1], "an arity").text)]))
            dt_decs = [self.datatype_dec(d) for d in self._list(args[1], "datatype declarations").items]
            return [make_list(sort_decs), make_list(dt_decs)]
        if cmd in (Command.PUSH, Command.POP):
            self._arity(args, 0, 1, kw, line)
            return [make_node(self._atom(a, "a numeral").text) for a in args]
        if cmd in (Command.ASSERT, Command.SIMPLIFY, Command.EVAL, Command.MINIMIZE,
                   Command.MAXIMIZE, Command.DISPLAY):
            if not args:
                raise ParseError(f"{kw} expects a term", line)
            if cmd is Command.ASSERT:
                self._arity(args, 1, 1, kw, line)
            options = self._inline(self.attribute_values(args[1:]))
            return [self.term(args[0])] + ([options] if options is not None else [])
        if cmd in (Command.CHECK_SAT_ASSUMING, Command.GET_VALUE):
            self._arity(args, 1, 1, kw, line)
            return [make_list([self.term(t) for t in self._list(args[0], "a list of terms").items])]
        if cmd is Command.DEFINE_CONST:
            self._arity(args, 3, 3, kw, line)
            return [self._declare(args[0], "a constant symbol"), self.sort(args[1]),
                    self.term(args[2])]
        if cmd in (Command.GET_INFO, Command.GET_OPTION, Command.ECHO, Command.CHECK_SAT_USING):
            self._arity(args, 1, 8, kw, line)
            rest = self._inline(self.attribute_values(args[1:]))
            return [self.sexpr(args[0])] + ([rest] if rest is not None else [])
        # commands without arguments: check-sat, exit, get-model, ...
        self._arity(args, 0, 0, kw, line)
        return []

    def _define_funs_rec(self, args: List[SExpr]) -> List[Node]:
        decls = []
        for dec in self._list(args[0], "function declarations").items:
            parts = self._list(dec, "a function declaration").items
            self._arity(parts, 3, 3, "function declaration", dec.line)
            decls.append(make_list([self._declare(parts[0], "a function symbol"),
                                    self.sorted_vars(parts[1]), self.sort(parts[2])]))
        bodies = [self.term(b) for b in self._list(args[1], "function bodies").items]
        if len(bodies) != len(decls):
            raise ParseError(f"define-funs-rec declares {len(decls)} functions "
                             f"but gives {len(bodies)} bodies", args[1].line)
        return [make_list(decls), make_list(bodies)]
