"""
Closed vocabulary of SMT-LIB commands and the operator names the
rewrite oracle knows about.

Commands are grouped by who accepts them: SMT-COMP benchmarks use only
:attr:`CommandSupport.SMTCOMP`; the other groups have to be switched on
from the command line.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class CommandSupport(Enum):
    SMTCOMP = "smtcomp"
    NON_SMTCOMP = "non-smtcomp"
    Z3 = "z3"


class Command(str, Enum):
    SET_LOGIC = "set-logic"
    SET_INFO = "set-info"
    SET_OPTION = "set-option"
    DECLARE_SORT = "declare-sort"
    DEFINE_SORT = "define-sort"
    DECLARE_FUN = "declare-fun"
    DECLARE_CONST = "declare-const"
    DEFINE_FUN = "define-fun"
    DEFINE_FUN_REC = "define-fun-rec"
    DEFINE_FUNS_REC = "define-funs-rec"
    DECLARE_DATATYPE = "declare-datatype"
    DECLARE_DATATYPES = "declare-datatypes"
    PUSH = "push"
    POP = "pop"
    ASSERT = "assert"
    CHECK_SAT = "check-sat"
    EXIT = "exit"

    CHECK_SAT_ASSUMING = "check-sat-assuming"
    GET_VALUE = "get-value"
    GET_MODEL = "get-model"
    GET_UNSAT_CORE = "get-unsat-core"
    GET_ASSERTIONS = "get-assertions"
    GET_ASSIGNMENT = "get-assignment"
    GET_INFO = "get-info"
    GET_OPTION = "get-option"
    GET_PROOF = "get-proof"
    GET_UNSAT_ASSUMPTIONS = "get-unsat-assumptions"
    ECHO = "echo"
    RESET = "reset"
    RESET_ASSERTIONS = "reset-assertions"

    CHECK_SAT_USING = "check-sat-using"
    SIMPLIFY = "simplify"
    EVAL = "eval"
    DEFINE_CONST = "define-const"
    MINIMIZE = "minimize"
    MAXIMIZE = "maximize"
    GET_OBJECTIVES = "get-objectives"
    DISPLAY = "display"

    @property
    def support(self) -> CommandSupport:
        return _SUPPORT.get(self, CommandSupport.SMTCOMP)

    @classmethod
    def lookup(cls, keyword: str) -> Optional["Command"]:
        try:
            return cls(keyword)
        except ValueError:
            return None


def is_declaration_keyword(keyword: str) -> bool:
    return "declare" in keyword or "define" in keyword


_SUPPORT = {
    **{c: CommandSupport.NON_SMTCOMP for c in (
        Command.CHECK_SAT_ASSUMING, Command.GET_VALUE, Command.GET_MODEL,
        Command.GET_UNSAT_CORE, Command.GET_ASSERTIONS, Command.GET_ASSIGNMENT,
        Command.GET_INFO, Command.GET_OPTION, Command.GET_PROOF,
        Command.GET_UNSAT_ASSUMPTIONS, Command.ECHO, Command.RESET,
        Command.RESET_ASSERTIONS,
    )},
    **{c: CommandSupport.Z3 for c in (
        Command.CHECK_SAT_USING, Command.SIMPLIFY, Command.EVAL,
        Command.DEFINE_CONST, Command.MINIMIZE, Command.MAXIMIZE,
        Command.GET_OBJECTIVES, Command.DISPLAY,
    )},
}


# -- Term-level keywords -------------------------------------------------------

AS = "as"
INDEXED = "_"
ANNOTATION = "!"
LET = "let"
FORALL = "forall"
EXISTS = "exists"
MATCH = "match"
LAMBDA = "lambda"
EQUALS = "="

NAMED = ":named"
PATTERN = ":pattern"

BINDERS = frozenset({LET, FORALL, EXISTS, LAMBDA})
