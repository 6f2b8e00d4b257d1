from __future__ import annotations
"""
Contains symbol classes used by parser
"""
from typing import Any, List, Union
from dataclasses import dataclass

from lark import Transformer

from .visitor import Visitor


@dataclass
class Symbol:
    """
    Symbol is the root of parser hierarchy; symbols
    compose the parser's output, i.e. the AST
    """
    def accept(self, visitor: Visitor) -> Any:
        return visitor.visit(self)


@dataclass
class Program(Symbol):
    statements: List[Union[InsertStmnt, PutStmnt, GetStmnt, DeleteStmnt]]


@dataclass
class InsertStmnt(Symbol):
    key: Any
    value: Any


@dataclass
class PutStmnt(Symbol):
    key: Any
    value: Any


@dataclass
class GetStmnt(Symbol):
    key: Any


@dataclass
class DeleteStmnt(Symbol):
    key: Any


class ToAst(Transformer):
    """
    Convert parse tree to AST.

    Terminal handlers (upper case) convert literal tokens to python
    values; rule handlers (lower case) wrap their children in symbol classes.
    """

    # terminals

    def INTEGER_NUMBER(self, token) -> int:
        return int(token)

    def REAL_NUMBER(self, token) -> float:
        return float(token)

    def STRING(self, token) -> str:
        # strip enclosing quotes
        return str(token)[1:-1]

    def TRUE(self, token) -> bool:
        return True

    def FALSE(self, token) -> bool:
        return False

    def NULL(self, token):
        return None

    # rules

    def program(self, args) -> Program:
        return Program(list(args))

    def insert_stmnt(self, args) -> InsertStmnt:
        key, value = args
        return InsertStmnt(key, value)

    def put_stmnt(self, args) -> PutStmnt:
        key, value = args
        return PutStmnt(key, value)

    def get_stmnt(self, args) -> GetStmnt:
        assert len(args) == 1, f"Expected 1 argument; received {len(args)}"
        return GetStmnt(args[0])

    def delete_stmnt(self, args) -> DeleteStmnt:
        assert len(args) == 1, f"Expected 1 argument; received {len(args)}"
        return DeleteStmnt(args[0])
