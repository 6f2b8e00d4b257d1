from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import List

from .btree import Tree
from .constants import DEFAULT_T
from .dataexchange import Response
from .lang_parser.visitor import Visitor
from .lang_parser.symbols import (
    Symbol,
    Program,
    InsertStmnt,
    PutStmnt,
    GetStmnt,
    DeleteStmnt,
)
from .pipe import Pipe
from .utils import format_value


@dataclass
class VMConfig:
    """
    Configuration of the tree a vm operates on
    """
    # minimum degree of the tree
    t: int = DEFAULT_T


class VirtualMachine(Visitor):
    """
    Runs a program (parsed AST) over a single btree.

    Each statement writes exactly one message to the output pipe,
    i.e. the formatted result of the tree operation.
    """
    def __init__(self, config: VMConfig, output_pipe: Pipe):
        self.config = config
        self.output_pipe = output_pipe
        self.tree = Tree(config.t)

    def reset(self):
        """
        replace tree with an empty tree
        """
        self.tree = Tree(self.config.t)

    def run(self, program: Program, stop_on_err=True) -> Response:
        """
        run the virtual machine with program on tree
        :param program:
        :param stop_on_err: stop program execution on first error
        :return: Response with list of statement responses as body
        """
        result = []
        for stmnt in program.statements:
            resp = self.execute(stmnt)
            result.append(resp)
            if not resp.success:
                logging.warning(f"Statement [{stmnt}] failed with {resp}")
                if stop_on_err:
                    return Response(False, error_message=resp.error_message, body=result)
        return Response(True, body=result)

    def execute(self, stmnt: Symbol) -> Response:
        """
        execute statement
        :param stmnt:
        :return:
        """
        try:
            return stmnt.accept(self)
        except TypeError as e:
            # keys of different types may not be comparable
            return Response(False, error_message=f"key [{format_value(stmnt.key)}] is not comparable with "
                                                 f"existing keys: {e}")

    # section : statement handlers

    def visit_program(self, program: Program) -> Response:
        return self.run(program)

    def visit_insert_stmnt(self, stmnt: InsertStmnt) -> Response:
        inserted = self.tree.insert(stmnt.key, stmnt.value)
        self.output_pipe.write(format_value(inserted))
        return Response(True, body=inserted)

    def visit_put_stmnt(self, stmnt: PutStmnt) -> Response:
        old_value = self.tree.put(stmnt.key, stmnt.value)
        self.output_pipe.write(format_value(old_value))
        return Response(True, body=old_value)

    def visit_get_stmnt(self, stmnt: GetStmnt) -> Response:
        value = self.tree.search(stmnt.key)
        self.output_pipe.write(format_value(value))
        return Response(True, body=value)

    def visit_delete_stmnt(self, stmnt: DeleteStmnt) -> Response:
        entry = self.tree.delete(stmnt.key)
        if entry is None:
            self.output_pipe.write(format_value(None))
        else:
            self.output_pipe.write(f"{format_value(entry.key)}:{format_value(entry.value)}")
        return Response(True, body=entry)
