from __future__ import annotations
"""
This module contains the highest level user-interaction and resource allocation
i.e. management of entities, like parser, virtual machine, and pipe, that
expose the btree map through a command language.
"""
import os.path
import logging

from typing import List

from .constants import EXIT_SUCCESS, EXIT_FAILURE, LOG_FORMAT, USAGE, DEFAULT_T
from .lang_parser.commandhandler import CommandFrontEnd
from .dataexchange import Response, MetaCommandResult
from .pipe import Pipe
from .stress import run_add_del_stress_suite, run_random_stress
from .virtual_machine import VirtualMachine, VMConfig


# section: core execution/user-interface logic

def config_logging(level=logging.INFO):
    # log to stdout
    logging.basicConfig(format=LOG_FORMAT, level=level)


class BTreeMapShell:
    """
    This provides programmatic interface for interacting with a btree map
    via the command language.

    An example flow is like:
    ```
    # create handler instance
    shell = BTreeMapShell(t=3)

    # submit statement
    resp = shell.handle_input("put 1 'apple'; get 1")
    assert resp.success

    # get output pipe; one message per statement
    pipe = shell.get_pipe()
    while pipe.has_msgs():
        print(pipe.read())
    ```
    """

    def __init__(self, t: int = DEFAULT_T):
        """
        :param t: minimum degree of the btree
        """
        self.config = VMConfig(t)
        self.pipe = Pipe()
        self.parser = CommandFrontEnd()
        self.virtual_machine = VirtualMachine(self.config, self.pipe)

    @property
    def tree(self):
        return self.virtual_machine.tree

    def reset(self):
        """
        Reset state; the tree is replaced by an empty tree, and the pipe is emptied
        """
        self.pipe.reset()
        self.virtual_machine.reset()

    def get_pipe(self) -> Pipe:
        return self.pipe

    def handle_input(self, input_buffer: str) -> Response:
        """
        handle input- parse and execute

        :param input_buffer:
        :return:
        """
        input_buffer = input_buffer.strip()
        if self.is_meta_command(input_buffer):
            return self.do_meta_command(input_buffer)

        p_resp = self.prepare_statement(input_buffer)
        if not p_resp.success:
            return p_resp

        e_resp = self.virtual_machine.run(p_resp.body)
        if e_resp.success:
            logging.debug(f"Execution of command '{input_buffer}' succeeded")
            return Response(True, body=e_resp.body)
        logging.debug(f"Execution of command '{input_buffer}' failed")
        return Response(False, error_message=e_resp.error_message, body=e_resp.body)

    @staticmethod
    def is_meta_command(command: str) -> bool:
        return bool(command) and command[0] == '.'

    def do_meta_command(self, command: str) -> Response:
        """
        handle execution of meta command
        :param command:
        :return:
        """
        if command == ".quit":
            return Response(True, status=MetaCommandResult.Exit)
        elif command == ".btree":
            print("Printing tree" + "-" * 50)
            self.tree.print_tree()
            print("Finished printing tree" + "-" * 50)
            return Response(True, status=MetaCommandResult.Success)
        elif command == ".validate":
            try:
                self.tree.validate()
            except AssertionError as e:
                return Response(False, error_message=f"validation failed: {e}")
            self.pipe.write("validation succeeded")
            return Response(True, status=MetaCommandResult.Success)
        elif command == ".reset":
            self.reset()
            return Response(True, status=MetaCommandResult.Success)
        elif command == ".help":
            print(USAGE)
            return Response(True, status=MetaCommandResult.Success)
        elif command.split(" ")[0] in (".quit", ".btree", ".validate", ".reset", ".help"):
            return Response(False, error_message=f"meta command [{command}] doesn't take arguments",
                            status=MetaCommandResult.InvalidArgument)
        return Response(False, error_message=f"unrecognized meta command [{command}]",
                        status=MetaCommandResult.UnrecognizedCommand)

    def prepare_statement(self, command: str) -> Response:
        """
        prepare statement, i.e. parse statement and
        return its AST

        :param command:
        :return:
        """
        self.parser.parse(command)
        if not self.parser.is_success():
            return Response(False, error_message=f"parse failed due to: [{self.parser.error_summary()}]")
        return Response(True, body=self.parser.get_parsed())


def repl(t: int = DEFAULT_T):
    """
    REPL (read-eval-print loop) for btreemap
    """
    shell = BTreeMapShell(t)

    print("Welcome to btreemap")
    print("For help use .help")
    while True:
        try:
            input_buffer = input("btree > ")
        except EOFError:
            break
        resp = shell.handle_input(input_buffer)
        if resp.status == MetaCommandResult.Exit:
            break

        # print whatever was output, including outputs of statements that ran before a failure
        for msg in shell.get_pipe().read_all():
            print(msg)

        if not resp.success:
            print(f"Command execution failed due to [{resp.error_message}] ")
    print("goodbye")


def run_file(input_filepath: str, t: int = DEFAULT_T) -> Response:
    """
    Execute statements in file.
    """
    if not os.path.exists(input_filepath):
        return Response(False, error_message=f"Argument file [{input_filepath}] not found")

    shell = BTreeMapShell(t)
    with open(input_filepath) as fp:
        contents = fp.read()

    resp = shell.handle_input(contents)
    if not resp.success:
        print(f"Command execution failed due to [{resp.error_message}] ")

    for msg in shell.get_pipe().read_all():
        print(msg)
    return resp


def run_stress():
    """
    Run stress test
    """
    run_add_del_stress_suite()
    for t in (2, 3, 5):
        run_random_stress(t)
    print("stress tests passed")


def parse_t(args: List, position: int) -> int:
    """
    parse optional minimum degree argument
    """
    if len(args) <= position:
        return DEFAULT_T
    return int(args[position])


def parse_args_and_start(args: List) -> int:
    """
    parse args and starts
    :return: exit code
    """
    args_description = """Usage:
python run.py repl [t]
    // start repl; t is minimum degree of tree
python run.py file <filepath> [t]
    // execute commands in file at <filepath>
python run.py stress
    // run stress tests
    """
    config_logging()

    if len(args) < 1:
        print("Error: run-mode not specified")
        print(args_description)
        return EXIT_FAILURE

    runmode = args[0].lower()
    try:
        if runmode == "repl":
            repl(parse_t(args, 1))
        elif runmode == "stress":
            run_stress()
        elif runmode == "file":
            if len(args) < 2:
                print("Error: Expected input filepath")
                print(args_description)
                return EXIT_FAILURE
            resp = run_file(args[1], parse_t(args, 2))
            if not resp.success:
                return EXIT_FAILURE
        else:
            print(f"Error: Invalid run mode [{runmode}]")
            print(args_description)
            return EXIT_FAILURE
    except ValueError as e:
        # invalid minimum degree
        print(f"Error: {e}")
        print(args_description)
        return EXIT_FAILURE
    return EXIT_SUCCESS
