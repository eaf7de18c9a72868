from __future__ import annotations
"""
This module contains the highest level user-interaction
i.e. management of entities, like parser, interpreter, tree, etc. that
make up the btree shell.
"""
import os.path
import sys
import logging

from dataclasses import dataclass
from typing import List

from .btree import BTree, TreeValidationError
from .constants import (
    USAGE,
    PROMPT,
    LOG_FORMAT,
    EXIT_SUCCESS,
    EXIT_FAILURE,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_CHILDREN,
)
from .dataexchange import Response, MetaCommandResult, CommandResult
from .interpreter import CommandInterpreter
from .lang_parser.commandhandler import CommandFrontEnd
from .lang_parser.symbols import Program
from .pipe import Pipe
from .stress import run_add_del_stress_suite


@dataclass
class ShellConfig:
    """
    Configuration of a btree shell
    """
    max_children: int = DEFAULT_MAX_CHILDREN
    # validate the tree after every mutation
    validate_on_write: bool = False
    log_level: str = DEFAULT_LOG_LEVEL


# section: core execution/user-interface logic

def config_logging(level: str = DEFAULT_LOG_LEVEL):
    # log to stdout
    logging.basicConfig(format=LOG_FORMAT, level=level)


class BTreeShell:
    """
    This provides programmatic interface for interacting with a btree via commands.

    An example flow is like:
    ```
    # create handler instance
    shell = BTreeShell(ShellConfig(max_children=3))

    # submit command
    resp = shell.handle_input("insert 5, 3, 8; list")
    assert resp.success

    # get output pipe
    pipe = shell.get_pipe()

    # print rows
    while pipe.has_msgs():
        print(pipe.read())
    ```
    """

    def __init__(self, config: ShellConfig = None):
        self.config = config if config is not None else ShellConfig()
        self.pipe = None
        self.tree = None
        self.interpreter = None
        self.configure()
        self.reset()

    def reset(self):
        """
        Reset state. Recreates pipe, tree, and interpreter.
        """
        self.pipe = Pipe()
        self.tree = BTree(self.config.max_children, validate_on_write=self.config.validate_on_write)
        self.interpreter = CommandInterpreter(self.tree, self.pipe)

    def configure(self):
        """
        Handle any configuration tasks
        """
        config_logging(self.config.log_level)

    def get_pipe(self) -> Pipe:
        """
        NOTE: get pipe; pipes are recycled if BTreeShell.reset is invoked
        :return:
        """
        return self.pipe

    def handle_input(self, input_buffer: str) -> Response:
        """
        handle input- parse and execute

        :param input_buffer:
        :return:
        """
        return self.input_handler(input_buffer)

    @staticmethod
    def is_meta_command(command: str) -> bool:
        return command and command[0] == '.'

    def do_meta_command(self, command: str) -> Response:
        """
        handle execution of meta command
        :param command:
        :return:
        """
        if command == ".quit":
            print("goodbye")
            sys.exit(EXIT_SUCCESS)
        elif command == ".btree":
            print("Printing tree" + "-" * 50)
            self.tree.print_tree()
            print("Finished printing tree" + "-" * 50)
            return Response(True, status=MetaCommandResult.Success)
        elif command == ".validate":
            print("Validating tree....")
            try:
                self.tree.validate()
            except TreeValidationError as e:
                return Response(False, error_message=f"validation failed: {e}", status=CommandResult.ValidationFailed)
            print("Validation succeeded.......")
            return Response(True, status=MetaCommandResult.Success)
        elif command == ".clear":
            self.tree.clear()
            return Response(True, status=MetaCommandResult.Success)
        elif command == ".help":
            print(USAGE)
            return Response(True, status=MetaCommandResult.Success)
        return Response(False, error_message=f"unrecognized command [{command}]",
                        status=MetaCommandResult.UnrecognizedCommand)

    @staticmethod
    def prepare_statement(command) -> Response:
        """
        prepare statement, i.e. parse command and
        return it's AST.

        :param command:
        :return:
        """
        parser = CommandFrontEnd()
        parser.parse(command)
        if not parser.is_success():
            return Response(False, error_message=f"parse failed due to: [{parser.error_summary()}]",
                            status=CommandResult.ParseError)
        return Response(True, body=parser.get_parsed())

    def execute_statement(self, program: Program) -> Response:
        """
        execute statement;
        returns return value of child-invocation
        """
        return self.interpreter.run(program)

    def input_handler(self, input_buffer: str) -> Response:
        """
        receive input, parse input, and execute commands.

        :param input_buffer:
        :return:
        """
        input_buffer = input_buffer.strip()
        if not input_buffer:
            return Response(True, status=CommandResult.Success)

        if self.is_meta_command(input_buffer):
            m_resp = self.do_meta_command(input_buffer)
            if not m_resp.success:
                logging.warning(f"Unable to process meta command [{input_buffer}]")
            return m_resp

        p_resp = self.prepare_statement(input_buffer)
        if not p_resp.success:
            return p_resp

        program = p_resp.body
        e_resp = self.execute_statement(program)
        if e_resp.success:
            logging.info(f"Execution of command '{input_buffer}' succeeded")
        else:
            logging.info(f"Execution of command '{input_buffer}' failed")
        return e_resp


def repl(config: ShellConfig = None):
    """
    REPL (read-eval-print loop) for the btree shell
    """
    shell = BTreeShell(config)

    print("Welcome to hashbtree")
    print("For help use .help")
    while True:
        input_buffer = input(PROMPT)
        resp = shell.handle_input(input_buffer)
        if not resp.success:
            print(f"Command execution failed due to [{resp.error_message}] ")
            continue

        # get output pipe
        pipe = shell.get_pipe()

        while pipe.has_msgs():
            print(pipe.read())


def run_file(input_filepath: str, config: ShellConfig = None) -> Response:
    """
    Execute commands in file.
    """
    if not os.path.exists(input_filepath):
        return Response(False, error_message=f"Argument file [{input_filepath}] not found")

    shell = BTreeShell(config)

    with open(input_filepath) as fp:
        contents = fp.read()

    resp = shell.handle_input(contents)
    if not resp.success:
        print(f"Command execution failed due to [{resp.error_message}] ")

    # get output pipe
    pipe = shell.get_pipe()

    while pipe.has_msgs():
        print(pipe.read())
    return resp


def run_stress(config: ShellConfig = None) -> int:
    """
    Run stress test
    """
    config = config if config is not None else ShellConfig()
    config_logging(config.log_level)
    return run_add_del_stress_suite(config.max_children)


def devloop(config: ShellConfig = None):
    """
    run a fixed sequence of commands, logging all output
    """
    shell = BTreeShell(config)

    texts = [
        "insert 5, 3, 8",
        "insert 1",
        "print",
        "remove 5",
        "list",
        "validate",
    ]

    for text in texts:
        logging.info(f"handling. {text}")
        resp = shell.handle_input(text)
        logging.info(f"received resp: {resp}")
        while shell.pipe.has_msgs():
            logging.info("read from pipe: {}".format(shell.pipe.read()))


def parse_config(args: List[str]) -> ShellConfig:
    """
    parse option flags from args; positional args are ignored
    """
    config = ShellConfig()
    idx = 0
    while idx < len(args):
        arg = args[idx]
        if arg in ("--max-children", "--log-level") and idx + 1 >= len(args):
            raise ValueError(f"Expected value for option {arg}")
        if arg == "--max-children":
            config.max_children = int(args[idx + 1])
            idx += 1
        elif arg == "--log-level":
            config.log_level = args[idx + 1].upper()
            idx += 1
        elif arg == "--validate":
            config.validate_on_write = True
        idx += 1
    if config.max_children <= 2:
        raise ValueError(f"max-children must be greater than 2; received {config.max_children}")
    return config


def parse_args_and_start(args: List) -> int:
    """
    parse args and starts
    :return: exit code
    """
    args_description = """Usage:
python run.py repl [options]
    // start repl
python run.py devloop [options]
    // start a dev-loop function
python run.py file <filepath> [options]
    // read file at <filepath>
python run.py stress [options]
    // run add/delete stress suite

Options:
    --max-children <n>      branching factor of tree; must be greater than 2
    --log-level <level>     e.g. DEBUG, INFO
    --validate              validate tree after every mutation
    """
    if len(args) < 1:
        print("Error: run-mode not specified")
        print(args_description)
        return EXIT_FAILURE

    try:
        config = parse_config(args[1:])
    except ValueError as e:
        print(f"Error: {e}")
        print(args_description)
        return EXIT_FAILURE

    runmode = args[0].lower()
    if runmode == "repl":
        repl(config)
    elif runmode == "stress":
        return run_stress(config)
    elif runmode == "devloop":
        devloop(config)
    elif runmode == "file":
        if len(args) < 2:
            print("Error: Expected input filepath")
            print(args_description)
            return EXIT_FAILURE
        input_filepath = args[1]
        resp = run_file(input_filepath, config)
        return EXIT_SUCCESS if resp.success else EXIT_FAILURE
    else:
        print(f"Error: Invalid run mode [{runmode}]")
        print(args_description)
        return EXIT_FAILURE
    return EXIT_SUCCESS


def main() -> int:
    return parse_args_and_start(sys.argv[1:])
