"""
Executes parsed shell commands against a btree. Output of
each command is written to the pipe, one message per row.
"""
import logging

from .btree import BTree, AlreadyPresent, TreeValidationError
from .dataexchange import Response, CommandResult
from .lang_parser.symbols import (
    Program,
    InsertCommand,
    ReplaceCommand,
    LoadCommand,
    RemoveCommand,
    FindCommand,
    ContainsCommand,
    ListCommand,
    CountCommand,
    HeightCommand,
    ClearCommand,
    ValidateCommand,
    PrintCommand,
)
from .lang_parser.visitor import Visitor
from .pipe import Pipe


class CommandInterpreter(Visitor):
    """
    Visitor that runs commands on `tree`.
    """

    def __init__(self, tree: BTree, pipe: Pipe):
        self.tree = tree
        self.pipe = pipe

    def run(self, program: Program) -> Response:
        """
        run commands in order; stops on first failed command.
        NOTE: commands that ran before the failure are not undone
        """
        for command in program.commands:
            resp = command.accept(self)
            if not resp.success:
                logging.warning(f"Command [{command}] failed with {resp}")
                return resp
        return Response(True, status=CommandResult.Success)

    # section : mutating commands

    def visit_insert_command(self, command: InsertCommand) -> Response:
        for value in command.values:
            try:
                self.tree.insert(value)
            except AlreadyPresent as e:
                return Response(False, error_message=f"insert of [{value}] failed: {e}", status=CommandResult.DuplicateKey)
        return Response(True, status=CommandResult.Success)

    def visit_replace_command(self, command: ReplaceCommand) -> Response:
        for value in command.values:
            self.tree.replace(value)
        return Response(True, status=CommandResult.Success)

    def visit_load_command(self, command: LoadCommand) -> Response:
        self.tree.elements = command.values
        return Response(True, status=CommandResult.Success)

    def visit_remove_command(self, command: RemoveCommand) -> Response:
        """
        write removed element for each key; None if key was not present
        """
        for key in command.keys:
            removed = self.tree.remove(key)
            if removed is None:
                logging.info(f"key [{key}] not found")
            self.pipe.write(removed)
        return Response(True, status=CommandResult.Success)

    def visit_clear_command(self, command: ClearCommand) -> Response:
        self.tree.clear()
        return Response(True, status=CommandResult.Success)

    # section : lookups

    def visit_find_command(self, command: FindCommand) -> Response:
        self.pipe.write(self.tree.find(command.key))
        return Response(True, status=CommandResult.Success)

    def visit_contains_command(self, command: ContainsCommand) -> Response:
        self.pipe.write(self.tree.contains(command.value))
        return Response(True, status=CommandResult.Success)

    # section : introspection

    def visit_list_command(self, command: ListCommand) -> Response:
        for element in self.tree:
            self.pipe.write(element)
        return Response(True, status=CommandResult.Success)

    def visit_count_command(self, command: CountCommand) -> Response:
        self.pipe.write(self.tree.count)
        return Response(True, status=CommandResult.Success)

    def visit_height_command(self, command: HeightCommand) -> Response:
        self.pipe.write(self.tree.height)
        return Response(True, status=CommandResult.Success)

    def visit_validate_command(self, command: ValidateCommand) -> Response:
        try:
            self.tree.validate()
        except TreeValidationError as e:
            return Response(False, error_message=f"validation failed: {e}", status=CommandResult.ValidationFailed)
        self.pipe.write(True)
        return Response(True, status=CommandResult.Success)

    def visit_print_command(self, command: PrintCommand) -> Response:
        self.pipe.write(self.tree.dump())
        return Response(True, status=CommandResult.Success)
