"""
Symbols of the btree shell's command language, i.e. the AST that
the parse tree is transformed into.
"""
from dataclasses import dataclass, field
from typing import Any, List, Union

from lark import Token, Transformer


class Symbol:
    """
    base class of all command symbols
    """

    def accept(self, visitor: "Visitor"):
        return visitor.visit(self)


@dataclass
class InsertCommand(Symbol):
    values: List[Any]


@dataclass
class ReplaceCommand(Symbol):
    values: List[Any]


@dataclass
class LoadCommand(Symbol):
    """bulk set; contents of tree are replaced with values"""
    values: List[Any]


@dataclass
class RemoveCommand(Symbol):
    keys: List[int]


@dataclass
class FindCommand(Symbol):
    key: int


@dataclass
class ContainsCommand(Symbol):
    value: Any


# commands without args


@dataclass
class ListCommand(Symbol):
    pass


@dataclass
class CountCommand(Symbol):
    pass


@dataclass
class HeightCommand(Symbol):
    pass


@dataclass
class ClearCommand(Symbol):
    pass


@dataclass
class ValidateCommand(Symbol):
    pass


@dataclass
class PrintCommand(Symbol):
    pass


@dataclass
class Program(Symbol):
    commands: List[Symbol] = field(default_factory=list)


def token_to_value(token: Token) -> Union[int, str]:
    """
    convert literal token to python value
    """
    if token.type == "INTEGER_NUMBER":
        return int(token)
    # strip quotes
    return str(token)[1:-1]


class ToAst(Transformer):
    """
    Convert parse tree into command symbols. Each method
    handles the rule of the same name.
    """

    def program(self, args):
        return Program(list(args))

    def insert_cmd(self, args):
        return InsertCommand(args[0])

    def replace_cmd(self, args):
        return ReplaceCommand(args[0])

    def load_cmd(self, args):
        return LoadCommand(args[0])

    def remove_cmd(self, args):
        return RemoveCommand(args[0])

    def find_cmd(self, args):
        return FindCommand(args[0])

    def contains_cmd(self, args):
        return ContainsCommand(args[0])

    def list_cmd(self, args):
        return ListCommand()

    def count_cmd(self, args):
        return CountCommand()

    def height_cmd(self, args):
        return HeightCommand()

    def clear_cmd(self, args):
        return ClearCommand()

    def validate_cmd(self, args):
        return ValidateCommand()

    def print_cmd(self, args):
        return PrintCommand()

    def value_list(self, args):
        return list(args)

    def key_list(self, args):
        return list(args)

    def value(self, args):
        return token_to_value(args[0])

    def key(self, args):
        return int(args[0])
