"""
End-to-end tests for the btree shell. These should validate the
correctness of any interaction loop that the user can initiate.
"""
import pytest

from lark.exceptions import UnexpectedInput

from .context import (
    BTreeShell,
    ShellConfig,
    parse_config,
    parse_args_and_start,
    run_file,
    CommandResult,
    MetaCommandResult,
    EXIT_SUCCESS,
    EXIT_FAILURE,
    CommandFrontEnd,
    Program,
    InsertCommand,
    FindCommand,
    ListCommand,
    RemoveCommand,
    LoadCommand,
)


@pytest.fixture
def shell():
    """
    Return shell with keys 5, 3, 8, 1 inserted
    """
    shell = BTreeShell(ShellConfig(max_children=3))
    commands = [
        "insert 5, 3, 8",
        "insert 1",
    ]
    for cmd in commands:
        resp = shell.handle_input(cmd)
        assert resp.success, f"{cmd} failed with {resp.error_message}"
    return shell


def run(shell: BTreeShell, text: str) -> list:
    """
    handle `text` and return output rows
    """
    resp = shell.handle_input(text)
    assert resp.success, f"{text} failed with {resp.error_message}"
    return shell.get_pipe().read_all()


# section: parser


def test_parse_program():
    parser = CommandFrontEnd()
    parser.parse("insert 1, -2; find 7")
    assert parser.is_success()
    assert parser.get_parsed() == Program([InsertCommand([1, -2]), FindCommand(7)])


def test_parse_values():
    parser = CommandFrontEnd()
    parser.parse("LOAD 'apple', \"pear\", 3; remove 4, 5; list;")
    assert parser.is_success()
    assert parser.get_parsed() == Program([
        LoadCommand(["apple", "pear", 3]),
        RemoveCommand([4, 5]),
        ListCommand(),
    ])


def test_parse_failure():
    parser = CommandFrontEnd()
    parser.parse("frobnicate 3")
    assert not parser.is_success()
    assert parser.get_parsed() is None
    assert parser.error_summary()

    parser = CommandFrontEnd(raise_exception=True)
    with pytest.raises(UnexpectedInput):
        parser.parse("find 'not a key'")


# section: commands


def test_list(shell):
    assert run(shell, "list") == [1, 3, 5, 8]


def test_count_and_height(shell):
    assert run(shell, "count; height") == [4, 2]


def test_find(shell):
    assert run(shell, "find 3") == [3]
    assert run(shell, "find 42") == [None]


def test_remove(shell):
    assert run(shell, "remove 5, 42") == [5, None]
    assert run(shell, "list") == [1, 3, 8]
    assert run(shell, "print") == ["BTree\n\t[3]\n\t\t[1]\n\t\t[8]"]


def test_insert_duplicate(shell):
    resp = shell.handle_input("insert 5")
    assert not resp.success
    assert resp.status == CommandResult.DuplicateKey
    assert run(shell, "count") == [4]


def test_replace_and_load(shell):
    assert run(shell, "replace 5, 13; count") == [5]
    assert run(shell, "load 3, 1, 3, 2; list") == [1, 2, 3]


def test_strings():
    shell = BTreeShell(ShellConfig(max_children=3))
    rows = run(shell, "insert 'apple', \"pear\"; contains 'apple'; contains 'plum'")
    assert rows == [True, False]
    assert run(shell, "list") == sorted(["apple", "pear"], key=hash)
    assert run(shell, f"find {hash('pear')}") == ["pear"]


def test_clear_and_validate(shell):
    assert run(shell, "validate") == [True]
    assert run(shell, "clear; count; height") == [0, 0]


def test_parse_error(shell):
    resp = shell.handle_input("frobnicate 3")
    assert not resp.success
    assert resp.status == CommandResult.ParseError
    assert "parse failed" in resp.error_message


def test_empty_input(shell):
    resp = shell.handle_input("   ")
    assert resp.success
    assert not shell.get_pipe().has_msgs()


# section: meta commands


def test_meta_commands(shell, capsys):
    resp = shell.handle_input(".btree")
    assert resp.success
    assert "\t[5]" in capsys.readouterr().out

    resp = shell.handle_input(".validate")
    assert resp.success

    resp = shell.handle_input(".help")
    assert resp.success

    resp = shell.handle_input(".clear")
    assert resp.success
    assert run(shell, "count") == [0]

    resp = shell.handle_input(".frobnicate")
    assert not resp.success
    assert resp.status == MetaCommandResult.UnrecognizedCommand


# section: entry points


def test_parse_config():
    config = parse_config(["--max-children", "5", "--validate", "--log-level", "debug"])
    assert config == ShellConfig(max_children=5, validate_on_write=True, log_level="DEBUG")

    assert parse_config(["somefile.txt"]) == ShellConfig()

    with pytest.raises(ValueError):
        parse_config(["--max-children", "2"])
    with pytest.raises(ValueError):
        parse_config(["--max-children"])


def test_run_file(tmp_path, capsys):
    filepath = tmp_path / "commands.txt"
    filepath.write_text("insert 2, 1;\nlist\n")
    resp = run_file(str(filepath), ShellConfig(max_children=3))
    assert resp.success
    assert capsys.readouterr().out == "1\n2\n"

    resp = run_file(str(tmp_path / "missing.txt"))
    assert not resp.success


def test_parse_args_and_start(tmp_path):
    assert parse_args_and_start([]) == EXIT_FAILURE
    assert parse_args_and_start(["frobnicate"]) == EXIT_FAILURE
    assert parse_args_and_start(["file"]) == EXIT_FAILURE

    filepath = tmp_path / "commands.txt"
    filepath.write_text("insert 1; insert 1")
    assert parse_args_and_start(["file", str(filepath)]) == EXIT_FAILURE

    filepath.write_text("insert 1; insert 2")
    assert parse_args_and_start(["file", str(filepath), "--max-children", "3"]) == EXIT_SUCCESS
