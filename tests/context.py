"""
This sets up the modules for testing
"""
import os
import sys
# otherwise the package will have to be installed before tests can run
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))


# specific internal imports for specific tests suites
# generally we'll import entire module, unless it' clearer to import a specific member

# btree_tests
from hashbtree.btree import BTree, Node, KeyValue, AlreadyPresent, NotPresent, DataStructureError, TreeValidationError

# shell_tests
from hashbtree.interface import BTreeShell, ShellConfig, parse_config, parse_args_and_start, run_file
from hashbtree.dataexchange import CommandResult, MetaCommandResult
from hashbtree.constants import EXIT_SUCCESS, EXIT_FAILURE
from hashbtree.lang_parser.commandhandler import CommandFrontEnd
from hashbtree.lang_parser.symbols import Program, InsertCommand, FindCommand, ListCommand, RemoveCommand, LoadCommand

# stress_tests
from hashbtree.stress import run_add_del_stress_suite, run_add_del_stress_test, max_height, delete_orders
