from .btree import (
    BTree,
    Node,
    KeyValue,
    DataStructureError,
    AlreadyPresent,
    NotPresent,
    TreeValidationError,
)
from .interface import BTreeShell, ShellConfig, parse_args_and_start, repl, run_file
