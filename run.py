"""
Main interface for user/developer of hashbtree.

Utility to start repl and run commands.

Requires hashbtree to be installed.
"""

import sys

from hashbtree import parse_args_and_start


if __name__ == '__main__':
    sys.exit(parse_args_and_start(sys.argv[1:]))
