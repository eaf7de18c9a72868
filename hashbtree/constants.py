# operational constants
EXIT_SUCCESS = 0
EXIT_FAILURE = 1

# btree constants
# NOTE: branching factor must be greater than 2
DEFAULT_MAX_CHILDREN = 4

# shell constants
PROMPT = "btree > "
LOG_FORMAT = "[%(filename)s:%(lineno)s - %(funcName)s ] %(message)s"
DEFAULT_LOG_LEVEL = "INFO"

# stress constants
# number of delete orders tried per insert sequence
STRESS_NUM_PERMS = 3
STRESS_RANDOM_SEED = 1

USAGE = """
hashbtree shell. Each command operates on a single in-memory btree.

Commands:
    insert <value> [, <value> ...]      insert values; fails if a value's key exists
    replace <value> [, <value> ...]     insert values, overwriting existing keys
    remove <key> [, <key> ...]          remove values by key
    find <key>                          output value stored under key
    contains <value>                    output whether value is stored
    load <value> [, <value> ...]        clear tree, then insert values, skipping duplicates
    list                                output all values in key order
    count                               output number of stored values
    height                              output number of levels
    clear                               remove all values
    validate                            check tree invariants
    print                               print tree

    values are integers, or single/double quoted strings; a value's key is its hash.
    commands can be separated with ';'

Meta commands:
    .help                               print this message
    .btree                              print tree
    .validate                           check tree invariants
    .clear                              remove all values
    .quit                               exit
"""
