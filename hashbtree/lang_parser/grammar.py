# lark grammar for the btree shell's command language
GRAMMAR = '''
        program          : command
                         | terminated
                         | (terminated)+ command?

        ?terminated      : command ";"
        ?command         : insert_cmd | replace_cmd | load_cmd | remove_cmd | find_cmd | contains_cmd
                         | list_cmd | count_cmd | height_cmd | clear_cmd | validate_cmd | print_cmd

        // mutating commands
        insert_cmd       : "insert"i value_list
        replace_cmd      : "replace"i value_list
        load_cmd         : "load"i value_list
        remove_cmd       : "remove"i key_list

        // lookups
        find_cmd         : "find"i key
        contains_cmd     : "contains"i value

        // introspection
        list_cmd         : "list"i
        count_cmd        : "count"i
        height_cmd       : "height"i
        clear_cmd        : "clear"i
        validate_cmd     : "validate"i
        print_cmd        : "print"i

        value_list       : (value ",")* value
        key_list         : (key ",")* key

        // a value's key is its hash; hence keys are always integers
        value            : INTEGER_NUMBER | STRING
        key              : INTEGER_NUMBER

        // single quoted string
        // NOTE: this doesn't have any support for escaping
        SINGLE_QUOTED_STRING  : /'[^']*'/
        STRING: SINGLE_QUOTED_STRING | DOUBLE_QUOTED_STRING

        // ref: https://github.com/lark-parser/lark/blob/master/lark/grammars/common.lark
        %import common.ESCAPED_STRING   -> DOUBLE_QUOTED_STRING
        %import common.SIGNED_INT       -> INTEGER_NUMBER
        %import common.WS
        %ignore WS
'''
