
# lark grammar for the btreemap command language
GRAMMAR = '''
        program          : terminated* stmnt?

        ?terminated      : stmnt ";"
        ?stmnt           : insert_stmnt | put_stmnt | get_stmnt | delete_stmnt

        insert_stmnt     : "insert"i literal literal
        put_stmnt        : "put"i literal literal
        get_stmnt        : "get"i literal
        delete_stmnt     : "delete"i literal

        ?literal         : INTEGER_NUMBER | REAL_NUMBER | STRING | TRUE | FALSE | NULL

        // keywords
        TRUE             : "true"i
        FALSE            : "false"i
        NULL             : "null"i

        // a real must have a fractional part; otherwise it's an integer
        REAL_NUMBER      : /[+-]?\\d+\\.\\d+(?:[eE][+-]?\\d+)?/

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
