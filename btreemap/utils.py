import re


class ParseError(Exception):
    pass


def camel_to_snake(name: str) -> str:
    """
    change casing
    InsertStmnt -> insert_stmnt
    """
    return re.sub(r'(?<!^)(?=[A-Z])', '_', name).lower()


def format_value(value) -> str:
    """
    render a stored key or value the way the shell prints it
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return f"'{value}'"
    return str(value)
