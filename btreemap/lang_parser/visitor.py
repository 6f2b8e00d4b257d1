from ..utils import camel_to_snake


class HandlerNotFoundException(Exception):
    """
    A specific handler (method) is not found
    """
    pass


class Visitor:
    """
    Conceptually, Visitor is an interface/abstract class,
    where different concrete Visitors, e.g. VirtualMachine, can handle
    different tasks over the same symbols, e.g. executing statements.
    This indirection allows us to add new behaviors for the parser
    via a new concrete class, instead of modifying the symbol classes.

    See following for visitor design pattern in python:
     https://refactoring.guru/design-patterns/visitor/python/example
    """

    def visit(self, symbol: 'Symbol'):
        """
        this will determine which specific handler to invoke; dispatch
        """
        suffix = camel_to_snake(symbol.__class__.__name__)
        # NB: this requires the class and handler have the
        # same name in PascalCase and snake_case, respectively
        handler = f'visit_{suffix}'
        if hasattr(self, handler):
            return getattr(self, handler)(symbol)
        raise HandlerNotFoundException(f"{self.__class__.__name__} does not have {handler}")
