import logging

from .utils import camel_to_snake


class HandlerNotFoundException(Exception):
    """
    A specific handler (method) is not found
    """
    pass


class Visitor:
    """
    Conceptually, Visitor is an interface/abstract class,
    where different concrete Visitors can handle
    different tasks, e.g. executing commands against a tree.

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
        else:
            logging.error(f"Visitor does not have {handler}")
            raise HandlerNotFoundException(handler)
