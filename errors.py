"""Errors raised while interpreting or transforming expressions."""

from typing import Any


class ArithExprError(RuntimeError):
    """Base class for every evaluation and transformation failure."""
    pass


class UndefinedVariable(ArithExprError):
    """Raised when a variable is not bound in the variable environment."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Undefined variable: {name}")
        self.name = name


class UndefinedFunction(ArithExprError):
    """Raised when an application names a function that is not defined."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Undefined function: {name}")
        self.name = name


class UnboundIdentifier(ArithExprError):
    """Raised by substitution when a variable is not among the parameters."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unbound identifier: {name}")
        self.name = name


class UnsupportedNode(ArithExprError):
    """Raised when an operation reaches a node it has no case for."""

    def __init__(self, node: Any, operation: str) -> None:
        super().__init__(f"{operation} does not support {type(node).__name__} nodes")
        self.node = node
        self.operation = operation


class ArityMismatch(ArithExprError):
    """Raised when argument and parameter counts differ under strict arity,
    or when substitution gets different numbers of names and values."""

    def __init__(self, name: str, expected: int, got: int, message: str | None = None) -> None:
        super().__init__(message or f"Function {name} expects {expected} arguments, got {got}")
        self.name = name
        self.expected = expected
        self.got = got
