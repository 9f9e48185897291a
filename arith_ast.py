"""Typed AST definitions for the arithmetic expression language."""

from dataclasses import dataclass
from typing import Mapping, Sequence, Union


@dataclass(frozen=True)
class Num:
    """Integer literal expression."""
    value: int


@dataclass(frozen=True)
class Plus:
    """Addition of two expressions."""
    left: "Expr"
    right: "Expr"


@dataclass(frozen=True)
class Sub:
    """Subtraction. Removed by desugaring before interpretation."""
    left: "Expr"
    right: "Expr"


@dataclass(frozen=True)
class Mult:
    """Multiplication of two expressions."""
    left: "Expr"
    right: "Expr"


@dataclass(frozen=True)
class IfThenElse:
    """Conditional: a nonzero condition selects the then branch."""
    condition: "Expr"
    then_branch: "Expr"
    else_branch: "Expr"


@dataclass(frozen=True)
class Variable:
    """Variable reference expression."""
    name: str


@dataclass(frozen=True)
class FunctionDef:
    """Function definition with name, parameters, and body."""
    name: str
    params: Sequence[str]
    body: "Expr"

    def __post_init__(self) -> None:
        # Stored as a tuple so the node stays immutable and compares
        # equal whether built from a list or a tuple.
        object.__setattr__(self, "params", tuple(self.params))


@dataclass(frozen=True)
class FunctionApp:
    """Function application by name."""
    name: str
    args: Sequence["Expr"]

    def __post_init__(self) -> None:
        object.__setattr__(self, "args", tuple(self.args))


# Key type representing any expression in the language
Expr = Union[Num, Plus, Sub, Mult, IfThenElse, Variable, FunctionDef, FunctionApp]

VariableEnv = Mapping[str, int]
FunctionDefEnv = Mapping[str, FunctionDef]


def function_env(*defs: FunctionDef) -> dict[str, FunctionDef]:
    """Build a function environment keyed by definition name."""
    return {func.name: func for func in defs}
