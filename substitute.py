"""Substitution of parameter names by literal values."""

import logging
from typing import Sequence

from arith_ast import (
    Expr,
    Num,
    Plus,
    Sub,
    Mult,
    IfThenElse,
    Variable,
)
from errors import ArityMismatch, UnboundIdentifier, UnsupportedNode


logger = logging.getLogger(__name__)


def substitute(expr: Expr, param_names: Sequence[str], param_values: Sequence[int]) -> Expr:
    """
    Replace every bound variable in expr with its literal value.

    Args:
        expr: Expression to close over the parameters
        param_names: Parameter names, positionally paired with param_values
        param_values: Values bound to the names at the same index

    Returns:
        A new expression with no free variables

    Raises:
        ArityMismatch: if the names and values differ in length
        UnboundIdentifier: if a variable is not among param_names
        UnsupportedNode: on function definitions and applications
    """
    if len(param_names) != len(param_values):
        raise ArityMismatch(
            "substitute",
            len(param_names),
            len(param_values),
            f"Cannot substitute {len(param_values)} values for {len(param_names)} parameter names",
        )

    logger.debug("Substituting %s = %s into %s", param_names, param_values, expr)
    return _substitute(expr, list(param_names), list(param_values))


def _substitute(expr: Expr, names: list[str], values: list[int]) -> Expr:
    if isinstance(expr, Num):
        return expr

    if isinstance(expr, Variable):
        if expr.name not in names:
            raise UnboundIdentifier(expr.name)
        return Num(values[names.index(expr.name)])

    if isinstance(expr, Plus):
        return Plus(_substitute(expr.left, names, values), _substitute(expr.right, names, values))

    if isinstance(expr, Mult):
        return Mult(_substitute(expr.left, names, values), _substitute(expr.right, names, values))

    if isinstance(expr, Sub):
        return Sub(_substitute(expr.left, names, values), _substitute(expr.right, names, values))

    if isinstance(expr, IfThenElse):
        return IfThenElse(
            _substitute(expr.condition, names, values),
            _substitute(expr.then_branch, names, values),
            _substitute(expr.else_branch, names, values),
        )

    # FunctionDef and FunctionApp
    raise UnsupportedNode(expr, "substitute")
