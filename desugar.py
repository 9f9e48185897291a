"""Desugarer: rewrites subtraction into the core language.

The core language the interpreter accepts contains only literals, variables,
addition, multiplication, conditionals and function applications. Subtraction
is expressed as ``left + (-1 * right)``.
"""

import logging

from arith_ast import (
    Expr,
    Num,
    Plus,
    Sub,
    Mult,
    IfThenElse,
    Variable,
    FunctionDef,
    FunctionApp,
)
from errors import UnsupportedNode


logger = logging.getLogger(__name__)


def desugar(expr: Expr) -> Expr:
    """
    Desugar an expression recursively.

    Args:
        expr: AST to desugar

    Returns:
        Desugared AST containing no Sub nodes

    Raises:
        UnsupportedNode: on function definitions and applications
    """
    if isinstance(expr, (Num, Variable)):
        return expr

    if isinstance(expr, Sub):
        return Plus(desugar(expr.left), Mult(Num(-1), desugar(expr.right)))

    if isinstance(expr, Plus):
        return Plus(desugar(expr.left), desugar(expr.right))

    if isinstance(expr, Mult):
        return Mult(desugar(expr.left), desugar(expr.right))

    if isinstance(expr, IfThenElse):
        return IfThenElse(
            desugar(expr.condition),
            desugar(expr.then_branch),
            desugar(expr.else_branch),
        )

    logger.debug("Cannot desugar %s", type(expr).__name__)
    raise UnsupportedNode(expr, "desugar")


def is_desugared(expr: Expr) -> bool:
    """Check that no Sub node remains anywhere in the tree."""
    pending: list[Expr] = [expr]
    while pending:
        node = pending.pop()
        if isinstance(node, Sub):
            return False
        if isinstance(node, (Plus, Mult)):
            pending.extend([node.left, node.right])
        elif isinstance(node, IfThenElse):
            pending.extend([node.condition, node.then_branch, node.else_branch])
        elif isinstance(node, FunctionDef):
            pending.append(node.body)
        elif isinstance(node, FunctionApp):
            pending.extend(node.args)
    return True
