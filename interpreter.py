"""Small-step interpreter for the arithmetic expression language.

Evaluation runs on an abstract machine with an explicit stack of evaluation
contexts instead of the Python call stack, so arbitrarily deep expression
trees can be interpreted without hitting the recursion limit.
"""

import logging
import operator
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, Sequence, Union

from arith_ast import (
    Expr,
    Num,
    Plus,
    Mult,
    IfThenElse,
    Variable,
    FunctionDef,
    FunctionApp,
    VariableEnv,
    FunctionDefEnv,
)
from errors import (
    ArityMismatch,
    UndefinedFunction,
    UndefinedVariable,
    UnsupportedNode,
)
from substitute import substitute


logger = logging.getLogger(__name__)


class CallStrategy(Enum):
    """How a function application binds its parameters."""

    # Parameters are layered over the caller's variables (dynamic scoping)
    OVERLAY = "overlay"
    # Parameters are replaced by literals and the body runs with no variables
    SUBSTITUTION = "substitution"


@dataclass(frozen=True)
class Env:
    """Environment mapping variable names to values and names to functions."""

    bindings: dict[str, int]
    functions: dict[str, FunctionDef]
    strict_arity: bool = False
    call_strategy: CallStrategy = CallStrategy.OVERLAY

    def lookup(self, name: str) -> int:
        """Look up a variable in the environment."""
        if name not in self.bindings:
            raise UndefinedVariable(name)
        return self.bindings[name]

    def get_function(self, name: str) -> FunctionDef:
        """Look up a function definition."""
        if name not in self.functions:
            raise UndefinedFunction(name)
        return self.functions[name]

    def extend_many(self, names: Sequence[str], values: Sequence[int]) -> "Env":
        """Create a new environment with multiple bindings layered on top.

        Names and values are paired positionally; extra names or values are
        ignored.
        """
        new_bindings = self.bindings.copy()
        for name, value in zip(names, values):
            new_bindings[name] = value
        return self.with_bindings(new_bindings)

    def with_bindings(self, bindings: dict[str, int]) -> "Env":
        """Create a new environment with the variable bindings replaced."""
        return Env(bindings, self.functions, self.strict_arity, self.call_strategy)


BinaryOp = Callable[[int, int], int]


# Evaluation contexts - represent "holes" in expressions where evaluation is happening.
# Each context remembers the environment it resumes in.
@dataclass(frozen=True)
class LeftOperandContext:
    """Context for evaluating the left operand of a binary operation."""

    env: Env
    op: BinaryOp
    right: Expr


@dataclass(frozen=True)
class RightOperandContext:
    """Context for evaluating the right operand of a binary operation."""

    env: Env
    op: BinaryOp
    left_value: int


@dataclass(frozen=True)
class IfContext:
    """Context for evaluating an if expression's condition."""

    env: Env
    then_branch: Expr
    else_branch: Expr


@dataclass(frozen=True)
class FunctionAppContext:
    """Context for evaluating function application arguments."""

    env: Env
    func_name: str
    func_def: FunctionDef
    evaluated_args: list[int] = field(default_factory=list)  # Arguments evaluated so far
    remaining_args: Sequence[Expr] = ()  # Arguments still to evaluate


# Evaluation context variants
Context = Union[
    LeftOperandContext,
    RightOperandContext,
    IfContext,
    FunctionAppContext,
]

# Persistent stack of contexts: (innermost, rest) pairs ending in None
ContextStack = Optional[tuple[Context, "ContextStack"]]


def push(ctx: Context, contexts: ContextStack) -> ContextStack:
    """Push a context onto the stack without copying it."""
    return (ctx, contexts)


def stack_depth(contexts: ContextStack) -> int:
    """Count the contexts on a stack."""
    depth = 0
    while contexts is not None:
        depth += 1
        contexts = contexts[1]
    return depth


@dataclass(frozen=True)
class Computing:
    """State representing ongoing computation."""

    env: Env
    expr: Expr
    contexts: ContextStack  # Stack of evaluation contexts


@dataclass(frozen=True)
class Done:
    """State representing completed computation."""

    value: int


# State variants
State = Union[Computing, Done]


BINARY_OPS: dict[type, BinaryOp] = {
    Plus: operator.add,
    Mult: operator.mul,
}


def is_truthy(value: int) -> bool:
    """Determine if a value is truthy (non-zero)."""
    return value != 0


def return_value(value: int, contexts: ContextStack) -> State:
    """Hand a computed value to the innermost context, or finish."""
    if contexts is None:
        return Done(value)
    ctx, rest = contexts
    return apply_context(ctx, value, rest)


def call_function(
    env: Env,
    func_name: str,
    func_def: FunctionDef,
    values: list[int],
    contexts: ContextStack,
) -> State:
    """Enter a function body with its parameters bound to values."""
    params = list(func_def.params)
    if env.strict_arity and len(values) != len(params):
        raise ArityMismatch(func_name, len(params), len(values))

    logger.debug("Calling %s with %s", func_name, values)

    if env.call_strategy is CallStrategy.SUBSTITUTION:
        count = min(len(params), len(values))
        body = substitute(func_def.body, params[:count], values[:count])
        return Computing(env.with_bindings({}), body, contexts)

    return Computing(env.extend_many(params, values), func_def.body, contexts)


def apply_context(ctx: Context, value: int, contexts: ContextStack) -> State:
    """Apply a value to an evaluation context, continuing computation."""
    if isinstance(ctx, LeftOperandContext):
        # Left operand evaluated, move on to the right one
        right_ctx: Context = RightOperandContext(ctx.env, ctx.op, value)
        return Computing(ctx.env, ctx.right, push(right_ctx, contexts))

    if isinstance(ctx, RightOperandContext):
        # Both operands evaluated, continue with the result as a literal
        return Computing(ctx.env, Num(ctx.op(ctx.left_value, value)), contexts)

    if isinstance(ctx, IfContext):
        # Condition evaluated, choose branch
        if is_truthy(value):
            return Computing(ctx.env, ctx.then_branch, contexts)
        else:
            return Computing(ctx.env, ctx.else_branch, contexts)

    if isinstance(ctx, FunctionAppContext):
        # One argument evaluated, check if more to go
        evaluated = ctx.evaluated_args + [value]

        if len(ctx.remaining_args) == 0:
            return call_function(ctx.env, ctx.func_name, ctx.func_def, evaluated, contexts)

        next_arg = ctx.remaining_args[0]
        call_ctx: Context = FunctionAppContext(
            ctx.env, ctx.func_name, ctx.func_def, evaluated, ctx.remaining_args[1:]
        )
        return Computing(ctx.env, next_arg, push(call_ctx, contexts))

    raise RuntimeError(f"Unknown context type: {type(ctx)}")


def step(state: State) -> State | None:
    """
    Perform one step of evaluation.

    Returns the next state, or None if the computation is already complete.
    """
    if isinstance(state, Done):
        return None

    env = state.env
    expr = state.expr
    contexts = state.contexts

    if isinstance(expr, Num):
        return return_value(expr.value, contexts)

    if isinstance(expr, Variable):
        return return_value(env.lookup(expr.name), contexts)

    # Binary operation - evaluate left operand first
    if isinstance(expr, (Plus, Mult)):
        left_ctx: Context = LeftOperandContext(env, BINARY_OPS[type(expr)], expr.right)
        return Computing(env, expr.left, push(left_ctx, contexts))

    # If expression - evaluate condition
    if isinstance(expr, IfThenElse):
        if_ctx: Context = IfContext(env, expr.then_branch, expr.else_branch)
        return Computing(env, expr.condition, push(if_ctx, contexts))

    # Function application - resolve the function, then evaluate arguments left to right
    if isinstance(expr, FunctionApp):
        func_def = env.get_function(expr.name)

        if len(expr.args) == 0:
            return call_function(env, expr.name, func_def, [], contexts)

        call_ctx: Context = FunctionAppContext(env, expr.name, func_def, [], expr.args[1:])
        return Computing(env, expr.args[0], push(call_ctx, contexts))

    # Sub must be desugared first; FunctionDef is not an executable expression
    raise UnsupportedNode(expr, "interpret")


def run(state: State, on_step: Callable[[State], None] | None = None) -> int:
    """
    Step a state until the computation is done.

    Args:
        state: The state to start from
        on_step: Optional callback invoked with every state, the final one included

    Returns:
        The computed value
    """
    while True:
        if on_step is not None:
            on_step(state)
        if isinstance(state, Done):
            return state.value
        next_state = step(state)
        assert next_state is not None
        state = next_state


def create_initial_state(
    expr: Expr,
    variable_env: VariableEnv | None = None,
    function_env: FunctionDefEnv | None = None,
    *,
    strict_arity: bool = False,
    call_strategy: CallStrategy = CallStrategy.OVERLAY,
) -> State:
    """Create the initial evaluation state for an expression."""
    # Copy the caller's mappings so later changes to them cannot leak in
    env = Env(
        dict(variable_env or {}),
        dict(function_env or {}),
        strict_arity,
        call_strategy,
    )
    return Computing(env, expr, None)


def interpret(
    expr: Expr,
    variable_env: VariableEnv | None = None,
    function_env: FunctionDefEnv | None = None,
    *,
    strict_arity: bool = False,
    call_strategy: CallStrategy = CallStrategy.OVERLAY,
) -> int:
    """
    Evaluate an expression to an integer.

    Args:
        expr: Desugared expression to evaluate
        variable_env: Initial variable bindings
        function_env: Functions callable by name
        strict_arity: Reject applications whose argument count differs from
            the definition's parameter count instead of truncating
        call_strategy: How applications bind parameters

    Returns:
        The value of the expression

    Raises:
        UndefinedVariable, UndefinedFunction, UnsupportedNode, ArityMismatch,
        and UnboundIdentifier under the substitution strategy
    """
    state = create_initial_state(
        expr,
        variable_env,
        function_env,
        strict_arity=strict_arity,
        call_strategy=call_strategy,
    )
    result = run(state)
    logger.debug("Result: %s", result)
    return result
