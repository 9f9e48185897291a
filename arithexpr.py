#!/usr/bin/env python3
"""arithexpr: run sample arithmetic expression programs."""

import sys
import os
import argparse
import logging
from dataclasses import dataclass, field

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
    function_env,
)
from desugar import desugar
from errors import ArithExprError
from interpreter import (
    State,
    Computing,
    Done,
    CallStrategy,
    create_initial_state,
    run,
    stack_depth,
)


CALL_STRATEGY_ENV_VAR = "ARITHEXPR_CALL_STRATEGY"


@dataclass(frozen=True)
class Example:
    """A sample program: an expression plus the environments it runs in."""

    description: str
    expr: Expr
    variables: dict[str, int] = field(default_factory=dict)
    functions: dict[str, FunctionDef] = field(default_factory=dict)
    desugar: bool = False


SQUARE = FunctionDef("square", ["n"], Mult(Variable("n"), Variable("n")))

# fact(n) = if n then n * fact(n - 1) else 1
FACTORIAL = FunctionDef(
    "fact",
    ["n"],
    IfThenElse(
        Variable("n"),
        Mult(Variable("n"), FunctionApp("fact", [desugar(Sub(Variable("n"), Num(1)))])),
        Num(1),
    ),
)

EXAMPLES: dict[str, Example] = {
    "demo": Example(
        "3 + 4 * 5",
        Plus(Num(3), Mult(Num(4), Num(5))),
        desugar=True,
    ),
    "subtract": Example(
        "10 - (4 - 1)",
        Sub(Num(10), Sub(Num(4), Num(1))),
        desugar=True,
    ),
    "square": Example(
        "square(6)",
        FunctionApp("square", [Num(6)]),
        functions=function_env(SQUARE),
    ),
    "shadow": Example(
        "square(3) with n = 100 outside the call",
        FunctionApp("square", [Num(3)]),
        variables={"n": 100},
        functions=function_env(SQUARE),
    ),
    "factorial": Example(
        "fact(5)",
        FunctionApp("fact", [Num(5)]),
        functions=function_env(FACTORIAL),
    ),
}


def describe_state(state: State) -> str:
    """Get a human-readable description of a machine state."""
    if isinstance(state, Done):
        return f"Done with result: {state.value}"
    elif isinstance(state, Computing):
        return f"Computing {type(state.expr).__name__} (contexts: {stack_depth(state.contexts)})"
    return "Unknown state"


def run_example(
    example: Example,
    strict_arity: bool = False,
    call_strategy: CallStrategy = CallStrategy.OVERLAY,
    trace: bool = False,
) -> int:
    """Desugar an example if needed and interpret it."""
    expr = desugar(example.expr) if example.desugar else example.expr
    state = create_initial_state(
        expr,
        example.variables,
        example.functions,
        strict_arity=strict_arity,
        call_strategy=call_strategy,
    )

    step_count = 0

    def print_step(current: State) -> None:
        nonlocal step_count
        print(f"Step {step_count}: {describe_state(current)}")
        step_count += 1

    return run(state, print_step if trace else None)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the arithexpr demo."""
    parser = argparse.ArgumentParser(
        prog="arithexpr",
        description="Evaluate a built-in arithmetic expression program",
        epilog="Example: arithexpr --example factorial --trace",
    )
    parser.add_argument(
        "--example",
        choices=sorted(EXAMPLES),
        default="demo",
        help="Sample program to run (default: demo)",
    )
    parser.add_argument(
        "--strict-arity",
        action="store_true",
        help="Reject function applications with the wrong number of arguments",
    )
    parser.add_argument(
        "--call-strategy",
        choices=[strategy.value for strategy in CallStrategy],
        default=os.getenv(CALL_STRATEGY_ENV_VAR, CallStrategy.OVERLAY.value),
        help=f"How function parameters are bound (default: ${CALL_STRATEGY_ENV_VAR} or overlay)",
    )
    parser.add_argument("--trace", action="store_true", help="Print every evaluation step")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    if args.debug:
        logging.basicConfig(level=logging.DEBUG)

    # argparse does not validate defaults against choices
    try:
        call_strategy = CallStrategy(args.call_strategy)
    except ValueError:
        print(f"Error: unknown call strategy: {args.call_strategy}", file=sys.stderr)
        return 1

    try:
        result = run_example(
            EXAMPLES[args.example],
            strict_arity=args.strict_arity,
            call_strategy=call_strategy,
            trace=args.trace,
        )
    except ArithExprError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
