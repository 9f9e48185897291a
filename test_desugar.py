"""Tests for the desugarer."""

import unittest

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
from desugar import desugar, is_desugared
from errors import UnsupportedNode
from interpreter import interpret


class TestDesugar(unittest.TestCase):
    """Test the Sub rewrite and structural recursion."""

    def test_leaves_are_unchanged(self) -> None:
        """Test that literals and variables are returned as-is."""
        num = Num(4)
        var = Variable("x")
        self.assertIs(desugar(num), num)
        self.assertIs(desugar(var), var)

    def test_sub_becomes_plus_negated_mult(self) -> None:
        """Test that a - b becomes a + (-1 * b)."""
        result = desugar(Sub(Num(5), Variable("y")))
        self.assertEqual(result, Plus(Num(5), Mult(Num(-1), Variable("y"))))

    def test_sub_desugars_both_operands(self) -> None:
        """Test that Sub nested on either side is rewritten too."""
        expr = Sub(Sub(Num(10), Num(1)), Sub(Num(4), Num(2)))
        expected = Plus(
            Plus(Num(10), Mult(Num(-1), Num(1))),
            Mult(Num(-1), Plus(Num(4), Mult(Num(-1), Num(2)))),
        )
        self.assertEqual(desugar(expr), expected)
        self.assertEqual(interpret(desugar(expr), {}, {}), 7)

    def test_compound_nodes_are_rebuilt(self) -> None:
        """Test that Plus, Mult and IfThenElse recurse into their children."""
        expr = IfThenElse(
            Sub(Variable("c"), Num(1)),
            Plus(Num(1), Sub(Num(2), Num(3))),
            Mult(Sub(Num(4), Num(5)), Num(6)),
        )
        expected = IfThenElse(
            Plus(Variable("c"), Mult(Num(-1), Num(1))),
            Plus(Num(1), Plus(Num(2), Mult(Num(-1), Num(3)))),
            Mult(Plus(Num(4), Mult(Num(-1), Num(5))), Num(6)),
        )
        self.assertEqual(desugar(expr), expected)

    def test_input_is_not_modified(self) -> None:
        """Test that desugaring returns a new tree."""
        expr = Plus(Num(1), Sub(Num(2), Num(3)))
        desugar(expr)
        self.assertEqual(expr, Plus(Num(1), Sub(Num(2), Num(3))))

    def test_result_contains_no_sub(self) -> None:
        """Test the post-condition on a deeply mixed tree."""
        expr: Expr = Num(0)
        for i in range(50):
            expr = Sub(expr, Num(i)) if i % 2 else Mult(Num(2), Sub(Num(i), expr))
        self.assertFalse(is_desugared(expr))
        self.assertTrue(is_desugared(desugar(expr)))

    def test_idempotent(self) -> None:
        """Test that desugaring a desugared tree changes nothing."""
        samples: list[Expr] = [
            Num(1),
            Variable("x"),
            Sub(Num(3), Num(2)),
            IfThenElse(Sub(Num(1), Num(1)), Sub(Variable("a"), Num(2)), Num(0)),
            Mult(Sub(Num(4), Sub(Num(3), Num(2))), Plus(Num(1), Num(1))),
        ]
        for expr in samples:
            with self.subTest(expr=expr):
                once = desugar(expr)
                self.assertEqual(desugar(once), once)

    def test_demo_expression_unchanged(self) -> None:
        """Test that a tree without Sub desugars to an equal tree."""
        expr = Plus(Num(3), Mult(Num(4), Num(5)))
        self.assertEqual(desugar(expr), expr)


class TestDesugarUnsupported(unittest.TestCase):
    """Test nodes the desugarer has no case for."""

    def test_function_def(self) -> None:
        """Test that FunctionDef raises UnsupportedNode."""
        node = FunctionDef("f", ["x"], Sub(Variable("x"), Num(1)))
        with self.assertRaises(UnsupportedNode) as context:
            desugar(node)

        self.assertEqual(context.exception.operation, "desugar")
        self.assertEqual(context.exception.node, node)

    def test_function_app(self) -> None:
        """Test that FunctionApp raises UnsupportedNode, even when nested."""
        with self.assertRaises(UnsupportedNode):
            desugar(Plus(Num(1), FunctionApp("f", [Num(2)])))


class TestIsDesugared(unittest.TestCase):
    """Test the Sub-free check."""

    def test_core_tree(self) -> None:
        """Test that a tree without Sub is reported as desugared."""
        self.assertTrue(is_desugared(IfThenElse(Num(1), Plus(Num(1), Num(2)), Variable("x"))))

    def test_sub_inside_function_nodes(self) -> None:
        """Test that Sub is found inside function bodies and arguments."""
        self.assertFalse(is_desugared(FunctionDef("f", [], Sub(Num(1), Num(1)))))
        self.assertFalse(is_desugared(FunctionApp("f", [Num(1), Sub(Num(1), Num(1))])))
        self.assertTrue(is_desugared(FunctionApp("f", [Num(1)])))


if __name__ == "__main__":
    unittest.main()
