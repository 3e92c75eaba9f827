import numpy as np
import pytest
import sympy as sp

from symbolic_calculus import (
    BinaryOpNode, ConstantNode, Expression, UnaryOpNode, VariableNode,
)

x = Expression.variable("x")
y = Expression.variable("y")


class TestBuilders:
    def test_from_string(self):
        expr = Expression.from_string("x^2 + 1")

        assert expr.root == BinaryOpNode(
            "+", BinaryOpNode("^", VariableNode("x"), ConstantNode(2)), ConstantNode(1))

    def test_operators_match_parsed_text(self):
        assert x + 1 == Expression.from_string("x + 1")
        assert 1 + x == Expression.from_string("1 + x")
        assert 2 * x - y / 3 == Expression.from_string("2*x - y/3")
        assert 5 - x == Expression.from_string("5 - x")
        assert 1 / x == Expression.from_string("1 / x")
        assert x ** 2 == Expression.from_string("x ^ 2")
        assert 2 ** x == Expression.from_string("2 ^ x")
        assert -x == Expression.from_string("-x")

    def test_caret_is_power(self):
        assert (x ^ 3) == x ** 3

    def test_functions(self):
        expr = Expression.sin(x) + Expression.ln(Expression.exp(x) * Expression.cos(2))

        assert expr == Expression.from_string("sin(x) + ln(exp(x) * cos(2))")

    def test_numpy_scalars_are_accepted(self):
        assert x * np.float64(2.5) == Expression.from_string("x * 2.5")

    @pytest.mark.parametrize("operand", ["y", None, True, [1]])
    def test_unsupported_operands(self, operand):
        with pytest.raises(TypeError):
            x + operand

    def test_root_must_be_a_node(self):
        with pytest.raises(TypeError):
            Expression("x + 1")


class TestOperations:
    def test_evaluate(self):
        assert Expression.from_string("x^2 + 1").evaluate({"x": 3}) == 10.0
        assert Expression.constant(4).evaluate() == 4.0

    def test_evaluate_batch(self):
        result = (x * y).evaluate_batch({"x": np.array([1.0, 2.0, 3.0]), "y": 2.0})

        np.testing.assert_allclose(result, [2.0, 4.0, 6.0])

    def test_derivative(self):
        expr = Expression.from_string("x^2")

        assert expr.derivative("x", simplified=True).to_string() == "(2 * x)"
        assert expr.derivative("x").to_string() == "((2 * (x ^ (2 - 1))) * 1)"

    def test_simplify(self):
        assert Expression.from_string("0 + x*1").simplify() == x

    def test_substitute_number(self):
        expr = Expression.from_string("x^2 + y").substitute("x", 3)

        assert expr.to_string() == "((3 ^ 2) + y)"
        assert expr.evaluate({"y": 1}) == 10.0

    def test_substitute_expression(self):
        expr = Expression.from_string("sin(x) * x").substitute("x", y + 1)

        assert expr.variables() == {"y"}
        assert expr.to_string() == "(sin(y + 1) * (y + 1))"

    def test_substitute_missing_name_shares_tree(self):
        expr = Expression.from_string("x + 1")

        assert expr.substitute("z", 2).root is expr.root

    def test_to_sympy(self):
        sx = sp.Symbol("x")

        assert Expression.from_string("x^2 + 1").to_sympy() == sx ** 2 + 1

    def test_introspection(self):
        expr = Expression.from_string("x^2 + sin(y)")

        assert expr.variables() == {"x", "y"}
        assert expr.size() == 6
        assert expr.depth() == 3

    def test_string_forms(self):
        expr = Expression.from_string("x+1")

        assert str(expr) == "(x + 1)"
        assert repr(expr) == "Expression('(x + 1)')"


class TestIdentity:
    def test_equal_expressions_hash_alike(self):
        first = Expression.from_string("sin(x) * 2")
        second = Expression.sin(x) * 2

        assert first == second
        assert hash(first) == hash(second)
        assert len({first, second}) == 1

    def test_compares_with_nodes(self):
        assert Expression.variable("x") == VariableNode("x")
        assert Expression.variable("x") != UnaryOpNode("neg", VariableNode("x"))

    def test_operations_return_new_expressions(self):
        expr = Expression.from_string("x + 0")
        before = expr.to_string()

        expr.simplify()
        expr.derivative("x")
        expr.substitute("x", 1)

        assert expr.to_string() == before
