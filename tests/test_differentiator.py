import numpy as np
import pytest
import sympy as sp

from symbolic_calculus import (
    BinaryOpNode, ConstantNode, ExpressionTooDeep, Node, UnaryOpNode,
    UnsupportedDerivative, VariableNode, derivative, evaluate, parse, render, simplify,
)


def d(text, variable="x"):
    return simplify(derivative(parse(text), variable))


def finite_difference(tree, variable, point, other_bindings=None, h=1e-6):
    bindings = dict(other_bindings or {})
    upper = evaluate(tree, {**bindings, variable: point + h})
    lower = evaluate(tree, {**bindings, variable: point - h})
    return (upper - lower) / (2 * h)


class OpaqueNode(Node):
    """A node kind the differentiation rules do not know about"""

    __slots__ = ()

    def evaluate(self, bindings):
        return 0.0

    def evaluate_batch(self, bindings, n_samples):
        return np.zeros(n_samples)

    def to_string(self):
        return "?"

    def to_sympy(self):
        return sp.Integer(0)

    def children(self):
        return ()

    def with_children(self, *children):
        return self

    def _compute_hash(self):
        return 0

    def _equals(self, other):
        return True


class TestBasicRules:
    @pytest.mark.parametrize("value", [0.0, 1.0, -4.5, 100.0])
    def test_constant(self, value):
        assert simplify(derivative(ConstantNode(value), "x")) == ConstantNode(0)

    def test_same_variable(self):
        assert simplify(derivative(VariableNode("x"), "x")) == ConstantNode(1)

    def test_other_variable(self):
        assert simplify(derivative(VariableNode("y"), "x")) == ConstantNode(0)

    def test_sum_and_difference(self):
        assert d("x + y") == ConstantNode(1)
        assert d("y - x") == ConstantNode(-1)

    def test_product_rule(self):
        assert d("3*x") == ConstantNode(3)

    def test_product_rule_unsimplified_shape(self):
        x = VariableNode("x")
        expected = BinaryOpNode(
            "+",
            BinaryOpNode("*", ConstantNode(1), x),
            BinaryOpNode("*", x, ConstantNode(1)),
        )

        assert derivative(parse("x*x"), "x") == expected

    def test_quotient_rule_unsimplified_shape(self):
        x, y = VariableNode("x"), VariableNode("y")
        expected = BinaryOpNode(
            "/",
            BinaryOpNode("-",
                         BinaryOpNode("*", ConstantNode(1), y),
                         BinaryOpNode("*", x, ConstantNode(0))),
            BinaryOpNode("*", y, y),
        )

        assert derivative(parse("x/y"), "x") == expected

    def test_power_rule(self):
        assert render(d("x^4")) == "(4 * (x ^ 3))"

    def test_negation(self):
        assert d("-x") == UnaryOpNode("neg", ConstantNode(1))


class TestFunctionRules:
    def test_sin(self):
        assert render(derivative(parse("sin(x)"), "x")) == "(cos(x) * 1)"
        assert render(d("sin(x)")) == "cos(x)"

    def test_cos(self):
        assert render(d("cos(x)")) == "-sin(x)"

    def test_exp(self):
        assert render(d("exp(x)")) == "exp(x)"

    def test_ln(self):
        assert render(d("ln(x)")) == "(1 / x)"

    def test_ln_uses_chain_rule(self):
        # d/dx ln(3x) = 1/x, not 1/3
        assert evaluate(d("ln(3*x)"), {"x": 2.0}) == pytest.approx(0.5)

    def test_ln_of_compound_argument(self):
        assert render(d("ln(x^2)")) == "((2 * x) / (x ^ 2))"
        assert evaluate(d("ln(x^2)"), {"x": 3.0}) == pytest.approx(2 / 3)


class TestPowerCases:
    def test_both_sides_constant_in_variable(self):
        assert d("y^2") == ConstantNode(0)
        assert d("2^3") == ConstantNode(0)

    def test_variable_exponent(self):
        assert render(d("2^x")) == "((2 ^ x) * ln(2))"

    def test_deep_occurrence_in_exponent_is_detected(self):
        tree = parse("2^(sin(y*x))")
        result = simplify(derivative(tree, "x"))

        assert result != ConstantNode(0)
        assert evaluate(result, {"x": 0.7, "y": 1.3}) == pytest.approx(
            finite_difference(tree, "x", 0.7, {"y": 1.3}), rel=1e-5)

    def test_compound_base_with_constant_exponent(self):
        # (2x)^3 = 8x^3, derivative 24x^2
        assert evaluate(d("(2*x)^3"), {"x": 1.0}) == pytest.approx(24.0)
        assert evaluate(d("(2*x)^3"), {"x": -2.0}) == pytest.approx(96.0)

    def test_general_case(self):
        # d/dx x^x = x^x (ln(x) + 1)
        result = d("x^x")

        assert evaluate(result, {"x": 2.0}) == pytest.approx(4 * (np.log(2) + 1))


class TestAgainstFiniteDifferences:
    @pytest.mark.parametrize("text", [
        "(x^2)/x",
        "sin(x)*cos(x)",
        "exp(2*x)",
        "ln(x^2 + 1)",
        "x^x",
        "(x + 1)/(x - 3)",
        "-x^3",
        "2^(x*x)",
        "sin(x^2)",
        "x^3 - 2*x + 5",
        "cos(exp(x)) / (1 + x^2)",
        "(x + 1)^(x / 2)",
    ])
    @pytest.mark.parametrize("point", [0.5, 1.3, 2.2])
    def test_derivative_matches_numeric_slope(self, text, point):
        tree = parse(text)
        slope = evaluate(simplify(derivative(tree, "x")), {"x": point})

        assert slope == pytest.approx(finite_difference(tree, "x", point), rel=1e-5, abs=1e-7)


class TestFailures:
    def test_unknown_node_kind(self):
        with pytest.raises(UnsupportedDerivative) as exc:
            derivative(OpaqueNode(), "x")

        assert isinstance(exc.value.node, OpaqueNode)

    def test_unknown_node_kind_inside_a_tree(self):
        with pytest.raises(UnsupportedDerivative):
            derivative(BinaryOpNode("+", VariableNode("x"), OpaqueNode()), "x")

    def test_too_deep(self):
        node = VariableNode("x")
        for _ in range(600):
            node = UnaryOpNode("sin", node)

        with pytest.raises(ExpressionTooDeep):
            derivative(node, "x")


class TestPurity:
    def test_input_is_untouched(self):
        tree = parse("x^2 * sin(x)")
        before = render(tree)

        derivative(tree, "x")

        assert render(tree) == before
        assert tree == parse("x^2 * sin(x)")
