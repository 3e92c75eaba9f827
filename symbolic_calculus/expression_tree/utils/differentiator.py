from typing import Callable, Dict, Optional

from ..core.node import Node, VariableNode, ConstantNode, BinaryOpNode, UnaryOpNode, ZERO, ONE
from ..core.operators import OpType, BINARY_OPS, UNARY_OPS
from .tree_utils import contains_variable
from .validator import ExpressionValidator
from ...errors import UnsupportedDerivative
from ...logging_system import log_debug, log_step


class ExpressionDifferentiator:
  """Symbolic differentiation by structural rewrite rules.

  The result is not simplified; pipe it through ExpressionSimplifier.
  """

  @staticmethod
  def differentiate(node: Node, variable: str, max_depth: Optional[int] = None) -> Node:
    ExpressionValidator.check_depth(node, max_depth)
    log_debug("d/d%s %s", variable, node)
    return ExpressionDifferentiator._derive(node, variable)

  @staticmethod
  def _derive(node: Node, variable: str) -> Node:
    if isinstance(node, ConstantNode):
      return ZERO

    if isinstance(node, VariableNode):
      return ONE if node.name == variable else ZERO

    if isinstance(node, BinaryOpNode):
      rule = _BINARY_RULES.get(node.operator)
      if rule is None:
        raise UnsupportedDerivative(node)
      return rule(node.left, node.right, variable)

    if isinstance(node, UnaryOpNode):
      rule = _UNARY_RULES.get(node.operator)
      if rule is None:
        raise UnsupportedDerivative(node)
      return rule(node.operand, variable)

    raise UnsupportedDerivative(node)


_d = ExpressionDifferentiator._derive


def _add(a: Node, b: Node, var: str) -> Node:
  return BinaryOpNode(OpType.ADD, _d(a, var), _d(b, var))


def _sub(a: Node, b: Node, var: str) -> Node:
  return BinaryOpNode(OpType.SUB, _d(a, var), _d(b, var))


def _mul(a: Node, b: Node, var: str) -> Node:
  # (ab)' = a'b + ab'
  return BinaryOpNode(OpType.ADD,
                      BinaryOpNode(OpType.MUL, _d(a, var), b),
                      BinaryOpNode(OpType.MUL, a, _d(b, var)))


def _div(a: Node, b: Node, var: str) -> Node:
  # (a/b)' = (a'b - ab') / (b*b)
  numerator = BinaryOpNode(OpType.SUB,
                           BinaryOpNode(OpType.MUL, _d(a, var), b),
                           BinaryOpNode(OpType.MUL, a, _d(b, var)))
  return BinaryOpNode(OpType.DIV, numerator, BinaryOpNode(OpType.MUL, b, b))


def _pow(a: Node, b: Node, var: str) -> Node:
  base_varies = contains_variable(a, var)
  exponent_varies = contains_variable(b, var)

  if not base_varies and not exponent_varies:
    log_step("power rule: constant")
    return ZERO

  if base_varies and not exponent_varies:
    # b * a^(b-1) * a'
    log_step("power rule: variable base")
    lowered = BinaryOpNode(OpType.POW, a, BinaryOpNode(OpType.SUB, b, ONE))
    return BinaryOpNode(OpType.MUL, BinaryOpNode(OpType.MUL, b, lowered), _d(a, var))

  power = BinaryOpNode(OpType.POW, a, b)

  if not base_varies:
    # a^b * b' * ln(a)
    log_step("power rule: variable exponent")
    return BinaryOpNode(OpType.MUL,
                        BinaryOpNode(OpType.MUL, power, _d(b, var)),
                        UnaryOpNode(OpType.LN, a))

  # a^b * (b' * ln(a) + b * a' / a)
  log_step("power rule: general")
  log_term = BinaryOpNode(OpType.MUL, _d(b, var), UnaryOpNode(OpType.LN, a))
  ratio_term = BinaryOpNode(OpType.DIV, BinaryOpNode(OpType.MUL, b, _d(a, var)), a)
  return BinaryOpNode(OpType.MUL, power, BinaryOpNode(OpType.ADD, log_term, ratio_term))


def _neg(a: Node, var: str) -> Node:
  return UnaryOpNode(OpType.NEG, _d(a, var))


def _sin(a: Node, var: str) -> Node:
  return BinaryOpNode(OpType.MUL, UnaryOpNode(OpType.COS, a), _d(a, var))


def _cos(a: Node, var: str) -> Node:
  return UnaryOpNode(OpType.NEG, BinaryOpNode(OpType.MUL, UnaryOpNode(OpType.SIN, a), _d(a, var)))


def _ln(a: Node, var: str) -> Node:
  # chain rule: a' / a
  return BinaryOpNode(OpType.DIV, _d(a, var), a)


def _exp(a: Node, var: str) -> Node:
  return BinaryOpNode(OpType.MUL, UnaryOpNode(OpType.EXP, a), _d(a, var))


_BINARY_RULES: Dict[OpType, Callable[[Node, Node, str], Node]] = {
  OpType.ADD: _add,
  OpType.SUB: _sub,
  OpType.MUL: _mul,
  OpType.DIV: _div,
  OpType.POW: _pow,
}

_UNARY_RULES: Dict[OpType, Callable[[Node, str], Node]] = {
  OpType.NEG: _neg,
  OpType.SIN: _sin,
  OpType.COS: _cos,
  OpType.LN: _ln,
  OpType.EXP: _exp,
}

assert set(_BINARY_RULES) == BINARY_OPS and set(_UNARY_RULES) == UNARY_OPS


def derivative(node: Node, variable: str, max_depth: Optional[int] = None) -> Node:
  """Unsimplified derivative of `node` with respect to `variable`"""
  return ExpressionDifferentiator.differentiate(node, variable, max_depth)
