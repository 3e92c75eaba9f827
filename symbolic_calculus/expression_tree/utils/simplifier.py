import numpy as np
from typing import Optional
from ..core.node import Node, VariableNode, ConstantNode, BinaryOpNode, UnaryOpNode, ZERO, ONE, TWO
from ..core.operators import OpType, evaluate_binary_op
from .validator import ExpressionValidator
from ...logging_system import log_debug, log_step


def _is_constant(node: Node, value: float) -> bool:
  return isinstance(node, ConstantNode) and node.value == value


class ExpressionSimplifier:
  """Bottom-up, single pass algebraic simplifier.

  Children are simplified first, then the first matching rule is applied to
  the rebuilt node. The output is never re-examined, so no fixpoint is sought.
  Unary nodes only get their operand simplified.
  """

  @staticmethod
  def simplify_expression(node: Node, max_depth: Optional[int] = None) -> Node:
    ExpressionValidator.check_depth(node, max_depth)
    simplified = ExpressionSimplifier._apply_simplification_rules(node)
    log_debug("simplify %s -> %s", node, simplified)
    return simplified

  @staticmethod
  def _apply_simplification_rules(node: Node) -> Node:
    if isinstance(node, BinaryOpNode):
      left = ExpressionSimplifier._apply_simplification_rules(node.left)
      right = ExpressionSimplifier._apply_simplification_rules(node.right)

      if isinstance(left, ConstantNode) and isinstance(right, ConstantNode):
        # DivisionByZero propagates for x/0
        value = evaluate_binary_op(left.value, right.value, node.operator)
        if np.isfinite(value):
          return ConstantNode(value)
        # 2^10000 or (-8)^(1/3): inf and nan have no literal, keep the operation
        log_step("%s not folded, result is %s", node, value)
        return node.with_children(left, right)

      result = ExpressionSimplifier._same_variable_rule(node.operator, left, right)
      if result is None:
        result = ExpressionSimplifier._identity_rule(node.operator, left, right)
      if result is not None:
        log_step("%s %s %s -> %s", left, node.symbol, right, result)
        return result

      return node.with_children(left, right)

    elif isinstance(node, UnaryOpNode):
      operand = ExpressionSimplifier._apply_simplification_rules(node.operand)
      return node.with_children(operand)

    return node

  @staticmethod
  def _same_variable_rule(operator: OpType, left: Node, right: Node) -> Optional[Node]:
    if not (isinstance(left, VariableNode) and isinstance(right, VariableNode)
            and left.name == right.name):
      return None

    if operator == OpType.ADD:
      return BinaryOpNode(OpType.MUL, TWO, left)  # x + x = 2 * x
    elif operator == OpType.SUB:
      return ZERO  # x - x = 0
    elif operator == OpType.MUL:
      return BinaryOpNode(OpType.POW, left, TWO)  # x * x = x ^ 2
    elif operator == OpType.DIV:
      return ONE  # x / x = 1
    return None

  @staticmethod
  def _identity_rule(operator: OpType, left: Node, right: Node) -> Optional[Node]:
    if operator == OpType.ADD:
      if _is_constant(left, 0):
        return right  # 0 + x = x
      if _is_constant(right, 0):
        return left  # x + 0 = x

    elif operator == OpType.SUB:
      if _is_constant(right, 0):
        return left  # x - 0 = x
      if _is_constant(left, 0):
        return UnaryOpNode(OpType.NEG, right)  # 0 - x = -x

    elif operator == OpType.MUL:
      if _is_constant(left, 1):
        return right  # 1 * x = x
      if _is_constant(right, 1):
        return left  # x * 1 = x
      if _is_constant(left, 0) or _is_constant(right, 0):
        return ZERO  # 0 * x = x * 0 = 0

    elif operator == OpType.DIV:
      if _is_constant(left, 0):
        return ZERO  # 0 / x = 0
      if _is_constant(right, 1):
        return left  # x / 1 = x

    elif operator == OpType.POW:
      if _is_constant(right, 0):
        return ONE  # x ^ 0 = 1
      if _is_constant(right, 1):
        return left  # x ^ 1 = x
      if _is_constant(left, 0):
        return ZERO  # 0 ^ x = 0
      if _is_constant(left, 1):
        return ONE  # 1 ^ x = 1

    return None


def simplify(node: Node, max_depth: Optional[int] = None) -> Node:
  """Algebraically reduced copy of `node`"""
  return ExpressionSimplifier.simplify_expression(node, max_depth)
