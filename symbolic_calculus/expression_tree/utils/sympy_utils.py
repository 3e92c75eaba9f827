import sympy as sp
from typing import Optional

from ..core.node import Node, VariableNode, ConstantNode, BinaryOpNode, UnaryOpNode, ONE
from ..core.operators import OpType
from .validator import ExpressionValidator


def to_sympy(node: Node, max_depth: Optional[int] = None) -> sp.Expr:
  """Convert a tree to a SymPy expression"""
  ExpressionValidator.check_depth(node, max_depth)
  return node.to_sympy()


def from_sympy(sympy_expr: sp.Expr) -> Node:
  """Convert a SymPy expression built from + - * / ^ sin cos log exp to a tree"""
  if sympy_expr.is_Symbol:
    return VariableNode(str(sympy_expr))

  if sympy_expr.is_Number:
    return ConstantNode(float(sympy_expr))

  if isinstance(sympy_expr, sp.sin):
    return UnaryOpNode(OpType.SIN, from_sympy(sympy_expr.args[0]))
  if isinstance(sympy_expr, sp.cos):
    return UnaryOpNode(OpType.COS, from_sympy(sympy_expr.args[0]))
  if isinstance(sympy_expr, sp.exp):
    return UnaryOpNode(OpType.EXP, from_sympy(sympy_expr.args[0]))
  if isinstance(sympy_expr, sp.log):
    if len(sympy_expr.args) != 1:
      raise ValueError(f"Only natural logarithms are supported: {sympy_expr}")
    return UnaryOpNode(OpType.LN, from_sympy(sympy_expr.args[0]))

  if isinstance(sympy_expr, sp.Pow):
    base, exponent = sympy_expr.args
    if exponent == -1:
      return BinaryOpNode(OpType.DIV, ONE, from_sympy(base))
    return BinaryOpNode(OpType.POW, from_sympy(base), from_sympy(exponent))

  if isinstance(sympy_expr, sp.Add):
    # Multiple terms - build left-associative tree, negated terms become subtraction
    terms = sympy_expr.as_ordered_terms()
    result = from_sympy(terms[0])
    for term in terms[1:]:
      if term.could_extract_minus_sign():
        result = BinaryOpNode(OpType.SUB, result, from_sympy(-term))
      else:
        result = BinaryOpNode(OpType.ADD, result, from_sympy(term))
    return result

  if isinstance(sympy_expr, sp.Mul):
    if sympy_expr.could_extract_minus_sign() and sympy_expr.args[0] == -1:
      return UnaryOpNode(OpType.NEG, from_sympy(-sympy_expr))

    numerator, denominator = sp.fraction(sympy_expr)
    if denominator != 1:
      return BinaryOpNode(OpType.DIV, from_sympy(numerator), from_sympy(denominator))

    # Multiple factors - build left-associative tree
    factors = sympy_expr.args
    result = from_sympy(factors[0])
    for factor in factors[1:]:
      result = BinaryOpNode(OpType.MUL, result, from_sympy(factor))
    return result

  # Number symbols such as E or pi
  if sympy_expr.is_number:
    return ConstantNode(float(sympy_expr))

  raise ValueError(f"Cannot convert SymPy expression of type {type(sympy_expr).__name__}: {sympy_expr}")


class SymPyVerifier:
  """Cross-checks trees against SymPy's own algebra"""

  @staticmethod
  def equivalent(first: Node, second: Node) -> bool:
    """True if the two trees are symbolically equal"""
    difference = sp.nsimplify(to_sympy(first), rational=True) - sp.nsimplify(to_sympy(second), rational=True)
    return sp.simplify(difference) == 0

  @staticmethod
  def reference_derivative(node: Node, variable: str) -> Node:
    """Derivative computed by SymPy, converted back to a tree"""
    return from_sympy(sp.diff(to_sympy(node), sp.Symbol(variable)))

  @staticmethod
  def latex_representation(node: Node) -> str:
    """Get LaTeX representation of the expression"""
    return sp.latex(to_sympy(node))
