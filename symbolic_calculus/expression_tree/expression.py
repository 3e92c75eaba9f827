import numpy as np
import sympy as sp
from typing import Mapping, Optional, Set, Union

from .core.node import Node, VariableNode, ConstantNode, BinaryOpNode, UnaryOpNode
from .core.operators import OpType
from .utils.differentiator import derivative
from .utils.simplifier import simplify
from .utils.evaluator import evaluate, evaluate_batch
from .utils.renderer import render
from .utils.sympy_utils import to_sympy
from .utils.tree_utils import calculate_tree_depth, get_variables, replace_variable
from .utils.validator import ExpressionValidator

Operand = Union['Expression', Node, int, float]


def _as_node(value: Operand) -> Node:
  if isinstance(value, Expression):
    return value.root
  if isinstance(value, Node):
    return value
  if isinstance(value, (int, float, np.integer, np.floating)) and not isinstance(value, bool):
    return ConstantNode(float(value))
  raise TypeError(f"Cannot use {type(value).__name__} as an expression operand")


class Expression:
  """Expression wrapper around an immutable tree, with cached rendering"""

  __slots__ = ('root', '_string_cache')

  def __init__(self, root: Node):
    if not isinstance(root, Node):
      raise TypeError(f"Expression root must be a Node, got {type(root).__name__}")
    self.root = root
    self._string_cache: Optional[str] = None

  @classmethod
  def from_string(cls, expr_str: str) -> 'Expression':
    from ..parsing.parser import parse
    return cls(parse(expr_str))

  @classmethod
  def constant(cls, value: float) -> 'Expression':
    return cls(ConstantNode(value))

  @classmethod
  def variable(cls, name: str) -> 'Expression':
    return cls(VariableNode(name))

  def evaluate(self, bindings: Optional[Mapping[str, float]] = None) -> float:
    return evaluate(self.root, bindings or {})

  def evaluate_batch(self, bindings: Mapping[str, Union[float, np.ndarray]]) -> np.ndarray:
    return evaluate_batch(self.root, bindings)

  def derivative(self, variable: str, simplified: bool = False) -> 'Expression':
    result = derivative(self.root, variable)
    if simplified:
      result = simplify(result)
    return Expression(result)

  def simplify(self) -> 'Expression':
    return Expression(simplify(self.root))

  def substitute(self, name: str, value: Operand) -> 'Expression':
    """Replace every occurrence of variable `name` by a number or another expression"""
    ExpressionValidator.check_depth(self.root)
    return Expression(replace_variable(self.root, name, _as_node(value)))

  def to_string(self) -> str:
    if self._string_cache is None:
      self._string_cache = render(self.root)
    return self._string_cache

  def to_sympy(self) -> sp.Expr:
    return to_sympy(self.root)

  def variables(self) -> Set[str]:
    return get_variables(self.root)

  def size(self) -> int:
    """Node count"""
    return self.root.size()

  def depth(self) -> int:
    return calculate_tree_depth(self.root)

  # Function builders

  @staticmethod
  def sin(expr: Operand) -> 'Expression':
    return Expression(UnaryOpNode(OpType.SIN, _as_node(expr)))

  @staticmethod
  def cos(expr: Operand) -> 'Expression':
    return Expression(UnaryOpNode(OpType.COS, _as_node(expr)))

  @staticmethod
  def ln(expr: Operand) -> 'Expression':
    return Expression(UnaryOpNode(OpType.LN, _as_node(expr)))

  @staticmethod
  def exp(expr: Operand) -> 'Expression':
    return Expression(UnaryOpNode(OpType.EXP, _as_node(expr)))

  # Arithmetic builders

  def _binary(self, operator: OpType, left: Operand, right: Operand) -> 'Expression':
    return Expression(BinaryOpNode(operator, _as_node(left), _as_node(right)))

  def __add__(self, other: Operand) -> 'Expression':
    return self._binary(OpType.ADD, self, other)

  def __radd__(self, other: Operand) -> 'Expression':
    return self._binary(OpType.ADD, other, self)

  def __sub__(self, other: Operand) -> 'Expression':
    return self._binary(OpType.SUB, self, other)

  def __rsub__(self, other: Operand) -> 'Expression':
    return self._binary(OpType.SUB, other, self)

  def __mul__(self, other: Operand) -> 'Expression':
    return self._binary(OpType.MUL, self, other)

  def __rmul__(self, other: Operand) -> 'Expression':
    return self._binary(OpType.MUL, other, self)

  def __truediv__(self, other: Operand) -> 'Expression':
    return self._binary(OpType.DIV, self, other)

  def __rtruediv__(self, other: Operand) -> 'Expression':
    return self._binary(OpType.DIV, other, self)

  def __pow__(self, other: Operand) -> 'Expression':
    return self._binary(OpType.POW, self, other)

  def __rpow__(self, other: Operand) -> 'Expression':
    return self._binary(OpType.POW, other, self)

  # `^` mirrors the expression syntax
  __xor__ = __pow__
  __rxor__ = __rpow__

  def __neg__(self) -> 'Expression':
    return Expression(UnaryOpNode(OpType.NEG, self.root))

  def __str__(self) -> str:
    return self.to_string()

  def __repr__(self) -> str:
    return f"Expression({self.to_string()!r})"

  def __hash__(self) -> int:
    return hash(self.root)

  def __eq__(self, other) -> bool:
    if isinstance(other, Expression):
      return self.root == other.root
    if isinstance(other, Node):
      return self.root == other
    return NotImplemented
