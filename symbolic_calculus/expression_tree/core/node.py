import numpy as np
import sympy as sp
from abc import ABC, abstractmethod
from typing import Mapping, Tuple, Union
from .operators import (
  NodeType, OpType, BINARY_SYMBOLS, UNARY_NAMES,
  to_binary_op, to_unary_op, format_constant,
  evaluate_binary_op, evaluate_unary_op,
  evaluate_constant, evaluate_binary_op_batch, evaluate_unary_op_batch
)
from ...errors import UnboundVariable


class Node(ABC):
  """Immutable expression tree node with structural equality"""

  __slots__ = ('_hash_cache', '_size_cache')

  def __init__(self):
    self._set('_hash_cache', None)
    self._set('_size_cache', None)

  def _set(self, name: str, value):
    object.__setattr__(self, name, value)

  def __setattr__(self, name, value):
    raise AttributeError(f"{type(self).__name__} is immutable")

  def __delattr__(self, name):
    raise AttributeError(f"{type(self).__name__} is immutable")

  @abstractmethod
  def evaluate(self, bindings: Mapping[str, float]) -> float:
    pass

  @abstractmethod
  def evaluate_batch(self, bindings: Mapping[str, np.ndarray], n_samples: int) -> np.ndarray:
    pass

  @abstractmethod
  def to_string(self) -> str:
    pass

  @abstractmethod
  def to_sympy(self) -> sp.Expr:
    pass

  @abstractmethod
  def children(self) -> Tuple['Node', ...]:
    pass

  @abstractmethod
  def with_children(self, *children: 'Node') -> 'Node':
    """Same node kind over new children"""
    pass

  def _uncached(self, slot: str) -> list:
    """Nodes below (and including) self whose `slot` is unset, parents before children"""
    pending = []
    stack = [self]
    while stack:
      node = stack.pop()
      if getattr(node, slot) is None:
        pending.append(node)
        stack.extend(node.children())
    return pending

  def size(self) -> int:
    """Node count"""
    if self._size_cache is None:
      # Children are filled in before their parents, so no call recurses
      for node in reversed(self._uncached('_size_cache')):
        node._set('_size_cache', 1 + sum(child._size_cache for child in node.children()))
    return self._size_cache

  def __hash__(self) -> int:
    if self._hash_cache is None:
      for node in reversed(self._uncached('_hash_cache')):
        node._set('_hash_cache', node._compute_hash())
    return self._hash_cache

  @abstractmethod
  def _compute_hash(self) -> int:
    """Hash of own fields combined with the (already cached) child hashes"""
    pass

  def __eq__(self, other) -> bool:
    if not isinstance(other, Node):
      return False
    pairs = [(self, other)]
    while pairs:
      first, second = pairs.pop()
      if first is second:
        continue
      if type(first) is not type(second) or hash(first) != hash(second):
        return False
      if not first._equals(second):
        return False
      pairs.extend(zip(first.children(), second.children()))
    return True

  def __ne__(self, other) -> bool:
    return not self.__eq__(other)

  @abstractmethod
  def _equals(self, other: 'Node') -> bool:
    """Compare own fields only; __eq__ walks the children"""
    pass

  def __str__(self) -> str:
    return self.to_string()


class VariableNode(Node):
  __slots__ = ('name',)

  def __init__(self, name: str):
    super().__init__()
    self._set('name', str(name))

  def evaluate(self, bindings: Mapping[str, float]) -> float:
    try:
      return float(bindings[self.name])
    except KeyError:
      raise UnboundVariable(self.name) from None

  def evaluate_batch(self, bindings: Mapping[str, np.ndarray], n_samples: int) -> np.ndarray:
    try:
      return bindings[self.name]
    except KeyError:
      raise UnboundVariable(self.name) from None

  def to_string(self) -> str:
    return self.name

  def to_sympy(self) -> sp.Expr:
    return sp.Symbol(self.name)

  def children(self) -> Tuple[Node, ...]:
    return ()

  def with_children(self, *children: Node) -> 'VariableNode':
    return self

  def _compute_hash(self) -> int:
    return hash((NodeType.VARIABLE, self.name))

  def _equals(self, other: 'VariableNode') -> bool:
    return self.name == other.name

  def __reduce__(self):
    return (VariableNode, (self.name,))

  def __repr__(self) -> str:
    return f"VariableNode({self.name!r})"


class ConstantNode(Node):
  __slots__ = ('value',)

  def __init__(self, value: float):
    super().__init__()
    value = float(value)
    # inf and nan have no literal form that parses back
    if not np.isfinite(value):
      raise ValueError(f"Constant must be finite, got {value}")
    self._set('value', value)

  def evaluate(self, bindings: Mapping[str, float]) -> float:
    return self.value

  def evaluate_batch(self, bindings: Mapping[str, np.ndarray], n_samples: int) -> np.ndarray:
    return evaluate_constant(n_samples, self.value)

  def to_string(self) -> str:
    return format_constant(self.value)

  def to_sympy(self) -> sp.Expr:
    if self.value.is_integer():
      return sp.Integer(int(self.value))
    return sp.Float(self.value)

  def children(self) -> Tuple[Node, ...]:
    return ()

  def with_children(self, *children: Node) -> 'ConstantNode':
    return self

  def _compute_hash(self) -> int:
    return hash((NodeType.CONSTANT, self.value))

  def _equals(self, other: 'ConstantNode') -> bool:
    return self.value == other.value

  def __reduce__(self):
    return (ConstantNode, (self.value,))

  def __repr__(self) -> str:
    return f"ConstantNode({self.value!r})"


class BinaryOpNode(Node):
  __slots__ = ('operator', 'left', 'right')

  def __init__(self, operator: Union[str, OpType], left: Node, right: Node):
    super().__init__()
    if not isinstance(left, Node) or not isinstance(right, Node):
      raise TypeError(f"Operands must be Node instances, got {type(left).__name__} and {type(right).__name__}")
    self._set('operator', to_binary_op(operator))
    self._set('left', left)
    self._set('right', right)

  @property
  def symbol(self) -> str:
    return BINARY_SYMBOLS[self.operator]

  def evaluate(self, bindings: Mapping[str, float]) -> float:
    left_val = self.left.evaluate(bindings)
    right_val = self.right.evaluate(bindings)
    return evaluate_binary_op(left_val, right_val, self.operator)

  def evaluate_batch(self, bindings: Mapping[str, np.ndarray], n_samples: int) -> np.ndarray:
    left_val = self.left.evaluate_batch(bindings, n_samples)
    right_val = self.right.evaluate_batch(bindings, n_samples)
    return evaluate_binary_op_batch(left_val, right_val, self.operator)

  def to_string(self) -> str:
    return f"({self.left.to_string()} {self.symbol} {self.right.to_string()})"

  def to_sympy(self) -> sp.Expr:
    left = self.left.to_sympy()
    right = self.right.to_sympy()
    if self.operator == OpType.ADD:
      return sp.Add(left, right)
    elif self.operator == OpType.SUB:
      return sp.Add(left, sp.Mul(-1, right))
    elif self.operator == OpType.MUL:
      return sp.Mul(left, right)
    elif self.operator == OpType.DIV:
      return sp.Mul(left, sp.Pow(right, -1))
    elif self.operator == OpType.POW:
      return sp.Pow(left, right)
    raise ValueError(f"to_sympy reached unexpected binary operation: {self.operator!r}")

  def children(self) -> Tuple[Node, ...]:
    return (self.left, self.right)

  def with_children(self, *children: Node) -> 'BinaryOpNode':
    left, right = children
    if left is self.left and right is self.right:
      return self
    return BinaryOpNode(self.operator, left, right)

  def _compute_hash(self) -> int:
    return hash((NodeType.BINARY_OP, self.operator, hash(self.left), hash(self.right)))

  def _equals(self, other: 'BinaryOpNode') -> bool:
    return self.operator == other.operator

  def __reduce__(self):
    return (BinaryOpNode, (self.operator, self.left, self.right))

  def __repr__(self) -> str:
    return f"BinaryOpNode({self.symbol!r}, {self.left!r}, {self.right!r})"


class UnaryOpNode(Node):
  __slots__ = ('operator', 'operand')

  def __init__(self, operator: Union[str, OpType], operand: Node):
    super().__init__()
    if not isinstance(operand, Node):
      raise TypeError(f"Operand must be a Node instance, got {type(operand).__name__}")
    self._set('operator', to_unary_op(operator))
    self._set('operand', operand)

  @property
  def function_name(self) -> str:
    return UNARY_NAMES[self.operator]

  def evaluate(self, bindings: Mapping[str, float]) -> float:
    return evaluate_unary_op(self.operand.evaluate(bindings), self.operator)

  def evaluate_batch(self, bindings: Mapping[str, np.ndarray], n_samples: int) -> np.ndarray:
    return evaluate_unary_op_batch(self.operand.evaluate_batch(bindings, n_samples), self.operator)

  def to_string(self) -> str:
    inner = self.operand.to_string()
    if self.operator == OpType.NEG:
      return f"-{inner}"
    # A binary operand already carries its own parentheses
    if isinstance(self.operand, BinaryOpNode):
      return f"{self.function_name}{inner}"
    return f"{self.function_name}({inner})"

  def to_sympy(self) -> sp.Expr:
    operand_sympy = self.operand.to_sympy()

    if self.operator == OpType.NEG:
      return -operand_sympy
    elif self.operator == OpType.SIN:
      return sp.sin(operand_sympy)
    elif self.operator == OpType.COS:
      return sp.cos(operand_sympy)
    elif self.operator == OpType.LN:
      return sp.log(operand_sympy)
    elif self.operator == OpType.EXP:
      return sp.exp(operand_sympy)
    raise ValueError(f"to_sympy reached unexpected unary operation: {self.operator!r}")

  def children(self) -> Tuple[Node, ...]:
    return (self.operand,)

  def with_children(self, *children: Node) -> 'UnaryOpNode':
    operand, = children
    if operand is self.operand:
      return self
    return UnaryOpNode(self.operator, operand)

  def _compute_hash(self) -> int:
    return hash((NodeType.UNARY_OP, self.operator, hash(self.operand)))

  def _equals(self, other: 'UnaryOpNode') -> bool:
    return self.operator == other.operator

  def __reduce__(self):
    return (UnaryOpNode, (self.operator, self.operand))

  def __repr__(self) -> str:
    return f"UnaryOpNode({self.function_name!r}, {self.operand!r})"


ZERO = ConstantNode(0.0)
ONE = ConstantNode(1.0)
TWO = ConstantNode(2.0)
