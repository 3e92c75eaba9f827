from typing import Optional

from ..core.node import Node
from .validator import ExpressionValidator


def render(node: Node, max_depth: Optional[int] = None) -> str:
  """
  Canonical text of a tree.

  Binary nodes are always parenthesized as `(left op right)`, functions as
  `name(operand)`, negation as `-operand` and constants in positional
  notation. The text parses back to a tree that evaluates identically.
  """
  ExpressionValidator.check_depth(node, max_depth)
  return node.to_string()
