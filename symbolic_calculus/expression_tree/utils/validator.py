from typing import Optional
from ..core.node import Node
from .tree_utils import calculate_tree_depth
from ...errors import ExpressionTooDeep

# Deepest tree any recursive walk is allowed to visit. The differentiator
# spends two interpreter frames per level and node construction inside the
# walks adds more, so this stays well below sys.getrecursionlimit() / 2.
MAX_TREE_DEPTH = 200

# Deepest parenthesis / unary nesting the parser accepts. Each nesting level
# costs four parser frames (expression, term, factor, primary).
MAX_NESTING_DEPTH = 128


class ExpressionValidator:

  @staticmethod
  def check_depth(node: Node, max_depth: Optional[int] = None) -> int:
    """Raise ExpressionTooDeep when the tree is deeper than the limit; return the depth"""
    limit = MAX_TREE_DEPTH if max_depth is None else max_depth
    depth = calculate_tree_depth(node)
    if depth > limit:
      raise ExpressionTooDeep(depth, limit)
    return depth
