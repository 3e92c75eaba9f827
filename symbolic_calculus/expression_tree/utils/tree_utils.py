"""
Tree Utility Functions

Traversal and analysis helpers for expression trees. Every walk here is
iterative so that it stays safe on trees deeper than the interpreter's
recursion limit; the validator relies on that to measure a tree before any
recursive transformation touches it.
"""

from collections import deque
from typing import List, Set, Union

from ..core.node import Node, BinaryOpNode, UnaryOpNode, ConstantNode, VariableNode
from ..core.operators import OpType, to_binary_op, to_unary_op


def get_all_nodes(node: Node, traversal_order: str = 'breadth_first') -> List[Node]:
    """
    Get all nodes in the tree using specified traversal order.

    Args:
        node: Root node of the tree
        traversal_order: 'breadth_first' (default) or 'depth_first' (pre-order)

    Returns:
        List of all nodes in the tree
    """
    if traversal_order == 'breadth_first':
        return _breadth_first_traversal(node)
    elif traversal_order == 'depth_first':
        return _depth_first_traversal(node)
    else:
        raise ValueError(f"Invalid traversal_order: {traversal_order}")


def _breadth_first_traversal(node: Node) -> List[Node]:
    nodes_to_visit = deque([node])
    all_nodes = []

    while nodes_to_visit:
        current_node = nodes_to_visit.popleft()
        all_nodes.append(current_node)
        nodes_to_visit.extend(current_node.children())

    return all_nodes


def _depth_first_traversal(node: Node) -> List[Node]:
    stack = [node]
    all_nodes = []

    while stack:
        current_node = stack.pop()
        all_nodes.append(current_node)
        # Reversed so the left child is visited first
        stack.extend(reversed(current_node.children()))

    return all_nodes


def calculate_tree_depth(node: Node) -> int:
    """
    Calculate the maximum depth of the tree.

    Args:
        node: Root node of the tree

    Returns:
        Maximum depth (leaf nodes have depth 1)
    """
    max_depth = 0
    stack = [(node, 1)]

    while stack:
        current_node, depth = stack.pop()
        if depth > max_depth:
            max_depth = depth
        for child in current_node.children():
            stack.append((child, depth + 1))

    return max_depth


def contains_variable(node: Node, name: str) -> bool:
    """True if a variable called `name` occurs anywhere in the subtree"""
    stack = [node]

    while stack:
        current_node = stack.pop()
        if isinstance(current_node, VariableNode):
            if current_node.name == name:
                return True
        else:
            stack.extend(current_node.children())

    return False


def get_variables(node: Node) -> Set[str]:
    """Names of all free variables in the tree"""
    return {n.name for n in get_all_nodes(node) if isinstance(n, VariableNode)}


def get_constants(node: Node) -> List[float]:
    """Constant values in pre-order"""
    return [n.value for n in _depth_first_traversal(node) if isinstance(n, ConstantNode)]


def count_nodes(node: Node) -> int:
    return len(_breadth_first_traversal(node))


def find_nodes_by_type(node: Node, node_type: type) -> List[Node]:
    """
    Find all nodes of a specific type in the tree.

    Args:
        node: Root node of the tree
        node_type: Type of nodes to find (e.g., ConstantNode, VariableNode)

    Returns:
        List of nodes matching the specified type
    """
    return [n for n in get_all_nodes(node) if isinstance(n, node_type)]


def find_nodes_by_operator(node: Node, operator: Union[str, OpType]) -> List[Node]:
    """
    Find all operator nodes with a specific operator.

    Args:
        node: Root node of the tree
        operator: OpType, or the binary symbol / function name ('+', 'sin', 'neg')

    Returns:
        List of nodes with the specified operator
    """
    if isinstance(operator, str):
        op = to_binary_op(operator) if len(operator) == 1 else to_unary_op(operator)
    else:
        op = OpType(operator)

    return [n for n in get_all_nodes(node)
            if isinstance(n, (BinaryOpNode, UnaryOpNode)) and n.operator == op]


def replace_variable(node: Node, name: str, replacement: Node) -> Node:
    """
    Return a new tree with every occurrence of variable `name` replaced.

    Subtrees without the variable are shared with the input, untouched.
    """
    if isinstance(node, VariableNode):
        return replacement if node.name == name else node
    if not contains_variable(node, name):
        return node
    return node.with_children(*(replace_variable(child, name, replacement)
                                for child in node.children()))
