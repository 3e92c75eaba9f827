"""Expression Tree Module

Immutable expression trees and the transformations defined over them.
"""

from .expression import Expression
from .core.node import (
    Node,
    VariableNode,
    ConstantNode,
    BinaryOpNode,
    UnaryOpNode
)
from .core.operators import (
    NodeType,
    OpType,
    BINARY_OP_MAP,
    UNARY_OP_MAP,
    FUNCTION_NAMES
)
from .utils import (
    ExpressionSimplifier, simplify,
    ExpressionDifferentiator, derivative,
    evaluate, evaluate_batch, render,
    SymPyVerifier, to_sympy, from_sympy,
    ExpressionValidator, contains_variable, replace_variable
)

__all__ = [
    "Expression",
    "Node", "VariableNode", "ConstantNode", "BinaryOpNode", "UnaryOpNode",
    "NodeType", "OpType",
    "BINARY_OP_MAP", "UNARY_OP_MAP", "FUNCTION_NAMES",
    "ExpressionSimplifier", "simplify",
    "ExpressionDifferentiator", "derivative",
    "evaluate", "evaluate_batch", "render",
    "SymPyVerifier", "to_sympy", "from_sympy",
    "ExpressionValidator", "contains_variable", "replace_variable"
]
