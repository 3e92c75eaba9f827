"""Core expression tree components."""

from .node import Node, VariableNode, ConstantNode, BinaryOpNode, UnaryOpNode, ZERO, ONE, TWO
from .operators import (
    NodeType, OpType, BINARY_OP_MAP, UNARY_OP_MAP, BINARY_SYMBOLS, UNARY_NAMES,
    BINARY_OPS, UNARY_OPS, FUNCTION_NAMES, format_constant, real_power,
    evaluate_binary_op, evaluate_unary_op,
    evaluate_binary_op_batch, evaluate_unary_op_batch
)

__all__ = [
    'Node', 'VariableNode', 'ConstantNode', 'BinaryOpNode', 'UnaryOpNode', 'ZERO', 'ONE', 'TWO',
    'NodeType', 'OpType', 'BINARY_OP_MAP', 'UNARY_OP_MAP', 'BINARY_SYMBOLS', 'UNARY_NAMES',
    'BINARY_OPS', 'UNARY_OPS', 'FUNCTION_NAMES', 'format_constant', 'real_power',
    'evaluate_binary_op', 'evaluate_unary_op',
    'evaluate_binary_op_batch', 'evaluate_unary_op_batch'
]
