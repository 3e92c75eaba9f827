"""Utilities for expression trees."""

from .simplifier import ExpressionSimplifier, simplify
from .differentiator import ExpressionDifferentiator, derivative
from .evaluator import evaluate, evaluate_batch
from .renderer import render
from .sympy_utils import SymPyVerifier, to_sympy, from_sympy
from .validator import ExpressionValidator, MAX_TREE_DEPTH, MAX_NESTING_DEPTH
from .tree_utils import (
    get_all_nodes, calculate_tree_depth, contains_variable,
    get_variables, get_constants, count_nodes,
    find_nodes_by_type, find_nodes_by_operator, replace_variable
)

__all__ = [
    'ExpressionSimplifier', 'simplify',
    'ExpressionDifferentiator', 'derivative',
    'evaluate', 'evaluate_batch', 'render',
    'SymPyVerifier', 'to_sympy', 'from_sympy',
    'ExpressionValidator', 'MAX_TREE_DEPTH', 'MAX_NESTING_DEPTH',
    'get_all_nodes', 'calculate_tree_depth', 'contains_variable',
    'get_variables', 'get_constants', 'count_nodes',
    'find_nodes_by_type', 'find_nodes_by_operator', 'replace_variable'
]
