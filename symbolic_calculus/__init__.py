"""Symbolic Calculus Package

Parses arithmetic expressions into immutable trees, then evaluates,
differentiates, simplifies and renders them.
"""

from .errors import (
  ExpressionError, LexError, ExpressionSyntaxError, UnboundVariable,
  DivisionByZero, DomainError, UnsupportedDerivative, ExpressionTooDeep
)
from .expression_tree import (
  Expression, Node, VariableNode, ConstantNode,
  BinaryOpNode, UnaryOpNode, OpType,
  evaluate, evaluate_batch, derivative, simplify, render,
  contains_variable, replace_variable, to_sympy, from_sympy
)
from .parsing import Token, TokenType, tokenize, parse
from .logging_system import LogLevel, configure_logging, get_logger, set_log_level

__version__ = "0.1.0"
__all__ = [
  "ExpressionError", "LexError", "ExpressionSyntaxError", "UnboundVariable",
  "DivisionByZero", "DomainError", "UnsupportedDerivative", "ExpressionTooDeep",
  "Expression", "Node", "VariableNode", "ConstantNode",
  "BinaryOpNode", "UnaryOpNode", "OpType",
  "evaluate", "evaluate_batch", "derivative", "simplify", "render",
  "contains_variable", "replace_variable", "to_sympy", "from_sympy",
  "Token", "TokenType", "tokenize", "parse",
  "LogLevel", "configure_logging", "get_logger", "set_log_level"
]
