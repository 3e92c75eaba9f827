"""
Error hierarchy for the symbolic calculus engine.

Every failure raised by the core derives from ExpressionError so callers can
catch one type; the subclasses tell lexing, parsing, evaluation and
differentiation failures apart.
"""

from typing import Optional, Any


class ExpressionError(Exception):
    """Base class for all engine errors"""


class LexError(ExpressionError):
    """Unrecognized character in the input text"""

    def __init__(self, char: str, position: int):
        self.char = char
        self.position = position
        super().__init__(f"Unrecognized character {char!r} at position {position}")


class ExpressionSyntaxError(ExpressionError):
    """Malformed token sequence"""

    def __init__(self, message: str, token: Optional[Any] = None):
        self.token = token
        if token is not None:
            message = f"{message}: {token.text!r} at position {token.position}"
        super().__init__(message)


class UnboundVariable(ExpressionError):
    """Evaluation referenced a name that has no binding"""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unbound variable: {name}")


class DivisionByZero(ExpressionError, ZeroDivisionError):
    """Division by exactly zero during evaluation or constant folding"""

    def __init__(self, message: str = "Division by zero"):
        super().__init__(message)


class DomainError(ExpressionError, ValueError):
    """Argument outside the domain of a function (ln of a non-positive value)"""


class UnsupportedDerivative(ExpressionError):
    """Node shape not covered by the differentiation rules"""

    def __init__(self, node: Any):
        self.node = node
        super().__init__(f"Cannot differentiate node of type {type(node).__name__}")


class ExpressionTooDeep(ExpressionError):
    """Tree or nesting depth above the configured limit"""

    def __init__(self, depth: int, limit: int):
        self.depth = depth
        self.limit = limit
        super().__init__(f"Expression depth {depth} exceeds limit {limit}")
