import math
from typing import Optional, Sequence, Union

from .tokens import Token, TokenType
from .tokenizer import tokenize
from ..errors import ExpressionSyntaxError, ExpressionTooDeep
from ..expression_tree.core.node import Node, ConstantNode, VariableNode, BinaryOpNode, UnaryOpNode
from ..expression_tree.core.operators import BINARY_OP_MAP, UNARY_OP_MAP, OpType
from ..expression_tree.utils.validator import ExpressionValidator, MAX_NESTING_DEPTH
from ..logging_system import log_debug


class Parser:
    """
    Recursive descent parser.

    Grammar, lowest to highest precedence:

        expression := term (('+' | '-') term)*
        term       := factor (('*' | '/') factor)*
        factor     := primary ('^' primary)*          left-associative
        primary    := '-' primary
                    | FUNCTION '(' expression ')'
                    | NUMBER | IDENTIFIER
                    | '(' expression ')'

    The token list is never mutated; an index tracks the cursor.
    """

    def __init__(self, tokens: Sequence[Token], max_nesting: Optional[int] = None):
        self.tokens = tuple(tokens)
        self.index = 0
        self.max_nesting = MAX_NESTING_DEPTH if max_nesting is None else max_nesting
        self.nesting = 0

    def peek(self) -> Optional[Token]:
        return self.tokens[self.index] if self.index < len(self.tokens) else None

    def advance(self) -> Token:
        token = self.peek()
        if token is None:
            raise ExpressionSyntaxError("Unexpected end of input")
        self.index += 1
        return token

    def expect(self, type_: TokenType, description: str) -> Token:
        token = self.peek()
        if token is None:
            raise ExpressionSyntaxError(f"Unexpected end of input, expected {description}")
        if token.type != type_:
            raise ExpressionSyntaxError(f"Expected {description}", token)
        return self.advance()

    def at_operator(self, *symbols: str) -> bool:
        token = self.peek()
        return token is not None and token.type == TokenType.OPERATOR and token.text in symbols

    def parse(self) -> Node:
        result = self.expression()
        leftover = self.peek()
        if leftover is not None:
            raise ExpressionSyntaxError("Unexpected token after expression", leftover)
        return result

    def expression(self) -> Node:
        node = self.term()

        while self.at_operator('+', '-'):
            op = self.advance()
            node = BinaryOpNode(BINARY_OP_MAP[op.text], node, self.term())

        return node

    def term(self) -> Node:
        node = self.factor()

        while self.at_operator('*', '/'):
            op = self.advance()
            node = BinaryOpNode(BINARY_OP_MAP[op.text], node, self.factor())

        return node

    def factor(self) -> Node:
        node = self.primary()

        while self.at_operator('^'):
            self.advance()
            node = BinaryOpNode(OpType.POW, node, self.primary())

        return node

    def primary(self) -> Node:
        token = self.peek()
        if token is None:
            raise ExpressionSyntaxError("Unexpected end of input")

        if token.type == TokenType.NUMBER:
            self.advance()
            value = float(token.text)
            if math.isinf(value):
                raise ExpressionSyntaxError("Number out of range", token)
            return ConstantNode(value)

        if token.type == TokenType.IDENTIFIER:
            self.advance()
            following = self.peek()
            if following is not None and following.type == TokenType.LPAREN:
                raise ExpressionSyntaxError("Unknown function", token)
            return VariableNode(token.text)

        if self.at_operator('-'):
            self.advance()
            self._enter()
            operand = self.primary()
            self.nesting -= 1
            return UnaryOpNode(OpType.NEG, operand)

        if token.type == TokenType.FUNCTION:
            self.advance()
            self.expect(TokenType.LPAREN, f"'(' after {token.text}")
            self._enter()
            argument = self.expression()
            self.nesting -= 1
            self.expect(TokenType.RPAREN, "')'")
            return UnaryOpNode(UNARY_OP_MAP[token.text], argument)

        if token.type == TokenType.LPAREN:
            self.advance()
            self._enter()
            node = self.expression()
            self.nesting -= 1
            self.expect(TokenType.RPAREN, "')'")
            return node

        raise ExpressionSyntaxError("Unexpected token", token)

    def _enter(self):
        self.nesting += 1
        if self.nesting > self.max_nesting:
            raise ExpressionTooDeep(self.nesting, self.max_nesting)


def parse(source: Union[str, Sequence[Token]], max_depth: Optional[int] = None,
          max_nesting: Optional[int] = None) -> Node:
    """
    Parse text (or an already tokenized sequence) into an expression tree.

    Trailing tokens after a complete expression are a syntax error. Raises
    ExpressionTooDeep when nesting or the resulting tree exceeds the limits.
    """
    tokens = tokenize(source) if isinstance(source, str) else source
    tree = Parser(tokens, max_nesting).parse()
    ExpressionValidator.check_depth(tree, max_depth)
    log_debug("parsed %d tokens into %s", len(tokens), tree)
    return tree
