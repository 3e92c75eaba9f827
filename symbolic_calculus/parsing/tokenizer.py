from typing import List

from .tokens import Token, TokenType
from ..errors import LexError
from ..expression_tree.core.operators import BINARY_OP_MAP, FUNCTION_NAMES
from ..logging_system import log_debug

DIGITS = '0123456789'


class Tokenizer:
    """Single pass, maximal munch scanner"""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self.current = text[0] if text else None

    def advance(self):
        self.pos += 1
        self.current = self.text[self.pos] if self.pos < len(self.text) else None

    def peek(self):
        nxt = self.pos + 1
        return self.text[nxt] if nxt < len(self.text) else None

    def skip_spaces(self):
        while self.current is not None and self.current.isspace():
            self.advance()

    def starts_number(self) -> bool:
        if self.current in DIGITS:
            return True
        nxt = self.peek()
        return self.current == '.' and nxt is not None and nxt in DIGITS

    def number(self) -> Token:
        start = self.pos
        seen_point = False
        while self.current is not None:
            if self.current in DIGITS:
                self.advance()
            elif self.current == '.' and not seen_point:
                seen_point = True
                self.advance()
            else:
                break
        return Token(TokenType.NUMBER, self.text[start:self.pos], start)

    def identifier(self) -> Token:
        start = self.pos
        while self.current is not None and (self.current.isalpha() or self.current == '_'):
            self.advance()
        name = self.text[start:self.pos]
        kind = TokenType.FUNCTION if name in FUNCTION_NAMES else TokenType.IDENTIFIER
        return Token(kind, name, start)

    def generate_tokens(self) -> List[Token]:
        tokens = []
        while self.current is not None:
            if self.current.isspace():
                self.skip_spaces()
                continue

            if self.starts_number():
                tokens.append(self.number())
                continue

            if self.current.isalpha() or self.current == '_':
                tokens.append(self.identifier())
                continue

            if self.current in BINARY_OP_MAP:
                tokens.append(Token(TokenType.OPERATOR, self.current, self.pos))
            elif self.current == '(':
                tokens.append(Token(TokenType.LPAREN, self.current, self.pos))
            elif self.current == ')':
                tokens.append(Token(TokenType.RPAREN, self.current, self.pos))
            else:
                raise LexError(self.current, self.pos)

            self.advance()

        log_debug("tokenized %d tokens from %r", len(tokens), self.text)
        return tokens


def tokenize(text: str) -> List[Token]:
    return Tokenizer(text).generate_tokens()
