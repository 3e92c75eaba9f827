"""
Text front end of the engine: tokenizer and recursive descent parser.
"""

from .tokens import Token, TokenType
from .tokenizer import Tokenizer, tokenize
from .parser import Parser, parse

__all__ = ['Token', 'TokenType', 'Tokenizer', 'tokenize', 'Parser', 'parse']
