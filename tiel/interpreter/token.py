from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


#-----------------------------------------------------------------------
# Token Kinds
#-----------------------------------------------------------------------


class Category(Enum):

    KEYWORD = 'keyword'
    IDENTIFIER = 'identifier'
    LITERAL = 'literal'
    OPERATOR = 'operator'
    DELIMITER = 'delimiter'
    EOF = 'end-of-input'


class TokenKind(str, Enum):

    # Keywords
    AND = 'and'
    OR = 'or'
    NOT = 'not'
    TRUE = 'true'
    FALSE = 'false'
    NIL = 'nil'
    FUN = 'fun'
    VAR = 'var'
    IF = 'if'
    THEN = 'then'
    ELSE = 'else'
    WHILE = 'while'
    DO = 'do'
    RETURN = 'return'

    # Operators
    PLUS = '+'
    MINUS = '-'
    STAR = '*'
    SLASH = '/'
    EQUAL = '='
    EQUAL_EQUAL = '=='
    NOT_EQUAL = '!='
    LESS = '<'
    LESS_EQUAL = '<='
    GREATER = '>'
    GREATER_EQUAL = '>='

    # Delimiters
    LEFT_PAREN = '('
    RIGHT_PAREN = ')'
    LEFT_BRACE = '{'
    RIGHT_BRACE = '}'
    LEFT_BRACKET = '['
    RIGHT_BRACKET = ']'
    COMMA = ','
    SEMICOLON = ';'

    # Identifiers and literals
    IDENTIFIER = 'identifier'
    NUMBER = 'number'
    STRING = 'string'

    EOF = 'end of input'

    def __str__(self) -> str:
        if self in (TokenKind.IDENTIFIER, TokenKind.NUMBER,
                    TokenKind.STRING, TokenKind.EOF):
            return self.value
        return f"'{self.value}'"

    @property
    def category(self) -> Category:
        if self in KEYWORDS:
            return Category.KEYWORD
        elif self is TokenKind.IDENTIFIER:
            return Category.IDENTIFIER
        elif self in (TokenKind.NUMBER, TokenKind.STRING):
            return Category.LITERAL
        elif self is TokenKind.EOF:
            return Category.EOF
        elif self in DELIMITERS:
            return Category.DELIMITER
        else:
            return Category.OPERATOR


KEYWORDS = frozenset({
    TokenKind.AND, TokenKind.OR, TokenKind.NOT,
    TokenKind.TRUE, TokenKind.FALSE, TokenKind.NIL,
    TokenKind.FUN, TokenKind.VAR, TokenKind.RETURN,
    TokenKind.IF, TokenKind.THEN, TokenKind.ELSE,
    TokenKind.WHILE, TokenKind.DO,
})

DELIMITERS = frozenset({
    TokenKind.LEFT_PAREN, TokenKind.RIGHT_PAREN,
    TokenKind.LEFT_BRACE, TokenKind.RIGHT_BRACE,
    TokenKind.LEFT_BRACKET, TokenKind.RIGHT_BRACKET,
    TokenKind.COMMA, TokenKind.SEMICOLON,
})

# Operators and delimiters by lexeme.
SYMBOLS = {
    kind.value: kind for kind in TokenKind
    if kind not in KEYWORDS and not kind.value[0].isalpha()
}


#-----------------------------------------------------------------------
# Token
#-----------------------------------------------------------------------


@dataclass(frozen=True)
class Token:

    kind: TokenKind
    text: str
    line: int
    column: int
    offset: int = field(default=0, compare=False)
    value: Any = field(default=None, compare=False)

    kw_obj = re.compile('|'.join(sorted(kind.value for kind in KEYWORDS)))

    @classmethod
    def word(cls, text: str, line: int, column: int, offset: int = 0) -> Token:
        '''Identifier token, or keyword token when ``text`` is reserved.'''
        if cls.kw_obj.fullmatch(text):
            return cls(TokenKind(text), text, line, column, offset)
        return cls(TokenKind.IDENTIFIER, text, line, column, offset)

    @property
    def category(self) -> Category:
        return self.kind.category

    def __str__(self) -> str:
        return self.text

    def __repr__(self) -> str:
        return (f'<{self.kind.name}({self.text}) '
                f'at line {self.line}, column {self.column}>')

    def describe(self) -> str:
        if self.kind is TokenKind.EOF:
            return 'end of input'
        return f"'{self.text}'"
