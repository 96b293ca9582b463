from __future__ import annotations

from typing import Iterator

from .exceptions import LexerError
from .token import SYMBOLS, Token, TokenKind


DIGITS = '0123456789'
HEX_DIGITS = '0123456789abcdefABCDEF'

ESCAPES = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    '0': '\0',
    '"': '"',
    '\\': '\\',
}


class Lexer:

    def __init__(self, source: str) -> None:
        self._source = iter(source)
        self._char = ''
        self._next_char = ''
        self._line = 1
        self._column = 1
        self._offset = 0
        self._exhausted = False
        self._read_char()
        self._read_char()

    def _read_char(self) -> str:
        if self._char == '\n':
            self._line += 1
            self._column = 1
            self._offset += 1
        elif self._char:
            self._column += 1
            self._offset += 1
        try:
            char = next(self._source)
        except StopIteration:
            char = ''
        consumed = self._char
        self._char = self._next_char
        self._next_char = char
        return consumed

    def _is_whitespace(self) -> bool:
        return (self._char == ' '
                or self._char == '\t'
                or self._char == '\n'
                or self._char == '\r')

    def _is_alpha(self, char: str) -> bool:
        return (char.isascii() and char.isalpha()) or char == '_'

    def _skip_whitespace(self) -> None:
        while True:
            if self._is_whitespace():
                self._read_char()
            elif self._char == self._next_char == '/':
                while self._char and self._char != '\n':
                    self._read_char()
            else:
                break

    def _read_str(self, line: int, column: int, offset: int) -> Token:
        text = self._read_char()
        value = ''
        while True:
            if not self._char:
                raise LexerError('Unterminated string.', line, column)
            if self._char == '"':
                text += self._read_char()
                break
            if self._char == '\\':
                esc_line, esc_column = self._line, self._column
                text += self._read_char()
                if not self._char:
                    raise LexerError('Unterminated string.', line, column)
                if self._char not in ESCAPES:
                    raise LexerError(f"Invalid escape sequence '\\{self._char}'.",
                                     esc_line, esc_column, char=self._char)
                value += ESCAPES[self._char]
                text += self._read_char()
            else:
                value += self._char
                text += self._read_char()
        return Token(TokenKind.STRING, text, line, column, offset, value)

    def _read_number(self, line: int, column: int, offset: int) -> Token:
        text = ''
        if self._char == '0' and self._next_char in ('x', 'X'):
            text += self._read_char()
            text += self._read_char()
            while self._char and self._char in HEX_DIGITS:
                text += self._read_char()
            if len(text) == 2:
                raise LexerError('Malformed hexadecimal literal.', line, column,
                                 char=self._char or None)
            return Token(TokenKind.NUMBER, text, line, column, offset,
                         float(int(text[2:], 16)))
        while self._char and self._char in DIGITS:
            text += self._read_char()
        if (self._char == '.'
                and self._next_char and self._next_char in DIGITS):
            text += self._read_char()
            while self._char and self._char in DIGITS:
                text += self._read_char()
        return Token(TokenKind.NUMBER, text, line, column, offset, float(text))

    def _read_word(self, line: int, column: int, offset: int) -> Token:
        text = ''
        while self._char and (self._is_alpha(self._char) or self._char in DIGITS):
            text += self._read_char()
        return Token.word(text, line, column, offset)

    def _read_symbol(self, line: int, column: int, offset: int) -> Token:
        pair = self._char + self._next_char
        if len(pair) == 2 and pair in SYMBOLS:
            text = self._read_char() + self._read_char()
        elif self._char in SYMBOLS:
            text = self._read_char()
        else:
            raise LexerError(f"Unexpected character '{self._char}'.",
                             line, column, char=self._char)
        return Token(SYMBOLS[text], text, line, column, offset)

    def __iter__(self) -> Lexer:
        return self

    def __next__(self) -> Token:
        if self._exhausted:
            raise StopIteration

        self._skip_whitespace()
        position = (self._line, self._column, self._offset)

        if self._char == '':
            self._exhausted = True
            return Token(TokenKind.EOF, '', *position)

        if self._char == '"':
            return self._read_str(*position)
        elif self._char in DIGITS:
            return self._read_number(*position)
        elif self._is_alpha(self._char):
            return self._read_word(*position)
        else:
            return self._read_symbol(*position)


def tokenize(source: str) -> Iterator[Token]:
    '''Lazily scan ``source``; the stream ends with a single EOF token.'''
    return Lexer(source)
