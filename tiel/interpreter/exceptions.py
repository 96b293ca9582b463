from __future__ import annotations

from typing import Iterable, Optional


class InterpreterError(Exception):

    kind: str = 'Error'

    def __init__(self, detail: str,
                 line: Optional[int] = None,
                 column: Optional[int] = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.line = line
        self.column = column

    def at(self, line: int, column: int) -> InterpreterError:
        '''Attach a position unless one is already known.'''
        if self.line is None:
            self.line = line
            self.column = column
        return self

    def format(self) -> str:
        if self.line is None:
            return f'{self.kind}: {self.detail}'
        return f'{self.kind} at line {self.line}, column {self.column}: {self.detail}'


class LexerError(InterpreterError):

    kind = 'LexError'

    def __init__(self, detail: str,
                 line: Optional[int] = None,
                 column: Optional[int] = None, *,
                 char: Optional[str] = None) -> None:
        super().__init__(detail, line, column)
        self.char = char


class ParserError(InterpreterError):

    kind = 'ParseError'

    def __init__(self, detail: str,
                 line: Optional[int] = None,
                 column: Optional[int] = None, *,
                 expected: Iterable = (),
                 found=None) -> None:
        super().__init__(detail, line, column)
        self.expected = tuple(expected)
        self.found = found


class EvaluatorError(InterpreterError):

    kind = 'RuntimeError'


class UndefinedNameError(EvaluatorError):

    kind = 'UndefinedNameError'

    def __init__(self, name: str) -> None:
        super().__init__(f"Undefined name '{name}'.")
        self.name = name


class OperandTypeError(EvaluatorError):

    kind = 'TypeError'


class DivisionError(EvaluatorError):

    kind = 'ArithmeticError'


class ArityError(EvaluatorError):

    kind = 'ArityError'

    def __init__(self, expected: int, found: int) -> None:
        super().__init__(f'Expected {expected} arguments but got {found}.')
        self.expected = expected
        self.found = found


class ResourceLimitError(EvaluatorError):

    kind = 'ResourceLimitError'
