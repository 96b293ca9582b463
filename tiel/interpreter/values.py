from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from . import ast
from .environment import Environment


class Function:

    def __init__(self, definition: ast.FunctionDefinition,
                 closure: Environment) -> None:
        self.definition = definition
        self.closure = closure

    @property
    def name(self) -> str:
        return self.definition.name or 'anonymous'

    @property
    def arity(self) -> int:
        return len(self.definition.params)

    def __repr__(self) -> str:
        return f'<fn {self.name}>'


class NativeFunction:

    def __init__(self, name: str, arity: int, func: Callable[..., Any]) -> None:
        self.name = name
        self.arity = arity
        self.func = func

    def __repr__(self) -> str:
        return '<native fn>'


@dataclass(frozen=True)
class ReturnSignal:
    '''Result of a ``return`` statement on its way out to the call.'''

    value: Any = None


def type_name(value: Any) -> str:
    if value is None:
        return 'nil'
    elif isinstance(value, bool):
        return 'boolean'
    elif isinstance(value, float):
        return 'number'
    elif isinstance(value, str):
        return 'string'
    elif isinstance(value, (Function, NativeFunction)):
        return 'function'
    return type(value).__name__


def is_number(value: Any) -> bool:
    return type(value) is float


def is_callable(value: Any) -> bool:
    return isinstance(value, (Function, NativeFunction))


def is_truthy(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return True


def is_equal(left: Any, right: Any) -> bool:
    # Values of different kinds never compare equal, so true != 1.
    if type(left) is not type(right):
        return False
    return left == right


def stringify(value: Any) -> str:
    if value is None:
        return 'nil'
    elif isinstance(value, bool):
        return 'true' if value else 'false'
    elif isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    elif isinstance(value, str):
        return value
    return repr(value)
