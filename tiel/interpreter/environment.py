from __future__ import annotations

from typing import Any, Dict, Optional

from .exceptions import UndefinedNameError


class Environment:
    '''A scope of name bindings chained to its enclosing scope.'''

    def __init__(self, parent: Optional[Environment] = None) -> None:
        self._values: Dict[str, Any] = {}
        self.parent = parent

    def __repr__(self) -> str:
        names = ', '.join(self._values)
        if self.parent is None:
            return f'<Environment [{names}]>'
        return f'<Environment [{names}] -> {self.parent!r}>'

    def __contains__(self, name: str) -> bool:
        return self._resolve(name) is not None

    def _resolve(self, name: str) -> Optional[Environment]:
        env = self
        while env is not None:
            if name in env._values:
                return env
            env = env.parent
        return None

    def define(self, name: str, value: Any) -> None:
        self._values[name] = value

    def get(self, name: str) -> Any:
        env = self._resolve(name)
        if env is None:
            raise UndefinedNameError(name)
        return env._values[name]

    def assign(self, name: str, value: Any) -> None:
        env = self._resolve(name)
        if env is None:
            raise UndefinedNameError(name)
        env._values[name] = value

    def child_scope(self) -> Environment:
        return Environment(self)
