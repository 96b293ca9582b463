from __future__ import annotations

import logging
import sys
from copy import deepcopy
from typing import Any, Optional, TextIO

from . import ast
from .environment import Environment
from .evaluator import Evaluator
from .lexer import Lexer
from .parser import Parser

# Python frames a single TiEL call may use; sizes the host recursion limit.
FRAMES_PER_CALL = 50


class Interpreter:

    setting: dict = {
        'max_depth': 256,
        'max_steps': None,
        'max_nesting': 128,
    }

    def __init__(self, setting: Optional[dict] = None, *,
                 output: Optional[TextIO] = None) -> None:
        # Update setting.
        self.setting = deepcopy(self.setting)
        if setting:
            self.setting.update(setting)
        # Initialize components.
        self._logger = logging.getLogger('tiel.interpreter')
        self._evaluator = Evaluator(output,
                                    max_depth=self.setting['max_depth'],
                                    max_steps=self.setting['max_steps'])
        self._globals: Optional[Environment] = None
        self._reserve_stack()

    def __repr__(self) -> str:
        return (f'<{self.__class__.__name__} max_depth={self.setting["max_depth"]} '
                f'max_steps={self.setting["max_steps"]}>')

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.reset()

    def _reserve_stack(self) -> None:
        limit = self.setting['max_depth'] * FRAMES_PER_CALL + 1000
        if sys.getrecursionlimit() < limit:
            self._logger.debug(f'raising recursion limit to {limit}')
            sys.setrecursionlimit(limit)

    @property
    def globals(self) -> Environment:
        '''Root scope kept across ``run`` calls of a session.'''
        if self._globals is None:
            self._globals = self.new_environment()
        return self._globals

    def new_environment(self) -> Environment:
        return self._evaluator.make_globals()

    def reset(self) -> None:
        self._globals = None

    def parse(self, source: str) -> ast.Program:
        lexer = Lexer(source)
        parser = Parser(lexer, max_nesting=self.setting['max_nesting'])
        program = parser.parse()
        self._logger.debug(f'parsed {len(program.statements)} statements')
        return program

    def run(self, source: str, env: Optional[Environment] = None) -> Any:
        '''Lex, parse and evaluate ``source``.

        Without ``env`` the program runs against a fresh root scope. Errors
        from any stage propagate to the caller unchanged.
        '''
        self._logger.debug(f'running {len(source)} chars')
        program = self.parse(source)
        if env is None:
            env = self.new_environment()
        return self._evaluator.eval(program, env)

    def run_session(self, source: str) -> Any:
        '''Run ``source`` against the persistent root scope.'''
        return self.run(source, self.globals)
