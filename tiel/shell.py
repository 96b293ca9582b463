'''Interactive mode for the tiel interpreter, built on cmd.'''

import cmd
import sys
from typing import Optional, TextIO

from .interpreter import Interpreter, InterpreterError, stringify


class Shell(cmd.Cmd):
    '''TiEL read-eval-print loop.

    Every line is parsed as a program of its own and evaluated against the
    interpreter's persistent root scope, so bindings survive between lines.
    '''

    intro = "TiEL interpreter\nType 'exit' or press Ctrl-D to leave."
    prompt = '> '
    commands = ('EOF', 'exit', 'help', 'reset')

    def __init__(self, interpreter: Interpreter, *args,
                 stderr: Optional[TextIO] = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.interpreter = interpreter
        self._stderr = stderr

    @property
    def stderr(self) -> TextIO:
        return self._stderr or sys.stderr

    def onecmd(self, line: str) -> bool:
        # Only a bare command word reaches a do_ method, so TiEL code such
        # as `reset(1)` or `help + 1` is evaluated like any other line.
        command = line.strip()
        if command in self.commands:
            return super().onecmd(command)
        if not command:
            return self.emptyline()
        self.default(line)
        return False

    def default(self, line: str) -> None:
        try:
            result = self.interpreter.run_session(line)
        except InterpreterError as exc:
            print(exc.format(), file=self.stderr)
            return
        if result is not None:
            print(stringify(result), file=self.stdout)

    def emptyline(self) -> bool:
        return False

    def do_reset(self, arg: str) -> None:
        '''Forget every binding made in this session.'''
        self.interpreter.reset()

    def do_EOF(self, arg: str) -> bool:
        '''Exit the interpreter.'''
        print(file=self.stdout)
        return True

    def do_exit(self, arg: str) -> bool:
        '''Exit the interpreter.'''
        return True
