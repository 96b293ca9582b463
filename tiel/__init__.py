'''TiEL, a tiny teaching language'''


__version__ = '0.1.0'

from .interpreter import Interpreter, InterpreterError
