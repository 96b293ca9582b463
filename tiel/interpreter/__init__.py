'''TiEL language engine'''


from .environment import Environment
from .evaluator import Evaluator, evaluate
from .exceptions import (ArityError, DivisionError, EvaluatorError,
                         InterpreterError, LexerError, OperandTypeError,
                         ParserError, ResourceLimitError, UndefinedNameError)
from .interpreter import Interpreter
from .lexer import Lexer, tokenize
from .parser import Parser, parse
from .token import Category, Token, TokenKind
from .values import Function, NativeFunction, stringify
