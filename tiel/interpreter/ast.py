from dataclasses import dataclass, field
from typing import Any, Optional, Tuple


#-----------------------------------------------------------------------
# Nodes
#-----------------------------------------------------------------------


@dataclass(frozen=True)
class Position:

    line: int
    column: int

    def __str__(self) -> str:
        return f'line {self.line}, column {self.column}'


@dataclass(frozen=True)
class Node:

    # Where diagnostics point: the operator for BinaryOp/UnaryOp, the
    # opening paren for FunctionCall, otherwise the first token.
    # Not part of node equality.
    pos: Optional[Position] = field(default=None, compare=False, repr=False,
                                    kw_only=True)


#-----------------------------------------------------------------------
# Expressions
#-----------------------------------------------------------------------


@dataclass(frozen=True)
class Expression(Node):
    pass


@dataclass(frozen=True)
class Literal(Expression):

    value: Any


@dataclass(frozen=True)
class Identifier(Expression):

    name: str


@dataclass(frozen=True)
class BinaryOp(Expression):

    op: str
    left: Expression
    right: Expression


@dataclass(frozen=True)
class UnaryOp(Expression):

    op: str
    operand: Expression


@dataclass(frozen=True)
class Assignment(Expression):

    name: str
    value: Expression


@dataclass(frozen=True)
class FunctionCall(Expression):

    callee: Expression
    args: Tuple[Expression, ...] = ()


@dataclass(frozen=True)
class FunctionDefinition(Expression):
    '''``fun name(params) { body }``; ``name`` is None for anonymous functions.'''

    name: Optional[str]
    params: Tuple[str, ...]
    body: 'Block'


#-----------------------------------------------------------------------
# Statements
#-----------------------------------------------------------------------


@dataclass(frozen=True)
class Statement(Node):
    pass


@dataclass(frozen=True)
class Program(Node):

    statements: Tuple[Statement, ...] = ()


@dataclass(frozen=True)
class ExpressionStatement(Statement):

    expr: Expression


@dataclass(frozen=True)
class VarDeclaration(Statement):

    name: str
    value: Expression


@dataclass(frozen=True)
class FunctionDeclaration(Statement):
    '''Binds a named function in the current scope; evaluates to nil.'''

    function: FunctionDefinition


@dataclass(frozen=True)
class Block(Statement):

    statements: Tuple[Statement, ...] = ()


@dataclass(frozen=True)
class Conditional(Statement):

    condition: Expression
    then_branch: Statement
    else_branch: Optional[Statement] = None


@dataclass(frozen=True)
class Loop(Statement):

    condition: Expression
    body: Statement


@dataclass(frozen=True)
class Return(Statement):

    value: Optional[Expression] = None
