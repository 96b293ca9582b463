from typing import Any

from pampy import _, match

from . import ast
from .values import stringify


def _sexpr(name: str, *parts: Any) -> str:
    return '(' + ' '.join([name, *(str(part) for part in parts)]) + ')'


def _literal(node: ast.Literal) -> str:
    if isinstance(node.value, str):
        return _sexpr('Literal', repr(node.value))
    return _sexpr('Literal', stringify(node.value))


def _function(node: ast.FunctionDefinition) -> str:
    params = '(' + ' '.join(node.params) + ')'
    return _sexpr('FunctionDefinition', node.name or '<anonymous>',
                  params, dump(node.body))


def _conditional(node: ast.Conditional) -> str:
    parts = [dump(node.condition), dump(node.then_branch)]
    if node.else_branch is not None:
        parts.append(dump(node.else_branch))
    return _sexpr('Conditional', *parts)


def dump(node: ast.Node) -> str:
    '''Render ``node`` as an S-expression.'''
    return match(node,
        ast.Literal, _literal,
        ast.Identifier, lambda node: _sexpr('Identifier', node.name),
        ast.BinaryOp, lambda node: _sexpr('BinaryOp', node.op, dump(node.left), dump(node.right)),
        ast.UnaryOp, lambda node: _sexpr('UnaryOp', node.op, dump(node.operand)),
        ast.Assignment, lambda node: _sexpr('Assignment', node.name, dump(node.value)),
        ast.FunctionCall, lambda node: _sexpr('FunctionCall', dump(node.callee), *map(dump, node.args)),
        ast.FunctionDefinition, _function,
        ast.ExpressionStatement, lambda node: dump(node.expr),
        ast.VarDeclaration, lambda node: _sexpr('VarDeclaration', node.name, dump(node.value)),
        ast.FunctionDeclaration, lambda node: dump(node.function),
        ast.Block, lambda node: _sexpr('Block', *map(dump, node.statements)),
        ast.Conditional, _conditional,
        ast.Loop, lambda node: _sexpr('Loop', dump(node.condition), dump(node.body)),
        ast.Return, lambda node: _sexpr('Return', *([] if node.value is None else [dump(node.value)])),
        ast.Program, lambda node: '\n'.join(map(dump, node.statements)),
        _, lambda node: repr(node),
    )
