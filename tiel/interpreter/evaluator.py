from __future__ import annotations

import logging
import operator
import sys
import time
from functools import partial
from typing import Any, Iterable, List, Optional, TextIO

from pampy import _, match

from . import ast
from .environment import Environment
from .exceptions import (ArityError, DivisionError, EvaluatorError,
                         OperandTypeError, ResourceLimitError)
from .values import (Function, NativeFunction, ReturnSignal, is_callable,
                     is_equal, is_number, is_truthy, stringify, type_name)


ARITHMETIC = {
    '+': operator.add,
    '-': operator.sub,
    '*': operator.mul,
    '/': operator.truediv,
}

COMPARISON = {
    '<': operator.lt,
    '<=': operator.le,
    '>': operator.gt,
    '>=': operator.ge,
}


class Evaluator:

    def __init__(self, output: Optional[TextIO] = None, *,
                 max_depth: int = 256,
                 max_steps: Optional[int] = None) -> None:
        self._output = output
        self._max_depth = max_depth
        self._max_steps = max_steps
        self._depth = 0
        self._steps = 0
        self._logger = logging.getLogger('tiel.evaluator')

    @property
    def output(self) -> TextIO:
        return self._output or sys.stdout

    def make_globals(self) -> Environment:
        '''Root scope holding the builtin functions.'''
        env = Environment()
        env.define('print', NativeFunction('print', 1, self._print))
        env.define('str', NativeFunction('str', 1, stringify))
        env.define('clock', NativeFunction('clock', 0, time.time))
        return env

    def eval(self, program: ast.Program,
             env: Optional[Environment] = None) -> Any:
        env = env if env is not None else self.make_globals()
        self._depth = 0
        self._steps = 0
        result = None
        for stmt in program.statements:
            result = self.evaluate(stmt, env)
            if isinstance(result, ReturnSignal):
                raise EvaluatorError('Cannot return from top-level code.')
        self._logger.debug(f'program evaluated in {self._steps} steps')
        return result

    def evaluate(self, node: ast.Node, env: Environment) -> Any:
        try:
            return self._eval(node, env)
        except RecursionError:
            self._logger.debug(f'host recursion limit hit at call depth {self._depth}')
            raise ResourceLimitError('Maximum recursion depth exceeded.',
                                     *self._position(node)) from None

    #-------------------------------------------------------------------
    # Dispatch
    #-------------------------------------------------------------------

    def _eval(self, node: ast.Node, env: Environment) -> Any:
        self._steps += 1
        if self._max_steps is not None and self._steps > self._max_steps:
            raise ResourceLimitError(f'Step limit of {self._max_steps} exceeded.',
                                     *self._position(node))
        try:
            return match(node,
                ast.Literal, lambda node: node.value,
                ast.Identifier, lambda node: env.get(node.name),
                ast.BinaryOp, partial(self._eval_binary_op, env=env),
                ast.UnaryOp, partial(self._eval_unary_op, env=env),
                ast.Assignment, partial(self._eval_assignment, env=env),
                ast.FunctionCall, partial(self._eval_function_call, env=env),
                ast.FunctionDefinition, partial(self._eval_function_definition, env=env),
                ast.ExpressionStatement, lambda node: self._eval(node.expr, env),
                ast.VarDeclaration, partial(self._eval_var_declaration, env=env),
                ast.FunctionDeclaration, partial(self._eval_function_declaration, env=env),
                ast.Block, partial(self._eval_block, env=env),
                ast.Conditional, partial(self._eval_conditional, env=env),
                ast.Loop, partial(self._eval_loop, env=env),
                ast.Return, partial(self._eval_return, env=env),
                ast.Program, lambda node: self._eval_statements(node.statements, env),
                _, self._eval_unknown,
            )
        except EvaluatorError as exc:
            if node.pos is not None:
                exc.at(node.pos.line, node.pos.column)
            raise

    def _position(self, node: ast.Node) -> tuple:
        if node.pos is None:
            return None, None
        return node.pos.line, node.pos.column

    def _eval_unknown(self, node: Any) -> Any:
        raise EvaluatorError(f'Cannot evaluate {type(node).__name__}.')

    def _eval_statements(self, statements: Iterable[ast.Statement],
                         env: Environment) -> Any:
        result = None
        for stmt in statements:
            result = self._eval(stmt, env)
            if isinstance(result, ReturnSignal):
                break
        return result

    #-------------------------------------------------------------------
    # Evaluate Expressions
    #-------------------------------------------------------------------

    def _eval_binary_op(self, node: ast.BinaryOp, env: Environment) -> Any:
        if node.op == 'and':
            return is_truthy(self._eval(node.left, env)) and is_truthy(self._eval(node.right, env))
        if node.op == 'or':
            return is_truthy(self._eval(node.left, env)) or is_truthy(self._eval(node.right, env))

        left = self._eval(node.left, env)
        right = self._eval(node.right, env)

        if node.op == '==':
            return is_equal(left, right)
        if node.op == '!=':
            return not is_equal(left, right)

        if not (is_number(left) and is_number(right)):
            raise OperandTypeError(
                f"Operands to '{node.op}' must be numbers, "
                f'got {type_name(left)} and {type_name(right)}.')
        if node.op in COMPARISON:
            return COMPARISON[node.op](left, right)
        if node.op == '/' and right == 0:
            raise DivisionError('Division by zero.')
        return ARITHMETIC[node.op](left, right)

    def _eval_unary_op(self, node: ast.UnaryOp, env: Environment) -> Any:
        operand = self._eval(node.operand, env)
        if node.op == 'not':
            return not is_truthy(operand)
        if not is_number(operand):
            raise OperandTypeError(
                f"Operand to '{node.op}' must be a number, got {type_name(operand)}.")
        return -operand

    def _eval_assignment(self, node: ast.Assignment, env: Environment) -> Any:
        value = self._eval(node.value, env)
        env.assign(node.name, value)
        return value

    def _eval_function_definition(self, node: ast.FunctionDefinition,
                                  env: Environment) -> Function:
        return Function(node, env)

    def _eval_function_call(self, node: ast.FunctionCall, env: Environment) -> Any:
        callee = self._eval(node.callee, env)
        if not is_callable(callee):
            raise OperandTypeError(f'Can only call functions, got {type_name(callee)}.')
        args = [self._eval(arg, env) for arg in node.args]
        if len(args) != callee.arity:
            raise ArityError(callee.arity, len(args))
        if isinstance(callee, NativeFunction):
            return callee.func(*args)
        return self._call_function(callee, args)

    def _call_function(self, function: Function, args: List[Any]) -> Any:
        if self._depth >= self._max_depth:
            raise ResourceLimitError(
                f'Maximum call depth of {self._max_depth} exceeded.')
        scope = function.closure.child_scope()
        for param, arg in zip(function.definition.params, args):
            scope.define(param, arg)
        self._depth += 1
        try:
            result = self._eval_statements(function.definition.body.statements, scope)
        finally:
            self._depth -= 1
        if isinstance(result, ReturnSignal):
            return result.value
        return None

    #-------------------------------------------------------------------
    # Evaluate Statements
    #-------------------------------------------------------------------

    def _eval_var_declaration(self, node: ast.VarDeclaration, env: Environment) -> Any:
        env.define(node.name, self._eval(node.value, env))
        return None

    def _eval_function_declaration(self, node: ast.FunctionDeclaration,
                                   env: Environment) -> Any:
        env.define(node.function.name, Function(node.function, env))
        return None

    def _eval_block(self, node: ast.Block, env: Environment) -> Any:
        return self._eval_statements(node.statements, env.child_scope())

    def _condition(self, node: ast.Expression, env: Environment) -> bool:
        value = self._eval(node, env)
        if not isinstance(value, bool):
            raise OperandTypeError(
                f'Condition must be a boolean, got {type_name(value)}.',
                *self._position(node))
        return value

    def _eval_conditional(self, node: ast.Conditional, env: Environment) -> Any:
        if self._condition(node.condition, env):
            return self._eval(node.then_branch, env)
        elif node.else_branch is not None:
            return self._eval(node.else_branch, env)
        return None

    def _eval_loop(self, node: ast.Loop, env: Environment) -> Any:
        while self._condition(node.condition, env):
            result = self._eval(node.body, env.child_scope())
            if isinstance(result, ReturnSignal):
                return result
        return None

    def _eval_return(self, node: ast.Return, env: Environment) -> ReturnSignal:
        if node.value is None:
            return ReturnSignal()
        return ReturnSignal(self._eval(node.value, env))

    #-------------------------------------------------------------------
    # Builtins
    #-------------------------------------------------------------------

    def _print(self, value: Any) -> None:
        print(stringify(value), file=self.output)


def evaluate(node: ast.Node, env: Optional[Environment] = None) -> Any:
    '''Evaluate a single node with a default evaluator.'''
    evaluator = Evaluator()
    if env is None:
        env = evaluator.make_globals()
    return evaluator.evaluate(node, env)
