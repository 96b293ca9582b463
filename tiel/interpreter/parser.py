from typing import Callable, Iterable, List, Optional, Union

from pampy import _, match

from . import ast
from .exceptions import ParserError, ResourceLimitError
from .lexer import tokenize
from .token import Token, TokenKind


class Parser:

    def __init__(self, tokens: Iterable[Token], *, max_nesting: int = 128) -> None:
        self._tokens = iter(tokens)
        self._token: Optional[Token] = None
        self._next_token: Optional[Token] = None
        self._function_depth = 0
        self._max_nesting = max_nesting
        self._nesting = 0
        self._read_token()
        self._read_token()

    def _pull(self) -> Token:
        try:
            return next(self._tokens)
        except StopIteration:
            last = self._next_token or self._token
            if last is None:
                return Token(TokenKind.EOF, '', 1, 1, 0)
            if last.kind is TokenKind.EOF:
                return last
            return Token(TokenKind.EOF, '', last.line,
                         last.column + len(last.text),
                         last.offset + len(last.text))

    def _read_token(self) -> Optional[Token]:
        consumed = self._token
        self._token = self._next_token
        self._next_token = self._pull()
        return consumed

    def parse(self) -> ast.Program:
        statements = []
        try:
            while self._token.kind is not TokenKind.EOF:
                statements.append(self._parse_decl())
        except RecursionError:
            raise ResourceLimitError('Maximum nesting depth exceeded.',
                                     self._token.line, self._token.column) from None
        return ast.Program(tuple(statements), pos=ast.Position(1, 1))

    #-------------------------------------------------------------------
    # Helper Methods
    #-------------------------------------------------------------------

    def _pos(self, token: Token) -> ast.Position:
        return ast.Position(token.line, token.column)

    def _check(self, *kinds: TokenKind) -> bool:
        return self._token.kind in kinds

    def _accept(self, *kinds: TokenKind) -> Optional[Token]:
        if self._check(*kinds):
            return self._read_token()
        return None

    def _error(self, message: str, *expected: TokenKind) -> ParserError:
        token = self._token
        return ParserError(f'{message}, got {token.describe()}.',
                           token.line, token.column,
                           expected=expected, found=token.kind)

    def _require(self, kind: TokenKind, context: str) -> Token:
        if self._check(kind):
            return self._read_token()
        raise self._error(f'Expected {kind} {context}', kind)

    def _enter(self) -> None:
        # Bounds recursion on nested statements and expressions.
        if self._nesting >= self._max_nesting:
            raise ResourceLimitError(
                f'Maximum nesting depth of {self._max_nesting} exceeded.',
                self._token.line, self._token.column)
        self._nesting += 1

    def _leave(self) -> None:
        self._nesting -= 1

    def _end_stmt(self, context: str) -> None:
        # The last statement of a block or program may omit its ';'.
        if self._check(TokenKind.RIGHT_BRACE, TokenKind.EOF):
            return
        self._require(TokenKind.SEMICOLON, context)

    #-------------------------------------------------------------------
    # Parse Statements
    #-------------------------------------------------------------------

    def _parse_decl(self) -> ast.Statement:
        if (self._check(TokenKind.FUN)
                and self._next_token.kind is TokenKind.IDENTIFIER):
            return self._parse_fun_decl()
        return match(self._token.kind,
            TokenKind.VAR, self._parse_var_decl,
            _, lambda _: self._parse_stmt(),
        )

    def _parse_stmt(self) -> ast.Statement:
        self._enter()
        try:
            return match(self._token.kind,
                TokenKind.IF, self._parse_conditional,
                TokenKind.WHILE, self._parse_loop,
                TokenKind.RETURN, self._parse_return,
                TokenKind.LEFT_BRACE, self._parse_block,
                _, lambda _: self._parse_expr_stmt(),
            )
        finally:
            self._leave()

    def _parse_fun_decl(self) -> ast.FunctionDeclaration:
        keyword = self._read_token()
        name = self._read_token()
        function = self._parse_function(keyword, name.text)
        return ast.FunctionDeclaration(function, pos=function.pos)

    def _parse_var_decl(self, _) -> ast.VarDeclaration:
        keyword = self._read_token()
        name = self._require(TokenKind.IDENTIFIER, "after 'var'")
        self._require(TokenKind.EQUAL, 'after variable name')
        value = self._parse_expr()
        self._end_stmt('after variable declaration')
        return ast.VarDeclaration(name.text, value, pos=self._pos(keyword))

    def _parse_conditional(self, _) -> ast.Conditional:
        keyword = self._read_token()
        condition = self._parse_expr()
        self._require(TokenKind.THEN, 'after if condition')
        then_branch = self._parse_stmt()
        else_branch = None
        if self._accept(TokenKind.ELSE):
            else_branch = self._parse_stmt()
        return ast.Conditional(condition, then_branch, else_branch,
                               pos=self._pos(keyword))

    def _parse_loop(self, _) -> ast.Loop:
        keyword = self._read_token()
        condition = self._parse_expr()
        self._require(TokenKind.DO, 'after loop condition')
        body = self._parse_stmt()
        return ast.Loop(condition, body, pos=self._pos(keyword))

    def _parse_return(self, _) -> ast.Return:
        if not self._function_depth:
            raise ParserError('Cannot return from top-level code.',
                              self._token.line, self._token.column,
                              found=self._token.kind)
        keyword = self._read_token()
        value = None
        if not self._check(TokenKind.SEMICOLON, TokenKind.RIGHT_BRACE,
                           TokenKind.EOF):
            value = self._parse_expr()
        self._end_stmt('after return value')
        return ast.Return(value, pos=self._pos(keyword))

    def _parse_block(self, _=None) -> ast.Block:
        brace = self._require(TokenKind.LEFT_BRACE, 'to open block')
        statements = []
        self._enter()
        try:
            while not self._check(TokenKind.RIGHT_BRACE, TokenKind.EOF):
                statements.append(self._parse_decl())
        finally:
            self._leave()
        self._require(TokenKind.RIGHT_BRACE, 'after block')
        return ast.Block(tuple(statements), pos=self._pos(brace))

    def _parse_expr_stmt(self) -> ast.ExpressionStatement:
        expr = self._parse_expr()
        self._end_stmt('after expression')
        return ast.ExpressionStatement(expr, pos=expr.pos)

    #-------------------------------------------------------------------
    # Parse Expressions
    #-------------------------------------------------------------------

    def _parse_expr(self) -> ast.Expression:
        self._enter()
        try:
            return self._parse_assignment()
        finally:
            self._leave()

    def _parse_assignment(self) -> ast.Expression:
        expr = self._parse_or()
        if self._check(TokenKind.EQUAL):
            equals = self._read_token()
            value = self._parse_assignment()
            if isinstance(expr, ast.Identifier):
                return ast.Assignment(expr.name, value, pos=expr.pos)
            raise ParserError('Invalid assignment target.',
                              equals.line, equals.column,
                              expected=(TokenKind.IDENTIFIER,),
                              found=equals.kind)
        return expr

    def _parse_binary(self, operand: Callable[[], ast.Expression],
                      *kinds: TokenKind) -> ast.Expression:
        expr = operand()
        while self._check(*kinds):
            op = self._read_token()
            expr = ast.BinaryOp(op.text, expr, operand(), pos=self._pos(op))
        return expr

    def _parse_or(self) -> ast.Expression:
        return self._parse_binary(self._parse_and, TokenKind.OR)

    def _parse_and(self) -> ast.Expression:
        return self._parse_binary(self._parse_equality, TokenKind.AND)

    def _parse_equality(self) -> ast.Expression:
        return self._parse_binary(self._parse_comparison,
                                  TokenKind.EQUAL_EQUAL, TokenKind.NOT_EQUAL)

    def _parse_comparison(self) -> ast.Expression:
        return self._parse_binary(self._parse_term,
                                  TokenKind.LESS, TokenKind.LESS_EQUAL,
                                  TokenKind.GREATER, TokenKind.GREATER_EQUAL)

    def _parse_term(self) -> ast.Expression:
        return self._parse_binary(self._parse_factor,
                                  TokenKind.PLUS, TokenKind.MINUS)

    def _parse_factor(self) -> ast.Expression:
        return self._parse_binary(self._parse_unary,
                                  TokenKind.STAR, TokenKind.SLASH)

    def _parse_unary(self) -> ast.Expression:
        if self._check(TokenKind.NOT, TokenKind.MINUS):
            op = self._read_token()
            self._enter()
            try:
                operand = self._parse_unary()
            finally:
                self._leave()
            return ast.UnaryOp(op.text, operand, pos=self._pos(op))
        return self._parse_call()

    def _parse_call(self) -> ast.Expression:
        expr = self._parse_primary()
        while self._check(TokenKind.LEFT_PAREN):
            paren = self._read_token()
            args: List[ast.Expression] = []
            if not self._check(TokenKind.RIGHT_PAREN):
                args.append(self._parse_expr())
                while self._accept(TokenKind.COMMA):
                    args.append(self._parse_expr())
            self._require(TokenKind.RIGHT_PAREN, 'after arguments')
            expr = ast.FunctionCall(expr, tuple(args), pos=self._pos(paren))
        return expr

    def _parse_primary(self) -> ast.Expression:
        return match(self._token.kind,
            TokenKind.NUMBER, self._parse_literal,
            TokenKind.STRING, self._parse_literal,
            TokenKind.TRUE, self._parse_literal,
            TokenKind.FALSE, self._parse_literal,
            TokenKind.NIL, self._parse_literal,
            TokenKind.IDENTIFIER, self._parse_identifier,
            TokenKind.LEFT_PAREN, self._parse_group,
            TokenKind.FUN, self._parse_lambda,
            _, self._expected_expr,
        )

    def _parse_literal(self, kind) -> ast.Literal:
        token = self._read_token()
        value = match(token.kind,
            TokenKind.TRUE, True,
            TokenKind.FALSE, False,
            TokenKind.NIL, None,
            _, lambda _: token.value,
        )
        return ast.Literal(value, pos=self._pos(token))

    def _parse_identifier(self, _) -> ast.Identifier:
        token = self._read_token()
        return ast.Identifier(token.text, pos=self._pos(token))

    def _parse_group(self, _) -> ast.Expression:
        self._read_token()
        expr = self._parse_expr()
        self._require(TokenKind.RIGHT_PAREN, 'after expression')
        return expr

    def _parse_lambda(self, _) -> ast.FunctionDefinition:
        keyword = self._read_token()
        return self._parse_function(keyword, None)

    def _parse_function(self, keyword: Token,
                        name: Optional[str]) -> ast.FunctionDefinition:
        self._require(TokenKind.LEFT_PAREN, "before parameters")
        params: List[str] = []
        if not self._check(TokenKind.RIGHT_PAREN):
            while True:
                param = self._require(TokenKind.IDENTIFIER, 'as parameter name')
                if param.text in params:
                    raise ParserError(f"Duplicate parameter '{param.text}'.",
                                      param.line, param.column,
                                      found=param.kind)
                params.append(param.text)
                if not self._accept(TokenKind.COMMA):
                    break
        self._require(TokenKind.RIGHT_PAREN, 'after parameters')
        self._function_depth += 1
        try:
            body = self._parse_block()
        finally:
            self._function_depth -= 1
        return ast.FunctionDefinition(name, tuple(params), body,
                                      pos=self._pos(keyword))

    def _expected_expr(self, _) -> ast.Expression:
        raise self._error('Expected expression',
                          TokenKind.NUMBER, TokenKind.STRING,
                          TokenKind.IDENTIFIER, TokenKind.LEFT_PAREN)


def parse(tokens: Union[str, Iterable[Token]], **kwargs) -> ast.Program:
    '''Parse a token stream (or source text) into a program.'''
    if isinstance(tokens, str):
        tokens = tokenize(tokens)
    return Parser(tokens, **kwargs).parse()
