import unittest

from ..interpreter.ast import *
from ..interpreter.exceptions import ParserError, ResourceLimitError
from ..interpreter.lexer import Lexer
from ..interpreter.parser import Parser, parse
from ..interpreter.printer import dump
from ..interpreter.token import TokenKind


class TestParser(unittest.TestCase):

    def test_parser(self):
        source = '''
            var limit = 10;

            fun count(n) {
                var i = 0;
                while i < n do {
                    i = i + 1;
                }
                return i;
            }

            if count(limit) == 10 then print("done"); else { print(-1); }
        '''

        expected_program = Program((
            VarDeclaration('limit', Literal(10.0)),
            FunctionDeclaration(
                FunctionDefinition(
                    name='count',
                    params=('n',),
                    body=Block((
                        VarDeclaration('i', Literal(0.0)),
                        Loop(
                            condition=BinaryOp('<', Identifier('i'), Identifier('n')),
                            body=Block((
                                ExpressionStatement(
                                    Assignment(
                                        'i',
                                        BinaryOp('+', Identifier('i'), Literal(1.0)),
                                    )
                                ),
                            )),
                        ),
                        Return(Identifier('i')),
                    )),
                )
            ),
            Conditional(
                condition=BinaryOp(
                    '==',
                    FunctionCall(Identifier('count'), (Identifier('limit'),)),
                    Literal(10.0),
                ),
                then_branch=ExpressionStatement(
                    FunctionCall(Identifier('print'), (Literal('done'),))
                ),
                else_branch=Block((
                    ExpressionStatement(
                        FunctionCall(Identifier('print'), (UnaryOp('-', Literal(1.0)),))
                    ),
                )),
            ),
        ))

        lexer = Lexer(source)
        parser = Parser(lexer)
        program = parser.parse()
        self.assertEqual(program, expected_program)

    def test_precedence(self):
        self.assertEqual(
            parse('1 + 2 * 3;').statements[0].expr,
            BinaryOp('+', Literal(1.0), BinaryOp('*', Literal(2.0), Literal(3.0))),
        )
        self.assertEqual(
            parse('(1 + 2) * 3;').statements[0].expr,
            BinaryOp('*', BinaryOp('+', Literal(1.0), Literal(2.0)), Literal(3.0)),
        )
        self.assertEqual(
            parse('not a == b or c and d;').statements[0].expr,
            BinaryOp(
                'or',
                BinaryOp('==', UnaryOp('not', Identifier('a')), Identifier('b')),
                BinaryOp('and', Identifier('c'), Identifier('d')),
            ),
        )
        self.assertEqual(
            parse('a < b == c >= d;').statements[0].expr,
            BinaryOp(
                '==',
                BinaryOp('<', Identifier('a'), Identifier('b')),
                BinaryOp('>=', Identifier('c'), Identifier('d')),
            ),
        )

    def test_associativity(self):
        self.assertEqual(
            parse('8 - 4 - 2;').statements[0].expr,
            BinaryOp('-', BinaryOp('-', Literal(8.0), Literal(4.0)), Literal(2.0)),
        )
        self.assertEqual(
            parse('a = b = 3;').statements[0].expr,
            Assignment('a', Assignment('b', Literal(3.0))),
        )
        self.assertEqual(
            parse('f(1)(2);').statements[0].expr,
            FunctionCall(FunctionCall(Identifier('f'), (Literal(1.0),)), (Literal(2.0),)),
        )

    def test_literals(self):
        statements = parse('true; false; nil; "s"; 0x10;').statements
        self.assertEqual([stmt.expr for stmt in statements], [
            Literal(True), Literal(False), Literal(None), Literal('s'), Literal(16.0),
        ])

    def test_anonymous_function(self):
        self.assertEqual(
            parse('var add = fun (a, b) { return a + b; };').statements[0],
            VarDeclaration('add', FunctionDefinition(
                None, ('a', 'b'),
                Block((Return(BinaryOp('+', Identifier('a'), Identifier('b'))),)),
            )),
        )

    def test_optional_semicolon(self):
        self.assertEqual(
            parse('var x = 1; { x }'),
            Program((
                VarDeclaration('x', Literal(1.0)),
                Block((ExpressionStatement(Identifier('x')),)),
            )),
        )
        self.assertEqual(parse('fun f() { return }').statements[0].function.body,
                         Block((Return(),)))

    def test_positions(self):
        program = parse('var x = 1;\nx = x  / 2;')
        assignment = program.statements[1].expr
        self.assertEqual(program.statements[0].pos, Position(1, 1))
        self.assertEqual(assignment.pos, Position(2, 1))
        self.assertEqual(assignment.value.pos, Position(2, 8))
        self.assertEqual(assignment.value.right.pos, Position(2, 10))

    def test_immutable(self):
        node = parse('1;').statements[0]
        with self.assertRaises(AttributeError):
            node.expr = Literal(2.0)

    def test_dump(self):
        source = '''
            var x = 1 + 2;
            fun twice(f) { return fun (v) { return f(f(v)); }; }
            while not (x > 3) do x = -x;
            if x == nil then {} else "s";
        '''
        expected = '\n'.join([
            '(VarDeclaration x (BinaryOp + (Literal 1) (Literal 2)))',
            '(FunctionDefinition twice (f) (Block (Return (FunctionDefinition '
            '<anonymous> (v) (Block (Return (FunctionCall (Identifier f) '
            '(FunctionCall (Identifier f) (Identifier v)))))))))',
            '(Loop (UnaryOp not (BinaryOp > (Identifier x) (Literal 3))) '
            '(Assignment x (UnaryOp - (Identifier x))))',
            "(Conditional (BinaryOp == (Identifier x) (Literal nil)) (Block) (Literal 's'))",
        ])
        self.assertEqual(dump(parse(source)), expected)

    def test_error(self):
        source = 'var = 1;'
        lexer = Lexer(source)
        parser = Parser(lexer)
        with self.assertRaises(ParserError) as cm:
            parser.parse()
        self.assertEqual(str(cm.exception), "Expected identifier after 'var', got '='.")
        self.assertEqual((cm.exception.line, cm.exception.column), (1, 5))
        self.assertEqual(cm.exception.expected, (TokenKind.IDENTIFIER,))
        self.assertEqual(cm.exception.found, TokenKind.EQUAL)
        self.assertEqual(cm.exception.format(),
                         "ParseError at line 1, column 5: Expected identifier after 'var', got '='.")

        with self.assertRaisesRegex(ParserError, 'Invalid assignment target'):
            parse('1 = 2;')

        with self.assertRaisesRegex(ParserError, 'Cannot return from top-level code'):
            parse('return 1;')

        with self.assertRaisesRegex(ParserError, "Expected 'then' after if condition, got '1'"):
            parse('if x 1;')

        with self.assertRaisesRegex(ParserError, "Expected 'do' after loop condition"):
            parse('while x { }')

        with self.assertRaisesRegex(ParserError, "Expected '\\)' after expression, got end of input"):
            parse('(1 + 2')

        with self.assertRaisesRegex(ParserError, "Duplicate parameter 'a'"):
            parse('fun f(a, a) {}')

        with self.assertRaisesRegex(ParserError, "Expected ';' after expression, got 'y'"):
            parse('x y')

        with self.assertRaisesRegex(ParserError, "Expected expression, got '\\['"):
            parse('[1];')

        with self.assertRaisesRegex(ParserError, "Expected '}' after block, got end of input"):
            parse('{ var a = 1;')

    def test_first_error_only(self):
        with self.assertRaises(ParserError) as cm:
            parse('var a = ;\nvar = 2;')
        self.assertEqual((cm.exception.line, cm.exception.column), (1, 9))

    def test_nesting_limit(self):
        with self.assertRaises(ResourceLimitError) as cm:
            parse('(' * 10 + '1' + ')' * 10 + ';', max_nesting=8)
        self.assertEqual(str(cm.exception), 'Maximum nesting depth of 8 exceeded.')
        self.assertEqual((cm.exception.line, cm.exception.column), (1, 8))

        self.assertEqual(parse('((1));', max_nesting=8),
                         Program((ExpressionStatement(Literal(1.0)),)))

        for source in ['(' * 3000 + '1' + ')' * 3000,
                       'not ' * 3000 + 'true',
                       'if true then ' * 3000 + 'nil;',
                       '{' * 3000 + '}' * 3000]:
            with self.subTest(source=source[:20]):
                with self.assertRaisesRegex(ResourceLimitError, 'Maximum nesting depth'):
                    parse(source)
