import io
import unittest

from ..interpreter import Interpreter
from ..interpreter.evaluator import evaluate
from ..interpreter.exceptions import (InterpreterError, LexerError,
                                      ParserError, ResourceLimitError,
                                      UndefinedNameError)
from ..interpreter.lexer import tokenize
from ..interpreter.parser import parse


class TestInterpreter(unittest.TestCase):

    def test_single(self):
        source = '''
            fun square(x) { return x * x; }
            square(3) + 1
        '''

        interpreter = Interpreter()
        result = interpreter.run(source)
        self.assertEqual(result, 10.0)

    def test_context(self):
        output = io.StringIO()
        with Interpreter(output=output) as interpreter:
            interpreter.run('print("Hello World!");')
        self.assertEqual(output.getvalue(), 'Hello World!\n')

    def test_stages(self):
        for source, expected in [('1 + 2 * 3', 7.0), ('(1 + 2) * 3', 9.0),
                                 ('2 * 3 - 4 / 8', 5.5), ('1 - -1', 2.0)]:
            with self.subTest(source=source):
                self.assertEqual(evaluate(parse(tokenize(source))), expected)

    def test_fresh_environment(self):
        interpreter = Interpreter()
        interpreter.run('var a = 1;')
        with self.assertRaises(UndefinedNameError):
            interpreter.run('a')

    def test_session(self):
        interpreter = Interpreter()
        interpreter.run_session('var a = 1;')
        interpreter.run_session('fun inc() { a = a + 1; return a; }')
        interpreter.run_session('inc();')
        self.assertEqual(interpreter.run_session('inc()'), 3.0)
        self.assertEqual(interpreter.globals.get('a'), 3.0)

        with self.assertRaises(UndefinedNameError):
            interpreter.run_session('b')
        self.assertEqual(interpreter.run_session('a'), 3.0)

        interpreter.reset()
        with self.assertRaises(UndefinedNameError):
            interpreter.run_session('a')

    def test_setting(self):
        interpreter = Interpreter({'max_steps': 50})
        self.assertEqual(interpreter.setting['max_steps'], 50)
        self.assertEqual(interpreter.setting['max_depth'], Interpreter.setting['max_depth'])
        self.assertIsNone(Interpreter.setting['max_steps'])
        with self.assertRaisesRegex(InterpreterError, 'Step limit of 50 exceeded'):
            interpreter.run('while true do {}')

    def test_error_stages(self):
        interpreter = Interpreter()
        with self.assertRaises(LexerError):
            interpreter.run('var a = 1 # 2;')
        with self.assertRaises(ParserError):
            interpreter.run('var a = ;')

        output = io.StringIO()
        interpreter = Interpreter(output=output)
        with self.assertRaises(UndefinedNameError):
            interpreter.run('print("before"); missing; print("after");')
        self.assertEqual(output.getvalue(), 'before\n')

    def test_parse_error_skips_evaluation(self):
        output = io.StringIO()
        interpreter = Interpreter(output=output)
        with self.assertRaises(ParserError):
            interpreter.run('print("never"); var = 2;')
        self.assertEqual(output.getvalue(), '')

    def test_limits_outside_cli(self):
        interpreter = Interpreter()
        with self.assertRaises(ResourceLimitError) as cm:
            interpreter.run('fun down(n) { return down(n + 1); } down(0);')
        self.assertEqual(cm.exception.format(),
                         'ResourceLimitError at line 1, column 26: '
                         'Maximum call depth of 256 exceeded.')
        self.assertEqual(interpreter.run('fun up(n) { if n == 200 then return n; '
                                         'return up(n + 1); } up(0)'), 200.0)

        with self.assertRaisesRegex(ResourceLimitError, 'Maximum nesting depth of 128 exceeded'):
            interpreter.run('(' * 3000 + '1' + ')' * 3000)
        with self.assertRaisesRegex(ResourceLimitError, 'Maximum nesting depth of 128 exceeded'):
            interpreter.run('not ' * 3000 + 'true')
        with self.assertRaisesRegex(ResourceLimitError, 'Maximum nesting depth of 3 exceeded'):
            Interpreter({'max_nesting': 3}).run('-(-(-1))')
