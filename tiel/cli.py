'''Command line entry point: run a TiEL file, standard input, or a REPL.'''

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .interpreter import Interpreter, InterpreterError, tokenize
from .interpreter.printer import dump
from .shell import Shell


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='tiel', description='Run a TiEL program.')
    parser.add_argument('file', nargs='?',
                        help="program to run, '-' for standard input "
                             '(if empty, starts the interactive shell)')
    parser.add_argument('--tokens', action='store_true',
                        help='print the tokens of the program before running it')
    parser.add_argument('--ast', action='store_true',
                        help='print the syntax tree of the program before running it')
    parser.add_argument('--max-depth', type=int, default=Interpreter.setting['max_depth'],
                        help='maximum function call depth')
    parser.add_argument('--max-steps', type=int, default=Interpreter.setting['max_steps'],
                        help='maximum number of evaluation steps')
    parser.add_argument('--max-nesting', type=int, default=Interpreter.setting['max_nesting'],
                        help='maximum nesting depth of statements and expressions')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='log debug output')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')
    logger = logging.getLogger('tiel.cli')

    interpreter = Interpreter({'max_depth': args.max_depth,
                               'max_steps': args.max_steps,
                               'max_nesting': args.max_nesting})

    if args.file is None and sys.stdin.isatty():
        Shell(interpreter).cmdloop()
        return 0

    if args.file is None or args.file == '-':
        source = sys.stdin.read()
    else:
        try:
            source = Path(args.file).read_text(encoding='utf-8')
        except OSError as exc:
            print(f'tiel: cannot read {args.file}: {exc.strerror}', file=sys.stderr)
            return 2
    logger.debug(f'loaded {args.file or "<stdin>"}')

    try:
        if args.tokens:
            print('Tokens:')
            for token in tokenize(source):
                print(repr(token))
            print()
        if args.ast:
            print('AST:')
            print(dump(interpreter.parse(source)))
            print()
        interpreter.run(source)
    except InterpreterError as exc:
        print(exc.format(), file=sys.stderr)
        return 1
    return 0
