#!/usr/bin/env python3
"""
JSEL command-line tool - evaluate an expression tree stored as JSON.

Usage:
    python -m jsel [FILE] [options]

Options:
    FILE                JSON document to evaluate (default: read stdin)
    --show-ast          Print the decoded expression before evaluating it
    --max-depth N       Maximum expression nesting depth (default: 300)
    --dynamic-scope     Evaluate closure calls with dynamic scoping
    --no-demo-bindings  Start with no predefined variables
    --bind NAME=INT     Predefine an integer variable (repeatable)
    --verbose           Log debug output to stderr
    --help              Show this help message
"""

import argparse
import logging
import sys
import traceback
from typing import Dict, List, TextIO

from jsel.jsel import JSEL
from jsel.jsel_error import JSELError
from jsel.jsel_evaluator import JSELEvaluator, JSELScoping
from jsel.jsel_math import INTEGER_MIN, INTEGER_MAX
from jsel.jsel_output import JSELStreamOutputWatcher


def setup_logging(verbose: bool) -> None:
    """Configure logging to stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr
    )


class JSELCli:
    """
    Command-line application.

    Coordinates:
    - Reading the document
    - Decoding and evaluating it
    - Reporting the result or the error
    """

    def __init__(
        self,
        args: argparse.Namespace,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None
    ):
        """
        Initialize the application with command-line arguments.

        Args:
            args: Parsed command-line arguments
            stdin: Stream to read the document from when no file is given
            stdout: Stream for results and printed output
            stderr: Stream for diagnostics
        """
        self.args = args
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.stderr = stderr if stderr is not None else sys.stderr
        self._logger = logging.getLogger("JSELCli")

    def run(self) -> int:
        """
        Run the application.

        Returns:
            Exit code (0 for success, non-zero for failure)
        """
        try:
            initial_bindings = self._initial_bindings()
            if initial_bindings is None:
                return 1

            document = self._read_document()
            if document is None:
                return 1

            jsel = JSEL(
                max_depth=self.args.max_depth,
                scoping=JSELScoping.DYNAMIC if self.args.dynamic_scope else JSELScoping.LEXICAL,
                output=JSELStreamOutputWatcher(self.stdout),
                initial_bindings=initial_bindings
            )

            expr = jsel.decode(document)
            if self.args.show_ast:
                print(expr.describe(), file=self.stdout)

            result = jsel.evaluate_ast(expr)
            print(result.describe(), file=self.stdout)
            return 0

        except JSELError as e:
            print(str(e), file=self.stderr)
            return 1

        except KeyboardInterrupt:
            self._print_error("Interrupted by user")
            return 130

        except Exception as e:
            self._print_error(f"Unexpected error: {e}")
            if self.args.verbose:
                traceback.print_exc(file=self.stderr)

            return 1

    def _initial_bindings(self) -> Dict[str, int | bool | str] | None:
        """Work out the predefined variables, or None after reporting a bad --bind."""
        bindings: Dict[str, int | bool | str] = {}
        if not self.args.no_demo_bindings:
            bindings.update({name: value.to_python() for name, value in JSELEvaluator.DEFAULT_BINDINGS.items()})

        for entry in self.args.bind:
            name, sep, value = entry.partition('=')
            if not sep or not name:
                self._print_error(f"Invalid --bind '{entry}': expected NAME=INT")
                return None

            try:
                number = int(value)

            except ValueError:
                self._print_error(f"Invalid --bind '{entry}': '{value}' is not an integer")
                return None

            if number < INTEGER_MIN or number > INTEGER_MAX:
                self._print_error(f"Invalid --bind '{entry}': '{value}' is out of range")
                return None

            bindings[name] = number

        return bindings

    def _read_document(self) -> str | None:
        """Read the document from the file argument or stdin."""
        if self.args.file is None or self.args.file == '-':
            self._logger.debug("Reading document from stdin")
            return self.stdin.read()

        try:
            with open(self.args.file, 'r', encoding='utf-8') as f:
                return f.read()

        except FileNotFoundError:
            self._print_error(f"Document '{self.args.file}' not found")
            return None

        except PermissionError:
            self._print_error(f"Permission denied reading '{self.args.file}'")
            return None

        except UnicodeDecodeError as e:
            self._print_error(f"Cannot decode '{self.args.file}' as UTF-8: {e}")
            return None

        except IsADirectoryError:
            self._print_error(f"'{self.args.file}' is a directory")
            return None

    def _print_error(self, message: str) -> None:
        """Print error message."""
        print(f"Error: {message}", file=self.stderr)


def parse_arguments(argv: List[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="jsel",
        description="Evaluate a JSEL expression tree stored as a JSON document",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Evaluate a document from stdin
  echo '{"Application": [{"Identifier": "add"}, {"Number": 2}, {"Number": 3}]}' | python -m jsel

  # Evaluate a file and show the decoded expression
  python -m jsel program.json --show-ast

  # Replace the demonstration variables
  python -m jsel program.json --no-demo-bindings --bind limit=100
        """
    )

    parser.add_argument(
        'file',
        nargs='?',
        help='JSON document to evaluate (default: stdin)'
    )

    parser.add_argument(
        '--show-ast',
        action='store_true',
        help='Print the decoded expression before evaluating it'
    )

    parser.add_argument(
        '--max-depth',
        type=int,
        default=300,
        help='Maximum expression nesting depth (default: 300)'
    )

    parser.add_argument(
        '--dynamic-scope',
        action='store_true',
        help='Evaluate closure calls with dynamic scoping'
    )

    parser.add_argument(
        '--no-demo-bindings',
        action='store_true',
        help='Start with no predefined variables'
    )

    parser.add_argument(
        '--bind',
        action='append',
        default=[],
        metavar='NAME=INT',
        help='Predefine an integer variable (repeatable)'
    )

    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Log debug output to stderr'
    )

    return parser.parse_args(argv)


def main(argv: List[str] | None = None) -> int:
    """Main entry point."""
    args = parse_arguments(argv)
    setup_logging(args.verbose)
    cli = JSELCli(args)
    return cli.run()


if __name__ == "__main__":
    sys.exit(main())
