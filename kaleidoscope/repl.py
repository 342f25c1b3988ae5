"""
Kaleidoscope REPL - thin interactive driver around the lexer and parser.

Reads lines until one contains ';', parses everything read so far and
prints the resulting AST (or the error). Nothing is evaluated.

    $ kaleidoscope-repl
    ready> def add(a b) a + b;
    Parsed: (def add (a b) (+ a b))

Author: xwest
"""

import argparse
import logging
import sys
from typing import List, Optional, Sequence, TextIO

from .lexer import Lexer, TokenType, KaleidoscopeError
from .lexer.tokens import STATEMENT_TERMINATOR
from .parser import Parser, dump


LOG = logging.getLogger(__name__)

DEFAULT_PROMPT = "ready> "


class Repl:
    """Read-parse-print loop over a pair of text streams."""

    def __init__(
        self,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        prompt: str = DEFAULT_PROMPT,
        show_tokens: bool = False
    ):
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.prompt = prompt
        self.show_tokens = show_tokens

    def read_statement(self) -> Optional[str]:
        """
        Read lines until one contains the statement terminator.

        Returns:
            The accumulated text, or None once the input is exhausted
            and nothing was read
        """
        lines = []
        self._write(self.prompt)
        while True:
            line = self.stdin.readline()
            if not line:
                return "".join(lines) if lines else None
            lines.append(line)
            if STATEMENT_TERMINATOR in line:
                return "".join(lines)

    def render(self, source: str, filename: str = "<stdin>") -> List[str]:
        """
        Lex and parse every item in ``source``.

        Raises:
            KaleidoscopeError: On the first lexical or syntax error
        """
        output = []
        tokens = Lexer(source, filename).tokenize()
        if self.show_tokens:
            output.append("Lexed: [" + ", ".join(str(token) for token in tokens[:-1]) + "]")

        for item in Parser(tokens).parse_all():
            output.append(f"Parsed: {dump(item)}")
        return output

    def evaluate(self, source: str) -> str:
        """Render ``source``, reporting an error as an ``Error:`` line."""
        try:
            return "\n".join(self.render(source))
        except KaleidoscopeError as e:
            LOG.debug("Rejected input %r: %s", source, e.message)
            if e.location is not None:
                return f"Error: {e.message} (at {e.location})"
            return f"Error: {e.message}"

    def run(self):
        """Loop until the input stream is exhausted or a statement is empty."""
        while True:
            statement = self.read_statement()
            if statement is None or self._is_empty(statement):
                self._write("\n")
                return
            result = self.evaluate(statement)
            if result:
                self._write(result + "\n")

    @staticmethod
    def _is_empty(statement: str) -> bool:
        """True when nothing but whitespace, comments and ';' was entered."""
        try:
            tokens = Lexer(statement).tokenize()
        except KaleidoscopeError:
            return False
        return all(
            token.type == TokenType.EOF or token.is_operator_symbol(STATEMENT_TERMINATOR)
            for token in tokens
        )

    def _write(self, text: str):
        self.stdout.write(text)
        self.stdout.flush()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Kaleidoscope front end: parse source and print the AST")
    parser.add_argument("file", nargs="?", help="Source file to parse. Starts the interactive loop if omitted")
    parser.add_argument("--tokens", action="store_true", help="Print the lexed tokens before each AST")
    parser.add_argument("--prompt", type=str, default=DEFAULT_PROMPT, help="Interactive prompt")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="%(asctime)s %(levelname)s %(name)s %(message)s")
    if args.verbose:
        logging.getLogger("kaleidoscope").setLevel(logging.DEBUG)
        LOG.debug("Verbose mode enabled")

    repl = Repl(prompt=args.prompt, show_tokens=args.tokens)

    if args.file is None:
        repl.run()
        return 0

    try:
        with open(args.file, "r", encoding="utf-8") as f:
            source = f.read()
    except OSError as e:
        LOG.error("Cannot read %s: %s", args.file, e)
        return 1

    try:
        for line in repl.render(source, args.file):
            print(line)
    except KaleidoscopeError as e:
        print(str(e), file=sys.stderr, end="")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
