"""
Kaleidoscope Lexer - turns source text into tokens

Pull-based: every call to lex() scans exactly one token from the cursor.
There is no operator table here, any unrecognized symbol becomes an
OPERATOR token and the parser decides whether it means anything.

xwest
"""

import logging
from typing import Iterator, List, Optional

from .tokens import (
    Token, TokenType, SourceLocation, KEYWORDS, PUNCTUATION, COMMENT_START
)
from .errors import create_invalid_number_error


LOG = logging.getLogger(__name__)


class Lexer:
    """
    Kaleidoscope lexical analyzer.

    Tracks a cursor over the input and produces tokens on demand. A lexer
    is finite: once the input is exhausted every further lex() call
    returns an EOF token. Create a new Lexer per input buffer.
    """

    def __init__(self, source: str, filename: str = "<stdin>"):
        """
        Initialize the lexer with source code.

        Args:
            source: Source code string
            filename: Name of source for error reporting
        """
        self.source = source
        self.filename = filename
        self.pos = 0
        self.line = 1
        self.column = 1

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        token = self.lex()
        if token.type == TokenType.EOF:
            raise StopIteration
        return token

    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source from the beginning.

        Returns:
            List of tokens including the final EOF token

        Raises:
            LexerError: If a numeric literal cannot be parsed
        """
        self.pos = 0
        self.line = 1
        self.column = 1

        tokens = list(self)
        tokens.append(self._make_token(TokenType.EOF, "", None, self._location()))

        LOG.debug("Lexed %d tokens from %s", len(tokens), self.filename)
        return tokens

    def lex(self) -> Token:
        """
        Scan the next token, skipping whitespace and comments first.

        Raises:
            LexerError: If a numeric literal cannot be parsed
        """
        while True:
            self.skip_whitespace()

            current_char = self.peek()
            if current_char is None:
                return self._make_token(TokenType.EOF, "", None, self._location())

            if current_char == COMMENT_START:
                self._skip_comment()
                continue

            break

        location = self._location()

        if current_char in PUNCTUATION:
            self._advance()
            return self._make_token(PUNCTUATION[current_char], current_char, None, location)

        if current_char.isalpha():
            return self._lex_identifier(location)

        if '0' <= current_char <= '9':
            return self._lex_number(location)

        # Provisionally an operator, the parser checks the precedence table
        self._advance()
        return self._make_token(TokenType.OPERATOR, current_char, current_char, location)

    def skip_whitespace(self) -> int:
        """Skip whitespace at the cursor and return how many characters were consumed."""
        count = 0
        while self.pos < len(self.source) and self.source[self.pos].isspace():
            self._advance()
            count += 1
        return count

    def peek(self) -> Optional[str]:
        """Return the next unread character without consuming it, or None at end of input."""
        if self.pos < len(self.source):
            return self.source[self.pos]
        return None

    def _skip_comment(self):
        """Consume from '#' through the next newline, or to end of input."""
        while self.pos < len(self.source):
            char = self.source[self.pos]
            self._advance()
            if char == '\n':
                break

    def _lex_identifier(self, location: SourceLocation) -> Token:
        """Scan a run of alphabetic characters. Digits and '_' end the run."""
        start_pos = self.pos
        while self.pos < len(self.source) and self.source[self.pos].isalpha():
            self._advance()

        lexeme = self.source[start_pos:self.pos]
        token_type = KEYWORDS.get(lexeme, TokenType.IDENTIFIER)
        value = lexeme if token_type == TokenType.IDENTIFIER else None

        return self._make_token(token_type, lexeme, value, location)

    def _lex_number(self, location: SourceLocation) -> Token:
        """Scan a run of digits and dots, then convert it with float()."""
        start_pos = self.pos
        while self.pos < len(self.source) and (
            self.source[self.pos].isnumeric() or self.source[self.pos] == '.'
        ):
            self._advance()

        lexeme = self.source[start_pos:self.pos]
        # float() would accept non-ASCII decimal digits such as '٣'
        if not lexeme.isascii():
            raise create_invalid_number_error(lexeme, location)
        try:
            value = float(lexeme)
        except ValueError:
            raise create_invalid_number_error(lexeme, location)

        return self._make_token(TokenType.NUMBER, lexeme, value, location)

    def _make_token(self, token_type: TokenType, lexeme: str, value, location: SourceLocation) -> Token:
        token = Token(token_type, lexeme, value, location)
        LOG.debug("token %s at %s", token, location)
        return token

    def _location(self) -> SourceLocation:
        return SourceLocation(self.filename, self.line, self.column, self.pos)

    def _advance(self):
        """Advance position by one character, updating line/column."""
        if self.pos < len(self.source):
            if self.source[self.pos] == '\n':
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1


def tokenize_string(source: str, filename: str = "<string>") -> List[Token]:
    """
    Convenience function to tokenize a source string.

    Returns:
        List of tokens ending with EOF

    Raises:
        LexerError: If lexing fails
    """
    return Lexer(source, filename).tokenize()


def tokenize_file(filepath: str) -> List[Token]:
    """
    Convenience function to tokenize a source file.

    Raises:
        LexerError: If lexing fails
        IOError: If file cannot be read
    """
    with open(filepath, 'r', encoding='utf-8') as f:
        source = f.read()

    return tokenize_string(source, filepath)
