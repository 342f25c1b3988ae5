"""
Error handling for the Kaleidoscope parser.

Syntax errors carry the offending token along with the usual diagnostic.
Reaching the end of input where a token is mandatory is its own error kind,
UnexpectedEOFError, so callers such as the REPL can tell an incomplete
statement from a malformed one.

Author: xwest
"""

from typing import Optional, List

from ..lexer.tokens import Token, TokenType
from ..lexer.errors import KaleidoscopeError


class ParseError(KaleidoscopeError):
    """Exception raised when the parser encounters a syntax error."""

    def __init__(
        self,
        message: str,
        token: Optional[Token] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(
            message,
            location=token.location if token is not None else None,
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )
        self.token = token


class UnexpectedEOFError(ParseError):
    """Raised when input ends where the grammar still requires a token."""


TOKEN_DESCRIPTIONS = {
    TokenType.EOF: "end of input",
    TokenType.DEF: "'def'",
    TokenType.EXTERN: "'extern'",
    TokenType.IDENTIFIER: "identifier",
    TokenType.NUMBER: "number",
    TokenType.LEFT_PAREN: "'('",
    TokenType.RIGHT_PAREN: "')'",
    TokenType.COMMA: "','",
    TokenType.OPERATOR: "operator",
}


def describe_token(token: Token) -> str:
    """Human readable description of a token for error messages."""
    if token.type in (TokenType.IDENTIFIER, TokenType.NUMBER, TokenType.OPERATOR):
        return f"{TOKEN_DESCRIPTIONS[token.type]} '{token.lexeme}'"
    return TOKEN_DESCRIPTIONS[token.type]


def create_unexpected_token_error(expected: str, found: Token) -> ParseError:
    """Create an error for a token that does not fit the grammar here."""
    suggestions = []
    if found.type == TokenType.OPERATOR and found.value not in "<+-*":
        suggestions.append("Only '<', '+', '-' and '*' are binary operators")

    return ParseError(
        message=f"Expected {expected}, found {describe_token(found)}",
        token=found,
        code="P001",
        suggestions=suggestions or None
    )


def create_invalid_expression_error(found: Token) -> ParseError:
    """Create an error for a token that cannot start an expression."""
    return ParseError(
        message=f"Expected expression, found {describe_token(found)}",
        token=found,
        code="P005",
        help_text="An expression starts with a number, an identifier or '('."
    )


def create_comma_in_prototype_error(found: Token) -> ParseError:
    """Create an error for a comma between prototype parameters."""
    return ParseError(
        message="Unexpected ',' in parameter list",
        token=found,
        code="P008",
        help_text="Prototype parameters are separated by whitespace, not commas.",
        suggestions=["Write 'def f(a b)' instead of 'def f(a, b)'"]
    )


def create_unexpected_eof_error(expected: str, found: Token) -> UnexpectedEOFError:
    """Create an error for input that ends too early."""
    return UnexpectedEOFError(
        message=f"Unexpected end of input, expected {expected}",
        token=found,
        code="P010",
        help_text=f"The input ended while the parser still expected {expected}.",
        suggestions=["Check for an incomplete statement or a missing ')'"]
    )
