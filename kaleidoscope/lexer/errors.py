"""
Error handling for the Kaleidoscope lexer.

Provides the diagnostic model shared by the lexer and the parser: every
fatal error carries a Diagnostic with a source location, an error code and
optional help text.

Author: xwest
"""

from typing import Optional, List
from dataclasses import dataclass

from .tokens import SourceLocation


@dataclass
class Diagnostic:
    """A single error or warning report."""
    message: str
    location: Optional[SourceLocation]
    severity: str  # "error", "warning"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        severity_prefix = self.severity.upper()
        if self.code:
            severity_prefix = f"{severity_prefix}[{self.code}]"
        result = f"{severity_prefix}: {self.message}\n"
        if self.location is not None:
            result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class KaleidoscopeError(Exception):
    """
    Base class for errors raised while turning source text into an AST.

    ``str(error)`` gives the full multi-line report; ``error.message`` the
    one-line description.
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None
    ):
        super().__init__(message)
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )

    @property
    def message(self) -> str:
        return self.diagnostic.message

    @property
    def location(self) -> Optional[SourceLocation]:
        return self.diagnostic.location

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    def __str__(self) -> str:
        return str(self.diagnostic)


class LexerError(KaleidoscopeError):
    """Raised when the lexer cannot produce a token."""


def create_invalid_number_error(lexeme: str, location: SourceLocation) -> LexerError:
    """Create an error for a numeric literal that float() rejects."""
    help_text = None
    if lexeme.count(".") > 1:
        help_text = "A number may contain at most one decimal point."
    elif not lexeme.isascii():
        help_text = "Numbers are written with the ASCII digits 0-9."

    return LexerError(
        message=f"Could not parse number literal '{lexeme}'",
        location=location,
        code="L003",
        help_text=help_text,
        suggestions=["Separate adjacent numbers with whitespace or an operator"]
    )
