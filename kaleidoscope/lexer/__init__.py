"""
Kaleidoscope Lexer Package

Scans Kaleidoscope source text into tokens on demand.

Key Features:
- Unicode-aware identifiers (any alphabetic character, e.g. 松本)
- '#' line comments
- Decimal numeric literals parsed as floats
- Unknown symbols passed through as single-character operators
- Source location tracking for diagnostics

Author: xwest
"""

from .tokens import Token, TokenType, SourceLocation
from .lexer import Lexer, tokenize_string, tokenize_file
from .errors import Diagnostic, KaleidoscopeError, LexerError

__all__ = [
    "Lexer",
    "Token",
    "TokenType",
    "SourceLocation",
    "tokenize_string",
    "tokenize_file",
    "Diagnostic",
    "KaleidoscopeError",
    "LexerError",
]
