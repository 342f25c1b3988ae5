"""
Kaleidoscope Front End Package

Lexer and parser for the Kaleidoscope toy language: source text in,
abstract syntax tree (or a descriptive error) out.

Architecture:
    kaleidoscope/
    ├── lexer/           # Tokenization
    ├── parser/          # Syntax analysis and AST generation
    └── repl.py          # Interactive driver

Author: xwest
License: MIT
"""

__version__ = "0.1.0"
__author__ = "xwest"
__license__ = "MIT"

from .lexer import Lexer, KaleidoscopeError, LexerError
from .parser import Parser, ParseError, UnexpectedEOFError, parse_string

__all__ = [
    # Core classes
    "Lexer",
    "Parser",
    "parse_string",

    # Errors
    "KaleidoscopeError",
    "LexerError",
    "ParseError",
    "UnexpectedEOFError",

    # Version info
    "__version__",
    "__author__",
    "__license__",
]
