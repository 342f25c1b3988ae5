"""
Token definitions for the Kaleidoscope lexer.

Kaleidoscope has a deliberately tiny token set:
- Commands (def, extern)
- Primaries (identifiers and numbers)
- Punctuation (parentheses and comma)
- Operators, which are any other single character

Author: xwest
"""

from enum import Enum, auto
from dataclasses import dataclass, field
from typing import Any, Optional


class TokenType(Enum):
    """Enumeration of all token types in Kaleidoscope."""

    EOF = auto()                    # End of input

    # Commands
    DEF = auto()                    # def
    EXTERN = auto()                 # extern

    # Primaries
    IDENTIFIER = auto()             # foo, matz, 松本
    NUMBER = auto()                 # 42, 3.14

    # Punctuation
    LEFT_PAREN = auto()             # (
    RIGHT_PAREN = auto()            # )
    COMMA = auto()                  # ,

    # Anything else; validity is decided by the parser
    OPERATOR = auto()               # +, -, *, <, $, ;


@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the source code.

    Used for error reporting and for the spans attached to AST nodes.
    """
    filename: str
    line: int
    column: int
    offset: int  # Character offset from start of input

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"

    def __repr__(self) -> str:
        return f"SourceLocation({self.filename!r}, {self.line}, {self.column}, {self.offset})"


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token.

    Tokens compare by type and value only, so ``Token(TokenType.NUMBER, "3.14", 3.14)``
    equals the token lexed from ``"3.140"`` at any position.
    """
    type: TokenType
    lexeme: str = field(compare=False)            # Raw text from source
    value: Any = None                             # name, float, or operator char
    location: Optional[SourceLocation] = field(default=None, compare=False)

    def __str__(self) -> str:
        if self.value is not None and self.value != self.lexeme:
            return f"{self.type.name}({self.lexeme!r} -> {self.value!r})"
        if self.value is not None:
            return f"{self.type.name}({self.lexeme!r})"
        return self.type.name

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.lexeme!r}, {self.value!r})"

    def is_operator_symbol(self, symbol: str) -> bool:
        """Check if this is an operator token for ``symbol``."""
        return self.type == TokenType.OPERATOR and self.value == symbol


# Keyword mapping (case-sensitive)
KEYWORDS = {
    "def": TokenType.DEF,
    "extern": TokenType.EXTERN,
}

# Single-character punctuation
PUNCTUATION = {
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    ",": TokenType.COMMA,
}

COMMENT_START = "#"

# Operator that ends a statement at the REPL
STATEMENT_TERMINATOR = ";"
