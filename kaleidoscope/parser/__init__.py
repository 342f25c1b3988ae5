"""
Kaleidoscope Parser Package

Recursive descent parser with precedence climbing for binary operators.
Produces FunctionDef items: definitions, extern declarations and top-level
expressions wrapped as anonymous functions.

Author: xwest
"""

from .ast_nodes import (
    ASTNode, ASTVisitor, ASTPrinter, SourceSpan, dump,
    Expr, Number, Variable, BinaryOp, Call, Prototype, FunctionDef,
)
from .parser import Parser, BINARY_PRECEDENCE, parse_string, parse_file
from .errors import ParseError, UnexpectedEOFError

__all__ = [
    # Core parser
    "Parser",
    "BINARY_PRECEDENCE",
    "parse_string",
    "parse_file",

    # AST nodes
    "ASTNode", "ASTVisitor", "ASTPrinter", "SourceSpan", "dump",
    "Expr", "Number", "Variable", "BinaryOp", "Call",
    "Prototype", "FunctionDef",

    # Error handling
    "ParseError", "UnexpectedEOFError",
]
