"""
Abstract Syntax Tree node definitions for Kaleidoscope.

Nodes are plain dataclasses compared structurally, so a parsed tree can be
checked against one built by hand. Source spans ride along but take no part
in equality.

Author: xwest
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Any
from dataclasses import dataclass, field

from ..lexer.tokens import SourceLocation


@dataclass(frozen=True)
class SourceSpan:
    """Represents a span of source code (start and end locations)."""
    start: SourceLocation
    end: SourceLocation

    def __str__(self) -> str:
        if self.start.filename == self.end.filename:
            return f"{self.start.filename}:{self.start.line}:{self.start.column}-{self.end.line}:{self.end.column}"
        return f"{self.start}-{self.end}"


class ASTVisitor(ABC):
    """
    Visitor over AST nodes.

    visit() dispatches to a ``visit_<ClassName>`` method, falling back to
    generic_visit() when the subclass does not define one.
    """

    def visit(self, node: 'ASTNode') -> Any:
        method = getattr(self, f"visit_{type(node).__name__}", self.generic_visit)
        return method(node)

    @abstractmethod
    def generic_visit(self, node: 'ASTNode') -> Any:
        pass


class ASTNode(ABC):
    """Base class for all AST nodes."""

    def accept(self, visitor: ASTVisitor) -> Any:
        """Accept a visitor (visitor pattern)."""
        return visitor.visit(self)

    @abstractmethod
    def children(self) -> List['ASTNode']:
        """Get all child nodes."""
        pass


class Expr(ASTNode):
    """Base class for expressions."""
    pass


# ============================================================================
# Expressions
# ============================================================================

@dataclass
class Number(Expr):
    """Numeric literal: 1.0"""
    value: float
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def children(self) -> List[ASTNode]:
        return []


@dataclass
class Variable(Expr):
    """Reference to a variable: x"""
    name: str
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def children(self) -> List[ASTNode]:
        return []


@dataclass
class BinaryOp(Expr):
    """Binary operation: left + right"""
    left: Expr
    operator: str
    right: Expr
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def children(self) -> List[ASTNode]:
        return [self.left, self.right]


@dataclass
class Call(Expr):
    """Function call: callee(arg1, arg2)"""
    callee: str
    args: List[Expr] = field(default_factory=list)
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def children(self) -> List[ASTNode]:
        return list(self.args)


# ============================================================================
# Top-level items
# ============================================================================

@dataclass
class Prototype(ASTNode):
    """Function signature: name and parameter names."""
    name: str
    params: List[str] = field(default_factory=list)
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    def children(self) -> List[ASTNode]:
        return []


@dataclass
class FunctionDef(ASTNode):
    """
    A function definition, an extern declaration or a top-level expression.

    Extern declarations have no body (``body is None``). Top-level
    expressions are wrapped as a zero-parameter function named "anonymous".
    """
    proto: Prototype
    body: Optional[Expr] = None
    span: Optional[SourceSpan] = field(default=None, compare=False, repr=False)

    @property
    def name(self) -> str:
        return self.proto.name

    @property
    def is_extern(self) -> bool:
        return self.body is None

    @property
    def is_anonymous(self) -> bool:
        return self.proto.name == ANONYMOUS_FUNCTION_NAME

    def children(self) -> List[ASTNode]:
        if self.body is None:
            return [self.proto]
        return [self.proto, self.body]


ANONYMOUS_FUNCTION_NAME = "anonymous"


# ============================================================================
# Printing
# ============================================================================

class ASTPrinter(ASTVisitor):
    """Renders AST nodes as S-expressions: (+ 1 (* 2 3))"""

    def generic_visit(self, node: ASTNode) -> str:
        raise TypeError(f"Cannot print {type(node).__name__}")

    def visit_Number(self, node: Number) -> str:
        text = repr(node.value)
        return text[:-2] if text.endswith(".0") else text

    def visit_Variable(self, node: Variable) -> str:
        return node.name

    def visit_BinaryOp(self, node: BinaryOp) -> str:
        return f"({node.operator} {self.visit(node.left)} {self.visit(node.right)})"

    def visit_Call(self, node: Call) -> str:
        parts = [node.callee] + [self.visit(arg) for arg in node.args]
        return f"(call {' '.join(parts)})"

    def visit_Prototype(self, node: Prototype) -> str:
        return f"{node.name} ({' '.join(node.params)})"

    def visit_FunctionDef(self, node: FunctionDef) -> str:
        if node.is_extern:
            return f"(extern {self.visit(node.proto)})"
        return f"(def {self.visit(node.proto)} {self.visit(node.body)})"


def dump(node: ASTNode) -> str:
    """Render an AST node as an S-expression string."""
    return ASTPrinter().visit(node)
