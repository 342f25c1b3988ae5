"""
Kaleidoscope Parser Implementation

Recursive descent for the statement level (def / extern / expression) and
precedence climbing for binary operators. The grammar is LL(1): every
decision looks at the current token only.

    top      ::= 'def' prototype expr | 'extern' prototype | expr
    prototype::= ident '(' ident* ')'
    expr     ::= primary (binop primary)*
    primary  ::= number | '(' expr ')' | ident | ident '(' (expr (',' expr)*)? ')'

Author: xwest
"""

import logging
from typing import List, Optional

from ..lexer.tokens import Token, TokenType, STATEMENT_TERMINATOR
from .ast_nodes import (
    Expr, Number, Variable, BinaryOp, Call, Prototype, FunctionDef,
    SourceSpan, ANONYMOUS_FUNCTION_NAME
)
from .errors import (
    create_unexpected_token_error, create_invalid_expression_error,
    create_comma_in_prototype_error, create_unexpected_eof_error
)


LOG = logging.getLogger(__name__)

# Binary operator precedence. Anything missing here is not a binary operator.
BINARY_PRECEDENCE = {
    '<': 10,
    '+': 20,
    '-': 20,
    '*': 40,
}

NO_PRECEDENCE = -1


class Parser:
    """
    Kaleidoscope parser.

    Wraps a fully materialized token list with single-token lookahead.
    Each parse() call consumes one top-level item; whatever follows stays
    in place for the next call.
    """

    def __init__(self, tokens: List[Token]):
        """
        Initialize parser with a list of tokens.

        Args:
            tokens: Tokens from the lexer. An EOF token is appended if the
                list does not already end with one.
        """
        self.tokens = list(tokens)
        if not self.tokens or self.tokens[-1].type != TokenType.EOF:
            self.tokens.append(Token(TokenType.EOF, "", None, self._end_location()))
        self.current = 0

    def parse(self) -> FunctionDef:
        """
        Parse one top-level item.

        Returns:
            FunctionDef for a definition, an extern declaration (no body),
            or a top-level expression wrapped as "anonymous"

        Raises:
            ParseError: On a syntax error
        """
        token = self._peek()
        if token.type == TokenType.DEF:
            item = self.parse_definition()
        elif token.type == TokenType.EXTERN:
            item = self.parse_extern()
        elif token.type == TokenType.EOF:
            raise create_unexpected_eof_error("'def', 'extern' or an expression", token)
        else:
            item = self.parse_top_level_expr()

        LOG.debug("Parsed %s '%s'", "extern" if item.is_extern else "function", item.name)
        return item

    def parse_all(self) -> List[FunctionDef]:
        """Parse top-level items until end of input, skipping ';' between them."""
        items = []
        while True:
            while self._peek().is_operator_symbol(STATEMENT_TERMINATOR):
                self._advance()
            if self._is_at_end():
                return items
            items.append(self.parse())

    def parse_definition(self) -> FunctionDef:
        """def name(params) body"""
        start_token = self._expect(TokenType.DEF, "'def'")
        proto = self.parse_prototype()
        body = self.parse_expr()
        return FunctionDef(proto, body, self._span_from(start_token))

    def parse_extern(self) -> FunctionDef:
        """extern name(params)"""
        start_token = self._expect(TokenType.EXTERN, "'extern'")
        proto = self.parse_prototype()
        return FunctionDef(proto, None, self._span_from(start_token))

    def parse_top_level_expr(self) -> FunctionDef:
        """Wrap a bare expression as a zero-parameter anonymous function."""
        start_token = self._peek()
        body = self.parse_expr()
        proto = Prototype(ANONYMOUS_FUNCTION_NAME, [], body.span)
        return FunctionDef(proto, body, self._span_from(start_token))

    def parse_prototype(self) -> Prototype:
        """
        Parse a prototype: name '(' param* ')'

        Parameters are separated by whitespace only; a comma is an error.
        """
        name_token = self._expect(TokenType.IDENTIFIER, "function name in prototype")
        self._expect(TokenType.LEFT_PAREN, "'(' in prototype")

        params = []
        while True:
            token = self._peek()
            if token.type == TokenType.IDENTIFIER:
                params.append(self._advance().value)
            elif token.type == TokenType.RIGHT_PAREN:
                self._advance()
                break
            elif token.type == TokenType.COMMA:
                raise create_comma_in_prototype_error(token)
            elif token.type == TokenType.EOF:
                raise create_unexpected_eof_error("parameter name or ')'", token)
            else:
                raise create_unexpected_token_error("parameter name or ')'", token)

        return Prototype(name_token.value, params, self._span_from(name_token))

    def parse_expr(self) -> Expr:
        """Parse a primary expression followed by any (operator, primary) pairs."""
        left = self.parse_primary()
        return self.parse_binary(0, left)

    def parse_primary(self) -> Expr:
        """Parse a number, a parenthesized expression, a variable or a call."""
        token = self._peek()
        if token.type == TokenType.NUMBER:
            return self.parse_number()
        if token.type == TokenType.LEFT_PAREN:
            return self.parse_paren()
        if token.type == TokenType.IDENTIFIER:
            return self.parse_identifier()
        if token.type == TokenType.EOF:
            raise create_unexpected_eof_error("expression", token)
        raise create_invalid_expression_error(token)

    def parse_number(self) -> Number:
        token = self._expect(TokenType.NUMBER, "number")
        return Number(token.value, self._span_from(token))

    def parse_paren(self) -> Expr:
        """'(' expr ')' - the parentheses leave no node behind."""
        self._expect(TokenType.LEFT_PAREN, "'('")
        expr = self.parse_expr()
        self._expect(TokenType.RIGHT_PAREN, "')' after expression")
        return expr

    def parse_identifier(self) -> Expr:
        """A call if the identifier is directly followed by '(', else a variable."""
        token = self._expect(TokenType.IDENTIFIER, "identifier")
        if self._check(TokenType.LEFT_PAREN):
            args = self.parse_call_arguments()
            return Call(token.value, args, self._span_from(token))
        return Variable(token.value, self._span_from(token))

    def parse_call_arguments(self) -> List[Expr]:
        """Parse '(' (expr (',' expr)*)? ')' - a trailing comma is an error."""
        self._expect(TokenType.LEFT_PAREN, "'(' before call arguments")

        args = []
        if self._check(TokenType.RIGHT_PAREN):
            self._advance()
            return args

        while True:
            args.append(self.parse_expr())
            token = self._peek()
            if token.type == TokenType.COMMA:
                self._advance()
            elif token.type == TokenType.RIGHT_PAREN:
                self._advance()
                return args
            elif token.type == TokenType.EOF:
                raise create_unexpected_eof_error("',' or ')' in argument list", token)
            else:
                raise create_unexpected_token_error("',' or ')' in argument list", token)

    def parse_binary(self, min_precedence: int, left: Expr) -> Expr:
        """
        Precedence climbing over (operator, primary) pairs.

        1 + 2     => (1 + 2)
        1 + 2 + 3 => ((1 + 2) + 3)
        1 + 2 * 3 => (1 + (2 * 3))
        """
        while True:
            precedence = self.get_token_precedence()
            if precedence == NO_PRECEDENCE or precedence < min_precedence:
                return left

            operator = self._advance().value
            right = self.parse_primary()

            # A tighter operator after the right operand takes it first
            if precedence < self.get_token_precedence():
                right = self.parse_binary(precedence + 1, right)

            span = None
            if left.span is not None and right.span is not None:
                span = SourceSpan(left.span.start, right.span.end)
            left = BinaryOp(left, operator, right, span)

    def get_token_precedence(self) -> int:
        """Precedence of the current token, or -1 if it is not a binary operator."""
        token = self._peek()
        if token.type != TokenType.OPERATOR:
            return NO_PRECEDENCE
        return BINARY_PRECEDENCE.get(token.value, NO_PRECEDENCE)

    # Utility methods

    def _check(self, token_type: TokenType) -> bool:
        return self._peek().type == token_type

    def _peek(self) -> Token:
        """Return current token without consuming. Never moves past EOF."""
        return self.tokens[self.current]

    def _previous(self) -> Token:
        return self.tokens[self.current - 1] if self.current > 0 else self.tokens[0]

    def _is_at_end(self) -> bool:
        return self._check(TokenType.EOF)

    def _advance(self) -> Token:
        """Consume and return current token."""
        token = self._peek()
        if token.type == TokenType.EOF:
            raise create_unexpected_eof_error("more input", token)
        self.current += 1
        return token

    def _expect(self, token_type: TokenType, expected: str) -> Token:
        """Consume a token of the given type or raise a syntax error."""
        token = self._peek()
        if token.type == token_type:
            return self._advance()
        if token.type == TokenType.EOF:
            raise create_unexpected_eof_error(expected, token)
        raise create_unexpected_token_error(expected, token)

    def _span_from(self, start_token: Token) -> Optional[SourceSpan]:
        end_token = self._previous()
        if start_token.location is None or end_token.location is None:
            return None
        return SourceSpan(start_token.location, end_token.location)

    def _end_location(self):
        return self.tokens[-1].location if self.tokens else None


def parse_string(source: str, filename: str = "<string>") -> FunctionDef:
    """
    Convenience function to parse one top-level item from a source string.

    Raises:
        LexerError: If lexing fails
        ParseError: If parsing fails
    """
    from ..lexer import tokenize_string

    tokens = tokenize_string(source, filename)
    parser = Parser(tokens)
    return parser.parse()


def parse_file(filepath: str) -> List[FunctionDef]:
    """
    Convenience function to parse every top-level item in a source file.

    Raises:
        LexerError: If lexing fails
        ParseError: If parsing fails
        IOError: If file cannot be read
    """
    from ..lexer import tokenize_file

    tokens = tokenize_file(filepath)
    parser = Parser(tokens)
    return parser.parse_all()
