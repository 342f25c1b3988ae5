"""
Test suite for the Kaleidoscope parser.

Tests cover:
- Primary expressions (numbers, variables, calls, parentheses)
- Operator precedence and associativity
- Prototypes, definitions, extern declarations and top-level expressions
- Syntax errors and unexpected end of input
- AST printing and source spans

Author: xwest
"""

import unittest
import sys
import os
import tempfile

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from kaleidoscope.lexer import Lexer, LexerError
from kaleidoscope.parser import (
    Parser, ParseError, UnexpectedEOFError, parse_string, parse_file, dump,
    Number, Variable, BinaryOp, Call, Prototype, FunctionDef,
)


def make_parser(source: str) -> Parser:
    return Parser(Lexer(source).tokenize())


def binop(left, operator, right):
    return BinaryOp(left, operator, right)


class TestPrimaryExpressions(unittest.TestCase):
    """Numbers, variables, calls and parentheses."""

    def test_parser_basic(self):
        parser = make_parser("  1234 (5) a 5 * 2")
        self.assertEqual(parser.parse_number(), Number(1234.0))
        self.assertEqual(parser.parse_paren(), Number(5.0))
        self.assertEqual(parser.parse_expr(), Variable("a"))
        self.assertEqual(parser.parse_expr(), binop(Number(5.0), '*', Number(2.0)))

    def test_variable_then_call(self):
        parser = make_parser("a foo()")
        self.assertEqual(parser.parse_expr(), Variable("a"))
        self.assertEqual(parser.parse_expr(), Call("foo", []))

    def test_call_arguments(self):
        parser = make_parser("foo() bar(a) baz(a, b, c)")
        self.assertEqual(parser.parse_expr(), Call("foo", []))
        self.assertEqual(parser.parse_expr(), Call("bar", [Variable("a")]))
        self.assertEqual(parser.parse_expr(), Call("baz", [Variable("a"), Variable("b"), Variable("c")]))

    def test_nested_call_arguments(self):
        parser = make_parser("foo(bar(1), 2 * x, (y))")
        self.assertEqual(parser.parse_expr(), Call("foo", [
            Call("bar", [Number(1.0)]),
            binop(Number(2.0), '*', Variable("x")),
            Variable("y"),
        ]))

    def test_parse_call_arguments_directly(self):
        parser = make_parser("(1, a)")
        self.assertEqual(parser.parse_call_arguments(), [Number(1.0), Variable("a")])

    def test_trailing_comma_is_an_error(self):
        with self.assertRaises(ParseError) as ctx:
            make_parser("baz(a, b,)").parse_expr()
        self.assertNotIsInstance(ctx.exception, UnexpectedEOFError)
        self.assertEqual(ctx.exception.code, "P005")

    def test_missing_comma_between_arguments(self):
        with self.assertRaises(ParseError) as ctx:
            make_parser("foo(a b)").parse_expr()
        self.assertEqual(ctx.exception.code, "P001")
        self.assertEqual(ctx.exception.token.value, "b")

    def test_unclosed_call(self):
        with self.assertRaises(UnexpectedEOFError):
            make_parser("foo(a").parse_expr()

    def test_unclosed_paren(self):
        with self.assertRaises(UnexpectedEOFError):
            make_parser("(1 + 2").parse_expr()

    def test_not_a_primary_expression(self):
        for source in [")", ",", "+ 1", "def"]:
            with self.assertRaises(ParseError, msg=source) as ctx:
                make_parser(source).parse_primary()
            self.assertEqual(ctx.exception.code, "P005")


class TestBinaryExpressions(unittest.TestCase):
    """Precedence climbing."""

    def test_single_operator(self):
        self.assertEqual(make_parser("1 + 2").parse_expr(), binop(Number(1.0), '+', Number(2.0)))

    def test_left_associative(self):
        expected = binop(binop(Number(1.0), '+', Number(2.0)), '+', Number(3.0))
        self.assertEqual(make_parser("1 + 2 + 3").parse_expr(), expected)

        expected = binop(binop(Variable("a"), '-', Variable("b")), '-', Variable("c"))
        self.assertEqual(make_parser("a - b - c").parse_expr(), expected)

    def test_higher_precedence_binds_tighter(self):
        expected = binop(Number(1.0), '+', binop(Number(2.0), '*', Number(3.0)))
        self.assertEqual(make_parser("1 + 2 * 3").parse_expr(), expected)

        expected = binop(binop(Number(2.0), '*', Number(3.0)), '+', Number(1.0))
        self.assertEqual(make_parser("2 * 3 + 1").parse_expr(), expected)

    def test_mixed_precedence(self):
        expected = binop(
            binop(Number(1.0), '*', Number(2.0)),
            '+',
            binop(Number(3.0), '*', Number(4.0)),
        )
        self.assertEqual(make_parser("1 * 2 + 3 * 4").parse_expr(), expected)

        expected = binop(
            binop(Number(1.0), '+', binop(Number(2.0), '*', Number(3.0))),
            '-',
            Number(4.0),
        )
        self.assertEqual(make_parser("1 + 2 * 3 - 4").parse_expr(), expected)

    def test_comparison_is_loosest(self):
        expected = binop(Variable("x"), '<', binop(Variable("y"), '+', Number(1.0)))
        self.assertEqual(make_parser("x < y + 1").parse_expr(), expected)

    def test_parentheses_override_precedence(self):
        expected = binop(binop(Number(1.0), '+', Number(2.0)), '*', Number(3.0))
        self.assertEqual(make_parser("(1 + 2) * 3").parse_expr(), expected)

    def test_unknown_operator_ends_expression(self):
        parser = make_parser("1 + 2 / 3")
        self.assertEqual(parser.parse_expr(), binop(Number(1.0), '+', Number(2.0)))
        self.assertEqual(parser.get_token_precedence(), -1)

    def test_parse_binary_with_explicit_left(self):
        parser = make_parser("* 2 + 1")
        result = parser.parse_binary(0, Variable("x"))
        self.assertEqual(result, binop(binop(Variable("x"), '*', Number(2.0)), '+', Number(1.0)))

    def test_parse_binary_respects_min_precedence(self):
        parser = make_parser("+ 1")
        self.assertEqual(parser.parse_binary(21, Variable("x")), Variable("x"))

    def test_operator_without_right_operand(self):
        with self.assertRaises(UnexpectedEOFError):
            make_parser("1 +").parse_expr()


class TestPrototypes(unittest.TestCase):
    """Function prototypes."""

    def test_params_without_commas(self):
        self.assertEqual(make_parser("foo(a b)").parse_prototype(), Prototype("foo", ["a", "b"]))

    def test_no_params(self):
        self.assertEqual(make_parser("foo()").parse_prototype(), Prototype("foo", []))

    def test_comma_is_an_error(self):
        with self.assertRaises(ParseError) as ctx:
            make_parser("foo(a, b)").parse_prototype()
        self.assertEqual(ctx.exception.code, "P008")

    def test_missing_name(self):
        with self.assertRaises(ParseError) as ctx:
            make_parser("(a)").parse_prototype()
        self.assertEqual(ctx.exception.code, "P001")

    def test_missing_left_paren(self):
        with self.assertRaises(ParseError):
            make_parser("foo a").parse_prototype()

    def test_non_identifier_parameter(self):
        with self.assertRaises(ParseError) as ctx:
            make_parser("foo(1)").parse_prototype()
        self.assertEqual(ctx.exception.code, "P001")

    def test_unterminated_parameter_list(self):
        with self.assertRaises(UnexpectedEOFError):
            make_parser("foo(a").parse_prototype()


class TestTopLevel(unittest.TestCase):
    """parse(), parse_all() and the convenience functions."""

    def test_definition(self):
        result = parse_string("def foo(a b) a + b")
        expected = FunctionDef(
            Prototype("foo", ["a", "b"]),
            binop(Variable("a"), '+', Variable("b")),
        )
        self.assertEqual(result, expected)
        self.assertFalse(result.is_extern)
        self.assertEqual(result.name, "foo")

    def test_extern_has_no_body(self):
        result = parse_string("extern sin(x)")
        self.assertEqual(result, FunctionDef(Prototype("sin", ["x"]), None))
        self.assertIsNone(result.body)
        self.assertTrue(result.is_extern)

    def test_top_level_expression(self):
        result = parse_string("5 + a")
        self.assertEqual(result.proto, Prototype("anonymous", []))
        self.assertEqual(result.body, binop(Number(5.0), '+', Variable("a")))
        self.assertTrue(result.is_anonymous)

    def test_parse_leaves_remaining_tokens(self):
        parser = make_parser("def one() 1 extern two() 3")
        self.assertEqual(parser.parse().name, "one")
        self.assertEqual(parser.parse().name, "two")
        self.assertEqual(parser.parse().body, Number(3.0))

    def test_empty_input(self):
        with self.assertRaises(UnexpectedEOFError) as ctx:
            make_parser("   # nothing here").parse()
        self.assertEqual(ctx.exception.code, "P010")

    def test_def_without_prototype(self):
        with self.assertRaises(UnexpectedEOFError):
            parse_string("def")

    def test_def_without_body(self):
        with self.assertRaises(UnexpectedEOFError):
            parse_string("def foo(x)")

    def test_invalid_operator_reported_by_parser(self):
        parser = make_parser("1 $ 2")
        self.assertEqual(parser.parse().body, Number(1.0))
        with self.assertRaises(ParseError) as ctx:
            parser.parse()
        self.assertEqual(ctx.exception.token.value, "$")

    def test_parse_all(self):
        items = make_parser("def f(x) x * 2; extern g(); f(3);").parse_all()
        self.assertEqual([item.name for item in items], ["f", "g", "anonymous"])
        self.assertEqual(items[2].body, Call("f", [Number(3.0)]))

    def test_parse_all_empty(self):
        self.assertEqual(make_parser(" ; ; ").parse_all(), [])

    def test_accepts_tokens_without_eof(self):
        parser = Parser(list(Lexer("1 + a")))
        self.assertEqual(parser.parse().body, binop(Number(1.0), '+', Variable("a")))

    def test_independent_parsers(self):
        first = make_parser("a + b")
        second = make_parser("c * d")
        self.assertEqual(second.parse_expr(), binop(Variable("c"), '*', Variable("d")))
        self.assertEqual(first.parse_expr(), binop(Variable("a"), '+', Variable("b")))

    def test_lexer_error_surfaces_from_parse_string(self):
        with self.assertRaises(LexerError):
            parse_string("1.2.3 + 4")

    def test_parse_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "lib.ks")
            with open(path, "w", encoding="utf-8") as f:
                f.write("# library\nextern cos(x);\ndef twice(x) x + x;\n")
            items = parse_file(path)
        self.assertEqual([item.name for item in items], ["cos", "twice"])
        self.assertTrue(items[0].is_extern)


class TestDiagnostics(unittest.TestCase):
    """Error messages and locations."""

    def test_error_report(self):
        with self.assertRaises(ParseError) as ctx:
            parse_string("def foo(a,\n b) a", "proto.ks")
        report = str(ctx.exception)
        self.assertIn("ERROR[P008]", report)
        self.assertIn("proto.ks:1:10", report)
        self.assertIn("help:", report)

    def test_unexpected_eof_message(self):
        with self.assertRaises(UnexpectedEOFError) as ctx:
            parse_string("foo(1,")
        self.assertTrue(ctx.exception.message.startswith("Unexpected end of input"))


class TestPrinting(unittest.TestCase):
    """AST dump and spans."""

    def test_dump_definition(self):
        self.assertEqual(dump(parse_string("def add(a b) a + b * 2")), "(def add (a b) (+ a (* b 2)))")

    def test_dump_extern(self):
        self.assertEqual(dump(parse_string("extern sin(x)")), "(extern sin (x))")

    def test_dump_expression(self):
        self.assertEqual(dump(parse_string("foo(1, x) < 3.5")), "(def anonymous () (< (call foo 1 x) 3.5))")

    def test_spans_do_not_affect_equality(self):
        parsed = parse_string("  x + 1")
        self.assertIsNotNone(parsed.body.span)
        self.assertEqual(parsed.body.span.start.column, 3)
        self.assertEqual(parsed.body.span.end.column, 7)
        self.assertEqual(parsed.body, binop(Variable("x"), '+', Number(1.0)))

    def test_children(self):
        parsed = parse_string("def f(x) g(x, 1)")
        self.assertEqual(parsed.children()[1].children(), [Variable("x"), Number(1.0)])
        self.assertEqual(parse_string("extern g(a b)").children(), [Prototype("g", ["a", "b"])])


if __name__ == "__main__":
    unittest.main()
