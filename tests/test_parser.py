"""
WokeLang Parser Tests
=====================
Top-level items, statements, expression precedence and syntax errors.

Usage:
    python -m pytest tests/test_parser.py -v
"""
import sys
import os
import unittest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from wokelang.errors import ParseError
from wokelang.lexer import Lexer
from wokelang.nodes import (
    Assign, Attempt, BinaryOp, BoolLiteral, Call, Complain, ConsentGate, ConstDef,
    EmoteStatement, ExprStatement, FloatLiteral, FunctionDef, GiveBack, Gratitude,
    Identifier, IntLiteral, Measured, Remember, Repeat, SideQuestDef, SpawnWorker,
    StringLiteral, ThanksLiteral, UnaryOp, When, WorkerDef, ArrayLiteral,
)
from wokelang.parser import Parser


def _parse(source: str):
    return Parser(Lexer(source).tokenize()).parse()


def _body(statements: str) -> list:
    program = _parse("to main() { " + statements + " }")
    return program.items[0].body


def _expr(source: str):
    return Parser(Lexer(source).tokenize()).parse_expression()


# ─────────────────────────────────────────────
#  Top-Level Items
# ─────────────────────────────────────────────

class TestTopLevel(unittest.TestCase):

    def test_empty_program(self):
        self.assertEqual(_parse("").items, [])

    def test_function_with_params_and_types(self):
        fn = _parse("to add(a: Int, b: [Int]) → Maybe String { give back a; }").items[0]
        self.assertIsInstance(fn, FunctionDef)
        self.assertEqual(fn.name, "add")
        self.assertEqual([p.name for p in fn.params], ["a", "b"])
        self.assertEqual(str(fn.params[0].type), "Int")
        self.assertEqual(str(fn.params[1].type), "[Int]")
        self.assertEqual(str(fn.return_type), "Maybe String")
        self.assertIsInstance(fn.body[0], GiveBack)

    def test_ascii_arrow_and_custom_type(self):
        fn = _parse("to f(x) -> Thing { }").items[0]
        self.assertIsNone(fn.params[0].type)
        self.assertEqual(fn.return_type.name, "Thing")

    def test_hello_and_goodbye(self):
        fn = _parse('to f() { hello "hi"; say 1; goodbye "bye"; }').items[0]
        self.assertEqual(fn.hello, "hi")
        self.assertEqual(fn.goodbye, "bye")
        self.assertEqual(len(fn.body), 1)

    def test_emote_on_function(self):
        fn = _parse("@happy(level = 3, why = \"sun\") to f() { }").items[0]
        self.assertEqual(fn.emote.name, "happy")
        self.assertEqual([key for key, _ in fn.emote.params], ["level", "why"])
        self.assertIsInstance(fn.emote.params[0][1], IntLiteral)

    def test_emote_must_precede_function(self):
        with self.assertRaises(ParseError):
            _parse("@happy const x = 1;")

    def test_gratitude(self):
        item = _parse('thanks to { "Ada" → "math"; "Alan" -> "machines"; }').items[0]
        self.assertIsInstance(item, Gratitude)
        self.assertEqual(
            [(e.contributor, e.contribution) for e in item.entries],
            [("Ada", "math"), ("Alan", "machines")],
        )

    def test_worker_and_side_quest(self):
        items = _parse("worker w { say 1; } side quest q { }").items
        self.assertIsInstance(items[0], WorkerDef)
        self.assertEqual(items[0].name, "w")
        self.assertEqual(len(items[0].body), 1)
        self.assertIsInstance(items[1], SideQuestDef)
        self.assertEqual(items[1].name, "q")

    def test_const(self):
        item = _parse("const limit: Int = 2 + 3;").items[0]
        self.assertIsInstance(item, ConstDef)
        self.assertEqual(item.name, "limit")
        self.assertEqual(item.type.name, "Int")
        self.assertIsInstance(item.value, BinaryOp)

    def test_items_keep_source_order(self):
        items = _parse("to a() { } const b = 1; to c() { }").items
        self.assertEqual([i.name for i in items], ["a", "b", "c"])

    def test_statement_at_top_level_is_an_error(self):
        with self.assertRaises(ParseError):
            _parse("say 1;")


# ─────────────────────────────────────────────
#  Statements
# ─────────────────────────────────────────────

class TestStatements(unittest.TestCase):

    def test_remember_with_unit(self):
        stmt = _body("remember d = 5 measured in km;")[0]
        self.assertIsInstance(stmt, Remember)
        self.assertEqual(stmt.unit, "km")
        self.assertIsInstance(stmt.value, IntLiteral)

    def test_remember_without_unit(self):
        stmt = _body("remember d = 5;")[0]
        self.assertIsNone(stmt.unit)

    def test_assignment(self):
        stmt = _body("x = x + 1;")[0]
        self.assertIsInstance(stmt, Assign)
        self.assertEqual(stmt.name, "x")

    def test_say_desugars_to_call(self):
        stmt = _body('say "hi";')[0]
        self.assertIsInstance(stmt, ExprStatement)
        self.assertIsInstance(stmt.expr, Call)
        self.assertEqual(stmt.expr.name, "say")
        self.assertIsInstance(stmt.expr.args[0], StringLiteral)

    def test_when_otherwise(self):
        stmt = _body("when x > 1 { say 1; } otherwise { say 2; say 3; }")[0]
        self.assertIsInstance(stmt, When)
        self.assertEqual(len(stmt.then_body), 1)
        self.assertEqual(len(stmt.else_body), 2)

    def test_when_without_otherwise(self):
        self.assertIsNone(_body("when true { }")[0].else_body)

    def test_repeat(self):
        stmt = _body("repeat 3 times { say 1; }")[0]
        self.assertIsInstance(stmt, Repeat)
        self.assertEqual(stmt.count.value, 3)

    def test_attempt(self):
        stmt = _body('attempt safely { complain "x"; } or reassure "fine";')[0]
        self.assertIsInstance(stmt, Attempt)
        self.assertEqual(stmt.reassurance, "fine")
        self.assertIsInstance(stmt.body[0], Complain)

    def test_attempt_requires_semicolon(self):
        with self.assertRaises(ParseError):
            _body('attempt safely { } or reassure "fine"')

    def test_consent_gate(self):
        stmt = _body('only if okay "camera" { say 1; }')[0]
        self.assertIsInstance(stmt, ConsentGate)
        self.assertEqual(stmt.permission, "camera")

    def test_emote_statement_wraps_next_statement(self):
        stmt = _body("@excited(level = 9) remember x = 1;")[0]
        self.assertIsInstance(stmt, EmoteStatement)
        self.assertEqual(stmt.emote.name, "excited")
        self.assertIsInstance(stmt.statement, Remember)

    def test_spawn_worker(self):
        stmt = _body("spawn worker helper;")[0]
        self.assertIsInstance(stmt, SpawnWorker)
        self.assertEqual(stmt.name, "helper")

    def test_give_back(self):
        stmt = _body("give back 1;")[0]
        self.assertIsInstance(stmt, GiveBack)

    def test_statement_positions(self):
        stmt = _parse("to main() {\n    give back 1;\n}").items[0].body[0]
        self.assertEqual((stmt.line, stmt.col), (2, 5))


# ─────────────────────────────────────────────
#  Expressions
# ─────────────────────────────────────────────

class TestExpressions(unittest.TestCase):

    def test_multiplication_binds_tighter(self):
        expr = _expr("a + b * c")
        self.assertEqual(expr.op, "+")
        self.assertIsInstance(expr.left, Identifier)
        self.assertEqual(expr.right.op, "*")

    def test_left_associative(self):
        expr = _expr("a - b - c")
        self.assertEqual(expr.op, "-")
        self.assertEqual(expr.left.op, "-")
        self.assertEqual(expr.right.name, "c")

    def test_full_precedence_ladder(self):
        expr = _expr("a or b and c == d < e + f * g")
        self.assertEqual(expr.op, "or")
        self.assertEqual(expr.right.op, "and")
        self.assertEqual(expr.right.right.op, "==")
        self.assertEqual(expr.right.right.right.op, "<")
        self.assertEqual(expr.right.right.right.right.op, "+")
        self.assertEqual(expr.right.right.right.right.right.op, "*")

    def test_unary_binds_tighter_than_binary(self):
        expr = _expr("not a and b")
        self.assertEqual(expr.op, "and")
        self.assertIsInstance(expr.left, UnaryOp)

    def test_unary_is_right_associative(self):
        expr = _expr("- - 1")
        self.assertIsInstance(expr, UnaryOp)
        self.assertIsInstance(expr.operand, UnaryOp)

    def test_parentheses(self):
        expr = _expr("(a + b) * c")
        self.assertEqual(expr.op, "*")
        self.assertEqual(expr.left.op, "+")

    def test_measured_binds_tightest(self):
        expr = _expr("1 measured in km + 2 measured in km")
        self.assertEqual(expr.op, "+")
        self.assertIsInstance(expr.left, Measured)
        self.assertEqual(expr.right.unit, "km")

    def test_literals(self):
        self.assertIsInstance(_expr("1.5"), FloatLiteral)
        self.assertIsInstance(_expr("true"), BoolLiteral)
        self.assertIsInstance(_expr('thanks("Ada")'), ThanksLiteral)

    def test_array_with_trailing_comma(self):
        expr = _expr("[1, 2, 3,]")
        self.assertIsInstance(expr, ArrayLiteral)
        self.assertEqual(len(expr.elements), 3)

    def test_call_with_arguments(self):
        expr = _expr("f(1, g(2), x)")
        self.assertIsInstance(expr, Call)
        self.assertEqual(len(expr.args), 3)
        self.assertIsInstance(expr.args[1], Call)


# ─────────────────────────────────────────────
#  Syntax Errors
# ─────────────────────────────────────────────

class TestParseErrors(unittest.TestCase):

    def test_missing_semicolon_names_token_and_position(self):
        with self.assertRaises(ParseError) as ctx:
            _parse("to main() {\n  remember x = 1\n}")
        self.assertIn("Expected ';'", ctx.exception.message)
        self.assertEqual((ctx.exception.line, ctx.exception.col), (3, 1))

    def test_incomplete_expression(self):
        with self.assertRaises(ParseError) as ctx:
            _expr("1 +")
        self.assertIn("end of input", ctx.exception.message)

    def test_trailing_tokens_after_expression(self):
        with self.assertRaises(ParseError):
            _expr("1 2")

    def test_missing_closing_brace(self):
        with self.assertRaises(ParseError):
            _parse("to main() { say 1;")

    def test_bad_type(self):
        with self.assertRaises(ParseError):
            _parse("to f(x: 5) { }")

    def test_deep_nesting_is_a_parse_error(self):
        nested = "(" * 3000 + "1" + ")" * 3000
        with self.assertRaises(ParseError) as ctx:
            _parse("to main() { give back " + nested + "; }")
        self.assertIn("nested too deeply", ctx.exception.message)
        with self.assertRaises(ParseError):
            _expr(nested)
        with self.assertRaises(ParseError):
            Parser(Lexer("say " + nested + ";").tokenize()).parse_statements()


if __name__ == "__main__":
    unittest.main(verbosity=2)
