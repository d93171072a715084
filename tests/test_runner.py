"""
WokeLang Runner, Shell & Example Tests
======================================
The command-line runner, error formatting, the interactive shell and the
example programs under examples/.

Usage:
    python -m pytest tests/test_runner.py -v
"""
import sys
import os
import io
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from wokelang import __version__
from wokelang.errors import LexError, ParseError, WokeRuntimeError
from wokelang.interpreter import Interpreter, deny_all
from wokelang.repl import evaluate_line, run_repl
from wokelang.run import format_error, main, run_file, run_source
from wokelang.values import ArrayValue, FloatValue, IntValue, MeasuredValue


# ─────────────────────────────────────────────
#  run_source / format_error
# ─────────────────────────────────────────────

class TestRunSource(unittest.TestCase):

    def test_success(self):
        result = run_source('to main() { say "hi"; give back 5; }')
        self.assertTrue(result.ok)
        self.assertEqual(result.value, IntValue(5))
        self.assertEqual(result.text, "hi\n")

    def test_uncaught_division_by_zero_reports_failure(self):
        result = run_source("to main() { say 1 / 0; }")
        self.assertFalse(result.ok)
        self.assertIsInstance(result.error, WokeRuntimeError)
        self.assertEqual(result.error.message, "Division by zero")

    def test_output_before_failure_is_kept(self):
        result = run_source('to main() { say "first"; complain "stop"; say "never"; }')
        self.assertFalse(result.ok)
        self.assertEqual(result.text, "first\n")

    def test_error_kinds_stay_distinct(self):
        self.assertIsInstance(run_source("to main() { § }").error, LexError)
        self.assertIsInstance(run_source("to main() { say 1 }").error, ParseError)

    def test_deep_nesting_is_returned_as_parse_error(self):
        nested = "(" * 3000 + "1" + ")" * 3000
        result = run_source("to main() { give back " + nested + "; }")
        self.assertFalse(result.ok)
        self.assertIsInstance(result.error, ParseError)

    def test_consent_policy_is_passed_through(self):
        result = run_source('to main() { only if okay "gps" { } }', consent_policy=deny_all)
        self.assertIn("Consent denied for: gps", result.error.message)


class TestFormatError(unittest.TestCase):

    def test_plain_with_source_excerpt(self):
        source = "to main() {\n  say ghost;\n}"
        error = run_source(source).error
        text = format_error(error, source, "demo.wl", color=False)
        self.assertEqual(
            text.splitlines(),
            [
                "Runtime error: Undefined variable: ghost",
                "  --> demo.wl:2:7",
                "   |   say ghost;",
                "   |       ^",
            ],
        )

    def test_without_position(self):
        text = format_error(WokeRuntimeError("main is not a function"), color=False)
        self.assertEqual(text, "Runtime error: main is not a function")

    def test_colored_output_keeps_message(self):
        error = ParseError("Expected ';', got end of input", 1, 4)
        self.assertIn("Expected ';', got end of input", format_error(error, "abc", color=True))


# ─────────────────────────────────────────────
#  run_file / main
# ─────────────────────────────────────────────

class TestRunFile(unittest.TestCase):

    def _write(self, source: str) -> str:
        handle = tempfile.NamedTemporaryFile("w", suffix=".wl", delete=False, encoding="utf-8")
        with handle:
            handle.write(source)
        self.addCleanup(os.unlink, handle.name)
        return handle.name

    def _capture(self, fn, *args, **kwargs):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = fn(*args, **kwargs)
        return code, out.getvalue(), err.getvalue()

    def test_success_exit_code(self):
        path = self._write('to main() { say "hello"; give back 5; }')
        code, out, err = self._capture(run_file, path, show_result=True)
        self.assertEqual(code, 0)
        self.assertEqual(out, "hello\n⟹ 5\n")
        self.assertEqual(err, "")

    def test_failure_exit_code(self):
        path = self._write("to main() { say 1 / 0; }")
        code, out, err = self._capture(run_file, path, color=False)
        self.assertEqual(code, 1)
        self.assertIn("Runtime error: Division by zero", err)
        self.assertIn(":1:19", err)

    def test_undecodable_file(self):
        handle = tempfile.NamedTemporaryFile("wb", suffix=".wl", delete=False)
        with handle:
            handle.write(b'to main() { say "\xff"; }')
        self.addCleanup(os.unlink, handle.name)
        code, _, err = self._capture(run_file, handle.name)
        self.assertEqual(code, 1)
        self.assertIn("cannot read", err)

    def test_directory_path(self):
        code, _, err = self._capture(run_file, tempfile.gettempdir())
        self.assertEqual(code, 1)
        self.assertIn("cannot read", err)

    def test_missing_file(self):
        code, _, err = self._capture(run_file, "/nonexistent/program.wl")
        self.assertEqual(code, 1)
        self.assertIn("File not found", err)

    def test_main_version(self):
        code, out, _ = self._capture(main, ["--version"])
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), f"WokeLang {__version__}")

    def test_main_runs_file(self):
        path = self._write("to main() { give back 2 + 2; }")
        code, out, _ = self._capture(main, [path, "--result", "--no-color"])
        self.assertEqual(code, 0)
        self.assertEqual(out, "⟹ 4\n")

    def test_main_deny_consent(self):
        path = self._write('to main() { only if okay "camera" { say "click"; } }')
        code, out, err = self._capture(main, [path, "--deny-consent", "--no-color"])
        self.assertEqual(code, 1)
        self.assertNotIn("click", out)
        self.assertIn("Consent denied for: camera", err)


# ─────────────────────────────────────────────
#  Interactive Shell
# ─────────────────────────────────────────────

class TestRepl(unittest.TestCase):

    def _session(self, lines: list[str]):
        """Feed `lines` to the shell; return (shell lines, program output)."""
        feed = iter(lines)

        def fake_input(prompt):
            try:
                return next(feed)
            except StopIteration:
                raise EOFError from None

        printed, out = [], []
        run_repl(Interpreter(output_fn=out.append), fake_input, printed.append)
        return printed, "".join(out)

    def test_state_persists_between_lines(self):
        printed, _ = self._session(["remember x = 5;", "x + 1"])
        self.assertIn("  ⟹ 6", printed)

    def test_function_definitions(self):
        printed, _ = self._session(["to double(n) { give back n * 2; }", "double(21)"])
        self.assertIn("  ⟹ 42", printed)

    def test_statements_print_through_output(self):
        _, out = self._session(['say "hi";'])
        self.assertEqual(out, "hi\n")

    def test_errors_do_not_end_the_session(self):
        printed, _ = self._session(["ghost", "1 +", "40 + 2"])
        self.assertTrue(any("Runtime error: Undefined variable: ghost" in p for p in printed))
        self.assertTrue(any("Syntax error" in p for p in printed))
        self.assertIn("  ⟹ 42", printed)

    def test_env_command(self):
        printed, _ = self._session(["remember x = 5 measured in km;", "env"])
        self.assertIn("    x = 5 measured in km", printed)

    def test_thanks_command(self):
        printed, out = self._session(['thanks to { "Ada" → "math"; }', "thanks"])
        self.assertEqual(out, "[thanks] Ada → math\n")
        self.assertIn("    Ada → math", printed)

    def test_clear_command(self):
        printed, _ = self._session(["remember x = 1;", "clear", "x"])
        self.assertIn("  ∅ State cleared.", printed)
        self.assertTrue(any("Undefined variable: x" in p for p in printed))

    def test_help_command(self):
        printed, _ = self._session(["help"])
        self.assertTrue(any("remember" in p and "Keyword" in p for p in printed))

    def test_exit_stops_reading(self):
        printed, out = self._session(["exit", 'say "late";'])
        self.assertEqual(out, "")
        self.assertIn("  Take care. Goodbye.", printed)

    def test_evaluate_line_returns_given_back_value(self):
        interp = Interpreter(output_fn=lambda s: None)
        self.assertEqual(evaluate_line(interp, "give back 3;"), IntValue(3))
        self.assertIsNone(evaluate_line(interp, "remember y = 1;"))


# ─────────────────────────────────────────────
#  Integration (example files)
# ─────────────────────────────────────────────

class TestExampleFiles(unittest.TestCase):
    """All example .wl files must lex, parse and execute."""

    EXAMPLES_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "examples")

    def _run_example(self, filename: str, consent_policy=None):
        with open(os.path.join(self.EXAMPLES_DIR, filename), "r", encoding="utf-8") as f:
            source = f.read()
        result = run_source(source, consent_policy)
        self.assertTrue(result.ok, f"{filename} failed: {result.error}")
        return result

    def test_hello(self):
        result = self._run_example("hello.wl")
        self.assertEqual(result.value, IntValue(5))
        self.assertEqual(
            result.text,
            "[thanks] Ada → the first program\n"
            "[thanks] Grace → the first compiler\n"
            "[hello] greeting someone\n"
            "[goodbye] greeted\n"
            "Hello, world!\n",
        )

    def test_units(self):
        result = self._run_example("units.wl")
        self.assertEqual(result.value, MeasuredValue(IntValue(8), "km"))
        self.assertEqual(result.text, "8 measured in km\n[reassure] km and hours do not add up\n")

    def test_consent(self):
        result = self._run_example("consent.wl")
        self.assertEqual(result.value, IntValue(3))
        self.assertEqual(
            result.text,
            "[worker] Registered worker: uploader\n"
            "[side quest] Registered: cleanup\n"
            "[Consent] Granting permission: camera\n"
            "smile!\n"
            "[spawn] Starting worker: uploader\n"
            "[emote @excited]\n"
            "3\n",
        )

    def test_consent_denied(self):
        with open(os.path.join(self.EXAMPLES_DIR, "consent.wl"), "r", encoding="utf-8") as f:
            result = run_source(f.read(), consent_policy=deny_all)
        self.assertFalse(result.ok)
        self.assertNotIn("smile!", result.text)

    def test_scoping(self):
        result = self._run_example("scoping.wl")
        self.assertEqual(
            result.value,
            ArrayValue((IntValue(10), IntValue(120), IntValue(3), IntValue(-3), FloatValue(3.5))),
        )
        self.assertEqual(result.text, "10\n120\n[reassure] hidden stayed in its block\n")


if __name__ == "__main__":
    unittest.main(verbosity=2)
