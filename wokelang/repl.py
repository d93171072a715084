"""
WokeLang REPL
=============
Interactive Read-Eval-Print Loop. State persists between lines: functions,
constants and `remember`ed variables stay defined until `clear`.
"""
from typing import Callable

from .errors import ParseError, WokeError
from .interpreter import Interpreter
from .keywords import describe_all
from .lexer import Lexer
from .parser import Parser
from .values import UNIT, display


BANNER = r"""
╔══════════════════════════════════════════════════════════════╗
║                                                              ║
║     WokeLang ─── a language that says please and thank you   ║
║                                                              ║
║     Type 'help' for the keyword reference                    ║
║     Type 'exit' or Ctrl+C to quit                            ║
║                                                              ║
╚══════════════════════════════════════════════════════════════╝
"""

HELP_TEXT = """
Examples:
  remember x = 5 measured in km;
  say x + (3 measured in km);
  to double(n) { give back n * 2; }
  double(21)
  only if okay "camera" { say "smile"; }
  attempt safely { complain "oops"; } or reassure "it's fine";

Commands: help, env, thanks, clear, exit
"""


def evaluate_line(interp: Interpreter, line: str):
    """
    Run one line of input against `interp`.

    The line is tried as top-level items first, then as a single
    expression (whose value is returned), then as a statement sequence.
    Returns the value to echo, or None.
    """
    tokens = Lexer(line).tokenize()

    try:
        program = Parser(tokens).parse()
    except ParseError:
        pass
    else:
        interp.load(program)
        return None

    try:
        expr = Parser(tokens).parse_expression()
    except ParseError:
        pass
    else:
        return interp.evaluate(expr, interp.globals)

    statements = Parser(tokens).parse_statements()
    signal = interp.execute_block(statements, interp.globals)
    return signal.value if signal is not None else None


def run_repl(interp: Interpreter | None = None,
             input_fn: Callable[[str], str] = input,
             print_fn: Callable[[str], None] = print):
    """Run the interactive WokeLang shell."""
    print_fn(BANNER)

    interp = interp or Interpreter()

    while True:
        try:
            line = input_fn("  woke⟩ ")
        except (EOFError, KeyboardInterrupt):
            print_fn("\n  Take care. Goodbye.")
            break

        line = line.strip()
        if not line:
            continue

        command = line.lower()

        if command in ("exit", "quit"):
            print_fn("  Take care. Goodbye.")
            break

        if command == "help":
            print_fn(describe_all())
            print_fn(HELP_TEXT)
            continue

        if command == "env":
            bindings = interp.globals.visible_names()
            if bindings:
                print_fn("  ─── Bindings ───")
                for name, value in bindings.items():
                    print_fn(f"    {name} = {display(value)}")
            else:
                print_fn("  (no bindings)")
            continue

        if command == "thanks":
            if interp.gratitude:
                print_fn("  ─── Gratitude ───")
                for contributor, contribution in interp.gratitude:
                    print_fn(f"    {contributor} → {contribution}")
            else:
                print_fn("  (no gratitude recorded yet)")
            continue

        if command == "clear":
            interp = Interpreter(output_fn=interp.output_fn, consent_policy=interp.consent_policy)
            print_fn("  ∅ State cleared.")
            continue

        try:
            result = evaluate_line(interp, line)
            if result is not None and result != UNIT:
                print_fn(f"  ⟹ {display(result)}")
        except WokeError as e:
            print_fn(f"  ⚠ {e.kind}: {e}")
