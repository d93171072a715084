"""
WokeLang File Runner
====================
Execute .wl source files from the command line.

Usage:
    python -m wokelang <filename.wl>
    python -m wokelang <filename.wl> --result --verbose
    python -m wokelang                      (interactive shell)
"""
import argparse
import logging
import os
import sys
from dataclasses import dataclass, field

from termcolor import colored

from .errors import WokeError
from .interpreter import ConsentPolicy, Interpreter, deny_all
from .lexer import Lexer
from .parser import Parser
from .values import Value, display

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    """What a driver gets back from running a program."""
    value: Value | None = None
    output: list[str] = field(default_factory=list)
    error: WokeError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def text(self) -> str:
        return "".join(self.output)


def execute_source(source: str, output_fn=None, consent_policy: ConsentPolicy | None = None) -> Value:
    """Lex, parse and run `source`. Errors propagate as WokeError subclasses."""
    tokens = Lexer(source).tokenize()
    program = Parser(tokens).parse()
    interp = Interpreter(output_fn=output_fn, consent_policy=consent_policy)
    return interp.execute(program)


def run_source(source: str, consent_policy: ConsentPolicy | None = None) -> RunResult:
    """Run `source`, capturing its output; failures are returned, not raised."""
    result = RunResult()
    try:
        result.value = execute_source(source, result.output.append, consent_policy)
    except WokeError as exc:
        result.error = exc
    return result


def format_error(error: WokeError, source: str | None = None,
                 filename: str | None = None, color: bool = True) -> str:
    """
    Render an error as a labelled message plus, when the position is known,
    the offending source line with a caret under the column.
    """
    def paint(text: str, *attrs: str, tint: str | None = "red") -> str:
        if not color:
            return text
        return colored(text, tint, attrs=list(attrs))

    lines = [paint(f"{error.kind}: ", "bold") + error.message]
    if error.line is None:
        return "\n".join(lines)

    location = f"{filename or '<source>'}:{error.line}:{error.col}"
    lines.append("  --> " + paint(location, "bold", tint=None))

    source_lines = source.splitlines() if source else []
    if 0 < error.line <= len(source_lines):
        text = source_lines[error.line - 1]
        lines.append("   | " + text)
        lines.append("   | " + " " * max(error.col - 1, 0) + paint("^", "bold"))
    return "\n".join(lines)


def run_file(filepath: str, color: bool = True, show_result: bool = False,
             consent_policy: ConsentPolicy | None = None) -> int:
    """
    Execute a .wl source file.

    Args:
        filepath: Path to the .wl file
        color: Colour error diagnostics
        show_result: Print what `main` gave back
        consent_policy: Overrides the auto-grant consent policy

    Returns:
        0 on success, 1 on error
    """
    if not os.path.exists(filepath):
        print(f"Error: File not found: {filepath}", file=sys.stderr)
        return 1

    try:
        with open(filepath, "r", encoding="utf-8") as f:
            source = f.read()
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Error: cannot read {filepath}: {exc}", file=sys.stderr)
        return 1

    logger.debug("running %s (%d bytes)", filepath, len(source))
    try:
        value = execute_source(source, consent_policy=consent_policy)
    except WokeError as exc:
        sys.stdout.flush()
        print(format_error(exc, source, os.path.basename(filepath), color), file=sys.stderr)
        return 1

    if show_result:
        print(f"⟹ {display(value)}")
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wokelang",
        description="Run a WokeLang program, or start the interactive shell.",
    )
    parser.add_argument("file", nargs="?", help="file to run (if empty, starts the shell)")
    parser.add_argument("--version", action="store_true", help="show version information")
    parser.add_argument("-v", "--verbose", action="store_true", help="log interpreter activity to stderr")
    parser.add_argument("--no-color", action="store_true", help="plain error diagnostics")
    parser.add_argument("--result", action="store_true", help="print the value main gives back")
    parser.add_argument("--deny-consent", action="store_true", help="refuse every consent gate")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.version:
        from . import __version__
        print(f"WokeLang {__version__}")
        return 0

    policy = deny_all if args.deny_consent else None

    if args.file is None:
        from .repl import run_repl
        run_repl(Interpreter(consent_policy=policy))
        return 0

    return run_file(args.file, color=not args.no_color, show_result=args.result, consent_policy=policy)


if __name__ == "__main__":
    sys.exit(main())
