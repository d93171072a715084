"""
WokeLang Interpreter
====================
Tree-walking interpreter that executes the AST produced by the Parser.

A program runs in two passes: every top-level item is registered in source
order (functions, gratitude, workers, side quests, constants), then `main`
is called if one was defined.

Statements hand back either None (carry on) or a Return signal, so a
`give back` unwinds block by block to the enclosing call. Runtime errors
are WokeRuntimeError exceptions; only `attempt safely` catches them.
"""
import logging
import sys
from dataclasses import dataclass
from typing import Callable

from .environment import Environment
from .errors import Complaint, ConsentDenied, WokeRuntimeError
from .nodes import ASTNode, FunctionDef, Program, SideQuestDef, WorkerDef
from .values import (
    UNIT, ArrayValue, BoolValue, FloatValue, FunctionValue, IntValue,
    MeasuredValue, StringValue, ThanksValue, Value,
    display, to_int, truthy, unescape,
)

logger = logging.getLogger(__name__)

ConsentPolicy = Callable[[str], bool]


def auto_grant(permission: str) -> bool:
    """Default consent policy: every permission is granted."""
    return True


def deny_all(permission: str) -> bool:
    """Consent policy that refuses everything."""
    return False


@dataclass(frozen=True)
class Return:
    """Signal produced by `give back`; carries the returned value."""
    value: Value


# ─────────────────────────────────────────────────────────────
#  Operators
# ─────────────────────────────────────────────────────────────

COMPARISONS: dict[str, Callable[[object, object], bool]] = {
    "<": lambda a, b: a < b,
    ">": lambda a, b: a > b,
    "<=": lambda a, b: a <= b,
    ">=": lambda a, b: a >= b,
}


def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b >= 0) else -quotient


def _int_op(op: str, a: int, b: int) -> Value | None:
    match op:
        case "+":
            return IntValue(a + b)
        case "-":
            return IntValue(a - b)
        case "*":
            return IntValue(a * b)
        case "/":
            if b == 0:
                raise WokeRuntimeError("Division by zero")
            return IntValue(_trunc_div(a, b))
        case "%":
            if b == 0:
                raise WokeRuntimeError("Modulo by zero")
            return IntValue(a - b * _trunc_div(a, b))
    if op in COMPARISONS:
        return BoolValue(COMPARISONS[op](a, b))
    return None


def _float_op(op: str, a: float, b: float) -> Value | None:
    match op:
        case "+":
            return FloatValue(a + b)
        case "-":
            return FloatValue(a - b)
        case "*":
            return FloatValue(a * b)
        case "/":
            if b == 0.0:
                raise WokeRuntimeError("Division by zero")
            return FloatValue(a / b)
    if op in COMPARISONS:
        return BoolValue(COMPARISONS[op](a, b))
    return None


def binary_op(op: str, left: Value, right: Value) -> Value:
    """Apply a binary operator to two already-evaluated values."""
    if op == "==":
        return BoolValue(left == right)
    if op == "!=":
        return BoolValue(left != right)
    if op == "and":
        return BoolValue(truthy(left) and truthy(right))
    if op == "or":
        return BoolValue(truthy(left) or truthy(right))

    result = None
    match left, right:
        case IntValue(a), IntValue(b):
            result = _int_op(op, a, b)
        case FloatValue(a), FloatValue(b):
            result = _float_op(op, a, b)
        case (IntValue(a), FloatValue(b)) | (FloatValue(a), IntValue(b)) if op == "+":
            result = FloatValue(a + b)
        case (StringValue(), _) | (_, StringValue()) if op == "+":
            result = StringValue(display(left) + display(right))
        case MeasuredValue(a, unit_a), MeasuredValue(b, unit_b):
            if unit_a != unit_b:
                raise WokeRuntimeError(f"Unit mismatch: {unit_a} vs {unit_b}")
            result = MeasuredValue(binary_op(op, a, b), unit_a)

    if result is None:
        raise WokeRuntimeError(
            f"Invalid operation: {display(left)} {op} {display(right)}"
        )
    return result


def unary_op(op: str, operand: Value) -> Value:
    """Apply `not` or unary `-`."""
    if op == "not":
        return BoolValue(not truthy(operand))
    match operand:
        case IntValue(number):
            return IntValue(-number)
        case FloatValue(number):
            return FloatValue(-number)
        case MeasuredValue(inner, unit):
            return MeasuredValue(unary_op(op, inner), unit)
    raise WokeRuntimeError(f"Invalid unary operation on: {display(operand)}")


# ─────────────────────────────────────────────────────────────
#  Interpreter
# ─────────────────────────────────────────────────────────────

class Interpreter:
    """
    Tree-walking interpreter for WokeLang programs.

    Usage:
        interp = Interpreter()
        result = interp.execute(ast)

    Program output goes through `output_fn` (default: sys.stdout.write).
    `consent_policy` decides permissions nobody has decided yet.
    """

    def __init__(self, output_fn: Callable[[str], object] | None = None,
                 consent_policy: ConsentPolicy | None = None):
        self.output_fn = output_fn or sys.stdout.write
        self.consent_policy = consent_policy or auto_grant
        self.globals = Environment()
        self.workers: dict[str, WorkerDef] = {}
        self.side_quests: dict[str, SideQuestDef] = {}
        self.builtins: dict[str, Callable[[list[Value]], Value]] = {
            "say": self._builtin_say,
            "print": self._builtin_print,
            "println": self._builtin_println,
            "len": self._builtin_len,
            "int": self._builtin_int,
            "float": self._builtin_float,
            "string": self._builtin_string,
        }

    @property
    def gratitude(self) -> list[tuple[str, str]]:
        """Every (contributor, contribution) pair seen so far, in order."""
        return self.globals.gratitude

    def _write(self, text: str, end: str = "\n"):
        self.output_fn(text + end)

    # ─────────────────────────────────────────────────────────
    #  Program
    # ─────────────────────────────────────────────────────────

    def execute(self, program: Program) -> Value:
        """Register every top-level item, then run `main` if there is one."""
        self.load(program)
        return self.run_main()

    def load(self, program: Program):
        """First pass: register top-level items in source order."""
        for item in program.items:
            method = getattr(self, f"_register_{item.node_type.lower()}", None)
            if method is None:
                raise WokeRuntimeError(f"Unknown top-level item: {item.node_type}", item.line, item.col)
            method(item)

    def run_main(self) -> Value:
        """Second pass: call `main()` if it was registered."""
        if self.globals.find("main") is None:
            logger.debug("no main function; nothing to run")
            return UNIT
        main = self.globals.lookup("main")
        if not isinstance(main, FunctionValue):
            raise WokeRuntimeError("main is not a function")
        return self.call_function(main.definition, [], self.globals)

    def _register_functiondef(self, node: FunctionDef):
        logger.debug("registering function %s/%d", node.name, len(node.params))
        self.globals.define(node.name, FunctionValue(node))

    def _register_gratitude(self, node):
        for entry in node.entries:
            contributor, contribution = unescape(entry.contributor), unescape(entry.contribution)
            self.globals.record_gratitude(contributor, contribution)
            self._write(f"[thanks] {contributor} → {contribution}")

    def _register_workerdef(self, node: WorkerDef):
        self.workers[node.name] = node
        self._write(f"[worker] Registered worker: {node.name}")

    def _register_sidequestdef(self, node: SideQuestDef):
        self.side_quests[node.name] = node
        self._write(f"[side quest] Registered: {node.name}")

    def _register_constdef(self, node):
        self.globals.define(node.name, self.evaluate(node.value, self.globals))

    # ─────────────────────────────────────────────────────────
    #  Functions
    # ─────────────────────────────────────────────────────────

    def call_function(self, definition: FunctionDef, args: list[Value], env: Environment) -> Value:
        """Call a user function in a fresh child scope of `env`."""
        if len(definition.params) != len(args):
            raise WokeRuntimeError(
                f"Function {definition.name} expects {len(definition.params)} "
                f"arguments, got {len(args)}"
            )

        scope = env.child()
        for param, arg in zip(definition.params, args):
            scope.define(param.name, arg)

        logger.debug("calling %s", definition.name)
        if definition.hello is not None:
            self._write(f"[hello] {unescape(definition.hello)}")

        try:
            signal = self.execute_block(definition.body, scope)
        except RecursionError:
            raise WokeRuntimeError(
                f"Maximum recursion depth exceeded in {definition.name}"
            ) from None

        if definition.goodbye is not None:
            self._write(f"[goodbye] {unescape(definition.goodbye)}")

        return signal.value if signal is not None else UNIT

    # ─────────────────────────────────────────────────────────
    #  Statements
    # ─────────────────────────────────────────────────────────

    def execute_block(self, statements: list[ASTNode], env: Environment) -> Return | None:
        """Run statements in order, stopping at the first Return signal."""
        for stmt in statements:
            signal = self.execute_statement(stmt, env)
            if signal is not None:
                return signal
        return None

    def execute_statement(self, node: ASTNode, env: Environment) -> Return | None:
        method = getattr(self, f"_exec_{node.node_type.lower()}", None)
        if method is None:
            raise WokeRuntimeError(f"Unknown statement: {node.node_type}", node.line, node.col)
        try:
            return method(node, env)
        except WokeRuntimeError as exc:
            _locate(exc, node)
            raise

    def _exec_remember(self, node, env: Environment) -> None:
        value = self.evaluate(node.value, env)
        if node.unit is not None:
            value = MeasuredValue(value, node.unit)
        env.define(node.name, value)

    def _exec_assign(self, node, env: Environment) -> None:
        env.assign(node.name, self.evaluate(node.value, env))

    def _exec_giveback(self, node, env: Environment) -> Return:
        return Return(self.evaluate(node.value, env))

    def _exec_when(self, node, env: Environment) -> Return | None:
        if truthy(self.evaluate(node.condition, env)):
            return self.execute_block(node.then_body, env.child())
        if node.else_body is not None:
            return self.execute_block(node.else_body, env.child())
        return None

    def _exec_repeat(self, node, env: Environment) -> Return | None:
        # The body shares the enclosing scope across iterations.
        count = to_int(self.evaluate(node.count, env))
        for _ in range(count):
            signal = self.execute_block(node.body, env)
            if signal is not None:
                return signal
        return None

    def _exec_attempt(self, node, env: Environment) -> Return | None:
        try:
            return self.execute_block(node.body, env.child())
        except WokeRuntimeError as exc:
            logger.debug("attempt suppressed: %s", exc)
            self._write(f"[reassure] {unescape(node.reassurance)}")
            return None

    def _exec_consentgate(self, node, env: Environment) -> Return | None:
        if not self._check_consent(node.permission, env):
            raise ConsentDenied(node.permission)
        return self.execute_block(node.body, env.child())

    def _check_consent(self, permission: str, env: Environment) -> bool:
        decision = env.consent_decision(permission)
        if decision is not None:
            return decision
        granted = bool(self.consent_policy(permission))
        logger.debug("consent for %r decided: %s", permission, granted)
        env.record_consent(permission, granted)
        if granted:
            self._write(f"[Consent] Granting permission: {permission}")
        return granted

    def _exec_exprstatement(self, node, env: Environment) -> None:
        self.evaluate(node.expr, env)

    def _exec_complain(self, node, env: Environment) -> None:
        raise Complaint(f"Complaint: {unescape(node.message)}")

    def _exec_emotestatement(self, node, env: Environment) -> Return | None:
        emote = node.emote
        line = f"[emote @{emote.name}]"
        if emote.params:
            rendered = [f"{key}={display(self.evaluate(expr, env))}" for key, expr in emote.params]
            line += " " + ", ".join(rendered)
        self._write(line)
        return self.execute_statement(node.statement, env)

    def _exec_spawnworker(self, node, env: Environment) -> None:
        self._write(f"[spawn] Starting worker: {node.name}")

    # ─────────────────────────────────────────────────────────
    #  Expressions
    # ─────────────────────────────────────────────────────────

    def evaluate(self, node: ASTNode, env: Environment) -> Value:
        """Evaluate an expression node to a Value."""
        method = getattr(self, f"_eval_{node.node_type.lower()}", None)
        if method is None:
            raise WokeRuntimeError(f"Unknown expression: {node.node_type}", node.line, node.col)
        try:
            return method(node, env)
        except WokeRuntimeError as exc:
            _locate(exc, node)
            raise

    def _eval_intliteral(self, node, env: Environment) -> Value:
        return IntValue(node.value)

    def _eval_floatliteral(self, node, env: Environment) -> Value:
        return FloatValue(node.value)

    def _eval_stringliteral(self, node, env: Environment) -> Value:
        return StringValue(unescape(node.value))

    def _eval_boolliteral(self, node, env: Environment) -> Value:
        return BoolValue(node.value)

    def _eval_identifier(self, node, env: Environment) -> Value:
        return env.lookup(node.name)

    def _eval_arrayliteral(self, node, env: Environment) -> Value:
        return ArrayValue(tuple(self.evaluate(el, env) for el in node.elements))

    def _eval_binaryop(self, node, env: Environment) -> Value:
        # Both sides are always evaluated, `and`/`or` included.
        left = self.evaluate(node.left, env)
        right = self.evaluate(node.right, env)
        return binary_op(node.op, left, right)

    def _eval_unaryop(self, node, env: Environment) -> Value:
        return unary_op(node.op, self.evaluate(node.operand, env))

    def _eval_measured(self, node, env: Environment) -> Value:
        return MeasuredValue(self.evaluate(node.expr, env), node.unit)

    def _eval_thanksliteral(self, node, env: Environment) -> Value:
        return ThanksValue(node.contributor)

    def _eval_call(self, node, env: Environment) -> Value:
        args = [self.evaluate(arg, env) for arg in node.args]

        builtin = self.builtins.get(node.name)
        if builtin is not None:
            return builtin(args)

        if env.find(node.name) is None:
            raise WokeRuntimeError(f"Undefined function: {node.name}")
        target = env.lookup(node.name)
        if not isinstance(target, FunctionValue):
            raise WokeRuntimeError(f"{node.name} is not a function")
        return self.call_function(target.definition, args, env)

    # ─────────────────────────────────────────────────────────
    #  Built-ins
    # ─────────────────────────────────────────────────────────

    def _builtin_say(self, args: list[Value]) -> Value:
        if len(args) != 1:
            raise WokeRuntimeError("say expects exactly one argument")
        self._write(display(args[0]))
        return UNIT

    def _builtin_print(self, args: list[Value]) -> Value:
        self._write("".join(display(arg) for arg in args), end="")
        return UNIT

    def _builtin_println(self, args: list[Value]) -> Value:
        self._write("".join(display(arg) for arg in args))
        return UNIT

    def _builtin_len(self, args: list[Value]) -> Value:
        match args:
            case [StringValue(text)]:
                return IntValue(len(text))
            case [ArrayValue(items)]:
                return IntValue(len(items))
        raise WokeRuntimeError("len expects a string or array")

    def _builtin_int(self, args: list[Value]) -> Value:
        if len(args) != 1:
            raise WokeRuntimeError("int expects exactly one argument")
        return IntValue(to_int(args[0]))

    def _builtin_float(self, args: list[Value]) -> Value:
        match args:
            case [IntValue(number)] | [FloatValue(number)]:
                return FloatValue(float(number))
        raise WokeRuntimeError("float expects a numeric argument")

    def _builtin_string(self, args: list[Value]) -> Value:
        if len(args) != 1:
            raise WokeRuntimeError("string expects exactly one argument")
        return StringValue(display(args[0]))


def _locate(exc: WokeRuntimeError, node: ASTNode):
    """Attach the innermost node's position to an error that has none."""
    if exc.line is None and node.line:
        exc.line, exc.col = node.line, node.col
