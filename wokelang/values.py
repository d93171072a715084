"""
WokeLang Runtime Values
=======================
The closed set of values the interpreter works with. Each variant is a
frozen dataclass, so equality is structural and never crosses variants:
IntValue(1) is not BoolValue(True) and not FloatValue(1.0).
"""
import math
from dataclasses import dataclass

from .errors import WokeRuntimeError
from .nodes import FunctionDef


class Value:
    """Base class for every runtime value."""
    __slots__ = ()


@dataclass(frozen=True)
class IntValue(Value):
    value: int


@dataclass(frozen=True)
class FloatValue(Value):
    value: float


@dataclass(frozen=True)
class StringValue(Value):
    value: str


@dataclass(frozen=True)
class BoolValue(Value):
    value: bool


@dataclass(frozen=True)
class ArrayValue(Value):
    items: tuple[Value, ...] = ()


@dataclass(frozen=True)
class MeasuredValue(Value):
    """A value tagged with a unit name. Units nest only by wrapping."""
    inner: Value
    unit: str


@dataclass(frozen=True)
class UnitValue(Value):
    """The void value: what a function gives back when it gives back nothing."""


@dataclass(frozen=True)
class FunctionValue(Value):
    """A user function. Only the definition is captured, never an environment."""
    definition: FunctionDef


@dataclass(frozen=True)
class ThanksValue(Value):
    contributor: str


UNIT = UnitValue()


ESCAPES = {"n": "\n", "t": "\t", "r": "\r", '"': '"', "'": "'", "\\": "\\"}


def unescape(text: str) -> str:
    """Interpret backslash escapes left in place by the lexer."""
    if "\\" not in text:
        return text
    chars = []
    i = 0
    while i < len(text):
        ch = text[i]
        if ch == "\\" and i + 1 < len(text):
            nxt = text[i + 1]
            chars.append(ESCAPES.get(nxt, nxt))
            i += 2
            continue
        chars.append(ch)
        i += 1
    return "".join(chars)


def display(value: Value) -> str:
    """Render a value the way `say` prints it."""
    match value:
        case BoolValue(flag):
            return "true" if flag else "false"
        case IntValue(number):
            return str(number)
        case FloatValue(number):
            return repr(number)
        case StringValue(text):
            return text
        case ArrayValue(items):
            return "[" + ", ".join(display(item) for item in items) + "]"
        case MeasuredValue(inner, unit):
            return f"{display(inner)} measured in {unit}"
        case UnitValue():
            return "()"
        case FunctionValue(definition):
            return f"<function {definition.name}>"
        case ThanksValue(contributor):
            return f'thanks("{contributor}")'
    raise WokeRuntimeError(f"Cannot display {value!r}")


def truthy(value: Value) -> bool:
    """Map any value to a boolean for conditions and logical operators."""
    match value:
        case BoolValue(flag):
            return flag
        case IntValue(number):
            return number != 0
        case StringValue(text):
            return text != ""
        case ArrayValue(items):
            return len(items) > 0
        case UnitValue():
            return False
    return True


def to_int(value: Value) -> int:
    """Coerce a value to a Python int (used by `repeat` and `int()`)."""
    match value:
        case BoolValue(flag):
            return 1 if flag else 0
        case IntValue(number):
            return number
        case FloatValue(number) if math.isfinite(number):
            return int(number)
    raise WokeRuntimeError(f"Cannot convert to int: {display(value)}")
