"""
WokeLang Keyword Registry
=========================
Every reserved word of the language, the group it belongs to, and what it
is for. The lexer builds its keyword table from this registry and the
shell's `help` command prints it.
"""
from dataclasses import dataclass
from enum import Enum


class KeywordGroup(Enum):
    """Families of reserved words."""
    CONTROL     = "control flow"
    SAFETY      = "consent & safety"
    GRATITUDE   = "gratitude"
    LIFECYCLE   = "lifecycle"
    CONCURRENCY = "concurrency"
    PATTERN     = "pattern matching"
    UNITS       = "units"
    MODULES     = "modules"
    TYPES       = "types"
    CONSTRAINTS = "constraints"
    PRAGMAS     = "pragmas"
    LOGIC       = "boolean & logic"


@dataclass(frozen=True)
class KeywordInfo:
    """
    A reserved word.

      - word:        The source spelling
      - group:       Which family it belongs to
      - intent:      What it does (or "reserved" when the grammar never uses it)
    """
    word: str
    group: KeywordGroup
    intent: str


def _kw(word: str, group: KeywordGroup, intent: str) -> tuple[str, KeywordInfo]:
    return word, KeywordInfo(word, group, intent)


KEYWORD_REGISTRY: dict[str, KeywordInfo] = dict([
    _kw("to",         KeywordGroup.CONTROL,     "Starts a function definition"),
    _kw("give",       KeywordGroup.CONTROL,     "give back <expr>; returns a value"),
    _kw("back",       KeywordGroup.CONTROL,     "Second half of give back"),
    _kw("remember",   KeywordGroup.CONTROL,     "Declares a variable"),
    _kw("when",       KeywordGroup.CONTROL,     "Conditional block"),
    _kw("otherwise",  KeywordGroup.CONTROL,     "Else branch of when"),
    _kw("repeat",     KeywordGroup.CONTROL,     "Counted loop"),
    _kw("times",      KeywordGroup.CONTROL,     "Closes the repeat count"),
    _kw("say",        KeywordGroup.CONTROL,     "Prints a value on its own line"),

    _kw("only",       KeywordGroup.SAFETY,      "only if okay \"perm\" { } consent gate"),
    _kw("if",         KeywordGroup.SAFETY,      "Part of the consent gate"),
    _kw("okay",       KeywordGroup.SAFETY,      "Part of the consent gate"),
    _kw("attempt",    KeywordGroup.SAFETY,      "attempt safely { } guarded block"),
    _kw("safely",     KeywordGroup.SAFETY,      "Part of attempt safely"),
    _kw("reassure",   KeywordGroup.SAFETY,      "Fallback message of attempt"),
    _kw("complain",   KeywordGroup.SAFETY,      "Raises a runtime error"),

    _kw("thanks",     KeywordGroup.GRATITUDE,   "thanks to { } block or thanks(\"who\")"),

    _kw("hello",      KeywordGroup.LIFECYCLE,   "Function entry message"),
    _kw("goodbye",    KeywordGroup.LIFECYCLE,   "Function exit message"),

    _kw("worker",     KeywordGroup.CONCURRENCY, "Declares or spawns a worker"),
    _kw("side",       KeywordGroup.CONCURRENCY, "side quest declaration"),
    _kw("quest",      KeywordGroup.CONCURRENCY, "side quest declaration"),
    _kw("superpower", KeywordGroup.CONCURRENCY, "reserved"),
    _kw("spawn",      KeywordGroup.CONCURRENCY, "spawn worker <name>;"),
    _kw("send",       KeywordGroup.CONCURRENCY, "reserved"),
    _kw("receive",    KeywordGroup.CONCURRENCY, "reserved"),
    _kw("channel",    KeywordGroup.CONCURRENCY, "reserved"),
    _kw("await",      KeywordGroup.CONCURRENCY, "reserved"),
    _kw("cancel",     KeywordGroup.CONCURRENCY, "reserved"),
    _kw("from",       KeywordGroup.CONCURRENCY, "reserved"),

    _kw("decide",     KeywordGroup.PATTERN,     "reserved"),
    _kw("based",      KeywordGroup.PATTERN,     "reserved"),
    _kw("on",         KeywordGroup.PATTERN,     "reserved"),

    _kw("measured",   KeywordGroup.UNITS,       "<expr> measured in <unit>"),
    _kw("in",         KeywordGroup.UNITS,       "Part of measured in"),

    _kw("use",        KeywordGroup.MODULES,     "reserved"),
    _kw("renamed",    KeywordGroup.MODULES,     "reserved"),
    _kw("share",      KeywordGroup.MODULES,     "reserved"),

    _kw("type",       KeywordGroup.TYPES,       "reserved"),
    _kw("const",      KeywordGroup.TYPES,       "Top-level constant"),
    _kw("String",     KeywordGroup.TYPES,       "Text type annotation"),
    _kw("Int",        KeywordGroup.TYPES,       "Integer type annotation"),
    _kw("Float",      KeywordGroup.TYPES,       "Float type annotation"),
    _kw("Bool",       KeywordGroup.TYPES,       "Boolean type annotation"),
    _kw("Maybe",      KeywordGroup.TYPES,       "Maybe T optional annotation"),

    _kw("must",       KeywordGroup.CONSTRAINTS, "reserved"),
    _kw("have",       KeywordGroup.CONSTRAINTS, "reserved"),

    _kw("care",       KeywordGroup.PRAGMAS,     "reserved"),
    _kw("strict",     KeywordGroup.PRAGMAS,     "reserved"),
    _kw("verbose",    KeywordGroup.PRAGMAS,     "reserved"),

    _kw("true",       KeywordGroup.LOGIC,       "Boolean literal"),
    _kw("false",      KeywordGroup.LOGIC,       "Boolean literal"),
    _kw("and",        KeywordGroup.LOGIC,       "Logical and (both sides evaluated)"),
    _kw("or",         KeywordGroup.LOGIC,       "Logical or, also attempt's fallback"),
    _kw("not",        KeywordGroup.LOGIC,       "Logical negation"),
])

def lookup(word: str) -> KeywordInfo | None:
    """Look up a reserved word."""
    return KEYWORD_REGISTRY.get(word)


def describe_all() -> str:
    """Return a formatted table of all reserved words for shell help."""
    lines = [
        "╔════════════╦══════════════════╦══════════════════════════════════════════╗",
        "║ Keyword    ║ Group            ║ Intent                                   ║",
        "╠════════════╬══════════════════╬══════════════════════════════════════════╣",
    ]
    for word, info in KEYWORD_REGISTRY.items():
        group = info.group.value[:16].ljust(16)
        intent = info.intent[:40].ljust(40)
        lines.append(f"║ {word.ljust(10)} ║ {group} ║ {intent} ║")
    lines.append("╚════════════╩══════════════════╩══════════════════════════════════════════╝")
    return "\n".join(lines)
