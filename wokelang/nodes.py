"""
WokeLang AST
============
Node types produced by the Parser and consumed by the Interpreter.
Nodes are plain data: every parent owns its children and nothing points
back up the tree.
"""
from dataclasses import dataclass, field


@dataclass
class ASTNode:
    """Base class for all AST nodes."""
    node_type: str = ""
    line: int = 0
    col: int = 0


# ─────────────────────────────────────────────────────────────
#  Type Annotations (advisory, never checked)
# ─────────────────────────────────────────────────────────────

@dataclass
class TypeAnnotation(ASTNode):
    """String, Int, Float, Bool, [T] (Array), Maybe T, or a custom name."""
    name: str = ""
    inner: "TypeAnnotation | None" = None

    def __post_init__(self):
        self.node_type = "TypeAnnotation"

    def __str__(self) -> str:
        if self.name == "Array":
            return f"[{self.inner}]"
        if self.name == "Maybe":
            return f"Maybe {self.inner}"
        return self.name


# ─────────────────────────────────────────────────────────────
#  Expressions
# ─────────────────────────────────────────────────────────────

@dataclass
class IntLiteral(ASTNode):
    value: int = 0

    def __post_init__(self):
        self.node_type = "IntLiteral"


@dataclass
class FloatLiteral(ASTNode):
    value: float = 0.0

    def __post_init__(self):
        self.node_type = "FloatLiteral"


@dataclass
class StringLiteral(ASTNode):
    """A string literal; escapes are still as written in the source."""
    value: str = ""

    def __post_init__(self):
        self.node_type = "StringLiteral"


@dataclass
class BoolLiteral(ASTNode):
    value: bool = False

    def __post_init__(self):
        self.node_type = "BoolLiteral"


@dataclass
class Identifier(ASTNode):
    """A reference to a variable."""
    name: str = ""

    def __post_init__(self):
        self.node_type = "Identifier"


@dataclass
class ArrayLiteral(ASTNode):
    """[a, b, c]"""
    elements: list[ASTNode] = field(default_factory=list)

    def __post_init__(self):
        self.node_type = "ArrayLiteral"


@dataclass
class Call(ASTNode):
    """name(arg, ...), built-in or user-defined."""
    name: str = ""
    args: list[ASTNode] = field(default_factory=list)

    def __post_init__(self):
        self.node_type = "Call"


@dataclass
class BinaryOp(ASTNode):
    """left <op> right, where op is the operator's source spelling."""
    op: str = ""
    left: ASTNode | None = None
    right: ASTNode | None = None

    def __post_init__(self):
        self.node_type = "BinaryOp"


@dataclass
class UnaryOp(ASTNode):
    """`not x` or `-x`."""
    op: str = ""
    operand: ASTNode | None = None

    def __post_init__(self):
        self.node_type = "UnaryOp"


@dataclass
class Measured(ASTNode):
    """expr measured in unit"""
    expr: ASTNode | None = None
    unit: str = ""

    def __post_init__(self):
        self.node_type = "Measured"


@dataclass
class ThanksLiteral(ASTNode):
    """thanks("contributor")"""
    contributor: str = ""

    def __post_init__(self):
        self.node_type = "ThanksLiteral"


# ─────────────────────────────────────────────────────────────
#  Emote Tags
# ─────────────────────────────────────────────────────────────

@dataclass
class EmoteTag(ASTNode):
    """@name or @name(key = expr, ...). Decorative only."""
    name: str = ""
    params: list[tuple[str, ASTNode]] = field(default_factory=list)

    def __post_init__(self):
        self.node_type = "EmoteTag"


# ─────────────────────────────────────────────────────────────
#  Statements
# ─────────────────────────────────────────────────────────────

@dataclass
class Remember(ASTNode):
    """remember name = value [measured in unit];"""
    name: str = ""
    value: ASTNode | None = None
    unit: str | None = None

    def __post_init__(self):
        self.node_type = "Remember"


@dataclass
class Assign(ASTNode):
    """name = value;"""
    name: str = ""
    value: ASTNode | None = None

    def __post_init__(self):
        self.node_type = "Assign"


@dataclass
class GiveBack(ASTNode):
    """give back value;"""
    value: ASTNode | None = None

    def __post_init__(self):
        self.node_type = "GiveBack"


@dataclass
class When(ASTNode):
    """when condition { ... } [otherwise { ... }]"""
    condition: ASTNode | None = None
    then_body: list[ASTNode] = field(default_factory=list)
    else_body: list[ASTNode] | None = None

    def __post_init__(self):
        self.node_type = "When"


@dataclass
class Repeat(ASTNode):
    """repeat count times { ... }"""
    count: ASTNode | None = None
    body: list[ASTNode] = field(default_factory=list)

    def __post_init__(self):
        self.node_type = "Repeat"


@dataclass
class Attempt(ASTNode):
    """attempt safely { ... } or reassure "message";"""
    body: list[ASTNode] = field(default_factory=list)
    reassurance: str = ""

    def __post_init__(self):
        self.node_type = "Attempt"


@dataclass
class ConsentGate(ASTNode):
    """only if okay "permission" { ... }"""
    permission: str = ""
    body: list[ASTNode] = field(default_factory=list)

    def __post_init__(self):
        self.node_type = "ConsentGate"


@dataclass
class ExprStatement(ASTNode):
    """A bare expression followed by ';'."""
    expr: ASTNode | None = None

    def __post_init__(self):
        self.node_type = "ExprStatement"


@dataclass
class Complain(ASTNode):
    """complain "message";"""
    message: str = ""

    def __post_init__(self):
        self.node_type = "Complain"


@dataclass
class EmoteStatement(ASTNode):
    """@emote statement"""
    emote: EmoteTag | None = None
    statement: ASTNode | None = None

    def __post_init__(self):
        self.node_type = "EmoteStatement"


@dataclass
class SpawnWorker(ASTNode):
    """spawn worker name;"""
    name: str = ""

    def __post_init__(self):
        self.node_type = "SpawnWorker"


# ─────────────────────────────────────────────────────────────
#  Top-Level Items
# ─────────────────────────────────────────────────────────────

@dataclass
class Param(ASTNode):
    name: str = ""
    type: TypeAnnotation | None = None

    def __post_init__(self):
        self.node_type = "Param"


@dataclass
class FunctionDef(ASTNode):
    """
    [@emote] to name(params) [→ Type] {
        [hello "...";]
        body
        [goodbye "...";]
    }
    """
    name: str = ""
    params: list[Param] = field(default_factory=list)
    return_type: TypeAnnotation | None = None
    hello: str | None = None
    body: list[ASTNode] = field(default_factory=list)
    goodbye: str | None = None
    emote: EmoteTag | None = None

    def __post_init__(self):
        self.node_type = "FunctionDef"


@dataclass
class GratitudeEntry(ASTNode):
    contributor: str = ""
    contribution: str = ""

    def __post_init__(self):
        self.node_type = "GratitudeEntry"


@dataclass
class Gratitude(ASTNode):
    """thanks to { "who" → "what"; ... }"""
    entries: list[GratitudeEntry] = field(default_factory=list)

    def __post_init__(self):
        self.node_type = "Gratitude"


@dataclass
class WorkerDef(ASTNode):
    """worker name { ... }, registered but never run."""
    name: str = ""
    body: list[ASTNode] = field(default_factory=list)

    def __post_init__(self):
        self.node_type = "WorkerDef"


@dataclass
class SideQuestDef(ASTNode):
    """side quest name { ... }, registered but never run."""
    name: str = ""
    body: list[ASTNode] = field(default_factory=list)

    def __post_init__(self):
        self.node_type = "SideQuestDef"


@dataclass
class ConstDef(ASTNode):
    """const name [: Type] = value;"""
    name: str = ""
    type: TypeAnnotation | None = None
    value: ASTNode | None = None

    def __post_init__(self):
        self.node_type = "ConstDef"


@dataclass
class Program(ASTNode):
    """Root node containing all top-level items."""
    items: list[ASTNode] = field(default_factory=list)

    def __post_init__(self):
        self.node_type = "Program"
