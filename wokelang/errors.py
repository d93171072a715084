"""
WokeLang Errors
===============
One exception family per pipeline stage. A LexError never becomes a
ParseError and neither ever becomes a WokeRuntimeError.
"""


class WokeError(Exception):
    """Base class for every error the language core raises."""

    kind = "Error"

    def __init__(self, message: str, line: int | None = None, col: int | None = None):
        self.message = message
        self.line = line
        self.col = col
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        return f"{self.message} at line {self.line}, col {self.col}"


class LexError(WokeError):
    """Unrecognized character, unterminated string or block comment."""
    kind = "Lexical error"


class ParseError(WokeError):
    """Token sequence that matches no grammar production."""
    kind = "Syntax error"


class WokeRuntimeError(WokeError):
    """Raised while evaluating; only `attempt safely` can catch it."""
    kind = "Runtime error"


class Complaint(WokeRuntimeError):
    """Raised by a `complain "..."` statement."""


class ConsentDenied(WokeRuntimeError):
    """Raised when the consent policy refuses a permission."""

    def __init__(self, permission: str):
        self.permission = permission
        super().__init__(f"Consent denied for: {permission}")
