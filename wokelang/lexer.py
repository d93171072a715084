"""
WokeLang Lexer
==============
Tokenizes WokeLang source code into a flat list of typed tokens.
Handles keywords, operators, the → / -> arrow, string/number literals,
identifiers and both comment styles.
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator

from .errors import LexError
from .keywords import KEYWORD_REGISTRY


class TokenType(Enum):
    """All token types in the WokeLang language."""
    # Keywords: control flow
    KW_TO         = auto()
    KW_GIVE       = auto()
    KW_BACK       = auto()
    KW_REMEMBER   = auto()
    KW_WHEN       = auto()
    KW_OTHERWISE  = auto()
    KW_REPEAT     = auto()
    KW_TIMES      = auto()
    KW_SAY        = auto()

    # Keywords: consent & safety
    KW_ONLY       = auto()
    KW_IF         = auto()
    KW_OKAY       = auto()
    KW_ATTEMPT    = auto()
    KW_SAFELY     = auto()
    KW_REASSURE   = auto()
    KW_COMPLAIN   = auto()

    # Keywords: gratitude & lifecycle
    KW_THANKS     = auto()
    KW_HELLO      = auto()
    KW_GOODBYE    = auto()

    # Keywords: concurrency
    KW_WORKER     = auto()
    KW_SIDE       = auto()
    KW_QUEST      = auto()
    KW_SUPERPOWER = auto()
    KW_SPAWN      = auto()
    KW_SEND       = auto()
    KW_RECEIVE    = auto()
    KW_CHANNEL    = auto()
    KW_AWAIT      = auto()
    KW_CANCEL     = auto()
    KW_FROM       = auto()

    # Keywords: pattern matching (reserved)
    KW_DECIDE     = auto()
    KW_BASED      = auto()
    KW_ON         = auto()

    # Keywords: units
    KW_MEASURED   = auto()
    KW_IN         = auto()

    # Keywords: modules (reserved)
    KW_USE        = auto()
    KW_RENAMED    = auto()
    KW_SHARE      = auto()

    # Keywords: types
    KW_TYPE       = auto()
    KW_CONST      = auto()
    KW_STRING     = auto()   # String
    KW_INT        = auto()   # Int
    KW_FLOAT      = auto()   # Float
    KW_BOOL       = auto()   # Bool
    KW_MAYBE      = auto()   # Maybe

    # Keywords: constraints & pragmas (reserved)
    KW_MUST       = auto()
    KW_HAVE       = auto()
    KW_CARE       = auto()
    KW_STRICT     = auto()
    KW_VERBOSE    = auto()

    # Keywords: boolean & logic
    KW_TRUE       = auto()
    KW_FALSE      = auto()
    KW_AND        = auto()
    KW_OR         = auto()
    KW_NOT        = auto()

    # Operators
    PLUS          = auto()   # +
    MINUS         = auto()   # -
    STAR          = auto()   # *
    SLASH         = auto()   # /
    PERCENT       = auto()   # %
    EQEQ          = auto()   # ==
    NEQ           = auto()   # !=
    LT            = auto()   # <
    GT            = auto()   # >
    LTE           = auto()   # <=
    GTE           = auto()   # >=
    ASSIGN        = auto()   # =
    ARROW         = auto()   # → or ->

    # Delimiters
    LPAREN        = auto()   # (
    RPAREN        = auto()   # )
    LBRACE        = auto()   # {
    RBRACE        = auto()   # }
    LBRACKET      = auto()   # [
    RBRACKET      = auto()   # ]
    COMMA         = auto()   # ,
    SEMICOLON     = auto()   # ;
    COLON         = auto()   # :
    DOT           = auto()   # .
    AT            = auto()   # @

    # Literals
    INTEGER       = auto()   # 42
    FLOAT         = auto()   # 3.14
    STRING        = auto()   # "..."
    IDENTIFIER    = auto()   # variable/function names

    # Special
    EOF           = auto()


@dataclass
class Token:
    """A single token from the WokeLang source."""
    type: TokenType
    value: str
    line: int
    col: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, L{self.line}:{self.col})"


# Operator mapping (two-char operators are tried first)
DOUBLE_CHAR_TOKENS = {
    "==": TokenType.EQEQ,
    "!=": TokenType.NEQ,
    "<=": TokenType.LTE,
    ">=": TokenType.GTE,
    "->": TokenType.ARROW,
}

SINGLE_CHAR_TOKENS = {
    "→": TokenType.ARROW,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "%": TokenType.PERCENT,
    "<": TokenType.LT,
    ">": TokenType.GT,
    "=": TokenType.ASSIGN,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "[": TokenType.LBRACKET,
    "]": TokenType.RBRACKET,
    ",": TokenType.COMMA,
    ";": TokenType.SEMICOLON,
    ":": TokenType.COLON,
    ".": TokenType.DOT,
    "@": TokenType.AT,
}

KEYWORDS = {word: TokenType[f"KW_{word.upper()}"] for word in KEYWORD_REGISTRY}


class Lexer:
    """
    Tokenizes WokeLang source code.

    Usage:
        lexer = Lexer(source_code)
        tokens = lexer.tokenize()
    """

    def __init__(self, source: str):
        self.source = source
        self.pos = 0
        self.line = 1
        self.col = 1

    def _current(self) -> str | None:
        if self.pos >= len(self.source):
            return None
        return self.source[self.pos]

    def _peek(self, offset: int = 1) -> str | None:
        idx = self.pos + offset
        if idx >= len(self.source):
            return None
        return self.source[idx]

    def _advance(self) -> str:
        ch = self.source[self.pos]
        self.pos += 1
        if ch == "\n":
            self.line += 1
            self.col = 1
        else:
            self.col += 1
        return ch

    def _skip_whitespace(self):
        while self.pos < len(self.source) and self.source[self.pos] in (" ", "\t", "\r", "\n"):
            self._advance()

    def _skip_line_comment(self):
        while self.pos < len(self.source) and self._current() != "\n":
            self._advance()

    def _skip_block_comment(self):
        """Skip /* ... */; the first */ closes it."""
        start_line, start_col = self.line, self.col
        self._advance()  # /
        self._advance()  # *
        while self.pos < len(self.source):
            if self._current() == "*" and self._peek() == "/":
                self._advance()
                self._advance()
                return
            self._advance()
        raise LexError("Unterminated block comment", start_line, start_col)

    def _read_string(self) -> Token:
        """Read a double-quoted string literal. Escapes are kept as written."""
        start_line, start_col = self.line, self.col
        self._advance()  # consume opening "
        chars = []
        while self.pos < len(self.source):
            ch = self._advance()
            if ch == '"':
                return Token(TokenType.STRING, "".join(chars), start_line, start_col)
            chars.append(ch)
            if ch == "\\":
                if self.pos >= len(self.source):
                    break
                chars.append(self._advance())
        raise LexError("Unterminated string", start_line, start_col)

    def _read_number(self) -> Token:
        """Read an integer, or a float when a '.' is followed by more digits."""
        start_line, start_col = self.line, self.col
        chars = self._read_digits()
        nxt = self._peek()
        if self._current() == "." and nxt is not None and nxt.isascii() and nxt.isdigit():
            chars.append(self._advance())
            chars.extend(self._read_digits())
            return Token(TokenType.FLOAT, "".join(chars), start_line, start_col)
        return Token(TokenType.INTEGER, "".join(chars), start_line, start_col)

    def _read_digits(self) -> list[str]:
        chars = []
        while self.pos < len(self.source):
            ch = self._current()
            if ch.isascii() and ch.isdigit():
                chars.append(self._advance())
            else:
                break
        return chars

    def _read_identifier(self) -> Token:
        """Read an identifier or keyword."""
        start_line, start_col = self.line, self.col
        chars = []
        while self.pos < len(self.source):
            ch = self._current()
            if ch.isascii() and (ch.isalnum() or ch == "_"):
                chars.append(self._advance())
            else:
                break
        word = "".join(chars)
        token_type = KEYWORDS.get(word, TokenType.IDENTIFIER)
        return Token(token_type, word, start_line, start_col)

    def tokenize(self) -> list[Token]:
        """Tokenize the entire source into a list of tokens ending with EOF."""
        tokens = list(self._iter_tokens())
        tokens.append(Token(TokenType.EOF, "", self.line, self.col))
        return tokens

    def _iter_tokens(self) -> Iterator[Token]:
        """Generate tokens one at a time."""
        while True:
            self._skip_whitespace()

            if self.pos >= len(self.source):
                break

            ch = self._current()
            nxt = self._peek()

            # Comments
            if ch == "/" and nxt == "/":
                self._skip_line_comment()
                continue

            if ch == "/" and nxt == "*":
                self._skip_block_comment()
                continue

            # String literals
            if ch == '"':
                yield self._read_string()
                continue

            # Number literals (never signed; unary minus is an operator)
            if ch.isascii() and ch.isdigit():
                yield self._read_number()
                continue

            # Identifiers and keywords
            if ch.isascii() and (ch.isalpha() or ch == "_"):
                yield self._read_identifier()
                continue

            # Two-char operators
            pair = ch + (nxt or "")
            if pair in DOUBLE_CHAR_TOKENS:
                line, col = self.line, self.col
                self._advance()
                self._advance()
                yield Token(DOUBLE_CHAR_TOKENS[pair], pair, line, col)
                continue

            # Single-char operators and delimiters
            if ch in SINGLE_CHAR_TOKENS:
                yield Token(SINGLE_CHAR_TOKENS[ch], ch, self.line, self.col)
                self._advance()
                continue

            raise LexError(f"Unexpected character {ch!r}", self.line, self.col)
