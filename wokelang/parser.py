"""
WokeLang Parser
===============
Recursive-descent parser that builds an Abstract Syntax Tree (AST)
from the token stream produced by the Lexer.

Supports:
  - Functions with parameters, return annotations, hello/goodbye messages
  - Gratitude blocks, worker and side quest declarations, constants
  - Statements: remember, reassignment, give back, when/otherwise,
    repeat, attempt safely, consent gates, complain, spawn, say
  - Emote tags on functions and statements
  - Expressions with precedence climbing and `measured in` unit suffixes

There is no error recovery: the first unexpected token raises ParseError.
"""
from .errors import ParseError
from .lexer import Token, TokenType
from .nodes import (
    ASTNode, TypeAnnotation, EmoteTag, Program,
    IntLiteral, FloatLiteral, StringLiteral, BoolLiteral, Identifier,
    ArrayLiteral, Call, BinaryOp, UnaryOp, Measured, ThanksLiteral,
    Remember, Assign, GiveBack, When, Repeat, Attempt, ConsentGate,
    ExprStatement, Complain, EmoteStatement, SpawnWorker,
    Param, FunctionDef, GratitudeEntry, Gratitude, WorkerDef, SideQuestDef,
    ConstDef,
)


# Binary operator levels, lowest precedence first
BINARY_LEVELS: list[dict[TokenType, str]] = [
    {TokenType.KW_OR: "or"},
    {TokenType.KW_AND: "and"},
    {TokenType.EQEQ: "==", TokenType.NEQ: "!="},
    {TokenType.LT: "<", TokenType.GT: ">", TokenType.LTE: "<=", TokenType.GTE: ">="},
    {TokenType.PLUS: "+", TokenType.MINUS: "-"},
    {TokenType.STAR: "*", TokenType.SLASH: "/", TokenType.PERCENT: "%"},
]

UNARY_OPERATORS = {
    TokenType.KW_NOT: "not",
    TokenType.MINUS: "-",
}

BASIC_TYPES = {
    TokenType.KW_STRING: "String",
    TokenType.KW_INT: "Int",
    TokenType.KW_FLOAT: "Float",
    TokenType.KW_BOOL: "Bool",
}


class Parser:
    """
    Recursive-descent parser for WokeLang source.

    Usage:
        parser = Parser(tokens)
        ast = parser.parse()
    """

    def __init__(self, tokens: list[Token]):
        self.tokens = tokens
        self.pos = 0

    def _current(self) -> Token:
        return self.tokens[self.pos]

    def _peek(self, offset: int = 1) -> Token:
        idx = self.pos + offset
        if idx >= len(self.tokens):
            return self.tokens[-1]  # EOF
        return self.tokens[idx]

    def _check(self, token_type: TokenType) -> bool:
        return self._current().type == token_type

    def _advance(self) -> Token:
        token = self.tokens[self.pos]
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return token

    def _error(self, expected: str) -> ParseError:
        token = self._current()
        found = "end of input" if token.type == TokenType.EOF else f"{token.type.name} ({token.value!r})"
        return ParseError(f"Expected {expected}, got {found}", token.line, token.col)

    def _too_deep(self) -> ParseError:
        token = self._current()
        return ParseError("Expression nested too deeply", token.line, token.col)

    def _expect(self, token_type: TokenType, what: str | None = None) -> Token:
        if not self._check(token_type):
            raise self._error(what or token_type.name)
        return self._advance()

    def _expect_identifier(self, what: str = "identifier") -> str:
        return self._expect(TokenType.IDENTIFIER, what).value

    def _expect_string(self, what: str = "string") -> str:
        return self._expect(TokenType.STRING, what).value

    # ─────────────────────────────────────────────────────────
    #  Top-Level Parsing
    # ─────────────────────────────────────────────────────────

    def parse(self) -> Program:
        """Parse the token stream into a Program."""
        program = Program(line=1, col=1)
        try:
            while not self._check(TokenType.EOF):
                program.items.append(self._parse_top_level())
        except RecursionError:
            raise self._too_deep() from None
        return program

    def parse_statements(self) -> list[ASTNode]:
        """Parse a bare statement sequence up to EOF (used by the shell)."""
        statements = []
        try:
            while not self._check(TokenType.EOF):
                statements.append(self._parse_statement())
        except RecursionError:
            raise self._too_deep() from None
        return statements

    def _parse_top_level(self) -> ASTNode:
        token = self._current()

        if token.type == TokenType.KW_TO:
            return self._parse_function()

        if token.type == TokenType.AT:
            emote = self._parse_emote_tag()
            if not self._check(TokenType.KW_TO):
                raise self._error("'to' after emote tag")
            return self._parse_function(emote)

        if token.type == TokenType.KW_THANKS:
            return self._parse_gratitude()

        if token.type == TokenType.KW_WORKER:
            self._advance()
            name = self._expect_identifier("worker name")
            body = self._parse_block()
            return WorkerDef(name=name, body=body, line=token.line, col=token.col)

        if token.type == TokenType.KW_SIDE:
            self._advance()
            self._expect(TokenType.KW_QUEST, "'quest'")
            name = self._expect_identifier("side quest name")
            body = self._parse_block()
            return SideQuestDef(name=name, body=body, line=token.line, col=token.col)

        if token.type == TokenType.KW_CONST:
            return self._parse_const()

        raise self._error("top-level item")

    def _parse_function(self, emote: EmoteTag | None = None) -> FunctionDef:
        """Parse: to name(params) [→ Type] { [hello ".."; ] stmts [goodbye ".."; ] }"""
        token = self._expect(TokenType.KW_TO, "'to'")
        name = self._expect_identifier("function name")

        self._expect(TokenType.LPAREN, "'('")
        params = []
        if not self._check(TokenType.RPAREN):
            params.append(self._parse_param())
            while self._check(TokenType.COMMA):
                self._advance()
                params.append(self._parse_param())
        self._expect(TokenType.RPAREN, "')'")

        return_type = None
        if self._check(TokenType.ARROW):
            self._advance()
            return_type = self._parse_type()

        self._expect(TokenType.LBRACE, "'{'")

        hello = None
        if self._check(TokenType.KW_HELLO):
            self._advance()
            hello = self._expect_string("hello message")
            self._expect(TokenType.SEMICOLON, "';'")

        body = []
        while not self._check(TokenType.KW_GOODBYE) and not self._check(TokenType.RBRACE):
            body.append(self._parse_statement())

        goodbye = None
        if self._check(TokenType.KW_GOODBYE):
            self._advance()
            goodbye = self._expect_string("goodbye message")
            self._expect(TokenType.SEMICOLON, "';'")

        self._expect(TokenType.RBRACE, "'}'")

        line, col = (emote.line, emote.col) if emote else (token.line, token.col)
        return FunctionDef(
            name=name, params=params, return_type=return_type,
            hello=hello, body=body, goodbye=goodbye, emote=emote,
            line=line, col=col,
        )

    def _parse_param(self) -> Param:
        token = self._current()
        name = self._expect_identifier("parameter name")
        param_type = None
        if self._check(TokenType.COLON):
            self._advance()
            param_type = self._parse_type()
        return Param(name=name, type=param_type, line=token.line, col=token.col)

    def _parse_type(self) -> TypeAnnotation:
        """Parse: String | Int | Float | Bool | [T] | Maybe T | Name"""
        token = self._current()

        if token.type == TokenType.LBRACKET:
            self._advance()
            inner = self._parse_type()
            self._expect(TokenType.RBRACKET, "']'")
            return TypeAnnotation(name="Array", inner=inner, line=token.line, col=token.col)

        if token.type == TokenType.KW_MAYBE:
            self._advance()
            inner = self._parse_type()
            return TypeAnnotation(name="Maybe", inner=inner, line=token.line, col=token.col)

        if token.type in BASIC_TYPES:
            self._advance()
            return TypeAnnotation(name=BASIC_TYPES[token.type], line=token.line, col=token.col)

        if token.type == TokenType.IDENTIFIER:
            self._advance()
            return TypeAnnotation(name=token.value, line=token.line, col=token.col)

        raise self._error("type")

    def _parse_gratitude(self) -> Gratitude:
        """Parse: thanks to { "who" → "what"; ... }"""
        token = self._advance()  # consume 'thanks'
        self._expect(TokenType.KW_TO, "'to'")
        self._expect(TokenType.LBRACE, "'{'")

        entries = []
        while not self._check(TokenType.RBRACE):
            entry_token = self._current()
            contributor = self._expect_string("contributor string")
            self._expect(TokenType.ARROW, "'→' or '->'")
            contribution = self._expect_string("contribution string")
            self._expect(TokenType.SEMICOLON, "';'")
            entries.append(GratitudeEntry(
                contributor=contributor, contribution=contribution,
                line=entry_token.line, col=entry_token.col,
            ))

        self._expect(TokenType.RBRACE, "'}'")
        return Gratitude(entries=entries, line=token.line, col=token.col)

    def _parse_const(self) -> ConstDef:
        """Parse: const name [: Type] = expr;"""
        token = self._advance()  # consume 'const'
        name = self._expect_identifier("constant name")
        const_type = None
        if self._check(TokenType.COLON):
            self._advance()
            const_type = self._parse_type()
        self._expect(TokenType.ASSIGN, "'='")
        value = self._parse_expression()
        self._expect(TokenType.SEMICOLON, "';'")
        return ConstDef(name=name, type=const_type, value=value, line=token.line, col=token.col)

    def _parse_emote_tag(self) -> EmoteTag:
        """Parse: @name or @name(key = expr, ...)"""
        token = self._expect(TokenType.AT, "'@'")
        name = self._expect_identifier("emote name")
        params = []
        if self._check(TokenType.LPAREN):
            self._advance()
            if not self._check(TokenType.RPAREN):
                params.append(self._parse_emote_param())
                while self._check(TokenType.COMMA):
                    self._advance()
                    params.append(self._parse_emote_param())
            self._expect(TokenType.RPAREN, "')'")
        return EmoteTag(name=name, params=params, line=token.line, col=token.col)

    def _parse_emote_param(self) -> tuple[str, ASTNode]:
        key = self._expect_identifier("emote parameter name")
        self._expect(TokenType.ASSIGN, "'='")
        return key, self._parse_expression()

    # ─────────────────────────────────────────────────────────
    #  Statements
    # ─────────────────────────────────────────────────────────

    def _parse_block(self) -> list[ASTNode]:
        """Parse: { stmt* }"""
        self._expect(TokenType.LBRACE, "'{'")
        statements = []
        while not self._check(TokenType.RBRACE):
            statements.append(self._parse_statement())
        self._expect(TokenType.RBRACE, "'}'")
        return statements

    def _parse_statement(self) -> ASTNode:
        token = self._current()

        if token.type == TokenType.AT:
            emote = self._parse_emote_tag()
            statement = self._parse_statement()
            return EmoteStatement(emote=emote, statement=statement, line=token.line, col=token.col)

        if token.type == TokenType.KW_REMEMBER:
            return self._parse_remember()

        if token.type == TokenType.KW_GIVE:
            self._advance()
            self._expect(TokenType.KW_BACK, "'back'")
            value = self._parse_expression()
            self._expect(TokenType.SEMICOLON, "';'")
            return GiveBack(value=value, line=token.line, col=token.col)

        if token.type == TokenType.KW_WHEN:
            return self._parse_when()

        if token.type == TokenType.KW_REPEAT:
            self._advance()
            count = self._parse_expression()
            self._expect(TokenType.KW_TIMES, "'times'")
            body = self._parse_block()
            return Repeat(count=count, body=body, line=token.line, col=token.col)

        if token.type == TokenType.KW_ATTEMPT:
            self._advance()
            self._expect(TokenType.KW_SAFELY, "'safely'")
            body = self._parse_block()
            self._expect(TokenType.KW_OR, "'or'")
            self._expect(TokenType.KW_REASSURE, "'reassure'")
            message = self._expect_string("reassurance message")
            self._expect(TokenType.SEMICOLON, "';'")
            return Attempt(body=body, reassurance=message, line=token.line, col=token.col)

        if token.type == TokenType.KW_ONLY:
            self._advance()
            self._expect(TokenType.KW_IF, "'if'")
            self._expect(TokenType.KW_OKAY, "'okay'")
            permission = self._expect_string("permission string")
            body = self._parse_block()
            return ConsentGate(permission=permission, body=body, line=token.line, col=token.col)

        if token.type == TokenType.KW_COMPLAIN:
            self._advance()
            message = self._expect_string("complaint message")
            self._expect(TokenType.SEMICOLON, "';'")
            return Complain(message=message, line=token.line, col=token.col)

        if token.type == TokenType.KW_SPAWN:
            self._advance()
            self._expect(TokenType.KW_WORKER, "'worker'")
            name = self._expect_identifier("worker name")
            self._expect(TokenType.SEMICOLON, "';'")
            return SpawnWorker(name=name, line=token.line, col=token.col)

        if token.type == TokenType.KW_SAY:
            # say expr;  ==>  say(expr);
            self._advance()
            value = self._parse_expression()
            self._expect(TokenType.SEMICOLON, "';'")
            call = Call(name="say", args=[value], line=token.line, col=token.col)
            return ExprStatement(expr=call, line=token.line, col=token.col)

        if token.type == TokenType.IDENTIFIER and self._peek().type == TokenType.ASSIGN:
            self._advance()  # name
            self._advance()  # =
            value = self._parse_expression()
            self._expect(TokenType.SEMICOLON, "';'")
            return Assign(name=token.value, value=value, line=token.line, col=token.col)

        expr = self._parse_expression()
        self._expect(TokenType.SEMICOLON, "';'")
        return ExprStatement(expr=expr, line=token.line, col=token.col)

    def _parse_remember(self) -> Remember:
        """Parse: remember name = expr [measured in unit];"""
        token = self._advance()  # consume 'remember'
        name = self._expect_identifier("variable name")
        self._expect(TokenType.ASSIGN, "'='")
        value = self._parse_expression()

        unit = None
        if isinstance(value, Measured):
            # `5 measured in km` is swallowed by the postfix rule; lift the
            # outermost suffix back onto the declaration.
            unit = value.unit
            value = value.expr

        self._expect(TokenType.SEMICOLON, "';'")
        return Remember(name=name, value=value, unit=unit, line=token.line, col=token.col)

    def _parse_when(self) -> When:
        """Parse: when cond { ... } [otherwise { ... }]"""
        token = self._advance()  # consume 'when'
        condition = self._parse_expression()
        then_body = self._parse_block()
        else_body = None
        if self._check(TokenType.KW_OTHERWISE):
            self._advance()
            else_body = self._parse_block()
        return When(
            condition=condition, then_body=then_body, else_body=else_body,
            line=token.line, col=token.col,
        )

    # ─────────────────────────────────────────────────────────
    #  Expressions
    # ─────────────────────────────────────────────────────────

    def parse_expression(self) -> ASTNode:
        """Parse a single expression and require that it consumes every token."""
        try:
            expr = self._parse_expression()
        except RecursionError:
            raise self._too_deep() from None
        self._expect(TokenType.EOF, "end of input")
        return expr

    def _parse_expression(self) -> ASTNode:
        return self._parse_binary(0)

    def _parse_binary(self, level: int) -> ASTNode:
        """Left-associative binary operators, one precedence level at a time."""
        if level == len(BINARY_LEVELS):
            return self._parse_unary()

        operators = BINARY_LEVELS[level]
        left = self._parse_binary(level + 1)
        while self._current().type in operators:
            op_token = self._advance()
            right = self._parse_binary(level + 1)
            left = BinaryOp(
                op=operators[op_token.type], left=left, right=right,
                line=op_token.line, col=op_token.col,
            )
        return left

    def _parse_unary(self) -> ASTNode:
        token = self._current()
        if token.type in UNARY_OPERATORS:
            self._advance()
            operand = self._parse_unary()
            return UnaryOp(op=UNARY_OPERATORS[token.type], operand=operand, line=token.line, col=token.col)
        return self._parse_postfix()

    def _parse_postfix(self) -> ASTNode:
        """primary [measured in unit]*"""
        expr = self._parse_primary()
        while self._check(TokenType.KW_MEASURED):
            token = self._advance()
            self._expect(TokenType.KW_IN, "'in'")
            unit = self._expect_identifier("unit name")
            expr = Measured(expr=expr, unit=unit, line=token.line, col=token.col)
        return expr

    def _parse_primary(self) -> ASTNode:
        token = self._current()

        if token.type == TokenType.INTEGER:
            self._advance()
            return IntLiteral(value=int(token.value), line=token.line, col=token.col)

        if token.type == TokenType.FLOAT:
            self._advance()
            return FloatLiteral(value=float(token.value), line=token.line, col=token.col)

        if token.type == TokenType.STRING:
            self._advance()
            return StringLiteral(value=token.value, line=token.line, col=token.col)

        if token.type in (TokenType.KW_TRUE, TokenType.KW_FALSE):
            self._advance()
            return BoolLiteral(value=token.type == TokenType.KW_TRUE, line=token.line, col=token.col)

        if token.type == TokenType.LBRACKET:
            return self._parse_array()

        if token.type == TokenType.LPAREN:
            self._advance()
            inner = self._parse_expression()
            self._expect(TokenType.RPAREN, "')'")
            return inner

        if token.type == TokenType.KW_THANKS:
            self._advance()
            self._expect(TokenType.LPAREN, "'('")
            contributor = self._expect_string("contributor string")
            self._expect(TokenType.RPAREN, "')'")
            return ThanksLiteral(contributor=contributor, line=token.line, col=token.col)

        if token.type == TokenType.IDENTIFIER:
            self._advance()
            if self._check(TokenType.LPAREN):
                return Call(name=token.value, args=self._parse_arguments(), line=token.line, col=token.col)
            return Identifier(name=token.value, line=token.line, col=token.col)

        raise self._error("expression")

    def _parse_array(self) -> ArrayLiteral:
        """Parse: [a, b, c] (a trailing comma is allowed)."""
        token = self._advance()  # consume [
        elements = []
        if not self._check(TokenType.RBRACKET):
            elements.append(self._parse_expression())
            while self._check(TokenType.COMMA):
                self._advance()
                if self._check(TokenType.RBRACKET):
                    break
                elements.append(self._parse_expression())
        self._expect(TokenType.RBRACKET, "']'")
        return ArrayLiteral(elements=elements, line=token.line, col=token.col)

    def _parse_arguments(self) -> list[ASTNode]:
        """Parse: (arg, ...)"""
        self._expect(TokenType.LPAREN, "'('")
        args = []
        if not self._check(TokenType.RPAREN):
            args.append(self._parse_expression())
            while self._check(TokenType.COMMA):
                self._advance()
                args.append(self._parse_expression())
        self._expect(TokenType.RPAREN, "')'")
        return args
