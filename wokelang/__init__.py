# WokeLang - tree-walking reference interpreter
"""
WokeLang: a small, expression-oriented scripting language with consent
gates, gratitude blocks, unit-tagged values and emote annotations.
Pipeline: Lexer → Parser → AST → Interpreter.
"""
from .keywords import KEYWORD_REGISTRY, KeywordInfo
from .errors import (
    WokeError, LexError, ParseError, WokeRuntimeError, Complaint, ConsentDenied,
)
from .lexer import Lexer, Token, TokenType
from .nodes import ASTNode, Program, FunctionDef
from .parser import Parser
from .values import (
    Value, IntValue, FloatValue, StringValue, BoolValue, ArrayValue,
    MeasuredValue, UnitValue, FunctionValue, ThanksValue, UNIT,
    display, truthy,
)
from .environment import Environment
from .interpreter import Interpreter, auto_grant, deny_all
from .run import RunResult, execute_source, run_source

__version__ = "0.1.0"
__all__ = [
    "KEYWORD_REGISTRY", "KeywordInfo",
    "WokeError", "LexError", "ParseError", "WokeRuntimeError",
    "Complaint", "ConsentDenied",
    "Lexer", "Token", "TokenType",
    "ASTNode", "Program", "FunctionDef",
    "Parser",
    "Value", "IntValue", "FloatValue", "StringValue", "BoolValue",
    "ArrayValue", "MeasuredValue", "UnitValue", "FunctionValue",
    "ThanksValue", "UNIT", "display", "truthy",
    "Environment",
    "Interpreter", "auto_grant", "deny_all",
    "RunResult", "execute_source", "run_source",
]
