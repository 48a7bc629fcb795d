"""Token kinds and token records shared by the lexer and the parser."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Mapping


class TokenType(IntEnum):
    """Kinds of tokens produced by the lexer."""

    INVALID = 0
    INPUT = 1
    IDENTIFIER = 2
    NUMBER = 3
    STRING = 4
    PLUS = 5
    MINUS = 6
    MULTIPLY = 7
    DIVIDE = 8
    MODULO = 9
    ASSIGN = 10
    EQUAL = 11
    NOT_EQUAL = 12
    LESS = 13
    LESS_EQUAL = 14
    GREATER = 15
    GREATER_EQUAL = 16
    AND = 17
    OR = 18
    NOT = 19
    LPAREN = 20
    RPAREN = 21
    LBRACE = 22
    RBRACE = 23
    LBRACKET = 24
    RBRACKET = 25
    COMMA = 26
    COLON = 27
    SEMICOLON = 28
    DOT = 29
    RESERVED_VAR = 30
    RESERVED_CONST = 31
    RESERVED_IF = 32
    RESERVED_ELSE = 33
    RESERVED_ELIF = 34
    RESERVED_FOR = 35
    RESERVED_IN = 36
    RESERVED_RANGE = 37
    RESERVED_FUNC = 38
    RESERVED_RETURN = 39
    RESERVED_PRINT = 40
    RESERVED_INT = 41
    RESERVED_FLOAT = 42
    RESERVED_STR = 43
    RESERVED_BOOL = 44
    RESERVED_UNDEFINED = 45
    RESERVED_NUM = 46
    RESERVED_LENGTH = 47
    RESERVED_INPUT = 48
    RESERVED_WHILE = 49
    RESERVED_ARRAY = 50
    COMMENT = 51
    EOF = 52

    def __str__(self) -> str:
        return token_type_name(self)


# Display names; any kind not listed here is shown as "INVALID".
_NAMES: dict[TokenType, str] = {
    TokenType.IDENTIFIER: "IDENTIFIER",
    TokenType.NUMBER: "NUMBER",
    TokenType.STRING: "STRING",
    TokenType.PLUS: "PLUS",
    TokenType.MINUS: "MINUS",
    TokenType.MULTIPLY: "MULTIPLY",
    TokenType.DIVIDE: "DIVIDE",
    TokenType.MODULO: "MODULO",
    TokenType.ASSIGN: "ASSIGN",
    TokenType.EQUAL: "EQUAL",
    TokenType.NOT_EQUAL: "NOT_EQUAL",
    TokenType.LESS: "LESS",
    TokenType.LESS_EQUAL: "LESS_EQUAL",
    TokenType.GREATER: "GREATER",
    TokenType.GREATER_EQUAL: "GREATER_EQUAL",
    TokenType.AND: "AND",
    TokenType.OR: "OR",
    TokenType.NOT: "NOT",
    TokenType.LPAREN: "LPAREN",
    TokenType.RPAREN: "RPAREN",
    TokenType.LBRACE: "LBRACE",
    TokenType.RBRACE: "RBRACE",
    TokenType.LBRACKET: "LBRACKET",
    TokenType.RBRACKET: "RBRACKET",
    TokenType.COMMA: "COMMA",
    TokenType.COLON: "COLON",
    TokenType.SEMICOLON: "SEMICOLON",
    TokenType.DOT: "DOT",
    TokenType.RESERVED_VAR: "VAR",
    TokenType.RESERVED_CONST: "CONST",
    TokenType.RESERVED_IF: "IF",
    TokenType.RESERVED_ELSE: "ELSE",
    TokenType.RESERVED_ELIF: "ELIF",
    TokenType.RESERVED_FOR: "FOR",
    TokenType.RESERVED_IN: "IN",
    TokenType.RESERVED_RANGE: "RANGE",
    TokenType.RESERVED_FUNC: "FUNC",
    TokenType.RESERVED_RETURN: "RETURN",
    TokenType.RESERVED_PRINT: "PRINT",
    TokenType.RESERVED_INT: "INT",
    TokenType.RESERVED_FLOAT: "FLOAT",
    TokenType.RESERVED_STR: "STR",
    TokenType.RESERVED_BOOL: "BOOL",
    TokenType.RESERVED_UNDEFINED: "UNDEFINED",
    TokenType.RESERVED_NUM: "NUM",
    TokenType.RESERVED_LENGTH: "LENGTH",
    TokenType.RESERVED_INPUT: "INPUT",
    TokenType.RESERVED_WHILE: "WHILE",
    TokenType.RESERVED_ARRAY: "ARRAY",
    TokenType.COMMENT: "COMMENT",
    TokenType.EOF: "EOF",
}

_BY_NAME: dict[str, TokenType] = {name: kind for kind, name in _NAMES.items()}


def token_type_name(token_type: TokenType) -> str:
    """Return the display name of a token kind ("INVALID" when it has none)."""
    return _NAMES.get(token_type, "INVALID")


def token_type_from_name(name: str) -> TokenType:
    """Return the token kind for a display name, or INVALID for unknown names."""
    return _BY_NAME.get(name, TokenType.INVALID)


@dataclass(frozen=True)
class Token:
    """A token with its position in the source (1-based line and column)."""

    type: TokenType
    lexeme: str = ""
    literal: Any = None
    line: int = 0
    column: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON form; an empty lexeme and a missing literal are left out."""
        data: dict[str, Any] = {"type": token_type_name(self.type)}
        if self.lexeme:
            data["lexeme"] = self.lexeme
        if self.literal is not None:
            data["literal"] = self.literal
        data["line"] = self.line
        data["column"] = self.column
        return data


def _int_field(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key, 0)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"token field {key!r} must be an integer, got {value!r}")
    return value


def token_from_dict(data: Mapping[str, Any]) -> Token:
    """Build a token from its JSON form."""
    if not isinstance(data, Mapping):
        raise ValueError(f"token entry must be an object, got {data!r}")
    name = data.get("type", "")
    if name is None:
        name = ""
    if not isinstance(name, str):
        raise ValueError(f"token field 'type' must be a string, got {name!r}")
    lexeme = data.get("lexeme", "")
    if lexeme is None:
        lexeme = ""
    if not isinstance(lexeme, str):
        raise ValueError(f"token field 'lexeme' must be a string, got {lexeme!r}")
    return Token(
        type=token_type_from_name(name),
        lexeme=lexeme,
        literal=data.get("literal"),
        line=_int_field(data, "line"),
        column=_int_field(data, "column"),
    )