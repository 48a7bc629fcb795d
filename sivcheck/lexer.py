"""Lexical analysis of .siv source text."""

from __future__ import annotations

import json
import math
import os
import re
from pathlib import Path
from typing import Iterator, Optional, Union

from .tokens import Token, TokenType

# Longest line (in bytes, excluding the newline) the line splitter accepts.
_MAX_LINE_BYTES = 64 * 1024 - 1

_OPERATORS: dict[bytes, TokenType] = {
    b"+": TokenType.PLUS,
    b"-": TokenType.MINUS,
    b"*": TokenType.MULTIPLY,
    b"/": TokenType.DIVIDE,
    b"%": TokenType.MODULO,
    b"=": TokenType.ASSIGN,
    b"==": TokenType.EQUAL,
    b"!=": TokenType.NOT_EQUAL,
    b"<": TokenType.LESS,
    b"<=": TokenType.LESS_EQUAL,
    b">": TokenType.GREATER,
    b">=": TokenType.GREATER_EQUAL,
    b"&&": TokenType.AND,
    b"||": TokenType.OR,
    b"!": TokenType.NOT,
}

_DELIMITERS: dict[bytes, TokenType] = {
    b"(": TokenType.LPAREN,
    b")": TokenType.RPAREN,
    b"{": TokenType.LBRACE,
    b"}": TokenType.RBRACE,
    b"[": TokenType.LBRACKET,
    b"]": TokenType.RBRACKET,
    b",": TokenType.COMMA,
    b";": TokenType.SEMICOLON,
    b":": TokenType.COLON,
    b".": TokenType.DOT,
}

_KEYWORDS: dict[bytes, TokenType] = {
    b"var": TokenType.RESERVED_VAR,
    b"const": TokenType.RESERVED_CONST,
    b"if": TokenType.RESERVED_IF,
    b"else": TokenType.RESERVED_ELSE,
    b"elif": TokenType.RESERVED_ELIF,
    b"for": TokenType.RESERVED_FOR,
    b"in": TokenType.RESERVED_IN,
    b"range": TokenType.RESERVED_RANGE,
    b"func": TokenType.RESERVED_FUNC,
    b"return": TokenType.RESERVED_RETURN,
    b"print": TokenType.RESERVED_PRINT,
    b"int": TokenType.RESERVED_INT,
    b"float": TokenType.RESERVED_FLOAT,
    b"str": TokenType.RESERVED_STR,
    b"bool": TokenType.RESERVED_BOOL,
    b"undefined": TokenType.RESERVED_UNDEFINED,
    b"num": TokenType.RESERVED_NUM,
    b"length": TokenType.RESERVED_LENGTH,
    b"input": TokenType.INPUT,
    b"array": TokenType.RESERVED_ARRAY,
}

_RESERVED_TYPES = frozenset({"int", "float", "str", "bool", "undefined"})
_RESERVED_FUNCTIONS = frozenset({"print", "length", "input", "int", "float", "str", "bool"})

_WHITESPACE = frozenset(b" \t\r\n")
_QUOTES = frozenset(b"\"'")
_ESCAPES: dict[int, bytes] = {
    ord("n"): b"\n",
    ord("t"): b"\t",
    ord("r"): b"\r",
    ord('"'): b'"',
    ord("'"): b"'",
    ord("\\"): b"\\",
}
_BACKSLASH = ord("\\")
_HASH = ord("#")
_LPAREN = ord("(")
_RPAREN = ord(")")
_COLON = ord(":")

_IDENTIFIER_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\Z")
_DECIMAL_RE = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?\Z")
_HEX_RE = re.compile(
    r"[+-]?0[xX](?:[0-9a-fA-F]+\.?[0-9a-fA-F]*|\.[0-9a-fA-F]+)[pP][+-]?[0-9]+\Z"
)
_SPECIAL_FLOATS = frozenset(
    {"inf", "+inf", "-inf", "infinity", "+infinity", "-infinity", "nan"}
)

_JSON_ESCAPES = (
    ("<", "\\u003c"),
    (">", "\\u003e"),
    ("&", "\\u0026"),
    ("\u2028", "\\u2028"),
    ("\u2029", "\\u2029"),
)

Source = Union[str, bytes]


def _text(raw: bytes) -> str:
    return bytes(raw).decode("utf-8", errors="replace")


def _underscores_ok(text: str) -> bool:
    """Underscores may only separate digits, or follow a base prefix."""
    if text[:1] in ("+", "-"):
        text = text[1:]
    saw = "^"
    start = 0
    hex_digits = False
    if len(text) >= 2 and text[0] == "0" and text[1].lower() in "box":
        start = 2
        saw = "0"
        hex_digits = text[1].lower() == "x"
    for char in text[start:]:
        if char.isdigit() and char.isascii() or hex_digits and char.lower() in "abcdef":
            saw = "0"
            continue
        if char == "_":
            if saw != "0":
                return False
            saw = "_"
            continue
        if saw == "_":
            return False
        saw = "!"
    return saw != "_"


def _is_float_literal(text: str) -> bool:
    """Whether text is a well-formed, in-range 64-bit floating-point literal."""
    if text.lower() in _SPECIAL_FLOATS:
        return True
    if "_" in text:
        if not _underscores_ok(text):
            return False
        text = text.replace("_", "")
    try:
        if _DECIMAL_RE.match(text):
            value = float(text)
        elif _HEX_RE.match(text):
            value = float.fromhex(text)
        else:
            return False
    except (OverflowError, ValueError):
        return False
    return not math.isinf(value)


def _split_lines(data: bytes) -> Iterator[bytes]:
    """Yield the lines of data without their line endings."""
    if not data:
        return
    pieces = data.split(b"\n")
    if data.endswith(b"\n"):
        pieces.pop()
    for piece in pieces:
        if len(piece) > _MAX_LINE_BYTES:
            raise ValueError("error scanning source: token too long")
        yield piece[:-1] if piece.endswith(b"\r") else piece


def _scan_line(line: bytes, line_number: int) -> list[Token]:
    found: list[Token] = []

    def emit(kind: TokenType, raw: bytes, column: int, literal: Optional[str] = None) -> None:
        found.append(Token(kind, _text(raw), literal, line_number, column))

    def emit_word(raw: bytes, column: int) -> None:
        emit(_KEYWORDS.get(raw, TokenType.IDENTIFIER), raw, column)

    def emit_classified(raw: bytes, column: int) -> None:
        for table in (_KEYWORDS, _OPERATORS, _DELIMITERS):
            kind = table.get(raw)
            if kind is not None:
                emit(kind, raw, column)
                return
        text = _text(raw)
        if _is_float_literal(text):
            emit(TokenType.NUMBER, raw, column, literal=text)
        else:
            emit(TokenType.IDENTIFIER, raw, column)

    current = bytearray()
    in_string = False
    escape_next = False
    delimiter = 0
    length = len(line)
    i = -1
    while i + 1 < length:
        i += 1
        ch = line[i]

        if in_string:
            if not current and ch in _QUOTES:
                delimiter = ch
                continue
            if escape_next:
                current += _ESCAPES.get(ch, bytes((_BACKSLASH, ch)))
                escape_next = False
                continue
            if ch == _BACKSLASH:
                escape_next = True
                continue
            if ch == delimiter:
                content = _text(current)
                found.append(
                    Token(TokenType.STRING, content, content, line_number, i - len(current))
                )
                current.clear()
                in_string = False
                continue
            current.append(ch)
            continue

        if ch in _QUOTES:
            if current:
                emit_word(bytes(current), i - len(current) + 1)
                current.clear()
            in_string = True
            delimiter = ch
            continue

        if ch in _WHITESPACE:
            if current:
                emit_classified(bytes(current), i - len(current) + 1)
                current.clear()
            continue

        if ch == _HASH:
            emit(TokenType.COMMENT, line[i:], i + 1)
            break

        if ch == _LPAREN and current and bytes(current) not in _KEYWORDS:
            emit(TokenType.IDENTIFIER, bytes(current), i - len(current) + 1)
            current.clear()

        if ch in (_LPAREN, _RPAREN, _COLON):
            if current:
                emit_word(bytes(current), i - len(current) + 1)
                current.clear()
            kind = {
                _LPAREN: TokenType.LPAREN,
                _RPAREN: TokenType.RPAREN,
                _COLON: TokenType.COLON,
            }[ch]
            emit(kind, bytes((ch,)), i + 1)
            continue

        if i + 1 < length:
            double = line[i : i + 2]
            kind = _OPERATORS.get(double)
            if kind is not None:
                emit(kind, double, i + 1)
                i += 1
                continue

        single = bytes((ch,))
        kind = _OPERATORS.get(single)
        if kind is not None:
            emit(kind, single, i + 1)
            continue

        if current and i + 1 < length:
            combined = bytes(current) + line[i + 1 : i + 2]
            kind = _OPERATORS.get(combined)
            if kind is not None:
                emit(kind, combined, i - len(combined) + 2)
                current.clear()
                i += 1
                continue

        current.append(ch)
        pending = bytes(current)
        kind = _OPERATORS.get(pending)
        if kind is None:
            kind = _DELIMITERS.get(pending)
        if kind is not None:
            emit(kind, pending, i - len(pending) + 2)
            current.clear()

    if current:
        emit_classified(bytes(current), length - len(current) + 1)

    return found


class Lexer:
    """Splits source text into tokens and hands them out one by one."""

    def __init__(self, source: Source) -> None:
        if isinstance(source, str):
            source = source.encode("utf-8", errors="surrogateescape")
        self._source = bytes(source)
        self.tokens: list[Token] = []
        self._position = 0

    def scan_tokens(self) -> list[Token]:
        """Tokenize the whole source, ending with an EOF token.

        Raises ValueError when a line is too long to be scanned.
        """
        found: list[Token] = []
        line_number = 1
        for line in _split_lines(self._source):
            found.extend(_scan_line(line, line_number))
            line_number += 1
        found.append(Token(TokenType.EOF, "", None, line_number, 1))
        self.tokens = found
        return list(found)

    def next_token(self) -> Optional[Token]:
        """Return the next token and advance, or None when none are left."""
        if self._position >= len(self.tokens):
            return None
        token = self.tokens[self._position]
        self._position += 1
        return token

    def peek_token(self) -> Optional[Token]:
        """Return the next token without advancing, or None when none are left."""
        if self._position >= len(self.tokens):
            return None
        return self.tokens[self._position]

    def reset(self) -> None:
        """Move back to the first token."""
        self._position = 0

    def save_tokens(self, path: Union[str, os.PathLike]) -> None:
        """Write the scanned tokens to path as indented JSON."""
        payload = [token.to_dict() for token in self.tokens] or None
        text = json.dumps(payload, indent=2, ensure_ascii=False)
        for raw, escaped in _JSON_ESCAPES:
            text = text.replace(raw, escaped)
        Path(path).write_text(text + "\n", encoding="utf-8")


def lexer_from_file(path: Union[str, os.PathLike]) -> Lexer:
    """Create a lexer over the contents of a file."""
    return Lexer(Path(path).read_bytes())


def tokenize(source: Source) -> list[Token]:
    """Return the tokens of source, ending with an EOF token."""
    return Lexer(source).scan_tokens()


def is_identifier(text: str) -> bool:
    """Whether text is a plain identifier that is not a reserved type or function."""
    if not _IDENTIFIER_RE.match(text):
        return False
    return text not in _RESERVED_TYPES and text not in _RESERVED_FUNCTIONS