"""Syntax checking of token streams produced by the lexer."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Iterable, NamedTuple, Optional, Union

from .tokens import Token, TokenType, token_from_dict, token_type_name

_T = TokenType

_TYPE_KINDS = frozenset(
    {
        _T.IDENTIFIER,
        _T.RESERVED_INT,
        _T.RESERVED_FLOAT,
        _T.RESERVED_STR,
        _T.RESERVED_BOOL,
        _T.RESERVED_UNDEFINED,
        _T.RESERVED_ARRAY,
        _T.RESERVED_NUM,
    }
)
_BARE_TYPE_KINDS = _TYPE_KINDS - {_T.IDENTIFIER}
_CONDITION_HEADS = frozenset(
    {_T.IDENTIFIER, _T.RESERVED_INT, _T.RESERVED_FLOAT, _T.RESERVED_STR}
)
_COMPARISONS = frozenset(
    {_T.EQUAL, _T.NOT_EQUAL, _T.GREATER, _T.LESS, _T.GREATER_EQUAL, _T.LESS_EQUAL}
)
_VALUE_KINDS = frozenset({_T.IDENTIFIER, _T.STRING, _T.NUMBER})
_LITERAL_CONDITIONS = frozenset({_T.NUMBER, _T.STRING})
_EXPRESSION_STOPS = frozenset(
    {
        _T.EOF,
        _T.RBRACE,
        _T.RPAREN,
        _T.RBRACKET,
        _T.RESERVED_ELIF,
        _T.RESERVED_ELSE,
        _T.RESERVED_IF,
        _T.RESERVED_FOR,
        _T.RESERVED_WHILE,
        _T.RESERVED_FUNC,
        _T.RESERVED_VAR,
        _T.RESERVED_CONST,
        _T.RESERVED_RETURN,
        _T.RESERVED_PRINT,
    }
)

_EOF_TOKEN = Token(_T.EOF)

_TOKEN_FIELDS = ("type", "lexeme", "literal", "line", "column")


class _ConditionMessages(NamedTuple):
    unclosed: str
    bad_value: str
    missing_operator: str
    invalid: str


_IF_MESSAGES = _ConditionMessages(
    unclosed="paréntesis sin cerrar en condición de if/elif",
    bad_value="se esperaba un valor válido en la condición del if",
    missing_operator="se esperaba un operador de comparación en la condición del if",
    invalid="condición de if/elif inválida",
)
_ELIF_MESSAGES = _ConditionMessages(
    unclosed="paréntesis sin cerrar en condición de elif",
    bad_value="se esperaba un valor válido en la condición del elif",
    missing_operator="se esperaba un operador de comparación en la condición del elif",
    invalid="condición de elif inválida",
)


class SivSyntaxError(Exception):
    """A syntax error found while parsing, with its source position."""

    def __init__(self, message: str, line: int = 0, column: int = 0) -> None:
        super().__init__(message)
        self.line = line
        self.column = column


class TokenFileError(Exception):
    """A token file could not be read or decoded."""


class Parser:
    """Checks that a token stream follows the grammar of the language."""

    def __init__(self, tokens: Iterable[Token], source_file: str = "") -> None:
        self.tokens: list[Token] = list(tokens)
        self.source_file = source_file
        self._position = 0

    # -- token access -------------------------------------------------

    def _next(self) -> Token:
        if self._position < len(self.tokens):
            token = self.tokens[self._position]
            self._position += 1
            return token
        return _EOF_TOKEN

    def _peek(self) -> Token:
        if self._position < len(self.tokens):
            return self.tokens[self._position]
        return _EOF_TOKEN

    def _error(self, token: Token, detail: str) -> SivSyntaxError:
        message = (
            f"Error de sintaxis en {self.source_file}:{token.line}:{token.column}: {detail}"
        )
        return SivSyntaxError(message, token.line, token.column)

    def _expect(self, expected: TokenType, detail: Optional[str] = None) -> Token:
        token = self._next()
        if token.type != expected:
            if detail is None:
                detail = (
                    f"se esperaba {token_type_name(expected)}, "
                    f"se encontró {token_type_name(token.type)}"
                )
            raise self._error(token, detail)
        return token

    def _skip_parenthesised(self, unclosed: str) -> None:
        """Consume tokens up to the parenthesis closing one already consumed."""
        depth = 1
        while depth > 0:
            token = self._next()
            if token.type == _T.LPAREN:
                depth += 1
            elif token.type == _T.RPAREN:
                depth -= 1
            elif token.type == _T.EOF:
                raise self._error(token, unclosed)

    # -- grammar ------------------------------------------------------

    def parse(self) -> None:
        """Check the whole token stream; raise SivSyntaxError on the first error."""
        while self._peek().type != _T.EOF:
            self._statement()
        return None

    def _statement(self) -> None:
        kind = self._peek().type
        if kind == _T.RESERVED_FUNC:
            self._function()
        elif kind in (_T.RESERVED_VAR, _T.RESERVED_CONST):
            self._var_decl()
        elif kind == _T.RESERVED_IF:
            self._if()
        elif kind == _T.RESERVED_FOR:
            self._for()
        elif kind == _T.RESERVED_WHILE:
            self._while()
        elif kind == _T.RESERVED_RETURN:
            self._next()
            if self._peek().type not in (_T.RBRACE, _T.EOF):
                self._expression()
        elif kind == _T.LBRACE:
            self._block()
        elif kind == _T.IDENTIFIER:
            self._identifier_statement()
        elif kind == _T.RESERVED_PRINT:
            self._next()
            self._next()
        else:
            self._next()

    def _identifier_statement(self) -> None:
        self._next()
        following = self._peek()
        if following.type in _BARE_TYPE_KINDS:
            raise self._error(following, "se esperaba ':' antes del tipo de variable")
        if following.type == _T.COLON:
            self._next()
            type_token = self._peek()
            if type_token.type == _T.ASSIGN:
                raise self._error(
                    type_token,
                    "se esperaba tipo de variable después de ':', pero se encontró '='",
                )
            type_token = self._next()
            if type_token.type not in _TYPE_KINDS:
                raise self._error(
                    type_token,
                    "se esperaba tipo de variable después de ':', "
                    f"se encontró {token_type_name(type_token.type)}",
                )
            after = self._peek()
            if after.type != _T.ASSIGN:
                raise self._error(
                    after,
                    "se esperaba '=' después del tipo de variable en declaración corta",
                )
            self._next()
            self._expression()
        elif following.type == _T.ASSIGN:
            self._next()
            self._expression()
        elif following.type == _T.LPAREN:
            while self._peek().type not in (_T.RPAREN, _T.EOF):
                before = self._position
                self._expression()
                if self._position == before:
                    break
            self._expect(_T.RPAREN)
        else:
            self._expression()

    def _block(self) -> None:
        self._expect(_T.LBRACE)
        while self._peek().type not in (_T.RBRACE, _T.EOF):
            self._statement()
        self._expect(_T.RBRACE)

    def _block_or_statement(self) -> None:
        if self._peek().type == _T.LBRACE:
            self._block()
        else:
            self._statement()

    def _condition(self, messages: _ConditionMessages) -> None:
        head = self._next()
        if head.type in _CONDITION_HEADS:
            following = self._peek()
            if following.type == _T.LPAREN:
                self._next()
                self._skip_parenthesised(messages.unclosed)
                following = self._peek()
            if following.type not in _COMPARISONS:
                raise self._error(following, messages.missing_operator)
            self._next()
            value = self._next()
            if value.type not in _VALUE_KINDS:
                raise self._error(value, messages.bad_value)
        elif head.type not in _LITERAL_CONDITIONS:
            raise self._error(head, messages.invalid)

    def _if(self) -> None:
        self._expect(_T.RESERVED_IF)
        self._condition(_IF_MESSAGES)
        self._block_or_statement()
        while self._peek().type == _T.RESERVED_ELIF:
            self._next()
            self._condition(_ELIF_MESSAGES)
            self._block_or_statement()
        if self._peek().type == _T.RESERVED_ELSE:
            self._next()
            self._block_or_statement()

    def _for(self) -> None:
        self._expect(_T.RESERVED_FOR)
        self._expect(_T.IDENTIFIER, "se esperaba un identificador después de 'for'")
        self._expect(
            _T.RESERVED_IN, "se esperaba 'in' después del identificador en 'for'"
        )
        self._expect(_T.RESERVED_RANGE, "se esperaba 'range' después de 'in' en 'for'")
        self._expect(_T.LPAREN, "se esperaba '(' después de 'range' en 'for'")
        self._skip_parenthesised("paréntesis sin cerrar en 'range' del for")
        self._block_or_statement()

    def _while(self) -> None:
        self._expect(_T.RESERVED_WHILE)
        self._next()
        self._block_or_statement()

    def _function(self) -> None:
        self._expect(_T.RESERVED_FUNC)
        self._expect(_T.IDENTIFIER)
        self._expect(_T.LPAREN)
        self._parameters()
        self._expect(_T.RPAREN)
        if self._peek().type == _T.COLON:
            self._next()
            type_token = self._next()
            if type_token.type not in _TYPE_KINDS:
                raise self._error(
                    type_token,
                    "se esperaba tipo de retorno después de ':', "
                    f"se encontró {token_type_name(type_token.type)}",
                )
        self._block()

    def _parameters(self) -> None:
        if self._peek().type == _T.RPAREN:
            return
        while True:
            self._expect(_T.IDENTIFIER)
            self._expect(_T.COLON)
            type_token = self._next()
            if type_token.type not in _TYPE_KINDS:
                raise self._error(
                    type_token,
                    "se esperaba tipo de parámetro, "
                    f"se encontró {token_type_name(type_token.type)}",
                )
            if self._peek().type != _T.COMMA:
                return
            self._next()

    def _var_decl(self) -> None:
        self._next()
        self._expect(_T.IDENTIFIER)
        self._expect(_T.COLON)
        type_token = self._next()
        if type_token.type not in _TYPE_KINDS:
            raise self._error(
                type_token,
                "se esperaba tipo de variable, "
                f"se encontró {token_type_name(type_token.type)}",
            )
        if self._peek().type == _T.ASSIGN:
            self._next()
            self._expression()

    def _expression(self) -> None:
        """Consume tokens up to the end of the expression."""
        while self._peek().type not in _EXPRESSION_STOPS:
            self._next()


def _normalise_entry(entry: Any) -> Any:
    """Match field names case-insensitively, preferring exact matches."""
    if not isinstance(entry, dict):
        return entry
    result = {key: entry[key] for key in _TOKEN_FIELDS if key in entry}
    for key, value in entry.items():
        lowered = key.lower() if isinstance(key, str) else key
        if lowered in _TOKEN_FIELDS and lowered not in result:
            result[lowered] = value
    return result


def load_tokens(path: Union[str, os.PathLike]) -> list[Token]:
    """Read a JSON token file written by the lexer."""
    try:
        raw = Path(path).read_bytes()
    except OSError as exc:
        raise TokenFileError(f"no se pudo abrir el archivo de tokens: {exc}") from exc
    text = raw.decode("utf-8", errors="replace").lstrip(" \t\r\n")
    try:
        data, _ = json.JSONDecoder().raw_decode(text)
    except json.JSONDecodeError as exc:
        raise TokenFileError(f"error al decodificar el archivo de tokens: {exc}") from exc
    if data is None:
        return []
    if not isinstance(data, list):
        raise TokenFileError(
            "error al decodificar el archivo de tokens: se esperaba una lista de tokens"
        )
    found: list[Token] = []
    for entry in data:
        if entry is None:
            found.append(Token(_T.INVALID))
            continue
        try:
            found.append(token_from_dict(_normalise_entry(entry)))
        except ValueError as exc:
            raise TokenFileError(
                f"error al decodificar el archivo de tokens: {exc}"
            ) from exc
    return found


def parser_from_file(
    tokens_file: Union[str, os.PathLike], source_file: Union[str, os.PathLike]
) -> Parser:
    """Create a parser over a token file, naming source_file in its messages."""
    return Parser(load_tokens(tokens_file), os.fspath(source_file))