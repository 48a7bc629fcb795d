import json

import pytest

from sivcheck.lexer import Lexer, is_identifier, lexer_from_file, tokenize
from sivcheck.tokens import TokenType, token_from_dict

PROGRAM = (
    "func suma(a: int, b: int): int {\n"
    "    return a + b\n"
    "}\n"
    "var total: int = suma(1, 2)\n"
)


def kinds(tokens):
    return [token.type for token in tokens]


def test_variable_declaration_kinds_and_lexemes():
    tokens = tokenize("var x: int = 5")
    assert kinds(tokens) == [
        TokenType.RESERVED_VAR,
        TokenType.IDENTIFIER,
        TokenType.COLON,
        TokenType.RESERVED_INT,
        TokenType.ASSIGN,
        TokenType.NUMBER,
        TokenType.EOF,
    ]
    assert [t.lexeme for t in tokens[:-1]] == ["var", "x", ":", "int", "=", "5"]
    assert tokens[5].literal == "5"


def test_columns_point_at_lexemes():
    lines = PROGRAM.split("\n")
    tokens = tokenize(PROGRAM)
    checked = 0
    for token in tokens:
        if token.type in (TokenType.EOF, TokenType.STRING):
            continue
        line = lines[token.line - 1]
        start = token.column - 1
        assert line[start : start + len(token.lexeme)] == token.lexeme
        checked += 1
    assert checked == len(tokens) - 1


def test_function_call_with_typed_parameter():
    tokens = tokenize("suma(a: int)")
    assert kinds(tokens) == [
        TokenType.IDENTIFIER,
        TokenType.LPAREN,
        TokenType.IDENTIFIER,
        TokenType.COLON,
        TokenType.RESERVED_INT,
        TokenType.RPAREN,
        TokenType.EOF,
    ]
    assert tokens[0].lexeme == "suma"


def test_print_with_string_literal():
    line = 'print("hola")'
    tokens = tokenize(line)
    assert kinds(tokens) == [
        TokenType.RESERVED_PRINT,
        TokenType.LPAREN,
        TokenType.STRING,
        TokenType.RPAREN,
        TokenType.EOF,
    ]
    string = tokens[2]
    assert string.lexeme == "hola"
    assert string.literal == "hola"
    assert line[string.column - 1] == '"'


def test_single_quoted_string():
    tokens = tokenize("'x'")
    assert tokens[0].type == TokenType.STRING
    assert tokens[0].literal == "x"


@pytest.mark.parametrize(
    "source, expected",
    [
        ("'a\\nb'", "a\nb"),
        ("'a\\tb'", "a\tb"),
        ("'a\\\\b'", "a\\b"),
        ("'a\\\"b'", 'a"b'),
        ("'a\\qb'", "a\\qb"),
    ],
)
def test_string_escapes(source, expected):
    tokens = tokenize(source)
    assert tokens[0].type == TokenType.STRING
    assert tokens[0].literal == expected


def test_unterminated_string_becomes_identifier():
    tokens = tokenize('"abc')
    assert kinds(tokens) == [TokenType.IDENTIFIER, TokenType.EOF]
    assert tokens[0].lexeme == "abc"


def test_comment_takes_rest_of_line():
    line = "x = 1 # note"
    tokens = tokenize(line)
    assert kinds(tokens) == [
        TokenType.IDENTIFIER,
        TokenType.ASSIGN,
        TokenType.NUMBER,
        TokenType.COMMENT,
        TokenType.EOF,
    ]
    assert tokens[3].lexeme == "# note"
    assert tokens[3].column == line.index("#") + 1


@pytest.mark.parametrize(
    "operator, kind",
    [
        ("==", TokenType.EQUAL),
        ("!=", TokenType.NOT_EQUAL),
        ("<=", TokenType.LESS_EQUAL),
        (">=", TokenType.GREATER_EQUAL),
        ("&&", TokenType.AND),
        ("||", TokenType.OR),
        ("<", TokenType.LESS),
        (">", TokenType.GREATER),
        ("%", TokenType.MODULO),
    ],
)
def test_operators_between_spaces(operator, kind):
    tokens = tokenize(f"a {operator} b")
    assert kinds(tokens) == [TokenType.IDENTIFIER, kind, TokenType.IDENTIFIER, TokenType.EOF]
    assert tokens[1].lexeme == operator
    assert tokens[1].column == 3


def test_operator_without_spaces_is_emitted_before_pending_word():
    tokens = tokenize("a==b")
    assert kinds(tokens) == [TokenType.EQUAL, TokenType.IDENTIFIER, TokenType.EOF]
    assert tokens[1].lexeme == "ab"


@pytest.mark.parametrize("text", ["3.14", "42", "1e5", "inf", "NaN", "0x1p3", "7."])
def test_numbers(text):
    tokens = tokenize(text)
    assert tokens[0].type == TokenType.NUMBER
    assert tokens[0].lexeme == text
    assert tokens[0].literal == text


@pytest.mark.parametrize("text", ["1e400", "0x1F", "1e", "abc1"])
def test_non_numbers_are_identifiers(text):
    tokens = tokenize(text)
    assert tokens[0].type == TokenType.IDENTIFIER
    assert tokens[0].lexeme == text
    assert tokens[0].literal is None


def test_keywords_and_non_keywords():
    tokens = tokenize("while input array")
    assert kinds(tokens) == [
        TokenType.IDENTIFIER,
        TokenType.INPUT,
        TokenType.RESERVED_ARRAY,
        TokenType.EOF,
    ]


def test_braces_are_delimiters():
    tokens = tokenize("{ }")
    assert kinds(tokens) == [TokenType.LBRACE, TokenType.RBRACE, TokenType.EOF]


@pytest.mark.parametrize("source", ["a\nb\n", "a\nb"])
def test_eof_line_follows_last_line(source):
    tokens = tokenize(source)
    assert tokens[-1].type == TokenType.EOF
    assert tokens[-1].line == 3
    assert tokens[-1].column == 1
    assert [t.line for t in tokens[:-1]] == [1, 2]


def test_empty_source_has_only_eof():
    tokens = tokenize("")
    assert kinds(tokens) == [TokenType.EOF]
    assert tokens[0].line == 1


def test_crlf_matches_lf():
    def summary(source):
        return [(t.type, t.lexeme, t.line, t.column) for t in tokenize(source)]

    assert summary("a\r\nb\r\n") == summary("a\nb\n")


def test_columns_count_bytes():
    line = "ñ x"
    tokens = tokenize(line)
    x = tokens[1]
    assert x.lexeme == "x"
    raw = line.encode("utf-8")
    assert raw[x.column - 1 : x.column] == b"x"


def test_bytes_and_str_sources_agree():
    assert tokenize(PROGRAM.encode("utf-8")) == tokenize(PROGRAM)


def test_long_line_is_rejected():
    with pytest.raises(ValueError):
        tokenize("a" * 70000)


def test_ordinary_long_line_is_accepted():
    tokens = tokenize("a" * 1000)
    assert tokens[0].lexeme == "a" * 1000


def test_next_peek_and_reset():
    lexer = Lexer("a b")
    assert lexer.next_token() is None
    scanned = lexer.scan_tokens()
    assert lexer.peek_token() == scanned[0]
    collected = list(iter(lexer.next_token, None))
    assert collected == scanned
    assert lexer.peek_token() is None
    assert lexer.next_token() is None
    lexer.reset()
    assert lexer.next_token() == scanned[0]


def test_save_tokens_round_trip(tmp_path):
    lexer = Lexer(PROGRAM)
    scanned = lexer.scan_tokens()
    path = tmp_path / "prog.tokens.json"
    lexer.save_tokens(path)
    text = path.read_text(encoding="utf-8")
    assert text.endswith("\n")
    loaded = [token_from_dict(entry) for entry in json.loads(text)]
    assert loaded == scanned


def test_save_tokens_layout(tmp_path):
    lexer = Lexer("x")
    lexer.scan_tokens()
    path = tmp_path / "x.tokens.json"
    lexer.save_tokens(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    assert list(data[0]) == ["type", "lexeme", "line", "column"]
    assert data[-1] == {"type": "EOF", "line": 2, "column": 1}


def test_save_tokens_escapes_html(tmp_path):
    lexer = Lexer('var s: str = "<a&b>"')
    lexer.scan_tokens()
    path = tmp_path / "s.tokens.json"
    lexer.save_tokens(path)
    text = path.read_text(encoding="utf-8")
    assert "<" not in text and "&" not in text
    assert "\\u003c" in text
    entries = json.loads(text)
    assert any(entry.get("literal") == "<a&b>" for entry in entries)


def test_input_keyword_is_saved_as_invalid(tmp_path):
    lexer = Lexer("input")
    lexer.scan_tokens()
    path = tmp_path / "i.tokens.json"
    lexer.save_tokens(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data[0]["type"] == "INVALID"
    assert data[0]["lexeme"] == "input"


def test_save_before_scan_writes_null(tmp_path):
    path = tmp_path / "empty.tokens.json"
    Lexer("x").save_tokens(path)
    assert path.read_text(encoding="utf-8") == "null\n"


def test_lexer_from_file(tmp_path):
    path = tmp_path / "prog.siv"
    path.write_text(PROGRAM, encoding="utf-8")
    assert lexer_from_file(path).scan_tokens() == tokenize(PROGRAM)


def test_lexer_from_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        lexer_from_file(tmp_path / "missing.siv")


@pytest.mark.parametrize(
    "text, expected",
    [
        ("abc", True),
        ("_x1", True),
        ("while", True),
        ("1abc", False),
        ("a-b", False),
        ("", False),
        ("int", False),
        ("undefined", False),
        ("print", False),
        ("length", False),
    ],
)
def test_is_identifier(text, expected):
    assert is_identifier(text) is expected