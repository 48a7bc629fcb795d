# sivcheck

`sivcheck` checks programs written in the small `.siv` language. It works in
three steps:

1. It tokenizes a source file.
2. It writes the tokens out as JSON.
3. It reads the tokens back and checks the syntax.

At the end it reports either that the code is valid or the first syntax error
it found.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install .[test]
```

## Command line

```
sivcheck program.siv
```

You can also run `python -m sivcheck.cli program.siv`.

The command does the following:

1. Tokenizes `program.siv` and writes the tokens as indented JSON to
   `program.tokens.json`, in the same directory.
2. Reads that token file back and checks the syntax. It shows progress bars
   on standard output while it works.
3. Prints `✅ El código es válido.` and exits with status 0 when the check
   passes.
4. When the check fails, prints the syntax error and exits with status 1. The
   error gives the source file, line and column.

The command stops with status 1 and a message on standard error in any of
these cases:

- no file is given
- the file does not have the `.siv` extension
- the file cannot be read
- a line is too long to scan
- the token file cannot be written or read back

## Library use

```python
from sivcheck.lexer import tokenize
from sivcheck.parser import Parser, SivSyntaxError

tokens = tokenize('var x: int = 5\nif x > 3 { print "hi" }\n')

parser = Parser(tokens, "example.siv")
try:
    parser.parse()
except SivSyntaxError as exc:
    print(exc, exc.line, exc.column)
```

### `sivcheck.tokens`

- `TokenType` is an `IntEnum` of every token kind.
- `Token` is a frozen dataclass. Its fields are `type`, `lexeme`, `literal`,
  `line` and `column`. Lines and columns start at 1.
- `token_type_name` converts a kind to the name used in the JSON file. Kinds
  without a name give `"INVALID"`.
- `token_type_from_name` converts a name back to a kind. Unknown names give
  `TokenType.INVALID`.
- `Token.to_dict` gives the JSON record of a token. An empty lexeme or a
  missing literal is left out.
- `token_from_dict` builds a token from a JSON record. It raises `ValueError`
  when a field has the wrong type.

### `sivcheck.lexer`

- `Lexer(source)` takes `str` or `bytes`.
  - `scan_tokens()` tokenizes the whole source and returns the token list,
    which ends with an `EOF` token. It raises `ValueError` if a line is too
    long.
  - `next_token()` and `peek_token()` step through the scanned tokens. They
    return `None` when no tokens are left.
  - `reset()` goes back to the first token.
  - `save_tokens(path)` writes the tokens to a JSON file.
- `lexer_from_file(path)` creates a `Lexer` over the contents of a file.
- `tokenize(source)` scans a source in one call.
- `is_identifier(text)` tells whether `text` is a well-formed identifier that
  is not a reserved type or function name.

### `sivcheck.parser`

- `Parser(tokens, source_file)` checks a token sequence.
  - `parse()` returns `None` when the tokens are valid.
  - It raises `SivSyntaxError` at the first error. The exception has `line`
    and `column` attributes.
- `load_tokens(path)` reads a JSON token file.
- `parser_from_file(tokens_file, source_file)` builds a `Parser` from a JSON
  token file.
- If a token file cannot be opened or decoded, these functions raise
  `TokenFileError`.

## What it does not do

`sivcheck` only checks syntax:

- It does not build a syntax tree.
- It does not check types or names.
- It does not run `.siv` programs.

Expressions are skipped over, not analysed, so errors inside an expression are
not reported. Error messages are in Spanish.