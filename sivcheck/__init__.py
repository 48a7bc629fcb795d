"""Lexer, token file handling and syntax checker for .siv source files."""

__version__ = "0.1.0"
__all__ = ["cli", "lexer", "parser", "tokens"]