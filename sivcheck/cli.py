"""Command line entry point: tokenize a .siv file, save the tokens, check its syntax."""

from __future__ import annotations

import os
import sys
import threading
from typing import Optional, Sequence

from tqdm import tqdm

from .lexer import Lexer, lexer_from_file
from .parser import SivSyntaxError, TokenFileError, parser_from_file

SOURCE_EXTENSION = ".siv"
TOKENS_SUFFIX = ".tokens.json"

_STEPS = 100
_LEXER_STEP_DELAY = 0.010
_SYNTAX_STEP_DELAY = 0.015
_BAR_FORMAT = "{desc} {percentage:3.0f}% [{bar:50}] ({n_fmt}/{total_fmt})"
_BAR_CHARS = " >="
_CLEAR_LINE = "\r\033[K"


def _extension(path: str) -> str:
    """Return the suffix from the last dot of the final path element, dot included."""
    name = os.path.basename(path)
    dot = name.rfind(".")
    return name[dot:] if dot >= 0 else ""


def _tokens_path(source_file: str) -> str:
    base = source_file[: -len(SOURCE_EXTENSION)] if source_file.endswith(SOURCE_EXTENSION) else source_file
    return base + TOKENS_SUFFIX


def _progress(description: str, *, leave: bool) -> tqdm:
    return tqdm(
        total=_STEPS,
        desc=description,
        bar_format=_BAR_FORMAT,
        ascii=_BAR_CHARS,
        leave=leave,
        file=sys.stdout,
    )


def _animate(bar: tqdm, delay: float, stop: threading.Event) -> None:
    for _ in range(_STEPS):
        if stop.is_set():
            return
        bar.update(1)
        stop.wait(delay)


def _fatal(message: str) -> int:
    print(message, file=sys.stderr)
    return 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the lexical and syntax analysis of a .siv file; return the exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        return _fatal("Uso: sivcheck <archivo.siv>")

    source_file = os.fspath(args[0])
    if _extension(source_file) != SOURCE_EXTENSION:
        return _fatal("El archivo debe tener extensión .siv")

    print("🔍 Ejecutando análisis léxico...")
    with _progress("Analizando código...", leave=True) as bar:
        never = threading.Event()
        _animate(bar, _LEXER_STEP_DELAY, never)

    try:
        lexer: Lexer = lexer_from_file(source_file)
    except OSError as exc:
        print(f"Error al leer el archivo: {exc}")
        return _fatal("No se pudo crear el analizador léxico")

    try:
        lexer.scan_tokens()
    except ValueError as exc:
        return _fatal(f"Error en el análisis léxico: {exc}")

    tokens_file = _tokens_path(source_file)
    try:
        lexer.save_tokens(tokens_file)
    except OSError as exc:
        return _fatal(f"Error al guardar tokens: error al crear el archivo: {exc}")
    print(f"✅ Tokens guardados en: {tokens_file}")

    print("\n🔍 Ejecutando análisis sintáctico...")
    syntax_bar = _progress("Analizando sintaxis...", leave=False)
    stop = threading.Event()
    animation = threading.Thread(
        target=_animate, args=(syntax_bar, _SYNTAX_STEP_DELAY, stop), daemon=True
    )
    animation.start()

    def finish_bar() -> None:
        stop.set()
        animation.join()
        syntax_bar.close()
        print(_CLEAR_LINE, end="")

    try:
        parser = parser_from_file(tokens_file, source_file)
    except TokenFileError as exc:
        finish_bar()
        return _fatal(f"Error al crear el analizador sintáctico: {exc}")

    try:
        parser.parse()
    except SivSyntaxError as exc:
        finish_bar()
        print(f"\n❌ Error de sintaxis en la línea {exc}")
        return 1

    finish_bar()
    print("\n✅ El código es válido.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())