import json

import pytest

from sivcheck import cli

VALID_PROGRAM = "var x: int = 5\nprint(x)\n"


@pytest.fixture(autouse=True)
def _fast_bars(monkeypatch):
    monkeypatch.setattr(cli, "_LEXER_STEP_DELAY", 0.0)
    monkeypatch.setattr(cli, "_SYNTAX_STEP_DELAY", 0.0)


def _write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_missing_argument_is_fatal(capsys):
    assert cli.main([]) == 1
    assert "Uso" in capsys.readouterr().err


def test_wrong_extension_is_fatal(tmp_path, capsys):
    path = _write(tmp_path, "prog.txt", VALID_PROGRAM)
    assert cli.main([str(path)]) == 1
    assert "El archivo debe tener extensión .siv" in capsys.readouterr().err


def test_missing_file_reports_lexer_failure(tmp_path, capsys):
    assert cli.main([str(tmp_path / "absent.siv")]) == 1
    captured = capsys.readouterr()
    assert "Error al leer el archivo" in captured.out
    assert "No se pudo crear el analizador léxico" in captured.err


def test_valid_program_succeeds_and_writes_tokens(tmp_path, capsys):
    path = _write(tmp_path, "prog.siv", VALID_PROGRAM)
    assert cli.main([str(path)]) == 0
    captured = capsys.readouterr()
    assert "✅ El código es válido." in captured.out
    tokens_file = tmp_path / "prog.tokens.json"
    assert f"✅ Tokens guardados en: {tokens_file}" in captured.out
    data = json.loads(tokens_file.read_text(encoding="utf-8"))
    assert data[0]["type"] == "VAR"
    assert data[-1]["type"] == "EOF"


def test_extra_arguments_are_ignored(tmp_path, capsys):
    path = _write(tmp_path, "prog.siv", VALID_PROGRAM)
    assert cli.main([str(path), "extra"]) == 0
    assert "El código es válido" in capsys.readouterr().out


def test_syntax_error_is_reported_with_position(tmp_path, capsys):
    path = _write(tmp_path, "bad.siv", "x int = 5\n")
    assert cli.main([str(path)]) == 1
    out = capsys.readouterr().out
    assert "❌ Error de sintaxis en la línea Error de sintaxis en" in out
    assert f"{path}:1:3" in out
    assert "se esperaba ':' antes del tipo de variable" in out
    assert "El código es válido" not in out


def test_overlong_line_is_a_lexer_error(tmp_path, capsys):
    path = _write(tmp_path, "long.siv", "a" * 70000 + "\n")
    assert cli.main([str(path)]) == 1
    err = capsys.readouterr().err
    assert "Error en el análisis léxico: error scanning source: token too long" in err
    assert not (tmp_path / "long.tokens.json").exists()


def test_unwritable_tokens_file_is_fatal(tmp_path, capsys):
    path = _write(tmp_path, "prog.siv", VALID_PROGRAM)
    (tmp_path / "prog.tokens.json").mkdir()
    assert cli.main([str(path)]) == 1
    assert "Error al guardar tokens" in capsys.readouterr().err


def test_hidden_siv_file_name_is_accepted(tmp_path, capsys):
    path = _write(tmp_path, ".siv", VALID_PROGRAM)
    assert cli.main([str(path)]) == 0
    assert (tmp_path / ".tokens.json").exists()
    assert "El código es válido" in capsys.readouterr().out


def test_empty_program_is_valid(tmp_path, capsys):
    path = _write(tmp_path, "empty.siv", "")
    assert cli.main([str(path)]) == 0
    data = json.loads((tmp_path / "empty.tokens.json").read_text(encoding="utf-8"))
    assert [entry["type"] for entry in data] == ["EOF"]
    assert "El código es válido" in capsys.readouterr().out