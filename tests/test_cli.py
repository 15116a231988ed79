import json
import logging
from pathlib import Path

import pytest

from dotenv_cfgcheck import main

SAMPLE = str(Path(__file__).parent / "data" / "sample.env")


def test_cli_check_success(capsys) -> None:
    code = main(["check", SAMPLE])

    captured = capsys.readouterr()
    assert code == 0
    assert "OK" in captured.out
    assert "(4 keys)" in captured.out


def test_cli_missing_file(capsys) -> None:
    code = main(["check", "tests/data/does-not-exist.env"])

    captured = capsys.readouterr()
    assert code == 2
    assert "File not found" in captured.err


def test_cli_syntax_error(tmp_path, capsys) -> None:
    config = tmp_path / "bad.env"
    config.write_text("KEY=VAL\n # indented comment\n", encoding="utf-8")

    code = main(["check", str(config)])

    captured = capsys.readouterr()
    assert code == 2
    assert "Syntax error" in captured.err
    assert "line 2, character 1" in captured.err


def test_cli_show_json(capsys) -> None:
    code = main(["show", SAMPLE, "--format", "json"])

    captured = capsys.readouterr()
    assert code == 0
    assert json.loads(captured.out)["GREETING"] == "hi # there"


def test_cli_show_text_is_sorted(capsys) -> None:
    code = main(["show", SAMPLE])

    lines = capsys.readouterr().out.splitlines()
    assert code == 0
    assert lines == sorted(lines)
    assert "PORT=8080" in lines


def test_cli_find_prints_path(tmp_path, capsys) -> None:
    (tmp_path / "FindMe.env").write_text("Hello=World\n", encoding="utf-8")
    nested = tmp_path / "nested"
    nested.mkdir()

    code = main(["find", str(nested)])

    captured = capsys.readouterr()
    assert code == 0
    assert captured.out.strip().endswith("FindMe.env")


def test_cli_find_parse(tmp_path, capsys) -> None:
    (tmp_path / "FindMe.env").write_text("Hello=World\n", encoding="utf-8")

    code = main(["find", str(tmp_path), "--parse"])

    captured = capsys.readouterr()
    assert code == 0
    assert captured.out.strip() == "Hello=World"


def test_cli_find_not_found(tmp_path, capsys, monkeypatch) -> None:
    monkeypatch.setattr("dotenv_cfgcheck.cli.find_nearest_env", lambda directory=None: None)

    code = main(["find", str(tmp_path)])

    captured = capsys.readouterr()
    assert code == 2
    assert "No .env file found" in captured.err


def test_cli_find_parse_error(tmp_path, capsys) -> None:
    (tmp_path / "broken.env").write_text("=VAL\n", encoding="utf-8")

    code = main(["find", str(tmp_path), "--parse"])

    captured = capsys.readouterr()
    assert code == 2
    assert "Key missing on line 1" in captured.err


def test_cli_write(tmp_path, capsys) -> None:
    source = tmp_path / "in.env"
    source.write_text("A=1\n# comment\nB='2'\n", encoding="utf-8")
    dest = tmp_path / "out.env"

    code = main(["write", str(source), str(dest)])

    captured = capsys.readouterr()
    assert code == 0
    assert f"serialized to {dest}" in captured.out
    assert sorted(dest.read_text(encoding="utf-8").splitlines()) == ["A=1", "B=2"]


def test_cli_write_reports_io_error(tmp_path, capsys) -> None:
    dest = tmp_path / "missing-dir" / "out.env"

    code = main(["write", SAMPLE, str(dest)])

    captured = capsys.readouterr()
    assert code == 2
    assert captured.err.startswith("I/O error: ")
    assert "I/O error: I/O error" not in captured.err


def test_cli_find_parse_reports_read_error_once(tmp_path, capsys) -> None:
    (tmp_path / "binary.env").write_bytes(b"KEY=\xff\xfe\n")

    code = main(["find", str(tmp_path), "--parse"])

    captured = capsys.readouterr()
    assert code == 2
    assert captured.err.count("I/O error") == 1
    assert "cannot read" in captured.err


@pytest.fixture
def package_log_level():
    logger = logging.getLogger("dotenv_cfgcheck")
    previous = logger.level
    yield
    logger.setLevel(previous)


def test_cli_verbose_enables_debug_logging(caplog, package_log_level) -> None:
    assert main(["--verbose", "check", SAMPLE]) == 0
    assert any("Running command 'check'" in record.getMessage() for record in caplog.records)

    caplog.clear()
    assert main(["check", SAMPLE]) == 0
    assert not any(record.levelno < logging.WARNING for record in caplog.records)
