from pathlib import Path

import pytest

from dotenv_cfgcheck.env_loader import EnvLoader
from dotenv_cfgcheck.env_parser import UnexpectedToken, process
from dotenv_cfgcheck.env_writer import serialize


def test_serialize_writes_one_line_per_entry(tmp_path: Path) -> None:
    dest = tmp_path / "out.env"

    message = serialize({"A": "1", "B": "two"}, dest)

    assert message == f"serialized to {dest}"
    assert sorted(dest.read_text(encoding="utf-8").splitlines()) == ["A=1", "B=two"]


def test_serialize_overwrites_existing_file(tmp_path: Path) -> None:
    dest = tmp_path / "out.env"
    dest.write_text("OLD=value\nSTALE=1\n", encoding="utf-8")

    serialize({"NEW": "value"}, dest)

    assert dest.read_text(encoding="utf-8") == "NEW=value\n"


def test_parse_and_serialize_round_trip(tmp_path: Path) -> None:
    original = EnvLoader(Path(__file__).parent / "data" / "sample.env").load()
    plain = {key: value for key, value in original.items() if " " not in value and "#" not in value}
    dest = tmp_path / "TestSerialize.env"

    serialize(plain, dest)

    assert EnvLoader(dest).load() == plain


def test_serialize_does_not_quote_values(tmp_path: Path) -> None:
    dest = tmp_path / "out.env"

    serialize({"GREETING": "meet you"}, dest)

    assert dest.read_text(encoding="utf-8") == "GREETING=meet you\n"
    with pytest.raises(UnexpectedToken):
        process(dest.read_text(encoding="utf-8"))


def test_serialize_propagates_io_errors(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        serialize({"A": "1"}, tmp_path / "missing" / "out.env")
