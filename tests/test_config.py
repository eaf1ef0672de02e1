"""Tests for EnvConnectionStringSource and load_connection_string."""

import pathlib
from unittest.mock import patch

import pytest

from connection_strings.config import EnvConnectionStringSource, load_connection_string
from connection_strings.connection_string import MalformedEntryError

from helpers import DictConnectionStringSource

_NAME = "AZURE_STORAGE_CONNECTION_STRING"


def _write_env(tmp_path: pathlib.Path, content: str) -> pathlib.Path:
    path = tmp_path / ".env"
    path.write_text(content, encoding="utf-8")
    return path


# --- EnvConnectionStringSource ---


class TestEnvConnectionStringSource:
    def test_reads_environment(self, tmp_path: pathlib.Path) -> None:
        source = EnvConnectionStringSource(tmp_path / ".env", {_NAME: "A=1"})
        assert source.get(_NAME) == "A=1"

    def test_falls_back_to_env_file(self, tmp_path: pathlib.Path) -> None:
        path = _write_env(tmp_path, f'{_NAME}="AccountName=dev;AccountKey=abc=="\n')
        source = EnvConnectionStringSource(path, {})
        assert source.get(_NAME) == "AccountName=dev;AccountKey=abc=="

    def test_environment_wins_over_env_file(self, tmp_path: pathlib.Path) -> None:
        path = _write_env(tmp_path, f"{_NAME}=A=file\n")
        source = EnvConnectionStringSource(path, {_NAME: "A=env"})
        assert source.get(_NAME) == "A=env"

    def test_empty_environment_value_falls_back(self, tmp_path: pathlib.Path) -> None:
        path = _write_env(tmp_path, f"{_NAME}=A=file\n")
        source = EnvConnectionStringSource(path, {_NAME: ""})
        assert source.get(_NAME) == "A=file"

    def test_returns_none_when_missing(self, tmp_path: pathlib.Path) -> None:
        source = EnvConnectionStringSource(tmp_path / "missing.env", {})
        assert source.get(_NAME) is None

    def test_returns_none_for_valueless_entry(self, tmp_path: pathlib.Path) -> None:
        path = _write_env(tmp_path, f"{_NAME}\n")
        source = EnvConnectionStringSource(path, {})
        assert source.get(_NAME) is None

    @patch.dict("os.environ", {_NAME: "A=os"})
    def test_defaults_to_os_environ(self, tmp_path: pathlib.Path) -> None:
        source = EnvConnectionStringSource(tmp_path / ".env")
        assert source.get(_NAME) == "A=os"

    @patch.dict("os.environ", {}, clear=True)
    def test_does_not_export_env_file(self, tmp_path: pathlib.Path) -> None:
        import os

        path = _write_env(tmp_path, f"{_NAME}=A=file\n")
        EnvConnectionStringSource(path).get(_NAME)
        assert _NAME not in os.environ


# --- load_connection_string ---


class TestLoadConnectionString:
    def test_parses_value_from_source(self) -> None:
        source = DictConnectionStringSource({_NAME: "account-name=dev;AccountKey=abc=="})
        cs = load_connection_string(_NAME, source=source)
        assert cs is not None
        assert cs.to_dict() == {"AccountName": "dev", "AccountKey": "abc=="}

    def test_returns_none_when_unset(self) -> None:
        assert load_connection_string(_NAME, source=DictConnectionStringSource()) is None

    def test_custom_separators(self) -> None:
        source = DictConnectionStringSource({_NAME: "a:1|b:2"})
        cs = load_connection_string(
            _NAME, source=source, item_separator="|", key_value_separator=":",
        )
        assert cs is not None
        assert cs.to_string() == "A=1;B=2"

    def test_reads_env_file(self, tmp_path: pathlib.Path) -> None:
        path = _write_env(tmp_path, f"{_NAME}=Endpoint=sb://ns/;EntityPath=q\n")
        cs = load_connection_string(_NAME, env_path=path, environ={})
        assert cs is not None
        assert cs["Endpoint"] == "sb://ns/"
        assert cs["EntityPath"] == "q"

    def test_parse_errors_propagate(self) -> None:
        source = DictConnectionStringSource({_NAME: "not a pair"})
        with pytest.raises(MalformedEntryError):
            load_connection_string(_NAME, source=source)
