"""
Tests for the interactive prompt.
"""

import io
from argparse import Namespace
from unittest.mock import MagicMock

import pytest

from easydb import Credentials, EasyDB
from easydb.cli.__main__ import Prompt, connect, main
from easydb.errors import ValueTypeError
from easydb.version import __version__


def scripted(*lines):
    """An input() replacement answering with `lines`, then EOF."""
    answers = iter(lines)

    def _input(prompt=""):
        try:
            return next(answers)
        except StopIteration:
            raise EOFError()
    return _input


@pytest.fixture
def db():
    db = MagicMock()
    db.uuid = "my-uuid"
    db.token = "my-token"
    db.url = "https://app.easydb.io/database/"
    return db


def run_prompt(db, *lines):
    out = io.StringIO()
    Prompt(db, input_func=scripted(*lines), output=out).run()
    return out.getvalue()


class TestPrompt:
    """Tests for Prompt commands."""

    def test_get(self, db):
        db.get.return_value = "world"
        output = run_prompt(db, "get", "hello", "exit")
        db.get.assert_called_once_with("hello")
        assert "world\n" in output

    def test_put_and_delete(self, db):
        db.put.return_value = 200
        db.delete.return_value = 404
        output = run_prompt(db, "put", "hello", " world ", "del", "hello", "exit")
        db.put.assert_called_once_with("hello", "world")
        db.delete.assert_called_once_with("hello")
        assert "Code: 200" in output
        assert "Code: 404" in output

    def test_list(self, db):
        db.list.return_value = {"hello": "world", "goodbye": "earth"}
        output = run_prompt(db, "list", "exit")
        assert "goodbye: earth\nhello: world\n" in output

    def test_clear(self, db):
        output = run_prompt(db, "clear", "exit")
        db.clear.assert_called_once_with()
        assert "Success" in output

    def test_accessors(self, db):
        output = run_prompt(db, "uuid", "token", "url", "exit")
        assert "my-uuid\nmy-token\nhttps://app.easydb.io/database/\n" in output

    def test_invalid_command(self, db):
        assert "Invalid command." in run_prompt(db, "bogus", "exit")

    def test_error_keeps_prompt_running(self, db):
        db.get.side_effect = ValueTypeError("Value was not a string")
        output = run_prompt(db, "get", "hello", "uuid", "exit")
        assert "Error: Value was not a string" in output
        assert "my-uuid" in output

    def test_end_of_input_exits(self, db):
        run_prompt(db, "uuid")
        run_prompt(db, "get")
        db.get.assert_not_called()

    def test_save(self, db, tmp_path):
        path = tmp_path / "saved.toml"
        db.get_credentials.return_value = Credentials(uuid="my-uuid", token="my-token")

        output = run_prompt(db, "save", str(path), "exit")

        assert Credentials.from_file(str(path)).uuid == "my-uuid"
        assert "Credentials saved" in output


class TestConnect:
    """Tests for building the client from command line arguments."""

    def test_uuid_token(self, config):
        edb = connect(Namespace(uuid="aaaa", token="bbbb", url="http://localhost/db", file=None))
        assert isinstance(edb, EasyDB)
        assert edb.database_url == "http://localhost/db/aaaa"
        edb.close()

    def test_waits_for_credentials_file(self, tmp_path, monkeypatch, capsys):
        monkeypatch.chdir(tmp_path)

        def create_file():
            (tmp_path / "easydb.toml").write_text('UUID = "aaaa"\nToken = "bbbb"\n', encoding="utf-8")
            return ""

        edb = connect(Namespace(uuid=None, token=None, url=None, file=None), input_func=create_file)

        assert edb.uuid == "aaaa"
        assert "Make sure `easydb.toml` exists" in capsys.readouterr().err
        edb.close()


class TestMain:
    """Tests for the console entry point."""

    def test_version(self, capsys):
        main(["--version"])
        assert __version__ in capsys.readouterr().out

    def test_uuid_without_token(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["aaaa"])
        assert exc_info.value.code == 2
        assert "Invalid args, accepts 0, 2, or 3 arguments" in capsys.readouterr().err

    def test_invalid_url_exits(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["aaaa", "bbbb", "not-a-url"])
        assert exc_info.value.code == 1
        assert "Error: Invalid URL" in capsys.readouterr().out

    def test_session(self, monkeypatch, capsys):
        monkeypatch.setattr("builtins.input", scripted("uuid", "exit"))
        main(["aaaa", "bbbb"])
        out = capsys.readouterr().out
        assert "EasyDB interactive prompt" in out
        assert "aaaa" in out
