"""Tests for the click command-line interface."""

from __future__ import annotations

import json
import re

import pytest
from click.testing import CliRunner

from twofauth import __version__
from twofauth.cli import main

CODE_LINE = re.compile(r"^\d{6} \((?:[1-9]|[12]\d|30) second\(s\) remaining\)$", re.MULTILINE)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / ".2fauth"


def run(runner, store_path, *args):
    return runner.invoke(main, ["--store", str(store_path), *args])


def test_version(runner):
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_list_empty(runner, store_path):
    result = run(runner, store_path, "list")
    assert result.exit_code == 0
    assert "There are no accounts registered yet!" in result.output


def test_set_list_get_delete(runner, store_path):
    result = run(runner, store_path, "set", "github", "jbsw", "y3dp", "ehpk", "3pxp")
    assert result.exit_code == 0
    assert result.output == ""
    assert json.loads(store_path.read_text()) == {"github": "JBSWY3DPEHPK3PXP"}

    result = run(runner, store_path, "list")
    assert result.exit_code == 0
    assert "twofauth get <account>" in result.output
    assert "github" in result.output.splitlines()

    result = run(runner, store_path, "get", "github")
    assert result.exit_code == 0
    assert CODE_LINE.search(result.output)

    result = run(runner, store_path, "delete", "github")
    assert result.exit_code == 0
    assert json.loads(store_path.read_text()) == {}


def test_get_uses_clock(runner, store_path, monkeypatch):
    run(runner, store_path, "set", "rfc", "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ")
    monkeypatch.setattr("twofauth.totp.time.time", lambda: 1234567890.0)
    result = run(runner, store_path, "get", "rfc")
    assert result.exit_code == 0
    assert result.output.strip() == "005924 (30 second(s) remaining)"


def test_get_missing_account(runner, store_path):
    result = run(runner, store_path, "get", "nobody")
    assert result.exit_code == 0
    assert "Looks like nobody is not in the list" in result.output


def test_get_invalid_secret(runner, store_path):
    run(runner, store_path, "set", "typo", "0000", "1111")
    result = run(runner, store_path, "get", "typo")
    assert result.exit_code == 1
    assert "Invalid base32 secret" in result.output


def test_set_without_secret_is_usage_error(runner, store_path):
    result = run(runner, store_path, "set", "alice")
    assert result.exit_code == 2
    assert "A secret is required" in result.output
    assert json.loads(store_path.read_text()) == {}


def test_delete_missing_account(runner, store_path):
    result = run(runner, store_path, "delete", "nobody")
    assert result.exit_code == 0
    assert result.output == ""
    assert json.loads(store_path.read_text()) == {}


def test_corrupt_store_aborts_without_overwriting(runner, store_path):
    store_path.write_text("this is not json")
    result = run(runner, store_path, "set", "alice", "abcdefgh")
    assert result.exit_code == 1
    assert "corrupt" in result.output
    assert store_path.read_text() == "this is not json"


def test_store_path_from_env(runner, tmp_path, monkeypatch):
    from twofauth.config import Settings

    path = tmp_path / "env-store"
    monkeypatch.setattr("twofauth.cli.settings", Settings(_env_file=None, store_path=path))
    result = runner.invoke(main, ["set", "alice", "abcdefgh"])
    assert result.exit_code == 0
    assert json.loads(path.read_text()) == {"alice": "ABCDEFGH"}


def test_unreadable_store_path_fails(runner, tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    result = run(runner, blocker / ".2fauth", "set", "alice", "abcdefgh")
    assert result.exit_code != 0
    assert isinstance(result.exception, OSError)


def test_write_failure_fails_and_keeps_old_store(runner, store_path, monkeypatch):
    store_path.write_text(json.dumps({"old": "AAAAAAAA"}))

    def fail_replace(src, dst):
        raise OSError("read-only file system")

    monkeypatch.setattr("twofauth.store.os.replace", fail_replace)
    result = run(runner, store_path, "delete", "old")
    assert result.exit_code != 0
    assert isinstance(result.exception, OSError)
    assert json.loads(store_path.read_text()) == {"old": "AAAAAAAA"}
    assert [p.name for p in store_path.parent.iterdir()] == [".2fauth"]
