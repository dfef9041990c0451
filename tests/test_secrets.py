"""Tests for src.secrets covering missing, malformed, and valid secrets files.

Run with coverage:
    pytest tests/test_secrets.py --maxfail=1 -v --cov=src.secrets --cov-report=term-missing
"""

import json

from src import secrets


def test_missing_file_returns_empty(tmp_path):
    assert secrets.load_local_secrets(tmp_path / "absent.json") == {}


def test_malformed_file_returns_empty(tmp_path, capsys):
    path = tmp_path / "local_secrets.json"
    path.write_text("{not json", encoding="utf-8")
    assert secrets.load_local_secrets(path) == {}
    assert "[warn]" in capsys.readouterr().out


def test_env_path_is_honored(tmp_path, monkeypatch):
    path = tmp_path / "s.json"
    path.write_text(json.dumps({"github_token": " abc ", "github_user": ""}), encoding="utf-8")
    monkeypatch.setenv("LOCAL_SECRETS_FILE", str(path))
    loaded = secrets.load_local_secrets()
    assert secrets.secret_value(loaded, "github_token") == "abc"
    assert secrets.secret_value(loaded, "github_user") is None
