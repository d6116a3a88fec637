"""Tests for data path resolution, the repo guard and log setup."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

import pytest

from heartspace.logger import setup_logger
from heartspace.paths import default_data_path, default_log_path, resolve_data_path
from heartspace.safety import assert_safe_data_path, find_git_root

# ---- paths ----


def test_profile_gets_its_own_file():
    assert default_data_path().name == "data.json"
    assert default_data_path("sam").name == "sam.json"
    assert default_data_path("sam").parent == default_data_path().parent


def test_data_arg_beats_env(monkeypatch, tmp_path):
    monkeypatch.setenv("HEARTSPACE_DATA", str(tmp_path / "env.json"))
    assert resolve_data_path(str(tmp_path / "arg.json"), None) == (tmp_path / "arg.json").resolve()
    assert resolve_data_path(None, "sam") == (tmp_path / "env.json").resolve()


def test_log_lives_next_to_journal(tmp_path):
    assert default_log_path(tmp_path / "j.json") == tmp_path / "heartspace.log"


# ---- safety ----


def test_guard_refuses_repo_paths(tmp_path, capsys):
    (tmp_path / ".git").mkdir()
    inside = tmp_path / "sub" / "journal.json"
    assert find_git_root(inside.parent) == tmp_path

    with pytest.raises(SystemExit) as exc:
        assert_safe_data_path(inside, allow_repo_data_path=False)
    assert exc.value.code == 2
    assert "Refusing" in capsys.readouterr().err

    assert_safe_data_path(inside, allow_repo_data_path=True)


def test_guard_allows_plain_dirs(tmp_path):
    assert_safe_data_path(tmp_path / "journal.json", allow_repo_data_path=False)


# ---- logger ----


def test_setup_logger_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "hs.log"
    logger = setup_logger(log_file, "INFO")
    assert logger.level == logging.INFO
    assert not logger.propagate
    [handler] = logger.handlers
    assert isinstance(handler, RotatingFileHandler)

    logging.getLogger("heartspace.moods").info("hello log")
    handler.flush()
    assert "[INFO] heartspace.moods: hello log" in log_file.read_text(encoding="utf-8")


def test_setup_logger_replaces_handlers_and_verbose_adds_stderr(tmp_path):
    setup_logger(tmp_path / "a.log")
    logger = setup_logger(tmp_path / "b.log", "WARNING", verbose=True)
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2
