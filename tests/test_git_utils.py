"""Tests for git log parsing and the git command boundary."""

import subprocess

import pytest

from digest import git_utils
from digest.errors import GitCommandError, NotARepositoryError
from digest.git_utils import parse_git_log
from digest.models import CommitRecord
from tests.helpers import make_log


# ---------------------------------------------------------------------------
# parse_git_log
# ---------------------------------------------------------------------------

def test_parses_records_in_original_order():
    raw = make_log(
        ["aaa1111", "2024-01-20T10:00:00+00:00", "Dana", "Add export", ""],
        ["bbb2222", "2024-01-19T10:00:00+00:00", "Lee", "Fix crash", "Details here"],
        ["ccc3333", "2024-01-18T10:00:00+00:00", "Sam", "Tidy docs", ""],
    )

    commits = parse_git_log(raw)

    assert [c.hash for c in commits] == ["aaa1111", "bbb2222", "ccc3333"]
    assert commits[1] == CommitRecord(
        hash="bbb2222",
        date="2024-01-19T10:00:00+00:00",
        author="Lee",
        message="Fix crash",
        body="Details here",
    )


def test_fields_are_trimmed_and_empty_body_is_absent():
    raw = make_log(["  aaa1111\n", " 2024-01-20T10:00:00Z ", " Dana ", " Add export  ", "\n\n  "])

    [commit] = parse_git_log(raw)

    assert commit.hash == "aaa1111"
    assert commit.date == "2024-01-20T10:00:00Z"
    assert commit.author == "Dana"
    assert commit.message == "Add export"
    assert commit.body is None


def test_four_field_record_without_body_field():
    [commit] = parse_git_log("h1§d1§a1§msg1", "##", "§")
    assert commit.message == "msg1"
    assert commit.body is None


def test_trailing_separator_adds_no_record():
    raw = "h1§d1§a1§m1§##h2§d2§a2§m2§##"
    assert len(parse_git_log(raw, "##", "§")) == 2
    assert len(parse_git_log(raw + "\n  \n", "##", "§")) == 2


def test_short_chunks_are_dropped_silently():
    raw = "h1§d1§a1§m1§##h2§d2##h3§d3§a3§m3§##"
    commits = parse_git_log(raw, "##", "§")
    assert [c.hash for c in commits] == ["h1", "h3"]


def test_body_containing_field_separator_is_rejoined():
    [commit] = parse_git_log("h1§d1§a1§msg1§line-one§line-two", "##", "§")
    assert commit.body == "line-one§line-two"


def test_multiline_body_is_preserved():
    raw = make_log(["h1", "2024-01-01T00:00:00Z", "Dana", "Subject", "First line\n\nSecond paragraph\n"])
    [commit] = parse_git_log(raw)
    assert commit.body == "First line\n\nSecond paragraph"


def test_empty_input_yields_no_records():
    assert parse_git_log("") == []
    assert parse_git_log("\n\n") == []


def test_merge_commit_subject_is_kept_as_ordinary_record():
    raw = make_log(["m1", "2024-01-01T00:00:00Z", "Dana", "Merge branch 'main' into feature", ""])
    [commit] = parse_git_log(raw)
    assert commit.message.startswith("Merge branch")


def test_parse_is_deterministic():
    raw = make_log(["h1", "d1", "a1", "m1", "b1"], ["h2", "d2", "a2", "m2", ""])
    assert parse_git_log(raw) == parse_git_log(raw)


# ---------------------------------------------------------------------------
# git boundary
# ---------------------------------------------------------------------------

def _completed(returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(args=["git"], returncode=returncode, stdout=stdout, stderr=stderr)


def test_get_commits_rejects_non_repository(tmp_path, monkeypatch):
    monkeypatch.setattr(
        git_utils, "_run_git",
        lambda args, cwd: _completed(128, stderr="fatal: not a git repository"),
    )

    with pytest.raises(NotARepositoryError) as excinfo:
        git_utils.get_commits(tmp_path, "7 days ago")

    assert str(tmp_path) in str(excinfo.value)
    assert "--repo" in str(excinfo.value)


def test_get_commits_rejects_missing_directory(tmp_path):
    with pytest.raises(NotARepositoryError):
        git_utils.get_commits(tmp_path / "missing", "7 days ago")


def test_get_commits_runs_git_log_with_window(tmp_path, monkeypatch):
    calls = []
    raw = make_log(["h1", "2024-01-01T00:00:00Z", "Dana", "Add thing", ""])

    def fake_run(args, cwd):
        calls.append(args)
        if args[0] == "rev-parse":
            return _completed(stdout="true\n")
        return _completed(stdout=raw)

    monkeypatch.setattr(git_utils, "_run_git", fake_run)

    commits = git_utils.get_commits(tmp_path, "2024-01-01", until="2024-01-31")

    assert [c.hash for c in commits] == ["h1"]
    log_args = calls[1]
    assert log_args[0] == "log"
    assert "--since=2024-01-01" in log_args
    assert "--until=2024-01-31" in log_args
    assert log_args[-1] == f"--pretty=format:{git_utils.LOG_FORMAT}"


def test_get_commits_blank_log_returns_empty(tmp_path, monkeypatch):
    monkeypatch.setattr(
        git_utils, "_run_git",
        lambda args, cwd: _completed(stdout="true\n" if args[0] == "rev-parse" else "  \n"),
    )
    assert git_utils.get_commits(tmp_path, "today") == []


def test_repository_without_commits_returns_empty(tmp_path, monkeypatch):
    def fake_run(args, cwd):
        if args[0] == "rev-parse":
            return _completed(stdout="true\n")
        return _completed(128, stderr="fatal: your current branch 'main' does not have any commits yet")

    monkeypatch.setattr(git_utils, "_run_git", fake_run)
    assert git_utils.get_commits(tmp_path, "today") == []


def test_git_log_failure_is_reported(tmp_path, monkeypatch):
    monkeypatch.setattr(
        git_utils, "_run_git",
        lambda args, cwd: _completed(128, stderr="fatal: bad revision"),
    )
    with pytest.raises(GitCommandError, match="bad revision"):
        git_utils.get_raw_log(tmp_path, "yesterday")


def test_missing_git_binary(tmp_path, monkeypatch):
    def no_git(*args, **kwargs):
        raise FileNotFoundError("git")

    monkeypatch.setattr(subprocess, "run", no_git)
    with pytest.raises(GitCommandError, match="not installed"):
        git_utils.is_git_repository(tmp_path)
