"""Tests for focusgraph.git_facts.git (status query wrapper)."""

import shutil
import subprocess
from pathlib import Path

import pytest

from focusgraph.git_facts.git import parse_porcelain, status_entries


def test_parse_porcelain_keeps_status_columns() -> None:
    out = " M A/x.txt\0M  B/y.txt\0?? C/new file.txt\0"
    assert parse_porcelain(out) == [
        (" M", "A/x.txt"),
        ("M ", "B/y.txt"),
        ("??", "C/new file.txt"),
    ]


def test_parse_porcelain_rename_reports_both_paths() -> None:
    out = "R  D/new.txt\0E/old.txt\0 M A/x.txt\0"
    assert parse_porcelain(out) == [
        ("R ", "D/new.txt"),
        ("R ", "E/old.txt"),
        (" M", "A/x.txt"),
    ]


def test_parse_porcelain_paths_are_verbatim() -> None:
    out = '?? A/we"ird.txt\0?? A/café.txt\0'
    assert parse_porcelain(out) == [("??", 'A/we"ird.txt'), ("??", "A/café.txt")]


def test_parse_porcelain_empty() -> None:
    assert parse_porcelain("") == []


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
def test_status_entries_in_real_repo(tmp_path: Path) -> None:
    subprocess.run(["git", "init", "-q"], cwd=tmp_path, check=True)
    (tmp_path / "A").mkdir()
    (tmp_path / "A" / "x.txt").write_text("hi", encoding="utf-8")
    assert status_entries(tmp_path) == [("??", "A/x.txt")]


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
def test_status_entries_missing_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        status_entries(tmp_path / "missing-dir-is-not-a-repo")


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
def test_status_entries_unusual_names_in_real_repo(tmp_path: Path) -> None:
    subprocess.run(["git", "init", "-q"], cwd=tmp_path, check=True)
    (tmp_path / "A").mkdir()
    (tmp_path / "A" / "we \"ird\".txt").write_text("hi", encoding="utf-8")
    assert status_entries(tmp_path) == [("??", "A/we \"ird\".txt")]
