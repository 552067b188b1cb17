# git.py
# Small, focused wrapper around the Git CLI.
# This module centralizes all Git interactions so the rest of the codebase
# never needs to call subprocess("git ...") directly.

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import List, Optional, Tuple


def _git(args: list[str], cwd: Optional[str | Path] = None, strip: bool = True) -> str:
    """
    Execute a git command and return its stdout as a string.

    This is the single low-level entry point for all Git operations in this file.

    Args:
        args: List of git arguments (e.g. ["status", "--porcelain"])
        cwd: Optional working directory in which to run the git command.
        strip: Strip surrounding whitespace. Porcelain status output must
               keep its leading columns, so callers parsing it pass False.

    Returns:
        Stdout from the git command.

    Raises:
        subprocess.CalledProcessError: git exited non-zero (e.g. not a repo)
        FileNotFoundError: git is not installed
    """
    out = subprocess.check_output(
        ["git", *args],
        cwd=cwd,
        text=True,   # return output as str instead of bytes
        encoding="utf-8",
        errors="surrogateescape",
        stderr=subprocess.DEVNULL,
    )
    if strip:
        return out.strip()
    return out.rstrip("\n")


def parse_porcelain(output: str) -> List[Tuple[str, str]]:
    """
    Split `git status --porcelain -z` (v1) output into (status-code, path) pairs.

    Entries are NUL-terminated `XY <path>` records: two status columns, a
    space, then the path, verbatim (no quoting or escapes under -z).
    Renames and copies are followed by one extra record holding the source
    path; both paths are returned with the same status code.
    """
    entries: List[Tuple[str, str]] = []
    records = iter(output.split("\0"))
    for record in records:
        if len(record) < 4:
            continue
        code, path = record[:2], record[3:]
        entries.append((code, path))
        if "R" in code or "C" in code:
            source = next(records, "")
            if source:
                entries.append((code, source))
    return entries


def status_entries(cwd: Optional[str | Path] = None) -> List[Tuple[str, str]]:
    """
    Return the working tree status as (status-code, path) pairs.

    Paths are relative to the repository root. Untracked files are included
    (status `??`); ignored files are not.
    """
    # `--porcelain -z` is stable and machine-readable, with paths left
    # unquoted; `-uall` lists files inside untracked directories instead of
    # just the directory.
    return parse_porcelain(_git(["status", "--porcelain", "-z", "-uall"], cwd=cwd, strip=False))
