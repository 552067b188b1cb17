"""Pytest configuration. Puts src/ on sys.path so tests run without an install."""
import sys
from pathlib import Path

import pytest

SRC = Path(__file__).resolve().parent.parent / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from focusgraph.model import ProjectRegistry  # noqa: E402


def write_manifests(root: Path, manifests: dict) -> None:
    """manifests: project id -> build.gradle text."""
    for proj, text in manifests.items():
        d = root / proj
        d.mkdir(parents=True, exist_ok=True)
        (d / "build.gradle").write_text(text, encoding="utf-8")


def dep(project_id: str) -> str:
    return f"    implementation focusedDep(':{project_id}')\n"


@pytest.fixture
def abc_registry() -> ProjectRegistry:
    return ProjectRegistry.from_ids(["A", "B", "C"])


@pytest.fixture
def abc_root(tmp_path: Path) -> Path:
    """A depends on B, B depends on C."""
    write_manifests(tmp_path, {
        "A": "dependencies {\n" + dep("B") + "}\n",
        "B": "dependencies {\n" + dep("C") + "}\n",
        "C": "apply plugin: 'java'\n",
    })
    return tmp_path
